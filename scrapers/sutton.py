"""
HouseFinder Sutton Scraper
Playwright-based scraper for Sutton search results.
"""

import re
import logging
from typing import Dict, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from .base import BaseScraper
from database import Listing
from config import SUTTON_SETTLE_DELAY_SECONDS
from utils import attr_of, delay, parse_int, text_of

logger = logging.getLogger(__name__)

SOURCE = "Sutton"
ID_PREFIX = "sutton-"

ITEM_SELECTOR = "li[data-inscription-id]"
SOLD_SELECTOR = ".vendu"
NEXT_PAGE_SELECTOR = ".divControleListe .pagesuivante"
HIDDEN_NEXT_PAGE_SELECTOR = ".divControleListe .pagesuivante.hidden"

NATIVE_ID_PATTERN = re.compile(r"[0-9A-Za-z]+")


def parse_listing(node, today: str, base_url: str = "") -> Optional[Listing]:
    """Build a Listing from one result item, or None if it is sold or incomplete."""
    if node.select_one(SOLD_SELECTOR):
        return None

    native_id = (node.get("data-inscription-id") or "").strip()
    if not NATIVE_ID_PATTERN.fullmatch(native_id):
        return None

    listing_id = f"{ID_PREFIX}{native_id}"

    link = node.select_one(".divInscriptionInfo h2 a")
    href = attr_of(link, "href")
    image_url = attr_of(node.select_one(".divInscriptionPhoto.compact img"), "src")
    price = parse_int(node.get("data-prix"))

    if price is None or not image_url or not href:
        logger.debug(f"Skipping incomplete Sutton listing {listing_id}")
        return None

    # Link text reads "<property type> - <more details>"
    description = link.get_text().split(" - ")[0].strip()

    return Listing(
        id=listing_id,
        price=price,
        city=text_of(node.select_one(".divInscriptionInfo h2 + p > span:first-child")),
        address=text_of(node.select_one(".divInfoCompact address")),
        description=description,
        image_url=urljoin(base_url, image_url),
        url=urljoin(base_url, href),
        date_scanned=today,
        source=SOURCE,
    )


def parse_listings(html: str, today: str, base_url: str = "") -> Dict[str, Listing]:
    """Parse every unsold listing on a Sutton results page."""
    soup = BeautifulSoup(html, "html.parser")
    listings = {}

    for node in soup.select(ITEM_SELECTOR):
        listing = parse_listing(node, today, base_url)
        if listing:
            listings[listing.id] = listing

    return listings


def is_last_page(html: str) -> bool:
    """Last page when the "next page" control is hidden or missing."""
    soup = BeautifulSoup(html, "html.parser")
    # The pager is rendered above and below the results; either copy being hidden is enough
    if soup.select_one(HIDDEN_NEXT_PAGE_SELECTOR):
        return True
    return soup.select_one(NEXT_PAGE_SELECTOR) is None


class SuttonScraper(BaseScraper):
    """Scraper for Sutton. Its pager re-renders after network idle, so a settle delay follows each click."""

    def __init__(self, url: str = "", settle_delay: float = SUTTON_SETTLE_DELAY_SECONDS, **kwargs):
        super().__init__(SOURCE, url, **kwargs)
        self.settle_delay = settle_delay

    def extract_current_page(self, html: str, today: str, base_url: str) -> Dict[str, Listing]:
        return parse_listings(html, today, base_url)

    def is_last_page(self, html: str) -> bool:
        return is_last_page(html)

    def go_to_next_page(self, page):
        with page.expect_navigation(wait_until="networkidle", timeout=self.timeout_ms):
            page.click(NEXT_PAGE_SELECTOR, timeout=self.timeout_ms)
        delay(self.settle_delay)
