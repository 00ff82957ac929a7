"""
HouseFinder DuProprio Scraper
Playwright-based scraper for DuProprio search results.
"""

import re
import logging
from typing import Dict, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from .base import BaseScraper
from database import Listing
from utils import attr_of, parse_price, text_of

logger = logging.getLogger(__name__)

SOURCE = "DuProprio"
ID_PREFIX = "duproprio-"

ITEM_SELECTOR = ".search-results-listings-list__item:not(.is-sold)"
LAST_PAGE_SELECTOR = ".pagination__list .pagination__item.pagination__item--active:last-child"
NEXT_PAGE_SELECTOR = ".pagination__list .pagination__item.pagination__item--active + .pagination__item"

LISTING_ID_PATTERN = re.compile(r"listing-([0-9]+)")

_DESCRIPTION = ".search-results-listings-list__item-description"


def parse_listing(node, today: str, base_url: str = "") -> Optional[Listing]:
    """Build a Listing from one result item, or None if it is not a usable listing."""
    element_id = node.get("id") or ""
    match = LISTING_ID_PATTERN.fullmatch(element_id)
    if not match:
        return None

    listing_id = f"{ID_PREFIX}{match.group(1)}"

    price = parse_price(text_of(node.select_one(f"{_DESCRIPTION}__price")))
    image_url = attr_of(node.select_one(f'img[ref="{element_id}"]'), "src")
    href = attr_of(node.select_one('a[property="significantLink"]'), "href")

    if price is None or not image_url or not href:
        logger.debug(f"Skipping incomplete DuProprio listing {listing_id}")
        return None

    return Listing(
        id=listing_id,
        price=price,
        city=text_of(node.select_one(f"{_DESCRIPTION}__city-wrap")),
        address=text_of(node.select_one(f"{_DESCRIPTION}__address")),
        description=text_of(node.select_one(f"{_DESCRIPTION}__type-and-intro")) or "",
        image_url=urljoin(base_url, image_url),
        url=urljoin(base_url, href),
        date_scanned=today,
        source=SOURCE,
    )


def parse_listings(html: str, today: str, base_url: str = "") -> Dict[str, Listing]:
    """Parse every unsold listing on a DuProprio results page."""
    soup = BeautifulSoup(html, "html.parser")
    listings = {}

    for node in soup.select(ITEM_SELECTOR):
        listing = parse_listing(node, today, base_url)
        if listing:
            listings[listing.id] = listing

    return listings


def is_last_page(html: str) -> bool:
    """Last page when the active pager entry is the final one (or there is no entry after it)."""
    soup = BeautifulSoup(html, "html.parser")
    if soup.select_one(LAST_PAGE_SELECTOR):
        return True
    return soup.select_one(NEXT_PAGE_SELECTOR) is None


class DuProprioScraper(BaseScraper):
    """Scraper for DuProprio. Pages are real navigations driven by the pager list."""

    def __init__(self, url: str = "", **kwargs):
        super().__init__(SOURCE, url, **kwargs)

    def extract_current_page(self, html: str, today: str, base_url: str) -> Dict[str, Listing]:
        return parse_listings(html, today, base_url)

    def is_last_page(self, html: str) -> bool:
        return is_last_page(html)

    def go_to_next_page(self, page):
        with page.expect_navigation(wait_until="networkidle", timeout=self.timeout_ms):
            page.click(NEXT_PAGE_SELECTOR, timeout=self.timeout_ms)
