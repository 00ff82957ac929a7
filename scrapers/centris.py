"""
HouseFinder Centris Scraper
Playwright-based scraper for Centris search results, filtered by price range.
"""

import re
import logging
from typing import Dict, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from .base import BaseScraper
from database import Listing
from config import DEFAULT_CENTRIS_MAX_PAGES, CENTRIS_PAGE_DELAY_SECONDS
from utils import attr_of, delay, parse_int, text_of

logger = logging.getLogger(__name__)

SOURCE = "Centris"
ID_PREFIX = "centris-"

ITEM_SELECTOR = '[data-id="templateThumbnailItem"][itemtype="http://schema.org/Product"]'
NEXT_PAGE_SELECTOR = ".pager-bottom .pager .next:not(.inactive) a"

MLS_NUMBER_PATTERN = re.compile(r"[0-9]+")
THUMBNAIL_SIZE_PATTERN = re.compile(r"&w=\d+&h=\d+&")


def _in_price_range(price: int, min_price: Optional[int], max_price: Optional[int]) -> bool:
    if min_price is not None and price < min_price:
        return False
    if max_price is not None and price > max_price:
        return False
    return True


def parse_listing(node, today: str, base_url: str = "") -> Optional[Listing]:
    """Build a Listing from one result thumbnail, or None if it is incomplete."""
    link = node.select_one("a.a-more-detail")
    mls_number = (attr_of(link, "data-mlsnumber") or "").strip()
    if not MLS_NUMBER_PATTERN.fullmatch(mls_number):
        return None

    listing_id = f"{ID_PREFIX}{mls_number}"

    price = parse_int(attr_of(node.select_one('[itemprop="price"]'), "content"))
    image_url = attr_of(node.select_one('img[itemprop="image"]'), "src")
    href = attr_of(link, "href")

    if price is None or not image_url or not href:
        logger.debug(f"Skipping incomplete Centris listing {listing_id}")
        return None

    # Ask for a larger thumbnail than the one shown in the results grid
    image_url = THUMBNAIL_SIZE_PATTERN.sub("&w=640&h=480&", image_url, count=1)

    return Listing(
        id=listing_id,
        price=price,
        city=text_of(node.select_one(".address > div:nth-child(2)")),
        address=text_of(node.select_one(".address > div:nth-child(1)")),
        description="",
        image_url=urljoin(base_url, image_url),
        url=urljoin(base_url, href),
        date_scanned=today,
        source=SOURCE,
    )


def parse_listings(
    html: str,
    today: str,
    base_url: str = "",
    min_price: Optional[int] = None,
    max_price: Optional[int] = None,
) -> Dict[str, Listing]:
    """Parse every listing on a Centris results page whose price is within [min_price, max_price]."""
    soup = BeautifulSoup(html, "html.parser")
    listings = {}

    for node in soup.select(ITEM_SELECTOR):
        listing = parse_listing(node, today, base_url)
        if not listing:
            continue
        if not _in_price_range(listing.price, min_price, max_price):
            logger.debug(f"Filtered out {listing.id}: price {listing.price} outside range")
            continue
        listings[listing.id] = listing

    return listings


def is_last_page(html: str) -> bool:
    """Last page when there is no active "next" link in the bottom pager."""
    soup = BeautifulSoup(html, "html.parser")
    return soup.select_one(NEXT_PAGE_SELECTOR) is None


class CentrisScraper(BaseScraper):
    """
    Scraper for Centris.

    Centris swaps results in place without a page load, so there is no
    navigation to wait for: each click on "next" is followed by a fixed delay.
    """

    def __init__(
        self,
        url: str = "",
        min_price: Optional[int] = None,
        max_price: Optional[int] = None,
        page_delay: float = CENTRIS_PAGE_DELAY_SECONDS,
        max_pages: Optional[int] = DEFAULT_CENTRIS_MAX_PAGES,
        **kwargs,
    ):
        super().__init__(SOURCE, url, **kwargs)
        self.min_price = min_price
        self.max_price = max_price
        self.page_delay = page_delay
        self.max_pages = max_pages

    def extract_current_page(self, html: str, today: str, base_url: str) -> Dict[str, Listing]:
        return parse_listings(html, today, base_url, self.min_price, self.max_price)

    def is_last_page(self, html: str) -> bool:
        return is_last_page(html)

    def go_to_next_page(self, page):
        page.click(NEXT_PAGE_SELECTOR, timeout=self.timeout_ms)
        delay(self.page_delay)
