"""
HouseFinder Base Scraper
Abstract base class for listing site scrapers and the shared pagination loop.
"""

import logging
from abc import ABC, abstractmethod
from datetime import date
from typing import Dict, Optional

from playwright.sync_api import TimeoutError as PlaywrightTimeout

from database import Listing
from config import DEFAULT_NAVIGATION_TIMEOUT_MS
from utils import format_date

logger = logging.getLogger(__name__)


class BaseScraper(ABC):
    """Abstract base class for listing site scrapers."""

    # Safety cap on pages visited; None means follow the site until its last page
    max_pages: Optional[int] = None

    def __init__(self, source: str, url: str, timeout_ms: int = DEFAULT_NAVIGATION_TIMEOUT_MS):
        """
        Initialize the scraper.

        Args:
            source: Display name stored on each listing (e.g., 'DuProprio')
            url: Search results URL to start scanning from
            timeout_ms: Navigation timeout in milliseconds
        """
        self.source = source
        self.url = url
        self.timeout_ms = timeout_ms

    def start(self, page):
        """Open the search results URL and wait for the network to go idle."""
        page.goto(self.url, wait_until="networkidle", timeout=self.timeout_ms)

    @abstractmethod
    def extract_current_page(self, html: str, today: str, base_url: str) -> Dict[str, Listing]:
        """
        Extract the listings visible in a page snapshot.

        Args:
            html: Current page HTML
            today: Scan date as YYYY-MM-DD
            base_url: URL of the page, used to resolve relative links

        Returns:
            Dict of namespaced listing id -> Listing (complete records only)
        """
        pass

    @abstractmethod
    def is_last_page(self, html: str) -> bool:
        """True when the page snapshot shows the final page of results."""
        pass

    @abstractmethod
    def go_to_next_page(self, page):
        """Advance to the next page of results and wait for it to settle."""
        pass

    def scan(self, page, today: Optional[date] = None, run=None) -> Dict[str, Listing]:
        """
        Scan every page of search results for this site.

        Errors never escape: a timeout or extraction failure ends the scan for
        this site only, and whatever was collected so far is returned.

        Args:
            page: Playwright page shared across scrapers
            today: Scan date (defaults to today)
            run: Optional run context whose `status` is updated as the scan progresses

        Returns:
            Dict of listing id -> Listing
        """
        scan_date = format_date(today)
        listings: Dict[str, Listing] = {}
        page_number = 1

        if not self.url:
            logger.info(f"No search URL configured for {self.source}, skipping")
            return listings

        self._set_status(run, f"Opening {self.source}'s website")
        logger.info(f"Opening {self.source}'s website...")

        try:
            self.start(page)

            logger.info("Starting to scan for listings...")
            while True:
                logger.info(f"Scanning page {page_number}...")

                self._set_status(run, f"Looking for {self.source} listing items")
                html = page.content()
                page_listings = self.extract_current_page(html, scan_date, page.url)
                listings.update(page_listings)
                logger.debug(f"{self.source} page {page_number}: {len(page_listings)} listings")

                if self.is_last_page(html):
                    break

                if self.max_pages is not None and page_number >= self.max_pages:
                    logger.warning(
                        f"{self.source}: stopped after {page_number} pages, "
                        f"next page control is still present"
                    )
                    break

                page_number += 1
                self._set_status(run, f"Going to next page on {self.source}")
                self.go_to_next_page(page)

            self._set_status(run, f"Finished scanning {self.source}")
            logger.info(f"Finished scanning {self.source}: total of {len(listings)} listings found.")

        except PlaywrightTimeout as e:
            logger.error(f"Timeout while scanning {self.source} (page {page_number}): {e}")
        except Exception as e:
            logger.error(f"An error occurred while scanning {self.source}: {e}", exc_info=True)

        return listings

    @staticmethod
    def _set_status(run, status: str):
        if run is not None:
            run.status = status
