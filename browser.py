"""
HouseFinder Browser Session
One Playwright browser and page shared by every scraper in a run.
"""

import logging

from playwright.sync_api import sync_playwright
from playwright_stealth import Stealth

from config import HEADLESS, USER_AGENT

logger = logging.getLogger(__name__)


class BrowserSession:
    """Owns the Playwright instance, browser, context and the single page scrapers share."""

    def __init__(self, headless: bool = HEADLESS):
        self.headless = headless
        self.playwright = None
        self.browser = None
        self.context = None
        self.page = None
        self._initialized = False

    def start(self):
        """Launch the browser and open the shared page. Returns the page."""
        if self._initialized:
            return self.page

        logger.info(f"Launching browser (headless={self.headless})...")

        self.playwright = sync_playwright().start()

        self.browser = self.playwright.chromium.launch(
            headless=self.headless,
            args=[
                "--disable-blink-features=AutomationControlled",
                "--disable-dev-shm-usage",
                "--no-sandbox",
            ],
        )

        self.context = self.browser.new_context(
            viewport={"width": 1920, "height": 1080},
            user_agent=USER_AGENT,
            extra_http_headers={"DNT": "1"},
        )

        self.page = self.context.new_page()

        # Apply stealth to avoid bot detection on the listing sites
        stealth = Stealth()
        stealth.apply_stealth_sync(self.page)

        self._initialized = True
        logger.info("Browser initialized")
        return self.page

    def close(self):
        """Close browser and clean up. Safe to call more than once."""
        try:
            if self.context:
                self.context.close()
                self.context = None
            if self.browser:
                self.browser.close()
                self.browser = None
            if self.playwright:
                self.playwright.stop()
                self.playwright = None
            self.page = None
            self._initialized = False
            logger.info("Browser closed")
        except Exception as e:
            logger.error(f"Error closing browser: {e}")
