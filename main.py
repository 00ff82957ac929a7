"""
HouseFinder - Real Estate Listing Monitor
Main entry point: scans every listing site once, reports new listings.
"""

import sys
import json
import logging
import argparse
import traceback
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Callable, Dict, List, Optional

from config import LOG_FILE, LISTINGS_FILE, Settings, load_settings
from browser import BrowserSession
from database import Listing, load_listings, save_listings, get_listing_count
from notifier import send_new_listings
from reconciler import reconcile
from scrapers import BaseScraper, DuProprioScraper, CentrisScraper, SuttonScraper

logger = logging.getLogger("HouseFinder")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class RunContext:
    """Mutable state of one run. `status` names the last high-level step, reported on a crash."""
    status: str = "Just started"


def configure_logging(verbosity: int = 0, log_file: Path = LOG_FILE):
    """
    Log to file always; log to the console only when asked for.

    Args:
        verbosity: 0 = silent console, 1 = progress (-v), 2+ = debug (-vv)
        log_file: Path of the log file
    """
    handlers = [logging.FileHandler(log_file)]
    level = logging.INFO

    if verbosity > 0:
        handlers.append(logging.StreamHandler(sys.stderr))
    if verbosity > 1:
        level = logging.DEBUG

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)


def default_scrapers(settings: Settings) -> List[BaseScraper]:
    """Scrapers in scan order."""
    timeout_ms = settings.navigation_timeout_ms
    return [
        DuProprioScraper(settings.duproprio_url, timeout_ms=timeout_ms),
        CentrisScraper(
            settings.centris_url,
            min_price=settings.centris_min_price,
            max_price=settings.centris_max_price,
            max_pages=settings.centris_max_pages,
            timeout_ms=timeout_ms,
        ),
        SuttonScraper(settings.sutton_url, timeout_ms=timeout_ms),
    ]


def scan_all_sources(page, scrapers: List[BaseScraper], run: RunContext, today: Optional[date] = None) -> Dict[str, Listing]:
    """
    Run each scraper in turn on the shared page and merge their results.

    Ids are prefixed by site, so merging never overwrites another site's listing.
    Incomplete records are dropped here as well as in the scrapers.
    """
    scanned: Dict[str, Listing] = {}

    for scraper in scrapers:
        listings = scraper.scan(page, today=today, run=run)
        logger.info(f"{scraper.source}: {len(listings)} listings")

        for listing_id, listing in listings.items():
            if not listing.is_complete():
                logger.debug(f"Dropping incomplete listing {listing_id}")
                continue
            scanned[listing_id] = listing

    return scanned


def run_scan(
    run: RunContext,
    session: BrowserSession,
    scrapers: List[BaseScraper],
    store_path: Path = LISTINGS_FILE,
    notify: Callable[[List[Listing], int], int] = send_new_listings,
    today: Optional[date] = None,
) -> str:
    """
    Scan all sites, then notify about and store new listings.

    The listings file and the notifier are only touched when at least one new
    listing was found. Any exception raised here is fatal for the run.

    Returns:
        Summary message for the success report
    """
    run.status = "Launching browser"
    page = session.start()

    run.status = "Loading saved listings"
    saved_listings = load_listings(store_path)
    logger.info(f"Loaded {len(saved_listings)} saved listings")

    scanned = scan_all_sources(page, scrapers, run, today)

    run.status = "Comparing with saved listings"
    new_listings, updated_listings = reconcile(scanned, saved_listings)

    message = f"Finished scanning all websites: {len(scanned)} listings found, {len(new_listings)} are new."
    logger.info(message)

    if new_listings:
        run.status = "Sending notification"
        notify(list(new_listings.values()), len(new_listings))

        run.status = "Saving listings"
        stored = save_listings(updated_listings, store_path)
        logger.info(f"Stored {stored} listings | by source: {get_listing_count(updated_listings)}")

    run.status = "Finished"
    return message


def end_with_error(message: str, status: str) -> int:
    """Print the failure report and return the exit code."""
    print(json.dumps({"success": False, "message": message, "status": status}, indent=4))
    return 1


def end_with_success(message: str) -> int:
    """Print the success report and return the exit code."""
    print(json.dumps({"success": True, "message": message}, indent=4))
    return 0


def main(argv=None) -> int:
    """Entry point with argument parsing."""
    parser = argparse.ArgumentParser(description="HouseFinder - Real Estate Listing Monitor")
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Show progress on the console (-vv for extra detail)",
    )

    args = parser.parse_args(argv)

    run = RunContext()
    session = None

    try:
        run.status = "Setting up logging"
        configure_logging(args.verbose)

        run.status = "Loading configuration"
        settings = load_settings()

        session = BrowserSession()
        message = run_scan(run, session, default_scrapers(settings))
    except Exception as e:
        logger.error(f"Fatal error while '{run.status}': {e}", exc_info=True)
        if session is not None:
            session.close()
        return end_with_error(traceback.format_exc(), run.status)

    session.close()
    return end_with_success(message)


if __name__ == "__main__":
    sys.exit(main())
