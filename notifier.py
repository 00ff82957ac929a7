"""
HouseFinder Notifier Module
Discord webhook integration for sending new listing alerts.
"""

import time
import logging
import requests
from typing import List, Optional
from datetime import datetime, timezone

from config import DISCORD_WEBHOOK_URL
from database import Listing

logger = logging.getLogger(__name__)

# Discord rate limit: 30 requests per minute
RATE_LIMIT_DELAY = 2.1  # seconds between requests to stay under limit
MAX_EMBEDS_PER_MESSAGE = 10


def _get_source_color(source: str) -> int:
    """Get Discord embed color based on listing source."""
    colors = {
        "DuProprio": 0xE2231A,
        "Centris": 0x0B6E4F,
        "Sutton": 0x003DA5,
    }
    return colors.get(source, 0x5865F2)  # Default Discord blurple


def _is_valid_url(url: Optional[str]) -> bool:
    """Check if URL is valid for Discord embeds."""
    if not url:
        return False
    return url.startswith("http://") or url.startswith("https://")


def _format_price(price: Optional[int]) -> str:
    if price is None:
        return "Not listed"
    return f"${price:,}"


def _create_embed(listing: Listing) -> dict:
    """Create a Discord embed for a listing."""
    title = (listing.address or listing.description or listing.id)[:256]

    embed = {
        "title": title,
        "color": _get_source_color(listing.source),
        "fields": [
            {"name": "Price", "value": _format_price(listing.price), "inline": True},
            {"name": "Source", "value": listing.source, "inline": True},
        ],
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

    if listing.city:
        embed["fields"].append({"name": "City", "value": listing.city[:1024], "inline": True})

    # Only add URL if valid (Discord rejects invalid URLs)
    if _is_valid_url(listing.url):
        embed["url"] = listing.url

    if listing.description:
        embed["description"] = listing.description[:2000]

    if _is_valid_url(listing.image_url):
        embed["thumbnail"] = {"url": listing.image_url}

    return embed


def _post(webhook_url: str, payload: dict) -> bool:
    """Post one message, retrying once after a rate limit response."""
    response = requests.post(webhook_url, json=payload, timeout=10)

    if response.status_code == 429:
        retry_after = response.json().get("retry_after", 5)
        logger.warning(f"Rate limited, waiting {retry_after}s")
        time.sleep(retry_after)
        response = requests.post(webhook_url, json=payload, timeout=10)

    if response.status_code == 204:
        return True

    logger.error(f"Discord error {response.status_code}: {response.text}")
    return False


def send_new_listings(listings: List[Listing], count: int, webhook_url: str = None) -> int:
    """
    Announce newly found listings.

    Args:
        listings: New listings to announce
        count: Number of new listings
        webhook_url: Discord webhook (defaults to DISCORD_WEBHOOK_URL)

    Returns:
        Number of listings sent successfully (0 when no webhook is configured)
    """
    if webhook_url is None:
        webhook_url = DISCORD_WEBHOOK_URL

    if not listings:
        return 0

    if not webhook_url:
        logger.info(f"No Discord webhook configured, skipping notification for {count} new listings")
        return 0

    sent = 0
    header = {"content": f"🏠 {count} new listing{'s' if count != 1 else ''} found"}
    try:
        _post(webhook_url, header)
    except requests.RequestException as e:
        logger.error(f"Failed to send notification header: {e}")

    # Send in batches of MAX_EMBEDS_PER_MESSAGE
    for i in range(0, len(listings), MAX_EMBEDS_PER_MESSAGE):
        batch = listings[i:i + MAX_EMBEDS_PER_MESSAGE]
        payload = {"embeds": [_create_embed(listing) for listing in batch]}

        try:
            if _post(webhook_url, payload):
                sent += len(batch)
                logger.info(f"Sent batch of {len(batch)} listings")
        except requests.RequestException as e:
            logger.error(f"Failed to send listing batch: {e}")

        # Rate limit delay between batches
        if i + MAX_EMBEDS_PER_MESSAGE < len(listings):
            time.sleep(RATE_LIMIT_DELAY)

    logger.info(f"Notification sent for {sent}/{count} new listings")
    return sent
