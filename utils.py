"""
HouseFinder Helpers
Small text, date and timing helpers shared by the scrapers.
"""

import re
import time
from datetime import date as date_type
from typing import Optional


def format_date(date: Optional[date_type] = None) -> str:
    """Format a date as YYYY-MM-DD (defaults to today)."""
    if date is None:
        date = date_type.today()
    return date.strftime("%Y-%m-%d")


def text_of(node) -> Optional[str]:
    """Stripped text content of a BeautifulSoup node, or None if the node is missing."""
    if node is None:
        return None
    return node.get_text().strip()


def attr_of(node, name: str) -> Optional[str]:
    """Attribute value of a node, or None if the node or attribute is missing."""
    if node is None:
        return None
    value = node.get(name)
    if isinstance(value, list):
        value = " ".join(value)
    return value


def parse_price(text: Optional[str]) -> Optional[int]:
    """Extract an integer price from text like '349 900 $'."""
    if not text:
        return None
    digits = re.sub(r"[^0-9]", "", text)
    if not digits:
        return None
    return int(digits)


def parse_int(value: Optional[str]) -> Optional[int]:
    """Leading integer of an attribute value ('349900.00' -> 349900), or None."""
    if value is None:
        return None
    match = re.match(r"\s*(\d+)", value)
    if not match:
        return None
    return int(match.group(1))


def delay(seconds: float):
    """Block for a fixed settle delay."""
    if seconds > 0:
        time.sleep(seconds)
