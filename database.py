"""
HouseFinder Database Module
JSON file storage for tracking seen listings.
"""

import os
import json
import stat
import tempfile
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from config import LISTINGS_FILE


def _file_mode(path: Path) -> int:
    """Mode to give the listings file: keep the current one, else what the umask allows."""
    if path.exists():
        return stat.S_IMODE(path.stat().st_mode)
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


class StoreError(Exception):
    """Raised when the persisted listings file cannot be read or written."""


@dataclass
class Listing:
    """Represents a real-estate listing."""
    id: str
    price: int
    url: str
    image_url: str
    date_scanned: str
    source: str
    city: Optional[str] = None
    address: Optional[str] = None
    description: str = ""

    def is_complete(self) -> bool:
        """True when every mandatory field (id, price, url, image) is present."""
        return bool(self.id) and isinstance(self.price, int) and bool(self.url) and bool(self.image_url)

    def to_dict(self) -> dict:
        """Serialize using the on-disk key names."""
        return {
            "id": self.id,
            "price": self.price,
            "city": self.city,
            "address": self.address,
            "description": self.description,
            "imageUrl": self.image_url,
            "url": self.url,
            "dateScanned": self.date_scanned,
            "source": self.source,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Listing":
        return cls(
            id=data["id"],
            price=data.get("price"),
            url=data.get("url"),
            image_url=data.get("imageUrl"),
            date_scanned=data.get("dateScanned"),
            source=data.get("source"),
            city=data.get("city"),
            address=data.get("address"),
            description=data.get("description") or "",
        )


def load_listings(path: Path = LISTINGS_FILE) -> Dict[str, Listing]:
    """
    Load previously seen listings.

    Args:
        path: JSON file mapping listing id to listing record

    Returns:
        Dict of listing id -> Listing (empty if the file does not exist yet)
    """
    path = Path(path)
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, ValueError) as e:
        raise StoreError(f"Could not read {path}: {e}") from e

    if not isinstance(raw, dict):
        raise StoreError(f"{path} does not contain a JSON object")

    return {listing_id: Listing.from_dict({"id": listing_id, **record}) for listing_id, record in raw.items()}


def save_listings(listings: Dict[str, Listing], path: Path = LISTINGS_FILE) -> int:
    """
    Overwrite the listings file atomically.

    The file is pretty-printed so changes between runs are easy to diff.

    Args:
        listings: Dict of listing id -> Listing
        path: Destination JSON file

    Returns:
        Number of listings written
    """
    path = Path(path)
    payload = {listing_id: listing.to_dict() for listing_id, listing in listings.items()}

    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=4, ensure_ascii=False)
        # mkstemp creates the file as 0600
        os.chmod(tmp_path, _file_mode(path))
        os.replace(tmp_path, path)
    except OSError as e:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise StoreError(f"Could not write {path}: {e}") from e

    return len(payload)


def get_listing_count(listings: Dict[str, Listing]) -> dict:
    """Get count of listings by source."""
    return dict(Counter(listing.source for listing in listings.values()))
