"""
HouseFinder Reconciler
Splits a scan into new listings and the refreshed set of seen listings.
"""

from typing import Dict, Mapping, Tuple, TypeVar

T = TypeVar("T")


def reconcile(scanned: Mapping[str, T], persisted: Mapping[str, T]) -> Tuple[Dict[str, T], Dict[str, T]]:
    """
    Compare scanned listings against previously seen ones.

    A listing is new when its id is absent from the persisted mapping; content
    changes on a known id do not make it new. Every scanned listing replaces
    the persisted copy, so the stored record is always the latest one seen.
    Neither input is modified.

    Args:
        scanned: Listing id -> listing from the current run
        persisted: Listing id -> listing loaded from storage

    Returns:
        Tuple of (new listings, updated persisted mapping)
    """
    new = {listing_id: listing for listing_id, listing in scanned.items() if listing_id not in persisted}

    updated = dict(persisted)
    updated.update(scanned)

    return new, updated
