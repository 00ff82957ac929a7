"""Tests for the JSON listings store."""

import json
import os
import stat

import pytest

from database import Listing, StoreError, get_listing_count, load_listings, save_listings
from tests.fakes import make_listing


def test_load_listings_missing_file_is_empty(tmp_path):
    assert load_listings(tmp_path / "listings.json") == {}


def test_save_listings_writes_pretty_json_with_camelcase_keys(tmp_path):
    path = tmp_path / "listings.json"
    listing = make_listing("sutton-7", source="Sutton", city=None)

    assert save_listings({listing.id: listing}, path) == 1

    text = path.read_text(encoding="utf-8")
    assert text.startswith("{\n    ")
    assert json.loads(text) == {
        "sutton-7": {
            "id": "sutton-7",
            "price": 300000,
            "city": None,
            "address": "12 rue King",
            "description": "Bungalow",
            "imageUrl": "https://example.com/sutton-7.jpg",
            "url": "https://example.com/sutton-7",
            "dateScanned": "2024-05-01",
            "source": "Sutton",
        }
    }
    # No temp files left behind
    assert [p.name for p in tmp_path.iterdir()] == ["listings.json"]


def test_load_listings_reads_saved_records(tmp_path):
    path = tmp_path / "listings.json"
    listings = {"duproprio-1": make_listing("duproprio-1"), "centris-2": make_listing("centris-2", source="Centris")}
    save_listings(listings, path)

    assert load_listings(path) == listings


def test_load_listings_rejects_corrupt_file(tmp_path):
    path = tmp_path / "listings.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(StoreError):
        load_listings(path)


def test_listing_is_complete_requires_mandatory_fields():
    assert make_listing("a-1").is_complete()
    assert not make_listing("a-1", price=None).is_complete()
    assert not make_listing("a-1", url="").is_complete()
    assert not make_listing("a-1", image_url=None).is_complete()
    assert not make_listing("").is_complete()


def test_from_dict_tolerates_missing_optional_keys():
    listing = Listing.from_dict({
        "id": "duproprio-9",
        "price": 1,
        "url": "https://example.com",
        "imageUrl": "https://example.com/i.jpg",
        "dateScanned": "2024-05-01",
        "source": "DuProprio",
    })

    assert listing.city is None
    assert listing.description == ""


def test_get_listing_count_groups_by_source():
    listings = {
        "a": make_listing("a", source="Centris"),
        "b": make_listing("b", source="Centris"),
        "c": make_listing("c", source="Sutton"),
    }

    assert get_listing_count(listings) == {"Centris": 2, "Sutton": 1}


def test_save_listings_keeps_existing_file_mode(tmp_path):
    path = tmp_path / "listings.json"
    path.write_text("{}", encoding="utf-8")
    os.chmod(path, 0o640)

    save_listings({"a-1": make_listing("a-1")}, path)

    assert stat.S_IMODE(path.stat().st_mode) == 0o640


def test_save_listings_new_file_follows_umask(tmp_path):
    path = tmp_path / "listings.json"
    previous = os.umask(0o022)
    try:
        save_listings({"a-1": make_listing("a-1")}, path)
    finally:
        os.umask(previous)

    assert stat.S_IMODE(path.stat().st_mode) == 0o644
