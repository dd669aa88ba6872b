"""Tests for the listing catalogue and its public tools."""

from __future__ import annotations

import json

import pytest

from camper_mcp.data.listings import Listing, ListingStore
from camper_mcp.data.store import SqliteRowStore
from camper_mcp.errors import NotFoundError, ValidationError
from camper_mcp.tools.catalogue import (
    get_listing_impl,
    list_listings_impl,
    list_service_types_impl,
)


@pytest.fixture()
def listings(rows: SqliteRowStore) -> ListingStore:
    return ListingStore(rows)


class TestCreate:
    def test_title_only_listing(self, listings: ListingStore):
        listing = listings.create({"title": "Hymer B 678"})
        assert isinstance(listing, Listing)
        assert listing.status == "available"
        assert listing.price is None
        assert listing.features is None
        assert listing.images == ()
        assert listing.primary_image is None

    def test_missing_title_rejected(self, listings: ListingStore):
        with pytest.raises(ValidationError) as info:
            listings.create({"price": 10})
        assert info.value.field == "title"

    def test_features_from_comma_string(self, listings: ListingStore):
        listing = listings.create({"title": "X", "features": "Airco, Zonnepaneel"})
        assert listing.features == ("Airco", "Zonnepaneel")
        assert listings.get(listing.id).features == ("Airco", "Zonnepaneel")

    def test_empty_features_stored_as_absent(self, listings: ListingStore):
        listing = listings.create({"title": "X", "features": ""})
        assert listing.features is None

    def test_blank_numeric_is_unknown_not_zero(self, listings: ListingStore):
        listing = listings.create({"title": "X", "price": "", "mileage": "  "})
        assert listing.price is None
        assert listing.mileage is None

    def test_non_string_images_and_missing_features(self, listings: ListingStore):
        listing = listings.create({"title": "X", "images": [5, None], "features": ["Airco", None]})
        assert listing.images == ("5",)
        assert listing.features == ("Airco",)
        assert listings.get(listing.id).images == ("5",)

    def test_values_normalised(self, listings: ListingStore):
        listing = listings.create(
            {
                "title": "Knaus Van TI",
                "price": "54.900",
                "length_m": "6,99",
                "fuel_type": "Diesel",
                "images": ["front.jpg", "back.jpg"],
            }
        )
        assert listing.price == 54.9
        assert listing.length_m == 6.99
        assert listing.fuel_type == "diesel"
        assert listing.primary_image == "front.jpg"

    @pytest.mark.parametrize(
        "fields",
        [
            {"mileage": -1},
            {"length_m": 0},
            {"sleeps": 0},
            {"year": 1850},
            {"status": "scrapped"},
            {"colour": "white"},
            {"mileage": "9" * 400},
            {"mileage": 10**30},
            {"price": "9" * 400},
            {"year": 2**63},
        ],
    )
    def test_invalid_fields_rejected(self, listings: ListingStore, fields):
        with pytest.raises(ValidationError):
            listings.create({"title": "X", **fields})


class TestUpdateDelete:
    def test_partial_update_keeps_other_fields(self, listings: ListingStore):
        listing = listings.create({"title": "X", "price": 1000, "sleeps": 4})
        updated = listings.update(listing.id, {"price": 900})
        assert updated.price == 900
        assert updated.sleeps == 4
        assert updated.title == "X"

    def test_update_with_oversized_number_rejected(self, listings: ListingStore):
        listing = listings.create({"title": "X", "mileage": 50000})
        with pytest.raises(ValidationError) as info:
            listings.update(listing.id, {"mileage": 10**30})
        assert info.value.field == "mileage"
        assert listings.get(listing.id).mileage == 50000

    def test_update_unknown_id(self, listings: ListingStore):
        with pytest.raises(NotFoundError):
            listings.update("nope", {"price": 1})

    def test_set_status(self, listings: ListingStore):
        listing = listings.create({"title": "X"})
        assert listings.set_status(listing.id, "Reserved").status == "reserved"

    def test_delete(self, listings: ListingStore):
        listing = listings.create({"title": "X"})
        listings.delete(listing.id)
        assert listings.get(listing.id) is None

    def test_delete_unknown_id(self, listings: ListingStore):
        with pytest.raises(NotFoundError):
            listings.delete("nope")


class TestList:
    def test_newest_first(self, listings: ListingStore):
        older = listings.create({"title": "Older"})
        newer = listings.create({"title": "Newer"})
        assert [item.id for item in listings.list()] == [newer.id, older.id]

    def test_status_filter(self, listings: ListingStore):
        listings.create({"title": "A", "status": "sold"})
        listings.create({"title": "B"})
        assert [item.title for item in listings.list(status="sold")] == ["A"]

    def test_limit_keeps_newest(self, listings: ListingStore):
        created = [listings.create({"title": f"L{i}"}) for i in range(5)]
        listings.create({"title": "Sold", "status": "sold"})
        newest = [item.id for item in listings.list(status="available", limit=3)]
        assert newest == [listing.id for listing in reversed(created)][:3]


class TestCatalogueTools:
    def test_list_listings_json(self, listings: ListingStore):
        listings.create({"title": "Hymer"})
        payload = json.loads(list_listings_impl())
        assert payload["count"] == 1
        assert payload["listings"][0]["title"] == "Hymer"

    def test_list_listings_bad_status(self):
        assert "Status must be one of" in list_listings_impl(status="gone")

    def test_list_listings_limit(self, listings: ListingStore):
        for i in range(4):
            listings.create({"title": f"L{i}"})
        payload = json.loads(list_listings_impl(status="available", limit=3))
        assert payload["count"] == 3
        assert payload["listings"][0]["title"] == "L3"
        assert json.loads(list_listings_impl(limit=0))["count"] == 4

    def test_list_listings_negative_limit(self):
        assert "Limit must be zero or a positive number" in list_listings_impl(limit=-1)

    def test_get_listing_found_and_missing(self, listings: ListingStore):
        listing = listings.create({"title": "Hymer"})
        assert json.loads(get_listing_impl(listing_id=listing.id))["title"] == "Hymer"
        assert "not found" in get_listing_impl(listing_id="nope")

    def test_service_types(self):
        result = list_service_types_impl()
        assert "Zonnepanelen & energiesystemen" in result
        assert "Overig" in result
