"""Tests for derived address, pickup and map fields."""

from datetime import datetime, timedelta, timezone

import pytest

from app.domain.bookings.location import (
    LocationState,
    build_address_map_url,
    build_coordinate_map_url,
    format_coordinate,
    resolve_location_fields,
)

NOW = datetime(2024, 5, 1, 10, 30)


def intake_fields(**overrides) -> dict:
    fields = {
        "address": "12 Main St",
        "location": "",
        "pickupOption": "",
        "pickupAddress": "",
        "pickupPhone": "",
        "phone": "9876543210",
        "mapUrl": "",
        "lat": None,
        "lng": None,
    }
    fields.update(overrides)
    return fields


@pytest.fixture
def stored() -> LocationState:
    return LocationState(
        address="12 Main St",
        location="12 Main St",
        phone="9876543210",
        pickup_option="Pickup & Drop",
        pickup_address="12 Main St",
        pickup_phone="9876543210",
    )


@pytest.mark.parametrize("value, expected", [(77.0, "77"), (12.9, "12.9"), (-0.5, "-0.5"), (0, "0")])
def test_format_coordinate(value, expected):
    assert format_coordinate(value) == expected


def test_coordinate_map_url():
    assert build_coordinate_map_url(12.9, 77.6) == "https://www.google.com/maps?q=12.9,77.6"
    assert build_coordinate_map_url(12.0, 77.0) == "https://www.google.com/maps?q=12,77"
    assert build_coordinate_map_url(None, 77.6) == ""
    assert build_coordinate_map_url(float("nan"), 77.6) == ""


def test_address_map_url_encodes_like_uri_component():
    assert (
        build_address_map_url("12 Main St")
        == "https://www.google.com/maps/search/?api=1&query=12%20Main%20St"
    )
    assert build_address_map_url("Flat 4, MG Road & Co (rear)").endswith(
        "query=Flat%204%2C%20MG%20Road%20%26%20Co%20(rear)"
    )
    assert build_address_map_url("   ") == ""
    assert build_address_map_url(None) == ""


def test_address_map_url_is_idempotent():
    assert build_address_map_url("12 Main St") == build_address_map_url(" 12 Main St ")


class TestCreate:
    def test_pickup_and_drop_copies_address_and_phone(self):
        updates = resolve_location_fields(None, intake_fields())

        assert updates["address"] == "12 Main St"
        assert updates["location"] == "12 Main St"
        assert updates["pickup_option"] == "Pickup & Drop"
        assert updates["pickup_address"] == "12 Main St"
        assert updates["pickup_phone"] == "9876543210"
        assert updates["pickup_map_url"] == build_address_map_url("12 Main St")
        assert "live_lat" not in updates

    def test_location_backfills_address(self):
        updates = resolve_location_fields(None, intake_fields(address="", location="Lake Rd"))
        assert updates["address"] == "Lake Rd"
        assert updates["location"] == "Lake Rd"

    def test_other_pickup_option_leaves_pickup_fields_empty(self):
        updates = resolve_location_fields(None, intake_fields(pickupOption="Walk-in"))

        assert updates["pickup_option"] == "Walk-in"
        assert updates["pickup_address"] == ""
        assert updates["pickup_phone"] == ""
        assert updates["pickup_map_url"] == ""

    def test_pickup_option_compared_case_insensitively(self):
        updates = resolve_location_fields(None, intake_fields(pickupOption="pickup & drop"))
        assert updates["pickup_address"] == "12 Main St"

    def test_explicit_pickup_overrides_win(self):
        updates = resolve_location_fields(
            None, intake_fields(pickupAddress="Gate 2", pickupPhone="5550001111")
        )
        assert updates["pickup_address"] == "Gate 2"
        assert updates["pickup_phone"] == "5550001111"
        assert updates["pickup_map_url"] == build_address_map_url("Gate 2")

    def test_coordinates_set_live_location_and_map_url(self):
        updates = resolve_location_fields(None, intake_fields(lat=12.9, lng=77.6), now=NOW)

        assert updates["live_lat"] == 12.9
        assert updates["live_lng"] == 77.6
        assert updates["live_updated_at"] == NOW
        assert updates["map_url"] == "https://www.google.com/maps?q=12.9,77.6"

    def test_live_timestamp_defaults_to_naive_utc(self):
        updates = resolve_location_fields(None, intake_fields(lat=12.9, lng=77.6))

        stamp = updates["live_updated_at"]
        assert stamp.tzinfo is None
        assert abs(datetime.now(timezone.utc).replace(tzinfo=None) - stamp) < timedelta(minutes=1)

    def test_explicit_map_url_is_kept_with_coordinates(self):
        updates = resolve_location_fields(
            None, intake_fields(lat=12.9, lng=77.6, mapUrl="https://maps.example/pin")
        )
        assert "map_url" not in updates
        assert updates["live_lat"] == 12.9

    def test_single_coordinate_is_ignored(self):
        updates = resolve_location_fields(None, intake_fields(lat=12.9))
        assert "live_lat" not in updates
        assert "map_url" not in updates


class TestUpdate:
    def test_unrelated_patch_changes_nothing(self, stored):
        assert resolve_location_fields(stored, {}) == {}

    def test_new_address_rederives_pickup(self, stored):
        updates = resolve_location_fields(stored, {"address": "99 Lake Rd"})

        assert updates["address"] == "99 Lake Rd"
        assert updates["location"] == "99 Lake Rd"
        assert updates["pickup_address"] == "99 Lake Rd"
        assert updates["pickup_map_url"] == build_address_map_url("99 Lake Rd")
        assert updates["pickup_phone"] == "9876543210"

    def test_switching_away_from_pickup_clears_pickup_fields(self, stored):
        updates = resolve_location_fields(stored, {"pickupOption": "Walk-in"})

        assert updates["pickup_option"] == "Walk-in"
        assert updates["pickup_address"] == ""
        assert updates["pickup_map_url"] == ""
        assert updates["pickup_phone"] == ""
        assert "address" not in updates

    def test_phone_change_follows_into_pickup_phone(self, stored):
        updates = resolve_location_fields(stored, {"phone": "5550001111"})

        assert updates["pickup_phone"] == "5550001111"
        assert "pickup_address" not in updates

    def test_explicit_empty_pickup_address_clears_it(self, stored):
        updates = resolve_location_fields(stored, {"pickupAddress": ""})

        assert updates["pickup_address"] == ""
        assert updates["pickup_map_url"] == ""

    def test_explicit_pickup_address_survives_address_change(self, stored):
        updates = resolve_location_fields(
            stored, {"address": "99 Lake Rd", "pickupAddress": "Gate 2"}
        )
        assert updates["pickup_address"] == "Gate 2"

    def test_both_address_views_can_differ_when_both_written(self, stored):
        updates = resolve_location_fields(stored, {"address": "99 Lake Rd", "location": "Lake Rd"})
        assert updates["address"] == "99 Lake Rd"
        assert updates["location"] == "Lake Rd"
