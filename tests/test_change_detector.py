"""Tests for the customer notification decision."""

from dataclasses import replace

import pytest

from app.domain.bookings.change_detector import BookingSnapshot, detect_changes, should_notify


@pytest.fixture
def before() -> BookingSnapshot:
    return BookingSnapshot(
        status="Pending",
        admin_note="",
        service="Screen Replacement",
        technician_name="",
        technician_phone="",
        map_url="",
        pickup_address="12 Main St",
        pickup_phone="9876543210",
    )


def test_identical_snapshots_do_not_notify(before):
    assert detect_changes(before, before, {"name", "email", "status"}) == []
    assert not should_notify(before, before, {"status"})


def test_status_change_is_case_insensitive(before):
    assert detect_changes(before, replace(before, status="pending"), {"status"}) == []
    assert detect_changes(before, replace(before, status="Completed"), {"status"}) == ["status"]


def test_admin_note_counts_only_when_sent(before):
    after = replace(before, admin_note="Parts ordered")
    assert detect_changes(before, after, {"adminNote"}) == ["adminNote"]
    assert detect_changes(before, after, set()) == []


def test_service_change_notifies(before):
    after = replace(before, service="Battery Replacement")
    assert detect_changes(before, after, {"service"}) == ["service"]


def test_technician_changes_count_only_when_technician_fields_sent(before):
    after = replace(before, technician_name="Ravi", technician_phone="5550001111")

    assert detect_changes(before, after, {"technicianId"}) == ["technicianName", "technicianPhone"]
    assert detect_changes(before, after, {"name"}) == []


def test_map_url_appearing_changing_or_clearing_notifies(before):
    appeared = replace(before, map_url="https://www.google.com/maps?q=12.9,77.6")
    moved = replace(appeared, map_url="https://www.google.com/maps?q=13,77.6")

    assert detect_changes(before, appeared, {"lat", "lng"}) == ["mapUrl"]
    assert detect_changes(appeared, moved, {"lat", "lng"}) == ["mapUrl"]
    assert detect_changes(appeared, before, {"mapUrl"}) == ["mapUrl"]


def test_pickup_changes_notify(before):
    after = replace(before, pickup_address="99 Lake Rd", pickup_phone="")
    assert detect_changes(before, after, {"address"}) == ["pickupAddress", "pickupPhone"]


def test_snapshot_from_booking_prefers_technician_name():
    class StoredBooking:
        status = " Assigned "
        admin_note = None
        service = "Screen Replacement"
        technician_name = ""
        technician = "Ravi"
        technician_phone = "5550001111"
        map_url = None
        pickup_address = "12 Main St"
        pickup_phone = "9876543210"

    snapshot = BookingSnapshot.from_booking(StoredBooking())

    assert snapshot.status == "Assigned"
    assert snapshot.admin_note == ""
    assert snapshot.technician_name == "Ravi"
    assert snapshot.map_url == ""
