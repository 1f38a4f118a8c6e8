"""Tests for BookingRepository persistence behaviour."""

import pytest

from app.domain.bookings.repository import BookingRepository
from app.shared.exceptions import ConflictError

BOOKING_COLUMNS = {
    "brand": "Apple",
    "model": "iPhone 13",
    "service": "Screen Replacement",
    "name": "Asha Rao",
    "phone": "9876543210",
    "email": "asha@example.com",
    "address": "12 Main St",
}


def test_tracking_id_collision_is_retried(db_session, mocker):
    mocker.patch(
        "app.domain.bookings.repository.generate_tracking_id",
        side_effect=["BMR-1-AAAAAA", "BMR-1-AAAAAA", "BMR-1-BBBBBB"],
    )

    first = BookingRepository.create(db_session, **BOOKING_COLUMNS)
    second = BookingRepository.create(db_session, **BOOKING_COLUMNS)

    assert first.tracking_id == "BMR-1-AAAAAA"
    assert second.tracking_id == "BMR-1-BBBBBB"
    assert len(BookingRepository.list(db_session)) == 2


def test_exhausted_tracking_id_attempts_raise_conflict(db_session, mocker):
    mocker.patch(
        "app.domain.bookings.repository.generate_tracking_id", return_value="BMR-1-AAAAAA"
    )
    BookingRepository.create(db_session, **BOOKING_COLUMNS)

    with pytest.raises(ConflictError):
        BookingRepository.create(db_session, max_attempts=3, **BOOKING_COLUMNS)

    assert len(BookingRepository.list(db_session)) == 1


def test_find_by_tracking_requires_matching_phone(db_session):
    booking = BookingRepository.create(db_session, **BOOKING_COLUMNS)

    assert BookingRepository.find_by_tracking(db_session, booking.tracking_id, "9876543210") is booking
    assert BookingRepository.find_by_tracking(db_session, booking.tracking_id, "1234") is None
    assert BookingRepository.find_by_tracking(db_session, str(booking.id), "9876543210") is booking

