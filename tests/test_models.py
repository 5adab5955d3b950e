"""Tests for tolerant parsing of backend payloads into snapshots."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from frontdesk.domain.models import (
    BookingSnapshot,
    BookingStatus,
    RoomSnapshot,
    RoomStatus,
    parse_amount,
    parse_instant,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("CHECKED_IN", BookingStatus.CHECKED_IN),
        ("checked-in", BookingStatus.CHECKED_IN),
        ("Checked In", BookingStatus.CHECKED_IN),
        ("reserved", BookingStatus.RESERVED),
        ("CHECKED_OUT", BookingStatus.CHECKED_OUT),
        ("canceled", BookingStatus.CANCELED),
        ("CANCELLED", BookingStatus.CANCELED),
        ("pending", None),
        (None, None),
        (3, None),
    ],
)
def test_booking_status_normalization(raw, expected) -> None:
    assert BookingStatus.parse(raw) is expected


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("available", RoomStatus.AVAILABLE),
        ("OCCUPIED", RoomStatus.OCCUPIED),
        (" Cleaning ", RoomStatus.CLEANING),
        ("reserved", RoomStatus.RESERVED),
        ("maintenance", None),
    ],
)
def test_room_status_normalization(raw, expected) -> None:
    assert RoomStatus.parse(raw) is expected


def test_parse_amount_rejects_anomalies() -> None:
    assert parse_amount(50) == Decimal("50")
    assert parse_amount("12.50") == Decimal("12.50")
    assert parse_amount(0.1) == Decimal("0.1")
    assert parse_amount("abc") is None
    assert parse_amount("") is None
    assert parse_amount(-5) is None
    assert parse_amount(float("nan")) is None
    assert parse_amount(True) is None
    assert parse_amount(None) is None
    assert parse_amount({"amount": 5}) is None


def test_parse_instant_handles_naive_aware_and_invalid_values() -> None:
    naive = parse_instant("2026-03-14T15:30:00")
    assert naive is not None and naive.utcoffset() is not None
    assert naive == datetime(2026, 3, 14, 15, 30).astimezone()
    assert naive.replace(tzinfo=None) == datetime(2026, 3, 14, 15, 30)

    aware = parse_instant("2026-03-14T15:30:00+00:00")
    assert aware is not None and aware.utcoffset() is not None
    assert aware == datetime(2026, 3, 14, 15, 30, tzinfo=timezone.utc)
    assert parse_instant("not a date") is None
    assert parse_instant("") is None
    assert parse_instant(None) is None
    assert parse_instant(1700000000) is None


def test_booking_from_backend_payload() -> None:
    payload = {
        "id": 12,
        "room": {"id": 3, "roomNumber": "204", "status": "OCCUPIED"},
        "guestName": "Ada Lovelace",
        "email": "ada@example.com",
        "phoneNumber": "+44 20 0000",
        "scheduledCheckIn": "2026-03-14T14:00:00",
        "scheduledCheckOut": "2026-03-15T10:00:00",
        "actualCheckIn": "2026-03-14T14:05:00",
        "actualCheckOut": None,
        "bookingCode": "BK-204",
        "status": "CHECKED_IN",
        "totalCharges": 180.5,
    }
    snapshot = BookingSnapshot.from_payload(payload)
    assert snapshot.booking_id == "12"
    assert snapshot.room_id == "3"
    assert snapshot.room_number == "204"
    assert snapshot.guest_name == "Ada Lovelace"
    assert snapshot.scheduled_check_out == datetime(2026, 3, 15, 10, 0).astimezone()
    assert snapshot.actual_check_in == datetime(2026, 3, 14, 14, 5).astimezone()
    assert snapshot.actual_check_out is None
    assert snapshot.status is BookingStatus.CHECKED_IN
    assert snapshot.total_charges == Decimal("180.5")
    assert snapshot.booking_code == "BK-204"


def test_booking_from_legacy_payload_shape() -> None:
    snapshot = BookingSnapshot.from_payload(
        {
            "id": "b-1",
            "roomId": "r-9",
            "checkInDate": "2026-03-14T09:00:00",
            "checkOutDate": "2026-03-14T18:00:00",
            "status": "checked-in",
            "totalPrice": "75",
            "contact": "555-0100",
        }
    )
    assert snapshot.room_id == "r-9"
    assert snapshot.scheduled_check_in == datetime(2026, 3, 14, 9, 0).astimezone()
    assert snapshot.scheduled_check_out == datetime(2026, 3, 14, 18, 0).astimezone()
    assert snapshot.status is BookingStatus.CHECKED_IN
    assert snapshot.total_charges == Decimal("75")
    assert snapshot.phone_number == "555-0100"


def test_booking_with_anomalous_fields_does_not_raise() -> None:
    snapshot = BookingSnapshot.from_payload(
        {
            "room": "not-an-object",
            "scheduledCheckIn": "yesterday-ish",
            "scheduledCheckOut": 12,
            "status": None,
            "totalCharges": "free",
        }
    )
    assert snapshot.room_number is None
    assert snapshot.scheduled_check_in is None
    assert snapshot.scheduled_check_out is None
    assert snapshot.status is None
    assert snapshot.total_charges is None


def test_room_from_payload() -> None:
    room = RoomSnapshot.from_payload(
        {
            "id": 5,
            "roomNumber": "305",
            "status": "cleaning",
            "floor": 3,
            "specialFeatures": "sea view, balcony",
            "lastCleanedAt": "2026-03-14T08:00:00",
        }
    )
    assert room.room_id == "5"
    assert room.room_number == "305"
    assert room.status is RoomStatus.CLEANING
    assert room.floor == 3
    assert room.special_features == ("sea view", "balcony")
    assert room.last_cleaned_at == datetime(2026, 3, 14, 8, 0).astimezone()


def test_room_without_optional_fields() -> None:
    room = RoomSnapshot.from_payload({"id": 1, "roomNumber": "101", "status": "AVAILABLE"})
    assert room.floor is None
    assert room.special_features == ()
    assert room.last_cleaned_at is None
