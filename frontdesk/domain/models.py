"""Domain models for session claims, hotel snapshots and derived dashboard views."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Mapping, Optional


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    RECEPTIONIST = "RECEPTIONIST"
    USER = "USER"
    CLEANER = "CLEANER"

    @classmethod
    def parse(cls, raw: Any) -> Optional["UserRole"]:
        if not isinstance(raw, str):
            return None
        try:
            return cls(raw.strip().upper())
        except ValueError:
            return None


class RoomStatus(str, Enum):
    AVAILABLE = "AVAILABLE"
    OCCUPIED = "OCCUPIED"
    CLEANING = "CLEANING"
    RESERVED = "RESERVED"

    @classmethod
    def parse(cls, raw: Any) -> Optional["RoomStatus"]:
        if not isinstance(raw, str):
            return None
        try:
            return cls(raw.strip().upper())
        except ValueError:
            return None


class BookingStatus(str, Enum):
    RESERVED = "RESERVED"
    CHECKED_IN = "CHECKED_IN"
    CHECKED_OUT = "CHECKED_OUT"
    CANCELED = "CANCELED"

    @classmethod
    def parse(cls, raw: Any) -> Optional["BookingStatus"]:
        """Normalize producer spellings such as ``checked-in`` or ``CHECKED_IN``."""
        if not isinstance(raw, str):
            return None
        normalized = raw.strip().upper().replace("-", "_").replace(" ", "_")
        if normalized == "CANCELLED":
            return cls.CANCELED
        try:
            return cls(normalized)
        except ValueError:
            return None


def to_local(value: datetime) -> datetime:
    """Attach the local UTC offset; naive values are read as local wall-clock time.

    Aware instants subtract as elapsed time, so a DST change between two
    instants does not shift the difference.
    """
    return value.astimezone()


def parse_instant(raw: Any) -> Optional[datetime]:
    """Parse an ISO-8601 instant; anything unparseable yields ``None``."""
    if isinstance(raw, datetime):
        value = raw
    elif isinstance(raw, date):
        value = datetime.combine(raw, datetime.min.time())
    elif isinstance(raw, str) and raw.strip():
        try:
            value = datetime.fromisoformat(raw.strip())
        except ValueError:
            return None
    else:
        return None
    try:
        return to_local(value)
    except (OverflowError, OSError, ValueError):
        # Outside the range the platform clock can localize.
        return None


def parse_amount(raw: Any) -> Optional[Decimal]:
    """Parse a non-negative monetary amount; invalid amounts yield ``None``."""
    if raw is None or isinstance(raw, bool):
        return None
    if not isinstance(raw, (int, float, str, Decimal)):
        return None
    try:
        amount = Decimal(str(raw).strip())
    except InvalidOperation:
        return None
    if not amount.is_finite() or amount < 0:
        return None
    return amount


def _identifier(raw: Any) -> Optional[str]:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, str):
        return raw
    if isinstance(raw, int):
        return str(raw)
    return None


def _text(raw: Any) -> Optional[str]:
    return raw if isinstance(raw, str) else None


def _timestamp(raw: Any) -> Optional[float | int]:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return None
    if isinstance(raw, float) and not math.isfinite(raw):
        return None
    return raw


@dataclass(frozen=True)
class SessionClaims:
    """Claims carried by the session credential. ``expiry`` is epoch seconds."""

    user_id: Optional[str]
    subject: Optional[str]
    role: Optional[UserRole]
    username: Optional[str]
    issued_at: Optional[float | int]
    expiry: Optional[float | int]

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "SessionClaims":
        return cls(
            user_id=_identifier(payload.get("id")),
            subject=_identifier(payload.get("sub")),
            role=UserRole.parse(payload.get("role")),
            username=_text(payload.get("username")),
            issued_at=_timestamp(payload.get("iat")),
            expiry=_timestamp(payload.get("exp")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "subject": self.subject,
            "role": self.role.value if self.role is not None else None,
            "username": self.username,
            "issued_at": self.issued_at,
            "expiry": self.expiry,
        }


@dataclass(frozen=True)
class RoomSnapshot:
    room_id: Optional[str]
    room_number: Optional[str]
    status: Optional[RoomStatus]
    floor: Optional[int] = None
    special_features: tuple[str, ...] = ()
    last_cleaned_at: Optional[datetime] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "RoomSnapshot":
        floor = payload.get("floor")
        features = payload.get("specialFeatures")
        if isinstance(features, str):
            tags = tuple(tag.strip() for tag in features.split(",") if tag.strip())
        elif isinstance(features, (list, tuple)):
            tags = tuple(str(tag).strip() for tag in features if str(tag).strip())
        else:
            tags = ()
        return cls(
            room_id=_identifier(payload.get("id")),
            room_number=_identifier(payload.get("roomNumber")),
            status=RoomStatus.parse(payload.get("status")),
            floor=floor if isinstance(floor, int) and not isinstance(floor, bool) else None,
            special_features=tags,
            last_cleaned_at=parse_instant(payload.get("lastCleanedAt")),
        )


@dataclass(frozen=True)
class BookingSnapshot:
    """Point-in-time booking row; unparseable fields are ``None``."""

    booking_id: Optional[str]
    room_id: Optional[str]
    room_number: Optional[str]
    guest_name: Optional[str]
    scheduled_check_in: Optional[datetime]
    scheduled_check_out: Optional[datetime]
    status: Optional[BookingStatus]
    total_charges: Optional[Decimal]
    booking_code: Optional[str]
    email: Optional[str] = None
    phone_number: Optional[str] = None
    actual_check_in: Optional[datetime] = None
    actual_check_out: Optional[datetime] = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "BookingSnapshot":
        room = payload.get("room")
        if not isinstance(room, Mapping):
            room = {}
        # Older producers send checkInDate/checkOutDate/totalPrice/roomId.
        return cls(
            booking_id=_identifier(payload.get("id")),
            room_id=_identifier(payload.get("roomId", room.get("id"))),
            room_number=_identifier(room.get("roomNumber", payload.get("roomNumber"))),
            guest_name=_text(payload.get("guestName")),
            scheduled_check_in=parse_instant(
                payload.get("scheduledCheckIn", payload.get("checkInDate"))
            ),
            scheduled_check_out=parse_instant(
                payload.get("scheduledCheckOut", payload.get("checkOutDate"))
            ),
            status=BookingStatus.parse(payload.get("status")),
            total_charges=parse_amount(payload.get("totalCharges", payload.get("totalPrice"))),
            booking_code=_text(payload.get("bookingCode")),
            email=_text(payload.get("email")),
            phone_number=_text(payload.get("phoneNumber", payload.get("contact"))),
            actual_check_in=parse_instant(payload.get("actualCheckIn")),
            actual_check_out=parse_instant(payload.get("actualCheckOut")),
        )


@dataclass(frozen=True)
class UpcomingCheckout:
    booking_code: Optional[str]
    guest_name: Optional[str]
    room_number: Optional[str]
    remaining: timedelta
    remaining_time: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "booking_code": self.booking_code,
            "guest_name": self.guest_name,
            "room_number": self.room_number,
            "remaining_seconds": self.remaining.total_seconds(),
            "remaining_time": self.remaining_time,
        }


@dataclass(frozen=True)
class DailySummary:
    check_ins: int
    check_outs: int
    revenue: Decimal
    occupancy_rate: int
    pending_payments: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "check_ins": self.check_ins,
            "check_outs": self.check_outs,
            "revenue": float(self.revenue),
            "occupancy_rate": self.occupancy_rate,
            "pending_payments": self.pending_payments,
        }


@dataclass(frozen=True)
class TaskCounts:
    """Receptionist task tallies. ``room_inspections`` is ``None`` when unknown."""

    check_ins: int
    check_outs: int
    reservations: int
    room_inspections: Optional[int]

    def to_dict(self) -> dict[str, Any]:
        return {
            "check_ins": self.check_ins,
            "check_outs": self.check_outs,
            "reservations": self.reservations,
            "room_inspections": self.room_inspections,
        }


@dataclass(frozen=True)
class AdminDashboardView:
    generated_at: datetime
    daily_summary: DailySummary
    upcoming_checkouts: list[UpcomingCheckout]
    room_status_counts: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "generated_at": self.generated_at,
            "daily_summary": self.daily_summary.to_dict(),
            "upcoming_checkouts": [item.to_dict() for item in self.upcoming_checkouts],
            "room_status_counts": dict(self.room_status_counts),
        }


@dataclass(frozen=True)
class ReceptionistDashboardView:
    generated_at: datetime
    task_counts: TaskCounts
    upcoming_checkouts: list[UpcomingCheckout]

    def to_dict(self) -> dict[str, Any]:
        return {
            "generated_at": self.generated_at,
            "task_counts": self.task_counts.to_dict(),
            "upcoming_checkouts": [item.to_dict() for item in self.upcoming_checkouts],
        }
