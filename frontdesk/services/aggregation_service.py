"""Pure aggregations over room and booking snapshots.

Every function here is deterministic for its inputs and performs no I/O.
Bookings whose dates or charges could not be parsed are left out of the
counts and sums they would otherwise contribute to.
"""

from __future__ import annotations

import math
from collections import Counter
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from frontdesk.domain.models import (
    BookingSnapshot,
    BookingStatus,
    DailySummary,
    RoomSnapshot,
    RoomStatus,
    TaskCounts,
    UpcomingCheckout,
    to_local,
)


DEFAULT_CHECKOUT_WINDOW = timedelta(hours=2)
DEFAULT_CHECKOUT_LIMIT = 3


def _calendar_day(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return to_local(value).date()
    return value


def _falls_on(instant: Optional[datetime], day: date) -> bool:
    return instant is not None and to_local(instant).date() == day


def format_remaining_time(remaining: timedelta) -> str:
    """Render whole hours and minutes, e.g. 125 minutes -> ``2hr 5min``."""
    total_minutes = int(remaining // timedelta(minutes=1))
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours}hr {minutes}min"


def compute_upcoming_checkouts(
    bookings: Iterable[BookingSnapshot],
    now: datetime,
    window: timedelta = DEFAULT_CHECKOUT_WINDOW,
    limit: int = DEFAULT_CHECKOUT_LIMIT,
) -> list[UpcomingCheckout]:
    """Checked-in guests due out within ``window``, most urgent first."""
    reference = to_local(now)
    candidates: list[tuple[timedelta, BookingSnapshot]] = []
    for booking in bookings:
        if booking.status is not BookingStatus.CHECKED_IN:
            continue
        if booking.scheduled_check_out is None:
            continue
        # Aware subtraction measures elapsed time across offset changes.
        remaining = to_local(booking.scheduled_check_out) - reference
        if timedelta(0) < remaining <= window:
            candidates.append((remaining, booking))

    candidates.sort(key=lambda item: item[0])
    return [
        UpcomingCheckout(
            booking_code=booking.booking_code,
            guest_name=booking.guest_name,
            room_number=booking.room_number,
            remaining=remaining,
            remaining_time=format_remaining_time(remaining),
        )
        for remaining, booking in candidates[: max(limit, 0)]
    ]


def compute_occupancy_rate(checked_in: int, total_rooms: int) -> int:
    """Whole-percent occupancy, rounding halves up; no rooms means 0%."""
    if total_rooms <= 0:
        return 0
    return int(math.floor(100 * checked_in / total_rooms + 0.5))


def _count_status(bookings: Iterable[BookingSnapshot], status: BookingStatus) -> int:
    return sum(1 for booking in bookings if booking.status is status)


def count_pending_payments(bookings: Iterable[BookingSnapshot]) -> int:
    """Approximate unpaid bookings as those still ``RESERVED``.

    Reservation status is the only signal the bookings feed carries, so this
    also counts guests who have paid in advance but not yet arrived.
    """
    return _count_status(bookings, BookingStatus.RESERVED)


def _same_day_check_ins(bookings: Sequence[BookingSnapshot], day: date) -> int:
    return sum(
        1
        for booking in bookings
        if booking.status is BookingStatus.RESERVED and _falls_on(booking.scheduled_check_in, day)
    )


def _same_day_check_outs(bookings: Sequence[BookingSnapshot], day: date) -> int:
    return sum(
        1
        for booking in bookings
        if booking.status is BookingStatus.CHECKED_IN
        and _falls_on(booking.scheduled_check_out, day)
    )


def compute_daily_summary(
    bookings: Iterable[BookingSnapshot],
    rooms: Iterable[RoomSnapshot],
    today: date | datetime,
) -> DailySummary:
    booking_list = list(bookings)
    day = _calendar_day(today)

    revenue = sum(
        (
            booking.total_charges
            for booking in booking_list
            if booking.total_charges is not None and _falls_on(booking.scheduled_check_in, day)
        ),
        Decimal("0"),
    )
    checked_in = _count_status(booking_list, BookingStatus.CHECKED_IN)

    return DailySummary(
        check_ins=_same_day_check_ins(booking_list, day),
        check_outs=_same_day_check_outs(booking_list, day),
        revenue=revenue,
        occupancy_rate=compute_occupancy_rate(checked_in, len(list(rooms))),
        pending_payments=count_pending_payments(booking_list),
    )


def compute_task_counts(
    bookings: Iterable[BookingSnapshot],
    today: date | datetime,
    room_inspections: Optional[int] = None,
) -> TaskCounts:
    """Receptionist tallies.

    ``room_inspections`` has no source in the bookings feed; it is passed
    through as supplied and stays ``None`` (unknown) when not provided.
    """
    booking_list = list(bookings)
    day = _calendar_day(today)
    return TaskCounts(
        check_ins=_same_day_check_ins(booking_list, day),
        check_outs=_same_day_check_outs(booking_list, day),
        reservations=_count_status(booking_list, BookingStatus.RESERVED),
        room_inspections=room_inspections,
    )


def compute_room_status_counts(rooms: Iterable[RoomSnapshot]) -> dict[str, int]:
    """Rooms per status for the status legend; unknown statuses are skipped."""
    counts = Counter(room.status for room in rooms if room.status is not None)
    return {status.value: counts.get(status, 0) for status in RoomStatus}
