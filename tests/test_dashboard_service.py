from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from frontdesk.domain.models import BookingSnapshot, RoomSnapshot
from frontdesk.repository.hotel_api_client import HotelApiError
from frontdesk.services.dashboard_service import (
    DashboardNotReadyError,
    DashboardRefreshService,
    PollingTask,
)
from frontdesk.utils.config import get_settings


NOW = datetime(2026, 3, 14, 10, 0, 0)


class FakeHotelClient:
    def __init__(self, rooms: list[dict], bookings: list[dict]) -> None:
        self.rooms = rooms
        self.bookings = bookings
        self.error: Exception | None = None

    def list_rooms(self) -> list[RoomSnapshot]:
        if self.error is not None:
            raise self.error
        return [RoomSnapshot.from_payload(row) for row in self.rooms]

    def list_bookings(self) -> list[BookingSnapshot]:
        if self.error is not None:
            raise self.error
        return [BookingSnapshot.from_payload(row) for row in self.bookings]


def _settings(**overrides):
    base = replace(
        get_settings(),
        upcoming_checkout_window_minutes=120,
        upcoming_checkout_limit=3,
        room_inspections_estimate=None,
    )
    return replace(base, **overrides)


def _sample_client() -> FakeHotelClient:
    rooms = [
        {"id": 1, "roomNumber": "101", "status": "OCCUPIED"},
        {"id": 2, "roomNumber": "102", "status": "available"},
        {"id": 3, "roomNumber": "103", "status": "CLEANING"},
        {"id": 4, "roomNumber": "104", "status": "reserved"},
    ]
    bookings = [
        {
            "bookingCode": "BK-1",
            "guestName": "Leaving Soon",
            "room": {"id": 1, "roomNumber": "101"},
            "status": "CHECKED_IN",
            "scheduledCheckIn": (NOW - timedelta(days=1)).isoformat(),
            "scheduledCheckOut": (NOW + timedelta(minutes=30)).isoformat(),
            "totalCharges": 200,
        },
        {
            "bookingCode": "BK-2",
            "guestName": "Arriving Today",
            "room": {"id": 4, "roomNumber": "104"},
            "status": "RESERVED",
            "scheduledCheckIn": (NOW + timedelta(hours=4)).isoformat(),
            "scheduledCheckOut": (NOW + timedelta(days=2)).isoformat(),
            "totalCharges": "150.25",
        },
    ]
    return FakeHotelClient(rooms, bookings)


def test_run_cycle_publishes_both_views() -> None:
    service = DashboardRefreshService(client=_sample_client(), settings=_settings(), clock=lambda: NOW)
    service.run_cycle()

    admin = service.get_admin_view()
    assert admin.generated_at == NOW
    assert admin.daily_summary.check_ins == 1
    assert admin.daily_summary.check_outs == 1
    assert admin.daily_summary.revenue == Decimal("150.25")
    assert admin.daily_summary.occupancy_rate == 25
    assert admin.daily_summary.pending_payments == 1
    assert [item.booking_code for item in admin.upcoming_checkouts] == ["BK-1"]
    assert admin.upcoming_checkouts[0].remaining_time == "0hr 30min"
    assert admin.room_status_counts == {"AVAILABLE": 1, "OCCUPIED": 1, "CLEANING": 1, "RESERVED": 1}

    receptionist = service.get_receptionist_view()
    assert receptionist.task_counts.check_ins == 1
    assert receptionist.task_counts.reservations == 1
    assert receptionist.task_counts.room_inspections is None
    assert service.status().completed_cycles == 1


def test_room_inspection_estimate_is_injected_from_settings() -> None:
    service = DashboardRefreshService(
        client=_sample_client(),
        settings=_settings(room_inspections_estimate=4),
        clock=lambda: NOW,
    )
    _, receptionist = service.run_cycle()
    assert receptionist.task_counts.room_inspections == 4


def test_views_unavailable_before_first_cycle() -> None:
    service = DashboardRefreshService(client=_sample_client(), settings=_settings(), clock=lambda: NOW)
    with pytest.raises(DashboardNotReadyError):
        service.get_admin_view()
    with pytest.raises(DashboardNotReadyError):
        service.get_receptionist_view()


def test_failed_cycle_keeps_previous_views() -> None:
    client = _sample_client()
    service = DashboardRefreshService(client=client, settings=_settings(), clock=lambda: NOW)
    service.run_cycle()
    previous = service.get_admin_view()

    client.error = HotelApiError("Error fetching /rooms: boom")
    with pytest.raises(HotelApiError):
        service.run_cycle()
    assert service.refresh() is False

    assert service.get_admin_view() is previous
    status = service.status()
    assert status.completed_cycles == 1
    assert status.last_error == "Error fetching /rooms: boom"

    client.error = None
    assert service.refresh() is True
    assert service.status().last_error is None


def test_later_cycle_overwrites_earlier_views() -> None:
    client = _sample_client()
    times = iter([NOW, NOW + timedelta(minutes=1)])
    service = DashboardRefreshService(client=client, settings=_settings(), clock=lambda: next(times))
    service.run_cycle()
    client.bookings = []
    service.run_cycle()

    admin = service.get_admin_view()
    assert admin.generated_at == NOW + timedelta(minutes=1)
    assert admin.upcoming_checkouts == []
    assert admin.daily_summary.revenue == 0


def test_upcoming_limit_and_window_follow_settings() -> None:
    client = _sample_client()
    client.bookings = [
        {
            "bookingCode": f"BK-{minutes}",
            "status": "CHECKED_IN",
            "scheduledCheckOut": (NOW + timedelta(minutes=minutes)).isoformat(),
        }
        for minutes in (10, 20, 30, 50)
    ]
    service = DashboardRefreshService(
        client=client,
        settings=_settings(upcoming_checkout_window_minutes=40, upcoming_checkout_limit=2),
        clock=lambda: NOW,
    )
    admin, _ = service.run_cycle()
    assert [item.booking_code for item in admin.upcoming_checkouts] == ["BK-10", "BK-20"]


# --- polling task ---

def test_polling_task_runs_immediately_and_cancels() -> None:
    calls: list[int] = []
    first_call = threading.Event()

    def callback() -> None:
        calls.append(1)
        first_call.set()

    task = PollingTask(callback=callback, interval_seconds=3600)
    task.start()
    assert first_call.wait(timeout=5)
    assert task.is_running

    task.cancel(timeout=5)
    assert not task.is_running
    assert len(calls) == 1


def test_polling_task_repeats_on_interval() -> None:
    enough_calls = threading.Event()
    calls: list[int] = []

    def callback() -> None:
        calls.append(1)
        if len(calls) >= 3:
            enough_calls.set()

    task = PollingTask(callback=callback, interval_seconds=0.01)
    task.start()
    try:
        assert enough_calls.wait(timeout=5)
    finally:
        task.cancel(timeout=5)


def test_polling_task_start_is_idempotent() -> None:
    started = threading.Event()
    task = PollingTask(callback=started.set, interval_seconds=3600)
    task.start()
    task.start()
    assert started.wait(timeout=5)
    task.cancel(timeout=5)
    task.cancel(timeout=5)
    assert not task.is_running


def test_polling_task_rejects_non_positive_interval() -> None:
    with pytest.raises(ValueError):
        PollingTask(callback=lambda: None, interval_seconds=0)
