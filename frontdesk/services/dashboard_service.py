"""Fetch-then-aggregate refresh cycle behind both dashboard views."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from threading import Event, RLock, Thread
from typing import Callable, Optional, Sequence

from frontdesk.domain.models import (
    AdminDashboardView,
    BookingSnapshot,
    ReceptionistDashboardView,
    RoomSnapshot,
)
from frontdesk.repository.hotel_api_client import HotelApiClient, HotelApiError
from frontdesk.services.aggregation_service import (
    compute_daily_summary,
    compute_room_status_counts,
    compute_task_counts,
    compute_upcoming_checkouts,
)
from frontdesk.utils.config import Settings, get_settings
from frontdesk.utils.logger import get_logger


logger = get_logger(__name__)


class DashboardError(Exception):
    """Base dashboard refresh failure."""


class DashboardNotReadyError(DashboardError):
    """Raised when a view is requested before any cycle has completed."""


@dataclass(frozen=True)
class RefreshStatus:
    completed_cycles: int
    last_success_at: datetime | None
    last_error: str | None


class DashboardRefreshService:
    """Runs aggregation cycles and keeps the latest views.

    Each cycle works on its own snapshot. Results are published in completion
    order, so when two cycles overlap the one that finishes last wins.
    """

    def __init__(
        self,
        client: Optional[HotelApiClient] = None,
        settings: Optional[Settings] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._settings = settings or get_settings()
        self._client = client or HotelApiClient(settings=self._settings)
        self._clock = clock
        self._window = timedelta(minutes=self._settings.upcoming_checkout_window_minutes)
        self._limit = self._settings.upcoming_checkout_limit
        self._lock = RLock()
        self._admin_view: AdminDashboardView | None = None
        self._receptionist_view: ReceptionistDashboardView | None = None
        self._completed_cycles = 0
        self._last_success_at: datetime | None = None
        self._last_error: str | None = None

    def build_admin_view(
        self,
        rooms: Sequence[RoomSnapshot],
        bookings: Sequence[BookingSnapshot],
        now: datetime,
    ) -> AdminDashboardView:
        return AdminDashboardView(
            generated_at=now,
            daily_summary=compute_daily_summary(bookings, rooms, now),
            upcoming_checkouts=compute_upcoming_checkouts(
                bookings, now, window=self._window, limit=self._limit
            ),
            room_status_counts=compute_room_status_counts(rooms),
        )

    def build_receptionist_view(
        self,
        bookings: Sequence[BookingSnapshot],
        now: datetime,
    ) -> ReceptionistDashboardView:
        return ReceptionistDashboardView(
            generated_at=now,
            task_counts=compute_task_counts(
                bookings,
                now,
                room_inspections=self._settings.room_inspections_estimate,
            ),
            upcoming_checkouts=compute_upcoming_checkouts(
                bookings, now, window=self._window, limit=self._limit
            ),
        )

    def run_cycle(self) -> tuple[AdminDashboardView, ReceptionistDashboardView]:
        """Fetch one snapshot, derive both views and publish them.

        Raises ``HotelApiError`` when the backend cannot be read; previously
        published views are kept in that case.
        """
        try:
            rooms = self._client.list_rooms()
            bookings = self._client.list_bookings()
        except HotelApiError as exc:
            with self._lock:
                self._last_error = str(exc)
            logger.error("Dashboard refresh failed: %s", exc)
            raise

        now = self._clock()
        admin_view = self.build_admin_view(rooms, bookings, now)
        receptionist_view = self.build_receptionist_view(bookings, now)

        with self._lock:
            self._admin_view = admin_view
            self._receptionist_view = receptionist_view
            self._completed_cycles += 1
            self._last_success_at = now
            self._last_error = None

        logger.info(
            "Dashboard refreshed: rooms=%s bookings=%s upcoming_checkouts=%s",
            len(rooms),
            len(bookings),
            len(admin_view.upcoming_checkouts),
        )
        return admin_view, receptionist_view

    def refresh(self) -> bool:
        """Polling entry point: run a cycle, reporting failure instead of raising."""
        try:
            self.run_cycle()
        except HotelApiError:
            return False
        return True

    def get_admin_view(self) -> AdminDashboardView:
        with self._lock:
            view = self._admin_view
        if view is None:
            raise DashboardNotReadyError("Dashboard data has not been loaded yet")
        return view

    def get_receptionist_view(self) -> ReceptionistDashboardView:
        with self._lock:
            view = self._receptionist_view
        if view is None:
            raise DashboardNotReadyError("Dashboard data has not been loaded yet")
        return view

    def status(self) -> RefreshStatus:
        with self._lock:
            return RefreshStatus(
                completed_cycles=self._completed_cycles,
                last_success_at=self._last_success_at,
                last_error=self._last_error,
            )


class PollingTask:
    """Runs ``callback`` now and then every ``interval_seconds`` until cancelled."""

    def __init__(
        self,
        callback: Callable[[], object],
        interval_seconds: float,
        name: str = "dashboard-refresh",
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be > 0")
        self._callback = callback
        self._interval = interval_seconds
        self._name = name
        self._stop = Event()
        self._thread: Thread | None = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running:
            return
        self._stop.clear()
        self._thread = Thread(target=self._run, name=self._name, daemon=True)
        self._thread.start()
        logger.info("Polling task %s started (interval=%ss)", self._name, self._interval)

    def _run(self) -> None:
        while True:
            try:
                self._callback()
            except Exception:  # pragma: no cover - keep the loop alive
                logger.exception("Polling task %s cycle failed", self._name)
            if self._stop.wait(self._interval):
                break

    def cancel(self, timeout: float | None = None) -> None:
        """Stop scheduling new cycles; a cycle already running finishes."""
        self._stop.set()
        thread = self._thread
        if thread is not None:
            thread.join(timeout)
        self._thread = None
        logger.info("Polling task %s cancelled", self._name)
