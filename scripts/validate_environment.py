#!/usr/bin/env python3
"""Validate local front-desk dashboard environment readiness."""

from __future__ import annotations

import importlib
import shutil
import sys
import tempfile
from dataclasses import replace
from datetime import datetime, timedelta
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from frontdesk.domain.models import BookingSnapshot, RoomSnapshot
from frontdesk.repository.hotel_api_client import HotelApiClient, HotelApiError
from frontdesk.repository.session_store import SqliteSessionStore
from frontdesk.services.aggregation_service import (
    compute_daily_summary,
    compute_upcoming_checkouts,
)
from frontdesk.services.auth_service import SessionAuthService
from frontdesk.utils.config import get_settings

SEPARATOR_LINE = "=" * 44
SAMPLE_TOKEN = "a.eyJpZCI6IjEiLCJyb2xlIjoiQURNSU4iLCJleHAiOjk5OTk5OTk5OTl9.sig"


def _print_result(name: str, success: bool, detail: str = "") -> tuple[bool, str]:
    if success:
        return True, f"[PASS] {name}{detail}"
    return False, f"[FAIL] {name}: {detail}"


def main() -> int:
    results: list[str] = []
    all_passed = True
    temp_dir = tempfile.mkdtemp(prefix="frontdesk-env-")

    # CHECK 1: Python version >= 3.11
    if sys.version_info >= (3, 11):
        ok, line = _print_result("Python " + sys.version.split()[0], True)
    else:
        ok, line = _print_result(
            "Python version >= 3.11",
            False,
            f"found {sys.version.split()[0]}",
        )
    results.append(line)
    all_passed = all_passed and ok

    # CHECK 2: Required packages importable
    package_specs = [
        ("fastapi", "fastapi"),
        ("uvicorn", "uvicorn"),
        ("pydantic", "pydantic"),
        ("requests", "requests"),
        ("pandas", "pandas"),
        ("streamlit", "streamlit"),
        ("httpx", "httpx"),
        ("pytest", "pytest"),
    ]
    import_errors: list[str] = []
    from importlib.metadata import PackageNotFoundError, version

    for module_name, dist_name in package_specs:
        try:
            importlib.import_module(module_name)
            version(dist_name)
        except (ImportError, PackageNotFoundError) as exc:
            import_errors.append(f"{module_name} ({exc})")
    if import_errors:
        ok, line = _print_result(
            "Required packages",
            False,
            "missing/unimportable -> " + "; ".join(import_errors),
        )
    else:
        ok, line = _print_result("Required packages: all importable", True)
    results.append(line)
    all_passed = all_passed and ok

    try:
        base_settings = get_settings()
        validation_settings = replace(
            base_settings,
            session_db_path=Path(temp_dir) / "session_validation.db",
        )

        # CHECK 3: Session store round trip and token decoding
        try:
            auth = SessionAuthService(
                store=SqliteSessionStore(validation_settings),
                settings=validation_settings,
            )
            auth.start_session(SAMPLE_TOKEN)
            role = auth.get_user_role()
            if role is None or role.value != "ADMIN" or not auth.is_authenticated():
                raise RuntimeError(f"unexpected sample session: role={role}")
            auth.clear_session()
            if auth.get_user_role() is not None:
                raise RuntimeError("session was not cleared")
            ok, line = _print_result("Session store and token decoding", True)
        except Exception as exc:
            ok, line = _print_result("Session store and token decoding", False, str(exc))
        results.append(line)
        all_passed = all_passed and ok

        # CHECK 4: Aggregation on a sample snapshot
        try:
            now = datetime.now().replace(microsecond=0)
            bookings = [
                BookingSnapshot.from_payload(
                    {
                        "bookingCode": "VAL-1",
                        "guestName": "Validation Guest",
                        "room": {"id": 1, "roomNumber": "101"},
                        "status": "CHECKED_IN",
                        "scheduledCheckIn": (now - timedelta(hours=3)).isoformat(),
                        "scheduledCheckOut": (now + timedelta(minutes=45)).isoformat(),
                        "totalCharges": 120,
                    }
                )
            ]
            rooms = [RoomSnapshot.from_payload({"id": 1, "roomNumber": "101", "status": "occupied"})]
            summary = compute_daily_summary(bookings, rooms, now)
            upcoming = compute_upcoming_checkouts(bookings, now)
            if summary.occupancy_rate != 100 or len(upcoming) != 1:
                raise RuntimeError("sample aggregation returned unexpected values")
            ok, line = _print_result(
                "Booking aggregation",
                True,
                f": occupancy={summary.occupancy_rate}% next_checkout={upcoming[0].remaining_time}",
            )
        except Exception as exc:
            ok, line = _print_result("Booking aggregation", False, str(exc))
        results.append(line)
        all_passed = all_passed and ok

        # CHECK 5: Hotel backend reachability (informational)
        try:
            client = HotelApiClient(settings=validation_settings)
            room_count = len(client.list_rooms())
            line = f"[PASS] Hotel backend reachable: {room_count} rooms"
        except HotelApiError as exc:
            line = f"[WARN] Hotel backend unreachable: {exc}"
        results.append(line)

    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)

    print(SEPARATOR_LINE)
    print(" Front Desk Environment Validation")
    print(SEPARATOR_LINE)
    for line in results:
        print(f" {line}")
    print(SEPARATOR_LINE)
    if all_passed:
        print(" All checks passed. Environment is ready.")
        print(SEPARATOR_LINE)
        return 0
    print(" One or more checks failed.")
    print(SEPARATOR_LINE)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
