"""HTTP collaborator that reads room and booking snapshots from the hotel backend."""

from __future__ import annotations

from typing import Any, Callable, Optional, TypeVar

import requests

from frontdesk.domain.models import BookingSnapshot, RoomSnapshot
from frontdesk.utils.config import Settings, get_settings
from frontdesk.utils.logger import get_logger


logger = get_logger(__name__)

SnapshotT = TypeVar("SnapshotT")


class HotelApiError(Exception):
    """Raised when the hotel backend cannot be read."""


class HotelApiClient:
    """Fetches ``/rooms`` and ``/bookings`` and parses them into snapshots."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._session = session or requests.Session()
        self._base_url = self._settings.hotel_api_base_url

    def _get_json(self, path: str) -> Any:
        url = f"{self._base_url}{path}"
        try:
            response = self._session.get(url, timeout=self._settings.hotel_api_timeout_seconds)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as exc:
            raise HotelApiError(f"Error fetching {path}: {exc}") from exc
        except ValueError as exc:
            raise HotelApiError(f"Invalid JSON returned by {path}") from exc

    def _get_collection(
        self,
        path: str,
        parse: Callable[[dict[str, Any]], SnapshotT],
    ) -> list[SnapshotT]:
        payload = self._get_json(path)
        if not isinstance(payload, list):
            raise HotelApiError(f"Expected a JSON array from {path}")

        items: list[SnapshotT] = []
        for index, row in enumerate(payload):
            if not isinstance(row, dict):
                logger.warning("Skipping non-object row %s from %s", index, path)
                continue
            items.append(parse(row))
        return items

    def list_rooms(self) -> list[RoomSnapshot]:
        return self._get_collection("/rooms", RoomSnapshot.from_payload)

    def list_bookings(self) -> list[BookingSnapshot]:
        return self._get_collection("/bookings", BookingSnapshot.from_payload)
