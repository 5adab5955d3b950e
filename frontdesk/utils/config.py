"""Environment-driven runtime settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional


PROJECT_ROOT = Path(__file__).resolve().parents[2]


@dataclass(frozen=True)
class Settings:
    app_name: str
    app_version: str
    log_level: str
    hotel_api_base_url: str
    hotel_api_timeout_seconds: float
    session_token_key: str
    session_db_path: Path
    refresh_interval_seconds: float
    upcoming_checkout_window_minutes: int
    upcoming_checkout_limit: int
    room_inspections_estimate: Optional[int]
    gateway_base_url: str


def _optional_int(raw: str | None) -> Optional[int]:
    if raw is None or not raw.strip():
        return None
    return int(raw)


def validate_settings(settings: Settings) -> None:
    if settings.hotel_api_timeout_seconds <= 0:
        raise ValueError("hotel_api_timeout_seconds must be > 0")
    if settings.refresh_interval_seconds <= 0:
        raise ValueError("refresh_interval_seconds must be > 0")
    if settings.upcoming_checkout_window_minutes <= 0:
        raise ValueError("upcoming_checkout_window_minutes must be > 0")
    if settings.upcoming_checkout_limit <= 0:
        raise ValueError("upcoming_checkout_limit must be > 0")
    if settings.room_inspections_estimate is not None and settings.room_inspections_estimate < 0:
        raise ValueError("room_inspections_estimate must be >= 0 when provided")
    if not settings.session_token_key:
        raise ValueError("session_token_key must not be empty")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Build settings once per process from environment variables."""
    settings = Settings(
        app_name=os.getenv("APP_NAME", "Front Desk Operations Dashboard"),
        app_version=os.getenv("APP_VERSION", "1.0.0"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        hotel_api_base_url=os.getenv("HOTEL_API_BASE_URL", "http://localhost:8080/api").rstrip("/"),
        hotel_api_timeout_seconds=float(os.getenv("HOTEL_API_TIMEOUT_SECONDS", "5")),
        session_token_key=os.getenv("SESSION_TOKEN_KEY", "authToken"),
        session_db_path=Path(
            os.getenv("SESSION_DB_PATH", str(PROJECT_ROOT / "data" / "session.db"))
        ),
        refresh_interval_seconds=float(os.getenv("REFRESH_INTERVAL_SECONDS", "60")),
        upcoming_checkout_window_minutes=int(os.getenv("UPCOMING_CHECKOUT_WINDOW_MINUTES", "120")),
        upcoming_checkout_limit=int(os.getenv("UPCOMING_CHECKOUT_LIMIT", "3")),
        room_inspections_estimate=_optional_int(os.getenv("ROOM_INSPECTIONS_ESTIMATE")),
        gateway_base_url=os.getenv("GATEWAY_BASE_URL", "http://127.0.0.1:8000").rstrip("/"),
    )
    validate_settings(settings)
    return settings
