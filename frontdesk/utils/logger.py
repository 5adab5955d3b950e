"""Process-wide logging for the gateway, the refresh loop and session decoding.

The gateway, the background ``PollingTask`` thread and the Streamlit process
all write to stdout, so one line format is shared across them. Rejected
session tokens are logged at WARNING by the decoder and failed refresh
cycles at ERROR by the refresh service.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from frontdesk.utils.config import get_settings


_LOGGER_INITIALIZED = False


def configure_logging(level: Optional[str] = None) -> None:
    """Install the stdout handler on first use; ``LOG_LEVEL`` sets the default level."""

    global _LOGGER_INITIALIZED
    if _LOGGER_INITIALIZED:
        return

    settings = get_settings()
    resolved_level = (level or settings.log_level).upper()

    logging.basicConfig(
        level=resolved_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )
    # requests logs every /rooms and /bookings poll through urllib3 at DEBUG.
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    _LOGGER_INITIALIZED = True


def get_logger(name: str) -> logging.Logger:
    """Logger for a ``frontdesk`` module, configuring the handler if needed."""
    configure_logging()
    return logging.getLogger(name)
