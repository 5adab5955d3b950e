"""
main.py — Server launcher and entry point.

Run this file to start the front-desk gateway:

    python main.py

The Streamlit dashboard is started separately and talks to the gateway:

    streamlit run dashboard/app.py

This file does NOT contain application logic. See app.py for the FastAPI
application, service wiring, and the refresh lifecycle.

Direct uvicorn usage:
    uvicorn app:app --reload
"""

from __future__ import annotations

import uvicorn

from frontdesk.utils.config import get_settings


HOST = "127.0.0.1"
PORT = 8000


def main() -> None:
    """Start the front-desk gateway."""
    settings = get_settings()
    print("=" * 60)
    print(f"  {settings.app_name}")
    print("=" * 60)
    print(f"  Gateway : http://{HOST}:{PORT}")
    print(f"  Backend : {settings.hotel_api_base_url}")
    print(f"  Refresh : every {settings.refresh_interval_seconds:g}s")
    print(f"  API docs: http://{HOST}:{PORT}/docs")
    print("=" * 60)
    print("  Press CTRL+C to stop\n")

    # Blocks until CTRL+C
    uvicorn.run(
        "app:app",
        host=HOST,
        port=PORT,
        reload=False,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
