"""
app.py — FastAPI application factory and refresh lifecycle.

This is the ASGI application object imported by uvicorn.
It wires the credential decoder, the hotel API client and the dashboard
refresh service, registers routers, and owns the polling task.

Usage (via launcher):
    python main.py

Usage (direct uvicorn):
    uvicorn app:app --reload
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from frontdesk.controllers.dashboard_controller import router as dashboard_router
from frontdesk.repository.hotel_api_client import HotelApiClient
from frontdesk.services.auth_service import CredentialDecoder
from frontdesk.services.dashboard_service import DashboardRefreshService, PollingTask
from frontdesk.utils.config import Settings, get_settings
from frontdesk.utils.logger import get_logger


logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    dashboard_service: Optional[DashboardRefreshService] = None,
    start_polling: bool = True,
) -> FastAPI:
    """
    Build and wire the FastAPI application.

    Every dependency lives on app.state and is traceable from this function.
    The polling task is started by the lifespan and cancelled on shutdown.
    """
    settings = settings or get_settings()

    # --- Services (the gateway performs no writes against the backend) ---
    credential_decoder = CredentialDecoder()
    if dashboard_service is None:
        dashboard_service = DashboardRefreshService(
            client=HotelApiClient(settings=settings),
            settings=settings,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Own the refresh loop for the lifetime of the server."""
        polling_task: PollingTask | None = None
        if start_polling:
            polling_task = PollingTask(
                callback=dashboard_service.refresh,
                interval_seconds=settings.refresh_interval_seconds,
            )
            polling_task.start()
        app.state.polling_task = polling_task
        try:
            yield
        finally:
            if polling_task is not None:
                # cancel() joins the polling thread; keep that off the event loop.
                await asyncio.to_thread(
                    polling_task.cancel, timeout=settings.hotel_api_timeout_seconds
                )
            logger.info("Shutdown complete")

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
    )

    # --- Routers ---
    app.include_router(dashboard_router)

    # --- Inject services into app.state for dependency resolution ---
    app.state.settings = settings
    app.state.credential_decoder = credential_decoder
    app.state.dashboard_service = dashboard_service

    return app


# Module-level app object for uvicorn
app = create_app()
