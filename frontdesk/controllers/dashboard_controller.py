"""Controller layer exposing session claims and dashboard views."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from frontdesk.controllers.dependencies import (
    get_dashboard_service,
    require_role,
    require_session,
)
from frontdesk.domain.models import SessionClaims, UserRole
from frontdesk.repository.hotel_api_client import HotelApiError
from frontdesk.services.dashboard_service import (
    DashboardNotReadyError,
    DashboardRefreshService,
)
from frontdesk.utils.logger import get_logger


logger = get_logger(__name__)

router = APIRouter(tags=["dashboard"])

require_admin = require_role(UserRole.ADMIN)
require_front_desk = require_role(UserRole.RECEPTIONIST, UserRole.ADMIN)


class HealthResponse(BaseModel):
    status: str
    completed_cycles: int = Field(ge=0)
    last_success_at: datetime | None = None
    last_error: str | None = None


class SessionResponse(BaseModel):
    user_id: Optional[str] = None
    subject: Optional[str] = None
    role: Optional[UserRole] = None
    username: Optional[str] = None
    issued_at: Optional[float] = None
    expiry: Optional[float] = None


class UpcomingCheckoutRow(BaseModel):
    booking_code: Optional[str] = None
    guest_name: Optional[str] = None
    room_number: Optional[str] = None
    remaining_seconds: float = Field(gt=0.0)
    remaining_time: str


class DailySummaryResponse(BaseModel):
    check_ins: int = Field(ge=0)
    check_outs: int = Field(ge=0)
    revenue: float = Field(ge=0.0)
    occupancy_rate: int = Field(ge=0)
    pending_payments: int = Field(ge=0)


class TaskCountsResponse(BaseModel):
    check_ins: int = Field(ge=0)
    check_outs: int = Field(ge=0)
    reservations: int = Field(ge=0)
    room_inspections: Optional[int] = Field(default=None, ge=0)


class AdminDashboardResponse(BaseModel):
    generated_at: datetime
    daily_summary: DailySummaryResponse
    upcoming_checkouts: list[UpcomingCheckoutRow]
    room_status_counts: dict[str, int]


class ReceptionistDashboardResponse(BaseModel):
    generated_at: datetime
    task_counts: TaskCountsResponse
    upcoming_checkouts: list[UpcomingCheckoutRow]


class RefreshResponse(BaseModel):
    status: str
    generated_at: datetime


@router.get("/health", response_model=HealthResponse, status_code=status.HTTP_200_OK)
async def health(
    dashboard_service: DashboardRefreshService = Depends(get_dashboard_service),
) -> HealthResponse:
    refresh_status = dashboard_service.status()
    return HealthResponse(
        status="ok",
        completed_cycles=refresh_status.completed_cycles,
        last_success_at=refresh_status.last_success_at,
        last_error=refresh_status.last_error,
    )


@router.get("/session", response_model=SessionResponse, status_code=status.HTTP_200_OK)
async def current_session(claims: SessionClaims = Depends(require_session)) -> SessionResponse:
    return SessionResponse(**claims.to_dict())


@router.get(
    "/dashboard/admin",
    response_model=AdminDashboardResponse,
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_admin)],
)
async def admin_dashboard(
    dashboard_service: DashboardRefreshService = Depends(get_dashboard_service),
) -> AdminDashboardResponse:
    try:
        view = dashboard_service.get_admin_view()
        return AdminDashboardResponse(**view.to_dict())
    except DashboardNotReadyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected admin dashboard failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load dashboard data",
        ) from exc


@router.get(
    "/dashboard/receptionist",
    response_model=ReceptionistDashboardResponse,
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_front_desk)],
)
async def receptionist_dashboard(
    dashboard_service: DashboardRefreshService = Depends(get_dashboard_service),
) -> ReceptionistDashboardResponse:
    try:
        view = dashboard_service.get_receptionist_view()
        return ReceptionistDashboardResponse(**view.to_dict())
    except DashboardNotReadyError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected receptionist dashboard failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load dashboard data",
        ) from exc


@router.post(
    "/dashboard/refresh",
    response_model=RefreshResponse,
    status_code=status.HTTP_200_OK,
    dependencies=[Depends(require_front_desk)],
)
def refresh_dashboard(
    dashboard_service: DashboardRefreshService = Depends(get_dashboard_service),
) -> RefreshResponse:
    # Sync handler: the cycle performs blocking HTTP calls.
    try:
        admin_view, _ = dashboard_service.run_cycle()
        return RefreshResponse(status="REFRESHED", generated_at=admin_view.generated_at)
    except HotelApiError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(exc),
        ) from exc
    except Exception as exc:  # pragma: no cover - defensive fallback
        logger.exception("Unexpected dashboard refresh failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to refresh dashboard data",
        ) from exc
