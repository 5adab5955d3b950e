"""Shared FastAPI dependency providers for controller layer."""

from __future__ import annotations

from typing import Callable

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from frontdesk.domain.models import SessionClaims, UserRole
from frontdesk.services.auth_service import CredentialDecoder
from frontdesk.services.dashboard_service import DashboardRefreshService


bearer_scheme = HTTPBearer(auto_error=False)


def get_credential_decoder(request: Request) -> CredentialDecoder:
    decoder = getattr(request.app.state, "credential_decoder", None)
    if decoder is None:
        decoder = CredentialDecoder()
        request.app.state.credential_decoder = decoder
    return decoder


def get_dashboard_service(request: Request) -> DashboardRefreshService:
    service = getattr(request.app.state, "dashboard_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Dashboard service is not initialized",
        )
    return service


async def require_session(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    decoder: CredentialDecoder = Depends(get_credential_decoder),
) -> SessionClaims:
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header with Bearer token is required",
        )
    token = credentials.credentials
    claims = decoder.decode(token)
    if claims is None or not decoder.is_valid(token):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session token is invalid or expired",
        )
    return claims


def require_role(*roles: UserRole) -> Callable[..., object]:
    """Build a dependency admitting only sessions whose role is in ``roles``."""

    allowed = frozenset(roles)

    async def dependency(claims: SessionClaims = Depends(require_session)) -> SessionClaims:
        if claims.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="This dashboard is not available for the current role",
            )
        return claims

    return dependency
