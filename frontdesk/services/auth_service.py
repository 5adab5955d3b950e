"""Session credential decoding and stored-session accessors.

The credential is a JWT-shaped ``header.payload.signature`` string issued by
the hotel backend. Only the payload is read: the signature is NOT verified,
because the backend stays authoritative for every request it serves. The
decoded claims are only used to pick a dashboard and to skip rendering for
sessions that have already expired.
"""

from __future__ import annotations

import base64
import binascii
import json
import time
from enum import Enum
from typing import Any, Callable, Optional

from frontdesk.domain.models import SessionClaims, UserRole
from frontdesk.repository.session_store import SessionStore
from frontdesk.utils.config import Settings, get_settings
from frontdesk.utils.logger import get_logger


logger = get_logger(__name__)


class SessionState(str, Enum):
    ABSENT = "ABSENT"
    VALID = "VALID"
    EXPIRED = "EXPIRED"
    MALFORMED = "MALFORMED"


class CredentialDecoder:
    """Stateless decoder for unsigned session credentials."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock

    def decode(self, token: str) -> Optional[SessionClaims]:
        """Return the payload claims, or ``None`` for any malformed token."""
        try:
            segments = token.split(".")
            if len(segments) != 3:
                raise ValueError(f"expected 3 segments, got {len(segments)}")
            payload_segment = segments[1]
            # Restore the padding that base64url encoders strip.
            padded = payload_segment + "=" * (-len(payload_segment) % 4)
            raw = base64.b64decode(
                padded.replace("-", "+").replace("_", "/"),
                validate=True,
            )
            payload = json.loads(raw.decode("utf-8"))
            if not isinstance(payload, dict):
                raise ValueError("token payload is not a JSON object")
            return SessionClaims.from_payload(payload)
        except (AttributeError, ValueError, RecursionError, binascii.Error) as exc:
            logger.warning("Failed to decode session token: %s", exc)
            return None

    def is_valid(self, token: str, now: Optional[float] = None) -> bool:
        """True strictly while ``expiry`` is in the future."""
        claims = self.decode(token)
        if claims is None or claims.expiry is None:
            return False
        current_time = self._clock() if now is None else now
        return claims.expiry > current_time


class SessionAuthService:
    """Reads the stored session token and projects claims from it."""

    def __init__(
        self,
        store: SessionStore,
        decoder: Optional[CredentialDecoder] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._store = store
        self._decoder = decoder or CredentialDecoder()
        self._token_key = self._settings.session_token_key

    @property
    def decoder(self) -> CredentialDecoder:
        return self._decoder

    def start_session(self, token: str) -> None:
        self._store.set(self._token_key, token)

    def clear_session(self) -> None:
        self._store.clear(self._token_key)

    def get_token(self) -> Optional[str]:
        return self._store.get(self._token_key)

    def get_claims(self) -> Optional[SessionClaims]:
        token = self.get_token()
        if not token:
            return None
        return self._decoder.decode(token)

    def _claim(self, name: str) -> Any:
        claims = self.get_claims()
        if claims is None:
            return None
        return getattr(claims, name, None)

    def get_user_role(self) -> Optional[UserRole]:
        return self._claim("role")

    def get_user_id(self) -> Optional[str]:
        return self._claim("user_id")

    def get_subject(self) -> Optional[str]:
        return self._claim("subject")

    def get_username(self) -> Optional[str]:
        return self._claim("username")

    def session_state(self, now: Optional[float] = None) -> SessionState:
        """Classify the stored token; recomputed on every call."""
        token = self.get_token()
        if not token:
            return SessionState.ABSENT
        if self._decoder.decode(token) is None:
            return SessionState.MALFORMED
        if self._decoder.is_valid(token, now=now):
            return SessionState.VALID
        return SessionState.EXPIRED

    def is_authenticated(self, now: Optional[float] = None) -> bool:
        return self.session_state(now=now) is SessionState.VALID
