"""Admin session state, passed explicitly into the review surface.

The identity provider owns authentication.  This module only tracks the
session it reported and answers "is there a live session right now?".
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Protocol, runtime_checkable

from camper_mcp.clients.supabase_auth import SupabaseAuthClient
from camper_mcp.config import Settings
from camper_mcp.errors import UnauthorizedError

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Session:
    user_id: str
    email: str
    expires_at: datetime
    access_token: str = field(default="", repr=False)

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


class SessionGate:
    """Holds the current admin session; refreshed through :meth:`on_session_change`."""

    def __init__(
        self,
        session: Session | None = None,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._lock = threading.RLock()
        self._session = session
        self._clock = clock

    @property
    def current(self) -> Session | None:
        with self._lock:
            return self._session

    def is_active(self) -> bool:
        session = self.current
        return session is not None and not session.is_expired(self._clock())

    def require(self) -> Session:
        """Return the live session or raise ``UnauthorizedError``."""
        with self._lock:
            session = self._session
            if session is None:
                raise UnauthorizedError("No admin session. Please sign in.")
            if session.is_expired(self._clock()):
                self._session = None
                logger.info("Admin session for %s expired", session.email)
                raise UnauthorizedError("Admin session expired. Please sign in again.")
            return session

    def on_session_change(self, session: Session | None) -> None:
        """Session-change callback for the identity provider's subscription."""
        with self._lock:
            self._session = session
        if session is None:
            logger.info("Admin session cleared")
        else:
            logger.info("Admin session started for %s", session.email)


@runtime_checkable
class SessionVerifier(Protocol):
    async def verify(self, access_token: str) -> Session | None: ...


class SupabaseSessionVerifier:
    """Checks an access token against the identity provider."""

    def __init__(
        self,
        settings: Settings,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._settings = settings
        self._clock = clock

    async def verify(self, access_token: str) -> Session | None:
        token = access_token.strip()
        if not token:
            return None
        async with SupabaseAuthClient(
            self._settings.supabase_url, self._settings.supabase_anon_key
        ) as client:
            user = await client.get_user(token)
        if user is None:
            return None
        return Session(
            user_id=str(user["id"]),
            email=str(user.get("email") or ""),
            expires_at=self._clock()
            + timedelta(minutes=self._settings.admin_session_ttl_minutes),
            access_token=token,
        )


_gate: SessionGate | None = None


def get_session_gate() -> SessionGate:
    global _gate  # noqa: PLW0603
    if _gate is None:
        _gate = SessionGate()
    return _gate


def set_session_gate(gate: SessionGate | None) -> None:
    """Inject a gate instance for testing."""
    global _gate  # noqa: PLW0603
    _gate = gate
