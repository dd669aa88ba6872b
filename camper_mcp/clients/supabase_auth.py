"""Async client for the identity provider's ``/auth/v1/user`` endpoint."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

logger = logging.getLogger(__name__)

_REQUEST_TIMEOUT = aiohttp.ClientTimeout(total=8)


class SupabaseAuthError(RuntimeError):
    """Raised when the identity provider cannot be reached or misbehaves."""

    def __init__(self, message: str, *, code: str, status: int | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.status = status


class SupabaseAuthClient:
    """Looks up the user behind an access token.  Tokens are never parsed locally."""

    def __init__(self, base_url: str, anon_key: str) -> None:
        self.base_url = base_url.rstrip("/")
        self.anon_key = anon_key.strip()
        self.session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> SupabaseAuthClient:
        if not self.base_url or not self.anon_key:
            raise SupabaseAuthError(
                "SUPABASE_URL / SUPABASE_ANON_KEY are not configured.",
                code="MISSING_CONFIG",
            )
        self.session = aiohttp.ClientSession(headers={"apikey": self.anon_key})
        return self

    async def __aexit__(self, *args: Any) -> None:
        if self.session:
            await self.session.close()

    async def get_user(self, access_token: str) -> dict[str, Any] | None:
        """Return the user record, or None when the token is rejected."""
        if not self.session:
            raise RuntimeError("Client not entered as context manager")
        try:
            async with self.session.get(
                f"{self.base_url}/auth/v1/user",
                headers={"Authorization": f"Bearer {access_token}"},
                timeout=_REQUEST_TIMEOUT,
            ) as resp:
                if resp.status in (401, 403):
                    return None
                if resp.status >= 400:
                    raise SupabaseAuthError(
                        f"Auth request failed with HTTP {resp.status}.",
                        code="AUTH_HTTP_ERROR",
                        status=resp.status,
                    )
                payload = await resp.json()
        except SupabaseAuthError:
            raise
        except TimeoutError as exc:
            raise SupabaseAuthError("Auth request timed out.", code="TIMEOUT") from exc
        except aiohttp.ClientError as exc:
            logger.error("Auth client error: %s", exc)
            raise SupabaseAuthError(
                "Auth request failed due to a network/client error.",
                code="NETWORK_ERROR",
            ) from exc
        return payload if isinstance(payload, dict) and payload.get("id") else None
