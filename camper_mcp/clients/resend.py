"""Async Resend e-mail API client."""

from __future__ import annotations

import json
import logging
from typing import Any

import aiohttp

from camper_mcp.errors import DispatchError

logger = logging.getLogger(__name__)

_REQUEST_TIMEOUT = aiohttp.ClientTimeout(total=10)


class ResendClientError(DispatchError):
    """Raised for Resend request/config errors with structured metadata."""


class ResendClient:
    """Minimal async client for the Resend ``/emails`` endpoint."""

    BASE_URL = "https://api.resend.com"

    def __init__(self, api_key: str) -> None:
        self.api_key = api_key.strip()
        self.session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> ResendClient:
        if not self.api_key:
            raise ResendClientError(
                "RESEND_API_KEY is not configured.",
                code="MISSING_API_KEY",
            )
        self.session = aiohttp.ClientSession(
            headers={"Authorization": f"Bearer {self.api_key}"},
        )
        return self

    async def __aexit__(self, *args: Any) -> None:
        if self.session:
            await self.session.close()

    async def send_email(
        self,
        *,
        sender: str,
        to: list[str],
        subject: str,
        html: str,
    ) -> str:
        """Send one e-mail.  Returns the provider message id."""
        if not self.session:
            raise RuntimeError("Client not entered as context manager")

        body = {"from": sender, "to": to, "subject": subject, "html": html}
        try:
            async with self.session.post(
                f"{self.BASE_URL}/emails",
                json=body,
                timeout=_REQUEST_TIMEOUT,
            ) as resp:
                raw_text = await resp.text()
                payload: Any
                if raw_text:
                    try:
                        payload = json.loads(raw_text)
                    except json.JSONDecodeError:
                        payload = {"raw": raw_text}
                else:
                    payload = {}

                if resp.status >= 400:
                    message = f"Resend request failed with HTTP {resp.status}."
                    if isinstance(payload, dict):
                        message = str(payload.get("message") or payload.get("error") or message)
                    raise ResendClientError(
                        message,
                        code="RESEND_HTTP_ERROR",
                        status=resp.status,
                        details=payload if isinstance(payload, dict) else {"response": payload},
                    )
        except ResendClientError:
            raise
        except TimeoutError as exc:
            raise ResendClientError("Resend request timed out.", code="TIMEOUT") from exc
        except aiohttp.ClientError as exc:
            logger.error("Resend client error: %s", exc)
            raise ResendClientError(
                "Resend request failed due to a network/client error.",
                code="NETWORK_ERROR",
                details={"error": str(exc)},
            ) from exc

        message_id = payload.get("id") if isinstance(payload, dict) else None
        return str(message_id or "")
