"""Turns an accepted inquiry into one operator e-mail."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Mapping, Protocol, runtime_checkable

from camper_mcp.clients.resend import ResendClient, ResendClientError
from camper_mcp.config import Settings
from camper_mcp.notifications.templates import render

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DispatchResult:
    ok: bool
    message_id: str = ""
    code: str = ""
    error: str = ""


@runtime_checkable
class Notifier(Protocol):
    async def notify(self, kind: str, data: Mapping[str, str]) -> DispatchResult: ...


class NotificationRelay:
    """Single-attempt e-mail dispatch to the fixed operator address.

    Provider failures come back as a non-ok ``DispatchResult``; nothing is retried.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        client_factory: Callable[[str], ResendClient] = ResendClient,
    ) -> None:
        self._settings = settings
        self._client_factory = client_factory

    @property
    def recipient(self) -> str:
        return self._settings.notify_to

    async def notify(self, kind: str, data: Mapping[str, str]) -> DispatchResult:
        """Render and send.  An unknown ``kind`` raises ``DispatchError``."""
        email = render(kind, data)

        if not self._settings.resend_api_key:
            logger.warning("RESEND_API_KEY not configured; %s notification not sent", kind)
            return DispatchResult(ok=False, code="MISSING_API_KEY", error="No API key configured.")

        try:
            async with self._client_factory(self._settings.resend_api_key) as client:
                message_id = await client.send_email(
                    sender=self._settings.notify_from,
                    to=[self.recipient],
                    subject=email.subject,
                    html=email.html,
                )
        except ResendClientError as exc:
            return DispatchResult(ok=False, code=exc.code, error=str(exc))

        logger.info("Sent %s notification (%s)", kind, message_id or "no id")
        return DispatchResult(ok=True, message_id=message_id)
