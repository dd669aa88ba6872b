"""Fire-and-forget notification outbox.

``enqueue`` spawns one asyncio task per accepted inquiry and returns at once.
The task's outcome is logged and never propagated to the submitter.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Mapping

from camper_mcp.config import Settings
from camper_mcp.notifications.relay import DispatchResult, NotificationRelay, Notifier

logger = logging.getLogger(__name__)


class NotificationOutbox:
    def __init__(self, notifier: Notifier) -> None:
        self._notifier = notifier
        # In-flight dispatch tasks, held until done.
        self._pending: set[asyncio.Task[DispatchResult | None]] = set()

    @property
    def pending(self) -> int:
        return len(self._pending)

    def enqueue(self, kind: str, data: Mapping[str, str]) -> asyncio.Task[DispatchResult | None]:
        """Schedule one dispatch attempt.  Must be called from a running event loop."""
        task = asyncio.get_running_loop().create_task(
            self._dispatch(kind, dict(data)),
            name=f"notify-{kind}",
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _dispatch(self, kind: str, data: dict[str, str]) -> DispatchResult | None:
        try:
            result = await self._notifier.notify(kind, data)
        except Exception:
            logger.exception("Notification dispatch for %s inquiry failed", kind)
            return None
        if not result.ok:
            logger.warning(
                "Notification for %s inquiry not delivered (%s): %s",
                kind,
                result.code,
                result.error,
            )
        return result

    async def drain(self) -> None:
        """Wait for every in-flight dispatch.  For shutdown and tests."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)


_outbox: NotificationOutbox | None = None


def get_outbox() -> NotificationOutbox:
    """Return the outbox singleton wired to the configured relay."""
    global _outbox  # noqa: PLW0603
    if _outbox is None:
        _outbox = NotificationOutbox(NotificationRelay(Settings.from_env()))
    return _outbox


def set_outbox(outbox: NotificationOutbox | None) -> None:
    """Inject an outbox instance for testing."""
    global _outbox  # noqa: PLW0603
    _outbox = outbox
