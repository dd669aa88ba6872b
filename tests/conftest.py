"""Shared test fixtures: in-memory store, recording notifier, fresh admin session gate."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Mapping

import pytest

from camper_mcp.admin.session import Session, SessionGate, set_session_gate
from camper_mcp.data.catalogue import set_store
from camper_mcp.data.seo import seed_seo_defaults
from camper_mcp.data.store import SqliteRowStore
from camper_mcp.notifications.outbox import NotificationOutbox, set_outbox
from camper_mcp.notifications.relay import DispatchResult
from camper_mcp.server import set_session_verifier


class RecordingNotifier:
    """Notifier double that records every dispatch; optionally fails or raises."""

    def __init__(self, *, ok: bool = True, raises: Exception | None = None) -> None:
        self.ok = ok
        self.raises = raises
        self.calls: list[tuple[str, dict[str, str]]] = []

    async def notify(self, kind: str, data: Mapping[str, str]) -> DispatchResult:
        self.calls.append((kind, dict(data)))
        if self.raises is not None:
            raise self.raises
        if not self.ok:
            return DispatchResult(ok=False, code="RESEND_HTTP_ERROR", error="boom")
        return DispatchResult(ok=True, message_id=f"msg-{len(self.calls)}")


def live_session(minutes: int = 30) -> Session:
    return Session(
        user_id="admin-1",
        email="admin@jc-motorhomes.be",
        expires_at=datetime.now(timezone.utc) + timedelta(minutes=minutes),
        access_token="tok",
    )


@pytest.fixture()
def rows() -> SqliteRowStore:
    """Fresh, isolated in-memory store with SEO rows seeded."""
    store = SqliteRowStore(":memory:")
    seed_seo_defaults(store)
    return store


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def outbox(notifier: RecordingNotifier) -> NotificationOutbox:
    return NotificationOutbox(notifier)


@pytest.fixture()
def gate() -> SessionGate:
    return SessionGate()


@pytest.fixture()
def signed_in(gate: SessionGate) -> SessionGate:
    gate.on_session_change(live_session())
    return gate


@pytest.fixture(autouse=True)
def _inject_singletons(rows, outbox, gate):
    """Point every module-level singleton at this test's fixtures."""
    set_store(rows)
    set_outbox(outbox)
    set_session_gate(gate)
    yield
    set_store(None)
    set_outbox(None)
    set_session_gate(None)
    set_session_verifier(None)
    rows.close()
