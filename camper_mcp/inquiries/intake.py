"""Public inquiry intake: validate, persist, then hand off to the notification outbox."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable

from camper_mcp.data.listings import ListingStore
from camper_mcp.data.store import RowStore
from camper_mcp.errors import ValidationError
from camper_mcp.inquiries.models import InquiryKind, parse_inquiry
from camper_mcp.inquiries.repository import InquiryRepository
from camper_mcp.notifications.outbox import NotificationOutbox

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Acknowledgement:
    kind: InquiryKind
    inquiry_id: str
    created_at: str


class InquiryIntake:
    """Accepts customer submissions of every :class:`InquiryKind`.

    The row is committed before the notification is enqueued; the caller's
    result depends only on persistence.  Validation is structural only; duplicate
    submissions are stored as separate rows.
    """

    def __init__(
        self,
        rows: RowStore,
        outbox: NotificationOutbox,
        *,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._repository = InquiryRepository(rows)
        self._listings = ListingStore(rows)
        self._outbox = outbox
        self._today = today

    def _listing_title(self, listing_id: str) -> str | None:
        listing = self._listings.get(listing_id)
        return listing.title if listing else None

    async def submit(self, kind: InquiryKind | str, payload: dict[str, Any]) -> Acknowledgement:
        """Validate and persist one inquiry.

        Raises ``ValidationError`` before anything is written, or
        ``PersistenceError`` if the store rejects the row.  Notification
        failures never reach the caller.
        """
        inquiry_kind = kind if isinstance(kind, InquiryKind) else InquiryKind.parse(kind)
        if not isinstance(payload, dict):
            raise ValidationError("Inquiry payload must be an object.", field="payload")

        inquiry = parse_inquiry(
            inquiry_kind,
            payload,
            lookup_title=self._listing_title,
            today=self._today(),
        )
        stored = self._repository.save(inquiry)
        logger.info("Accepted %s inquiry %s", inquiry_kind.value, stored.id)

        self._outbox.enqueue(inquiry_kind.value, stored.notification_data())
        return Acknowledgement(
            kind=inquiry_kind,
            inquiry_id=stored.id,
            created_at=stored.created_at,
        )
