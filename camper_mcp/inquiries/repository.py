"""Read/delete access to persisted inquiries.  There is no update path."""

from __future__ import annotations

import logging
from typing import Any

from camper_mcp.constants import LISTING_TABLE
from camper_mcp.data.store import RowStore
from camper_mcp.errors import NotFoundError
from camper_mcp.inquiries.models import Inquiry, InquiryKind, inquiry_from_row

logger = logging.getLogger(__name__)


class InquiryRepository:
    def __init__(self, rows: RowStore) -> None:
        self._rows = rows

    def save(self, inquiry: Inquiry) -> Inquiry:
        row = self._rows.insert(inquiry.kind.table, inquiry.to_row())
        return inquiry_from_row(inquiry.kind, row)

    def get(self, kind: InquiryKind, inquiry_id: str) -> Inquiry | None:
        row = self._rows.get(kind.table, inquiry_id)
        return inquiry_from_row(kind, row) if row else None

    def list(self, kind: InquiryKind) -> list[Inquiry]:
        """All inquiries of one kind, newest first."""
        return [inquiry_from_row(kind, r) for r in self._rows.select(kind.table)]

    def list_for_review(self, kind: InquiryKind) -> list[dict[str, Any]]:
        """Inquiries as dicts; quotes carry the listing's current title when it still exists."""
        records = [inquiry.to_dict() for inquiry in self.list(kind)]
        if kind is not InquiryKind.QUOTE:
            return records
        titles: dict[str, str | None] = {}
        for record in records:
            listing_id = record.get("listing_id")
            if not listing_id:
                continue
            if listing_id not in titles:
                listing = self._rows.get(LISTING_TABLE, listing_id)
                titles[listing_id] = listing["title"] if listing else None
            if titles[listing_id]:
                record["listing_title"] = titles[listing_id]
        return records

    def delete(self, kind: InquiryKind, inquiry_id: str) -> None:
        if not self._rows.delete(kind.table, inquiry_id):
            raise NotFoundError(kind.table, inquiry_id)
        logger.info("Deleted %s inquiry %s", kind.value, inquiry_id)

    def counts(self) -> dict[str, int]:
        return {kind.value: self._rows.count(kind.table) for kind in InquiryKind}
