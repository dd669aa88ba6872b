"""Admin review surface — a session-gated proxy over listings, inquiries and SEO."""

from __future__ import annotations

from typing import Any

from camper_mcp.admin.session import SessionGate
from camper_mcp.data.listings import Listing, ListingStore
from camper_mcp.data.seo import SeoStore
from camper_mcp.data.store import RowStore
from camper_mcp.inquiries.models import InquiryKind
from camper_mcp.inquiries.repository import InquiryRepository


class AdminReviewSurface:
    """Every operation re-checks the gate and raises ``UnauthorizedError`` without a session.

    The gate is also checked on construction, mirroring the console's
    check-on-mount.
    """

    def __init__(self, gate: SessionGate, rows: RowStore) -> None:
        self._gate = gate
        self._gate.require()
        self._listings = ListingStore(rows)
        self._inquiries = InquiryRepository(rows)
        self._seo = SeoStore(rows)

    # ── Inquiries ──────────────────────────────────────────────────

    def list_inquiries(self, kind: InquiryKind | str) -> list[dict[str, Any]]:
        self._gate.require()
        return self._inquiries.list_for_review(_kind(kind))

    def delete_inquiry(self, kind: InquiryKind | str, inquiry_id: str) -> None:
        self._gate.require()
        self._inquiries.delete(_kind(kind), inquiry_id)

    def inquiry_counts(self) -> dict[str, int]:
        self._gate.require()
        return self._inquiries.counts()

    # ── Listings ───────────────────────────────────────────────────

    def create_listing(self, fields: dict[str, Any]) -> Listing:
        self._gate.require()
        return self._listings.create(fields)

    def update_listing(self, listing_id: str, fields: dict[str, Any]) -> Listing:
        self._gate.require()
        return self._listings.update(listing_id, fields)

    def set_listing_status(self, listing_id: str, status: str) -> Listing:
        self._gate.require()
        return self._listings.set_status(listing_id, status)

    def delete_listing(self, listing_id: str) -> None:
        """Delete a listing.  Quotes referencing it keep their title snapshot."""
        self._gate.require()
        self._listings.delete(listing_id)

    def get_listing(self, listing_id: str) -> Listing | None:
        self._gate.require()
        return self._listings.get(listing_id)

    def list_listings(self, *, status: str | None = None) -> list[Listing]:
        self._gate.require()
        return self._listings.list(status=status)

    # ── SEO ────────────────────────────────────────────────────────

    def list_seo(self) -> list[dict[str, Any]]:
        self._gate.require()
        return self._seo.list()

    def update_seo(self, slug: str, fields: dict[str, Any]) -> dict[str, Any]:
        self._gate.require()
        return self._seo.update(slug, fields)


def _kind(kind: InquiryKind | str) -> InquiryKind:
    return kind if isinstance(kind, InquiryKind) else InquiryKind.parse(kind)
