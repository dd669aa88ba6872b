"""Public, read-only catalogue tools."""

from __future__ import annotations

import json

from camper_mcp.constants import LISTING_STATUSES, SERVICE_TYPES
from camper_mcp.data.catalogue import get_listing_store, get_seo_store


def list_listings_impl(*, status: str = "", limit: int = 0) -> str:
    """Listings as JSON, newest first.  ``limit`` 0 means no cap."""
    wanted = status.strip().lower()
    if wanted and wanted not in LISTING_STATUSES:
        return f"Status must be one of: {', '.join(sorted(LISTING_STATUSES))}."
    if limit < 0:
        return "Limit must be zero or a positive number."
    listings = get_listing_store().list(status=wanted or None, limit=limit or None)
    return json.dumps(
        {"count": len(listings), "listings": [listing.to_dict() for listing in listings]},
        ensure_ascii=False,
    )


def get_listing_impl(*, listing_id: str) -> str:
    listing = get_listing_store().get(listing_id)
    if listing is None:
        return f"Listing with ID '{listing_id}' not found."
    return json.dumps(listing.to_dict(), ensure_ascii=False)


def list_service_types_impl() -> str:
    lines = ["Montage services:"]
    lines.extend(f"- {service}" for service in SERVICE_TYPES)
    return "\n".join(lines)


def get_page_seo_impl(
    *,
    slug: str,
    fallback_title: str = "",
    fallback_description: str = "",
) -> str:
    meta = get_seo_store().resolve(
        slug,
        fallback_title=fallback_title,
        fallback_description=fallback_description,
    )
    return json.dumps(meta, ensure_ascii=False)
