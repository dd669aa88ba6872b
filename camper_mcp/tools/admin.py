"""Admin console tool implementations — session handling, listings, inquiries, SEO.

Every impl except sign-in/out takes an :class:`AdminReviewSurface`; building
one already requires a live session.  ``UnauthorizedError`` is left to the
server wrapper, which answers with a re-authentication prompt.
"""

from __future__ import annotations

import json
from typing import Any

from camper_mcp.admin.review import AdminReviewSurface
from camper_mcp.admin.session import SessionGate, SessionVerifier
from camper_mcp.clients.supabase_auth import SupabaseAuthError
from camper_mcp.errors import NotFoundError, ValidationError

REAUTH_MESSAGE = "Your admin session is missing or expired. Please sign in again."


# ── Session ────────────────────────────────────────────────────────


async def admin_sign_in_impl(
    verifier: SessionVerifier,
    gate: SessionGate,
    *,
    access_token: str,
) -> str:
    """Verify a token with the identity provider and open the admin session."""
    if not access_token or not access_token.strip():
        return "Error: access_token is required."
    try:
        session = await verifier.verify(access_token)
    except SupabaseAuthError as exc:
        return f"Sign-in is unavailable right now ({exc.code})."
    if session is None:
        gate.on_session_change(None)
        return "Sign-in failed: the access token was rejected."
    gate.on_session_change(session)
    return f"Signed in as {session.email or session.user_id} until {session.expires_at.isoformat()}."


def admin_sign_out_impl(gate: SessionGate) -> str:
    gate.on_session_change(None)
    return "Signed out."


# ── Inquiries ──────────────────────────────────────────────────────


def list_inquiries_impl(surface: AdminReviewSurface, *, kind: str) -> str:
    try:
        records = surface.list_inquiries(kind)
    except ValidationError as exc:
        return str(exc)
    return json.dumps({"kind": kind, "count": len(records), "inquiries": records}, ensure_ascii=False)


def delete_inquiry_impl(surface: AdminReviewSurface, *, kind: str, inquiry_id: str) -> str:
    try:
        surface.delete_inquiry(kind, inquiry_id)
    except ValidationError as exc:
        return str(exc)
    except NotFoundError:
        return f"Inquiry {inquiry_id} not found — nothing to delete."
    return f"Inquiry {inquiry_id} deleted."


def inquiry_counts_impl(surface: AdminReviewSurface) -> str:
    counts = surface.inquiry_counts()
    lines = ["Inquiries on file:"]
    lines.extend(f"- {kind}: {count}" for kind, count in counts.items())
    return "\n".join(lines)


# ── Listings ───────────────────────────────────────────────────────


def create_listing_impl(surface: AdminReviewSurface, fields: Any) -> str:
    if not isinstance(fields, dict):
        return "Error: listing payload must be a dict."
    try:
        listing = surface.create_listing(fields)
    except ValidationError as exc:
        return f"Listing not saved: {exc}"
    return f"Listing {listing.id} created ({listing.title})."


def update_listing_impl(surface: AdminReviewSurface, *, listing_id: str, fields: Any) -> str:
    if not isinstance(fields, dict):
        return "Error: listing payload must be a dict."
    try:
        listing = surface.update_listing(listing_id, fields)
    except ValidationError as exc:
        return f"Listing not saved: {exc}"
    except NotFoundError:
        return f"Listing with ID '{listing_id}' not found."
    return f"Listing {listing.id} updated."


def set_listing_status_impl(surface: AdminReviewSurface, *, listing_id: str, status: str) -> str:
    try:
        listing = surface.set_listing_status(listing_id, status)
    except ValidationError as exc:
        return str(exc)
    except NotFoundError:
        return f"Listing with ID '{listing_id}' not found."
    return f"Listing {listing.id} is now '{listing.status}'."


def delete_listing_impl(surface: AdminReviewSurface, *, listing_id: str) -> str:
    try:
        surface.delete_listing(listing_id)
    except NotFoundError:
        return f"Listing {listing_id} not found — nothing to delete."
    return f"Listing {listing_id} deleted."


def admin_list_listings_impl(surface: AdminReviewSurface, *, status: str = "") -> str:
    try:
        listings = surface.list_listings(status=status.strip() or None)
    except ValidationError as exc:
        return str(exc)
    return json.dumps(
        {"count": len(listings), "listings": [listing.to_dict() for listing in listings]},
        ensure_ascii=False,
    )


# ── SEO ────────────────────────────────────────────────────────────


def list_seo_impl(surface: AdminReviewSurface) -> str:
    return json.dumps({"pages": surface.list_seo()}, ensure_ascii=False)


def update_seo_impl(surface: AdminReviewSurface, *, slug: str, fields: Any) -> str:
    if not isinstance(fields, dict):
        return "Error: SEO payload must be a dict."
    try:
        surface.update_seo(slug, fields)
    except (ValidationError, NotFoundError) as exc:
        return str(exc)
    return f"SEO settings for '{slug}' saved."
