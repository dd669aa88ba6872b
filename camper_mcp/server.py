"""J&C Motorhomes dealer desk — FastMCP entry point.

Public tools cover the listing catalogue and the four inquiry forms; admin
tools are gated by a session opened with ``admin_sign_in``.
"""

from __future__ import annotations

import logging

from mcp.server.fastmcp import FastMCP

from camper_mcp.admin.review import AdminReviewSurface
from camper_mcp.admin.session import (
    SessionVerifier,
    SupabaseSessionVerifier,
    get_session_gate,
)
from camper_mcp.config import Settings, load_env_file
from camper_mcp.data.catalogue import get_store
from camper_mcp.errors import UnauthorizedError, log_and_return_tool_error
from camper_mcp.tools.admin import (
    REAUTH_MESSAGE,
    admin_list_listings_impl,
    admin_sign_in_impl,
    admin_sign_out_impl,
    create_listing_impl,
    delete_inquiry_impl,
    delete_listing_impl,
    inquiry_counts_impl,
    list_inquiries_impl,
    list_seo_impl,
    set_listing_status_impl,
    update_listing_impl,
    update_seo_impl,
)
from camper_mcp.tools.catalogue import (
    get_listing_impl,
    get_page_seo_impl,
    list_listings_impl,
    list_service_types_impl,
)
from camper_mcp.tools.intake import (
    book_montage_impl,
    offer_motorhome_for_sale_impl,
    request_quote_impl,
    send_contact_message_impl,
)

load_env_file()

mcp = FastMCP("JCMotorhomes")
logger = logging.getLogger(__name__)

_verifier_override: SessionVerifier | None = None


def set_session_verifier(verifier: SessionVerifier | None) -> None:
    """Inject a session verifier for testing."""
    global _verifier_override  # noqa: PLW0603
    _verifier_override = verifier


def _get_verifier() -> SessionVerifier:
    if _verifier_override is not None:
        return _verifier_override
    return SupabaseSessionVerifier(Settings.from_env())


def _admin_surface() -> AdminReviewSurface:
    return AdminReviewSurface(get_session_gate(), get_store())


# ── Public catalogue ───────────────────────────────────────────────


@mcp.tool()
def list_listings(status: str = "", limit: int = 0) -> str:
    """List motorhomes in the catalogue, newest first. Optional status filter and limit (0 = all)."""
    try:
        return list_listings_impl(status=status, limit=limit)
    except Exception as exc:
        return log_and_return_tool_error(
            tool_name="list_listings",
            exc=exc,
            user_message=(
                "I am having trouble loading the catalogue right now. "
                "Please try again in a moment."
            ),
        )


@mcp.tool()
def get_listing(listing_id: str) -> str:
    """Get one motorhome listing by ID."""
    try:
        return get_listing_impl(listing_id=listing_id)
    except Exception as exc:
        return log_and_return_tool_error(
            tool_name="get_listing",
            exc=exc,
            user_message=(
                "I am having trouble loading that listing right now. "
                "Please try again in a moment."
            ),
        )


@mcp.tool()
def list_service_types() -> str:
    """List the montage services that can be booked."""
    return list_service_types_impl()


@mcp.tool()
def get_page_seo(slug: str, fallback_title: str = "", fallback_description: str = "") -> str:
    """Resolve title/description/social-preview metadata for a site page."""
    try:
        return get_page_seo_impl(
            slug=slug,
            fallback_title=fallback_title,
            fallback_description=fallback_description,
        )
    except Exception as exc:
        return log_and_return_tool_error(
            tool_name="get_page_seo",
            exc=exc,
            user_message="SEO metadata is unavailable right now.",
        )


# ── Public inquiry forms ──────────────────────────────────────────


@mcp.tool()
async def request_quote(
    listing_id: str,
    name: str,
    email: str,
    phone: str,
    message: str,
) -> str:
    """Request a price quote for a motorhome in the catalogue."""
    try:
        return await request_quote_impl(
            listing_id=listing_id,
            name=name,
            email=email,
            phone=phone,
            message=message,
        )
    except Exception as exc:
        return log_and_return_tool_error(
            tool_name="request_quote",
            exc=exc,
            user_message="Er ging iets mis. Probeer het opnieuw.",
        )


@mcp.tool()
async def send_contact_message(
    name: str,
    email: str,
    message: str,
    phone: str = "",
    subject: str = "",
) -> str:
    """Send a general question to the dealership."""
    try:
        return await send_contact_message_impl(
            name=name,
            email=email,
            message=message,
            phone=phone,
            subject=subject,
        )
    except Exception as exc:
        return log_and_return_tool_error(
            tool_name="send_contact_message",
            exc=exc,
            user_message="Er ging iets mis. Probeer het opnieuw.",
        )


@mcp.tool()
async def offer_motorhome_for_sale(
    name: str,
    email: str,
    brand: str,
    model: str,
    phone: str = "",
    year: int | None = None,
    motor: str = "",
    transmission: str = "",
    mileage: int | None = None,
    first_registration: str = "",
    horsepower: int | None = None,
    fuel_type: str = "",
    length_m: float | None = None,
    sleeps: int | None = None,
    options: str = "",
    damage: str = "",
    immediately_available: str = "",
    description: str = "",
    message: str = "",
) -> str:
    """Offer your own motorhome to the dealership (we buy campers)."""
    try:
        return await offer_motorhome_for_sale_impl(
            name=name,
            email=email,
            brand=brand,
            model=model,
            phone=phone,
            year=year,
            motor=motor,
            transmission=transmission,
            mileage=mileage,
            first_registration=first_registration,
            horsepower=horsepower,
            fuel_type=fuel_type,
            length_m=length_m,
            sleeps=sleeps,
            options=options,
            damage=damage,
            immediately_available=immediately_available,
            description=description,
            message=message,
        )
    except Exception as exc:
        return log_and_return_tool_error(
            tool_name="offer_motorhome_for_sale",
            exc=exc,
            user_message="Er ging iets mis. Probeer het opnieuw.",
        )


@mcp.tool()
async def book_montage(
    name: str,
    email: str,
    phone: str,
    service_type: str,
    motorhome_info: str = "",
    preferred_date: str = "",
    preferred_time: str = "",
    message: str = "",
) -> str:
    """Book an installation appointment (solar panels, satellite, bike racks, ...)."""
    try:
        return await book_montage_impl(
            name=name,
            email=email,
            phone=phone,
            service_type=service_type,
            motorhome_info=motorhome_info,
            preferred_date=preferred_date,
            preferred_time=preferred_time,
            message=message,
        )
    except Exception as exc:
        return log_and_return_tool_error(
            tool_name="book_montage",
            exc=exc,
            user_message="Er ging iets mis. Probeer het opnieuw.",
        )


# ── Admin session ─────────────────────────────────────────────────


@mcp.tool()
async def admin_sign_in(access_token: str) -> str:
    """Open an admin session using an identity-provider access token."""
    try:
        return await admin_sign_in_impl(
            _get_verifier(),
            get_session_gate(),
            access_token=access_token,
        )
    except Exception as exc:
        return log_and_return_tool_error(
            tool_name="admin_sign_in",
            exc=exc,
            user_message="Sign-in is unavailable right now. Please try again in a moment.",
        )


@mcp.tool()
def admin_sign_out() -> str:
    """Close the admin session."""
    return admin_sign_out_impl(get_session_gate())


# ── Admin inquiries ───────────────────────────────────────────────


@mcp.tool()
def admin_list_inquiries(kind: str) -> str:
    """List inquiries of one kind (quote, contact, purchase, montage), newest first."""
    try:
        return list_inquiries_impl(_admin_surface(), kind=kind)
    except UnauthorizedError:
        return REAUTH_MESSAGE
    except Exception as exc:
        return log_and_return_tool_error(
            tool_name="admin_list_inquiries",
            exc=exc,
            user_message=(
                "I am having trouble loading inquiries right now. "
                "Please try again in a moment."
            ),
        )


@mcp.tool()
def admin_delete_inquiry(kind: str, inquiry_id: str) -> str:
    """Delete one inquiry."""
    try:
        return delete_inquiry_impl(_admin_surface(), kind=kind, inquiry_id=inquiry_id)
    except UnauthorizedError:
        return REAUTH_MESSAGE
    except Exception as exc:
        return log_and_return_tool_error(
            tool_name="admin_delete_inquiry",
            exc=exc,
            user_message=(
                "I am having trouble deleting that inquiry right now. "
                "Please try again in a moment."
            ),
        )


@mcp.tool()
def admin_inquiry_counts() -> str:
    """Count inquiries per kind."""
    try:
        return inquiry_counts_impl(_admin_surface())
    except UnauthorizedError:
        return REAUTH_MESSAGE
    except Exception as exc:
        return log_and_return_tool_error(
            tool_name="admin_inquiry_counts",
            exc=exc,
            user_message="I am having trouble counting inquiries right now.",
        )


# ── Admin listings ────────────────────────────────────────────────


@mcp.tool()
def admin_list_listings(status: str = "") -> str:
    """List all listings for management, newest first."""
    try:
        return admin_list_listings_impl(_admin_surface(), status=status)
    except UnauthorizedError:
        return REAUTH_MESSAGE
    except Exception as exc:
        return log_and_return_tool_error(
            tool_name="admin_list_listings",
            exc=exc,
            user_message="I am having trouble loading listings right now.",
        )


@mcp.tool()
def admin_create_listing(listing: dict) -> str:
    """Create a listing. 'title' is required; 'features' may be a comma-separated string."""
    try:
        return create_listing_impl(_admin_surface(), listing)
    except UnauthorizedError:
        return REAUTH_MESSAGE
    except Exception as exc:
        return log_and_return_tool_error(
            tool_name="admin_create_listing",
            exc=exc,
            user_message=(
                "I am having trouble saving that listing right now. "
                "Please try again in a moment."
            ),
        )


@mcp.tool()
def admin_update_listing(listing_id: str, fields: dict) -> str:
    """Update the given fields of a listing."""
    try:
        return update_listing_impl(_admin_surface(), listing_id=listing_id, fields=fields)
    except UnauthorizedError:
        return REAUTH_MESSAGE
    except Exception as exc:
        return log_and_return_tool_error(
            tool_name="admin_update_listing",
            exc=exc,
            user_message=(
                "I am having trouble saving that listing right now. "
                "Please try again in a moment."
            ),
        )


@mcp.tool()
def admin_set_listing_status(listing_id: str, status: str) -> str:
    """Mark a listing available, reserved or sold."""
    try:
        return set_listing_status_impl(_admin_surface(), listing_id=listing_id, status=status)
    except UnauthorizedError:
        return REAUTH_MESSAGE
    except Exception as exc:
        return log_and_return_tool_error(
            tool_name="admin_set_listing_status",
            exc=exc,
            user_message="I am having trouble updating that listing right now.",
        )


@mcp.tool()
def admin_delete_listing(listing_id: str) -> str:
    """Delete a listing. Existing quotes keep the listing title they were made for."""
    try:
        return delete_listing_impl(_admin_surface(), listing_id=listing_id)
    except UnauthorizedError:
        return REAUTH_MESSAGE
    except Exception as exc:
        return log_and_return_tool_error(
            tool_name="admin_delete_listing",
            exc=exc,
            user_message=(
                "I am having trouble deleting that listing right now. "
                "Please try again in a moment."
            ),
        )


# ── Admin SEO ─────────────────────────────────────────────────────


@mcp.tool()
def admin_list_seo() -> str:
    """List SEO overrides for every page."""
    try:
        return list_seo_impl(_admin_surface())
    except UnauthorizedError:
        return REAUTH_MESSAGE
    except Exception as exc:
        return log_and_return_tool_error(
            tool_name="admin_list_seo",
            exc=exc,
            user_message="I am having trouble loading SEO settings right now.",
        )


@mcp.tool()
def admin_update_seo(slug: str, fields: dict) -> str:
    """Update SEO overrides (page_title, meta_description, og_*) for one page."""
    try:
        return update_seo_impl(_admin_surface(), slug=slug, fields=fields)
    except UnauthorizedError:
        return REAUTH_MESSAGE
    except Exception as exc:
        return log_and_return_tool_error(
            tool_name="admin_update_seo",
            exc=exc,
            user_message="I am having trouble saving SEO settings right now.",
        )


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    mcp.run()


if __name__ == "__main__":
    main()
