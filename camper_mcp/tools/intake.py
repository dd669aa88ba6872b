"""Public inquiry tool implementations — one per customer form."""

from __future__ import annotations

import logging
from typing import Any

from camper_mcp.data.catalogue import get_store
from camper_mcp.errors import PersistenceError, ValidationError
from camper_mcp.inquiries.intake import InquiryIntake
from camper_mcp.inquiries.models import InquiryKind
from camper_mcp.notifications.outbox import get_outbox

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Er ging iets mis. Probeer het opnieuw."

_SUCCESS_MESSAGES: dict[InquiryKind, str] = {
    InquiryKind.QUOTE: "Uw offerte-aanvraag is verstuurd!",
    InquiryKind.CONTACT: "Uw bericht is verstuurd! Wij nemen zo snel mogelijk contact op.",
    InquiryKind.PURCHASE: "Uw aanvraag is verstuurd! Wij nemen zo snel mogelijk contact op.",
    InquiryKind.MONTAGE: "Uw afspraak is aangevraagd! Wij bevestigen zo snel mogelijk.",
}


def _compact(payload: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in payload.items() if v is not None}


async def submit_inquiry_impl(kind: str, payload: dict[str, Any]) -> str:
    """Submit one inquiry.  The caller only learns success or a generic failure."""
    intake = InquiryIntake(get_store(), get_outbox())
    try:
        ack = await intake.submit(kind, _compact(payload))
    except ValidationError as exc:
        logger.info("Rejected %s inquiry (field %s): %s", kind, exc.field or "-", exc)
        return GENERIC_FAILURE_MESSAGE
    except PersistenceError:
        logger.exception("Could not persist %s inquiry", kind)
        return GENERIC_FAILURE_MESSAGE
    return f"{_SUCCESS_MESSAGES[ack.kind]} (referentie {ack.inquiry_id})"


async def request_quote_impl(
    *,
    listing_id: str,
    name: str,
    email: str,
    phone: str,
    message: str,
) -> str:
    return await submit_inquiry_impl(
        InquiryKind.QUOTE.value,
        {
            "listing_id": listing_id,
            "name": name,
            "email": email,
            "phone": phone,
            "message": message,
        },
    )


async def send_contact_message_impl(
    *,
    name: str,
    email: str,
    message: str,
    phone: str = "",
    subject: str = "",
) -> str:
    return await submit_inquiry_impl(
        InquiryKind.CONTACT.value,
        {"name": name, "email": email, "phone": phone, "subject": subject, "message": message},
    )


async def offer_motorhome_for_sale_impl(
    *,
    name: str,
    email: str,
    brand: str,
    model: str,
    **details: Any,
) -> str:
    """Purchase request; ``details`` carries the optional vehicle description fields."""
    return await submit_inquiry_impl(
        InquiryKind.PURCHASE.value,
        {"name": name, "email": email, "brand": brand, "model": model, **details},
    )


async def book_montage_impl(
    *,
    name: str,
    email: str,
    phone: str,
    service_type: str,
    motorhome_info: str = "",
    preferred_date: str = "",
    preferred_time: str = "",
    message: str = "",
) -> str:
    return await submit_inquiry_impl(
        InquiryKind.MONTAGE.value,
        {
            "name": name,
            "email": email,
            "phone": phone,
            "service_type": service_type,
            "motorhome_info": motorhome_info,
            "preferred_date": preferred_date,
            "preferred_time": preferred_time,
            "message": message,
        },
    )
