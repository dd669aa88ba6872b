"""Inquiry sum type — one frozen dataclass per kind of customer request.

Every kind shares the base contact fields; each adds its own payload and its
own required-field policy.  ``parse_inquiry`` and ``inquiry_from_row`` are the
single exhaustive dispatch points over :class:`InquiryKind`.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from datetime import date
from enum import Enum
from typing import Any, Callable, ClassVar, Union

from camper_mcp.constants import (
    AVAILABILITY_ANSWERS,
    MIN_PURCHASE_YEAR,
    SERVICE_TYPES,
    TRANSMISSIONS,
)
from camper_mcp.errors import ValidationError
from camper_mcp.normalization import (
    normalize_fuel_type,
    read_choice,
    read_decimal,
    read_email,
    read_int,
    read_text,
    require_text,
)


class InquiryKind(str, Enum):
    QUOTE = "quote"
    CONTACT = "contact"
    PURCHASE = "purchase"
    MONTAGE = "montage"

    @property
    def table(self) -> str:
        return INQUIRY_TABLES[self]

    @classmethod
    def parse(cls, raw: Any) -> InquiryKind:
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            kinds = ", ".join(k.value for k in cls)
            raise ValidationError(
                f"Unknown inquiry kind '{raw}'. Must be one of: {kinds}.",
                field="kind",
            ) from None


INQUIRY_TABLES: dict[InquiryKind, str] = {
    InquiryKind.QUOTE: "quote_requests",
    InquiryKind.CONTACT: "contact_messages",
    InquiryKind.PURCHASE: "purchase_requests",
    InquiryKind.MONTAGE: "montage_appointments",
}

_BOOKKEEPING = ("id", "created_at")


@dataclass(frozen=True, kw_only=True)
class BaseInquiry:
    name: str
    email: str
    phone: str | None = None
    message: str | None = None
    id: str = ""
    created_at: str = ""

    kind: ClassVar[InquiryKind]

    def to_row(self) -> dict[str, Any]:
        """Column values for insertion; ``id`` and ``created_at`` are store-assigned."""
        return {k: v for k, v in asdict(self).items() if k not in _BOOKKEEPING}

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, **asdict(self)}

    def notification_data(self) -> dict[str, str]:
        """Present fields rendered as strings; absent fields are left out entirely."""
        return {
            k: _as_text(v)
            for k, v in asdict(self).items()
            if k not in _BOOKKEEPING and v is not None and _as_text(v) != ""
        }


def _as_text(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


@dataclass(frozen=True, kw_only=True)
class QuoteInquiry(BaseInquiry):
    """Price quote for one catalogue listing."""
    phone: str
    message: str
    listing_id: str | None
    listing_title: str | None = None

    kind = InquiryKind.QUOTE

    def notification_data(self) -> dict[str, str]:
        data = super().notification_data()
        data.pop("listing_id", None)
        title = data.pop("listing_title", None)
        if title:
            data["motorhome"] = title
        return data


@dataclass(frozen=True, kw_only=True)
class ContactInquiry(BaseInquiry):
    message: str
    subject: str | None = None

    kind = InquiryKind.CONTACT


@dataclass(frozen=True, kw_only=True)
class PurchaseInquiry(BaseInquiry):
    """Sell-us-your-motorhome request describing the customer's vehicle."""
    brand: str
    model: str
    year: int | None = None
    motor: str | None = None
    transmission: str | None = None
    mileage: int | None = None
    first_registration: str | None = None
    horsepower: int | None = None
    fuel_type: str | None = None
    length_m: float | None = None
    sleeps: int | None = None
    options: str | None = None
    damage: str | None = None
    immediately_available: str | None = None
    description: str | None = None

    kind = InquiryKind.PURCHASE


@dataclass(frozen=True, kw_only=True)
class MontageInquiry(BaseInquiry):
    """Installation/service appointment request."""
    phone: str
    service_type: str
    motorhome_info: str | None = None
    preferred_date: str | None = None
    preferred_time: str | None = None

    kind = InquiryKind.MONTAGE


Inquiry = Union[QuoteInquiry, ContactInquiry, PurchaseInquiry, MontageInquiry]

# Resolves a listing id to its current title, or None when it does not exist.
ListingTitleLookup = Callable[[str], Union[str, None]]


# ── Parsing ────────────────────────────────────────────────────────


def _read_preferred_date(payload: dict[str, Any]) -> str | None:
    raw = read_text(payload, "preferred_date")
    if raw is None:
        return None
    try:
        return date.fromisoformat(raw).isoformat()
    except ValueError:
        raise ValidationError(
            "'preferred_date' must be an ISO date (YYYY-MM-DD).",
            field="preferred_date",
        ) from None


def _read_preferred_time(payload: dict[str, Any]) -> str | None:
    raw = read_text(payload, "preferred_time")
    if raw is None:
        return None
    hours, sep, minutes = raw.partition(":")
    if (
        not sep
        or not (hours.isdigit() and minutes.isdigit())
        or not (0 <= int(hours) < 24 and 0 <= int(minutes) < 60)
    ):
        raise ValidationError("'preferred_time' must look like HH:MM.", field="preferred_time")
    return f"{int(hours):02d}:{int(minutes):02d}"


def _parse_quote(payload: dict[str, Any], lookup_title: ListingTitleLookup) -> QuoteInquiry:
    name = require_text(payload, "name")
    email = read_email(payload)
    phone = require_text(payload, "phone")
    message = require_text(payload, "message")
    listing_id = require_text(payload, "listing_id")
    title = lookup_title(listing_id)
    if title is None:
        raise ValidationError(
            f"Listing '{listing_id}' does not exist.",
            field="listing_id",
        )
    return QuoteInquiry(
        name=name,
        email=email,
        phone=phone,
        message=message,
        listing_id=listing_id,
        listing_title=title,
    )


def _parse_contact(payload: dict[str, Any]) -> ContactInquiry:
    name = require_text(payload, "name")
    email = read_email(payload)
    message = require_text(payload, "message")
    return ContactInquiry(
        name=name,
        email=email,
        phone=read_text(payload, "phone"),
        subject=read_text(payload, "subject"),
        message=message,
    )


def _parse_purchase(payload: dict[str, Any], today: date) -> PurchaseInquiry:
    name = require_text(payload, "name")
    email = read_email(payload)
    brand = require_text(payload, "brand")
    model = require_text(payload, "model")
    return PurchaseInquiry(
        name=name,
        email=email,
        phone=read_text(payload, "phone"),
        message=read_text(payload, "message"),
        brand=brand,
        model=model,
        year=read_int(payload, "year", minimum=MIN_PURCHASE_YEAR, maximum=today.year),
        motor=read_text(payload, "motor"),
        transmission=read_choice(payload, "transmission", sorted(TRANSMISSIONS)),
        mileage=read_int(payload, "mileage", minimum=0),
        first_registration=read_text(payload, "first_registration"),
        horsepower=read_int(payload, "horsepower", minimum=1),
        fuel_type=normalize_fuel_type(payload.get("fuel_type")),
        length_m=read_decimal(payload, "length_m", exclusive=True),
        sleeps=read_int(payload, "sleeps", minimum=1),
        options=read_text(payload, "options"),
        damage=read_text(payload, "damage"),
        immediately_available=read_choice(
            payload, "immediately_available", sorted(AVAILABILITY_ANSWERS)
        ),
        description=read_text(payload, "description"),
    )


def _parse_montage(payload: dict[str, Any]) -> MontageInquiry:
    name = require_text(payload, "name")
    email = read_email(payload)
    phone = require_text(payload, "phone")
    service_type = read_choice(payload, "service_type", SERVICE_TYPES)
    if service_type is None:
        raise ValidationError("'service_type' is required.", field="service_type")
    return MontageInquiry(
        name=name,
        email=email,
        phone=phone,
        service_type=service_type,
        motorhome_info=read_text(payload, "motorhome_info"),
        preferred_date=_read_preferred_date(payload),
        preferred_time=_read_preferred_time(payload),
        message=read_text(payload, "message"),
    )


def parse_inquiry(
    kind: InquiryKind,
    payload: dict[str, Any],
    *,
    lookup_title: ListingTitleLookup,
    today: date,
) -> Inquiry:
    """Validate an untrusted payload into the inquiry variant for ``kind``."""
    match kind:
        case InquiryKind.QUOTE:
            return _parse_quote(payload, lookup_title)
        case InquiryKind.CONTACT:
            return _parse_contact(payload)
        case InquiryKind.PURCHASE:
            return _parse_purchase(payload, today)
        case InquiryKind.MONTAGE:
            return _parse_montage(payload)
    raise ValidationError(f"Unsupported inquiry kind '{kind}'.", field="kind")


_VARIANTS: dict[InquiryKind, type[BaseInquiry]] = {
    InquiryKind.QUOTE: QuoteInquiry,
    InquiryKind.CONTACT: ContactInquiry,
    InquiryKind.PURCHASE: PurchaseInquiry,
    InquiryKind.MONTAGE: MontageInquiry,
}


def inquiry_from_row(kind: InquiryKind, row: dict[str, Any]) -> Inquiry:
    """Rebuild a persisted inquiry from its stored row."""
    cls = _VARIANTS[kind]
    names = {f.name for f in fields(cls)}
    return cls(**{k: v for k, v in row.items() if k in names})  # type: ignore[return-value]
