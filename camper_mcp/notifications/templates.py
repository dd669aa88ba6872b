"""Operator e-mail templates, one per inquiry kind.  Pure functions, no I/O."""

from __future__ import annotations

from dataclasses import dataclass
from html import escape
from typing import Mapping

from camper_mcp.errors import DispatchError

# (data key, Dutch label) in display order.  A row is rendered only when the
# key is present and non-blank.
_CONTACT_ROWS = (("name", "Naam"), ("email", "E-mail"), ("phone", "Telefoon"))

QUOTE_ROWS = (*_CONTACT_ROWS, ("motorhome", "Motorhome"), ("message", "Bericht"))

CONTACT_ROWS = (*_CONTACT_ROWS, ("subject", "Onderwerp"), ("message", "Bericht"))

PURCHASE_ROWS = (
    *_CONTACT_ROWS,
    ("brand", "Merk"),
    ("model", "Model"),
    ("year", "Bouwjaar"),
    ("motor", "Motor"),
    ("transmission", "Transmissie"),
    ("mileage", "Kilometerstand"),
    ("first_registration", "1ste inschrijving"),
    ("horsepower", "Vermogen (PK)"),
    ("fuel_type", "Brandstof"),
    ("length_m", "Lengte (m)"),
    ("sleeps", "Slaapplaatsen"),
    ("options", "Opties"),
    ("damage", "Schade"),
    ("immediately_available", "Onmiddellijk leverbaar"),
    ("description", "Beschrijving"),
    ("message", "Extra bericht"),
)

MONTAGE_ROWS = (
    *_CONTACT_ROWS,
    ("service_type", "Type dienst"),
    ("preferred_date", "Voorkeursdatum"),
    ("preferred_time", "Voorkeurstijd"),
    ("motorhome_info", "Motorhome info"),
    ("message", "Bericht"),
)


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    html: str


def _render_rows(rows: tuple[tuple[str, str], ...], data: Mapping[str, str]) -> list[str]:
    lines = []
    for key, label in rows:
        value = str(data.get(key) or "").strip()
        if value:
            lines.append(f"<p><strong>{label}:</strong> {escape(value)}</p>")
    return lines


def _compose(heading: str, rows: tuple[tuple[str, str], ...], data: Mapping[str, str]) -> str:
    return "\n".join([f"<h2>{heading}</h2>", *_render_rows(rows, data)])


def render(kind: str, data: Mapping[str, str]) -> RenderedEmail:
    """Map an inquiry kind plus its present fields to subject and HTML body.

    Raises ``DispatchError`` for an unknown kind.
    """
    name = str(data.get("name") or "").strip()
    match kind:
        case "quote":
            return RenderedEmail(
                subject=f"Nieuwe offerte-aanvraag van {name}",
                html=_compose("Nieuwe offerte-aanvraag", QUOTE_ROWS, data),
            )
        case "contact":
            return RenderedEmail(
                subject=f"Nieuw contactbericht van {name}",
                html=_compose("Nieuw contactbericht", CONTACT_ROWS, data),
            )
        case "purchase":
            return RenderedEmail(
                subject=f"Nieuwe aankoopaanvraag van {name}",
                html=_compose("Nieuwe aankoopaanvraag (camper verkoop)", PURCHASE_ROWS, data),
            )
        case "montage":
            return RenderedEmail(
                subject=f"Nieuwe montage-afspraak van {name}",
                html=_compose("Nieuwe montage-afspraak", MONTAGE_ROWS, data),
            )
        case _:
            raise DispatchError(
                f"Unknown notification type '{kind}'.",
                code="UNKNOWN_TYPE",
            )
