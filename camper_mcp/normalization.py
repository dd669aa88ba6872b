"""Shared canonical normalization for untrusted form payloads.

Imported by ``data.listings`` (admin CRUD) and
``inquiries.models`` (public submissions).  Blank input always normalizes to
``None`` ("unknown"), never to zero or the empty string.
"""

from __future__ import annotations

import math
from typing import Any, Iterable

from camper_mcp.constants import EMAIL_RE
from camper_mcp.errors import ValidationError

# Bounds of a SQLite INTEGER column.
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

FUEL_TYPE_MAP: dict[str, str] = {
    "diesel": "diesel",
    "benzine": "benzine",
    "gasoline": "benzine",
    "petrol": "benzine",
    "elektrisch": "elektrisch",
    "electric": "elektrisch",
    "hybride": "hybride",
    "hybrid": "hybride",
    "lpg": "lpg",
}


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def clean_numeric_string(raw: str) -> str:
    """Keep only digits, ``'.'``, and ``'-'``; a decimal comma becomes a dot."""
    return "".join(c for c in raw.replace(",", ".") if c.isdigit() or c in {".", "-"})


def parse_price(value: Any) -> float | None:
    """Lenient decimal parsing for form input.  ``None`` when nothing numeric remains."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            parsed = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        cleaned = clean_numeric_string(value.strip())
        if not cleaned:
            return None
        try:
            parsed = float(cleaned)
        except ValueError:
            return None
    else:
        return None
    return parsed if math.isfinite(parsed) else None


def parse_int(value: Any) -> int | None:
    """Lenient whole-number parsing; fractions are truncated."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return None
        parsed = parse_price(stripped)
        if parsed is None:
            return None
        return int(parsed)
    return None


def normalize_fuel_type(raw: str | None) -> str | None:
    """Map a raw fuel-type string to its canonical value.  ``None`` for blank."""
    if is_blank(raw):
        return None
    normalized = str(raw).strip().lower()
    return FUEL_TYPE_MAP.get(normalized, normalized)


def parse_features(raw: str | Iterable[str] | None) -> tuple[str, ...] | None:
    """Split a comma-separated tag string into an ordered tuple.

    Entries are trimmed and empty ones dropped.  An empty result is ``None``
    so "no features entered" stays distinct from a stored empty list.
    """
    if raw is None:
        return None
    if isinstance(raw, str):
        parts: Iterable[str] = raw.split(",")
    else:
        parts = (str(item) for item in raw if item is not None)
    features = tuple(part.strip() for part in parts if part and part.strip())
    return features or None


def parse_images(raw: str | Iterable[str] | None) -> tuple[str, ...]:
    """Ordered image URLs; the first one is the primary image."""
    if raw is None:
        return ()
    if isinstance(raw, str):
        raw = raw.split(",")
    urls = (str(url).strip() for url in raw if url is not None)
    return tuple(url for url in urls if url)


# ── Field readers (raise ValidationError) ──────────────────────────


def read_text(payload: dict[str, Any], field: str, *, required: bool = False) -> str | None:
    value = payload.get(field)
    if is_blank(value):
        if required:
            raise ValidationError(f"'{field}' is required.", field=field)
        return None
    return str(value).strip()


def require_text(payload: dict[str, Any], field: str) -> str:
    """Like :func:`read_text` but the field must be present and non-blank."""
    value = read_text(payload, field)
    if value is None:
        raise ValidationError(f"'{field}' is required.", field=field)
    return value


def read_email(payload: dict[str, Any], field: str = "email") -> str:
    email = require_text(payload, field)
    if not EMAIL_RE.fullmatch(email):
        raise ValidationError(f"'{field}' is not a valid e-mail address.", field=field)
    return email


def read_int(
    payload: dict[str, Any],
    field: str,
    *,
    minimum: int | None = None,
    maximum: int | None = None,
) -> int | None:
    value = payload.get(field)
    if is_blank(value):
        return None
    parsed = parse_int(value)
    if parsed is None:
        raise ValidationError(f"'{field}' must be a whole number.", field=field)
    if not INT64_MIN <= parsed <= INT64_MAX:
        raise ValidationError(f"'{field}' is out of range.", field=field)
    if minimum is not None and parsed < minimum:
        raise ValidationError(f"'{field}' must be at least {minimum}.", field=field)
    if maximum is not None and parsed > maximum:
        raise ValidationError(f"'{field}' must be at most {maximum}.", field=field)
    return parsed


def read_decimal(
    payload: dict[str, Any],
    field: str,
    *,
    minimum: float = 0.0,
    exclusive: bool = False,
) -> float | None:
    value = payload.get(field)
    if is_blank(value):
        return None
    parsed = parse_price(value)
    if parsed is None:
        raise ValidationError(f"'{field}' must be a number.", field=field)
    if parsed < minimum or (exclusive and parsed == minimum):
        bound = "greater than" if exclusive else "at least"
        raise ValidationError(f"'{field}' must be {bound} {minimum:g}.", field=field)
    return parsed


def read_choice(
    payload: dict[str, Any],
    field: str,
    choices: Iterable[str],
    *,
    required: bool = False,
) -> str | None:
    value = read_text(payload, field, required=required)
    if value is None:
        return None
    allowed = tuple(choices)
    lookup = {choice.lower(): choice for choice in allowed}
    canonical = lookup.get(value.lower())
    if canonical is None:
        raise ValidationError(
            f"'{field}' must be one of: {', '.join(allowed)}.",
            field=field,
        )
    return canonical
