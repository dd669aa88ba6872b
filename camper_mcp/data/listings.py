"""Listing catalogue: the motorhomes offered for sale."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from camper_mcp.constants import DEFAULT_LISTING_STATUS, LISTING_STATUSES, LISTING_TABLE
from camper_mcp.data.store import RowStore
from camper_mcp.errors import NotFoundError, ValidationError
from camper_mcp.normalization import (
    is_blank,
    normalize_fuel_type,
    parse_features,
    parse_images,
    read_decimal,
    read_int,
    read_text,
    require_text,
)

logger = logging.getLogger(__name__)

# Fields an operator may set; everything except ``title`` is optional.
LISTING_FIELDS = (
    "title", "description", "price", "year", "brand", "model", "mileage",
    "fuel_type", "length_m", "sleeps", "images", "features", "status",
)


@dataclass(frozen=True)
class Listing:
    """A motorhome for sale.  ``None`` on any attribute means unknown."""
    id: str
    title: str
    created_at: str
    status: str = DEFAULT_LISTING_STATUS
    description: str | None = None
    price: float | None = None
    year: int | None = None
    brand: str | None = None
    model: str | None = None
    mileage: int | None = None
    fuel_type: str | None = None
    length_m: float | None = None
    sleeps: int | None = None
    images: tuple[str, ...] = field(default_factory=tuple)
    features: tuple[str, ...] | None = None

    @property
    def primary_image(self) -> str | None:
        return self.images[0] if self.images else None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> Listing:
        features = row.get("features")
        return cls(
            id=row["id"],
            title=row["title"],
            created_at=row["created_at"],
            status=row.get("status") or DEFAULT_LISTING_STATUS,
            description=row.get("description"),
            price=row.get("price"),
            year=row.get("year"),
            brand=row.get("brand"),
            model=row.get("model"),
            mileage=row.get("mileage"),
            fuel_type=row.get("fuel_type"),
            length_m=row.get("length_m"),
            sleeps=row.get("sleeps"),
            images=tuple(row.get("images") or ()),
            features=tuple(features) if features else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "price": self.price,
            "year": self.year,
            "brand": self.brand,
            "model": self.model,
            "mileage": self.mileage,
            "fuel_type": self.fuel_type,
            "length_m": self.length_m,
            "sleeps": self.sleeps,
            "images": list(self.images),
            "features": list(self.features) if self.features is not None else None,
            "status": self.status,
            "created_at": self.created_at,
        }


def _validate_status(raw: Any) -> str:
    status = str(raw).strip().lower() if not is_blank(raw) else ""
    if status not in LISTING_STATUSES:
        raise ValidationError(
            f"'status' must be one of: {', '.join(sorted(LISTING_STATUSES))}.",
            field="status",
        )
    return status


def normalize_listing_fields(fields: dict[str, Any], *, partial: bool) -> dict[str, Any]:
    """Validate operator input and coerce blanks to ``None``.

    With ``partial`` only the supplied keys are returned (update semantics);
    otherwise every column is filled in (create semantics).
    """
    unknown = set(fields) - set(LISTING_FIELDS)
    if unknown:
        raise ValidationError(
            f"Unknown listing field(s): {', '.join(sorted(unknown))}.",
            field=sorted(unknown)[0],
        )

    readers = {
        "description": lambda: read_text(fields, "description"),
        "price": lambda: read_decimal(fields, "price"),
        "year": lambda: read_int(fields, "year", minimum=1900),
        "brand": lambda: read_text(fields, "brand"),
        "model": lambda: read_text(fields, "model"),
        "mileage": lambda: read_int(fields, "mileage", minimum=0),
        "fuel_type": lambda: normalize_fuel_type(fields.get("fuel_type")),
        "length_m": lambda: read_decimal(fields, "length_m", exclusive=True),
        "sleeps": lambda: read_int(fields, "sleeps", minimum=1),
        "images": lambda: list(parse_images(fields.get("images"))),
        "features": lambda: parse_features(fields.get("features")),
    }

    normalized: dict[str, Any] = {}
    if not partial or "title" in fields:
        normalized["title"] = require_text(fields, "title")
    for name, reader in readers.items():
        if not partial or name in fields:
            normalized[name] = reader()
    if "status" in fields:
        normalized["status"] = _validate_status(fields["status"])
    elif not partial:
        normalized["status"] = DEFAULT_LISTING_STATUS
    return normalized


class ListingStore:
    """CRUD over the ``motorhomes`` table.  Last writer wins."""

    def __init__(self, rows: RowStore) -> None:
        self._rows = rows

    def create(self, fields: dict[str, Any]) -> Listing:
        row = self._rows.insert(LISTING_TABLE, normalize_listing_fields(fields, partial=False))
        listing = Listing.from_row(row)
        logger.info("Listing %s created (%s)", listing.id, listing.title)
        return listing

    def update(self, listing_id: str, fields: dict[str, Any]) -> Listing:
        normalized = normalize_listing_fields(fields, partial=True)
        row = self._rows.update(LISTING_TABLE, listing_id, normalized)
        if row is None:
            raise NotFoundError(LISTING_TABLE, listing_id)
        return Listing.from_row(row)

    def set_status(self, listing_id: str, status: str) -> Listing:
        return self.update(listing_id, {"status": status})

    def delete(self, listing_id: str) -> None:
        if not self._rows.delete(LISTING_TABLE, listing_id):
            raise NotFoundError(LISTING_TABLE, listing_id)
        logger.info("Listing %s deleted", listing_id)

    def get(self, listing_id: str) -> Listing | None:
        row = self._rows.get(LISTING_TABLE, listing_id)
        return Listing.from_row(row) if row else None

    def list(self, *, status: str | None = None, limit: int | None = None) -> list[Listing]:
        """Listings newest first, optionally filtered by status and capped at ``limit``."""
        where = {"status": _validate_status(status)} if status else None
        rows = self._rows.select(LISTING_TABLE, where=where, limit=limit)
        return [Listing.from_row(r) for r in rows]
