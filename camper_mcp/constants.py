"""Shared constants used across the store, intake, relay and admin modules.

Single source of truth for table names, enumerations and catalogues.
"""

from __future__ import annotations

import re

SITE_NAME = "J&C Motorhomes"

LISTING_TABLE = "motorhomes"
SEO_TABLE = "seo_settings"

LISTING_STATUSES: frozenset[str] = frozenset({"available", "reserved", "sold"})
DEFAULT_LISTING_STATUS = "available"

SERVICE_TYPES: tuple[str, ...] = (
    "Zonnepanelen & energiesystemen",
    "Satelliet- & TV-installaties",
    "Fietsendragers & accessoires",
    "Alarmsystemen & beveiliging",
    "Markiezen & luifels",
    "Verwarmingssystemen",
    "Overig",
)

TRANSMISSIONS: frozenset[str] = frozenset({"automaat", "manueel"})
AVAILABILITY_ANSWERS: frozenset[str] = frozenset({"ja", "nee"})

SEO_PAGE_SLUGS: tuple[str, ...] = (
    "home",
    "motorhomes",
    "diensten",
    "contact",
    "aankoop",
    "montage",
)

MIN_PURCHASE_YEAR = 2000

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
