"""Per-page SEO overrides keyed by a fixed set of page slugs."""

from __future__ import annotations

from typing import Any

from camper_mcp.constants import SEO_PAGE_SLUGS, SEO_TABLE, SITE_NAME
from camper_mcp.data.store import RowStore, SqliteRowStore
from camper_mcp.errors import NotFoundError, ValidationError
from camper_mcp.normalization import read_text

SEO_FIELDS = ("page_title", "meta_description", "og_title", "og_description", "og_image")


def seed_seo_defaults(rows: SqliteRowStore) -> int:
    """Create an empty override row for every known slug.  Returns rows added."""
    added = 0
    for slug in SEO_PAGE_SLUGS:
        if rows.insert_if_absent(SEO_TABLE, "page_slug", {"page_slug": slug}):
            added += 1
    return added


class SeoStore:
    def __init__(self, rows: RowStore) -> None:
        self._rows = rows

    def _row(self, slug: str) -> dict[str, Any]:
        if slug not in SEO_PAGE_SLUGS:
            raise ValidationError(
                f"Unknown page slug '{slug}'. Must be one of: {', '.join(SEO_PAGE_SLUGS)}.",
                field="page_slug",
            )
        matches = self._rows.select(SEO_TABLE, where={"page_slug": slug}, limit=1)
        if not matches:
            raise NotFoundError(SEO_TABLE, slug)
        return matches[0]

    def get(self, slug: str) -> dict[str, Any]:
        return self._row(slug)

    def list(self) -> list[dict[str, Any]]:
        """All overrides, ordered by slug."""
        return sorted(self._rows.select(SEO_TABLE), key=lambda r: r["page_slug"])

    def update(self, slug: str, fields: dict[str, Any]) -> dict[str, Any]:
        unknown = set(fields) - set(SEO_FIELDS)
        if unknown:
            raise ValidationError(
                f"Unknown SEO field(s): {', '.join(sorted(unknown))}.",
                field=sorted(unknown)[0],
            )
        row = self._row(slug)
        cleaned = {name: read_text(fields, name) for name in fields}
        updated = self._rows.update(SEO_TABLE, row["id"], cleaned)
        if updated is None:
            raise NotFoundError(SEO_TABLE, slug)
        return updated

    def resolve(
        self,
        slug: str,
        *,
        fallback_title: str = "",
        fallback_description: str = "",
    ) -> dict[str, str]:
        """Effective head metadata for a page: override, else fallback, else site name."""
        try:
            row = self._row(slug)
        except (NotFoundError, ValidationError):
            row = {}
        title = row.get("page_title") or fallback_title or SITE_NAME
        description = row.get("meta_description") or fallback_description or ""
        return {
            "title": title,
            "description": description,
            "og_title": row.get("og_title") or title,
            "og_description": row.get("og_description") or description,
            "og_image": row.get("og_image") or "",
        }
