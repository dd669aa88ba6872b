"""Tests for per-page SEO overrides and head-metadata resolution."""

from __future__ import annotations

import json

import pytest

from camper_mcp.constants import SEO_PAGE_SLUGS, SITE_NAME
from camper_mcp.data.seo import SeoStore, seed_seo_defaults
from camper_mcp.data.store import SqliteRowStore
from camper_mcp.errors import ValidationError
from camper_mcp.tools.catalogue import get_page_seo_impl


@pytest.fixture()
def seo(rows: SqliteRowStore) -> SeoStore:
    return SeoStore(rows)


class TestSeeding:
    def test_every_slug_seeded_once(self, rows: SqliteRowStore, seo: SeoStore):
        assert [r["page_slug"] for r in seo.list()] == sorted(SEO_PAGE_SLUGS)
        assert seed_seo_defaults(rows) == 0


class TestUpdate:
    def test_update_and_read_back(self, seo: SeoStore):
        seo.update("contact", {"page_title": "Contacteer ons", "og_image": "og.jpg"})
        row = seo.get("contact")
        assert row["page_title"] == "Contacteer ons"
        assert row["og_image"] == "og.jpg"

    def test_blank_value_clears_override(self, seo: SeoStore):
        seo.update("home", {"page_title": "Welkom"})
        seo.update("home", {"page_title": "  "})
        assert seo.get("home")["page_title"] is None

    def test_unknown_slug(self, seo: SeoStore):
        with pytest.raises(ValidationError):
            seo.update("blog", {"page_title": "x"})

    def test_unknown_field(self, seo: SeoStore):
        with pytest.raises(ValidationError):
            seo.update("home", {"keywords": "camper"})


class TestResolve:
    def test_fallbacks_when_no_override(self, seo: SeoStore):
        meta = seo.resolve("montage", fallback_title="Montage", fallback_description="Diensten")
        assert meta == {
            "title": "Montage",
            "description": "Diensten",
            "og_title": "Montage",
            "og_description": "Diensten",
            "og_image": "",
        }

    def test_site_name_as_last_resort(self, seo: SeoStore):
        assert seo.resolve("home")["title"] == SITE_NAME

    def test_override_wins(self, seo: SeoStore):
        seo.update("home", {"page_title": "J&C | Home", "og_title": "Social"})
        meta = seo.resolve("home", fallback_title="ignored")
        assert meta["title"] == "J&C | Home"
        assert meta["og_title"] == "Social"

    def test_unknown_slug_uses_fallback(self, seo: SeoStore):
        assert seo.resolve("blog", fallback_title="Blog")["title"] == "Blog"

    def test_tool_returns_json(self, seo: SeoStore):
        seo.update("aankoop", {"meta_description": "Wij kopen uw camper"})
        meta = json.loads(get_page_seo_impl(slug="aankoop"))
        assert meta["description"] == "Wij kopen uw camper"
        assert meta["og_description"] == "Wij kopen uw camper"
