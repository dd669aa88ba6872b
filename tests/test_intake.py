"""Inquiry intake end-to-end: validate, persist, enqueue exactly one notification."""

from __future__ import annotations

from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest
from conftest import RecordingNotifier, live_session

from camper_mcp.admin.review import AdminReviewSurface
from camper_mcp.admin.session import SessionGate
from camper_mcp.config import Settings
from camper_mcp.data.listings import ListingStore
from camper_mcp.data.store import SqliteRowStore
from camper_mcp.errors import NotFoundError, PersistenceError, ValidationError
from camper_mcp.inquiries.intake import Acknowledgement, InquiryIntake
from camper_mcp.inquiries.models import InquiryKind
from camper_mcp.inquiries.repository import InquiryRepository
from camper_mcp.notifications.outbox import NotificationOutbox
from camper_mcp.notifications.relay import NotificationRelay
from camper_mcp.notifications.templates import render

TODAY = date.today()

# Required fields per kind, plus the optional fields a complete submission adds.
VALID_PAYLOADS: dict[InquiryKind, tuple[dict, dict]] = {
    InquiryKind.QUOTE: (
        {"listing_id": "L1", "name": "Jan", "email": "jan@x.be", "phone": "0470000000", "message": "Interesse"},
        {},
    ),
    InquiryKind.CONTACT: (
        {"name": "An", "email": "an@x.be", "message": "Zijn jullie open op zaterdag?"},
        {"phone": "0471000000", "subject": "Openingsuren"},
    ),
    InquiryKind.PURCHASE: (
        {"name": "Piet", "email": "piet@x.be", "brand": "Hymer", "model": "B 678"},
        {
            "year": 2018,
            "motor": "2.3 Multijet",
            "transmission": "manueel",
            "mileage": 85000,
            "horsepower": 150,
            "fuel_type": "diesel",
            "sleeps": 4,
            "immediately_available": "ja",
        },
    ),
    InquiryKind.MONTAGE: (
        {"name": "Els", "email": "els@x.be", "phone": "0472000000", "service_type": "Markiezen & luifels"},
        {"preferred_date": "2026-11-03", "preferred_time": "10:30", "motorhome_info": "Knaus Sky TI"},
    ),
}

OPTIONAL_FIELDS: dict[InquiryKind, tuple[str, ...]] = {
    InquiryKind.QUOTE: (),
    InquiryKind.CONTACT: ("phone", "subject"),
    InquiryKind.PURCHASE: (
        "phone", "message", "year", "motor", "transmission", "mileage",
        "first_registration", "horsepower", "fuel_type", "length_m", "sleeps",
        "options", "damage", "immediately_available", "description",
    ),
    InquiryKind.MONTAGE: ("motorhome_info", "preferred_date", "preferred_time", "message"),
}


@pytest.fixture(autouse=True)
def _listing_l1(rows: SqliteRowStore):
    rows.insert("motorhomes", {"title": "Hymer B 678 DL", "price": 64900.0}, record_id="L1")


@pytest.fixture()
def intake(rows: SqliteRowStore, outbox: NotificationOutbox) -> InquiryIntake:
    return InquiryIntake(rows, outbox)


class TestValidSubmissions:
    @pytest.mark.parametrize("kind", list(InquiryKind))
    async def test_one_row_one_dispatch(self, kind, intake, rows, outbox, notifier):
        required, optional = VALID_PAYLOADS[kind]

        ack = await intake.submit(kind, {**required, **optional})
        await outbox.drain()

        assert isinstance(ack, Acknowledgement)
        assert ack.kind is kind
        assert rows.count(kind.table) == 1
        assert len(notifier.calls) == 1
        sent_kind, data = notifier.calls[0]
        assert sent_kind == kind.value

        for field, value in optional.items():
            assert data[field] == str(value)
        for field in OPTIONAL_FIELDS[kind]:
            if field not in optional:
                assert field not in data

    @pytest.mark.parametrize("kind", list(InquiryKind))
    async def test_body_contains_present_fields_only(self, kind, intake, outbox, notifier):
        required, optional = VALID_PAYLOADS[kind]
        await intake.submit(kind, {**required, **optional})
        await outbox.drain()

        html = render(*notifier.calls[0]).html
        for value in optional.values():
            assert str(value) in html

    async def test_kind_given_as_string(self, intake, rows, outbox):
        required, _ = VALID_PAYLOADS[InquiryKind.CONTACT]
        ack = await intake.submit("contact", required)
        await outbox.drain()
        assert ack.kind is InquiryKind.CONTACT
        assert rows.get("contact_messages", ack.inquiry_id) is not None


class TestRejectedSubmissions:
    @pytest.mark.parametrize(
        ("kind", "field"),
        [(kind, field) for kind, (required, _) in VALID_PAYLOADS.items() for field in required],
    )
    async def test_missing_required_field(self, kind, field, intake, rows, outbox, notifier):
        required, optional = VALID_PAYLOADS[kind]
        payload = {**required, **optional}
        del payload[field]

        with pytest.raises(ValidationError):
            await intake.submit(kind, payload)
        await outbox.drain()

        assert rows.count(kind.table) == 0
        assert notifier.calls == []

    @pytest.mark.parametrize(
        ("field", "value"),
        [("mileage", "9" * 400), ("mileage", 10**30), ("horsepower", 10**19), ("length_m", "9" * 400)],
    )
    async def test_oversized_number_rejected(self, field, value, intake, rows, outbox, notifier):
        required, _ = VALID_PAYLOADS[InquiryKind.PURCHASE]

        with pytest.raises(ValidationError) as info:
            await intake.submit(InquiryKind.PURCHASE, {**required, field: value})
        await outbox.drain()

        assert info.value.field == field
        assert rows.count("purchase_requests") == 0
        assert notifier.calls == []

    async def test_unknown_kind(self, intake):
        with pytest.raises(ValidationError):
            await intake.submit("complaint", {"name": "X"})

    async def test_payload_must_be_mapping(self, intake):
        with pytest.raises(ValidationError):
            await intake.submit("contact", ["not", "a", "dict"])

    async def test_quote_for_unknown_listing(self, intake, rows, notifier):
        required, _ = VALID_PAYLOADS[InquiryKind.QUOTE]
        with pytest.raises(ValidationError):
            await intake.submit(InquiryKind.QUOTE, {**required, "listing_id": "ghost"})
        assert rows.count("quote_requests") == 0
        assert notifier.calls == []

    async def test_persistence_failure_propagates_without_dispatch(self, outbox, notifier):
        broken = MagicMock(wraps=SqliteRowStore(":memory:"))
        broken.insert.side_effect = PersistenceError("disk full")
        intake = InquiryIntake(broken, outbox)
        required, _ = VALID_PAYLOADS[InquiryKind.CONTACT]

        with pytest.raises(PersistenceError):
            await intake.submit(InquiryKind.CONTACT, required)
        await outbox.drain()
        assert notifier.calls == []


class TestPurchaseYearPolicy:
    @pytest.mark.parametrize("year", [2000, TODAY.year])
    async def test_boundary_years_accepted(self, year, intake, rows, outbox):
        required, _ = VALID_PAYLOADS[InquiryKind.PURCHASE]
        ack = await intake.submit(InquiryKind.PURCHASE, {**required, "year": year})
        await outbox.drain()
        stored = InquiryRepository(rows).get(InquiryKind.PURCHASE, ack.inquiry_id)
        assert stored.year == year

    async def test_1999_rejected(self, intake, rows):
        required, _ = VALID_PAYLOADS[InquiryKind.PURCHASE]
        with pytest.raises(ValidationError) as info:
            await intake.submit(InquiryKind.PURCHASE, {**required, "year": 1999})
        assert info.value.field == "year"
        assert rows.count("purchase_requests") == 0

    async def test_missing_year_stays_absent(self, intake, rows, outbox):
        required, _ = VALID_PAYLOADS[InquiryKind.PURCHASE]
        ack = await intake.submit(InquiryKind.PURCHASE, required)
        await outbox.drain()
        assert rows.get("purchase_requests", ack.inquiry_id)["year"] is None

    async def test_injected_clock_bounds_the_year(self, rows, outbox):
        intake = InquiryIntake(rows, outbox, today=lambda: date(2024, 6, 1))
        required, _ = VALID_PAYLOADS[InquiryKind.PURCHASE]
        with pytest.raises(ValidationError):
            await intake.submit(InquiryKind.PURCHASE, {**required, "year": 2025})


class TestQuoteScenario:
    async def test_quote_for_l1_reaches_operator(self, rows):
        client = AsyncMock()
        client.__aenter__ = AsyncMock(return_value=client)
        client.__aexit__ = AsyncMock(return_value=False)
        client.send_email = AsyncMock(return_value="msg-42")
        relay = NotificationRelay(
            Settings(db_path=":memory:", resend_api_key="re_test"),
            client_factory=MagicMock(return_value=client),
        )
        outbox = NotificationOutbox(relay)
        intake = InquiryIntake(rows, outbox)

        ack = await intake.submit(
            "quote",
            {"name": "Jan", "email": "jan@x.be", "phone": "0470000000", "message": "Interesse", "listing_id": "L1"},
        )
        await outbox.drain()

        stored = rows.get("quote_requests", ack.inquiry_id)
        assert stored["listing_id"] == "L1"
        assert rows.count("quote_requests") == 1

        client.send_email.assert_awaited_once()
        sent = client.send_email.call_args.kwargs
        assert "Jan" in sent["subject"]
        assert "Interesse" in sent["html"]
        assert "Hymer B 678 DL" in sent["html"]

    @pytest.mark.parametrize(
        "failing",
        [RecordingNotifier(raises=RuntimeError("relay exploded")), RecordingNotifier(ok=False)],
    )
    async def test_relay_failure_does_not_affect_submission(self, rows, failing):
        outbox = NotificationOutbox(failing)
        intake = InquiryIntake(rows, outbox)
        required, _ = VALID_PAYLOADS[InquiryKind.QUOTE]

        ack = await intake.submit(InquiryKind.QUOTE, required)
        await outbox.drain()

        assert ack.inquiry_id
        gate = SessionGate(live_session())
        listed = AdminReviewSurface(gate, rows).list_inquiries("quote")
        assert [record["id"] for record in listed] == [ack.inquiry_id]


class TestDeletionAndRoundTrip:
    def test_delete_unknown_inquiry(self, rows):
        with pytest.raises(NotFoundError):
            InquiryRepository(rows).delete(InquiryKind.MONTAGE, "nope")

    def test_delete_unknown_listing(self, rows):
        with pytest.raises(NotFoundError):
            ListingStore(rows).delete("nope")

    def test_features_round_trip(self, rows):
        listings = ListingStore(rows)
        listing = listings.create({"title": "Adria Coral", "features": "Airco, Zonnepaneel"})
        assert list(listings.get(listing.id).features) == ["Airco", "Zonnepaneel"]
        assert rows.get("motorhomes", listing.id)["features"] == ["Airco", "Zonnepaneel"]

        listings.update(listing.id, {"features": ""})
        assert listings.get(listing.id).features is None
        assert rows.get("motorhomes", listing.id)["features"] is None
