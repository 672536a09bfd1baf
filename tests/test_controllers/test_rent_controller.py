"""Tests for the rent page: search fields, summary cards and notes history."""

import json
from datetime import date
from decimal import Decimal

import pytest
from conftest import rent_payload

from pgdash.api.resources import rent_api
from pgdash.controllers.rent import RentListController
from pgdash.controllers.resource_list import ViewMode


@pytest.fixture
def rent(client, test_settings) -> RentListController:
    return RentListController(rent_api(client, test_settings))


class TestRentSearch:
    async def test_matches_guest_name_due_date_and_month(self, rent, backend):
        backend.seed("payments", rent_payload("Alice Sharma", duedate="2024-07-05", month="July"))
        backend.seed("payments", rent_payload("Bharat Rao", duedate="2024-08-05", month="August"))
        await rent.load()

        assert [r.guest_name for r in rent.filter("bharat")] == ["Bharat Rao"]
        assert [r.guest_name for r in rent.filter("2024-07")] == ["Alice Sharma"]
        assert [r.guest_name for r in rent.filter("AUG")] == ["Bharat Rao"]
        assert rent.page_items == rent.filtered


class TestRentSummary:
    async def test_summary_counts_by_status(self, rent, backend):
        backend.seed("payments", rent_payload(amount=8000, status="paid", date="2024-07-02"))
        backend.seed("payments", rent_payload(amount=7000, status="pending"))
        backend.seed("payments", rent_payload(amount=6500, status="overdue"))
        backend.seed("payments", rent_payload(amount=5000, status="Awaiting_payment"))
        await rent.load()

        summary = rent.summary()

        assert summary.total_amount == Decimal("26500")
        assert summary.collected_amount == Decimal("8000")
        assert summary.pending_count == 1
        assert summary.overdue_count == 1
        assert summary.awaiting_count == 1

    async def test_summary_ignores_search(self, rent, backend):
        backend.seed("payments", rent_payload("Alice Sharma", amount=8000))
        backend.seed("payments", rent_payload("Bharat Rao", amount=7000))
        await rent.load()

        rent.filter("alice")

        assert rent.summary().total_amount == Decimal("15000")

    async def test_empty_summary(self, rent):
        summary = rent.summary()
        assert summary.total_amount == Decimal(0)
        assert summary.pending_count == 0


class TestRentUpdate:
    async def test_changed_note_is_appended_and_sent(self, rent, backend):
        record_id = backend.seed(
            "payments",
            rent_payload(notes="Reminded", notesHistory=[{"date": "2024-07-01", "note": "Reminded"}]),
        )
        await rent.load()
        rent.edit(rent.items[0])

        assert await rent.submit({**rent.draft, "notes": "Paid half", "status": "paid", "paid_date": "2024-07-06"})

        body = json.loads(backend.calls("PUT")[0].content)
        assert [entry["note"] for entry in body["notesHistory"]] == ["Reminded", "Paid half"]
        assert body["notesHistory"][-1]["date"] == date.today().isoformat()
        assert body["date"] == "2024-07-06"
        assert backend.calls("PUT")[0].url.path == f"/rent-details/{record_id}"
        assert rent.mode is ViewMode.LISTING
        assert rent.items[0].is_paid

    async def test_paid_without_date_is_rejected_locally(self, rent, backend):
        backend.seed("payments", rent_payload())
        await rent.load()
        rent.edit(rent.items[0])
        before = len(backend.requests)

        assert not await rent.submit({**rent.draft, "status": "paid"})

        assert len(backend.requests) == before
        assert rent.field_errors == {"paid_date": "Paid date is required when status is paid"}
