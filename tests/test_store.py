"""
Tests for the tabular store client.

Run with: pytest tests/test_store.py -v
"""

import uuid
from datetime import date, datetime

import pytest

from federaltalks.services.errors import StoreError


class TestInsertSelect:

    def test_insert_returns_rows_with_defaults(self, store):
        [row] = store.insert("contracts", [{"title": "Fleet Services", "agency": "GSA"}])

        assert isinstance(row["id"], uuid.UUID)
        assert row["federal_id"].startswith("FT-")
        assert row["status"] == "active"
        assert row["contract_type"] == "federal"

    def test_select_filters_and_order(self, store):
        store.insert("contracts", [
            {"title": "B", "agency": "GSA", "state": "Texas"},
            {"title": "A", "agency": "GSA", "state": "Texas"},
            {"title": "C", "agency": "DoD", "state": "Ohio"},
        ])

        rows = store.select("contracts", filters={"state": "Texas"}, order=["title"])
        assert [r["title"] for r in rows] == ["A", "B"]

        rows = store.select("contracts", order=["-title"], limit=2)
        assert [r["title"] for r in rows] == ["C", "B"]

    def test_list_filter_is_membership(self, store):
        store.insert("contracts", [
            {"title": "A", "agency": "GSA", "status": "active"},
            {"title": "B", "agency": "GSA", "status": "forecast"},
            {"title": "C", "agency": "GSA", "status": "closed"},
        ])

        rows = store.select("contracts", filters={"status": ["active", "closed"]}, order=["title"])
        assert [r["title"] for r in rows] == ["A", "C"]

    def test_none_filter_is_null(self, store):
        store.insert("contracts", [
            {"title": "A", "agency": "GSA", "state": None},
            {"title": "B", "agency": "GSA", "state": "Ohio"},
        ])
        assert [r["title"] for r in store.select("contracts", filters={"state": None})] == ["A"]

    def test_column_projection(self, store):
        store.insert("contacts", [{"full_name": "Jane", "title": "CIO", "agency": "GSA"}])
        assert store.select("contacts", columns=["full_name", "agency"]) == [{"full_name": "Jane", "agency": "GSA"}]

    def test_select_one_missing(self, store):
        assert store.select_one("contracts", {"title": "nope"}) is None

    def test_count(self, store):
        store.insert("contacts", [
            {"full_name": "A", "title": "CIO", "agency": "GSA", "is_federal": True},
            {"full_name": "B", "title": "CTO", "agency": "GSA"},
        ])
        assert store.count("contacts") == 2
        assert store.count("contacts", {"is_federal": True}) == 1


class TestCoercion:
    """ISO strings are converted at the store boundary."""

    def test_date_strings(self, store):
        [row] = store.insert("contracts", [{
            "title": "A",
            "agency": "GSA",
            "award_date": "2024-01-15",
            "response_deadline": "2024-03-15T17:00:00+00:00",
            "budget_max": "2500",
        }])

        assert row["award_date"] == date(2024, 1, 15)
        assert row["response_deadline"] == datetime(2024, 3, 15, 17, 0, 0)
        assert row["budget_max"] == 2500.0

    def test_date_column_accepts_datetime_string(self, store):
        [row] = store.insert("contracts", [{"title": "A", "agency": "GSA", "award_date": "2024-01-15T10:30:00"}])
        assert row["award_date"] == date(2024, 1, 15)

    def test_invalid_date(self, store):
        with pytest.raises(StoreError, match='invalid input syntax for type date: "soon"'):
            store.insert("contracts", [{"title": "A", "agency": "GSA", "award_date": "soon"}])
        assert store.count("contracts") == 0

    def test_uuid_string_filter(self, store):
        [row] = store.insert("contacts", [{"full_name": "A", "title": "CIO", "agency": "GSA"}])
        assert store.select_one("contacts", {"id": str(row["id"])})["full_name"] == "A"


class TestErrors:

    def test_unknown_table(self, store):
        with pytest.raises(StoreError, match='relation "vendors" does not exist'):
            store.select("vendors")

    def test_unknown_column(self, store):
        with pytest.raises(StoreError, match='column "color" of relation "contracts" does not exist'):
            store.insert("contracts", [{"title": "A", "agency": "GSA", "color": "red"}])

    def test_constraint_violation_rolls_back_whole_call(self, store):
        with pytest.raises(StoreError):
            store.insert("contracts", [
                {"title": "A", "agency": "GSA"},
                {"title": "B", "agency": None},
            ])
        assert store.count("contracts") == 0

    def test_duplicate_favorite(self, store, make_contract, admin_user):
        contract = make_contract()
        favorite = {"user_id": admin_user["id"], "contract_id": contract["id"]}
        store.insert("user_favorites", [favorite])

        with pytest.raises(StoreError):
            store.insert("user_favorites", [favorite])
        assert store.count("user_favorites") == 1


class TestUpdateDelete:

    def test_update_returns_affected(self, store):
        store.insert("contracts", [
            {"title": "A", "agency": "GSA"},
            {"title": "B", "agency": "GSA"},
            {"title": "C", "agency": "DoD"},
        ])

        affected = store.update("contracts", {"status": "closed"}, {"agency": "GSA"})

        assert affected == 2
        assert store.count("contracts", {"status": "closed"}) == 2

    def test_update_is_visible_to_next_select(self, store):
        [row] = store.insert("contracts", [{"title": "A", "agency": "GSA"}])
        store.select("contracts")

        store.update("contracts", {"title": "Renamed"}, {"id": row["id"]})

        assert store.select_one("contracts", {"id": row["id"]})["title"] == "Renamed"

    def test_delete(self, store):
        store.insert("contacts", [
            {"full_name": "A", "title": "CIO", "agency": "GSA"},
            {"full_name": "B", "title": "CIO", "agency": "DoD"},
        ])

        assert store.delete("contacts", {"agency": "GSA"}) == 1
        assert [r["full_name"] for r in store.select("contacts")] == ["B"]

    def test_delete_nothing(self, store):
        assert store.delete("contacts", {"agency": "none"}) == 0
