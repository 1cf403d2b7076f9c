"""
Tests for upload field mapping and record validation.

Run with: pytest tests/test_field_mapping.py -v
"""

import pytest

from federaltalks.services.errors import ValidationError
from federaltalks.services.field_mapping import (
    check_required,
    header_key,
    map_contact_record,
    map_contract_record,
    parse_bool,
    parse_keywords,
    parse_number,
    validate_records,
)
from federaltalks.services.file_parser import parse_csv


class TestValueCoercion:
    """Scalar helpers used by the mappers."""

    @pytest.mark.parametrize("raw,expected", [
        ("1500000", 1500000.0),
        ("$1,500,000.50", 1500000.5),
        (" 42 ", 42.0),
        (7, 7.0),
        ("", None),
        ("TBD", None),
        ("nan", None),
        ("inf", None),
        (None, None),
    ])
    def test_parse_number(self, raw, expected):
        assert parse_number(raw) == expected

    @pytest.mark.parametrize("raw,expected", [
        ("true", True),
        ("TRUE", True),
        ("1", True),
        (1, True),
        (True, True),
        ("yes", False),
        ("false", False),
        ("", False),
        (None, False),
    ])
    def test_parse_bool(self, raw, expected):
        assert parse_bool(raw) is expected

    def test_parse_keywords(self):
        assert parse_keywords(" cloud , , cyber,AI ") == ["cloud", "cyber", "AI"]
        assert parse_keywords(["a ", "", "b"]) == ["a", "b"]
        assert parse_keywords(None) == []

    def test_header_key_ignores_punctuation_and_case(self):
        assert header_key("Contract Title") == header_key("contract_title") == header_key("CONTRACT-TITLE")


class TestMapContractRecord:
    """Alias resolution onto contract columns."""

    def test_aliases_resolve_in_order(self):
        mapped = map_contract_record({
            "contract_title": "Bridge Inspection",
            "issuing_agency": "DOT",
            "deadline": "2024-06-01",
            "max_value": "$2,000,000",
            "tags": "bridges, inspection",
        })

        assert mapped["title"] == "Bridge Inspection"
        assert mapped["contract_name"] == "Bridge Inspection"
        assert mapped["agency"] == "DOT"
        assert mapped["response_deadline"] == "2024-06-01"
        assert mapped["budget_max"] == 2000000.0
        assert mapped["keywords"] == ["bridges", "inspection"]

    def test_canonical_name_beats_alias(self):
        mapped = map_contract_record({"agency": "GSA", "contracting_agency": "DoD", "title": "X"})
        assert mapped["agency"] == "GSA"

    def test_empty_alias_falls_through(self):
        mapped = map_contract_record({"title": "", "opportunity_title": "Fallback", "agency": "GSA"})
        assert mapped["title"] == "Fallback"

    def test_defaults(self):
        mapped = map_contract_record({"title": "X", "agency": "Y"})

        assert mapped["contract_type"] == "federal"
        assert mapped["status"] == "active"
        assert mapped["contract_status"] == "open"
        assert mapped["data_source"] == "upload"
        assert mapped["keywords"] == []
        assert mapped["budget_min"] is None
        assert mapped["state"] is None

    def test_contract_type_and_statuses(self):
        mapped = map_contract_record({
            "title": "X",
            "agency": "Y",
            "type": "STATE",
            "status": "Forecast",
            "contract_status": "awarded",
        })

        assert mapped["contract_type"] == "state"
        assert mapped["status"] == "forecast"
        assert mapped["contract_status"] == "awarded"

    def test_unknown_status_falls_back(self):
        mapped = map_contract_record({"title": "X", "agency": "Y", "status": "pending review"})
        assert mapped["status"] == "active"

    def test_unparseable_number_becomes_none(self):
        mapped = map_contract_record({"title": "X", "agency": "Y", "budget_min": "call us"})
        assert mapped["budget_min"] is None

    def test_id_columns_are_not_mapped(self):
        mapped = map_contract_record({"title": "X", "agency": "Y", "federal_id": "FT-1", "id": "abc"})
        assert "federal_id" not in mapped
        assert "id" not in mapped


class TestMapContactRecord:
    """Alias resolution onto contact columns."""

    def test_aliases_and_defaults(self):
        mapped = map_contact_record({
            "name": "Jane Roe",
            "job_title": "Procurement Officer",
            "organization": "GSA",
            "email_address": "jane.roe@gsa.gov",
            "federal": "TRUE",
        })

        assert mapped["full_name"] == "Jane Roe"
        assert mapped["title"] == "Procurement Officer"
        assert mapped["agency"] == "GSA"
        assert mapped["email"] == "jane.roe@gsa.gov"
        assert mapped["is_federal"] is True
        assert mapped["contact_type"] == "procurement"

    def test_known_contact_type(self):
        mapped = map_contact_record({"full_name": "A", "title": "B", "agency": "C", "contact_type": "CIO"})
        assert mapped["contact_type"] == "cio"


class TestValidateRecords:
    """Required-field checks with display row numbers."""

    def test_missing_title_reported_with_row_number(self):
        records = parse_csv(b"title,agency\nIT Support,DoD\n,GSA\n")

        result = validate_records(records, "contracts")

        assert len(result.valid_records) == 1
        assert result.valid_records[0]["title"] == "IT Support"
        assert result.errors == ["Row 3: Missing required fields: title"]

    def test_every_record_accounted_for(self):
        records = [
            {"title": "A", "agency": "X"},
            {"title": "", "agency": ""},
            {"contract_title": "C", "opportunity_agency": "Z"},
            {"agency": "W"},
        ]

        result = validate_records(records, "contracts")

        assert len(result.valid_records) + len(result.errors) == len(records)
        assert [r["title"] for r in result.valid_records] == ["A", "C"]
        assert result.errors == [
            "Row 3: Missing required fields: title, agency",
            "Row 5: Missing required fields: title",
        ]

    def test_contacts_require_three_fields(self):
        result = validate_records([{"full_name": "Jane"}], "contacts")
        assert result.errors == ["Row 2: Missing required fields: title, agency"]

    def test_header_variants_satisfy_required_check(self):
        records = parse_csv(b"Contract Title,Contract Agency\nNetwork Refresh,VA\n")
        result = validate_records(records, "contracts")

        assert result.errors == []
        assert result.valid_records[0]["agency"] == "VA"

    def test_whitespace_only_is_missing(self):
        with pytest.raises(ValidationError, match="Row 7: Missing required fields: agency"):
            check_required({"title": "A", "agency": "   "}, "contracts", 7)

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            validate_records([], "vendors")
