"""
Upload Field Mapping & Validation

Maps arbitrarily-named spreadsheet columns onto the contract and contact
schemas, enforces required fields and coerces values. Pure functions: no
store access, no clock.

Each canonical field owns an ordered alias list. Header names are compared
on their letters and digits only, so "Contract Title", "contract_title"
and "CONTRACT-TITLE" all resolve to the same column.
"""

import math
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from federaltalks.config import CONTACT_TYPES, CONTRACT_STATUSES, PROCUREMENT_STATUSES
from federaltalks.services.errors import ValidationError


# =============================================================================
# Alias Tables
# =============================================================================

CONTRACT_FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "title": ("title", "contract_title", "opportunity_title", "contract_name"),
    "contract_name": ("contract_name", "title", "contract_title"),
    "description": ("description", "contract_description", "opportunity_description", "summary"),
    "agency": (
        "agency",
        "contract_agency",
        "opportunity_agency",
        "contracting_agency",
        "issuing_agency",
        "buying_organization",
    ),
    "buying_organization": ("buying_organization", "agency", "contracting_agency"),
    "department": ("department", "contracting_department", "division"),
    "state": ("state", "contract_state", "location", "performance_state"),
    "contract_type": ("contract_type", "opportunity_type", "type"),
    "buying_org_level_1": ("buying_org_level_1", "buying_org:_level_1", "buying_org_1"),
    "buying_org_level_2": ("buying_org_level_2", "buying_org:_level_2", "buying_org_2"),
    "buying_org_level_3": ("buying_org_level_3", "buying_org:_level_3", "buying_org_3"),
    "contract_number": ("contract_number", "contract_id", "award_number"),
    "solicitation_number": ("solicitation_number", "rfp_number", "solicitation_id"),
    "contractors": ("contractors", "contractor", "vendor", "awardee"),
    "products_services": ("products_services", "products_&_services", "products_and_services", "scope"),
    "primary_requirement": ("primary_requirement", "main_requirement", "key_requirement"),
    "place_of_performance_location": (
        "place_of_performance_location",
        "place_of_performance_-_location",
        "performance_location",
        "work_location",
    ),
    "contact_first_name": ("contact_first_name", "contact_name", "poc_name"),
    "contact_phone": ("contact_phone", "contact_telephone", "phone"),
    "contact_email": ("contact_email", "contact_mail", "email"),
    "budget_min": ("budget_min", "minimum_budget", "min_value", "floor_value"),
    "budget_max": ("budget_max", "maximum_budget", "max_value", "ceiling_value", "contract_value"),
    "award_value": ("award_value", "total_value", "contract_amount"),
    "naics_code": ("naics_code", "naics", "industry_code"),
    "set_aside_code": ("set_aside_code", "set_aside", "small_business"),
    "award_date": ("award_date", "date_awarded"),
    "start_date": ("start_date", "performance_start", "begin_date"),
    "current_expiration_date": ("current_expiration_date", "expiration_date", "end_date"),
    "ultimate_expiration_date": ("ultimate_expiration_date", "final_expiration", "ultimate_end"),
    "response_deadline": ("response_deadline", "deadline", "due_date", "submission_deadline"),
    "status": ("status", "contract_record_status"),
    "contract_status": ("contract_status", "procurement_status"),
    "source_url": ("source_url", "url", "link", "reference_url"),
    "ai_analysis_summary": ("ai_analysis_summary", "analysis", "ai_summary"),
    "keywords": ("keywords", "tags", "categories"),
}

CONTACT_FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "full_name": ("full_name", "name", "contact_name", "person_name", "contact_full_name"),
    "title": ("title", "position", "job_title", "role", "contact_title"),
    "agency": ("agency", "organization", "department", "company", "contact_agency"),
    "department": ("department", "division", "office", "unit"),
    "state": ("state", "location", "state_province"),
    "email": ("email", "email_address", "contact_email"),
    "phone": ("phone", "phone_number", "telephone", "contact_phone"),
    "contact_type": ("contact_type", "position_type", "type"),
    "is_federal": ("is_federal", "federal", "government_level"),
}

CONTRACT_REQUIRED_FIELDS = ("title", "agency")
CONTACT_REQUIRED_FIELDS = ("full_name", "title", "agency")

CONTRACT_NUMERIC_FIELDS = ("budget_min", "budget_max", "award_value")

CONTRACT_DATE_FIELDS = (
    "award_date",
    "start_date",
    "current_expiration_date",
    "ultimate_expiration_date",
    "response_deadline",
)


# =============================================================================
# Value Coercion
# =============================================================================

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def header_key(name: str) -> str:
    """Comparison key for a header: lower-case letters and digits only."""
    return _NON_ALNUM.sub("", str(name).lower())


def clean_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_number(value: Any) -> Optional[float]:
    """Float or None. Tolerates "$" and thousands separators."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip().replace("$", "").replace(",", "").replace(" ", "")
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    return number if math.isfinite(number) else None


def parse_bool(value: Any) -> bool:
    if value is True:
        return True
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 1
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1")
    return False


def parse_keywords(value: Any) -> List[str]:
    """Comma-separated string (or list) to trimmed, non-empty tags in order."""
    if value is None:
        return []
    parts: Iterable[Any] = value if isinstance(value, (list, tuple)) else str(value).split(",")
    return [str(part).strip() for part in parts if str(part).strip()]


def normalize_contract_type(value: Any) -> str:
    return "state" if (clean_text(value) or "").lower() == "state" else "federal"


def _enum_or_default(value: Any, allowed: Tuple[str, ...], default: str) -> str:
    text = (clean_text(value) or "").lower()
    return text if text in allowed else default


# =============================================================================
# Record Mapping
# =============================================================================

class _HeaderIndex:
    """Key-normalized view over one parsed record."""

    def __init__(self, record: Dict[str, Any]):
        self._values: Dict[str, Any] = {}
        for name, value in record.items():
            key = header_key(name)
            # First non-empty value wins when two headers collapse to one key
            if clean_text(self._values.get(key)) is None:
                self._values[key] = value

    def first(self, aliases: Iterable[str]) -> Optional[Any]:
        """Value of the first alias present with a non-empty value."""
        for alias in aliases:
            value = self._values.get(header_key(alias))
            if clean_text(value) is not None:
                return value
        return None


def _missing_required(index: _HeaderIndex, required: Tuple[str, ...], aliases: Dict[str, Tuple[str, ...]]) -> List[str]:
    return [name for name in required if index.first(aliases[name]) is None]


def map_contract_record(record: Dict[str, Any]) -> Dict[str, Any]:
    """Project a parsed row onto contract columns. Absent fields become None."""
    index = _HeaderIndex(record)
    aliases = CONTRACT_FIELD_ALIASES
    mapped: Dict[str, Any] = {}

    for name, candidates in aliases.items():
        raw = index.first(candidates)
        if name in CONTRACT_NUMERIC_FIELDS:
            mapped[name] = parse_number(raw)
        elif name == "keywords":
            mapped[name] = parse_keywords(raw)
        else:
            mapped[name] = clean_text(raw)

    mapped["contract_type"] = normalize_contract_type(mapped["contract_type"])
    mapped["status"] = _enum_or_default(mapped["status"], CONTRACT_STATUSES, "active")
    mapped["contract_status"] = _enum_or_default(mapped["contract_status"], PROCUREMENT_STATUSES, "open")
    mapped["data_source"] = "upload"
    return mapped


def map_contact_record(record: Dict[str, Any]) -> Dict[str, Any]:
    """Project a parsed row onto contact columns."""
    index = _HeaderIndex(record)
    mapped: Dict[str, Any] = {}

    for name, candidates in CONTACT_FIELD_ALIASES.items():
        raw = index.first(candidates)
        if name == "is_federal":
            mapped[name] = parse_bool(raw)
        else:
            mapped[name] = clean_text(raw)

    mapped["contact_type"] = _enum_or_default(mapped["contact_type"], CONTACT_TYPES, "procurement")
    mapped["data_source"] = "upload"
    return mapped


_KINDS = {
    "contracts": (CONTRACT_REQUIRED_FIELDS, CONTRACT_FIELD_ALIASES, map_contract_record),
    "contacts": (CONTACT_REQUIRED_FIELDS, CONTACT_FIELD_ALIASES, map_contact_record),
}


# =============================================================================
# Validation
# =============================================================================

@dataclass
class ValidationResult:
    valid_records: List[Dict[str, Any]] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


def check_required(record: Dict[str, Any], kind: str, row_number: int) -> None:
    """
    Raise ValidationError if any required field is missing under all aliases.

    ``row_number`` is the spreadsheet row shown to the user (header is row 1).
    """
    required, aliases, _ = _KINDS[kind]
    missing = _missing_required(_HeaderIndex(record), required, aliases)
    if missing:
        raise ValidationError(f"Row {row_number}: Missing required fields: {', '.join(missing)}")


def validate_records(records: List[Dict[str, Any]], kind: str) -> ValidationResult:
    """
    Split parsed rows into mapped records and per-row error strings.

    Every input row either lands in ``valid_records`` (input order kept)
    or produces an error naming its display row number.
    """
    if kind not in _KINDS:
        raise ValueError(f"Unknown record kind: {kind}")

    mapper = _KINDS[kind][2]
    result = ValidationResult()

    for position, record in enumerate(records):
        try:
            check_required(record, kind, position + 2)
        except ValidationError as e:
            result.errors.append(str(e))
            continue
        result.valid_records.append(mapper(record))

    return result
