"""Service layer for FederalTalks IQ."""

from federaltalks.services.store import TableStore
from federaltalks.services.file_parser import parse_upload
from federaltalks.services.field_mapping import validate_records, ValidationResult
from federaltalks.services.bulk_upload import upload_contracts, upload_contacts, run_bulk_upload
from federaltalks.services.search import search_contracts, SearchFacets, SearchHit
from federaltalks.services.template_generator import generate_template, TemplateFile

__all__ = [
    "TableStore",
    "parse_upload",
    "validate_records",
    "ValidationResult",
    "upload_contracts",
    "upload_contacts",
    "run_bulk_upload",
    "search_contracts",
    "SearchFacets",
    "SearchHit",
    "generate_template",
    "TemplateFile",
]
