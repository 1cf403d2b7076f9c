"""
Upload Template Generation

Builds the downloadable CSV / XLSX skeletons admins fill in before a bulk
upload: one header row in canonical column order plus one sample row.
Output is byte-for-byte reproducible for the same arguments.
"""

import csv
import io
import logging
import zipfile
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List

from openpyxl import Workbook
from openpyxl.writer.excel import ExcelWriter

logger = logging.getLogger(__name__)

CSV_MIME = "text/csv"
XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# Pinned document and archive timestamps
_DOC_TIMESTAMP = datetime(2024, 1, 1, 0, 0, 0)
_ZIP_TIMESTAMP = (1980, 1, 1, 0, 0, 0)

FORMAT_ALIASES = {
    "csv": "csv",
    "xlsx": "xlsx",
    "excel": "xlsx",
}


# =============================================================================
# Template Content
# =============================================================================

CONTRACT_TEMPLATE_HEADERS = [
    # Basic information
    "title",
    "contract_name",
    "description",
    # Organization
    "agency",
    "buying_organization",
    "department",
    "state",
    "contract_type",
    "buying_org_level_1",
    "buying_org_level_2",
    "buying_org_level_3",
    # Contract details
    "contract_number",
    "solicitation_number",
    "contractors",
    "products_services",
    "primary_requirement",
    "place_of_performance_location",
    # Contact
    "contact_first_name",
    "contact_phone",
    "contact_email",
    # Financial
    "budget_min",
    "budget_max",
    "award_value",
    "naics_code",
    "set_aside_code",
    # Dates (YYYY-MM-DD)
    "award_date",
    "start_date",
    "current_expiration_date",
    "ultimate_expiration_date",
    "response_deadline",
    # Status
    "status",
    "contract_status",
    "source_url",
    "ai_analysis_summary",
    "keywords",
]

CONTRACT_SAMPLE_ROW: Dict[str, Any] = {
    "title": "IT Infrastructure Modernization Services",
    "contract_name": "Statewide IT Infrastructure Modernization Contract",
    "description": (
        "Comprehensive IT infrastructure upgrade including cloud migration, network "
        "modernization, and cybersecurity enhancements for state agencies"
    ),
    "agency": "California Department of Technology",
    "buying_organization": "State of California - Department of Technology",
    "department": "Information Technology Division",
    "state": "California",
    "contract_type": "state",
    "buying_org_level_1": "State of California",
    "buying_org_level_2": "Government Operations Agency",
    "buying_org_level_3": "Department of Technology",
    "contract_number": "CA-2024-IT-001",
    "solicitation_number": "RFP-2024-CDT-001",
    "contractors": "TechCorp Solutions Inc., CloudFirst Technologies LLC",
    "products_services": "Cloud Infrastructure, Network Equipment, Cybersecurity Solutions, Professional Services",
    "primary_requirement": "Modernize legacy IT systems and migrate critical applications to secure cloud infrastructure",
    "place_of_performance_location": "Sacramento, CA",
    "contact_first_name": "John",
    "contact_phone": "(916) 555-0123",
    "contact_email": "john.doe@technology.ca.gov",
    "budget_min": 5000000,
    "budget_max": 15000000,
    "award_value": 12500000,
    "naics_code": "541511",
    "set_aside_code": "SBA",
    "award_date": "2024-01-15",
    "start_date": "2024-02-01",
    "current_expiration_date": "2025-01-31",
    "ultimate_expiration_date": "2026-01-31",
    "response_deadline": "2024-03-15",
    "status": "active",
    "contract_status": "open",
    "source_url": "https://www.technology.ca.gov/contracts/it-modernization",
    "ai_analysis_summary": (
        "High-value IT modernization opportunity with strong potential for small business "
        "participation. Competitive landscape includes 3-5 major players."
    ),
    "keywords": "IT modernization, cloud migration, cybersecurity, infrastructure, technology services",
}

CONTACT_TEMPLATE_HEADERS = [
    "full_name",
    "title",
    "agency",
    "department",
    "state",
    "email",
    "phone",
    "contact_type",
    "is_federal",
]

CONTACT_SAMPLE_ROW: Dict[str, Any] = {
    "full_name": "John Smith",
    "title": "Chief Information Officer",
    "agency": "Department of Technology",
    "department": "IT Division",
    "state": "California",
    "email": "john.smith@ca.gov",
    "phone": "(916) 555-0123",
    "contact_type": "cio",
    "is_federal": "false",
}

TEMPLATES = {
    "contracts": (CONTRACT_TEMPLATE_HEADERS, CONTRACT_SAMPLE_ROW),
    "contacts": (CONTACT_TEMPLATE_HEADERS, CONTACT_SAMPLE_ROW),
}


@dataclass(frozen=True)
class TemplateFile:
    content: bytes
    filename: str
    mime_type: str


# =============================================================================
# Writers
# =============================================================================

def _csv_bytes(headers: List[str], sample: Dict[str, Any]) -> bytes:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(headers)
    writer.writerow([sample.get(name, "") for name in headers])
    return buffer.getvalue().encode("utf-8")


def _repack_zip(data: bytes) -> bytes:
    """Rewrite every archive entry with a fixed timestamp and mode."""
    output = io.BytesIO()
    with zipfile.ZipFile(io.BytesIO(data)) as source, zipfile.ZipFile(output, "w", zipfile.ZIP_DEFLATED) as target:
        for info in source.infolist():
            entry = zipfile.ZipInfo(info.filename, date_time=_ZIP_TIMESTAMP)
            entry.compress_type = zipfile.ZIP_DEFLATED
            entry.external_attr = 0o600 << 16
            target.writestr(entry, source.read(info.filename))
    return output.getvalue()


def _xlsx_bytes(sheet_title: str, headers: List[str], sample: Dict[str, Any]) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = sheet_title
    sheet.append(headers)
    sheet.append([sample.get(name) for name in headers])

    workbook.properties.creator = "FederalTalks IQ"
    workbook.properties.created = _DOC_TIMESTAMP
    workbook.properties.modified = _DOC_TIMESTAMP

    # Workbook.save() stamps the modified time, so drive the writer directly
    raw = io.BytesIO()
    archive = zipfile.ZipFile(raw, "w", zipfile.ZIP_DEFLATED)
    ExcelWriter(workbook, archive).save()
    return _repack_zip(raw.getvalue())


def generate_template(kind: str, fmt: str = "csv") -> TemplateFile:
    """
    Build the upload template for ``kind`` ("contracts" or "contacts").

    Args:
        kind: Record kind
        fmt: "csv", "xlsx" or "excel"

    Returns:
        TemplateFile with content, download filename and MIME type
    """
    if kind not in TEMPLATES:
        raise ValueError(f"Unknown template kind: {kind}")
    extension = FORMAT_ALIASES.get((fmt or "").lower())
    if extension is None:
        raise ValueError(f"Unknown template format: {fmt}")

    headers, sample = TEMPLATES[kind]
    filename = f"{kind}_template.{extension}"

    if extension == "csv":
        content, mime_type = _csv_bytes(headers, sample), CSV_MIME
    else:
        content, mime_type = _xlsx_bytes(kind, headers, sample), XLSX_MIME

    logger.debug(f"Generated {filename} ({len(content)} bytes)")
    return TemplateFile(content=content, filename=filename, mime_type=mime_type)
