"""
Bulk Upload Service

Writes validated records one at a time and records an audit row per
upload. Inserts are independent: a rejected record never rolls back or
stops the ones around it.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from federaltalks.services.errors import AuditLogError, InsertionError, StoreError, ValidationError
from federaltalks.services.field_mapping import (
    CONTRACT_DATE_FIELDS,
    CONTRACT_NUMERIC_FIELDS,
    clean_text,
    parse_keywords,
    parse_number,
    validate_records,
)
from federaltalks.services.file_parser import file_extension, parse_upload
from federaltalks.services.store import TableStore

logger = logging.getLogger(__name__)

FILE_TYPES = {
    "csv": "text/csv",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "xls": "application/vnd.ms-excel",
}
GENERIC_MIME_TYPE = "application/octet-stream"


def upload_mime_type(filename: str, content_type: Optional[str] = None) -> str:
    """The MIME type the client sent, or one inferred from the extension."""
    declared = (content_type or "").split(";")[0].strip().lower()
    if declared and declared != GENERIC_MIME_TYPE:
        return declared
    return FILE_TYPES.get(file_extension(filename), GENERIC_MIME_TYPE)


@dataclass
class BatchResult:
    success_count: int = 0
    errors: List[str] = field(default_factory=list)


@dataclass
class UploadSummary:
    """End-of-upload report returned to the uploader."""

    success_count: int
    total: int
    errors: List[str]


# =============================================================================
# Record Writers
# =============================================================================

def _prepare_contract(record: Dict[str, Any], now: datetime) -> Dict[str, Any]:
    """Re-normalize a contract in case it skipped the validator."""
    row = {k: v for k, v in record.items() if k not in ("id", "federal_id")}

    if isinstance(row.get("keywords"), str):
        row["keywords"] = parse_keywords(row["keywords"])

    for name in CONTRACT_NUMERIC_FIELDS:
        if name in row:
            row[name] = parse_number(row[name])

    for name in CONTRACT_DATE_FIELDS:
        if name in row and row[name] == "":
            row[name] = None

    row.setdefault("data_source", "upload")
    row["posted_date"] = now
    row["last_updated"] = now
    return row


def _insert_one(store: TableStore, table: str, row: Dict[str, Any], label: str, name: str) -> None:
    try:
        store.insert(table, [row])
    except StoreError as e:
        raise InsertionError(f"Error inserting {label} {name}: {e}") from e


def upload_contracts(store: TableStore, records: List[Dict[str, Any]], actor_id: Optional[uuid.UUID] = None) -> BatchResult:
    """
    Insert contracts sequentially in input order.

    ``federal_id`` is always generated by the store; any value on the
    record is discarded.
    """
    result = BatchResult()
    now = datetime.utcnow()

    for record in records:
        title = clean_text(record.get("title"))
        try:
            if not title or not clean_text(record.get("agency")):
                raise ValidationError(f"Missing required fields for contract: {title or 'Unknown'}")

            row = _prepare_contract(record, now)
            if actor_id is not None:
                row["updated_by"] = actor_id
            _insert_one(store, "contracts", row, "contract", title)
        except (ValidationError, InsertionError) as e:
            result.errors.append(str(e))
            continue

        result.success_count += 1

    logger.info(f"Contract batch: {result.success_count}/{len(records)} inserted")
    return result


def upload_contacts(store: TableStore, records: List[Dict[str, Any]]) -> BatchResult:
    """Insert contacts sequentially in input order."""
    result = BatchResult()

    for record in records:
        full_name = clean_text(record.get("full_name"))
        try:
            if not full_name or not clean_text(record.get("title")) or not clean_text(record.get("agency")):
                raise ValidationError(f"Missing required fields for contact: {full_name or 'Unknown'}")

            row = {k: v for k, v in record.items() if k != "id"}
            row.setdefault("data_source", "upload")
            _insert_one(store, "contacts", row, "contact", full_name)
        except (ValidationError, InsertionError) as e:
            result.errors.append(str(e))
            continue

        result.success_count += 1

    logger.info(f"Contact batch: {result.success_count}/{len(records)} inserted")
    return result


# =============================================================================
# Audit Log
# =============================================================================

def write_audit_log(
    store: TableStore,
    *,
    uploaded_by: Optional[uuid.UUID],
    file_name: str,
    file_type: str,
    upload_type: str,
    records_processed: int,
    records_successful: int,
    errors: List[str],
) -> bool:
    """
    Append one upload_logs row. Never raises.

    Returns False when the row could not be written; the failure is only
    logged so it cannot mask the outcome of the upload itself.
    """
    row = {
        "uploaded_by": uploaded_by,
        "file_name": file_name,
        "file_type": file_type,
        "upload_type": upload_type,
        "records_processed": records_processed,
        "records_successful": records_successful,
        "records_failed": records_processed - records_successful,
        "error_details": {"errors": list(errors)} if errors else None,
    }

    try:
        _insert_audit_row(store, row)
    except AuditLogError as e:
        logger.error(f"Failed to write upload log for {file_name}: {e}")
        return False

    return True


def _insert_audit_row(store: TableStore, row: Dict[str, Any]) -> None:
    try:
        store.insert("upload_logs", [row])
    except StoreError as e:
        raise AuditLogError(str(e)) from e


# =============================================================================
# Upload Orchestration
# =============================================================================

def run_bulk_upload(
    store: TableStore,
    *,
    kind: str,
    filename: str,
    content: bytes,
    uploaded_by: Optional[uuid.UUID] = None,
    content_type: Optional[str] = None,
) -> UploadSummary:
    """
    Parse, validate and insert one uploaded file, then write its audit row.

    File-level problems (UnsupportedFormat, FileReadError) propagate before
    anything is written. Record-level problems are collected in ``errors``.
    """
    records = parse_upload(filename, content, kind)
    validation = validate_records(records, kind)

    if kind == "contracts":
        batch = upload_contracts(store, validation.valid_records, actor_id=uploaded_by)
    else:
        batch = upload_contacts(store, validation.valid_records)

    errors = validation.errors + batch.errors

    write_audit_log(
        store,
        uploaded_by=uploaded_by,
        file_name=filename,
        file_type=upload_mime_type(filename, content_type),
        upload_type=kind,
        records_processed=len(records),
        records_successful=batch.success_count,
        errors=errors,
    )

    logger.info(
        f"Upload {filename} ({kind}): {batch.success_count}/{len(records)} succeeded, {len(errors)} errors"
    )
    return UploadSummary(success_count=batch.success_count, total=len(records), errors=errors)
