"""
Upload File Parser

Turns an uploaded CSV / XLSX / XLS file into a list of flat records keyed
by normalized header names. Every value comes back as a trimmed string.
"""

import csv
import io
import logging
import re
from typing import Any, Dict, List, Sequence

import openpyxl
import xlrd

from federaltalks.services.errors import FileReadError, UnsupportedFormat

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = ("csv", "xlsx", "xls")

_WHITESPACE = re.compile(r"\s+")
_NON_IDENTIFIER = re.compile(r"[^a-z0-9_]")


# =============================================================================
# Header / Cell Normalization
# =============================================================================

def normalize_header(value: Any, spreadsheet: bool = False) -> str:
    """
    Lower-case, trim and underscore a header cell.

    CSV headers have double quotes removed; spreadsheet headers are further
    restricted to ``[a-z0-9_]``.
    """
    text = "" if value is None else str(value)
    text = _WHITESPACE.sub("_", text.strip().lower())
    if spreadsheet:
        return _NON_IDENTIFIER.sub("", text)
    return text.replace('"', "")


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        # Spreadsheets hand back 541511.0 for an integer cell
        return str(int(value))
    if hasattr(value, "isoformat"):
        text = value.isoformat()
        # Date-only cells come back as midnight datetimes
        return text[:10] if text.endswith("T00:00:00") else text
    return str(value).strip()


def _build_records(headers: List[str], rows) -> List[Dict[str, str]]:
    records = []
    for row in rows:
        cells = [_cell_text(cell) for cell in row]
        if not any(cells):
            continue
        record = {}
        for idx, header in enumerate(headers):
            record[header] = cells[idx] if idx < len(cells) else ""
        records.append(record)
    return records


def file_extension(filename: str) -> str:
    return filename.rsplit(".", 1)[-1].lower() if "." in filename else ""


# =============================================================================
# Format Readers
# =============================================================================

def _decode(content: bytes) -> str:
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.info("Upload is not UTF-8, falling back to cp1252")
    try:
        return content.decode("cp1252")
    except UnicodeDecodeError as e:
        raise FileReadError(f"Could not decode file: {e}") from e


def parse_csv(content: bytes) -> List[Dict[str, str]]:
    text = _decode(content)
    if "\x00" in text:
        raise FileReadError("File contains binary data and is not a valid CSV")

    try:
        rows = list(csv.reader(io.StringIO(text, newline="")))
    except csv.Error as e:
        raise FileReadError(f"Malformed CSV: {e}") from e

    if not rows:
        return []

    headers = [normalize_header(cell) for cell in rows[0]]
    return _build_records(headers, rows[1:])


def parse_xlsx(content: bytes) -> List[Dict[str, str]]:
    try:
        workbook = openpyxl.load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except Exception as e:
        # openpyxl raises zipfile, KeyError and XML errors for damaged files
        raise FileReadError(f"Could not read spreadsheet: {e}") from e

    try:
        sheet = workbook.worksheets[0]
        rows: Sequence = list(sheet.iter_rows(values_only=True))
    finally:
        workbook.close()

    if not rows:
        return []

    headers = [normalize_header(cell, spreadsheet=True) for cell in rows[0]]
    return _build_records(headers, rows[1:])


def parse_xls(content: bytes) -> List[Dict[str, str]]:
    try:
        book = xlrd.open_workbook(file_contents=content)
    except Exception as e:
        raise FileReadError(f"Could not read spreadsheet: {e}") from e

    sheet = book.sheet_by_index(0)
    if sheet.nrows == 0:
        return []

    rows = []
    for row_idx in range(sheet.nrows):
        values = []
        for cell in sheet.row(row_idx):
            if cell.ctype == xlrd.XL_CELL_DATE:
                values.append(xlrd.xldate.xldate_as_datetime(cell.value, book.datemode))
            else:
                values.append(cell.value)
        rows.append(values)

    headers = [normalize_header(cell, spreadsheet=True) for cell in rows[0]]
    return _build_records(headers, rows[1:])


_READERS = {
    "csv": parse_csv,
    "xlsx": parse_xlsx,
    "xls": parse_xls,
}


def parse_upload(filename: str, content: bytes, kind: str) -> List[Dict[str, str]]:
    """
    Parse an uploaded file into records.

    Args:
        filename: Original file name; its extension selects the reader
        content: Raw file bytes
        kind: Target record kind ("contracts" or "contacts"), for logging

    Returns:
        Records in file order, blank rows removed

    Raises:
        UnsupportedFormat: extension is not csv, xlsx or xls
        FileReadError: the file could not be decoded
    """
    extension = file_extension(filename)
    if extension not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFormat(filename)

    records = _READERS[extension](content)
    logger.info(f"Parsed {len(records)} {kind} rows from {filename}")
    return records
