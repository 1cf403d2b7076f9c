"""
Service-layer exceptions.

File-level ingestion errors abort an upload; record-level errors are
collected as strings and never abort the batch.
"""


class IngestionError(Exception):
    """Base class for bulk upload failures."""


class UnsupportedFormat(IngestionError):
    """Uploaded file extension is not csv, xlsx or xls."""

    def __init__(self, filename: str):
        self.filename = filename
        super().__init__("Unsupported file format. Please use CSV, XLS, or XLSX files.")


class FileReadError(IngestionError):
    """Uploaded file could not be decoded."""


class ValidationError(IngestionError):
    """A record lacks required fields under every accepted header name."""


class InsertionError(IngestionError):
    """The store rejected a record."""


class AuditLogError(IngestionError):
    """Writing the upload audit row failed."""


class StoreError(Exception):
    """A table operation failed (constraint, type mismatch, connectivity)."""


class AuthenticationError(Exception):
    """Credentials or session token were rejected."""


class ReportGenerationError(Exception):
    """A contract report could not be produced."""
