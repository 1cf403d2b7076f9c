"""
Cross-database column types.

PostgreSQL gets native UUID / ARRAY / JSONB columns; SQLite (local
development and tests) stores the same values as strings and JSON text.
"""

import json
import uuid
from sqlalchemy import TypeDecorator, String, Text
from sqlalchemy.dialects.postgresql import UUID as PG_UUID, ARRAY as PG_ARRAY, JSONB as PG_JSONB


class GUID(TypeDecorator):
    """UUID primary/foreign keys, CHAR(36) outside PostgreSQL."""

    impl = String(36)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(PG_UUID(as_uuid=True))
        return dialect.type_descriptor(String(36))

    def process_bind_param(self, value, dialect):
        if value is None or dialect.name == "postgresql":
            return value
        if not isinstance(value, uuid.UUID):
            value = uuid.UUID(str(value))
        return str(value)

    def process_result_value(self, value, dialect):
        if value is None or isinstance(value, uuid.UUID):
            return value
        return uuid.UUID(value)


class _JSONText(TypeDecorator):
    """Base for values kept as JSON text on non-PostgreSQL backends."""

    impl = Text
    cache_ok = True

    def _pg_type(self):
        raise NotImplementedError

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(self._pg_type())
        return dialect.type_descriptor(Text())

    def process_bind_param(self, value, dialect):
        if value is None or dialect.name == "postgresql":
            return value
        return json.dumps(value)

    def process_result_value(self, value, dialect):
        if value is None or dialect.name == "postgresql":
            return value
        return json.loads(value) if isinstance(value, str) else value


class StringList(_JSONText):
    """Ordered list of strings (keywords, permission names)."""

    def _pg_type(self):
        return PG_ARRAY(String)


class JSONDict(_JSONText):
    """Free-form JSON object (upload error payloads)."""

    def _pg_type(self):
        return PG_JSONB()
