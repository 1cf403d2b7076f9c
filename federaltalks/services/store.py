"""
Tabular Store Client

Generic per-table CRUD over the SQLAlchemy session. Callers compose
select/insert/update/delete with equality filters; no query language
leaks out of this module. Rows go in and come out as plain dicts whose
keys match the table columns.
"""

import logging
import uuid
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence

from sqlalchemy import Boolean, Date, DateTime, Float, Integer, inspect as sa_inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from federaltalks.models import (
    Contact,
    Contract,
    InternalUser,
    Pipeline,
    PipelineEntry,
    PipelineStage,
    UploadLog,
    User,
    UserFavorite,
)
from federaltalks.services.errors import StoreError
from federaltalks.utils.column_types import GUID

logger = logging.getLogger(__name__)

TABLES = {
    model.__tablename__: model
    for model in (
        Contract,
        Contact,
        UploadLog,
        User,
        InternalUser,
        Pipeline,
        PipelineStage,
        PipelineEntry,
        UserFavorite,
    )
}


def _error_message(exc: SQLAlchemyError) -> str:
    """Prefer the driver's message over SQLAlchemy's wrapped one."""
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else str(exc)


class TableStore:
    """CRUD primitives for every logical table, bound to one session."""

    def __init__(self, db: Session):
        self.db = db

    # ==========================================================================
    # Helpers
    # ==========================================================================

    def _model(self, table: str):
        try:
            return TABLES[table]
        except KeyError:
            raise StoreError(f'relation "{table}" does not exist') from None

    def _coerce_value(self, table: str, column, value: Any) -> Any:
        """Convert wire values (mostly strings) into the column's Python type."""
        if value is None:
            return None

        col_type = column.type
        try:
            if isinstance(col_type, DateTime):
                if isinstance(value, datetime):
                    parsed = value
                elif isinstance(value, date):
                    parsed = datetime(value.year, value.month, value.day)
                else:
                    parsed = datetime.fromisoformat(str(value).strip())
                if parsed.tzinfo is not None:
                    parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
                return parsed
            if isinstance(col_type, Date):
                if isinstance(value, datetime):
                    return value.date()
                if isinstance(value, date):
                    return value
                text = str(value).strip()
                try:
                    return date.fromisoformat(text)
                except ValueError:
                    # Spreadsheet date cells often carry a time of day
                    return datetime.fromisoformat(text).date()
            if isinstance(col_type, Float):
                return float(value)
            if isinstance(col_type, Integer) and not isinstance(col_type, Boolean):
                return int(value)
            if isinstance(col_type, GUID):
                return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))
        except (TypeError, ValueError):
            type_name = col_type.__class__.__name__.lower()
            raise StoreError(
                f'invalid input syntax for type {type_name}: "{value}" (column "{column.name}")'
            ) from None
        return value

    def _coerce_row(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        columns = self._model(table).__table__.columns
        coerced = {}
        for key, value in row.items():
            if key not in columns:
                raise StoreError(f'column "{key}" of relation "{table}" does not exist')
            coerced[key] = self._coerce_value(table, columns[key], value)
        return coerced

    def _filtered(self, table: str, filters: Optional[Dict[str, Any]]):
        model = self._model(table)
        query = self.db.query(model)
        columns = model.__table__.columns
        for key, value in (filters or {}).items():
            if key not in columns:
                raise StoreError(f'column "{key}" of relation "{table}" does not exist')
            attr = getattr(model, key)
            if isinstance(value, (list, tuple, set, frozenset)):
                values = [self._coerce_value(table, columns[key], v) for v in value]
                query = query.filter(attr.in_(values))
            elif value is None:
                query = query.filter(attr.is_(None))
            else:
                query = query.filter(attr == self._coerce_value(table, columns[key], value))
        return query

    @staticmethod
    def _to_dict(obj) -> Dict[str, Any]:
        return {attr.key: getattr(obj, attr.key) for attr in sa_inspect(type(obj)).column_attrs}

    # ==========================================================================
    # Primitives
    # ==========================================================================

    def select(
        self,
        table: str,
        columns: Optional[Sequence[str]] = None,
        filters: Optional[Dict[str, Any]] = None,
        order: Optional[Iterable[str]] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        Fetch rows matching every equality filter.

        ``order`` is a sequence of column names; a leading ``-`` sorts that
        column descending. List-valued filters match any of the values.
        """
        model = self._model(table)
        # Rows written through another session must not come back stale
        query = self._filtered(table, filters).populate_existing()

        for name in order or ():
            descending = name.startswith("-")
            attr = getattr(model, name.lstrip("-"), None)
            if attr is None:
                raise StoreError(f'column "{name.lstrip("-")}" of relation "{table}" does not exist')
            query = query.order_by(attr.desc() if descending else attr.asc())

        if limit is not None:
            query = query.limit(limit)

        try:
            rows = [self._to_dict(obj) for obj in query.all()]
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(_error_message(e)) from e

        if columns:
            rows = [{name: row.get(name) for name in columns} for row in rows]
        return rows

    def select_one(self, table: str, filters: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """First matching row or None."""
        rows = self.select(table, filters=filters, limit=1)
        return rows[0] if rows else None

    def count(self, table: str, filters: Optional[Dict[str, Any]] = None) -> int:
        try:
            return self._filtered(table, filters).count()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(_error_message(e)) from e

    def insert(self, table: str, rows: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Insert rows in a single transaction.

        Either every row is committed or none is; a failure rolls back this
        call only and raises StoreError with the driver's message.
        """
        model = self._model(table)
        objects = [model(**self._coerce_row(table, row)) for row in rows]

        try:
            self.db.add_all(objects)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.warning(f"Insert into {table} failed: {_error_message(e)}")
            raise StoreError(_error_message(e)) from e

        return [self._to_dict(obj) for obj in objects]

    def update(self, table: str, patch: Dict[str, Any], filters: Dict[str, Any]) -> int:
        """Apply ``patch`` to every matching row. Returns rows affected."""
        values = self._coerce_row(table, patch)
        if not values:
            return 0
        query = self._filtered(table, filters)

        try:
            affected = query.update(values, synchronize_session=False)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(_error_message(e)) from e

        # Later selects must not see stale identity-map objects
        self.db.expire_all()
        return affected

    def delete(self, table: str, filters: Dict[str, Any]) -> int:
        """Remove every matching row. Returns rows affected."""
        query = self._filtered(table, filters)

        try:
            affected = query.delete(synchronize_session=False)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(_error_message(e)) from e

        self.db.expire_all()
        return affected
