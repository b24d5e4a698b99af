"""
Row store adapters for alias-backed tables.

An alias's rows live in a physical table named after the lower-cased alias
code (``Z10`` -> ``z10``). Column names travel uppercase on the way out and
lowercase on the way in. A missing physical table reads as an empty sequence.
"""

# flake8: noqa: E501

import json
import logging
import re
from abc import ABC, abstractmethod
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Sequence, Tuple
from uuid import UUID

from shared.database import ensure_connection

from .errors import MissingBackingTable, StorageFault, ValidationError, is_missing_table

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z0-9_]+$")


def table_name_for(alias: str) -> str:
    """Physical table name for ``alias``; rejects anything but [A-Za-z0-9_]."""
    if not alias or not _IDENTIFIER.match(alias):
        raise ValidationError(f"Invalid alias: {alias!r}", code="INVALID_ALIAS")
    return alias.lower()


def column_name_for(name: str) -> str:
    """Physical column name for a wire field name."""
    if not name or not _IDENTIFIER.match(str(name)):
        raise ValidationError(f"Invalid column: {name!r}", code="INVALID_COLUMN")
    return str(name).lower()


class RowStore(ABC):
    """Uniform read/write access to the rows backing an alias."""

    backend = "abstract"

    @abstractmethod
    def fetch_rows(self, alias: str) -> List[Dict[str, Any]]:
        """Return every row of ``alias`` with uppercase column names."""

    @abstractmethod
    def insert_row(self, alias: str, row: Dict[str, Any]) -> Dict[str, Any]:
        """Insert ``row`` and return it as stored."""

    @abstractmethod
    def update_rows_by_field(
        self, alias: str, field: str, value: Any, changes: Dict[str, Any]
    ) -> List[Dict[str, Any]]:
        """Apply ``changes`` to rows where ``field == value``; return the updated rows."""

    @abstractmethod
    def delete_rows_by_field(self, alias: str, field: str, value: Any) -> int:
        """Delete rows where ``field == value``; return how many were removed."""


class PyDALRowStore(RowStore):
    """
    Row store over the PyDAL connection.

    Alias tables are not declared to PyDAL; their shape is whatever the
    dictionary says, so statements are issued through the adapter with
    quoted identifiers and bound parameters.
    """

    backend = "database"

    def __init__(self, db):
        self.db = db

    # ------------------------------------------------------------------
    # Statement helpers
    # ------------------------------------------------------------------

    @property
    def _placeholder(self) -> str:
        return "?" if getattr(self.db._adapter, "dbengine", "") == "sqlite" else "%s"

    def _execute(self, sql: str, params: Sequence[Any] = ()) -> Any:
        ensure_connection(self.db)
        adapter = self.db._adapter
        if params:
            adapter.execute(sql, tuple(params))
        else:
            adapter.execute(sql)
        return adapter.cursor

    def _select(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        cursor = self._execute(sql, params)
        columns = [column[0] for column in cursor.description or []]
        return [self._serialize_row(dict(zip(columns, values))) for values in cursor.fetchall()]

    def _fail(self, alias: str, operation: str, exc: Exception) -> None:
        """Roll back and translate a driver error."""
        try:
            self.db.rollback()
        except Exception as rollback_error:
            logger.error(f"Rollback after {operation} on {alias} failed: {rollback_error}")
        if is_missing_table(exc):
            raise MissingBackingTable(
                f"Backing table for alias {alias} does not exist", detailed_message=str(exc)
            ) from exc
        logger.error(f"{operation} on alias {alias} failed: {exc}")
        raise StorageFault.from_exception(exc, message=f"Failed to {operation} rows for alias {alias}") from exc

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def _serialize_value(self, value: Any) -> Any:
        """Convert driver values to JSON-compatible types."""
        if isinstance(value, UUID):
            return str(value)
        if isinstance(value, (datetime, date)):
            return value.isoformat()
        if isinstance(value, Decimal):
            return float(value)
        return value

    def _serialize_row(self, row: Dict[str, Any]) -> Dict[str, Any]:
        return {str(k).upper(): self._serialize_value(v) for k, v in row.items()}

    def _prepare(self, row: Dict[str, Any]) -> Tuple[List[str], List[Any]]:
        columns: List[str] = []
        values: List[Any] = []
        for key, value in row.items():
            columns.append(column_name_for(key))
            if isinstance(value, (dict, list)):
                values.append(json.dumps(value))
            else:
                values.append(value)
        return columns, values

    # ------------------------------------------------------------------
    # RowStore
    # ------------------------------------------------------------------

    def fetch_rows(self, alias: str) -> List[Dict[str, Any]]:
        table = table_name_for(alias)
        try:
            return self._select(f'SELECT * FROM "{table}"')
        except Exception as exc:
            try:
                self._fail(alias, "read", exc)
            except MissingBackingTable:
                logger.warning(f"Table {table} missing for alias {alias}, returning no rows")
                return []

    def insert_row(self, alias: str, row: Dict[str, Any]) -> Dict[str, Any]:
        table = table_name_for(alias)
        columns, values = self._prepare(row)
        if not columns:
            raise ValidationError("Cannot insert an empty row", code="EMPTY_ROW")
        quoted = ", ".join(f'"{c}"' for c in columns)
        marks = ", ".join([self._placeholder] * len(columns))
        try:
            self._execute(f'INSERT INTO "{table}" ({quoted}) VALUES ({marks})', values)
            self.db.commit()
        except Exception as exc:
            try:
                self._fail(alias, "insert", exc)
            except MissingBackingTable as missing:
                raise StorageFault(
                    f"Cannot insert into alias {alias}: backing table does not exist",
                    code="MISSING_BACKING_TABLE",
                    detailed_message=missing.detailed_message,
                    cause=exc,
                ) from exc
        return {str(k).upper(): v for k, v in row.items()}

    def update_rows_by_field(
        self, alias: str, field: str, value: Any, changes: Dict[str, Any]
    ) -> List[Dict[str, Any]]:
        table = table_name_for(alias)
        key = column_name_for(field)
        columns, values = self._prepare(changes)
        mark = self._placeholder
        try:
            if columns:
                assignments = ", ".join(f'"{c}" = {mark}' for c in columns)
                self._execute(
                    f'UPDATE "{table}" SET {assignments} WHERE "{key}" = {mark}', [*values, value]
                )
                self.db.commit()
            return self._select(f'SELECT * FROM "{table}" WHERE "{key}" = {mark}', [value])
        except Exception as exc:
            try:
                self._fail(alias, "update", exc)
            except MissingBackingTable:
                logger.warning(f"Table {table} missing for alias {alias}, nothing to update")
                return []

    def delete_rows_by_field(self, alias: str, field: str, value: Any) -> int:
        table = table_name_for(alias)
        key = column_name_for(field)
        try:
            cursor = self._execute(f'DELETE FROM "{table}" WHERE "{key}" = {self._placeholder}', [value])
            removed = cursor.rowcount
            self.db.commit()
        except Exception as exc:
            try:
                self._fail(alias, "delete", exc)
            except MissingBackingTable:
                logger.warning(f"Table {table} missing for alias {alias}, nothing to delete")
                return 0
        return max(removed or 0, 0)
