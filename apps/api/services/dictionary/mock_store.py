"""In-memory row store seeded with the integration mock dataset."""

# flake8: noqa: E501

import copy
import logging
from typing import Any, Dict, List, Optional

from .row_store import RowStore
from .seed import seed_rows

logger = logging.getLogger(__name__)


class MockRowStore(RowStore):
    """
    Drop-in substitute for the persistent row store.

    Each instance owns its own copy of the seed data. Rows are kept with
    uppercase keys and every read hands out copies, so callers never mutate
    the store by accident. Unknown aliases read as empty.
    """

    backend = "mock"

    def __init__(self, rows: Optional[Dict[str, List[Dict[str, Any]]]] = None):
        source = seed_rows() if rows is None else rows
        self._rows: Dict[str, List[Dict[str, Any]]] = {
            alias.upper(): [self._normalize(row) for row in items] for alias, items in source.items()
        }

    @staticmethod
    def _normalize(row: Dict[str, Any]) -> Dict[str, Any]:
        return {str(k).upper(): copy.deepcopy(v) for k, v in row.items()}

    def aliases(self) -> List[str]:
        return sorted(self._rows)

    def fetch_rows(self, alias: str) -> List[Dict[str, Any]]:
        return [dict(row) for row in self._rows.get((alias or "").upper(), [])]

    def insert_row(self, alias: str, row: Dict[str, Any]) -> Dict[str, Any]:
        stored = self._normalize(row)
        self._rows.setdefault(alias.upper(), []).append(stored)
        return dict(stored)

    def update_rows_by_field(
        self, alias: str, field: str, value: Any, changes: Dict[str, Any]
    ) -> List[Dict[str, Any]]:
        key = field.upper()
        patch = self._normalize(changes)
        updated = []
        for row in self._rows.get(alias.upper(), []):
            if str(row.get(key, "")) == str(value):
                row.update(patch)
                updated.append(dict(row))
        return updated

    def delete_rows_by_field(self, alias: str, field: str, value: Any) -> int:
        key = field.upper()
        rows = self._rows.get(alias.upper(), [])
        kept = [row for row in rows if str(row.get(key, "")) != str(value)]
        removed = len(rows) - len(kept)
        if removed:
            self._rows[alias.upper()] = kept
            logger.debug(f"Removed {removed} mock rows from {alias} where {key}={value}")
        return removed
