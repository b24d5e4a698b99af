"""Alias record service - point CRUD, product bindings, order details and lookups."""

# flake8: noqa: E501

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from apps.api.models.dataclasses import (
    CustomerLookupDTO,
    IntegratedOrderLookupDTO,
    from_alias_row,
    from_alias_rows,
    to_dict,
)
from apps.api.utils.async_utils import run_in_threadpool, run_parallel

from .errors import NotFoundError, ValidationError
from .query_engine import BrowseParams, apply_filter
from .resolver import primary_identity_field
from .row_store import RowStore
from .seed import today_ymd

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class RecordResource:
    """A point-CRUD resource backed by one alias."""

    alias: str
    prefix: str
    label: str
    stamp_field: Optional[str] = None

    @property
    def code_field(self) -> str:
        return primary_identity_field(self.alias)


PLATFORMS = RecordResource("Z10", "PLAT", "Platform", stamp_field="Z10_DTALT")
SHIPPING_PROGRAMS = RecordResource("Z11", "ENV", "Shipping program")
MARKETPLACE_ACCOUNTS = RecordResource("Z00", "ACC", "Marketplace account")

PRODUCT_BINDINGS_ALIAS = "Z01"
PRODUCT_FIELD = "Z01_PRDERP"
BINDINGS_KEY = "ITENS"
ORDER_CHILD_ALIASES = ("Z03", "Z05", "Z06")
LOOKUP_TABLES = {"SA1", "Z02"}


def next_code(prefix: str, rows: List[Dict[str, Any]], code_field: str) -> str:
    """
    Generate the next unused ``<prefix>NNN`` code.

    Starts at one past the current row count and skips codes already taken.

    Example:
        >>> next_code("PLAT", [{"Z10_COD": "PLAT001"}, {"Z10_COD": "PLAT002"}], "Z10_COD")
        'PLAT003'
    """
    taken = {str(row.get(code_field, "")) for row in rows}
    number = len(rows) + 1
    while f"{prefix}{number:03d}" in taken:
        number += 1
    return f"{prefix}{number:03d}"


def _upper_keys(payload: Dict[str, Any]) -> Dict[str, Any]:
    return {str(k).upper(): v for k, v in payload.items()}


class AliasRecordService:
    """Service for the integration resources built on alias rows."""

    def __init__(self, store: RowStore):
        """
        Initialize AliasRecordService.

        Args:
            store: Row source backing every alias
        """
        self.store = store

    # ==================== Point CRUD ====================

    async def list_records(self, resource: RecordResource, params: BrowseParams) -> Dict[str, Any]:
        """
        List a resource's rows.

        Returns:
            ``{hasNext, total, items}``
        """
        rows = await run_in_threadpool(self.store.fetch_rows, resource.alias)
        return params.run(rows).with_total()

    async def create_record(self, resource: RecordResource, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a row, generating its code when the payload has none.

        Returns:
            The stored row
        """
        row = _upper_keys(payload)
        code = str(row.get(resource.code_field) or "")
        if not code:
            rows = await run_in_threadpool(self.store.fetch_rows, resource.alias)
            code = next_code(resource.prefix, rows, resource.code_field)
        row[resource.code_field] = code
        if resource.stamp_field:
            row[resource.stamp_field] = today_ymd()

        stored = await run_in_threadpool(self.store.insert_row, resource.alias, row)
        logger.info(f"Created {resource.label.lower()} {code}")
        return stored

    async def update_record(
        self, resource: RecordResource, record_id: str, payload: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Merge ``payload`` over the row identified by ``record_id``.

        The identity field is never changed.

        Raises:
            NotFoundError: If no row has that identity
        """
        changes = {k: v for k, v in _upper_keys(payload).items() if k != resource.code_field}
        if resource.stamp_field:
            changes[resource.stamp_field] = today_ymd()

        updated = await run_in_threadpool(
            self.store.update_rows_by_field, resource.alias, resource.code_field, record_id, changes
        )
        if not updated:
            raise NotFoundError(f"{resource.label} not found", detailed_message=f"{resource.label} {record_id} not found")
        return updated[0]

    async def delete_record(self, resource: RecordResource, record_id: str) -> None:
        """
        Delete the row identified by ``record_id``.

        Raises:
            NotFoundError: If no row has that identity
        """
        removed = await run_in_threadpool(
            self.store.delete_rows_by_field, resource.alias, resource.code_field, record_id
        )
        if not removed:
            raise NotFoundError(f"{resource.label} not found", detailed_message=f"{resource.label} {record_id} not found")
        logger.info(f"Deleted {resource.label.lower()} {record_id}")

    # ==================== Product x account bindings ====================

    async def save_product_bindings(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Save product x account bindings.

        With a non-empty ``ITENS`` list, every binding of the product is
        replaced by one row per item, numbered from 1. Without it, a single
        row is appended.

        Raises:
            ValidationError: ``ITENS`` given without a product or with non-object items
        """
        base = _upper_keys(payload)
        items = base.pop(BINDINGS_KEY, None)
        alias = PRODUCT_BINDINGS_ALIAS

        if isinstance(items, list) and items:
            product = str(base.get(PRODUCT_FIELD) or "")
            if not product:
                raise ValidationError(f"{PRODUCT_FIELD} is required with {BINDINGS_KEY}", code="MISSING_PRODUCT")
            if not all(isinstance(item, dict) for item in items):
                raise ValidationError(f"{BINDINGS_KEY} entries must be objects", code="INVALID_BINDING")

            await run_in_threadpool(self.store.delete_rows_by_field, alias, PRODUCT_FIELD, product)
            for idx, item in enumerate(items):
                row = {**base, **_upper_keys(item), "Z01_COD": str(idx + 1), PRODUCT_FIELD: product}
                await run_in_threadpool(self.store.insert_row, alias, row)
            logger.info(f"Replaced bindings of product {product} with {len(items)} rows")
        else:
            rows = await run_in_threadpool(self.store.fetch_rows, alias)
            row = {**base, "Z01_COD": str(len(rows) + 1)}
            await run_in_threadpool(self.store.insert_row, alias, row)
        return {"success": True}

    async def get_product_bindings(self, product: str) -> Dict[str, Any]:
        rows = await run_in_threadpool(self.store.fetch_rows, PRODUCT_BINDINGS_ALIAS)
        return {"items": [row for row in rows if str(row.get(PRODUCT_FIELD, "")) == product]}

    async def delete_product_bindings(self, product: str) -> None:
        removed = await run_in_threadpool(
            self.store.delete_rows_by_field, PRODUCT_BINDINGS_ALIAS, PRODUCT_FIELD, product
        )
        if not removed:
            raise NotFoundError("Product x account not found", detailed_message=f"No bindings for product {product}")

    # ==================== Integrated orders ====================

    async def integrated_order_details(self, id_ped: str, id_int: str) -> Dict[str, List[Dict[str, Any]]]:
        """
        Collect items, payments and invoices of one integrated order.

        Returns:
            ``{Z03: [...], Z05: [...], Z06: [...]}``, empty lists when nothing matches
        """
        row_sets = await run_parallel(
            *[run_in_threadpool(self.store.fetch_rows, alias) for alias in ORDER_CHILD_ALIASES]
        )
        details = {}
        for alias, rows in zip(ORDER_CHILD_ALIASES, row_sets):
            details[alias] = [
                row
                for row in rows
                if str(row.get(f"{alias}_IDPED", "")) == id_ped and str(row.get(f"{alias}_IDINT", "")) == id_int
            ]
        return details

    # ==================== Lookups ====================

    async def lookup(self, table: str, text: str = "") -> List[Dict[str, Any]]:
        """
        Search a lookup table.

        SA1 matches ``text`` against every column; Z02 matches its code only
        and projects ``{z02_cod, z02_idped}``. Other tables have no lookup.
        """
        key = (table or "").upper()
        if key not in LOOKUP_TABLES:
            return []
        rows = await run_in_threadpool(self.store.fetch_rows, key)
        if key == "SA1":
            return [to_dict(dto) for dto in from_alias_rows(apply_filter(rows, text), CustomerLookupDTO)]

        needle = (text or "").lower()
        matches = [row for row in rows if needle in str(row.get("Z02_COD", "")).lower()]
        return [to_dict(dto) for dto in from_alias_rows(matches, IntegratedOrderLookupDTO)]

    async def lookup_by_id(self, table: str, record_id: str) -> List[Dict[str, Any]]:
        """Return the single matching lookup projection as a list, or []."""
        key = (table or "").upper()
        if key not in LOOKUP_TABLES:
            return []
        rows = await run_in_threadpool(self.store.fetch_rows, key)
        code_field, dto_class = (
            ("A1_COD", CustomerLookupDTO) if key == "SA1" else ("Z02_COD", IntegratedOrderLookupDTO)
        )
        for row in rows:
            if str(row.get(code_field, "")) == record_id:
                return [to_dict(from_alias_row(row, dto_class))]
        return []
