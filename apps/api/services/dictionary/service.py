"""Dictionary service - schema introspection, generic browse and form helpers."""

# flake8: noqa: E501

import logging
from typing import Any, Dict, Optional

from apps.api.models.pydantic.dictionary import AliasSchema, FieldType
from apps.api.utils.async_utils import run_in_threadpool
from shared.api_utils import unwrap_form_envelope

from .query_engine import BrowseParams
from .resolver import find_positioned
from .row_store import RowStore
from .schema_registry import SchemaRegistry
from .seed import today_ymd

logger = logging.getLogger(__name__)


def initial_record(schema: AliasSchema, today: Optional[str] = None) -> Dict[str, Any]:
    """
    Build a blank record for ``schema``.

    Each field defaults to its first option value when it has options,
    otherwise by type: N -> 0, D -> today as YYYYMMDD, L -> False, else "".
    Keys follow struct order.
    """
    today = today or today_ymd()
    record: Dict[str, Any] = {}
    for descriptor in schema.struct:
        if descriptor.options:
            record[descriptor.field] = descriptor.options[0].value
        elif descriptor.type is FieldType.NUMERIC:
            record[descriptor.field] = 0
        elif descriptor.type is FieldType.DATE:
            record[descriptor.field] = today
        elif descriptor.type is FieldType.LOGICAL:
            record[descriptor.field] = False
        else:
            record[descriptor.field] = ""
    return record


class DictionaryService:
    """Service for the generic dictionary endpoints."""

    def __init__(self, registry: SchemaRegistry, store: RowStore):
        """
        Initialize DictionaryService.

        Args:
            registry: Schema source
            store: Row source backing every alias
        """
        self.registry = registry
        self.store = store

    async def get_schema(self, alias: str) -> Dict[str, Any]:
        """
        Return the wire form of an alias schema.

        Raises:
            NotFoundError: If the alias is not registered
        """
        schema = await run_in_threadpool(self.registry.get_schema, alias)
        return schema.to_wire()

    async def browse_items(self, alias: str, params: BrowseParams) -> Dict[str, Any]:
        """
        Page through the rows of an alias.

        Unknown aliases and missing backing tables page through nothing.

        Returns:
            ``{hasNext, remainingRecords, items}``
        """
        rows = await run_in_threadpool(self.store.fetch_rows, alias)
        page = params.run(rows)
        logger.debug(
            f"Browse {alias}: {len(page.items)} of {page.total} rows (page {params.page}, size {params.page_size})"
        )
        return page.with_remaining()

    async def positioned(self, alias: str, raw_segment: Optional[str]) -> Dict[str, Any]:
        """Return the row a UI cursor payload points at, falling back to the first row."""
        rows = await run_in_threadpool(self.store.fetch_rows, alias)
        return find_positioned(alias, rows, raw_segment)

    async def initializer(self, alias: str) -> Dict[str, Any]:
        """Return a blank record with schema defaults."""
        schema = await run_in_threadpool(self.registry.get_schema, alias)
        return initial_record(schema)

    @staticmethod
    def trigger(field: str, body: Any) -> Dict[str, Any]:
        """Field triggers echo the form back unchanged."""
        payload = unwrap_form_envelope(body)
        logger.debug(f"Trigger {field} with {len(payload)} fields")
        return payload

    async def sync(self, payload: Any) -> Dict[str, Any]:
        """
        Synchronize alias schemas.

        Returns:
            ``{success, synced, aliases: [{alias, fields, folders, agrups}]}``
        """
        result = await run_in_threadpool(self.registry.sync_schemas, payload)
        return result.model_dump()
