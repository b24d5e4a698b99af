"""Data dictionary subsystem: alias schemas, row stores and generic browse."""

from apps.api.services.dictionary.errors import (
    DictionaryError,
    MissingBackingTable,
    NotFoundError,
    StorageFault,
    ValidationError,
    classify_storage_error,
    is_missing_table,
)
from apps.api.services.dictionary.mock_store import MockRowStore
from apps.api.services.dictionary.records import (
    MARKETPLACE_ACCOUNTS,
    PLATFORMS,
    SHIPPING_PROGRAMS,
    AliasRecordService,
    RecordResource,
)
from apps.api.services.dictionary.row_store import PyDALRowStore, RowStore
from apps.api.services.dictionary.schema_registry import SchemaRegistry
from apps.api.services.dictionary.service import DictionaryService

__all__ = [
    "DictionaryError",
    "MissingBackingTable",
    "NotFoundError",
    "StorageFault",
    "ValidationError",
    "classify_storage_error",
    "is_missing_table",
    "MockRowStore",
    "AliasRecordService",
    "RecordResource",
    "PLATFORMS",
    "SHIPPING_PROGRAMS",
    "MARKETPLACE_ACCOUNTS",
    "PyDALRowStore",
    "RowStore",
    "SchemaRegistry",
    "DictionaryService",
]
