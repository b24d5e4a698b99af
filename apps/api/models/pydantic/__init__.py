"""
Pydantic 2 models for the ISP gateway.

Dictionary metadata (alias schemas and their field descriptors) plus the
shared collection and error response models.
"""

# flake8: noqa: E501


from .base import ImmutableModel, RequestModel
from .common import BrowseResponse, CollectionResponse, ErrorResponse
from .dictionary import (
    Agrup,
    AliasSchema,
    AliasSchemaEntry,
    FieldDescriptor,
    FieldOption,
    FieldType,
    Folder,
    LookupColumn,
    StandardQueryDetail,
    SyncedAlias,
    SyncResult,
)

__all__ = [
    "ImmutableModel",
    "RequestModel",
    "BrowseResponse",
    "CollectionResponse",
    "ErrorResponse",
    "Agrup",
    "AliasSchema",
    "AliasSchemaEntry",
    "FieldDescriptor",
    "FieldOption",
    "FieldType",
    "Folder",
    "LookupColumn",
    "StandardQueryDetail",
    "SyncedAlias",
    "SyncResult",
]
