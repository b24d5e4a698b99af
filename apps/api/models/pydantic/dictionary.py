"""
Pydantic 2 models for the data dictionary.

Provides the metadata describing one alias:
- FieldDescriptor: full UI/validation contract of one column
- AliasSchema: description, ordered struct, folders and agrups
- AliasSchemaEntry: list-form sync entry carrying its own alias code
- SyncResult: per-alias counts reported by dictionary sync
"""

# flake8: noqa: E501


from enum import Enum
from typing import Any, Optional, Union

from pydantic import Field, field_validator

from .base import ImmutableModel, RequestModel

OptionValue = Union[bool, int, float, str]


class FieldType(str, Enum):
    """Column type codes as they travel on the wire."""

    CHARACTER = "C"
    NUMERIC = "N"
    DATE = "D"
    LOGICAL = "L"
    MEMO = "M"


_TYPE_NAMES = {member.name: member.value for member in FieldType}


class FieldOption(RequestModel):
    """One entry of a select-constrained field."""

    value: OptionValue
    label: str = ""


class LookupColumn(RequestModel):
    """Column shown by a standard query lookup."""

    field: str
    title: str = ""


class StandardQueryDetail(RequestModel):
    """Declarative lookup binding, passed through untouched."""

    model_config = {"extra": "allow"}

    lookup: str = ""
    get_column_value: str = ""
    columns: list[LookupColumn] = Field(default_factory=list)


class FieldDescriptor(RequestModel):
    """
    One column of an alias.

    Attributes:
        field: Column name, canonical uppercase
        title: Display label
        type: FieldType code (C, N, D, L, M)
        size: Display/storage width
        options: Ordered enumeration; non-empty means select-constrained
        decimals: Precision for numeric fields
        order: Display and initializer sequence
        agrup: Optional group membership
        folder: Optional tab membership
    """

    field: str = Field(..., min_length=1)
    title: str = ""
    type: FieldType = FieldType.CHARACTER
    size: int = 0
    required: bool = False
    editable: bool = True
    enabled: bool = True
    virtual: bool = False
    options: list[FieldOption] = Field(default_factory=list)
    decimals: int = 0
    exist_trigger: bool = False
    help: str = ""
    order: int = 0
    agrup: Optional[str] = None
    folder: Optional[str] = None
    standard_query: Optional[str] = None
    standard_query_detail: Optional[StandardQueryDetail] = None

    @field_validator("field")
    @classmethod
    def field_uppercase(cls, v: str) -> str:
        """Field keys are case-insensitive; store them uppercase."""
        return v.strip().upper()

    @field_validator("type", mode="before")
    @classmethod
    def accept_type_names(cls, v: Any) -> Any:
        """Accept 'Numeric' as well as 'N'."""
        if isinstance(v, str):
            name = v.strip().upper()
            if name in _TYPE_NAMES:
                return _TYPE_NAMES[name]
            return name[:1] if name else FieldType.CHARACTER.value
        return v

    @property
    def is_select(self) -> bool:
        return bool(self.options)


class Folder(RequestModel):
    """UI grouping tab."""

    id: str
    title: str = ""


class Agrup(RequestModel):
    """UI grouping section."""

    id: str
    title: str = ""
    order: int = 0


class AliasSchema(RequestModel):
    """
    Metadata describing one logical table.

    ``struct`` order is both the display order and the initializer order.
    """

    description: str = ""
    struct: list[FieldDescriptor] = Field(default_factory=list)
    folders: list[Folder] = Field(default_factory=list)
    agrups: list[Agrup] = Field(default_factory=list)

    @field_validator("struct")
    @classmethod
    def ordered_unique_fields(cls, v: list[FieldDescriptor]) -> list[FieldDescriptor]:
        """Reject duplicate field keys and sort by ``order``, keeping ties in payload order."""
        seen = set()
        for descriptor in v:
            if descriptor.field in seen:
                raise ValueError(f"duplicate field {descriptor.field}")
            seen.add(descriptor.field)
        return sorted(v, key=lambda descriptor: descriptor.order)

    def to_wire(self) -> dict:
        """Serialize for clients, omitting unset optional bindings."""
        return self.model_dump(mode="json", exclude_none=True)


class AliasSchemaEntry(AliasSchema):
    """List-form sync entry: an AliasSchema that names its alias."""

    alias: str = ""

    @field_validator("alias")
    @classmethod
    def alias_uppercase(cls, v: str) -> str:
        return v.strip().upper()


class SyncedAlias(ImmutableModel):
    """Counts written for one alias during sync."""

    alias: str
    fields: int = Field(ge=0)
    folders: int = Field(ge=0)
    agrups: int = Field(ge=0)


class SyncResult(ImmutableModel):
    """Outcome of one dictionary sync call."""

    success: bool = True
    synced: int = Field(ge=0)
    aliases: list[SyncedAlias] = Field(default_factory=list)


__all__ = [
    "FieldType",
    "FieldOption",
    "LookupColumn",
    "StandardQueryDetail",
    "FieldDescriptor",
    "Folder",
    "Agrup",
    "AliasSchema",
    "AliasSchemaEntry",
    "SyncedAlias",
    "SyncResult",
]
