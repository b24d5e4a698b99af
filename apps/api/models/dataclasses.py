"""Python 3.12 dataclasses with slots for the ISP gateway.

Alias rows are plain dicts; only the fixed lookup projections are typed.
"""

# flake8: noqa: E501


from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

# ==================== Lookups ====================


@dataclass(slots=True, frozen=True)
class CustomerLookupDTO:
    """Immutable customer (SA1) lookup projection."""

    a1_cod: str
    a1_loja: str
    a1_nome: str


@dataclass(slots=True, frozen=True)
class IntegratedOrderLookupDTO:
    """Immutable integrated order (Z02) lookup projection."""

    z02_cod: str
    z02_idped: str


# ==================== Helper Functions ====================


def to_dict(obj) -> dict:
    """Convert dataclass to dictionary (handles nested objects)."""
    return asdict(obj)


def from_alias_row(row: Optional[Dict[str, Any]], dto_class):
    """Build a lookup DTO from an alias row, matching column names case-insensitively."""
    if row is None:
        return None
    lowered = {str(k).lower(): v for k, v in row.items()}
    values = {}
    for name in dto_class.__dataclass_fields__:
        value = lowered.get(name)
        values[name] = "" if value is None else str(value)
    return dto_class(**values)


def from_alias_rows(rows, dto_class) -> list:
    """Convert alias rows to a list of lookup DTOs."""
    return [from_alias_row(row, dto_class) for row in rows]
