"""
Filter, order and paginate alias rows in memory.

Rows are plain dicts. Both the persistent and the mock row stores hand their
rows to these functions, so browse behaves the same whichever backs an alias.
"""

# flake8: noqa: E501

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from apps.api.models.pydantic.common import BrowseResponse, CollectionResponse

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def apply_filter(rows: List[Dict[str, Any]], text: Optional[str]) -> List[Dict[str, Any]]:
    """
    Keep rows where any column value contains ``text``, case-insensitively.

    Args:
        rows: Rows to filter
        text: Free text; blank or None returns ``rows`` unchanged

    Returns:
        Matching rows in their original order
    """
    if not text or not text.strip():
        return rows
    needle = text.lower()
    return [row for row in rows if any(needle in _text(value).lower() for value in row.values())]


def parse_order(spec: Optional[str]) -> List[Tuple[str, bool]]:
    """
    Parse an order specification into ``(field, descending)`` keys.

    Accepts ``FIELD``, ``-FIELD``, ``FIELD DESC``, ``FIELD ASC`` and any mix of
    them separated by commas or whitespace.

    Example:
        >>> parse_order("name,-created_at")
        [('name', False), ('created_at', True)]
        >>> parse_order("Z10_COD DESC Z10_DESC")
        [('Z10_COD', True), ('Z10_DESC', False)]
    """
    keys: List[Tuple[str, bool]] = []
    if not spec:
        return keys
    for token in re.split(r"[\s,]+", spec.strip()):
        if not token:
            continue
        upper = token.upper()
        if upper in ("ASC", "DESC"):
            if keys:
                keys[-1] = (keys[-1][0], upper == "DESC")
            continue
        if token.startswith("-"):
            name = token[1:]
            if name:
                keys.append((name, True))
            continue
        if token.startswith("+"):
            token = token[1:]
        if token:
            keys.append((token, False))
    return keys


def apply_order(rows: List[Dict[str, Any]], spec: Optional[str]) -> List[Dict[str, Any]]:
    """
    Sort rows by a multi-key order specification.

    Comparison is on the string form of each value, missing values compare as
    an empty string, and ties keep their original relative order.
    """
    keys = parse_order(spec)
    if not keys:
        return rows
    ordered = list(rows)
    # least significant key first; sorted() is stable
    for name, descending in reversed(keys):
        ordered.sort(key=lambda row, n=name: _text(row.get(n)), reverse=descending)
    return ordered


def parse_positive_int(raw: Any, default: int) -> int:
    """Parse a leading integer, falling back to ``default`` and clamping to 1."""
    if isinstance(raw, bool):
        return default
    if isinstance(raw, int):
        value = raw
    else:
        match = _LEADING_INT.match(str(raw)) if raw is not None else None
        value = int(match.group(1)) if match else 0
    if value == 0:
        value = default
    return max(value, 1)


@dataclass(slots=True)
class Page:
    """One page of rows plus the counts both response shapes need."""

    items: List[Dict[str, Any]] = field(default_factory=list)
    total: int = 0
    has_next: bool = False
    remaining_records: int = 0

    def with_total(self) -> Dict[str, Any]:
        """``{hasNext, total, items}`` shape used by collection endpoints."""
        return CollectionResponse(has_next=self.has_next, total=self.total, items=self.items).model_dump(
            by_alias=True
        )

    def with_remaining(self) -> Dict[str, Any]:
        """``{hasNext, remainingRecords, items}`` shape used by dictionary browse."""
        return BrowseResponse(
            has_next=self.has_next, remaining_records=self.remaining_records, items=self.items
        ).model_dump(by_alias=True)


def paginate(rows: List[Dict[str, Any]], page: Any = DEFAULT_PAGE, page_size: Any = DEFAULT_PAGE_SIZE) -> Page:
    """
    Slice ``rows`` into a 1-indexed page.

    Args:
        rows: Already filtered and ordered rows
        page: Page number, raw or parsed
        page_size: Rows per page, raw or parsed

    Returns:
        Page with has_next true iff the page end is before the total
    """
    page_number = parse_positive_int(page, DEFAULT_PAGE)
    size = parse_positive_int(page_size, DEFAULT_PAGE_SIZE)
    total = len(rows)
    start = (page_number - 1) * size
    end = start + size
    return Page(
        items=rows[start:end],
        total=total,
        has_next=end < total,
        remaining_records=max(total - end, 0),
    )


@dataclass(slots=True, frozen=True)
class BrowseParams:
    """Query parameters shared by every paged endpoint."""

    page: int = DEFAULT_PAGE
    page_size: int = DEFAULT_PAGE_SIZE
    filter: str = ""
    order: str = ""

    @classmethod
    def from_args(cls, args: Any, order_keys: Tuple[str, ...] = ("$order", "order")) -> "BrowseParams":
        """Build from a Flask ``request.args`` style mapping."""
        order = ""
        for key in order_keys:
            if args.get(key):
                order = args.get(key)
                break
        return cls(
            page=parse_positive_int(args.get("page"), DEFAULT_PAGE),
            page_size=parse_positive_int(args.get("pageSize"), DEFAULT_PAGE_SIZE),
            filter=args.get("filter") or "",
            order=order,
        )

    def run(self, rows: List[Dict[str, Any]]) -> Page:
        """Filter, order and paginate ``rows``."""
        return paginate(apply_order(apply_filter(rows, self.filter), self.order), self.page, self.page_size)
