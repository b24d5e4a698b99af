"""Record identity per alias and positioned lookup from URL payloads."""

# flake8: noqa: E501

import json
import logging
import re
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import unquote

logger = logging.getLogger(__name__)

# Aliases whose identity is not the plain <ALIAS>_COD column, in priority order.
IDENTITY_FIELDS: Dict[str, Tuple[str, ...]] = {
    "Z01": ("Z01_PRDERP", "Z01_COD"),
}

_TRAILING_BRACE = re.compile(r"}\s*$")


def identity_fields(alias: str) -> Tuple[str, ...]:
    """Return the columns tried, in order, to identify a row of ``alias``."""
    key = (alias or "").upper()
    if not key:
        return ()
    return IDENTITY_FIELDS.get(key, (f"{key}_COD",))


def primary_identity_field(alias: str) -> str:
    """Column matched by point update/delete for ``alias``."""
    fields = identity_fields(alias)
    return fields[0] if fields else ""


def resolve_id(alias: str, row: Optional[Dict[str, Any]]) -> str:
    """
    Compute the identity of ``row`` under the rule for ``alias``.

    Returns:
        The identity as a string, or "" when it cannot be determined.
    """
    if not isinstance(row, dict):
        return ""
    for name in identity_fields(alias):
        value = row.get(name)
        if value is None or value == "":
            value = row.get(name.lower())
        if value is not None and value != "" and value is not False:
            return str(value)
    return ""


def _loads_trimming_braces(text: str) -> Any:
    """Parse ``text``, dropping surplus closing braces at the end until it parses."""
    while True:
        try:
            return json.loads(text)
        except ValueError:
            trimmed = _TRAILING_BRACE.sub("", text, count=1)
            if trimmed == text:
                raise
            text = trimmed


def parse_positioned_payload(raw_segment: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    Decode the JSON payload embedded in a path segment.

    The segment is URL-decoded and parsed as is; when that fails, surplus
    closing braces at the end are dropped one at a time until it parses.
    Returns the ``item`` sub-object when present, the whole payload otherwise,
    and None when the segment is not a JSON object.
    """
    if not raw_segment:
        return None
    text = unquote(raw_segment)
    try:
        payload = _loads_trimming_braces(text)
    except ValueError:
        logger.debug("Positioned payload is not JSON: %s", text[:200])
        return None
    if not isinstance(payload, dict):
        return None
    item = payload.get("item")
    if isinstance(item, dict):
        return item
    return payload


def find_positioned(alias: str, rows: List[Dict[str, Any]], raw_segment: Optional[str]) -> Dict[str, Any]:
    """
    Find the row a UI cursor points at.

    Matches by identity; with no identity or no match, falls back to the first
    row, and to an empty dict when the alias has no rows.
    """
    positioned = parse_positioned_payload(raw_segment)
    wanted = resolve_id(alias, positioned) if positioned else ""
    if wanted:
        for row in rows:
            if resolve_id(alias, row) == wanted:
                return row
    return rows[0] if rows else {}
