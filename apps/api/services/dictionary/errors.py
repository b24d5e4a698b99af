"""Error taxonomy for the dictionary/alias subsystem.

Every error carries a machine-readable code, a human message and an optional
detailed message so the app-level handlers can render a structured body.
"""

# flake8: noqa: E501

import re
from enum import Enum
from typing import Any, Dict, Optional

from apps.api.models.pydantic.common import ErrorResponse


class DictionaryError(Exception):
    """Base error for dictionary operations."""

    status_code = 500
    default_code = "DICTIONARY_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        detailed_message: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.detailed_message = detailed_message or message

    def to_dict(self) -> Dict[str, Any]:
        """Render the error as a response body."""
        return ErrorResponse(
            code=self.code, message=self.message, detailed_message=self.detailed_message
        ).to_body()


class NotFoundError(DictionaryError):
    """Alias or record absent."""

    status_code = 404
    default_code = "NOT_FOUND"


class ValidationError(DictionaryError):
    """Write payload missing required correlation fields or malformed."""

    status_code = 400
    default_code = "VALIDATION_ERROR"


class StorageFault(DictionaryError):
    """Any persistence error other than a missing backing table."""

    status_code = 500
    default_code = "STORAGE_FAULT"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        detailed_message: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message, code=code, detailed_message=detailed_message)
        self.cause = cause

    @classmethod
    def from_exception(
        cls, exc: BaseException, message: str = "Storage operation failed", code: Optional[str] = None
    ) -> "StorageFault":
        """Wrap a driver error, keeping its text for diagnostics."""
        return cls(message, code=code, detailed_message=str(exc), cause=exc)


class MissingBackingTable(DictionaryError):
    """Physical table for an alias does not exist.

    Raised internally only; readers recover it as an empty result set.
    """

    status_code = 500
    default_code = "MISSING_BACKING_TABLE"


# ==================== Storage error classification ====================


class StorageErrorKind(str, Enum):
    """Normalized kinds of persistence errors."""

    UNDEFINED_TABLE = "undefined_table"
    OTHER = "other"


# SQLSTATE for undefined relations and PostgREST's schema-cache miss
_UNDEFINED_TABLE_CODES = {"42P01", "PGRST205"}

_UNDEFINED_TABLE_PATTERNS = [
    re.compile(r"no such table", re.IGNORECASE),
    re.compile(r"relation\s+\S+\s+does not exist", re.IGNORECASE),
    re.compile(r"could not find the table", re.IGNORECASE),
    re.compile(r"table\s+\S+\s+doesn't exist", re.IGNORECASE),
]


def classify_storage_error(exc: BaseException) -> StorageErrorKind:
    """Map a driver or gateway exception to a StorageErrorKind.

    Looks at the SQLSTATE (``pgcode`` on psycopg2, ``sqlstate`` on psycopg 3,
    ``code`` on PostgREST errors), the exception class name and finally the
    message text.
    """
    for attr in ("pgcode", "sqlstate", "code"):
        value = getattr(exc, attr, None)
        if isinstance(value, str) and value.upper() in _UNDEFINED_TABLE_CODES:
            return StorageErrorKind.UNDEFINED_TABLE

    if type(exc).__name__ in ("UndefinedTable", "MissingBackingTable"):
        return StorageErrorKind.UNDEFINED_TABLE

    text = str(exc)
    if any(pattern.search(text) for pattern in _UNDEFINED_TABLE_PATTERNS):
        return StorageErrorKind.UNDEFINED_TABLE

    return StorageErrorKind.OTHER


def is_missing_table(exc: BaseException) -> bool:
    """True when the error means the backing table does not exist yet."""
    return classify_storage_error(exc) is StorageErrorKind.UNDEFINED_TABLE
