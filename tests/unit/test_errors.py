"""Unit tests for the dictionary error taxonomy and storage error classification."""

import sqlite3

import pytest

from apps.api.services.dictionary.errors import (
    MissingBackingTable,
    NotFoundError,
    StorageErrorKind,
    StorageFault,
    ValidationError,
    classify_storage_error,
    is_missing_table,
)

pytestmark = pytest.mark.unit


class UndefinedTable(Exception):
    """Stands in for psycopg2.errors.UndefinedTable in name only."""


class PgError(Exception):
    def __init__(self, message, pgcode):
        super().__init__(message)
        self.pgcode = pgcode


class PostgrestError(Exception):
    def __init__(self, message, code):
        super().__init__(message)
        self.code = code


class TestClassifyStorageError:
    """Test the single missing-table predicate."""

    @pytest.mark.parametrize(
        "exc",
        [
            sqlite3.OperationalError("no such table: z10"),
            PgError("boom", "42P01"),
            PostgrestError("schema cache", "PGRST205"),
            UndefinedTable("whatever"),
            MissingBackingTable("gone"),
            Exception('relation "z10" does not exist'),
            Exception("Could not find the table 'public.z10' in the schema cache"),
            Exception("Table 'isp.z10' doesn't exist"),
        ],
    )
    def test_missing_table_variants(self, exc):
        assert classify_storage_error(exc) is StorageErrorKind.UNDEFINED_TABLE
        assert is_missing_table(exc) is True

    @pytest.mark.parametrize(
        "exc",
        [
            sqlite3.IntegrityError("UNIQUE constraint failed: z10.z10_cod"),
            PgError("duplicate key", "23505"),
            PostgrestError("bad", 500),
            Exception("connection refused"),
        ],
    )
    def test_other_errors(self, exc):
        assert classify_storage_error(exc) is StorageErrorKind.OTHER
        assert is_missing_table(exc) is False


class TestDictionaryErrors:
    """Test status codes and rendered bodies."""

    def test_not_found_body(self):
        error = NotFoundError("Alias not found: Z99", code="ALIAS_NOT_FOUND")
        assert error.status_code == 404
        assert error.to_dict() == {
            "code": "ALIAS_NOT_FOUND",
            "message": "Alias not found: Z99",
            "detailedMessage": "Alias not found: Z99",
        }

    def test_validation_default_code(self):
        error = ValidationError("bad")
        assert error.status_code == 400
        assert error.code == "VALIDATION_ERROR"

    def test_storage_fault_wraps_driver_error(self):
        cause = sqlite3.OperationalError("disk I/O error")
        error = StorageFault.from_exception(cause, message="Failed to sync alias Z10")
        assert error.status_code == 500
        assert error.cause is cause
        assert error.to_dict()["detailedMessage"] == "disk I/O error"
        assert error.to_dict()["code"] == "STORAGE_FAULT"
