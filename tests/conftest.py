"""Pytest configuration and fixtures for the ISP gateway tests.

This module provides fixtures for both unit tests and integration tests.
Unit tests run components directly against the mock store or an in-memory
SQLite PyDAL connection. Integration tests drive the Flask app over HTTP,
backed either by the mock store or by a SQLite file database.
"""

import os

import pytest

# Set testing environment before any app imports
os.environ.setdefault("FLASK_ENV", "testing")
os.environ.pop("DATABASE_URL", None)
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-testing-only")

# PyDAL keys per-thread connections by adapter id; retired handles stay
# referenced so pool threads never match a new database to a closed one.
_retired_dbs = []


def create_alias_tables(db, rows_by_alias=None):
    """
    Create and fill alias data tables (z10, z11...) on a PyDAL connection.

    Columns are declared without a type so SQLite keeps each value's own
    storage class (numbers stay numbers).

    Args:
        db: PyDAL DAL
        rows_by_alias: Mapping alias -> rows, defaults to the mock seed
    """
    from apps.api.services.dictionary.seed import seed_rows

    rows_by_alias = seed_rows() if rows_by_alias is None else rows_by_alias
    for alias, rows in rows_by_alias.items():
        columns = []
        for row in rows:
            for key in row:
                if key.lower() not in columns:
                    columns.append(key.lower())
        declared = ", ".join(f'"{column}"' for column in columns)
        db.executesql(f'CREATE TABLE IF NOT EXISTS "{alias.lower()}" ({declared})')
        for row in rows:
            keys = [key.lower() for key in row]
            marks = ", ".join("?" for _ in keys)
            quoted = ", ".join(f'"{key}"' for key in keys)
            db.executesql(f'INSERT INTO "{alias.lower()}" ({quoted}) VALUES ({marks})', placeholders=list(row.values()))
    db.commit()


@pytest.fixture
def alias_tables():
    """Helper that creates and fills alias data tables on a PyDAL connection."""
    return create_alias_tables


@pytest.fixture(scope="function")
def app():
    """
    Create Flask application for testing on the mock store.

    Function scoped: each test gets a fresh seed dataset.

    Returns:
        Flask app configured for testing
    """
    from apps.api.main import create_app

    app = create_app("testing")

    with app.app_context():
        yield app


@pytest.fixture(scope="function")
def client(app):
    """
    Create Flask test client.

    Args:
        app: Flask application fixture

    Returns:
        Flask test client
    """
    return app.test_client()


@pytest.fixture(scope="function")
def memory_db(tmp_path):
    """
    In-memory SQLite PyDAL connection with the dictionary tables created.

    Only usable from the test's own thread.

    Yields:
        PyDAL db instance
    """
    from pydal import DAL

    from shared.models.pydal_models import define_all_tables

    db = DAL("sqlite:memory", folder=str(tmp_path), migrate=True)
    define_all_tables(db, migrate=True)
    db.commit()
    yield db
    db.close()
    _retired_dbs.append(db)


@pytest.fixture(scope="function")
def db_app(tmp_path):
    """
    Flask application backed by a SQLite file database.

    The dictionary tables are created by PyDAL migrate and the alias tables
    are filled with the mock seed, so HTTP scenarios can run against the
    persistent path. Schemas still need a sync before they can be read.

    Yields:
        Flask app configured for testing with the database backend
    """
    from apps.api.config import Settings
    from apps.api.main import create_app

    settings = Settings(
        database_url="sqlite://gateway.sqlite",
        db_folder=str(tmp_path),
        db_migrate=True,
        dictionary_backend="database",
        db_pool_size=0,
    )
    app = create_app("testing", settings)
    create_alias_tables(app.db)

    with app.app_context():
        yield app

    app.db.close()
    _retired_dbs.append(app.db)


@pytest.fixture(scope="function")
def db_client(db_app):
    """Test client for the database-backed app."""
    return db_app.test_client()


@pytest.fixture
def auth_app():
    """Flask app with AUTH_REQUIRED enabled."""
    from apps.api.config import Settings
    from apps.api.main import create_app

    app = create_app("testing", Settings(auth_required=True))
    with app.app_context():
        yield app


@pytest.fixture
def make_token():
    """
    Factory signing HS256 bearer tokens with the app's JWT_SECRET.

    Call inside an app context. ``expires_in`` defaults to one hour; pass a
    negative timedelta for an already expired token.
    """
    from datetime import datetime, timedelta, timezone

    import jwt
    from flask import current_app

    def _make_token(claims, expires_in=timedelta(hours=1)):
        now = datetime.now(timezone.utc)
        payload = {**claims, "iat": now, "exp": now + expires_in}
        return jwt.encode(payload, current_app.config["JWT_SECRET"], algorithm="HS256")

    return _make_token


@pytest.fixture
def mock_pydal_db(mocker):
    """
    Create a mock PyDAL database for unit tests.

    Use this fixture for unit tests that shouldn't touch a real database.

    Args:
        mocker: pytest-mock fixture

    Returns:
        MagicMock configured as a PyDAL db
    """
    mock_db = mocker.MagicMock()
    mock_db._adapter.dbengine = "postgres"
    mock_db.commit = mocker.MagicMock()
    mock_db.rollback = mocker.MagicMock()

    return mock_db


# Markers for test categories
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (drive the Flask app over HTTP)"
    )
    config.addinivalue_line(
        "markers", "slow: Tests that take a long time to run"
    )
