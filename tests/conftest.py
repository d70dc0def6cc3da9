"""Pytest configuration and shared fixtures."""

import os
from datetime import datetime

import pytest

from dataobject_seed.backends.staging import StagingObjectStore
from dataobject_seed.catalog import booking_registry
from dataobject_seed.config import SeedingConfig
from dataobject_seed.generators.registry import StrategyRegistry, reset_strategies
from dataobject_seed.type_registry import StaticTypeRegistry

REFERENCE_DATE = datetime(2026, 2, 1, 12, 0)


@pytest.fixture
def reference_date() -> datetime:
    return REFERENCE_DATE


@pytest.fixture
def store() -> StagingObjectStore:
    """Empty in-memory object store holding only the root folder."""
    return StagingObjectStore()


@pytest.fixture
def type_registry() -> StaticTypeRegistry:
    return booking_registry()


@pytest.fixture
def strategies() -> StrategyRegistry:
    return StrategyRegistry.with_builtin()


@pytest.fixture
def seeding_config() -> SeedingConfig:
    return SeedingConfig(reference_date=REFERENCE_DATE)


@pytest.fixture(autouse=True)
def restore_global_strategies():
    """Undo register_strategy() calls made by a test."""
    yield
    reset_strategies()


@pytest.fixture
def db_conn():
    """
    Provide a test database connection.

    Set DATAOBJECT_SEED_TEST_DSN to a disposable database to run
    the PostgreSQL tests; they are skipped otherwise.
    """
    dsn = os.environ.get("DATAOBJECT_SEED_TEST_DSN")
    if not dsn:
        pytest.skip("DATAOBJECT_SEED_TEST_DSN not set")

    import psycopg

    try:
        conn = psycopg.connect(dsn, autocommit=False)
    except psycopg.OperationalError as e:
        pytest.skip(f"Test database not reachable: {e}")

    yield conn

    conn.rollback()
    conn.close()
