"""Integration test configuration.

Every test here talks to PostgreSQL through the application's engine and
is skipped unless TEST_DATABASE_URL is set.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING
from uuid import uuid4

import pytest

from scriptflow.db.engine import close_db, get_engine, init_db

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    skip = pytest.mark.skip(
        reason="TEST_DATABASE_URL not set - skipping database integration tests"
    )
    for item in items:
        if "tests/integration" in str(item.fspath).replace(os.sep, "/"):
            item.add_marker(pytest.mark.integration)
            if not os.environ.get("TEST_DATABASE_URL"):
                item.add_marker(skip)


@pytest.fixture
async def db_engine(db_schema_guard: None) -> AsyncIterator[None]:  # noqa: ARG001
    """Initialize the database engine for one test.

    Schema already exists from Alembic migrations (db_schema_guard).
    """
    await init_db()
    assert get_engine() is not None, "Engine should be initialized after init_db()"

    yield

    await close_db()


@pytest.fixture
def unique_email() -> str:
    return f"test-{uuid4()}@example.com"
