"""Shared pytest fixtures for ScriptFlow tests."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING
from unittest.mock import MagicMock, patch

import pytest
import pytest_asyncio
from dotenv import load_dotenv

from scriptflow.config import get_settings
from scriptflow.db import run_alembic_upgrade

if TYPE_CHECKING:
    from collections.abc import Generator

load_dotenv()


@pytest.fixture(scope="session")
def db_schema_guard() -> Generator[None]:
    """Set up database schema once at session start.

    This fixture:
    1. Points DATABASE__URL at TEST_DATABASE_URL for test isolation
    2. Runs Alembic migrations to ensure schema exists

    The engine itself is created lazily inside each test's event loop.
    Tests use UUID-based isolation so they don't interfere with each other.
    """
    test_url = os.environ.get("TEST_DATABASE_URL")
    if not test_url:
        pytest.fail(
            "TEST_DATABASE_URL environment variable is required for tests. "
            "Set it to point to a test database (not production!)."
        )
        return

    os.environ["DATABASE__URL"] = test_url
    get_settings.cache_clear()

    try:
        run_alembic_upgrade()
    except RuntimeError as e:
        pytest.fail(str(e))

    yield


@pytest_asyncio.fixture
async def mock_stytch_client():
    """Patch the Stytch B2BClient constructor to return a mock.

    Tests set up the async endpoints they need, e.g.
    ``mock_stytch_client.passwords.authenticate_async = AsyncMock(...)``.
    """
    with patch("scriptflow.auth.client.B2BClient") as mock_cls:
        mock_client = MagicMock()
        mock_cls.return_value = mock_client
        yield mock_client
