"""E2E test configuration.

Auto-applies the 'e2e' marker to all tests in this directory. They are
left out of the default run; use ``pytest -m e2e`` with TEST_DATABASE_URL
set and the Playwright browsers installed (``playwright install chromium``).

The app server runs in a subprocess. Before serving it migrates the test
database and creates one review video, writing its share token to a file
the tests read back.
"""

from __future__ import annotations

import os
import socket
import subprocess
import sys
import time
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from collections.abc import Generator

PROJECT_ROOT = Path(__file__).parent.parent.parent
TEST_STORAGE_SECRET = "e2e-storage-secret"


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    """Add e2e marker to all tests in this directory."""
    skip = pytest.mark.skip(reason="TEST_DATABASE_URL not set - skipping e2e tests")
    for item in items:
        if "tests/e2e" in str(item.fspath).replace(os.sep, "/"):
            item.add_marker(pytest.mark.e2e)
            if not os.environ.get("TEST_DATABASE_URL"):
                item.add_marker(skip)


def _find_free_port() -> int:
    """Find an available port on localhost."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("", 0))
        return s.getsockname()[1]


# Script to run NiceGUI server
# Note: PYTEST env vars are cleared so NiceGUI does not enter test mode
_SERVER_SCRIPT = """
import asyncio
import os
import sys
from pathlib import Path

for key in list(os.environ.keys()):
    if 'PYTEST' in key or 'NICEGUI' in key:
        del os.environ[key]

port = int(sys.argv[1])
token_file = Path(sys.argv[2])

from nicegui import app, ui

import scriptflow.pages  # noqa: F401 - registers routes
from scriptflow.config import get_settings
from scriptflow.db import close_db, init_db, run_alembic_upgrade
from tests.e2e.review_data import create_review_video

run_alembic_upgrade()


async def _prepare() -> None:
    await init_db()
    try:
        token_file.write_text(await create_review_video())
    finally:
        await close_db()


asyncio.run(_prepare())
app.on_startup(init_db)
app.on_shutdown(close_db)

ui.run(
    port=port,
    reload=False,
    show=False,
    storage_secret=get_settings().app.storage_secret.get_secret_value(),
)
"""


@pytest.fixture(scope="session")
def share_token_file(tmp_path_factory: pytest.TempPathFactory) -> Path:
    """Where the app server writes the review video's share token."""
    return tmp_path_factory.mktemp("e2e") / "share_token"


@pytest.fixture(scope="session")
def app_server(share_token_file: Path) -> Generator[str]:
    """Start the app on a random port and yield its base URL."""
    port = _find_free_port()
    url = f"http://localhost:{port}"

    clean_env = {
        k: v for k, v in os.environ.items() if "PYTEST" not in k and "NICEGUI" not in k
    }
    clean_env["DATABASE__URL"] = os.environ["TEST_DATABASE_URL"]
    clean_env["APP__STORAGE_SECRET"] = TEST_STORAGE_SECRET

    process = subprocess.Popen(
        [sys.executable, "-c", _SERVER_SCRIPT, str(port), str(share_token_file)],
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        env=clean_env,
        cwd=PROJECT_ROOT,
    )

    # Migrations run first, so allow longer than a bare server start
    max_wait = 30  # seconds
    start_time = time.time()
    while time.time() - start_time < max_wait:
        if process.poll() is not None:
            stdout, stderr = process.communicate()
            pytest.fail(
                f"Server process died. Exit code: {process.returncode}\n"
                f"stdout: {stdout.decode()}\n"
                f"stderr: {stderr.decode()}"
            )
        try:
            with socket.create_connection(("localhost", port), timeout=1):
                break
        except OSError:
            time.sleep(0.1)
    else:
        process.terminate()
        pytest.fail(f"Server failed to start within {max_wait} seconds")

    yield url

    process.terminate()
    try:
        process.wait(timeout=5)
    except subprocess.TimeoutExpired:
        process.kill()


@pytest.fixture(scope="session")
def review_url(app_server: str, share_token_file: Path) -> str:
    """Share link of the review video created by the app server."""
    token = share_token_file.read_text().strip()
    return f"{app_server}/review/{token}"
