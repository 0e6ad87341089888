"""Database bootstrap and schema checks for ScriptFlow.

Alembic is the only way schema is created or changed. This module creates
the target database on first run, applies migrations, and verifies at
startup that every mapped table exists.
"""

from __future__ import annotations

import logging
import os
import re
import subprocess
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import psycopg
import psycopg.sql
from sqlalchemy import inspect
from sqlmodel import SQLModel

from scriptflow.config import get_settings

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger(__name__)

_DB_NAME_RE = re.compile(r"^[a-zA-Z0-9_]+$")


def _maintenance_url(url: str) -> str:
    """Point a database URL at the ``postgres`` maintenance database."""
    base = url.split("?", maxsplit=1)[0]
    maintenance = base.rsplit("/", 1)[0] + "/postgres"
    maintenance = maintenance.replace("postgresql+asyncpg://", "postgresql://")
    if "?" in url:
        maintenance += "?" + url.split("?", 1)[1]
    return maintenance


def ensure_database_exists(url: str | None) -> bool:
    """Create the target database if it doesn't exist.

    Args:
        url: PostgreSQL connection string. If None or empty, no-op.

    Returns:
        True if a new database was created, False otherwise.

    Raises:
        ValueError: If the database name contains invalid characters.
    """
    if not url:
        return False

    base = url.split("?")[0]
    if "/" not in base:
        return False
    db_name = base.rsplit("/", 1)[1]
    if not db_name:
        return False
    if not _DB_NAME_RE.match(db_name):
        msg = f"Invalid database name: {db_name!r}"
        raise ValueError(msg)

    # CREATE DATABASE cannot run inside a transaction
    with psycopg.connect(_maintenance_url(url), autocommit=True) as conn:
        row = conn.execute(
            "SELECT 1 FROM pg_database WHERE datname = %s", (db_name,)
        ).fetchone()
        if row is None:
            stmt = psycopg.sql.SQL("CREATE DATABASE {}").format(
                psycopg.sql.Identifier(db_name)
            )
            conn.execute(stmt)
            logger.info("Created database %s", db_name)
            return True

    return False


def is_db_configured() -> bool:
    """Check if database URL is configured in Settings."""
    return bool(get_settings().database.url)


def run_alembic_upgrade() -> None:
    """Run Alembic migrations to upgrade schema to head.

    Raises:
        RuntimeError: If DATABASE__URL is not configured or migrations fail.
    """
    if not is_db_configured():
        msg = "DATABASE__URL not configured; cannot run migrations"
        raise RuntimeError(msg)

    ensure_database_exists(get_settings().database.url)

    # alembic.ini lives at the project root
    project_root = Path(__file__).parent.parent.parent.parent

    result = subprocess.run(
        [sys.executable, "-m", "alembic", "upgrade", "head"],
        capture_output=True,
        encoding="utf-8",
        check=False,
        cwd=project_root,
        env=dict(os.environ),
    )

    if result.returncode != 0:
        raise RuntimeError(
            f"Alembic migrations failed:\n"
            f"stdout: {result.stdout}\n"
            f"stderr: {result.stderr}"
        )
    logger.info("Alembic upgrade to head complete")


def get_expected_tables() -> set[str]:
    """Get the set of table names registered on SQLModel metadata."""
    import scriptflow.db.models  # noqa: F401, PLC0415

    return set(SQLModel.metadata.tables.keys())


async def verify_schema(engine: AsyncEngine | None) -> None:
    """Fail fast at startup if any mapped table is missing.

    Raises:
        RuntimeError: If engine is None or tables are missing.
    """
    if engine is None:
        raise RuntimeError("Database engine is not initialized")

    expected_tables = get_expected_tables()

    async with engine.begin() as connection:
        existing_tables = await connection.run_sync(
            lambda sync_conn: set(inspect(sync_conn).get_table_names())
        )

    missing_tables = expected_tables - existing_tables
    if missing_tables:
        masked_url = mask_password(get_settings().database.url or "<unset>")
        missing = ", ".join(sorted(missing_tables))
        raise RuntimeError(
            f"Database schema is missing required tables: {missing}. "
            f"DATABASE__URL={masked_url}. "
            f"Run 'alembic upgrade head' to create tables."
        )


def mask_password(url: str) -> str:
    """Mask the password in a database URL for safe logging."""
    if "@" not in url or "://" not in url:
        return url

    protocol, rest = url.split("://", 1)
    creds, host_part = rest.rsplit("@", 1)
    if ":" not in creds:
        return url
    user, _ = creds.split(":", 1)
    return f"{protocol}://{user}:***@{host_part}"
