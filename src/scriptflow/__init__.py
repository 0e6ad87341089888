"""ScriptFlow - a client review portal for video scripts.

Production staff publish scripts, moodboards and notes per video; clients
review them, leave comments anchored to selected text, and approve or
request changes.
"""

import logging
import os
import subprocess
from logging.handlers import RotatingFileHandler
from pathlib import Path

__version__ = "0.1.0"


def get_git_commit() -> str:
    """Get the short git commit hash, or 'unknown' if not in a git repo."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            capture_output=True,
            text=True,
            check=True,
            timeout=5,
        )
        return result.stdout.strip()
    except (
        subprocess.CalledProcessError,
        FileNotFoundError,
        subprocess.TimeoutExpired,
    ):
        return "unknown"


def get_version_string() -> str:
    return f"{__version__}+{get_git_commit()}"


def _setup_logging(log_dir: Path) -> None:
    """Configure logging to both console and a rotating per-process file."""
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"scriptflow.{os.getpid()}.log"

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # 10MB per file, keep 5 backups
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    logging.info("Logging configured. Log file: %s", log_file.absolute())


def main() -> None:
    """Entry point for the ScriptFlow application."""
    from nicegui import app, ui

    from scriptflow.config import get_settings

    settings = get_settings()
    _setup_logging(settings.app.log_dir)

    import scriptflow.pages  # noqa: F401 - registers routes

    if settings.database.url:
        from scriptflow.db import (
            close_db,
            ensure_database_exists,
            get_engine,
            init_db,
            run_alembic_upgrade,
            verify_schema,
        )

        if ensure_database_exists(settings.database.url):
            print("Created database - run `seed-data` to load the demo project")
        run_alembic_upgrade()

        @app.on_startup
        async def startup() -> None:
            await init_db()
            await verify_schema(get_engine())
            print("Database connected")

        @app.on_shutdown
        async def shutdown() -> None:
            await close_db()

    port = settings.app.port
    storage_secret = settings.app.storage_secret.get_secret_value()

    print(f"ScriptFlow v{get_version_string()}")
    print(f"Starting application on http://0.0.0.0:{port}")

    reload = os.environ.get("SCRIPTFLOW_RELOAD", "1") != "0"
    ui.run(
        host="0.0.0.0",  # nosec B104
        port=port,
        title="ScriptFlow",
        reload=reload,
        storage_secret=storage_secret,
    )


if __name__ in {"__main__", "__mp_main__"}:
    main()
