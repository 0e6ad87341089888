"""Command-line utilities for ScriptFlow.

``seed-data`` loads a sample project for development; ``manage-users``
lists, creates and re-roles accounts.
"""

from __future__ import annotations

import asyncio
import sys
from typing import TYPE_CHECKING

from rich.console import Console
from rich.panel import Panel

if TYPE_CHECKING:
    from datetime import datetime

    from scriptflow.db.models import Project, User, Video

console = Console()

SEED_ADMIN_EMAIL = "admin@krtva.com"
SEED_CLIENT_EMAIL = "client@example.com"
SEED_PROJECT_TITLE = "Horizon Coffee Campaign"
SEED_VIDEO_TITLE = "First Light: 30s Commercial"
SEED_YOUTUBE_URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"


def _require_database() -> None:
    from scriptflow.config import get_settings

    if not get_settings().database.url:
        console.print("[red]Error:[/] DATABASE__URL not set")
        sys.exit(1)


# ---------------------------------------------------------------------------
# seed-data
# ---------------------------------------------------------------------------


def seed_tabs() -> list:
    """(title, tab_type, content) for the sample video's tabs."""
    from scriptflow.content import Moodboard, RichText, SceneScript, ScriptBlock

    blocks = [
        ScriptBlock(
            id="block-1",
            timecode="00:00 - 00:05",
            visual=(
                "FADE IN on a misty mountain valley at dawn. Golden light breaks "
                "through the clouds."
            ),
            audio="(Natural ambience: distant birdsong, gentle wind)",
            notes="Magic hour lighting critical.",
        ),
        ScriptBlock(
            id="block-2",
            timecode="00:05 - 00:10",
            visual=(
                "CLOSE-UP: Weathered hands carefully selecting ripe coffee cherries."
            ),
            audio='VO: "Some mornings demand more than coffee."',
        ),
        ScriptBlock(
            id="block-3",
            timecode="00:10 - 00:15",
            visual="MONTAGE: Steam rising from roasting beans. A precise pour-over.",
            audio='VO: "They demand a ritual."',
            notes="Macro shots. Slow motion at 120fps.",
        ),
        ScriptBlock(
            id="block-4",
            timecode="00:15 - 00:22",
            visual="WIDE: Modern kitchen bathed in morning light. A first sip.",
            audio='VO: "Horizon Coffee. Where every cup is the first light of '
            'something new."',
        ),
        ScriptBlock(
            id="block-5",
            timecode="00:22 - 00:30",
            visual='PRODUCT SHOT with end card: "horizoncoffee.com"',
            audio="(Piano resolves) SFX: Gentle cup set-down.",
            notes="End card holds for 3 seconds minimum.",
        ),
    ]
    return [
        (
            "Overview",
            "overview",
            RichText(
                text=(
                    "A 30-second commercial for Horizon Coffee, capturing the "
                    "ritual of morning coffee through cinematic visuals and "
                    "evocative voiceover."
                )
            ),
        ),
        (
            "Pre-production",
            "preproduction",
            RichText(
                text=(
                    "Shot list:\n- Mountain valley at dawn\n"
                    "- Close-up hands picking coffee cherries\n"
                    "- Roasting and pour-over montage\n- Morning kitchen scene\n"
                    "- Product shot with end card"
                )
            ),
        ),
        ("Script v1", "script", SceneScript(blocks=blocks)),
        ("Moodboard", "moodboard", Moodboard()),
    ]


async def _seed_users() -> tuple[User, User]:
    from scriptflow.auth.mock import MOCK_CLIENT_NAME, MOCK_STAFF_NAME
    from scriptflow.db.users import find_or_create_user

    admin, created = await find_or_create_user(
        SEED_ADMIN_EMAIL, MOCK_STAFF_NAME, role="krtva"
    )
    status = "[green]Created" if created else "[yellow]Exists"
    console.print(f"{status}:[/] {SEED_ADMIN_EMAIL} (id={admin.id})")

    client, created = await find_or_create_user(
        SEED_CLIENT_EMAIL, MOCK_CLIENT_NAME, role="client"
    )
    status = "[green]Created" if created else "[yellow]Exists"
    console.print(f"{status}:[/] {SEED_CLIENT_EMAIL} (id={client.id})")
    return admin, client


async def _seed_project(client: User) -> tuple[Project, Video]:
    from sqlmodel import select

    from scriptflow.db.engine import get_session
    from scriptflow.db.models import Project, Video
    from scriptflow.db.projects import create_project
    from scriptflow.db.videos import create_video

    async with get_session() as session:
        result = await session.exec(
            select(Project).where(Project.title == SEED_PROJECT_TITLE)
        )
        project = result.first()

    if project:
        console.print(f"[yellow]Project exists:[/] {SEED_PROJECT_TITLE}")
    else:
        project = await create_project(SEED_PROJECT_TITLE, client.email)
        console.print(f"[green]Created project:[/] {SEED_PROJECT_TITLE}")

    async with get_session() as session:
        result = await session.exec(
            select(Video)
            .where(Video.project_id == project.id)
            .where(Video.title == SEED_VIDEO_TITLE)
        )
        video = result.first()

    if video:
        console.print(f"[yellow]Video exists:[/] {SEED_VIDEO_TITLE}")
    else:
        video = await create_video(
            project.id,
            SEED_VIDEO_TITLE,
            youtube_url=SEED_YOUTUBE_URL,
            tabs=seed_tabs(),
        )
        console.print(f"[green]Created video:[/] {SEED_VIDEO_TITLE}")
    return project, video


def seed_data() -> None:
    """Seed the database with a sample project for development.

    Creates the staff and client accounts, the Horizon Coffee project and
    one video with its four tabs. Idempotent: safe to run multiple times.

    Usage:
        uv run seed-data
    """
    from scriptflow.config import get_settings

    _require_database()

    async def _seed() -> None:
        from scriptflow.db.engine import close_db, init_db

        await init_db()
        try:
            _admin, client = await _seed_users()
            _project, video = await _seed_project(client)
        finally:
            await close_db()

        base_url = get_settings().app.base_url.rstrip("/")
        console.print()
        console.print(
            Panel(
                f"[bold]Login:[/] {base_url}/login\n"
                f"[bold]Staff:[/] {SEED_ADMIN_EMAIL} / admin123\n"
                f"[bold]Client:[/] {SEED_CLIENT_EMAIL} / client123\n"
                f"[bold]Video:[/] {base_url}/video/{video.id}\n"
                f"[bold]Review link:[/] {base_url}/review/{video.share_token}",
                title="Seed Data Ready",
            )
        )

    asyncio.run(_seed())


# ---------------------------------------------------------------------------
# manage-users
# ---------------------------------------------------------------------------


def _format_last_login(dt: datetime | None) -> str:
    """Format a last_login timestamp for display."""
    if dt is None:
        return "Never"
    return dt.strftime("%Y-%m-%d %H:%M")


def _build_user_parser():
    """Build argparse parser for manage-users subcommands."""
    import argparse

    parser = argparse.ArgumentParser(
        prog="manage-users",
        description="Manage ScriptFlow accounts and roles.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List all users")

    create_p = sub.add_parser("create", help="Create a new user")
    create_p.add_argument("email", help="User email address")
    create_p.add_argument(
        "--name", default=None, help="Display name (default: derived from email)"
    )
    create_p.add_argument(
        "--role", choices=("krtva", "client"), default="client", help="Account role"
    )

    role_p = sub.add_parser("role", help="Change a user's role")
    role_p.add_argument("email", help="User email address")
    role_p.add_argument("new_role", choices=("krtva", "client"), help="New role")

    return parser


async def _cmd_list(*, console: Console | None = None) -> None:
    """List users as a Rich table."""
    from rich.table import Table

    from scriptflow.db.users import list_all_users

    con = console or globals()["console"]
    users = await list_all_users()
    if not users:
        con.print("[yellow]No users found.[/]")
        return

    table = Table(title="Users")
    table.add_column("Email", style="cyan")
    table.add_column("Name")
    table.add_column("Role")
    table.add_column("Last Login")
    for u in users:
        table.add_row(
            u.email,
            u.display_name,
            "[green]staff[/]" if u.is_staff else "client",
            _format_last_login(u.last_login),
        )
    con.print(table)


async def _cmd_create(
    email: str,
    *,
    name: str | None = None,
    role: str = "client",
    console: Console | None = None,
) -> None:
    from scriptflow.db.users import find_or_create_user

    con = console or globals()["console"]
    user, created = await find_or_create_user(email, name, role=role)
    if created:
        con.print(f"[green]Created[/] {role} '{email}' ({user.display_name})")
    else:
        con.print(f"[yellow]Already exists:[/] '{email}' (id={user.id})")


async def _cmd_role(
    email: str, new_role: str, *, console: Console | None = None
) -> None:
    from scriptflow.db.users import get_user_by_email, set_role

    con = console or globals()["console"]
    user = await get_user_by_email(email)
    if user is None:
        con.print(f"[red]Error:[/] no user found with email '{email}'")
        sys.exit(1)
    await set_role(user.id, new_role)
    con.print(f"[green]Updated[/] '{email}' role -> {new_role}")


def manage_users() -> None:
    """Manage ScriptFlow accounts.

    Usage:
        uv run manage-users <command> [options]

    Commands:
        list                    List all users
        create <email>          Create a user (--name, --role)
        role <email> <role>     Change a user's role (krtva or client)
    """
    parser = _build_user_parser()
    args = parser.parse_args(sys.argv[1:])
    _require_database()

    async def _run() -> None:
        from scriptflow.db.engine import close_db, init_db

        await init_db()
        try:
            match args.command:
                case "list":
                    await _cmd_list()
                case "create":
                    await _cmd_create(args.email, name=args.name, role=args.role)
                case "role":
                    await _cmd_role(args.email, args.new_role)
        finally:
            await close_db()

    asyncio.run(_run())
