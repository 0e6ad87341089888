"""Shared layout components for ScriptFlow.

Provides the header, navigation drawer, and the sign-in gate pages call
before rendering anything user-specific.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING

from nicegui import app, ui

from scriptflow.auth import get_session_info
from scriptflow.pages.registry import get_pages_by_category

if TYPE_CHECKING:
    from collections.abc import Iterator

    from scriptflow.auth import SessionInfo

BRAND_COLOR = "#1A1A1A"


def _get_session_user() -> dict | None:
    """Get the current user from session storage."""
    return app.storage.user.get("auth_user")


def require_user(*, staff: bool = False) -> SessionInfo | None:
    """Return the signed-in user, or redirect and return None.

    Args:
        staff: Also require the ``krtva`` role; clients are sent to their
            dashboard.
    """
    info = get_session_info()
    if info is None:
        ui.navigate.to("/login")
        return None
    if staff and info.role != "krtva":
        ui.navigate.to("/dashboard")
        return None
    return info


def home_route(role: str) -> str:
    return "/admin" if role == "krtva" else "/dashboard"


def _nav_item(label: str, route: str, icon: str | None = None) -> None:
    with ui.item(on_click=lambda: ui.navigate.to(route)).classes("w-full"):
        if icon:
            with ui.item_section().props("avatar"):
                ui.icon(icon)
        with ui.item_section():
            ui.item_label(label)


@contextmanager
def page_layout(title: str = "ScriptFlow") -> Iterator[None]:
    """Context manager for consistent page layout with header and nav drawer.

    Usage:
        @ui.page("/my-page")
        async def my_page():
            with page_layout("My Page"):
                ui.label("Page content here")

    Args:
        title: Page title shown in header.
    """
    user = _get_session_user()

    with ui.header().classes("items-center q-py-xs").style(
        f"background-color: {BRAND_COLOR}"
    ):
        menu_btn = ui.button(icon="menu").props("flat color=white")
        ui.label("ScriptFlow").classes("text-h6 text-white q-ml-sm")
        ui.label(title).classes("text-body1 text-grey-4 q-ml-md")

        ui.element("div").classes("flex-grow")

        if user:
            ui.label(user.get("name") or user.get("email", "")).classes(
                "text-white text-body2 q-mr-md"
            )
            ui.button(icon="logout", on_click=lambda: ui.navigate.to("/logout")).props(
                "flat color=white"
            ).tooltip("Logout")

    with ui.left_drawer(value=False).classes("bg-grey-2") as drawer:
        ui.label("Navigation").classes("text-h6 q-pa-md")
        ui.separator()

        with ui.list().props("padding"):
            pages_by_cat = get_pages_by_category(user)
            for category, label in (("main", None), ("admin", "Production")):
                pages = pages_by_cat.get(category, [])
                if not pages:
                    continue
                if label:
                    ui.separator().classes("q-my-md")
                    ui.label(label).classes("text-caption q-px-md text-grey-7")
                for page in pages:
                    _nav_item(page.title, page.route, page.icon)

    menu_btn.on("click", drawer.toggle)

    with ui.element("div").classes("q-pa-md w-full"):
        yield
