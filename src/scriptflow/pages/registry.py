"""Page registration system for data-driven navigation.

Provides a decorator for registering pages with metadata, so the navigation
drawer can be built from what the current user is allowed to open.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from nicegui import ui

if TYPE_CHECKING:
    from collections.abc import Callable

Category = Literal["main", "admin", "hidden"]


@dataclass
class PageMeta:
    """Metadata for a registered page."""

    route: str
    title: str
    icon: str
    category: Category = "main"
    requires_auth: bool = True
    requires_staff: bool = False
    order: int = field(default=100)


# Global registry of all pages
_page_registry: dict[str, PageMeta] = {}


def page_route(
    route: str,
    *,
    title: str,
    icon: str,
    category: Category = "main",
    requires_auth: bool = True,
    requires_staff: bool = False,
    order: int = 100,
) -> Callable:
    """Decorator to register a page with navigation metadata.

    Usage:
        @page_route("/dashboard", title="My Projects", icon="movie", order=10)
        async def dashboard_page():
            ...

    Args:
        route: URL path for the page.
        title: Display title in navigation.
        icon: Material icon name.
        category: Navigation section (main, admin, hidden).
        requires_auth: Whether page requires a signed-in user.
        requires_staff: Whether page requires the ``krtva`` role.
        order: Sort order within category (lower = higher).

    Returns:
        Decorated function registered with NiceGUI and the page registry.
    """

    def decorator(func: Callable) -> Callable:
        _page_registry[route] = PageMeta(
            route=route,
            title=title,
            icon=icon,
            category=category,
            requires_auth=requires_auth,
            requires_staff=requires_staff,
            order=order,
        )
        return ui.page(route)(func)

    return decorator


def get_visible_pages(user: dict | None) -> list[PageMeta]:
    """Pages the user may open, sorted by category then order.

    Args:
        user: ``auth_user`` dict from session storage, or None.
    """
    is_authenticated = user is not None
    is_staff = bool(user and user.get("role") == "krtva")

    visible = []
    for meta in _page_registry.values():
        if meta.category == "hidden":
            continue
        if meta.requires_auth and not is_authenticated:
            continue
        if meta.requires_staff and not is_staff:
            continue
        visible.append(meta)

    category_order = {"main": 0, "admin": 1}
    visible.sort(key=lambda p: (category_order.get(p.category, 99), p.order))
    return visible


def get_pages_by_category(user: dict | None) -> dict[str, list[PageMeta]]:
    by_category: dict[str, list[PageMeta]] = {}
    for page in get_visible_pages(user):
        by_category.setdefault(page.category, []).append(page)
    return by_category
