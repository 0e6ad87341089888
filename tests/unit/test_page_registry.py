"""Tests for navigation visibility in the page registry."""

from __future__ import annotations

import pytest

from scriptflow.pages import registry
from scriptflow.pages.registry import PageMeta, get_pages_by_category, get_visible_pages


@pytest.fixture
def pages(monkeypatch: pytest.MonkeyPatch) -> None:
    """Replace the global registry with a known set of pages."""
    monkeypatch.setattr(
        registry,
        "_page_registry",
        {
            "/": PageMeta("/", "Home", "home", category="hidden"),
            "/login": PageMeta("/login", "Login", "login", requires_auth=False),
            "/dashboard": PageMeta("/dashboard", "My Projects", "movie", order=10),
            "/admin": PageMeta(
                "/admin", "Admin", "settings", category="admin", requires_staff=True
            ),
        },
    )


@pytest.mark.usefixtures("pages")
class TestVisiblePages:
    """Which entries appear in navigation."""

    def test_anonymous(self) -> None:
        assert [p.route for p in get_visible_pages(None)] == ["/login"]

    def test_client(self) -> None:
        routes = [p.route for p in get_visible_pages({"role": "client"})]
        assert routes == ["/dashboard", "/login"]

    def test_staff_sees_admin_last(self) -> None:
        routes = [p.route for p in get_visible_pages({"role": "krtva"})]
        assert routes == ["/dashboard", "/login", "/admin"]

    def test_grouped_by_category(self) -> None:
        grouped = get_pages_by_category({"role": "krtva"})
        assert list(grouped) == ["main", "admin"]
        assert [p.title for p in grouped["admin"]] == ["Admin"]
