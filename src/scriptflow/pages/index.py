"""Index route: send each user to their home page."""

from nicegui import ui

from scriptflow.auth import get_session_info
from scriptflow.pages.layout import home_route
from scriptflow.pages.registry import page_route


@page_route("/", title="Home", icon="home", category="hidden", requires_auth=False)
async def index_page() -> None:
    info = get_session_info()
    ui.navigate.to(home_route(info.role) if info else "/login")
