"""Authentication pages for ScriptFlow.

Email and password login through the configured auth client (Stytch, or
MockAuthClient when DEV__AUTH_MOCK is set), plus logout.
"""

from __future__ import annotations

import logging

from nicegui import ui

from scriptflow.auth import (
    authenticate,
    create_session,
    destroy_session,
    get_session_info,
)
from scriptflow.auth.mock import (
    MOCK_CLIENT_EMAIL,
    MOCK_CLIENT_PASSWORD,
    MOCK_STAFF_EMAIL,
    MOCK_STAFF_PASSWORD,
)
from scriptflow.config import get_settings
from scriptflow.pages.layout import home_route
from scriptflow.pages.registry import page_route

logger = logging.getLogger(__name__)


async def _sign_in(email: str, password: str) -> bool:
    """Authenticate and start a session; navigate home on success."""
    identity = await authenticate(email, password)
    if identity is None:
        ui.notify("Invalid email or password", type="negative")
        return False
    create_session(identity)
    logger.info("Session started for %s", identity.email)
    ui.navigate.to(home_route(identity.role))
    return True


def _build_password_section() -> None:
    with ui.card().classes("w-96 p-4"):
        ui.label("Sign in").classes("text-lg font-semibold mb-2")

        email_input = (
            ui.input(label="Email address", placeholder="you@example.com")
            .props('data-testid="email-input"')
            .classes("w-full")
        )
        password_input = (
            ui.input(label="Password", password=True, password_toggle_button=True)
            .props('data-testid="password-input"')
            .classes("w-full")
        )

        async def submit() -> None:
            email = (email_input.value or "").strip()
            password = password_input.value or ""
            if not email or not password:
                ui.notify("Please enter your email and password", type="warning")
                return
            button.props("loading")
            try:
                await _sign_in(email, password)
            finally:
                button.props(remove="loading")

        password_input.on("keydown.enter", submit)
        button = (
            ui.button("Sign in", on_click=submit)
            .props('data-testid="login-btn"')
            .classes("w-full mt-2")
        )


def _build_mock_login_section() -> None:
    """Quick sign-in buttons, shown only when DEV__AUTH_MOCK=true."""
    with ui.card().classes("w-96 p-4 bg-yellow-50 border-yellow-200"):
        ui.label("Mock Login (Testing Only)").classes(
            "text-lg font-semibold mb-2 text-yellow-800"
        )
        ui.label("Click to instantly log in as:").classes(
            "text-sm text-yellow-700 mb-2"
        )

        accounts = [
            ("Production staff", MOCK_STAFF_EMAIL, MOCK_STAFF_PASSWORD),
            ("Client", MOCK_CLIENT_EMAIL, MOCK_CLIENT_PASSWORD),
        ]
        for label, email, password in accounts:

            async def login_as(e: str = email, p: str = password) -> None:
                await _sign_in(e, p)

            ui.button(f"{label} ({email})", on_click=login_as).classes(
                "w-full mb-1"
            ).props("flat")


@page_route(
    "/login", title="Login", icon="login", category="hidden", requires_auth=False
)
async def login_page() -> None:
    """Login page."""
    info = get_session_info()
    if info:
        ui.navigate.to(home_route(info.role))
        return

    with ui.column().classes("w-full items-center mt-16 gap-2"):
        ui.label("ScriptFlow").classes("text-3xl font-bold")
        ui.label("Script review for KRTVA productions").classes("text-grey-7 mb-4")

        if get_settings().dev.auth_mock:
            _build_mock_login_section()
            ui.label("or").classes("my-2 text-grey-6")

        _build_password_section()


@ui.page("/logout")
def logout_page() -> None:
    """Logout and redirect to login."""
    destroy_session()
    ui.navigate.to("/login")
