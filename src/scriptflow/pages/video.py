"""Video review routes.

``/video/{video_id}`` is the signed-in view: staff edit and comment,
clients comment and approve. Staff can see what the client sees with
``?access=client``.

``/review/{share_token}`` opens the same view without an account. The
reviewer is asked for a name the first time they comment; it is kept in
per-browser storage for later visits.
"""

from __future__ import annotations

import logging
from functools import partial
from uuid import UUID

from nicegui import app, ui

from scriptflow.auth import (
    can_view_video,
    get_session_info,
    is_staff,
    resolve_access_mode,
)
from scriptflow.config import get_settings
from scriptflow.db.videos import (
    VideoNotFoundError,
    get_video_by_share_token,
    get_video_with_tabs,
)
from scriptflow.pages.layout import BRAND_COLOR, page_layout, require_user
from scriptflow.pages.registry import page_route
from scriptflow.pages.review_view import ReviewView
from scriptflow.review.identity import (
    SessionIdentityProvider,
    StorageIdentityProvider,
)

logger = logging.getLogger(__name__)


def _not_found(message: str) -> None:
    with ui.column().classes("w-full items-center mt-16 gap-2"):
        ui.icon("movie_off", size="xl").classes("text-grey-5")
        ui.label(message).classes("text-lg text-grey-7")


@page_route(
    "/video/{video_id}",
    title="Video",
    icon="movie",
    category="hidden",
)
async def video_page(video_id: str, access: str | None = None) -> None:
    info = require_user()
    if info is None:
        return

    try:
        data = await get_video_with_tabs(UUID(video_id))
    except (ValueError, VideoNotFoundError):
        with page_layout("Video"):
            _not_found("Video not found")
        return

    if not can_view_video(info, data.project):
        logger.warning("User %s denied access to video %s", info.user_id, video_id)
        with page_layout("Video"):
            _not_found("Video not found")
        return

    staff = is_staff(info)
    mode = resolve_access_mode(access, staff)
    view = ReviewView(
        data,
        mode=mode,
        identity=SessionIdentityProvider(info.user_id, info.name),
        config=get_settings().review,
        can_approve=not staff,
        preview=staff and mode == "client",
    )
    with page_layout(data.video.title):
        await view.build()


async def _ask_name(identity: StorageIdentityProvider) -> bool:
    """Prompt for a display name; False if the reviewer backs out."""
    with ui.dialog() as dialog, ui.card().classes("w-96"):
        ui.label("What's your name?").classes("text-lg font-semibold")
        ui.label("It is shown next to your comments.").classes(
            "text-sm text-grey-7"
        )
        name = (
            ui.input("Your name")
            .props('autofocus data-testid="commenter-name"')
            .classes("w-full")
        )
        name.on("keydown.enter", lambda: dialog.submit(name.value))
        with ui.row().classes("w-full justify-end"):
            ui.button("Cancel", on_click=lambda: dialog.submit(None)).props("flat")
            ui.button("Continue", on_click=lambda: dialog.submit(name.value))

    result = await dialog
    dialog.delete()
    if not result:
        return False
    try:
        identity.remember(result)
    except ValueError:
        ui.notify("Please enter your name", type="warning")
        return False
    return True


@ui.page("/review/{share_token}")
async def shared_review_page(share_token: str) -> None:
    with (
        ui.header()
        .classes("items-center q-py-xs")
        .style(f"background-color: {BRAND_COLOR}")
    ):
        ui.label("ScriptFlow").classes("text-h6 text-white q-ml-sm")

    data = await get_video_by_share_token(share_token)
    if data is None:
        _not_found("This review link is no longer valid")
        return

    info = get_session_info()
    if info is not None:
        identity = SessionIdentityProvider(info.user_id, info.name)
        ensure_identity = None
    else:
        anonymous = StorageIdentityProvider(app.storage.user)
        identity = anonymous
        ensure_identity = partial(_ask_name, anonymous)

    view = ReviewView(
        data,
        mode="client",
        identity=identity,
        config=get_settings().review,
        ensure_identity=ensure_identity,
    )
    with ui.element("div").classes("q-pa-md w-full"):
        await view.build()
