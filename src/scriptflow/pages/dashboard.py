"""Client dashboard: the projects and videos a user can review."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from uuid import UUID

from nicegui import ui

from scriptflow.content import youtube_thumbnail
from scriptflow.db.projects import list_projects_for
from scriptflow.db.users import get_user_by_id
from scriptflow.pages.components import status_chip
from scriptflow.pages.layout import page_layout, require_user
from scriptflow.pages.registry import page_route

if TYPE_CHECKING:
    from scriptflow.db.models import Video

logger = logging.getLogger(__name__)


def thumbnail_for(video: Video) -> str | None:
    """Explicit thumbnail, else one derived from the YouTube link."""
    return video.thumbnail_url or youtube_thumbnail(video.youtube_url)


def _video_card(video: Video) -> None:
    with (
        ui.card()
        .classes("w-72 p-0 cursor-pointer hover:shadow-lg")
        .on("click", lambda v=video: ui.navigate.to(f"/video/{v.id}"))
    ):
        thumb = thumbnail_for(video)
        if thumb:
            ui.image(thumb).classes("w-full h-40 object-cover")
        else:
            with ui.element("div").classes(
                "w-full h-40 bg-grey-3 flex items-center justify-center"
            ):
                ui.icon("movie", size="xl").classes("text-grey-6")
        with ui.column().classes("p-3 gap-1"):
            ui.label(video.title).classes("font-medium")
            status_chip(video.review_status)


@page_route("/dashboard", title="My Projects", icon="movie", order=10)
async def dashboard_page() -> None:
    info = require_user()
    if info is None:
        return

    user = await get_user_by_id(UUID(info.user_id))
    if user is None:
        logger.warning("Session user %s no longer exists", info.user_id)
        ui.navigate.to("/logout")
        return

    projects = await list_projects_for(user)

    with page_layout("Projects"):
        ui.label(f"Welcome back, {info.name}").classes("text-2xl font-semibold mb-4")

        if not projects:
            ui.label("No projects yet. Your producer will share them here.").classes(
                "text-grey-6"
            )
            return

        for project, videos in projects:
            ui.label(project.title).classes(
                "text-xs uppercase tracking-wide text-grey-7 mt-4"
            )
            if not videos:
                ui.label("No videos in this project yet").classes(
                    "text-sm text-grey-5"
                )
                continue
            with ui.row().classes("gap-4 flex-wrap"):
                for video in videos:
                    _video_card(video)
