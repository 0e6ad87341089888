"""Production admin: create and remove projects and videos.

Staff only. Each video row links to its editing view, the client preview
(``?access=client``) and the anonymous share link.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from uuid import UUID

from nicegui import ui

from scriptflow.config import get_settings
from scriptflow.db.projects import create_project, delete_project, list_projects_for
from scriptflow.db.users import get_user_by_id
from scriptflow.db.videos import create_video, delete_video
from scriptflow.pages.components import status_chip
from scriptflow.pages.layout import page_layout, require_user
from scriptflow.pages.registry import page_route

if TYPE_CHECKING:
    from scriptflow.db.models import Project, Video

logger = logging.getLogger(__name__)


def share_url(video: Video) -> str:
    return f"{get_settings().app.base_url.rstrip('/')}/review/{video.share_token}"


async def _confirm(message: str) -> bool:
    with ui.dialog() as dialog, ui.card():
        ui.label(message)
        with ui.row().classes("w-full justify-end"):
            ui.button("Cancel", on_click=lambda: dialog.submit(False)).props("flat")
            ui.button("Delete", on_click=lambda: dialog.submit(True)).props(
                "color=negative"
            )
    return bool(await dialog)


@page_route(
    "/admin",
    title="Productions",
    icon="video_library",
    category="admin",
    requires_staff=True,
    order=10,
)
async def admin_page() -> None:
    info = require_user(staff=True)
    if info is None:
        return
    user = await get_user_by_id(UUID(info.user_id))
    if user is None:
        ui.navigate.to("/logout")
        return

    async def new_project() -> None:
        with ui.dialog() as dialog, ui.card().classes("w-96"):
            ui.label("New project").classes("text-lg font-semibold")
            title = ui.input("Project title").classes("w-full")
            client_email = ui.input(
                "Client email", placeholder="client@example.com"
            ).classes("w-full")
            with ui.row().classes("w-full justify-end"):
                ui.button("Cancel", on_click=dialog.close).props("flat")
                ui.button(
                    "Create",
                    on_click=lambda: dialog.submit(
                        (title.value or "", client_email.value or "")
                    ),
                )
        result = await dialog
        if not result:
            return
        project_title, email = result
        if not project_title.strip():
            ui.notify("A project needs a title", type="warning")
            return
        await create_project(project_title.strip(), email.strip() or None)
        ui.notify("Project created", type="positive")
        project_list.refresh()

    async def new_video(project: Project) -> None:
        with ui.dialog() as dialog, ui.card().classes("w-96"):
            ui.label(f"Add video to {project.title}").classes("text-lg font-semibold")
            title = ui.input("Video title").classes("w-full")
            youtube_url = ui.input("YouTube URL (optional)").classes("w-full")
            thumbnail_url = ui.input("Thumbnail URL (optional)").classes("w-full")
            with ui.row().classes("w-full justify-end"):
                ui.button("Cancel", on_click=dialog.close).props("flat")
                ui.button(
                    "Add",
                    on_click=lambda: dialog.submit(
                        (
                            title.value or "",
                            youtube_url.value or "",
                            thumbnail_url.value or "",
                        )
                    ),
                )
        result = await dialog
        if not result:
            return
        video_title, youtube, thumbnail = result
        if not video_title.strip():
            ui.notify("A video needs a title", type="warning")
            return
        await create_video(
            project.id,
            video_title.strip(),
            youtube_url=youtube.strip(),
            thumbnail_url=thumbnail.strip(),
        )
        ui.notify("Video added", type="positive")
        project_list.refresh()

    async def remove_project(project: Project) -> None:
        if await _confirm(f"Delete {project.title} and all of its videos?"):
            await delete_project(project.id)
            project_list.refresh()

    async def remove_video(video: Video) -> None:
        if await _confirm(f"Delete {video.title} and all of its comments?"):
            await delete_video(video.id)
            project_list.refresh()

    def _video_row(video: Video) -> None:
        with ui.row().classes("w-full items-center justify-between"):
            with ui.row().classes("items-center gap-3"):
                ui.link(video.title, f"/video/{video.id}").classes("font-medium")
                status_chip(video.review_status)
            with ui.row().classes("items-center gap-1"):
                ui.button(
                    icon="visibility",
                    on_click=lambda v=video: ui.navigate.to(
                        f"/video/{v.id}?access=client"
                    ),
                ).props("flat dense round").tooltip("Preview as client")
                ui.button(
                    icon="link",
                    on_click=lambda v=video: ui.clipboard.write(share_url(v)),
                ).props("flat dense round").tooltip("Copy review link")
                ui.button(
                    icon="delete", on_click=lambda v=video: remove_video(v)
                ).props("flat dense round color=negative").tooltip("Delete video")

    @ui.refreshable
    async def project_list() -> None:
        projects = await list_projects_for(user)
        if not projects:
            ui.label("No projects yet.").classes("text-grey-6")
            return
        for project, videos in projects:
            with ui.card().classes("w-full max-w-3xl"):
                with ui.row().classes("w-full items-center justify-between"):
                    ui.label(project.title).classes("text-lg font-semibold")
                    with ui.row().classes("gap-1"):
                        ui.button(
                            "Add video", on_click=lambda p=project: new_video(p)
                        ).props("flat dense")
                        ui.button(
                            icon="delete", on_click=lambda p=project: remove_project(p)
                        ).props("flat dense round color=negative")
                if not videos:
                    ui.label("No videos yet").classes("text-sm text-grey-5")
                for video in videos:
                    _video_row(video)

    with page_layout("Productions"):
        with ui.row().classes("items-center gap-4 mb-4"):
            ui.label("Productions").classes("text-2xl font-semibold")
            ui.button("New project", icon="add", on_click=new_project)
        with ui.column().classes("w-full gap-4"):
            await project_list()
