"""CRUD operations for videos and their review state."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import func
from sqlmodel import col, select

from scriptflow.content import (
    Moodboard,
    RichText,
    SceneScript,
    ScriptBlock,
    TabContent,
    dump_tab_content,
)
from scriptflow.db.engine import get_session
from scriptflow.db.models import REVIEW_STATUSES, Project, Tab, Video
from scriptflow.db.tabs import TabWithComments, list_comments

if TYPE_CHECKING:
    from uuid import UUID

    from sqlmodel.ext.asyncio.session import AsyncSession

logger = logging.getLogger(__name__)


class VideoNotFoundError(LookupError):
    """Raised when a video id does not exist."""

    def __init__(self, video_id: UUID) -> None:
        self.video_id = video_id
        super().__init__(f"Video not found: {video_id}")


def default_tabs() -> list[tuple[str, str, TabContent]]:
    """(title, tab_type, content) for the tabs every new video starts with."""
    return [
        ("Overview", "overview", RichText()),
        ("Pre-production", "preproduction", RichText()),
        (
            "Script v1",
            "script",
            SceneScript(blocks=[ScriptBlock(id="block-1", timecode="00:00 - 00:05")]),
        ),
        ("Moodboard", "moodboard", Moodboard()),
    ]


@dataclass
class VideoWithTabs:
    """A video, its project, and its tabs in display order with comments."""

    video: Video
    project: Project
    tabs: list[TabWithComments] = field(default_factory=list)

    def tab(self, tab_id: UUID) -> TabWithComments | None:
        for entry in self.tabs:
            if entry.tab.id == tab_id:
                return entry
        return None


async def create_video(
    project_id: UUID,
    title: str,
    *,
    youtube_url: str | None = None,
    thumbnail_url: str | None = None,
    tabs: list[tuple[str, str, TabContent]] | None = None,
) -> Video:
    """Append a video to a project together with its starting tabs.

    Args:
        project_id: Owning project.
        title: Video title.
        youtube_url: Optional link to a rendered cut.
        thumbnail_url: Optional explicit thumbnail.
        tabs: Starting tabs; ``default_tabs()`` when None.

    Returns:
        The created Video, placed after the project's existing videos.
    """
    async with get_session() as session:
        result = await session.exec(
            select(func.max(Video.display_order)).where(
                Video.project_id == project_id
            )
        )
        current = result.first()
        video = Video(
            project_id=project_id,
            title=title,
            youtube_url=youtube_url or None,
            thumbnail_url=thumbnail_url or None,
            display_order=0 if current is None else current + 1,
        )
        session.add(video)
        await session.flush()

        for order, (tab_title, tab_type, content) in enumerate(
            tabs if tabs is not None else default_tabs()
        ):
            session.add(
                Tab(
                    video_id=video.id,
                    title=tab_title,
                    tab_type=tab_type,
                    content=dump_tab_content(content),
                    display_order=order,
                )
            )
        await session.flush()
        await session.refresh(video)
        logger.info("Created video %s in project %s", video.id, project_id)
        return video


async def get_video(video_id: UUID) -> Video | None:
    async with get_session() as session:
        return await session.get(Video, video_id)


async def _load_with_tabs(video: Video, session: AsyncSession) -> VideoWithTabs:
    project = await session.get(Project, video.project_id)
    tab_rows = await session.exec(
        select(Tab)
        .where(Tab.video_id == video.id)
        .order_by(col(Tab.display_order), col(Tab.created_at))
    )
    tabs = list(tab_rows.all())
    comments = await list_comments(session, [t.id for t in tabs])
    by_tab: dict[UUID, TabWithComments] = {t.id: TabWithComments(tab=t) for t in tabs}
    for comment in comments:
        by_tab[comment.tab_id].comments.append(comment)
    return VideoWithTabs(video=video, project=project, tabs=list(by_tab.values()))


async def get_video_with_tabs(video_id: UUID) -> VideoWithTabs:
    """Load a video with its project, tabs and comments.

    Raises:
        VideoNotFoundError: If the video does not exist.
    """
    async with get_session() as session:
        video = await session.get(Video, video_id)
        if video is None:
            raise VideoNotFoundError(video_id)
        return await _load_with_tabs(video, session)


async def get_video_by_share_token(token: str) -> VideoWithTabs | None:
    """Resolve an anonymous review link to its video, or None."""
    async with get_session() as session:
        result = await session.exec(select(Video).where(Video.share_token == token))
        video = result.first()
        if video is None:
            return None
        return await _load_with_tabs(video, session)


async def update_video(
    video_id: UUID,
    *,
    title: str | None = None,
    youtube_url: str | None = None,
    thumbnail_url: str | None = None,
) -> Video:
    """Edit a video's metadata. None leaves a field unchanged.

    Raises:
        VideoNotFoundError: If the video does not exist.
    """
    async with get_session() as session:
        video = await session.get(Video, video_id)
        if video is None:
            raise VideoNotFoundError(video_id)
        if title:
            video.title = title
        if youtube_url is not None:
            video.youtube_url = youtube_url or None
        if thumbnail_url is not None:
            video.thumbnail_url = thumbnail_url or None
        session.add(video)
        await session.flush()
        await session.refresh(video)
        return video


async def set_review_status(video_id: UUID, status: str) -> Video:
    """Record the client's decision on a video's script.

    Raises:
        ValueError: If ``status`` is not a known review status.
        VideoNotFoundError: If the video does not exist.
    """
    if status not in REVIEW_STATUSES:
        msg = f"Unknown review status: {status!r}"
        raise ValueError(msg)
    async with get_session() as session:
        video = await session.get(Video, video_id)
        if video is None:
            raise VideoNotFoundError(video_id)
        video.review_status = status
        video.reviewed_at = None if status == "in_review" else datetime.now(UTC)
        session.add(video)
        await session.flush()
        await session.refresh(video)
        logger.info("Video %s review status -> %s", video_id, status)
        return video


async def delete_video(video_id: UUID) -> bool:
    """Delete a video and, by cascade, its tabs and comments."""
    async with get_session() as session:
        video = await session.get(Video, video_id)
        if video is None:
            return False
        await session.delete(video)
        logger.info("Deleted video %s", video_id)
        return True
