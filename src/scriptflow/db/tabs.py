"""CRUD operations for video tabs.

Tab content is always written through ``scriptflow.content`` so the stored
JSON is in canonical form: validated against the tab's type, and holding
only one script representation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import func
from sqlmodel import col, select

from scriptflow.content import (
    TabContent,
    default_content,
    dump_tab_content,
    parse_tab_content,
)
from scriptflow.db.engine import get_session
from scriptflow.db.models import TAB_TYPES, Comment, Tab

if TYPE_CHECKING:
    from uuid import UUID

    from sqlmodel.ext.asyncio.session import AsyncSession

logger = logging.getLogger(__name__)


class TabNotFoundError(LookupError):
    """Raised when a tab id does not exist."""

    def __init__(self, tab_id: UUID) -> None:
        self.tab_id = tab_id
        super().__init__(f"Tab not found: {tab_id}")


@dataclass
class TabWithComments:
    """A tab and its comments, newest first."""

    tab: Tab
    comments: list[Comment] = field(default_factory=list)

    @property
    def content(self) -> TabContent:
        return parse_tab_content(self.tab.tab_type, self.tab.content)


async def _next_tab_order(session: AsyncSession, video_id: UUID) -> int:
    result = await session.exec(
        select(func.max(Tab.display_order)).where(Tab.video_id == video_id)
    )
    current = result.first()
    return 0 if current is None else current + 1


async def create_tab(
    video_id: UUID,
    title: str,
    tab_type: str,
    *,
    content: TabContent | None = None,
) -> Tab:
    """Append a tab to a video.

    Args:
        video_id: Owning video.
        title: Tab label.
        tab_type: One of overview, preproduction, script, moodboard.
        content: Initial content; the type's default when None.

    Returns:
        The created Tab, placed after the video's existing tabs.

    Raises:
        InvalidTabTypeError: If ``tab_type`` is unknown.
    """
    initial = content if content is not None else default_content(tab_type)
    async with get_session() as session:
        tab = Tab(
            video_id=video_id,
            title=title,
            tab_type=tab_type,
            content=dump_tab_content(initial),
            display_order=await _next_tab_order(session, video_id),
        )
        session.add(tab)
        await session.flush()
        await session.refresh(tab)
        logger.info("Created %s tab %s on video %s", tab_type, tab.id, video_id)
        return tab


async def get_tab(tab_id: UUID) -> Tab | None:
    async with get_session() as session:
        return await session.get(Tab, tab_id)


async def delete_tab(tab_id: UUID) -> bool:
    """Delete a tab and its comments.

    Returns:
        True if a tab was deleted.
    """
    async with get_session() as session:
        tab = await session.get(Tab, tab_id)
        if tab is None:
            return False
        await session.delete(tab)
        logger.info("Deleted tab %s", tab_id)
        return True


async def update_tab_content(tab_id: UUID, content: TabContent | dict) -> Tab:
    """Replace a tab's content.

    Raw dicts are parsed against the tab's type first, so a script saved in
    text mode drops its blocks and vice versa.

    Raises:
        TabNotFoundError: If the tab does not exist.
    """
    async with get_session() as session:
        tab = await session.get(Tab, tab_id)
        if tab is None:
            raise TabNotFoundError(tab_id)
        parsed = (
            parse_tab_content(tab.tab_type, content)
            if isinstance(content, dict)
            else content
        )
        tab.content = dump_tab_content(parsed)
        tab.updated_at = datetime.now(UTC)
        session.add(tab)
        await session.flush()
        await session.refresh(tab)
        logger.info("Updated content of tab %s (%s)", tab_id, type(parsed).__name__)
        return tab


async def rename_tab(tab_id: UUID, title: str) -> Tab:
    async with get_session() as session:
        tab = await session.get(Tab, tab_id)
        if tab is None:
            raise TabNotFoundError(tab_id)
        tab.title = title
        session.add(tab)
        await session.flush()
        await session.refresh(tab)
        return tab


async def list_comments(session: AsyncSession, tab_ids: list[UUID]) -> list[Comment]:
    """Comments for ``tab_ids`` within an open session, newest first."""
    if not tab_ids:
        return []
    result = await session.exec(
        select(Comment)
        .where(col(Comment.tab_id).in_(tab_ids))
        .order_by(col(Comment.created_at).desc())
    )
    return list(result.all())


async def fetch_tab_with_comments(tab_id: UUID) -> TabWithComments:
    """Load one tab with its comments for initial hydration or refresh.

    Raises:
        TabNotFoundError: If the tab does not exist.
    """
    async with get_session() as session:
        tab = await session.get(Tab, tab_id)
        if tab is None:
            raise TabNotFoundError(tab_id)
        comments = await list_comments(session, [tab.id])
        return TabWithComments(tab=tab, comments=comments)


def is_tab_type(value: str) -> bool:
    return value in TAB_TYPES
