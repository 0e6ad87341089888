"""Persistence for review comments.

Comments are created and listed, never edited. ``CommentService`` adapts
``create_comment`` to the gateway interface the comment store persists
through.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from uuid import UUID

from sqlmodel import col, select

from scriptflow.db.engine import get_session
from scriptflow.db.models import (
    DEFAULT_AUTHOR_COLOR,
    GENERAL_BLOCK_ID,
    Comment,
    Tab,
)
from scriptflow.db.tabs import TabNotFoundError

if TYPE_CHECKING:
    from scriptflow.review.store import NewComment

logger = logging.getLogger(__name__)


class EmptyCommentError(ValueError):
    """Raised when a comment's text is blank after trimming."""


async def create_comment(
    tab_id: UUID,
    text: str,
    author_name: str,
    *,
    block_id: str | None = None,
    selected_text: str | None = None,
    author_color: str | None = None,
) -> Comment:
    """Create a comment on a tab.

    Args:
        tab_id: Tab the comment belongs to.
        text: Comment body; stored trimmed.
        author_name: Display name of the commenter.
        block_id: Anchored block id; ``"general"`` when None or empty.
        selected_text: Quoted selection, if any.
        author_color: Hex swatch colour; ``#1A1A1A`` when None or empty.

    Returns:
        The created Comment.

    Raises:
        EmptyCommentError: If ``text`` is blank.
        ValueError: If ``author_name`` is blank.
        TabNotFoundError: If the tab does not exist.
    """
    body = text.strip()
    if not body:
        raise EmptyCommentError("Comment text must not be blank")
    if not author_name.strip():
        msg = "Comment author must not be blank"
        raise ValueError(msg)

    async with get_session() as session:
        if await session.get(Tab, tab_id) is None:
            raise TabNotFoundError(tab_id)
        comment = Comment(
            tab_id=tab_id,
            block_id=block_id or GENERAL_BLOCK_ID,
            selected_text=selected_text or None,
            text=body,
            author_name=author_name.strip(),
            author_color=author_color or DEFAULT_AUTHOR_COLOR,
        )
        session.add(comment)
        await session.flush()
        await session.refresh(comment)
        logger.info(
            "Comment %s created on tab %s block %s",
            comment.id,
            tab_id,
            comment.block_id,
        )
        return comment


async def list_comments_for_tab(tab_id: UUID) -> list[Comment]:
    """Comments on a tab, newest first."""
    async with get_session() as session:
        result = await session.exec(
            select(Comment)
            .where(Comment.tab_id == tab_id)
            .order_by(col(Comment.created_at).desc())
        )
        return list(result.all())


class CommentService:
    """Database-backed gateway for ``CommentStore.persist``.

    A missing tab is reported as ``ValueError`` so the store does not retry
    a comment that can never be saved.
    """

    async def create_comment(self, new: NewComment) -> Comment:
        try:
            return await create_comment(
                UUID(new.tab_id),
                new.text,
                new.author_name,
                block_id=new.block_id,
                selected_text=new.selected_text,
                author_color=new.author_color,
            )
        except TabNotFoundError as exc:
            raise ValueError(str(exc)) from exc
