"""SQLModel database models for ScriptFlow.

These models define the schema for accounts, client projects, videos,
their tabbed content and the review comments left on that content.
"""

from __future__ import annotations

import secrets
from datetime import UTC, datetime
from typing import Any, Literal
from uuid import UUID, uuid4

import sqlalchemy as sa
from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel

UserRole = Literal["krtva", "client"]
TabType = Literal["overview", "preproduction", "script", "moodboard"]
ReviewStatus = Literal["in_review", "approved", "changes_requested"]

STAFF_ROLE: UserRole = "krtva"
CLIENT_ROLE: UserRole = "client"
TAB_TYPES: tuple[TabType, ...] = ("overview", "preproduction", "script", "moodboard")
REVIEW_STATUSES: tuple[ReviewStatus, ...] = (
    "in_review",
    "approved",
    "changes_requested",
)

GENERAL_BLOCK_ID = "general"
DEFAULT_AUTHOR_COLOR = "#1A1A1A"


def _utcnow() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(UTC)


def _new_share_token() -> str:
    """Return an unguessable token for anonymous review links."""
    return secrets.token_urlsafe(16)


def _timestamptz_column() -> Any:
    """Create a TIMESTAMP WITH TIME ZONE column for PostgreSQL."""
    return Column(DateTime(timezone=True), nullable=False)


def _cascade_fk_column(target: str) -> Any:
    """Create a UUID foreign key column with CASCADE DELETE."""
    return Column(
        Uuid(), ForeignKey(target, ondelete="CASCADE"), nullable=False, index=True
    )


def _set_null_fk_column(target: str) -> Any:
    """Create a UUID foreign key column with SET NULL on delete."""
    return Column(
        Uuid(), ForeignKey(target, ondelete="SET NULL"), nullable=True, index=True
    )


class User(SQLModel, table=True):
    """Account for production staff or a client reviewer.

    Attributes:
        id: Primary key UUID, auto-generated.
        email: Unique email address for the user.
        display_name: Human-readable name shown on comments.
        role: ``krtva`` for production staff, ``client`` for reviewers.
        stytch_member_id: Optional link to Stytch B2B member.
        created_at: Timestamp when user was created.
        last_login: Timestamp of last successful login.
    """

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    display_name: str = Field(max_length=100)
    role: str = Field(default=CLIENT_ROLE, max_length=20)
    stytch_member_id: str | None = Field(default=None, unique=True, index=True)
    created_at: datetime = Field(
        default_factory=_utcnow, sa_column=_timestamptz_column()
    )
    last_login: datetime | None = Field(
        default=None, sa_column=Column(DateTime(timezone=True), nullable=True)
    )

    __table_args__ = (
        CheckConstraint("role IN ('krtva', 'client')", name="ck_user_role"),
    )

    @property
    def is_staff(self) -> bool:
        return self.role == STAFF_ROLE


class Project(SQLModel, table=True):
    """A client engagement grouping one or more videos.

    Attributes:
        id: Primary key UUID, auto-generated.
        title: Project name shown on dashboards.
        client_id: Owning client user. Cleared if the user is deleted.
        created_at: Timestamp when the project was created.
    """

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    title: str = Field(max_length=200)
    client_id: UUID | None = Field(
        default=None, sa_column=_set_null_fk_column("user.id")
    )
    created_at: datetime = Field(
        default_factory=_utcnow, sa_column=_timestamptz_column()
    )


class Video(SQLModel, table=True):
    """A deliverable within a project, reviewed through its tabs.

    Attributes:
        id: Primary key UUID, auto-generated.
        project_id: Parent project (CASCADE delete).
        title: Video title.
        youtube_url: Optional link to a rendered cut.
        thumbnail_url: Optional explicit thumbnail; derived from
            ``youtube_url`` when absent.
        display_order: Position within the project.
        review_status: Client decision on the current script.
        reviewed_at: When the client last approved or requested changes.
        share_token: Token for the anonymous ``/review/{token}`` link.
        created_at: Timestamp when the video was created.
    """

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_id: UUID = Field(sa_column=_cascade_fk_column("project.id"))
    title: str = Field(max_length=200)
    youtube_url: str | None = Field(default=None, max_length=500)
    thumbnail_url: str | None = Field(default=None, max_length=500)
    display_order: int = Field(default=0)
    review_status: str = Field(default="in_review", max_length=20)
    reviewed_at: datetime | None = Field(
        default=None, sa_column=Column(DateTime(timezone=True), nullable=True)
    )
    share_token: str = Field(
        default_factory=_new_share_token, unique=True, index=True, max_length=64
    )
    created_at: datetime = Field(
        default_factory=_utcnow, sa_column=_timestamptz_column()
    )

    __table_args__ = (
        CheckConstraint(
            "review_status IN ('in_review', 'approved', 'changes_requested')",
            name="ck_video_review_status",
        ),
    )


class Tab(SQLModel, table=True):
    """A named view of a video's supporting content.

    ``content`` is stored as JSONB in the canonical shape produced by
    ``scriptflow.content.dump_tab_content``.

    Attributes:
        id: Primary key UUID, auto-generated.
        video_id: Parent video (CASCADE delete).
        tab_type: One of overview, preproduction, script, moodboard.
        title: Label shown in the tab bar.
        content: Type-specific JSON payload.
        display_order: Position in the tab bar.
        created_at: Timestamp when the tab was created.
        updated_at: Timestamp of the last content save.
    """

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    video_id: UUID = Field(sa_column=_cascade_fk_column("video.id"))
    tab_type: str = Field(max_length=20)
    title: str = Field(max_length=200)
    content: dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSONB, nullable=False, server_default=sa.text("'{}'")),
    )
    display_order: int = Field(default=0)
    created_at: datetime = Field(
        default_factory=_utcnow, sa_column=_timestamptz_column()
    )
    updated_at: datetime = Field(
        default_factory=_utcnow, sa_column=_timestamptz_column()
    )

    __table_args__ = (
        CheckConstraint(
            "tab_type IN ('overview', 'preproduction', 'script', 'moodboard')",
            name="ck_tab_tab_type",
        ),
    )


class Comment(SQLModel, table=True):
    """Reviewer feedback anchored to a block of tab content.

    Comments are immutable once created. ``block_id`` is a soft reference
    into the tab's content: if the block is later removed the comment is
    kept but no longer rendered.

    Attributes:
        id: Primary key UUID, auto-generated.
        tab_id: Tab the comment was left on (CASCADE delete).
        block_id: Anchored block id, or ``"general"`` when unanchored.
        selected_text: Quoted selection the comment is about, if any.
        text: Comment body.
        author_name: Display name at the time of commenting.
        author_color: Hex colour used for the author swatch.
        created_at: Timestamp when the comment was created.
    """

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tab_id: UUID = Field(sa_column=_cascade_fk_column("tab.id"))
    block_id: str = Field(default=GENERAL_BLOCK_ID, max_length=100)
    selected_text: str | None = Field(
        default=None, sa_column=Column(sa.Text(), nullable=True)
    )
    text: str = Field(sa_column=Column(sa.Text(), nullable=False))
    author_name: str = Field(max_length=100)
    author_color: str = Field(default=DEFAULT_AUTHOR_COLOR, max_length=7)
    created_at: datetime = Field(
        default_factory=_utcnow, sa_column=_timestamptz_column()
    )
