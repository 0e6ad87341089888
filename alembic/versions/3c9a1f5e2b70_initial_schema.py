"""initial schema

Revision ID: 3c9a1f5e2b70
Revises:
Create Date: 2026-10-19 09:12:44.518203

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "3c9a1f5e2b70"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create user, project, video, tab and comment tables."""
    op.create_table(
        "user",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("display_name", sa.String(100), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("stytch_member_id", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("role IN ('krtva', 'client')", name="ck_user_role"),
    )
    op.create_index("ix_user_email", "user", ["email"], unique=True)
    op.create_index(
        "ix_user_stytch_member_id", "user", ["stytch_member_id"], unique=True
    )

    op.create_table(
        "project",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("client_id", sa.Uuid(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["client_id"], ["user.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_project_client_id", "project", ["client_id"])

    op.create_table(
        "video",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("project_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("youtube_url", sa.String(500), nullable=True),
        sa.Column("thumbnail_url", sa.String(500), nullable=True),
        sa.Column("display_order", sa.Integer(), nullable=False),
        sa.Column("review_status", sa.String(20), nullable=False),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("share_token", sa.String(64), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["project_id"], ["project.id"], ondelete="CASCADE"),
        sa.CheckConstraint(
            "review_status IN ('in_review', 'approved', 'changes_requested')",
            name="ck_video_review_status",
        ),
    )
    op.create_index("ix_video_project_id", "video", ["project_id"])
    op.create_index("ix_video_share_token", "video", ["share_token"], unique=True)

    op.create_table(
        "tab",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("video_id", sa.Uuid(), nullable=False),
        sa.Column("tab_type", sa.String(20), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column(
            "content",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'{}'"),
        ),
        sa.Column("display_order", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["video_id"], ["video.id"], ondelete="CASCADE"),
        sa.CheckConstraint(
            "tab_type IN ('overview', 'preproduction', 'script', 'moodboard')",
            name="ck_tab_tab_type",
        ),
    )
    op.create_index("ix_tab_video_id", "tab", ["video_id"])

    op.create_table(
        "comment",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("tab_id", sa.Uuid(), nullable=False),
        sa.Column("block_id", sa.String(100), nullable=False),
        sa.Column("selected_text", sa.Text(), nullable=True),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("author_name", sa.String(100), nullable=False),
        sa.Column("author_color", sa.String(7), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["tab_id"], ["tab.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_comment_tab_id", "comment", ["tab_id"])


def downgrade() -> None:
    """Drop all ScriptFlow tables."""
    op.drop_index("ix_comment_tab_id", table_name="comment")
    op.drop_table("comment")
    op.drop_index("ix_tab_video_id", table_name="tab")
    op.drop_table("tab")
    op.drop_index("ix_video_share_token", table_name="video")
    op.drop_index("ix_video_project_id", table_name="video")
    op.drop_table("video")
    op.drop_index("ix_project_client_id", table_name="project")
    op.drop_table("project")
    op.drop_index("ix_user_stytch_member_id", table_name="user")
    op.drop_index("ix_user_email", table_name="user")
    op.drop_table("user")
