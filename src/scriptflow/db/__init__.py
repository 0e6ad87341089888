"""Database module for ScriptFlow.

Provides async SQLModel operations with PostgreSQL.
"""

from __future__ import annotations

from scriptflow.db.bootstrap import (
    ensure_database_exists,
    get_expected_tables,
    is_db_configured,
    run_alembic_upgrade,
    verify_schema,
)
from scriptflow.db.comments import (
    CommentService,
    EmptyCommentError,
    create_comment,
    list_comments_for_tab,
)
from scriptflow.db.engine import close_db, get_engine, get_session, init_db
from scriptflow.db.models import Comment, Project, Tab, User, Video
from scriptflow.db.projects import (
    ProjectNotFoundError,
    create_project,
    delete_project,
    get_project,
    list_projects_for,
    update_project,
)
from scriptflow.db.tabs import (
    TabNotFoundError,
    TabWithComments,
    create_tab,
    delete_tab,
    fetch_tab_with_comments,
    get_tab,
    rename_tab,
    update_tab_content,
)
from scriptflow.db.users import (
    create_user,
    find_or_create_user,
    get_user_by_email,
    get_user_by_id,
    list_all_users,
    set_role,
    update_last_login,
    upsert_user_on_login,
)
from scriptflow.db.videos import (
    VideoNotFoundError,
    VideoWithTabs,
    create_video,
    delete_video,
    get_video,
    get_video_by_share_token,
    get_video_with_tabs,
    set_review_status,
    update_video,
)

__all__ = [
    # Models
    "Comment",
    "Project",
    "Tab",
    "User",
    "Video",
    # Results
    "TabWithComments",
    "VideoWithTabs",
    # Exceptions
    "EmptyCommentError",
    "ProjectNotFoundError",
    "TabNotFoundError",
    "VideoNotFoundError",
    # Engine
    "close_db",
    "get_engine",
    "get_session",
    "init_db",
    # Bootstrap
    "ensure_database_exists",
    "get_expected_tables",
    "is_db_configured",
    "run_alembic_upgrade",
    "verify_schema",
    # Comments
    "CommentService",
    "create_comment",
    "list_comments_for_tab",
    # Projects
    "create_project",
    "delete_project",
    "get_project",
    "list_projects_for",
    "update_project",
    # Tabs
    "create_tab",
    "delete_tab",
    "fetch_tab_with_comments",
    "get_tab",
    "rename_tab",
    "update_tab_content",
    # Users
    "create_user",
    "find_or_create_user",
    "get_user_by_email",
    "get_user_by_id",
    "list_all_users",
    "set_role",
    "update_last_login",
    "upsert_user_on_login",
    # Videos
    "create_video",
    "delete_video",
    "get_video",
    "get_video_by_share_token",
    "get_video_with_tabs",
    "set_review_status",
    "update_video",
]
