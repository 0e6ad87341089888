"""Authentication and access control for ScriptFlow.

Provides Stytch B2B password authentication (or a mock client for
development), per-browser sessions, and the role checks pages use to decide
what a viewer may see and change.

Usage:
    from scriptflow.auth import authenticate, create_session

    identity = await authenticate("client@example.com", "client123")
    if identity:
        create_session(identity)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from scriptflow.auth.factory import clear_config_cache, get_auth_client
from scriptflow.auth.models import AuthResult, SessionInfo, SessionResult, UserIdentity
from scriptflow.auth.protocol import AuthClientProtocol
from scriptflow.auth.session import (
    authenticate,
    create_session,
    destroy_session,
    get_active_user,
    get_session_info,
)
from scriptflow.db.models import STAFF_ROLE

if TYPE_CHECKING:
    from uuid import UUID

    from scriptflow.db.models import Project

AccessMode = Literal["staff", "client"]


class UnauthorisedError(PermissionError):
    """Raised when a viewer attempts a change their role does not permit."""


def is_staff(user: SessionInfo | dict[str, str] | None) -> bool:
    """Whether ``user`` is production staff."""
    if user is None:
        return False
    role = user.get("role") if isinstance(user, dict) else user.role
    return role == STAFF_ROLE


def require_staff(user: SessionInfo | dict[str, str] | None) -> None:
    """Raise ``UnauthorisedError`` unless ``user`` is staff."""
    if not is_staff(user):
        msg = "Only production staff can make this change"
        raise UnauthorisedError(msg)


def resolve_access_mode(access_param: str | None, staff: bool) -> AccessMode:
    """How a video page should render.

    Staff see the editing view unless they ask for ``?access=client``;
    everyone else is always in client mode.
    """
    if staff and access_param != "client":
        return "staff"
    return "client"


def can_view_video(user: SessionInfo | None, project: Project) -> bool:
    """Staff may open any video; clients only those in projects they own."""
    if user is None:
        return False
    if is_staff(user):
        return True
    owner: UUID | None = project.client_id
    return owner is not None and str(owner) == user.user_id


__all__ = [
    "AccessMode",
    "AuthClientProtocol",
    "AuthResult",
    "SessionInfo",
    "SessionResult",
    "UnauthorisedError",
    "UserIdentity",
    "authenticate",
    "can_view_video",
    "clear_config_cache",
    "create_session",
    "destroy_session",
    "get_active_user",
    "get_auth_client",
    "get_session_info",
    "is_staff",
    "require_staff",
    "resolve_access_mode",
]
