"""Sign-in and per-browser session helpers.

The signed-in user lives under ``auth_user`` in NiceGUI's ``app.storage.user``,
a dict persisted server-side and keyed by a signed browser cookie. Every
helper takes an optional ``storage`` mapping so tests can pass a plain dict.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from nicegui import app

from scriptflow.auth.factory import get_auth_client
from scriptflow.auth.models import SessionInfo, UserIdentity
from scriptflow.config import get_settings
from scriptflow.db.models import CLIENT_ROLE, STAFF_ROLE
from scriptflow.db.users import upsert_user_on_login

if TYPE_CHECKING:
    from collections.abc import MutableMapping

logger = logging.getLogger(__name__)

SESSION_KEY = "auth_user"


def _storage(storage: MutableMapping[str, Any] | None) -> MutableMapping[str, Any]:
    return app.storage.user if storage is None else storage


async def authenticate(email: str, password: str) -> UserIdentity | None:
    """Verify credentials and resolve the local user.

    The provider only vouches for the email. The role comes from the local
    user row; a user created by this login is staff only when the provider
    lists the ``krtva`` role.

    Returns:
        The identity, or None if the credentials were rejected.
    """
    email = email.strip().lower()
    if not email or not password:
        return None

    settings = get_settings()
    result = await get_auth_client().authenticate_password(
        email, password, settings.stytch.organization_id
    )
    if not result.success or not result.member_id:
        logger.info("Login rejected for %s: %s", email, result.error)
        return None

    user = await upsert_user_on_login(
        result.email or email,
        result.member_id,
        result.name,
        role=STAFF_ROLE if STAFF_ROLE in result.roles else CLIENT_ROLE,
    )
    logger.info("Login succeeded for %s (%s)", user.email, user.role)
    return UserIdentity(
        user_id=user.id,
        email=user.email,
        name=user.display_name,
        role=user.role,
        session_token=result.session_token,
    )


def create_session(
    identity: UserIdentity,
    storage: MutableMapping[str, Any] | None = None,
) -> SessionInfo:
    """Record ``identity`` as the browser's signed-in user."""
    info = SessionInfo(
        user_id=str(identity.user_id),
        email=identity.email,
        name=identity.name,
        role=identity.role,
        session_token=identity.session_token,
    )
    _storage(storage)[SESSION_KEY] = {
        "user_id": info.user_id,
        "email": info.email,
        "name": info.name,
        "role": info.role,
        "session_token": info.session_token,
    }
    return info


def get_session_info(
    storage: MutableMapping[str, Any] | None = None,
) -> SessionInfo | None:
    """The signed-in user for this browser, or None.

    A stored record missing its id, email or role is treated as signed out.
    """
    raw = _storage(storage).get(SESSION_KEY)
    if not isinstance(raw, dict):
        return None
    user_id, email, role = raw.get("user_id"), raw.get("email"), raw.get("role")
    if not user_id or not email or role not in (STAFF_ROLE, CLIENT_ROLE):
        return None
    return SessionInfo(
        user_id=str(user_id),
        email=str(email),
        name=str(raw.get("name") or email),
        role=role,
        session_token=raw.get("session_token"),
    )


def destroy_session(storage: MutableMapping[str, Any] | None = None) -> None:
    _storage(storage).pop(SESSION_KEY, None)


def get_active_user(
    storage: MutableMapping[str, Any] | None = None,
) -> dict[str, str] | None:
    """``{id, name, role}`` for the signed-in reviewer, or None."""
    info = get_session_info(storage)
    return info.as_active_user() if info else None
