"""CRUD operations for User management.

Provides async database functions for user lookup, creation, and updates.
Client users may exist before their first login: creating a project for a
client email adds a placeholder account that is linked on sign-in.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlmodel import select

from scriptflow.db.engine import get_session
from scriptflow.db.models import CLIENT_ROLE, STAFF_ROLE, User

if TYPE_CHECKING:
    from uuid import UUID

logger = logging.getLogger(__name__)


def display_name_from_email(email: str) -> str:
    """Derive a readable name from the local part of an email address."""
    return email.split("@", maxsplit=1)[0].replace(".", " ").title()


async def get_user_by_id(user_id: UUID) -> User | None:
    """Get a user by their primary key.

    Args:
        user_id: The user's UUID.

    Returns:
        The User or None if not found.
    """
    async with get_session() as session:
        return await session.get(User, user_id)


async def get_user_by_email(email: str) -> User | None:
    """Get a user by their email address.

    Args:
        email: The user's email (case-insensitive lookup).

    Returns:
        The User or None if not found.
    """
    async with get_session() as session:
        result = await session.exec(select(User).where(User.email == email.lower()))
        return result.first()


async def create_user(
    email: str,
    display_name: str,
    *,
    role: str = CLIENT_ROLE,
    stytch_member_id: str | None = None,
) -> User:
    """Create a new user.

    Args:
        email: The user's email address.
        display_name: Human-readable name for display.
        role: ``krtva`` for staff, ``client`` otherwise.
        stytch_member_id: Optional Stytch member ID if already authenticated.

    Returns:
        The created User with generated ID.
    """
    async with get_session() as session:
        user = User(
            email=email.lower(),
            display_name=display_name,
            role=role,
            stytch_member_id=stytch_member_id,
        )
        session.add(user)
        await session.flush()
        await session.refresh(user)
        logger.info("Created %s user %s", role, user.email)
        return user


async def find_or_create_user(
    email: str,
    display_name: str | None = None,
    *,
    role: str = CLIENT_ROLE,
) -> tuple[User, bool]:
    """Find an existing user by email or create a new one.

    Args:
        email: The user's email address.
        display_name: Name to use if creating; derived from the email if None.
        role: Role to give a newly created user. Existing roles are kept.

    Returns:
        Tuple of (User, created) where created is True if new user was made.
    """
    async with get_session() as session:
        result = await session.exec(select(User).where(User.email == email.lower()))
        existing = result.first()
        if existing:
            return existing, False

        user = User(
            email=email.lower(),
            display_name=display_name or display_name_from_email(email),
            role=role,
        )
        session.add(user)
        await session.flush()
        await session.refresh(user)
        logger.info("Created placeholder %s user %s", role, user.email)
        return user, True


async def update_last_login(user_id: UUID) -> User | None:
    """Update the user's last_login timestamp to now.

    Returns:
        The updated User or None if not found.
    """
    async with get_session() as session:
        user = await session.get(User, user_id)
        if not user:
            return None
        user.last_login = datetime.now(UTC)
        session.add(user)
        await session.flush()
        await session.refresh(user)
        return user


async def set_role(user_id: UUID, role: str) -> User | None:
    """Change a user's role.

    Raises:
        ValueError: If ``role`` is not ``krtva`` or ``client``.
    """
    if role not in (STAFF_ROLE, CLIENT_ROLE):
        msg = f"Unknown role: {role!r}"
        raise ValueError(msg)
    async with get_session() as session:
        user = await session.get(User, user_id)
        if not user:
            return None
        user.role = role
        session.add(user)
        await session.flush()
        await session.refresh(user)
        return user


async def list_all_users() -> list[User]:
    """List all users ordered by email."""
    async with get_session() as session:
        result = await session.exec(select(User).order_by("email"))
        return list(result.all())


async def upsert_user_on_login(
    email: str,
    stytch_member_id: str,
    display_name: str | None = None,
    *,
    role: str = CLIENT_ROLE,
) -> User:
    """Find or create the local user for a successful login.

    Links the Stytch member id on first login and stamps ``last_login``.
    An existing user's role is never changed here; ``role`` only applies
    to a user created by this login.

    Returns:
        The User record (created or updated).
    """
    async with get_session() as session:
        result = await session.exec(select(User).where(User.email == email.lower()))
        user = result.first()

        if user:
            if not user.stytch_member_id:
                user.stytch_member_id = stytch_member_id
            user.last_login = datetime.now(UTC)
            if display_name and user.display_name == display_name_from_email(email):
                user.display_name = display_name
        else:
            user = User(
                email=email.lower(),
                display_name=display_name or display_name_from_email(email),
                stytch_member_id=stytch_member_id,
                role=role,
                last_login=datetime.now(UTC),
            )
        session.add(user)
        await session.flush()
        await session.refresh(user)
        return user
