"""Data models for authentication results.

These dataclasses are the common currency between the real Stytch client,
the mock client, and the session helpers that sit on top of them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID


@dataclass(frozen=True)
class AuthResult:
    """Result of a password authentication attempt.

    Attributes:
        success: Whether authentication succeeded.
        session_token: The session token for subsequent requests.
        member_id: The authenticated member's ID.
        organization_id: The organization the member authenticated into.
        email: The member's email address.
        name: The member's display name, if the provider knows one.
        roles: Role IDs assigned to the member by the provider.
        error: Error type if authentication failed.
    """

    success: bool
    session_token: str | None = None
    member_id: str | None = None
    organization_id: str | None = None
    email: str | None = None
    name: str | None = None
    roles: list[str] = field(default_factory=list)
    error: str | None = None


@dataclass(frozen=True)
class SessionResult:
    """Result of validating an existing provider session.

    Attributes:
        valid: Whether the session is still valid.
        member_id: The member ID associated with the session.
        email: The member's email address.
        error: Error type if validation failed.
    """

    valid: bool
    member_id: str | None = None
    email: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class UserIdentity:
    """A signed-in reviewer, as resolved from the local user table."""

    user_id: UUID
    email: str
    name: str
    role: str
    session_token: str | None = None

    @property
    def is_staff(self) -> bool:
        return self.role == "krtva"


@dataclass(frozen=True)
class SessionInfo:
    """The ``auth_user`` record held in per-browser user storage."""

    user_id: str
    email: str
    name: str
    role: str
    session_token: str | None = None

    def as_active_user(self) -> dict[str, str]:
        """The ``{id, name, role}`` view handed to review pages."""
        return {"id": self.user_id, "name": self.name, "role": self.role}
