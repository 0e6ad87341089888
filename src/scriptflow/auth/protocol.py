"""Protocol defining the auth client interface.

Both StytchB2BClient and MockAuthClient implement this protocol,
allowing them to be used interchangeably.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from scriptflow.auth.models import AuthResult, SessionResult


class AuthClientProtocol(Protocol):
    """Protocol for authentication clients."""

    async def authenticate_password(
        self,
        email: str,
        password: str,
        organization_id: str,
    ) -> AuthResult:
        """Check an email and password against the identity provider.

        Args:
            email: The member's email address.
            password: The plaintext password as typed.
            organization_id: The Stytch organization to authenticate into.

        Returns:
            AuthResult with session info if successful.
        """
        ...

    async def validate_session(self, session_token: str) -> SessionResult:
        """Validate an existing session token.

        Args:
            session_token: The session token to validate.

        Returns:
            SessionResult indicating if the session is valid.
        """
        ...
