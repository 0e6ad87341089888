"""Mock auth client for development and tests.

Accepts a fixed table of credentials so the app can be exercised without
Stytch. ``register()`` adds further accounts at runtime.
"""

from __future__ import annotations

import hashlib

from scriptflow.auth.models import AuthResult, SessionResult

MOCK_ORG_ID = "mock-org-123"

MOCK_STAFF_EMAIL = "admin@krtva.com"
MOCK_STAFF_PASSWORD = "admin123"  # nosec B105
MOCK_STAFF_NAME = "KRTVA Admin"
MOCK_CLIENT_EMAIL = "client@example.com"
MOCK_CLIENT_PASSWORD = "client123"  # nosec B105
MOCK_CLIENT_NAME = "Horizon Coffee"

# email -> (password, name, roles)
_DEFAULT_ACCOUNTS: dict[str, tuple[str, str, list[str]]] = {
    MOCK_STAFF_EMAIL: (MOCK_STAFF_PASSWORD, MOCK_STAFF_NAME, ["krtva"]),
    MOCK_CLIENT_EMAIL: (MOCK_CLIENT_PASSWORD, MOCK_CLIENT_NAME, ["client"]),
}


def _email_to_member_id(email: str) -> str:
    """Generate a deterministic member ID from an email."""
    return f"mock-member-{hashlib.md5(email.encode()).hexdigest()[:8]}"  # nosec B324


def _email_to_session_token(email: str) -> str:
    """Generate a deterministic session token from an email."""
    return f"mock-session-{hashlib.md5(email.encode()).hexdigest()[:12]}"  # nosec B324


class MockAuthClient:
    """Mock implementation of AuthClientProtocol.

    Passwords are compared verbatim. Session tokens are email-specific so
    several mock users can be signed in at once.
    """

    def __init__(self) -> None:
        self._accounts = {
            email: (password, name, list(roles))
            for email, (password, name, roles) in _DEFAULT_ACCOUNTS.items()
        }
        self._active_sessions: dict[str, str] = {}
        self.attempts: list[str] = []

    def register(
        self,
        email: str,
        password: str,
        *,
        name: str | None = None,
        roles: list[str] | None = None,
    ) -> None:
        """Add or replace a mock account."""
        self._accounts[email.lower()] = (
            password,
            name or email.split("@")[0].replace(".", " ").title(),
            list(roles or ["client"]),
        )

    async def authenticate_password(
        self,
        email: str,
        password: str,
        organization_id: str,  # noqa: ARG002
    ) -> AuthResult:
        email = email.strip().lower()
        self.attempts.append(email)
        account = self._accounts.get(email)
        if account is None or account[0] != password:
            return AuthResult(success=False, error="unauthorized_credentials")

        _password, name, roles = account
        session_token = _email_to_session_token(email)
        self._active_sessions[session_token] = email
        return AuthResult(
            success=True,
            session_token=session_token,
            member_id=_email_to_member_id(email),
            organization_id=MOCK_ORG_ID,
            email=email,
            name=name,
            roles=list(roles),
        )

    async def validate_session(self, session_token: str) -> SessionResult:
        email = self._active_sessions.get(session_token)
        if email is None:
            return SessionResult(valid=False, error="session_not_found")
        return SessionResult(
            valid=True,
            member_id=_email_to_member_id(email),
            email=email,
        )

    def revoke(self, session_token: str) -> None:
        self._active_sessions.pop(session_token, None)
