"""Stytch B2B client wrapper for password authentication."""

from __future__ import annotations

import logging
from typing import Any

from stytch import B2BClient
from stytch.core.response_base import StytchError

from scriptflow.auth.models import AuthResult, SessionResult

logger = logging.getLogger(__name__)

SESSION_DURATION_MINUTES = 60 * 24 * 7  # 1 week


def _extract_roles(raw_roles: list[Any] | None) -> list[str]:
    """Extract role IDs from Stytch response roles.

    Handles both object roles (with a role_id attribute) and plain strings,
    depending on Stytch SDK version.
    """
    if not raw_roles:
        return []
    if hasattr(raw_roles[0], "role_id"):
        return [role.role_id for role in raw_roles]
    return list(raw_roles)


class StytchB2BClient:
    """Wrapper around Stytch B2BClient implementing AuthClientProtocol."""

    def __init__(
        self,
        project_id: str,
        secret: str,
        *,
        environment: str = "test",
    ) -> None:
        """Initialize the Stytch client.

        Args:
            project_id: Stytch project ID.
            secret: Stytch secret key.
            environment: Either "test" or "live".
        """
        self._client = B2BClient(
            project_id=project_id,
            secret=secret,
            environment=environment,
        )

    async def authenticate_password(
        self,
        email: str,
        password: str,
        organization_id: str,
    ) -> AuthResult:
        try:
            response = await self._client.passwords.authenticate_async(
                organization_id=organization_id,
                email_address=email,
                password=password,
                session_duration_minutes=SESSION_DURATION_MINUTES,
            )

            if not response.member_authenticated:
                logger.info("MFA required for member %s", response.member_id)
                return AuthResult(success=False, error="mfa_required")

            return AuthResult(
                success=True,
                session_token=response.session_token,
                member_id=response.member_id,
                organization_id=response.organization_id,
                email=response.member.email_address,
                name=response.member.name or None,
                roles=_extract_roles(response.member_session.roles),
            )
        except StytchError as e:
            logger.warning(
                "Password auth failed",
                extra={"email": email, "error_type": e.details.error_type},
            )
            return AuthResult(success=False, error=e.details.error_type)

    async def validate_session(self, session_token: str) -> SessionResult:
        try:
            response = await self._client.sessions.authenticate_async(
                session_token=session_token,
            )
            return SessionResult(
                valid=True,
                member_id=response.member_id,
                email=response.member.email_address,
            )
        except StytchError as e:
            logger.debug(
                "Session validation failed",
                extra={"error_type": e.details.error_type},
            )
            return SessionResult(valid=False, error=e.details.error_type)
