"""Session context: who is logged in, and the login/logout entry points.

The session only gates the UI. Whether the remote API enforces anything on
CRUD calls is outside this package's control.
"""

import logging
from dataclasses import dataclass

from pgdash.api.client import ApiClient
from pgdash.auth.lockout import LoginAttemptController
from pgdash.exceptions import LockedOut, LoginError, NotAuthenticated
from pgdash.models.user import SessionUser

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginOutcome:
    """Result of ``SessionContext.login``; returned, never raised."""

    success: bool
    message: str | None = None
    warning: str | None = None
    locked_seconds: int | None = None


class SessionContext:
    """Holds the authenticated user for the lifetime of the app."""

    def __init__(self, lockout: LoginAttemptController, client: ApiClient | None = None) -> None:
        self.lockout = lockout
        self._client = client
        self._user: SessionUser | None = None
        self._token: str | None = None

    @property
    def user(self) -> SessionUser | None:
        return self._user

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    async def login(self, email: str, password: str) -> LoginOutcome:
        try:
            result = await self.lockout.attempt_login(email, password)
        except LockedOut as exc:
            return LoginOutcome(success=False, message=exc.message, locked_seconds=exc.remaining_seconds)
        except LoginError as exc:
            locked = self.lockout.remaining_seconds if self.lockout.is_locked else None
            return LoginOutcome(success=False, message=exc.message, locked_seconds=locked)

        self._user = result.user
        self._token = result.token
        if self._client is not None:
            self._client.set_token(result.token)
        if result.warning:
            logger.warning("Login notification failed for %s", result.user.email)
        return LoginOutcome(success=True, warning=result.warning)

    def logout(self) -> None:
        if self._user is not None:
            logger.info("Logged out %s", self._user.email)
        self._user = None
        self._token = None
        if self._client is not None:
            self._client.set_token(None)

    def require_user(self) -> SessionUser:
        """Return the current user or raise ``NotAuthenticated``."""
        if self._user is None:
            raise NotAuthenticated("Login required")
        return self._user
