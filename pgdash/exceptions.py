"""Error taxonomy for the dashboard core.

Remote failures (``ApiRequestError``) are caught at the controller boundary.
Login failures (``LoginError``) carry the user-facing message; ``LockedOut``
is raised before any network call is made.
"""


class DashboardError(Exception):
    """Base class for all dashboard errors."""


# ---------------------------------------------------------------------------
# Remote API
# ---------------------------------------------------------------------------


class ApiRequestError(DashboardError):
    """A request to the remote API failed (non-2xx status or transport error)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ApiResponseError(ApiRequestError):
    """The remote API answered 2xx but the payload could not be parsed."""


# ---------------------------------------------------------------------------
# Login
# ---------------------------------------------------------------------------


class LoginError(DashboardError):
    """A login attempt was rejected."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class LockedOut(LoginError):
    """Login is temporarily blocked after repeated failures."""

    def __init__(self, remaining_seconds: int) -> None:
        super().__init__(f"Too many failed attempts. Please wait {remaining_seconds} seconds.")
        self.remaining_seconds = remaining_seconds


class MissingCredentials(LoginError):
    """Email or password was left empty."""

    def __init__(self) -> None:
        super().__init__("Please fill in all fields")


class InvalidCredentials(LoginError):
    """The API rejected the credentials or could not be reached."""

    def __init__(self) -> None:
        super().__init__("Invalid credentials.")


# ---------------------------------------------------------------------------
# Session / controllers
# ---------------------------------------------------------------------------


class NotAuthenticated(DashboardError):
    """An operation required a logged-in session."""


class InvalidTransition(DashboardError):
    """A view-mode transition is not allowed from the current mode."""
