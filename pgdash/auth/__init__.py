"""Login gate: lockout controller, durable state stores and the session."""

from pgdash.auth.lockout import LockoutState, LoginAttemptController, LoginResult
from pgdash.auth.session import LoginOutcome, SessionContext
from pgdash.auth.storage import FileStateStore, MemoryStateStore, StateStore

__all__ = [
    "FileStateStore",
    "LockoutState",
    "LoginAttemptController",
    "LoginOutcome",
    "LoginResult",
    "MemoryStateStore",
    "SessionContext",
    "StateStore",
]
