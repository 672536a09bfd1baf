"""Login attempt controller: failure counting with an escalating lockout.

After ``threshold`` consecutive failures the login gate closes for
``base_lockout_seconds × backoff_multiplier`` seconds and the multiplier
doubles for the next lockout. The deadline is stored as an absolute
timestamp so a restart can neither reset nor extend it. A successful login
resets everything.

Usage::

    controller = LoginAttemptController(login_api, FileStateStore(path))
    try:
        result = await controller.attempt_login(email, password)
    except LoginError as exc:
        show(exc.message)
    finally:
        controller.close()
"""

import asyncio
import logging
import math
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Protocol

from pydantic import BaseModel, Field, ValidationError

from pgdash.api.resources import LoginResponse
from pgdash.auth.storage import StateStore
from pgdash.config import Settings
from pgdash.exceptions import ApiRequestError, InvalidCredentials, LockedOut, MissingCredentials
from pgdash.models.user import SessionUser
from pgdash.services.notification_service import LoginNotifier

logger = logging.getLogger(__name__)

STATE_VERSION = 1
NOTIFICATION_WARNING = "Signed in, but the login notification email could not be sent."

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[None]]
TickCallback = Callable[[int], None]


class SupportsLogin(Protocol):
    async def login(self, email: str, password: str) -> LoginResponse: ...


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------


class LockoutState(BaseModel):
    """Everything the gate needs to survive a restart.

    ``locked_until`` is an absolute epoch timestamp. The password is never
    part of the state.
    """

    version: int = STATE_VERSION
    attempt_count: int = Field(0, ge=0)
    locked_until: float | None = None
    backoff_multiplier: int = Field(1, ge=1)
    email: str = ""

    def is_locked(self, now: float) -> bool:
        return self.locked_until is not None and now < self.locked_until

    def remaining(self, now: float) -> float:
        """Seconds until the lock lifts, never negative."""
        if self.locked_until is None:
            return 0.0
        return max(0.0, self.locked_until - now)

    def remaining_seconds(self, now: float) -> int:
        return math.ceil(self.remaining(now))

    def serialize(self) -> str:
        return self.model_dump_json()

    @classmethod
    def deserialize(cls, raw: str | None) -> "LockoutState":
        """Restore from ``serialize()`` output; unreadable input yields a fresh state."""
        if not raw:
            return cls()
        try:
            state = cls.model_validate_json(raw)
        except ValidationError:
            logger.warning("Discarding unreadable login lockout state")
            return cls()
        if state.version != STATE_VERSION:
            logger.warning("Discarding login lockout state with version %d", state.version)
            return cls()
        return state


@dataclass(frozen=True)
class LoginResult:
    """A successful login. ``warning`` is set when the notification email failed."""

    user: SessionUser
    token: str
    warning: str | None = None


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------


class LoginAttemptController:
    """Gates ``LoginAPI.login`` behind the failure counter and lockout."""

    def __init__(
        self,
        login_api: SupportsLogin,
        store: StateStore,
        notifier: LoginNotifier | None = None,
        *,
        threshold: int = 3,
        base_lockout_seconds: int = 60,
        clock: Clock = time.time,
        sleep: Sleep = asyncio.sleep,
        on_tick: TickCallback | None = None,
    ) -> None:
        self._login_api = login_api
        self._store = store
        self._notifier = notifier
        self._threshold = threshold
        self._base_lockout_seconds = base_lockout_seconds
        self._clock = clock
        self._sleep = sleep
        self.on_tick = on_tick
        self._countdown: asyncio.Task[None] | None = None
        # Serializes attempts so overlapping submissions cannot pass the gate together.
        self._attempt_lock = asyncio.Lock()

        self._state = LockoutState.deserialize(store.load())
        if self._state.locked_until is not None and not self._state.is_locked(self._clock()):
            logger.info("Stored login lockout has expired, clearing it")
            self._clear_lock()
        elif self._state.is_locked(self._clock()):
            logger.info(
                "Restored login lockout with %d seconds remaining",
                self._state.remaining_seconds(self._clock()),
            )
            self._start_countdown()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        login_api: SupportsLogin,
        store: StateStore,
        notifier: LoginNotifier | None = None,
        **kwargs,
    ) -> "LoginAttemptController":
        return cls(
            login_api,
            store,
            notifier,
            threshold=settings.login_attempt_threshold,
            base_lockout_seconds=settings.lockout_base_seconds,
            **kwargs,
        )

    # -- read-only views --------------------------------------------------

    @property
    def state(self) -> LockoutState:
        return self._state.model_copy()

    @property
    def is_locked(self) -> bool:
        self._expire_if_due()
        return self._state.is_locked(self._clock())

    @property
    def remaining_seconds(self) -> int:
        self._expire_if_due()
        return self._state.remaining_seconds(self._clock())

    @property
    def countdown_running(self) -> bool:
        return self._countdown is not None and not self._countdown.done()

    # -- operations -------------------------------------------------------

    async def attempt_login(self, email: str, password: str) -> LoginResult:
        """Try to log in.

        Raises:
            LockedOut: still inside a lockout window; the API is not contacted.
            MissingCredentials: empty email or password (counts as a failure).
            InvalidCredentials: the API rejected the login or was unreachable.
        """
        async with self._attempt_lock:
            self._expire_if_due()
            now = self._clock()
            if self._state.is_locked(now):
                self._start_countdown()
                raise LockedOut(self._state.remaining_seconds(now))

            self._state.email = email
            if not email or not password:
                self._register_failure()
                raise MissingCredentials()

            try:
                response = await self._login_api.login(email, password)
            except ApiRequestError as exc:
                logger.info("Login rejected for %s: %s", email, exc)
                self._register_failure()
                raise InvalidCredentials() from exc

            self._reset()
        logger.info("Login succeeded for %s", response.user.email)

        warning = None
        if self._notifier is not None:
            sent = await self._notifier.send_login_notification(response.user)
            if not sent:
                warning = NOTIFICATION_WARNING
        return LoginResult(user=response.user, token=response.token, warning=warning)

    async def start(self) -> None:
        """Resume the countdown for a lockout restored before the event loop ran."""
        self._expire_if_due()
        if self._state.is_locked(self._clock()):
            self._start_countdown()

    async def wait_until_unlocked(self) -> None:
        """Block until the running countdown clears the lock."""
        if self._countdown is not None:
            await asyncio.shield(self._countdown)

    def close(self) -> None:
        """Stop the countdown. The persisted state is untouched."""
        self._cancel_countdown()

    # -- internals --------------------------------------------------------

    def _register_failure(self) -> None:
        if self._state.is_locked(self._clock()):
            return
        self._state.attempt_count += 1
        if self._state.attempt_count >= self._threshold:
            duration = self._base_lockout_seconds * self._state.backoff_multiplier
            self._state.locked_until = self._clock() + duration
            self._state.backoff_multiplier *= 2
            logger.warning(
                "Login locked for %d seconds after %d failed attempts",
                duration,
                self._state.attempt_count,
            )
            self._start_countdown()
        self._persist()

    def _reset(self) -> None:
        self._cancel_countdown()
        self._state = LockoutState()
        self._store.clear()

    def _clear_lock(self) -> None:
        self._state.attempt_count = 0
        self._state.locked_until = None
        self._persist()

    def _expire_if_due(self) -> None:
        if self._state.locked_until is not None and not self._state.is_locked(self._clock()):
            self._cancel_countdown()
            self._clear_lock()
            self._emit(0)

    def _persist(self) -> None:
        self._store.save(self._state.serialize())

    def _emit(self, remaining: int) -> None:
        if self.on_tick is not None:
            self.on_tick(remaining)

    def _start_countdown(self) -> None:
        if self.countdown_running:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No event loop yet; start() resumes the countdown once one is running.
            return
        self._countdown = loop.create_task(self._run_countdown())

    def _cancel_countdown(self) -> None:
        task, self._countdown = self._countdown, None
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    async def _run_countdown(self) -> None:
        last_tick: int | None = None
        while True:
            remaining = self._state.remaining(self._clock())
            if remaining <= 0:
                self._countdown = None
                if self._state.locked_until is not None:
                    self._clear_lock()
                    logger.info("Login lockout expired")
                self._emit(0)
                return
            seconds = math.ceil(remaining)
            # An early wake-up lands on the same second; only report values that moved down.
            if last_tick is None or seconds < last_tick:
                self._emit(seconds)
                last_tick = seconds
            # Wake on the next whole-second boundary so ticks stay aligned.
            fraction = remaining - math.floor(remaining)
            await self._sleep(fraction or 1.0)
