"""View shell: maps routes to pages and gates them behind the session.

Every resource page gets a fresh controller on navigation; the previous one
is closed first so late responses cannot reach it.
"""

import logging
from collections.abc import Callable, Mapping
from enum import Enum

from pgdash.auth.session import LoginOutcome, SessionContext
from pgdash.controllers.resource_list import ResourceListController

logger = logging.getLogger(__name__)

ControllerFactory = Callable[[], ResourceListController]


class Route(str, Enum):
    LOGIN = "/login"
    DASHBOARD = "/dashboard"
    GUESTS = "/guests"
    RENT = "/rent"
    REVIEWS = "/reviews"
    PROFILE = "/profile"
    ABOUT = "/about"


class ViewShell:
    """Holds the current route and the controller of the page on screen."""

    def __init__(self, session: SessionContext, factories: Mapping[Route, ControllerFactory]) -> None:
        self.session = session
        self._factories = dict(factories)
        self._route = Route.LOGIN
        self._controller: ResourceListController | None = None

    @property
    def route(self) -> Route:
        return self._route

    @property
    def controller(self) -> ResourceListController | None:
        return self._controller

    def resolve(self, path: str) -> Route:
        """Route for ``path``; login while logged out, dashboard when unknown."""
        if not self.session.is_authenticated:
            return Route.LOGIN
        normalized = "/" + path.strip().strip("/")
        if normalized == "/":
            return Route.DASHBOARD
        try:
            route = Route(normalized)
        except ValueError:
            logger.info("Unknown route %s, falling back to dashboard", path)
            return Route.DASHBOARD
        if route is Route.LOGIN:
            return Route.DASHBOARD
        return route

    async def navigate(self, path: str) -> Route:
        route = self.resolve(path)
        self._teardown()
        self._route = route

        factory = self._factories.get(route)
        if factory is not None:
            controller = factory()
            self._controller = controller
            await controller.load()
        return route

    async def login(self, email: str, password: str) -> LoginOutcome:
        outcome = await self.session.login(email, password)
        if outcome.success:
            await self.navigate(Route.DASHBOARD.value)
        return outcome

    def logout(self) -> None:
        self.session.logout()
        self._teardown()
        self._route = Route.LOGIN

    def close(self) -> None:
        self._teardown()

    def _teardown(self) -> None:
        controller, self._controller = self._controller, None
        if controller is not None:
            controller.close()
