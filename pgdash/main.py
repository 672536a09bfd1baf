"""PG Admin Dashboard application entry point.

``create_app`` wires settings, the API client, the login gate and the view
shell together and resumes a restored lockout countdown. Pass a transport to run against a fake backend.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

import httpx

from pgdash.api.client import ApiClient
from pgdash.api.resources import guest_api, login_api, rent_api, review_api
from pgdash.auth.lockout import LoginAttemptController
from pgdash.auth.session import SessionContext
from pgdash.auth.storage import FileStateStore, StateStore
from pgdash.config import Settings
from pgdash.config import settings as default_settings
from pgdash.controllers.guests import GuestListController
from pgdash.controllers.rent import RentListController
from pgdash.controllers.reviews import ReviewListController
from pgdash.services.notification_service import LoginNotifier
from pgdash.shell import Route, ViewShell

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger so every pgdash.* logger writes to stderr."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


@dataclass
class DashboardApp:
    settings: Settings
    client: ApiClient
    lockout: LoginAttemptController
    session: SessionContext
    shell: ViewShell

    async def start(self) -> None:
        """Resume background work restored from disk, such as a lockout countdown."""
        await self.lockout.start()

    async def aclose(self) -> None:
        """Tear down the page, stop the countdown and close the HTTP client."""
        self.shell.close()
        self.lockout.close()
        await self.client.aclose()


async def create_app(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    store: StateStore | None = None,
    notifier: LoginNotifier | None = None,
) -> DashboardApp:
    settings = settings or default_settings
    configure_logging(settings.log_level)

    client = ApiClient.from_settings(settings, transport=transport)
    if store is None:
        store = FileStateStore(Path(settings.lockout_state_path))
    if notifier is None:
        notifier = LoginNotifier(settings)

    lockout = LoginAttemptController.from_settings(settings, login_api(client, settings), store, notifier)
    session = SessionContext(lockout, client)

    guests = guest_api(client, settings)
    rent = rent_api(client, settings)
    reviews = review_api(client, settings)
    shell = ViewShell(
        session,
        {
            Route.GUESTS: lambda: GuestListController.from_settings(guests, settings),
            Route.RENT: lambda: RentListController(rent),
            Route.REVIEWS: lambda: ReviewListController(reviews),
        },
    )

    app = DashboardApp(settings=settings, client=client, lockout=lockout, session=session, shell=shell)
    await app.start()
    logger.info("%s %s started against %s", settings.app_name, settings.app_version, settings.api_base_url)
    return app
