"""Tests for the view shell and the application factory."""

import time

import pytest
import pytest_asyncio
from conftest import ADMIN_EMAIL, ADMIN_PASSWORD, guest_payload, rent_payload

from pgdash.auth.lockout import LockoutState
from pgdash.controllers.guests import GuestListController
from pgdash.controllers.rent import RentListController
from pgdash.main import create_app
from pgdash.shell import Route


@pytest_asyncio.fixture
async def app(test_settings, backend, store):
    dashboard = await create_app(test_settings, transport=backend.transport, store=store)
    yield dashboard
    await dashboard.aclose()


@pytest_asyncio.fixture
async def logged_in(app):
    outcome = await app.shell.login(ADMIN_EMAIL, ADMIN_PASSWORD)
    assert outcome.success
    return app


class TestGate:
    """Test that every route resolves to login while logged out."""

    @pytest.mark.parametrize("path", ["/", "/dashboard", "/guests", "/rent", "/reviews", "/profile", "/nope"])
    async def test_unauthenticated_paths_resolve_to_login(self, app, path):
        assert await app.shell.navigate(path) is Route.LOGIN
        assert app.shell.controller is None

    async def test_failed_login_stays_on_login(self, app):
        outcome = await app.shell.login(ADMIN_EMAIL, "wrong")

        assert outcome.message == "Invalid credentials."
        assert app.shell.route is Route.LOGIN

    async def test_login_lands_on_dashboard(self, logged_in):
        assert logged_in.shell.route is Route.DASHBOARD
        assert logged_in.session.user.email == ADMIN_EMAIL


class TestRouting:
    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("/", Route.DASHBOARD),
            ("/dashboard", Route.DASHBOARD),
            ("/guests/", Route.GUESTS),
            ("/rent", Route.RENT),
            ("/reviews", Route.REVIEWS),
            ("/profile", Route.PROFILE),
            ("/about", Route.ABOUT),
            ("/login", Route.DASHBOARD),
            ("/does-not-exist", Route.DASHBOARD),
        ],
    )
    async def test_resolve(self, logged_in, path, expected):
        assert logged_in.shell.resolve(path) is expected

    async def test_resource_page_gets_loaded_controller(self, logged_in, backend):
        backend.seed("guests", guest_payload())

        await logged_in.shell.navigate("/guests")

        controller = logged_in.shell.controller
        assert isinstance(controller, GuestListController)
        assert [g.name for g in controller.items] == ["Alice Sharma"]
        assert controller.page_size == 6

    async def test_navigation_closes_previous_controller(self, logged_in, backend):
        backend.seed("payments", rent_payload())
        await logged_in.shell.navigate("/guests")
        guests = logged_in.shell.controller

        await logged_in.shell.navigate("/rent")

        assert guests.closed
        assert isinstance(logged_in.shell.controller, RentListController)
        assert len(logged_in.shell.controller.items) == 1

    async def test_revisiting_a_page_creates_a_fresh_controller(self, logged_in):
        await logged_in.shell.navigate("/reviews")
        first = logged_in.shell.controller

        await logged_in.shell.navigate("/reviews")

        assert logged_in.shell.controller is not first
        assert first.closed

    async def test_static_pages_have_no_controller(self, logged_in):
        await logged_in.shell.navigate("/guests")
        await logged_in.shell.navigate("/about")

        assert logged_in.shell.controller is None

    async def test_logout_returns_to_login(self, logged_in):
        await logged_in.shell.navigate("/guests")
        guests = logged_in.shell.controller

        logged_in.shell.logout()

        assert logged_in.shell.route is Route.LOGIN
        assert guests.closed
        assert not logged_in.session.is_authenticated
        assert await logged_in.shell.navigate("/guests") is Route.LOGIN


class TestCreateApp:
    """Test what the factory restores from the state store."""

    async def test_restored_lockout_counts_down(self, test_settings, backend, store):
        locked = LockoutState(attempt_count=3, locked_until=time.time() + 45, backoff_multiplier=2)
        store.save(locked.serialize())

        dashboard = await create_app(test_settings, transport=backend.transport, store=store)
        try:
            assert dashboard.lockout.countdown_running
            assert 0 < dashboard.lockout.remaining_seconds <= 45

            outcome = await dashboard.shell.login(ADMIN_EMAIL, ADMIN_PASSWORD)
            assert not outcome.success
            assert backend.requests == []
        finally:
            await dashboard.aclose()

        assert not dashboard.lockout.countdown_running

    async def test_expired_lockout_is_cleared_on_start(self, test_settings, backend, store):
        expired = LockoutState(attempt_count=3, locked_until=time.time() - 5, backoff_multiplier=2)
        store.save(expired.serialize())

        dashboard = await create_app(test_settings, transport=backend.transport, store=store)
        try:
            assert not dashboard.lockout.countdown_running
            assert dashboard.lockout.state.locked_until is None
            assert dashboard.lockout.state.backoff_multiplier == 2
        finally:
            await dashboard.aclose()
