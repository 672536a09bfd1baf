"""Shared test configuration and fixtures.

The remote API is replaced by ``FakeBackend``, an in-memory store served
through ``httpx.MockTransport``, so every test runs the real client, wire
schemas and controllers without touching the network.
"""

import asyncio
import json
import re
from collections.abc import AsyncGenerator
from typing import Any

import httpx
import pytest
import pytest_asyncio

from pgdash.api.client import ApiClient
from pgdash.auth.storage import MemoryStateStore
from pgdash.config import Settings

# ---------------------------------------------------------------------------
# Fake backend
# ---------------------------------------------------------------------------

_ID = r"(?P<id>[^/]+)"

# (method, path pattern, action, collection) matching the default endpoint map.
ROUTES = [
    ("GET", r"/getDetailsof/guests", "list", "guests"),
    ("GET", rf"/getDetailsof/guests/{_ID}", "detail", "guests"),
    ("POST", r"/add/guests", "create", "guests"),
    ("PUT", rf"/getDetailsof/guests/{_ID}", "update", "guests"),
    ("DELETE", rf"/delete/guests/{_ID}", "delete", "guests"),
    ("GET", r"/reviews", "list", "reviews"),
    ("GET", rf"/reviews/{_ID}", "detail", "reviews"),
    ("POST", r"/reviews", "create", "reviews"),
    ("PUT", rf"/reviews/{_ID}", "update", "reviews"),
    ("DELETE", rf"/reviews/{_ID}", "delete", "reviews"),
    ("GET", r"/get/payments", "list", "payments"),
    ("GET", rf"/payments/{_ID}", "detail", "payments"),
    ("POST", r"/add/payments", "create", "payments"),
    ("PUT", rf"/rent-details/{_ID}", "update", "payments"),
    ("DELETE", rf"/rent-details/{_ID}", "delete", "payments"),
    ("POST", r"/loginWithEmail", "login", "users"),
]

ADMIN_EMAIL = "admin@pg.test"
ADMIN_PASSWORD = "correct-horse"


class FakeBackend:
    """In-memory stand-in for the remote API.

    Records are stored as raw wire dicts keyed by ``_id``. ``break_route``
    makes every matching request fail with the given status until
    ``heal`` is called. Setting ``gate`` holds requests until it is set.
    """

    def __init__(self) -> None:
        self.collections: dict[str, dict[str, dict[str, Any]]] = {
            "guests": {},
            "reviews": {},
            "payments": {},
        }
        self.requests: list[httpx.Request] = []
        self.broken: dict[tuple[str, str], int] = {}
        self.gate: asyncio.Event | None = None
        self.arrived = asyncio.Event()
        self._next_id = 1

    # -- setup helpers ----------------------------------------------------

    def seed(self, collection: str, record: dict[str, Any]) -> str:
        record_id = record.get("_id") or self._new_id(collection)
        self.collections[collection][record_id] = {**record, "_id": record_id}
        return record_id

    def break_route(self, method: str, action: str, status: int = 500) -> None:
        self.broken[(method, action)] = status

    def heal(self) -> None:
        self.broken.clear()

    def calls(self, method: str, collection: str | None = None) -> list[httpx.Request]:
        return [
            r
            for r in self.requests
            if r.method == method and (collection is None or self._route(r)[2] == collection)
        ]

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    # -- request handling -------------------------------------------------

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        self.arrived.set()
        if self.gate is not None:
            await self.gate.wait()

        action, record_id, collection = self._route(request)
        if action is None:
            return httpx.Response(404, json={"message": "Not found"})
        status = self.broken.get((request.method, action))
        if status is not None:
            return httpx.Response(status, json={"message": "Server error"})

        if action == "login":
            return self._login(request)

        records = self.collections[collection]
        if action == "list":
            return httpx.Response(200, json=list(records.values()))
        if action == "create":
            new_id = self.seed(collection, json.loads(request.content))
            return httpx.Response(201, json=records[new_id])
        if record_id not in records:
            return httpx.Response(404, json={"message": "Not found"})
        if action == "detail":
            return httpx.Response(200, json=records[record_id])
        if action == "update":
            records[record_id] = {**json.loads(request.content), "_id": record_id}
            return httpx.Response(200, json=records[record_id])
        del records[record_id]
        return httpx.Response(200, json={"message": "Deleted"})

    def _route(self, request: httpx.Request) -> tuple[str | None, str | None, str | None]:
        for method, pattern, action, collection in ROUTES:
            if request.method != method:
                continue
            match = re.fullmatch(pattern, request.url.path)
            if match:
                return action, match.groupdict().get("id"), collection
        return None, None, None

    def _login(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if body.get("email") == ADMIN_EMAIL and body.get("password") == ADMIN_PASSWORD:
            return httpx.Response(
                200,
                json={
                    "token": "token-123",
                    "user": {"_id": "u-1", "email": ADMIN_EMAIL, "name": "Admin"},
                },
            )
        return httpx.Response(401, json={"message": "Invalid credentials"})

    def _new_id(self, collection: str) -> str:
        record_id = f"{collection}-{self._next_id}"
        self._next_id += 1
        return record_id


# ---------------------------------------------------------------------------
# Fake clock
# ---------------------------------------------------------------------------


class FakeClock:
    """Controllable wall clock and sleep for the lockout countdown.

    With ``auto`` off, ``sleep`` parks until cancelled so only explicit
    ``advance`` calls move time. With ``auto`` on, ``sleep`` advances the
    clock by the requested amount and yields once.
    """

    def __init__(self, start: float = 1_700_000_000.0, auto: bool = False) -> None:
        self.now = start
        self.auto = auto
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        if not self.auto:
            await asyncio.get_running_loop().create_future()
        self.now += seconds
        await asyncio.sleep(0)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        api_base_url="https://api.test/",
        lockout_state_path=tmp_path / "lockout.json",
        notify_on_login=False,
    )


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> MemoryStateStore:
    return MemoryStateStore()


@pytest_asyncio.fixture
async def client(backend: FakeBackend, test_settings: Settings) -> AsyncGenerator[ApiClient, None]:
    """ApiClient wired to the fake backend."""
    api_client = ApiClient.from_settings(test_settings, transport=backend.transport)
    yield api_client
    await api_client.aclose()


def guest_payload(name: str = "Alice Sharma", **overrides: Any) -> dict[str, Any]:
    """A complete guest record in wire (camelCase) form."""
    payload = {
        "name": name,
        "email": f"{name.split()[0].lower()}@example.com",
        "contact": "+91 98765 43210",
        "location": "Pune",
        "dob": "2001-04-12",
        "guardianName": "R. Sharma",
        "guardianContact": "+91 91234 56780",
        "emergencyContactName": "M. Sharma",
        "emergencyContactRelation": "Mother",
        "emergencyContactNumber": "+91 99887 76655",
        "occupationCourse": "B.Tech",
        "joinDate": "2024-06-01",
        "expectedDateFrom": "2024-06-01",
        "expectedDateTo": "2025-05-31",
        "paymentCycle": "monthly",
        "amountPaid": 8500,
        "depositAmount": 10000,
        "foodPreference": "with-food",
        "stayStatus": "currently-staying",
    }
    payload.update(overrides)
    return payload


def guest_form_data(name: str = "Bharat Rao", **overrides: Any) -> dict[str, Any]:
    """Valid guest form input in the shape a page would submit."""
    data = {
        "name": name,
        "email": "bharat@example.com",
        "contact": "9876543210",
        "location": "Mumbai",
        "dob": "2000-01-15",
        "guardian_name": "S. Rao",
        "guardian_contact": "9123456780",
        "emergency_contact_name": "P. Rao",
        "emergency_contact_relation": "Father",
        "emergency_contact_number": "9988776655",
        "occupation_course": "MBA",
        "join_date": "2024-07-01",
        "expected_date_from": "2024-07-01",
        "expected_date_to": "2025-06-30",
        "payment_cycle": "monthly",
        "amount_paid": "9000",
        "food_preference": "without-food",
        "stay_status": "joining-soon",
    }
    data.update(overrides)
    return data


def rent_payload(name: str = "Alice Sharma", **overrides: Any) -> dict[str, Any]:
    payload = {
        "name": name,
        "amount": 8500,
        "duedate": "2024-07-05",
        "paymentMethod": "UPI",
        "month": "July",
        "year": 2024,
        "status": "pending",
        "notes": "",
    }
    payload.update(overrides)
    return payload


def review_payload(name: str = "Alice Sharma", **overrides: Any) -> dict[str, Any]:
    payload = {
        "name": name,
        "rating": 4,
        "comment": "Clean rooms and good food",
        "createdAt": "2024-07-10",
    }
    payload.update(overrides)
    return payload
