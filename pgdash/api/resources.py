"""Resource collections on the remote API.

``ResourceAPI`` performs CRUD against one collection and translates every
payload through its versioned wire schema, so callers only ever see the
canonical models.
"""

import logging
from typing import Any, Generic, Protocol, TypeVar

from pydantic import BaseModel, ValidationError

from pgdash.api.client import ApiClient
from pgdash.config import ResourceEndpoints, Settings
from pgdash.exceptions import ApiResponseError
from pgdash.models.guest import Guest
from pgdash.models.rent import RentRecord
from pgdash.models.review import Review
from pgdash.models.user import SessionUser
from pgdash.schemas.auth import LoginRequest, LoginResponseV1
from pgdash.schemas.guest import GuestPayloadV1
from pgdash.schemas.rent import RentPayloadV1
from pgdash.schemas.review import ReviewPayloadV1

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class WireSchema(Protocol[ModelT]):
    """What a versioned payload schema must provide."""

    @classmethod
    def model_validate(cls, obj: Any) -> "WireSchema[ModelT]": ...

    @classmethod
    def from_model(cls, model: ModelT) -> "WireSchema[ModelT]": ...

    def to_model(self) -> ModelT: ...

    def to_request(self) -> dict[str, Any]: ...


class ResourceAPI(Generic[ModelT]):
    """CRUD for one remote collection (guests, reviews, rent records)."""

    def __init__(
        self,
        client: ApiClient,
        endpoints: ResourceEndpoints,
        schema: type[WireSchema[ModelT]],
        name: str,
    ) -> None:
        self.client = client
        self.endpoints = endpoints
        self.schema = schema
        self.name = name

    def _parse(self, payload: Any) -> ModelT:
        try:
            return self.schema.model_validate(payload).to_model()
        except ValidationError as exc:
            raise ApiResponseError(f"Malformed {self.name} payload: {exc.error_count()} error(s)") from exc

    async def list(self) -> list[ModelT]:
        payload = await self.client.get(self.endpoints.path("list"))
        if payload is None:
            return []
        if not isinstance(payload, list):
            raise ApiResponseError(f"Expected a list of {self.name} records")
        return [self._parse(item) for item in payload]

    async def get(self, record_id: str) -> ModelT | None:
        payload = await self.client.get(self.endpoints.path("detail", record_id))
        if payload is None:
            return None
        return self._parse(payload)

    async def create(self, model: ModelT) -> ModelT | None:
        body = self.schema.from_model(model).to_request()
        payload = await self.client.post(self.endpoints.path("create"), body)
        logger.info("Created %s record", self.name)
        return self._parse(payload) if isinstance(payload, dict) else None

    async def update(self, record_id: str, model: ModelT) -> ModelT | None:
        body = self.schema.from_model(model).to_request()
        payload = await self.client.put(self.endpoints.path("update", record_id), body)
        logger.info("Updated %s record %s", self.name, record_id)
        return self._parse(payload) if isinstance(payload, dict) else None

    async def delete(self, record_id: str) -> bool:
        await self.client.delete(self.endpoints.path("delete", record_id))
        logger.info("Deleted %s record %s", self.name, record_id)
        return True


class LoginResponse(BaseModel):
    """Token plus the authenticated user, in canonical form."""

    token: str
    user: SessionUser


class LoginAPI:
    """``POST /loginWithEmail``."""

    def __init__(self, client: ApiClient, path: str = "/loginWithEmail") -> None:
        self.client = client
        self.path = path

    async def login(self, email: str, password: str) -> LoginResponse:
        body = LoginRequest(email=email, password=password).model_dump()
        payload = await self.client.post(self.path, body)
        try:
            parsed = LoginResponseV1.model_validate(payload)
        except ValidationError as exc:
            raise ApiResponseError("Login response is missing token or user fields") from exc
        return LoginResponse(token=parsed.token, user=parsed.user.to_model())


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


def guest_api(client: ApiClient, settings: Settings) -> ResourceAPI[Guest]:
    return ResourceAPI(client, settings.guest_endpoints, GuestPayloadV1, "guest")


def review_api(client: ApiClient, settings: Settings) -> ResourceAPI[Review]:
    return ResourceAPI(client, settings.review_endpoints, ReviewPayloadV1, "review")


def rent_api(client: ApiClient, settings: Settings) -> ResourceAPI[RentRecord]:
    return ResourceAPI(client, settings.rent_endpoints, RentPayloadV1, "rent")


def login_api(client: ApiClient, settings: Settings) -> LoginAPI:
    return LoginAPI(client, settings.login_endpoint)
