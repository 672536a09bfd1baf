"""Async HTTP client for the remote PG management API.

Thin wrapper around ``httpx.AsyncClient``: every request is JSON, and any
non-2xx response or transport failure is raised as ``ApiRequestError``
without distinguishing status codes.
"""

import logging
from typing import Any

import httpx

from pgdash.config import Settings
from pgdash.exceptions import ApiRequestError, ApiResponseError

logger = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}


class ApiClient:
    """Issues JSON requests against ``base_url``.

    ``transport`` is forwarded to httpx so tests can plug in an
    ``httpx.MockTransport`` instead of the network.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
        attach_token: bool = False,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers=JSON_HEADERS,
            transport=transport,
        )
        self._attach_token = attach_token
        self._token: str | None = None

    @classmethod
    def from_settings(
        cls, settings: Settings, transport: httpx.AsyncBaseTransport | None = None
    ) -> "ApiClient":
        return cls(
            base_url=settings.api_base_url,
            timeout=settings.request_timeout_seconds,
            transport=transport,
            attach_token=settings.attach_auth_token,
        )

    def set_token(self, token: str | None) -> None:
        """Remember the session token. Only sent when token attachment is enabled."""
        self._token = token

    async def request(self, method: str, path: str, body: Any = None) -> Any:
        """Send a request and return the decoded JSON body (None when empty)."""
        headers = {}
        if self._attach_token and self._token:
            headers["Authorization"] = f"Bearer {self._token}"

        try:
            response = await self._client.request(
                method,
                path.lstrip("/"),
                json=body,
                headers=headers,
            )
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise ApiRequestError(f"API request failed: {exc}") from exc

        if not response.is_success:
            logger.warning("%s %s returned %d", method, path, response.status_code)
            raise ApiRequestError(
                f"API request failed: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ApiResponseError(
                f"API returned invalid JSON for {method} {path}",
                status_code=response.status_code,
            ) from exc

    async def get(self, path: str) -> Any:
        return await self.request("GET", path)

    async def post(self, path: str, body: Any) -> Any:
        return await self.request("POST", path, body)

    async def put(self, path: str, body: Any) -> Any:
        return await self.request("PUT", path, body)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
