"""Remote resource client: the only code that talks to the external API."""

from pgdash.api.client import ApiClient
from pgdash.api.resources import (
    LoginAPI,
    LoginResponse,
    ResourceAPI,
    guest_api,
    login_api,
    rent_api,
    review_api,
)

__all__ = [
    "ApiClient",
    "LoginAPI",
    "LoginResponse",
    "ResourceAPI",
    "guest_api",
    "login_api",
    "rent_api",
    "review_api",
]
