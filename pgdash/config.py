"""Application configuration using pydantic-settings."""

import warnings
from pathlib import Path

from pydantic import BaseModel, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_DEFAULT_API_BASE_URL = "https://api-hammadii-6.onrender.com/"


class ResourceEndpoints(BaseModel):
    """Path templates for one remote resource collection.

    ``{id}`` is substituted with the record id for detail/update/delete.
    """

    list: str
    detail: str
    create: str
    update: str
    delete: str

    def path(self, action: str, record_id: str | None = None) -> str:
        template: str = getattr(self, action)
        if "{id}" in template:
            if record_id is None:
                raise ValueError(f"Endpoint '{action}' requires a record id")
            return template.format(id=record_id)
        return template


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__",
    )

    # App
    app_name: str = "PG Admin Dashboard"
    app_version: str = "0.1.0"
    environment: str = "development"  # development, staging, production
    log_level: str = "INFO"

    # Remote API
    api_base_url: str = _DEFAULT_API_BASE_URL
    request_timeout_seconds: float = 15.0
    # Post-login requests carry no credentials unless this is enabled.
    attach_auth_token: bool = False

    # Login lockout
    login_attempt_threshold: int = 3
    lockout_base_seconds: int = 60
    lockout_state_path: Path = Path(".pgdash") / "lockout.json"

    # Lists
    guest_page_size: int = 6

    # Login notification email (EmailJS-compatible REST API)
    notify_on_login: bool = False
    email_api_url: str = "https://api.emailjs.com/api/v1.0/email/send"
    email_service_id: str = ""
    email_template_id: str = ""
    email_public_key: str = ""
    email_recipient: str = ""

    # Endpoints
    guest_endpoints: ResourceEndpoints = ResourceEndpoints(
        list="/getDetailsof/guests",
        detail="/getDetailsof/guests/{id}",
        create="/add/guests",
        update="/getDetailsof/guests/{id}",
        delete="/delete/guests/{id}",
    )
    review_endpoints: ResourceEndpoints = ResourceEndpoints(
        list="/reviews",
        detail="/reviews/{id}",
        create="/reviews",
        update="/reviews/{id}",
        delete="/reviews/{id}",
    )
    rent_endpoints: ResourceEndpoints = ResourceEndpoints(
        list="/get/payments",
        detail="/payments/{id}",
        create="/add/payments",
        update="/rent-details/{id}",
        delete="/rent-details/{id}",
    )
    login_endpoint: str = "/loginWithEmail"

    @model_validator(mode="after")
    def _validate_lockout(self) -> "Settings":
        """Reject lockout settings that would disable the gate."""
        if self.login_attempt_threshold < 1:
            raise ValueError("LOGIN_ATTEMPT_THRESHOLD must be at least 1")
        if self.lockout_base_seconds < 1:
            raise ValueError("LOCKOUT_BASE_SECONDS must be at least 1")
        if self.guest_page_size < 1:
            raise ValueError("GUEST_PAGE_SIZE must be at least 1")
        return self

    @model_validator(mode="after")
    def _warn_plain_http(self) -> "Settings":
        """Warn when credentials would travel over plain HTTP outside development."""
        if self.api_base_url.startswith("http://") and self.environment == "production":
            warnings.warn(
                "API_BASE_URL uses plain HTTP in production; login credentials are sent unencrypted.",
                UserWarning,
                stacklevel=1,
            )
        return self

    @property
    def email_configured(self) -> bool:
        """True when every field the email API needs is present."""
        return all(
            (
                self.email_api_url,
                self.email_service_id,
                self.email_template_id,
                self.email_public_key,
            )
        )


settings = Settings()
