"""Login notification email: best-effort, never blocks a login.

Messages are composed from a template and posted to an EmailJS-compatible
REST endpoint. Every failure is logged and reported as ``False``.
"""

import logging
from datetime import datetime, timezone

import httpx

from pgdash.config import Settings
from pgdash.models.user import SessionUser

logger = logging.getLogger(__name__)

TEMPLATES = {
    "login_notice": {
        "subject": "New sign-in to {app_name}",
        "body": (
            "Hello,\n\n"
            "{user_name} ({user_email}) signed in to {app_name} at {login_time}.\n\n"
            "If this wasn't you, please change your password and contact the administrator.\n\n"
            "Best regards,\n{app_name}"
        ),
    },
}


def compose_login_notice(user: SessionUser, app_name: str, when: datetime | None = None) -> dict[str, str]:
    """Fill the login template for ``user``."""
    when = when or datetime.now(timezone.utc)
    values = {
        "app_name": app_name,
        "user_name": user.display_name,
        "user_email": user.email,
        "login_time": when.strftime("%Y-%m-%d %H:%M UTC"),
    }
    template = TEMPLATES["login_notice"]
    return {
        "subject": template["subject"].format(**values),
        "body": template["body"].format(**values),
        **values,
    }


class LoginNotifier:
    """Sends the login notice through the configured email API."""

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return self.settings.notify_on_login and self.settings.email_configured

    async def send_login_notification(self, user: SessionUser) -> bool:
        """Send the notice. Returns True when sent or when notifications are off."""
        if not self.enabled:
            logger.debug("Login notification disabled or not configured. Skipping email.")
            return True

        notice = compose_login_notice(user, self.settings.app_name)
        recipient = self.settings.email_recipient or user.email
        payload = {
            "service_id": self.settings.email_service_id,
            "template_id": self.settings.email_template_id,
            "user_id": self.settings.email_public_key,
            "template_params": {**notice, "to_email": recipient},
        }

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.request_timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(self.settings.email_api_url, json=payload)
                response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.error("Failed to send login notification to %s: %s", recipient, exc)
            return False

        logger.info("Sent login notification to %s", recipient)
        return True
