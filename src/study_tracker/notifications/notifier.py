"""Single-recipient notification dispatch."""

from __future__ import annotations

from typing import Protocol

import structlog

from study_tracker.config import Settings
from study_tracker.notifications.email import (
    BrevoEmailClient,
    EmailMessage,
    EmailResult,
)

logger = structlog.get_logger()


class Mailer(Protocol):
    async def send(self, to: str, message: EmailMessage) -> EmailResult: ...


class Notifier:
    """Sends emails to the learner, or skips quietly when unconfigured.

    Without a mailer (no API key) or a recipient address every call is
    a logged no-op returning None.
    """

    def __init__(
        self, mailer: Mailer | None, recipient: str | None, app_url: str
    ) -> None:
        self._mailer = mailer
        self._recipient = recipient
        self.app_url = app_url

    @property
    def enabled(self) -> bool:
        return self._mailer is not None and bool(self._recipient)

    async def notify(self, message: EmailMessage) -> EmailResult | None:
        if self._mailer is None or not self._recipient:
            logger.debug("email_skipped_unconfigured", subject=message.subject)
            return None
        return await self._mailer.send(self._recipient, message)


def create_mailer(settings: Settings) -> BrevoEmailClient | None:
    """Build the Brevo client if an API key is configured."""
    if settings.brevo_api_key is None:
        logger.info("email_disabled", reason="BREVO_API_KEY not set")
        return None
    return BrevoEmailClient(
        api_key=settings.brevo_api_key.get_secret_value(),
        sender_name=settings.email_sender_name,
        sender_email=settings.email_sender_email,
        api_url=settings.brevo_api_url,
        recipient_name=settings.notification_name,
    )
