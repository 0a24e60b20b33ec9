"""Transactional email via the Brevo HTTP API."""

from __future__ import annotations

from dataclasses import dataclass
from types import TracebackType

import httpx
import structlog

logger = structlog.get_logger()

DEFAULT_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class EmailMessage:
    """Rendered email ready to send."""

    subject: str
    html: str


@dataclass(frozen=True)
class EmailResult:
    """Outcome of a send attempt. Sending never raises on delivery errors."""

    success: bool
    message_id: str | None = None
    error: str | None = None


class BrevoEmailClient:
    """Async Brevo client.

    Delivery is best-effort: HTTP and transport errors are logged and
    reported through ``EmailResult`` instead of being raised, so a
    failed notification never undoes the write that triggered it.

    Usage::

        async with BrevoEmailClient(api_key, sender_name, sender_email) as mailer:
            result = await mailer.send("me@example.com", message)
    """

    def __init__(
        self,
        api_key: str,
        sender_name: str,
        sender_email: str,
        *,
        api_url: str = "https://api.brevo.com/v3/smtp/email",
        recipient_name: str = "FAANG Student",
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._sender = {"name": sender_name, "email": sender_email}
        self._api_url = api_url
        self._recipient_name = recipient_name
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> BrevoEmailClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def send(self, to: str, message: EmailMessage) -> EmailResult:
        """Send *message* to a single recipient."""
        payload = {
            "sender": self._sender,
            "to": [{"email": to, "name": self._recipient_name}],
            "subject": message.subject,
            "htmlContent": message.html,
        }
        headers = {
            "accept": "application/json",
            "api-key": self._api_key,
            "content-type": "application/json",
        }

        try:
            response = await self._client.post(
                self._api_url, json=payload, headers=headers
            )
        except httpx.HTTPError as exc:
            logger.error(
                "email_transport_error", subject=message.subject, error=str(exc)
            )
            return EmailResult(success=False, error=str(exc))

        if response.is_success:
            try:
                message_id = response.json().get("messageId")
            except ValueError:
                message_id = None
            logger.info("email_sent", subject=message.subject, message_id=message_id)
            return EmailResult(success=True, message_id=message_id)

        error = f"HTTP {response.status_code}: {response.text}"
        logger.error(
            "email_api_error",
            subject=message.subject,
            status_code=response.status_code,
            body=response.text[:500],
        )
        return EmailResult(success=False, error=error)
