"""Tests for BrevoEmailClient and Notifier."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

import httpx
import pytest

from study_tracker.config import Settings
from study_tracker.notifications.email import (
    BrevoEmailClient,
    EmailMessage,
    EmailResult,
)
from study_tracker.notifications.notifier import Notifier, create_mailer

MESSAGE = EmailMessage(subject="Hello", html="<p>Hi</p>")


def make_client(handler: object) -> BrevoEmailClient:
    return BrevoEmailClient(
        "brevo-key",
        "Study Bot",
        "bot@example.com",
        api_url="https://brevo.test/v3/smtp/email",
        recipient_name="Learner",
        transport=httpx.MockTransport(handler),  # type: ignore[arg-type]
    )


class TestBrevoEmailClient:
    async def test_success(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(201, json={"messageId": "<abc@brevo>"})

        async with make_client(handler) as client:
            result = await client.send("me@example.com", MESSAGE)

        assert result == EmailResult(success=True, message_id="<abc@brevo>")
        [request] = seen
        assert str(request.url) == "https://brevo.test/v3/smtp/email"
        assert request.headers["api-key"] == "brevo-key"
        body = json.loads(request.content)
        assert body == {
            "sender": {"name": "Study Bot", "email": "bot@example.com"},
            "to": [{"email": "me@example.com", "name": "Learner"}],
            "subject": "Hello",
            "htmlContent": "<p>Hi</p>",
        }

    async def test_api_error_reported(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, text="Key not found")

        async with make_client(handler) as client:
            result = await client.send("me@example.com", MESSAGE)

        assert result.success is False
        assert result.error == "HTTP 401: Key not found"

    async def test_transport_error_reported(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with make_client(handler) as client:
            result = await client.send("me@example.com", MESSAGE)

        assert result.success is False
        assert result.error is not None
        assert "connection refused" in result.error

    async def test_non_json_success_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="queued")

        async with make_client(handler) as client:
            result = await client.send("me@example.com", MESSAGE)

        assert result == EmailResult(success=True, message_id=None)


class TestNotifier:
    async def test_sends_to_recipient(self) -> None:
        mailer = AsyncMock()
        mailer.send.return_value = EmailResult(success=True, message_id="m1")
        notifier = Notifier(mailer, "me@example.com", "http://app")

        result = await notifier.notify(MESSAGE)

        assert notifier.enabled is True
        assert result is not None and result.message_id == "m1"
        mailer.send.assert_awaited_once_with("me@example.com", MESSAGE)

    @pytest.mark.parametrize(
        ("with_mailer", "recipient"),
        [(False, "me@example.com"), (True, None), (True, "")],
    )
    async def test_unconfigured_is_noop(
        self, with_mailer: bool, recipient: str | None
    ) -> None:
        mailer = AsyncMock() if with_mailer else None
        notifier = Notifier(mailer, recipient, "http://app")

        assert notifier.enabled is False
        assert await notifier.notify(MESSAGE) is None
        if mailer is not None:
            mailer.send.assert_not_awaited()


class TestCreateMailer:
    def test_without_key(self) -> None:
        assert create_mailer(Settings(_env_file=None)) is None  # type: ignore[call-arg]

    async def test_with_key(self) -> None:
        settings = Settings(
            _env_file=None,  # type: ignore[call-arg]
            brevo_api_key="xkeysib-123",  # type: ignore[arg-type]
        )
        mailer = create_mailer(settings)
        assert isinstance(mailer, BrevoEmailClient)
        await mailer.close()
