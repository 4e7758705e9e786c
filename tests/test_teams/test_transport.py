"""Tests for WebhookTransport — HTTP mocking, error mapping, session management."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from src.teams.exceptions import TransportError
from src.teams.transport import WebhookTransport, redact_url

_URL = "https://example.webhook.office.com/webhookb2/secret-token/IncomingWebhook/abc"


# ── Helpers ─────────────────────────────────────────────────────


def _mock_response(status: int = 200, text: str = "1") -> AsyncMock:
    resp = AsyncMock()
    resp.status = status
    resp.text = AsyncMock(return_value=text)
    resp.__aenter__ = AsyncMock(return_value=resp)
    resp.__aexit__ = AsyncMock(return_value=False)
    return resp


def _transport_with(resp: AsyncMock | None = None, **post_kw: object) -> tuple[WebhookTransport, MagicMock]:
    transport = WebhookTransport()
    mock_session = MagicMock()
    if resp is not None:
        mock_session.post = MagicMock(return_value=resp)
    else:
        mock_session.post = MagicMock(**post_kw)
    mock_session.closed = False
    transport._session = mock_session
    return transport, mock_session


# ── redact_url ──────────────────────────────────────────────────


class TestRedactUrl:
    def test_keeps_only_host(self) -> None:
        redacted = redact_url(_URL)
        assert redacted.startswith("https://example.webhook.office.com/")
        assert "secret-token" not in redacted

    def test_invalid_url(self) -> None:
        assert redact_url("not a url") == "<invalid-url>"


# ── post_json ───────────────────────────────────────────────────


class TestPostJson:
    async def test_posts_json_with_content_type(self) -> None:
        transport, session = _transport_with(_mock_response(200, "1"))
        payload = {"type": "message", "attachments": []}

        await transport.post_json(_URL, payload)

        session.post.assert_called_once()
        call_args = session.post.call_args
        assert call_args[0][0] == _URL
        assert call_args[1]["json"] == payload
        assert call_args[1]["headers"] == {"Content-Type": "application/json"}
        assert "Authorization" not in call_args[1]["headers"]

    async def test_json_body_decoded(self) -> None:
        transport, _ = _transport_with(_mock_response(200, '{"ok": true}'))
        assert await transport.post_json(_URL, {}) == {"ok": True}

    async def test_teams_plain_reply_decoded(self) -> None:
        transport, _ = _transport_with(_mock_response(200, "1"))
        assert await transport.post_json(_URL, {}) == 1

    async def test_non_json_body_returned_as_text(self) -> None:
        transport, _ = _transport_with(_mock_response(202, "accepted"))
        assert await transport.post_json(_URL, {}) == "accepted"

    async def test_empty_body(self) -> None:
        transport, _ = _transport_with(_mock_response(204, ""))
        assert await transport.post_json(_URL, {}) == ""

    async def test_error_status_raises(self) -> None:
        transport, _ = _transport_with(_mock_response(400, "Bad payload"))
        with pytest.raises(TransportError, match="400: Bad payload"):
            await transport.post_json(_URL, {})

    async def test_server_error_raises(self) -> None:
        transport, _ = _transport_with(_mock_response(503, "unavailable"))
        with pytest.raises(TransportError, match="503"):
            await transport.post_json(_URL, {})

    async def test_client_error_wrapped(self) -> None:
        transport, _ = _transport_with(
            side_effect=aiohttp.ClientConnectionError("connection refused")
        )
        with pytest.raises(TransportError, match="connection refused") as exc_info:
            await transport.post_json(_URL, {})
        assert isinstance(exc_info.value.__cause__, aiohttp.ClientConnectionError)

    async def test_timeout_wrapped(self) -> None:
        transport, _ = _transport_with(side_effect=TimeoutError())
        with pytest.raises(TransportError, match="timed out"):
            await transport.post_json(_URL, {})


# ── Session lifecycle ───────────────────────────────────────────


class TestLifecycle:
    async def test_close_session(self) -> None:
        transport = WebhookTransport()
        mock_session = AsyncMock()
        mock_session.closed = False
        transport._session = mock_session

        await transport.close()
        mock_session.close.assert_awaited_once()
        assert transport._session is None

    async def test_close_when_no_session(self) -> None:
        transport = WebhookTransport()
        await transport.close()  # should not raise

    async def test_context_manager_closes(self) -> None:
        mock_session = AsyncMock()
        mock_session.closed = False
        async with WebhookTransport() as transport:
            transport._session = mock_session
        mock_session.close.assert_awaited_once()
