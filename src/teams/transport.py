"""HTTP delivery of Teams messages to an Incoming Webhook."""

from __future__ import annotations

import asyncio
import json
from types import TracebackType
from typing import Any
from urllib.parse import urlsplit

import aiohttp
import structlog

from src.teams.exceptions import TransportError

logger = structlog.get_logger(__name__)

_JSON_HEADERS = {"Content-Type": "application/json"}


def redact_url(url: str) -> str:
    """Reduce a webhook URL to scheme and host; the path carries the secret."""
    parts = urlsplit(url)
    if not parts.netloc:
        return "<invalid-url>"
    return f"{parts.scheme}://{parts.netloc}/…"


def _decode_body(text: str) -> Any:
    if not text:
        return ""
    try:
        return json.loads(text)
    except ValueError:
        return text


class WebhookTransport:
    """POSTs JSON documents to webhook URLs over a shared aiohttp session.

    No retries and no timeout beyond aiohttp's default.

    Usage::

        async with WebhookTransport() as transport:
            reply = await transport.post_json(url, envelope)
    """

    def __init__(self) -> None:
        self._session: aiohttp.ClientSession | None = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def post_json(self, url: str, payload: dict[str, Any]) -> Any:
        """Send *payload* and return the decoded response body.

        JSON responses are decoded; anything else (Teams answers ``1``) is
        returned as text.

        Raises:
            TransportError: the request failed or the remote returned >= 400.
        """
        try:
            session = self._get_session()
            async with session.post(url, json=payload, headers=_JSON_HEADERS) as resp:
                text = await resp.text()
                if resp.status >= 400:
                    logger.warning(
                        "teams_webhook_send_failed",
                        url=redact_url(url),
                        status=resp.status,
                        body=text[:200],
                    )
                    raise TransportError(
                        f"Webhook returned {resp.status}: {text[:200]}"
                    )
                return _decode_body(text)
        except aiohttp.ClientError as exc:
            raise TransportError(f"Webhook request failed: {exc}") from exc
        except asyncio.TimeoutError as exc:
            raise TransportError("Webhook request timed out") from exc

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> WebhookTransport:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()
