"""Pure functions that build Adaptive Cards and the Teams message envelope."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any

from src.teams.exceptions import ParseError, ValidationError
from src.teams.types import (
    ADAPTIVE_CARD_CONTENT_TYPE,
    DEFAULT_CARD_VERSION,
    AlertInput,
    RecoveryInput,
    parse_iso_timestamp,
)

Card = dict[str, Any]

DEFAULT_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S %Z"

SITE_DOWN_TITLE = "🚨 Site Down Alert"
SITE_RECOVERED_TITLE = "✅ Site Recovered"


# ── Helpers ─────────────────────────────────────────────────────


def _present(value: str) -> bool:
    """Optional text fields count as absent when empty or whitespace-only."""
    return bool(value and value.strip())


def format_timestamp(
    value: str,
    *,
    now: datetime | None = None,
    fmt: str = DEFAULT_TIMESTAMP_FORMAT,
) -> str:
    """Render an ISO-8601 timestamp in UTC, or *now* when *value* is empty."""
    if _present(value):
        moment = parse_iso_timestamp(value)
    else:
        moment = now or datetime.now(UTC)
    return moment.astimezone(UTC).strftime(fmt)


def _fact(title: str, value: str) -> dict[str, str]:
    return {"title": title, "value": value}


def _header(logo_url: str, title: str, color: str, subtitle: str) -> dict[str, Any]:
    items: list[dict[str, Any]] = []
    if _present(logo_url):
        items.append({"type": "Image", "url": logo_url, "size": "Small", "style": "Person"})
    items.append(
        {
            "type": "TextBlock",
            "text": title,
            "size": "Large",
            "weight": "Bolder",
            "color": color,
        }
    )
    items.append(
        {
            "type": "TextBlock",
            "text": subtitle,
            "size": "Medium",
            "weight": "Bolder",
            "spacing": "Small",
        }
    )
    return {"type": "Container", "items": items}


def _open_url(url: str) -> dict[str, str]:
    return {"type": "Action.OpenUrl", "title": "View Site", "url": url}


# ── Builders ────────────────────────────────────────────────────


def build_down_card(
    data: AlertInput,
    *,
    now: datetime | None = None,
    card_version: str = DEFAULT_CARD_VERSION,
    timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT,
) -> Card:
    """Build the "Site Down Alert" card.

    Facts are Service, Environment and Detected, followed by Error Code,
    Host and Region when supplied. The action set links to the site and
    reveals the error message (and code) in a nested "Technical Details" card.
    """
    detected = format_timestamp(data.detected_time, now=now, fmt=timestamp_format)
    facts = [
        _fact("Service", data.service_name),
        _fact("Environment", data.environment.value),
        _fact("Detected", detected),
    ]
    if _present(data.error_code):
        facts.append(_fact("Error Code", data.error_code))
    if _present(data.host):
        facts.append(_fact("Host", data.host))
    if _present(data.region):
        facts.append(_fact("Region", data.region))

    details: list[dict[str, Any]] = [
        {
            "type": "TextBlock",
            "text": f"**Error Message:** {data.error_message}",
            "wrap": True,
        }
    ]
    if _present(data.error_code):
        details.append(
            {
                "type": "TextBlock",
                "text": f"**Error Code:** {data.error_code}",
                "wrap": True,
                "spacing": "Small",
            }
        )

    return {
        "type": "AdaptiveCard",
        "version": card_version,
        "body": [
            _header(
                data.logo_url,
                SITE_DOWN_TITLE,
                "Attention",
                f"{data.service_name} is currently down",
            ),
            {"type": "FactSet", "facts": facts, "spacing": "Medium"},
            {
                "type": "ActionSet",
                "actions": [
                    _open_url(data.site_url),
                    {
                        "type": "Action.ShowCard",
                        "title": "Technical Details",
                        "card": {
                            "type": "AdaptiveCard",
                            "version": card_version,
                            "body": details,
                        },
                    },
                ],
            },
        ],
    }


def build_recovered_card(
    data: RecoveryInput,
    *,
    now: datetime | None = None,
    card_version: str = DEFAULT_CARD_VERSION,
    timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT,
) -> Card:
    """Build the "Site Recovered" card (no technical details section)."""
    recovered = format_timestamp(data.recovery_time, now=now, fmt=timestamp_format)
    facts = [
        _fact("Service", data.service_name),
        _fact("Environment", data.environment.value),
        _fact("Downtime", data.downtime_duration),
        _fact("Recovered", recovered),
    ]
    if _present(data.average_response_time):
        facts.append(_fact("Response Time", data.average_response_time))

    return {
        "type": "AdaptiveCard",
        "version": card_version,
        "body": [
            _header(
                data.logo_url,
                SITE_RECOVERED_TITLE,
                "Good",
                f"{data.service_name} is back online",
            ),
            {"type": "FactSet", "facts": facts, "spacing": "Medium"},
            {"type": "ActionSet", "actions": [_open_url(data.site_url)]},
        ],
    }


def parse_custom_card(
    value: str | dict[str, Any],
    *,
    card_version: str = DEFAULT_CARD_VERSION,
) -> Card:
    """Decode and sanity-check a user supplied Adaptive Card.

    Only the top-level shape is checked: the document must be a JSON object
    with ``type == "AdaptiveCard"``. A missing ``version`` is filled in on the
    returned object; the body is passed through untouched.

    Raises:
        ParseError: *value* is a string that is not valid JSON.
        ValidationError: the decoded document is not an Adaptive Card object.
    """
    if isinstance(value, str):
        try:
            card = json.loads(value)
        except ValueError as exc:
            raise ParseError(f"Invalid Adaptive Card JSON: {exc}") from exc
    else:
        card = value

    if not isinstance(card, dict):
        raise ValidationError("Adaptive Card JSON must be an object")

    if card.get("type") != "AdaptiveCard":
        raise ValidationError('Adaptive Card must have type "AdaptiveCard"')

    if not card.get("version"):
        card["version"] = card_version

    return card


def wrap_card(card: Card) -> dict[str, Any]:
    """Embed *card* as the single attachment of a Teams message."""
    return {
        "type": "message",
        "attachments": [
            {
                "contentType": ADAPTIVE_CARD_CONTENT_TYPE,
                "content": card,
            }
        ],
    }
