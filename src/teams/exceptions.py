"""Exception hierarchy for the Teams webhook node."""

from __future__ import annotations


class TeamsWebhookError(Exception):
    """Base exception for all Teams webhook node errors."""


class ConfigError(TeamsWebhookError):
    """Missing or invalid node parameter (webhook URL, template, required field)."""


class ParseError(TeamsWebhookError):
    """Custom Adaptive Card JSON could not be decoded."""


class ValidationError(TeamsWebhookError):
    """Custom Adaptive Card decoded but is not a usable card document."""


class TransportError(TeamsWebhookError):
    """The webhook POST failed or the remote answered with an error status."""
