"""Microsoft Teams Incoming Webhook node — Adaptive Card templates and delivery."""

from src.teams.cards import (
    build_down_card,
    build_recovered_card,
    format_timestamp,
    parse_custom_card,
    wrap_card,
)
from src.teams.context import ExecutionContext, StaticExecutionContext
from src.teams.description import NODE_DESCRIPTION, NodeParameter, get_parameter, parameters_for
from src.teams.exceptions import (
    ConfigError,
    ParseError,
    TeamsWebhookError,
    TransportError,
    ValidationError,
)
from src.teams.node import TeamsWebhookNode
from src.teams.transport import WebhookTransport, redact_url
from src.teams.types import AlertInput, Environment, NodeOutput, RecoveryInput, Template

__all__ = [
    "AlertInput",
    "ConfigError",
    "Environment",
    "ExecutionContext",
    "NODE_DESCRIPTION",
    "NodeOutput",
    "NodeParameter",
    "ParseError",
    "RecoveryInput",
    "StaticExecutionContext",
    "TeamsWebhookError",
    "TeamsWebhookNode",
    "Template",
    "TransportError",
    "ValidationError",
    "WebhookTransport",
    "build_down_card",
    "build_recovered_card",
    "format_timestamp",
    "get_parameter",
    "parameters_for",
    "parse_custom_card",
    "redact_url",
    "wrap_card",
]
