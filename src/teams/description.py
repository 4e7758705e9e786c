"""Node description — display metadata and parameter declarations.

The host runtime renders these as the node's settings form; the node itself
uses them for parameter defaults and required-field checks.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

from src.teams.types import Environment, Template


class ParameterType(StrEnum):
    """Input widget type of a node parameter."""

    STRING = "string"
    OPTIONS = "options"
    DATE_TIME = "dateTime"
    JSON = "json"


class ParameterOption(BaseModel):
    """One selectable value of an ``options`` parameter."""

    name: str
    value: str


class NodeParameter(BaseModel):
    """Declaration of a single node parameter."""

    name: str
    display_name: str
    type: ParameterType = ParameterType.STRING
    default: Any = ""
    required: bool = False
    password: bool = False
    description: str = ""
    options: list[ParameterOption] = Field(default_factory=list)
    # Templates this parameter applies to; empty means all of them.
    show_for: list[Template] = Field(default_factory=list)

    def applies_to(self, template: Template) -> bool:
        return not self.show_for or template in self.show_for

    @property
    def option_values(self) -> list[str]:
        return [opt.value for opt in self.options]


class NodeDescription(BaseModel):
    """Top-level node metadata shown by the host runtime."""

    display_name: str
    name: str
    version: int = 1
    subtitle: str = ""
    description: str = ""
    parameters: list[NodeParameter] = Field(default_factory=list)


_ALERTS = [Template.SITE_DOWN, Template.SITE_RECOVERED]

PARAMETERS: list[NodeParameter] = [
    NodeParameter(
        name="webhookUrl",
        display_name="Webhook URL",
        required=True,
        password=True,
        description="Microsoft Teams Incoming Webhook URL",
    ),
    NodeParameter(
        name="template",
        display_name="Message Template",
        type=ParameterType.OPTIONS,
        default=Template.SITE_DOWN.value,
        required=True,
        options=[
            ParameterOption(name="Site Down Alert", value=Template.SITE_DOWN.value),
            ParameterOption(name="Site Recovered", value=Template.SITE_RECOVERED.value),
            ParameterOption(name="Custom Message", value=Template.CUSTOM.value),
        ],
        description="Select the Adaptive Card template to use",
    ),
    NodeParameter(
        name="serviceName",
        display_name="Service Name",
        required=True,
        show_for=_ALERTS,
        description="Name of the service or application",
    ),
    NodeParameter(
        name="siteUrl",
        display_name="Site URL",
        required=True,
        show_for=_ALERTS,
        description="URL of the affected site",
    ),
    NodeParameter(
        name="environment",
        display_name="Environment",
        type=ParameterType.OPTIONS,
        default=Environment.PROD.value,
        required=True,
        options=[
            ParameterOption(name="Production", value=Environment.PROD.value),
            ParameterOption(name="Staging", value=Environment.STAGING.value),
            ParameterOption(name="Development", value=Environment.DEV.value),
        ],
        show_for=_ALERTS,
        description="Environment where the issue occurred",
    ),
    NodeParameter(
        name="errorMessage",
        display_name="Error Message",
        required=True,
        show_for=[Template.SITE_DOWN],
        description="Error message or description",
    ),
    NodeParameter(
        name="errorCode",
        display_name="Error Code",
        show_for=[Template.SITE_DOWN],
        description="HTTP error code (e.g., 500, 503)",
    ),
    NodeParameter(
        name="host",
        display_name="Host",
        show_for=[Template.SITE_DOWN],
        description="Host server name or IP",
    ),
    NodeParameter(
        name="region",
        display_name="Region",
        show_for=[Template.SITE_DOWN],
        description="Geographic region (e.g., US-East, EU-West)",
    ),
    NodeParameter(
        name="detectedTime",
        display_name="Detected Time",
        type=ParameterType.DATE_TIME,
        show_for=[Template.SITE_DOWN],
        description="Time when the issue was detected (ISO 8601 format)",
    ),
    NodeParameter(
        name="downtimeDuration",
        display_name="Downtime Duration",
        required=True,
        show_for=[Template.SITE_RECOVERED],
        description='Duration of downtime (e.g., "15 minutes", "2h 30m")',
    ),
    NodeParameter(
        name="recoveryTime",
        display_name="Recovery Time",
        type=ParameterType.DATE_TIME,
        show_for=[Template.SITE_RECOVERED],
        description="Time when service was recovered (ISO 8601 format)",
    ),
    NodeParameter(
        name="averageResponseTime",
        display_name="Average Response Time",
        show_for=[Template.SITE_RECOVERED],
        description='Average response time after recovery (e.g., "120ms")',
    ),
    NodeParameter(
        name="logoUrl",
        display_name="Logo URL",
        show_for=_ALERTS,
        description="URL to logo image (optional)",
    ),
    NodeParameter(
        name="customCardJson",
        display_name="Adaptive Card JSON",
        type=ParameterType.JSON,
        required=True,
        show_for=[Template.CUSTOM],
        description="Raw Adaptive Card JSON (must be valid JSON)",
    ),
]

NODE_DESCRIPTION = NodeDescription(
    display_name="Microsoft Teams Webhook",
    name="microsoftTeamsWebhook",
    subtitle='={{$parameter["template"]}}',
    description="Send Adaptive Cards to Microsoft Teams via Incoming Webhook",
    parameters=PARAMETERS,
)

_BY_NAME: dict[str, NodeParameter] = {p.name: p for p in PARAMETERS}


def get_parameter(name: str) -> NodeParameter | None:
    """Return the declaration for *name*, or None if the node has no such parameter."""
    return _BY_NAME.get(name)


def parameters_for(template: Template) -> list[NodeParameter]:
    """Template-specific parameters, in declaration order.

    ``webhookUrl`` and ``template`` themselves are excluded.
    """
    return [
        p
        for p in PARAMETERS
        if p.show_for and p.applies_to(template)
    ]
