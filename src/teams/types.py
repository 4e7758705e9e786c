"""Domain types for the Teams webhook node — templates, card inputs, outputs."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field, field_validator

# Content type Teams expects on an Adaptive Card attachment.
ADAPTIVE_CARD_CONTENT_TYPE = "application/vnd.microsoft.card.adaptive"

DEFAULT_CARD_VERSION = "1.4"


class Template(StrEnum):
    """Card template selected by the ``template`` node parameter."""

    SITE_DOWN = "siteDown"
    SITE_RECOVERED = "siteRecovered"
    CUSTOM = "custom"


class Environment(StrEnum):
    """Deployment environment shown on alert cards."""

    PROD = "Prod"
    STAGING = "Staging"
    DEV = "Dev"


def parse_iso_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, treating naive values as UTC."""
    parsed = datetime.fromisoformat(value.strip())
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _check_timestamp(value: str) -> str:
    if value.strip():
        try:
            parse_iso_timestamp(value)
        except ValueError as exc:
            raise ValueError(f"not an ISO-8601 timestamp: {value!r}") from exc
    return value


class _CardInput(BaseModel):
    """Fields shared by the site down and site recovered templates."""

    model_config = {"populate_by_name": True, "frozen": True}

    service_name: str = Field(alias="serviceName")
    site_url: str = Field(alias="siteUrl")
    environment: Environment = Environment.PROD
    logo_url: str = Field(default="", alias="logoUrl")


class AlertInput(_CardInput):
    """Parameters for the "Site Down Alert" card."""

    error_message: str = Field(alias="errorMessage")
    error_code: str = Field(default="", alias="errorCode")
    host: str = ""
    region: str = ""
    detected_time: str = Field(default="", alias="detectedTime")

    @field_validator("detected_time")
    @classmethod
    def validate_detected_time(cls, value: str) -> str:
        return _check_timestamp(value)


class RecoveryInput(_CardInput):
    """Parameters for the "Site Recovered" card."""

    downtime_duration: str = Field(alias="downtimeDuration")
    recovery_time: str = Field(default="", alias="recoveryTime")
    average_response_time: str = Field(default="", alias="averageResponseTime")

    @field_validator("recovery_time")
    @classmethod
    def validate_recovery_time(cls, value: str) -> str:
        return _check_timestamp(value)


class NodeOutput(BaseModel):
    """One result record handed back to the host, paired with its input index."""

    data: dict[str, Any]
    paired_item: int

    @property
    def success(self) -> bool:
        return bool(self.data.get("success"))
