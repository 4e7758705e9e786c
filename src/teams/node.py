"""Microsoft Teams webhook node — builds one Adaptive Card per input item and posts it."""

from __future__ import annotations

from datetime import datetime
from types import TracebackType
from typing import Any

import pydantic
import structlog

from src.core.config import TeamsConfig, get_settings
from src.teams.cards import (
    Card,
    build_down_card,
    build_recovered_card,
    parse_custom_card,
    wrap_card,
)
from src.teams.context import ExecutionContext
from src.teams.description import NODE_DESCRIPTION, ParameterType, parameters_for
from src.teams.exceptions import ConfigError
from src.teams.transport import WebhookTransport, redact_url
from src.teams.types import AlertInput, NodeOutput, RecoveryInput, Template

logger = structlog.get_logger(__name__)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _summarise(exc: pydantic.ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"])
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "; ".join(parts)


class TeamsWebhookNode:
    """Sends Adaptive Cards to a Teams channel through an Incoming Webhook.

    Items are processed strictly in order, one POST at a time. A failing item
    either aborts the run (the error propagates) or, when the host enables
    continue-on-fail, becomes a ``{"success": False, "error": ...}`` record
    and the run moves on to the next item.

    Usage::

        async with TeamsWebhookNode() as node:
            outputs = await node.execute(ctx)
    """

    description = NODE_DESCRIPTION

    def __init__(
        self,
        transport: WebhookTransport | None = None,
        config: TeamsConfig | None = None,
    ) -> None:
        self._transport = transport or WebhookTransport()
        self._config = config or get_settings().teams

    # ── Entry point ─────────────────────────────────────────────

    async def execute(self, ctx: ExecutionContext) -> list[NodeOutput]:
        items = ctx.get_input_data()
        outputs: list[NodeOutput] = []
        failed = 0

        for index in range(len(items)):
            try:
                outputs.append(await self._process_item(ctx, index))
            except Exception as exc:
                if not ctx.continue_on_fail():
                    logger.error("teams_run_aborted", index=index, error=str(exc))
                    raise
                failed += 1
                error = str(exc) or type(exc).__name__
                logger.warning("teams_item_failed", index=index, error=error)
                outputs.append(
                    NodeOutput(data={"success": False, "error": error}, paired_item=index)
                )

        logger.info("teams_run_completed", items=len(items), failed=failed)
        return outputs

    # ── Per-item pipeline ───────────────────────────────────────

    async def _process_item(self, ctx: ExecutionContext, index: int) -> NodeOutput:
        webhook_url = ctx.get_node_parameter("webhookUrl", index)
        if _is_blank(webhook_url):
            raise ConfigError("Webhook URL is required")

        raw_template = ctx.get_node_parameter("template", index)
        try:
            template = Template(raw_template)
        except ValueError:
            raise ConfigError(f"Unknown template: {raw_template}") from None

        card = self.build_card(template, self._collect(ctx, index, template))
        response = await self._transport.post_json(webhook_url, wrap_card(card))

        logger.info(
            "teams_card_sent",
            index=index,
            template=template.value,
            url=redact_url(webhook_url),
        )
        return NodeOutput(
            data={"success": True, "response": response, "card": card},
            paired_item=index,
        )

    def _collect(
        self, ctx: ExecutionContext, index: int, template: Template
    ) -> dict[str, Any]:
        """Fetch the template's parameters, enforcing required ones."""
        values: dict[str, Any] = {}
        for param in parameters_for(template):
            value = ctx.get_node_parameter(param.name, index, param.default)
            if param.required and _is_blank(value):
                raise ConfigError(f"Missing required parameter: {param.display_name}")
            if param.type != ParameterType.JSON:
                if value is None:
                    value = ""
                elif isinstance(value, datetime):
                    value = value.isoformat()
                elif not isinstance(value, str):
                    value = str(value)
            values[param.name] = value
        return values

    def build_card(self, template: Template, values: dict[str, Any]) -> Card:
        """Dispatch to the builder for *template*.

        Raises:
            ConfigError: *values* do not satisfy the template's input model.
            ParseError, ValidationError: the custom card JSON is unusable.
        """
        cfg = self._config
        if template is Template.CUSTOM:
            return parse_custom_card(values["customCardJson"], card_version=cfg.card_version)

        try:
            if template is Template.SITE_DOWN:
                return build_down_card(
                    AlertInput.model_validate(values),
                    card_version=cfg.card_version,
                    timestamp_format=cfg.timestamp_format,
                )
            return build_recovered_card(
                RecoveryInput.model_validate(values),
                card_version=cfg.card_version,
                timestamp_format=cfg.timestamp_format,
            )
        except pydantic.ValidationError as exc:
            raise ConfigError(f"Invalid {template.value} parameters: {_summarise(exc)}") from exc

    # ── Lifecycle ───────────────────────────────────────────────

    async def close(self) -> None:
        await self._transport.close()

    async def __aenter__(self) -> TeamsWebhookNode:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()
