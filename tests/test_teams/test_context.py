"""Tests for StaticExecutionContext and the node description."""

from __future__ import annotations

import pytest

from src.teams.context import StaticExecutionContext
from src.teams.description import NODE_DESCRIPTION, get_parameter, parameters_for
from src.teams.exceptions import ConfigError
from src.teams.types import Template


# ── Parameter resolution ────────────────────────────────────────


class TestParameterResolution:
    def test_item_overrides_node_parameter(self) -> None:
        ctx = StaticExecutionContext(
            items=[{"serviceName": "item"}, {}],
            parameters={"serviceName": "node"},
        )
        assert ctx.get_node_parameter("serviceName", 0) == "item"
        assert ctx.get_node_parameter("serviceName", 1) == "node"

    def test_explicit_default_before_declared_default(self) -> None:
        ctx = StaticExecutionContext(items=[{}])
        assert ctx.get_node_parameter("environment", 0, "Dev") == "Dev"

    def test_declared_default(self) -> None:
        ctx = StaticExecutionContext(items=[{}])
        assert ctx.get_node_parameter("template", 0) == "siteDown"
        assert ctx.get_node_parameter("environment", 0) == "Prod"
        assert ctx.get_node_parameter("webhookUrl", 0) == ""

    def test_unknown_parameter(self) -> None:
        ctx = StaticExecutionContext(items=[{}])
        with pytest.raises(ConfigError, match="Unknown parameter: nope"):
            ctx.get_node_parameter("nope", 0)

    def test_index_out_of_range(self) -> None:
        ctx = StaticExecutionContext(items=[{}])
        with pytest.raises(IndexError):
            ctx.get_node_parameter("template", 1)

    def test_input_data_is_a_copy(self) -> None:
        ctx = StaticExecutionContext(items=[{"a": 1}])
        data = ctx.get_input_data()
        data.append({"b": 2})
        assert len(ctx.get_input_data()) == 1

    def test_continue_on_fail_flag(self) -> None:
        assert StaticExecutionContext(items=[]).continue_on_fail() is False
        assert StaticExecutionContext(items=[], continue_on_fail=True).continue_on_fail() is True


# ── Node description ────────────────────────────────────────────


class TestDescription:
    def test_metadata(self) -> None:
        assert NODE_DESCRIPTION.display_name == "Microsoft Teams Webhook"
        assert NODE_DESCRIPTION.version == 1

    def test_webhook_url_is_password(self) -> None:
        param = get_parameter("webhookUrl")
        assert param is not None
        assert param.password is True
        assert param.required is True

    def test_template_options(self) -> None:
        param = get_parameter("template")
        assert param is not None
        assert param.option_values == ["siteDown", "siteRecovered", "custom"]

    def test_environment_options(self) -> None:
        param = get_parameter("environment")
        assert param is not None
        assert param.option_values == ["Prod", "Staging", "Dev"]

    def test_get_unknown_parameter(self) -> None:
        assert get_parameter("nope") is None

    def test_site_down_parameters(self) -> None:
        names = [p.name for p in parameters_for(Template.SITE_DOWN)]
        assert names == [
            "serviceName",
            "siteUrl",
            "environment",
            "errorMessage",
            "errorCode",
            "host",
            "region",
            "detectedTime",
            "logoUrl",
        ]

    def test_site_recovered_parameters(self) -> None:
        names = [p.name for p in parameters_for(Template.SITE_RECOVERED)]
        assert names == [
            "serviceName",
            "siteUrl",
            "environment",
            "downtimeDuration",
            "recoveryTime",
            "averageResponseTime",
            "logoUrl",
        ]

    def test_custom_parameters(self) -> None:
        params = parameters_for(Template.CUSTOM)
        assert [p.name for p in params] == ["customCardJson"]
        assert params[0].required is True

    def test_required_flags(self) -> None:
        required = {p.name for p in parameters_for(Template.SITE_DOWN) if p.required}
        assert required == {"serviceName", "siteUrl", "environment", "errorMessage"}
