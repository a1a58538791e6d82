"""Tests for the parameter and protocol handlers."""

from __future__ import annotations

from typing import Any

import pytest

from monitor_templates.errors import InvalidTemplateError, UnknownHandlerError
from monitor_templates.handlers import (
    HandlerRegistry,
    default_handler_registry,
    register_param_handler,
)
from monitor_templates.handlers.params import TextParamHandler
from monitor_templates.models import Metric, MetricField, ParamDefinition, ParamOption


@pytest.fixture()
def handlers() -> HandlerRegistry:
    return default_handler_registry()


class TestHandlerRegistry:
    def test_shipped_param_types(self, handlers: HandlerRegistry) -> None:
        for tag in ("text", "password", "number", "host", "boolean", "radio", "checkbox", "key-value"):
            assert tag in handlers.param_types

    def test_shipped_protocol_types(self, handlers: HandlerRegistry) -> None:
        for tag in ("http", "jdbc", "ssh", "redis", "snmp", "icmp", "prometheus"):
            assert tag in handlers.protocol_types

    def test_unknown_param_type(self, handlers: HandlerRegistry) -> None:
        with pytest.raises(UnknownHandlerError) as exc_info:
            handlers.resolve_param("slider")
        assert exc_info.value.kind == "parameter"
        assert exc_info.value.tag == "slider"

    def test_unknown_protocol_type(self, handlers: HandlerRegistry) -> None:
        with pytest.raises(UnknownHandlerError):
            handlers.resolve_protocol("carrier-pigeon")

    def test_duplicate_registration_rejected(self) -> None:
        with pytest.raises(ValueError, match="already registered"):
            register_param_handler(TextParamHandler())

    def test_custom_handler_is_pluggable(self) -> None:
        class SliderHandler:
            tag = "slider"

            def render(self, definition: Any) -> dict[str, Any]:
                return {"type": "slider", "step": 5}

        registry = HandlerRegistry({"slider": SliderHandler()}, {})
        assert registry.resolve_param("slider").render(None) == {"type": "slider", "step": 5}
        with pytest.raises(UnknownHandlerError):
            registry.resolve_param("text")


class TestParamHandlers:
    def test_number_keeps_range(self, handlers: HandlerRegistry) -> None:
        p = ParamDefinition(field="port", type="number", range="[0,65535]", limit=3)
        assert handlers.resolve_param("number").render(p) == {"type": "number", "range": "[0,65535]"}

    def test_text_keeps_limit_and_placeholder(self, handlers: HandlerRegistry) -> None:
        p = ParamDefinition(field="user", type="text", limit=20, placeholder="root")
        assert handlers.resolve_param("text").render(p) == {
            "type": "text",
            "placeholder": "root",
            "limit": 20,
        }

    def test_radio_options(self, handlers: HandlerRegistry) -> None:
        p = ParamDefinition(
            field="mode", type="radio", options=[ParamOption(label="Fast", value="fast")]
        )
        fragment = handlers.resolve_param("radio").render(p)
        assert fragment["options"] == [{"label": "Fast", "value": "fast"}]

    def test_checkbox_without_options(self, handlers: HandlerRegistry) -> None:
        p = ParamDefinition(field="flags", type="checkbox")
        assert handlers.resolve_param("checkbox").render(p) == {"type": "checkbox", "options": []}

    def test_key_value_aliases(self, handlers: HandlerRegistry) -> None:
        p = ParamDefinition(field="headers", type="key-value", key_alias="Header", value_alias="Value")
        fragment = handlers.resolve_param("key-value").render(p)
        assert fragment == {"type": "key-value", "keyAlias": "Header", "valueAlias": "Value"}

    def test_hide_and_extras(self, handlers: HandlerRegistry) -> None:
        p = ParamDefinition.model_validate(
            {"field": "t", "type": "boolean", "hide": True, "tooltip": "advanced"}
        )
        fragment = handlers.resolve_param("boolean").render(p)
        assert fragment == {"type": "boolean", "hide": True, "tooltip": "advanced"}

    def test_shared_scalars_not_rendered(self, handlers: HandlerRegistry) -> None:
        p = ParamDefinition(field="host", type="host", required=True, name={"en-US": "Host"})
        fragment = handlers.resolve_param("host").render(p)
        assert "field" not in fragment
        assert "required" not in fragment


class TestProtocolHandlers:
    def test_http_defaults_and_method(self, handlers: HandlerRegistry) -> None:
        metric = Metric.model_validate(
            {
                "name": "summary",
                "protocol": "http",
                "fields": [{"field": "responseTime", "type": 0}],
                "http": {"url": "/health", "method": "post"},
            }
        )
        doc = handlers.resolve_protocol("http").render(metric)
        assert doc["name"] == "summary"
        assert doc["fields"] == [{"field": "responseTime", "type": 0}]
        assert doc["http"]["url"] == "/health"
        assert doc["http"]["method"] == "POST"
        assert doc["http"]["host"] == "^_^host^_^"
        assert doc["http"]["ssl"] is False

    def test_icmp_has_no_port(self, handlers: HandlerRegistry) -> None:
        doc = handlers.resolve_protocol("icmp").render(Metric(name="ping", protocol="icmp"))
        assert doc["icmp"] == {"host": "^_^host^_^", "timeout": "^_^timeout^_^"}

    def test_jdbc_rejects_unknown_query_type(self, handlers: HandlerRegistry) -> None:
        metric = Metric.model_validate(
            {"name": "basic", "protocol": "jdbc", "jdbc": {"queryType": "everything"}}
        )
        with pytest.raises(InvalidTemplateError):
            handlers.resolve_protocol("jdbc").render(metric)

    def test_push_has_empty_section(self, handlers: HandlerRegistry) -> None:
        metric = Metric(name="pushed", protocol="push", fields=[MetricField(field="value")])
        doc = handlers.resolve_protocol("push").render(metric)
        assert doc["push"] == {}
        assert doc["protocol"] == "push"
