"""Handlers for the shipped collection protocols.

A protocol handler renders a metric for persistence: the generic metric keys
plus the protocol section, with defaults filled in as ``^_^param^_^``
placeholders that the collector substitutes from the monitor's parameters.
"""

from __future__ import annotations

from typing import Any, ClassVar

from monitor_templates.errors import InvalidTemplateError
from monitor_templates.handlers.registry import register_protocol_handler
from monitor_templates.models import Metric

_HOST = "^_^host^_^"
_PORT = "^_^port^_^"
_TIMEOUT = "^_^timeout^_^"
_USERNAME = "^_^username^_^"
_PASSWORD = "^_^password^_^"


class ProtocolHandler:
    """Base handler: metric keys plus the protocol section over ``defaults``."""

    tag: str = ""
    defaults: ClassVar[dict[str, Any]] = {}

    def render(self, metric: Metric) -> dict[str, Any]:
        doc = metric.model_dump(by_alias=True, exclude_none=True)
        doc["protocol"] = self.tag
        section = dict(self.defaults)
        section.update(metric.protocol_config)
        doc[self.tag] = self.render_section(section)
        return doc

    def render_section(self, section: dict[str, Any]) -> dict[str, Any]:
        return section


class HttpProtocolHandler(ProtocolHandler):
    tag = "http"
    defaults = {
        "host": _HOST,
        "port": _PORT,
        "timeout": _TIMEOUT,
        "url": "/",
        "method": "GET",
        "ssl": False,
        "parseType": "default",
    }

    def render_section(self, section: dict[str, Any]) -> dict[str, Any]:
        section["method"] = str(section["method"]).upper()
        return section


class JdbcProtocolHandler(ProtocolHandler):
    tag = "jdbc"
    defaults = {
        "host": _HOST,
        "port": _PORT,
        "timeout": _TIMEOUT,
        "username": _USERNAME,
        "password": _PASSWORD,
        "database": "^_^database^_^",
        "url": "^_^url^_^",
        "queryType": "oneRow",
    }
    query_types = ("oneRow", "multiRow", "columns", "runScript")

    def render_section(self, section: dict[str, Any]) -> dict[str, Any]:
        if section["queryType"] not in self.query_types:
            raise InvalidTemplateError(f"Unsupported jdbc queryType {section['queryType']!r}")
        return section


class SshProtocolHandler(ProtocolHandler):
    tag = "ssh"
    defaults = {
        "host": _HOST,
        "port": _PORT,
        "timeout": _TIMEOUT,
        "username": _USERNAME,
        "password": _PASSWORD,
        "privateKey": "^_^privateKey^_^",
        "parseType": "oneRow",
    }


class RedisProtocolHandler(ProtocolHandler):
    tag = "redis"
    defaults = {"host": _HOST, "port": _PORT, "timeout": _TIMEOUT, "password": _PASSWORD}


class JmxProtocolHandler(ProtocolHandler):
    tag = "jmx"
    defaults = {"host": _HOST, "port": _PORT, "username": _USERNAME, "password": _PASSWORD}


class SnmpProtocolHandler(ProtocolHandler):
    tag = "snmp"
    defaults = {
        "host": _HOST,
        "port": _PORT,
        "timeout": _TIMEOUT,
        "community": "^_^community^_^",
        "version": "^_^version^_^",
        "operation": "get",
    }


class TelnetProtocolHandler(ProtocolHandler):
    tag = "telnet"
    defaults = {"host": _HOST, "port": _PORT, "timeout": _TIMEOUT}


class IcmpProtocolHandler(ProtocolHandler):
    tag = "icmp"
    defaults = {"host": _HOST, "timeout": _TIMEOUT}


class FtpProtocolHandler(ProtocolHandler):
    tag = "ftp"
    defaults = {
        "host": _HOST,
        "port": _PORT,
        "timeout": _TIMEOUT,
        "username": _USERNAME,
        "password": _PASSWORD,
        "direction": "/",
    }


class PrometheusProtocolHandler(ProtocolHandler):
    tag = "prometheus"
    defaults = {"host": _HOST, "port": _PORT, "timeout": _TIMEOUT, "path": "/metrics"}


class PushProtocolHandler(ProtocolHandler):
    """Pushed metrics carry no connection settings."""

    tag = "push"


for _handler in (
    HttpProtocolHandler(),
    JdbcProtocolHandler(),
    SshProtocolHandler(),
    RedisProtocolHandler(),
    JmxProtocolHandler(),
    SnmpProtocolHandler(),
    TelnetProtocolHandler(),
    IcmpProtocolHandler(),
    FtpProtocolHandler(),
    PrometheusProtocolHandler(),
    PushProtocolHandler(),
):
    register_protocol_handler(_handler)
