"""Pluggable handlers that render typed definitions for persistence."""

from monitor_templates.handlers import params, protocols  # noqa: F401  (registers handlers)
from monitor_templates.handlers.registry import (
    Handler,
    HandlerRegistry,
    default_handler_registry,
    register_param_handler,
    register_protocol_handler,
)

__all__ = [
    "Handler",
    "HandlerRegistry",
    "default_handler_registry",
    "register_param_handler",
    "register_protocol_handler",
]
