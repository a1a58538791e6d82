"""Registration tables and lookup for parameter-type and protocol-type handlers.

Handlers are registered explicitly at import time by the modules that define
them (``handlers.params`` and ``handlers.protocols``). Adding a monitor kind
means registering a new handler next to its base definition document; the
registry core never changes.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Protocol

from monitor_templates.errors import UnknownHandlerError


class Handler(Protocol):
    """Renders a typed definition into a loosely-typed document fragment."""

    tag: str

    def render(self, definition: Any) -> dict[str, Any]: ...


# ──────────────────────────── Registration Tables ─────────────────────────────

_PARAM_HANDLERS: dict[str, Handler] = {}
_PROTOCOL_HANDLERS: dict[str, Handler] = {}


def _register(table: dict[str, Handler], handler: Handler) -> Handler:
    if not handler.tag:
        raise ValueError(f"{type(handler).__name__} declares no tag")
    if handler.tag in table:
        raise ValueError(f"Handler for {handler.tag!r} is already registered")
    table[handler.tag] = handler
    return handler


def register_param_handler(handler: Handler) -> Handler:
    """Register a parameter-type handler under its declared tag."""
    return _register(_PARAM_HANDLERS, handler)


def register_protocol_handler(handler: Handler) -> Handler:
    """Register a protocol-type handler under its declared tag."""
    return _register(_PROTOCOL_HANDLERS, handler)


# ──────────────────────────── Lookup ──────────────────────────────────────────


class HandlerRegistry:
    """Immutable tag → handler index, one table per capability."""

    def __init__(
        self,
        param_handlers: Mapping[str, Handler],
        protocol_handlers: Mapping[str, Handler],
    ) -> None:
        self._params = MappingProxyType(dict(param_handlers))
        self._protocols = MappingProxyType(dict(protocol_handlers))

    @property
    def param_types(self) -> list[str]:
        return sorted(self._params)

    @property
    def protocol_types(self) -> list[str]:
        return sorted(self._protocols)

    def resolve_param(self, tag: str) -> Handler:
        try:
            return self._params[tag]
        except KeyError:
            raise UnknownHandlerError("parameter", tag) from None

    def resolve_protocol(self, tag: str) -> Handler:
        try:
            return self._protocols[tag]
        except KeyError:
            raise UnknownHandlerError("protocol", tag) from None


def default_handler_registry() -> HandlerRegistry:
    """Snapshot the shipped handlers into a read-only registry."""
    return HandlerRegistry(_PARAM_HANDLERS, _PROTOCOL_HANDLERS)
