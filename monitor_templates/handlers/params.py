"""Handlers for the shipped parameter types.

Each handler emits the ``type`` tag and the UI hints that belong to its type.
The writer attaches the shared scalars (``field``, ``name``, ``required``,
``defaultValue``) afterwards.
"""

from __future__ import annotations

from typing import Any

from monitor_templates.handlers.registry import register_param_handler
from monitor_templates.models import ParamDefinition

_SHARED_KEYS = {"field", "type", "name", "required", "defaultValue"}


class ParamHandler:
    """Base handler: copies the hints listed in ``hints`` when they are set."""

    tag: str = ""
    hints: tuple[str, ...] = ()

    def render(self, param: ParamDefinition) -> dict[str, Any]:
        doc = param.model_dump(by_alias=True, exclude_none=True)
        fragment: dict[str, Any] = {"type": self.tag}
        for key in self.hints:
            if key in doc:
                fragment[key] = doc[key]
        if param.hide:
            fragment["hide"] = True
        # Keys the model does not know about are kept as authored.
        for key, value in (param.model_extra or {}).items():
            if key not in _SHARED_KEYS and value is not None:
                fragment.setdefault(key, value)
        return fragment


class TextParamHandler(ParamHandler):
    tag = "text"
    hints = ("placeholder", "limit")


class PasswordParamHandler(ParamHandler):
    tag = "password"
    hints = ("placeholder", "limit")


class TextareaParamHandler(ParamHandler):
    tag = "textarea"
    hints = ("placeholder", "limit")


class NumberParamHandler(ParamHandler):
    tag = "number"
    hints = ("placeholder", "range")


class HostParamHandler(ParamHandler):
    tag = "host"
    hints = ("placeholder",)


class BooleanParamHandler(ParamHandler):
    tag = "boolean"


class ArrayParamHandler(ParamHandler):
    tag = "array"
    hints = ("placeholder",)


class _ChoiceParamHandler(ParamHandler):
    """Radio and checkbox parameters always carry an option list."""

    hints = ("options",)

    def render(self, param: ParamDefinition) -> dict[str, Any]:
        fragment = super().render(param)
        fragment.setdefault("options", [])
        return fragment


class RadioParamHandler(_ChoiceParamHandler):
    tag = "radio"


class CheckboxParamHandler(_ChoiceParamHandler):
    tag = "checkbox"


class KeyValueParamHandler(ParamHandler):
    tag = "key-value"
    hints = ("keyAlias", "valueAlias")


class MetricsFieldParamHandler(ParamHandler):
    tag = "metrics-field"
    hints = ("keyAlias", "valueAlias")


for _handler in (
    TextParamHandler(),
    PasswordParamHandler(),
    TextareaParamHandler(),
    NumberParamHandler(),
    HostParamHandler(),
    BooleanParamHandler(),
    ArrayParamHandler(),
    RadioParamHandler(),
    CheckboxParamHandler(),
    KeyValueParamHandler(),
    MetricsFieldParamHandler(),
):
    register_param_handler(_handler)
