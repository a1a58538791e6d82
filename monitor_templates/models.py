"""Pydantic models for app definitions, parameter definitions and custom templates."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# Documents keep the camelCase spelling of the YAML definitions; attributes are
# snake_case. Unknown keys (protocol sections, UI hints) are preserved.
_DOCUMENT_CONFIG = ConfigDict(populate_by_name=True, extra="allow")


# ──────────────────────────── App Definitions ─────────────────────────────────


class MetricField(BaseModel):
    """A single collected field within a metric."""

    model_config = _DOCUMENT_CONFIG

    field: str
    type: int | None = None
    unit: str | None = None
    instance: bool | None = None
    label: bool | None = None


class Metric(BaseModel):
    """A group of fields collected together over one protocol.

    The protocol configuration lives under a key named after the protocol,
    e.g. ``http: {url: ..., method: GET}``, and is kept as an extra.
    """

    model_config = _DOCUMENT_CONFIG

    name: str
    priority: int = 0
    protocol: str = ""
    fields: list[MetricField] = Field(default_factory=list)
    alias_fields: list[str] | None = Field(default=None, alias="aliasFields")
    calculates: list[str] | None = None
    units: list[str] | None = None

    @property
    def field_names(self) -> list[str]:
        return [f.field for f in self.fields]

    @property
    def protocol_config(self) -> dict[str, Any]:
        extra = self.model_extra or {}
        section = extra.get(self.protocol)
        return dict(section) if isinstance(section, dict) else {}


class AppDefinition(BaseModel):
    """The declarative schema of one monitored-resource type."""

    model_config = _DOCUMENT_CONFIG

    app: str
    category: str = ""
    name: dict[str, str] = Field(default_factory=dict, description="locale → display name")
    help: dict[str, str] | None = None
    metrics: list[Metric] = Field(default_factory=list)

    @property
    def metric_names(self) -> list[str]:
        return [m.name for m in self.metrics]


# ──────────────────────────── Parameter Definitions ───────────────────────────


class ParamOption(BaseModel):
    """A selectable choice of a radio or checkbox parameter."""

    label: str
    value: str


class ParamDefinition(BaseModel):
    """A connection/config field the user supplies when creating a monitor."""

    model_config = _DOCUMENT_CONFIG

    field: str
    type: str
    name: dict[str, str] = Field(default_factory=dict)
    required: bool = False
    default_value: Any = Field(default=None, alias="defaultValue")

    # Type-specific hints, rendered by the matching parameter handler.
    placeholder: str | None = None
    limit: int | None = None
    range: str | None = None
    options: list[ParamOption] | None = None
    key_alias: str | None = Field(default=None, alias="keyAlias")
    value_alias: str | None = Field(default=None, alias="valueAlias")
    hide: bool | None = None


class ParamDefinitionSet(BaseModel):
    """A parameter document: the parameter list of one app."""

    model_config = _DOCUMENT_CONFIG

    app: str
    param: list[ParamDefinition] = Field(default_factory=list)


# ──────────────────────────── Custom Templates ────────────────────────────────


class CustomParams(BaseModel):
    """The parameter facet of a custom template."""

    model_config = ConfigDict(populate_by_name=True)

    app: str
    ch_name: str | None = Field(default=None, alias="chName")
    params: list[ParamDefinition] = Field(default_factory=list)


class CustomTemplate(BaseModel):
    """A user-editable overlay: identity plus optional parameter and schema facets."""

    model_config = ConfigDict(populate_by_name=True)

    app: str
    name: dict[str, str] = Field(default_factory=dict)
    category: str = ""
    params: CustomParams | None = None
    definition: AppDefinition | None = None

    @classmethod
    def from_definition(
        cls, definition: AppDefinition, params: list[ParamDefinition] | None = None
    ) -> CustomTemplate:
        """Build the composite view of a base app definition."""
        return cls(
            app=definition.app,
            name=dict(definition.name),
            category=definition.category,
            params=CustomParams(app=definition.app, params=params) if params is not None else None,
            definition=definition,
        )


# ──────────────────────────── Hierarchy ───────────────────────────────────────


class HierarchyNode(BaseModel):
    """A node of the app → metric → field navigation tree."""

    value: str
    label: str
    category: str | None = None
    is_leaf: bool = False
    children: list[HierarchyNode] = Field(default_factory=list)

    @property
    def depth(self) -> int:
        if not self.children:
            return 1
        return 1 + max(child.depth for child in self.children)
