"""Derived navigation tree and localized label resolution."""

from __future__ import annotations

from collections.abc import Mapping

from monitor_templates.models import HierarchyNode
from monitor_templates.registry import TemplateRegistry


def localize(names: Mapping[str, str] | None, locale: str, default: str = "") -> str:
    """Return the name for *locale*, else the one under the smallest locale key."""
    if not names:
        return default
    if locale in names:
        return names[locale]
    return names[min(names)]


def build_hierarchy(registry: TemplateRegistry, locale: str) -> list[HierarchyNode]:
    """Build the app → metric → field tree for every registered app."""
    nodes: list[HierarchyNode] = []
    for definition in registry.app_defines():
        metric_nodes = [
            HierarchyNode(
                value=metric.name,
                label=metric.name,
                children=[
                    HierarchyNode(value=f.field, label=f.field, is_leaf=True) for f in metric.fields
                ],
            )
            for metric in definition.metrics
        ]
        nodes.append(
            HierarchyNode(
                value=definition.app,
                label=localize(definition.name, locale, default=definition.app),
                category=definition.category,
                children=metric_nodes,
            )
        )
    return nodes


def i18n_resources(registry: TemplateRegistry, locale: str) -> dict[str, str]:
    """Flatten localized app and parameter names into UI message keys.

    Keys look like ``monitor.app.mysql`` and ``monitor.app.mysql.param.host``.
    Entries without any localized name are omitted.
    """
    resources: dict[str, str] = {}
    for definition in registry.app_defines():
        if definition.name:
            resources[f"monitor.app.{definition.app}"] = localize(definition.name, locale)
    for app, params in registry.param_defines().items():
        for param in params:
            if param.name:
                resources[f"monitor.app.{app}.param.{param.field}"] = localize(param.name, locale)
    return resources
