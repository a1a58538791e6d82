"""In-memory template registry keyed by normalized app identifier.

Four stores are kept per app: the base definition, the base parameter list,
the composite custom template and the derived metric-name index. Values are
replaced whole under their key and copied on every read, so readers never
lock and never observe a half-applied edit. Writers serialize per key via
:meth:`TemplateRegistry.key_lock`.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from monitor_templates.errors import AppNotFoundError
from monitor_templates.models import AppDefinition, CustomTemplate, ParamDefinition

logger = logging.getLogger(__name__)


def normalize_app(app: str) -> str:
    return app.strip().lower()


class TemplateRegistry:
    """Owns every app definition, parameter list and custom template."""

    def __init__(self) -> None:
        self._app_defines: dict[str, AppDefinition] = {}
        self._param_defines: dict[str, tuple[ParamDefinition, ...]] = {}
        self._custom: dict[str, CustomTemplate] = {}
        self._metric_names: dict[str, tuple[str, ...]] = {}
        self._key_locks: dict[str, threading.Lock] = {}
        self._guard = threading.Lock()
        self._ready = False

    # ── Lifecycle ──────────────────────────────────────────────────────

    @property
    def ready(self) -> bool:
        return self._ready

    def mark_ready(self) -> None:
        self._ready = True
        logger.info("Template registry ready with %d apps", len(self._app_defines))

    @contextmanager
    def key_lock(self, app: str) -> Iterator[str]:
        """Hold the writer lock of *app*; yields the normalized key."""
        key = normalize_app(app)
        with self._guard:
            lock = self._key_locks.setdefault(key, threading.Lock())
        with lock:
            yield key

    # ── Read ───────────────────────────────────────────────────────────

    def contains(self, app: str) -> bool:
        key = normalize_app(app)
        return key in self._app_defines or key in self._custom

    def apps(self) -> list[str]:
        """Registered app keys in sorted order."""
        return sorted(self._app_defines)

    def get_param_defines(self, app: str) -> list[ParamDefinition]:
        params = self._param_defines.get(normalize_app(app), ())
        return [p.model_copy(deep=True) for p in params]

    def get_app_define(self, app: str) -> AppDefinition:
        definition = self._app_defines.get(normalize_app(app))
        if definition is None:
            raise AppNotFoundError(app)
        return definition.model_copy(deep=True)

    def get_metric_names(self, app: str | None = None) -> list[str]:
        """Metric names of *app*, or of every registered app when *app* is empty."""
        if app:
            names = self._metric_names.get(normalize_app(app))
            if names is None:
                raise AppNotFoundError(app)
            return list(names)
        # Snapshot the index before iterating; writers may replace entries.
        index = dict(self._metric_names)
        result: list[str] = []
        for key in sorted(index):
            result.extend(index[key])
        return result

    def get_custom(self, app: str) -> CustomTemplate:
        template = self._custom.get(normalize_app(app))
        if template is None:
            raise AppNotFoundError(app)
        return template.model_copy(deep=True)

    def all_custom(self) -> list[CustomTemplate]:
        custom = dict(self._custom)
        return [custom[key].model_copy(deep=True) for key in sorted(custom)]

    def app_defines(self) -> list[AppDefinition]:
        """Copies of every base definition in sorted key order."""
        defines = dict(self._app_defines)
        return [defines[key].model_copy(deep=True) for key in sorted(defines)]

    def param_defines(self) -> dict[str, list[ParamDefinition]]:
        params = dict(self._param_defines)
        return {key: [p.model_copy(deep=True) for p in params[key]] for key in sorted(params)}

    # ── Write (whole-value replacement) ────────────────────────────────

    def upsert_custom(self, template: CustomTemplate) -> None:
        self._custom[normalize_app(template.app)] = template.model_copy(deep=True)

    def set_app_define(self, app: str, definition: AppDefinition) -> None:
        key = normalize_app(app)
        stored = definition.model_copy(deep=True)
        self._app_defines[key] = stored
        self._metric_names[key] = tuple(stored.metric_names)

    def set_param_defines(self, app: str, params: list[ParamDefinition]) -> None:
        self._param_defines[normalize_app(app)] = tuple(p.model_copy(deep=True) for p in params)
