"""Bootstrap the template registry and expose its read and write API."""

from __future__ import annotations

import logging
from pathlib import Path

from monitor_templates.config import Settings
from monitor_templates.custom import CustomDefinitionManager
from monitor_templates.handlers import HandlerRegistry, default_handler_registry
from monitor_templates.hierarchy import build_hierarchy, i18n_resources
from monitor_templates.loader import DocumentLoader, DocumentSource
from monitor_templates.models import (
    AppDefinition,
    CustomParams,
    CustomTemplate,
    HierarchyNode,
    ParamDefinition,
)
from monitor_templates.registry import TemplateRegistry
from monitor_templates.writer import DocumentWriter

logger = logging.getLogger(__name__)


class AppService:
    """Monitoring type management: what can be monitored and how it is configured."""

    def __init__(
        self,
        settings: Settings,
        registry: TemplateRegistry,
        handlers: HandlerRegistry,
        source: DocumentSource | None = None,
    ) -> None:
        self.settings = settings
        self.registry = registry
        self.handlers = handlers
        self.source = source
        self.writer = DocumentWriter(settings, handlers, source)
        self.custom = CustomDefinitionManager(registry, self.writer)

    @classmethod
    def bootstrap(cls, settings: Settings | None = None) -> AppService:
        """Load every base document, then return a ready service.

        Raises :class:`BootstrapError` when the base documents are missing or
        corrupt; nothing is registered in that case.
        """
        settings = settings or Settings()
        loader = DocumentLoader(settings)
        source = loader.resolve_source()
        definitions = loader.load_app_definitions(source)
        params = loader.load_param_definitions(source)
        handlers = default_handler_registry()

        registry = TemplateRegistry()
        for key, definition in definitions.items():
            registry.set_app_define(key, definition)
            registry.upsert_custom(CustomTemplate.from_definition(definition, params.get(key)))
        for key, param_list in params.items():
            registry.set_param_defines(key, param_list)
        registry.mark_ready()
        return cls(settings, registry, handlers, source)

    # ── Read ───────────────────────────────────────────────────────────

    def get_param_defines(self, app: str) -> list[ParamDefinition]:
        return self.registry.get_param_defines(app)

    def get_app_define(self, app: str) -> AppDefinition:
        return self.registry.get_app_define(app)

    def get_metric_names(self, app: str | None = None) -> list[str]:
        return self.registry.get_metric_names(app)

    def get_i18n_resources(self, locale: str | None = None) -> dict[str, str]:
        return i18n_resources(self.registry, locale or self.settings.default_locale)

    def get_all_app_hierarchy(self, locale: str | None = None) -> list[HierarchyNode]:
        return build_hierarchy(self.registry, locale or self.settings.default_locale)

    def get_all_custom_info(self) -> list[CustomTemplate]:
        return self.custom.get_all_custom()

    def get_one_custom_info(self, app: str) -> CustomTemplate:
        return self.custom.get_one_custom(app)

    # ── Write ──────────────────────────────────────────────────────────

    def set_custom_info(self, template: CustomTemplate) -> CustomTemplate:
        return self.custom.create_custom(template.app, template.name, template.category)

    def set_custom_param_info(self, custom_params: CustomParams) -> list[Path]:
        return self.custom.attach_params(
            custom_params.app, custom_params.params, ch_name=custom_params.ch_name
        )

    def set_custom_defined_info(self, definition: AppDefinition) -> list[Path]:
        return self.custom.attach_schema(definition)

    def update_custom_info(self, template: CustomTemplate) -> list[Path]:
        return self.custom.update_custom(template)

    def persist_custom_info(self, app: str) -> list[Path]:
        return self.custom.persist(app)
