"""Validate, merge and commit user-authored template edits.

Each write holds the per-app writer lock for the whole
validate-commit-persist sequence. Facets are rendered into documents before
the registry changes, so a rejected facet is never visible to readers. The
registry is updated before the documents are written, so a
:class:`PersistenceError` leaves the accepted edit visible;
:meth:`CustomDefinitionManager.persist` retries the write.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

from monitor_templates.errors import ConflictError, InvalidTemplateError
from monitor_templates.models import AppDefinition, CustomParams, CustomTemplate, ParamDefinition
from monitor_templates.registry import TemplateRegistry, normalize_app
from monitor_templates.writer import DocumentWriter

logger = logging.getLogger(__name__)


def _check_owner(facet: str, facet_app: str, key: str) -> None:
    if normalize_app(facet_app) != key:
        raise InvalidTemplateError(
            f"The {facet} belongs to app {facet_app!r} and cannot be stored under {key!r}"
        )


class CustomDefinitionManager:
    def __init__(self, registry: TemplateRegistry, writer: DocumentWriter) -> None:
        self.registry = registry
        self.writer = writer

    # ── Read ───────────────────────────────────────────────────────────

    def get_all_custom(self) -> list[CustomTemplate]:
        return self.registry.all_custom()

    def get_one_custom(self, app: str) -> CustomTemplate:
        return self.registry.get_custom(app)

    # ── Write ──────────────────────────────────────────────────────────

    def create_custom(self, app: str, name: Mapping[str, str], category: str) -> CustomTemplate:
        """Register the identity of a new custom app."""
        if not app or not app.strip() or not name or not category:
            raise InvalidTemplateError(
                "The custom monitor `app`, `name` and `category` must not be empty"
            )
        template = CustomTemplate(app=app.strip(), name=dict(name), category=category)
        with self.registry.key_lock(app) as key:
            if self.registry.contains(key):
                raise ConflictError(app)
            self.registry.upsert_custom(template)
        logger.info("Created custom app %r", key)
        return template

    def attach_params(
        self, app: str, params: list[ParamDefinition], ch_name: str | None = None
    ) -> list[Path]:
        """Replace the parameter facet of *app* and write its parameter document."""
        with self.registry.key_lock(app) as key:
            current = self.registry.get_custom(key)
            custom_params = CustomParams(app=current.app, ch_name=ch_name, params=list(params))
            updated = current.model_copy(update={"params": custom_params})
            documents = self.writer.render(updated, schema=False)

            self.registry.upsert_custom(updated)
            self.registry.set_param_defines(key, custom_params.params)
            logger.info("Updated %d parameters of app %r", len(custom_params.params), key)
            return self.writer.write(updated.app, documents)

    def attach_schema(self, definition: AppDefinition) -> list[Path]:
        """Replace the schema facet of the app named by *definition* and write both documents."""
        with self.registry.key_lock(definition.app) as key:
            current = self.registry.get_custom(key)
            definition = definition.model_copy(update={"app": current.app})
            updated = current.model_copy(update={"definition": definition})
            documents = self.writer.render(updated)

            self.registry.upsert_custom(updated)
            self.registry.set_app_define(key, definition)
            logger.info("Updated definition of app %r (%d metrics)", key, len(definition.metrics))
            return self.writer.write(updated.app, documents)

    def update_custom(self, template: CustomTemplate) -> list[Path]:
        """Replace whichever facets *template* carries; absent facets stay as stored.

        A facet naming a different app than *template* is rejected with
        :class:`InvalidTemplateError`.
        """
        with self.registry.key_lock(template.app) as key:
            current = self.registry.get_custom(key)
            updates: dict[str, object] = {}
            params = definition = None
            if template.params is not None:
                _check_owner("parameter set", template.params.app, key)
                params = template.params.model_copy(update={"app": current.app})
                updates["params"] = params
            if template.definition is not None:
                _check_owner("definition", template.definition.app, key)
                definition = template.definition.model_copy(update={"app": current.app})
                updates["definition"] = definition
            updated = current.model_copy(update=updates)
            documents = self.writer.render(updated)

            self.registry.upsert_custom(updated)
            if params is not None:
                self.registry.set_param_defines(key, params.params)
            if definition is not None:
                self.registry.set_app_define(key, definition)
            logger.info("Updated custom app %r (%s)", key, ", ".join(updates) or "no facets")
            return self.writer.write(updated.app, documents)

    def persist(self, app: str) -> list[Path]:
        """Write the stored documents of *app* again, e.g. after a failed save."""
        with self.registry.key_lock(app) as key:
            return self.writer.persist(self.registry.get_custom(key))
