"""Serialize custom templates back into app and parameter documents."""

from __future__ import annotations

import logging
import os
import tempfile
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from monitor_templates.config import Settings
from monitor_templates.errors import PersistenceError
from monitor_templates.handlers import HandlerRegistry
from monitor_templates.loader import DocumentLoader, DocumentSource
from monitor_templates.models import AppDefinition, CustomParams, CustomTemplate
from monitor_templates.registry import normalize_app

logger = logging.getLogger(__name__)

PARAM_DOCUMENT = "param"
APP_DOCUMENT = "app"


def _write_text(path: Path, content: str) -> None:
    """Write *content* to *path*, replacing it only once the content is complete."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(content)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def _write_document(path: Path, document: dict[str, Any]) -> None:
    _write_text(path, yaml.safe_dump(document, sort_keys=False, allow_unicode=True))


@dataclass(frozen=True)
class RenderedDocument:
    """A document ready to be written: ``param`` or ``app`` kind plus its content."""

    kind: str
    content: dict[str, Any]


class DocumentWriter:
    """Renders templates through the handler registry and writes them to the define directory.

    When the registry was booted from the bundled documents, the first write
    copies those base documents into the define directory, so the next
    bootstrap from disk sees every base app.
    """

    def __init__(
        self,
        settings: Settings,
        handlers: HandlerRegistry,
        source: DocumentSource | None = None,
    ) -> None:
        self.settings = settings
        self.handlers = handlers
        self._seed_source = source if source is not None and not source.from_disk else None
        self._seed_lock = threading.Lock()

    # ── Paths ──────────────────────────────────────────────────────────

    def _document_path(self, directory: Path, kind: str, app: str) -> Path:
        return directory / f"{kind}-{normalize_app(app)}{self.settings.document_suffix}"

    def param_path(self, app: str) -> Path | None:
        param_dir = self.settings.param_dir
        if param_dir is None:
            return None
        return self._document_path(param_dir, PARAM_DOCUMENT, app)

    def app_path(self, app: str) -> Path | None:
        app_dir = self.settings.app_dir
        if app_dir is None:
            return None
        return self._document_path(app_dir, APP_DOCUMENT, app)

    # ── Rendering ──────────────────────────────────────────────────────

    def render_params(self, custom_params: CustomParams) -> dict[str, Any]:
        rendered: list[dict[str, Any]] = []
        for param in custom_params.params:
            fragment = self.handlers.resolve_param(param.type).render(param)
            entry: dict[str, Any] = {"field": param.field, "name": dict(param.name)}
            entry.update(fragment)
            entry["required"] = param.required
            if param.default_value is not None:
                entry["defaultValue"] = param.default_value
            rendered.append(entry)
        return {"app": custom_params.app, "param": rendered}

    def render_definition(self, definition: AppDefinition) -> dict[str, Any]:
        document = definition.model_dump(by_alias=True, exclude_none=True)
        if document.get("metrics"):
            document["metrics"] = [
                self.handlers.resolve_protocol(metric.protocol).render(metric)
                for metric in definition.metrics
            ]
        return document

    def render(
        self, template: CustomTemplate, *, params: bool = True, schema: bool = True
    ) -> list[RenderedDocument]:
        """Render the requested facets of *template* without touching the disk.

        Raises :class:`UnknownHandlerError` or :class:`InvalidTemplateError`
        when a facet cannot be expressed as a document.
        """
        documents: list[RenderedDocument] = []
        if params and template.params is not None:
            documents.append(RenderedDocument(PARAM_DOCUMENT, self.render_params(template.params)))
        if schema and template.definition is not None:
            documents.append(RenderedDocument(APP_DOCUMENT, self.render_definition(template.definition)))
        return documents

    # ── Persistence ────────────────────────────────────────────────────

    def write(self, app: str, documents: list[RenderedDocument]) -> list[Path]:
        """Write rendered *documents* of *app*; returns the written paths."""
        if not documents:
            return []

        app_dir, param_dir = self.settings.app_dir, self.settings.param_dir
        if app_dir is None or param_dir is None:
            raise PersistenceError(app, "no define directory configured")
        try:
            # Both directories must exist for the next bootstrap from disk.
            app_dir.mkdir(parents=True, exist_ok=True)
            param_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PersistenceError(app, str(exc), path=app_dir.parent) from exc
        self._seed_base_documents(app, app_dir, param_dir)

        written: list[Path] = []
        for document in documents:
            directory = param_dir if document.kind == PARAM_DOCUMENT else app_dir
            path = self._document_path(directory, document.kind, app)
            try:
                _write_document(path, document.content)
            except OSError as exc:
                logger.exception("Failed to write %s", path)
                raise PersistenceError(app, str(exc), path=path, written=written) from exc
            written.append(path)
            logger.info("Wrote %s", path)
        return written

    def persist(
        self, template: CustomTemplate, *, params: bool = True, schema: bool = True
    ) -> list[Path]:
        """Render and write the requested facets of *template*."""
        return self.write(template.app, self.render(template, params=params, schema=schema))

    def _seed_base_documents(self, app: str, app_dir: Path, param_dir: Path) -> None:
        with self._seed_lock:
            source = self._seed_source
            if source is None:
                return
            loader = DocumentLoader(self.settings)
            for root, target in ((source.app_root, app_dir), (source.param_root, param_dir)):
                for doc in loader.documents(root):
                    path = target / doc.name
                    if path.exists():
                        continue
                    try:
                        _write_text(path, doc.read_text(encoding="utf-8"))
                    except OSError as exc:
                        logger.exception("Failed to seed %s", path)
                        raise PersistenceError(
                            app, f"could not copy base document {doc.name}: {exc}", path=path
                        ) from exc
                    logger.info("Seeded %s", path)
            self._seed_source = None
