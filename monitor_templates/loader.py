"""Load base app-definition and parameter documents from disk or bundled package data."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from importlib.resources import files as importlib_files
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Any

import pathspec
import yaml
from pydantic import ValidationError

from monitor_templates.config import Settings
from monitor_templates.errors import BootstrapError
from monitor_templates.models import AppDefinition, ParamDefinition, ParamDefinitionSet
from monitor_templates.registry import normalize_app

logger = logging.getLogger(__name__)

# Bundled base documents shipped inside the package: define/app and define/param.
_BUNDLED_REF = importlib_files("monitor_templates") / "define"

SOURCE_DIRECTORY = "directory"
SOURCE_BUNDLED = "bundled"


@dataclass(frozen=True)
class DocumentSource:
    """Where the base documents are read from."""

    kind: str
    app_root: Traversable
    param_root: Traversable

    @property
    def from_disk(self) -> bool:
        return self.kind == SOURCE_DIRECTORY


class DocumentLoader:
    """Reads schema and parameter documents into the domain model.

    Loading is all-or-nothing: the first unreadable document aborts the whole
    load with :class:`BootstrapError`.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self._spec = pathspec.PathSpec.from_lines("gitwildmatch", settings.include_patterns)

    # ── Source resolution ──────────────────────────────────────────────

    def resolve_source(self) -> DocumentSource:
        """Prefer a non-empty on-disk define directory, else the bundled documents."""
        app_dir = self.settings.app_dir
        if app_dir is not None and app_dir.is_dir() and self.documents(app_dir):
            logger.info("Loading definitions from %s", app_dir.parent)
            return DocumentSource(SOURCE_DIRECTORY, app_dir, app_dir.parent / self.settings.param_subdir)
        if app_dir is not None:
            logger.info("No definitions under %s, using bundled definitions", app_dir)
        else:
            logger.info("Loading bundled definitions")
        return DocumentSource(
            SOURCE_BUNDLED,
            _BUNDLED_REF / self.settings.app_subdir,
            _BUNDLED_REF / self.settings.param_subdir,
        )

    def documents(self, root: Traversable) -> list[Traversable]:
        """Matching documents directly under *root*, sorted by name."""
        if not root.is_dir():
            return []
        entries = [e for e in root.iterdir() if e.is_file() and self._spec.match_file(e.name)]
        return sorted(entries, key=lambda e: e.name)

    # ── Loading ────────────────────────────────────────────────────────

    def load_app_definitions(self, source: DocumentSource) -> dict[str, AppDefinition]:
        """Return every app definition keyed by lower-cased app identifier."""
        documents = self.documents(source.app_root)
        if not documents:
            raise BootstrapError(f"No app definitions found in {source.app_root} ({source.kind})")

        definitions: dict[str, AppDefinition] = {}
        origins: dict[str, str] = {}
        for doc in documents:
            raw = self._read(doc)
            definition = self._validate(AppDefinition, raw, doc)
            key = normalize_app(definition.app)
            if not key:
                raise BootstrapError(f"{doc.name} declares an empty app identifier")
            if key in definitions:
                raise BootstrapError(
                    f"App {definition.app!r} is defined twice: {origins[key]} and {doc.name}"
                )
            definitions[key] = definition
            origins[key] = doc.name

        logger.info("Loaded %d app definitions from %s", len(definitions), source.kind)
        return definitions

    def load_param_definitions(self, source: DocumentSource) -> dict[str, list[ParamDefinition]]:
        """Return every parameter list keyed by lower-cased app identifier."""
        if source.from_disk and not source.param_root.is_dir():
            raise BootstrapError(f"Param definition directory does not exist: {source.param_root}")

        params: dict[str, list[ParamDefinition]] = {}
        for doc in self.documents(source.param_root):
            raw = self._read(doc)
            param_set = self._validate(ParamDefinitionSet, raw, doc)
            key = normalize_app(param_set.app)
            if not key:
                raise BootstrapError(f"{doc.name} declares an empty app identifier")
            if key in params:
                raise BootstrapError(f"Parameters for app {param_set.app!r} are defined twice")
            params[key] = param_set.param

        logger.info("Loaded parameter definitions for %d apps from %s", len(params), source.kind)
        return params

    # ── Internals ──────────────────────────────────────────────────────

    @staticmethod
    def _read(doc: Traversable) -> dict[str, Any]:
        try:
            raw = yaml.safe_load(doc.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
            logger.exception("Failed to read %s", doc.name)
            raise BootstrapError(f"Failed to read {doc.name}: {exc}") from exc
        if not isinstance(raw, dict):
            raise BootstrapError(f"{doc.name} is not a mapping document")
        return raw

    @staticmethod
    def _validate(model: type, raw: dict[str, Any], doc: Traversable) -> Any:
        try:
            return model.model_validate(raw)
        except ValidationError as exc:
            app = raw.get("app", Path(doc.name).stem)
            logger.exception("Invalid document %s (app=%s)", doc.name, app)
            raise BootstrapError(f"Invalid document {doc.name} for app {app!r}: {exc}") from exc
