"""Application configuration and settings."""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field


DEFAULT_LOCALE = "en-US"
DEFAULT_OUTPUT_DIR = "catalog-output"


class Settings(BaseModel):
    """Runtime settings resolved from env vars and CLI flags."""

    # Documents
    define_dir: str = Field(
        default_factory=lambda: os.environ.get("MONITOR_TEMPLATES_DEFINE_DIR", ""),
        description="Directory holding app/ and param/ documents. Empty = bundled documents only.",
    )
    app_subdir: str = "app"
    param_subdir: str = "param"
    document_suffix: str = ".yml"
    include_patterns: list[str] = Field(
        default_factory=lambda: ["*.yml", "*.yaml"],
    )

    # Presentation
    default_locale: str = Field(
        default_factory=lambda: os.environ.get("MONITOR_TEMPLATES_LOCALE", DEFAULT_LOCALE),
    )
    output_dir: str = DEFAULT_OUTPUT_DIR

    # Behaviour
    verbose: bool = False

    @property
    def resolved_define_dir(self) -> Path | None:
        if not self.define_dir:
            return None
        return Path(self.define_dir).resolve()

    @property
    def app_dir(self) -> Path | None:
        root = self.resolved_define_dir
        return root / self.app_subdir if root else None

    @property
    def param_dir(self) -> Path | None:
        root = self.resolved_define_dir
        return root / self.param_subdir if root else None

    def validate_define_dir(self) -> Path:
        root = self.resolved_define_dir
        if root is None:
            raise ValueError(
                "No define directory configured. "
                "Set MONITOR_TEMPLATES_DEFINE_DIR or pass --define-dir."
            )
        return root
