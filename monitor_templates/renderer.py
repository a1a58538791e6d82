"""Render a Markdown catalog of the registry using Jinja2 templates."""

from __future__ import annotations

import logging
from importlib.resources import files as importlib_files
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from monitor_templates.hierarchy import localize
from monitor_templates.service import AppService

logger = logging.getLogger(__name__)

_TEMPLATES_REF = importlib_files("monitor_templates") / "templates"


def _get_jinja_env() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(_TEMPLATES_REF)),
        autoescape=select_autoescape(default=False),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["localize"] = localize
    return env


def render_catalog(service: AppService, locale: str) -> str:
    """Render every app with its metrics and parameters as Markdown."""
    apps = [
        {
            "definition": definition,
            "params": service.get_param_defines(definition.app),
        }
        for definition in service.registry.app_defines()
    ]
    template = _get_jinja_env().get_template("catalog.md.j2")
    return template.render(apps=apps, locale=locale)


def write_catalog(service: AppService, output_dir: Path, locale: str) -> Path:
    """Write ``catalog.md`` into *output_dir* and return its path."""
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / "catalog.md"
    path.write_text(render_catalog(service, locale), encoding="utf-8")
    logger.info("Wrote %s", path)
    return path
