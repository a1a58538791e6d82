"""CLI entry-point for the monitor template registry."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
import yaml
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from monitor_templates import __version__
from monitor_templates.config import DEFAULT_OUTPUT_DIR, Settings
from monitor_templates.errors import TemplateRegistryError
from monitor_templates.hierarchy import localize
from monitor_templates.models import CustomTemplate
from monitor_templates.renderer import write_catalog
from monitor_templates.service import AppService

console = Console()

define_dir_option = click.option(
    "--define-dir",
    default="",
    envvar="MONITOR_TEMPLATES_DEFINE_DIR",
    help="Directory holding app/ and param/ documents (default: bundled definitions).",
)
verbose_option = click.option("--verbose", "-v", is_flag=True, help="Show debug logging.")
lang_option = click.option("--lang", default="", help="Locale for display names, e.g. en-US.")


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
        datefmt="%H:%M:%S",
    )


def _bootstrap(define_dir: str, verbose: bool) -> AppService:
    _configure_logging(verbose)
    settings = Settings(define_dir=define_dir, verbose=verbose)
    try:
        return AppService.bootstrap(settings)
    except TemplateRegistryError as exc:
        console.print(f"[red bold]Error:[/red bold] {exc}")
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="monitor-templates")
def main() -> None:
    """Monitor template registry: what can be monitored and how."""


@main.command()
@define_dir_option
@lang_option
@verbose_option
def apps(define_dir: str, lang: str, verbose: bool) -> None:
    """List every registered app type."""
    service = _bootstrap(define_dir, verbose)
    locale = lang or service.settings.default_locale

    table = Table(title="Monitored Apps")
    table.add_column("App", style="bold")
    table.add_column("Category")
    table.add_column("Name")
    table.add_column("Metrics", justify="right")
    table.add_column("Params", justify="right")
    for definition in service.registry.app_defines():
        table.add_row(
            definition.app,
            definition.category,
            localize(definition.name, locale, default=definition.app),
            str(len(definition.metrics)),
            str(len(service.get_param_defines(definition.app))),
        )
    console.print(table)


@main.command()
@click.argument("app", default="")
@define_dir_option
@verbose_option
def metrics(app: str, define_dir: str, verbose: bool) -> None:
    """List the metric names of APP, or of every app when APP is omitted."""
    service = _bootstrap(define_dir, verbose)
    try:
        names = service.get_metric_names(app or None)
    except TemplateRegistryError as exc:
        console.print(f"[red bold]Error:[/red bold] {exc}")
        sys.exit(1)
    for name in names:
        console.print(f"  • {name}")


@main.command()
@click.argument("app")
@define_dir_option
@lang_option
@verbose_option
def params(app: str, define_dir: str, lang: str, verbose: bool) -> None:
    """Show the connection parameters users supply for APP."""
    service = _bootstrap(define_dir, verbose)
    locale = lang or service.settings.default_locale
    param_defines = service.get_param_defines(app)
    if not param_defines:
        console.print(f"[yellow]App {app!r} declares no parameters.[/yellow]")
        return

    table = Table(title=f"Parameters of {app}")
    table.add_column("Field", style="bold")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Required")
    table.add_column("Default")
    for p in param_defines:
        table.add_row(
            p.field,
            localize(p.name, locale, default=p.field),
            p.type,
            "[green]yes[/green]" if p.required else "no",
            "" if p.default_value is None else str(p.default_value),
        )
    console.print(table)


@main.command()
@define_dir_option
@lang_option
@verbose_option
def hierarchy(define_dir: str, lang: str, verbose: bool) -> None:
    """Print the app → metric → field navigation tree."""
    service = _bootstrap(define_dir, verbose)
    tree = Tree("[bold]apps[/bold]")
    for app_node in service.get_all_app_hierarchy(lang or None):
        branch = tree.add(f"[bold cyan]{app_node.label}[/bold cyan] ({app_node.value})")
        for metric_node in app_node.children:
            metric_branch = branch.add(metric_node.label)
            for field_node in metric_node.children:
                metric_branch.add(f"[dim]{field_node.label}[/dim]")
    console.print(tree)


@main.command()
@define_dir_option
@lang_option
@verbose_option
def i18n(define_dir: str, lang: str, verbose: bool) -> None:
    """Print localized UI messages as JSON."""
    service = _bootstrap(define_dir, verbose)
    click.echo(json.dumps(service.get_i18n_resources(lang or None), indent=2, ensure_ascii=False))


@main.command()
@click.argument("template_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--update", is_flag=True, help="Update an existing app instead of creating one.")
@define_dir_option
@verbose_option
def custom(template_file: Path, update: bool, define_dir: str, verbose: bool) -> None:
    """Apply a custom template from TEMPLATE_FILE (YAML) and save its documents.

    The file holds ``app``, ``name`` and ``category`` plus optional ``params``
    and ``definition`` sections.
    """
    service = _bootstrap(define_dir, verbose)
    try:
        service.settings.validate_define_dir()
        template = CustomTemplate.model_validate(yaml.safe_load(template_file.read_text()))
    except (ValueError, yaml.YAMLError) as exc:
        console.print(f"[red bold]Error:[/red bold] {exc}")
        sys.exit(1)

    console.print(Panel(f"Applying custom app {template.app}", style="bold cyan"))
    written: list[Path] = []
    try:
        if update:
            written = service.update_custom_info(template)
        else:
            service.set_custom_info(template)
            if template.params is not None:
                written = service.set_custom_param_info(template.params)
            if template.definition is not None:
                written = service.set_custom_defined_info(template.definition)
    except TemplateRegistryError as exc:
        console.print(f"[red bold]Error:[/red bold] {exc}")
        sys.exit(1)

    console.print("[green bold]Done![/green bold] Files written:")
    for path in written:
        console.print(f"  • {path}")


@main.command()
@click.option("--output", "-o", "output_dir", default=DEFAULT_OUTPUT_DIR, help="Output directory.")
@define_dir_option
@lang_option
@verbose_option
def catalog(output_dir: str, define_dir: str, lang: str, verbose: bool) -> None:
    """Write a Markdown catalog of every app, its parameters and metrics."""
    service = _bootstrap(define_dir, verbose)
    path = write_catalog(service, Path(output_dir).resolve(), lang or service.settings.default_locale)
    console.print(f"  Catalog saved to [green]{path}[/green]")


if __name__ == "__main__":
    main()
