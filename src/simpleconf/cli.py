# SPDX-License-Identifier: EUPL-1.2
# SPDX-FileCopyrightText: © 2025-present Jürgen Mülbert

"""
Command line interface.

``simpleconf check`` applies an init file to a private category registry,
so it can validate a file without touching the running process's logging,
and prints what the file builds. ``simpleconf settings`` shows or writes
the loader settings.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from simpleconf.__about__ import __app_name__, __version__
from simpleconf.configurator import SimpleConfigurator
from simpleconf.context import ConfiguratorContext
from simpleconf.exceptions import ConfigFileNotFoundError, SettingsConfigurationError, SettingsWriteConfigurationError
from simpleconf.logging_bootstrap import bootstrap_logging
from simpleconf.registry import CategoryRegistry
from simpleconf.settings_manager import SettingsManager

app = typer.Typer(name=__app_name__, help="Validate and inspect simple logging init files.", no_args_is_help=True)

console = Console()
_error_console = Console(stderr=True)

SettingsOption = Annotated[
    Path | None,
    typer.Option("--settings", "-s", help="Settings file to use instead of the default locations."),
]


def _load_settings(settings_path: Path | None) -> SettingsManager:
    try:
        return SettingsManager.from_file(settings_path)
    except (ConfigFileNotFoundError, SettingsConfigurationError) as e:
        _error_console.print(f"[bold red]Error[/bold red]: {escape(str(e))}")
        raise typer.Exit(code=2) from e


def _describe_appender(handler: logging.Handler) -> str:
    layout = type(handler.formatter).__name__ if handler.formatter else "-"
    pattern = getattr(handler.formatter, "conversion_pattern", None)
    if pattern is not None:
        layout = f"{layout}({pattern!r})"
    return f"{type(handler).__name__} [{layout}]"


def _categories_table(registry: CategoryRegistry) -> Table:
    table = Table(title="Categories")
    table.add_column("Category", style="cyan")
    table.add_column("Priority")
    table.add_column("Appenders")
    for name, category in registry.categories().items():
        priority = logging.getLevelName(category.level) if category.level else "(inherited)"
        appenders = "\n".join(_describe_appender(handler) for handler in category.handlers) or "-"
        table.add_row(escape(name), str(priority), escape(appenders))
    return table


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"{__app_name__} {__version__}")
        raise typer.Exit


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show the version and exit."),
    ] = False,
) -> None:
    """Validate and inspect simple logging init files."""


@app.command()
def check(
    init_file: Annotated[Path, typer.Argument(help="The logging init file to check.")],
    settings_path: SettingsOption = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show loader diagnostics.")] = False,
) -> None:
    """Load INIT_FILE into a private registry and show the resulting categories."""
    settings = _load_settings(settings_path)
    bootstrap_logging(logging.DEBUG if verbose else settings.log_level)

    registry = CategoryRegistry()
    configurator = SimpleConfigurator(ConfiguratorContext.create(settings, registry))
    result = configurator.try_configure(init_file)

    try:
        if result.ok:
            console.print(_categories_table(registry))
            console.print(
                f"[green]OK[/green]: {escape(str(init_file))} configures {len(result.categories)} "
                f"categories with {result.appenders} appenders."
            )
            return

        _error_console.print(f"[bold red]{result.error.kind}[/bold red]: {escape(str(result.error))}")
        raise typer.Exit(code=1)
    finally:
        for category in registry.categories().values():
            for handler in category.handlers[:]:
                category.removeHandler(handler)
                handler.close()


@app.command()
def settings(
    settings_path: SettingsOption = None,
    write: Annotated[Path | None, typer.Option("--write", "-w", help="Write the effective settings here.")] = None,
) -> None:
    """Show the effective loader settings as TOML, or write them to a file."""
    manager = _load_settings(settings_path)
    if write is None:
        source = manager.loaded_config_file or "built-in defaults"
        console.print(f"# source: {source}", highlight=False)
        console.print(manager.dumps(), highlight=False, markup=False)
        return

    try:
        target = manager.save(write)
    except SettingsWriteConfigurationError as e:
        _error_console.print(f"[bold red]Error[/bold red]: {escape(str(e))}")
        raise typer.Exit(code=2) from e
    console.print(f"Settings written to {target}", highlight=False)
