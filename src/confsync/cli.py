"""Typer CLI entry point for confsync.

Maintenance commands for a template-backed config file. It only parses
arguments and delegates to confsync.core - no business logic here.
"""

import copy
import logging

import typer
import yaml

from confsync import __version__
from confsync.cli_utils import (
    EXIT_CONFIG_ERROR,
    EXIT_ERROR,
    EXIT_SUCCESS,
    _error,
    _info,
    _resolve_path,
    _setup_logging,
    _success,
    _warning,
    console,
)
from confsync.core.config import get_version, load_config_file, load_template
from confsync.core.exceptions import ConfigError
from confsync.core.io import LocalFileAdapter
from confsync.core.store import (
    ConfigStore,
    ManagedConfig,
    _get_nested_value,
    _set_nested_value,
)
from confsync.core.writer import format_value

# Module logger
logger = logging.getLogger(__name__)

# Registry name used for the entry opened by a CLI invocation
CLI_CONFIG_NAME = "cli"

app = typer.Typer(
    name="confsync",
    help="Keep a user-edited YAML config in step with its default template",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

DefaultOption = typer.Option(..., "--default", "-d", help="Path to the default template")
ConfigOption = typer.Option(..., "--config", "-c", help="Path to the active config file")
VerboseOption = typer.Option(False, "--verbose", "-v", help="Enable debug logging")
QuietOption = typer.Option(False, "--quiet", "-q", help="Only log warnings and errors")


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"confsync {__version__}")
        raise typer.Exit(code=EXIT_SUCCESS)


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Keep a user-edited YAML config in step with its default template."""


def _open_config(default: str, config: str) -> ManagedConfig:
    """Open (seed and migrate if needed) the config for this invocation.

    Raises:
        typer.Exit: With EXIT_CONFIG_ERROR if either file cannot be loaded.

    """
    default_path = _resolve_path(default, "Default template", must_exist=True)
    config_path = _resolve_path(config, "Config file")
    try:
        entry = ConfigStore().get_instance(CLI_CONFIG_NAME, default_path, config_path)
    except ConfigError as e:
        _error(str(e))
        raise typer.Exit(code=EXIT_CONFIG_ERROR) from None

    if entry.last_migration is not None:
        if entry.last_migration:
            _info(
                f"Migrated config to version {entry.version} "
                f"(backup: {entry.last_migration.backup_path})"
            )
        else:
            _warning(f"Migration failed: {entry.last_migration.error}")
    return entry


def _echo_value(value: object) -> None:
    if isinstance(value, dict):
        typer.echo(yaml.safe_dump(value, sort_keys=False, allow_unicode=True).rstrip("\n"))
    else:
        typer.echo(format_value(value))


@app.command()
def show(
    default: str = DefaultOption,
    config: str = ConfigOption,
    verbose: bool = VerboseOption,
    quiet: bool = QuietOption,
) -> None:
    """Print the active config file, seeding or migrating it first if needed."""
    _setup_logging(verbose, quiet)
    entry = _open_config(default, config)
    typer.echo(entry.config_path.read_text(encoding="utf-8"))


@app.command()
def get(
    key: str = typer.Argument(..., help="Dotted key, e.g. server.port"),
    default: str = DefaultOption,
    config: str = ConfigOption,
    verbose: bool = VerboseOption,
    quiet: bool = QuietOption,
) -> None:
    """Print a single config value."""
    _setup_logging(verbose, quiet)
    entry = _open_config(default, config)

    value, found = _get_nested_value(entry.get_config(), key)
    if not found:
        _error(f"Key not found: {key}")
        raise typer.Exit(code=EXIT_ERROR)
    _echo_value(value)


@app.command("set")
def set_value(
    key: str = typer.Argument(..., help="Dotted key, e.g. server.port"),
    value: str = typer.Argument(..., help="New value, parsed as a YAML scalar"),
    default: str = DefaultOption,
    config: str = ConfigOption,
    verbose: bool = VerboseOption,
    quiet: bool = QuietOption,
) -> None:
    """Set a config value and rewrite the file in the template's layout."""
    _setup_logging(verbose, quiet)
    entry = _open_config(default, config)

    try:
        parsed = yaml.safe_load(value)
    except yaml.YAMLError:
        parsed = value

    tree = copy.deepcopy(entry.get_config())
    try:
        _set_nested_value(tree, key, parsed)
    except ValueError as e:
        _error(str(e))
        raise typer.Exit(code=EXIT_ERROR) from None

    result = entry.write_config(tree)
    if not result:
        _error(f"Failed to write config: {result.error}")
        raise typer.Exit(code=EXIT_ERROR)
    _success(f"Set {key} = {format_value(parsed)}")


@app.command()
def reset(
    default: str = DefaultOption,
    config: str = ConfigOption,
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
    verbose: bool = VerboseOption,
    quiet: bool = QuietOption,
) -> None:
    """Replace the active config with the default template."""
    _setup_logging(verbose, quiet)
    entry = _open_config(default, config)

    if not yes and not typer.confirm(f"Reset {entry.config_path} to defaults?"):
        _warning("Reset cancelled")
        raise typer.Exit(code=EXIT_SUCCESS)

    result = entry.reset_config()
    if not result:
        _error(f"Failed to reset config: {result.error}")
        raise typer.Exit(code=EXIT_ERROR)
    _success(f"Config reset to defaults: {entry.config_path}")


@app.command()
def status(
    default: str = DefaultOption,
    config: str = ConfigOption,
    verbose: bool = VerboseOption,
    quiet: bool = QuietOption,
) -> None:
    """Show template and config versions without changing anything."""
    _setup_logging(verbose, quiet)
    default_path = _resolve_path(default, "Default template", must_exist=True)
    config_path = _resolve_path(config, "Config file")
    adapter = LocalFileAdapter()

    try:
        default_version = get_version(load_template(adapter, default_path))
        if not config_path.exists():
            _info(f"Template version {default_version}; config not created yet")
            return
        config_version = get_version(load_config_file(adapter, config_path))
    except ConfigError as e:
        _error(str(e))
        raise typer.Exit(code=EXIT_CONFIG_ERROR) from None

    console.print(f"Template version: {default_version}")
    console.print(f"Config version:   {config_version}")
    if default_version > config_version:
        _warning("Config is out of date and will be migrated on next load")
    else:
        _success("Config is up to date")


if __name__ == "__main__":
    app()
