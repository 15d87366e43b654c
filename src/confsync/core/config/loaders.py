"""YAML loading for template and config files."""

import logging
from pathlib import Path
from typing import Any

import yaml

from confsync.core.config.constants import MAX_CONFIG_SIZE, VERSION_KEY
from confsync.core.exceptions import ConfigError, ConfigReadError, TemplateReadError
from confsync.core.io import PersistenceAdapter

__all__ = [
    "parse_yaml_text",
    "load_yaml_file",
    "load_template",
    "load_config_file",
    "get_version",
]

logger = logging.getLogger(__name__)


def parse_yaml_text(
    content: str,
    source: Path | str,
    error_cls: type[ConfigError] = ConfigError,
    allow_empty: bool = False,
) -> dict[str, Any]:
    """Parse YAML text into a config tree with safety checks.

    Args:
        content: Raw YAML text.
        source: Where the text came from (used in error messages).
        error_cls: ConfigError subclass to raise on failure.
        allow_empty: Return an empty mapping for a document with no
            content (blank or comments only) instead of raising.

    Returns:
        Parsed YAML content as dictionary.

    Raises:
        ConfigError: (as error_cls) If the text is too large, is empty,
            is not a mapping, or is invalid YAML.

    """
    if len(content) > MAX_CONFIG_SIZE:
        raise error_cls(
            f"Config file {source} exceeds size limit "
            f"({len(content):,} bytes > {MAX_CONFIG_SIZE:,} limit)."
        )

    try:
        parsed = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise error_cls(f"Invalid YAML in {source}: {e}") from e

    # Explicit empty file detection for better error messages
    if parsed is None:
        if allow_empty:
            return {}
        raise error_cls(f"Config file {source} is empty or contains only whitespace.")

    if not isinstance(parsed, dict):
        raise error_cls(
            f"Config file {source} must contain a YAML mapping, got {type(parsed).__name__}."
        )

    return parsed


def load_yaml_file(
    adapter: PersistenceAdapter,
    path: Path,
    error_cls: type[ConfigError] = ConfigError,
    allow_empty: bool = False,
) -> dict[str, Any]:
    """Read and parse a YAML file through the persistence adapter.

    Args:
        adapter: Persistence adapter to read through.
        path: Path to YAML file.
        error_cls: ConfigError subclass to raise on failure.
        allow_empty: Passed through to parse_yaml_text.

    Returns:
        Parsed YAML content as dictionary.

    Raises:
        ConfigError: (as error_cls) If file cannot be read or parsed.

    """
    try:
        # Bounded read; anything past the limit is rejected below
        content = adapter.read_text(path, MAX_CONFIG_SIZE + 1)
    except IsADirectoryError as e:
        raise error_cls(f"{path} is a directory, not a config file.") from e
    except PermissionError as e:
        raise error_cls(f"Permission denied reading {path}: {e}") from e
    except FileNotFoundError as e:
        raise error_cls(f"Config file not found: {path}") from e
    except OSError as e:
        raise error_cls(f"Cannot read config file {path}: {e}") from e

    return parse_yaml_text(content, path, error_cls, allow_empty)


def load_template(adapter: PersistenceAdapter, path: Path) -> dict[str, Any]:
    """Load the default template tree. Raises TemplateReadError."""
    return load_yaml_file(adapter, path, TemplateReadError)


def load_config_file(adapter: PersistenceAdapter, path: Path) -> dict[str, Any]:
    """Load the active config tree. Raises ConfigReadError.

    A config left blank or holding only comments loads as an empty tree
    (version 0), so it is migrated to the full template.
    """
    return load_yaml_file(adapter, path, ConfigReadError, allow_empty=True)


def get_version(tree: dict[str, Any] | None) -> int:
    """Return the version stored in a tree, or 0 when absent or unusable.

    Booleans, negative numbers and non-integers are treated as 0.
    """
    if not tree:
        return 0
    value = tree.get(VERSION_KEY)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        logger.warning("Ignoring invalid config version %r, treating it as 0", value)
        return 0
    return value
