"""Named registry of managed configurations.

A ManagedConfig owns one template/config pair: the default tree parsed
from the template, the live tree parsed from the active config, and the
writer and migrator that keep the file in the template's layout.
ConfigStore holds at most one ManagedConfig per name for the life of the
process.

Usage:
    from confsync.core.store import get_instance

    # First request binds the name to its files (seeds and migrates)
    app_config = get_instance(
        "app",
        default_path=Path("defaults/config.yaml"),
        config_path=Path("~/.app/config.yaml"),
    )

    # Later requests only need the name
    config = get_instance("app").get_config()
    config["server"]["port"] = 9090
    get_instance("app").write_config(config)

Thread Safety:
    Neither class is thread-safe. Callers that write, reset or migrate the
    same name concurrently must serialize externally.
"""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any

from confsync.core.config.constants import VERSION_KEY
from confsync.core.config.loaders import get_version, load_config_file, load_template
from confsync.core.config.models import ConfigLocation
from confsync.core.exceptions import (
    ConfigError,
    ConfigNotRegisteredError,
    MissingNameError,
    TemplateReadError,
)
from confsync.core.io import LocalFileAdapter, PersistenceAdapter
from confsync.core.migration import VersionMigrator
from confsync.core.notifications import ConfigNotifier, dispatch_config_updated
from confsync.core.template import TemplateCache
from confsync.core.writer import TemplateWriter, WriteResult

__all__ = [
    "ManagedConfig",
    "ConfigStore",
    "get_store",
    "get_instance",
]

logger = logging.getLogger(__name__)


def _get_nested_value(d: dict[str, Any], path: str) -> tuple[Any, bool]:
    """Get value at dot-notation path from nested dict.

    Args:
        d: Dictionary to search.
        path: Dot-notation path (e.g., "server.port").

    Returns:
        Tuple of (value, found). If path not found, returns (None, False).

    """
    current: Any = d
    for key in path.split("."):
        if not isinstance(current, dict) or key not in current:
            return None, False
        current = current[key]
    return current, True


def _set_nested_value(d: dict[str, Any], path: str, value: Any) -> None:
    """Set value at dot-notation path in nested dict, creating intermediate dicts.

    Raises:
        ValueError: If path is empty, has empty segments, or intermediate
            value exists but is not a dict.

    """
    if not path:
        raise ValueError("Path cannot be empty")

    keys = path.split(".")

    # Validate no empty segments
    for key in keys:
        if not key:
            raise ValueError(f"Invalid path '{path}': contains empty segment")

    current = d
    for key in keys[:-1]:
        if current.get(key) is None:
            current[key] = {}
        elif not isinstance(current[key], dict):
            raise ValueError(
                f"Cannot set '{path}': intermediate value at '{key}' "
                f"is {type(current[key]).__name__}, not dict"
            )
        current = current[key]

    current[keys[-1]] = value


class ManagedConfig:
    """One template-backed configuration file.

    Construction seeds the config from the template when it is missing,
    loads both trees and migrates the config if the template is newer.
    Read failures during construction propagate.

    Attributes:
        location: Name and paths this entry is bound to.
        last_migration: Result of the construction-time migration, or None
            when the config was already current.

    """

    def __init__(
        self,
        location: ConfigLocation,
        adapter: PersistenceAdapter | None = None,
        notifier: ConfigNotifier | None = None,
        log: logging.Logger | None = None,
        cache: TemplateCache | None = None,
    ) -> None:
        self.location = location
        self._adapter = adapter if adapter is not None else LocalFileAdapter()
        self._notifier = notifier
        self._log = log or logger

        self._default_config: dict[str, Any] = {}
        self._config: dict[str, Any] = {}

        self._writer = TemplateWriter(
            location.default_path,
            location.config_path,
            self._adapter,
            cache=cache if cache is not None else TemplateCache(self._adapter),
            log=self._log,
        )
        self._migrator = VersionMigrator(
            self._writer, self._adapter, location.backup_path, log=self._log
        )
        self.last_migration: WriteResult | None = None

        self._ensure_config_exists()
        self._read_default_yaml()
        self._read_config_yaml()
        self._check_config_version()

    def __repr__(self) -> str:
        return f"ManagedConfig(name={self.name!r}, config_path={str(self.config_path)!r})"

    @property
    def name(self) -> str:
        return self.location.name

    @property
    def default_path(self) -> Path:
        return self.location.default_path

    @property
    def config_path(self) -> Path:
        return self.location.config_path

    @property
    def default_config(self) -> dict[str, Any]:
        """Deep copy of the template's default tree."""
        return copy.deepcopy(self._default_config)

    @property
    def version(self) -> int:
        """Version of the live config tree (0 when absent)."""
        return get_version(self._config)

    @property
    def default_version(self) -> int:
        return get_version(self._default_config)

    def _ensure_config_exists(self) -> None:
        if self._adapter.exists(self.config_path):
            return
        if not self._adapter.exists(self.default_path):
            raise TemplateReadError(f"Default template not found: {self.default_path}")
        try:
            self._adapter.copy(self.default_path, self.config_path)
        except OSError as e:
            raise ConfigError(
                f"Cannot create config {self.config_path} from template: {e}"
            ) from e
        self._log.info("Created config %s from template %s", self.config_path, self.default_path)

    def _read_default_yaml(self) -> None:
        self._default_config = load_template(self._adapter, self.default_path)

    def _read_config_yaml(self) -> None:
        self._config = load_config_file(self._adapter, self.config_path)

    def _check_config_version(self) -> None:
        tree, result = self._migrator.migrate(self._default_config, self._config)
        self.last_migration = result
        if result is not None and result.ok and tree is not None:
            self._config = tree

    def needs_migration(self) -> bool:
        """Return True when the template is newer than the live config."""
        return self._migrator.needs_migration(self._default_config, self._config)

    def get_config(self, refresh: bool = False) -> dict[str, Any]:
        """Return the live config tree.

        Args:
            refresh: Reload the tree from disk first. Does not migrate.

        Raises:
            ConfigReadError: If refresh is set and the file cannot be read.

        """
        if refresh:
            self._read_config_yaml()
        return self._config

    def write_config(self, config: dict[str, Any] | None = None) -> WriteResult:
        """Write a tree to the config file through the template layout.

        The written tree is a shallow copy of config with its version pinned
        to the template's, so a written file is never seen as stale. On
        success the live tree is replaced by that copy and listeners are
        notified. Failures are logged and returned, never raised; the
        previous live tree is kept.

        Args:
            config: Tree to write (defaults to the live tree).

        """
        tree = dict(self._config if config is None else config)
        if VERSION_KEY in self._default_config:
            tree[VERSION_KEY] = self._default_config[VERSION_KEY]
        self._log.debug("Writing config %s", self.name)

        result = self._writer.write(tree)
        if result:
            self._config = tree
            dispatch_config_updated(self._notifier, self.name, self.config_path, self._log)
        return result

    def reset_config(self) -> WriteResult:
        """Replace the config file with the template and reload it.

        Failures are logged and returned, never raised.
        """
        try:
            self._adapter.copy(self.default_path, self.config_path)
            self._log.info("Config has been reset to default")
            self._read_config_yaml()
        except (OSError, ConfigError) as e:
            self._log.error("Failed to reset config: %s", e)
            return WriteResult.failure(self.config_path, e)

        dispatch_config_updated(self._notifier, self.name, self.config_path, self._log)
        return WriteResult(ok=True, path=self.config_path)


class ConfigStore:
    """Process-wide registry of ManagedConfig entries keyed by name.

    Entries are created on first request and live until the store is
    discarded. Collaborators given to the store are used for every entry
    that does not override them.
    """

    def __init__(
        self,
        adapter: PersistenceAdapter | None = None,
        notifier: ConfigNotifier | None = None,
    ) -> None:
        self._adapter = adapter if adapter is not None else LocalFileAdapter()
        self._notifier = notifier
        self._cache = TemplateCache(self._adapter)
        self._entries: dict[str, ManagedConfig] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def names(self) -> list[str]:
        return list(self._entries)

    def get(self, name: str) -> ManagedConfig:
        """Return an existing entry.

        Raises:
            MissingNameError: If name is empty.
            ConfigNotRegisteredError: If no entry exists for name.

        """
        if not name:
            raise MissingNameError("Config name must not be empty")
        try:
            return self._entries[name]
        except KeyError:
            raise ConfigNotRegisteredError(
                f"Config '{name}' is not registered; pass default_path and config_path"
            ) from None

    def get_instance(
        self,
        name: str,
        default_path: str | Path | None = None,
        config_path: str | Path | None = None,
        *,
        adapter: PersistenceAdapter | None = None,
        notifier: ConfigNotifier | None = None,
        log: logging.Logger | None = None,
    ) -> ManagedConfig:
        """Return the entry for name, constructing it on first request.

        Paths and collaborators are only used when the entry is created;
        later calls return the existing entry unchanged.

        Raises:
            MissingNameError: If name is empty.
            ConfigNotRegisteredError: If name is unknown and a path is missing.
            TemplateReadError: If the template cannot be read or parsed.
            ConfigReadError: If the config cannot be read or parsed.

        """
        if not name:
            raise MissingNameError("Config name must not be empty")

        existing = self._entries.get(name)
        if existing is not None:
            return existing

        if default_path is None or config_path is None:
            raise ConfigNotRegisteredError(
                f"Config '{name}' is not registered; pass default_path and config_path"
            )

        location = ConfigLocation(
            name=name,
            default_path=Path(default_path),
            config_path=Path(config_path),
        )
        entry = ManagedConfig(
            location,
            adapter=adapter if adapter is not None else self._adapter,
            notifier=notifier if notifier is not None else self._notifier,
            log=log,
            cache=self._cache if adapter is None else None,
        )
        self._entries[name] = entry
        logger.debug("Registered config %s (%s)", name, location.config_path)
        return entry


# Module-level default store
_store: ConfigStore | None = None


def get_store() -> ConfigStore:
    """Return the process default ConfigStore, creating it on first use."""
    global _store
    if _store is None:
        _store = ConfigStore()
    return _store


def _reset_store() -> None:
    """Reset the default store for testing purposes only."""
    global _store
    _store = None


def get_instance(
    name: str,
    default_path: str | Path | None = None,
    config_path: str | Path | None = None,
    **kwargs: Any,
) -> ManagedConfig:
    """Shortcut for get_store().get_instance(...)."""
    return get_store().get_instance(name, default_path, config_path, **kwargs)
