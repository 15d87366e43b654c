"""Core template-preserving config engine.

This module provides:
- Named registry access via get_instance() / ConfigStore
- Template scanning, merging, rendering and version migration
- Custom exception hierarchy with ConfsyncError as base

NOTE: Exceptions are imported eagerly; everything else is loaded lazily so
that importing confsync.core does not pull in PyYAML and pydantic.
"""

from typing import TYPE_CHECKING

# Light imports - exceptions are always fast
from confsync.core.exceptions import (
    ConfigError,
    ConfigNotRegisteredError,
    ConfigReadError,
    ConfsyncError,
    MissingNameError,
    TemplateReadError,
    WriteError,
)

# Type hints only - no runtime import for heavy modules
if TYPE_CHECKING:
    from confsync.core.config import (
        BACKUP_SUFFIX as BACKUP_SUFFIX,
        VERSION_KEY as VERSION_KEY,
        ConfigLocation as ConfigLocation,
    )
    from confsync.core.io import (
        LocalFileAdapter as LocalFileAdapter,
        PersistenceAdapter as PersistenceAdapter,
    )
    from confsync.core.merge import merge_trees as merge_trees
    from confsync.core.migration import VersionMigrator as VersionMigrator
    from confsync.core.notifications import (
        CallbackNotifier as CallbackNotifier,
        ConfigNotifier as ConfigNotifier,
    )
    from confsync.core.store import (
        ConfigStore as ConfigStore,
        ManagedConfig as ManagedConfig,
        get_instance as get_instance,
        get_store as get_store,
    )
    from confsync.core.template import scan_template as scan_template
    from confsync.core.writer import (
        TemplateWriter as TemplateWriter,
        WriteResult as WriteResult,
        render_lines as render_lines,
    )

__all__ = [
    # Config
    "BACKUP_SUFFIX",
    "VERSION_KEY",
    "ConfigLocation",
    # Persistence
    "LocalFileAdapter",
    "PersistenceAdapter",
    # Engine
    "merge_trees",
    "render_lines",
    "scan_template",
    "TemplateWriter",
    "VersionMigrator",
    "WriteResult",
    # Registry
    "ConfigStore",
    "ManagedConfig",
    "get_instance",
    "get_store",
    # Notifications
    "CallbackNotifier",
    "ConfigNotifier",
    # Exceptions
    "ConfsyncError",
    "ConfigError",
    "ConfigNotRegisteredError",
    "ConfigReadError",
    "MissingNameError",
    "TemplateReadError",
    "WriteError",
]

# Lazy loading mapping
_lazy_imports = {
    "BACKUP_SUFFIX": ".config",
    "VERSION_KEY": ".config",
    "ConfigLocation": ".config",
    "LocalFileAdapter": ".io",
    "PersistenceAdapter": ".io",
    "merge_trees": ".merge",
    "render_lines": ".writer",
    "scan_template": ".template",
    "TemplateWriter": ".writer",
    "VersionMigrator": ".migration",
    "WriteResult": ".writer",
    "ConfigStore": ".store",
    "ManagedConfig": ".store",
    "get_instance": ".store",
    "get_store": ".store",
    "CallbackNotifier": ".notifications",
    "ConfigNotifier": ".notifications",
}


def __getattr__(name: str) -> object:
    """Lazy load attributes on first access."""
    if name in _lazy_imports:
        import importlib

        module = importlib.import_module(_lazy_imports[name], __package__)
        return getattr(module, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
