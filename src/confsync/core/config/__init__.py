"""Configuration constants, models and YAML loaders for confsync.

Usage:
    from confsync.core.config import ConfigLocation, load_template

    location = ConfigLocation(
        name="app",
        default_path=Path("defaults/config.yaml"),
        config_path=Path("~/.app/config.yaml"),
    )
"""

from confsync.core.config.constants import BACKUP_SUFFIX, MAX_CONFIG_SIZE, VERSION_KEY
from confsync.core.config.loaders import (
    get_version,
    load_config_file,
    load_template,
    load_yaml_file,
    parse_yaml_text,
)
from confsync.core.config.models import ConfigLocation

# Re-export ConfigError for convenience (it's from exceptions, not config)
from confsync.core.exceptions import ConfigError

__all__ = [
    # Constants
    "BACKUP_SUFFIX",
    "MAX_CONFIG_SIZE",
    "VERSION_KEY",
    # Exceptions (re-exported for convenience)
    "ConfigError",
    # Models
    "ConfigLocation",
    # Loaders
    "get_version",
    "load_config_file",
    "load_template",
    "load_yaml_file",
    "parse_yaml_text",
]
