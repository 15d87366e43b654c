"""Shared constants for configuration modules.

This module provides constants used across config submodules to avoid
duplication and circular import issues.
"""

# Reserved key holding the template/config version number
VERSION_KEY: str = "ver"

# Suffix appended to the config path for the pre-migration copy
BACKUP_SUFFIX: str = ".backup"

MAX_CONFIG_SIZE: int = 1_048_576  # 1MB - protection against YAML bombs
