"""Pytest configuration and fixtures for confsync tests."""

from pathlib import Path

import pytest

TEMPLATE_V2 = """\
# Application settings
ver: 2

server:
  host: localhost  # bind address
  port: 8080       # listen port
  debug: false

account:
  email: 'admin@example.com'  # contact
  name: Admin

# Feature flags
tags: [alpha, beta]
timeout: 30
"""

CONFIG_V1 = """\
ver: 1
server:
  host: 0.0.0.0
  port: 9000
account:
  name: Alice
timeout: 60
legacy: true
"""

MIGRATED_V1_TO_V2 = """\
# Application settings
ver: 2

server:
  host: 0.0.0.0  # bind address
  port: 9000       # listen port
  debug: false

account:
  email: 'admin@example.com'  # contact
  name: Alice

# Feature flags
tags: [alpha, beta]
timeout: 60
"""


@pytest.fixture(autouse=True)
def reset_store_singleton():
    """Reset the default ConfigStore before and after each test.

    This ensures tests don't leak registry entries between each other.
    """
    from confsync.core.store import _reset_store

    _reset_store()
    yield
    _reset_store()


@pytest.fixture
def template_text() -> str:
    """Version 2 default template."""
    return TEMPLATE_V2


@pytest.fixture
def template_file(tmp_path: Path, template_text: str) -> Path:
    """Write the default template to tmp_path/defaults/config.yaml."""
    path = tmp_path / "defaults" / "config.yaml"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(template_text)
    return path


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    """Active config location (not created)."""
    return tmp_path / "user" / "config.yaml"


@pytest.fixture
def stale_config_file(config_path: Path) -> Path:
    """Active config at version 1 with user overrides and an extra key."""
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(CONFIG_V1)
    return config_path


@pytest.fixture
def stale_config_text() -> str:
    """Contents of stale_config_file."""
    return CONFIG_V1


@pytest.fixture
def migrated_text() -> str:
    """Expected config after migrating stale_config_file to version 2."""
    return MIGRATED_V1_TO_V2
