"""Pydantic models describing where a managed configuration lives."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from confsync.core.config.constants import BACKUP_SUFFIX

__all__ = ["ConfigLocation"]


class ConfigLocation(BaseModel):
    """Name and file paths bound to one managed configuration.

    Attributes:
        name: Registry name of the configuration.
        default_path: Shipped default template (source of layout and defaults).
        config_path: User-editable active config file.

    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Registry name")
    default_path: Path = Field(..., description="Path to the default template")
    config_path: Path = Field(..., description="Path to the active config file")

    @field_validator("default_path", "config_path", mode="after")
    @classmethod
    def _expand_user(cls, value: Path) -> Path:
        return value.expanduser()

    @property
    def backup_path(self) -> Path:
        """Sibling path holding the pre-migration copy of the config."""
        return Path(f"{self.config_path}{BACKUP_SUFFIX}")
