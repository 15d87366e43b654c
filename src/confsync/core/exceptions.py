"""Custom exception hierarchy for confsync.

All confsync exceptions inherit from ConfsyncError so callers can catch
the whole family with a single except clause.
"""

__all__ = [
    "ConfsyncError",
    "ConfigError",
    "MissingNameError",
    "ConfigNotRegisteredError",
    "TemplateReadError",
    "ConfigReadError",
    "WriteError",
]


class ConfsyncError(Exception):
    """Base exception for all confsync errors."""


class ConfigError(ConfsyncError):
    """Configuration file or registry error."""


class MissingNameError(ConfigError):
    """Registry lookup or construction called with an empty name."""


class ConfigNotRegisteredError(ConfigError):
    """Registry lookup for a name that was never constructed.

    Raised when get_instance() is called for an unknown name without the
    template and config paths needed to build it.
    """


class TemplateReadError(ConfigError):
    """The default template could not be read or parsed.

    There is no fallback default, so this always propagates.
    """


class ConfigReadError(ConfigError):
    """The active config file could not be read or parsed."""


class WriteError(ConfigError):
    """Rendered content or backup could not be persisted.

    Raised internally around the persistence step and converted into a
    failed WriteResult at the write/reset/migrate boundary.

    Attributes:
        path: Destination that could not be written.

    """

    def __init__(self, message: str, path: object = None) -> None:
        super().__init__(message)
        self.path = path
