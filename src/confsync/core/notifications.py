"""Fire-and-forget "config updated" notifications.

After a successful write or reset the store announces the change to an
optional notifier (another process, a UI, a reload hook). Notification is
never awaited and its failure never affects the write.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Protocol, runtime_checkable

__all__ = [
    "ConfigNotifier",
    "CallbackNotifier",
    "dispatch_config_updated",
]

logger = logging.getLogger(__name__)


@runtime_checkable
class ConfigNotifier(Protocol):
    """Receiver of config change announcements."""

    def config_updated(self, name: str, path: Path) -> None: ...


class CallbackNotifier:
    """ConfigNotifier that forwards to a plain callable.

    Example:
        >>> notifier = CallbackNotifier(lambda name, path: print(name))

    """

    def __init__(self, callback: Callable[[str, Path], None]) -> None:
        self._callback = callback

    def config_updated(self, name: str, path: Path) -> None:
        self._callback(name, path)


def dispatch_config_updated(
    notifier: ConfigNotifier | None,
    name: str,
    path: Path,
    log: logging.Logger | None = None,
) -> None:
    """Announce a config change. All errors are caught and logged - never raises."""
    if notifier is None:
        return
    log = log or logger
    try:
        notifier.config_updated(name, path)
        log.debug("Dispatched config-updated for %s", name)
    except Exception as e:
        log.warning("Config update notification for %s failed: %s", name, e)
