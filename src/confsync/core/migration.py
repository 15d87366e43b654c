"""Version-gated migration of the active config to a newer template.

A config is Stale when the template's ``ver`` is greater than the
config's (a missing config version counts as 0) and Current otherwise.
Migrating a Stale config:

1. merges the user's values over the template defaults (version pinned),
2. renders the merged tree through the *template's* layout,
3. copies the existing file to ``<config>.backup``,
4. writes the rendered text over the config.

The backup is always taken before the config is overwritten; if it cannot
be created the config is left untouched. A Current config is never
rewritten, so migration is idempotent.
"""

import logging
from pathlib import Path
from typing import Any

from confsync.core.config.loaders import get_version
from confsync.core.exceptions import WriteError
from confsync.core.io import PersistenceAdapter
from confsync.core.merge import merge_trees
from confsync.core.writer import TemplateWriter, WriteResult, render_lines

__all__ = ["VersionMigrator"]

logger = logging.getLogger(__name__)


class VersionMigrator:
    """Upgrade an active config whose version is behind the template.

    Attributes:
        backup_path: Where the pre-migration file is copied.

    """

    def __init__(
        self,
        writer: TemplateWriter,
        adapter: PersistenceAdapter,
        backup_path: Path,
        log: logging.Logger | None = None,
    ) -> None:
        self._writer = writer
        self._adapter = adapter
        self.backup_path = backup_path
        self._log = log or logger

    @staticmethod
    def needs_migration(default: dict[str, Any], current: dict[str, Any] | None) -> bool:
        """Return True when the template version is newer than the config's."""
        return get_version(default) > get_version(current)

    def migrate(
        self,
        default: dict[str, Any],
        current: dict[str, Any] | None,
    ) -> tuple[dict[str, Any] | None, WriteResult | None]:
        """Migrate current to the template's version if it is stale.

        Never raises: failures are logged and the current tree is returned
        unchanged together with a failed WriteResult.

        Args:
            default: Tree parsed from the template.
            current: Tree parsed from the active config.

        Returns:
            Tuple of (tree, result). When no migration was needed, tree is
            current and result is None. On success tree is the merged tree.

        """
        if not self.needs_migration(default, current):
            return current, None

        config_path = self._writer.config_path
        self._log.warning(
            "Updating config from version %d to %d",
            get_version(current),
            get_version(default),
        )

        merged = merge_trees(default, current)

        try:
            content = render_lines(self._writer.template_lines(), merged, self._log)
        except OSError as e:
            self._log.error("Failed to read template %s: %s", self._writer.template_path, e)
            return current, WriteResult.failure(config_path, e)

        try:
            self._adapter.copy(config_path, self.backup_path)
        except OSError as e:
            self._log.error(
                "Failed to back up %s to %s, config left unchanged: %s",
                config_path,
                self.backup_path,
                e,
            )
            return current, WriteResult.failure(config_path, e)
        self._log.info("Backup created at: %s", self.backup_path)

        try:
            self._writer.persist(content)
        except WriteError as e:
            self._log.error("Failed to write migrated config: %s", e)
            return current, WriteResult(
                ok=False, path=config_path, error=str(e), backup_path=self.backup_path
            )

        self._log.info("Config file updated successfully")
        return merged, WriteResult(ok=True, path=config_path, backup_path=self.backup_path)
