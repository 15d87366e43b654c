"""Render a value tree through the template layout and persist it.

The writer walks the scanned template lines and substitutes values from a
tree, so the output keeps the template's ordering, blank lines and
comments no matter how the tree orders its keys.

Formatting rules:
    - booleans render as ``true``/``false``
    - ``None`` (and the empty string) render as a bare ``key:``
    - lists and nested mappings render as single-line YAML flow collections
    - any other scalar renders via ``str()``
    - a scalar whose text contains ``@`` is wrapped in single quotes

The ``@`` rule is the only quoting the engine applies; values are not
made generally YAML-safe.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from confsync.core.exceptions import WriteError
from confsync.core.io import PersistenceAdapter
from confsync.core.template import (
    RawLine,
    SubKey,
    TemplateCache,
    TemplateLine,
    TopKey,
    declared_keys,
)

__all__ = [
    "WriteResult",
    "format_value",
    "render_lines",
    "TemplateWriter",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WriteResult:
    """Outcome of a write, reset or migration.

    Failures are never raised to the caller; they are logged and reported
    here instead. A WriteResult is truthy when the operation succeeded.

    Attributes:
        ok: Whether the destination was written.
        path: Destination path.
        error: Error description when ok is False.
        backup_path: Backup created before writing, if any.

    """

    ok: bool
    path: Path
    error: str | None = None
    backup_path: Path | None = None

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def failure(cls, path: Path, error: BaseException | str) -> WriteResult:
        return cls(ok=False, path=path, error=str(error))


def _quote_scalar(text: str) -> str:
    """Single-quote text when it contains ``@`` (a reserved YAML indicator)."""
    if "@" not in text:
        return text
    return "'" + text.replace("'", "''") + "'"


def format_value(value: Any) -> str:
    """Format a tree value for interpolation after ``key: ``."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, dict)):
        dumped = yaml.safe_dump(
            value,
            default_flow_style=True,
            sort_keys=False,
            allow_unicode=True,
            width=float("inf"),
        )
        return dumped.strip()
    return _quote_scalar(str(value))


def _key_line(key: str, value: Any, indent: str = "") -> str:
    formatted = format_value(value)
    if not formatted:
        return f"{indent}{key}:"
    return f"{indent}{key}: {formatted}"


def render_lines(
    lines: list[TemplateLine],
    tree: dict[str, Any],
    log: logging.Logger | None = None,
) -> str:
    """Render tree through the template layout.

    Args:
        lines: Scanned template lines (layout source).
        tree: Values to substitute.
        log: Logger for per-key debug output (module logger by default).

    Returns:
        Rendered text, lines joined with ``\\n``.

    """
    log = log or logger
    output: list[str] = []
    current_key: str | None = None

    for line in lines:
        if isinstance(line, TopKey):
            current_key = line.key
            value = tree.get(line.key)
            log.debug("Processing key: %s, value: %r", line.key, value)
            if isinstance(value, dict) and value:
                output.append(f"{line.key}:{line.trailing_comment}")
            else:
                output.append(_key_line(line.key, value) + line.trailing_comment)

        elif isinstance(line, SubKey):
            parent = tree.get(current_key) if current_key is not None else None
            if not isinstance(parent, dict) or line.key not in parent:
                log.debug("Dropping sub-key %s.%s (not in tree)", current_key, line.key)
                continue
            value = parent[line.key]
            log.debug("Processing subkey: %s.%s, value: %r", current_key, line.key, value)
            output.append(_key_line(line.key, value, line.indent) + line.trailing_comment)

        elif isinstance(line, RawLine):
            output.append(line.text)

    return "\n".join(output)


class TemplateWriter:
    """Write value trees to the active config using the template layout.

    Attributes:
        template_path: Default template (layout source).
        config_path: Active config file (destination).

    """

    def __init__(
        self,
        template_path: Path,
        config_path: Path,
        adapter: PersistenceAdapter,
        cache: TemplateCache | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        self.template_path = template_path
        self.config_path = config_path
        self._adapter = adapter
        self._cache = cache if cache is not None else TemplateCache(adapter)
        self._log = log or logger

    def template_lines(self) -> list[TemplateLine]:
        """Return the scanned template.

        Raises:
            OSError: If the template cannot be read.

        """
        return self._cache.get(self.template_path)

    def render(self, tree: dict[str, Any]) -> str:
        """Render tree against the template without writing."""
        return render_lines(self.template_lines(), tree, self._log)

    def persist(self, content: str) -> None:
        """Write content to the config path.

        Raises:
            WriteError: If the adapter fails.

        """
        try:
            self._adapter.write_text(self.config_path, content)
        except OSError as e:
            raise WriteError(
                f"Cannot write config file {self.config_path}: {e}", self.config_path
            ) from e

    def write(self, tree: dict[str, Any]) -> WriteResult:
        """Render tree through the template and write it to the config path.

        Never raises: template read and write failures are logged and
        returned as a failed WriteResult.
        """
        try:
            lines = self.template_lines()
        except OSError as e:
            self._log.error("Failed to read template %s: %s", self.template_path, e)
            return WriteResult.failure(self.config_path, e)

        declared = set(declared_keys(lines))
        undeclared = [key for key in tree if key not in declared]
        if undeclared:
            self._log.warning(
                "Keys not declared in template %s will not be written: %s",
                self.template_path,
                ", ".join(undeclared),
            )

        content = render_lines(lines, tree, self._log)
        self._log.debug("New content to write (%d bytes):\n%s", len(content), content)

        try:
            self.persist(content)
        except WriteError as e:
            self._log.error("Failed to write config: %s", e)
            return WriteResult.failure(self.config_path, e)

        self._log.info("Config has been saved to %s", self.config_path)
        return WriteResult(ok=True, path=self.config_path)
