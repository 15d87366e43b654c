"""Template scanning: classify each line of a default template.

The default template is used twice: once as data (its parsed values are
the defaults) and once as layout. This module handles the layout side.
Every line is classified lexically as one of:

- TopKey: ``key:`` starting at column 0
- SubKey: indentation followed by ``key:``, only after a TopKey was seen
- RawLine: anything else (blank lines, comments, list items, ...)

The order of the classified lines is the authoritative layout for every
file the writer produces.

Usage:
    from confsync.core.template import scan_template

    lines = scan_template(path.read_text())
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from confsync.core.io import PersistenceAdapter

__all__ = [
    "TopKey",
    "SubKey",
    "RawLine",
    "TemplateLine",
    "scan_template",
    "declared_keys",
    "TemplateCache",
]

logger = logging.getLogger(__name__)

_TOP_KEY_RE = re.compile(r"^([\w-]+):(.*)$")
_SUB_KEY_RE = re.compile(r"^(\s+)([\w-]+):(.*)$")


@dataclass(frozen=True)
class TopKey:
    """Top-level ``key:`` declaration."""

    key: str
    trailing_comment: str = ""


@dataclass(frozen=True)
class SubKey:
    """Indented ``key:`` declaration; its parent is the preceding TopKey.

    Attributes:
        key: Sub-key name.
        indent: Leading whitespace exactly as written in the template.
        trailing_comment: Comment including the whitespace before ``#``,
            or an empty string.

    """

    key: str
    indent: str = "  "
    trailing_comment: str = ""


@dataclass(frozen=True)
class RawLine:
    """Line re-emitted verbatim."""

    text: str


TemplateLine = TopKey | SubKey | RawLine


def _split_comment(rest: str) -> tuple[str, str]:
    """Split the text after ``key:`` into (value, trailing comment).

    A comment starts at a ``#`` preceded by whitespace, outside a quoted
    value. The returned comment keeps the whitespace run before ``#``.
    """
    quote: str | None = None
    for i, ch in enumerate(rest):
        if quote:
            if ch == quote:
                quote = None
        elif ch in "'\"" and not rest[:i].strip():
            quote = ch
        elif ch == "#" and i > 0 and rest[i - 1] in " \t":
            start = len(rest[:i].rstrip(" \t"))
            return rest[:start], rest[start:]
    return rest, ""


def scan_template(text: str) -> list[TemplateLine]:
    """Classify every line of the template text.

    Pure and deterministic. Lines are split on ``\\n`` only, so a missing
    or present final newline survives a render round trip.

    Args:
        text: Raw template text.

    Returns:
        Classified lines in template order.

    """
    lines: list[TemplateLine] = []
    seen_top_key = False

    for line in text.split("\n"):
        top_match = _TOP_KEY_RE.match(line)
        if top_match:
            _, comment = _split_comment(top_match.group(2))
            lines.append(TopKey(key=top_match.group(1), trailing_comment=comment))
            seen_top_key = True
            continue

        sub_match = _SUB_KEY_RE.match(line)
        # Sub-keys need a parent context
        if sub_match and seen_top_key:
            _, comment = _split_comment(sub_match.group(3))
            lines.append(
                SubKey(
                    key=sub_match.group(2),
                    indent=sub_match.group(1),
                    trailing_comment=comment,
                )
            )
            continue

        lines.append(RawLine(text=line))

    return lines


def declared_keys(lines: list[TemplateLine]) -> list[str]:
    """Return the top-level keys a template declares, in order."""
    return [line.key for line in lines if isinstance(line, TopKey)]


class TemplateCache:
    """Scanned template lines cached per path.

    An entry is reused while the file's modification time is unchanged.
    When the adapter cannot report a modification time the template is
    rescanned on every request.

    Thread Safety:
        Not thread-safe; callers serialize access per store.

    """

    def __init__(self, adapter: PersistenceAdapter) -> None:
        self._adapter = adapter
        self._entries: dict[Path, tuple[float, list[TemplateLine]]] = {}

    def get(self, path: Path) -> list[TemplateLine]:
        """Return scanned lines for path, rescanning if the file changed.

        Raises:
            OSError: If the template cannot be read.

        """
        mtime = self._adapter.modified_time(path)
        cached = self._entries.get(path)
        if cached is not None and mtime is not None and cached[0] == mtime:
            logger.debug("Template cache hit for %s", path)
            return cached[1]

        logger.debug("Scanning template %s", path)
        lines = scan_template(self._adapter.read_text(path))
        if mtime is not None:
            self._entries[path] = (mtime, lines)
        return lines

    def invalidate(self, path: Path | None = None) -> None:
        """Drop one cached template, or all of them when path is None."""
        if path is None:
            self._entries.clear()
        else:
            self._entries.pop(path, None)

    def __contains__(self, path: object) -> bool:
        return path in self._entries
