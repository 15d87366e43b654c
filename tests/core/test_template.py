"""Tests for template scanning and the per-path template cache."""

from pathlib import Path

from confsync.core.template import (
    RawLine,
    SubKey,
    TemplateCache,
    TopKey,
    declared_keys,
    scan_template,
)


class TestScanTemplate:
    """Tests for scan_template line classification."""

    def test_classifies_top_sub_and_raw(self) -> None:
        """Top keys, indented sub-keys and other lines are told apart."""
        text = "# header\nserver:\n  port: 80\n\ntimeout: 5"
        assert scan_template(text) == [
            RawLine("# header"),
            TopKey("server"),
            SubKey("port", indent="  "),
            RawLine(""),
            TopKey("timeout"),
        ]

    def test_sub_key_before_any_top_key_is_raw(self) -> None:
        """Indented key with no parent context stays verbatim."""
        lines = scan_template("  orphan: 1\nroot: 2")
        assert lines == [RawLine("  orphan: 1"), TopKey("root")]

    def test_captures_sub_key_comment_with_spacing(self) -> None:
        """Trailing comment keeps the whitespace before '#'."""
        (_, sub) = scan_template("a:\n  port: 8080     # listen port")
        assert sub == SubKey("port", indent="  ", trailing_comment="     # listen port")

    def test_captures_indent_as_written(self) -> None:
        """Four-space and tab indentation are preserved."""
        lines = scan_template("a:\n    x: 1\n\ty: 2")
        assert lines[1] == SubKey("x", indent="    ")
        assert lines[2] == SubKey("y", indent="\t")

    def test_top_key_comment(self) -> None:
        """Top-level keys keep their trailing comment too."""
        assert scan_template("server:  # network")[0] == TopKey(
            "server", trailing_comment="  # network"
        )

    def test_hash_inside_quotes_is_not_a_comment(self) -> None:
        """A ' #' inside a quoted value is part of the value."""
        (_, sub) = scan_template("a:\n  title: 'one #two'  # real")
        assert sub.trailing_comment == "  # real"

    def test_hash_without_leading_space_is_not_a_comment(self) -> None:
        """'#' glued to the value is part of the value."""
        (_, sub) = scan_template("a:\n  color: fff#000")
        assert sub.trailing_comment == ""

    def test_hyphenated_keys(self) -> None:
        """Keys may contain hyphens."""
        lines = scan_template("log-level: info\nx:\n  max-size: 3")
        assert lines[0] == TopKey("log-level")
        assert lines[2] == SubKey("max-size", indent="  ")

    def test_comments_and_list_items_are_raw(self) -> None:
        """Comment lines and block list items are not keys."""
        text = "items:\n  - one\n  # note: here\n# top: comment"
        lines = scan_template(text)
        assert lines[1:] == [
            RawLine("  - one"),
            RawLine("  # note: here"),
            RawLine("# top: comment"),
        ]

    def test_trailing_newline_yields_empty_raw_line(self) -> None:
        """Final newline is represented so it survives rendering."""
        assert scan_template("a: 1\n")[-1] == RawLine("")

    def test_deterministic(self, template_text: str) -> None:
        """Scanning the same text twice gives identical results."""
        assert scan_template(template_text) == scan_template(template_text)

    def test_declared_keys(self, template_text: str) -> None:
        """Top-level keys are listed in template order."""
        assert declared_keys(scan_template(template_text)) == [
            "ver",
            "server",
            "account",
            "tags",
            "timeout",
        ]


class _CountingAdapter:
    """Adapter stub counting reads with a controllable mtime."""

    def __init__(self, text: str, mtime: float | None = 1.0) -> None:
        self.text = text
        self.mtime = mtime
        self.reads = 0

    def read_text(self, path: Path) -> str:
        self.reads += 1
        return self.text

    def modified_time(self, path: Path) -> float | None:
        return self.mtime


class TestTemplateCache:
    """Tests for TemplateCache invalidation."""

    def test_reuses_scan_while_mtime_unchanged(self) -> None:
        """Second lookup does not reread the file."""
        adapter = _CountingAdapter("a: 1")
        cache = TemplateCache(adapter)  # type: ignore[arg-type]

        first = cache.get(Path("t.yaml"))
        second = cache.get(Path("t.yaml"))

        assert first is second
        assert adapter.reads == 1
        assert Path("t.yaml") in cache

    def test_rescans_when_mtime_changes(self) -> None:
        """Changed modification time triggers a rescan."""
        adapter = _CountingAdapter("a: 1")
        cache = TemplateCache(adapter)  # type: ignore[arg-type]
        cache.get(Path("t.yaml"))

        adapter.text = "b: 2"
        adapter.mtime = 2.0
        lines = cache.get(Path("t.yaml"))

        assert lines == [TopKey("b")]
        assert adapter.reads == 2

    def test_no_mtime_always_rescans(self) -> None:
        """Without a modification time nothing is cached."""
        adapter = _CountingAdapter("a: 1", mtime=None)
        cache = TemplateCache(adapter)  # type: ignore[arg-type]
        cache.get(Path("t.yaml"))
        cache.get(Path("t.yaml"))

        assert adapter.reads == 2
        assert Path("t.yaml") not in cache

    def test_invalidate(self) -> None:
        """Invalidated entries are rescanned."""
        adapter = _CountingAdapter("a: 1")
        cache = TemplateCache(adapter)  # type: ignore[arg-type]
        cache.get(Path("t.yaml"))

        cache.invalidate(Path("t.yaml"))
        cache.get(Path("t.yaml"))
        cache.invalidate()

        assert adapter.reads == 2
        assert Path("t.yaml") not in cache
