"""Tests for atomic_write and LocalFileAdapter."""

from pathlib import Path
from unittest.mock import patch

import pytest

from confsync.core.io import LocalFileAdapter, PersistenceAdapter, atomic_write


class TestAtomicWrite:
    """Tests for atomic_write."""

    def test_writes_content_and_creates_parent(self, tmp_path: Path) -> None:
        path = tmp_path / "a" / "b" / "config.yaml"
        atomic_write(path, "x: 1\n")
        assert path.read_text() == "x: 1\n"

    def test_newlines_preserved(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        atomic_write(path, "a: 1\nb: 2")
        assert path.read_bytes() == b"a: 1\nb: 2"

    def test_failure_cleans_up_temp_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("old")

        with patch("confsync.core.io.os.replace", side_effect=OSError("boom")):
            with pytest.raises(OSError, match="boom"):
                atomic_write(path, "new")

        assert path.read_text() == "old"
        assert [p.name for p in tmp_path.iterdir()] == ["config.yaml"]


class TestLocalFileAdapter:
    """Tests for LocalFileAdapter."""

    def test_satisfies_protocol(self) -> None:
        assert isinstance(LocalFileAdapter(), PersistenceAdapter)

    def test_round_trip(self, tmp_path: Path) -> None:
        adapter = LocalFileAdapter()
        path = tmp_path / "c.yaml"

        assert not adapter.exists(path)
        adapter.write_text(path, "a: 1\n")
        assert adapter.exists(path)
        assert adapter.read_text(path) == "a: 1\n"

    def test_read_limit(self, tmp_path: Path) -> None:
        path = tmp_path / "c.yaml"
        path.write_text("abcdef")
        assert LocalFileAdapter().read_text(path, 3) == "abc"

    def test_copy_is_byte_exact(self, tmp_path: Path) -> None:
        src = tmp_path / "src.yaml"
        src.write_bytes(b"# c\r\na: 1\n")
        dest = tmp_path / "out" / "dest.yaml"

        LocalFileAdapter().copy(src, dest)

        assert dest.read_bytes() == b"# c\r\na: 1\n"

    def test_copy_missing_source_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            LocalFileAdapter().copy(tmp_path / "missing", tmp_path / "dest")

    def test_modified_time(self, tmp_path: Path) -> None:
        adapter = LocalFileAdapter()
        path = tmp_path / "c.yaml"
        assert adapter.modified_time(path) is None
        path.write_text("a: 1")
        assert adapter.modified_time(path) == path.stat().st_mtime
