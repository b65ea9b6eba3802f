"""Tests for core/formatting.py."""

from __future__ import annotations

from pathlib import Path

from testlink.core.formatting import display_path, format_path_list, pluralize


class TestPluralize:
    """Tests for pluralize."""

    def test_singular(self) -> None:
        assert pluralize(1, "file") == "1 file"

    def test_plural(self) -> None:
        assert pluralize(0, "file") == "0 files"
        assert pluralize(3, "link") == "3 links"

    def test_custom_plural(self) -> None:
        assert pluralize(2, "entry", "entries") == "2 entries"


class TestDisplayPath:
    """Tests for display_path."""

    def test_relative_inside_root(self, tmp_path: Path) -> None:
        assert display_path(tmp_path / "src" / "A.php", tmp_path) == "src/A.php"

    def test_absolute_outside_root(self, tmp_path: Path) -> None:
        other = Path("/elsewhere/A.php")
        assert display_path(other, tmp_path) == "/elsewhere/A.php"

    def test_without_root(self) -> None:
        assert display_path("src/A.php") == "src/A.php"


class TestFormatPathList:
    """Tests for format_path_list."""

    def test_empty(self) -> None:
        assert format_path_list([]) == ""

    def test_short_list(self) -> None:
        assert format_path_list(["a.php", "b.php"]) == "a.php, b.php"

    def test_collapses_tail(self) -> None:
        paths = ["a.php", "b.php", "c.php", "d.php"]
        assert format_path_list(paths) == "a.php, b.php, +2 more"
