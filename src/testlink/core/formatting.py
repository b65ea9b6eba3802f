"""Summary formatting utilities for consistent terminal output."""

from __future__ import annotations

from pathlib import Path


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Return grammatically correct singular/plural form.

    Args:
        count: The number of items
        singular: Singular form (e.g., "file")
        plural: Plural form (default: singular + "s")

    Returns:
        Formatted string like "1 file" or "3 files"
    """
    if plural is None:
        plural = singular + "s"
    word = singular if count == 1 else plural
    return f"{count} {word}"


def display_path(path: str | Path, root: Path | None = None) -> str:
    """Render a path relative to the project root when it lies inside it.

    Examples:
        /repo/src/User.php (root=/repo) -> src/User.php
        /elsewhere/User.php (root=/repo) -> /elsewhere/User.php
    """
    p = Path(path)
    if root is None:
        return p.as_posix()
    try:
        return p.relative_to(root).as_posix()
    except ValueError:
        return p.as_posix()


def format_path_list(paths: list[str], *, max_shown: int = 3) -> str:
    """Format a list of paths, collapsing the tail into "+N more".

    Examples:
        ["a.php"] -> "a.php"
        ["a.php", "b.php", "c.php", "d.php"] -> "a.php, b.php, +2 more"
    """
    if not paths:
        return ""
    if len(paths) <= max_shown:
        return ", ".join(paths)
    return ", ".join(paths[:2]) + f", +{len(paths) - 2} more"
