"""PHP file discovery under the configured production and test directories."""

from __future__ import annotations

import os
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from testlink.config.models import DiscoveryConfig


@dataclass
class DiscoveredFiles:
    """Files found under each configured root. Test roots are kept for namespacing."""

    production: list[Path] = field(default_factory=list)
    tests: list[tuple[Path, Path]] = field(default_factory=list)  # (file, test_root)


def walk_php_files(root: Path, exclude: Iterable[str]) -> list[Path]:
    """All ``*.php`` files under ``root``, pruning excluded directory names. Sorted."""
    if not root.is_dir():
        return []
    prune = set(exclude)
    found: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in prune)
        for filename in filenames:
            if filename.endswith(".php"):
                found.append(Path(dirpath) / filename)
    return sorted(found)


def discover(root: Path, config: DiscoveryConfig) -> DiscoveredFiles:
    result = DiscoveredFiles()
    seen: set[Path] = set()
    # Test roots claim their files first.
    for name in config.test_dirs:
        test_root = root / name
        for path in walk_php_files(test_root, config.exclude_dirs):
            if path not in seen:
                seen.add(path)
                result.tests.append((path, test_root))
    for name in config.production_dirs:
        for path in walk_php_files(root / name, config.exclude_dirs):
            if path not in seen:
                seen.add(path)
                result.production.append(path)
    return result
