"""Common interface for test-declaration dialects."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from testlink.model.entities import (
    CrossRefEntry,
    Dialect,
    PlaceholderEntry,
    ProductionUnit,
    TestUnit,
)
from testlink.php.source import PhpSource


@dataclass(slots=True)
class Extraction:
    """Records extracted from one file."""

    production: list[ProductionUnit] = field(default_factory=list)
    tests: list[TestUnit] = field(default_factory=list)
    forward_relations: list[tuple[str, str]] = field(default_factory=list)  # (method, test)
    placeholders: list[PlaceholderEntry] = field(default_factory=list)
    cross_refs: list[CrossRefEntry] = field(default_factory=list)
    classes: set[str] = field(default_factory=set)


class DialectAdapter(Protocol):
    """Extraction and text operations for one test-declaration syntax.

    Every text operation re-locates its test in the text it is given, so
    several operations can be folded over one file buffer in sequence.
    """

    dialect: Dialect

    def supports(self, source: PhpSource) -> bool:
        """Whether a test file is written in this dialect."""
        ...

    def extract(self, source: PhpSource, class_name: str) -> Extraction:
        """Extract test declarations, their links and placeholders.

        ``class_name`` is the class a file without its own class maps to.
        """
        ...

    def inject_links(
        self, text: str, test: TestUnit, methods: list[str], *, with_coverage: bool
    ) -> str:
        """Add link declarations for ``methods`` that the test does not carry yet."""
        ...

    def replace_placeholder(
        self, text: str, test: TestUnit, placeholder: str, methods: list[str]
    ) -> str:
        """Swap the placeholder marker for one link declaration per method.

        An empty ``methods`` list removes the marker.
        """
        ...

    def remove_links(self, text: str, test: TestUnit, methods: list[str]) -> str:
        """Remove link declarations that target ``methods``."""
        ...


def class_from_test_path(path: Path, test_root: Path, namespace: str = "Tests") -> str:
    """Derive a class name from a test file path (PSR-4 style).

    Examples:
        tests/Unit/UserServiceTest.php -> Tests\\Unit\\UserServiceTest
    """
    try:
        relative = path.with_suffix("").relative_to(test_root)
    except ValueError:
        relative = Path(path.stem)
    parts = [namespace, *relative.parts] if namespace else list(relative.parts)
    return "\\".join(parts)
