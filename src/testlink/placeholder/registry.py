"""Placeholder entries grouped by id."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path

from testlink.model.entities import PlaceholderEntry, Role


@dataclass(frozen=True, slots=True)
class PlaceholderSummary:
    placeholders: int
    production_entries: int
    test_entries: int


class PlaceholderRegistry:
    """Production and test entries per placeholder id.

    Ids are kept exactly as written, so ``@A`` and ``@@A`` are separate
    groups.
    """

    def __init__(self) -> None:
        self._production: dict[str, list[PlaceholderEntry]] = defaultdict(list)
        self._tests: dict[str, list[PlaceholderEntry]] = defaultdict(list)

    def register(self, entry: PlaceholderEntry) -> None:
        bucket = self._production if entry.role is Role.PRODUCTION else self._tests
        bucket[entry.placeholder].append(entry)

    def production_entries(self, placeholder: str) -> list[PlaceholderEntry]:
        return list(self._production.get(placeholder, []))

    def test_entries(self, placeholder: str) -> list[PlaceholderEntry]:
        return list(self._tests.get(placeholder, []))

    def has(self, placeholder: str) -> bool:
        return placeholder in self._production or placeholder in self._tests

    def ids(self) -> list[str]:
        """All ids, sorted."""
        return sorted(set(self._production) | set(self._tests))

    def touching(self, scope: Path) -> PlaceholderRegistry:
        """Every id with at least one entry under ``scope``, with all of its entries."""
        scoped = PlaceholderRegistry()
        ids = {
            placeholder
            for bucket in (self._production, self._tests)
            for placeholder, entries in bucket.items()
            if any(e.path.is_relative_to(scope) for e in entries)
        }
        for placeholder in sorted(ids):
            for entry in [*self._production.get(placeholder, []), *self._tests.get(placeholder, [])]:
                scoped.register(entry)
        return scoped

    def summary(self) -> PlaceholderSummary:
        return PlaceholderSummary(
            placeholders=len(self.ids()),
            production_entries=sum(len(v) for v in self._production.values()),
            test_entries=sum(len(v) for v in self._tests.values()),
        )

    def __len__(self) -> int:
        return len(self.ids())
