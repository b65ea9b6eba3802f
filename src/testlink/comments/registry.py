"""Cross-reference entries collected from a scan."""

from __future__ import annotations

from collections import defaultdict

from testlink.model.entities import CrossRefEntry, Role, normalize_reference, split_identifier


class CrossRefRegistry:
    """``@see`` entries on production members and on tests, keyed by owning member."""

    def __init__(self) -> None:
        self._production: dict[str, list[CrossRefEntry]] = defaultdict(list)
        self._tests: dict[str, list[CrossRefEntry]] = defaultdict(list)

    def register(self, entry: CrossRefEntry) -> None:
        bucket = self._production if entry.context is Role.PRODUCTION else self._tests
        entries = bucket[entry.member]
        if any(e.normalized_reference == entry.normalized_reference for e in entries):
            return
        entries.append(entry)

    def production_refs(self, member: str) -> list[CrossRefEntry]:
        return list(self._production.get(member, []))

    def test_refs(self, member: str) -> list[CrossRefEntry]:
        return list(self._tests.get(member, []))

    def has_production_ref(self, member: str, target: str) -> bool:
        wanted = normalize_reference(target)
        return any(e.normalized_reference == wanted for e in self._production.get(member, []))

    def has_test_ref(self, member: str, target: str) -> bool:
        wanted = normalize_reference(target)
        return any(e.normalized_reference == wanted for e in self._tests.get(member, []))

    def all_entries(self) -> list[CrossRefEntry]:
        entries = [e for bucket in self._production.values() for e in bucket]
        entries.extend(e for bucket in self._tests.values() for e in bucket)
        return entries

    def find_orphans(
        self,
        *,
        valid_production: set[str],
        valid_tests: set[str],
        known_production_classes: set[str],
        known_test_classes: set[str],
    ) -> list[CrossRefEntry]:
        """Entries whose target no longer exists.

        A target only counts as gone when its class was scanned and the
        member is missing; references into classes the scan never saw are
        kept. Production comments are checked against tests, test comments
        against production members.
        """
        orphans = []
        for entry in self.all_entries():
            target = entry.normalized_reference
            class_name, member = split_identifier(target)
            if entry.context is Role.PRODUCTION:
                known, valid = known_test_classes, valid_tests
            else:
                known, valid = known_production_classes, valid_production
            if class_name not in known:
                continue
            if member is not None and target not in valid:
                orphans.append(entry)
        return orphans

    @property
    def count(self) -> int:
        return len(self.all_entries())
