"""Consistency checks over link registries."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from testlink.core.logging import get_logger
from testlink.registry.links import LinkRegistry

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class LinkPair:
    """A (test, method) pair named by a finding."""

    test: str
    method: str

    def to_dict(self) -> dict[str, str]:
        return {"test": self.test, "method": self.method}


@dataclass(slots=True)
class ValidationResult:
    """Outcome of ``LinkValidator.validate`` and ``validate_bidirectional``.

    ``duplicates`` are pairs registered by both dialects. A missing forward
    relation is a test link whose method does not name the test back; an
    orphan forward relation names a test that never links to the method.
    """

    duplicates: list[LinkPair] = field(default_factory=list)
    missing_forward_relation: list[LinkPair] = field(default_factory=list)
    orphan_forward_relation: list[LinkPair] = field(default_factory=list)
    total_links: int = 0

    @property
    def valid(self) -> bool:
        return not self.duplicates

    @property
    def in_sync(self) -> bool:
        return not self.missing_forward_relation and not self.orphan_forward_relation

    @property
    def missing_count(self) -> int:
        return len(self.missing_forward_relation)

    @property
    def orphan_count(self) -> int:
        return len(self.orphan_forward_relation)

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "duplicates": [p.to_dict() for p in self.duplicates],
            "missingForwardRelation": [p.to_dict() for p in self.missing_forward_relation],
            "orphanForwardRelation": [p.to_dict() for p in self.orphan_forward_relation],
            "totalLinks": self.total_links,
        }


class LinkValidator:
    """Stateless checks; every method takes the registries it inspects."""

    def validate(self, annotation: LinkRegistry, chaining: LinkRegistry) -> ValidationResult:
        """Report pairs registered by both the annotation and chaining dialects."""
        chained = chaining.pairs()
        duplicates = [
            LinkPair(test=test, method=method)
            for test, method in sorted(annotation.pairs() & chained)
        ]
        result = ValidationResult(
            duplicates=duplicates,
            total_links=annotation.count + chaining.count,
        )
        log.debug("links_validated", total=result.total_links, duplicates=len(duplicates))
        return result

    def validate_bidirectional(self, registry: LinkRegistry) -> ValidationResult:
        """Compare test links against forward relations in one pass each way."""
        links = registry.pairs()
        forward = {(test, method) for method, test in registry.forward_relations()}

        missing = sorted(links - forward, key=lambda p: (p[1], p[0]))
        orphans = sorted(forward - links, key=lambda p: (p[1], p[0]))
        result = ValidationResult(
            missing_forward_relation=[LinkPair(test=t, method=m) for t, m in missing],
            orphan_forward_relation=[LinkPair(test=t, method=m) for t, m in orphans],
            total_links=registry.count,
        )
        log.debug(
            "bidirectional_validated",
            missing=result.missing_count,
            orphans=result.orphan_count,
        )
        return result
