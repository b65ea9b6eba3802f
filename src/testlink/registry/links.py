"""In-memory bidirectional link graph.

A registry is built fresh for every run and passed explicitly through the
scan, validate and plan steps. One registry holds the links of one
registration source; ``merged`` combines several for read-only queries.
"""

from __future__ import annotations

from collections import defaultdict

from testlink.model.entities import Link, LinkSource


class LinkRegistry:
    """Links indexed by production member and by test, plus forward relations.

    Registering the same (test, method) pair again updates the existing edge
    in place. The coverage flag follows the most recent registration.
    """

    def __init__(self, source: LinkSource = LinkSource.ANNOTATION) -> None:
        self.source = source
        # method -> tests, test -> methods; insertion-ordered, no duplicates
        self._by_method: dict[str, dict[str, None]] = defaultdict(dict)
        self._by_test: dict[str, dict[str, None]] = defaultdict(dict)
        self._coverage: dict[tuple[str, str], bool] = {}
        # method -> tests named by #[TestedBy]
        self._forward: dict[str, dict[str, None]] = defaultdict(dict)

    def register_link(self, test: str, method: str, with_coverage: bool = True) -> None:
        self._by_method[method][test] = None
        self._by_test[test][method] = None
        self._coverage[(test, method)] = with_coverage

    def register_forward_relation(self, method: str, test: str) -> None:
        self._forward[method][test] = None

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def tests_for(self, method: str) -> list[str]:
        return list(self._by_method.get(method, ()))

    def methods_for(self, test: str) -> list[str]:
        return list(self._by_test.get(test, ()))

    def forward_relations_for(self, method: str) -> list[str]:
        return list(self._forward.get(method, ()))

    def forward_relations(self) -> list[tuple[str, str]]:
        """All ``(method, test)`` forward relations."""
        return [(m, t) for m, tests in self._forward.items() for t in tests]

    def has_link(self, test: str, method: str) -> bool:
        return (test, method) in self._coverage

    def has_forward_relation(self, method: str, test: str) -> bool:
        return test in self._forward.get(method, ())

    def has_method(self, method: str) -> bool:
        return bool(self._by_method.get(method))

    def has_test(self, test: str) -> bool:
        return bool(self._by_test.get(test))

    def with_coverage(self, test: str, method: str) -> bool:
        return self._coverage.get((test, method), True)

    def all_methods(self) -> list[str]:
        return [m for m, tests in self._by_method.items() if tests]

    def all_tests(self) -> list[str]:
        return [t for t, methods in self._by_test.items() if methods]

    def links(self) -> list[Link]:
        return [
            Link(test=test, method=method, with_coverage=coverage, source=self.source)
            for (test, method), coverage in self._coverage.items()
        ]

    def pairs(self) -> set[tuple[str, str]]:
        """``(test, method)`` pairs."""
        return set(self._coverage)

    @property
    def count(self) -> int:
        return len(self._coverage)

    @classmethod
    def merged(cls, *registries: LinkRegistry) -> LinkRegistry:
        """Union of several registries. Later registries win on the coverage flag."""
        result = cls()
        for registry in registries:
            for (test, method), coverage in registry._coverage.items():
                result.register_link(test, method, coverage)
            for method, test in registry.forward_relations():
                result.register_forward_relation(method, test)
        return result

    def __repr__(self) -> str:
        return f"LinkRegistry(source={self.source.value!r}, links={self.count})"
