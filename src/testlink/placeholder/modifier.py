"""Rewrites placeholder markers into real links.

Actions are grouped per (id, member) so each marker is replaced once by the
full list of its counterparts: a production marker gets one forward
relation per test, a test marker one link per production member. ``@@``
ids drop the marker and write ``@see`` cross-references instead.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from testlink.comments.editor import add_cross_refs
from testlink.core.logging import get_logger
from testlink.core.patch import EditKind, PatchResult, TextEdit, Transform, apply_edits
from testlink.model.entities import (
    AnnotatedTest,
    ChainedTest,
    Dialect,
    PlaceholderEntry,
    TestUnit,
    split_identifier,
)
from testlink.placeholder.models import PlaceholderAction
from testlink.syntax import adapter_for, replace_forward_placeholder

log = get_logger(__name__)


def declaration_for(entry: PlaceholderEntry) -> TestUnit:
    """The test declaration a test-role entry sits on."""
    variant = ChainedTest if entry.dialect is Dialect.CHAINING else AnnotatedTest
    return variant(class_name=entry.class_name, name=entry.member, path=entry.path, line=entry.line)


def _production_transform(
    method_id: str, placeholder: str, tests: list[str], *, cross_ref: bool
) -> Transform:
    member = split_identifier(method_id)[1] or ""

    def transform(text: str) -> str:
        if cross_ref:
            text = replace_forward_placeholder(text, method_id, placeholder, [])
            return add_cross_refs(text, member, [f"\\{t}" for t in tests]).text
        return replace_forward_placeholder(text, method_id, placeholder, tests)

    return transform


def _test_transform(
    test: TestUnit, placeholder: str, methods: list[str], *, cross_ref: bool
) -> Transform:
    adapter = adapter_for(test)
    cross_ref = cross_ref and test.supports_cross_refs

    def transform(text: str) -> str:
        if cross_ref:
            text = adapter.replace_placeholder(text, test, placeholder, [])
            return add_cross_refs(text, test.name, [f"\\{m}" for m in methods]).text
        return adapter.replace_placeholder(text, test, placeholder, methods)

    return transform


class PlaceholderModifier:
    """Turns resolved actions into text edits and applies them."""

    def plan(self, actions: Iterable[PlaceholderAction]) -> list[TextEdit]:
        actions = list(actions)
        tests_by_member: dict[tuple[str, str], list[str]] = {}
        methods_by_test: dict[tuple[str, str], list[str]] = {}
        by_member: dict[tuple[str, str], PlaceholderAction] = {}
        by_test: dict[tuple[str, str], PlaceholderAction] = {}
        for action in actions:
            key = (action.placeholder, action.production_identifier)
            tests = tests_by_member.setdefault(key, [])
            if action.test_identifier not in tests:
                tests.append(action.test_identifier)
            by_member.setdefault(key, action)

            test_key = (action.placeholder, action.test_identifier)
            methods = methods_by_test.setdefault(test_key, [])
            if action.production_identifier not in methods:
                methods.append(action.production_identifier)
            by_test.setdefault(test_key, action)

        edits = []
        for (placeholder, method_id), tests in tests_by_member.items():
            action = by_member[(placeholder, method_id)]
            edits.append(
                TextEdit(
                    path=action.production_path,
                    kind=EditKind.REPLACE_PLACEHOLDER,
                    member=method_id,
                    targets=tuple(tests),
                    transform=_production_transform(
                        method_id, placeholder, tests, cross_ref=action.production_uses_cross_ref
                    ),
                )
            )
        for (placeholder, test_id), methods in methods_by_test.items():
            action = by_test[(placeholder, test_id)]
            test = declaration_for(action.test)
            edits.append(
                TextEdit(
                    path=action.test_path,
                    kind=EditKind.REPLACE_PLACEHOLDER,
                    member=test_id,
                    targets=tuple(methods),
                    transform=_test_transform(
                        test, placeholder, methods, cross_ref=action.test_uses_cross_ref
                    ),
                )
            )
        log.debug("placeholder_edits_planned", actions=len(actions), edits=len(edits))
        return edits

    def apply(
        self,
        actions: Iterable[PlaceholderAction],
        *,
        dry_run: bool = False,
        root: Path | None = None,
    ) -> PatchResult:
        return apply_edits(self.plan(actions), dry_run=dry_run, root=root)
