"""Pure sync planning: scan records in, ordered text edits out.

Nothing here touches the filesystem. Dry-run and apply both execute the
plan produced by ``plan_sync``, so they cannot disagree.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from testlink.comments.editor import EditResult, add_cross_refs, remove_cross_refs
from testlink.core.logging import get_logger
from testlink.core.patch import EditKind, TextEdit, Transform
from testlink.model.entities import Role, TestUnit, split_identifier
from testlink.scan.project import ProjectScan
from testlink.sync.models import SyncOptions, SyncPlan
from testlink.syntax import adapter_for, inject_forward_relations

log = get_logger(__name__)


def see_target(identifier: str) -> str:
    """``@see`` form of an identifier."""
    return "\\" + identifier.lstrip("\\")


def _within(path: Path, scope: Path | None) -> bool:
    return scope is None or path.is_relative_to(scope)


def _scope(scan: ProjectScan, options: SyncOptions) -> Path | None:
    if options.path is None:
        return None
    path = options.path if options.path.is_absolute() else scan.root / options.path
    return path.resolve()


def _append(groups: dict[str, list[str]], key: str, value: str) -> None:
    values = groups.setdefault(key, [])
    if value not in values:
        values.append(value)


# =============================================================================
# Transforms
# =============================================================================


def _inject_links(test: TestUnit, methods: list[str], with_coverage: bool) -> Transform:
    adapter = adapter_for(test)

    def transform(text: str) -> str:
        return adapter.inject_links(text, test, methods, with_coverage=with_coverage)

    return transform


def _remove_links(test: TestUnit, methods: list[str]) -> Transform:
    adapter = adapter_for(test)

    def transform(text: str) -> str:
        return adapter.remove_links(text, test, methods)

    return transform


def _inject_forward(method: str, tests: list[str]) -> Transform:
    def transform(text: str) -> str:
        return inject_forward_relations(text, method, tests)

    return transform


def _comment_edit(
    edit: Callable[[str, str, list[str]], EditResult], member: str, refs: list[str]
) -> Transform:
    def transform(text: str) -> str:
        return edit(text, member, refs).text

    return transform


# =============================================================================
# Planning steps
# =============================================================================


def plan_forward(scan: ProjectScan, options: SyncOptions, plan: SyncPlan) -> None:
    """Test-side links for forward relations the test does not declare yet."""
    scope = _scope(scan, options)
    missing: dict[str, list[str]] = {}
    for method, test_id in scan.forward_relations():
        unit = scan.find_production(method)
        if unit is None or not _within(unit.path, scope):
            continue
        test = scan.find_test(test_id)
        if test is None:
            plan.warnings.append(f"Test {test_id} named by {method} was not found")
            continue
        if not test.links_to(method):
            _append(missing, test_id, method)

    for test_id, methods in missing.items():
        test = scan.find_test(test_id)
        assert test is not None
        plan.edits.append(
            TextEdit(
                path=test.path,
                kind=EditKind.ADD_LINK,
                member=test_id,
                targets=tuple(methods),
                transform=_inject_links(test, methods, not options.link_only),
            )
        )


def plan_reverse(scan: ProjectScan, options: SyncOptions, plan: SyncPlan) -> dict[str, list[str]]:
    """Forward relations for test links the production member does not declare yet.

    Returns the relations added, by production member.
    """
    scope = _scope(scan, options)
    registry = scan.annotation
    missing: dict[str, list[str]] = {}
    for test in scan.tests:
        for link in test.links:
            if registry.has_forward_relation(link.method, test.identifier):
                continue
            unit = scan.find_production(link.method)
            if unit is None or not _within(unit.path, scope):
                continue
            _append(missing, link.method, test.identifier)

    for method, tests in missing.items():
        unit = scan.find_production(method)
        assert unit is not None
        plan.edits.append(
            TextEdit(
                path=unit.path,
                kind=EditKind.ADD_FORWARD_RELATION,
                member=method,
                targets=tuple(tests),
                transform=_inject_forward(method, tests),
            )
        )
    return missing


def plan_cross_refs(
    scan: ProjectScan, options: SyncOptions, plan: SyncPlan, added: dict[str, list[str]]
) -> None:
    """``@see`` lines on production members for every test they are related to."""
    scope = _scope(scan, options)
    wanted: dict[str, list[str]] = {}
    relations = [*scan.forward_relations(), *((m, t) for m, tests in added.items() for t in tests)]
    for method, test_id in relations:
        if scan.cross_refs.has_production_ref(method, see_target(test_id)):
            continue
        if scan.find_test(test_id) is None:
            continue
        unit = scan.find_production(method)
        if unit is None or not _within(unit.path, scope):
            continue
        _append(wanted, method, see_target(test_id))

    for method, refs in wanted.items():
        unit = scan.find_production(method)
        assert unit is not None
        plan.edits.append(
            TextEdit(
                path=unit.path,
                kind=EditKind.ADD_CROSS_REF,
                member=method,
                targets=tuple(refs),
                transform=_comment_edit(add_cross_refs, unit.member, refs),
            )
        )


def plan_prune(scan: ProjectScan, plan: SyncPlan) -> None:
    """Remove links and ``@see`` lines whose target member is gone.

    A target only counts as gone when its class was scanned; links into
    classes the scan never saw are kept.
    """
    production_ids = scan.production_ids()
    for test in scan.tests:
        orphans = []
        for link in test.links:
            class_name, member = split_identifier(link.method)
            if member is None or class_name not in scan.production_classes:
                continue
            if link.method not in production_ids:
                orphans.append(link.method)
        if orphans:
            plan.edits.append(
                TextEdit(
                    path=test.path,
                    kind=EditKind.PRUNE_LINK,
                    member=test.identifier,
                    targets=tuple(orphans),
                    transform=_remove_links(test, orphans),
                )
            )

    stale: dict[tuple[Path, str], list[str]] = {}
    owners: dict[tuple[Path, str], str] = {}
    for entry in scan.cross_refs.find_orphans(
        valid_production=production_ids,
        valid_tests=scan.test_ids(),
        known_production_classes=scan.production_classes,
        known_test_classes=scan.test_classes,
    ):
        if entry.context is Role.TEST and not _supports_cross_refs(scan, entry.member):
            continue
        key = (entry.path, entry.member)
        stale.setdefault(key, []).append(entry.reference)
        owners[key] = entry.member_name

    for (path, member), refs in stale.items():
        plan.edits.append(
            TextEdit(
                path=path,
                kind=EditKind.PRUNE_CROSS_REF,
                member=member,
                targets=tuple(refs),
                transform=_comment_edit(remove_cross_refs, owners[(path, member)], refs),
            )
        )


def _supports_cross_refs(scan: ProjectScan, test_id: str) -> bool:
    test = scan.find_test(test_id)
    return test is not None and test.supports_cross_refs


def plan_sync(scan: ProjectScan, options: SyncOptions) -> SyncPlan:
    """Forward links, reverse forward relations, ``@see`` lines, then pruning."""
    plan = SyncPlan()
    plan_forward(scan, options, plan)
    added = plan_reverse(scan, options, plan)
    plan_cross_refs(scan, options, plan, added)
    if options.prune_confirmed:
        plan_prune(scan, plan)
    log.debug("sync_planned", edits=len(plan), files=len(plan.files()), prune=options.prune_confirmed)
    return plan
