"""Sync and pair entry points: scan, plan, then apply or preview."""

from __future__ import annotations

from pathlib import Path

from testlink.config.models import TestLinkConfig
from testlink.core.logging import get_logger
from testlink.core.patch import PatchResult, apply_edits
from testlink.placeholder.engine import PlaceholderEngine
from testlink.placeholder.models import PlaceholderResult
from testlink.placeholder.modifier import PlaceholderModifier
from testlink.scan.project import ProjectScan, scan_project
from testlink.sync.models import SyncOptions, SyncPlan, SyncResult
from testlink.sync.planner import plan_sync

log = get_logger(__name__)


class SyncOrchestrator:
    """Runs forward, reverse and prune sync over one project.

    ``options`` are validated on construction, so an unconfirmed prune is
    rejected before any file is scanned.
    """

    def __init__(
        self,
        root: Path,
        options: SyncOptions | None = None,
        config: TestLinkConfig | None = None,
    ) -> None:
        self.root = root
        self.options = options or SyncOptions()
        self.config = config or TestLinkConfig()

    def scan(self) -> ProjectScan:
        return scan_project(self.root, self.config.discovery)

    def plan(self, scan: ProjectScan | None = None) -> SyncPlan:
        return plan_sync(scan or self.scan(), self.options)

    def run(self, scan: ProjectScan | None = None) -> SyncResult:
        scan = scan or self.scan()
        plan = plan_sync(scan, self.options)
        patch = apply_edits(plan.edits, dry_run=self.options.dry_run, root=scan.root)
        result = SyncResult.from_patch(
            patch,
            dry_run=self.options.dry_run,
            warnings=[*scan.warnings, *plan.warnings],
        )
        log.info(
            "sync_completed",
            dry_run=result.dry_run,
            files=len(result.files_written),
            links_added=result.links_added,
            forward_relations_added=result.forward_relations_added,
            cross_refs_added=result.cross_refs_added,
            links_pruned=result.links_pruned,
            errors=len(result.errors),
        )
        return result


def pair_placeholders(
    scan: ProjectScan,
    *,
    placeholder: str | None = None,
    scope: Path | None = None,
    dry_run: bool = False,
) -> tuple[PlaceholderResult, PatchResult]:
    """Resolve placeholders (all, or one id) and apply the resulting actions.

    With ``scope``, only ids that have an entry under that path are
    resolved, each with all of its entries.

    Raises:
        PlaceholderError: ``placeholder`` is not a valid id.
    """
    registry = scan.placeholders
    if scope is not None:
        registry = registry.touching(scope if scope.is_absolute() else (scan.root / scope).resolve())
    engine = PlaceholderEngine(registry)
    resolved = engine.resolve_placeholder(placeholder) if placeholder else engine.resolve_all()
    patch = PlaceholderModifier().apply(resolved.actions, dry_run=dry_run, root=scan.root)
    log.info(
        "placeholders_paired",
        dry_run=dry_run,
        actions=len(resolved.actions),
        files=len(patch.modified),
        errors=len(resolved.errors) + len(patch.errors),
    )
    return resolved, patch
