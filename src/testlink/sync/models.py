"""Sync options, plans and results."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from testlink.core.errors import SyncError
from testlink.core.formatting import display_path
from testlink.core.patch import EditKind, PatchResult, TextEdit


@dataclass(frozen=True, slots=True)
class SyncOptions:
    """Flags for one sync run.

    Raises:
        SyncError: ``prune`` was requested without ``force``.
    """

    dry_run: bool = False
    link_only: bool = False
    prune: bool = False
    force: bool = False
    path: Path | None = None

    def __post_init__(self) -> None:
        if self.prune and not self.force:
            raise SyncError.prune_not_confirmed()

    @property
    def prune_confirmed(self) -> bool:
        return self.prune and self.force


@dataclass
class SyncPlan:
    """Every edit a sync run would make, in application order."""

    edits: list[TextEdit] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def of_kind(self, kind: EditKind) -> list[TextEdit]:
        return [e for e in self.edits if e.kind is kind]

    def files(self) -> list[Path]:
        return sorted({e.path for e in self.edits})

    def __len__(self) -> int:
        return len(self.edits)


@dataclass
class SyncResult:
    """What a sync run changed, or would change under ``dry_run``."""

    dry_run: bool = False
    # test file -> production members whose links were added
    modified_files: dict[Path, list[str]] = field(default_factory=dict)
    # test file -> orphan link targets removed
    pruned_files: dict[Path, list[str]] = field(default_factory=dict)
    # member -> @see references added / removed
    cross_ref_additions: dict[str, list[str]] = field(default_factory=dict)
    cross_ref_removals: dict[str, list[str]] = field(default_factory=dict)
    # (production member, test) forward relations added
    reverse_actions: list[tuple[str, str]] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    files_written: list[Path] = field(default_factory=list)

    @classmethod
    def from_patch(cls, patch: PatchResult, *, dry_run: bool, warnings: list[str] | None = None) -> SyncResult:
        result = cls(dry_run=dry_run, errors=list(patch.errors), warnings=list(warnings or []))
        result.files_written = sorted(patch.modified)
        for edit in patch.effective:
            targets = list(edit.targets)
            if edit.kind is EditKind.ADD_LINK:
                result.modified_files.setdefault(edit.path, []).extend(targets)
            elif edit.kind is EditKind.PRUNE_LINK:
                result.pruned_files.setdefault(edit.path, []).extend(targets)
            elif edit.kind is EditKind.ADD_CROSS_REF:
                result.cross_ref_additions.setdefault(edit.member, []).extend(targets)
            elif edit.kind is EditKind.PRUNE_CROSS_REF:
                result.cross_ref_removals.setdefault(edit.member, []).extend(targets)
            elif edit.kind is EditKind.ADD_FORWARD_RELATION:
                result.reverse_actions.extend((edit.member, t) for t in targets)
        return result

    @property
    def links_added(self) -> int:
        return sum(len(v) for v in self.modified_files.values())

    @property
    def links_pruned(self) -> int:
        return sum(len(v) for v in self.pruned_files.values())

    @property
    def cross_refs_added(self) -> int:
        return sum(len(v) for v in self.cross_ref_additions.values())

    @property
    def cross_refs_pruned(self) -> int:
        return sum(len(v) for v in self.cross_ref_removals.values())

    @property
    def forward_relations_added(self) -> int:
        return len(self.reverse_actions)

    @property
    def has_changes(self) -> bool:
        return bool(self.files_written)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def to_dict(self, root: Path | None = None) -> dict[str, Any]:
        return {
            "dryRun": self.dry_run,
            "modifiedFiles": {display_path(p, root): v for p, v in self.modified_files.items()},
            "prunedFiles": {display_path(p, root): v for p, v in self.pruned_files.items()},
            "crossRefAdditions": self.cross_ref_additions,
            "crossRefRemovals": self.cross_ref_removals,
            "reverseActions": [{"method": m, "test": t} for m, t in self.reverse_actions],
            "errors": self.errors,
            "warnings": self.warnings,
            "filesWritten": [display_path(p, root) for p in self.files_written],
            "summary": {
                "links_added": self.links_added,
                "links_pruned": self.links_pruned,
                "cross_refs_added": self.cross_refs_added,
                "cross_refs_pruned": self.cross_refs_pruned,
                "forward_relations_added": self.forward_relations_added,
            },
        }
