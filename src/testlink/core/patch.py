"""Format-preserving text edits, batched per file.

An edit is a pure ``str -> str`` transform that re-locates its target in
the text it receives, so any number of edits aimed at one file are folded
over a single buffer: one read, every transform in plan order, one write.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from testlink.core.formatting import display_path
from testlink.core.logging import get_logger

log = get_logger(__name__)

Transform = Callable[[str], str]


class EditKind(str, Enum):
    ADD_LINK = "add_link"
    ADD_FORWARD_RELATION = "add_forward_relation"
    ADD_CROSS_REF = "add_cross_ref"
    REPLACE_PLACEHOLDER = "replace_placeholder"
    PRUNE_LINK = "prune_link"
    PRUNE_CROSS_REF = "prune_cross_ref"
    FIX_REFERENCE = "fix_reference"


@dataclass(frozen=True, slots=True)
class TextEdit:
    """One planned change to one member of one file."""

    path: Path
    kind: EditKind
    member: str
    targets: tuple[str, ...]
    transform: Transform = field(compare=False, repr=False)

    def describe(self) -> str:
        return f"{self.kind.value} {self.member} -> {', '.join(self.targets)}"


@dataclass(frozen=True, slots=True)
class FileDelta:
    """Line counts for one rewritten file."""

    path: Path
    edits: int
    insertions: int = 0
    deletions: int = 0


@dataclass
class PatchResult:
    """Outcome of applying (or previewing) a list of edits."""

    modified: list[Path] = field(default_factory=list)
    unchanged: list[Path] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    # edits whose transform changed the buffer
    effective: list[TextEdit] = field(default_factory=list)
    deltas: list[FileDelta] = field(default_factory=list)

    @property
    def insertions(self) -> int:
        return sum(d.insertions for d in self.deltas)

    @property
    def deletions(self) -> int:
        return sum(d.deletions for d in self.deltas)


def group_by_file(edits: Iterable[TextEdit]) -> dict[Path, list[TextEdit]]:
    """Edits per file, files in first-seen order, edits in plan order."""
    grouped: dict[Path, list[TextEdit]] = {}
    for edit in edits:
        grouped.setdefault(edit.path, []).append(edit)
    return grouped


def write_text(path: Path, text: str) -> None:
    """Replace ``path`` via a sibling temp file; a failed write leaves it intact."""
    tmp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            newline="",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as tmp:
            tmp_path = Path(tmp.name)
            tmp.write(text)
        shutil.copymode(path, tmp_path)
        os.replace(tmp_path, path)
    except OSError:
        if tmp_path is not None:
            tmp_path.unlink(missing_ok=True)
        raise


def apply_edits(
    edits: Iterable[TextEdit], *, dry_run: bool = False, root: Path | None = None
) -> PatchResult:
    """Fold each file's edits over its current content and write it back once.

    A file that cannot be read or written is reported in ``errors`` and left
    as it was; the remaining files are still processed. With ``dry_run`` the
    transforms run in memory and nothing is written.
    """
    result = PatchResult()
    for path, file_edits in group_by_file(edits).items():
        shown = display_path(path, root)
        try:
            original = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            result.errors.append(f"Could not read {shown}: {e}")
            log.warning("patch_read_failed", path=shown, error=str(e))
            continue

        text = original
        effective = []
        for edit in file_edits:
            updated = edit.transform(text)
            if updated != text:
                effective.append(edit)
            text = updated

        if text == original:
            result.unchanged.append(path)
            continue
        if not dry_run:
            try:
                write_text(path, text)
            except OSError as e:
                result.errors.append(f"Could not write {shown}: {e}")
                log.warning("patch_write_failed", path=shown, error=str(e))
                continue
        result.modified.append(path)
        result.effective.extend(effective)
        old_lines = original.count("\n")
        new_lines = text.count("\n")
        result.deltas.append(
            FileDelta(
                path=path,
                edits=len(effective),
                insertions=max(0, new_lines - old_lines),
                deletions=max(0, old_lines - new_lines),
            )
        )
        log.debug("file_patched", path=shown, edits=len(effective), dry_run=dry_run)
    return result
