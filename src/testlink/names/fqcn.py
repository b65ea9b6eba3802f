"""Validation and rewriting of short ``@see`` references."""

from __future__ import annotations

import re
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from testlink.core.errors import NameResolutionError
from testlink.core.formatting import display_path
from testlink.core.logging import get_logger
from testlink.core.patch import EditKind, TextEdit, Transform, apply_edits
from testlink.model.entities import CrossRefEntry, NameResolutionIssue
from testlink.names.resolver import NameResolver
from testlink.php.source import split_lines

log = get_logger(__name__)

DEFAULT_WINDOW = 20


class NameIssueRegistry:
    """Name-resolution issues grouped by file."""

    def __init__(self) -> None:
        self._by_file: dict[Path, list[NameResolutionIssue]] = defaultdict(list)

    def register(self, issue: NameResolutionIssue) -> None:
        self._by_file[issue.path].append(issue)

    def by_file(self) -> dict[Path, list[NameResolutionIssue]]:
        return {path: list(issues) for path, issues in self._by_file.items()}

    def all(self) -> list[NameResolutionIssue]:
        return [issue for issues in self._by_file.values() for issue in issues]

    def fixable(self) -> list[NameResolutionIssue]:
        return [issue for issue in self.all() if issue.is_fixable]

    def unfixable(self) -> list[NameResolutionIssue]:
        return [issue for issue in self.all() if not issue.is_fixable]

    @property
    def count(self) -> int:
        return len(self.all())

    @property
    def fixable_count(self) -> int:
        return len(self.fixable())

    def has_issues(self) -> bool:
        return self.count > 0


@dataclass
class FixResult:
    fixed: int = 0
    files: dict[Path, list[str]] = field(default_factory=dict)  # path -> ["orig => fqcn"]
    errors: list[str] = field(default_factory=list)

    def to_dict(self, root: Path | None = None) -> dict[str, Any]:
        return {
            "fixed": self.fixed,
            "files": {display_path(p, root): changes for p, changes in self.files.items()},
            "errors": self.errors,
        }


def replace_reference(text: str, original: str, replacement: str, line: int, window: int) -> str:
    """Rewrite the nearest ``@see original`` within ``window`` lines above ``line``.

    ``line`` is the owning member's 1-based declaration line. Only the
    reference token changes; description text after it is kept.
    """
    pattern = re.compile(r"(@see\s+)" + re.escape(original) + r"(?=\s|$)")
    lines = split_lines(text)
    for i in range(min(len(lines), line) - 1, max(0, line - window) - 1, -1):
        if pattern.search(lines[i]):
            lines[i] = pattern.sub(lambda m: m.group(1) + replacement, lines[i], count=1)
            return "\n".join(lines)
    return text


class FqcnValidator:
    """Finds short ``@see`` references and rewrites them in fully-qualified form."""

    def __init__(self, resolver: NameResolver | None = None, *, window: int = DEFAULT_WINDOW) -> None:
        self.resolver = resolver or NameResolver()
        self.window = window

    def validate(self, cross_refs: Iterable[CrossRefEntry]) -> NameIssueRegistry:
        registry = NameIssueRegistry()
        for entry in cross_refs:
            if entry.is_fully_qualified:
                continue
            try:
                resolved: str | None = self.resolver.resolve(entry.reference, entry.path)
                error = None
            except NameResolutionError as e:
                resolved, error = None, e.message
            registry.register(
                NameResolutionIssue(
                    original_reference=entry.reference,
                    resolved_fqcn=resolved,
                    path=entry.path,
                    line=entry.line,
                    context=entry.context,
                    member=entry.member,
                    is_resolvable=resolved is not None,
                    error_message=error,
                )
            )
        log.debug("references_validated", issues=registry.count, fixable=registry.fixable_count)
        return registry

    def plan(self, issues: NameIssueRegistry) -> list[TextEdit]:
        """One edit per fixable issue; bottom-most first within each file."""
        edits = []
        for path, file_issues in issues.by_file().items():
            for issue in sorted(file_issues, key=lambda i: i.line, reverse=True):
                if not issue.is_fixable:
                    continue
                assert issue.resolved_fqcn is not None
                edits.append(
                    TextEdit(
                        path=path,
                        kind=EditKind.FIX_REFERENCE,
                        member=issue.member,
                        targets=(issue.original_reference, issue.resolved_fqcn),
                        transform=_replacer(issue, self.window),
                    )
                )
        return edits

    def fix(
        self, issues: NameIssueRegistry, *, dry_run: bool = False, root: Path | None = None
    ) -> FixResult:
        result = FixResult()
        patched = apply_edits(self.plan(issues), dry_run=dry_run, root=root)
        result.errors.extend(patched.errors)
        for edit in patched.effective:
            original, resolved = edit.targets
            result.fixed += 1
            result.files.setdefault(edit.path, []).append(f"{original} => {resolved}")
        log.debug("references_fixed", fixed=result.fixed, files=len(result.files), dry_run=dry_run)
        return result


def _replacer(issue: NameResolutionIssue, window: int) -> Transform:
    original = issue.original_reference
    replacement = issue.resolved_fqcn or original

    def transform(text: str) -> str:
        return replace_reference(text, original, replacement, issue.line, window)

    return transform
