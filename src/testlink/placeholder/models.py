"""Placeholder resolution results."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from testlink.core.formatting import display_path
from testlink.model.entities import Dialect, PlaceholderEntry


@dataclass(frozen=True, slots=True)
class PlaceholderAction:
    """One production entry paired with one test entry of the same id."""

    placeholder: str
    production: PlaceholderEntry
    test: PlaceholderEntry

    @property
    def production_identifier(self) -> str:
        return self.production.identifier

    @property
    def test_identifier(self) -> str:
        return self.test.identifier

    @property
    def production_class(self) -> str:
        return self.production.class_name

    @property
    def production_member(self) -> str:
        return self.production.member

    @property
    def test_class(self) -> str:
        return self.test.class_name

    @property
    def test_member(self) -> str:
        return self.test.member

    @property
    def production_path(self) -> Path:
        return self.production.path

    @property
    def test_path(self) -> Path:
        return self.test.path

    @property
    def production_uses_cross_ref(self) -> bool:
        return self.production.see_tag_mode

    @property
    def test_uses_cross_ref(self) -> bool:
        return self.test.see_tag_mode

    @property
    def dialect(self) -> Dialect:
        return self.test.dialect or Dialect.ANNOTATION

    def to_dict(self, root: Path | None = None) -> dict[str, Any]:
        return {
            "placeholder": self.placeholder,
            "production": self.production_identifier,
            "test": self.test_identifier,
            "dialect": self.dialect.value,
            "cross_ref": self.test_uses_cross_ref,
            "production_file": display_path(self.production_path, root),
            "test_file": display_path(self.test_path, root),
        }


@dataclass
class PlaceholderResult:
    actions: list[PlaceholderAction] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    # id -> (production entries, test entries) for every id that resolved
    counts: dict[str, tuple[int, int]] = field(default_factory=dict)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def has_actions(self) -> bool:
        return bool(self.actions)

    def production_files(self) -> list[Path]:
        return sorted({a.production_path for a in self.actions})

    def test_files(self) -> list[Path]:
        return sorted({a.test_path for a in self.actions})

    def by_placeholder(self) -> dict[str, list[PlaceholderAction]]:
        grouped: dict[str, list[PlaceholderAction]] = {}
        for action in self.actions:
            grouped.setdefault(action.placeholder, []).append(action)
        return dict(sorted(grouped.items()))

    def summary_line(self, placeholder: str) -> str:
        """``"{P} production × {T} tests = {N} links"`` for one resolved id."""
        production, tests = self.counts[placeholder]
        return f"{placeholder}: {production} production × {tests} tests = {production * tests} links"

    def summary_lines(self) -> list[str]:
        return [self.summary_line(placeholder) for placeholder in sorted(self.counts)]

    def to_dict(self, root: Path | None = None) -> dict[str, Any]:
        return {
            "actions": [a.to_dict(root) for a in self.actions],
            "errors": self.errors,
            "warnings": self.warnings,
            "summary": self.summary_lines(),
        }
