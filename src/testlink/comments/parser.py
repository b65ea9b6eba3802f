"""Reading ``@see`` cross-references out of documentation comments."""

from __future__ import annotations

import re

from testlink.model.entities import normalize_reference

SEE_LINE_RE = re.compile(r"^\s*(?:/\*\*\s*)?\*?\s*@see\s+(?P<rest>.*?)\s*(?:\*/)?\s*$")

# Class, optionally followed by ::member. A member is a test method, a run
# of lowercase words (chaining-dialect test names, optionally with " > "
# group separators) or a plain identifier.
REFERENCE_RE = re.compile(
    r"^(\\?[\w\\]+(?:::(?:test\w+|[a-z]\w*(?:\s+(?:>\s+)?[a-z]\w*)*|\w+))?)"
)


def parse_reference(text: str) -> str | None:
    """Leading reference of an ``@see`` body; trailing description is dropped."""
    match = REFERENCE_RE.match(text.strip())
    return match.group(1) if match else None


def see_reference(line: str) -> str | None:
    """Reference on a doc-comment line, or None if it is not an ``@see`` line."""
    match = SEE_LINE_RE.match(line)
    if not match:
        return None
    return parse_reference(match.group("rest"))


def see_text(line: str) -> str | None:
    """Everything after ``@see`` on a doc-comment line, description included."""
    match = SEE_LINE_RE.match(line)
    return match.group("rest") if match else None


def extract_references(lines: list[str], doc: tuple[int, int] | None) -> list[tuple[int, str]]:
    """``(index, reference)`` for every ``@see`` line inside a doc range."""
    if doc is None:
        return []
    found = []
    for i in range(doc[0], doc[1] + 1):
        ref = see_reference(lines[i])
        if ref is not None:
            found.append((i, ref))
    return found


def has_reference(references: list[str], target: str) -> bool:
    """Membership test in normalized form (leading separator ignored)."""
    wanted = normalize_reference(target)
    return any(normalize_reference(ref) == wanted for ref in references)
