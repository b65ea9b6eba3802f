"""Idempotent ``@see`` edits in a member's documentation comment.

All functions take the full file text and a member name and return an
``EditResult``. ``changed`` is False whenever the text is returned as-is:
missing member, empty target list, nothing novel to add or nothing to
remove. Only the comment block of the named member is ever touched.

Layout produced for a member without a comment block::

    /**
     * @see \\Tests\\Unit\\UserServiceTest::test_create
     */
    #[TestedBy(UserServiceTest::class, 'test_create')]
    public function create(): void

An existing block with other content gets a separator line before the
first ``@see`` line.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from testlink.comments.parser import extract_references, has_reference, see_reference, see_text
from testlink.model.entities import normalize_reference
from testlink.php.source import (
    find_member_header,
    find_member_line,
    leading_whitespace,
    split_lines,
)


@dataclass(frozen=True, slots=True)
class EditResult:
    text: str
    changed: bool


def _unchanged(text: str) -> EditResult:
    return EditResult(text=text, changed=False)


def _is_separator(line: str) -> bool:
    return line.strip() in ("*", "")


def _expand_inline(line: str) -> list[str]:
    """Turn ``/** text */`` into a three-line block with the same indent."""
    indent = leading_whitespace(line)
    content = line.strip()[3:-2].strip()
    if content.startswith("*"):
        content = content[1:].strip()
    body = [f"{indent} * {content}"] if content else []
    return [f"{indent}/**", *body, f"{indent} */"]


def _split_closing(line: str, indent: str) -> list[str]:
    """Separate ``* text */`` into a content line and a bare closing line."""
    stripped = line.strip()
    if stripped == "*/":
        return [line]
    content = stripped[:-2].rstrip()
    return [f"{indent} {content}", f"{indent} */"]


def add_cross_refs(text: str, member: str, references: list[str]) -> EditResult:
    """Insert ``@see`` lines for references not already present.

    Presence is checked in normalized form, so ``\\A\\B::c`` and ``A\\B::c``
    are the same target.
    """
    if not references:
        return _unchanged(text)
    lines = split_lines(text)
    index = find_member_line(lines, member)
    if index is None:
        return _unchanged(text)

    header = find_member_header(lines, index)
    existing = [ref for _, ref in extract_references(lines, header.doc)]
    if header.doc is not None:
        # Whole line bodies too, for names the reference grammar only partly covers.
        start, end = header.doc
        existing.extend(t for t in map(see_text, lines[start : end + 1]) if t)
    novel: list[str] = []
    for ref in references:
        if not has_reference(existing + novel, ref):
            novel.append(ref)
    if not novel:
        return _unchanged(text)

    if header.doc is None:
        indent = leading_whitespace(lines[index])
        block = [f"{indent}/**", *(f"{indent} * @see {ref}" for ref in novel), f"{indent} */"]
        lines[header.start : header.start] = block
        return EditResult(text="\n".join(lines), changed=True)

    start, end = header.doc
    indent = leading_whitespace(lines[start])
    if start == end:
        expanded = _expand_inline(lines[start])
        lines[start : end + 1] = expanded
        end = start + len(expanded) - 1
    else:
        closing = _split_closing(lines[end], indent)
        lines[end : end + 1] = closing
        end += len(closing) - 1

    inner = lines[start + 1 : end]
    additions = [f"{indent} * @see {ref}" for ref in novel]
    if inner and not _is_separator(inner[-1]) and see_reference(inner[-1]) is None:
        additions.insert(0, f"{indent} *")
    lines[end:end] = additions
    return EditResult(text="\n".join(lines), changed=True)


def _remove_matching(text: str, member: str, matches: Callable[[str], bool]) -> EditResult:
    lines = split_lines(text)
    index = find_member_line(lines, member)
    if index is None:
        return _unchanged(text)
    header = find_member_header(lines, index)
    if header.doc is None:
        return _unchanged(text)

    start, end = header.doc
    if start == end:
        ref = see_reference(lines[start])
        if ref is None or not matches(ref):
            return _unchanged(text)
        del lines[start]
        return EditResult(text="\n".join(lines), changed=True)

    doomed = [i for i, ref in extract_references(lines, (start + 1, end - 1)) if matches(ref)]
    if not doomed:
        return _unchanged(text)
    for i in reversed(doomed):
        del lines[i]
    end -= len(doomed)

    if lines[start].strip() == "/**" and all(_is_separator(line) for line in lines[start + 1 : end]):
        # Nothing left but the delimiters: drop the whole block.
        del lines[start : end + 1]
    else:
        while end - 1 > start and lines[end - 1].strip() == "*":
            del lines[end - 1]
            end -= 1
    return EditResult(text="\n".join(lines), changed=True)


def remove_cross_refs(text: str, member: str, references: list[str]) -> EditResult:
    """Delete ``@see`` lines whose normalized target is in ``references``."""
    if not references:
        return _unchanged(text)
    targets = {normalize_reference(ref) for ref in references}
    return _remove_matching(text, member, lambda ref: normalize_reference(ref) in targets)


def remove_all_cross_refs(text: str, member: str) -> EditResult:
    """Delete every ``@see`` line in the member's comment block."""
    return _remove_matching(text, member, lambda ref: True)  # noqa: ARG005
