"""Namespace and ``use`` import handling."""

from __future__ import annotations

import re

from testlink.model.entities import short_class_name

NAMESPACE_RE = re.compile(r"^[ \t]*namespace\s+([A-Za-z_][\w\\]*)\s*[;{]", re.MULTILINE)
USE_RE = re.compile(r"^[ \t]*use\s+(?!function\b|const\b)([^;]+);", re.MULTILINE | re.IGNORECASE)
_FIRST_CLASS_RE = re.compile(
    r"^\s*(?:(?:abstract|final|readonly)\s+)*(?:class|trait|interface|enum)\s+\w",
    re.MULTILINE | re.IGNORECASE,
)
_USE_GROUP_RE = re.compile(r"^\\?([\w\\]+?)\\\s*\{(.*)\}$", re.DOTALL)
_AS_RE = re.compile(r"\s+as\s+", re.IGNORECASE)
_OPEN_TAG_RE = re.compile(r"^<\?php\b.*$", re.MULTILINE)
_DECLARE_RE = re.compile(r"^[ \t]*declare\s*\(.*$", re.MULTILINE)


def parse_namespace(text: str) -> str:
    match = NAMESPACE_RE.search(text)
    return match.group(1).strip("\\") if match else ""


def parse_use_clause(clause: str) -> dict[str, str]:
    """Parse the body of one ``use`` statement into ``alias -> fqcn``.

    Handles ``A\\B``, ``A\\B as C``, ``A\\B, C\\D`` and ``A\\{B, C as D}``.
    """
    clause = " ".join(clause.split())
    prefix = ""
    group = _USE_GROUP_RE.match(clause)
    if group:
        prefix = group.group(1).strip("\\") + "\\"
        items = group.group(2).split(",")
    else:
        items = clause.split(",")

    imports: dict[str, str] = {}
    for item in items:
        item = item.strip()
        if not item:
            continue
        parts = _AS_RE.split(item, maxsplit=1)
        fqcn = prefix + parts[0].strip().lstrip("\\")
        alias = parts[1].strip() if len(parts) > 1 else short_class_name(fqcn)
        imports[alias] = fqcn
    return imports


def _import_region(text: str) -> str:
    """Text before the first class declaration, where imports live.

    Trait ``use`` lines inside a class body are therefore never imports.
    """
    match = _FIRST_CLASS_RE.search(text)
    return text[: match.start()] if match else text


def parse_imports(text: str) -> dict[str, str]:
    """Import table of a file: direct, aliased and grouped imports."""
    imports: dict[str, str] = {}
    for match in USE_RE.finditer(_import_region(text)):
        imports.update(parse_use_clause(match.group(1)))
    return imports


def namespace_of(fqcn: str) -> str:
    return fqcn.rpartition("\\")[0]


def ensure_import(text: str, fqcn: str) -> tuple[str, str]:
    """Make ``fqcn`` referable from ``text``.

    Returns the (possibly updated) text and the name to write in code: an
    existing alias, the short name after adding a ``use`` statement, or the
    fully-qualified ``\\A\\B`` form when the short name is taken by another
    import.
    """
    fqcn = fqcn.lstrip("\\")
    imports = parse_imports(text)
    for alias, imported in imports.items():
        if imported == fqcn:
            return text, alias

    short = short_class_name(fqcn)
    if short in imports:
        return text, "\\" + fqcn

    namespace = parse_namespace(text)
    if namespace_of(fqcn) == namespace:
        return text, short

    statement = f"use {fqcn};"
    region = _import_region(text)
    uses = list(USE_RE.finditer(region))
    if uses:
        end = uses[-1].end()
        return text[:end] + "\n" + statement + text[end:], short

    declares = list(_DECLARE_RE.finditer(region))
    anchor = (
        NAMESPACE_RE.search(region)
        or (declares[-1] if declares else None)
        or _OPEN_TAG_RE.search(region)
    )
    if anchor is None:
        return text, "\\" + fqcn
    end = text.find("\n", anchor.start())
    if end < 0:
        return text + "\n\n" + statement, short
    return text[:end] + "\n\n" + statement + text[end:], short
