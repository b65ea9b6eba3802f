"""Production side: ``#[TestedBy(Test::class, 'name')]`` forward relations."""

from __future__ import annotations

from testlink.comments.parser import extract_references
from testlink.core.logging import get_logger
from testlink.model.entities import (
    CrossRefEntry,
    PlaceholderEntry,
    ProductionUnit,
    Role,
    is_placeholder,
    split_identifier,
)
from testlink.php.imports import ensure_import
from testlink.php.source import (
    MethodDecl,
    PhpSource,
    find_attributes,
    leading_whitespace,
    parse_target,
)
from testlink.syntax.base import Extraction

log = get_logger(__name__)

TESTED_BY = "TestFlowLabs\\TestLink\\Attribute\\TestedBy"


def php_string(value: str) -> str:
    """Single-quoted PHP literal."""
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"


def _forward_attributes(source: PhpSource, method: MethodDecl) -> list[tuple[int, int, str | None]]:
    """``(first, last, target)`` for each TestedBy attribute above a method."""
    header = source.header(method)
    found = []
    for first, last in header.attributes:
        text = " ".join(line.strip() for line in source.lines[first : last + 1])
        for attr in find_attributes(text, ("TestedBy",)):
            found.append((first, last, parse_target(attr.args, source.resolve_class)))
    return found


def extract_production(source: PhpSource) -> Extraction:
    """Production members with their forward relations, placeholders and ``@see`` lines."""
    extraction = Extraction()
    path = source.path
    assert path is not None

    for class_name, _ in source.classes:
        extraction.classes.add(class_name)
    for method in source.methods:
        identifier = method.identifier
        extraction.production.append(
            ProductionUnit(
                class_name=method.class_name,
                member=method.name,
                path=path,
                line=method.line,
            )
        )
        for first, _, target in _forward_attributes(source, method):
            if target is None:
                continue
            if target.startswith("@"):
                if is_placeholder(target):
                    extraction.placeholders.append(
                        PlaceholderEntry(
                            placeholder=target,
                            role=Role.PRODUCTION,
                            identifier=identifier,
                            path=path,
                            line=first + 1,
                        )
                    )
                continue
            extraction.forward_relations.append((identifier, target))
        for _, ref in extract_references(source.lines, source.header(method).doc):
            extraction.cross_refs.append(
                CrossRefEntry(
                    reference=ref,
                    path=path,
                    line=method.line,
                    context=Role.PRODUCTION,
                    member=identifier,
                )
            )
    log.debug("production_extracted", path=str(path), members=len(extraction.production))
    return extraction


def _render(text: str, tests: list[str]) -> tuple[str, list[str]]:
    text, attr_name = ensure_import(text, TESTED_BY)
    bodies = []
    for test in tests:
        class_name, member = split_identifier(test)
        text, name = ensure_import(text, class_name)
        args = f"{name}::class, {php_string(member)}" if member else f"{name}::class"
        bodies.append(f"#[{attr_name}({args})]")
    return text, bodies


def inject_forward_relations(text: str, method_id: str, tests: list[str]) -> str:
    """Add a TestedBy attribute for each test the member does not name yet.

    New attributes go directly above the declaration, after any existing
    attributes and the doc comment.
    """
    class_name, member = split_identifier(method_id)
    source = PhpSource.parse(text)
    method = source.locate_method(member or "", class_name)
    if method is None:
        return text
    present = {target for *_, target in _forward_attributes(source, method)}
    missing = [t for t in dict.fromkeys(tests) if t not in present]
    if not missing:
        return text

    text, bodies = _render(text, missing)
    source = PhpSource.parse(text)
    method = source.locate_method(member or "", class_name)
    assert method is not None
    lines = source.lines
    lines[method.index : method.index] = [method.indent + body for body in bodies]
    return "\n".join(lines)


def replace_forward_placeholder(
    text: str, method_id: str, placeholder: str, tests: list[str]
) -> str:
    """Swap ``#[TestedBy('@id')]`` for one TestedBy attribute per test.

    An empty ``tests`` list removes the placeholder attribute.
    """
    class_name, member = split_identifier(method_id)
    source = PhpSource.parse(text)
    method = source.locate_method(member or "", class_name)
    if method is None:
        return text
    if not any(target == placeholder for *_, target in _forward_attributes(source, method)):
        return text

    bodies: list[str] = []
    if tests:
        text, bodies = _render(text, list(dict.fromkeys(tests)))
    source = PhpSource.parse(text)
    method = source.locate_method(member or "", class_name)
    assert method is not None
    lines = source.lines
    for first, last, target in reversed(_forward_attributes(source, method)):
        if target != placeholder:
            continue
        indent = leading_whitespace(lines[first])
        lines[first : last + 1] = [indent + body for body in bodies]
    return "\n".join(lines)
