"""Annotation dialect: ``#[LinksAndCovers(Cls::class, 'm')]`` on test methods."""

from __future__ import annotations

import re

from testlink.comments.parser import extract_references
from testlink.core.logging import get_logger
from testlink.model.entities import (
    AnnotatedTest,
    CrossRefEntry,
    Dialect,
    LinkTarget,
    PlaceholderEntry,
    Role,
    TestUnit,
    is_placeholder,
    split_identifier,
)
from testlink.php.imports import ensure_import
from testlink.php.source import MethodDecl, PhpSource, find_attributes, parse_target
from testlink.syntax.base import Extraction

log = get_logger(__name__)

ATTRIBUTE_NAMESPACE = "TestFlowLabs\\TestingAttributes"
LINK_ATTRIBUTES = ("LinksAndCovers", "Links")

_TEST_ATTRIBUTE_RE = re.compile(r"#\[\s*\\?(?:[\w\\]*\\)?Test\s*[\](]")
_TEST_DOC_RE = re.compile(r"^\s*\*\s*@test\b")


def format_attribute_args(name: str, member: str | None) -> str:
    return f"{name}::class, '{member}'" if member else f"{name}::class"


def _is_test_method(method: MethodDecl, lines: list[str], source: PhpSource) -> bool:
    if method.name.lower().startswith("test"):
        return True
    header = source.header(method)
    if any(_TEST_ATTRIBUTE_RE.search(text) for _, text in header.attribute_lines(lines)):
        return True
    if header.doc is not None:
        doc_lines = lines[header.doc[0] : header.doc[1] + 1]
        return any(_TEST_DOC_RE.match(line) for line in doc_lines)
    return False


def _link_attributes(source: PhpSource, method: MethodDecl) -> list[tuple[int, int, str, str | None]]:
    """``(first, last, attribute_name, target)`` for each link attribute above a method."""
    header = source.header(method)
    found = []
    for first, last in header.attributes:
        text = " ".join(line.strip() for line in source.lines[first : last + 1])
        for attr in find_attributes(text, LINK_ATTRIBUTES):
            found.append((first, last, attr.name, parse_target(attr.args, source.resolve_class)))
    return found


class AnnotationDialect:
    """PHPUnit-style test classes."""

    dialect = Dialect.ANNOTATION

    def supports(self, source: PhpSource) -> bool:
        return source.has_class

    def extract(self, source: PhpSource, class_name: str) -> Extraction:  # noqa: ARG002
        extraction = Extraction()
        path = source.path
        assert path is not None

        for owner, _ in source.classes:
            extraction.classes.add(owner)
            for method in source.methods_of(owner):
                attributes = _link_attributes(source, method)
                if not attributes and not _is_test_method(method, source.lines, source):
                    continue
                identifier = method.identifier
                links = []
                for first, _, attr_name, target in attributes:
                    if target is None:
                        continue
                    if target.startswith("@"):
                        if is_placeholder(target):
                            extraction.placeholders.append(
                                PlaceholderEntry(
                                    placeholder=target,
                                    role=Role.TEST,
                                    identifier=identifier,
                                    path=path,
                                    line=first + 1,
                                    dialect=Dialect.ANNOTATION,
                                )
                            )
                        continue
                    links.append(
                        LinkTarget(
                            method=target,
                            with_coverage=attr_name == "LinksAndCovers",
                            line=first + 1,
                        )
                    )
                extraction.tests.append(
                    AnnotatedTest(
                        class_name=owner,
                        name=method.name,
                        path=path,
                        line=method.line,
                        links=tuple(links),
                    )
                )
                for _, ref in extract_references(source.lines, source.header(method).doc):
                    extraction.cross_refs.append(
                        CrossRefEntry(
                            reference=ref,
                            path=path,
                            line=method.line,
                            context=Role.TEST,
                            member=identifier,
                        )
                    )
        log.debug("annotation_extracted", path=str(path), tests=len(extraction.tests))
        return extraction

    def _render(self, text: str, attribute: str, methods: list[str]) -> tuple[str, list[str]]:
        """Import everything the attributes need and return their bodies."""
        text, attr_name = ensure_import(text, f"{ATTRIBUTE_NAMESPACE}\\{attribute}")
        bodies = []
        for method in methods:
            class_name, member = split_identifier(method)
            text, name = ensure_import(text, class_name)
            bodies.append(f"#[{attr_name}({format_attribute_args(name, member)})]")
        return text, bodies

    def inject_links(
        self, text: str, test: TestUnit, methods: list[str], *, with_coverage: bool
    ) -> str:
        source = PhpSource.parse(text)
        method = source.locate_method(test.name, test.class_name)
        if method is None:
            return text
        present = {target for *_, target in _link_attributes(source, method)}
        missing = [m for m in methods if m not in present]
        if not missing:
            return text

        attribute = "LinksAndCovers" if with_coverage else "Links"
        text, bodies = self._render(text, attribute, missing)
        source = PhpSource.parse(text)
        method = source.locate_method(test.name, test.class_name)
        assert method is not None
        lines = source.lines
        lines[method.index : method.index] = [method.indent + body for body in bodies]
        return "\n".join(lines)

    def replace_placeholder(
        self, text: str, test: TestUnit, placeholder: str, methods: list[str]
    ) -> str:
        source = PhpSource.parse(text)
        method = source.locate_method(test.name, test.class_name)
        if method is None:
            return text
        hits = [a for a in _link_attributes(source, method) if a[3] == placeholder]
        if not hits:
            return text

        rendered: dict[str, list[str]] = {}
        for _, _, attr_name, _ in hits:
            if attr_name in rendered:
                continue
            if methods:
                text, rendered[attr_name] = self._render(text, attr_name, methods)
            else:
                rendered[attr_name] = []
        source = PhpSource.parse(text)
        method = source.locate_method(test.name, test.class_name)
        assert method is not None
        lines = source.lines
        for first, last, attr_name, target in reversed(_link_attributes(source, method)):
            if target != placeholder:
                continue
            indent = lines[first][: len(lines[first]) - len(lines[first].lstrip())]
            lines[first : last + 1] = [indent + body for body in rendered[attr_name]]
        return "\n".join(lines)

    def remove_links(self, text: str, test: TestUnit, methods: list[str]) -> str:
        source = PhpSource.parse(text)
        method = source.locate_method(test.name, test.class_name)
        if method is None:
            return text
        doomed = set(methods)
        lines = source.lines
        changed = False
        for first, last, _, target in reversed(_link_attributes(source, method)):
            if target in doomed:
                del lines[first : last + 1]
                changed = True
        return "\n".join(lines) if changed else text
