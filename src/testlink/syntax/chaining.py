"""Chaining dialect: ``test('name', fn)->linksAndCovers(Cls::class.'::m');``.

Tests are top-level ``test()``/``it()`` calls, optionally nested in
``describe()`` blocks. Structure is found on a masked copy of the text in
which string contents and comments are blanked out, so offsets line up with
the original while quoted parentheses and commented-out code are ignored.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from testlink.core.logging import get_logger
from testlink.model.entities import (
    DESCRIBE_SEPARATOR,
    ChainedTest,
    Dialect,
    LinkTarget,
    PlaceholderEntry,
    Role,
    TestUnit,
    is_placeholder,
    split_identifier,
)
from testlink.php.imports import ensure_import
from testlink.php.source import (
    Call,
    PhpSource,
    line_of,
    matching_paren,
    parse_target,
    skip_string,
    unquote,
)
from testlink.syntax.base import Extraction

log = get_logger(__name__)

LINK_CALLS = ("linksAndCovers", "links")

_CALL_RE = re.compile(r"(?<![\w$>:\\])(describe|test|it)\s*\(")
_CHAIN_RE = re.compile(r"->\s*(\w+)\s*\(")
_PEST_CALL_RE = re.compile(r"(?<![\w$>:\\])(test|it)\s*\(\s*['\"]")


def mask_code(text: str) -> str:
    """Blank string contents and comments, keeping quotes, newlines and offsets."""
    out = list(text)
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch in "'\"":
            end = skip_string(text, i)
            for k in range(i + 1, max(i + 1, end - 1)):
                if out[k] != "\n":
                    out[k] = " "
            i = end
            continue
        if text.startswith("/*", i):
            end = text.find("*/", i + 2)
            end = n if end < 0 else end + 2
            for k in range(i, end):
                if out[k] != "\n":
                    out[k] = " "
            i = end
            continue
        if text.startswith("//", i) or (ch == "#" and not text.startswith("#[", i)):
            end = text.find("\n", i)
            end = n if end < 0 else end
            for k in range(i, end):
                out[k] = " "
            i = end
            continue
        i += 1
    return "".join(out)


@dataclass(frozen=True, slots=True)
class PestCall:
    """One ``describe``/``test``/``it`` call and its trailing chain."""

    kind: str
    name: str
    start: int
    open: int
    close: int
    end: int | None  # offset of the terminating ';'
    chain: tuple[Call, ...] = ()


def _first_string_arg(text: str, open_index: int) -> str | None:
    i = open_index + 1
    while i < len(text) and text[i].isspace():
        i += 1
    if i >= len(text) or text[i] not in "'\"":
        return None
    end = skip_string(text, i)
    return unquote(text[i:end])


def _trailing_chain(text: str, masked: str, close: int) -> tuple[int | None, tuple[Call, ...]]:
    """Follow ``->name(...)`` calls after a test call up to its ``;``."""
    chain = []
    i = close + 1
    while True:
        while i < len(masked) and masked[i].isspace():
            i += 1
        if i >= len(masked):
            return None, tuple(chain)
        if masked[i] == ";":
            return i, tuple(chain)
        match = _CHAIN_RE.match(masked, i)
        if not match:
            return None, tuple(chain)
        paren = match.end() - 1
        end = matching_paren(masked, paren)
        if end is None:
            return None, tuple(chain)
        chain.append(Call(match.group(1), text[paren + 1 : end], i, end + 1))
        i = end + 1


def scan_calls(text: str) -> list[PestCall]:
    """All ``describe``/``test``/``it`` calls whose first argument is a string."""
    masked = mask_code(text)
    calls = []
    for match in _CALL_RE.finditer(masked):
        if masked[max(0, match.start() - 40) : match.start()].rstrip().endswith("function"):
            continue
        open_index = match.end() - 1
        close = matching_paren(masked, open_index)
        if close is None:
            continue
        name = _first_string_arg(text, open_index)
        if name is None:
            continue
        kind = match.group(1)
        end, chain = (None, ()) if kind == "describe" else _trailing_chain(text, masked, close)
        calls.append(PestCall(kind, name, match.start(), open_index, close, end, chain))
    return calls


def _full_name(call: PestCall, calls: list[PestCall]) -> tuple[tuple[str, ...], str]:
    groups = tuple(
        c.name for c in calls if c.kind == "describe" and c.open < call.start < c.close
    )
    return groups, DESCRIBE_SEPARATOR.join([*groups, call.name])


def _test_calls(text: str) -> dict[str, PestCall]:
    calls = scan_calls(text)
    return {
        _full_name(c, calls)[1]: c for c in calls if c.kind != "describe"
    }


def _targets(chain: tuple[Call, ...], source: PhpSource) -> list[tuple[Call, str | None]]:
    return [
        (call, parse_target(call.args, source.resolve_class))
        for call in chain
        if call.name in LINK_CALLS
    ]


def format_chain_target(name: str, member: str | None) -> str:
    return f"{name}::class.'::{member}'" if member else f"{name}::class"


def _references(text: str, methods: list[str]) -> tuple[str, list[str]]:
    """Import the classes of ``methods`` and return their argument text."""
    refs = []
    for method in methods:
        class_name, member = split_identifier(method)
        text, name = ensure_import(text, class_name)
        refs.append(format_chain_target(name, member))
    return text, refs


def _delete_span(text: str, start: int, end: int) -> str:
    """Remove ``text[start:end]``, dropping the line too if nothing else is left on it."""
    line_start = text.rfind("\n", 0, start) + 1
    line_end = text.find("\n", end)
    line_end = len(text) if line_end < 0 else line_end
    if not (text[line_start:start] + text[end:line_end]).strip():
        return text[:line_start] + text[line_end + 1 :]
    return text[:start] + text[end:]


class ChainingDialect:
    """Pest-style tests."""

    dialect = Dialect.CHAINING

    def supports(self, source: PhpSource) -> bool:
        return not source.has_class and bool(_PEST_CALL_RE.search(mask_code(source.text)))

    def extract(self, source: PhpSource, class_name: str) -> Extraction:
        extraction = Extraction()
        extraction.classes.add(class_name)
        calls = scan_calls(source.text)
        path = source.path
        assert path is not None

        for call in calls:
            if call.kind == "describe":
                continue
            groups, name = _full_name(call, calls)
            identifier = f"{class_name}::{name}"
            links = []
            for link_call, target in _targets(call.chain, source):
                line = line_of(source.text, link_call.start)
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
                                line=line,
                                dialect=Dialect.CHAINING,
                            )
                        )
                    continue
                links.append(
                    LinkTarget(
                        method=target,
                        with_coverage=link_call.name == "linksAndCovers",
                        line=line,
                    )
                )
            end_line = line_of(source.text, call.end) if call.end is not None else 0
            extraction.tests.append(
                ChainedTest(
                    class_name=class_name,
                    name=name,
                    path=path,
                    line=line_of(source.text, call.start),
                    links=tuple(links),
                    end_line=end_line,
                    describe_path=groups,
                )
            )
        log.debug("chaining_extracted", path=str(path), tests=len(extraction.tests))
        return extraction

    def inject_links(
        self, text: str, test: TestUnit, methods: list[str], *, with_coverage: bool
    ) -> str:
        call = _test_calls(text).get(test.name)
        if call is None or call.end is None:
            return text
        present = {t for _, t in _targets(call.chain, PhpSource.parse(text))}
        missing = [m for m in methods if m not in present]
        if not missing:
            return text

        text, refs = _references(text, missing)
        call = _test_calls(text)[test.name]
        assert call.end is not None
        method_name = "linksAndCovers" if with_coverage else "links"
        chain = "".join(f"->{method_name}({ref})" for ref in refs)
        return text[: call.end] + chain + text[call.end :]

    def replace_placeholder(
        self, text: str, test: TestUnit, placeholder: str, methods: list[str]
    ) -> str:
        call = _test_calls(text).get(test.name)
        if call is None:
            return text
        if not any(t == placeholder for _, t in _targets(call.chain, PhpSource.parse(text))):
            return text

        text, refs = _references(text, methods)
        call = _test_calls(text)[test.name]
        source = PhpSource.parse(text)
        for link_call, target in reversed(_targets(call.chain, source)):
            if target != placeholder:
                continue
            if not refs:
                text = _delete_span(text, link_call.start, link_call.end)
                continue
            line_start = text.rfind("\n", 0, link_call.start) + 1
            prefix = text[line_start : link_call.start]
            joiner = "\n" + prefix if not prefix.strip() else ""
            replacement = joiner.join(f"->{link_call.name}({ref})" for ref in refs)
            text = text[: link_call.start] + replacement + text[link_call.end :]
        return text

    def remove_links(self, text: str, test: TestUnit, methods: list[str]) -> str:
        call = _test_calls(text).get(test.name)
        if call is None:
            return text
        doomed = set(methods)
        for link_call, target in reversed(_targets(call.chain, PhpSource.parse(text))):
            if target in doomed:
                text = _delete_span(text, link_call.start, link_call.end)
        return text
