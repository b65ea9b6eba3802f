"""Line-oriented PHP front end.

Extracts exactly what the link engines consume: the namespace, the import
table, class and method declarations with their lines, the attribute and
documentation-comment lines directly above a method, and the arguments of
link-style calls. It is deliberately not a general parser; edits elsewhere
rely on it to locate text, never to re-render it.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

from testlink.php.imports import parse_imports, parse_namespace

_MODIFIERS = r"(?:(?:public|protected|private|static|final|abstract|readonly)\s+)*"

CLASS_RE = re.compile(
    r"^\s*(?:(?:abstract|final|readonly)\s+)*(?:class|trait|interface|enum)\s+([A-Za-z_]\w*)",
    re.IGNORECASE,
)
METHOD_RE = re.compile(
    rf"^(?P<indent>[ \t]*){_MODIFIERS}function\s+&?(?P<name>[A-Za-z_]\w*)\s*\(",
    re.IGNORECASE,
)
_NAMED_ARG_RE = re.compile(r"^[A-Za-z_]\w*\s*:(?!:)\s*")
_CLASS_CONST_RE = re.compile(r"^(\\?[A-Za-z_][\w\\]*)\s*::\s*class$")


def member_pattern(name: str) -> re.Pattern[str]:
    """Declaration pattern for one named method, modifiers optional."""
    return re.compile(
        rf"^[ \t]*{_MODIFIERS}function\s+&?{re.escape(name)}\s*\(",
        re.IGNORECASE,
    )


def find_member_line(lines: list[str], name: str, start: int = 0) -> int | None:
    """0-based index of the first declaration of ``name`` at or after ``start``."""
    pattern = member_pattern(name)
    for i in range(start, len(lines)):
        if pattern.match(lines[i]):
            return i
    return None


def leading_whitespace(line: str) -> str:
    return line[: len(line) - len(line.lstrip(" \t"))]


def split_lines(text: str) -> list[str]:
    """Split on newlines after folding CRLF, keeping a trailing empty entry."""
    return text.replace("\r\n", "\n").split("\n")


# =============================================================================
# Declarations
# =============================================================================


@dataclass(frozen=True, slots=True)
class MethodDecl:
    """A method declaration. ``index`` is the 0-based line index."""

    name: str
    class_name: str
    index: int
    indent: str

    @property
    def line(self) -> int:
        return self.index + 1

    @property
    def identifier(self) -> str:
        return f"{self.class_name}::{self.name}"


@dataclass(frozen=True, slots=True)
class MemberHeader:
    """Attribute and doc-comment lines directly above a declaration.

    Ranges are inclusive 0-based line indices. ``start`` is the first line of
    the whole header, or the declaration line itself when there is none.
    """

    start: int
    attributes: tuple[tuple[int, int], ...] = ()
    doc: tuple[int, int] | None = None

    def attribute_lines(self, lines: list[str]) -> Iterator[tuple[int, str]]:
        """Yield ``(first_index, joined_text)`` for each attribute."""
        for first, last in self.attributes:
            yield first, " ".join(line.strip() for line in lines[first : last + 1])


def _attribute_start(lines: list[str], index: int, limit: int = 20) -> int | None:
    """Find the ``#[`` line opening a multi-line attribute ending at ``index``."""
    for k in range(index - 1, max(-1, index - limit), -1):
        s = lines[k].strip()
        if s.startswith("#["):
            return k
        if not s or s.endswith((";", "{", "}", "*/")):
            return None
    return None


def find_member_header(lines: list[str], index: int) -> MemberHeader:
    """Walk upward from a declaration collecting its attributes and doc comment.

    Blank lines and attribute lines are skipped. The first doc comment found
    belongs to the member; after it only further attribute lines are
    collected. Any other content ends the header.
    """
    attributes: list[tuple[int, int]] = []
    doc: tuple[int, int] | None = None
    j = index - 1
    while j >= 0:
        s = lines[j].strip()
        if not s:
            j -= 1
            continue
        if s.startswith("#["):
            attributes.append((j, j))
            j -= 1
            continue
        if s.endswith("]") and not s.endswith("*/"):
            first = _attribute_start(lines, j)
            if first is None:
                break
            attributes.append((first, j))
            j = first - 1
            continue
        if doc is None and s.endswith("*/"):
            k = j
            while k >= 0 and not lines[k].strip().startswith("/**"):
                if k < j and lines[k].strip().endswith("*/"):
                    k = -1
                    break
                k -= 1
            if k < 0:
                break
            doc = (k, j)
            j = k - 1
            continue
        break

    attributes.reverse()
    starts = [first for first, _ in attributes]
    if doc is not None:
        starts.append(doc[0])
    return MemberHeader(start=min(starts, default=index), attributes=tuple(attributes), doc=doc)


@dataclass(slots=True)
class PhpSource:
    """Parsed view of one PHP file."""

    text: str
    path: Path | None = None
    namespace: str = ""
    imports: dict[str, str] = field(default_factory=dict)
    classes: list[tuple[str, int]] = field(default_factory=list)
    methods: list[MethodDecl] = field(default_factory=list)
    lines: list[str] = field(default_factory=list)

    @classmethod
    def parse(cls, text: str, path: Path | None = None) -> PhpSource:
        text = text.replace("\r\n", "\n")
        lines = text.split("\n")
        namespace = parse_namespace(text)
        source = cls(
            text=text,
            path=path,
            namespace=namespace,
            imports=parse_imports(text),
            lines=lines,
        )

        current_class = ""
        for i, line in enumerate(lines):
            class_match = CLASS_RE.match(line)
            if class_match:
                current_class = source.qualify(class_match.group(1))
                source.classes.append((current_class, i + 1))
                continue
            method_match = METHOD_RE.match(line)
            if method_match and current_class:
                source.methods.append(
                    MethodDecl(
                        name=method_match.group("name"),
                        class_name=current_class,
                        index=i,
                        indent=method_match.group("indent"),
                    )
                )
        return source

    @classmethod
    def read(cls, path: Path) -> PhpSource:
        """Read and parse a file. Raises OSError/UnicodeDecodeError on failure."""
        return cls.parse(path.read_text(encoding="utf-8"), path)

    @property
    def has_class(self) -> bool:
        return bool(self.classes)

    def qualify(self, name: str) -> str:
        return f"{self.namespace}\\{name}" if self.namespace else name

    def resolve_class(self, name: str) -> str:
        """Resolve a class name the way PHP resolves ``Name::class``."""
        name = name.strip()
        if name.startswith("\\"):
            return name[1:]
        head, _, rest = name.partition("\\")
        if head in self.imports:
            return self.imports[head] + ("\\" + rest if rest else "")
        return self.qualify(name)

    def header(self, method: MethodDecl) -> MemberHeader:
        return find_member_header(self.lines, method.index)

    def methods_of(self, class_name: str) -> list[MethodDecl]:
        return [m for m in self.methods if m.class_name == class_name]

    def locate_method(self, name: str, class_name: str | None = None) -> MethodDecl | None:
        """Find a method by name, preferring the given owning class."""
        candidates = [m for m in self.methods if m.name == name]
        if class_name is not None:
            owned = [m for m in candidates if m.class_name == class_name]
            if owned:
                return owned[0]
        return candidates[0] if candidates else None


# =============================================================================
# Call arguments
# =============================================================================


@dataclass(frozen=True, slots=True)
class Call:
    """A named call or attribute with its raw argument text.

    ``start``/``end`` delimit the whole construct in the text: from ``#[`` to
    the closing ``]`` for attributes, from ``->`` to ``)`` for chained calls.
    """

    name: str
    args: str
    start: int
    end: int


def skip_string(text: str, i: int) -> int:
    """Index just past the quoted string starting at ``i``."""
    quote = text[i]
    i += 1
    while i < len(text):
        if text[i] == "\\":
            i += 2
            continue
        if text[i] == quote:
            return i + 1
        i += 1
    return len(text)


def matching_paren(text: str, open_index: int) -> int | None:
    """Index of the ``)`` closing the ``(`` at ``open_index``, ignoring strings."""
    depth = 0
    i = open_index
    while i < len(text):
        ch = text[i]
        if ch in "'\"":
            i = skip_string(text, i)
            continue
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return None


def find_attributes(text: str, names: tuple[str, ...]) -> list[Call]:
    """Find ``#[Name(...)]`` attributes with one of the given short names."""
    pattern = re.compile(
        r"#\[\s*\\?(?:[\w\\]*\\)?(?P<name>" + "|".join(map(re.escape, names)) + r")\s*\("
    )
    calls = []
    for match in pattern.finditer(text):
        close = matching_paren(text, match.end() - 1)
        if close is None:
            continue
        bracket = text.find("]", close)
        if bracket < 0 or text[close + 1 : bracket].strip():
            continue
        calls.append(Call(match.group("name"), text[match.end() : close], match.start(), bracket + 1))
    return calls


def find_chain_calls(text: str, names: tuple[str, ...]) -> list[Call]:
    """Find ``->name(...)`` chained calls with one of the given names."""
    pattern = re.compile(r"->\s*(?P<name>" + "|".join(map(re.escape, names)) + r")\s*\(")
    calls = []
    for match in pattern.finditer(text):
        close = matching_paren(text, match.end() - 1)
        if close is None:
            continue
        calls.append(Call(match.group("name"), text[match.end() : close], match.start(), close + 1))
    return calls


def split_top_level(text: str, separator: str) -> list[str]:
    """Split on ``separator`` outside strings and brackets."""
    parts = []
    depth = 0
    current = 0
    i = 0
    while i < len(text):
        ch = text[i]
        if ch in "'\"":
            i = skip_string(text, i)
            continue
        if ch in "([":
            depth += 1
        elif ch in ")]":
            depth -= 1
        elif ch == separator and depth == 0:
            parts.append(text[current:i])
            current = i + 1
        i += 1
    parts.append(text[current:])
    return [p.strip() for p in parts]


def unquote(literal: str) -> str | None:
    """Value of a PHP string literal, or None if ``literal`` is not one."""
    literal = literal.strip()
    if len(literal) < 2 or literal[0] not in "'\"" or literal[-1] != literal[0]:
        return None
    body = literal[1:-1]
    if literal[0] == "'":
        return body.replace("\\'", "'").replace("\\\\", "\\")
    return body.replace('\\"', '"').replace("\\\\", "\\").replace("\\$", "$")


def evaluate_expression(expr: str, resolve_class: Callable[[str], str]) -> str | None:
    """Evaluate string literals, ``X::class`` and their ``.`` concatenation."""
    expr = _NAMED_ARG_RE.sub("", expr.strip(), count=1)
    if not expr:
        return None
    pieces = []
    for piece in split_top_level(expr, "."):
        value = unquote(piece)
        if value is None:
            const = _CLASS_CONST_RE.match(piece)
            if not const:
                return None
            value = resolve_class(const.group(1))
        pieces.append(value)
    return "".join(pieces)


def parse_target(args: str, resolve_class: Callable[[str], str]) -> str | None:
    """Parse link-style arguments into ``Class::member`` (or ``Class``/placeholder).

    Accepts ``X::class, 'm'``, ``X::class``, ``'A\\X', 'm'``, ``'A\\X::m'``,
    ``X::class.'::m'`` and placeholder strings such as ``'@A'``.
    """
    parts = [p for p in split_top_level(args, ",") if p]
    if not parts:
        return None
    first = evaluate_expression(parts[0], resolve_class)
    if first is None:
        return None
    if first.startswith("@"):
        return first
    first = first.lstrip("\\")
    if len(parts) > 1 and "::" not in first:
        member = evaluate_expression(parts[1], resolve_class)
        if member:
            return f"{first}::{member}"
    return first


def line_of(text: str, offset: int) -> int:
    """1-based line number of a character offset."""
    return text.count("\n", 0, offset) + 1
