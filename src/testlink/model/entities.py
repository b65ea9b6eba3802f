"""Record types produced by a project scan.

Everything here is rebuilt from source on every run. Identifiers use the
fully-qualified class name without a leading separator:

    App\\Services\\UserService::create
    Tests\\Unit\\UserServiceTest::test_creates_user
    Tests\\Unit\\UserServiceTest::user service > creates user
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import ClassVar

DESCRIBE_SEPARATOR = " > "
PLACEHOLDER_RE = re.compile(r"^@@?[A-Za-z][A-Za-z0-9_-]*$")


class Dialect(str, Enum):
    """Test-declaration syntax a test is written in."""

    CHAINING = "chaining"
    ANNOTATION = "annotation"


class Role(str, Enum):
    """Which side of a link a record sits on."""

    PRODUCTION = "production"
    TEST = "test"


class LinkSource(str, Enum):
    """Where a link registration was read from."""

    ANNOTATION = "annotation"
    CHAINING = "chaining"
    FORWARD = "forward"


def split_identifier(identifier: str) -> tuple[str, str | None]:
    """Split ``Class::member`` into its parts; class-level ids have no member."""
    if "::" not in identifier:
        return identifier, None
    class_name, member = identifier.split("::", 1)
    return class_name, member


def short_class_name(fqcn: str) -> str:
    return fqcn.rstrip("\\").rsplit("\\", 1)[-1]


def is_placeholder(value: str) -> bool:
    """``@name`` or ``@@name``: a sigil, a letter, then letters, digits, ``-`` or ``_``."""
    return bool(PLACEHOLDER_RE.match(value))


def normalize_reference(reference: str) -> str:
    """Strip one leading path separator so ``\\A\\B`` and ``A\\B`` compare equal."""
    reference = reference.strip()
    return reference[1:] if reference.startswith("\\") else reference


@dataclass(frozen=True, slots=True)
class ProductionUnit:
    """A method on a production class."""

    class_name: str
    member: str
    path: Path
    line: int

    @property
    def identifier(self) -> str:
        return f"{self.class_name}::{self.member}"


@dataclass(frozen=True, slots=True)
class LinkTarget:
    """A link declared on a test, pointing at a production member."""

    method: str
    with_coverage: bool = True
    line: int = 0


@dataclass(frozen=True, slots=True)
class TestUnit:
    """A test declaration. Use one of the dialect variants below."""

    __test__ = False

    dialect: ClassVar[Dialect]
    supports_cross_refs: ClassVar[bool]

    class_name: str
    name: str
    path: Path
    line: int
    links: tuple[LinkTarget, ...] = ()

    @property
    def identifier(self) -> str:
        return f"{self.class_name}::{self.name}"

    @property
    def display_name(self) -> str:
        return self.name

    def links_to(self, method: str) -> bool:
        return any(link.method == method for link in self.links)


@dataclass(frozen=True, slots=True)
class ChainedTest(TestUnit):
    """``test('name', fn)->linksAndCovers(...)``, possibly nested in describe blocks."""

    dialect: ClassVar[Dialect] = Dialect.CHAINING
    supports_cross_refs: ClassVar[bool] = False

    end_line: int = 0
    describe_path: tuple[str, ...] = ()

    @property
    def leaf_name(self) -> str:
        return self.name.rsplit(DESCRIBE_SEPARATOR, 1)[-1]


@dataclass(frozen=True, slots=True)
class AnnotatedTest(TestUnit):
    """A test method carrying ``#[LinksAndCovers(...)]`` / ``#[Links(...)]`` attributes."""

    dialect: ClassVar[Dialect] = Dialect.ANNOTATION
    supports_cross_refs: ClassVar[bool] = True


@dataclass(frozen=True, slots=True)
class Link:
    """Edge between a test and a production member."""

    test: str
    method: str
    with_coverage: bool = True
    source: LinkSource = LinkSource.ANNOTATION


@dataclass(frozen=True, slots=True)
class PlaceholderEntry:
    """One occurrence of a placeholder marker such as ``@A`` or ``@@A``."""

    placeholder: str
    role: Role
    identifier: str
    path: Path
    line: int
    dialect: Dialect | None = None

    @property
    def see_tag_mode(self) -> bool:
        return self.placeholder.startswith("@@")

    @property
    def normalized_id(self) -> str:
        return self.placeholder[1:] if self.see_tag_mode else self.placeholder

    @property
    def class_name(self) -> str:
        return split_identifier(self.identifier)[0]

    @property
    def member(self) -> str:
        return split_identifier(self.identifier)[1] or ""


@dataclass(frozen=True, slots=True)
class CrossRefEntry:
    """An ``@see`` line in a member's documentation comment."""

    reference: str
    path: Path
    line: int
    context: Role
    member: str

    @property
    def normalized_reference(self) -> str:
        return normalize_reference(self.reference)

    @property
    def is_fully_qualified(self) -> bool:
        return self.reference.startswith("\\")

    @property
    def member_name(self) -> str:
        return split_identifier(self.member)[1] or ""


@dataclass(frozen=True, slots=True)
class NameResolutionIssue:
    """A short ``@see`` reference and what it resolves to, if anything."""

    original_reference: str
    resolved_fqcn: str | None
    path: Path
    line: int
    context: Role
    member: str
    is_resolvable: bool = True
    error_message: str | None = None

    @property
    def is_fixable(self) -> bool:
        return self.is_resolvable and self.resolved_fqcn is not None

    @property
    def member_name(self) -> str:
        return split_identifier(self.member)[1] or ""
