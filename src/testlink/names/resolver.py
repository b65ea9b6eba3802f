"""Short type name to fully-qualified name resolution."""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from testlink.core.errors import NameResolutionError
from testlink.core.logging import get_logger
from testlink.php.imports import parse_imports, parse_namespace

log = get_logger(__name__)

_CLASS_LIKE_RE = re.compile(r"^[A-Z]")


@dataclass(frozen=True, slots=True)
class FileContext:
    namespace: str
    imports: dict[str, str] = field(default_factory=dict)


def split_reference(reference: str) -> tuple[str | None, str | None]:
    """``(class, member)`` of a reference; the class is None for a bare member."""
    if "::" in reference:
        class_name, member = reference.split("::", 1)
        return class_name, member.rstrip("()")
    if _CLASS_LIKE_RE.match(reference):
        return reference, None
    return None, reference


class NameResolver:
    """Resolves ``@see`` references using the owning file's imports.

    Lookup order: an import (direct, aliased or grouped), then a class of
    that name in the file's namespace, then a global class. The last two
    only succeed for classes in ``known_classes``. Import tables are parsed
    once per file.
    """

    def __init__(self, known_classes: Iterable[str] = ()) -> None:
        self.known_classes = set(known_classes)
        self._cache: dict[Path, FileContext] = {}

    def context_for(self, path: Path) -> FileContext:
        cached = self._cache.get(path)
        if cached is not None:
            return cached
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise NameResolutionError.unreadable(str(path)) from e
        context = FileContext(namespace=parse_namespace(text), imports=parse_imports(text))
        self._cache[path] = context
        return context

    def resolve_class(self, name: str, context: FileContext) -> str | None:
        head, _, rest = name.partition("\\")
        if head in context.imports:
            return context.imports[head] + ("\\" + rest if rest else "")
        if context.namespace:
            candidate = f"{context.namespace}\\{name}"
            if candidate in self.known_classes:
                return candidate
        if name in self.known_classes:
            return name
        return None

    def resolve(self, reference: str, path: Path) -> str:
        """Fully-qualified form of ``reference``, with a leading ``\\``.

        Raises:
            NameResolutionError: the file cannot be read, the reference names
                only a member, or the class is not imported or known.
        """
        if reference.startswith("\\"):
            return reference
        context = self.context_for(path)
        class_name, member = split_reference(reference)
        if class_name is None:
            raise NameResolutionError.method_only(reference)
        resolved = self.resolve_class(class_name, context)
        if resolved is None:
            raise NameResolutionError.unresolved(class_name)
        fqcn = "\\" + resolved.lstrip("\\")
        if member is not None:
            fqcn += f"::{member}"
        log.debug("name_resolved", reference=reference, fqcn=fqcn)
        return fqcn

    def clear_cache(self) -> None:
        self._cache.clear()
