"""Dialect-specific extraction and text operations."""

from testlink.model.entities import Dialect, TestUnit
from testlink.syntax.annotation import AnnotationDialect
from testlink.syntax.base import DialectAdapter, Extraction, class_from_test_path
from testlink.syntax.chaining import ChainingDialect
from testlink.syntax.production import (
    extract_production,
    inject_forward_relations,
    replace_forward_placeholder,
)

ADAPTERS: dict[Dialect, DialectAdapter] = {
    Dialect.CHAINING: ChainingDialect(),
    Dialect.ANNOTATION: AnnotationDialect(),
}


def adapter_for(test: TestUnit | Dialect) -> DialectAdapter:
    """Adapter for a test declaration (or a dialect tag)."""
    dialect = test if isinstance(test, Dialect) else test.dialect
    return ADAPTERS[dialect]


__all__ = [
    "ADAPTERS",
    "AnnotationDialect",
    "ChainingDialect",
    "DialectAdapter",
    "Extraction",
    "adapter_for",
    "class_from_test_path",
    "extract_production",
    "inject_forward_relations",
    "replace_forward_placeholder",
]
