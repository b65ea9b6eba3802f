"""Entity model."""

from testlink.model.entities import (
    DESCRIBE_SEPARATOR,
    AnnotatedTest,
    ChainedTest,
    CrossRefEntry,
    Dialect,
    Link,
    LinkSource,
    LinkTarget,
    PLACEHOLDER_RE,
    NameResolutionIssue,
    PlaceholderEntry,
    ProductionUnit,
    Role,
    TestUnit,
    is_placeholder,
    normalize_reference,
    short_class_name,
    split_identifier,
)

__all__ = [
    "DESCRIBE_SEPARATOR",
    "AnnotatedTest",
    "ChainedTest",
    "CrossRefEntry",
    "Dialect",
    "Link",
    "LinkSource",
    "LinkTarget",
    "PLACEHOLDER_RE",
    "NameResolutionIssue",
    "PlaceholderEntry",
    "ProductionUnit",
    "Role",
    "TestUnit",
    "is_placeholder",
    "normalize_reference",
    "short_class_name",
    "split_identifier",
]
