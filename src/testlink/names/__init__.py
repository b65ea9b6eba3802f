"""Fully-qualified name resolution for ``@see`` references."""

from testlink.names.fqcn import FixResult, FqcnValidator, NameIssueRegistry, replace_reference
from testlink.names.resolver import FileContext, NameResolver, split_reference

__all__ = [
    "FileContext",
    "FixResult",
    "FqcnValidator",
    "NameIssueRegistry",
    "NameResolver",
    "replace_reference",
    "split_reference",
]
