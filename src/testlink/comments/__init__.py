"""Cross-reference comment reading, editing and bookkeeping."""

from testlink.comments.editor import (
    EditResult,
    add_cross_refs,
    remove_all_cross_refs,
    remove_cross_refs,
)
from testlink.comments.parser import extract_references, parse_reference, see_reference
from testlink.comments.registry import CrossRefRegistry

__all__ = [
    "CrossRefRegistry",
    "EditResult",
    "add_cross_refs",
    "extract_references",
    "parse_reference",
    "remove_all_cross_refs",
    "remove_cross_refs",
    "see_reference",
]
