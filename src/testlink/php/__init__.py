"""Line-oriented PHP source reading."""

from testlink.php.imports import ensure_import, parse_imports, parse_namespace
from testlink.php.source import MemberHeader, MethodDecl, PhpSource, find_member_header

__all__ = [
    "MemberHeader",
    "MethodDecl",
    "PhpSource",
    "ensure_import",
    "find_member_header",
    "parse_imports",
    "parse_namespace",
]
