"""Link graph and its consistency checks."""

from testlink.registry.links import LinkRegistry
from testlink.registry.validator import LinkPair, LinkValidator, ValidationResult

__all__ = ["LinkPair", "LinkRegistry", "LinkValidator", "ValidationResult"]
