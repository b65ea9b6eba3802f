"""Placeholder markers: registry, N:M resolution and rewriting."""

from testlink.placeholder.engine import PlaceholderEngine
from testlink.placeholder.models import PlaceholderAction, PlaceholderResult
from testlink.placeholder.modifier import PlaceholderModifier, declaration_for
from testlink.placeholder.registry import PlaceholderRegistry, PlaceholderSummary

__all__ = [
    "PlaceholderAction",
    "PlaceholderEngine",
    "PlaceholderModifier",
    "PlaceholderRegistry",
    "PlaceholderResult",
    "PlaceholderSummary",
    "declaration_for",
]
