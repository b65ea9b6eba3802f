"""N:M placeholder resolution.

One id is a topic: every production member tagged with it is paired with
every test tagged with it. An id with entries on only one side, or a
``@@`` id used by a chaining-dialect test, is an error for that id alone;
the other ids still resolve.
"""

from __future__ import annotations

from testlink.core.errors import PlaceholderError
from testlink.core.logging import get_logger
from testlink.model.entities import Dialect, is_placeholder
from testlink.placeholder.models import PlaceholderAction, PlaceholderResult
from testlink.placeholder.registry import PlaceholderRegistry

log = get_logger(__name__)


def no_test_error(placeholder: str, production: int) -> str:
    return (
        f"Placeholder {placeholder} has no matching test entries "
        f"({production} production {'entry' if production == 1 else 'entries'})"
    )


def no_production_error(placeholder: str, tests: int) -> str:
    return (
        f"Placeholder {placeholder} has no matching production entries "
        f"({tests} test {'entry' if tests == 1 else 'entries'})"
    )


def chaining_cross_ref_error(placeholder: str) -> str:
    return (
        f"Placeholder {placeholder} uses @@ (for @see cross-references) but the chaining "
        f"dialect does not support cross-reference generation. Use @{placeholder[2:]} instead."
    )


class PlaceholderEngine:
    """Resolves the ids of a ``PlaceholderRegistry`` into actions."""

    def __init__(self, registry: PlaceholderRegistry) -> None:
        self.registry = registry

    def resolve_all(self) -> PlaceholderResult:
        result = PlaceholderResult()
        for placeholder in self.registry.ids():
            self._resolve_into(placeholder, result)
        log.debug(
            "placeholders_resolved",
            ids=len(self.registry),
            actions=len(result.actions),
            errors=len(result.errors),
        )
        return result

    def resolve_placeholder(self, placeholder: str) -> PlaceholderResult:
        """Resolve one id, validating its format first.

        An id that appears nowhere is reported as an error in the result.

        Raises:
            PlaceholderError: ``placeholder`` is malformed.
        """
        if not is_placeholder(placeholder):
            raise PlaceholderError.invalid_format(placeholder)
        result = PlaceholderResult()
        if not self.registry.has(placeholder):
            result.errors.append(PlaceholderError.not_found(placeholder).message)
            return result
        self._resolve_into(placeholder, result)
        return result

    def _resolve_into(self, placeholder: str, result: PlaceholderResult) -> None:
        production = self.registry.production_entries(placeholder)
        tests = self.registry.test_entries(placeholder)

        if not tests:
            result.errors.append(no_test_error(placeholder, len(production)))
            return
        if not production:
            result.errors.append(no_production_error(placeholder, len(tests)))
            return
        if any(t.see_tag_mode and t.dialect is Dialect.CHAINING for t in tests):
            result.errors.append(chaining_cross_ref_error(placeholder))
            return

        for production_entry in production:
            for test_entry in tests:
                result.actions.append(
                    PlaceholderAction(
                        placeholder=placeholder,
                        production=production_entry,
                        test=test_entry,
                    )
                )
        result.counts[placeholder] = (len(production), len(tests))
