"""Tests for registry/validator.py."""

from __future__ import annotations

from testlink.model.entities import LinkSource
from testlink.registry.links import LinkRegistry
from testlink.registry.validator import LinkPair, LinkValidator, ValidationResult

TEST_A = "Tests\\UserTest::test_a"
TEST_B = "Tests\\UserTest::test_b"
CREATE = "App\\User::create"
DELETE = "App\\User::delete"

validator = LinkValidator()


class TestValidate:
    """Duplicate detection across dialects."""

    def test_no_duplicates(self) -> None:
        annotation = LinkRegistry(LinkSource.ANNOTATION)
        annotation.register_link(TEST_A, CREATE)
        chaining = LinkRegistry(LinkSource.CHAINING)
        chaining.register_link(TEST_B, CREATE)

        result = validator.validate(annotation, chaining)

        assert result.valid
        assert result.total_links == 2

    def test_pair_in_both_dialects_is_duplicate(self) -> None:
        annotation = LinkRegistry(LinkSource.ANNOTATION)
        annotation.register_link(TEST_A, CREATE)
        chaining = LinkRegistry(LinkSource.CHAINING)
        chaining.register_link(TEST_A, CREATE)

        result = validator.validate(annotation, chaining)

        assert not result.valid
        assert result.duplicates == [LinkPair(test=TEST_A, method=CREATE)]

    def test_empty_registries_are_valid(self) -> None:
        result = validator.validate(LinkRegistry(), LinkRegistry(LinkSource.CHAINING))

        assert result.valid
        assert result.in_sync
        assert result.total_links == 0


class TestValidateBidirectional:
    """Links compared against TestedBy forward relations."""

    def test_in_sync(self) -> None:
        registry = LinkRegistry()
        registry.register_link(TEST_A, CREATE)
        registry.register_forward_relation(CREATE, TEST_A)

        result = validator.validate_bidirectional(registry)

        assert result.in_sync
        assert result.total_links == 1

    def test_missing_and_orphan(self) -> None:
        # Given: a link without its TestedBy, and a TestedBy without its link
        registry = LinkRegistry()
        registry.register_link(TEST_A, CREATE)
        registry.register_forward_relation(DELETE, TEST_B)

        # When
        result = validator.validate_bidirectional(registry)

        # Then
        assert not result.in_sync
        assert result.valid
        assert result.missing_forward_relation == [LinkPair(test=TEST_A, method=CREATE)]
        assert result.orphan_forward_relation == [LinkPair(test=TEST_B, method=DELETE)]
        assert (result.missing_count, result.orphan_count) == (1, 1)

    def test_findings_sorted_by_method_then_test(self) -> None:
        registry = LinkRegistry()
        registry.register_link(TEST_B, DELETE)
        registry.register_link(TEST_B, CREATE)
        registry.register_link(TEST_A, CREATE)

        result = validator.validate_bidirectional(registry)

        assert [(p.method, p.test) for p in result.missing_forward_relation] == [
            (CREATE, TEST_A),
            (CREATE, TEST_B),
            (DELETE, TEST_B),
        ]


def test_to_dict_uses_camel_case() -> None:
    result = ValidationResult(
        duplicates=[LinkPair(test=TEST_A, method=CREATE)],
        total_links=3,
    )

    assert result.to_dict() == {
        "valid": False,
        "duplicates": [{"test": TEST_A, "method": CREATE}],
        "missingForwardRelation": [],
        "orphanForwardRelation": [],
        "totalLinks": 3,
    }
