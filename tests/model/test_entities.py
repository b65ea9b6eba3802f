"""Tests for model/entities.py."""

from __future__ import annotations

from pathlib import Path

import pytest

from testlink.model.entities import (
    AnnotatedTest,
    ChainedTest,
    CrossRefEntry,
    Dialect,
    LinkTarget,
    NameResolutionIssue,
    PlaceholderEntry,
    ProductionUnit,
    Role,
    is_placeholder,
    normalize_reference,
    short_class_name,
    split_identifier,
)


class TestIdentifiers:
    """Identifier helpers."""

    def test_split_member_identifier(self) -> None:
        assert split_identifier("App\\UserService::create") == ("App\\UserService", "create")

    def test_split_class_identifier(self) -> None:
        assert split_identifier("App\\UserService") == ("App\\UserService", None)

    def test_split_keeps_describe_path_in_member(self) -> None:
        """Only the first ``::`` separates class from member."""
        class_name, member = split_identifier("Tests\\UserTest::users > creates user")
        assert class_name == "Tests\\UserTest"
        assert member == "users > creates user"

    def test_short_class_name(self) -> None:
        assert short_class_name("App\\Services\\UserService") == "UserService"
        assert short_class_name("UserService") == "UserService"

    def test_normalize_strips_one_leading_separator(self) -> None:
        assert normalize_reference("\\App\\User::create") == "App\\User::create"
        assert normalize_reference("App\\User::create") == "App\\User::create"
        assert normalize_reference("  \\App\\User ") == "App\\User"


class TestIsPlaceholder:
    """Placeholder grammar."""

    @pytest.mark.parametrize(
        "value",
        ["@A", "@@A", "@user-create", "@user_create", "@@Topic42"],
    )
    def test_valid(self, value: str) -> None:
        assert is_placeholder(value)

    @pytest.mark.parametrize(
        "value",
        ["A", "@", "@@", "@1abc", "@@@A", "@user create", "@user.create", "@A!"],
    )
    def test_invalid(self, value: str) -> None:
        assert not is_placeholder(value)


class TestUnits:
    """Production and test records."""

    def test_production_identifier(self) -> None:
        unit = ProductionUnit(class_name="App\\UserService", member="create", path=Path("a.php"), line=3)
        assert unit.identifier == "App\\UserService::create"

    def test_chained_test_variant(self) -> None:
        test = ChainedTest(
            class_name="Tests\\Unit\\UserServiceTest",
            name="users > creates user",
            path=Path("t.php"),
            line=5,
            describe_path=("users",),
        )
        assert test.dialect is Dialect.CHAINING
        assert not test.supports_cross_refs
        assert test.identifier == "Tests\\Unit\\UserServiceTest::users > creates user"
        assert test.leaf_name == "creates user"

    def test_annotated_test_variant(self) -> None:
        test = AnnotatedTest(
            class_name="Tests\\Unit\\UserServiceTest",
            name="test_create",
            path=Path("t.php"),
            line=5,
            links=(LinkTarget("App\\UserService::create"),),
        )
        assert test.dialect is Dialect.ANNOTATION
        assert test.supports_cross_refs
        assert test.links_to("App\\UserService::create")
        assert not test.links_to("App\\UserService::delete")


class TestPlaceholderEntry:
    """Placeholder occurrences."""

    def test_double_sigil_is_cross_ref_mode(self) -> None:
        entry = PlaceholderEntry(
            placeholder="@@A",
            role=Role.TEST,
            identifier="Tests\\ATest::test_a",
            path=Path("t.php"),
            line=1,
        )
        assert entry.see_tag_mode
        assert entry.normalized_id == "@A"
        assert entry.class_name == "Tests\\ATest"
        assert entry.member == "test_a"

    def test_single_sigil(self) -> None:
        entry = PlaceholderEntry(
            placeholder="@A",
            role=Role.PRODUCTION,
            identifier="App\\A::run",
            path=Path("a.php"),
            line=1,
        )
        assert not entry.see_tag_mode
        assert entry.normalized_id == "@A"


class TestCrossRefs:
    """Cross-reference and name-resolution records."""

    def test_cross_ref_entry(self) -> None:
        entry = CrossRefEntry(
            reference="\\Tests\\ATest::test_a",
            path=Path("a.php"),
            line=4,
            context=Role.PRODUCTION,
            member="App\\A::run",
        )
        assert entry.is_fully_qualified
        assert entry.normalized_reference == "Tests\\ATest::test_a"
        assert entry.member_name == "run"

    def test_issue_fixable_needs_resolved_form(self) -> None:
        fixable = NameResolutionIssue(
            original_reference="ATest::test_a",
            resolved_fqcn="\\Tests\\ATest::test_a",
            path=Path("a.php"),
            line=4,
            context=Role.PRODUCTION,
            member="App\\A::run",
        )
        unresolved = NameResolutionIssue(
            original_reference="Missing::x",
            resolved_fqcn=None,
            path=Path("a.php"),
            line=4,
            context=Role.PRODUCTION,
            member="App\\A::run",
            is_resolvable=False,
            error_message="Could not resolve 'Missing'",
        )
        assert fixable.is_fixable
        assert not unresolved.is_fixable
