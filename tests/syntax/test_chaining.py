"""Tests for syntax/chaining.py - Pest-style test files."""

from __future__ import annotations

from pathlib import Path

from testlink.model.entities import ChainedTest, Dialect
from testlink.php.source import PhpSource
from testlink.syntax.chaining import ChainingDialect, mask_code, scan_calls

CLASS = "Tests\\Unit\\UserServiceTest"

PEST_FILE = """<?php

use App\\Services\\UserService;

describe('users', function () {
    test('creates user', function () {
        // test('commented out', fn () => 1);
        expect('test(\\'quoted\\')')->toBeString();
    })->linksAndCovers(UserService::class.'::create');

    it('deletes user', function () {
    })->links(UserService::class.'::delete')->group('slow');
});

test('standalone', function () {
})->linksAndCovers('@A');
"""

dialect = ChainingDialect()


def _source(text: str = PEST_FILE) -> PhpSource:
    return PhpSource.parse(text, Path("/p/tests/Unit/UserServiceTest.php"))


def _test(name: str, text: str = PEST_FILE) -> ChainedTest:
    extraction = dialect.extract(_source(text), CLASS)
    return next(t for t in extraction.tests if t.name == name)  # type: ignore[return-value]


class TestScanning:
    """Finding test calls."""

    def test_mask_keeps_offsets(self) -> None:
        text = "test('a(b', fn () => 1); // test('c')"
        masked = mask_code(text)

        assert len(masked) == len(text)
        assert masked[text.index("//") :].strip() == ""
        assert masked.startswith("test('   ',")

    def test_commented_and_quoted_calls_ignored(self) -> None:
        names = [c.name for c in scan_calls(PEST_FILE)]
        assert names == ["users", "creates user", "deletes user", "standalone"]

    def test_supports_only_classless_pest_files(self) -> None:
        assert dialect.supports(_source())
        assert not dialect.supports(PhpSource.parse("<?php\nclass A\n{\n}\n"))
        assert not dialect.supports(PhpSource.parse("<?php\n$x = 1;\n"))


class TestExtract:
    """Tests for ChainingDialect.extract."""

    def test_describe_path_in_names(self) -> None:
        extraction = dialect.extract(_source(), CLASS)

        assert [t.identifier for t in extraction.tests] == [
            f"{CLASS}::users > creates user",
            f"{CLASS}::users > deletes user",
            f"{CLASS}::standalone",
        ]
        first = extraction.tests[0]
        assert isinstance(first, ChainedTest)
        assert first.describe_path == ("users",)
        assert first.line == 6
        assert first.end_line == 9
        assert extraction.classes == {CLASS}

    def test_links_and_coverage_flag(self) -> None:
        create = _test("users > creates user")
        delete = _test("users > deletes user")

        assert [(link.method, link.with_coverage) for link in create.links] == [
            ("App\\Services\\UserService::create", True)
        ]
        assert [(link.method, link.with_coverage) for link in delete.links] == [
            ("App\\Services\\UserService::delete", False)
        ]

    def test_placeholders_are_not_links(self) -> None:
        extraction = dialect.extract(_source(), CLASS)

        standalone = next(t for t in extraction.tests if t.name == "standalone")
        assert standalone.links == ()
        assert len(extraction.placeholders) == 1
        entry = extraction.placeholders[0]
        assert entry.placeholder == "@A"
        assert entry.identifier == f"{CLASS}::standalone"
        assert entry.dialect is Dialect.CHAINING
        assert entry.line == 16


class TestInjectLinks:
    """Tests for ChainingDialect.inject_links."""

    def test_appends_before_semicolon(self) -> None:
        test = _test("standalone")

        text = dialect.inject_links(
            PEST_FILE, test, ["App\\Services\\UserService::update"], with_coverage=True
        )

        assert "})->linksAndCovers('@A')->linksAndCovers(UserService::class.'::update');" in text

    def test_link_only_uses_links(self) -> None:
        test = _test("standalone")

        text = dialect.inject_links(
            PEST_FILE, test, ["App\\Services\\UserService::update"], with_coverage=False
        )

        assert "->links(UserService::class.'::update');" in text

    def test_adds_import_for_new_class(self) -> None:
        test = _test("standalone")

        text = dialect.inject_links(
            PEST_FILE, test, ["App\\Services\\OrderService::place"], with_coverage=True
        )

        assert "use App\\Services\\UserService;\nuse App\\Services\\OrderService;\n" in text
        assert "->linksAndCovers(OrderService::class.'::place');" in text

    def test_existing_link_not_duplicated(self) -> None:
        test = _test("users > creates user")

        text = dialect.inject_links(
            PEST_FILE, test, ["App\\Services\\UserService::create"], with_coverage=True
        )

        assert text == PEST_FILE


class TestReplacePlaceholder:
    """Tests for ChainingDialect.replace_placeholder."""

    def test_one_call_per_method_keeping_call_name(self) -> None:
        test = _test("standalone")

        text = dialect.replace_placeholder(
            PEST_FILE,
            test,
            "@A",
            ["App\\Services\\UserService::create", "App\\Services\\UserService::update"],
        )

        assert "'@A'" not in text
        assert (
            "})->linksAndCovers(UserService::class.'::create')"
            "->linksAndCovers(UserService::class.'::update');"
        ) in text

    def test_empty_methods_remove_marker(self) -> None:
        test = _test("standalone")

        text = dialect.replace_placeholder(PEST_FILE, test, "@A", [])

        assert "test('standalone', function () {\n});\n" in text

    def test_other_placeholder_untouched(self) -> None:
        test = _test("standalone")

        assert dialect.replace_placeholder(PEST_FILE, test, "@B", ["App\\X::y"]) == PEST_FILE


class TestRemoveLinks:
    """Tests for ChainingDialect.remove_links."""

    def test_removes_only_named_targets(self) -> None:
        test = _test("users > deletes user")

        text = dialect.remove_links(PEST_FILE, test, ["App\\Services\\UserService::delete"])

        assert "    })->group('slow');" in text
        assert "::delete" not in text
        assert "->linksAndCovers(UserService::class.'::create');" in text

    def test_own_line_call_removed_with_line(self) -> None:
        text = PEST_FILE.replace(
            "})->linksAndCovers('@A');",
            "})\n    ->linksAndCovers(UserService::class.'::gone')\n    ->group('x');",
        )
        test = _test("standalone", text)

        result = dialect.remove_links(text, test, ["App\\Services\\UserService::gone"])

        assert "test('standalone', function () {\n})\n    ->group('x');\n" in result
