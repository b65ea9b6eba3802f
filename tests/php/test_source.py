"""Tests for php/source.py - the line-oriented PHP front end."""

from __future__ import annotations

import pytest

from testlink.php.source import (
    PhpSource,
    evaluate_expression,
    find_attributes,
    find_chain_calls,
    find_member_line,
    line_of,
    matching_paren,
    parse_target,
    split_top_level,
    unquote,
)

SERVICE = """<?php

namespace App\\Services;

use Tests\\Unit\\UserServiceTest;

final class UserService
{
    /**
     * Creates a user.
     */
    #[TestedBy(UserServiceTest::class, 'test_create')]
    #[TestedBy(
        UserServiceTest::class,
        'test_create_twice',
    )]
    public function create(): void
    {
    }

    private static function helper(): void
    {
    }
}
"""


def _resolve(name: str) -> str:
    return {"UserService": "App\\UserService"}.get(name, name)


class TestPhpSource:
    """Tests for PhpSource.parse."""

    def test_classes_and_methods(self) -> None:
        source = PhpSource.parse(SERVICE)

        assert source.namespace == "App\\Services"
        assert source.classes == [("App\\Services\\UserService", 7)]
        assert [m.identifier for m in source.methods] == [
            "App\\Services\\UserService::create",
            "App\\Services\\UserService::helper",
        ]
        create = source.methods[0]
        assert create.line == 17
        assert create.indent == "    "

    def test_header_collects_attributes_and_doc(self) -> None:
        source = PhpSource.parse(SERVICE)
        header = source.header(source.methods[0])

        assert header.doc == (8, 10)
        assert header.attributes == ((11, 11), (12, 15))
        assert header.start == 8
        joined = [text for _, text in header.attribute_lines(source.lines)]
        assert joined[1].startswith("#[TestedBy( UserServiceTest::class,")

    def test_method_without_header(self) -> None:
        source = PhpSource.parse(SERVICE)
        helper = source.methods[1]
        header = source.header(helper)

        assert header.start == helper.index
        assert header.doc is None
        assert header.attributes == ()

    def test_resolve_class(self) -> None:
        source = PhpSource.parse(SERVICE)

        assert source.resolve_class("UserServiceTest") == "Tests\\Unit\\UserServiceTest"
        assert source.resolve_class("\\Other\\Thing") == "Other\\Thing"
        assert source.resolve_class("OrderService") == "App\\Services\\OrderService"

    def test_crlf_is_folded(self) -> None:
        source = PhpSource.parse("<?php\r\nclass A\r\n{\r\n    public function run()\r\n    {}\r\n}\r\n")
        assert "\r" not in source.text
        assert source.methods[0].line == 4

    def test_locate_method_prefers_owner(self) -> None:
        text = (
            "<?php\nclass A\n{\n    public function run() {}\n}\n"
            "class B\n{\n    public function run() {}\n}\n"
        )
        source = PhpSource.parse(text)
        located = source.locate_method("run", "B")
        assert located is not None
        assert located.class_name == "B"

    def test_find_member_line(self) -> None:
        lines = SERVICE.split("\n")
        assert find_member_line(lines, "helper") == 20
        assert find_member_line(lines, "missing") is None


class TestCallArguments:
    """Argument scanning helpers."""

    def test_matching_paren_skips_strings(self) -> None:
        text = "f('a)', (b))"
        assert matching_paren(text, 1) == len(text) - 1

    def test_split_top_level(self) -> None:
        assert split_top_level("A::class, 'm', [1, 2]", ",") == ["A::class", "'m'", "[1, 2]"]

    def test_unquote(self) -> None:
        assert unquote("'it\\'s'") == "it's"
        assert unquote('"a\\\\b"') == "a\\b"
        assert unquote("A::class") is None

    def test_evaluate_concatenation(self) -> None:
        assert evaluate_expression("UserService::class.'::create'", _resolve) == (
            "App\\UserService::create"
        )

    def test_evaluate_named_argument(self) -> None:
        assert evaluate_expression("class: UserService::class", _resolve) == "App\\UserService"

    @pytest.mark.parametrize(
        ("args", "expected"),
        [
            ("UserService::class, 'create'", "App\\UserService::create"),
            ("UserService::class", "App\\UserService"),
            ("'App\\\\UserService', 'create'", "App\\UserService::create"),
            ("'App\\\\UserService::create'", "App\\UserService::create"),
            ("UserService::class.'::create'", "App\\UserService::create"),
            ("'@A'", "@A"),
            ("'@@user-create'", "@@user-create"),
            ("$variable", None),
            ("", None),
        ],
    )
    def test_parse_target(self, args: str, expected: str | None) -> None:
        assert parse_target(args, _resolve) == expected

    def test_find_attributes(self) -> None:
        text = "#[LinksAndCovers(A::class, 'm')] #[Other(1)] #[\\X\\Links('@A')]"
        found = find_attributes(text, ("LinksAndCovers", "Links"))

        assert [(c.name, c.args) for c in found] == [
            ("LinksAndCovers", "A::class, 'm'"),
            ("Links", "'@A'"),
        ]
        assert text[found[0].start : found[0].end] == "#[LinksAndCovers(A::class, 'm')]"

    def test_find_chain_calls(self) -> None:
        text = "})->linksAndCovers(A::class.'::m')->group('x')->links('@A');"
        found = find_chain_calls(text, ("linksAndCovers", "links"))

        assert [c.name for c in found] == ["linksAndCovers", "links"]
        assert text[found[1].start : found[1].end] == "->links('@A')"

    def test_line_of(self) -> None:
        assert line_of("a\nb\nc", 0) == 1
        assert line_of("a\nb\nc", 4) == 3
