"""Tests for testlink fix-refs command."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest
from click.testing import CliRunner

from testlink.cli.main import cli

runner = CliRunner()

SERVICE = """<?php

namespace App;

use Tests\\ServiceTest;

class Service
{
    /**
     * @see ServiceTest::test_run Main path
     * @see Missing::thing
     */
    public function run(): void
    {
    }
}
"""


@pytest.fixture
def short_refs_project(make_project: Callable[[dict[str, str]], Path]) -> Path:
    return make_project({"src/Service.php": SERVICE})


class TestFixRefsCommand:
    """testlink fix-refs command tests."""

    def test_given_short_refs_when_fix_then_rewritten(self, short_refs_project: Path) -> None:
        # When
        result = runner.invoke(cli, ["fix-refs", str(short_refs_project)])

        # Then
        assert result.exit_code == 0
        assert "Fixed 1 reference." in result.output
        assert "ServiceTest::test_run => \\Tests\\ServiceTest::test_run" in result.output
        assert "src/Service.php:13 Missing::thing" in result.output
        text = (short_refs_project / "src/Service.php").read_text()
        assert "     * @see \\Tests\\ServiceTest::test_run Main path\n" in text

    def test_given_dry_run_when_fix_then_file_untouched(self, short_refs_project: Path) -> None:
        result = runner.invoke(cli, ["fix-refs", str(short_refs_project), "--dry-run"])

        assert result.exit_code == 0
        assert "Would fix 1 reference." in result.output
        assert (short_refs_project / "src/Service.php").read_text() == SERVICE

    def test_given_json_flag_when_fix_then_outputs_result(self, short_refs_project: Path) -> None:
        result = runner.invoke(cli, ["fix-refs", str(short_refs_project), "--json", "--dry-run"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["fixed"] == 1
        assert data["dryRun"] is True
        assert data["files"] == {"src/Service.php": ["ServiceTest::test_run => \\Tests\\ServiceTest::test_run"]}
        assert len(data["unresolvable"]) == 1

    def test_given_qualified_refs_when_fix_then_nothing_to_do(self, php_project: Path) -> None:
        result = runner.invoke(cli, ["fix-refs", str(php_project)])

        assert result.exit_code == 0
        assert "All @see references are fully qualified." in result.output
