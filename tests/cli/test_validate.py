"""Tests for testlink validate command."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

from click.testing import CliRunner

from testlink.cli.main import cli

runner = CliRunner()

ProjectFactory = Callable[[dict[str, str]], Path]

SERVICE = """<?php

namespace App;

class Service
{
    public function run(): void
    {
    }
}
"""

PEST_DUPLICATE = """<?php

use App\\Service;

test('test_run', function () {
})->linksAndCovers(Service::class.'::run');
"""

PHPUNIT_DUPLICATE = """<?php

namespace Tests\\Unit;

use App\\Service;

class ServiceTest
{
    #[LinksAndCovers(Service::class, 'run')]
    public function test_run(): void
    {
    }
}
"""

PLACEHOLDER_AND_SHORT_SEE = """<?php

namespace App;

class Service
{
    /**
     * @see Missing::thing
     */
    #[TestedBy('@A')]
    public function run(): void
    {
    }
}
"""


class TestValidateCommand:
    """testlink validate command tests."""

    def test_given_missing_forward_relation_when_validate_then_warns(self, php_project: Path) -> None:
        # When
        result = runner.invoke(cli, ["validate", str(php_project)])

        # Then
        assert result.exit_code == 0
        assert "Links without a matching #[TestedBy]:" in result.output
        assert 'Run "testlink sync" to synchronize links.' in result.output
        assert "Total links: 2" in result.output
        assert "No duplicate links, with warnings." in result.output

    def test_given_warnings_when_strict_then_fails(self, php_project: Path) -> None:
        result = runner.invoke(cli, ["validate", str(php_project), "--strict"])

        assert result.exit_code == 1

    def test_given_synced_project_when_validate_then_all_valid(self, php_project: Path) -> None:
        runner.invoke(cli, ["sync", str(php_project)])

        result = runner.invoke(cli, ["validate", str(php_project), "--strict"])

        assert result.exit_code == 0
        assert "All links are valid!" in result.output

    def test_given_duplicate_when_validate_then_fails(self, make_project: ProjectFactory) -> None:
        """The same test linking the same member in both dialects is invalid."""
        root = make_project(
            {
                "src/Service.php": SERVICE,
                "tests/Unit/ServiceTest.php": PEST_DUPLICATE,
                "tests/Feature/ServiceTest.php": PHPUNIT_DUPLICATE,
            }
        )

        result = runner.invoke(cli, ["validate", str(root)])

        assert result.exit_code == 1
        assert "  ! Tests\\Unit\\ServiceTest::test_run\n    → App\\Service::run" in result.output
        assert "Consider using only one linking method per test." in result.output

    def test_given_json_flag_when_validate_then_reports_findings(self, php_project: Path) -> None:
        result = runner.invoke(cli, ["validate", str(php_project), "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["valid"] is True
        assert data["totalLinks"] == 2
        assert data["missingForwardRelation"] == [
            {
                "test": "Tests\\Unit\\OrderServiceTest::test_places_order",
                "method": "App\\Services\\OrderService::place",
            }
        ]
        assert data["unresolvedPlaceholders"] == []
        assert data["unresolvedReferences"] == []

    def test_given_placeholder_and_short_see_when_validate_then_lists_both(
        self, make_project: ProjectFactory
    ) -> None:
        root = make_project({"src/Service.php": PLACEHOLDER_AND_SHORT_SEE})

        result = runner.invoke(cli, ["validate", str(root), "--json"])

        data = json.loads(result.output)
        assert data["unresolvedPlaceholders"] == [{"id": "@A", "productionCount": 1, "testCount": 0}]
        [reference] = data["unresolvedReferences"]
        assert reference["reference"] == "Missing::thing"
        assert reference["file"] == "src/Service.php"

    def test_given_placeholder_when_validate_then_suggests_pair(
        self, make_project: ProjectFactory
    ) -> None:
        root = make_project({"src/Service.php": PLACEHOLDER_AND_SHORT_SEE})

        result = runner.invoke(cli, ["validate", str(root)])

        assert result.exit_code == 0
        assert "@A  (1 production, 0 tests)" in result.output
        assert 'Run "testlink pair" to resolve placeholders.' in result.output
        assert "Unresolvable @see references:" in result.output
        assert "No coverage links found." in result.output

    def test_given_empty_project_when_validate_then_no_links(self, make_project: ProjectFactory) -> None:
        root = make_project({})

        result = runner.invoke(cli, ["validate", str(root)])

        assert result.exit_code == 0
        assert "Total links: 0" in result.output
