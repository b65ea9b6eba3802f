"""Tests for sync/planner.py - planning without touching files."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from testlink.core.patch import EditKind
from testlink.scan.project import scan_project
from testlink.sync.models import SyncOptions
from testlink.sync.planner import plan_sync, see_target

ProjectFactory = Callable[[dict[str, str]], Path]

PLACE = "App\\Services\\OrderService::place"
CREATE = "App\\Services\\UserService::create"
PHPUNIT_TEST = "Tests\\Unit\\OrderServiceTest::test_places_order"
PEST_TEST = "Tests\\Unit\\UserServiceTest::creates user"

SERVICE_NAMING_MISSING_TEST = """<?php

namespace App;

use Tests\\ServiceTest;

class Service
{
    #[TestedBy(ServiceTest::class, 'test_gone')]
    public function run(): void
    {
    }
}
"""


def _snapshot(root: Path) -> dict[Path, str]:
    return {p: p.read_text() for p in root.rglob("*.php")}


class TestPlanSync:
    """Tests for plan_sync."""

    def test_reverse_and_cross_ref_edits(self, php_project: Path) -> None:
        scan = scan_project(php_project)

        plan = plan_sync(scan, SyncOptions())

        [forward] = plan.of_kind(EditKind.ADD_FORWARD_RELATION)
        assert (forward.member, forward.targets) == (PLACE, (PHPUNIT_TEST,))
        assert {(e.member, e.targets) for e in plan.of_kind(EditKind.ADD_CROSS_REF)} == {
            (CREATE, (see_target(PEST_TEST),)),
            (PLACE, (see_target(PHPUNIT_TEST),)),
        }
        assert plan.of_kind(EditKind.ADD_LINK) == []
        assert plan.files() == sorted(
            [
                scan.root / "src/Services/OrderService.php",
                scan.root / "src/Services/UserService.php",
            ]
        )

    def test_planning_does_not_write(self, php_project: Path) -> None:
        before = _snapshot(php_project)

        plan_sync(scan_project(php_project), SyncOptions())

        assert _snapshot(php_project) == before

    def test_scope_limits_edits(self, php_project: Path) -> None:
        scan = scan_project(php_project)

        plan = plan_sync(scan, SyncOptions(path=Path("src/Services/UserService.php")))

        assert [e.member for e in plan.edits] == [CREATE]

    def test_prune_only_when_confirmed(self, php_project: Path) -> None:
        scan = scan_project(php_project)

        assert plan_sync(scan, SyncOptions()).of_kind(EditKind.PRUNE_LINK) == []
        assert plan_sync(scan, SyncOptions(prune=True, force=True)).of_kind(EditKind.PRUNE_LINK) == []

    def test_missing_test_warns_without_edits(self, make_project: ProjectFactory) -> None:
        """A TestedBy naming a test that does not exist is reported, not written."""
        root = make_project(
            {
                "src/Service.php": SERVICE_NAMING_MISSING_TEST,
                "tests/ServiceTest.php": "<?php\n\ntest('other', function () {\n});\n",
            }
        )

        plan = plan_sync(scan_project(root), SyncOptions())

        assert plan.edits == []
        assert plan.warnings == ["Test Tests\\ServiceTest::test_gone named by App\\Service::run was not found"]


def test_see_target() -> None:
    assert see_target("App\\A::b") == "\\App\\A::b"
    assert see_target("\\App\\A::b") == "\\App\\A::b"
