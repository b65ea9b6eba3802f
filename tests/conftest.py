"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages,
and provides small PHP projects for scan, sync and CLI tests.
"""

import sys
from collections.abc import Callable
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local testlink package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of testlink modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("testlink"):
        del sys.modules[module_name]


USER_SERVICE = """<?php

namespace App\\Services;

use TestFlowLabs\\TestLink\\Attribute\\TestedBy;
use Tests\\Unit\\UserServiceTest;

class UserService
{
    #[TestedBy(UserServiceTest::class, 'creates user')]
    public function create(): void
    {
    }

    public function delete(): void
    {
    }
}
"""

USER_SERVICE_TEST = """<?php

use App\\Services\\UserService;

test('creates user', function () {
    expect(true)->toBeTrue();
})->linksAndCovers(UserService::class.'::create');
"""

ORDER_SERVICE = """<?php

namespace App\\Services;

class OrderService
{
    public function place(): void
    {
    }
}
"""

ORDER_SERVICE_TEST = """<?php

namespace Tests\\Unit;

use App\\Services\\OrderService;
use PHPUnit\\Framework\\TestCase;
use TestFlowLabs\\TestingAttributes\\LinksAndCovers;

class OrderServiceTest extends TestCase
{
    #[LinksAndCovers(OrderService::class, 'place')]
    public function test_places_order(): void
    {
    }
}
"""


ProjectFactory = Callable[[dict[str, str]], Path]


@pytest.fixture
def make_project(tmp_path: Path) -> ProjectFactory:
    """Write ``{relative path: content}`` under a fresh project root."""

    def factory(files: dict[str, str]) -> Path:
        root = tmp_path / "project"
        root.mkdir(exist_ok=True)
        for relative, content in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        return root

    return factory


@pytest.fixture
def php_project(make_project: ProjectFactory) -> Path:
    """Two production classes.

    ``UserService::create`` and its Pest test name each other.
    ``OrderService::place`` is linked from a PHPUnit test only.
    """
    return make_project(
        {
            "src/Services/UserService.php": USER_SERVICE,
            "src/Services/OrderService.php": ORDER_SERVICE,
            "tests/Unit/UserServiceTest.php": USER_SERVICE_TEST,
            "tests/Unit/OrderServiceTest.php": ORDER_SERVICE_TEST,
        }
    )
