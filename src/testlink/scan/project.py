"""Full project scan: every record the engines consume, rebuilt per run."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from testlink.comments.registry import CrossRefRegistry
from testlink.config.models import DiscoveryConfig
from testlink.core.errors import ScanError
from testlink.core.formatting import display_path
from testlink.core.logging import get_logger
from testlink.model.entities import (
    Dialect,
    LinkSource,
    ProductionUnit,
    TestUnit,
)
from testlink.php.source import PhpSource
from testlink.placeholder.registry import PlaceholderRegistry
from testlink.registry.links import LinkRegistry
from testlink.scan.discovery import discover
from testlink.syntax import ADAPTERS, Extraction, class_from_test_path, extract_production

log = get_logger(__name__)


@dataclass
class ProjectScan:
    """Records of one scan.

    Forward relations (``#[TestedBy]``) are registered in the annotation
    registry alongside attribute links; chained links get their own registry
    so the two dialects can be compared for duplicates.
    """

    root: Path
    production: list[ProductionUnit] = field(default_factory=list)
    tests: list[TestUnit] = field(default_factory=list)
    annotation: LinkRegistry = field(default_factory=lambda: LinkRegistry(LinkSource.ANNOTATION))
    chaining: LinkRegistry = field(default_factory=lambda: LinkRegistry(LinkSource.CHAINING))
    placeholders: PlaceholderRegistry = field(default_factory=PlaceholderRegistry)
    cross_refs: CrossRefRegistry = field(default_factory=CrossRefRegistry)
    production_classes: set[str] = field(default_factory=set)
    test_classes: set[str] = field(default_factory=set)
    production_files: list[Path] = field(default_factory=list)
    test_files: list[Path] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    _production_index: dict[str, ProductionUnit] = field(default_factory=dict, repr=False)
    _test_index: dict[str, TestUnit] = field(default_factory=dict, repr=False)

    @property
    def registry(self) -> LinkRegistry:
        """Both dialects' links plus forward relations."""
        return LinkRegistry.merged(self.annotation, self.chaining)

    def production_ids(self) -> set[str]:
        return set(self._production_index)

    def test_ids(self) -> set[str]:
        return set(self._test_index)

    def find_production(self, identifier: str) -> ProductionUnit | None:
        return self._production_index.get(identifier)

    def find_test(self, identifier: str) -> TestUnit | None:
        return self._test_index.get(identifier)

    def forward_relations(self) -> list[tuple[str, str]]:
        return self.annotation.forward_relations()

    def add(self, extraction: Extraction, *, is_test: bool) -> None:
        self.production.extend(extraction.production)
        self.tests.extend(extraction.tests)
        for unit in extraction.production:
            self._production_index.setdefault(unit.identifier, unit)
        for test in extraction.tests:
            self._test_index.setdefault(test.identifier, test)
        (self.test_classes if is_test else self.production_classes).update(extraction.classes)
        for test in extraction.tests:
            registry = self.chaining if test.dialect is Dialect.CHAINING else self.annotation
            for link in test.links:
                registry.register_link(test.identifier, link.method, link.with_coverage)
        for method, test_id in extraction.forward_relations:
            self.annotation.register_forward_relation(method, test_id)
        for entry in extraction.placeholders:
            self.placeholders.register(entry)
        for ref in extraction.cross_refs:
            self.cross_refs.register(ref)


def _read(path: Path, scan: ProjectScan) -> PhpSource | None:
    try:
        return PhpSource.read(path)
    except (OSError, UnicodeDecodeError) as e:
        shown = display_path(path, scan.root)
        scan.warnings.append(f"Could not read {shown}: {e}")
        log.warning("file_unreadable", path=shown, error=str(e))
        return None


def scan_project(root: Path, config: DiscoveryConfig | None = None) -> ProjectScan:
    """Scan production and test directories under ``root``.

    Raises:
        ScanError: ``root`` is not a directory.
    """
    config = config or DiscoveryConfig()
    root = root.resolve()
    if not root.is_dir():
        raise ScanError.root_not_found(str(root))

    scan = ProjectScan(root=root)
    files = discover(root, config)

    for path in files.production:
        source = _read(path, scan)
        if source is None or not source.has_class:
            continue
        scan.production_files.append(path)
        scan.add(extract_production(source), is_test=False)

    for path, test_root in files.tests:
        source = _read(path, scan)
        if source is None:
            continue
        adapter = next((a for a in ADAPTERS.values() if a.supports(source)), None)
        if adapter is None:
            continue
        scan.test_files.append(path)
        class_name = class_from_test_path(path, test_root, config.test_namespace)
        scan.add(adapter.extract(source, class_name), is_test=True)

    log.debug(
        "project_scanned",
        root=str(root),
        production=len(scan.production),
        tests=len(scan.tests),
        links=scan.annotation.count + scan.chaining.count,
        placeholders=len(scan.placeholders),
        warnings=len(scan.warnings),
    )
    return scan
