"""Source discovery and extraction."""

from testlink.scan.discovery import DiscoveredFiles, discover, walk_php_files
from testlink.scan.project import ProjectScan, scan_project

__all__ = ["DiscoveredFiles", "ProjectScan", "discover", "scan_project", "walk_php_files"]
