"""testlink report command - list links by production member."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click

from testlink.cli.utils import echo_json, handle_errors, load_project
from testlink.core.formatting import pluralize
from testlink.core.progress import status
from testlink.model.entities import Link, split_identifier
from testlink.scan.project import ProjectScan, scan_project


def collect_links(scan: ProjectScan, scope: Path | None = None) -> dict[str, dict[str, list[Link]]]:
    """Links of both dialects as ``class -> member -> links``, sorted.

    With ``scope``, only members declared in production files under it.
    """
    grouped: dict[str, dict[str, list[Link]]] = {}
    for link in [*scan.annotation.links(), *scan.chaining.links()]:
        if scope is not None:
            unit = scan.find_production(link.method)
            if unit is None or not unit.path.is_relative_to(scope):
                continue
        class_name, member = split_identifier(link.method)
        grouped.setdefault(class_name, {}).setdefault(member or "", []).append(link)
    return {
        class_name: {
            member: sorted(links, key=lambda link: link.test)
            for member, links in sorted(members.items())
        }
        for class_name, members in sorted(grouped.items())
    }


def report_to_dict(grouped: dict[str, dict[str, list[Link]]]) -> dict[str, Any]:
    links = {
        class_name: {
            member: [
                {"test": link.test, "dialect": link.source.value, "coverage": link.with_coverage}
                for link in member_links
            ]
            for member, member_links in members.items()
        }
        for class_name, members in grouped.items()
    }
    all_links = [link for members in grouped.values() for ls in members.values() for link in ls]
    return {
        "links": links,
        "summary": {
            "production_methods": sum(len(members) for members in grouped.values()),
            "tests": len({link.test for link in all_links}),
            "links": len(all_links),
        },
    }


@click.command()
@click.argument("root", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option(
    "--path",
    "scope",
    type=click.Path(path_type=Path),
    default=None,
    help="Only report production members under this path",
)
@click.pass_context
def report_command(ctx: click.Context, root: Path, as_json: bool, scope: Path | None) -> None:
    """Show coverage links grouped by production class and method.

    ROOT is the project root (default: current directory).
    """
    root, config = load_project(ctx, root)
    with handle_errors():
        scan = scan_project(root, config.discovery)

    if scope is not None and not scope.is_absolute():
        scope = (root / scope).resolve()
    grouped = collect_links(scan, scope)
    data = report_to_dict(grouped)

    if as_json:
        echo_json(data)
        return

    if not grouped:
        status("No coverage links found.", style="warning")
        return

    for class_name, members in grouped.items():
        click.echo(class_name)
        for member, links in members.items():
            click.echo(f"  {member}")
            for link in links:
                click.echo(f"    → {link.test} ({link.source.value})")
        click.echo()

    summary = data["summary"]
    status(
        f"{pluralize(summary['production_methods'], 'method')}, "
        f"{pluralize(summary['tests'], 'test')}, "
        f"{pluralize(summary['links'], 'link')}",
        style="success",
    )
    for warning in scan.warnings:
        status(warning, style="warning")
