"""testlink sync command - keep test links and #[TestedBy] in step."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from testlink.cli.utils import echo_json, handle_errors, load_project
from testlink.core.formatting import display_path, pluralize
from testlink.core.progress import get_console, status
from testlink.sync.models import SyncOptions, SyncResult
from testlink.sync.orchestrator import SyncOrchestrator


def _print_result(result: SyncResult, root: Path) -> None:
    console = get_console()

    for path, methods in result.modified_files.items():
        click.echo(display_path(path, root))
        for method in methods:
            click.echo(f"  + {method}")
    for method, test in result.reverse_actions:
        click.echo(f"{method}")
        click.echo(f"  + #[TestedBy] {test}")
    for member, refs in result.cross_ref_additions.items():
        click.echo(member)
        for ref in refs:
            click.echo(f"  + @see {ref}")
    for path, methods in result.pruned_files.items():
        click.echo(display_path(path, root))
        for method in methods:
            click.echo(f"  - {method}")
    for member, refs in result.cross_ref_removals.items():
        click.echo(member)
        for ref in refs:
            click.echo(f"  - @see {ref}")

    if result.has_changes:
        console.print()

    for warning in result.warnings:
        status(warning, style="warning")
    for error in result.errors:
        status(error, style="error")


@click.command()
@click.argument("root", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--dry-run", is_flag=True, help="Show the changes without writing files")
@click.option("--link-only", is_flag=True, help="Add links() instead of linksAndCovers()")
@click.option("--prune", is_flag=True, help="Remove links to production members that no longer exist")
@click.option("--force", is_flag=True, help="Confirm --prune")
@click.option(
    "--path",
    "scope",
    type=click.Path(path_type=Path),
    default=None,
    help="Only sync production files under this path",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def sync_command(
    ctx: click.Context,
    root: Path,
    dry_run: bool,
    link_only: bool,
    prune: bool,
    force: bool,
    scope: Path | None,
    as_json: bool,
) -> None:
    """Synchronize links between production code and tests.

    Adds test links for every #[TestedBy] that has none, adds #[TestedBy]
    and @see entries for every test link that has none, and with
    --prune --force removes links whose target no longer exists.

    ROOT is the project root (default: current directory).
    """
    with handle_errors():
        options = SyncOptions(
            dry_run=dry_run, link_only=link_only, prune=prune, force=force, path=scope
        )
    root, config = load_project(ctx, root)
    if config.sync.link_only and not link_only:
        options = SyncOptions(
            dry_run=dry_run, link_only=True, prune=prune, force=force, path=scope
        )

    with handle_errors():
        result = SyncOrchestrator(root, options, config).run()

    if as_json:
        echo_json(result.to_dict(root))
        if result.has_errors:
            sys.exit(1)
        return

    if dry_run:
        status("Dry run: no files will be modified.", style="info")
        get_console().print()

    _print_result(result, root)

    counts = [
        pluralize(result.links_added, "link") + " added",
        pluralize(result.forward_relations_added, "#[TestedBy]", "#[TestedBy]") + " added",
        pluralize(result.cross_refs_added, "@see", "@see") + " added",
    ]
    if options.prune_confirmed:
        counts.append(pluralize(result.links_pruned, "link") + " pruned")
        counts.append(pluralize(result.cross_refs_pruned, "@see", "@see") + " pruned")

    if not result.has_changes:
        status("Already in sync.", style="success")
    elif dry_run:
        status(f"Would change {pluralize(len(result.files_written), 'file')}: " + ", ".join(counts), style="info")
    else:
        status(f"Changed {pluralize(len(result.files_written), 'file')}: " + ", ".join(counts), style="success")

    if result.has_errors:
        sys.exit(1)
