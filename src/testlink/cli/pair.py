"""testlink pair command - resolve placeholder markers into real links."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from testlink.cli.utils import echo_json, handle_errors, load_project
from testlink.core.formatting import display_path, pluralize
from testlink.core.progress import get_console, status
from testlink.model.entities import short_class_name
from testlink.scan.project import scan_project
from testlink.sync.orchestrator import pair_placeholders


@click.command()
@click.argument("root", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--dry-run", is_flag=True, help="Show the changes without writing files")
@click.option("--placeholder", default=None, help="Resolve only this id, e.g. @A")
@click.option(
    "--path",
    "scope",
    type=click.Path(path_type=Path),
    default=None,
    help="Only resolve ids with an entry under this path",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def pair_command(
    ctx: click.Context,
    root: Path,
    dry_run: bool,
    placeholder: str | None,
    scope: Path | None,
    as_json: bool,
) -> None:
    """Pair placeholder markers such as @A between production code and tests.

    Every production member tagged with an id is linked to every test
    tagged with the same id. Ids that cannot be resolved are reported and
    left untouched.

    ROOT is the project root (default: current directory).
    """
    root, config = load_project(ctx, root)
    with handle_errors():
        scan = scan_project(root, config.discovery)
        resolved, patch = pair_placeholders(
            scan, placeholder=placeholder, scope=scope, dry_run=dry_run
        )

    errors = [*resolved.errors, *patch.errors]
    files = [display_path(p, root) for p in patch.modified]

    if as_json:
        echo_json(
            {
                **resolved.to_dict(root),
                "errors": errors,
                "dryRun": dry_run,
                "files": files,
            }
        )
        if errors:
            sys.exit(1)
        return

    console = get_console()

    if len(scan.placeholders) == 0:
        status("No placeholders found.", style="warning")
        click.echo("  Placeholders use @syntax, for example:")
        click.echo("    Production: #[TestedBy('@A')]")
        click.echo("    Test (Pest): ->linksAndCovers('@A')")
        click.echo("    Test (PHPUnit): #[LinksAndCovers('@A')]")
        for error in errors:
            status(error, style="error")
        if errors:
            sys.exit(1)
        return

    if dry_run:
        status("Dry run: no files will be modified.", style="info")
        console.print()

    for placeholder, actions in resolved.by_placeholder().items():
        status(resolved.summary_line(placeholder), style="success")
        for action in actions:
            click.echo(
                f"    {short_class_name(action.production_class)}::{action.production_member}"
                f" <-> {short_class_name(action.test_class)}::{action.test_member}"
            )
    for error in errors:
        status(error, style="error")

    if files:
        console.print()
        click.echo("Files:")
        for file in files:
            click.echo(f"  {file}")
        console.print()

    changes = len(patch.effective)
    if not resolved.has_actions:
        status("No actions to perform.", style="none" if errors else "success")
    elif dry_run:
        status(
            f"Dry run complete. Would modify {pluralize(len(files), 'file')} "
            f"with {pluralize(changes, 'change')}.",
            style="info",
        )
    else:
        status(
            f"Pairing complete. Modified {pluralize(len(files), 'file')} "
            f"with {pluralize(changes, 'change')}.",
            style="success",
        )

    if errors:
        sys.exit(1)
