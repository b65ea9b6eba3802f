"""testlink fix-refs command - rewrite short @see names to fully-qualified form."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from testlink.cli.utils import echo_json, handle_errors, load_project
from testlink.core.formatting import display_path, pluralize
from testlink.core.progress import get_console, status
from testlink.names.fqcn import FqcnValidator
from testlink.names.resolver import NameResolver
from testlink.scan.project import scan_project


@click.command()
@click.argument("root", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--dry-run", is_flag=True, help="Show the changes without writing files")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def fix_refs_command(ctx: click.Context, root: Path, dry_run: bool, as_json: bool) -> None:
    """Rewrite @see references such as UserService::create to \\App\\UserService::create.

    ROOT is the project root (default: current directory).
    """
    root, config = load_project(ctx, root)
    with handle_errors():
        scan = scan_project(root, config.discovery)

    resolver = NameResolver(scan.production_classes | scan.test_classes)
    validator = FqcnValidator(resolver, window=config.sync.see_window_lines)
    issues = validator.validate(scan.cross_refs.all_entries())
    result = validator.fix(issues, dry_run=dry_run, root=root)
    unresolvable = [
        f"{display_path(issue.path, root)}:{issue.line} {issue.original_reference}: {issue.error_message}"
        for issue in issues.unfixable()
    ]

    if as_json:
        echo_json({**result.to_dict(root), "dryRun": dry_run, "unresolvable": unresolvable})
        if result.errors:
            sys.exit(1)
        return

    if not issues.has_issues():
        status("All @see references are fully qualified.", style="success")
        return

    for path, changes in result.files.items():
        click.echo(display_path(path, root))
        for change in changes:
            click.echo(f"  {change}")
    if result.files:
        get_console().print()

    for line in unresolvable:
        status(line, style="warning")
    for error in result.errors:
        status(error, style="error")

    if dry_run:
        status(f"Would fix {pluralize(result.fixed, 'reference')}.", style="info")
    else:
        status(f"Fixed {pluralize(result.fixed, 'reference')}.", style="success")

    if result.errors:
        sys.exit(1)
