"""testlink validate command - check links, placeholders and @see names."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from testlink.cli.utils import echo_json, handle_errors, load_project
from testlink.core.formatting import display_path
from testlink.core.progress import get_console, status
from testlink.names.fqcn import FqcnValidator
from testlink.names.resolver import NameResolver
from testlink.registry.validator import LinkValidator, ValidationResult
from testlink.scan.project import scan_project


@click.command()
@click.argument("root", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--strict", is_flag=True, help="Fail on warnings as well as errors")
@click.pass_context
def validate_command(ctx: click.Context, root: Path, as_json: bool, strict: bool) -> None:
    """Validate coverage links.

    Duplicates (a link declared in both dialects) make the project invalid.
    Missing or orphan forward relations, unresolved placeholders and
    unresolvable @see names are warnings, and fail the run under --strict.

    ROOT is the project root (default: current directory).
    """
    root, config = load_project(ctx, root)
    with handle_errors():
        scan = scan_project(root, config.discovery)

    validator = LinkValidator()
    duplicates = validator.validate(scan.annotation, scan.chaining)
    bidirectional = validator.validate_bidirectional(scan.registry)
    result = ValidationResult(
        duplicates=duplicates.duplicates,
        missing_forward_relation=bidirectional.missing_forward_relation,
        orphan_forward_relation=bidirectional.orphan_forward_relation,
        total_links=duplicates.total_links,
    )

    resolver = NameResolver(scan.production_classes | scan.test_classes)
    names = FqcnValidator(resolver, window=config.sync.see_window_lines)
    unresolvable = names.validate(scan.cross_refs.all_entries()).unfixable()

    placeholders = scan.placeholders
    has_warnings = not result.in_sync or len(placeholders) > 0 or bool(unresolvable)
    failed = not result.valid or (strict and has_warnings)

    if as_json:
        echo_json(
            {
                **result.to_dict(),
                "unresolvedPlaceholders": [
                    {
                        "id": placeholder,
                        "productionCount": len(placeholders.production_entries(placeholder)),
                        "testCount": len(placeholders.test_entries(placeholder)),
                    }
                    for placeholder in placeholders.ids()
                ],
                "unresolvedReferences": [
                    {
                        "reference": issue.original_reference,
                        "file": display_path(issue.path, root),
                        "line": issue.line,
                        "error": issue.error_message,
                    }
                    for issue in unresolvable
                ],
            }
        )
        if failed:
            sys.exit(1)
        return

    console = get_console()

    if result.duplicates:
        click.echo("Duplicate links (declared by both attributes and method chains):")
        for pair in result.duplicates:
            click.echo(f"  ! {pair.test}")
            click.echo(f"    → {pair.method}")
        console.print()
        status("Consider using only one linking method per test.", style="warning")
        console.print()

    if result.missing_forward_relation:
        click.echo("Links without a matching #[TestedBy]:")
        for pair in result.missing_forward_relation:
            click.echo(f"  ! {pair.method} ← {pair.test}")
        console.print()

    if result.orphan_forward_relation:
        click.echo("#[TestedBy] entries whose test does not link back:")
        for pair in result.orphan_forward_relation:
            click.echo(f"  ! {pair.method} → {pair.test}")
        console.print()

    if not result.in_sync:
        status('Run "testlink sync" to synchronize links.', style="warning")
        console.print()

    if len(placeholders) > 0:
        click.echo("Unresolved placeholders:")
        for placeholder in placeholders.ids():
            production = len(placeholders.production_entries(placeholder))
            tests = len(placeholders.test_entries(placeholder))
            click.echo(f"  ⚠ {placeholder}  ({production} production, {tests} tests)")
        console.print()
        status('Run "testlink pair" to resolve placeholders.', style="warning")
        console.print()

    if unresolvable:
        click.echo("Unresolvable @see references:")
        for issue in unresolvable:
            click.echo(
                f"  ✗ {display_path(issue.path, root)}:{issue.line} "
                f"{issue.original_reference} ({issue.error_message})"
            )
        console.print()

    if failed:
        sys.exit(1)

    click.echo(f"Total links: {result.total_links}")
    if result.total_links == 0:
        status("No coverage links found.", style="warning")
        return
    if has_warnings:
        status("No duplicate links, with warnings.", style="warning")
        return
    status("All links are valid!", style="success")
