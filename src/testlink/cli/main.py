"""TestLink CLI - testlink command."""

from pathlib import Path

import click

from testlink.cli.fix_refs import fix_refs_command
from testlink.cli.pair import pair_command
from testlink.cli.report import report_command
from testlink.cli.sync import sync_command
from testlink.cli.validate import validate_command
from testlink.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="testlink")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file to use instead of .testlink/config.yaml",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: Path | None) -> None:
    """TestLink - bidirectional links between PHP tests and production code."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_path"] = config_path
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(report_command, name="report")
cli.add_command(validate_command, name="validate")
cli.add_command(pair_command, name="pair")
cli.add_command(sync_command, name="sync")
cli.add_command(fix_refs_command, name="fix-refs")


if __name__ == "__main__":
    cli()
