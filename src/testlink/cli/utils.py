"""CLI utilities."""

from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import click

from testlink.config.loader import load_config
from testlink.config.models import TestLinkConfig
from testlink.core.errors import TestLinkError
from testlink.core.logging import configure_logging


@contextmanager
def handle_errors() -> Iterator[None]:
    """Render ``TestLinkError`` as a click error (exit status 1)."""
    try:
        yield
    except TestLinkError as e:
        raise click.ClickException(str(e)) from e


def load_project(ctx: click.Context, root: Path) -> tuple[Path, TestLinkConfig]:
    """Resolve the project root and load its config.

    Logging is reconfigured from the project's ``logging`` section unless
    ``-v`` already forced debug output.

    Raises:
        click.ClickException: The config file is missing or invalid.
    """
    obj = ctx.find_object(dict) or {}
    root = root.resolve()
    with handle_errors():
        config = load_config(root, config_path=obj.get("config_path"))
    if not obj.get("verbose"):
        configure_logging(config=config.logging)
    return root, config


def echo_json(data: dict[str, Any]) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))
