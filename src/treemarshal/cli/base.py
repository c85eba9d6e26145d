from __future__ import annotations

import logging

import click

import treemarshal
from treemarshal.cli.cmd_check import check
from treemarshal.cli.cmd_migrate import migrate


@click.group(context_settings={"help_option_names": ["-h", "--help"], "max_content_width": 120})
@click.version_option(version=treemarshal.__version__)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Level of the log messages printed to stderr.",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str) -> None:
    """treemarshal - check and migrate stored object documents."""
    logging.basicConfig(level=log_level.upper(), format="%(levelname)s %(name)s: %(message)s")


cli.add_command(check)
cli.add_command(migrate)
