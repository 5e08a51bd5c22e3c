"""Command-line entry point: ``propmap``."""

import click

from propmap.cli.inspect import inspect_command
from propmap.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="propmap")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """propmap - inspect how objects are exposed as property maps."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "INFO")


cli.add_command(inspect_command, name="inspect")


if __name__ == "__main__":
    cli()
