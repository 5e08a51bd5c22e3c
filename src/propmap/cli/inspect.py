"""propmap inspect command - show the property table of a class."""

import importlib
import json
from typing import Any

import click
from rich.console import Console
from rich.table import Table

from propmap.adapter.models import AccessTier, PropertyTable, ResolvedProperty
from propmap.adapter.ops import property_handles, property_table
from propmap.core.errors import PropMapError


def load_class(spec: str) -> type:
    """Import ``module:QualName`` and return the class it names."""
    module_name, sep, qualname = spec.partition(":")
    if not sep or not module_name or not qualname:
        raise click.ClickException(f"Expected MODULE:CLASS, got '{spec}'")
    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise click.ClickException(f"Cannot import module '{module_name}': {e}") from e
    for part in qualname.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise click.ClickException(f"'{module_name}' has no attribute '{qualname}'") from e
    if not isinstance(obj, type):
        raise click.ClickException(f"'{spec}' is not a class")
    return obj


def _row(prop: ResolvedProperty) -> dict[str, Any]:
    return {
        "name": prop.name,
        "reader": prop.reader.qualname if prop.reader else None,
        "writer": prop.writer.qualname if prop.writer else None,
        "reader_evidence": prop.reader_evidence.value if prop.reader_evidence else None,
        "writer_evidence": prop.writer_evidence.value if prop.writer_evidence else None,
    }


def _make_property_table(cls: type, table: PropertyTable) -> Table:
    rich_table = Table(title=f"{cls.__module__}.{cls.__qualname__}", title_justify="left")
    rich_table.add_column("property", style="cyan")
    rich_table.add_column("reader")
    rich_table.add_column("writer")
    rich_table.add_column("evidence", style="dim")

    for prop in table.values():
        row = _row(prop)
        evidence = "/".join(
            e for e in (row["reader_evidence"], row["writer_evidence"]) if e is not None
        )
        rich_table.add_row(
            prop.name,
            row["reader"] or "[dim]-[/dim]",
            row["writer"] or "[dim]-[/dim]",
            evidence,
        )
    return rich_table


@click.command()
@click.argument("target")
@click.option(
    "--tier",
    type=click.Choice([t.value for t in AccessTier]),
    default=None,
    help="Also build handles at this tier (checks every accessor is invocable)",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def inspect_command(target: str, tier: str | None, as_json: bool) -> None:
    """Show the properties discovered on a class.

    TARGET is MODULE:CLASS, e.g. mypkg.models:Member.
    """
    cls = load_class(target)
    try:
        table = property_table(cls)
        if tier is not None:
            property_handles(cls, tier)
    except PropMapError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        click.echo(
            json.dumps(
                {
                    "type": f"{cls.__module__}.{cls.__qualname__}",
                    "tier": tier,
                    "properties": [_row(prop) for prop in table.values()],
                },
                indent=2,
            )
        )
        return

    console = Console()
    if not table:
        console.print(f"[yellow]No properties found[/yellow] on {cls.__qualname__}")
        return
    console.print(_make_property_table(cls, table))
