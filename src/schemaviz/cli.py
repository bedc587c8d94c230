"""
Command-line interface for schemaviz.

Provides parse, generate, example and types commands for turning CREATE TABLE
scripts into positioned schema graphs and back.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from schemaviz import __version__
from schemaviz.config import SchemaVizConfig, load_config
from schemaviz.dialects import (
    OPTIONAL_LENGTH_TYPES,
    REQUIRED_LENGTH_TYPES,
    SQL_DATA_TYPES,
    SQL_EXAMPLES,
    SQL_KEYWORDS,
)
from schemaviz.exceptions import SchemaVizError
from schemaviz.generator import generate_sql_from_schema
from schemaviz.models import DatabaseSchema, SQLDialect
from schemaviz.parsing import SchemaParser
from schemaviz.session import YAML_SUFFIXES, load_schema
from schemaviz.utils import get_column_badges

console = Console()

DIALECT_CHOICES = [d.value for d in SQLDialect]


def setup_logging(verbose: bool = False) -> None:
    """Configure logging with Rich handler."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def _resolve_dialect(ctx: click.Context, dialect: Optional[str]) -> SQLDialect:
    if dialect:
        return SQLDialect.parse(dialect)
    return ctx.obj["config"].dialect


@click.group()
@click.version_option(version=__version__, prog_name="schemaviz")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    default=None,
    help="YAML file with dialect and layout settings",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: Optional[Path]) -> None:
    """
    SchemaViz - visual database schemas from CREATE TABLE scripts

    Parse SQL into tables, relationships and canvas positions, and render
    saved schemas back into SQL.
    """
    setup_logging(verbose)
    ctx.ensure_object(dict)
    try:
        ctx.obj["config"] = load_config(config_path) if config_path else SchemaVizConfig()
    except SchemaVizError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


@cli.command()
@click.argument("sql_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--dialect",
    type=click.Choice(DIALECT_CHOICES, case_sensitive=False),
    default=None,
    help="SQL dialect (defaults to the configured dialect)",
)
@click.option(
    "--previous",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Previously saved schema whose table positions are kept",
)
@click.option("--reset-positions", is_flag=True, help="Lay out every table from scratch")
@click.option(
    "--output",
    type=click.Path(path_type=Path),
    default=None,
    help="Write the schema to a .json or .yaml file",
)
@click.option("--allow-errors", is_flag=True, help="Exit with status 0 even if some statements failed")
@click.pass_context
def parse(
    ctx: click.Context,
    sql_file: Path,
    dialect: Optional[str],
    previous: Optional[Path],
    reset_positions: bool,
    output: Optional[Path],
    allow_errors: bool,
) -> None:
    """
    Parse CREATE TABLE statements into a schema graph.

    Examples:

        # Parse a MySQL script and show the result
        schemaviz parse schema.sql

        # Re-parse after editing, keeping table positions from the last run
        schemaviz parse schema.sql --previous schema.json --output schema.json

        # PostgreSQL, fresh layout, YAML output
        schemaviz parse pg.sql --dialect PostgreSQL --reset-positions --output pg.yaml
    """
    selected = _resolve_dialect(ctx, dialect)
    config: SchemaVizConfig = ctx.obj["config"]

    try:
        previous_schema = load_schema(previous) if previous else None
    except SchemaVizError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    sql = sql_file.read_text(encoding="utf-8")
    result = SchemaParser(selected, config.layout).parse(
        sql,
        previous=previous_schema,
        reset_positions=reset_positions,
    )
    schema = result.schema or DatabaseSchema()

    _print_schema(schema)

    if output:
        _write_schema(schema, output)
        console.print(f"\n[green]Saved schema to: {output}[/green]")

    if not result.success and result.error:
        console.print(f"\n[red]Errors (first at statement {result.error.statement_index}):[/red]")
        for line in result.error.message.split("\n"):
            console.print(f"  - {line}", style="red", markup=False, highlight=False)
        if not allow_errors:
            sys.exit(1)


@cli.command()
@click.argument("schema_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--dialect",
    type=click.Choice(DIALECT_CHOICES, case_sensitive=False),
    default=None,
    help="Target SQL dialect",
)
@click.option(
    "--output",
    type=click.Path(path_type=Path),
    default=None,
    help="Write SQL to a file instead of the console",
)
@click.pass_context
def generate(ctx: click.Context, schema_file: Path, dialect: Optional[str], output: Optional[Path]) -> None:
    """
    Render a saved schema as CREATE TABLE statements.

    Example:

        schemaviz generate schema.json --dialect SQLite --output schema.sql
    """
    selected = _resolve_dialect(ctx, dialect)

    try:
        schema = load_schema(schema_file)
    except SchemaVizError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    sql = generate_sql_from_schema(schema.tables, selected)

    if output:
        output.write_text(sql + "\n", encoding="utf-8")
        console.print(f"[green]Wrote {len(schema.tables)} tables to: {output}[/green]")
    else:
        click.echo(sql)


@cli.command()
@click.option(
    "--dialect",
    type=click.Choice(DIALECT_CHOICES, case_sensitive=False),
    default=None,
    help="Dialect of the example",
)
@click.pass_context
def example(ctx: click.Context, dialect: Optional[str]) -> None:
    """Print an example schema script for a dialect."""
    click.echo(SQL_EXAMPLES[_resolve_dialect(ctx, dialect)])


@cli.command()
@click.option(
    "--dialect",
    type=click.Choice(DIALECT_CHOICES, case_sensitive=False),
    default=None,
    help="Dialect to list",
)
@click.pass_context
def types(ctx: click.Context, dialect: Optional[str]) -> None:
    """List the data types of a dialect and their length rules."""
    selected = _resolve_dialect(ctx, dialect)

    types_table = Table(title=f"{selected.value} Data Types")
    types_table.add_column("Type", style="cyan")
    types_table.add_column("Length", style="green")

    required = REQUIRED_LENGTH_TYPES[selected]
    optional = OPTIONAL_LENGTH_TYPES[selected]

    for data_type in SQL_DATA_TYPES[selected]:
        if data_type in required:
            length = "required"
        elif data_type in optional:
            length = "optional"
        else:
            length = "-"
        types_table.add_row(data_type, length)

    console.print(types_table)


@cli.command()
@click.argument("prefix", required=False, default="")
def keywords(prefix: str) -> None:
    """List SQL keywords, optionally only those starting with PREFIX."""
    prefix = prefix.upper()
    for keyword in SQL_KEYWORDS:
        if keyword.startswith(prefix):
            click.echo(keyword)


def _print_schema(schema: DatabaseSchema) -> None:
    tables_table = Table(title="Tables")
    tables_table.add_column("Table", style="cyan")
    tables_table.add_column("Columns", style="green")
    tables_table.add_column("Position", style="yellow", justify="right")

    for table in schema.tables:
        columns = []
        for column in table.columns:
            badges = get_column_badges(column)
            suffix = f" ({', '.join(badges)})" if badges else ""
            columns.append(f"{column.name} {column.type}{suffix}")
        tables_table.add_row(
            table.name,
            "\n".join(columns) if columns else "-",
            f"({table.position.x:.0f}, {table.position.y:.0f})",
        )

    console.print(tables_table)

    if schema.relationships:
        rel_table = Table(title="Relationships")
        rel_table.add_column("Id", style="cyan")
        rel_table.add_column("From", style="green")
        rel_table.add_column("To", style="yellow")
        rel_table.add_column("Type", style="magenta")
        rel_table.add_column("Junction", style="blue")

        for rel in schema.relationships:
            rel_table.add_row(
                rel.id,
                f"{rel.from_table}.{rel.from_column}",
                f"{rel.to_table}.{rel.to_column}",
                rel.type.value,
                rel.junction_table or "-",
            )

        console.print(rel_table)
    else:
        console.print("\n[yellow]No relationships found.[/yellow]")


def _write_schema(schema: DatabaseSchema, output: Path) -> None:
    output.parent.mkdir(parents=True, exist_ok=True)
    with open(output, "w") as f:
        if output.suffix.lower() in YAML_SUFFIXES:
            yaml.safe_dump(schema.to_dict(), f, default_flow_style=False, sort_keys=False)
        else:
            json.dump(schema.to_dict(), f, indent=2)


if __name__ == "__main__":
    cli()
