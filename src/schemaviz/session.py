"""
Schema session - the editor state around the parser.

Keeps the SQL input, the selected dialect and the current schema, re-parses
on demand while preserving table positions, and applies the visual edits
(reordering tables and columns, moving tables) that the canvas performs.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional, Union

import yaml

from schemaviz.config import SchemaVizConfig
from schemaviz.exceptions import SchemaVizError
from schemaviz.generator import generate_sql_from_schema
from schemaviz.models import DatabaseSchema, Position, SQLDialect, SyntaxParseResult, Table
from schemaviz.parsing.pipeline import SchemaParser
from schemaviz.parsing.relationship_inferrer import infer_relationships

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")


class SchemaSession:
    """
    Holds one user's schema while they edit it.

    Parses are serialized through this object: each parse reads the current
    schema as the previous snapshot and replaces it with the result.
    """

    def __init__(
        self,
        sql_input: str = "",
        dialect: Optional[SQLDialect] = None,
        config: Optional[SchemaVizConfig] = None,
    ):
        self.config = config or SchemaVizConfig()
        self.dialect = dialect or self.config.dialect
        self.sql_input = sql_input
        self.schema = DatabaseSchema()

    def parse(self, reset_positions: bool = False) -> SyntaxParseResult:
        """
        Parse the current SQL input into the session schema.

        A partial schema replaces the current one even when some statements
        failed, so the canvas shows everything that could be understood.
        """
        if not self.sql_input.strip():
            self.schema = DatabaseSchema()
            return SyntaxParseResult(success=False, error="SQL input is empty")

        parser = SchemaParser(self.dialect, self.config.layout)
        result = parser.parse(self.sql_input, previous=self.schema, reset_positions=reset_positions)

        if result.schema is not None:
            self.schema = result.schema

        if result.success:
            return SyntaxParseResult(success=True)

        return SyntaxParseResult(
            success=False,
            error=result.error.message if result.error else "Failed to parse SQL",
            statement_index=result.error.statement_index if result.error else -1,
        )

    def reorder_tables(self, source_index: int, target_index: int) -> None:
        """Move a table to another slot in the table order."""
        if source_index == target_index:
            return
        tables = list(self.schema.tables)
        table = tables.pop(source_index)
        tables.insert(target_index, table)
        self._replace_tables(tables)

    def reorder_columns(self, table_name: str, source_index: int, target_index: int) -> None:
        """Move a column to another slot within its table."""
        if source_index == target_index:
            return
        table = self._require_table(table_name)
        column = table.columns.pop(source_index)
        table.columns.insert(target_index, column)
        self._replace_tables(list(self.schema.tables))

    def move_table(self, table_name: str, x: float, y: float) -> None:
        """Set a table's canvas position (end of a drag)."""
        table = self._require_table(table_name)
        table.position = Position(x, y)

    def to_sql(self) -> str:
        """Render the current schema as SQL for the active dialect."""
        return generate_sql_from_schema(self.schema.tables, self.dialect)

    def sync_sql(self) -> str:
        """Regenerate the SQL input from the schema after a visual edit."""
        self.sql_input = self.to_sql()
        return self.sql_input

    def save(self, path: Union[str, Path]) -> None:
        """Save the schema as JSON, or YAML for .yaml/.yml paths."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        data = self.schema.to_dict()

        with open(path, "w") as f:
            if path.suffix.lower() in YAML_SUFFIXES:
                yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
            else:
                json.dump(data, f, indent=2)

        logger.info(f"Saved schema with {len(self.schema.tables)} tables to {path}")

    def load(self, path: Union[str, Path]) -> DatabaseSchema:
        """Load a schema saved by ``save`` and make it current."""
        self.schema = load_schema(path)
        return self.schema

    def _replace_tables(self, tables: List[Table]) -> None:
        self.schema = DatabaseSchema(tables=tables, relationships=infer_relationships(tables))
        self.sync_sql()

    def _require_table(self, table_name: str) -> Table:
        table = self.schema.get_table(table_name)
        if table is None:
            raise SchemaVizError(f"Unknown table: {table_name}")
        return table


def load_schema(path: Union[str, Path]) -> DatabaseSchema:
    """
    Load a schema file written by SchemaSession.save.

    Args:
        path: JSON or YAML file

    Returns:
        DatabaseSchema
    """
    path = Path(path)
    if not path.exists():
        raise SchemaVizError(f"Schema file not found: {path}")

    try:
        with open(path, "r") as f:
            if path.suffix.lower() in YAML_SUFFIXES:
                data = yaml.safe_load(f) or {}
            else:
                data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError("expected a mapping with 'tables' and 'relationships'")
        schema = DatabaseSchema.from_dict(data)
    except (KeyError, TypeError, ValueError, yaml.YAMLError) as e:
        raise SchemaVizError(f"Invalid schema file {path}: {e}") from e

    logger.info(f"Loaded schema with {len(schema.tables)} tables from {path}")
    return schema
