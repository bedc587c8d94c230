"""
SQL generator - renders tables as CREATE TABLE statements.

Handles:
- Dialect-specific auto-increment keywords
- Lengths kept separately from the type (editor-created columns)
- Foreign keys as table-level constraints
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from schemaviz.dialects import can_have_length, is_feature_supported
from schemaviz.models import Column, SQLDialect, Table
from schemaviz.utils.column_helpers import extract_type_and_length

logger = logging.getLogger(__name__)

AUTO_INCREMENT_KEYWORDS = {
    SQLDialect.MYSQL: "AUTO_INCREMENT",
    SQLDialect.MARIADB: "AUTO_INCREMENT",
    SQLDialect.SQLITE: "AUTOINCREMENT",
}

INDENT = "  "


class SQLGenerator:
    """
    Generates CREATE TABLE statements for a dialect.

    The output parses back into the same tables, columns and foreign keys,
    provided referenced tables come before the tables that reference them.
    """

    def __init__(self, dialect: SQLDialect = SQLDialect.MYSQL):
        self.dialect = dialect

    def generate(self, tables: Sequence[Table]) -> str:
        """
        Render all tables.

        Args:
            tables: Tables in output order

        Returns:
            SQL text, statements separated by a blank line
        """
        statements = [self.generate_table(table) for table in tables]
        logger.debug(f"Generated {len(statements)} CREATE TABLE statements for {self.dialect.value}")
        return "\n\n".join(statements).strip()

    def generate_table(self, table: Table) -> str:
        """Render a single CREATE TABLE statement."""
        lines = [f"{INDENT}{self.column_definition(column)}" for column in table.columns]

        for column in table.columns:
            if column.foreign_key:
                lines.append(
                    f"{INDENT}FOREIGN KEY ({column.name}) "
                    f"REFERENCES {column.foreign_key.table}({column.foreign_key.column})"
                )

        return f"CREATE TABLE {table.name} (\n" + ",\n".join(lines) + "\n);"

    def column_definition(self, column: Column) -> str:
        """Render one column clause without indentation."""
        parts: List[str] = [column.name, self._column_type(column)]

        if column.primary_key:
            parts.append("PRIMARY KEY")

        if column.auto_increment and is_feature_supported("autoIncrement", self.dialect):
            keyword = AUTO_INCREMENT_KEYWORDS.get(self.dialect)
            if keyword:
                parts.append(keyword)

        if not column.nullable:
            parts.append("NOT NULL")

        if column.unique and not column.primary_key:
            parts.append("UNIQUE")

        if column.default_value:
            parts.append(f"DEFAULT {column.default_value}")

        return " ".join(parts)

    def _column_type(self, column: Column) -> str:
        # Parsed types already carry their parameters
        if "(" in column.type or not column.length:
            return column.type
        base_type, _ = extract_type_and_length(column.type)
        if can_have_length(base_type, self.dialect):
            return f"{column.type}({column.length})"
        return column.type


def generate_sql_from_schema(tables: Sequence[Table], dialect: SQLDialect = SQLDialect.MYSQL) -> str:
    """
    Convenience function to render tables as SQL.

    Args:
        tables: Tables in output order
        dialect: Target dialect

    Returns:
        SQL text
    """
    return SQLGenerator(dialect).generate(tables)
