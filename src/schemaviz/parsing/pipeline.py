"""
Schema Parser - SQL text to schema graph.

Drives the whole extraction for one SQL blob:
1. Clean and split the text into statements
2. Parse and extract each CREATE TABLE statement, collecting errors
3. Infer relationships once over the complete table set

Errors in one statement never stop the remaining statements from being
processed; the caller receives the best-effort schema alongside the errors.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from schemaviz.config import LayoutConfig
from schemaviz.exceptions import SQLSyntaxError
from schemaviz.layout.engine import LayoutEngine
from schemaviz.models import DatabaseSchema, ErrorResult, ParseResult, SQLDialect
from schemaviz.parsing.relationship_inferrer import infer_relationships
from schemaviz.parsing.statements import clean_sql, is_create_table_statement, split_statements
from schemaviz.parsing.syntax import parse_create_table
from schemaviz.parsing.table_extractor import ParseBatch, TableExtractor

logger = logging.getLogger(__name__)


class SchemaParser:
    """
    Parses SQL text into a DatabaseSchema.

    Each call to ``parse`` works on its own ParseBatch, so a parser instance
    can be reused and calls never see each other's tables.

    Usage:
        parser = SchemaParser(SQLDialect.POSTGRESQL)
        result = parser.parse(sql, previous=current_schema)
        if result.success:
            current_schema = result.schema
    """

    def __init__(
        self,
        dialect: SQLDialect = SQLDialect.MYSQL,
        layout_config: Optional[LayoutConfig] = None,
    ):
        self.dialect = dialect
        self.layout = LayoutEngine(layout_config)

    def parse(
        self,
        sql: str,
        previous: Optional[DatabaseSchema] = None,
        reset_positions: bool = False,
    ) -> ParseResult:
        """
        Parse SQL text into a schema.

        Args:
            sql: Raw SQL text, possibly with several statements and comments
            previous: Schema before this parse; its table positions are reused
            reset_positions: Lay out every table from scratch

        Returns:
            ParseResult; success is False when any statement failed
        """
        batch = ParseBatch(
            previous=previous or DatabaseSchema(),
            reset_positions=reset_positions,
        )
        extractor = TableExtractor(batch, self.layout)

        errors: List[str] = []
        first_error_index = -1

        statements = split_statements(clean_sql(sql))

        for statement_index, statement in enumerate(statements, start=1):
            message = self._process_statement(statement, batch, extractor)
            if message:
                logger.warning(f"Statement {statement_index}: {message}")
                errors.append(message)
                if first_error_index == -1:
                    first_error_index = statement_index

        schema = DatabaseSchema(
            tables=batch.tables,
            relationships=infer_relationships(batch.tables),
        )

        logger.info(
            f"Parsed {len(statements)} statements: {len(schema.tables)} tables, "
            f"{len(schema.relationships)} relationships, {len(errors)} errors"
        )

        if errors:
            return ParseResult(
                success=False,
                schema=schema,
                error=ErrorResult(message="\n".join(errors), statement_index=first_error_index),
            )
        return ParseResult(success=True, schema=schema)

    def _process_statement(
        self,
        statement: str,
        batch: ParseBatch,
        extractor: TableExtractor,
    ) -> Optional[str]:
        """Extract one statement into the batch; return an error message if any."""
        if not is_create_table_statement(statement):
            return f"Unsupported statement type: {statement}"

        try:
            tree = parse_create_table(statement, self.dialect)
        except SQLSyntaxError as e:
            return str(e) or "Unknown parsing error"

        table = extractor.extract(tree, len(batch.tables))
        if table is None:
            return None

        message = None
        if batch.has_exact_table(table.name):
            message = f'Table "{table.name}" already exists.'

        batch.tables.append(table)
        return message


def parse_sql(
    sql: str,
    dialect: SQLDialect = SQLDialect.MYSQL,
    reset_positions: bool = False,
    previous: Optional[DatabaseSchema] = None,
    layout_config: Optional[LayoutConfig] = None,
) -> ParseResult:
    """
    Convenience function to parse SQL text into a schema.

    Args:
        sql: Raw SQL text
        dialect: SQL dialect
        reset_positions: Lay out every table from scratch
        previous: Schema whose table positions should be preserved
        layout_config: Optional layout settings

    Returns:
        ParseResult
    """
    return SchemaParser(dialect, layout_config).parse(sql, previous=previous, reset_positions=reset_positions)
