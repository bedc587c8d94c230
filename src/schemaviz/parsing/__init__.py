"""
SQL parsing pipeline for building schema graphs.

Turns pasted CREATE TABLE statements into tables, columns, relationships and
canvas positions:
- Quote-aware statement splitting
- CREATE TABLE extraction through sqlglot
- One-to-one / one-to-many / many-to-many relationship inference

Usage:
    from schemaviz.parsing import parse_sql

    result = parse_sql(sql, SQLDialect.MYSQL)
"""

from schemaviz.parsing.statements import clean_sql, split_statements, is_create_table_statement
from schemaviz.parsing.syntax import (
    ColumnDef,
    CreateTableTree,
    ForeignKeyConstraint,
    OtherConstraint,
    parse_create_table,
)
from schemaviz.parsing.table_extractor import ParseBatch, TableExtractor
from schemaviz.parsing.relationship_inferrer import RelationshipInferrer, infer_relationships
from schemaviz.parsing.pipeline import SchemaParser, parse_sql

__all__ = [
    "clean_sql",
    "split_statements",
    "is_create_table_statement",
    "ColumnDef",
    "CreateTableTree",
    "ForeignKeyConstraint",
    "OtherConstraint",
    "parse_create_table",
    "ParseBatch",
    "TableExtractor",
    "RelationshipInferrer",
    "infer_relationships",
    "SchemaParser",
    "parse_sql",
]
