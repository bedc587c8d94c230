"""
SchemaViz - Visual Database Schemas from CREATE TABLE Scripts

Turns pasted SQL into a graph of tables, columns and relationships with
non-overlapping canvas positions, and renders edited graphs back into SQL.

Features:
- Quote-aware statement splitting with per-statement error reporting
- CREATE TABLE parsing for MySQL, PostgreSQL, SQLite and MariaDB
- One-to-one, one-to-many and many-to-many (junction table) inference
- Deterministic layout that keeps existing table positions on re-parse
"""

__version__ = "0.1.0"
__author__ = "SchemaViz Team"

from schemaviz.models import (
    SQLDialect,
    RelationshipType,
    Position,
    ForeignKeyRef,
    Column,
    Table,
    Relationship,
    DatabaseSchema,
    ErrorResult,
    ParseResult,
    SyntaxParseResult,
    CanvasState,
)
from schemaviz.exceptions import SchemaVizError, SQLSyntaxError, ConfigError
from schemaviz.config import LayoutConfig, SchemaVizConfig, load_config

# Parsing pipeline
from schemaviz.parsing import (
    SchemaParser,
    RelationshipInferrer,
    parse_sql,
    split_statements,
    is_create_table_statement,
)

# Layout
from schemaviz.layout import LayoutEngine, fit_canvas_to_tables

# SQL output and editor state
from schemaviz.generator import SQLGenerator, generate_sql_from_schema
from schemaviz.session import SchemaSession, load_schema

__all__ = [
    # Core models
    "SQLDialect",
    "RelationshipType",
    "Position",
    "ForeignKeyRef",
    "Column",
    "Table",
    "Relationship",
    "DatabaseSchema",
    "ErrorResult",
    "ParseResult",
    "SyntaxParseResult",
    "CanvasState",
    # Errors and config
    "SchemaVizError",
    "SQLSyntaxError",
    "ConfigError",
    "LayoutConfig",
    "SchemaVizConfig",
    "load_config",
    # Parsing
    "SchemaParser",
    "RelationshipInferrer",
    "parse_sql",
    "split_statements",
    "is_create_table_statement",
    # Layout
    "LayoutEngine",
    "fit_canvas_to_tables",
    # Generator and session
    "SQLGenerator",
    "generate_sql_from_schema",
    "SchemaSession",
    "load_schema",
]
