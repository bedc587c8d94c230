"""
CREATE TABLE syntax trees.

Wraps the sqlglot parser and decodes its expression tree once into a small
set of tagged definitions, so the extraction logic never has to deal with
the shape of the parser's own AST.

Column types are taken from the statement's own tokens rather than from
sqlglot's canonical type names, so ``INTEGER``, ``NUMERIC(10,2)``,
``INT UNSIGNED`` and ``ENUM('a','b')`` keep the spelling they were declared
with.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple, Union

import sqlglot
from sqlglot import exp
from sqlglot.errors import ParseError, SqlglotError
from sqlglot.tokens import Token, TokenType

from schemaviz.exceptions import SQLSyntaxError
from schemaviz.models import ForeignKeyRef, SQLDialect

logger = logging.getLogger(__name__)

# sqlglot has no MariaDB dialect; MySQL grammar covers it
SQLGLOT_DIALECTS = {
    SQLDialect.MYSQL: "mysql",
    SQLDialect.MARIADB: "mysql",
    SQLDialect.POSTGRESQL: "postgres",
    SQLDialect.SQLITE: "sqlite",
}

DEFAULT_REFERENCED_COLUMN = "id"

ANSI_ESCAPE_PATTERN = re.compile(r'\x1b\[[0-9;]*m')

# Words that start a column constraint and therefore end the declared type
COLUMN_CONSTRAINT_WORDS = {
    "NOT", "NULL", "PRIMARY", "UNIQUE", "DEFAULT", "REFERENCES", "AUTO_INCREMENT",
    "AUTOINCREMENT", "CHECK", "CONSTRAINT", "GENERATED", "COLLATE", "COMMENT", "KEY",
    "IDENTITY", "AS", "ON", "CHARSET", "INVISIBLE", "VISIBLE",
}

# Words that start a table-level definition instead of a column
TABLE_CONSTRAINT_WORDS = {
    "CONSTRAINT", "PRIMARY", "FOREIGN", "UNIQUE", "KEY", "INDEX", "CHECK",
    "FULLTEXT", "SPATIAL", "EXCLUDE", "LIKE",
}


@dataclass
class ColumnDef:
    """An inline column definition."""
    name: str
    data_type: Optional[str] = None
    type_params: List[str] = field(default_factory=list)
    type_modifiers: List[str] = field(default_factory=list)  # e.g. UNSIGNED, ZEROFILL
    not_null: bool = False
    primary_key: bool = False
    unique: bool = False
    auto_increment: bool = False
    default: Optional[str] = None
    reference: Optional[ForeignKeyRef] = None


@dataclass
class ForeignKeyConstraint:
    """A table-level FOREIGN KEY (...) REFERENCES t(...) constraint."""
    columns: List[str]
    ref_table: str
    ref_columns: List[str]


@dataclass
class OtherConstraint:
    """Any other table-level constraint (PRIMARY KEY, UNIQUE, CHECK, INDEX...)."""
    kind: str


Definition = Union[ColumnDef, ForeignKeyConstraint, OtherConstraint]


@dataclass
class DeclaredType:
    """A column type exactly as written in the statement."""
    base: Optional[str] = None
    params: List[str] = field(default_factory=list)
    modifiers: List[str] = field(default_factory=list)


@dataclass
class CreateTableTree:
    """Decoded CREATE TABLE statement."""
    table_name: Optional[str]
    definitions: List[Definition] = field(default_factory=list)

    @property
    def column_defs(self) -> List[ColumnDef]:
        return [d for d in self.definitions if isinstance(d, ColumnDef)]

    @property
    def foreign_key_constraints(self) -> List[ForeignKeyConstraint]:
        return [d for d in self.definitions if isinstance(d, ForeignKeyConstraint)]


def parse_create_table(statement: str, dialect: SQLDialect = SQLDialect.MYSQL) -> CreateTableTree:
    """
    Parse one CREATE TABLE statement.

    Args:
        statement: A single SQL statement without the trailing semicolon
        dialect: SQL dialect used to pick the grammar

    Returns:
        CreateTableTree

    Raises:
        SQLSyntaxError: If the statement is invalid or not a CREATE TABLE
    """
    read = SQLGLOT_DIALECTS[dialect]
    try:
        expression = sqlglot.parse_one(statement, read=read)
        tokens = sqlglot.tokenize(statement, read=read)
    except SqlglotError as e:
        raise SQLSyntaxError(_error_message(e), statement) from e

    if not isinstance(expression, exp.Create) or str(expression.args.get("kind") or "").upper() != "TABLE":
        raise SQLSyntaxError("Statement could not be parsed as CREATE TABLE", statement)

    declared = declared_column_types(statement, tokens)
    return _decode_create(expression, dialect, declared)


def declared_column_types(statement: str, tokens: Sequence[Token]) -> Dict[str, DeclaredType]:
    """
    Read the declared type of every column from the statement's tokens.

    Args:
        statement: The statement the tokens were produced from
        tokens: sqlglot tokens of the statement

    Returns:
        Mapping of lower-cased column name to its declared type
    """
    declared: Dict[str, DeclaredType] = {}

    for segment in _definition_segments(tokens):
        first = segment[0]
        quoted = first.token_type == TokenType.IDENTIFIER
        if not quoted and _leading_word(first) in TABLE_CONSTRAINT_WORDS:
            continue
        declared[first.text.lower()] = _declared_type(statement, segment[1:])

    return declared


def _definition_segments(tokens: Sequence[Token]) -> List[List[Token]]:
    """Split the parenthesized body of CREATE TABLE on top-level commas."""
    start = next((i for i, t in enumerate(tokens) if t.token_type == TokenType.L_PAREN), None)
    if start is None:
        return []

    segments: List[List[Token]] = []
    current: List[Token] = []
    depth = 0

    for token in tokens[start + 1:]:
        if token.token_type == TokenType.L_PAREN:
            depth += 1
        elif token.token_type == TokenType.R_PAREN:
            if depth == 0:
                break
            depth -= 1
        elif token.token_type == TokenType.COMMA and depth == 0:
            if current:
                segments.append(current)
            current = []
            continue
        current.append(token)

    if current:
        segments.append(current)
    return segments


def _declared_type(statement: str, tokens: Sequence[Token]) -> DeclaredType:
    base: List[Token] = []
    params: List[List[Token]] = []
    modifiers: List[str] = []
    depth = 0

    for i, token in enumerate(tokens):
        word = _leading_word(token)

        if depth == 0:
            if token.token_type == TokenType.L_PAREN:
                if params or not base:
                    break
                depth = 1
                params.append([])
                continue
            if word in COLUMN_CONSTRAINT_WORDS:
                break
            # CHARACTER SET ends the type, CHARACTER VARYING does not
            if word == "CHARACTER" and i + 1 < len(tokens) and tokens[i + 1].text.upper() == "SET":
                break
            if params:
                modifiers.append(token.text.upper())
            else:
                base.append(token)
            continue

        if token.token_type == TokenType.L_PAREN:
            depth += 1
        elif token.token_type == TokenType.R_PAREN:
            depth -= 1
            if depth == 0:
                continue
        elif token.token_type == TokenType.COMMA and depth == 1:
            params.append([])
            continue
        params[-1].append(token)

    return DeclaredType(
        base=_raw_text(statement, base).upper() or None,
        params=[_raw_text(statement, p) for p in params if p],
        modifiers=modifiers,
    )


def _leading_word(token: Token) -> str:
    # Keywords such as PRIMARY KEY arrive as a single token
    words = token.text.split()
    return words[0].upper() if words else ""


def _raw_text(statement: str, tokens: Sequence[Token]) -> str:
    if not tokens:
        return ""
    text = statement[tokens[0].start:tokens[-1].end + 1]
    return " ".join(text.split())


def _error_message(error: SqlglotError) -> str:
    if isinstance(error, ParseError) and error.errors:
        description = error.errors[0].get("description")
        if description:
            return description
    return ANSI_ESCAPE_PATTERN.sub("", str(error))


def _decode_create(
    create: exp.Create,
    dialect: SQLDialect,
    declared: Dict[str, DeclaredType],
) -> CreateTableTree:
    target = create.this
    if isinstance(target, exp.Schema):
        table = target.this
        raw_definitions = target.expressions
    else:
        table = target
        raw_definitions = []

    table_name = table.name if isinstance(table, exp.Table) and table.name else None
    tree = CreateTableTree(table_name=table_name)

    for node in raw_definitions:
        tree.definitions.extend(_decode_definition(node, dialect, declared))

    return tree


def _decode_definition(
    node: exp.Expression,
    dialect: SQLDialect,
    declared: Dict[str, DeclaredType],
) -> List[Definition]:
    if isinstance(node, exp.ColumnDef):
        return [_decode_column(node, dialect, declared)]

    # Columns declared without a type (SQLite)
    if isinstance(node, (exp.Identifier, exp.Column)) and node.name:
        return [_decode_column(exp.ColumnDef(this=exp.to_identifier(node.name)), dialect, declared)]

    if isinstance(node, exp.ForeignKey):
        fk = _decode_foreign_key(node)
        return [fk] if fk else []

    # CONSTRAINT name FOREIGN KEY (...) / CONSTRAINT name PRIMARY KEY (...)
    if isinstance(node, exp.Constraint):
        decoded: List[Definition] = []
        for inner in node.expressions:
            decoded.extend(_decode_definition(inner, dialect, declared))
        return decoded

    return [OtherConstraint(kind=_constraint_kind(node))]


def _decode_column(
    node: exp.ColumnDef,
    dialect: SQLDialect,
    declared: Dict[str, DeclaredType],
) -> ColumnDef:
    column = ColumnDef(name=node.name)

    data_type = node.args.get("kind")
    declared_type = declared.get(node.name.lower())
    if declared_type is not None:
        column.data_type = declared_type.base
        column.type_params = declared_type.params
        column.type_modifiers = declared_type.modifiers
    elif isinstance(data_type, exp.DataType):
        logger.debug(f"No declared type found for column {node.name}, using parser type")
        column.data_type = _type_name(data_type)
        column.type_params = [p.sql(dialect=SQLGLOT_DIALECTS[dialect]) for p in data_type.expressions]

    for constraint in node.args.get("constraints") or []:
        kind = constraint.args.get("kind") if isinstance(constraint, exp.ColumnConstraint) else constraint

        if isinstance(kind, exp.NotNullColumnConstraint):
            column.not_null = not kind.args.get("allow_null")
        elif isinstance(kind, exp.PrimaryKeyColumnConstraint):
            column.primary_key = True
        elif isinstance(kind, exp.UniqueColumnConstraint):
            column.unique = True
        elif isinstance(kind, exp.AutoIncrementColumnConstraint):
            column.auto_increment = True
        elif isinstance(kind, exp.GeneratedAsIdentityColumnConstraint) and not kind.args.get("expression"):
            column.auto_increment = True
        elif isinstance(kind, exp.DefaultColumnConstraint):
            column.default = kind.this.sql(dialect=SQLGLOT_DIALECTS[dialect]) if kind.this else None
        elif isinstance(kind, exp.Reference):
            table, columns = _reference_target(kind)
            if table:
                column.reference = ForeignKeyRef(
                    table=table,
                    column=columns[0] if columns else DEFAULT_REFERENCED_COLUMN,
                )

    return column


def _decode_foreign_key(node: exp.ForeignKey) -> Optional[ForeignKeyConstraint]:
    reference = node.args.get("reference")
    if not isinstance(reference, exp.Reference):
        return None

    ref_table, ref_columns = _reference_target(reference)
    columns = [c.name for c in node.expressions if c.name]
    if not ref_table or not columns:
        return None

    return ForeignKeyConstraint(
        columns=columns,
        ref_table=ref_table,
        ref_columns=ref_columns or [DEFAULT_REFERENCED_COLUMN],
    )


def _reference_target(reference: exp.Reference) -> Tuple[str, List[str]]:
    """Return (table, [columns]) of a REFERENCES clause."""
    target = reference.this
    if isinstance(target, exp.Schema):
        table = target.this.name if target.this else ""
        columns = [c.name for c in target.expressions if c.name]
        return table, columns
    if isinstance(target, exp.Table):
        return target.name, []
    return "", []


def _type_name(data_type: exp.DataType) -> Optional[str]:
    type_enum = data_type.this
    if type_enum == exp.DataType.Type.USERDEFINED:
        name = data_type.args.get("kind")
        return str(name).upper() if name else None

    name = type_enum.value if isinstance(type_enum, exp.DataType.Type) else str(type_enum or "")
    return name.upper() or None


def _constraint_kind(node: exp.Expression) -> str:
    if isinstance(node, exp.PrimaryKey):
        return "PRIMARY KEY"
    if isinstance(node, exp.UniqueColumnConstraint):
        return "UNIQUE"
    if isinstance(node, exp.CheckColumnConstraint):
        return "CHECK"
    return node.key.upper()
