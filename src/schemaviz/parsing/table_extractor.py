"""
Table Extractor - turns a decoded CREATE TABLE tree into a Table.

Resolves column types and flags, attaches foreign keys that point at tables
already extracted in the same batch, and decides the table's canvas position.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from schemaviz.layout.engine import LayoutEngine
from schemaviz.models import Column, DatabaseSchema, ForeignKeyRef, Position, Table
from schemaviz.parsing.syntax import ColumnDef, CreateTableTree

logger = logging.getLogger(__name__)

UNKNOWN_TYPE = "UNKNOWN"


@dataclass
class ParseBatch:
    """
    State owned by a single parse invocation.

    Holds the tables extracted so far (used both as output and for layout
    occupancy), the schema snapshot from before the parse, and whether stored
    positions should be discarded.
    """
    previous: DatabaseSchema = field(default_factory=DatabaseSchema)
    reset_positions: bool = False
    tables: List[Table] = field(default_factory=list)

    def find_table(self, name: str) -> Optional[Table]:
        """Find an already extracted table (case-insensitive)."""
        name_lower = name.lower()
        for table in self.tables:
            if table.name.lower() == name_lower:
                return table
        return None

    def has_exact_table(self, name: str) -> bool:
        return any(t.name == name for t in self.tables)


class TableExtractor:
    """Builds Table objects for one parse batch."""

    def __init__(self, batch: ParseBatch, layout: Optional[LayoutEngine] = None):
        self.batch = batch
        self.layout = layout or LayoutEngine()

    def extract(self, tree: CreateTableTree, index: int) -> Optional[Table]:
        """
        Extract a table from a CREATE TABLE tree.

        Args:
            tree: Decoded statement
            index: Zero-based creation index within the batch

        Returns:
            Table, or None when the statement names no table
        """
        if not tree.table_name:
            return None

        columns: List[Column] = []
        declared_refs: List[ForeignKeyRef] = []
        pending: List[Tuple[Column, ForeignKeyRef]] = []

        for definition in tree.column_defs:
            column = self._build_column(definition)
            columns.append(column)
            if definition.reference:
                declared_refs.append(definition.reference)
                pending.append((column, definition.reference))

        for constraint in tree.foreign_key_constraints:
            local_name = constraint.columns[0]
            reference = ForeignKeyRef(table=constraint.ref_table, column=constraint.ref_columns[0])
            declared_refs.append(reference)

            column = _find_column(columns, local_name)
            if column is None:
                column = Column(name=local_name)
                columns.append(column)
            pending.append((column, reference))

        for column, reference in pending:
            resolved = self._resolve_reference(reference)
            if resolved is not None:
                column.foreign_key = resolved
            else:
                logger.debug(
                    f"Dropping foreign key {tree.table_name}.{column.name} -> "
                    f"{reference.table}.{reference.column}: target not defined earlier"
                )

        position = self._position_for(tree.table_name, declared_refs, index)
        return Table(name=tree.table_name, columns=columns, position=position)

    def _build_column(self, definition: ColumnDef) -> Column:
        column = Column(
            name=definition.name,
            type=_normalize_type(definition),
            nullable=not definition.not_null,
            primary_key=definition.primary_key,
            auto_increment=definition.auto_increment,
            unique=definition.unique,
            default_value=definition.default,
        )
        if definition.type_params and definition.type_params[0].isdigit():
            column.length = int(definition.type_params[0])
        return column

    def _resolve_reference(self, reference: ForeignKeyRef) -> Optional[ForeignKeyRef]:
        target = self.batch.find_table(reference.table)
        if target is None:
            return None
        target_column = target.get_column(reference.column)
        if target_column is None:
            return None
        return ForeignKeyRef(table=target.name, column=target_column.name)

    def _position_for(self, table_name: str, refs: List[ForeignKeyRef], index: int) -> Position:
        if not self.batch.reset_positions:
            existing = self.batch.previous.get_table(table_name)
            if existing is not None:
                return Position(existing.position.x, existing.position.y)

        return self.layout.place(table_name, refs, index, self.batch.tables)


def _normalize_type(definition: ColumnDef) -> str:
    if not definition.data_type:
        return UNKNOWN_TYPE
    # Parameters keep their case so ENUM/SET literals survive
    type_name = definition.data_type.upper()
    if definition.type_params:
        type_name += f"({','.join(definition.type_params)})"
    if definition.type_modifiers:
        type_name += " " + " ".join(m.upper() for m in definition.type_modifiers)
    return type_name


def _find_column(columns: List[Column], name: str) -> Optional[Column]:
    name_lower = name.lower()
    for column in columns:
        if column.name.lower() == name_lower:
            return column
    return None
