"""
Relationship Inferrer - derives relationships from extracted tables.

Relationships are never parsed directly; they are recomputed from the foreign
keys on the current table set:
1. Junction tables (two foreign keys and little else) collapse into a single
   many-to-many relationship between the tables they join
2. Every other foreign key becomes a one-to-one or one-to-many relationship
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from schemaviz.models import Column, Relationship, RelationshipType, Table

logger = logging.getLogger(__name__)


class RelationshipInferrer:
    """
    Infers relationships between tables from their foreign keys.

    Relationship ids are assigned in discovery order: junction relationships
    first (in table order), then the remaining foreign keys table by table,
    column by column.
    """

    JUNCTION_NAME_HINTS = ("junction", "bridge", "link")
    MAX_JUNCTION_PAYLOAD_COLUMNS = 2

    def __init__(self, tables: Sequence[Table]):
        self.tables = list(tables)
        self._next_id = 0

    def infer(self) -> List[Relationship]:
        """
        Infer all relationships.

        Returns:
            Relationships in id order
        """
        self._next_id = 0
        relationships: List[Relationship] = []

        junction_names = set(self.detect_junction_tables())

        for table in self.tables:
            if table.name in junction_names:
                rel = self._junction_relationship(table)
                if rel:
                    relationships.append(rel)

        for table in self.tables:
            if table.name in junction_names:
                continue

            for column in table.columns:
                if column.foreign_key is None:
                    continue

                target = self._get_table(column.foreign_key.table)
                if target is None:
                    continue

                relationships.append(Relationship(
                    id=self._new_id(),
                    from_table=table.name,
                    from_column=column.name,
                    to_table=column.foreign_key.table,
                    to_column=column.foreign_key.column,
                    type=self.determine_relationship_type(table, column, target),
                ))

        logger.debug(
            f"Inferred {len(relationships)} relationships "
            f"({len(junction_names)} junction tables) from {len(self.tables)} tables"
        )
        return relationships

    def detect_junction_tables(self) -> List[str]:
        """Return names of tables that only exist to join two other tables."""
        junctions = []
        for table in self.tables:
            if self.is_junction_table(table):
                junctions.append(table.name)
        return junctions

    def is_junction_table(self, table: Table) -> bool:
        foreign_keys = table.foreign_key_columns()
        payload = [c for c in table.columns if c.foreign_key is None and not c.primary_key]

        if len(foreign_keys) < 2 or len(payload) > self.MAX_JUNCTION_PAYLOAD_COLUMNS:
            return False

        name_lower = table.name.lower()
        return "_" in table.name or any(hint in name_lower for hint in self.JUNCTION_NAME_HINTS)

    def determine_relationship_type(
        self,
        from_table: Table,
        column: Column,
        target_table: Table,
    ) -> RelationshipType:
        """
        Classify a foreign key as one-to-one or one-to-many.

        A unique or primary-key column can only point at one row per target
        row. The same holds when the target points back with a unique key.
        """
        if column.unique or column.primary_key:
            return RelationshipType.ONE_TO_ONE

        for target_column in target_table.columns:
            fk = target_column.foreign_key
            if fk and fk.table == from_table.name and (target_column.unique or target_column.primary_key):
                return RelationshipType.ONE_TO_ONE

        return RelationshipType.ONE_TO_MANY

    def _junction_relationship(self, table: Table) -> Optional[Relationship]:
        # Only the first two foreign keys are represented
        first, second = table.foreign_key_columns()[:2]

        if first.foreign_key.table == second.foreign_key.table:
            logger.debug(f"Junction table {table.name} references {first.foreign_key.table} twice, skipping")
            return None

        return Relationship(
            id=self._new_id(),
            from_table=first.foreign_key.table,
            from_column=first.foreign_key.column,
            to_table=second.foreign_key.table,
            to_column=second.foreign_key.column,
            type=RelationshipType.MANY_TO_MANY,
            junction_table=table.name,
        )

    def _get_table(self, name: str) -> Optional[Table]:
        for table in self.tables:
            if table.name == name:
                return table
        return None

    def _new_id(self) -> str:
        rel_id = f"rel_{self._next_id}"
        self._next_id += 1
        return rel_id


def infer_relationships(tables: Sequence[Table]) -> List[Relationship]:
    """
    Convenience function to infer relationships for a table set.

    Args:
        tables: Extracted tables

    Returns:
        List of relationships
    """
    return RelationshipInferrer(tables).infer()
