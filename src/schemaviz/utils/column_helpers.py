"""Helpers for editing columns: type splitting, FK target lookup, badges."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from schemaviz.dialects import requires_length
from schemaviz.models import Column, SQLDialect, Table

TYPE_WITH_LENGTH_PATTERN = re.compile(r'^([A-Z\s]+)\((\d+(?:,\d+)*)\)$', re.IGNORECASE)


@dataclass
class CompatibleKey:
    """A primary key column that a foreign key column could reference."""
    table: str
    column: str
    type: str
    length: Optional[int] = None


def extract_type_and_length(full_type: str) -> Tuple[str, Optional[int]]:
    """
    Split a normalized type into base type and first length parameter.

    ``"VARCHAR(100)"`` gives ``("VARCHAR", 100)``, ``"DECIMAL(10,2)"`` gives
    ``("DECIMAL", 10)`` and ``"TEXT"`` gives ``("TEXT", None)``.
    """
    match = TYPE_WITH_LENGTH_PATTERN.match(full_type)
    if match:
        base_type = match.group(1).strip().upper()
        first_number = match.group(2).split(',')[0]
        return base_type, int(first_number)
    return full_type.upper(), None


def get_compatible_primary_keys(
    tables: Sequence[Table],
    exclude_table: str,
    current_type: str,
    current_length: Optional[int] = None,
    dialect: SQLDialect = SQLDialect.MYSQL,
) -> List[CompatibleKey]:
    """
    List primary keys in other tables whose type matches a column being edited.

    Lengths must agree when both sides declare one. When only one side does,
    the match is rejected only if either type requires a length.
    """
    compatible: List[CompatibleKey] = []

    if not current_type:
        return compatible

    for table in tables:
        if table.name == exclude_table:
            continue

        for column in table.columns:
            if not column.primary_key:
                continue

            base_type, length = extract_type_and_length(column.type)
            if base_type != current_type.upper():
                continue

            column_length = length or column.length
            length_ok = True
            if column_length and current_length:
                length_ok = column_length == current_length
            elif column_length or current_length:
                if requires_length(base_type, dialect) or requires_length(current_type, dialect):
                    length_ok = False

            if length_ok:
                compatible.append(CompatibleKey(
                    table=table.name,
                    column=column.name,
                    type=base_type,
                    length=column_length,
                ))

    return compatible


def get_column_badges(column: Column) -> List[str]:
    """Short labels shown next to a column on its table card."""
    badges = []

    if column.primary_key:
        badges.append("PK")
    if column.foreign_key:
        badges.append("FK")
    if column.unique and not column.primary_key:
        badges.append("UQ")
    if column.auto_increment:
        badges.append("AI")
    if not column.nullable:
        badges.append("NN")
    if column.default_value:
        badges.append("DF")

    return badges
