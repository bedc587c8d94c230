"""
Core data models for the schemaviz package.

Defines the schema graph produced by the SQL pipeline (tables, columns,
relationships), the parse result envelope, and the canvas state used by the
viewport helpers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class SQLDialect(str, Enum):
    """Supported SQL flavors."""
    MYSQL = "MySQL"
    POSTGRESQL = "PostgreSQL"
    SQLITE = "SQLite"
    MARIADB = "MariaDB"

    @classmethod
    def parse(cls, value: Any) -> SQLDialect:
        """Resolve a dialect from its value or member name (case-insensitive)."""
        if isinstance(value, SQLDialect):
            return value
        text = str(value).strip().lower()
        for dialect in cls:
            if text in (dialect.value.lower(), dialect.name.lower()):
                return dialect
        raise ValueError(f"Unknown SQL dialect: {value}")


class RelationshipType(str, Enum):
    """Cardinality of a relationship between two tables."""
    ONE_TO_ONE = "one-to-one"
    ONE_TO_MANY = "one-to-many"
    MANY_TO_MANY = "many-to-many"


@dataclass
class Position:
    """Top-left corner of a table on the canvas."""
    x: float = 0.0
    y: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Position:
        return cls(x=float(data.get("x", 0.0)), y=float(data.get("y", 0.0)))


@dataclass
class ForeignKeyRef:
    """Target of a single-column foreign key."""
    table: str
    column: str

    def to_dict(self) -> Dict[str, str]:
        return {"table": self.table, "column": self.column}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ForeignKeyRef:
        return cls(table=data["table"], column=data["column"])


@dataclass
class Column:
    """A single column of a table."""
    name: str
    type: str = "UNKNOWN"
    nullable: bool = True
    primary_key: bool = False
    auto_increment: bool = False
    unique: bool = False
    default_value: Optional[str] = None
    foreign_key: Optional[ForeignKeyRef] = None
    length: Optional[int] = None  # Editor-side length, see generator

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        data: Dict[str, Any] = {
            "name": self.name,
            "type": self.type,
            "nullable": self.nullable,
            "primaryKey": self.primary_key,
            "autoIncrement": self.auto_increment,
            "unique": self.unique,
        }
        if self.default_value is not None:
            data["defaultValue"] = self.default_value
        if self.foreign_key is not None:
            data["foreignKey"] = self.foreign_key.to_dict()
        if self.length is not None:
            data["length"] = self.length
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Column:
        """Create from dictionary."""
        return cls(
            name=data["name"],
            type=data.get("type", "UNKNOWN"),
            nullable=data.get("nullable", True),
            primary_key=data.get("primaryKey", False),
            auto_increment=data.get("autoIncrement", False),
            unique=data.get("unique", False),
            default_value=data.get("defaultValue"),
            foreign_key=ForeignKeyRef.from_dict(data["foreignKey"]) if data.get("foreignKey") else None,
            length=data.get("length"),
        )


@dataclass
class Table:
    """A table on the canvas."""
    name: str
    columns: List[Column] = field(default_factory=list)
    position: Position = field(default_factory=Position)

    @property
    def column_names(self) -> List[str]:
        """Return list of column names."""
        return [c.name for c in self.columns]

    def get_column(self, name: str) -> Optional[Column]:
        """Get column by name (case-insensitive)."""
        name_lower = name.lower()
        for col in self.columns:
            if col.name.lower() == name_lower:
                return col
        return None

    def primary_key_columns(self) -> List[Column]:
        return [c for c in self.columns if c.primary_key]

    def foreign_key_columns(self) -> List[Column]:
        return [c for c in self.columns if c.foreign_key is not None]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "columns": [c.to_dict() for c in self.columns],
            "position": self.position.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Table:
        """Create from dictionary."""
        return cls(
            name=data["name"],
            columns=[Column.from_dict(c) for c in data.get("columns", [])],
            position=Position.from_dict(data.get("position", {})),
        )


@dataclass
class Relationship:
    """A foreign key relationship derived from the table set."""
    id: str
    from_table: str
    from_column: str
    to_table: str
    to_column: str
    type: RelationshipType = RelationshipType.ONE_TO_MANY
    junction_table: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        data: Dict[str, Any] = {
            "id": self.id,
            "fromTable": self.from_table,
            "fromColumn": self.from_column,
            "toTable": self.to_table,
            "toColumn": self.to_column,
            "type": self.type.value,
        }
        if self.junction_table is not None:
            data["junctionTable"] = self.junction_table
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Relationship:
        """Create from dictionary."""
        return cls(
            id=data["id"],
            from_table=data["fromTable"],
            from_column=data["fromColumn"],
            to_table=data["toTable"],
            to_column=data["toColumn"],
            type=RelationshipType(data.get("type", RelationshipType.ONE_TO_MANY.value)),
            junction_table=data.get("junctionTable"),
        )


@dataclass
class DatabaseSchema:
    """Tables in statement order plus the relationships derived from them."""
    tables: List[Table] = field(default_factory=list)
    relationships: List[Relationship] = field(default_factory=list)

    @property
    def table_names(self) -> List[str]:
        return [t.name for t in self.tables]

    def get_table(self, name: str) -> Optional[Table]:
        """Get table by name (case-insensitive)."""
        name_lower = name.lower()
        for table in self.tables:
            if table.name.lower() == name_lower:
                return table
        return None

    def get_relationships_for_table(self, table_name: str) -> List[Relationship]:
        """Get all relationships touching a table, including as junction."""
        table_lower = table_name.lower()
        return [
            rel for rel in self.relationships
            if table_lower in (
                rel.from_table.lower(),
                rel.to_table.lower(),
                (rel.junction_table or "").lower(),
            )
        ]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "tables": [t.to_dict() for t in self.tables],
            "relationships": [r.to_dict() for r in self.relationships],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> DatabaseSchema:
        """Create from dictionary."""
        return cls(
            tables=[Table.from_dict(t) for t in data.get("tables", [])],
            relationships=[Relationship.from_dict(r) for r in data.get("relationships", [])],
        )


@dataclass
class ErrorResult:
    """Combined error report of a parse."""
    message: str
    statement_index: int = -1  # 1-based index of the first failing statement

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message, "statementIndex": self.statement_index}


@dataclass
class ParseResult:
    """Outcome of parsing a SQL blob into a schema."""
    success: bool
    schema: Optional[DatabaseSchema] = None
    error: Optional[ErrorResult] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"success": self.success}
        if self.schema is not None:
            data["schema"] = self.schema.to_dict()
        if self.error is not None:
            data["error"] = self.error.to_dict()
        return data


@dataclass
class SyntaxParseResult:
    """Outcome reported by a schema session after handling SQL input."""
    success: bool
    error: Optional[str] = None
    statement_index: int = -1


@dataclass
class CanvasState:
    """Zoom and pan of the canvas viewport."""
    zoom: float = 1.0
    pan_x: float = 0.0
    pan_y: float = 0.0
    selected_table: Optional[str] = None
    dragged_table: Optional[str] = None
