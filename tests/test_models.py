"""
Tests for core data models.
"""

import pytest

from schemaviz.models import (
    Column,
    DatabaseSchema,
    ErrorResult,
    ForeignKeyRef,
    ParseResult,
    Position,
    Relationship,
    RelationshipType,
    SQLDialect,
    Table,
)


class TestSQLDialect:
    """Tests for SQLDialect."""

    def test_parse_by_value_and_name(self):
        assert SQLDialect.parse("PostgreSQL") == SQLDialect.POSTGRESQL
        assert SQLDialect.parse("postgresql") == SQLDialect.POSTGRESQL
        assert SQLDialect.parse("MARIADB") == SQLDialect.MARIADB
        assert SQLDialect.parse(SQLDialect.SQLITE) == SQLDialect.SQLITE

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="Unknown SQL dialect"):
            SQLDialect.parse("oracle")


class TestColumn:
    """Tests for Column."""

    def test_defaults(self):
        """Test a bare column is a nullable UNKNOWN column."""
        column = Column(name="x")
        assert column.type == "UNKNOWN"
        assert column.nullable
        assert not column.primary_key
        assert column.foreign_key is None

    def test_to_dict_uses_camel_case(self):
        """Test serialized keys and omission of unset optionals."""
        column = Column(
            name="author_id",
            type="INT",
            nullable=False,
            foreign_key=ForeignKeyRef(table="authors", column="id"),
        )
        data = column.to_dict()

        assert data["primaryKey"] is False
        assert data["autoIncrement"] is False
        assert data["foreignKey"] == {"table": "authors", "column": "id"}
        assert "defaultValue" not in data
        assert "length" not in data

    def test_from_dict(self):
        column = Column.from_dict({
            "name": "email",
            "type": "VARCHAR(255)",
            "nullable": False,
            "unique": True,
            "length": 255,
        })
        assert column == Column(name="email", type="VARCHAR(255)", nullable=False, unique=True, length=255)


class TestTable:
    """Tests for Table."""

    @pytest.fixture
    def table(self):
        return Table(
            name="books",
            columns=[
                Column(name="id", type="INT", primary_key=True),
                Column(name="Author_Id", type="INT", foreign_key=ForeignKeyRef("authors", "id")),
                Column(name="title", type="VARCHAR(200)"),
            ],
            position=Position(10, 20),
        )

    def test_get_column_case_insensitive(self, table):
        assert table.get_column("author_id").name == "Author_Id"
        assert table.get_column("missing") is None

    def test_key_columns(self, table):
        assert [c.name for c in table.primary_key_columns()] == ["id"]
        assert [c.name for c in table.foreign_key_columns()] == ["Author_Id"]

    def test_dict_round_trip(self, table):
        assert Table.from_dict(table.to_dict()) == table


class TestDatabaseSchema:
    """Tests for DatabaseSchema."""

    @pytest.fixture
    def schema(self):
        return DatabaseSchema(
            tables=[Table(name="books"), Table(name="tags"), Table(name="book_tags"), Table(name="authors")],
            relationships=[
                Relationship(
                    id="rel_0",
                    from_table="books",
                    from_column="id",
                    to_table="tags",
                    to_column="id",
                    type=RelationshipType.MANY_TO_MANY,
                    junction_table="book_tags",
                ),
                Relationship(
                    id="rel_1",
                    from_table="books",
                    from_column="author_id",
                    to_table="authors",
                    to_column="id",
                ),
            ],
        )

    def test_get_table(self, schema):
        assert schema.get_table("TAGS").name == "tags"
        assert schema.get_table("nope") is None

    def test_relationships_for_table(self, schema):
        """Test lookup covers both ends and the junction table."""
        assert [r.id for r in schema.get_relationships_for_table("books")] == ["rel_0", "rel_1"]
        assert [r.id for r in schema.get_relationships_for_table("book_tags")] == ["rel_0"]
        assert [r.id for r in schema.get_relationships_for_table("authors")] == ["rel_1"]

    def test_relationship_dict(self, schema):
        data = schema.relationships[0].to_dict()
        assert data == {
            "id": "rel_0",
            "fromTable": "books",
            "fromColumn": "id",
            "toTable": "tags",
            "toColumn": "id",
            "type": "many-to-many",
            "junctionTable": "book_tags",
        }
        assert "junctionTable" not in schema.relationships[1].to_dict()

    def test_dict_round_trip(self, schema):
        assert DatabaseSchema.from_dict(schema.to_dict()) == schema


class TestParseResult:
    """Tests for the parse result envelope."""

    def test_success_has_no_error(self):
        data = ParseResult(success=True, schema=DatabaseSchema()).to_dict()
        assert data == {"success": True, "schema": {"tables": [], "relationships": []}}

    def test_error_serialization(self):
        result = ParseResult(success=False, error=ErrorResult(message="boom", statement_index=3))
        assert result.to_dict() == {
            "success": False,
            "error": {"message": "boom", "statementIndex": 3},
        }
