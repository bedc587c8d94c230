"""
Tests for the editing session and schema files.
"""

import json

import pytest
import yaml

from schemaviz.exceptions import SchemaVizError
from schemaviz.models import Position, RelationshipType, SQLDialect
from schemaviz.session import SchemaSession, load_schema


SQL = """
CREATE TABLE authors (id INT PRIMARY KEY, name VARCHAR(100) NOT NULL);
CREATE TABLE books (
  id INT PRIMARY KEY,
  author_id INT,
  title VARCHAR(200),
  FOREIGN KEY (author_id) REFERENCES authors(id)
);
"""


class TestSchemaSession:
    """Tests for SchemaSession."""

    @pytest.fixture
    def session(self):
        session = SchemaSession(SQL)
        assert session.parse().success
        return session

    def test_parse(self, session):
        assert session.schema.table_names == ["authors", "books"]
        assert session.schema.relationships[0].type == RelationshipType.ONE_TO_MANY

    def test_empty_input(self):
        """Test that blank input clears the schema and reports an error."""
        session = SchemaSession("   ")
        result = session.parse()

        assert not result.success
        assert result.error == "SQL input is empty"
        assert session.schema.tables == []

    def test_failed_parse_keeps_partial_schema(self, session):
        session.sql_input = SQL + "SELECT 1;"
        result = session.parse()

        assert not result.success
        assert result.statement_index == 3
        assert "Unsupported statement type" in result.error
        assert session.schema.table_names == ["authors", "books"]

    def test_moved_table_survives_reparse(self, session):
        """Test that dragging a table then re-parsing keeps the new spot."""
        session.move_table("books", 1000, 50)
        session.sql_input = SQL + "CREATE TABLE tags (id INT PRIMARY KEY);"
        session.parse()

        assert session.schema.get_table("books").position == Position(1000, 50)
        assert session.schema.table_names == ["authors", "books", "tags"]

    def test_reset_positions(self, session):
        session.move_table("authors", 1000, 50)
        session.parse(reset_positions=True)
        assert session.schema.get_table("authors").position == Position(150, 150)

    def test_move_unknown_table(self, session):
        with pytest.raises(SchemaVizError, match="Unknown table"):
            session.move_table("nope", 0, 0)

    def test_reorder_tables(self, session):
        """Test reordering tables also rewrites the SQL input."""
        session.reorder_tables(1, 0)

        assert session.schema.table_names == ["books", "authors"]
        assert session.sql_input.startswith("CREATE TABLE books")
        assert len(session.schema.relationships) == 1

    def test_reorder_columns(self, session):
        session.reorder_columns("books", 2, 0)

        assert session.schema.get_table("books").column_names == ["title", "id", "author_id"]
        assert "CREATE TABLE books (\n  title VARCHAR(200)," in session.sql_input

    def test_reorder_columns_recomputes_relationships(self):
        """Test swapping junction columns flips the many-to-many direction."""
        session = SchemaSession(
            "CREATE TABLE books (id INT PRIMARY KEY);"
            "CREATE TABLE tags (id INT PRIMARY KEY);"
            "CREATE TABLE book_tags (book_id INT, tag_id INT, "
            "FOREIGN KEY (book_id) REFERENCES books(id), FOREIGN KEY (tag_id) REFERENCES tags(id));"
        )
        assert session.parse().success
        assert session.schema.relationships[0].from_table == "books"

        session.reorder_columns("book_tags", 1, 0)

        rel = session.schema.relationships[0]
        assert rel.type == RelationshipType.MANY_TO_MANY
        assert (rel.from_table, rel.to_table) == ("tags", "books")
        assert rel.junction_table == "book_tags"

    def test_to_sql_uses_session_dialect(self):
        session = SchemaSession(
            "CREATE TABLE t (id INT PRIMARY KEY AUTO_INCREMENT);",
            dialect=SQLDialect.MYSQL,
        )
        session.parse()
        session.dialect = SQLDialect.SQLITE

        assert "AUTOINCREMENT" in session.to_sql()

    def test_save_and_load_json(self, session, tmp_path):
        path = tmp_path / "schema.json"
        session.save(path)

        data = json.loads(path.read_text())
        assert data["tables"][0]["name"] == "authors"

        other = SchemaSession()
        loaded = other.load(path)
        assert loaded == session.schema

    def test_save_and_load_yaml(self, session, tmp_path):
        path = tmp_path / "out" / "schema.yaml"
        session.save(path)

        data = yaml.safe_load(path.read_text())
        assert data["relationships"][0]["fromTable"] == "books"
        assert load_schema(path) == session.schema


class TestLoadSchema:
    """Tests for load_schema error handling."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(SchemaVizError, match="not found"):
            load_schema(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(SchemaVizError, match="Invalid schema file"):
            load_schema(path)

    def test_missing_keys(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"tables": [{"columns": []}]}))
        with pytest.raises(SchemaVizError, match="Invalid schema file"):
            load_schema(path)
