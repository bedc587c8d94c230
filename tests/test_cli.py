"""
Tests for the command-line interface.
"""

import json

import pytest
from click.testing import CliRunner

from schemaviz.cli import cli
from schemaviz.session import load_schema


SQL = """
CREATE TABLE authors (id INT PRIMARY KEY, name VARCHAR(100) NOT NULL);
CREATE TABLE books (id INT PRIMARY KEY, author_id INT, FOREIGN KEY (author_id) REFERENCES authors(id));
"""


class TestCli:
    """Tests for schemaviz commands."""

    @pytest.fixture
    def runner(self):
        return CliRunner()

    @pytest.fixture
    def sql_file(self, tmp_path):
        path = tmp_path / "schema.sql"
        path.write_text(SQL)
        return path

    def test_parse(self, runner, sql_file):
        result = runner.invoke(cli, ["parse", str(sql_file)])

        assert result.exit_code == 0, result.output
        assert "authors" in result.output
        assert "one-to-many" in result.output

    def test_parse_writes_output(self, runner, sql_file, tmp_path):
        """Test the schema file round-trips through load_schema."""
        out = tmp_path / "schema.json"
        result = runner.invoke(cli, ["parse", str(sql_file), "--output", str(out)])

        assert result.exit_code == 0, result.output
        schema = load_schema(out)
        assert schema.table_names == ["authors", "books"]

    def test_parse_keeps_previous_positions(self, runner, sql_file, tmp_path):
        previous = tmp_path / "previous.json"
        previous.write_text(json.dumps({
            "tables": [{"name": "authors", "columns": [], "position": {"x": 999, "y": 5}}],
        }))
        out = tmp_path / "schema.json"

        result = runner.invoke(cli, [
            "parse", str(sql_file), "--previous", str(previous), "--output", str(out),
        ])

        assert result.exit_code == 0, result.output
        authors = load_schema(out).get_table("authors")
        assert (authors.position.x, authors.position.y) == (999, 5)

    def test_parse_errors_exit_nonzero(self, runner, tmp_path):
        path = tmp_path / "bad.sql"
        path.write_text("CREATE TABLE a (id INT); SELECT 1;")

        result = runner.invoke(cli, ["parse", str(path)])
        assert result.exit_code == 1
        assert "Unsupported statement type" in result.output

        allowed = runner.invoke(cli, ["parse", str(path), "--allow-errors"])
        assert allowed.exit_code == 0

    def test_generate(self, runner, sql_file, tmp_path):
        """Test rendering a saved schema in another dialect."""
        out = tmp_path / "schema.yaml"
        runner.invoke(cli, ["parse", str(sql_file), "--output", str(out)])

        result = runner.invoke(cli, ["generate", str(out), "--dialect", "SQLite"])

        assert result.exit_code == 0, result.output
        assert "CREATE TABLE authors (" in result.output
        assert "FOREIGN KEY (author_id) REFERENCES authors(id)" in result.output

    def test_generate_invalid_file(self, runner, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("[]")

        result = runner.invoke(cli, ["generate", str(path)])

        assert result.exit_code == 1
        assert "Invalid schema file" in result.output

    def test_example_uses_config_dialect(self, runner, tmp_path):
        config = tmp_path / "schemaviz.yaml"
        config.write_text("dialect: SQLite\n")

        result = runner.invoke(cli, ["--config", str(config), "example"])

        assert result.exit_code == 0, result.output
        assert "AUTOINCREMENT" in result.output

    def test_types(self, runner):
        result = runner.invoke(cli, ["types", "--dialect", "mysql"])

        assert result.exit_code == 0, result.output
        assert "VARCHAR" in result.output
        assert "required" in result.output

    def test_keywords_prefix(self, runner):
        result = runner.invoke(cli, ["keywords", "cre"])

        assert result.exit_code == 0, result.output
        lines = result.output.split()
        assert "CREATE" in lines
        assert all(line.startswith("CRE") for line in lines)

    def test_bad_config(self, runner, tmp_path):
        config = tmp_path / "schemaviz.yaml"
        config.write_text("dialect: oracle\n")

        result = runner.invoke(cli, ["--config", str(config), "types"])

        assert result.exit_code == 1
        assert "Unknown SQL dialect" in result.output
