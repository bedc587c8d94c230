"""Exception types raised by schemaviz."""

from __future__ import annotations

from typing import Optional


class SchemaVizError(Exception):
    """Base class for all schemaviz errors."""


class SQLSyntaxError(SchemaVizError):
    """Raised when a statement cannot be turned into a CREATE TABLE tree."""

    def __init__(self, message: str, statement: Optional[str] = None) -> None:
        self.statement = statement
        super().__init__(message)


class ConfigError(SchemaVizError):
    """Raised for invalid configuration files or values."""
