"""
Generator module for turning a schema graph back into SQL text.

Used to keep the SQL editor in sync after visual edits.
"""

from schemaviz.generator.sql_generator import SQLGenerator, generate_sql_from_schema

__all__ = ["SQLGenerator", "generate_sql_from_schema"]
