"""
Statement splitting and classification.

Cleans raw SQL text and cuts it into individual statements on unquoted
semicolons, then decides which statements are CREATE TABLE statements.
"""

from __future__ import annotations

import re
import logging
from typing import List

logger = logging.getLogger(__name__)

LINE_COMMENT_PATTERN = re.compile(r'--.*$', re.MULTILINE)
BLOCK_COMMENT_PATTERN = re.compile(r'/\*.*?\*/', re.DOTALL)
WHITESPACE_PATTERN = re.compile(r'\s+')

CREATE_TABLE_PATTERN = re.compile(
    r'^\s*create\s+(temporary\s+)?table\s+(if\s+not\s+exists\s+)?',
    re.IGNORECASE
)

QUOTE_CHARS = ('"', "'")


def clean_sql(sql: str) -> str:
    """Remove comments and collapse whitespace."""
    sql = LINE_COMMENT_PATTERN.sub('', sql)
    sql = BLOCK_COMMENT_PATTERN.sub('', sql)
    sql = WHITESPACE_PATTERN.sub(' ', sql)
    return sql.strip()


def split_statements(sql: str) -> List[str]:
    """
    Split SQL text on semicolons that are not inside quoted literals.

    A quote character preceded by a backslash does not open or close a
    literal. An unterminated literal swallows the rest of the input.

    Args:
        sql: Cleaned SQL text

    Returns:
        Non-empty, trimmed statements in source order
    """
    statements: List[str] = []
    current: List[str] = []
    quote_char = ''
    prev_char = ''

    for char in sql:
        if char in QUOTE_CHARS and prev_char != '\\':
            if not quote_char:
                quote_char = char
            elif char == quote_char:
                quote_char = ''

        if char == ';' and not quote_char:
            statement = ''.join(current).strip()
            if statement:
                statements.append(statement)
            current = []
        else:
            current.append(char)
        prev_char = char

    statement = ''.join(current).strip()
    if statement:
        statements.append(statement)

    return statements


def is_create_table_statement(statement: str) -> bool:
    """Return True for CREATE [TEMPORARY] TABLE [IF NOT EXISTS] statements."""
    return CREATE_TABLE_PATTERN.match(statement) is not None
