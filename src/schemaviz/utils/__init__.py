"""Utility helpers for schemaviz."""

from schemaviz.utils.column_helpers import (
    CompatibleKey,
    extract_type_and_length,
    get_column_badges,
    get_compatible_primary_keys,
)

__all__ = [
    "CompatibleKey",
    "extract_type_and_length",
    "get_column_badges",
    "get_compatible_primary_keys",
]
