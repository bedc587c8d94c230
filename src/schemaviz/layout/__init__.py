"""
Canvas layout for schema diagrams.

Places tables without overlap and computes the viewport that frames them.
"""

from schemaviz.layout.engine import LayoutEngine
from schemaviz.layout.viewport import fit_canvas_to_tables

__all__ = [
    "LayoutEngine",
    "fit_canvas_to_tables",
]
