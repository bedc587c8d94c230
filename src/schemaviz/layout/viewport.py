"""Viewport fitting: zoom and pan so every table is visible."""

from __future__ import annotations

from typing import Optional, Sequence

from schemaviz.models import CanvasState, Table

# Rendered card size used for fitting; smaller than the layout footprint
CARD_WIDTH = 280
CARD_HEIGHT = 250


def fit_canvas_to_tables(
    tables: Sequence[Table],
    viewport_width: float,
    viewport_height: float,
    mobile: bool = False,
    show_sidebar: bool = False,
    current: Optional[CanvasState] = None,
) -> Optional[CanvasState]:
    """
    Compute the canvas state that frames all tables.

    Args:
        tables: Tables on the canvas
        viewport_width: Window width in pixels
        viewport_height: Window height in pixels
        mobile: Use the tighter mobile padding and zoom limits
        show_sidebar: Reserve room for the SQL sidebar (desktop only)
        current: Existing state whose selection/drag fields are preserved

    Returns:
        CanvasState, or None when there are no tables
    """
    if not tables:
        return None

    padding = 20 if mobile else 50

    min_x = min(t.position.x for t in tables)
    min_y = min(t.position.y for t in tables)
    max_x = max(t.position.x + CARD_WIDTH for t in tables)
    max_y = max(t.position.y + CARD_HEIGHT for t in tables)

    header_height = 60 if mobile else 100
    sidebar_width = 400 if show_sidebar and not mobile else 0

    available_width = viewport_width - sidebar_width
    available_height = viewport_height - header_height

    content_width = max_x - min_x + 2 * padding
    content_height = max_y - min_y + 2 * padding

    min_zoom = 0.3 if mobile else 0.1
    max_zoom = 2 if mobile else 1

    scale = min(available_width / content_width, available_height / content_height, max_zoom)
    scale = max(scale, min_zoom)

    pan_x = (available_width - content_width * scale) / 2 - min_x * scale + padding * scale
    pan_y = (available_height - content_height * scale) / 2 - min_y * scale + padding * scale

    return CanvasState(
        zoom=scale,
        pan_x=pan_x,
        pan_y=pan_y,
        selected_table=current.selected_table if current else None,
        dragged_table=current.dragged_table if current else None,
    )
