"""
Layout Engine - places newly discovered tables on the canvas.

Placement strategy, in order:
1. The first table goes to a fixed anchor point
2. Tables with foreign keys go next to the tables they reference
3. Junction-looking tables go beside the midpoint of the two tables they join
4. Everything else follows an outward spiral, then a plain grid

All searches reject slots whose padded bounding box overlaps a table that is
already placed.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

from schemaviz.config import LayoutConfig
from schemaviz.models import ForeignKeyRef, Position, Table

logger = logging.getLogger(__name__)

JUNCTION_NAME_HINTS = ("junction", "bridge", "link", "rel")

NEAR_ANGLES = (0, 45, 90, 135, 180, 225, 270, 315)
RING_ANGLE_STEP = 30


@dataclass
class Candidate:
    """A free slot found while searching around a point."""
    x: float
    y: float
    distance: float
    angle: int

    @property
    def is_axis_aligned(self) -> bool:
        return self.angle % 90 == 0


class LayoutEngine:
    """
    Computes canvas positions for tables.

    The engine is stateless; occupancy comes from the ``placed`` tables passed
    to each call, which the caller accumulates in creation order.
    """

    def __init__(self, config: Optional[LayoutConfig] = None):
        self.config = config or LayoutConfig()

    def place(
        self,
        table_name: str,
        foreign_keys: Sequence[ForeignKeyRef],
        index: int,
        placed: Sequence[Table],
    ) -> Position:
        """
        Compute the position for a new table.

        Args:
            table_name: Name of the table being placed
            foreign_keys: Tables/columns the new table references
            index: Zero-based creation index within the parse batch
            placed: Tables already placed in this batch

        Returns:
            Position of the table's top-left corner
        """
        cfg = self.config

        if not placed:
            return Position(cfg.anchor_offset, cfg.anchor_offset)

        if foreign_keys:
            referenced = {fk.table.lower() for fk in foreign_keys}
            related = [t for t in placed if t.name.lower() in referenced]

            if related:
                center_x = sum(t.position.x for t in related) / len(related)
                center_y = sum(t.position.y for t in related) / len(related)

                position = self.find_best_position_near(center_x, center_y, placed)
                if position:
                    return position

        if self._looks_like_junction(table_name, foreign_keys):
            first = _find_table(placed, foreign_keys[0].table)
            second = _find_table(placed, foreign_keys[1].table)

            if first and second:
                mid_x = (first.position.x + second.position.x) / 2
                mid_y = (first.position.y + second.position.y) / 2

                angle = math.atan2(
                    second.position.y - first.position.y,
                    second.position.x - first.position.x,
                )
                perp_angle = angle + math.pi / 2
                offset = cfg.min_spacing * 0.6

                position = self.find_best_position_near(
                    mid_x + math.cos(perp_angle) * offset,
                    mid_y + math.sin(perp_angle) * offset,
                    placed,
                )
                if position:
                    return position

        logger.debug(f"No related slot for {table_name}, using spiral placement")
        return self.find_spiral_position(index, placed)

    def find_best_position_near(
        self,
        target_x: float,
        target_y: float,
        placed: Sequence[Table],
    ) -> Optional[Position]:
        """
        Find a free slot around a point.

        Tries the eight compass directions first, then concentric rings of
        growing radius. Axis-aligned directions win over diagonals, then the
        nearest slot wins.

        Returns:
            Position, or None if every ring is occupied
        """
        spacing = self.config.min_spacing
        candidates: List[Candidate] = []
        base_radius = spacing * 0.8

        for angle in NEAR_ANGLES:
            rad = math.radians(angle)
            x = target_x + math.cos(rad) * base_radius
            y = target_y + math.sin(rad) * base_radius

            if not self.is_position_occupied(x, y, placed, spacing * 0.8):
                candidates.append(Candidate(
                    x=x,
                    y=y,
                    distance=math.hypot(x - target_x, y - target_y),
                    angle=angle,
                ))

        if not candidates:
            ring_step = spacing * 0.3
            max_radius = spacing * 2.5
            ring = 0
            while spacing + ring * ring_step <= max_radius:
                radius = spacing + ring * ring_step
                for angle in range(0, 360, RING_ANGLE_STEP):
                    rad = math.radians(angle)
                    x = target_x + math.cos(rad) * radius
                    y = target_y + math.sin(rad) * radius

                    if not self.is_position_occupied(x, y, placed, spacing * 0.7):
                        candidates.append(Candidate(x=x, y=y, distance=radius, angle=angle))
                if candidates:
                    break
                ring += 1

        if not candidates:
            return None

        # Axis-aligned first, then nearest; sort is stable so angle order breaks ties
        candidates.sort(key=lambda c: (not c.is_axis_aligned, c.distance))
        best = candidates[0]
        return Position(best.x, best.y)

    def find_spiral_position(self, index: int, placed: Sequence[Table]) -> Position:
        """Walk an outward spiral from the canvas center, then fall back to a grid."""
        cfg = self.config
        spacing = cfg.min_spacing
        center_x, center_y = cfg.spiral_center

        radius = spacing * 0.6
        angle = 0.0
        angle_step = math.pi / 6
        radius_growth = spacing / 12

        while radius < spacing * 8:
            x = math.cos(angle) * radius + center_x
            y = math.sin(angle) * radius + center_y

            if not self.is_position_occupied(x, y, placed, spacing * 0.8):
                return Position(x, y)

            angle += angle_step
            radius += radius_growth

            if angle > math.pi * 2:
                angle = 0.0
                radius += spacing * 0.4

        logger.debug(f"Spiral exhausted at index {index}, using grid placement")
        grid_cols = math.ceil(math.sqrt(len(placed) + 1))
        col = index % grid_cols
        row = index // grid_cols
        grid_spacing = spacing * 1.2

        return Position(
            col * grid_spacing + cfg.grid_offset,
            row * grid_spacing + cfg.grid_offset,
        )

    def is_position_occupied(
        self,
        x: float,
        y: float,
        placed: Sequence[Table],
        margin: float,
    ) -> bool:
        """
        Check whether a table at (x, y) would collide with a placed table.

        Both rectangles are padded by half the margin on every side.
        """
        cfg = self.config
        half = margin / 2

        new_left = x - half
        new_right = x + cfg.table_width + half
        new_top = y - half
        new_bottom = y + cfg.table_height + half

        for table in placed:
            existing_left = table.position.x - half
            existing_right = table.position.x + cfg.table_width + half
            existing_top = table.position.y - half
            existing_bottom = table.position.y + cfg.table_height + half

            if (
                new_left < existing_right
                and new_right > existing_left
                and new_top < existing_bottom
                and new_bottom > existing_top
            ):
                return True
        return False

    def _looks_like_junction(self, table_name: str, foreign_keys: Sequence[ForeignKeyRef]) -> bool:
        if len(foreign_keys) < 2:
            return False
        name_lower = table_name.lower()
        return "_" in table_name or any(hint in name_lower for hint in JUNCTION_NAME_HINTS)


def _find_table(tables: Sequence[Table], name: str) -> Optional[Table]:
    name_lower = name.lower()
    for table in tables:
        if table.name.lower() == name_lower:
            return table
    return None
