"""
Configuration for schemaviz.

Layout constants and the default dialect can be overridden from a YAML file:

    dialect: PostgreSQL
    layout:
      table_width: 320
      table_height: 280
      min_spacing: 350
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml

from schemaviz.exceptions import ConfigError
from schemaviz.models import SQLDialect

logger = logging.getLogger(__name__)


@dataclass
class LayoutConfig:
    """Canvas geometry used by the layout engine."""
    table_width: float = 320
    table_height: float = 280
    min_spacing: float = 350
    anchor_offset: float = 150  # First table lands at (offset, offset)
    spiral_center: Tuple[float, float] = (200, 200)
    grid_offset: float = 150

    def __post_init__(self):
        if isinstance(self.spiral_center, list):
            self.spiral_center = tuple(self.spiral_center)
        for name in ("table_width", "table_height", "min_spacing", "anchor_offset", "grid_offset"):
            try:
                setattr(self, name, float(getattr(self, name)))
            except (TypeError, ValueError) as e:
                raise ConfigError(f"Layout value '{name}' must be a number, got {getattr(self, name)!r}") from e
        for name in ("table_width", "table_height", "min_spacing"):
            if getattr(self, name) <= 0:
                raise ConfigError(f"Layout value '{name}' must be positive, got {getattr(self, name)}")
        if len(self.spiral_center) != 2:
            raise ConfigError(f"spiral_center must be an (x, y) pair, got {self.spiral_center}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> LayoutConfig:
        """Create from dictionary, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown layout settings: {', '.join(sorted(unknown))}")
        return cls(**data)


@dataclass
class SchemaVizConfig:
    """Top-level settings."""
    dialect: SQLDialect = SQLDialect.MYSQL
    layout: LayoutConfig = field(default_factory=LayoutConfig)

    def __post_init__(self):
        if not isinstance(self.dialect, SQLDialect):
            try:
                self.dialect = SQLDialect.parse(self.dialect)
            except ValueError as e:
                raise ConfigError(str(e)) from e
        if isinstance(self.layout, dict):
            self.layout = LayoutConfig.from_dict(self.layout)


def load_config(path: Optional[Union[str, Path]] = None) -> SchemaVizConfig:
    """
    Load settings from a YAML file.

    Args:
        path: Path to the YAML file. Defaults are used when omitted or missing.

    Returns:
        SchemaVizConfig
    """
    if path is None:
        return SchemaVizConfig()

    path = Path(path)
    if not path.exists():
        logger.warning(f"Config file not found: {path}, using defaults")
        return SchemaVizConfig()

    with open(path, "r") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    config = SchemaVizConfig(
        dialect=data.get("dialect", SQLDialect.MYSQL),
        layout=data.get("layout") or {},
    )
    logger.info(f"Loaded config from {path} (dialect: {config.dialect.value})")
    return config
