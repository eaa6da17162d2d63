"""Spatial module for grid aggregation of property points."""

from .aggregator import (
    DEFAULT_CELL_SIZE,
    MAX_CELL_INDEX,
    OPACITY_STEP,
    TIER_STYLES,
    TIER_THRESHOLDS,
    aggregate,
    cell_opacity,
    classify_price,
)
from .errors import GridConfigError, SpatialError
from .models import GridCell, PriceTier, TierStyle

__all__ = [
    # Errors
    "GridConfigError",
    "SpatialError",
    # Models
    "GridCell",
    "PriceTier",
    "TierStyle",
    # Aggregation
    "DEFAULT_CELL_SIZE",
    "MAX_CELL_INDEX",
    "OPACITY_STEP",
    "TIER_STYLES",
    "TIER_THRESHOLDS",
    "aggregate",
    "cell_opacity",
    "classify_price",
]
