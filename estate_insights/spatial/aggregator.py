"""
Spatial grid aggregation for heatmap zones.

Points are bucketed into fixed-size lat/lng cells whose corners are
multiples of the cell size:

    cell_lat = floor(lat / cell_size) * cell_size
    cell_lng = floor(lng / cell_size) * cell_size

Each non-empty cell reports count and average/min/max price, a price tier
from its average price and an opacity that grows with the count:

    opacity = min(base_opacity + count * 0.05, cap_opacity)

Cells are returned densest first.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from typing import TYPE_CHECKING, Union

import numpy as np

from .errors import GridConfigError
from .models import GridCell, PriceTier, TierStyle

if TYPE_CHECKING:
    from ..data.models import PropertyRecord
    from ..similarity.models import ScoredCandidate

    GridPoint = Union[PropertyRecord, ScoredCandidate]

logger = logging.getLogger(__name__)

DEFAULT_CELL_SIZE = 0.01
OPACITY_STEP = 0.05

# Largest cell index whose corner and next corner stay distinct floats
MAX_CELL_INDEX = 2**50

# Lower bound of average price for each tier, checked highest first
TIER_THRESHOLDS: tuple[tuple[float, PriceTier], ...] = (
    (1_200_000, PriceTier.LUXURY),
    (800_000, PriceTier.EXPENSIVE),
    (600_000, PriceTier.MID_RANGE),
)

TIER_STYLES: dict[PriceTier, TierStyle] = {
    PriceTier.AFFORDABLE: TierStyle(color="#22c55e", base_opacity=0.3, cap_opacity=0.7),
    PriceTier.MID_RANGE: TierStyle(color="#eab308", base_opacity=0.3, cap_opacity=0.7),
    PriceTier.EXPENSIVE: TierStyle(color="#f97316", base_opacity=0.35, cap_opacity=0.75),
    PriceTier.LUXURY: TierStyle(color="#ef4444", base_opacity=0.4, cap_opacity=0.8),
}


def classify_price(average_price: float) -> PriceTier:
    """Price tier for a cell's average price."""
    for threshold, tier in TIER_THRESHOLDS:
        if average_price >= threshold:
            return tier
    return PriceTier.AFFORDABLE


def cell_opacity(tier: PriceTier, property_count: int) -> float:
    """Opacity for a cell of the given tier and size."""
    style = TIER_STYLES[tier]
    return min(style.base_opacity + property_count * OPACITY_STEP, style.cap_opacity)


def aggregate(
    points: Iterable[GridPoint],
    cell_size: float = DEFAULT_CELL_SIZE,
) -> list[GridCell]:
    """
    Bucket points into grid cells and summarise each cell.

    Points with non-finite coordinates or price are skipped, so the sum
    of property_count over the result equals the number of usable points.

    Args:
        points: PropertyRecord or ScoredCandidate items
        cell_size: Cell edge length in degrees

    Returns:
        New list of GridCell, sorted by property_count descending.
        Cells with equal counts keep the order in which they were first seen.

    Raises:
        GridConfigError: If cell_size is not a positive finite number,
            or so small that cell indices lose float precision
    """
    if not (math.isfinite(cell_size) and cell_size > 0):
        raise GridConfigError(f"cell_size must be a positive finite number, got {cell_size}")

    usable = [
        p
        for p in points
        if math.isfinite(p.latitude) and math.isfinite(p.longitude) and math.isfinite(p.price)
    ]
    if not usable:
        return []

    lat = np.array([p.latitude for p in usable], dtype=np.float64)
    lng = np.array([p.longitude for p in usable], dtype=np.float64)
    prices = np.array([p.price for p in usable], dtype=np.float64)

    lat_cells = np.floor(lat / cell_size)
    lng_cells = np.floor(lng / cell_size)
    if max(np.abs(lat_cells).max(), np.abs(lng_cells).max()) > MAX_CELL_INDEX:
        raise GridConfigError(
            f"cell_size {cell_size} is too small for the point coordinates"
        )
    lat_idx = lat_cells.astype(np.int64)
    lng_idx = lng_cells.astype(np.int64)

    # Cell key -> member indices, in first-seen order
    members: dict[tuple[int, int], list[int]] = {}
    for i, key in enumerate(zip(lat_idx.tolist(), lng_idx.tolist())):
        members.setdefault(key, []).append(i)

    cells = [_build_cell(key, prices[idx], cell_size) for key, idx in members.items()]
    cells.sort(key=lambda c: c.property_count, reverse=True)

    logger.debug(
        f"Aggregated {len(usable)} points into {len(cells)} cells (cell_size={cell_size})"
    )

    return cells


def _build_cell(key: tuple[int, int], prices: np.ndarray, cell_size: float) -> GridCell:
    i, j = key
    cell_lat = i * cell_size
    cell_lng = j * cell_size

    count = int(prices.size)
    min_price = float(prices.min())
    max_price = float(prices.max())
    # Keep the mean inside [min, max] despite float rounding
    average = min(max(float(prices.mean()), min_price), max_price)

    tier = classify_price(average)

    return GridCell(
        cell_id=f"{i}:{j}",
        bounds=((cell_lat, cell_lng), (cell_lat + cell_size, cell_lng + cell_size)),
        property_count=count,
        average_price=average,
        min_price=min_price,
        max_price=max_price,
        color_class=tier,
        color=TIER_STYLES[tier].color,
        opacity=cell_opacity(tier, count),
    )
