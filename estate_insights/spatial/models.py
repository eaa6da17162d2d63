"""Data models for spatial grid aggregation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

LatLng = tuple[float, float]


class PriceTier(str, Enum):
    """Price classification of a grid cell by its average price."""

    AFFORDABLE = "affordable"
    MID_RANGE = "mid-range"
    EXPENSIVE = "expensive"
    LUXURY = "luxury"


@dataclass(frozen=True)
class TierStyle:
    """Rendering style of a price tier."""

    color: str
    base_opacity: float
    cap_opacity: float


@dataclass(frozen=True)
class GridCell:
    """
    Aggregated statistics for one fixed-size lat/lng cell.

    A new set of cells is built on every aggregation pass; cells are
    never updated in place.
    """

    cell_id: str
    bounds: tuple[LatLng, LatLng]
    """((south, west), (north, east)) corners."""

    property_count: int
    average_price: float
    min_price: float
    max_price: float
    color_class: PriceTier
    color: str
    opacity: float

    @property
    def south_west(self) -> LatLng:
        return self.bounds[0]

    @property
    def north_east(self) -> LatLng:
        return self.bounds[1]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "cell_id": self.cell_id,
            "bounds": [list(self.bounds[0]), list(self.bounds[1])],
            "property_count": self.property_count,
            "average_price": round(self.average_price, 2),
            "min_price": self.min_price,
            "max_price": self.max_price,
            "color_class": self.color_class.value,
            "color": self.color,
            "opacity": round(self.opacity, 4),
        }
