"""Data models for the property dataset."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterator
from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(frozen=True)
class PropertyRecord:
    """
    One valid row of the property dataset.

    Created by the loader and never mutated afterwards.
    """

    id: str
    price: float
    bedrooms: int = 0
    bathrooms: float = 0.0
    living_area: float = 0.0
    lot_area: float = 0.0
    grade: int = 0
    condition: int = 0
    built_year: int = 0
    latitude: float = 0.0
    longitude: float = 0.0
    waterfront: bool = False
    views: int = 0
    schools_nearby: int = 0
    distance_from_airport: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)


@dataclass(frozen=True)
class RegionBounds:
    """
    Geographic bounding box of the operating region.

    Bounds are exclusive: a point lying exactly on an edge is outside.
    """

    min_latitude: float = 50.0
    max_latitude: float = 55.0
    min_longitude: float = -120.0
    max_longitude: float = -110.0

    def __post_init__(self) -> None:
        if self.min_latitude >= self.max_latitude:
            raise ValueError(
                f"min_latitude ({self.min_latitude}) must be below "
                f"max_latitude ({self.max_latitude})"
            )
        if self.min_longitude >= self.max_longitude:
            raise ValueError(
                f"min_longitude ({self.min_longitude}) must be below "
                f"max_longitude ({self.max_longitude})"
            )

    def contains(self, latitude: float, longitude: float) -> bool:
        """True if the point lies strictly inside the region."""
        return (
            self.min_latitude < latitude < self.max_latitude
            and self.min_longitude < longitude < self.max_longitude
        )


@dataclass(frozen=True)
class Dataset:
    """
    Parsed dataset plus data-quality counters.

    Behaves like a read-only sequence of PropertyRecord.
    """

    records: tuple[PropertyRecord, ...] = ()

    defaulted_fields: Counter[str] = field(default_factory=Counter)
    """Field name -> number of values replaced by the field default."""

    skipped_rows: int = 0
    """Lines dropped for having too few columns."""

    rejected_rows: int = 0
    """Rows dropped for invalid price, missing id or out-of-region coordinates."""

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[PropertyRecord]:
        return iter(self.records)

    def __getitem__(self, index: int) -> PropertyRecord:
        return self.records[index]

    def __repr__(self) -> str:
        return f"Dataset({len(self.records)} properties)"

    @property
    def total_defaulted(self) -> int:
        """Total number of defaulted field values across all rows."""
        return sum(self.defaulted_fields.values())
