"""Data models for similarity scoring and ranking."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Any

from ..data.models import PropertyRecord
from .errors import SimilarityConfigError

WEIGHT_SUM_TOLERANCE = 1e-9


@dataclass(frozen=True)
class SimilarityWeights:
    """Weight of each sub-score in the composite similarity. Must sum to 1.0."""

    price: float = 0.40
    bedrooms: float = 0.15
    bathrooms: float = 0.10
    living_area: float = 0.15
    grade: float = 0.10
    location: float = 0.10

    def __post_init__(self) -> None:
        values = self.as_dict()
        negative = [k for k, v in values.items() if v < 0]
        if negative:
            raise SimilarityConfigError(f"Negative similarity weights: {negative}")

        total = sum(values.values())
        if not math.isclose(total, 1.0, abs_tol=WEIGHT_SUM_TOLERANCE):
            raise SimilarityConfigError(
                f"Similarity weights must sum to 1.0, got {total:.6f}"
            )

    def as_dict(self) -> dict[str, float]:
        return {
            "price": self.price,
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "living_area": self.living_area,
            "grade": self.grade,
            "location": self.location,
        }


@dataclass(frozen=True)
class SimilarityScales:
    """
    Differences at which an absolute sub-score reaches zero.

    Price and living area are relative to the target and have no scale.
    """

    bedrooms: float = 3.0
    bathrooms: float = 2.0
    grade: float = 5.0
    location_degrees: float = 2.0
    """Planar distance in degrees of latitude/longitude."""

    def __post_init__(self) -> None:
        bad = [
            name
            for name, value in (
                ("bedrooms", self.bedrooms),
                ("bathrooms", self.bathrooms),
                ("grade", self.grade),
                ("location_degrees", self.location_degrees),
            )
            if not value > 0
        ]
        if bad:
            raise SimilarityConfigError(f"Similarity scales must be positive: {bad}")


@dataclass(frozen=True)
class TargetFeatureVector:
    """Query property that candidates are compared against."""

    price: float
    bedrooms: float
    bathrooms: float
    living_area: float
    grade: float
    latitude: float
    longitude: float
    condition: float = 0.0

    @classmethod
    def from_record(cls, record: PropertyRecord) -> TargetFeatureVector:
        """Build a target from an existing dataset record."""
        return cls(
            price=record.price,
            bedrooms=record.bedrooms,
            bathrooms=record.bathrooms,
            living_area=record.living_area,
            grade=record.grade,
            latitude=record.latitude,
            longitude=record.longitude,
            condition=record.condition,
        )


@dataclass(frozen=True)
class ScoredCandidate:
    """A dataset record with its similarity to a target."""

    record: PropertyRecord
    similarity: float
    investment_score: float | None = None

    @property
    def id(self) -> str:
        return self.record.id

    @property
    def price(self) -> float:
        return self.record.price

    @property
    def latitude(self) -> float:
        return self.record.latitude

    @property
    def longitude(self) -> float:
        return self.record.longitude

    def with_investment_score(self, score: float) -> ScoredCandidate:
        """Return a copy carrying the given investment score."""
        return replace(self, investment_score=score)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            **self.record.to_dict(),
            "similarity": round(self.similarity, 6),
            "investment_score": (
                round(self.investment_score, 6)
                if self.investment_score is not None
                else None
            ),
        }
