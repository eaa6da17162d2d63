"""Lookups and filters over loaded property records."""

from __future__ import annotations

import random
from collections.abc import Iterable, Sequence

from .models import PropertyRecord, RegionBounds

# Grade tier -> inclusive (min_grade, max_grade); None means unbounded
GRADE_TIERS: dict[str, tuple[int | None, int | None]] = {
    "all": (None, None),
    "luxury": (10, None),
    "premium": (8, 9),
    "standard": (5, 7),
    "budget": (None, 4),
}


def get_by_id(records: Iterable[PropertyRecord], property_id: str) -> PropertyRecord | None:
    """Return the first record with the given id, or None."""
    for record in records:
        if record.id == property_id:
            return record
    return None


def get_by_ids(
    records: Iterable[PropertyRecord], property_ids: Iterable[str]
) -> list[PropertyRecord]:
    """Return records whose id is in `property_ids`, in dataset order."""
    wanted = set(property_ids)
    return [r for r in records if r.id in wanted]


def sample_recommended(
    records: Sequence[PropertyRecord],
    limit: int = 10,
    min_price: float = 100_000,
    max_price: float = 2_000_000,
    region: RegionBounds | None = None,
    seed: int | None = None,
) -> list[PropertyRecord]:
    """
    Random sample of in-region records within an exclusive price window.

    Args:
        records: Records to sample from
        limit: Maximum number of records returned
        min_price: Exclusive lower price bound
        max_price: Exclusive upper price bound
        region: Region filter. If None, uses RegionBounds() defaults.
        seed: Seed for a reproducible sample

    Returns:
        Up to `limit` records in random order
    """
    if limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")

    region = region or RegionBounds()
    eligible = [
        r
        for r in records
        if region.contains(r.latitude, r.longitude) and min_price < r.price < max_price
    ]
    rng = random.Random(seed)
    return rng.sample(eligible, min(limit, len(eligible)))


def filter_properties(
    records: Iterable[PropertyRecord],
    price_range: tuple[float, float] | None = None,
    grade_tier: str = "all",
) -> list[PropertyRecord]:
    """
    Filter records for the heatmap view.

    Args:
        records: Records to filter
        price_range: Inclusive (low, high) price range. None keeps all prices.
        grade_tier: One of GRADE_TIERS

    Returns:
        Matching records in input order

    Raises:
        ValueError: If grade_tier is unknown or price_range is inverted
    """
    if grade_tier not in GRADE_TIERS:
        raise ValueError(
            f"Unknown grade tier '{grade_tier}'. Valid tiers: {list(GRADE_TIERS)}"
        )
    if price_range is not None and price_range[0] > price_range[1]:
        raise ValueError(f"Invalid price range: {price_range}")

    min_grade, max_grade = GRADE_TIERS[grade_tier]
    result = []
    for record in records:
        if price_range is not None and not (
            price_range[0] <= record.price <= price_range[1]
        ):
            continue
        if min_grade is not None and record.grade < min_grade:
            continue
        if max_grade is not None and record.grade > max_grade:
            continue
        result.append(record)
    return result
