"""
Weighted multi-feature similarity between a candidate and a target property.

The composite score is a weighted sum of six sub-scores, each in [0, 1]:
- price:       1 - min(|Δprice| / target.price, 1)
- bedrooms:    1 - min(|Δbedrooms| / 3, 1)
- bathrooms:   1 - min(|Δbathrooms| / 2, 1)
- living_area: 1 - min(|Δarea| / target.living_area, 1)
- grade:       1 - min(|Δgrade| / 5, 1)
- location:    1 - min(sqrt(Δlat² + Δlng²) / 2, 1)

Location distance is planar, in raw degrees, not great-circle distance.
This is adequate for a region a few degrees across; changing it changes
ranking output.

A non-positive target price or living area makes that sub-score 0
rather than dividing by zero.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from ..data.models import PropertyRecord
from .models import SimilarityScales, SimilarityWeights, TargetFeatureVector

DEFAULT_WEIGHTS = SimilarityWeights()
DEFAULT_SCALES = SimilarityScales()

SUB_SCORE_NAMES = ("price", "bedrooms", "bathrooms", "living_area", "grade", "location")


def _closeness(diff: np.ndarray, scale: float) -> np.ndarray:
    """1 - min(diff / scale, 1), with non-positive or non-finite scale giving 0."""
    if not (np.isfinite(scale) and scale > 0):
        return np.zeros_like(diff)
    return 1.0 - np.minimum(diff / scale, 1.0)


def _sub_score_arrays(
    candidates: Sequence[PropertyRecord],
    target: TargetFeatureVector,
    scales: SimilarityScales,
) -> dict[str, np.ndarray]:
    price = np.array([c.price for c in candidates], dtype=np.float64)
    bedrooms = np.array([c.bedrooms for c in candidates], dtype=np.float64)
    bathrooms = np.array([c.bathrooms for c in candidates], dtype=np.float64)
    area = np.array([c.living_area for c in candidates], dtype=np.float64)
    grade = np.array([c.grade for c in candidates], dtype=np.float64)
    lat = np.array([c.latitude for c in candidates], dtype=np.float64)
    lng = np.array([c.longitude for c in candidates], dtype=np.float64)

    distance = np.sqrt((lat - target.latitude) ** 2 + (lng - target.longitude) ** 2)

    subs = {
        "price": _closeness(np.abs(price - target.price), target.price),
        "bedrooms": _closeness(np.abs(bedrooms - target.bedrooms), scales.bedrooms),
        "bathrooms": _closeness(np.abs(bathrooms - target.bathrooms), scales.bathrooms),
        "living_area": _closeness(np.abs(area - target.living_area), target.living_area),
        "grade": _closeness(np.abs(grade - target.grade), scales.grade),
        "location": _closeness(distance, scales.location_degrees),
    }

    # NaN inputs degrade to a zero sub-score
    return {k: np.nan_to_num(v, nan=0.0) for k, v in subs.items()}


def score_batch(
    candidates: Sequence[PropertyRecord],
    target: TargetFeatureVector,
    weights: SimilarityWeights = DEFAULT_WEIGHTS,
    scales: SimilarityScales = DEFAULT_SCALES,
) -> np.ndarray:
    """
    Score many candidates against one target.

    Args:
        candidates: Records to score
        target: Query property
        weights: Sub-score weights (sum to 1.0)
        scales: Normalisation scales for absolute differences

    Returns:
        1D float64 array of scores in [0, 1], aligned with `candidates`
    """
    if len(candidates) == 0:
        return np.zeros(0, dtype=np.float64)

    subs = _sub_score_arrays(candidates, target, scales)
    weight_map = weights.as_dict()

    total = np.zeros(len(candidates), dtype=np.float64)
    for name in SUB_SCORE_NAMES:
        total += subs[name] * weight_map[name]

    return np.clip(total, 0.0, 1.0)


def score(
    candidate: PropertyRecord,
    target: TargetFeatureVector,
    weights: SimilarityWeights = DEFAULT_WEIGHTS,
    scales: SimilarityScales = DEFAULT_SCALES,
) -> float:
    """Similarity of a single candidate to the target, in [0, 1]."""
    return float(score_batch([candidate], target, weights, scales)[0])


def sub_scores(
    candidate: PropertyRecord,
    target: TargetFeatureVector,
    scales: SimilarityScales = DEFAULT_SCALES,
) -> dict[str, float]:
    """Unweighted sub-scores of one candidate, keyed by feature name."""
    subs = _sub_score_arrays([candidate], target, scales)
    return {name: float(subs[name][0]) for name in SUB_SCORE_NAMES}
