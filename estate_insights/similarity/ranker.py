"""Top-K ranking of candidates by similarity."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

import numpy as np

from ..data.models import PropertyRecord
from .models import (
    ScoredCandidate,
    SimilarityScales,
    SimilarityWeights,
    TargetFeatureVector,
)
from .scorer import DEFAULT_SCALES, DEFAULT_WEIGHTS, score_batch

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 10


def rank(
    candidates: Sequence[PropertyRecord],
    target: TargetFeatureVector,
    k: int = DEFAULT_TOP_K,
    weights: SimilarityWeights | None = None,
    scales: SimilarityScales | None = None,
    exclude_ids: Iterable[str] = (),
) -> list[ScoredCandidate]:
    """
    Rank candidates by descending similarity and keep the top k.

    The sort is stable: candidates with equal scores keep their dataset
    order, so repeated calls on the same input give the same output.

    Args:
        candidates: Records to rank, in dataset order
        target: Query property
        k: Maximum number of results
        weights: Sub-score weights. If None, uses defaults.
        scales: Normalisation scales. If None, uses defaults.
        exclude_ids: Record ids left out before ranking

    Returns:
        Up to k ScoredCandidate, best first

    Raises:
        ValueError: If k is negative
    """
    if k < 0:
        raise ValueError(f"k must be non-negative, got {k}")

    excluded = set(exclude_ids)
    pool = [c for c in candidates if c.id not in excluded] if excluded else list(candidates)

    if not pool or k == 0:
        return []

    scores = score_batch(
        pool,
        target,
        weights or DEFAULT_WEIGHTS,
        scales or DEFAULT_SCALES,
    )

    # Negate for descending order; stable sort keeps ties in dataset order
    order = np.argsort(-scores, kind="stable")[:k]

    ranked = [ScoredCandidate(record=pool[i], similarity=float(scores[i])) for i in order]

    logger.debug(
        f"Ranked {len(pool)} candidates, kept {len(ranked)} "
        f"(best={ranked[0].similarity:.4f})"
    )

    return ranked
