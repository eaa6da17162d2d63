"""Similarity module for scoring and ranking comparable properties."""

from .errors import SimilarityConfigError, SimilarityError
from .models import (
    ScoredCandidate,
    SimilarityScales,
    SimilarityWeights,
    TargetFeatureVector,
)
from .ranker import DEFAULT_TOP_K, rank
from .scorer import (
    DEFAULT_SCALES,
    DEFAULT_WEIGHTS,
    SUB_SCORE_NAMES,
    score,
    score_batch,
    sub_scores,
)

__all__ = [
    # Errors
    "SimilarityConfigError",
    "SimilarityError",
    # Models
    "ScoredCandidate",
    "SimilarityScales",
    "SimilarityWeights",
    "TargetFeatureVector",
    # Scoring
    "DEFAULT_SCALES",
    "DEFAULT_WEIGHTS",
    "SUB_SCORE_NAMES",
    "score",
    "score_batch",
    "sub_scores",
    # Ranking
    "DEFAULT_TOP_K",
    "rank",
]
