"""Data models for the ranking pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ..data.loader import DEFAULT_MAX_ROWS
from ..data.models import RegionBounds
from ..similarity.ranker import DEFAULT_TOP_K
from ..spatial.aggregator import DEFAULT_CELL_SIZE

if TYPE_CHECKING:
    from ..investment.models import InvestmentComparison
    from ..similarity.models import ScoredCandidate
    from ..spatial.models import GridCell


@dataclass(frozen=True)
class PipelineConfig:
    """Configuration for ValuationPipeline.create()."""

    dataset_source: str
    max_rows: int = DEFAULT_MAX_ROWS
    region: RegionBounds = field(default_factory=RegionBounds)
    top_k: int = DEFAULT_TOP_K
    cell_size: float = DEFAULT_CELL_SIZE
    timeout: float = 30.0
    max_retries: int = 3
    retry_delay_seconds: float = 2.0
    strict: bool = False


@dataclass
class PipelineResult:
    """Result of one ranking request."""

    ranked: list[ScoredCandidate]
    """Top-k similar properties, best first."""

    cells: list[GridCell]
    """Heatmap cells over the filtered dataset, densest first."""

    comparisons: list[InvestmentComparison]
    """Top-k re-ranked by investment score. Empty if no financing given."""

    dataset_size: int
    """Number of records the ranking ran over."""

    error: str | None = None
    """Dataset load error, if the dataset could not be read."""

    @property
    def success(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "dataset_size": self.dataset_size,
            "error": self.error,
            "ranked": [c.to_dict() for c in self.ranked],
            "cells": [c.to_dict() for c in self.cells],
            "comparisons": [c.to_dict() for c in self.comparisons],
        }
