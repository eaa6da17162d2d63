"""Valuation pipeline - load, rank, aggregate, compare."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from ..data import DatasetLoader, DatasetLoaderConfig, filter_properties
from ..investment import rank_by_investment
from ..similarity import DEFAULT_TOP_K, rank
from ..spatial import DEFAULT_CELL_SIZE, aggregate
from .models import PipelineConfig, PipelineResult

if TYPE_CHECKING:
    from ..investment import FinancingParams
    from ..similarity import SimilarityWeights, TargetFeatureVector

logger = logging.getLogger(__name__)


class ValuationPipeline:
    """
    Runs one ranking request end to end.

    Pipeline steps:
    1. Load the dataset (cached after the first successful load)
    2. Rank all records by similarity to the target, keep top k
    3. Aggregate the price/grade-filtered dataset into heatmap cells
    4. Re-rank the top k by investment score (when financing is given)

    Holds no state besides the loader's cache.
    """

    def __init__(
        self,
        loader: DatasetLoader,
        weights: SimilarityWeights | None = None,
        top_k: int = DEFAULT_TOP_K,
        cell_size: float = DEFAULT_CELL_SIZE,
    ):
        """
        Initialize pipeline.

        Args:
            loader: Dataset loader
            weights: Similarity weights. If None, uses defaults.
            top_k: Default number of similar properties kept
            cell_size: Heatmap cell edge in degrees
        """
        self._loader = loader
        self._weights = weights
        self._top_k = top_k
        self._cell_size = cell_size

    @classmethod
    def create(
        cls,
        config: PipelineConfig,
        weights: SimilarityWeights | None = None,
    ) -> ValuationPipeline:
        """Create pipeline with a DatasetLoader built from config."""
        loader = DatasetLoader(
            DatasetLoaderConfig(
                source=config.dataset_source,
                max_rows=config.max_rows,
                region=config.region,
                timeout=config.timeout,
                max_retries=config.max_retries,
                retry_delay_seconds=config.retry_delay_seconds,
                strict=config.strict,
            )
        )
        return cls(
            loader=loader,
            weights=weights,
            top_k=config.top_k,
            cell_size=config.cell_size,
        )

    @property
    def loader(self) -> DatasetLoader:
        return self._loader

    async def run(
        self,
        target: TargetFeatureVector,
        k: int | None = None,
        financing: FinancingParams | None = None,
        price_range: tuple[float, float] | None = None,
        grade_tier: str = "all",
        estimate_rent: bool = False,
        exclude_ids: Iterable[str] = (),
    ) -> PipelineResult:
        """
        Run the full pipeline for one target.

        Args:
            target: Query property
            k: Number of similar properties. If None, uses the configured top_k.
            financing: Financing parameters for investment re-ranking
            price_range: Inclusive price filter for heatmap cells
            grade_tier: Grade filter for heatmap cells
            estimate_rent: Estimate rent per property instead of using
                financing.monthly_rent
            exclude_ids: Record ids left out of the similarity ranking

        Returns:
            PipelineResult. If the dataset cannot be loaded, all lists are
            empty and `error` describes the failure.

        Raises:
            InvalidFinancingError: If financing params are invalid
            ValueError: If k is negative or grade_tier is unknown
        """
        k = self._top_k if k is None else k

        dataset = await self._loader.get()
        error = self._loader.last_error
        if error is not None:
            logger.warning(f"Pipeline running on empty dataset: {error}")

        ranked = rank(
            dataset.records, target, k=k, weights=self._weights, exclude_ids=exclude_ids
        )

        heatmap_points = filter_properties(dataset, price_range, grade_tier)
        cells = aggregate(heatmap_points, cell_size=self._cell_size)

        comparisons = (
            rank_by_investment(ranked, financing, estimate_rent=estimate_rent)
            if financing is not None
            else []
        )

        logger.info(
            f"Pipeline complete: {len(ranked)} similar, {len(cells)} cells, "
            f"{len(comparisons)} comparisons from {len(dataset)} properties"
        )

        return PipelineResult(
            ranked=ranked,
            cells=cells,
            comparisons=comparisons,
            dataset_size=len(dataset),
            error=str(error) if error is not None else None,
        )
