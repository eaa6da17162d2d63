"""Re-rank similar properties by investment score."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ..similarity.models import ScoredCandidate
from .calculator import compute_metrics, estimate_monthly_rent
from .errors import InvalidFinancingError
from .models import FinancingParams, InvestmentComparison

logger = logging.getLogger(__name__)


def rank_by_investment(
    candidates: Sequence[ScoredCandidate],
    params: FinancingParams,
    estimate_rent: bool = False,
) -> list[InvestmentComparison]:
    """
    Compute investment metrics for each candidate and order best first.

    The sort is stable: equal investment scores keep similarity order.

    Args:
        candidates: Ranked similar properties
        params: Financing parameters shared by all candidates
        estimate_rent: Use a per-property rent estimate instead of
            params.monthly_rent

    Returns:
        InvestmentComparison list sorted by investment score descending.
        Each candidate carries its investment_score.

    Raises:
        InvalidFinancingError: If params are invalid
    """
    params.validate()

    comparisons: list[InvestmentComparison] = []
    for candidate in candidates:
        record = candidate.record
        rent = estimate_monthly_rent(record) if estimate_rent else params.monthly_rent
        try:
            metrics = compute_metrics(
                record.price,
                params,
                grade=record.grade,
                living_area=record.living_area,
                monthly_rent=rent,
            )
        except InvalidFinancingError as e:
            logger.warning(f"Skipping {record.id} in investment ranking: {e}")
            continue

        comparisons.append(
            InvestmentComparison(
                candidate=candidate.with_investment_score(metrics.investment_score),
                metrics=metrics,
                monthly_rent=rent,
            )
        )

    comparisons.sort(key=lambda c: c.investment_score, reverse=True)

    if comparisons:
        best = comparisons[0]
        logger.info(
            f"Best investment {best.candidate.id} "
            f"(score={best.investment_score:.2f}) of {len(comparisons)} candidates"
        )

    return comparisons
