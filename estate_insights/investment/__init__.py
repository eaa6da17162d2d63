"""Investment module for loan, return and yield comparison."""

from .calculator import (
    amortized_payment,
    compute_metrics,
    estimate_monthly_rent,
    investment_score,
    project_values,
    rental_yield,
    ten_year_roi,
)
from .errors import InvalidFinancingError, InvestmentError
from .models import (
    APPRECIATION_OPTIONS,
    DOWN_PAYMENT_OPTIONS,
    RATE_OPTIONS,
    TENURE_OPTIONS,
    FinancingParams,
    InvestmentComparison,
    InvestmentMetrics,
)
from .ranking import rank_by_investment

__all__ = [
    # Errors
    "InvalidFinancingError",
    "InvestmentError",
    # Models
    "FinancingParams",
    "InvestmentComparison",
    "InvestmentMetrics",
    "APPRECIATION_OPTIONS",
    "DOWN_PAYMENT_OPTIONS",
    "RATE_OPTIONS",
    "TENURE_OPTIONS",
    # Calculations
    "amortized_payment",
    "compute_metrics",
    "estimate_monthly_rent",
    "investment_score",
    "project_values",
    "rental_yield",
    "ten_year_roi",
    # Ranking
    "rank_by_investment",
]
