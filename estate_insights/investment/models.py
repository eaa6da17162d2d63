"""Data models for investment calculations."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .errors import InvalidFinancingError

if TYPE_CHECKING:
    from ..similarity.models import ScoredCandidate

# Typical choices offered by the financing form
RATE_OPTIONS: tuple[float, ...] = (6.5, 7.0, 7.5, 8.0, 8.5)
TENURE_OPTIONS: tuple[int, ...] = (15, 20, 25, 30)
DOWN_PAYMENT_OPTIONS: tuple[float, ...] = (10, 15, 20, 25, 30)
APPRECIATION_OPTIONS: tuple[float, ...] = (5, 6, 7, 8, 9, 10)


@dataclass(frozen=True)
class FinancingParams:
    """Loan and market assumptions shared by every compared property."""

    annual_rate_percent: float = 7.5
    tenure_years: int = 20
    down_payment_percent: float = 20.0
    appreciation_percent: float = 8.0
    """Expected yearly appreciation of property value."""

    monthly_rent: float = 15000.0
    """Expected monthly rental income."""

    def validate(self) -> None:
        """
        Check parameters are usable.

        Raises:
            InvalidFinancingError: If any parameter is out of range
        """
        values = {
            "annual_rate_percent": self.annual_rate_percent,
            "tenure_years": self.tenure_years,
            "down_payment_percent": self.down_payment_percent,
            "appreciation_percent": self.appreciation_percent,
            "monthly_rent": self.monthly_rent,
        }
        non_finite = [k for k, v in values.items() if not math.isfinite(v)]
        if non_finite:
            raise InvalidFinancingError(f"Non-finite financing parameters: {non_finite}")

        if self.annual_rate_percent < 0:
            raise InvalidFinancingError(
                f"Interest rate cannot be negative: {self.annual_rate_percent}"
            )
        if self.tenure_years <= 0:
            raise InvalidFinancingError(
                f"Tenure must be a positive number of years: {self.tenure_years}"
            )
        if not 0 < self.down_payment_percent <= 100:
            raise InvalidFinancingError(
                f"Down payment percent must be in (0, 100]: {self.down_payment_percent}"
            )
        if self.monthly_rent < 0:
            raise InvalidFinancingError(
                f"Monthly rent cannot be negative: {self.monthly_rent}"
            )

    @property
    def months(self) -> int:
        return int(self.tenure_years * 12)


@dataclass(frozen=True)
class InvestmentMetrics:
    """Financial figures for one property under one set of financing params."""

    down_payment: float
    loan_amount: float
    monthly_payment: float
    total_interest: float
    roi_10_year: float
    """Appreciation gain over 10 years as a percentage of the down payment."""

    rental_yield: float
    """Annual rent as a percentage of price."""

    investment_score: float
    """Relative 0-10 ranking signal, only meaningful against other properties."""

    payment_stressed: bool = False
    """True if the monthly payment exceeds 80% of the monthly rent."""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "down_payment": round(self.down_payment, 2),
            "loan_amount": round(self.loan_amount, 2),
            "monthly_payment": round(self.monthly_payment, 2),
            "total_interest": round(self.total_interest, 2),
            "roi_10_year": round(self.roi_10_year, 4),
            "rental_yield": round(self.rental_yield, 4),
            "investment_score": round(self.investment_score, 4),
            "payment_stressed": self.payment_stressed,
        }


@dataclass(frozen=True)
class InvestmentComparison:
    """A ranked candidate with its investment metrics."""

    candidate: ScoredCandidate
    metrics: InvestmentMetrics
    monthly_rent: float

    @property
    def investment_score(self) -> float:
        return self.metrics.investment_score

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            **self.candidate.to_dict(),
            "monthly_rent": self.monthly_rent,
            "metrics": self.metrics.to_dict(),
        }
