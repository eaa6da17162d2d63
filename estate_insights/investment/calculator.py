"""
Loan amortization, return and yield calculations for property investment.

Formulas:
- Monthly payment: L * r * (1+r)^n / ((1+r)^n - 1), with r the monthly
  rate and n the number of months. A zero rate reduces to L / n.
- Total interest: payment * n - L
- 10-year ROI: (price * (1 + a)^10 - price) / down_payment * 100
- Rental yield: monthly_rent * 12 / price * 100
- Investment score (0-10, relative):
      min(roi / 10, 10) * 0.4
    + min(rental_yield * 2, 10) * 0.3
    + min(grade, 10) * 0.15
    + min(living_area / 1000, 10) * 0.15
  multiplied by 0.8 when the monthly payment exceeds 80% of the rent.

Inputs that make a figure undefined (zero down payment, non-positive
price, negative rate) raise InvalidFinancingError. Any figure that still
ends up non-finite (e.g. overflow on extreme inputs) is reported as 0.
"""

from __future__ import annotations

import math

from ..data.models import PropertyRecord
from .errors import InvalidFinancingError
from .models import FinancingParams, InvestmentMetrics

ROI_HORIZON_YEARS = 10
PAYMENT_STRESS_RATIO = 0.8
STRESS_PENALTY = 0.8

# Rent estimate: share of price per month, scaled by size and grade
BASE_RENT_RATE = 0.004
MAX_AREA_MULTIPLIER = 3.0
MIN_GRADE_MULTIPLIER = 0.8
REFERENCE_GRADE = 7.0
MIN_ESTIMATED_RENT = 1000.0


def _finite_or_zero(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def _round_half_up(value: float) -> float:
    return math.floor(value + 0.5)


def amortized_payment(loan_amount: float, annual_rate_percent: float, tenure_years: int) -> float:
    """
    Constant monthly payment that repays the loan over the tenure.

    Args:
        loan_amount: Principal
        annual_rate_percent: Nominal annual interest rate, e.g. 7.5
        tenure_years: Loan length in years

    Returns:
        Monthly payment

    Raises:
        InvalidFinancingError: If the loan is negative, the rate is negative
            or the tenure is not positive
    """
    if loan_amount < 0:
        raise InvalidFinancingError(f"Loan amount cannot be negative: {loan_amount}")
    if annual_rate_percent < 0:
        raise InvalidFinancingError(f"Interest rate cannot be negative: {annual_rate_percent}")
    if tenure_years <= 0:
        raise InvalidFinancingError(
            f"Tenure must be a positive number of years: {tenure_years}"
        )

    months = tenure_years * 12
    monthly_rate = annual_rate_percent / 12 / 100

    if monthly_rate == 0:
        return loan_amount / months

    try:
        growth = (1 + monthly_rate) ** months
    except OverflowError:
        # growth / (growth - 1) tends to 1
        return loan_amount * monthly_rate
    return loan_amount * monthly_rate * growth / (growth - 1)


def ten_year_roi(price: float, down_payment: float, appreciation_percent: float) -> float:
    """
    Appreciation gain over the ROI horizon as a percentage of the down payment.

    Raises:
        InvalidFinancingError: If the down payment is not positive
    """
    if down_payment <= 0:
        raise InvalidFinancingError(
            f"ROI is undefined without a positive down payment (got {down_payment})"
        )
    try:
        future_value = price * (1 + appreciation_percent / 100) ** ROI_HORIZON_YEARS
    except OverflowError:
        return math.inf
    return (future_value - price) / down_payment * 100


def rental_yield(monthly_rent: float, price: float) -> float:
    """
    Annual rent as a percentage of price.

    Raises:
        InvalidFinancingError: If price is not positive
    """
    if price <= 0:
        raise InvalidFinancingError(f"Price must be positive: {price}")
    return monthly_rent * 12 / price * 100


def investment_score(
    roi_10_year: float,
    yield_percent: float,
    grade: float,
    living_area: float,
    payment_stressed: bool,
) -> float:
    """Weighted 0-10 ranking signal. See module docstring."""
    result = (
        min(roi_10_year / 10, 10) * 0.4
        + min(yield_percent * 2, 10) * 0.3
        + min(grade, 10) * 0.15
        + min(living_area / 1000, 10) * 0.15
    )
    if payment_stressed:
        result *= STRESS_PENALTY
    return result


def compute_metrics(
    price: float,
    params: FinancingParams,
    grade: float = 0,
    living_area: float = 0,
    monthly_rent: float | None = None,
) -> InvestmentMetrics:
    """
    Compute all investment figures for one property.

    Args:
        price: Purchase price
        params: Financing parameters
        grade: Property grade, used in the investment score
        living_area: Living area, used in the investment score
        monthly_rent: Rent override. If None, uses params.monthly_rent.

    Returns:
        InvestmentMetrics

    Raises:
        InvalidFinancingError: If price or params make a figure undefined

    Example:
        >>> m = compute_metrics(800_000, FinancingParams(annual_rate_percent=7.5,
        ...     tenure_years=20, down_payment_percent=20))
        >>> round(m.loan_amount)
        640000
    """
    params.validate()
    if not (math.isfinite(price) and price > 0):
        raise InvalidFinancingError(f"Price must be a positive finite number: {price}")

    rent = params.monthly_rent if monthly_rent is None else monthly_rent
    if not (math.isfinite(rent) and rent >= 0):
        raise InvalidFinancingError(f"Monthly rent must be a non-negative number: {rent}")

    down_payment = price * params.down_payment_percent / 100
    loan_amount = price - down_payment

    payment = amortized_payment(loan_amount, params.annual_rate_percent, params.tenure_years)
    total_interest = payment * params.months - loan_amount
    roi = ten_year_roi(price, down_payment, params.appreciation_percent)
    yield_percent = rental_yield(rent, price)

    payment = _finite_or_zero(payment)
    total_interest = _finite_or_zero(total_interest)
    roi = _finite_or_zero(roi)
    yield_percent = _finite_or_zero(yield_percent)

    stressed = payment > PAYMENT_STRESS_RATIO * rent
    score = _finite_or_zero(
        investment_score(roi, yield_percent, grade, living_area, stressed)
    )

    return InvestmentMetrics(
        down_payment=down_payment,
        loan_amount=loan_amount,
        monthly_payment=payment,
        total_interest=total_interest,
        roi_10_year=roi,
        rental_yield=yield_percent,
        investment_score=score,
        payment_stressed=stressed,
    )


def estimate_monthly_rent(record: PropertyRecord) -> float:
    """
    Estimate monthly rent from price, size and grade.

    0.4% of price per month, scaled by living area (per 1000 units, capped
    at 3x) and grade (relative to grade 7, floored at 0.8x), rounded to
    the nearest 100 and never below 1000.
    """
    area_multiplier = min(record.living_area / 1000, MAX_AREA_MULTIPLIER)
    grade_multiplier = max(record.grade / REFERENCE_GRADE, MIN_GRADE_MULTIPLIER)

    raw = record.price * BASE_RENT_RATE * area_multiplier * grade_multiplier
    estimate = _round_half_up(raw / 100) * 100

    return max(float(estimate), MIN_ESTIMATED_RENT)


def project_values(
    price: float, appreciation_percent: float, years: int = ROI_HORIZON_YEARS
) -> list[float]:
    """
    Projected property value at the start of each year.

    Returns:
        years + 1 values; index 0 is the current price
    """
    if years < 0:
        raise ValueError(f"years must be non-negative, got {years}")
    rate = 1 + appreciation_percent / 100
    return [price * rate**year for year in range(years + 1)]
