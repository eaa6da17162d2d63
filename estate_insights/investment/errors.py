"""Custom exceptions for investment module."""


class InvestmentError(Exception):
    """Base exception for investment calculation errors."""

    pass


class InvalidFinancingError(InvestmentError):
    """
    Raised when financing inputs make a metric undefined.

    This can happen when:
    - Property price is zero, negative or not finite
    - Down payment is zero (10-year ROI is relative to the down payment)
    - Interest rate is negative
    - Tenure is not a positive number of years
    - Down payment percent is outside 0-100
    - Monthly rent is negative
    """

    pass
