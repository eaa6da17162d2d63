"""Custom exceptions for spatial module."""


class SpatialError(Exception):
    """Base exception for spatial aggregation errors."""

    pass


class GridConfigError(SpatialError):
    """
    Raised when grid parameters are invalid.

    This can happen when:
    - Cell size is zero or negative
    - Cell size is NaN or infinite
    """

    pass
