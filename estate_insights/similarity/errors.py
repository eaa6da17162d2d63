"""Custom exceptions for similarity module."""


class SimilarityError(Exception):
    """Base exception for similarity-related errors."""

    pass


class SimilarityConfigError(SimilarityError):
    """
    Raised when similarity weights or scales are invalid.

    This can happen when:
    - A weight is negative
    - Weights do not sum to 1.0
    - A normalisation scale is not positive
    """

    pass
