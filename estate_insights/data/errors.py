"""Custom exceptions for data module."""


class DataError(Exception):
    """Base exception for data-related errors."""

    pass


# --- Schema errors ---


class SchemaError(DataError):
    """
    Raised when the dataset schema is invalid or cannot be loaded.

    This can happen when:
    - Schema file not found
    - Invalid YAML syntax
    - Missing required keys in schema
    - Field references a parser that is not registered
    """

    pass


class RowDecodeError(DataError):
    """
    Raised in strict mode when a column value cannot be parsed.

    In the default (lenient) mode the field default is used instead
    and the field is counted in Dataset.defaulted_fields.
    """

    def __init__(self, message: str, field: str | None = None, line: int | None = None):
        super().__init__(message)
        self.field = field
        self.line = line


# --- Dataset source errors ---


class DatasetUnavailableError(DataError):
    """Base exception for dataset sources that cannot be read."""

    pass


class DatasetNotFoundError(DatasetUnavailableError):
    """
    Raised when the dataset source does not exist.

    This can happen when:
    - Local file path does not exist
    - Remote URL returns 404
    """

    pass


class DatasetRequestError(DatasetUnavailableError):
    """
    Raised when fetching a remote dataset fails.

    Connection errors, HTTP error status, undecodable body, etc.
    These are retried by DatasetLoader.
    """

    pass


class InvalidDatasetSourceError(DatasetUnavailableError):
    """
    Raised when the dataset source cannot be used at all.

    This can happen when:
    - URL is malformed (bad host, port or characters)

    Not retried by DatasetLoader.
    """

    pass
