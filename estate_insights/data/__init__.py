"""Data module for loading and querying the property dataset."""

from .errors import (
    DataError,
    DatasetNotFoundError,
    DatasetRequestError,
    DatasetUnavailableError,
    InvalidDatasetSourceError,
    RowDecodeError,
    SchemaError,
)
from .loader import (
    DEFAULT_MAX_ROWS,
    DatasetLoader,
    DatasetLoaderConfig,
    parse_dataset,
)
from .models import Dataset, PropertyRecord, RegionBounds
from .queries import (
    GRADE_TIERS,
    filter_properties,
    get_by_id,
    get_by_ids,
    sample_recommended,
)
from .schema import (
    ColumnSpec,
    DatasetSchema,
    column_parser,
    get_registered_column_parsers,
)

__all__ = [
    # Errors
    "DataError",
    "DatasetNotFoundError",
    "DatasetRequestError",
    "DatasetUnavailableError",
    "InvalidDatasetSourceError",
    "RowDecodeError",
    "SchemaError",
    # Models
    "Dataset",
    "PropertyRecord",
    "RegionBounds",
    # Schema
    "ColumnSpec",
    "DatasetSchema",
    "column_parser",
    "get_registered_column_parsers",
    # Loading
    "DEFAULT_MAX_ROWS",
    "DatasetLoader",
    "DatasetLoaderConfig",
    "parse_dataset",
    # Queries
    "GRADE_TIERS",
    "filter_properties",
    "get_by_id",
    "get_by_ids",
    "sample_recommended",
]
