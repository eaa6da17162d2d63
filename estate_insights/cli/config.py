"""
CLI configuration management.

Shared options default from environment variables; a .env file in the
working directory is loaded first.
"""

from __future__ import annotations

import argparse
import logging
import os
from typing import Any

from dotenv import load_dotenv

from ..data.loader import DEFAULT_MAX_ROWS
from ..data.models import RegionBounds
from ..pipeline.models import PipelineConfig
from ..similarity.ranker import DEFAULT_TOP_K
from ..spatial.aggregator import DEFAULT_CELL_SIZE


def load_env() -> None:
    """Load variables from .env without overriding the real environment."""
    load_dotenv(override=False)


def add_args(parser: argparse.ArgumentParser) -> None:
    """
    Add shared arguments to the parser.

    Arguments can be overridden by environment variables. Environment
    values go through each option's type, so a malformed value is
    rejected like a malformed flag.
    """

    parser.add_argument(
        "--dataset.source",
        dest="dataset_source",
        type=str,
        help="Path or http(s) URL of the property CSV.",
        default=os.environ.get("ESTATE_DATASET", ""),
    )

    parser.add_argument(
        "--dataset.max_rows",
        dest="dataset_max_rows",
        type=int,
        help="Maximum number of CSV data lines parsed.",
        default=os.environ.get("ESTATE_MAX_ROWS", str(DEFAULT_MAX_ROWS)),
    )

    parser.add_argument(
        "--dataset.strict",
        dest="dataset_strict",
        action="store_true",
        help="Fail on unparseable values instead of defaulting them.",
        default=os.environ.get("ESTATE_STRICT", "false").lower() == "true",
    )

    parser.add_argument(
        "--dataset.timeout",
        dest="dataset_timeout",
        type=float,
        help="HTTP timeout in seconds for URL sources.",
        default=os.environ.get("ESTATE_TIMEOUT", "30"),
    )

    parser.add_argument(
        "--dataset.max_retries",
        dest="dataset_max_retries",
        type=int,
        help="Max attempts for URL sources.",
        default=os.environ.get("ESTATE_MAX_RETRIES", "3"),
    )

    parser.add_argument(
        "--region",
        dest="region",
        type=float,
        nargs=4,
        metavar=("MIN_LAT", "MAX_LAT", "MIN_LNG", "MAX_LNG"),
        help="Valid region bounding box (exclusive).",
        default=_region_from_env(),
    )

    parser.add_argument(
        "--top_k",
        type=int,
        help="Number of similar properties returned.",
        default=os.environ.get("ESTATE_TOP_K", str(DEFAULT_TOP_K)),
    )

    parser.add_argument(
        "--cell_size",
        type=float,
        help="Heatmap cell edge length in degrees.",
        default=os.environ.get("ESTATE_CELL_SIZE", str(DEFAULT_CELL_SIZE)),
    )

    parser.add_argument(
        "--log_level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level.",
        default=os.environ.get("LOG_LEVEL", "WARNING"),
    )


def _region_from_env() -> list[float] | list[str]:
    # Comma-separated ESTATE_REGION is converted by _region_values
    raw = os.environ.get("ESTATE_REGION")
    if raw:
        return [v.strip() for v in raw.split(",")]
    default = RegionBounds()
    return [
        default.min_latitude,
        default.max_latitude,
        default.min_longitude,
        default.max_longitude,
    ]


def check_config(config: argparse.Namespace) -> None:
    """
    Validate configuration.

    Raises:
        ValueError: If configuration is invalid.
    """
    if not config.dataset_source:
        raise ValueError("--dataset.source is required (or set ESTATE_DATASET env var)")

    if config.dataset_max_rows <= 0:
        raise ValueError(f"--dataset.max_rows must be positive: {config.dataset_max_rows}")

    if config.top_k < 0:
        raise ValueError(f"--top_k cannot be negative: {config.top_k}")

    if not config.cell_size > 0:
        raise ValueError(f"--cell_size must be positive: {config.cell_size}")

    # Inverted bounds raise ValueError
    RegionBounds(*_region_values(config))


def _region_values(config: argparse.Namespace) -> list[float]:
    """
    Region bounds as floats.

    Raises:
        ValueError: If there are not exactly 4 numeric values.
    """
    if len(config.region) != 4:
        raise ValueError(f"--region needs 4 values, got {len(config.region)}: {config.region}")
    try:
        return [float(v) for v in config.region]
    except ValueError as e:
        raise ValueError(f"--region values must be numbers: {config.region}") from e


def build_pipeline_config(config: argparse.Namespace) -> PipelineConfig:
    """Build PipelineConfig from parsed arguments."""
    min_lat, max_lat, min_lng, max_lng = _region_values(config)
    return PipelineConfig(
        dataset_source=config.dataset_source,
        max_rows=config.dataset_max_rows,
        region=RegionBounds(
            min_latitude=min_lat,
            max_latitude=max_lat,
            min_longitude=min_lng,
            max_longitude=max_lng,
        ),
        top_k=config.top_k,
        cell_size=config.cell_size,
        timeout=config.dataset_timeout,
        max_retries=config.dataset_max_retries,
        strict=config.dataset_strict,
    )


def config_to_dict(config: argparse.Namespace) -> dict[str, Any]:
    """Convert config to dictionary for logging."""
    return {
        "dataset_source": config.dataset_source,
        "dataset_max_rows": config.dataset_max_rows,
        "dataset_strict": config.dataset_strict,
        "dataset_timeout": config.dataset_timeout,
        "dataset_max_retries": config.dataset_max_retries,
        "region": _region_values(config),
        "top_k": config.top_k,
        "cell_size": config.cell_size,
        "log_level": config.log_level,
    }


def setup_logging(level: str) -> None:
    """Configure logging."""
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
