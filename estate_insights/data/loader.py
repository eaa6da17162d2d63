"""Dataset loader with a read-through, invalidatable cache."""

from __future__ import annotations

import logging
import math
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from .errors import (
    DataError,
    DatasetNotFoundError,
    DatasetRequestError,
    InvalidDatasetSourceError,
)
from .models import Dataset, PropertyRecord, RegionBounds
from .schema import DatasetSchema

logger = logging.getLogger(__name__)

DEFAULT_MAX_ROWS = 5000


@dataclass(frozen=True)
class DatasetLoaderConfig:
    """Configuration for dataset loader."""

    source: str
    """Local file path or http(s) URL of the CSV dataset."""

    max_rows: int = DEFAULT_MAX_ROWS
    """Maximum number of data lines parsed. The rest of the file is ignored."""

    region: RegionBounds = field(default_factory=RegionBounds)
    timeout: float = 30.0
    max_retries: int = 3
    retry_delay_seconds: float = 2.0
    strict: bool = False
    """Raise on unparseable values instead of defaulting them."""


def _is_valid(record: PropertyRecord, region: RegionBounds) -> bool:
    return (
        bool(record.id)
        and math.isfinite(record.price)
        and record.price > 0
        and region.contains(record.latitude, record.longitude)
    )


def parse_dataset(
    text: str,
    schema: DatasetSchema | None = None,
    region: RegionBounds | None = None,
    max_rows: int = DEFAULT_MAX_ROWS,
    strict: bool = False,
) -> Dataset:
    """
    Parse delimited dataset text into valid PropertyRecord values.

    The first line is a header and is discarded. At most `max_rows` data
    lines are considered. Short lines are skipped; rows with a missing id,
    non-positive price or coordinates outside the region are rejected.
    Input order is preserved.

    Args:
        text: Raw dataset text
        schema: Column layout. If None, uses the default schema.
        region: Valid region. If None, uses RegionBounds() defaults.
        max_rows: Maximum number of data lines to parse
        strict: Raise RowDecodeError on unparseable values

    Returns:
        Dataset with records and data-quality counters

    Raises:
        RowDecodeError: In strict mode, if a value cannot be parsed
    """
    schema = schema or DatasetSchema()
    region = region or RegionBounds()

    records: list[PropertyRecord] = []
    defaulted_fields: Counter[str] = Counter()
    skipped = 0
    rejected = 0

    lines = text.splitlines()
    for line_number, line in enumerate(lines[1 : max_rows + 1], start=2):
        if not line.strip():
            continue

        record, defaulted = schema.decode_row(
            schema.split(line), strict=strict, line=line_number
        )
        if record is None:
            skipped += 1
            continue

        defaulted_fields.update(defaulted)

        if not _is_valid(record, region):
            rejected += 1
            continue

        records.append(record)

    if skipped or rejected:
        logger.debug(
            f"Dataset parse dropped {skipped} short rows and {rejected} invalid rows"
        )

    return Dataset(
        records=tuple(records),
        defaulted_fields=defaulted_fields,
        skipped_rows=skipped,
        rejected_rows=rejected,
    )


class DatasetLoader:
    """
    Lazily loads and caches the property dataset.

    The first successful get() populates the cache; later calls return
    the cached Dataset until invalidate() is called. Failures are not
    cached: get() returns an empty Dataset and exposes the error through
    last_error, so the caller decides whether to show an error or an
    empty state.

    Concurrent get() calls made before the cache is populated each fetch
    the source independently.

    Usage:
        loader = DatasetLoader(DatasetLoaderConfig(source="data/houses.csv"))
        dataset = await loader.get()
        if loader.last_error:
            ...
    """

    def __init__(self, config: DatasetLoaderConfig, schema: DatasetSchema | None = None):
        """
        Initialize dataset loader.

        Args:
            config: Loader configuration
            schema: Column layout. If None, uses the default schema.
        """
        self._config = config
        self._schema = schema or DatasetSchema()
        self._cache: Dataset | None = None
        self._last_error: DataError | None = None

    @property
    def is_loaded(self) -> bool:
        """True if a dataset is cached."""
        return self._cache is not None

    @property
    def last_error(self) -> DataError | None:
        """Error from the most recent failed get(), if any."""
        return self._last_error

    def invalidate(self) -> None:
        """Drop the cached dataset so the next get() reloads the source."""
        if self._cache is not None:
            logger.info("Dataset cache invalidated")
        self._cache = None
        self._last_error = None

    async def get(self) -> Dataset:
        """
        Return the dataset, loading it on first use.

        Returns:
            Cached Dataset, or an empty Dataset if the source could not be
            read or parsed (see last_error).
        """
        if self._cache is not None:
            return self._cache

        try:
            text = await self._read_source()
            dataset = parse_dataset(
                text,
                schema=self._schema,
                region=self._config.region,
                max_rows=self._config.max_rows,
                strict=self._config.strict,
            )
        except DataError as e:
            logger.error(f"Failed to load dataset from {self._config.source}: {e}")
            self._last_error = e
            return Dataset()

        self._cache = dataset
        self._last_error = None

        if dataset.total_defaulted:
            logger.warning(
                f"Dataset loaded with {dataset.total_defaulted} defaulted values: "
                f"{dict(dataset.defaulted_fields)}"
            )
        logger.info(f"Loaded {len(dataset)} properties from {self._config.source}")

        return dataset

    async def _read_source(self) -> str:
        source = self._config.source
        if source.startswith(("http://", "https://")):
            return await self._fetch_with_retry(source)
        return self._read_file(Path(source))

    def _read_file(self, path: Path) -> str:
        """
        Read a local dataset file.

        Raises:
            DatasetNotFoundError: If the file doesn't exist
            DatasetRequestError: If the file cannot be read or decoded
        """
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise DatasetNotFoundError(f"Dataset file not found: {path}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise DatasetRequestError(f"Cannot read dataset file {path}: {e}") from e

    async def _fetch(self, url: str) -> str:
        """
        Download dataset text over HTTP.

        Raises:
            DatasetNotFoundError: If the URL returns 404
            DatasetRequestError: If the request fails
            InvalidDatasetSourceError: If the URL is malformed
        """
        async with httpx.AsyncClient(timeout=self._config.timeout) as client:
            try:
                response = await client.get(url)

                if response.status_code == 404:
                    raise DatasetNotFoundError(f"Dataset not found: {url}")

                response.raise_for_status()
                return response.text

            except httpx.HTTPStatusError as e:
                raise DatasetRequestError(
                    f"Request failed: {e.response.status_code} - {e.response.text}"
                ) from e
            except httpx.RequestError as e:
                raise DatasetRequestError(f"Connection error: {e}") from e
            except httpx.InvalidURL as e:
                raise InvalidDatasetSourceError(f"Invalid dataset URL {url!r}: {e}") from e

    async def _fetch_with_retry(self, url: str) -> str:
        """
        Download dataset text, retrying transient failures.

        Retries on DatasetRequestError only; a 404 or malformed URL fails
        immediately.
        """

        def _log_retry(retry_state):
            exc = retry_state.outcome.exception()
            logger.warning(
                f"Dataset fetch failed: {exc}. "
                f"Retrying (attempt {retry_state.attempt_number}/{self._config.max_retries})"
            )

        async for attempt in AsyncRetrying(
            wait=wait_fixed(self._config.retry_delay_seconds),
            stop=stop_after_attempt(self._config.max_retries),
            retry=retry_if_exception_type(DatasetRequestError),
            before_sleep=_log_retry,
            reraise=True,
        ):
            with attempt:
                return await self._fetch(url)

        # Unreachable with reraise=True
        raise DatasetRequestError(f"Dataset fetch failed: {url}")
