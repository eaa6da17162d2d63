"""Tests for parse_dataset and DatasetLoader."""

from pathlib import Path
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from estate_insights.data import (
    DatasetLoader,
    DatasetLoaderConfig,
    DatasetNotFoundError,
    DatasetRequestError,
    InvalidDatasetSourceError,
    RegionBounds,
    RowDecodeError,
    parse_dataset,
)

DATASET_URL = "https://data.example.com/houses.csv"


def _response(status: int, text: str = "") -> httpx.Response:
    return httpx.Response(status, text=text, request=httpx.Request("GET", DATASET_URL))


class TestParseDataset:
    """Tests for parse_dataset function."""

    def test_golden_rows(self, golden_csv: str) -> None:
        """Valid rows kept in order, out-of-region and short rows dropped."""
        dataset = parse_dataset(golden_csv)

        assert [r.id for r in dataset] == ["A", "B", "C", "D"]
        assert dataset.skipped_rows == 1
        assert dataset.rejected_rows == 1

    def test_header_is_discarded(self, make_csv, csv_line) -> None:
        dataset = parse_dataset(make_csv([csv_line(id="1", price=500000)]))

        assert len(dataset) == 1
        assert dataset[0].id == "1"

    def test_short_line_dropped_not_defaulted(self, make_csv) -> None:
        """A line with 10 of 23 columns is skipped entirely."""
        dataset = parse_dataset(make_csv(["1,2,3,4,5,6,7,8,9,10"]))

        assert len(dataset) == 0
        assert dataset.skipped_rows == 1
        assert dataset.total_defaulted == 0

    def test_latitude_outside_region_excluded(self, make_csv, csv_line) -> None:
        dataset = parse_dataset(
            make_csv([
                csv_line(id="in", price=500000, latitude=51.0),
                csv_line(id="out", price=500000, latitude=90.0),
            ])
        )

        assert [r.id for r in dataset] == ["in"]

    def test_region_bounds_are_exclusive(self, make_csv, csv_line) -> None:
        dataset = parse_dataset(
            make_csv([csv_line(id="edge", price=500000, latitude=50.0)])
        )

        assert len(dataset) == 0

    def test_custom_region(self, make_csv, csv_line) -> None:
        region = RegionBounds(min_latitude=40, max_latitude=50,
                              min_longitude=-80, max_longitude=-70)
        dataset = parse_dataset(
            make_csv([csv_line(id="nyc", price=900000, latitude=40.7, longitude=-74.0)]),
            region=region,
        )

        assert [r.id for r in dataset] == ["nyc"]

    @pytest.mark.parametrize("price", ["0", "-100", "abc", "nan"])
    def test_invalid_price_excluded(self, make_csv, csv_line, price: str) -> None:
        dataset = parse_dataset(make_csv([csv_line(id="1", price=price)]))

        assert len(dataset) == 0
        assert dataset.rejected_rows == 1

    def test_missing_id_excluded(self, make_csv, csv_line) -> None:
        dataset = parse_dataset(make_csv([csv_line(id="", price=500000)]))

        assert len(dataset) == 0

    def test_unparseable_numeric_defaults_and_is_counted(self, make_csv, csv_line) -> None:
        dataset = parse_dataset(
            make_csv([
                csv_line(id="1", price=500000, bedrooms="?"),
                csv_line(id="2", price=500000, bedrooms="", views="x"),
            ])
        )

        assert len(dataset) == 2
        assert dataset[0].bedrooms == 0
        assert dataset.defaulted_fields["bedrooms"] == 2
        assert dataset.defaulted_fields["views"] == 1
        assert dataset.total_defaulted == 3

    def test_fractional_integer_counted_as_defaulted(self, make_csv, csv_line) -> None:
        dataset = parse_dataset(make_csv([csv_line(id="1", price=500000, grade="7.5")]))

        assert len(dataset) == 1
        assert dataset.defaulted_fields["grade"] == 1

    def test_strict_mode_raises(self, make_csv, csv_line) -> None:
        with pytest.raises(RowDecodeError):
            parse_dataset(make_csv([csv_line(id="1", price=500000, bedrooms="?")]), strict=True)

    def test_max_rows_caps_parsed_lines(self, make_csv, csv_line) -> None:
        lines = [csv_line(id=str(i), price=500000) for i in range(10)]

        dataset = parse_dataset(make_csv(lines), max_rows=4)

        assert [r.id for r in dataset] == ["0", "1", "2", "3"]

    def test_blank_lines_ignored(self, make_csv, csv_line) -> None:
        dataset = parse_dataset(make_csv(["", csv_line(id="1", price=500000), "   "]))

        assert len(dataset) == 1
        assert dataset.skipped_rows == 0

    def test_crlf_line_endings(self, csv_line) -> None:
        text = "header\r\n" + csv_line(id="1", price=500000) + "\r\n"

        dataset = parse_dataset(text)

        assert dataset[0].price == 500000.0

    def test_empty_text(self) -> None:
        dataset = parse_dataset("")

        assert len(dataset) == 0


class TestDatasetLoaderFile:
    """Tests for DatasetLoader with local files."""

    async def test_loads_and_caches(self, golden_path: Path) -> None:
        loader = DatasetLoader(DatasetLoaderConfig(source=str(golden_path)))

        first = await loader.get()
        golden_path.unlink()
        second = await loader.get()

        assert len(first) == 4
        assert second is first
        assert loader.is_loaded
        assert loader.last_error is None

    async def test_invalidate_forces_reload(self, golden_path: Path, make_csv, csv_line) -> None:
        loader = DatasetLoader(DatasetLoaderConfig(source=str(golden_path)))
        await loader.get()

        golden_path.write_text(make_csv([csv_line(id="only", price=400000)]))
        loader.invalidate()
        reloaded = await loader.get()

        assert [r.id for r in reloaded] == ["only"]

    async def test_missing_file_returns_empty_with_error(self, tmp_path: Path) -> None:
        loader = DatasetLoader(DatasetLoaderConfig(source=str(tmp_path / "missing.csv")))

        dataset = await loader.get()

        assert len(dataset) == 0
        assert isinstance(loader.last_error, DatasetNotFoundError)
        assert not loader.is_loaded

    async def test_failure_not_cached(self, tmp_path: Path, golden_csv: str) -> None:
        path = tmp_path / "late.csv"
        loader = DatasetLoader(DatasetLoaderConfig(source=str(path)))

        assert len(await loader.get()) == 0

        path.write_text(golden_csv)
        dataset = await loader.get()

        assert len(dataset) == 4
        assert loader.last_error is None

    async def test_strict_decode_failure_returns_empty(
        self, tmp_path: Path, make_csv, csv_line
    ) -> None:
        path = tmp_path / "bad.csv"
        path.write_text(make_csv([csv_line(id="1", price=500000, grade="?")]))
        loader = DatasetLoader(DatasetLoaderConfig(source=str(path), strict=True))

        dataset = await loader.get()

        assert len(dataset) == 0
        assert isinstance(loader.last_error, RowDecodeError)


class TestDatasetLoaderHttp:
    """Tests for DatasetLoader with URL sources."""

    @pytest.fixture
    def config(self) -> DatasetLoaderConfig:
        return DatasetLoaderConfig(source=DATASET_URL, max_retries=3, retry_delay_seconds=0)

    async def test_successful_fetch(self, config, golden_csv: str) -> None:
        loader = DatasetLoader(config)

        with patch.object(
            httpx.AsyncClient, "get", new_callable=AsyncMock,
            return_value=_response(200, golden_csv),
        ) as mock_get:
            dataset = await loader.get()
            await loader.get()

        assert [r.id for r in dataset] == ["A", "B", "C", "D"]
        assert mock_get.call_count == 1

    async def test_404_not_retried(self, config) -> None:
        loader = DatasetLoader(config)

        with patch.object(
            httpx.AsyncClient, "get", new_callable=AsyncMock,
            return_value=_response(404, "gone"),
        ) as mock_get:
            dataset = await loader.get()

        assert len(dataset) == 0
        assert isinstance(loader.last_error, DatasetNotFoundError)
        assert mock_get.call_count == 1

    async def test_500_retried_then_fails(self, config) -> None:
        loader = DatasetLoader(config)

        with patch.object(
            httpx.AsyncClient, "get", new_callable=AsyncMock,
            return_value=_response(500, "boom"),
        ) as mock_get:
            dataset = await loader.get()

        assert len(dataset) == 0
        assert isinstance(loader.last_error, DatasetRequestError)
        assert "500" in str(loader.last_error)
        assert mock_get.call_count == 3

    async def test_connection_error_returns_empty(self, config) -> None:
        loader = DatasetLoader(config)

        with patch.object(
            httpx.AsyncClient, "get", new_callable=AsyncMock,
            side_effect=httpx.ConnectError("Connection refused"),
        ):
            dataset = await loader.get()

        assert len(dataset) == 0
        assert isinstance(loader.last_error, DatasetRequestError)
        assert "Connection error" in str(loader.last_error)

    async def test_recovers_after_transient_failure(self, config, golden_csv: str) -> None:
        loader = DatasetLoader(config)

        with patch.object(
            httpx.AsyncClient, "get", new_callable=AsyncMock,
            side_effect=[_response(503, "busy"), _response(200, golden_csv)],
        ) as mock_get:
            dataset = await loader.get()

        assert len(dataset) == 4
        assert loader.last_error is None
        assert mock_get.call_count == 2

    async def test_malformed_url_returns_empty_without_retry(self) -> None:
        loader = DatasetLoader(
            DatasetLoaderConfig(source="http://[::1/data.csv", max_retries=3, retry_delay_seconds=0)
        )

        with patch.object(
            httpx.AsyncClient, "get", new_callable=AsyncMock,
            side_effect=httpx.InvalidURL("Invalid port: ':1'"),
        ) as mock_get:
            dataset = await loader.get()

        assert len(dataset) == 0
        assert isinstance(loader.last_error, InvalidDatasetSourceError)
        assert mock_get.call_count == 1

    async def test_malformed_url_with_real_client(self) -> None:
        loader = DatasetLoader(DatasetLoaderConfig(source="http://[::1/data.csv", max_retries=1))

        dataset = await loader.get()

        assert len(dataset) == 0
        assert isinstance(loader.last_error, InvalidDatasetSourceError)
        assert not loader.is_loaded
