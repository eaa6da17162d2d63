"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from estate_insights.data import PropertyRecord
from estate_insights.similarity import TargetFeatureVector

# Source column of each field in the 23-column CSV layout
COLUMNS = {
    "id": 0,
    "bedrooms": 2,
    "bathrooms": 3,
    "living_area": 4,
    "lot_area": 5,
    "waterfront": 7,
    "views": 8,
    "condition": 9,
    "grade": 10,
    "built_year": 13,
    "latitude": 16,
    "longitude": 17,
    "schools_nearby": 20,
    "distance_from_airport": 21,
    "price": 22,
}

HEADER = ",".join(f"col{i}" for i in range(23))


def _csv_line(**values) -> str:
    row = ["0"] * 23
    defaults = {
        "bedrooms": 3,
        "bathrooms": 2,
        "living_area": 1800,
        "lot_area": 5000,
        "grade": 7,
        "condition": 3,
        "built_year": 1995,
        "latitude": 51.05,
        "longitude": -114.07,
        "schools_nearby": 2,
        "distance_from_airport": 45,
    }
    for name, value in {**defaults, **values}.items():
        row[COLUMNS[name]] = str(value)
    return ",".join(row)


@pytest.fixture
def csv_line() -> Callable[..., str]:
    """
    Build one 23-column CSV line from field keyword arguments.

    Usage:
        line = csv_line(id="A", price=500000, latitude=51.1)
    """
    return _csv_line


@pytest.fixture
def make_csv() -> Callable[[list[str]], str]:
    """Join data lines under a header line."""

    def _make(lines: list[str]) -> str:
        return "\n".join([HEADER, *lines]) + "\n"

    return _make


@pytest.fixture
def make_record() -> Callable[..., PropertyRecord]:
    """
    Build a PropertyRecord with sensible defaults.

    Usage:
        record = make_record(id="A", price=650_000, grade=8)
    """

    def _make(**overrides) -> PropertyRecord:
        values = {
            "id": "P1",
            "price": 600_000.0,
            "bedrooms": 3,
            "bathrooms": 2.0,
            "living_area": 2000.0,
            "grade": 7,
            "condition": 3,
            "latitude": 51.0,
            "longitude": -114.0,
        }
        values.update(overrides)
        return PropertyRecord(**values)

    return _make


@pytest.fixture
def target() -> TargetFeatureVector:
    """Target used by the golden dataset."""
    return TargetFeatureVector(
        price=600_000,
        bedrooms=3,
        bathrooms=2,
        living_area=2000,
        grade=7,
        latitude=51.0,
        longitude=-114.0,
    )


@pytest.fixture
def golden_csv(csv_line, make_csv) -> str:
    """
    Five known rows plus one short line.

    Similarity to `target` (hand computed):
        A 1.0, B 0.865, C 0.485, D 0.6175, E excluded (latitude 90)
    """
    return make_csv(
        [
            csv_line(id="A", price=600000, bedrooms=3, bathrooms=2, living_area=2000,
                     grade=7, latitude=51.0, longitude=-114.0),
            csv_line(id="B", price=660000, bedrooms=4, bathrooms=2, living_area=2200,
                     grade=8, latitude=51.2, longitude=-114.0),
            csv_line(id="C", price=900000, bedrooms=5, bathrooms=3, living_area=3000,
                     grade=9, latitude=51.0, longitude=-113.0),
            csv_line(id="D", price=300000, bedrooms=2, bathrooms=1, living_area=1500,
                     grade=6, latitude=51.4, longitude=-114.3),
            csv_line(id="E", price=700000, latitude=90.0, longitude=-114.0),
            "X,1,2,3,4,5,6,7,8,9",
        ]
    )


@pytest.fixture
def golden_path(tmp_path: Path, golden_csv: str) -> Path:
    """Golden dataset written to a temporary file."""
    path = tmp_path / "houses.csv"
    path.write_text(golden_csv)
    return path
