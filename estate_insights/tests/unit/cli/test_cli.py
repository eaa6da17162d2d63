"""Tests for the estate-insights CLI."""

import json
from pathlib import Path

import pytest

from estate_insights.cli import main, parse_args
from estate_insights.cli.config import build_pipeline_config, check_config
from estate_insights.data import RegionBounds


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("ESTATE_DATASET", "ESTATE_MAX_ROWS", "ESTATE_REGION", "ESTATE_TOP_K",
                 "ESTATE_CELL_SIZE", "ESTATE_STRICT", "ESTATE_TIMEOUT", "ESTATE_MAX_RETRIES",
                 "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


TARGET_FLAGS = [
    "--price", "600000", "--bedrooms", "3", "--bathrooms", "2", "--living-area", "2000",
    "--grade", "7", "--lat", "51.0", "--lng", "-114.0",
]


class TestConfig:
    """Tests for argument parsing and validation."""

    def test_env_defaults(self, monkeypatch) -> None:
        monkeypatch.setenv("ESTATE_DATASET", "houses.csv")
        monkeypatch.setenv("ESTATE_TOP_K", "7")
        monkeypatch.setenv("ESTATE_REGION", "40,45,-80,-70")

        config = parse_args(["heatmap"])

        assert config.dataset_source == "houses.csv"
        assert config.top_k == 7
        assert build_pipeline_config(config).region == RegionBounds(40.0, 45.0, -80.0, -70.0)

    def test_flags_override_env(self, monkeypatch) -> None:
        monkeypatch.setenv("ESTATE_DATASET", "env.csv")

        config = parse_args(["heatmap", "--dataset.source", "flag.csv"])

        assert config.dataset_source == "flag.csv"

    def test_build_pipeline_config(self) -> None:
        config = parse_args(["heatmap", "--dataset.source", "x.csv", "--top_k", "4",
                             "--region", "50", "55", "-120", "-110"])

        pipeline_config = build_pipeline_config(config)

        assert pipeline_config.dataset_source == "x.csv"
        assert pipeline_config.top_k == 4
        assert pipeline_config.region.max_latitude == 55.0

    def test_missing_source_rejected(self) -> None:
        with pytest.raises(ValueError, match="dataset.source"):
            check_config(parse_args(["heatmap"]))

    @pytest.mark.parametrize(
        "extra,match",
        [
            (["--top_k", "-1"], "top_k"),
            (["--cell_size", "0"], "cell_size"),
            (["--dataset.max_rows", "0"], "max_rows"),
            (["--region", "55", "50", "-120", "-110"], "min_latitude"),
        ],
    )
    def test_invalid_values_rejected(self, extra: list[str], match: str) -> None:
        config = parse_args(["heatmap", "--dataset.source", "x.csv", *extra])

        with pytest.raises(ValueError, match=match):
            check_config(config)

    @pytest.mark.parametrize("region", ["50,55,-120", "50,55,west,-110"])
    def test_malformed_env_region_rejected(self, monkeypatch, region: str) -> None:
        monkeypatch.setenv("ESTATE_REGION", region)

        with pytest.raises(ValueError, match="--region"):
            check_config(parse_args(["heatmap", "--dataset.source", "x.csv"]))

    @pytest.mark.parametrize("name", ["ESTATE_TOP_K", "ESTATE_MAX_ROWS", "ESTATE_CELL_SIZE"])
    def test_malformed_env_number_is_usage_error(self, monkeypatch, capsys, name: str) -> None:
        monkeypatch.setenv(name, "lots")

        with pytest.raises(SystemExit) as exc_info:
            parse_args(["heatmap", "--dataset.source", "x.csv"])

        assert exc_info.value.code == 2
        assert "invalid" in capsys.readouterr().err

    def test_command_required(self) -> None:
        with pytest.raises(SystemExit):
            parse_args([])


class TestMain:
    """Tests for main entry point."""

    def test_similar_by_features(self, golden_path: Path, capsys) -> None:
        code = main(["similar", "--dataset.source", str(golden_path), "--top_k", "3",
                     *TARGET_FLAGS])

        out = json.loads(capsys.readouterr().out)
        assert code == 0
        assert [p["id"] for p in out] == ["A", "B", "D"]
        assert out[1]["similarity"] == pytest.approx(0.865)

    def test_similar_by_property_id_excludes_target(self, golden_path: Path, capsys) -> None:
        code = main(["similar", "--dataset.source", str(golden_path), "--top_k", "3",
                     "--property-id", "A"])

        out = json.loads(capsys.readouterr().out)
        assert code == 0
        assert [p["id"] for p in out] == ["B", "D", "C"]

    def test_heatmap(self, golden_path: Path, capsys) -> None:
        code = main(["heatmap", "--dataset.source", str(golden_path), "--cell_size", "0.5"])

        out = json.loads(capsys.readouterr().out)
        assert code == 0
        assert out["property_count"] == 4
        assert [c["cell_id"] for c in out["cells"]] == ["102:-228", "102:-226", "102:-229"]
        assert out["cells"][0]["color_class"] == "mid-range"

    def test_heatmap_filters(self, golden_path: Path, capsys) -> None:
        code = main(["heatmap", "--dataset.source", str(golden_path), "--cell_size", "0.5",
                     "--min-price", "500000", "--grade-tier", "premium"])

        out = json.loads(capsys.readouterr().out)
        assert code == 0
        assert out["property_count"] == 2

    def test_invest(self, golden_path: Path, capsys) -> None:
        code = main(["invest", "--dataset.source", str(golden_path), "--top_k", "3",
                     "--property-id", "A"])

        out = json.loads(capsys.readouterr().out)
        assert code == 0
        assert [p["id"] for p in out] == ["C", "B", "D"]
        assert out[0]["metrics"]["investment_score"] == pytest.approx(8.8)

    def test_invest_invalid_financing(self, golden_path: Path, capsys) -> None:
        code = main(["invest", "--dataset.source", str(golden_path), "--down-payment", "0",
                     *TARGET_FLAGS])

        assert code == 1
        assert "Down payment" in capsys.readouterr().err

    def test_missing_source_exit_code(self, capsys) -> None:
        code = main(["heatmap"])

        assert code == 2
        assert "dataset.source" in capsys.readouterr().err

    def test_malformed_env_region_exit_code(self, monkeypatch, golden_path: Path, capsys) -> None:
        monkeypatch.setenv("ESTATE_REGION", "50,55,west,-110")

        code = main(["heatmap", "--dataset.source", str(golden_path)])

        assert code == 2
        assert "--region" in capsys.readouterr().err

    def test_unreadable_dataset(self, tmp_path: Path, capsys) -> None:
        code = main(["heatmap", "--dataset.source", str(tmp_path / "missing.csv")])

        assert code == 1
        assert "Cannot load dataset" in capsys.readouterr().err

    def test_unknown_property(self, golden_path: Path, capsys) -> None:
        code = main(["similar", "--dataset.source", str(golden_path), "--property-id", "nope"])

        assert code == 1
        assert "Property not found" in capsys.readouterr().err

    def test_missing_target_features(self, golden_path: Path, capsys) -> None:
        code = main(["similar", "--dataset.source", str(golden_path), "--price", "500000"])

        assert code == 1
        assert "--bedrooms" in capsys.readouterr().err
