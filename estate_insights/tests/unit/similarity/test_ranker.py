"""Tests for top-K similarity ranking."""

import pytest

from estate_insights.data import parse_dataset
from estate_insights.similarity import ScoredCandidate, rank


class TestRank:
    """Tests for rank function."""

    def test_golden_top_three(self, golden_csv: str, target) -> None:
        dataset = parse_dataset(golden_csv)

        ranked = rank(dataset.records, target, k=3)

        assert [c.id for c in ranked] == ["A", "B", "D"]
        assert [c.similarity for c in ranked] == pytest.approx([1.0, 0.865, 0.6175])

    def test_scores_non_increasing(self, golden_csv: str, target) -> None:
        ranked = rank(parse_dataset(golden_csv).records, target, k=10)

        similarities = [c.similarity for c in ranked]
        assert similarities == sorted(similarities, reverse=True)
        assert len(ranked) == 4

    def test_k_larger_than_pool(self, make_record, target) -> None:
        records = [make_record(id="a"), make_record(id="b")]

        assert len(rank(records, target, k=50)) == 2

    def test_k_zero_returns_empty(self, make_record, target) -> None:
        assert rank([make_record()], target, k=0) == []

    def test_negative_k_raises(self, make_record, target) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            rank([make_record()], target, k=-1)

    def test_empty_candidates(self, target) -> None:
        assert rank([], target) == []

    def test_ties_keep_dataset_order(self, make_record, target) -> None:
        records = [
            make_record(id="first", price=500_000),
            make_record(id="second", price=700_000),
            make_record(id="exact"),
            make_record(id="third", price=500_000),
        ]

        ranked = rank(records, target, k=4)

        assert [c.id for c in ranked] == ["exact", "first", "second", "third"]

    def test_deterministic(self, golden_csv: str, target) -> None:
        records = parse_dataset(golden_csv).records

        assert rank(records, target) == rank(records, target)

    def test_exclude_ids(self, golden_csv: str, target) -> None:
        ranked = rank(parse_dataset(golden_csv).records, target, k=2, exclude_ids={"A"})

        assert [c.id for c in ranked] == ["B", "D"]

    def test_returns_scored_candidates(self, make_record, target) -> None:
        record = make_record(id="x")

        [candidate] = rank([record], target, k=1)

        assert isinstance(candidate, ScoredCandidate)
        assert candidate.record is record
        assert candidate.investment_score is None
        assert candidate.to_dict()["similarity"] == pytest.approx(1.0)
