"""Tests for monthly aggregation and class-balancing weights."""

import pandas as pd
import pytest

from sales_forecast.aggregation import (
    aggregate_monthly,
    compute_class_weights,
    validate_aggregated_data,
)


def _frame(rows):
    return pd.DataFrame(rows, columns=["month_key", "category", "revenue"])


class TestAggregateMonthly:
    """Tests for aggregate_monthly."""

    def test_sums_revenue_per_month_category(self):
        df = _frame([
            ("01-2024", "A", 100.0),
            ("01-2024", "A", 25.5),
            ("01-2024", "B", 50.0),
            ("02-2024", "A", 80.0),
        ])

        result = aggregate_monthly(df)

        assert len(result) == 3
        lookup = result.set_index(["month_key", "category"])["revenue"]
        assert lookup[("01-2024", "A")] == pytest.approx(125.5)
        assert lookup[("01-2024", "B")] == pytest.approx(50.0)
        assert lookup[("02-2024", "A")] == pytest.approx(80.0)

    def test_at_most_one_row_per_key(self):
        df = _frame([("03-2024", "A", float(i)) for i in range(10)] + [("03-2024", "B", 1.0)] * 4)

        result = aggregate_monthly(df)

        assert not result.duplicated(subset=["month_key", "category"]).any()

    def test_sum_independent_of_row_order(self):
        df = _frame([("01-2024", "A", 0.5), ("01-2024", "A", 1.25), ("01-2024", "A", 2.0)])

        forward = aggregate_monthly(df)
        backward = aggregate_monthly(df.iloc[::-1].reset_index(drop=True))

        assert forward["revenue"].iloc[0] == pytest.approx(backward["revenue"].iloc[0])
        assert forward["revenue"].iloc[0] == pytest.approx(3.75)

    def test_sparse_output(self):
        df = _frame([("01-2024", "A", 1.0), ("02-2024", "B", 2.0)])

        result = aggregate_monthly(df)

        assert len(result) == 2
        assert not ((result["month_key"] == "01-2024") & (result["category"] == "B")).any()

    def test_sorted_chronologically(self):
        df = _frame([
            ("01-2024", "A", 1.0),
            ("12-2023", "A", 1.0),
            ("02-2023", "B", 1.0),
        ])

        result = aggregate_monthly(df)

        assert result["month_key"].tolist() == ["02-2023", "12-2023", "01-2024"]

    def test_idempotent(self):
        df = _frame([
            ("01-2024", "A", 100.0),
            ("01-2024", "A", 20.0),
            ("01-2024", "B", 50.0),
            ("02-2024", "A", 80.0),
        ])

        once = aggregate_monthly(df)
        twice = aggregate_monthly(once)

        pd.testing.assert_frame_equal(once, twice)


class TestComputeClassWeights:
    """Tests for compute_class_weights."""

    def test_inverse_category_frequency(self):
        aggregates = _frame([
            ("01-2024", "A", 100.0),
            ("01-2024", "B", 50.0),
            ("02-2024", "A", 80.0),
        ])

        weighted = compute_class_weights(aggregates)

        lookup = weighted.set_index(["month_key", "category"])["weight"]
        assert lookup[("01-2024", "A")] == pytest.approx(0.5)
        assert lookup[("02-2024", "A")] == pytest.approx(0.5)
        assert lookup[("01-2024", "B")] == pytest.approx(1.0)

    def test_weights_sum_to_one_per_category(self):
        rows = [(f"{m:02d}-2024", "A", 1.0) for m in range(1, 13)]
        rows += [(f"{m:02d}-2024", "B", 1.0) for m in range(1, 4)]
        rows += [("01-2024", "C", 1.0)]

        weighted = compute_class_weights(_frame(rows))

        sums = weighted.groupby("category")["weight"].sum()
        for total in sums:
            assert total == pytest.approx(1.0)

    def test_input_not_modified(self):
        aggregates = _frame([("01-2024", "A", 1.0)])

        compute_class_weights(aggregates)

        assert "weight" not in aggregates.columns


class TestValidateAggregatedData:
    """Tests for validate_aggregated_data."""

    def test_valid_weighted_aggregates(self):
        weighted = compute_class_weights(aggregate_monthly(_frame([
            ("01-2024", "A", 1.0),
            ("02-2024", "A", 2.0),
            ("01-2024", "B", 3.0),
        ])))

        assert validate_aggregated_data(weighted) is True

    def test_duplicates_fail(self):
        df = _frame([("01-2024", "A", 1.0), ("01-2024", "A", 2.0)])

        assert validate_aggregated_data(df) is False

    def test_missing_columns_fail(self):
        df = pd.DataFrame({"category": ["A"], "revenue": [1.0]})

        assert validate_aggregated_data(df) is False
