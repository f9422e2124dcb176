"""Tests for the next-month best-seller forecast."""

import pandas as pd
import pytest

from sales_forecast.errors import NoDataError
from sales_forecast.forecast import CategoryForecaster, ForecastResult, earliest_month_key
from sales_forecast.records import save_holdout_dataset


def _pool(rows):
    return pd.DataFrame(rows, columns=["month_key", "category", "revenue"])


class TestEarliestMonthKey:
    """Tests for earliest_month_key."""

    def test_chronological_not_lexical(self):
        df = _pool([("01-2024", "A", 1.0), ("12-2023", "A", 1.0), ("02-2024", "B", 1.0)])

        assert earliest_month_key(df) == "12-2023"

    def test_empty_raises(self):
        with pytest.raises(NoDataError):
            earliest_month_key(_pool([]))


class TestCategoryForecaster:
    """Tests for CategoryForecaster."""

    def test_reports_prediction_of_highest_revenue_row(self, stub_model_cls):
        model = stub_model_cls({"A": "A", "B": "B"})
        holdout = _pool([("03-2024", "A", 300.0), ("03-2024", "B", 900.0)])

        result = CategoryForecaster(model).forecast_next_month(holdout, verbose=False)

        assert result == ForecastResult(target_month="03-2024", predicted_category="B", revenue=900.0)

    def test_reports_predicted_label_not_actual_category(self, stub_model_cls):
        model = stub_model_cls({"A": "A", "B": "Furniture"})
        holdout = _pool([("03-2024", "A", 300.0), ("03-2024", "B", 900.0)])

        result = CategoryForecaster(model).forecast_next_month(holdout, verbose=False)

        assert result.predicted_category == "Furniture"
        assert result.revenue == pytest.approx(900.0)

    def test_uses_only_earliest_month(self, stub_model_cls):
        model = stub_model_cls({"A": "A", "B": "B", "C": "C"})
        holdout = _pool([
            ("04-2024", "C", 5000.0),
            ("03-2024", "A", 300.0),
            ("03-2024", "B", 900.0),
        ])

        result = CategoryForecaster(model).forecast_next_month(holdout, verbose=False)

        assert result.target_month == "03-2024"
        assert result.predicted_category == "B"

    def test_reaggregates_before_comparing(self, stub_model_cls):
        model = stub_model_cls({"A": "A", "B": "B"})
        holdout = _pool([
            ("03-2024", "A", 400.0),
            ("03-2024", "A", 400.0),
            ("03-2024", "B", 700.0),
        ])

        result = CategoryForecaster(model).forecast_next_month(holdout, verbose=False)

        assert result.predicted_category == "A"
        assert result.revenue == pytest.approx(800.0)

    def test_model_runs_on_every_row_of_month(self, stub_model_cls):
        model = stub_model_cls({"A": "A", "B": "B", "C": "C"})
        holdout = _pool([
            ("03-2024", "A", 1.0),
            ("03-2024", "B", 2.0),
            ("03-2024", "C", 3.0),
            ("04-2024", "A", 9.0),
        ])

        CategoryForecaster(model).forecast_next_month(holdout, verbose=False)

        assert sorted(row["category"] for row in model.predicted_rows) == ["A", "B", "C"]

    def test_revenue_tie_keeps_first_row(self, stub_model_cls):
        model = stub_model_cls({"A": "X", "B": "Y"})
        holdout = _pool([("03-2024", "B", 500.0), ("03-2024", "A", 500.0)])

        result = CategoryForecaster(model).forecast_next_month(holdout, verbose=False)

        # Aggregated rows are ordered by category within a month
        assert result.predicted_category == "X"

    def test_empty_pool_raises(self, stub_model_cls):
        with pytest.raises(NoDataError):
            CategoryForecaster(stub_model_cls({})).forecast_next_month(_pool([]), verbose=False)


class TestForecastFromFile:
    """Tests for forecasting from the persisted held-out dataset."""

    def test_round_trip(self, tmp_path, stub_model_cls):
        path = str(tmp_path / "test.csv")
        save_holdout_dataset(_pool([
            ("05-2024", "Electronics", 150.0),
            ("03-2024", "Electronics", 300.0),
            ("03-2024", "Furniture", 450.5),
            ("03-2024", "Furniture", 449.5),
        ]), path)
        model = stub_model_cls({"Electronics": "Electronics", "Furniture": "Furniture"})

        result = CategoryForecaster(model).forecast_from_file(path, verbose=False)

        assert result == ForecastResult("03-2024", "Furniture", 900.0)

    def test_header_only_file_raises(self, tmp_path, stub_model_cls):
        path = str(tmp_path / "test.csv")
        save_holdout_dataset(_pool([]), path)

        with pytest.raises(NoDataError):
            CategoryForecaster(stub_model_cls({})).forecast_from_file(path, verbose=False)
