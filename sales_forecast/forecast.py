"""
Forecast Generation Module

Predicts next month's best-selling category from the held-out pool:
1. Re-aggregate held-out triplets to month-category rows
2. Keep the chronologically earliest month
3. Run the selected model on each row of that month
4. Report the predicted label of the highest-revenue row
"""

from dataclasses import dataclass
from functools import reduce
from typing import Optional, Tuple

import pandas as pd

from .aggregation import aggregate_monthly
from .errors import NoDataError
from .records import load_transactions, month_key_to_timestamp


@dataclass(frozen=True)
class ForecastResult:
    target_month: str
    predicted_category: str
    revenue: float


def earliest_month_key(aggregates: pd.DataFrame) -> str:
    """Chronologically smallest MM-YYYY key"""
    if len(aggregates) == 0:
        raise NoDataError("No rows to pick a month from")
    periods = month_key_to_timestamp(aggregates['month_key'])
    return aggregates['month_key'].iloc[periods.values.argmin()]


def _keep_highest_revenue(best: Optional[Tuple[str, float]],
                          candidate: Tuple[str, float]) -> Tuple[str, float]:
    if best is None or candidate[1] > best[1]:
        return candidate
    return best


class CategoryForecaster:
    """Next-month best-seller forecast from a fitted CategoryModel"""

    def __init__(self, model):
        """
        Args:
            model: Fitted CategoryModel (selected by model_selection)
        """
        self.model = model

    def forecast_next_month(self, holdout: pd.DataFrame, verbose: bool = True) -> ForecastResult:
        """
        Forecast the best seller for the earliest month in the held-out pool

        Args:
            holdout: Held-out triplets (month_key, category, revenue)

        Returns:
            ForecastResult with the predicted category of the highest-revenue row

        Raises:
            NoDataError: the pool or the selected month has no rows
        """
        if len(holdout) == 0:
            raise NoDataError("Held-out pool is empty")

        aggregates = aggregate_monthly(holdout)
        next_month = earliest_month_key(aggregates)
        month_df = aggregates[aggregates['month_key'] == next_month]

        if len(month_df) == 0:
            raise NoDataError(f"No held-out rows for month {next_month}")

        predictions = [
            (self.model.predict(row).label, float(row['revenue']))
            for _, row in month_df.iterrows()
        ]
        predicted_category, revenue = reduce(_keep_highest_revenue, predictions, None)

        result = ForecastResult(
            target_month=next_month,
            predicted_category=predicted_category,
            revenue=revenue
        )

        if verbose:
            print(f"\n  🔮 Prediction for next month ({result.target_month}):")
            print(f"  🏆 Best Seller: {result.predicted_category} with Revenue: {result.revenue:,.2f}")

        return result

    def forecast_from_file(self, path: str, verbose: bool = True) -> ForecastResult:
        """Re-read a persisted held-out dataset and forecast from it"""
        holdout = load_transactions(path, kind='month_year')
        return self.forecast_next_month(holdout, verbose=verbose)
