"""
Revenue Forecast Module

Transaction-level revenue forecasting: one regression model on
(category, month) features, then a revenue estimate for every training
category at a target month.
"""

import os
from dataclasses import dataclass
from typing import Dict, List, Optional, Union

import joblib
import pandas as pd

from .errors import NoDataError
from .evaluation import evaluate_regression
from .lgbm_model import LGBMRevenueModel
from .records import load_transactions


@dataclass(frozen=True)
class RevenueForecastResult:
    category: str
    target_month: str
    predicted_revenue: float


def normalize_month(month: Union[int, str]) -> str:
    """'5', 5 or '05' -> '05'; anything outside 1-12 is rejected"""
    try:
        value = int(str(month).strip())
    except ValueError as e:
        raise ValueError(f"Invalid month: {month!r}") from e

    if not 1 <= value <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month!r}")

    return f"{value:02d}"


class RevenueForecastPipeline:
    """Fit on raw transactions, predict per-category revenue for a month"""

    def __init__(self, params: Optional[Dict] = None, num_boost_round: int = 100):
        """
        Args:
            params: LightGBM regression parameters (None for defaults)
            num_boost_round: Number of boosting rounds
        """
        self.num_boost_round = num_boost_round
        self.regressor = LGBMRevenueModel(params=params, feature_columns=['category', 'month'])
        self.categories: List[str] = []
        self.training_df: Optional[pd.DataFrame] = None

    @property
    def is_trained(self) -> bool:
        return self.regressor.model is not None

    def train(self, transactions: pd.DataFrame, verbose: bool = True) -> 'RevenueForecastPipeline':
        """
        Fit the regression model on transaction-level rows (no aggregation)

        Args:
            transactions: DataFrame with month ('MM'), category, revenue
        """
        if len(transactions) == 0:
            raise NoDataError("No transactions to train the revenue model on")

        df = transactions[['month', 'category', 'revenue']].copy()
        df['month'] = df['month'].map(normalize_month)
        df['category'] = df['category'].astype(str)

        self.regressor.train(df, num_boost_round=self.num_boost_round, verbose=verbose)
        self.categories = [str(c) for c in pd.unique(df['category'])]
        self.training_df = df

        return self

    def train_from_file(self, path: str, verbose: bool = True) -> 'RevenueForecastPipeline':
        transactions = load_transactions(path, kind='month')
        return self.train(transactions, verbose=verbose)

    def predict_revenue(self, category: str, month: Union[int, str]) -> float:
        """Predicted revenue for one (category, month) input"""
        if not self.is_trained:
            raise ValueError("No trained model found. Call train() first.")

        row = pd.DataFrame({'category': [str(category)], 'month': [normalize_month(month)]})
        return float(self.regressor.predict(row)[0])

    def predict_month(self, target_month: Union[int, str], verbose: bool = True) -> List[RevenueForecastResult]:
        """
        Predict revenue for every category seen in training

        Args:
            target_month: Month to forecast ('05', '5' or 5)

        Returns:
            One RevenueForecastResult per training category
        """
        if not self.is_trained:
            raise ValueError("No trained model found. Call train() first.")

        month = normalize_month(target_month)
        inputs = pd.DataFrame({
            'category': self.categories,
            'month': [month] * len(self.categories)
        })
        predictions = self.regressor.predict(inputs)

        results = [
            RevenueForecastResult(category=category, target_month=month, predicted_revenue=float(value))
            for category, value in zip(self.categories, predictions)
        ]

        if verbose:
            print(f"\n  📅 Predicting revenue for all categories in {month}...")
            for result in results:
                print(f"  📊 Predicted revenue for '{result.category}' in {month}: ${result.predicted_revenue:,.2f}")

        return results

    def training_metrics(self, verbose: bool = True) -> Dict[str, float]:
        """In-sample MAE/RMSE/R2 of the fitted model"""
        if not self.is_trained:
            raise ValueError("No trained model found. Call train() first.")

        predicted = self.regressor.predict(self.training_df)
        return evaluate_regression(
            self.training_df['revenue'].values,
            predicted,
            label='Revenue model (in-sample)',
            verbose=verbose
        )

    def save(self, path: str) -> None:
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        joblib.dump(self, path)
        print(f"  📦 Revenue model saved to: {path}")

    @staticmethod
    def load(path: str) -> 'RevenueForecastPipeline':
        pipeline = joblib.load(path)
        if not isinstance(pipeline, RevenueForecastPipeline):
            raise ValueError(f"{path} does not contain a RevenueForecastPipeline")
        return pipeline


def results_to_frame(results: List[RevenueForecastResult]) -> pd.DataFrame:
    return pd.DataFrame(
        [(r.category, r.target_month, r.predicted_revenue) for r in results],
        columns=['category', 'target_month', 'predicted_revenue']
    )
