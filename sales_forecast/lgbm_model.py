"""
LightGBM Model Module

Trains a single pooled LightGBM regression model on transaction-level rows.
Category and month are one-hot encoded, so one model serves every category
and the month effect is shared across them.
"""

import pandas as pd
import numpy as np
import lightgbm as lgb
from typing import Dict, List, Optional, Tuple
import warnings

from .errors import NoDataError
from .feature_engineering import OneHotFeatureEncoder

warnings.filterwarnings('ignore', category=UserWarning, module='lightgbm')


class LGBMRevenueModel:
    """Pooled LightGBM regression of transaction revenue on (category, month)"""

    def __init__(self,
                 params: Optional[Dict] = None,
                 feature_columns: Optional[List[str]] = None,
                 target_col: str = 'revenue'):
        """
        Initialize pooled LightGBM model

        Args:
            params: LightGBM parameters (default: regression tree ensemble params)
            feature_columns: Categorical columns to one-hot encode
            target_col: Column to predict
        """
        if params is None:
            self.default_params = {
                'objective': 'regression',
                'metric': 'mae',
                'boosting_type': 'gbdt',
                'num_leaves': 20,
                'learning_rate': 0.2,
                'min_data_in_leaf': 10,
                'verbose': -1,
                'seed': 42
            }
        else:
            self.default_params = params

        self.feature_columns = feature_columns or ['category', 'month']
        self.target_col = target_col
        self.encoder = OneHotFeatureEncoder(self.feature_columns)
        self.model: Optional[lgb.Booster] = None
        self.feature_importance: Optional[pd.DataFrame] = None

    def prepare_features(self, df: pd.DataFrame) -> Tuple[pd.DataFrame, List[str]]:
        """
        Prepare one-hot feature matrix

        Args:
            df: DataFrame with the feature columns

        Returns:
            X (features), feature_names
        """
        X = self.encoder.transform(df)
        return X, self.encoder.feature_names

    def train(self,
              df: pd.DataFrame,
              num_boost_round: int = 100,
              verbose: bool = True) -> lgb.Booster:
        """
        Train pooled LightGBM model on all categories

        Args:
            df: Transaction-level rows (category, month, revenue)
            num_boost_round: Number of boosting rounds

        Returns:
            Trained LightGBM model
        """
        if len(df) == 0:
            raise NoDataError("Cannot train revenue model on an empty table")

        self.encoder.fit(df)
        X, feature_names = self.prepare_features(df)
        y = df[self.target_col].astype(float).values

        if verbose:
            print("="*60)
            print("TRAINING POOLED LIGHTGBM REVENUE MODEL")
            print("="*60)
            print(f"    Train samples: {len(X)}")
            print(f"    Features: {len(feature_names)} (one-hot {', '.join(self.feature_columns)})")
            print(f"    Categories: {df['category'].nunique()}")
            print(f"    Target ({self.target_col}) - Mean: {y.mean():.2f}, Std: {y.std():.2f}")

        train_data = lgb.Dataset(X, label=y, feature_name=feature_names)

        model = lgb.train(
            self.default_params,
            train_data,
            num_boost_round=num_boost_round
        )

        self.model = model

        importance_df = pd.DataFrame({
            'feature': self.encoder.feature_labels,
            'importance': model.feature_importance(importance_type='gain')
        }).sort_values('importance', ascending=False)

        self.feature_importance = importance_df

        if verbose:
            top = importance_df[importance_df['importance'] > 0].head(5)['feature'].tolist()
            print(f"    Top features: {', '.join(top) if top else 'none'}")
            print(f"    ✓ Pooled LightGBM trained successfully")
            print("="*60)

        return model

    def predict(self, df: pd.DataFrame) -> np.ndarray:
        """
        Predict revenue

        Args:
            df: DataFrame with the feature columns

        Returns:
            Predicted revenue
        """
        if self.model is None:
            raise ValueError("No trained model found. Call train() first.")

        X, _ = self.prepare_features(df)

        predictions = self.model.predict(X)

        return predictions
