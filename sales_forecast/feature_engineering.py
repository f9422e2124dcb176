"""
Feature Engineering Module

Encoders shared by the trainers:
- OneHotFeatureEncoder: one-hot vocabularies learned on the training table
- MonthlyFeatureEncoder: month-key one-hot + revenue, min-max normalized,
  with the category mapped to a label space (classification flow)
"""

from typing import Dict, List, Optional

import numpy as np
import pandas as pd
from sklearn.preprocessing import LabelEncoder, MinMaxScaler


class OneHotFeatureEncoder:
    """One-hot encode categorical columns over vocabularies seen at fit time"""

    def __init__(self, columns: List[str]):
        """
        Args:
            columns: Columns to encode, in output order
        """
        self.columns = list(columns)
        self.vocabularies: Dict[str, List[str]] = {}

    def fit(self, df: pd.DataFrame) -> 'OneHotFeatureEncoder':
        for col in self.columns:
            # First-seen order keeps the encoding stable across runs on the same data
            self.vocabularies[col] = [str(v) for v in pd.unique(df[col].astype(str))]
        return self

    @property
    def feature_names(self) -> List[str]:
        """Column names safe for LightGBM (no JSON special characters)"""
        return [
            f"{col}_{i}"
            for col in self.columns
            for i in range(len(self.vocabularies[col]))
        ]

    @property
    def feature_labels(self) -> List[str]:
        """Human readable names, aligned with feature_names"""
        return [
            f"{col}={value}"
            for col in self.columns
            for value in self.vocabularies[col]
        ]

    def transform(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Encode rows; values unseen at fit time encode to all zeros

        Returns:
            Float DataFrame with feature_names columns
        """
        if not self.vocabularies:
            raise ValueError("Encoder is not fitted. Call fit() first.")

        blocks = []
        for col in self.columns:
            vocabulary = self.vocabularies[col]
            codes = pd.Index(vocabulary).get_indexer(df[col].astype(str))
            block = np.zeros((len(df), len(vocabulary)), dtype=float)
            known = codes >= 0
            block[np.flatnonzero(known), codes[known]] = 1.0
            blocks.append(block)

        values = np.hstack(blocks) if blocks else np.zeros((len(df), 0))
        return pd.DataFrame(values, columns=self.feature_names, index=df.index)

    def fit_transform(self, df: pd.DataFrame) -> pd.DataFrame:
        return self.fit(df).transform(df)


class MonthlyFeatureEncoder:
    """Feature vector for month-category aggregates: [one-hot(month_key), revenue] -> min-max"""

    def __init__(self, label_column: str = 'category'):
        self.label_column = label_column
        self.month_encoder = OneHotFeatureEncoder(['month_key'])
        self.label_encoder = LabelEncoder()
        self.scaler = MinMaxScaler()
        self.is_fitted = False

    def _raw_features(self, df: pd.DataFrame) -> np.ndarray:
        month_block = self.month_encoder.transform(df).values
        revenue = df['revenue'].astype(float).values.reshape(-1, 1)
        return np.hstack([month_block, revenue])

    def fit(self, df: pd.DataFrame) -> 'MonthlyFeatureEncoder':
        self.month_encoder.fit(df)
        self.label_encoder.fit(df[self.label_column].astype(str))
        self.scaler.fit(self._raw_features(df))
        self.is_fitted = True
        return self

    def transform(self, df: pd.DataFrame) -> np.ndarray:
        if not self.is_fitted:
            raise ValueError("Encoder is not fitted. Call fit() first.")
        return self.scaler.transform(self._raw_features(df))

    def encode_labels(self, labels: pd.Series) -> np.ndarray:
        return self.label_encoder.transform(labels.astype(str))

    def decode_labels(self, codes: np.ndarray) -> np.ndarray:
        return self.label_encoder.inverse_transform(np.asarray(codes, dtype=int))

    @property
    def classes(self) -> List[str]:
        return list(self.label_encoder.classes_)

    @property
    def feature_names(self) -> List[str]:
        return self.month_encoder.feature_names + ['revenue']

    @property
    def n_features(self) -> int:
        return len(self.feature_names)


def record_to_frame(record, columns: Optional[List[str]] = None) -> pd.DataFrame:
    """Turn a single mapping/Series record into a one-row DataFrame"""
    if isinstance(record, pd.Series):
        record = record.to_dict()
    df = pd.DataFrame([dict(record)])
    if columns is not None:
        missing = [col for col in columns if col not in df.columns]
        if missing:
            raise ValueError(f"Record is missing fields: {missing}")
        df = df[columns]
    return df
