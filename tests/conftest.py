"""Pytest configuration and shared fixtures."""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

from sales_forecast.trainers import CategoryPrediction


@pytest.fixture
def write_lines(tmp_path):
    """Write lines to a CSV under tmp_path and return its path."""

    def _write(lines, name="train.csv"):
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture
def separable_table():
    """Weighted month-category rows where revenue alone separates A from B."""
    months = [f"{m:02d}-2024" for m in range(1, 7)]
    rows = []
    for i, month in enumerate(months):
        rows.append({"month_key": month, "category": "A", "revenue": 1000.0 + 100 * i})
        rows.append({"month_key": month, "category": "B", "revenue": 10.0 + 10 * i})
    df = pd.DataFrame(rows)
    df["weight"] = 1.0 / 6
    return df


class StubModel:
    """Model whose predictions are fixed by a lookup on the row's actual category."""

    def __init__(self, mapping, name="Stub"):
        self.mapping = mapping
        self.name = name
        self.predicted_rows = []

    def predict(self, record):
        self.predicted_rows.append(dict(record))
        label = self.mapping[record["category"]]
        return CategoryPrediction(label=label, scores={label: 1.0})

    def predict_labels(self, df):
        return np.array([self.mapping[c] for c in df["category"]])


class StubTrainer:
    """Trainer returning a StubModel (or raising) without learning anything."""

    def __init__(self, name, mapping=None, error=None):
        self.name = name
        self.mapping = mapping or {}
        self.error = error
        self.fit_calls = 0

    def fit(self, table, label_column="category", weight_column="weight"):
        self.fit_calls += 1
        if self.error is not None:
            raise self.error
        mapping = {c: self.mapping.get(c, c) for c in table[label_column].unique()}
        return StubModel(mapping, name=self.name)


@pytest.fixture
def stub_model_cls():
    return StubModel


@pytest.fixture
def stub_trainer_cls():
    return StubTrainer
