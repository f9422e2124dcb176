"""
Evaluation Module

Metrics for both forecasts:
- Macro accuracy (mean per-class recall) for the best-seller classifier
- Per-class recall table
- MAE, RMSE, R2 for the revenue regression
"""

from typing import Dict, Optional

import numpy as np
import pandas as pd
from sklearn.metrics import balanced_accuracy_score, recall_score

from .aggregation import aggregate_monthly
from .errors import NoDataError


def calculate_macro_accuracy(actual, predicted) -> float:
    """
    Unweighted mean of per-class recall over the classes present in `actual`

    Args:
        actual: True labels
        predicted: Predicted labels

    Returns:
        Macro accuracy in [0, 1]
    """
    actual = np.asarray(actual).astype(str)
    predicted = np.asarray(predicted).astype(str)

    if len(actual) == 0:
        raise NoDataError("Cannot compute accuracy on an empty table")

    return float(balanced_accuracy_score(actual, predicted))


def calculate_micro_accuracy(actual, predicted) -> float:
    """Share of rows predicted correctly"""
    actual = np.asarray(actual).astype(str)
    predicted = np.asarray(predicted).astype(str)

    if len(actual) == 0:
        raise NoDataError("Cannot compute accuracy on an empty table")

    return float(np.mean(actual == predicted))


def per_class_recall(actual, predicted) -> pd.DataFrame:
    """
    Recall for every class present in `actual`

    Returns:
        DataFrame with category, support, recall
    """
    actual = np.asarray(actual).astype(str)
    predicted = np.asarray(predicted).astype(str)
    classes = sorted(set(actual))

    recalls = recall_score(actual, predicted, labels=classes, average=None, zero_division=0)
    support = pd.Series(actual).value_counts()

    return pd.DataFrame({
        'category': classes,
        'support': [int(support[c]) for c in classes],
        'recall': np.round(recalls, 4)
    })


def calculate_mae(actual: np.ndarray, predicted: np.ndarray) -> float:
    """
    Calculate Mean Absolute Error

    Args:
        actual: Actual values
        predicted: Predicted values

    Returns:
        MAE
    """
    mae = np.mean(np.abs(actual - predicted))
    return mae


def calculate_rmse(actual: np.ndarray, predicted: np.ndarray) -> float:
    """
    Calculate Root Mean Square Error

    Args:
        actual: Actual values
        predicted: Predicted values

    Returns:
        RMSE
    """
    rmse = np.sqrt(np.mean((actual - predicted)**2))
    return rmse


def evaluate_regression(actual: np.ndarray,
                        predicted: np.ndarray,
                        label: Optional[str] = None,
                        verbose: bool = True) -> Dict[str, float]:
    """
    Regression fit summary

    Args:
        actual: Actual values
        predicted: Predicted values
        label: Name for display

    Returns:
        Dictionary of metrics
    """
    actual = np.asarray(actual, dtype=float)
    predicted = np.asarray(predicted, dtype=float)

    if len(actual) == 0:
        raise NoDataError("Cannot evaluate an empty prediction set")

    mae = calculate_mae(actual, predicted)
    rmse = calculate_rmse(actual, predicted)

    # R-squared
    ss_res = np.sum((actual - predicted)**2)
    ss_tot = np.sum((actual - np.mean(actual))**2)
    r2 = 1 - (ss_res / ss_tot) if ss_tot > 0 else np.nan

    metrics = {
        'n_samples': len(actual),
        'MAE': round(float(mae), 2),
        'RMSE': round(float(rmse), 2),
        'R2': round(float(r2), 3),
        'mean_actual': round(float(np.mean(actual)), 2),
        'mean_predicted': round(float(np.mean(predicted)), 2),
    }

    if verbose:
        if label:
            print(f"\n  {label}")
        print(f"    Samples: {metrics['n_samples']}")
        print(f"    MAE:     {metrics['MAE']:.2f}")
        print(f"    RMSE:    {metrics['RMSE']:.2f}")
        print(f"    R²:      {metrics['R2']:.3f}")
        print(f"    Mean Actual:    {metrics['mean_actual']:.2f}")
        print(f"    Mean Predicted: {metrics['mean_predicted']:.2f}")

    return metrics


def evaluate_holdout(model, holdout: pd.DataFrame, verbose: bool = True) -> Dict:
    """
    Score a fitted classifier on the aggregated held-out pool

    Reported next to the in-sample accuracy; never used for model selection.

    Args:
        model: Fitted CategoryModel
        holdout: Held-out triplets (month_key, category, revenue)

    Returns:
        Dictionary with macro/micro accuracy and the per-class recall table
    """
    if len(holdout) == 0:
        raise NoDataError("Held-out pool is empty")

    aggregates = aggregate_monthly(holdout)
    predicted = model.predict_labels(aggregates)
    actual = aggregates['category'].values

    result = {
        'n_samples': len(aggregates),
        'macro_accuracy': calculate_macro_accuracy(actual, predicted),
        'micro_accuracy': calculate_micro_accuracy(actual, predicted),
        'per_class': per_class_recall(actual, predicted)
    }

    if verbose:
        print(f"\n  Held-out evaluation ({model.name}, {result['n_samples']} month-category rows):")
        print(f"    Macro accuracy: {result['macro_accuracy']:.4f}")
        print(f"    Micro accuracy: {result['micro_accuracy']:.4f}")
        print(result['per_class'].to_string(index=False))

    return result
