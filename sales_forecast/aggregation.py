"""
Data Aggregation Module

Aggregates transaction triplets to month-category level and computes
class-balancing weights for the training aggregates.
"""

import pandas as pd

from .records import month_key_to_timestamp


def aggregate_monthly(triplets: pd.DataFrame, verbose: bool = False) -> pd.DataFrame:
    """
    Sum revenue per (month_key, category)

    Only combinations present in the input produce a row (no zero-fill).
    Running this on its own output returns the same rows.

    Args:
        triplets: DataFrame with month_key, category, revenue

    Returns:
        DataFrame with one row per (month_key, category), sorted
        chronologically then by category
    """
    monthly_df = (
        triplets.groupby(['month_key', 'category'], sort=False)['revenue']
        .sum()
        .reset_index()
    )

    # MM-YYYY does not sort lexically by time
    monthly_df['_period'] = month_key_to_timestamp(monthly_df['month_key'])
    monthly_df.sort_values(['_period', 'category'], inplace=True, kind='mergesort')
    monthly_df.drop(columns=['_period'], inplace=True)
    monthly_df.reset_index(drop=True, inplace=True)

    if verbose:
        print(f"\n  Aggregated {len(triplets):,} triplets to {len(monthly_df):,} month-category rows")
        print(f"    Months: {monthly_df['month_key'].nunique()}")
        print(f"    Categories: {monthly_df['category'].nunique()}")

    return monthly_df


def compute_class_weights(aggregates: pd.DataFrame, verbose: bool = False) -> pd.DataFrame:
    """
    Weight each row by the inverse of its category's row count

    The weights of every category sum to 1.

    Args:
        aggregates: Aggregated training rows

    Returns:
        Copy of the input with a 'weight' column
    """
    weighted_df = aggregates.copy()
    counts = weighted_df.groupby('category')['category'].transform('count')
    weighted_df['weight'] = 1.0 / counts

    if verbose:
        print("\n  Class-balancing weights:")
        summary = weighted_df.groupby('category').agg(
            rows=('weight', 'size'),
            weight=('weight', 'first')
        ).round(4)
        print(summary.to_string())

    return weighted_df


def validate_aggregated_data(df: pd.DataFrame) -> bool:
    """
    Validate aggregated month-category data

    Args:
        df: Month-category DataFrame

    Returns:
        True if validation passes
    """
    print("\n" + "="*60)
    print("VALIDATING AGGREGATED DATA")
    print("="*60)

    checks_passed = True

    required_cols = ['month_key', 'category', 'revenue']
    missing_cols = [col for col in required_cols if col not in df.columns]
    if missing_cols:
        print(f"  ✗ Missing columns: {missing_cols}")
        print("="*60)
        return False
    print(f"  ✓ All required columns present")

    if df[required_cols].isna().any().any():
        print(f"  ✗ Missing values in key columns")
        checks_passed = False
    else:
        print(f"  ✓ No missing values in key columns")

    if df.duplicated(subset=['month_key', 'category']).any():
        print(f"  ✗ Duplicate month-category rows")
        checks_passed = False
    else:
        print(f"  ✓ One row per month-category")

    if (df['revenue'] < 0).any():
        print(f"  ⚠ Negative revenue found")
    else:
        print(f"  ✓ No negative revenue")

    if 'weight' in df.columns:
        weight_sums = df.groupby('category')['weight'].sum()
        if ((weight_sums - 1.0).abs() > 1e-6).any():
            print(f"  ✗ Category weights do not sum to 1")
            checks_passed = False
        else:
            print(f"  ✓ Category weights sum to 1")

    if checks_passed:
        print("\n✓ All validation checks passed!")
    else:
        print("\n✗ Some validation checks failed!")

    print("="*60)

    return checks_passed
