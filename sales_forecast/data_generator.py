"""
Synthetic Data Generator

Generates transaction-level sales data matching the source dataset format:
- Date, Product Category, Quantity, Price per Unit, Total Amount
"""

import os
import pandas as pd
import numpy as np
from typing import Dict, List, Optional, Tuple

SOURCE_COLUMNS = ['Date', 'Product Category', 'Quantity', 'Price per Unit', 'Total Amount']

# Category-specific price points and monthly transaction volume
CATEGORY_PROFILES: Dict[str, Dict] = {
    'Electronics': {'prices': [30, 50, 300, 500], 'volume': 40, 'peak_month': 11, 'amplitude': 0.5},
    'Furniture': {'prices': [50, 300, 500], 'volume': 20, 'peak_month': 4, 'amplitude': 0.3},
    'Clothing': {'prices': [25, 30, 50, 300], 'volume': 55, 'peak_month': 9, 'amplitude': 0.35},
    'Beauty': {'prices': [25, 30, 50], 'volume': 35, 'peak_month': 2, 'amplitude': 0.2},
}

DEFAULT_PROFILE = {'prices': [25, 50, 300], 'volume': 30, 'peak_month': 6, 'amplitude': 0.25}


class SyntheticSalesGenerator:
    """Generate synthetic sale transactions with monthly seasonality"""

    def __init__(self,
                 start_date: str = "2022-01-01",
                 n_months: int = 24,
                 categories: Optional[List[str]] = None,
                 transactions_per_month: Optional[int] = None,
                 seed: int = 42):
        """
        Initialize data generator

        Args:
            start_date: First month to generate
            n_months: Number of months to generate
            categories: List of category names
            transactions_per_month: Override the per-category base volume
            seed: Random seed for reproducibility
        """
        self.start_date = pd.to_datetime(start_date)
        self.n_months = n_months
        self.categories = categories or list(CATEGORY_PROFILES)
        self.transactions_per_month = transactions_per_month
        self.seed = seed

        np.random.seed(seed)

        self.months = pd.date_range(start=self.start_date.replace(day=1), periods=n_months, freq='MS')

    def _profile(self, category: str) -> Dict:
        profile = dict(CATEGORY_PROFILES.get(category, DEFAULT_PROFILE))
        if self.transactions_per_month is not None:
            profile['volume'] = self.transactions_per_month
        return profile

    def _seasonal_factor(self, month: int, profile: Dict) -> float:
        """Annual seasonality peaking at the category's peak month"""
        return 1.0 + profile['amplitude'] * np.cos(2 * np.pi * (month - profile['peak_month']) / 12)

    def generate_transactions(self) -> pd.DataFrame:
        """
        Generate transaction-level data

        Returns:
            DataFrame with SOURCE_COLUMNS
        """
        print("\nGenerating synthetic transaction data...")
        print(f"  Categories: {len(self.categories)}")
        print(f"  Months: {self.months[0].strftime('%Y-%m')} to {self.months[-1].strftime('%Y-%m')}")

        records = []

        for month_start in self.months:
            days_in_month = month_start.days_in_month

            for category in self.categories:
                profile = self._profile(category)
                expected = profile['volume'] * self._seasonal_factor(month_start.month, profile)
                n_transactions = np.random.poisson(max(expected, 1.0))

                for _ in range(n_transactions):
                    day = np.random.randint(1, days_in_month + 1)
                    quantity = np.random.randint(1, 5)
                    unit_price = float(np.random.choice(profile['prices']))

                    records.append({
                        'Date': month_start.replace(day=day).strftime('%Y-%m-%d'),
                        'Product Category': category,
                        'Quantity': quantity,
                        'Price per Unit': unit_price,
                        'Total Amount': round(quantity * unit_price, 2)
                    })

        df = pd.DataFrame(records, columns=SOURCE_COLUMNS)
        df.sort_values('Date', inplace=True, kind='mergesort')
        df.reset_index(drop=True, inplace=True)

        print(f"\n  Generated {len(df):,} transactions")
        print(f"  Total revenue: {df['Total Amount'].sum():,.2f}")
        print("  Transactions per category:")
        print(df['Product Category'].value_counts().to_string())

        return df


def generate_and_save_data(output_path: str = "data/train.csv", **kwargs) -> Tuple[pd.DataFrame, str]:
    """
    Generate synthetic transactions and save to CSV

    Args:
        output_path: Path to save transaction data
        **kwargs: Arguments for SyntheticSalesGenerator

    Returns:
        Tuple of (transactions_df, output_path)
    """
    print("="*60)
    print("GENERATING SYNTHETIC DATA")
    print("="*60)

    generator = SyntheticSalesGenerator(**kwargs)
    df = generator.generate_transactions()

    os.makedirs(os.path.dirname(output_path) if os.path.dirname(output_path) else '.', exist_ok=True)
    df.to_csv(output_path, index=False)

    print(f"\n  Transaction data saved to: {output_path}")

    print("\n" + "="*60)
    print("DATA GENERATION COMPLETE")
    print("="*60)

    return df, output_path
