"""
Stratified Split Module

Splits transaction triplets into a training pool and a held-out pool,
independently per category, so that every category contributes the same
share of its rows to the held-out pool regardless of how frequent it is.
"""

from typing import Optional, Tuple

import numpy as np
import pandas as pd

from .errors import NoDataError


def holdout_size(category_count: int, test_fraction: float = 0.2) -> int:
    """Number of held-out rows for a category: floor(test_fraction * count)"""
    return int(np.floor(category_count * test_fraction))


def stratified_split(triplets: pd.DataFrame,
                     test_fraction: float = 0.2,
                     rng: Optional[np.random.Generator] = None,
                     seed: Optional[int] = None,
                     verbose: bool = True) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Randomly partition each category's triplets into train and test pools

    Every category is shuffled with its own uniform permutation. Items whose
    rank in that permutation is below floor(test_fraction * count) go to the
    test pool; the rest go to the train pool.

    Args:
        triplets: DataFrame with month_key, category, revenue
        test_fraction: Share of each category held out
        rng: Random generator (takes precedence over seed)
        seed: Seed for a new generator; None means unseeded

    Returns:
        train_pool, test_pool
    """
    if len(triplets) == 0:
        raise NoDataError("Cannot split an empty transaction set")

    if not 0.0 <= test_fraction < 1.0:
        raise ValueError(f"test_fraction must be in [0, 1), got {test_fraction}")

    if rng is None:
        rng = np.random.default_rng(seed)

    train_parts = []
    test_parts = []

    for category, cat_df in triplets.groupby('category', sort=False):
        order = rng.permutation(len(cat_df))
        shuffled = cat_df.iloc[order]
        n_test = holdout_size(len(cat_df), test_fraction)

        test_parts.append(shuffled.iloc[:n_test])
        train_parts.append(shuffled.iloc[n_test:])

    train_pool = pd.concat(train_parts).reset_index(drop=True)
    test_pool = pd.concat(test_parts).reset_index(drop=True)

    if verbose:
        print(f"\n  Stratified split ({test_fraction:.0%} held out per category):")
        print(f"    Total triplets: {len(triplets):,}")
        print(f"    Train pool: {len(train_pool):,}")
        print(f"    Test pool: {len(test_pool):,}")
        counts = pd.DataFrame({
            'train': train_pool['category'].value_counts(),
            'test': test_pool['category'].value_counts()
        }).fillna(0).astype(int)
        print(counts.to_string())

    return train_pool, test_pool
