"""
Transaction Records Module

Parses raw transaction lines into typed records and reads/writes the
transaction datasets used by the pipeline:
- Source dataset: date, category, quantity, unit price, total revenue
- Held-out dataset: Date, Category, ID, UnitsSold, Revenue (one row per held-out triplet)
"""

import math
import os
import re
from dataclasses import dataclass
from typing import Iterable, List, Optional

import pandas as pd

from .errors import NoDataError, ParseError

MIN_FIELDS = 5
MONTH_KEY_FORMAT = '%m-%Y'
MONTH_FORMAT = '%m'

# Full calendar date, optionally followed by a time of day
DATE_PATTERN = re.compile(r'\d{4}-\d{2}-\d{2}([ T]\S.*)?')
DECIMAL_PATTERN = re.compile(r'[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?')

HOLDOUT_HEADER = 'Date,Category,ID,UnitsSold,Revenue'
HOLDOUT_ID = 'dummyId'

TRIPLET_COLUMNS = {
    'month_year': ['month_key', 'category', 'revenue'],
    'month': ['month', 'category', 'revenue'],
}


@dataclass(frozen=True)
class Transaction:
    """One parsed sale. Quantity and unit price are kept as raw text."""
    date: pd.Timestamp
    category: str
    quantity: str
    unit_price: str
    revenue: float

    @property
    def month_key(self) -> str:
        return self.date.strftime(MONTH_KEY_FORMAT)

    @property
    def month(self) -> str:
        return self.date.strftime(MONTH_FORMAT)

    def to_triplet(self, kind: str = 'month_year') -> 'Triplet':
        if kind == 'month_year':
            return Triplet(self.month_key, self.category, self.revenue)
        if kind == 'month':
            return Triplet(self.month, self.category, self.revenue)
        raise ValueError(f"Unknown triplet kind: {kind}")


@dataclass(frozen=True)
class Triplet:
    month_key: str
    category: str
    revenue: float


def _parse_date(text: str) -> pd.Timestamp:
    if not DATE_PATTERN.fullmatch(text):
        raise ValueError(f"invalid date '{text}'")

    try:
        value = pd.to_datetime(text, format='ISO8601')
    except (ValueError, OverflowError) as e:
        raise ValueError(f"invalid date '{text}'") from e

    if pd.isna(value):
        raise ValueError(f"invalid date '{text}'")

    return value


def _parse_revenue(text: str) -> float:
    if not DECIMAL_PATTERN.fullmatch(text):
        raise ValueError(f"invalid revenue '{text}'")

    try:
        value = float(text)
    except ValueError as e:
        raise ValueError(f"invalid revenue '{text}'") from e

    if not math.isfinite(value):
        raise ValueError(f"invalid revenue '{text}'")

    return value


def parse_line(line: str, line_number: Optional[int] = None) -> Transaction:
    """
    Parse one comma-separated transaction line

    Args:
        line: Raw line (date, category, quantity, unit price, total revenue, ...)
        line_number: Physical line number, reported in errors

    Returns:
        Parsed Transaction

    Raises:
        ParseError: fewer than 5 fields, bad date or bad revenue
    """
    parts = [part.strip() for part in line.rstrip('\r\n').split(',')]

    if len(parts) < MIN_FIELDS:
        raise ParseError(
            f"expected at least {MIN_FIELDS} fields, found {len(parts)}",
            line_number, line
        )

    try:
        date = _parse_date(parts[0])
        revenue = _parse_revenue(parts[4])
    except ValueError as e:
        raise ParseError(str(e), line_number, line) from e

    return Transaction(
        date=date,
        category=parts[1],
        quantity=parts[2],
        unit_price=parts[3],
        revenue=revenue
    )


def triplets_to_frame(triplets: Iterable[Triplet], kind: str = 'month_year') -> pd.DataFrame:
    """Collect triplets into a DataFrame (month_key|month, category, revenue)"""
    columns = TRIPLET_COLUMNS[kind]
    rows = [(t.month_key, t.category, t.revenue) for t in triplets]
    df = pd.DataFrame(rows, columns=columns)
    df['revenue'] = df['revenue'].astype(float)
    return df


def load_transactions(path: str,
                      kind: str = 'month_year',
                      skip_header: bool = True) -> pd.DataFrame:
    """
    Load a transaction CSV into triplets

    Any malformed row aborts loading; rows are never skipped.

    Args:
        path: CSV path
        kind: 'month_year' for MM-YYYY keys, 'month' for MM keys
        skip_header: Ignore the first line

    Returns:
        DataFrame with columns [month_key|month, category, revenue]
    """
    if kind not in TRIPLET_COLUMNS:
        raise ValueError(f"Unknown triplet kind: {kind}")

    triplets: List[Triplet] = []

    with open(path, 'r', encoding='utf-8') as f:
        for line_number, line in enumerate(f, start=1):
            if skip_header and line_number == 1:
                continue
            if not line.strip():
                continue
            triplets.append(parse_line(line, line_number).to_triplet(kind))

    if not triplets:
        raise NoDataError(f"No transactions found in {path}")

    return triplets_to_frame(triplets, kind)


def month_key_to_timestamp(month_key: pd.Series) -> pd.Series:
    """Convert MM-YYYY keys to month-start timestamps (for chronological ordering)"""
    return pd.to_datetime(month_key, format=MONTH_KEY_FORMAT)


def save_holdout_dataset(test_pool: pd.DataFrame, path: str) -> None:
    """
    Write the held-out pool as day-level rows

    Each triplet becomes one row dated on the first day of its month, with a
    placeholder ID and zero units. The file is overwritten.

    Args:
        test_pool: DataFrame with month_key, category, revenue
        path: Output CSV path
    """
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    dates = month_key_to_timestamp(test_pool['month_key']).dt.strftime('%Y-%m-01')

    lines = [HOLDOUT_HEADER]
    for date, category, revenue in zip(dates, test_pool['category'], test_pool['revenue']):
        lines.append(f"{date},{category},{HOLDOUT_ID},0,{float(revenue)!r}")

    with open(path, 'w', encoding='utf-8', newline='') as f:
        f.write('\n'.join(lines) + '\n')

    print(f"  Held-out dataset saved to: {path} ({len(test_pool):,} rows)")
