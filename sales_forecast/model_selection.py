"""
Model Selection Module

Fits every candidate trainer on the same weighted month-category table,
scores each by macro accuracy on that same table and keeps the best one.
Candidates are scored in-sample; ties keep the earlier-listed candidate.
"""

from dataclasses import dataclass, replace
from functools import reduce
from typing import List, Optional, Sequence

import pandas as pd

from .errors import NoDataError
from .evaluation import calculate_macro_accuracy
from .trainers import CategoryModel, Trainer


@dataclass(frozen=True)
class Candidate:
    name: str
    trainer: Trainer
    model: Optional[CategoryModel] = None
    macro_accuracy: Optional[float] = None


@dataclass(frozen=True)
class SelectionResult:
    best: Candidate
    candidates: List[Candidate]

    @property
    def model(self) -> CategoryModel:
        return self.best.model

    @property
    def name(self) -> str:
        return self.best.name

    @property
    def macro_accuracy(self) -> float:
        return self.best.macro_accuracy

    def summary(self) -> pd.DataFrame:
        """One row per candidate with its macro accuracy and selection flag"""
        return pd.DataFrame({
            'model': [c.name for c in self.candidates],
            'macro_accuracy': [c.macro_accuracy for c in self.candidates],
            'selected': [c is self.best for c in self.candidates]
        })


def evaluate_candidate(candidate: Candidate,
                       table: pd.DataFrame,
                       label_column: str = 'category',
                       weight_column: Optional[str] = 'weight',
                       verbose: bool = True) -> Candidate:
    """
    Fit a candidate's trainer and score it on the table it was fit on

    Returns:
        A new Candidate with model and macro_accuracy filled in
    """
    if verbose:
        print(f"\n  🔧 Training model: {candidate.name}...")

    model = candidate.trainer.fit(table, label_column=label_column, weight_column=weight_column)
    predicted = model.predict_labels(table)
    accuracy = calculate_macro_accuracy(table[label_column].values, predicted)

    if verbose:
        print(f"  ✓ {candidate.name} Accuracy (Macro): {accuracy:.4f}")

    return replace(candidate, model=model, macro_accuracy=accuracy)


def _keep_better(best: Optional[Candidate], candidate: Candidate) -> Candidate:
    if best is None or candidate.macro_accuracy > best.macro_accuracy:
        return candidate
    return best


def select_best_model(table: pd.DataFrame,
                      trainers: Sequence[Trainer],
                      label_column: str = 'category',
                      weight_column: Optional[str] = 'weight',
                      verbose: bool = True) -> SelectionResult:
    """
    Train every candidate and select the one with the highest macro accuracy

    Args:
        table: Weighted month-category training rows
        trainers: Candidate trainers, in tie-break order
        label_column: Label column
        weight_column: Example weight column

    Returns:
        SelectionResult with the best candidate and all evaluated candidates

    Raises:
        NoDataError: the training table is empty
        TrainerFitError: a candidate could not be fit (aborts the run)
    """
    if len(table) == 0:
        raise NoDataError("Training table is empty")
    if not trainers:
        raise ValueError("At least one trainer is required")

    if verbose:
        print("="*60)
        print("TRAINING CANDIDATE CLASSIFIERS")
        print("="*60)
        print(f"  Training rows: {len(table):,}")
        print(f"  Classes: {table[label_column].nunique()}")
        print(f"  Candidates: {', '.join(t.name for t in trainers)}")

    evaluated = [
        evaluate_candidate(
            Candidate(name=trainer.name, trainer=trainer),
            table,
            label_column=label_column,
            weight_column=weight_column,
            verbose=verbose
        )
        for trainer in trainers
    ]

    best = reduce(_keep_better, evaluated, None)

    if verbose:
        print(f"\n  🏆 Best model selected: {best.name} with MacroAccuracy: {best.macro_accuracy:.4f}")
        print("="*60)

    return SelectionResult(best=best, candidates=evaluated)
