"""
Category Trainers Module

Candidate multiclass trainers for the best-seller classifier. Every trainer
shares the same feature pipeline (MonthlyFeatureEncoder) and the same
interface: fit(table, label_column, weight_column) -> CategoryModel.

Trainers:
- SdcaMaxEntTrainer: linear maximum-entropy classifier (multinomial logistic regression)
- LightGBMTrainer: gradient-boosted trees, multiclass objective
- AveragedPerceptronOVATrainer: averaged perceptron, one-versus-all
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

import lightgbm as lgb
import numpy as np
import pandas as pd
from sklearn.linear_model import LogisticRegression, SGDClassifier
from sklearn.multiclass import OneVsRestClassifier

from .errors import TrainerFitError
from .feature_engineering import MonthlyFeatureEncoder, record_to_frame


@dataclass(frozen=True)
class CategoryPrediction:
    label: str
    scores: Dict[str, float]


class CategoryModel:
    """Fitted classifier: encoder + estimator, predicting category labels"""

    def __init__(self, name: str, encoder: MonthlyFeatureEncoder, estimator, score_method: str):
        self.name = name
        self.encoder = encoder
        self.estimator = estimator
        self.score_method = score_method

    def predict_scores(self, df: pd.DataFrame) -> np.ndarray:
        """Per-class scores, shape (n_rows, n_classes), columns in self.classes order"""
        X = self.encoder.transform(df)
        scores = np.asarray(getattr(self.estimator, self.score_method)(X), dtype=float)

        # Binary one-vs-rest reports a single margin column
        if scores.ndim == 1:
            scores = np.column_stack([-scores, scores])

        return scores

    def predict_labels(self, df: pd.DataFrame) -> np.ndarray:
        scores = self.predict_scores(df)
        return self.encoder.decode_labels(scores.argmax(axis=1))

    def predict(self, record) -> CategoryPrediction:
        """
        Predict the category for one record

        Args:
            record: Mapping or Series with month_key and revenue

        Returns:
            CategoryPrediction with the label and per-class scores
        """
        df = record_to_frame(record, columns=['month_key', 'revenue'])
        scores = self.predict_scores(df)[0]
        label = self.encoder.decode_labels([scores.argmax()])[0]
        return CategoryPrediction(
            label=str(label),
            scores={cls: float(score) for cls, score in zip(self.classes, scores)}
        )

    @property
    def classes(self) -> List[str]:
        return self.encoder.classes


class Trainer:
    """Base trainer: shared feature pipeline, learner-specific fit"""

    default_name = 'Trainer'
    uses_weights = True
    score_method = 'predict_proba'

    def __init__(self, name: Optional[str] = None, params: Optional[Dict] = None):
        self.name = name or self.default_name
        self.params = dict(params or {})

    def _fit_estimator(self,
                       X: np.ndarray,
                       y: np.ndarray,
                       weights: Optional[np.ndarray],
                       encoder: MonthlyFeatureEncoder):
        raise NotImplementedError

    def fit(self,
            table: pd.DataFrame,
            label_column: str = 'category',
            weight_column: Optional[str] = 'weight') -> CategoryModel:
        """
        Fit on a month-category table

        Args:
            table: Rows with month_key, revenue, label and (optionally) weight
            label_column: Column holding the category label
            weight_column: Column holding example weights (None to ignore)

        Returns:
            Fitted CategoryModel

        Raises:
            TrainerFitError: the learner cannot fit this table
        """
        try:
            encoder = MonthlyFeatureEncoder(label_column).fit(table)
            X = encoder.transform(table)
            y = encoder.encode_labels(table[label_column])

            weights = None
            if self.uses_weights and weight_column is not None:
                weights = table[weight_column].astype(float).values

            estimator = self._fit_estimator(X, y, weights, encoder)
        except Exception as e:
            raise TrainerFitError(self.name, e) from e

        return CategoryModel(self.name, encoder, estimator, self.score_method)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class SdcaMaxEntTrainer(Trainer):
    """Linear maximum-entropy classifier with example weights"""

    default_name = 'SDCA'

    def _fit_estimator(self, X, y, weights, encoder):
        params = {'C': 1.0, 'max_iter': 1000}
        params.update(self.params)
        estimator = LogisticRegression(**params)
        estimator.fit(X, y, sample_weight=weights)
        return estimator


class LightGBMTrainer(Trainer):
    """Gradient-boosted trees with a multiclass objective and example weights"""

    default_name = 'LightGBM'
    score_method = 'predict'

    def __init__(self,
                 name: Optional[str] = None,
                 params: Optional[Dict] = None,
                 num_boost_round: int = 100):
        super().__init__(name, params)
        self.num_boost_round = num_boost_round

    def _fit_estimator(self, X, y, weights, encoder):
        params = {
            'objective': 'multiclass',
            'boosting_type': 'gbdt',
            'num_leaves': 31,
            'learning_rate': 0.1,
            'min_data_in_leaf': 1,
            'verbose': -1,
            'seed': 42
        }
        params.update(self.params)
        params['num_class'] = len(encoder.classes)

        train_data = lgb.Dataset(
            X,
            label=y,
            weight=weights,
            feature_name=encoder.feature_names
        )
        return lgb.train(params, train_data, num_boost_round=self.num_boost_round)


class AveragedPerceptronOVATrainer(Trainer):
    """Averaged perceptron, one binary learner per class (ignores example weights)"""

    default_name = 'AveragedPerceptronOVA'
    uses_weights = False
    score_method = 'decision_function'

    def _fit_estimator(self, X, y, weights, encoder):
        params = {'max_iter': 10, 'tol': None, 'random_state': 42}
        params.update(self.params)
        estimator = OneVsRestClassifier(SGDClassifier(
            loss='perceptron',
            penalty=None,
            learning_rate='constant',
            eta0=1.0,
            average=True,
            **params
        ))
        estimator.fit(X, y)
        return estimator


def default_trainers(config: Optional[Dict] = None) -> List[Trainer]:
    """
    Build the ordered candidate list (order breaks accuracy ties)

    Args:
        config: CLASSIFIER_CONFIG-style dict (optional)

    Returns:
        Trainers in evaluation order
    """
    config = config or {}
    builders = {
        'SDCA': lambda: SdcaMaxEntTrainer(
            params=config.get('sdca_params')
        ),
        'LightGBM': lambda: LightGBMTrainer(
            params=config.get('lgbm_params'),
            num_boost_round=config.get('lgbm_num_boost_round', 100)
        ),
        'AveragedPerceptronOVA': lambda: AveragedPerceptronOVATrainer(
            params=config.get('perceptron_params')
        ),
    }

    names = config.get('trainers', ['SDCA', 'LightGBM', 'AveragedPerceptronOVA'])
    unknown = [name for name in names if name not in builders]
    if unknown:
        raise ValueError(f"Unknown trainers: {unknown}. Available: {list(builders)}")

    return [builders[name]() for name in names]
