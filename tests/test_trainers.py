"""Tests for the candidate trainers and the shared feature pipeline."""

import warnings

import numpy as np
import pandas as pd
import pytest

from sales_forecast.errors import TrainerFitError
from sales_forecast.feature_engineering import MonthlyFeatureEncoder, OneHotFeatureEncoder
from sales_forecast.trainers import (
    AveragedPerceptronOVATrainer,
    CategoryPrediction,
    LightGBMTrainer,
    SdcaMaxEntTrainer,
    default_trainers,
)


class TestOneHotFeatureEncoder:
    """Tests for OneHotFeatureEncoder."""

    def test_encodes_known_values(self):
        df = pd.DataFrame({"category": ["A", "B", "A"], "month": ["01", "01", "02"]})
        encoder = OneHotFeatureEncoder(["category", "month"]).fit(df)

        X = encoder.transform(df)

        assert X.shape == (3, 4)
        assert X.iloc[0].tolist() == [1.0, 0.0, 1.0, 0.0]
        assert X.iloc[2].tolist() == [1.0, 0.0, 0.0, 1.0]

    def test_unknown_values_encode_to_zeros(self):
        encoder = OneHotFeatureEncoder(["category"]).fit(pd.DataFrame({"category": ["A", "B"]}))

        X = encoder.transform(pd.DataFrame({"category": ["Z"]}))

        assert X.values.sum() == 0.0

    def test_unknown_values_do_not_warn(self):
        encoder = OneHotFeatureEncoder(["month_key"]).fit(pd.DataFrame({"month_key": ["01-2024", "02-2024"]}))

        with warnings.catch_warnings():
            warnings.simplefilter("error")
            X = encoder.transform(pd.DataFrame({"month_key": ["02-2024", "11-2030"]}))

        assert X.values.tolist() == [[0.0, 1.0], [0.0, 0.0]]

    def test_feature_names_are_lightgbm_safe(self):
        df = pd.DataFrame({"category": ['Home, "Garden"', "B:1"]})
        encoder = OneHotFeatureEncoder(["category"]).fit(df)

        for name in encoder.feature_names:
            assert not set(name) & set('[]{}":,')
        assert encoder.feature_labels == ['category=Home, "Garden"', "category=B:1"]

    def test_transform_before_fit_raises(self):
        with pytest.raises(ValueError):
            OneHotFeatureEncoder(["category"]).transform(pd.DataFrame({"category": ["A"]}))


class TestMonthlyFeatureEncoder:
    """Tests for MonthlyFeatureEncoder."""

    def test_features_are_min_max_normalized(self, separable_table):
        encoder = MonthlyFeatureEncoder().fit(separable_table)

        X = encoder.transform(separable_table)

        assert X.shape == (12, 7)
        assert X.min() == pytest.approx(0.0)
        assert X.max() == pytest.approx(1.0)
        assert encoder.feature_names[-1] == "revenue"

    def test_label_round_trip(self, separable_table):
        encoder = MonthlyFeatureEncoder().fit(separable_table)

        codes = encoder.encode_labels(separable_table["category"])

        assert encoder.classes == ["A", "B"]
        assert list(encoder.decode_labels(codes)) == separable_table["category"].tolist()


class TestTrainers:
    """Tests for the concrete trainers."""

    @pytest.mark.parametrize(
        "trainer",
        [SdcaMaxEntTrainer(), LightGBMTrainer(), AveragedPerceptronOVATrainer()],
        ids=["sdca", "lightgbm", "perceptron"],
    )
    def test_fit_predicts_known_labels(self, trainer, separable_table):
        model = trainer.fit(separable_table)

        labels = model.predict_labels(separable_table)

        assert len(labels) == len(separable_table)
        assert set(labels) <= {"A", "B"}
        assert model.name == trainer.name

    def test_sdca_separates_by_revenue(self, separable_table):
        model = SdcaMaxEntTrainer().fit(separable_table)

        labels = model.predict_labels(separable_table)

        assert list(labels) == separable_table["category"].tolist()

    def test_lightgbm_separates_by_revenue(self, separable_table):
        model = LightGBMTrainer().fit(separable_table)

        labels = model.predict_labels(separable_table)

        assert list(labels) == separable_table["category"].tolist()

    def test_single_record_prediction(self, separable_table):
        model = SdcaMaxEntTrainer().fit(separable_table)

        prediction = model.predict({"month_key": "03-2024", "revenue": 1200.0})

        assert isinstance(prediction, CategoryPrediction)
        assert prediction.label == "A"
        assert set(prediction.scores) == {"A", "B"}
        assert prediction.scores["A"] > prediction.scores["B"]

    def test_single_record_with_unseen_month(self, separable_table):
        model = SdcaMaxEntTrainer().fit(separable_table)

        prediction = model.predict(pd.Series({"month_key": "11-2030", "category": "?", "revenue": 5.0}))

        assert prediction.label in {"A", "B"}

    def test_perceptron_binary_scores_have_one_column_per_class(self, separable_table):
        model = AveragedPerceptronOVATrainer().fit(separable_table)

        scores = model.predict_scores(separable_table)

        assert scores.shape == (12, 2)

    def test_perceptron_ignores_weights(self, separable_table):
        table = separable_table.copy()
        table["weight"] = np.nan

        model = AveragedPerceptronOVATrainer().fit(table)

        assert len(model.predict_labels(table)) == len(table)

    def test_weight_column_optional(self, separable_table):
        table = separable_table.drop(columns=["weight"])

        model = SdcaMaxEntTrainer().fit(table, weight_column=None)

        assert len(model.predict_labels(table)) == len(table)

    def test_missing_column_raises_fit_error(self, separable_table):
        table = separable_table.drop(columns=["revenue"])

        with pytest.raises(TrainerFitError) as exc_info:
            SdcaMaxEntTrainer().fit(table)

        assert exc_info.value.trainer_name == "SDCA"

    def test_perceptron_three_classes(self, separable_table):
        extra = separable_table[separable_table["category"] == "B"].copy()
        extra["category"] = "C"
        extra["revenue"] = extra["revenue"] + 500.0
        table = pd.concat([separable_table, extra], ignore_index=True)

        model = AveragedPerceptronOVATrainer().fit(table)

        assert model.classes == ["A", "B", "C"]
        assert model.predict_scores(table).shape == (18, 3)

    def test_learner_type_error_raises_fit_error(self, separable_table):
        class BrokenTrainer(SdcaMaxEntTrainer):
            def _fit_estimator(self, X, y, weights, encoder):
                raise TypeError("unexpected keyword argument")

        with pytest.raises(TrainerFitError) as exc_info:
            BrokenTrainer(name="Broken").fit(separable_table)

        assert exc_info.value.trainer_name == "Broken"
        assert isinstance(exc_info.value.__cause__, TypeError)

    def test_bad_configured_params_raise_fit_error(self, separable_table):
        trainer = AveragedPerceptronOVATrainer(params={"no_such_option": 1})

        with pytest.raises(TrainerFitError):
            trainer.fit(separable_table)

    @pytest.mark.parametrize(
        "trainer",
        [SdcaMaxEntTrainer(), LightGBMTrainer()],
        ids=["sdca", "lightgbm"],
    )
    def test_single_class_raises_fit_error(self, trainer, separable_table):
        table = separable_table[separable_table["category"] == "A"]

        with pytest.raises(TrainerFitError):
            trainer.fit(table)


class TestDefaultTrainers:
    """Tests for default_trainers."""

    def test_default_order(self):
        names = [t.name for t in default_trainers()]

        assert names == ["SDCA", "LightGBM", "AveragedPerceptronOVA"]

    def test_configured_order_and_params(self):
        trainers = default_trainers({
            "trainers": ["LightGBM", "SDCA"],
            "lgbm_num_boost_round": 5,
            "sdca_params": {"C": 0.5},
        })

        assert [t.name for t in trainers] == ["LightGBM", "SDCA"]
        assert trainers[0].num_boost_round == 5
        assert trainers[1].params == {"C": 0.5}

    def test_unknown_trainer_raises(self):
        with pytest.raises(ValueError):
            default_trainers({"trainers": ["SDCA", "FastForest"]})
