"""
Unit tests for feature encoding, the evaluation protocol and the decision tree adapter.
"""

import math

import numpy as np
import pandas as pd
import pytest

from stroke_risk.exceptions import FitError
from stroke_risk.pipeline.evaluation import (
    TrainedEvaluation,
    evaluate,
    evaluate_trained,
    run_trained_evaluation,
    split_train_test,
    tally,
)
from stroke_risk.pipeline.preprocessing import (
    FEATURE_NAMES,
    DataValidator,
    build_feature_matrix,
    get_labels,
    oversample_positives,
    to_feature_vector,
)
from stroke_risk.pipeline.rule_based import predict_rule_label
from stroke_risk.pipeline.trained_classifier import (
    build_estimator,
    predict_many,
    predict_one,
    train,
    train_on_records,
)
from stroke_risk.utils.model_utils import ConfusionCounts
from tests.conftest import make_record


# Test preprocessing
class TestFeatureEncoding:
    """Test record to feature vector encoding."""

    def test_vector_layout(self, high_risk_record):
        vector = to_feature_vector(high_risk_record)

        assert len(vector) == len(FEATURE_NAMES) == 6
        assert vector == [70.0, 0.0, 1.0, 1.0, 100.0, 22.0]
        assert all(isinstance(v, float) for v in vector)

    @pytest.mark.parametrize("value,expected", [
        ("Yes", 1.0),
        ("No", 0.0),
        ("", 0.0),
        ("yes", 0.0),
        ("YES", 0.0),
        (" Yes", 0.0),
    ])
    def test_married_flag_is_exact_match(self, value, expected):
        assert to_feature_vector(make_record(ever_married=value))[3] == expected

    def test_missing_bmi_stays_nan(self):
        vector = to_feature_vector(make_record(bmi=float("nan")))
        assert math.isnan(vector[5])

    def test_feature_matrix(self, sample_records):
        matrix = build_feature_matrix(sample_records)

        assert matrix.shape == (len(sample_records), 6)
        assert matrix[0].tolist() == to_feature_vector(sample_records[0])

    def test_empty_feature_matrix(self):
        assert build_feature_matrix([]).shape == (0, 6)

    def test_labels(self, sample_records):
        labels = get_labels(sample_records)
        assert labels.tolist() == [1, 1, 1, 1, 0, 0, 0, 0, 0, 0, 0, 0]


class TestOversampling:
    """Test deterministic positive-class duplication."""

    def test_size_and_multiplicity(self, sample_records):
        n = len(sample_records)
        positives = [r for r in sample_records if r.stroke == 1]

        augmented = oversample_positives(sample_records)

        assert len(augmented) == n + 3 * len(positives)
        for record in sample_records:
            count = sum(1 for r in augmented if r is record)
            assert count == (4 if record.stroke == 1 else 1)

    def test_original_order_is_preserved(self, sample_records):
        augmented = oversample_positives(sample_records)
        positives = [r for r in sample_records if r.stroke == 1]

        assert augmented[:len(sample_records)] == sample_records
        assert augmented[len(sample_records):] == positives * 3

    def test_deterministic(self, sample_records):
        assert oversample_positives(sample_records) == oversample_positives(sample_records)

    def test_input_not_mutated(self, sample_records):
        before = list(sample_records)
        oversample_positives(sample_records)
        assert sample_records == before

    def test_custom_copies_and_no_positives(self, low_risk_record):
        assert oversample_positives([low_risk_record], copies=5) == [low_risk_record]
        with pytest.raises(ValueError):
            oversample_positives([low_risk_record], copies=-1)


class TestDataValidator:
    """Test stroke data validation rules."""

    def test_stroke_rules(self):
        validator = DataValidator()
        validator.setup_stroke_rules()

        df = pd.DataFrame({
            'age': [25, 130, 45],  # 130 > 120
            'avg_glucose_level': [90.0, 0.0, 120.0],  # 0 is not > 0
            'bmi': [22, 5, np.nan],  # 5 < 10, missing rate 33%
            'ever_married': ['Yes', 'No', 'maybe'],
        })

        violations = validator.validate(df)

        assert 'age' in violations
        assert 'avg_glucose_level' in violations
        assert 'ever_married' in violations
        assert any('Missing rate' in v for v in violations['bmi'])
        assert any('below minimum 10' in v for v in violations['bmi'])

    def test_clean_frame(self, sample_frame):
        validator = DataValidator()
        validator.setup_stroke_rules()
        frame = sample_frame.assign(bmi=[22.0, 30.0, 25.0])

        assert validator.validate(frame) == {}


# Test evaluation harness
class TestEvaluate:
    """Test the confusion-count fold."""

    def test_end_to_end_scenarios(self, high_risk_record, moderate_risk_record, low_risk_record):
        assert evaluate([high_risk_record], predict_rule_label) == ConfusionCounts(tp=1)
        assert evaluate([moderate_risk_record], predict_rule_label) == ConfusionCounts(fp=1)
        assert evaluate([low_risk_record], predict_rule_label) == ConfusionCounts(tn=1)

        missed = make_record(age=30, stroke=1)
        assert evaluate([missed], predict_rule_label) == ConfusionCounts(fn=1)

    def test_conservation(self, sample_records):
        counts = evaluate(sample_records, predict_rule_label)
        assert counts.tp + counts.fp + counts.tn + counts.fn == len(sample_records)

    def test_order_independent(self, sample_records):
        forward = evaluate(sample_records, predict_rule_label)
        backward = evaluate(list(reversed(sample_records)), predict_rule_label)
        assert forward == backward

    def test_rule_based_counts(self, sample_records):
        counts = evaluate(sample_records, predict_rule_label)
        # Positives: HIGH, HIGH, MODERATE, LOW. Negatives: MODERATE for the
        # 45 year old with glucose 170, LOW for the rest.
        assert counts == ConfusionCounts(tp=3, fp=1, tn=7, fn=1)

    def test_empty(self):
        assert evaluate([], predict_rule_label) == ConfusionCounts()

    def test_non_binary_prediction_rejected(self, low_risk_record):
        with pytest.raises(ValueError):
            evaluate([low_risk_record], lambda record: 2)

    def test_fractional_prediction_rejected(self, low_risk_record):
        with pytest.raises(ValueError):
            evaluate([low_risk_record], lambda record: 0.7)

    def test_tally_accepts_numpy_pairs(self):
        counts = tally(zip(np.array([1, 0, 1, 0]), np.array([1, 1, 0, 0])))
        assert counts == ConfusionCounts(tp=1, fp=1, tn=1, fn=1)


class TestSplit:
    """Test the shuffled train/test split."""

    def test_sizes(self):
        X = np.arange(100, dtype=float).reshape(50, 2)
        y = np.array([0, 1] * 25)

        X_train, X_test, y_train, y_test = split_train_test(X, y, test_size=0.2, random_state=1)

        assert len(X_train) == len(y_train) == 40
        assert len(X_test) == len(y_test) == 10

    def test_seeded_split_is_reproducible(self):
        X = np.arange(60, dtype=float).reshape(30, 2)
        y = np.array([0, 1, 1] * 10)

        first = split_train_test(X, y, random_state=11)
        second = split_train_test(X, y, random_state=11)
        third = split_train_test(X, y, random_state=np.random.RandomState(11))

        for a, b, c in zip(first, second, third):
            np.testing.assert_array_equal(a, b)
            np.testing.assert_array_equal(a, c)

    def test_rows_stay_paired(self):
        X = np.arange(20, dtype=float).reshape(20, 1)
        y = (np.arange(20) % 2)

        X_train, X_test, y_train, y_test = split_train_test(X, y, random_state=3)

        assert ((X_train[:, 0] % 2) == y_train).all()
        assert ((X_test[:, 0] % 2) == y_test).all()


# Test trained classifier adapter
class TestTrain:
    """Test fitting the decision tree."""

    def test_fit_and_predict(self, sample_records):
        X = build_feature_matrix(sample_records)
        y = get_labels(sample_records)

        model = train(X, y)

        np.testing.assert_array_equal(model.predict(X), y)

    def test_length_mismatch(self, sample_records):
        X = build_feature_matrix(sample_records)
        y = get_labels(sample_records)[:-1]

        with pytest.raises(FitError, match="mismatch"):
            train(X, y)

    def test_single_class(self, low_risk_record):
        X = build_feature_matrix([low_risk_record] * 5)

        with pytest.raises(FitError, match="single class"):
            train(X, np.zeros(5, dtype=int))

    def test_empty(self):
        with pytest.raises(FitError):
            train(np.empty((0, 6)), np.empty(0, dtype=int))

    def test_wrong_width(self):
        with pytest.raises(FitError):
            train(np.zeros((4, 3)), np.array([0, 1, 0, 1]))

    def test_estimator_error_is_chained(self, sample_records):
        X = build_feature_matrix(sample_records)
        y = get_labels(sample_records)

        with pytest.raises(FitError) as excinfo:
            train(X, y, params={'decision_tree': {'max_depth': -1}})
        assert excinfo.value.__cause__ is not None

    def test_build_estimator_uses_config(self):
        estimator = build_estimator({
            'imputation_strategy': 'mean',
            'decision_tree': {'max_depth': 3, 'random_state': 5},
        })

        assert estimator.named_steps['imputer'].strategy == 'mean'
        assert estimator.named_steps['model'].max_depth == 3
        assert estimator.named_steps['model'].random_state == 5


class TestPredict:
    """Test single and batch inference."""

    def test_predict_one_matches_training_labels(self, sample_records):
        model = train_on_records(sample_records)

        for record in sample_records:
            assert predict_one(model, record) == record.stroke

    def test_predict_one_returns_int(self, sample_records, high_risk_record):
        model = train_on_records(sample_records)
        prediction = predict_one(model, high_risk_record)

        assert type(prediction) is int
        assert prediction in (0, 1)

    def test_single_and_batch_agree(self, sample_records):
        model = train_on_records(sample_records)

        batch = predict_many(model, sample_records)

        assert batch.tolist() == [predict_one(model, r) for r in sample_records]
        assert predict_many(model, []).shape == (0,)

    def test_model_is_reusable(self, sample_records, low_risk_record):
        model = train_on_records(sample_records)
        assert predict_one(model, low_risk_record) == predict_one(model, low_risk_record)


class TestTrainedEvaluation:
    """Test the oversample, split, train, score protocol."""

    def test_counts_cover_test_set(self, sample_records):
        result = evaluate_trained(sample_records, random_state=0)

        # 12 records with 4 positives -> 24 after oversampling -> 5 held out
        assert isinstance(result, TrainedEvaluation)
        assert result.train_size == 19
        assert result.test_size == 5
        assert result.counts.total == 5

    def test_reproducible_with_seed(self, sample_records):
        first = evaluate_trained(sample_records, random_state=4)
        second = evaluate_trained(sample_records, random_state=4)
        assert first.counts == second.counts

    def test_run_trained_evaluation(self, sample_records, high_risk_record):
        acc, rec, model = run_trained_evaluation(sample_records, random_state=0)

        assert 0.0 <= acc <= 1.0
        assert 0.0 <= rec <= 1.0
        assert predict_one(model, high_risk_record) in (0, 1)

    def test_all_negative_records_fail(self, low_risk_record):
        records = [low_risk_record] * 10
        with pytest.raises(FitError):
            run_trained_evaluation(records)

    def test_empty_records_fail(self):
        with pytest.raises(FitError):
            evaluate_trained([], random_state=0)


if __name__ == "__main__":
    pytest.main([__file__])
