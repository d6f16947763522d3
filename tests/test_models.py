import numpy as np
import pytest

from cvselect.exceptions import DegenerateTrainingSetError
from cvselect.features import FeatureSet
from cvselect.models import (
    DiscriminantClassifier,
    LinearProbabilityFitter,
    best_subsets,
    error_rate,
    fit_logistic,
    logistic_criteria,
)


def test_error_rate():
    assert error_rate([0, 1, 1, 0], [0, 1, 0, 0]) == 0.25


def test_linear_probability_fitter_predicts_unthresholded_values(table):
    model = LinearProbabilityFitter().fit(table.X, table.y)
    yhat = model.predict(table.X)
    assert not set(np.unique(yhat)).issubset({0, 1})


def test_linear_probability_fitter_rejects_empty_and_collinear():
    with pytest.raises(DegenerateTrainingSetError):
        LinearProbabilityFitter().fit(np.empty((0, 2)), np.empty(0))
    X = np.column_stack([np.ones(5), np.arange(5.0)])
    with pytest.raises(DegenerateTrainingSetError):
        LinearProbabilityFitter().fit(X, np.arange(5.0))


def test_best_subsets_one_per_size(table):
    subsets = best_subsets(table.X, table.y)
    assert [s.size for s in subsets] == [1, 2, 3]
    assert subsets[0] == FeatureSet((0,))
    assert subsets[-1] == FeatureSet.all_of(3)


def test_best_subsets_minimise_rss(table):
    fitter = LinearProbabilityFitter()
    chosen = best_subsets(table.X, table.y)[1]
    chosen_rss = fitter.rss(table.select(chosen), table.y)
    for pair in [(0, 1), (0, 2), (1, 2)]:
        assert chosen_rss <= fitter.rss(table.X[:, list(pair)], table.y)


def test_logistic_criteria(table):
    subsets = [FeatureSet((0,)), FeatureSet((0, 1))]
    criteria = logistic_criteria(table.X, table.y, subsets)

    assert set(criteria) == {"AIC", "BIC"}
    assert len(criteria["AIC"]) == 2
    # BIC - AIC = k (log n - 2) for k estimated parameters
    k = np.array([2, 3])
    assert criteria["BIC"] - criteria["AIC"] == pytest.approx(k * (np.log(table.n) - 2))


def test_fit_logistic_names_coefficients(table):
    coef = fit_logistic(table.X, table.y, table.feature_names)
    assert list(coef.index) == ["(Intercept)", "x0", "x1", "x2"]
    assert coef["x0"] > 0


def test_discriminant_rejects_unknown_kind():
    with pytest.raises(ValueError):
        DiscriminantClassifier(kind="cubic")


@pytest.mark.parametrize("kind", ["linear", "quadratic"])
def test_discriminant_cross_validation(table, kind):
    classifier = DiscriminantClassifier(kind=kind, n_folds=5, seed=3)
    result = classifier.cross_validate(table.X, table.y, FeatureSet((0,)))

    assert 0.0 <= result.error_rate < 0.35
    assert result.confusion.to_numpy().sum() == table.n
    misclassified = result.confusion.to_numpy().sum() - np.trace(result.confusion.to_numpy())
    assert misclassified / table.n == pytest.approx(result.error_rate)


def test_discriminant_split_is_reproducible_and_per_subset(table):
    classifier = DiscriminantClassifier(n_folds=5, seed=3)
    a = classifier.cross_validate(table.X, table.y, FeatureSet((0, 1)))
    b = classifier.cross_validate(table.X, table.y, FeatureSet((0, 1)))
    assert a.error_rate == b.error_rate
    assert classifier._split_seed(FeatureSet((0,))) != classifier._split_seed(FeatureSet((1,)))


def test_discriminant_single_class_training_fold():
    X = np.arange(10.0).reshape(-1, 1)
    y = np.zeros(10, dtype=int)
    with pytest.raises(DegenerateTrainingSetError):
        DiscriminantClassifier(n_folds=5).cross_validate(X, y, FeatureSet((0,)))


def test_scorer_returns_error_rate(table):
    classifier = DiscriminantClassifier(n_folds=5, seed=3)
    score = classifier.score(table.X, table.y)
    features = FeatureSet((0, 2))
    assert score(features) == classifier.cross_validate(table.X, table.y, features).error_rate


@pytest.mark.parametrize("kind", ["linear", "quadratic"])
def test_discriminant_rejects_rank_deficient_subset(collinear_table, kind):
    classifier = DiscriminantClassifier(kind=kind, n_folds=5, seed=3)
    with pytest.raises(DegenerateTrainingSetError):
        classifier.cross_validate(collinear_table.X, collinear_table.y, FeatureSet((0, 1)))


def test_quadratic_rejects_constant_predictor_within_a_class(table):
    X = table.X.copy()
    # Constant inside class 0 only; the pooled design stays full rank
    X[table.y == 0, 2] = 0.5
    classifier = DiscriminantClassifier(kind="quadratic", n_folds=5, seed=3)
    with pytest.raises(DegenerateTrainingSetError):
        classifier.cross_validate(X, table.y, FeatureSet((0, 2)))
    linear = DiscriminantClassifier(kind="linear", n_folds=5, seed=3)
    assert 0.0 <= linear.cross_validate(X, table.y, FeatureSet((0, 2))).error_rate <= 1.0
