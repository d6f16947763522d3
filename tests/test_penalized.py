import numpy as np
import pytest

from cvselect.exceptions import InvalidFoldPartitionError
from cvselect.penalized import _fit_l1, _weighted_se, l1_logistic_cv

LAMBDAS = np.logspace(-4, 0, 8)


def test_path(table, folds):
    path = l1_logistic_cv(table.X, table.y, folds, LAMBDAS, feature_names=table.feature_names)

    assert np.all(np.diff(path.lambdas) < 0)
    assert path.cv_error.shape == (8,)
    assert path.cv_se.shape == (8,)
    assert path.lambda_1se >= path.lambda_min
    assert path.cv_error[list(path.lambdas).index(path.lambda_min)] == path.cv_error.min()
    assert list(path.coef_min.index) == ["(Intercept)", "x0", "x1", "x2"]
    assert path.coef_min["x0"] > 0


def test_misclassification_measure(table, folds):
    path = l1_logistic_cv(table.X, table.y, folds, LAMBDAS, measure="class")
    assert np.all((path.cv_error >= 0) & (path.cv_error <= 1))
    assert list(path.coef_1se.index)[1:] == ["x0", "x1", "x2"]


def test_heavy_penalty_zeroes_the_coefficients(table):
    model = _fit_l1(table.X, table.y, 10.0)
    assert np.all(model.coef_ == 0)


def test_invalid_arguments(table, folds):
    with pytest.raises(ValueError):
        l1_logistic_cv(table.X, table.y, folds, LAMBDAS, measure="auc")
    with pytest.raises(ValueError):
        l1_logistic_cv(table.X, table.y, folds, [0.1, -1.0])
    bad = np.where(folds == 2, 3, folds)
    with pytest.raises(InvalidFoldPartitionError):
        l1_logistic_cv(table.X, table.y, bad, LAMBDAS)


def test_non_binary_labels_are_rejected_before_casting(table, folds):
    y = table.y.astype(float)
    y[0] = 0.5
    with pytest.raises(ValueError):
        l1_logistic_cv(table.X, y, folds, LAMBDAS)


def test_standard_error_is_weighted_by_fold_size():
    test_errors = np.array([[1.0, 0.2], [0.0, 0.2], [0.5, 0.8]])
    sizes = np.array([3, 7, 10])

    cv_se = _weighted_se(test_errors, sizes)

    mean = (3 * 1.0 + 7 * 0.0 + 10 * 0.5) / 20
    variance = (3 * (1.0 - mean) ** 2 + 7 * mean ** 2 + 10 * (0.5 - mean) ** 2) / 20
    assert cv_se[0] == pytest.approx(np.sqrt(variance / 2))
    # The unweighted standard error of the mean differs
    assert cv_se[0] != pytest.approx(np.std(test_errors[:, 0], ddof=1) / np.sqrt(3))
    # Second column: weighted mean 0.5, every deviation 0.3
    assert cv_se[1] == pytest.approx(np.sqrt(0.09 / 2))
