import logging
from dataclasses import dataclass

import numpy as np

from cvselect.exceptions import DegenerateTrainingSetError
from cvselect.features import FeatureSet
from cvselect.folds import validate_folds
from cvselect.models import LinearProbabilityFitter, squared_error

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CVResult:
    fold_errors: np.ndarray
    fold_sizes: np.ndarray
    error: float


def cross_validate(X, y, fold_ids, fitter=None, features=None):
    """
    K-fold cross-validated mean squared error of the fitter on the given
    feature subset.

    Parameters:
    - X: array (n, p), predictor matrix
    - y: array (n,), labels
    - fold_ids: array (n,), fold id in 1..K for every row
    - fitter: object with fit(X, y) returning a model with predict(X);
      defaults to the OLS linear probability model
    - features: FeatureSet, defaults to all columns of X

    Returns:
    - CVResult with per-fold MSE, fold sizes and their fold-size weighted mean
    """
    X = np.asarray(X, dtype=float)
    y = np.asarray(y, dtype=float)
    fold_ids = np.asarray(fold_ids)
    if len(y) != X.shape[0] or len(fold_ids) != X.shape[0]:
        raise ValueError("X, y and fold_ids must have the same number of rows")

    K = validate_folds(fold_ids)
    if features is None:
        features = FeatureSet.all_of(X.shape[1])
    if max(features.indices) >= X.shape[1]:
        raise ValueError(f"Feature indices {features.indices} out of range for {X.shape[1]} predictors")
    fitter = fitter or LinearProbabilityFitter()

    X = X[:, list(features.indices)]
    fold_errors = np.empty(K)
    sizes = np.empty(K, dtype=int)

    for k in range(1, K + 1):
        test_mask = fold_ids == k
        train_mask = ~test_mask
        if not train_mask.any():
            raise DegenerateTrainingSetError(f"Training set excluding fold {k} is empty")

        # Train model
        model = fitter.fit(X[train_mask], y[train_mask])

        # Calculate error
        yhat = model.predict(X[test_mask])
        fold_errors[k - 1] = np.mean(squared_error(y[test_mask], yhat))
        sizes[k - 1] = test_mask.sum()

    error = float(np.average(fold_errors, weights=sizes))
    logger.debug(f"CV error for {features.indices}: {error:.6f}")
    return CVResult(fold_errors, sizes, error)


def evaluate(X, y, fold_ids, fitter=None, features=None):
    return cross_validate(X, y, fold_ids, fitter=fitter, features=features).error
