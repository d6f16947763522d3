import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd
from sklearn.linear_model import LogisticRegression
from sklearn.metrics import log_loss

from cvselect.exceptions import DegenerateTrainingSetError
from cvselect.folds import fold_sizes, validate_folds
from cvselect.models import error_rate

logger = logging.getLogger(__name__)

MEASURES = ("deviance", "class")


@dataclass(frozen=True)
class PenalizedPath:
    lambdas: np.ndarray
    cv_error: np.ndarray
    cv_se: np.ndarray
    lambda_min: float
    lambda_1se: float
    coef_min: pd.Series
    coef_1se: pd.Series
    measure: str

    def n_nonzero(self, which="min"):
        coef = self.coef_min if which == "min" else self.coef_1se
        return int((coef.drop("(Intercept)") != 0).sum())


def _fit_l1(X, y, lam):
    # glmnet scaling: mean log-loss + lambda * |beta|_1  <=>  C = 1 / (n * lambda)
    Cval = 1.0 / (len(y) * lam)
    model = LogisticRegression(penalty='l1', C=Cval, solver='liblinear', max_iter=1000)
    model.fit(X, y)
    return model


def _fold_loss(model, X_test, y_test, measure):
    if measure == "deviance":
        proba = model.predict_proba(X_test)[:, 1]
        return 2.0 * log_loss(y_test, proba, labels=[0, 1])
    return error_rate(y_test, model.predict(X_test))


def _weighted_se(test_errors, sizes):
    # Fold-size weighted spread around the weighted mean, over K - 1 (glmnet cvsd)
    K = test_errors.shape[0]
    cv_error = np.average(test_errors, axis=0, weights=sizes)
    variance = np.average((test_errors - cv_error) ** 2, axis=0, weights=sizes)
    return np.sqrt(variance / (K - 1))


def _coefficients(model, feature_names):
    values = np.concatenate([model.intercept_, model.coef_.ravel()])
    return pd.Series(values, index=["(Intercept)"] + list(feature_names))


def l1_logistic_cv(X, y, fold_ids, lambdas, measure="deviance", feature_names=None):
    """
    Cross-validated L1-penalized logistic regression over a lambda grid,
    using the shared fold assignment.

    Parameters:
    - X: array (n, p), y: array (n,) with labels in {0, 1}
    - fold_ids: fold id in 1..K for every row
    - lambdas: positive penalty strengths, evaluated from largest to smallest
    - measure: "deviance" (binomial deviance) or "class" (misclassification rate)

    Returns:
    - PenalizedPath with the fold-size weighted CV curve, its standard error,
      lambda_min, lambda_1se and the full-data coefficients at both
    """
    if measure not in MEASURES:
        raise ValueError(f"measure must be one of {MEASURES}, got '{measure}'")
    lambdas = np.asarray(lambdas, dtype=float)
    if lambdas.size == 0 or np.any(lambdas <= 0):
        raise ValueError("lambdas must be a non-empty grid of positive values")
    lambdas = np.sort(lambdas)[::-1]

    X = np.asarray(X, dtype=float)
    y = np.asarray(y)
    if not set(np.unique(y)).issubset({0, 1}):
        raise ValueError("y must be binary {0,1}")
    y = y.astype(int)
    fold_ids = np.asarray(fold_ids)
    K = validate_folds(fold_ids)
    if feature_names is None:
        feature_names = [f"x{i}" for i in range(X.shape[1])]

    test_errors = np.empty((K, len(lambdas)))
    for k in range(1, K + 1):
        test_mask = fold_ids == k
        X_tr, y_tr = X[~test_mask], y[~test_mask]
        X_te, y_te = X[test_mask], y[test_mask]
        if len(np.unique(y_tr)) < 2:
            raise DegenerateTrainingSetError(f"Training set excluding fold {k} contains a single class")

        for lam_idx, lam in enumerate(lambdas):
            model = _fit_l1(X_tr, y_tr, lam)
            test_errors[k - 1, lam_idx] = _fold_loss(model, X_te, y_te, measure)

    sizes = fold_sizes(fold_ids, K)
    cv_error = np.average(test_errors, axis=0, weights=sizes)
    cv_se = _weighted_se(test_errors, sizes)

    opt_idx = int(np.argmin(cv_error))
    # Largest lambda within one standard error of the minimum
    within = np.flatnonzero(cv_error <= cv_error[opt_idx] + cv_se[opt_idx])
    se_idx = int(within[0])

    lambda_min = float(lambdas[opt_idx])
    lambda_1se = float(lambdas[se_idx])
    logger.info(f"L1 logistic ({measure}): lambda.min={lambda_min:.3g} "
                f"(CV={cv_error[opt_idx]:.4f}), lambda.1se={lambda_1se:.3g}")

    # Refit on all rows
    coef_min = _coefficients(_fit_l1(X, y, lambda_min), feature_names)
    coef_1se = _coefficients(_fit_l1(X, y, lambda_1se), feature_names)

    return PenalizedPath(lambdas, cv_error, cv_se, lambda_min, lambda_1se,
                         coef_min, coef_1se, measure)
