import logging
from dataclasses import dataclass
from itertools import combinations

import numpy as np
import pandas as pd
import statsmodels.api as sm
from sklearn.discriminant_analysis import LinearDiscriminantAnalysis, QuadraticDiscriminantAnalysis
from sklearn.linear_model import LinearRegression
from sklearn.metrics import confusion_matrix
from sklearn.model_selection import KFold

from cvselect.exceptions import DegenerateTrainingSetError
from cvselect.features import FeatureSet

logger = logging.getLogger(__name__)


# ---------- Utilities ----------
def error_rate(y_true, y_pred):
    return np.mean(np.asarray(y_true) != np.asarray(y_pred))


def squared_error(y_true, y_pred):
    y_true = np.asarray(y_true, dtype=float).ravel()
    y_pred = np.asarray(y_pred, dtype=float).ravel()
    return (y_true - y_pred) ** 2


def _check_rank(X):
    X = np.asarray(X, dtype=float)
    if X.shape[0] == 0:
        raise DegenerateTrainingSetError("Training set is empty")
    design = np.column_stack([np.ones(X.shape[0]), X])
    rank = np.linalg.matrix_rank(design)
    if rank < design.shape[1]:
        raise DegenerateTrainingSetError(
            f"Design matrix is rank deficient (rank {rank} < {design.shape[1]} columns)"
        )


# ---------- Linear probability model (OLS) ----------
class LinearProbabilityFitter:
    """
    Ordinary least squares on a 0/1 label. Predictions are not thresholded,
    so held-out errors are squared errors on the probability scale.
    """

    def fit(self, X, y):
        _check_rank(X)
        model = LinearRegression(fit_intercept=True)
        model.fit(np.asarray(X, dtype=float), np.asarray(y, dtype=float))
        return model

    def rss(self, X, y):
        model = self.fit(X, y)
        return float(np.sum(squared_error(y, model.predict(X))))


def best_subsets(X, y, fitter=None):
    """
    Best-subset selection: for each size k = 1..p, the subset with the
    smallest in-sample residual sum of squares. Ties keep the first subset
    in combination order.
    """
    fitter = fitter or LinearProbabilityFitter()
    X = np.asarray(X, dtype=float)
    p = X.shape[1]

    chosen = []
    for size in range(1, p + 1):
        best_rss, best_combo = np.inf, None
        for combo in combinations(range(p), size):
            rss = fitter.rss(X[:, list(combo)], y)
            if rss < best_rss:
                best_rss, best_combo = rss, combo
        logger.debug(f"Best subset of size {size}: {best_combo} (RSS={best_rss:.4f})")
        chosen.append(FeatureSet(best_combo))
    return chosen


# ---------- Logistic regression (binomial GLM) ----------
def _fit_logit(X, y):
    exog = sm.add_constant(np.asarray(X, dtype=float), prepend=True, has_constant="add")
    return sm.Logit(np.asarray(y, dtype=float), exog).fit(disp=False)


def logistic_criteria(X, y, subsets):
    """
    AIC and BIC of a logistic regression fitted on all rows for each subset.
    Output:     dict with keys "AIC", "BIC" mapping to arrays aligned with subsets
    """
    X = np.asarray(X, dtype=float)
    aic, bic = [], []
    for features in subsets:
        _check_rank(X[:, list(features.indices)])
        logit = _fit_logit(X[:, list(features.indices)], y)
        aic.append(logit.aic)
        bic.append(logit.bic)
    return {"AIC": np.array(aic), "BIC": np.array(bic)}


def fit_logistic(X, y, feature_names):
    """Full-data logistic regression; returns the coefficients with the intercept first."""
    _check_rank(X)
    logit = _fit_logit(X, y)
    return pd.Series(np.asarray(logit.params), index=["(Intercept)"] + list(feature_names))


# ---------- Discriminant analysis ----------
@dataclass(frozen=True)
class DiscriminantResult:
    features: FeatureSet
    error_rate: float
    confusion: pd.DataFrame


class DiscriminantClassifier:
    """
    Linear or quadratic discriminant analysis scored by its own K-fold
    cross-validation. The split is seeded from (seed, subset bitmask), so every
    candidate gets its own reproducible split.
    """

    KINDS = ("linear", "quadratic")

    def __init__(self, kind="linear", n_folds=10, seed=1234):
        if kind not in self.KINDS:
            raise ValueError(f"kind must be one of {self.KINDS}, got '{kind}'")
        if n_folds < 2:
            raise ValueError(f"n_folds must be at least 2, got {n_folds}")
        self.kind = kind
        self.n_folds = n_folds
        self.seed = seed

    def make_model(self):
        if self.kind == "linear":
            return LinearDiscriminantAnalysis(solver="svd")
        return QuadraticDiscriminantAnalysis()

    def _split_seed(self, features):
        state = np.random.SeedSequence([self.seed, features.mask]).generate_state(1)
        return int(state[0])

    def cross_validate(self, X, y, features):
        X_sub = np.asarray(X, dtype=float)[:, list(features.indices)]
        y = np.asarray(y)
        if len(y) < self.n_folds:
            raise DegenerateTrainingSetError(
                f"Cannot run {self.n_folds}-fold cross-validation on {len(y)} rows"
            )

        CV = KFold(n_splits=self.n_folds, shuffle=True, random_state=self._split_seed(features))
        y_pred = np.empty_like(y)
        for train_idx, test_idx in CV.split(X_sub):
            X_train, y_train = X_sub[train_idx], y[train_idx]
            if len(np.unique(y_train)) < 2:
                raise DegenerateTrainingSetError(
                    f"Training fold for {features.indices} contains a single class"
                )
            _check_rank(X_train)
            if self.kind == "quadratic":
                # Every class needs its own full-rank covariance
                for label in np.unique(y_train):
                    _check_rank(X_train[y_train == label])

            model = self.make_model()
            try:
                model.fit(X_train, y_train)
            except np.linalg.LinAlgError as e:
                raise DegenerateTrainingSetError(
                    f"Discriminant fit failed for {features.indices}: {e}"
                ) from e
            y_pred[test_idx] = model.predict(X_sub[test_idx])

        labels = np.unique(y)
        confusion = pd.DataFrame(
            confusion_matrix(y, y_pred, labels=labels),
            index=pd.Index(labels, name="observed"),
            columns=pd.Index(labels, name="predicted"),
        )
        return DiscriminantResult(features, float(error_rate(y, y_pred)), confusion)

    def score(self, X, y):
        """Returns a scorer mapping a FeatureSet to its cross-validated error rate."""
        return _DiscriminantScorer(self, np.asarray(X, dtype=float), np.asarray(y))


class _DiscriminantScorer:
    # Picklable for joblib workers
    def __init__(self, classifier, X, y):
        self.classifier = classifier
        self.X = X
        self.y = y

    def __call__(self, features):
        return self.classifier.cross_validate(self.X, self.y, features).error_rate
