import logging
from dataclasses import dataclass, field

import numpy as np
from joblib import Parallel, delayed

from cvselect.crossval import evaluate
from cvselect.exceptions import CVSelectError
from cvselect.features import FeatureSet, enumerate_subsets
from cvselect.folds import validate_folds
from cvselect.models import best_subsets, logistic_criteria

logger = logging.getLogger(__name__)

# Upper bound for any rate-style error in [0, 1]
ERROR_SENTINEL = 1.0


@dataclass(frozen=True)
class CandidateResult:
    features: FeatureSet
    error: float


@dataclass(frozen=True)
class NestedSearchResult:
    subsets: list
    errors: np.ndarray
    criteria: dict
    best_size: dict
    best_error: dict

    def best_features(self, criterion):
        return self.subsets[self.best_size[criterion] - 1]


@dataclass
class ExhaustiveSearchResult:
    best: CandidateResult
    results: list
    skipped: list = field(default_factory=list)

    @property
    def n_visited(self):
        return len(self.results) + len(self.skipped)

    @property
    def errors(self):
        return np.array([r.error for r in self.results])


def _scan_min(values, sentinel):
    # Strict < keeps the first-seen minimum
    best_idx, best_value = None, sentinel
    for idx, value in enumerate(values):
        if value < best_value:
            best_idx, best_value = idx, value
    return best_idx


# ---------- Nested mode ----------
def nested_search(X, y, subsets, criteria, fold_ids, fitter=None):
    """
    Cross-validate the best-subset sequence (one subset per size) and pick,
    independently for every information criterion, the size minimizing it.

    Parameters:
    - subsets: list of FeatureSet, subsets[k-1] has size k
    - criteria: dict, criterion name -> values aligned with subsets
    - fold_ids: fold assignment shared by every subset

    Returns:
    - NestedSearchResult with the CV error curve and, per criterion, the
      chosen size and its CV error
    """
    validate_folds(fold_ids)
    if len(subsets) == 0:
        raise ValueError("No subsets to evaluate")

    errors = np.empty(len(subsets))
    for i, features in enumerate(subsets):
        errors[i] = evaluate(X, y, fold_ids, fitter=fitter, features=features)
        logger.info(f"Size {features.size}: {features.indices} CV error={errors[i]:.6f}")

    best_size, best_error = {}, {}
    for name, values in criteria.items():
        values = np.asarray(values, dtype=float)
        if len(values) != len(subsets):
            raise ValueError(f"Criterion '{name}' has {len(values)} values for {len(subsets)} subsets")
        idx = _scan_min(values, np.inf)
        if idx is None:
            raise ValueError(f"Criterion '{name}' has no finite value")
        best_size[name] = subsets[idx].size
        best_error[name] = float(errors[idx])
        logger.info(f"{name} selects size {best_size[name]} (CV error={best_error[name]:.6f})")

    return NestedSearchResult(list(subsets), errors, dict(criteria), best_size, best_error)


def run_best_subset(table, fold_ids, fitter=None):
    """Best-subset selection by RSS, AIC/BIC from logistic fits, OLS cross-validation."""
    subsets = best_subsets(table.X, table.y)
    criteria = logistic_criteria(table.X, table.y, subsets)
    return nested_search(table.X, table.y, subsets, criteria, fold_ids, fitter=fitter)


# ---------- Exhaustive mode ----------
def _score_candidate(score, features, on_error):
    try:
        return score(features), None
    except CVSelectError as e:
        if on_error == "raise":
            raise
        return None, str(e)


def exhaustive_search(n_features, score, n_jobs=1, on_error="raise"):
    """
    Score every non-empty subset of n_features predictors and keep the one
    with the smallest error.

    Parameters:
    - score: callable FeatureSet -> error rate in [0, 1]
    - n_jobs: joblib workers; results are scanned in enumeration order
      either way
    - on_error: "raise" aborts on the first failing candidate, "skip" logs
      it, records it in `skipped` and continues
    """
    if on_error not in ("raise", "skip"):
        raise ValueError(f"on_error must be 'raise' or 'skip', got '{on_error}'")

    subsets = enumerate_subsets(n_features)
    logger.info(f"Exhaustive search over {len(subsets)} subsets (n_jobs={n_jobs})")

    if n_jobs == 1:
        outcomes = [_score_candidate(score, features, on_error) for features in subsets]
    else:
        outcomes = Parallel(n_jobs=n_jobs)(
            delayed(_score_candidate)(score, features, on_error) for features in subsets
        )

    results, skipped = [], []
    best, best_error = None, ERROR_SENTINEL
    for features, (error, failure) in zip(subsets, outcomes):
        if failure is not None:
            logger.warning(f"Skipping subset {features.indices}: {failure}")
            skipped.append((features, failure))
            continue
        candidate = CandidateResult(features, float(error))
        results.append(candidate)
        if candidate.error < best_error:
            best, best_error = candidate, candidate.error

    if best is None:
        logger.warning("No subset scored below the error sentinel")
    else:
        logger.info(f"Best subset {best.features.indices} with error {best.error:.4f}")
    return ExhaustiveSearchResult(best, results, skipped)


def run_discriminant_search(table, classifier, n_jobs=1, on_error="raise"):
    """
    Exhaustive subset search for one discriminant classifier. Returns the
    search result and the winning subset's DiscriminantResult (None when
    nothing beat the sentinel).
    """
    search = exhaustive_search(table.p, classifier.score(table.X, table.y),
                               n_jobs=n_jobs, on_error=on_error)
    winner = None
    if search.best is not None:
        winner = classifier.cross_validate(table.X, table.y, search.best.features)
    return search, winner
