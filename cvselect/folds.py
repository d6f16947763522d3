import logging

import numpy as np

from cvselect.exceptions import DegenerateFoldPartitionError, InvalidFoldPartitionError

logger = logging.getLogger(__name__)


def validate_folds(fold_ids, n_folds=None):
    """
    Check that the fold ids are exactly 1..K, each used at least once.
    K defaults to the largest id present. Returns K.
    """
    fold_ids = np.asarray(fold_ids)
    if fold_ids.ndim != 1 or fold_ids.size == 0:
        raise InvalidFoldPartitionError("Fold assignment must be a non-empty 1-d vector")
    if not np.issubdtype(fold_ids.dtype, np.integer):
        raise InvalidFoldPartitionError(f"Fold ids must be integers, got dtype {fold_ids.dtype}")

    K = int(fold_ids.max()) if n_folds is None else int(n_folds)
    present = np.unique(fold_ids)
    if not np.array_equal(present, np.arange(1, K + 1)):
        missing = sorted(set(range(1, K + 1)) - set(present.tolist()))
        extra = sorted(set(present.tolist()) - set(range(1, K + 1)))
        raise InvalidFoldPartitionError(
            f"Invalid fold partition for K={K}: missing ids {missing}, unexpected ids {extra}"
        )
    return K


def fold_sizes(fold_ids, n_folds):
    return np.bincount(np.asarray(fold_ids), minlength=n_folds + 1)[1:]


class FoldPartitioner:
    """Assign rows to K folds uniformly at random (not stratified)."""

    def __init__(self, n_folds=10, seed=1234):
        if n_folds < 2:
            raise ValueError(f"n_folds must be at least 2, got {n_folds}")
        self.n_folds = n_folds
        self.seed = seed

    def partition(self, n):
        if n < self.n_folds:
            raise ValueError(f"Cannot split {n} rows into {self.n_folds} folds")

        rng = np.random.default_rng(self.seed)
        fold_ids = rng.integers(1, self.n_folds + 1, size=n)

        try:
            validate_folds(fold_ids, self.n_folds)
        except InvalidFoldPartitionError as e:
            raise DegenerateFoldPartitionError(
                f"Degenerate fold partition (seed={self.seed}, n={n}): {e}"
            ) from e

        logger.info(f"Partitioned {n} rows into {self.n_folds} folds, "
                    f"sizes {fold_sizes(fold_ids, self.n_folds).tolist()}")
        return fold_ids
