import numpy as np
import pytest

from cvselect.data import ObservationTable
from cvselect.folds import FoldPartitioner


def make_table(n=200, p=3, seed=0):
    rng = np.random.default_rng(seed)
    X = rng.normal(size=(n, p))
    # Only the first predictor carries signal
    logits = 2.5 * X[:, 0] - 0.3
    y = (rng.random(n) < 1.0 / (1.0 + np.exp(-logits))).astype(int)
    names = tuple(f"x{i}" for i in range(p))
    return ObservationTable(np.arange(n), X, y, names)


@pytest.fixture
def table():
    return make_table()


@pytest.fixture
def folds(table):
    return FoldPartitioner(n_folds=5, seed=1234).partition(table.n)


@pytest.fixture
def collinear_table():
    # x1 duplicates x0, so any subset holding both is rank deficient
    base = make_table()
    X = base.X.copy()
    X[:, 1] = 2.0 * X[:, 0]
    return ObservationTable(base.ids, X, base.y, base.feature_names)
