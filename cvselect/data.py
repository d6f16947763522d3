import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd

from cvselect.config import DATA_URL

logger = logging.getLogger(__name__)

PREDICTORS = [
    "cl_thickness",
    "cell_size",
    "cell_shape",
    "marg_adhesion",
    "epith_c_size",
    "bare_nuclei",
    "bl_cromatin",
    "normal_nucleoli",
    "mitoses",
]
COLUMNS = ["id"] + PREDICTORS + ["class"]

# Class codes in the UCI file: 2 = benign, 4 = malignant
CLASS_CODES = {2: 0, 4: 1}
CLASS_NAMES = {0: "benign", 1: "malignant"}


@dataclass(frozen=True)
class ObservationTable:
    ids: np.ndarray
    X: np.ndarray
    y: np.ndarray
    feature_names: tuple

    def __post_init__(self):
        X = np.asarray(self.X, dtype=float)
        y = np.asarray(self.y)
        if X.ndim != 2:
            raise ValueError(f"X must be 2-d, got shape {X.shape}")
        if len(y) != X.shape[0] or len(self.ids) != X.shape[0]:
            raise ValueError("ids, X and y must have the same number of rows")
        if len(np.unique(self.ids)) != len(self.ids):
            raise ValueError("Row identifiers must be unique")
        if len(self.feature_names) != X.shape[1]:
            raise ValueError("feature_names must name every predictor column")
        if np.isnan(X).any():
            raise ValueError("Observation table must not contain missing predictor values")
        object.__setattr__(self, "X", X)
        object.__setattr__(self, "y", y)
        object.__setattr__(self, "feature_names", tuple(self.feature_names))

    @property
    def n(self):
        return self.X.shape[0]

    @property
    def p(self):
        return self.X.shape[1]

    def select(self, features):
        return self.X[:, list(features.indices)]

    def standardized(self):
        # Sample standard deviation, like R's scale()
        mu = self.X.mean(axis=0)
        sigma = self.X.std(axis=0, ddof=1)
        sigma[sigma == 0] = 1.0
        return ObservationTable(self.ids, (self.X - mu) / sigma, self.y, self.feature_names)


def load_breast_cancer(source=DATA_URL):
    """
    Loads and cleans the Wisconsin breast cancer dataset.
    Input:      source : str (URL or path to breast-cancer-wisconsin.data)
    Output:     df : pd.DataFrame (683 complete rows, class coded 0/1)
    """
    logger.info(f"Loading data from {source}")
    df = pd.read_csv(source, header=None, names=COLUMNS, na_values="?")
    logger.info(f"Loaded {df.shape[0]} rows, {df.shape[1]} columns")

    # Drop rows with any missing predictor
    n_before = len(df)
    df = df.dropna()
    if len(df) < n_before:
        logger.info(f"Dropped {n_before - len(df)} rows with missing values")

    unknown = set(df["class"].unique()) - set(CLASS_CODES)
    if unknown:
        raise ValueError(f"Unexpected class codes {sorted(unknown)}")

    df[PREDICTORS] = df[PREDICTORS].astype(float)
    df["class"] = df["class"].map(CLASS_CODES).astype(int)
    return df


def to_table(df, standardize=False):
    # Original row numbers become the identifiers; sample codes repeat in the file
    table = ObservationTable(
        ids=df.index.to_numpy(),
        X=df[PREDICTORS].to_numpy(dtype=float),
        y=df["class"].to_numpy(dtype=int),
        feature_names=tuple(PREDICTORS),
    )
    if standardize:
        table = table.standardized()
    return table


def class_balance(table):
    counts = pd.Series(table.y).map(CLASS_NAMES).value_counts()
    return counts.reindex(list(CLASS_NAMES.values()), fill_value=0)
