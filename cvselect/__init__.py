from cvselect.crossval import CVResult, cross_validate, evaluate
from cvselect.data import ObservationTable, class_balance, load_breast_cancer, to_table
from cvselect.exceptions import (
    CVSelectError,
    DegenerateFoldPartitionError,
    DegenerateTrainingSetError,
    EmptyFeatureSubsetError,
    InvalidFoldPartitionError,
)
from cvselect.features import FeatureSet, enumerate_subsets
from cvselect.folds import FoldPartitioner, validate_folds
from cvselect.models import DiscriminantClassifier, LinearProbabilityFitter
from cvselect.penalized import l1_logistic_cv
from cvselect.search import exhaustive_search, nested_search, run_best_subset, run_discriminant_search

__version__ = "0.1.0"
