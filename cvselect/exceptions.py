class CVSelectError(Exception):
    """Base class for errors raised while cross-validating feature subsets."""


class InvalidFoldPartitionError(CVSelectError):
    """Fold ids do not cover 1..K."""


class DegenerateFoldPartitionError(InvalidFoldPartitionError):
    """The partitioner drew a partition that leaves at least one fold empty."""


class DegenerateTrainingSetError(CVSelectError):
    """A training or held-out subset is empty, or the design matrix is rank deficient."""


class EmptyFeatureSubsetError(CVSelectError):
    """A feature subset with no predictors was requested."""
