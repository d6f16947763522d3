from dataclasses import dataclass
from itertools import combinations

from cvselect.exceptions import EmptyFeatureSubsetError


@dataclass(frozen=True)
class FeatureSet:
    """
    A non-empty, ordered set of predictor indices.
    Input:      indices : tuple of int (column positions in the predictor matrix)
    """
    indices: tuple

    def __post_init__(self):
        indices = tuple(int(i) for i in self.indices)
        if len(indices) == 0:
            raise EmptyFeatureSubsetError("Feature subset must contain at least one predictor")
        if any(i < 0 for i in indices):
            raise ValueError(f"Predictor indices must be non-negative, got {indices}")
        if len(set(indices)) != len(indices):
            raise ValueError(f"Duplicate predictor indices in {indices}")
        object.__setattr__(self, "indices", tuple(sorted(indices)))

    @classmethod
    def from_mask(cls, mask):
        indices = [i for i in range(mask.bit_length()) if mask >> i & 1]
        return cls(tuple(indices))

    @classmethod
    def all_of(cls, n_features):
        return cls(tuple(range(n_features)))

    @property
    def mask(self):
        return sum(1 << i for i in self.indices)

    @property
    def size(self):
        return len(self.indices)

    def names(self, feature_names):
        return [feature_names[i] for i in self.indices]

    def __len__(self):
        return len(self.indices)

    def __iter__(self):
        return iter(self.indices)


def enumerate_subsets(n_features):
    """
    All 2^p - 1 non-empty subsets, smallest first; within a size in
    lexicographic combination order.
    """
    if n_features < 1:
        raise ValueError(f"n_features must be positive, got {n_features}")
    subsets = []
    for size in range(1, n_features + 1):
        for combo in combinations(range(n_features), size):
            subsets.append(FeatureSet(combo))
    return subsets
