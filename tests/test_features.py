import pytest

from cvselect.exceptions import EmptyFeatureSubsetError
from cvselect.features import FeatureSet, enumerate_subsets


def test_mask_round_trip():
    features = FeatureSet((0, 3, 8))
    assert features.mask == 0b100001001
    assert FeatureSet.from_mask(features.mask) == features


def test_indices_are_sorted():
    assert FeatureSet((4, 1, 2)).indices == (1, 2, 4)


def test_invalid_feature_sets():
    with pytest.raises(EmptyFeatureSubsetError):
        FeatureSet.from_mask(0)
    with pytest.raises(ValueError):
        FeatureSet((1, 1))
    with pytest.raises(ValueError):
        FeatureSet((-1,))


def test_names():
    assert FeatureSet((0, 2)).names(["a", "b", "c"]) == ["a", "c"]


def test_power_set_of_nine_predictors():
    subsets = enumerate_subsets(9)
    assert len(subsets) == 2 ** 9 - 1
    assert len({s.mask for s in subsets}) == 511
    sizes = [s.size for s in subsets]
    assert sizes == sorted(sizes)
    assert [s.indices for s in subsets[:9]] == [(i,) for i in range(9)]
    assert subsets[9].indices == (0, 1)
    assert subsets[-1] == FeatureSet.all_of(9)
