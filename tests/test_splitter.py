import numpy as np
import pandas as pd
import pytest

from stroke_pipeline.data import Splitter
from stroke_pipeline.exceptions import DataIntegrityError


@pytest.fixture
def encoded():
    rng = np.random.default_rng(0)
    n = 500
    df = pd.DataFrame({
        'age': rng.uniform(0, 1, n),
        'bmi': rng.uniform(0, 1, n),
        'stroke': (rng.uniform(0, 1, n) < 0.1).astype(np.int64),
    })
    # non-contiguous index, as left behind by cleaning
    df.index = np.arange(n) * 3 + 1
    return df


FEATURES = ['age', 'bmi']


def test_partition_is_disjoint_and_exhaustive(encoded):
    train, test = Splitter(0.8, 3333).split(encoded, FEATURES, 'stroke')

    train_ids, test_ids = set(train.index), set(test.index)
    assert train_ids.isdisjoint(test_ids)
    assert train_ids | test_ids == set(encoded.index)
    assert len(train) == 400 and len(test) == 100


def test_same_seed_same_partition(encoded):
    first, _ = Splitter(0.8, 3333).split(encoded, FEATURES, 'stroke')
    second, _ = Splitter(0.8, 3333).split(encoded, FEATURES, 'stroke')
    other, _ = Splitter(0.8, 1).split(encoded, FEATURES, 'stroke')

    assert first.index.tolist() == second.index.tolist()
    assert set(first.index) != set(other.index)


def test_labeled_dataset_views(encoded):
    train, _ = Splitter(0.8, 3333).split(encoded, FEATURES, 'stroke')

    assert train.X.shape == (400, 2)
    assert train.y.dtype == np.int64
    np.testing.assert_array_equal(train.X[:, 0], encoded.loc[train.index, 'age'].to_numpy())
    assert list(train.labels.cat.categories) == [0, 1]


def test_stratified_split_keeps_ratio(encoded):
    train, test = Splitter(0.8, 3333, stratify=True).split(encoded, FEATURES, 'stroke')
    overall = encoded['stroke'].mean()

    assert train.y.mean() == pytest.approx(overall, abs=0.01)
    assert test.y.mean() == pytest.approx(overall, abs=0.02)


@pytest.mark.parametrize('fraction', [0.0, 1.0, -0.2, 1.5])
def test_invalid_fraction(fraction):
    with pytest.raises(ValueError):
        Splitter(fraction)


def test_too_few_records(encoded):
    with pytest.raises(DataIntegrityError):
        Splitter().split(encoded.head(1), FEATURES, 'stroke')
