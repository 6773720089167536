import warnings

import numpy as np
import pandas as pd
import pytest

from stroke_pipeline.data import LabeledDataset
from stroke_pipeline.exceptions import (
    DegenerateClassError, DegenerateFeatureError, HyperparameterSearchError, ModelFitError
)
from stroke_pipeline.models import (
    KernelNaiveBayes, KNNModel, LinearSVMModel, KernelNaiveBayesModel,
    ModelFactory, silverman_bandwidth, safe_int, safe_float
)


def make_dataset(n=200, seed=0, shift=2.0):
    """Two Gaussian blobs in three features."""
    rng = np.random.default_rng(seed)
    y = np.repeat([0, 1], n // 2)
    X = rng.normal(0, 1, (n, 3)) + shift * y[:, None]
    frame = pd.DataFrame(X, columns=['f0', 'f1', 'f2'])
    frame['stroke'] = y
    return LabeledDataset(frame, ['f0', 'f1', 'f2'], 'stroke')


@pytest.fixture
def dataset():
    return make_dataset()


def test_knn_selects_k_from_candidates(dataset):
    model = KNNModel({'k_candidates': [1, 3, 5, 7], 'cv_folds': 5, 'random_state': 3333})
    model.fit(dataset)

    assert model.best_params['n_neighbors'] in [1, 3, 5, 7]
    assert model.model.n_neighbors == model.best_params['n_neighbors']
    assert set(model.cv_scores) == {1, 3, 5, 7}
    best = max(model.cv_scores.values())
    assert model.cv_scores[model.best_params['n_neighbors']] == best
    assert (model.predict(dataset.X) == dataset.y).mean() > 0.85


def test_knn_search_is_reproducible(dataset):
    config = {'k_range': [1, 15], 'cv_folds': 5, 'random_state': 11}
    first = KNNModel(config).fit(dataset)
    second = KNNModel(config).fit(dataset)
    assert first.cv_scores == second.cv_scores


def test_knn_ties_go_to_smallest_k():
    separated = make_dataset(shift=10.0)
    model = KNNModel({'k_candidates': [5, 3, 1, 3], 'cv_folds': 5, 'random_state': 3333})
    model.fit(separated)

    assert model.candidates() == [1, 3, 5]
    assert set(model.cv_scores.values()) == {1.0}
    assert model.best_params == {'n_neighbors': 1}


def test_knn_default_range():
    assert KNNModel().candidates() == list(range(1, 31))


def test_knn_search_can_be_disabled(dataset):
    model = KNNModel({'search': False, 'n_neighbors': '9'}).fit(dataset)
    assert model.best_params == {}
    assert model.model.n_neighbors == 9


def test_knn_empty_candidates(dataset):
    with pytest.raises(HyperparameterSearchError):
        KNNModel({'k_candidates': [], 'cv_folds': 5}).fit(dataset)


def test_knn_k_larger_than_folds(dataset):
    with pytest.raises(HyperparameterSearchError):
        KNNModel({'k_candidates': [500], 'cv_folds': 5}).fit(dataset)


def test_single_class_training_data_rejected(dataset):
    frame = dataset.frame.copy()
    frame['stroke'] = 0
    one_class = LabeledDataset(frame, dataset.feature_columns, 'stroke')

    for model in (KNNModel(), LinearSVMModel(), KernelNaiveBayesModel()):
        with pytest.raises(DegenerateClassError):
            model.fit(one_class)


def test_linear_svm(dataset):
    model = LinearSVMModel({'C': '0.5'}).fit(dataset)

    assert model.model.kernel == 'linear'
    assert model.model.C == 0.5
    assert model.best_params == {}
    assert (model.predict(dataset.X) == dataset.y).mean() > 0.85
    proba = model.predict_proba(dataset.X)
    assert proba.shape == (len(dataset), 2)
    np.testing.assert_allclose(proba.sum(axis=1), 1.0)


def test_linear_svm_labels_follow_decision_function(dataset):
    with warnings.catch_warnings():
        warnings.simplefilter('error', FutureWarning)
        model = LinearSVMModel({'calibration_folds': 3}).fit(dataset)

    assert not model.model.get_params().get('probability', False)
    expected = (model.model.decision_function(dataset.X) > 0).astype(int)
    np.testing.assert_array_equal(model.predict(dataset.X), expected)


def test_kernel_naive_bayes(dataset):
    model = KernelNaiveBayesModel().fit(dataset)
    proba = model.predict_proba(dataset.X)

    np.testing.assert_allclose(proba.sum(axis=1), 1.0)
    assert (model.predict(dataset.X) == dataset.y).mean() > 0.85
    assert model.model.bandwidths_.shape == (2, 3)
    assert (model.model.bandwidths_ > 0).all()


def test_naive_bayes_zero_variance_feature(dataset):
    frame = dataset.frame.copy()
    frame['f1'] = 0.5

    with pytest.raises(DegenerateFeatureError):
        KernelNaiveBayesModel().fit(LabeledDataset(frame, dataset.feature_columns, 'stroke'))


def test_naive_bayes_handles_constant_within_class():
    # indicator feature that is always 0 for the positive class
    X = np.array([[0.0, 0.1], [1.0, 0.2], [0.0, 0.3], [1.0, 0.4],
                  [0.0, 0.8], [0.0, 0.9], [0.0, 0.7], [0.0, 0.95]])
    y = np.array([0, 0, 0, 0, 1, 1, 1, 1])
    clf = KernelNaiveBayes().fit(X, y)

    assert np.isfinite(clf.predict_proba(X)).all()
    np.testing.assert_array_equal(clf.predict(X), y)


def test_silverman_bandwidth():
    x = np.arange(1, 11, dtype=float)
    sd = x.std(ddof=1)
    iqr = np.subtract(*np.percentile(x, [75, 25]))
    assert silverman_bandwidth(x) == pytest.approx(0.9 * min(sd, iqr / 1.34) * 10 ** -0.2)

    # zero spread falls back to |x0|, then 1
    assert silverman_bandwidth(np.full(4, 3.0)) == pytest.approx(0.9 * 3.0 * 4 ** -0.2)
    assert silverman_bandwidth(np.zeros(4)) == pytest.approx(0.9 * 4 ** -0.2)


def test_factory_creates_registered_models():
    assert {'knn', 'svm_linear', 'naive_bayes_kernel'} <= set(ModelFactory.list_models())
    assert isinstance(ModelFactory.create_model('knn', {'k_range': [1, 3]}), KNNModel)
    assert ModelFactory.resolve_model_name('svm_linear_c10') == 'svm_linear'
    assert ModelFactory.resolve_model_name('knn_weighted') == 'knn'
    assert 'knn_weighted' not in ModelFactory.list_models()
    assert ModelFactory.resolve_model_name('random_forest') is None

    with pytest.raises(ValueError):
        ModelFactory.create_model('random_forest')


def test_errors_share_a_base():
    assert issubclass(DegenerateClassError, ModelFitError)
    assert issubclass(HyperparameterSearchError, ModelFitError)


def test_safe_conversions():
    assert safe_int('1e1', 0) == 10
    assert safe_int('x', 3) == 3
    assert safe_float(None, 1.5) == 1.5
    assert safe_float('0.25', 0.0) == 0.25
