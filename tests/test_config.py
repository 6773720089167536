from pathlib import Path

import pytest

from stroke_pipeline.utils import Config, ModelConfigBuilder

CONFIG_PATH = Path(__file__).parent.parent / 'configs' / 'stroke.yaml'


def test_default_config_file():
    config = Config(CONFIG_PATH)
    data = config.get_data_config()

    assert data['split'] == {'train_fraction': 0.8, 'random_state': 3333, 'stratify': False}
    assert data['continuous'] == ['age', 'avg_glucose_level', 'bmi']
    assert set(config.get_models_config()) == {'knn', 'svm_linear', 'naive_bayes_kernel'}
    assert config.get_evaluation_config()['model_selection']['metric'] == 'test_accuracy'


def test_training_defaults_are_inherited():
    config = Config.from_dict({
        'training': {'random_state': 42, 'n_jobs': 2},
        'models': {'knn': {'enabled': True, 'n_jobs': 1}, 'svm_linear': None},
    })

    assert config.get_model_config('knn') == {'enabled': True, 'n_jobs': 1, 'random_state': 42}
    assert config.get_model_config('svm_linear') == {'random_state': 42, 'n_jobs': 2}
    assert config['training']['n_jobs'] == 2
    assert config.get('output', {}) == {}


def test_model_config_is_a_copy():
    config = Config.from_dict({'models': {'knn': {'k_range': [1, 30]}}})
    config.get_model_config('knn')['k_range'].append(99)
    assert config.get_model_config('knn')['k_range'] == [1, 30]


def test_unknown_model():
    with pytest.raises(ValueError):
        Config.from_dict({}).get_model_config('knn')


def test_builder():
    built = ModelConfigBuilder().set_search(k_range=range(1, 4), cv_folds=3, stratify=True).build()
    assert built == {'enabled': True, 'k_range': [1, 2, 3], 'cv_folds': 3, 'stratify': True}
    assert ModelConfigBuilder().disable().build() == {'enabled': False}
