"""Stroke prediction pipeline: cleaning, encoding, splitting and model evaluation."""

from .data import DatasetLoader, PreprocessingPipeline
from .models import ModelFactory
from .utils import Config
from .metrics import MetricsWrapper, ConfusionMatrix, Evaluator
from .training import train_and_evaluate
from .exceptions import (
    PipelineError,
    DataIntegrityError,
    ModelFitError,
    DegenerateClassError,
    DegenerateFeatureError,
    HyperparameterSearchError,
)

__version__ = '1.0.0'

__all__ = [
    'DatasetLoader',
    'PreprocessingPipeline',
    'ModelFactory',
    'Config',
    'MetricsWrapper',
    'ConfusionMatrix',
    'Evaluator',
    'train_and_evaluate',
    'PipelineError',
    'DataIntegrityError',
    'ModelFitError',
    'DegenerateClassError',
    'DegenerateFeatureError',
    'HyperparameterSearchError',
]
