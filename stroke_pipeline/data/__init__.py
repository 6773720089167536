"""Data handling module."""

from .loader import DatasetLoader
from .cleaner import Cleaner
from .encoder import CategoricalSchema, Encoder, one_hot_encode, rescale
from .splitter import LabeledDataset, Splitter
from .correlation_analyzer import OutcomeCorrelationAnalyzer
from .preprocessing_pipeline import PreprocessingPipeline, PreprocessingState, PreparedData

__all__ = [
    "DatasetLoader",
    "Cleaner",
    "CategoricalSchema",
    "Encoder",
    "one_hot_encode",
    "rescale",
    "LabeledDataset",
    "Splitter",
    "OutcomeCorrelationAnalyzer",
    "PreprocessingPipeline",
    "PreprocessingState",
    "PreparedData"
]
