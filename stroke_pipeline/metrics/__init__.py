"""Evaluation metrics."""

from .metrics_wrapper import MetricsWrapper
from .evaluator import ConfusionMatrix, Evaluator

__all__ = ['MetricsWrapper', 'ConfusionMatrix', 'Evaluator']
