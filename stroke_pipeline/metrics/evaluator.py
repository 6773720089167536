"""Scoring of fitted models against the evaluation set."""

import numpy as np
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional
from sklearn.metrics import confusion_matrix

from .metrics_wrapper import MetricsWrapper


@dataclass(frozen=True)
class ConfusionMatrix:
    """2x2 tally of (actual, predicted) pairs for the 0/1 outcome."""
    tn: int
    fp: int
    fn: int
    tp: int

    @classmethod
    def from_predictions(cls, y_true: np.ndarray, y_pred: np.ndarray) -> 'ConfusionMatrix':
        if len(y_true) == 0:
            raise ValueError("Cannot build a confusion matrix from zero records")
        tn, fp, fn, tp = confusion_matrix(y_true, y_pred, labels=[0, 1]).ravel()
        return cls(tn=int(tn), fp=int(fp), fn=int(fn), tp=int(tp))

    @property
    def total(self) -> int:
        return self.tn + self.fp + self.fn + self.tp

    @property
    def accuracy(self) -> float:
        return (self.tp + self.tn) / self.total

    def as_array(self) -> np.ndarray:
        """[[tn, fp], [fn, tp]], rows actual, columns predicted."""
        return np.array([[self.tn, self.fp], [self.fn, self.tp]])

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


class Evaluator:
    """Applies a fitted model to every record of a dataset and tallies the results."""

    DEFAULT_METRICS = ['accuracy', 'precision', 'recall', 'f1', 'balanced_accuracy', 'mcc', 'auc']

    def __init__(self, metrics: Optional[List[str]] = None):
        self.metrics = list(metrics) if metrics is not None else list(self.DEFAULT_METRICS)

    @staticmethod
    def evaluate(model, dataset) -> ConfusionMatrix:
        """
        Confusion matrix of `model` on `dataset`.

        The dataset is only read.
        """
        y_pred = np.asarray(model.predict(dataset.X)).astype(np.int64)
        return ConfusionMatrix.from_predictions(dataset.y, y_pred)

    def score(self, model, dataset, prefix: str = '') -> Dict[str, Any]:
        """Confusion matrix plus the configured metrics, keys prefixed with `prefix`."""
        X, y = dataset.X, dataset.y
        y_pred = np.asarray(model.predict(X)).astype(np.int64)
        cm = ConfusionMatrix.from_predictions(y, y_pred)

        y_proba = model.predict_proba(X) if hasattr(model, 'predict_proba') else None
        scores = MetricsWrapper.get_eval_metrics(self.metrics, y, y_pred, y_proba)

        results = {f'{prefix}{name}': value for name, value in scores.items()
                   if value is not None and not np.isnan(value)}
        results[f'{prefix}accuracy'] = cm.accuracy
        results[f'{prefix}confusion_matrix'] = cm.to_dict()
        return results
