import numpy as np
from typing import Union, List, Dict, Optional
from sklearn.metrics import (
    accuracy_score, precision_score, recall_score, f1_score,
    roc_auc_score, matthews_corrcoef, balanced_accuracy_score,
    average_precision_score, cohen_kappa_score
)


class MetricsWrapper:
    """
    Metrics for binary stroke classification.

    Prediction metrics are computed from hard labels. Ranking metrics
    (ROC AUC, AUPRC) need positive-class probabilities and are NaN when the
    model provides none.
    """

    METRICS = {
        'accuracy': accuracy_score,
        'precision': lambda y_t, y_p: precision_score(y_t, y_p, zero_division=0),
        'recall': lambda y_t, y_p: recall_score(y_t, y_p, zero_division=0),
        'f1': lambda y_t, y_p: f1_score(y_t, y_p, zero_division=0),
        'f1_macro': lambda y_t, y_p: f1_score(y_t, y_p, average='macro', zero_division=0),
        'balanced_accuracy': balanced_accuracy_score,
        'mcc': matthews_corrcoef,
        'cohen_kappa': cohen_kappa_score,

        'auc': roc_auc_score,
        'auprc': average_precision_score,
    }

    PROB_METRICS = {'auc', 'auprc'}

    @staticmethod
    def get_eval_metrics(metrics_names: Union[str, List[str], None] = None,
                         y_true: Optional[np.ndarray] = None,
                         y_pred: Optional[np.ndarray] = None,
                         y_proba: Optional[np.ndarray] = None) -> Union[Dict[str, float], float, None]:
        """
        Compute scores.

        Args:
            metrics_names: Metric name(s) to compute. If None, computes all metrics.
            y_true: True 0/1 labels. If None, nothing is computed.
            y_pred: Predicted 0/1 labels.
            y_proba: Probabilities, shape (n,) or (n, 2); optional.

        Returns:
            Dict of scores, or a single score when one name is given.

        Examples:
            >>> scores = MetricsWrapper.get_eval_metrics(y_true=y_true, y_pred=y_pred)
            >>> acc = MetricsWrapper.get_eval_metrics('accuracy', y_true, y_pred)
        """
        if y_true is None:
            return None

        is_single_metric = isinstance(metrics_names, str)

        if metrics_names is None:
            selected = MetricsWrapper.METRICS
        else:
            names = [metrics_names] if is_single_metric else list(metrics_names)
            selected = {}
            for name in names:
                if name not in MetricsWrapper.METRICS:
                    raise ValueError(f"Metric '{name}' not found. Available metrics: {list(MetricsWrapper.METRICS.keys())}")
                selected[name] = MetricsWrapper.METRICS[name]

        if y_proba is not None and y_proba.ndim > 1:
            y_proba = y_proba[:, 1]

        results = {}
        for name, func in selected.items():
            if name in MetricsWrapper.PROB_METRICS:
                if y_proba is None or len(np.unique(y_true)) < 2:
                    results[name] = np.nan
                else:
                    results[name] = float(func(y_true, y_proba))
            else:
                results[name] = float(func(y_true, y_pred))

        if is_single_metric:
            return list(results.values())[0]

        return results
