"""Nearest-neighbour and linear SVM classifiers."""

import inspect
import numpy as np
from typing import Dict, Any, Optional, List
from sklearn.svm import SVC
from sklearn.calibration import CalibratedClassifierCV
from sklearn.neighbors import KNeighborsClassifier
from sklearn.model_selection import KFold, StratifiedKFold, cross_val_score
from loguru import logger

from .base import BaseModel, ModelFactory, safe_float, safe_int
from ..exceptions import HyperparameterSearchError


class SklearnModel(BaseModel):
    """Base wrapper for sklearn models."""

    def __init__(self, model_class, config: Optional[Dict[str, Any]] = None, **defaults):
        super().__init__(config)

        params = defaults.copy()

        # Only update with config params that the estimator accepts
        if config:
            sig = inspect.signature(model_class.__init__).parameters
            for k, v in config.items():
                if k in sig:
                    params[k] = v

        self.model = model_class(**params)

    def train(self, X: np.ndarray, y: np.ndarray) -> None:
        self.model.fit(X, y)
        self.fitted = True
        logger.info(f"{self.model_name} trained on {X.shape[0]} samples, {X.shape[1]} features")

    def predict(self, X: np.ndarray) -> np.ndarray:
        if not self.fitted:
            raise ValueError("Model not trained")
        return self.model.predict(X)


class KNNModel(SklearnModel):
    """
    K-Nearest Neighbors classifier with cross-validated k.

    Config:
        k_range: [first, last] inclusive candidate range (default [1, 30])
        k_candidates: explicit candidate list, overrides k_range
        cv_folds: number of folds (default 10)
        stratify: use StratifiedKFold (default False)
        random_state: seed of the fold shuffling (default 3333)
        n_jobs: parallel fold evaluation
        search: set to False to keep n_neighbors as configured

    Majority-vote ties follow scikit-learn's ordering and are not otherwise
    controlled.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        config = dict(config or {})
        if 'n_neighbors' in config:
            config['n_neighbors'] = safe_int(config['n_neighbors'], 5)
        super().__init__(KNeighborsClassifier, config, n_neighbors=5)
        self.cv_scores: Dict[int, float] = {}

    def candidates(self) -> List[int]:
        if 'k_candidates' in self.config:
            return sorted({safe_int(k, 0) for k in self.config['k_candidates']})
        first, last = self.config.get('k_range', [1, 30])
        return list(range(safe_int(first, 1), safe_int(last, 30) + 1))

    def select_hyperparameters(self, X: np.ndarray, y: np.ndarray) -> Dict[str, Any]:
        if not self.config.get('search', True):
            return {}

        n_folds = safe_int(self.config.get('cv_folds'), 10)
        random_state = safe_int(self.config.get('random_state'), 3333)
        if not 2 <= n_folds <= len(y):
            raise HyperparameterSearchError(
                f"Cannot run {n_folds}-fold CV on {len(y)} training samples"
            )
        if self.config.get('stratify', False):
            splitter = StratifiedKFold(n_splits=n_folds, shuffle=True, random_state=random_state)
        else:
            splitter = KFold(n_splits=n_folds, shuffle=True, random_state=random_state)

        # Smallest training fold bounds the usable k
        max_k = len(y) - int(np.ceil(len(y) / n_folds))
        candidates = [k for k in self.candidates() if 1 <= k <= max_k]
        if not candidates:
            raise HyperparameterSearchError(
                f"No valid k among {self.candidates()} for {len(y)} training samples "
                f"and {n_folds} folds"
            )

        logger.info(f"Selecting k from {candidates[0]}..{candidates[-1]} "
                    f"with {n_folds}-fold CV ({len(candidates)} candidates)")
        self.cv_scores = {}
        for k in candidates:
            estimator = KNeighborsClassifier(n_neighbors=k, weights=self.model.weights,
                                             metric=self.model.metric, p=self.model.p)
            scores = cross_val_score(estimator, X, y, cv=splitter, scoring='accuracy',
                                     n_jobs=self.config.get('n_jobs'))
            self.cv_scores[k] = float(np.mean(scores))
            logger.debug(f"  k={k}: CV accuracy {self.cv_scores[k]:.4f}±{np.std(scores):.4f}")

        # Smallest k among the best scores
        best = max(self.cv_scores.values())
        best_k = min(k for k, score in self.cv_scores.items() if score == best)
        logger.info(f"Best k={best_k} (CV accuracy {self.cv_scores[best_k]:.4f})")
        return {'n_neighbors': best_k}


class LinearSVMModel(SklearnModel):
    """
    Linear support vector classifier with a fixed regularization constant.

    Labels come from the sign of the SVC decision function. Probabilities
    come from a sigmoid calibrated on cross-validated decision values
    (`calibration_folds`, default 5) and do not change the labels.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        config = dict(config or {})
        config['C'] = safe_float(config.get('C'), 1.0)
        config['kernel'] = 'linear'
        super().__init__(SVC, config, kernel='linear', C=1.0, random_state=3333)
        self.calibrator = CalibratedClassifierCV(
            SVC(**self.model.get_params()), method='sigmoid', ensemble=False,
            cv=safe_int(self.config.get('calibration_folds'), 5)
        )

    def train(self, X: np.ndarray, y: np.ndarray) -> None:
        super().train(X, y)
        self.calibrator.fit(X, y)

    def predict_proba(self, X: np.ndarray) -> Optional[np.ndarray]:
        if not self.fitted:
            raise ValueError("Model not trained")
        return self.calibrator.predict_proba(X)


# Register all models
ModelFactory.register_model('knn', KNNModel)
ModelFactory.register_model('svm_linear', LinearSVMModel)
