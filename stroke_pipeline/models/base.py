"""Base model interface and factory.

This module provides the foundation for the classifiers of the stroke
pipeline: an abstract base class with the common fit contract, a factory
for creating models by name, and helpers for safe type conversion of
configuration values.

Key Components:
    - BaseModel: Abstract base class for all models
    - ModelFactory: Factory for model creation and registration
"""

from abc import ABC, abstractmethod
import numpy as np
from typing import Any, Dict, Optional
from loguru import logger

from ..exceptions import DegenerateClassError


def safe_int(value: Any, default: Optional[int]) -> Optional[int]:
    """
    Safely convert value to integer.

    Handles strings with scientific notation, floats and None.
    Returns default if conversion fails.
    """
    if value is None:
        return default
    try:
        return int(float(str(value)))
    except (TypeError, ValueError):
        return default


def safe_float(value: Any, default: Optional[float]) -> Optional[float]:
    """
    Safely convert value to float.

    Handles strings with scientific notation, integers and None.
    Returns default if conversion fails.
    """
    if value is None:
        return default
    try:
        return float(str(value))
    except (TypeError, ValueError):
        return default


class BaseModel(ABC):
    """
    Abstract base class for all classifiers.

    `fit` is the entry point used by the training harness: it rejects
    degenerate training data, lets the subclass choose hyperparameters on
    the training data only, then trains.

    Attributes:
        config: Configuration dictionary for the model
        model: The underlying estimator
        fitted: Whether the model has been trained
        model_name: Name of the model class
        best_params: Hyperparameters chosen by `select_hyperparameters`
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}
        self.model = None
        self.fitted = False
        self.model_name = self.__class__.__name__
        self.best_params: Dict[str, Any] = {}

    def fit(self, dataset) -> 'BaseModel':
        """
        Fit on a training dataset.

        Args:
            dataset: Object exposing `X` (n_samples, n_features) and `y` (n_samples,)

        Returns:
            self

        Raises:
            DegenerateClassError: If the training data holds a single class
        """
        X, y = dataset.X, dataset.y
        classes = np.unique(y)
        if len(classes) < 2:
            raise DegenerateClassError(
                f"{self.model_name}: training data has a single class {classes.tolist()}"
            )

        self.best_params = self.select_hyperparameters(X, y)
        if self.best_params:
            self.model.set_params(**self.best_params)
            logger.info(f"{self.model_name} selected {self.best_params}")

        self.train(X, y)
        return self

    def select_hyperparameters(self, X: np.ndarray, y: np.ndarray) -> Dict[str, Any]:
        """
        Choose hyperparameters from training data.

        Models with a fixed configuration return an empty dict.
        """
        return {}

    @abstractmethod
    def train(self, X: np.ndarray, y: np.ndarray) -> None:
        """
        Train the model on the provided data.

        Args:
            X: Training features of shape (n_samples, n_features)
            y: Training labels of shape (n_samples,)
        """
        pass

    @abstractmethod
    def predict(self, X: np.ndarray) -> np.ndarray:
        """
        Generate predictions for the provided features.

        Args:
            X: Features of shape (n_samples, n_features)

        Returns:
            Predicted labels of shape (n_samples,)
        """
        pass

    def predict_proba(self, X: np.ndarray) -> Optional[np.ndarray]:
        """
        Predict class probabilities if supported by the model.

        Returns:
            Class probabilities of shape (n_samples, n_classes) or None
        """
        if hasattr(self.model, 'predict_proba'):
            return self.model.predict_proba(X)
        return None


# ============================================================================
# FACTORY
# ============================================================================

class ModelFactory:
    """
    Factory class for creating model instances by name.

    Models must be registered before they can be created.
    """

    _models = {}

    @classmethod
    def register_model(cls, name: str, model_class: type) -> None:
        """
        Register a model class with the factory.

        Args:
            name: Name to register the model under
            model_class: Callable returning a BaseModel, accepting `config=`
        """
        cls._models[name] = model_class

    @classmethod
    def create_model(cls, name: str, config: Optional[Dict[str, Any]] = None, **kwargs) -> BaseModel:
        """
        Create a model instance by name.

        Args:
            name: Registered name of the model
            config: Configuration dictionary for the model
            **kwargs: Additional keyword arguments merged into config

        Raises:
            ValueError: If the model name is not registered
        """
        if name not in cls._models:
            raise ValueError(f"Unknown model: {name}")

        full_config = {**(config or {}), **kwargs}
        return cls._models[name](config=full_config)

    @classmethod
    def list_models(cls) -> list:
        """Get list of all registered model names."""
        return list(cls._models.keys())

    @classmethod
    def resolve_model_name(cls, model_name: str) -> Optional[str]:
        """
        Resolve model name to registered name.

        Exact match first, then the longest registered name that prefixes
        or is contained in `model_name` (e.g. 'knn_k30' -> 'knn').
        """
        if model_name in cls._models:
            return model_name

        matches = [registered for registered in cls._models
                   if model_name.startswith(registered) or registered in model_name]
        if matches:
            return max(matches, key=len)

        return None
