"""Models module for the stroke pipeline.

Three classifier families share one fit contract:
- K-nearest neighbours with cross-validated k
- Linear support vector machine
- Naive Bayes over kernel density estimates
"""

# Base classes and factory
from .base import (
    BaseModel,
    ModelFactory,
    safe_int,
    safe_float
)

# Classical models
from .classical import (
    SklearnModel,
    KNNModel,
    LinearSVMModel,
)

from .naive_bayes import (
    KernelNaiveBayes,
    KernelNaiveBayesModel,
    silverman_bandwidth,
)

__all__ = [
    'BaseModel',
    'ModelFactory',
    'safe_int',
    'safe_float',
    'SklearnModel',
    'KNNModel',
    'LinearSVMModel',
    'KernelNaiveBayes',
    'KernelNaiveBayesModel',
    'silverman_bandwidth',
]
