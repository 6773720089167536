"""Error taxonomy for the stroke pipeline.

Errors raised by the shared preprocessing stages (loading, cleaning,
encoding, splitting) abort the whole run. Errors raised while fitting a
single model derive from ModelFitError and only take that model down.
"""


class PipelineError(Exception):
    """Base class for all pipeline errors."""


class DataIntegrityError(PipelineError, ValueError):
    """Data the preprocessing stages cannot reconcile (e.g. empty after cleaning)."""


class ModelFitError(PipelineError):
    """A single model could not be fitted."""


class DegenerateClassError(ModelFitError):
    """Training data holds a single outcome class."""


class DegenerateFeatureError(ModelFitError):
    """A feature the algorithm cannot handle (e.g. zero variance for KDE)."""


class HyperparameterSearchError(ModelFitError):
    """Cross-validation could not produce a valid candidate."""
