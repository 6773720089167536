"""Per-model training harness.

Each enabled model is created, fitted on the training set and scored on
the evaluation set independently. A model that fails to fit is reported
and skipped; the others still run.
"""

import time
from typing import Any, Dict, Optional, Tuple
from loguru import logger

from .exceptions import ModelFitError
from .metrics import Evaluator
from .models import ModelFactory, BaseModel


def enabled_models(models_config: Dict[str, Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
    """Models whose config has `enabled: true`, in config order."""
    return {name: cfg for name, cfg in models_config.items() if cfg.get('enabled', False)}


def train_single_model(model_name: str, config: Dict[str, Any], train, test,
                       evaluator: Optional[Evaluator] = None) -> Tuple[BaseModel, Dict[str, Any]]:
    """Fit one model and score it on both parts."""
    evaluator = evaluator or Evaluator()
    start_time = time.time()

    base_name = ModelFactory.resolve_model_name(model_name)
    if base_name is None:
        raise ValueError(f"Unknown model: {model_name}")

    params = {k: v for k, v in config.items() if k != 'enabled'}
    model = ModelFactory.create_model(base_name, config=params)
    model.fit(train)

    metrics = {}
    metrics.update(evaluator.score(model, train, prefix='train_'))
    metrics.update(evaluator.score(model, test, prefix='test_'))
    if model.best_params:
        metrics['best_params'] = dict(model.best_params)
    metrics['training_time'] = time.time() - start_time
    return model, metrics


def train_and_evaluate(models_config: Dict[str, Dict[str, Any]], train, test,
                       evaluator: Optional[Evaluator] = None) -> Tuple[Dict[str, BaseModel], Dict[str, Dict[str, Any]]]:
    """
    Train every enabled model.

    Returns:
        (trained models by name, results by name); a failed model has
        `{'error': message}` as its result and no trained model
    """
    models = enabled_models(models_config)
    logger.info(f"Training {len(models)} models:")
    for name in models:
        logger.info(f" - {name}")

    trained, results = {}, {}
    for idx, (model_name, config) in enumerate(models.items(), 1):
        logger.info(f"[{idx}/{len(models)}] Training {model_name}...")
        try:
            model, metrics = train_single_model(model_name, config, train, test, evaluator)
        except (ModelFitError, ValueError) as e:
            logger.error(f"  ✗ {model_name} failed: {e}")
            results[model_name] = {'error': str(e), 'error_type': type(e).__name__}
            continue

        trained[model_name] = model
        results[model_name] = metrics
        cm = metrics['test_confusion_matrix']
        logger.info(f"  ✓ Complete - Test accuracy: {metrics['test_accuracy']:.4f} "
                    f"(TN={cm['tn']}, FP={cm['fp']}, FN={cm['fn']}, TP={cm['tp']})")

    return trained, results


def select_best_model(results: Dict[str, Dict[str, Any]], metric: str = 'test_accuracy',
                      mode: str = 'max') -> Optional[str]:
    """Name of the best successful model by `metric`, or None."""
    successful = {k: v for k, v in results.items() if 'error' not in v and metric in v}
    if not successful:
        return None
    pick = min if mode == 'min' else max
    return pick(successful, key=lambda k: successful[k][metric])
