#!/usr/bin/env python3
"""
Stroke Prediction Training
==========================

Runs the full pipeline from a YAML configuration: load, clean, encode,
split, then train and evaluate every enabled model.

Usage:
    python scripts/train.py configs/stroke.yaml [--debug]
"""
import argparse
import json
import shutil
import warnings
from pathlib import Path
from datetime import datetime
from typing import Optional
import logging
import sys

import pandas as pd
from loguru import logger as loguru_logger

# Suppress warnings
warnings.filterwarnings("ignore")

logger = logging.getLogger(__name__)

# Add parent directory to path
sys.path.append(str(Path(__file__).parent.parent))

# Framework imports
from stroke_pipeline import __version__
from stroke_pipeline.data import DatasetLoader, PreprocessingPipeline
from stroke_pipeline.metrics import Evaluator
from stroke_pipeline.training import train_and_evaluate, select_best_model
from stroke_pipeline.utils import Config


class StrokeTrainer:
    """Main training orchestrator that reads all configuration from YAML."""

    def __init__(self, config_path: str):
        """Initialize trainer with configuration file."""
        self.config_path = Path(config_path)
        self.project_root = Path(__file__).parent.parent
        self.config = Config(self.config_path)

        self.experiment_name = self._create_experiment_name()
        self.random_seed = self.config.get_data_config().get('split', {}).get('random_state', 3333)

        self.results = {}
        self.trained_models = {}
        self.prepared = None
        self.preprocessing_state = None
        self._output_dir = (self.project_root / self.config.get_output_config().get('output_dir', 'results')
                            / self.experiment_name)

        logger.info(f"Initialized trainer - Experiment: {self.experiment_name}")

    def _create_experiment_name(self) -> str:
        """Create unique experiment identifier."""
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        return f"{self.config_path.stem}_{timestamp}"

    def run(self):
        """Execute the complete training pipeline."""
        logger.info("=" * 80)
        logger.info("STROKE PREDICTION PIPELINE")
        logger.info("=" * 80)
        logger.info(f"Configuration: {self.config_path.name}")
        logger.info(f"Experiment: {self.experiment_name}")
        logger.info(f"Random seed: {self.random_seed}")
        logger.info("=" * 80)

        try:
            self._load_and_preprocess_data()
            self._train_models()
            self._save_results()
            self._print_summary()
        except Exception as e:
            logger.error(f"Pipeline failed: {str(e)}", exc_info=True)
            raise

    def _load_and_preprocess_data(self):
        """Load data and apply the shared preprocessing stages."""
        logger.info("\n" + "=" * 60)
        logger.info("DATA LOADING AND PREPROCESSING")
        logger.info("=" * 60)

        data_config = self.config.get_data_config()
        raw = DatasetLoader().load_from_config(data_config, self.project_root)

        pipeline = PreprocessingPipeline(data_config)
        self.prepared, self.preprocessing_state = pipeline.execute_pipeline(raw)

        logger.info("\nPreprocessing stages:")
        for stage in self.preprocessing_state.stages:
            logger.info(f"  {stage['name']}: {stage['n_rows_in']} → {stage['n_rows_out']} rows, "
                        f"{stage['n_features_in']} → {stage['n_features_out']} columns")

    def _train_models(self):
        """Train all enabled models from configuration."""
        logger.info("\n" + "=" * 60)
        logger.info("MODEL TRAINING")
        logger.info("=" * 60)

        metrics = self.config.get_evaluation_config().get('metrics')
        self.trained_models, self.results = train_and_evaluate(
            self.config.get_models_config(),
            self.prepared.train,
            self.prepared.test,
            evaluator=Evaluator(metrics)
        )

    def _save_results(self):
        """Save results, correlations and metadata."""
        output_config = self.config.get_output_config()
        if not output_config.get('save_results', True):
            return

        logger.info("\n" + "=" * 60)
        logger.info("SAVING RESULTS")
        logger.info("=" * 60)

        dirs = {
            'metadata': self._output_dir / 'metadata',
            'results': self._output_dir / 'results',
            'configs': self._output_dir / 'configs'
        }
        for dir_path in dirs.values():
            dir_path.mkdir(parents=True, exist_ok=True)

        results_format = output_config.get('results_format', 'both')

        if results_format in ['json', 'both']:
            with open(dirs['results'] / 'detailed_results.json', 'w') as f:
                json.dump(self.results, f, indent=2, default=float)

        if results_format in ['csv', 'both']:
            successful_results = {k: v for k, v in self.results.items() if 'error' not in v}
            if successful_results:
                rows = []
                for model_name, metrics in successful_results.items():
                    row = {'model': model_name}
                    for k, v in metrics.items():
                        if isinstance(v, dict):
                            row.update({f'{k}_{dk}': dv for dk, dv in v.items()})
                        else:
                            row[k] = v
                    rows.append(row)
                csv_filename = f'{self.config_path.stem}.csv'
                pd.DataFrame(rows).set_index('model').to_csv(dirs['results'] / csv_filename)
                logger.info(f"  ✓ Saved results to {csv_filename}")

        self.prepared.correlations.to_csv(dirs['results'] / 'correlations.csv', header=True)
        logger.info("  ✓ Saved outcome correlations")

        selection = self.config.get_evaluation_config().get('model_selection', {})
        metadata = {
            'experiment': {
                'name': self.experiment_name,
                'timestamp': datetime.now().isoformat(),
                'config_file': self.config_path.name,
                'random_seed': self.random_seed,
                'framework_version': __version__
            },
            'data': {
                'preprocessing_stages': [
                    {k: v for k, v in s.items() if k != 'steps'} for s in self.preprocessing_state.stages
                ],
                'cleaning_steps': self.preprocessing_state.stages[0].get('steps', []),
                'final_features': len(self.prepared.feature_columns),
                'feature_columns': self.prepared.feature_columns
            },
            'models': {
                'trained': list(self.trained_models.keys()),
                'best_model': self._get_best_model(),
                'failed': [k for k, v in self.results.items() if 'error' in v]
            },
            'model_selection': selection or {'metric': 'test_accuracy', 'mode': 'max'}
        }

        with open(dirs['metadata'] / 'experiment_metadata.json', 'w') as f:
            json.dump(metadata, f, indent=2, default=str)

        shutil.copy2(self.config_path, dirs['configs'] / 'config.yaml')
        logger.info(f"\n  All results saved to: {self._output_dir}")

    def _get_best_model(self) -> Optional[str]:
        """Get the best performing model based on configured metric."""
        selection_config = self.config.get_evaluation_config().get('model_selection', {})
        return select_best_model(self.results,
                                 metric=selection_config.get('metric', 'test_accuracy'),
                                 mode=selection_config.get('mode', 'max'))

    def _print_summary(self):
        """Print training summary."""
        logger.info("\n" + "=" * 80)
        logger.info("TRAINING SUMMARY")
        logger.info("=" * 80)

        successful = [k for k, v in self.results.items() if 'error' not in v]
        failed = [k for k, v in self.results.items() if 'error' in v]

        logger.info(f"\nModels trained: {len(successful)}/{len(self.results)}")

        selection_config = self.config.get_evaluation_config().get('model_selection', {})
        metric = selection_config.get('metric', 'test_accuracy')
        mode = selection_config.get('mode', 'max')

        if successful:
            reverse = (mode == 'max')
            sorted_models = sorted(
                successful,
                key=lambda k: self.results[k].get(metric, float('-inf') if reverse else float('inf')),
                reverse=reverse
            )

            logger.info(f"\nModels by {metric} ({mode}):")
            for i, model in enumerate(sorted_models, 1):
                metrics = self.results[model]
                cm = metrics['test_confusion_matrix']
                params = metrics.get('best_params', {})
                logger.info(
                    f"  {i}. {model:<22} {metric}: {metrics.get(metric, float('nan')):.4f}, "
                    f"CM [TN={cm['tn']} FP={cm['fp']} FN={cm['fn']} TP={cm['tp']}]"
                    + (f", {params}" if params else "")
                )

        if failed:
            logger.info(f"\nFailed models: {', '.join(failed)}")

        logger.info("\nStrongest outcome correlations:")
        for name, value in self.prepared.correlations.head(5).items():
            logger.info(f"  {name:<32} r={value:+.4f}")

        logger.info("\n" + "=" * 80)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Stroke prediction pipeline"
    )

    parser.add_argument(
        'config',
        type=str,
        help='Path to configuration file (YAML)'
    )

    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )

    args = parser.parse_args()

    config_path = Path(args.config)
    if not config_path.exists():
        print(f"Configuration file not found: {args.config}", file=sys.stderr)
        return 1

    output_dir = Config(config_path).get_output_config().get('output_dir', 'results')

    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    log_dir = Path(__file__).parent.parent / output_dir / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"{config_path.stem}_{timestamp}.log"

    level = logging.DEBUG if args.debug else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(), logging.FileHandler(log_file)],
        force=True
    )
    loguru_logger.remove()
    loguru_logger.add(sys.stderr, level=logging.getLevelName(level))
    loguru_logger.add(log_dir / f"{config_path.stem}_{timestamp}_pipeline.log",
                      level=logging.getLevelName(level))

    print(f"Log file: {log_file}")
    print("=" * 80)

    try:
        trainer = StrokeTrainer(args.config)
        trainer.run()
        return 0
    except Exception as e:
        logging.error(f"Training failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
