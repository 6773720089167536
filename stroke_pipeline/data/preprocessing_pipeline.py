"""
Preprocessing Pipeline Implementation
=========================================================

Runs the shared preprocessing stages in a fixed order and records what each
stage did.

Pipeline Stages:
1. Cleaning (identifier removal, numeric coercion, record filtering)
2. Encoding (explicit categorical schema, indicator columns, 0/1 outcome)
3. Scaling (min-max onto [0, 1]); before splitting by default
4. Splitting (seeded train/test partition)

With `scaling.after_split: true` stage 3 runs after stage 4 and the scaler
is fitted on the training part only.

"""

import dataclasses
import pandas as pd
from typing import Dict, Tuple, Optional, List, Any
from dataclasses import dataclass, field
import logging

from .cleaner import Cleaner
from .loader import STROKE_CATEGORICAL, STROKE_CONTINUOUS
from .encoder import Encoder
from .splitter import Splitter, LabeledDataset
from .correlation_analyzer import OutcomeCorrelationAnalyzer

logger = logging.getLogger(__name__)


@dataclass
class PreprocessingState:
    """Stores what the preprocessing stages did."""
    stages: List[Dict[str, Any]] = field(default_factory=list)
    transformers: Dict[str, Any] = field(default_factory=dict)
    config: Dict[str, Any] = field(default_factory=dict)


@dataclass
class PreparedData:
    """Output of the shared stages, consumed by every model."""
    train: LabeledDataset
    test: LabeledDataset
    encoded: pd.DataFrame
    correlations: pd.Series
    feature_columns: List[str]
    target: str


class PreprocessingPipeline:
    """
    Shared preprocessing for all models.

    Any error raised here aborts the run: every model depends on the
    prepared split.
    """

    def __init__(self, config: Dict[str, Any]):
        """
        Initialize with the 'data' configuration dictionary.

        Args:
            config: Configuration dictionary containing settings for each stage
        """
        self.config = config
        self.state = PreprocessingState(config=config)
        self.target = config.get('target', 'stroke')

        scaling = config.get('scaling', {})
        self.scale_after_split = scaling.get('after_split', False)

        self.cleaner = Cleaner.from_config({
            **config,
            'categorical': config.get('categorical', STROKE_CATEGORICAL)
        })
        self.encoder = Encoder(
            continuous=config.get('continuous', STROKE_CONTINUOUS),
            categorical=config.get('categorical', STROKE_CATEGORICAL),
            target=self.target,
            clip=scaling.get('clip', not self.scale_after_split)
        )

        split = config.get('split', {})
        self.splitter = Splitter(
            train_fraction=split.get('train_fraction', 0.8),
            random_state=split.get('random_state', 3333),
            stratify=split.get('stratify', False)
        )

    def execute_pipeline(self, raw: pd.DataFrame) -> Tuple[PreparedData, PreprocessingState]:
        """
        Run all stages on a raw frame.

        Returns:
            (prepared data, preprocessing state)
        """
        cleaned = self.cleaner.clean(raw)
        self._update_state('cleaning', raw, cleaned, {'steps': self.cleaner.report})

        self.encoder.fit_schema(cleaned)
        encoded = self.encoder.encode_categorical(cleaned)
        self._update_state('encoding', cleaned, encoded,
                           {'domains': {k: [str(v) for v in vals]
                                        for k, vals in self.encoder.schema.domains.items()}})

        features = self.encoder.feature_columns

        if self.scale_after_split:
            train, test = self.splitter.split(encoded, features, self.target)
            self._update_split_state(encoded, train, test)

            self.encoder.fit_scaler(train.frame)
            train = dataclasses.replace(train, frame=self.encoder.scale(train.frame))
            test = dataclasses.replace(test, frame=self.encoder.scale(test.frame))
            encoded = pd.concat([train.frame, test.frame]).loc[encoded.index]
            self._update_state('scaling', train.frame, train.frame, {'fitted_on': 'train'})
        else:
            self.encoder.fit_scaler(encoded)
            scaled = self.encoder.scale(encoded)
            self._update_state('scaling', encoded, scaled, {'fitted_on': 'full'})
            encoded = scaled

            train, test = self.splitter.split(encoded, features, self.target)
            self._update_split_state(encoded, train, test)

        self.state.transformers['schema'] = self.encoder.schema
        self.state.transformers['scaler'] = self.encoder.scaler

        analyzer = OutcomeCorrelationAnalyzer(self.target)
        correlations = analyzer.compute(encoded, features)

        logger.info(f"Preprocessing complete: {raw.shape[1]} columns → {len(features)} features")
        prepared = PreparedData(
            train=train, test=test, encoded=encoded, correlations=correlations,
            feature_columns=features, target=self.target
        )
        return prepared, self.state

    def _update_split_state(self, encoded: pd.DataFrame, train: LabeledDataset,
                            test: LabeledDataset) -> None:
        self._update_state('splitting', encoded, train.frame, {
            'n_train': len(train), 'n_test': len(test),
            'random_state': self.splitter.random_state
        })

    def _update_state(self, stage_name: str, before: pd.DataFrame, after: pd.DataFrame,
                      extra_info: Optional[Dict[str, Any]] = None) -> None:
        """Update pipeline state with stage information."""
        stage_info = {
            'name': stage_name,
            'n_rows_in': len(before),
            'n_rows_out': len(after),
            'n_features_in': before.shape[1],
            'n_features_out': after.shape[1],
        }
        if extra_info:
            stage_info.update(extra_info)
        self.state.stages.append(stage_info)
