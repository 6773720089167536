"""Seeded train/test partitioning."""

import numpy as np
import pandas as pd
from dataclasses import dataclass
from typing import List, Sequence, Tuple
from sklearn.model_selection import train_test_split
from loguru import logger

from ..exceptions import DataIntegrityError


@dataclass(frozen=True)
class LabeledDataset:
    """Encoded records with a fixed, ordered feature column set."""
    frame: pd.DataFrame
    feature_columns: List[str]
    target: str

    @property
    def X(self) -> np.ndarray:
        return self.frame[self.feature_columns].to_numpy(dtype=float)

    @property
    def y(self) -> np.ndarray:
        return self.frame[self.target].to_numpy(dtype=np.int64)

    @property
    def labels(self) -> pd.Series:
        """Outcome as a categorical series with both classes declared."""
        return pd.Series(pd.Categorical(self.y, categories=[0, 1]),
                         index=self.frame.index, name=self.target)

    @property
    def index(self) -> pd.Index:
        return self.frame.index

    def __len__(self) -> int:
        return len(self.frame)


class Splitter:
    """
    Partitions an encoded frame into disjoint training and evaluation sets.

    The assignment is a seeded permutation of the row index, so the same
    seed always gives the same partition.

    Args:
        train_fraction: Share of records assigned to training
        random_state: Seed of the permutation
        stratify: Preserve the outcome ratio in both parts
    """

    def __init__(self, train_fraction: float = 0.8, random_state: int = 3333,
                 stratify: bool = False):
        if not 0.0 < train_fraction < 1.0:
            raise ValueError(f"train_fraction must be in (0, 1), got {train_fraction}")
        self.train_fraction = train_fraction
        self.random_state = random_state
        self.stratify = stratify

    def split(self, df: pd.DataFrame, feature_columns: Sequence[str],
              target: str) -> Tuple[LabeledDataset, LabeledDataset]:
        if len(df) < 2:
            raise DataIntegrityError(f"Cannot split {len(df)} records")

        try:
            train_idx, test_idx = train_test_split(
                df.index.to_numpy(),
                train_size=self.train_fraction,
                random_state=self.random_state,
                shuffle=True,
                stratify=df[target].to_numpy() if self.stratify else None
            )
        except ValueError as e:
            raise DataIntegrityError(f"Split failed: {e}") from e

        train = LabeledDataset(df.loc[train_idx], list(feature_columns), target)
        test = LabeledDataset(df.loc[test_idx], list(feature_columns), target)

        logger.info(f"Data splits (seed={self.random_state}):")
        logger.info(f"  Train: {len(train)} samples ({len(train)/len(df)*100:.1f}%)")
        logger.info(f"  Test: {len(test)} samples ({len(test)/len(df)*100:.1f}%)")
        for split_name, part in [('Train', train), ('Test', test)]:
            unique, counts = np.unique(part.y, return_counts=True)
            logger.info(f"  {split_name} classes: {dict(zip(unique.tolist(), counts.tolist()))}")

        return train, test
