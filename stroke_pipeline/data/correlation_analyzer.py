"""
Outcome Correlation Module
==========================

Pearson correlation of every encoded feature against the 0/1 outcome.

"""

import numpy as np
import pandas as pd
from typing import Optional, Sequence
import logging

logger = logging.getLogger(__name__)


class OutcomeCorrelationAnalyzer:
    """Correlates features with the numeric outcome view."""

    def __init__(self, target: str = 'stroke'):
        self.target = target
        self.correlations: Optional[pd.Series] = None

    def compute(self, df: pd.DataFrame, feature_columns: Optional[Sequence[str]] = None) -> pd.Series:
        """
        Compute Pearson r for each feature.

        Args:
            df: Encoded frame holding the numeric outcome column
            feature_columns: Features to correlate; defaults to every other column

        Returns:
            Series indexed by feature, ordered by absolute correlation
            (constant features give NaN and sort last)
        """
        if feature_columns is None:
            feature_columns = [c for c in df.columns if c != self.target]

        outcome = df[self.target].astype(float)
        features = df[list(feature_columns)].astype(float)

        with np.errstate(divide='ignore', invalid='ignore'):
            corr = features.corrwith(outcome, method='pearson')

        order = corr.abs().sort_values(ascending=False, na_position='last').index
        self.correlations = corr.loc[order].rename('pearson_r')

        constant = self.correlations[self.correlations.isna()].index.tolist()
        if constant:
            logger.warning(f"No correlation for constant features: {constant}")
        for name, value in self.correlations.head(5).items():
            logger.info(f"  {name}: r={value:+.4f}")

        return self.correlations
