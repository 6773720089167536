"""Record cleaning for the stroke dataset."""

import pandas as pd
from typing import Dict, Any, List, Optional, Sequence
from loguru import logger

from ..exceptions import DataIntegrityError
from .loader import STROKE_CATEGORICAL


class Cleaner:
    """
    Removes the identifier column, fixes malformed numeric fields and drops
    incomplete or degenerate records.

    Rows are never imputed: a record with a missing value in a `drop_missing`
    column is removed. A categorical value seen fewer than
    `min_category_count` times gives no basis for encoding, so its records
    are removed as well. That filter runs to a fixed point, which keeps
    `clean(clean(df)) == clean(df)`.
    """

    def __init__(
        self,
        id_column: Optional[str] = 'id',
        numeric_coerce: Sequence[str] = ('bmi',),
        drop_missing: Sequence[str] = ('bmi',),
        categorical: Sequence[str] = tuple(STROKE_CATEGORICAL),
        min_category_count: int = 2
    ):
        self.id_column = id_column
        self.numeric_coerce = list(numeric_coerce)
        self.drop_missing = list(drop_missing)
        self.categorical = list(categorical)
        self.min_category_count = min_category_count
        self.report: List[Dict[str, Any]] = []

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'Cleaner':
        """Build a cleaner from the 'data' configuration section."""
        cleaning = config.get('cleaning', {})
        return cls(
            id_column=config.get('id_column', 'id'),
            numeric_coerce=cleaning.get('numeric_coerce', ['bmi']),
            drop_missing=cleaning.get('drop_missing', ['bmi']),
            categorical=config.get('categorical', STROKE_CATEGORICAL),
            min_category_count=cleaning.get('min_category_count', 2)
        )

    def clean(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Return a cleaned copy of `df`.

        Raises:
            DataIntegrityError: If no records survive cleaning
        """
        self.report = []
        out = df.copy()

        if self.id_column and self.id_column in out.columns:
            out = out.drop(columns=[self.id_column])

        for column in self.numeric_coerce:
            if column in out.columns:
                out[column] = pd.to_numeric(out[column], errors='coerce')

        present = [c for c in self.drop_missing if c in out.columns]
        out = self._record('missing_values', out, out.dropna(subset=present))
        out = self._record('rare_categories', out, self._drop_rare_categories(out))

        if out.empty:
            raise DataIntegrityError("No records left after cleaning")

        removed = len(df) - len(out)
        logger.info(f"Cleaning: {len(df)} -> {len(out)} records ({removed} removed)")
        return out

    def _drop_rare_categories(self, df: pd.DataFrame) -> pd.DataFrame:
        columns = [c for c in self.categorical if c in df.columns]
        while True:
            keep = pd.Series(True, index=df.index)
            for column in columns:
                counts = df[column].value_counts()
                rare = counts[counts < self.min_category_count].index.tolist()
                if rare:
                    logger.debug(f"Dropping rare {column} values: {rare}")
                # Missing categorical values map to NaN and are dropped too
                keep &= df[column].map(counts) >= self.min_category_count
            if keep.all():
                return df
            df = df[keep]

    def _record(self, step: str, before: pd.DataFrame, after: pd.DataFrame) -> pd.DataFrame:
        self.report.append({'step': step, 'rows_in': len(before),
                            'rows_out': len(after), 'removed': len(before) - len(after)})
        if len(before) != len(after):
            logger.info(f"  {step}: removed {len(before) - len(after)} records")
        return after
