"""
Feature Encoder Module
======================

Turns a cleaned stroke frame into an all-numeric feature frame:

- continuous attributes are min-max rescaled onto [0, 1]
- categorical attributes are expanded into one indicator column per value
  of an explicit schema
- the outcome is cast to 0/1

Every step takes a frame and returns a new one; nothing is modified in place.
"""

import numpy as np
import pandas as pd
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple
from sklearn.preprocessing import MinMaxScaler, OneHotEncoder
import logging

from ..exceptions import DataIntegrityError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CategoricalSchema:
    """Full domain of each categorical attribute and its indicator column names."""
    domains: Dict[str, Tuple]

    @classmethod
    def from_frame(cls, df: pd.DataFrame, attributes: Sequence[str]) -> 'CategoricalSchema':
        """Enumerate the observed domain of every attribute, sorted."""
        domains = {}
        for attribute in attributes:
            if attribute not in df.columns:
                raise DataIntegrityError(f"Categorical attribute '{attribute}' not in dataset")
            if df[attribute].isna().any():
                raise DataIntegrityError(f"Categorical attribute '{attribute}' has missing values")
            domains[attribute] = tuple(sorted(df[attribute].unique().tolist()))
        return cls(domains=domains)

    def indicator_columns(self, attribute: str) -> List[str]:
        return [f"{attribute}_{value}" for value in self.domains[attribute]]

    @property
    def columns(self) -> List[str]:
        columns = []
        for attribute in self.domains:
            columns.extend(self.indicator_columns(attribute))
        return columns

    @property
    def n_columns(self) -> int:
        return sum(len(values) for values in self.domains.values())

    def one_hot_encoder(self) -> OneHotEncoder:
        """Unfitted encoder restricted to the schema domains, in schema order."""
        return OneHotEncoder(categories=[list(values) for values in self.domains.values()],
                             handle_unknown='error', sparse_output=False, dtype=np.int64)


def one_hot_encode(df: pd.DataFrame, schema: CategoricalSchema) -> pd.DataFrame:
    """Replace each schema attribute with its indicator columns."""
    attributes = list(schema.domains)
    encoder = schema.one_hot_encoder()
    try:
        indicators = encoder.fit_transform(df[attributes])
    except ValueError as e:
        raise DataIntegrityError(f"Values of {attributes} outside the categorical schema: {e}") from e

    out = df.drop(columns=attributes)
    indicators = pd.DataFrame(indicators, columns=encoder.get_feature_names_out(attributes),
                              index=df.index)
    return pd.concat([out, indicators], axis=1)


def rescale(df: pd.DataFrame, scaler: MinMaxScaler, columns: Sequence[str]) -> pd.DataFrame:
    """Apply a fitted min-max scaler to `columns`."""
    out = df.copy()
    out[list(columns)] = scaler.transform(df[list(columns)].astype(float))
    return out


class Encoder:
    """
    Numeric encoding of the stroke dataset.

    The schema and the scaler are fitted separately so that the rescaling
    statistics can come either from the full dataset or from the training
    part only.

    Args:
        continuous: Attributes rescaled onto [0, 1]
        categorical: Attributes expanded into indicator columns
        target: Outcome column, cast to 0/1
        clip: Clip rescaled values into [0, 1]
    """

    def __init__(self, continuous: Sequence[str], categorical: Sequence[str],
                 target: str = 'stroke', clip: bool = True):
        self.continuous = list(continuous)
        self.categorical = list(categorical)
        self.target = target
        self.clip = clip
        self.schema: Optional[CategoricalSchema] = None
        self.scaler: Optional[MinMaxScaler] = None

    def fit_schema(self, df: pd.DataFrame) -> 'Encoder':
        self.schema = CategoricalSchema.from_frame(df, self.categorical)
        logger.info(f"Categorical schema: {self.schema.n_columns} indicator columns "
                    f"from {len(self.categorical)} attributes")
        return self

    def fit_scaler(self, df: pd.DataFrame) -> 'Encoder':
        self._check_continuous(df)
        self.scaler = MinMaxScaler(clip=self.clip)
        self.scaler.fit(df[self.continuous].astype(float))
        for column, lo, hi in zip(self.continuous, self.scaler.data_min_, self.scaler.data_max_):
            logger.debug(f"  {column}: min={lo:.4f}, max={hi:.4f}")
        logger.info(f"Fitted minmax scaler on {len(df)} records, {len(self.continuous)} attributes")
        return self

    def fit(self, df: pd.DataFrame) -> 'Encoder':
        return self.fit_schema(df).fit_scaler(df)

    def encode_categorical(self, df: pd.DataFrame) -> pd.DataFrame:
        """One-hot encode categoricals and cast the outcome; continuous columns untouched."""
        if self.schema is None:
            raise RuntimeError("Call fit_schema() or fit() first.")
        self._check_continuous(df)

        undeclared = [c for c in df.columns
                      if c not in self.continuous and c not in self.categorical and c != self.target]
        if undeclared:
            logger.warning(f"Dropping undeclared columns: {undeclared}")

        kept = df[self.continuous + self.categorical + [self.target]]
        encoded = one_hot_encode(kept, self.schema)
        encoded[self.target] = self._numeric_outcome(encoded[self.target])
        return encoded[self.feature_columns + [self.target]]

    def scale(self, df: pd.DataFrame) -> pd.DataFrame:
        if self.scaler is None:
            raise RuntimeError("Call fit_scaler() or fit() first.")
        return rescale(df, self.scaler, self.continuous)

    def transform(self, df: pd.DataFrame) -> pd.DataFrame:
        return self.scale(self.encode_categorical(df))

    def fit_transform(self, df: pd.DataFrame) -> pd.DataFrame:
        return self.fit(df).transform(df)

    @property
    def feature_columns(self) -> List[str]:
        if self.schema is None:
            raise RuntimeError("Encoder schema is not fitted.")
        return self.continuous + self.schema.columns

    def outcome_views(self, df: pd.DataFrame) -> Tuple[pd.Series, pd.Series]:
        """
        Two views of the outcome.

        Returns:
            Numeric 0/1 series (for correlation) and categorical series
            (for classifier fitting)
        """
        numeric = self._numeric_outcome(df[self.target])
        labels = pd.Series(pd.Categorical(numeric, categories=[0, 1]),
                           index=df.index, name=self.target)
        return numeric, labels

    def _numeric_outcome(self, series: pd.Series) -> pd.Series:
        numeric = pd.to_numeric(series, errors='coerce')
        if numeric.isna().any() or not numeric.isin([0, 1]).all():
            raise DataIntegrityError(f"Outcome '{self.target}' must be coded 0/1")
        return numeric.astype(np.int64)

    def _check_continuous(self, df: pd.DataFrame) -> None:
        missing = [c for c in self.continuous if c not in df.columns]
        if missing:
            raise DataIntegrityError(f"Continuous attributes not in dataset: {missing}")
        if df[self.continuous].isna().any().any():
            raise DataIntegrityError("Continuous attributes contain missing values")
