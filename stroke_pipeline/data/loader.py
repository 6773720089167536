"""Data loading utilities for the stroke dataset."""

import pandas as pd
from pathlib import Path
from typing import Dict, Any, List, Optional, Sequence, Union
from loguru import logger

from ..exceptions import DataIntegrityError


DEFAULT_NA_VALUES = ['N/A', '']

STROKE_COLUMNS = [
    'id', 'gender', 'age', 'hypertension', 'heart_disease', 'ever_married',
    'work_type', 'Residence_type', 'avg_glucose_level', 'bmi',
    'smoking_status', 'stroke'
]

STROKE_CONTINUOUS = ['age', 'avg_glucose_level', 'bmi']
STROKE_CATEGORICAL = ['gender', 'hypertension', 'heart_disease', 'ever_married',
                      'work_type', 'Residence_type', 'smoking_status']


class DatasetLoader:
    """Reads the raw delimited stroke file into a DataFrame."""

    def __init__(self, required_columns: Optional[Sequence[str]] = None,
                 na_values: Optional[List[str]] = None):
        """
        Initialize the loader.

        Args:
            required_columns: Header columns that must be present
            na_values: Tokens parsed as missing values
        """
        self.required_columns = list(required_columns) if required_columns is not None else list(STROKE_COLUMNS)
        self.na_values = list(na_values) if na_values is not None else list(DEFAULT_NA_VALUES)

    def load_from_config(self, config: Dict[str, Any], project_root: Path = Path('.')) -> pd.DataFrame:
        """
        Load the dataset described by the 'data' configuration section.

        Config format:
            {file: 'data/healthcare-dataset-stroke-data.csv', na_values: ['N/A'], delimiter: ','}

        Args:
            config: Data configuration dictionary
            project_root: Root directory for relative paths

        Returns:
            Raw DataFrame
        """
        file_path = config.get('file') or config.get('data_file')
        if not file_path:
            raise ValueError("Data config must provide 'file' or 'data_file' key")

        loader = DatasetLoader(
            required_columns=config.get('required_columns', self.required_columns),
            na_values=config.get('na_values', self.na_values)
        )
        return loader.load(project_root / file_path, delimiter=config.get('delimiter', ','))

    def load(self, file_path: Union[str, Path], delimiter: str = ',') -> pd.DataFrame:
        """Read a delimited file and check its header."""
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        # Only the listed tokens count as missing, so "None" stays a category
        df = pd.read_csv(file_path, sep=delimiter, na_values=self.na_values,
                         keep_default_na=False)
        self._check_columns(df)

        logger.info(f"Loaded: {df.shape[0]} records, {df.shape[1]} columns from {file_path.name}")
        return df

    def _check_columns(self, df: pd.DataFrame) -> None:
        missing = [c for c in self.required_columns if c not in df.columns]
        if missing:
            raise DataIntegrityError(f"Missing required columns: {missing}")
