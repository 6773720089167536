import numpy as np
import pandas as pd
import pytest

from stroke_pipeline.data.loader import STROKE_COLUMNS

N_ROWS = 400
N_NA_BMI = 10
BLANK_BMI_ROW = 11
N_MISSING_BMI = N_NA_BMI + 1
OTHER_GENDER_ROW = 10

CONTINUOUS = ['age', 'avg_glucose_level', 'bmi']
CATEGORICAL = ['gender', 'hypertension', 'heart_disease', 'ever_married',
               'work_type', 'Residence_type', 'smoking_status']


def _exact(rng, counts):
    """Column holding each value exactly `count` times, shuffled."""
    values = np.concatenate([np.repeat(np.array([v], dtype=object), n) for v, n in counts.items()])
    return rng.permutation(values)


def make_raw_frame(seed=7):
    rng = np.random.default_rng(seed)

    age = np.round(rng.uniform(1, 82, N_ROWS), 1)
    glucose = np.round(rng.uniform(55, 270, N_ROWS), 2)
    bmi = np.round(rng.normal(28, 6, N_ROWS).clip(12, 60), 1)

    risk = (age - 1) / 81 + (glucose - 55) / 215 + rng.normal(0, 0.15, N_ROWS)
    stroke = (risk > 1.35).astype(int)

    gender = _exact(rng, {'Female': 230, 'Male': 170})
    gender[OTHER_GENDER_ROW] = 'Other'

    bmi_text = bmi.astype(str).astype(object)
    bmi_text[:N_NA_BMI] = 'N/A'
    bmi_text[BLANK_BMI_ROW] = ''

    return pd.DataFrame({
        'id': rng.permutation(np.arange(10000, 10000 + N_ROWS)),
        'gender': gender,
        'age': age,
        'hypertension': _exact(rng, {0: 360, 1: 40}).astype(int),
        'heart_disease': _exact(rng, {0: 376, 1: 24}).astype(int),
        'ever_married': _exact(rng, {'Yes': 260, 'No': 140}),
        'work_type': _exact(rng, {'Private': 220, 'Self-employed': 70, 'Govt_job': 50,
                                  'children': 48, 'Never_worked': 12}),
        'Residence_type': _exact(rng, {'Urban': 205, 'Rural': 195}),
        'avg_glucose_level': glucose,
        'bmi': bmi_text,
        'smoking_status': _exact(rng, {'never smoked': 150, 'Unknown': 120,
                                       'formerly smoked': 70, 'smokes': 60}),
        'stroke': stroke,
    })[STROKE_COLUMNS]


@pytest.fixture
def raw_frame():
    return make_raw_frame()


@pytest.fixture
def raw_csv(tmp_path, raw_frame):
    path = tmp_path / 'stroke.csv'
    raw_frame.to_csv(path, index=False)
    return path


@pytest.fixture
def data_config():
    return {
        'target': 'stroke',
        'id_column': 'id',
        'continuous': list(CONTINUOUS),
        'categorical': list(CATEGORICAL),
        'cleaning': {'numeric_coerce': ['bmi'], 'drop_missing': ['bmi'], 'min_category_count': 2},
        'scaling': {'after_split': False},
        'split': {'train_fraction': 0.8, 'random_state': 3333, 'stratify': False},
    }
