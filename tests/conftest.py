"""Test configuration and fixtures."""

import tempfile
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from stroke_risk.config import load_config
from stroke_risk.data.generate_stroke_data import StrokeDataGenerator, save_csv
from stroke_risk.data.records import PatientRecord


def make_record(age=50.0, hypertension=0, heart_disease=0, ever_married="No",
                avg_glucose_level=90.0, bmi=25.0, stroke=0):
    return PatientRecord(
        age=age,
        hypertension=hypertension,
        heart_disease=heart_disease,
        ever_married=ever_married,
        avg_glucose_level=avg_glucose_level,
        bmi=bmi,
        stroke=stroke,
    )


@pytest.fixture
def high_risk_record():
    return make_record(age=70, hypertension=0, heart_disease=1, ever_married="Yes",
                       avg_glucose_level=100, bmi=22, stroke=1)


@pytest.fixture
def moderate_risk_record():
    return make_record(age=50, hypertension=1, heart_disease=0, ever_married="No",
                       avg_glucose_level=160, bmi=30, stroke=0)


@pytest.fixture
def low_risk_record():
    return make_record(age=40, hypertension=0, heart_disease=0, ever_married="No",
                       avg_glucose_level=90, bmi=20, stroke=0)


@pytest.fixture
def sample_records():
    """Small hand-built cohort: 4 positives, 8 negatives."""
    return [
        make_record(age=72, heart_disease=1, ever_married="Yes", avg_glucose_level=110, bmi=27, stroke=1),
        make_record(age=80, hypertension=1, heart_disease=1, ever_married="Yes", avg_glucose_level=210, bmi=31, stroke=1),
        make_record(age=58, hypertension=1, avg_glucose_level=190, bmi=33, stroke=1),
        make_record(age=67, ever_married="Yes", avg_glucose_level=95, bmi=np.nan, stroke=1),
        make_record(age=35, ever_married="Yes", avg_glucose_level=85, bmi=23, stroke=0),
        make_record(age=28, avg_glucose_level=78, bmi=21, stroke=0),
        make_record(age=45, hypertension=1, ever_married="Yes", avg_glucose_level=170, bmi=29, stroke=0),
        make_record(age=52, ever_married="Yes", avg_glucose_level=102, bmi=26, stroke=0),
        make_record(age=61, heart_disease=1, ever_married="Yes", avg_glucose_level=120, bmi=30, stroke=0),
        make_record(age=19, avg_glucose_level=88, bmi=19.5, stroke=0),
        make_record(age=40, ever_married="Yes", avg_glucose_level=99, bmi=24, stroke=0),
        make_record(age=33, hypertension=1, avg_glucose_level=140, bmi=28, stroke=0),
    ]


@pytest.fixture
def temp_directory():
    """Create temporary directory for testing."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def synthetic_frame():
    """Generated stroke dataset large enough to train a tree."""
    return StrokeDataGenerator(seed=7).generate_dataset(num_patients=400, prevalence=0.1)


@pytest.fixture
def sample_csv(temp_directory, synthetic_frame):
    return save_csv(synthetic_frame, temp_directory / "stroke-data.csv")


@pytest.fixture
def write_csv(temp_directory):
    """Write raw CSV text to a file and return its path."""
    def _write(text, name="patients.csv"):
        path = temp_directory / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write


@pytest.fixture
def sample_config():
    """Default configuration with a fixed split seed."""
    config = load_config()
    config['split']['random_state'] = 0
    return config


@pytest.fixture
def sample_frame():
    return pd.DataFrame({
        'age': [70.0, 50.0, 40.0],
        'hypertension': [0, 1, 0],
        'heart_disease': [1, 0, 0],
        'ever_married': ['Yes', 'No', 'No'],
        'avg_glucose_level': [100.0, 160.0, 90.0],
        'bmi': [22.0, 30.0, np.nan],
        'stroke': [1, 0, 0],
    })
