"""
Synthetic Stroke Data Generator

Generates patient rows in the same schema as the stroke CSV input so the
pipeline can be exercised without real patient data.
"""

import argparse
import logging
from pathlib import Path
from typing import Optional, Union

import numpy as np
import pandas as pd

from stroke_risk.data.records import REQUIRED_COLUMNS

logger = logging.getLogger(__name__)


class StrokeDataGenerator:
    """Generate synthetic stroke patient rows."""

    def __init__(self, seed: int = 42, bmi_missing_rate: float = 0.04):
        """
        Initialize the generator.

        Args:
            seed: Random seed for reproducibility
            bmi_missing_rate: Fraction of rows whose BMI is left missing
        """
        self.seed = seed
        self.bmi_missing_rate = bmi_missing_rate
        self.rng = np.random.RandomState(seed)

    def generate_demographics(self, num_patients: int) -> pd.DataFrame:
        """Generate age, comorbidities and vitals with age-correlated risk factors."""
        rng = self.rng

        age = np.round(rng.uniform(1, 82, num_patients), 0)
        older = (age - 40).clip(min=0)

        hypertension = (rng.random_sample(num_patients) < 0.03 + older * 0.006).astype(int)
        heart_disease = (rng.random_sample(num_patients) < 0.01 + older * 0.004).astype(int)
        married_prob = np.where(age < 18, 0.02, 0.75)
        ever_married = np.where(rng.random_sample(num_patients) < married_prob, 'Yes', 'No')

        glucose = rng.gamma(shape=9.0, scale=11.5, size=num_patients)
        glucose = glucose + hypertension * rng.normal(25, 10, num_patients)
        glucose = np.round(glucose.clip(55, 272), 2)

        bmi = rng.normal(21 + np.minimum(age, 50) * 0.17, 5.5)
        bmi = np.round(bmi.clip(10.3, 97.6), 1)
        bmi[rng.random_sample(num_patients) < self.bmi_missing_rate] = np.nan

        return pd.DataFrame({
            'id': np.arange(1, num_patients + 1),
            'age': age,
            'hypertension': hypertension,
            'heart_disease': heart_disease,
            'ever_married': ever_married,
            'avg_glucose_level': glucose,
            'bmi': bmi,
        })

    def generate_target_variable(self, data: pd.DataFrame, prevalence: float = 0.05) -> pd.Series:
        """Assign stroke outcomes with a logistic risk score scaled to ``prevalence``."""
        logit = (
            0.07 * (data['age'] - 60)
            + 0.6 * data['hypertension']
            + 0.8 * data['heart_disease']
            + 0.008 * (data['avg_glucose_level'] - 100)
        )
        risk = 1 / (1 + np.exp(-logit))

        # Rank-based threshold so the realised prevalence matches the request.
        noisy_risk = risk + self.rng.normal(0, 0.1, len(data))
        n_positive = max(1, int(round(prevalence * len(data))))
        cutoff = np.sort(noisy_risk.to_numpy())[-n_positive]
        return (noisy_risk >= cutoff).astype(int).rename('stroke')

    def generate_dataset(self, num_patients: int, prevalence: float = 0.05) -> pd.DataFrame:
        """
        Generate a complete dataset.

        Args:
            num_patients: Number of rows
            prevalence: Target fraction of stroke == 1 rows

        Returns:
            DataFrame with an ``id`` column plus every required input column
        """
        if num_patients <= 0:
            raise ValueError("num_patients must be positive")
        if not 0 < prevalence < 1:
            raise ValueError("prevalence must be between 0 and 1")

        df = self.generate_demographics(num_patients)
        df['stroke'] = self.generate_target_variable(df, prevalence)
        logger.info(f"Generated {len(df)} patients with stroke prevalence {df['stroke'].mean():.3f}")
        return df[['id'] + REQUIRED_COLUMNS]


def save_csv(df: pd.DataFrame, path: Union[str, Path]) -> Path:
    """Write ``df`` as CSV, marking missing BMI as ``N/A`` like the public dataset."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(out, index=False, na_rep='N/A')
    logger.info(f"Saved {len(df)} rows to {out}")
    return out


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(description="Generate synthetic stroke patient data")
    parser.add_argument("--num_patients", type=int, default=5000, help="Number of patients to generate")
    parser.add_argument("--prevalence", type=float, default=0.05, help="Fraction of stroke cases")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    parser.add_argument("--output", type=str, default="stroke-data.csv", help="Output CSV path")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)

    generator = StrokeDataGenerator(seed=args.seed)
    df = generator.generate_dataset(args.num_patients, prevalence=args.prevalence)
    save_csv(df, args.output)
    print(f"Dataset written to {args.output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
