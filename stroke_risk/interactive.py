"""
Interactive prompt that builds a single patient record from typed answers.
"""

import logging
import math
from typing import Callable, TypeVar

from stroke_risk.data.records import PatientRecord
from stroke_risk.exceptions import InputParseError

logger = logging.getLogger(__name__)

T = TypeVar('T')

InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]


def parse_float(text: str) -> float:
    try:
        value = float(text.strip())
    except ValueError as e:
        raise InputParseError(f"Not a number: {text!r}") from e
    if not math.isfinite(value):
        raise InputParseError(f"Not a finite number: {text!r}")
    return value


def parse_flag(text: str) -> int:
    """Parse a 0/1 answer."""
    value = text.strip()
    if value not in ('0', '1'):
        raise InputParseError(f"Expected 0 or 1, got {text!r}")
    return int(value)


def ask(question: str, parse: Callable[[str], T],
        input_fn: InputFn = input, output_fn: OutputFn = print) -> T:
    """Repeat ``question`` until ``parse`` accepts the answer."""
    while True:
        output_fn(question)
        answer = input_fn("")
        try:
            return parse(answer)
        except InputParseError as e:
            logger.debug(f"Rejected answer: {e}")
            output_fn("Invalid input. Try again.")


def prompt_for_record(input_fn: InputFn = input, output_fn: OutputFn = print) -> PatientRecord:
    """
    Collect the six model inputs from the user.

    The returned record has ``stroke=0`` as a placeholder; the outcome is
    unknown and the record is only used for prediction.
    """
    age = ask("Enter your age:", parse_float, input_fn, output_fn)
    hypertension = ask("Hypertension? (0 = No, 1 = Yes):", parse_flag, input_fn, output_fn)
    heart_disease = ask("Heart disease? (0 = No, 1 = Yes):", parse_flag, input_fn, output_fn)

    output_fn("Ever married? (Yes or No):")
    ever_married = input_fn("").strip()

    glucose = ask("Avg glucose level:", parse_float, input_fn, output_fn)
    bmi = ask("BMI:", parse_float, input_fn, output_fn)

    return PatientRecord(
        age=age,
        hypertension=hypertension,
        heart_disease=heart_disease,
        ever_married=ever_married,
        avg_glucose_level=glucose,
        bmi=bmi,
        stroke=0,
    )


def describe_prediction(prediction: int) -> str:
    level = "HIGH" if prediction == 1 else "LOW"
    return f"Based on your input, the model predicts: {level} stroke risk."
