"""
Main Stroke Risk Pipeline

Loads patient data, scores the rule-based classifier, trains and scores the
decision tree, and prints a report for each. Also hosts the interactive
single-patient prediction mode.
"""

import argparse
import contextlib
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import joblib
import pandas as pd
import yaml
from sklearn.pipeline import Pipeline

from stroke_risk.config import load_config
from stroke_risk.data.records import PatientRecord, read_patient_frame, records_from_frame
from stroke_risk.exceptions import DataLoadError, FitError
from stroke_risk.interactive import describe_prediction, prompt_for_record
from stroke_risk.pipeline.evaluation import TrainedEvaluation, evaluate, evaluate_trained
from stroke_risk.pipeline.preprocessing import FEATURE_NAMES, DataValidator
from stroke_risk.pipeline.rule_based import predict_rule_label
from stroke_risk.pipeline.trained_classifier import predict_one, train_on_records
from stroke_risk.utils.experiment_tracking import setup_experiment_tracking
from stroke_risk.utils.model_utils import ConfusionCounts, ModelComparator, format_report

logger = logging.getLogger(__name__)

RULE_BASED = "Rule-Based Classifier"
DECISION_TREE = "Decision Tree"


class StrokeRiskPipeline:
    """Evaluate the rule-based and decision tree stroke classifiers."""

    def __init__(self, config: Dict[str, Any], output_fn: Callable[[str], None] = print):
        self.config = config
        self.output_fn = output_fn
        self.model: Optional[Pipeline] = None
        self.comparator = ModelComparator()
        self.experiment_tracker = setup_experiment_tracking(config)

    # ---------- Data ----------
    def load_data(self, data_path: str) -> List[PatientRecord]:
        df = read_patient_frame(data_path)
        self.validate_data(df)
        return records_from_frame(df)

    def validate_data(self, df: pd.DataFrame) -> Dict[str, List[str]]:
        logger.info("Validating data quality...")
        validator = DataValidator()
        validator.setup_stroke_rules()
        violations = validator.validate(df)
        if violations:
            for feature, issues in violations.items():
                logger.warning(f"Data quality issue in '{feature}': {'; '.join(issues)}")
        else:
            logger.info("Data validation passed")
        return violations

    # ---------- Classifiers ----------
    def evaluate_rule_based(self, records: List[PatientRecord]) -> ConfusionCounts:
        logger.info(f"Scoring rule-based classifier on {len(records)} records")
        counts = evaluate(records, predict_rule_label)
        self.comparator.add_model(RULE_BASED, counts)
        self.output_fn("\n" + format_report(RULE_BASED, counts))
        return counts

    def evaluate_decision_tree(self, records: List[PatientRecord]) -> TrainedEvaluation:
        copies = self.config.get("oversampling", {}).get("positive_copies", 3)
        split_cfg = self.config.get("split", {})
        model_cfg = self.config.get("model", {})

        result = evaluate_trained(
            records,
            copies=copies,
            test_size=split_cfg.get("test_size", 0.2),
            random_state=split_cfg.get("random_state", 42),
            params=model_cfg,
        )
        self.model = result.model
        self.comparator.add_model(DECISION_TREE, result.counts)
        self.output_fn("\n" + format_report(DECISION_TREE, result.counts))

        if self.config.get("training", {}).get("refit_on_full_data", False):
            logger.info("Refitting decision tree on the full oversampled dataset")
            self.model = train_on_records(records, copies=copies, params=model_cfg)

        return result

    # ---------- Artifacts ----------
    def save_artifacts(self, output_dir: str, metrics: Dict[str, Any]):
        out = Path(output_dir)
        out.mkdir(parents=True, exist_ok=True)
        logger.info(f"Saving artifacts to {out}")

        if self.model is not None:
            joblib.dump(self.model, out / "decision_tree.joblib")
        (out / "feature_names.txt").write_text("\n".join(FEATURE_NAMES), encoding="utf-8")
        (out / "metrics.yaml").write_text(yaml.safe_dump(metrics, sort_keys=False), encoding="utf-8")
        (out / "run_config.yaml").write_text(yaml.safe_dump(self.config, sort_keys=False), encoding="utf-8")

        logger.info("Artifacts saved successfully")

    # ---------- Orchestration ----------
    def run_pipeline(self, data_path: str, output_dir: Optional[str] = None) -> Dict[str, Dict[str, float]]:
        """Evaluate both classifiers and return their metrics keyed by classifier."""
        logger.info("Starting stroke risk evaluation pipeline...")

        run_ctx = (
            self.experiment_tracker.start_run("stroke_risk_evaluation")
            if self.experiment_tracker else contextlib.nullcontext()
        )
        with run_ctx:
            if self.experiment_tracker:
                self.experiment_tracker.log_params(self.config)

            records = self.load_data(data_path)
            self.evaluate_rule_based(records)
            self.evaluate_decision_tree(records)

            comparison = self.comparator.compare_models()
            logger.info(f"Classifier comparison:\n{comparison.to_string()}")

            metrics = {
                name: {key: float(value) for key, value in values.items()}
                for name, values in self.comparator.results.items()
            }

            if self.experiment_tracker:
                flat = {
                    f"{name.lower().replace('-', '_').replace(' ', '_')}.{key}": value
                    for name, values in metrics.items()
                    for key, value in values.items()
                }
                self.experiment_tracker.log_metrics(flat)
                self.experiment_tracker.log_dict(metrics, "metrics.yaml")

            if output_dir:
                self.save_artifacts(output_dir, metrics)

        logger.info("Pipeline completed successfully!")
        return metrics

    def predict_interactive(self, data_path: str,
                            model_path: Optional[str] = None,
                            input_fn: Callable[[str], str] = input) -> int:
        """Ask for one patient's details and print the decision tree's verdict."""
        record = prompt_for_record(input_fn=input_fn, output_fn=self.output_fn)

        if model_path:
            self.model = load_model(model_path)
        else:
            records = self.load_data(data_path)
            self.evaluate_decision_tree(records)

        prediction = predict_one(self.model, record)
        self.output_fn("\n" + describe_prediction(prediction))
        return prediction


def load_model(path: str) -> Pipeline:
    p = Path(path)
    if not p.is_file():
        raise DataLoadError(f"Model file not found: {p}")
    logger.info(f"Loading decision tree from {p}")
    try:
        model = joblib.load(p)
    except Exception as e:
        raise DataLoadError(f"Cannot load model from {p}: {e}") from e
    if not hasattr(model, "predict"):
        raise DataLoadError(f"{p} does not contain a fitted model")
    return model


# =====================
# CLI entrypoint
# =====================

MENU = (
    "\nChoose an option:\n"
    "1. Show evaluation results\n"
    "2. Enter your own medical info to get stroke risk"
)
MENU_CHOICES = {"1": "evaluate", "2": "predict"}


def main(argv: Optional[List[str]] = None, input_fn: Callable[[str], str] = input) -> int:
    parser = argparse.ArgumentParser(description="Evaluate rule-based and decision tree stroke risk classifiers")
    parser.add_argument("--config", type=str, default=None, help="Path to pipeline configuration file")
    parser.add_argument("--data", type=str, default=None, help="Patient CSV (overrides data.path)")
    parser.add_argument("--output", type=str, default=None, help="Directory for model and metrics artifacts")
    parser.add_argument("--mode", choices=sorted(MENU_CHOICES.values()), default=None,
                        help="Skip the menu and run this mode directly")
    parser.add_argument("--model", type=str, default=None,
                        help="Saved decision tree to use in predict mode instead of retraining")
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except ValueError as e:
        logging.basicConfig(level=logging.INFO)
        logger.error(str(e))
        return 1

    logging.basicConfig(level=config.get("logging", {}).get("level", "INFO"))
    data_path = args.data or config.get("data", {}).get("path", "stroke-data.csv")

    mode = args.mode
    if mode is None:
        print(MENU)
        mode = MENU_CHOICES.get(input_fn("").strip())
        if mode is None:
            print("Invalid input.")
            return 1

    pipeline = StrokeRiskPipeline(config)
    try:
        if mode == "evaluate":
            pipeline.run_pipeline(data_path, args.output)
        else:
            pipeline.predict_interactive(data_path, model_path=args.model, input_fn=input_fn)
    except (DataLoadError, FitError) as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
