"""
Experiment tracking utilities using MLflow.
"""

import logging
import time
from typing import Any, Dict, Optional

import mlflow

logger = logging.getLogger(__name__)


class ExperimentTracker:
    """MLflow experiment tracking wrapper."""

    def __init__(self, config: Dict[str, Any]):
        """Initialize experiment tracker from the ``mlflow`` config block."""
        self.config = config
        self.tracking_uri = config.get('tracking_uri', 'file:./mlruns')
        self.experiment_name = config.get('experiment_name', 'stroke_risk')

        mlflow.set_tracking_uri(self.tracking_uri)

        # Create or get experiment, handling deleted experiments
        try:
            experiment_id = mlflow.create_experiment(self.experiment_name)
        except Exception:
            experiment = mlflow.get_experiment_by_name(self.experiment_name)
            if experiment and experiment.lifecycle_stage != "deleted":
                experiment_id = experiment.experiment_id
            else:
                new_name = f"{self.experiment_name}_{int(time.time())}"
                try:
                    experiment_id = mlflow.create_experiment(new_name)
                    self.experiment_name = new_name
                except Exception as e:
                    logger.warning(f"Could not create experiment '{new_name}', using default: {e}")
                    experiment_id = "0"

        if experiment_id and experiment_id != "0":
            mlflow.set_experiment(experiment_id=experiment_id)
        else:
            mlflow.set_experiment("Default")

    def start_run(self, run_name: Optional[str] = None):
        """Start MLflow run."""
        return mlflow.start_run(run_name=run_name)

    def log_params(self, params: Dict[str, Any], prefix: str = ""):
        """Log parameters to MLflow."""
        flat_params = self._flatten_dict(params, prefix)
        for key, value in flat_params.items():
            try:
                mlflow.log_param(key, value)
            except Exception as e:
                logger.warning(f"Failed to log param {key}: {e}")

    def log_metrics(self, metrics: Dict[str, float], step: Optional[int] = None):
        """Log metrics to MLflow."""
        for key, value in metrics.items():
            try:
                mlflow.log_metric(key, value, step=step)
            except Exception as e:
                logger.warning(f"Failed to log metric {key}: {e}")

    def log_dict(self, dictionary: Dict[str, Any], artifact_file: str):
        """Log dictionary as YAML artifact to MLflow."""
        try:
            mlflow.log_dict(dictionary, artifact_file)
            logger.info(f"Dictionary logged as {artifact_file}")
        except Exception as e:
            logger.warning(f"Failed to log dictionary to MLflow: {e}")

    def _flatten_dict(self, d: Dict[str, Any], prefix: str = "") -> Dict[str, str]:
        """Flatten nested dictionary for parameter logging."""
        items = []

        for key, value in d.items():
            new_key = f"{prefix}.{key}" if prefix else key

            if isinstance(value, dict):
                items.extend(self._flatten_dict(value, new_key).items())
            else:
                # MLflow params are strings
                items.append((new_key, str(value)))

        return dict(items)


def setup_experiment_tracking(config: Dict[str, Any]) -> Optional[ExperimentTracker]:
    """Setup experiment tracking based on configuration."""
    tracking_config = config.get('experiment_tracking', {})
    backend = tracking_config.get('backend', 'none')

    if backend == 'mlflow':
        try:
            return ExperimentTracker(tracking_config.get('mlflow', {}))
        except Exception as e:
            logger.warning(f"MLflow tracking unavailable, continuing without it: {e}")
            return None
    if backend not in (None, 'none'):
        logger.warning(f"Unknown experiment tracking backend '{backend}', tracking disabled")
    return None
