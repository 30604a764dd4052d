"""
Configuration loading for the stroke risk pipeline.

Configuration is a plain nested dictionary. Values from a YAML file are
merged over ``DEFAULT_CONFIG`` so that callers can always rely on every
section being present.
"""

import copy
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    'data': {
        'path': 'stroke-data.csv',
    },
    'oversampling': {
        'positive_copies': 3,
    },
    'split': {
        'test_size': 0.2,
        'random_state': 42,
    },
    'model': {
        'imputation_strategy': 'median',
        'decision_tree': {
            'criterion': 'gini',
            'max_depth': None,
            'random_state': 42,
        },
    },
    'training': {
        'refit_on_full_data': False,
    },
    'experiment_tracking': {
        'backend': 'none',
        'mlflow': {
            'tracking_uri': 'file:./mlruns',
            'experiment_name': 'stroke_risk',
        },
    },
    'logging': {
        'level': 'INFO',
    },
}


def merge_config(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def load_config(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load pipeline configuration.

    Args:
        path: YAML file to read. When omitted, the defaults are returned.

    Returns:
        Configuration dictionary with every default section filled in.
    """
    if path is None:
        return copy.deepcopy(DEFAULT_CONFIG)

    config_path = Path(path)
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            user_config = yaml.safe_load(f) or {}
    except OSError as e:
        raise ValueError(f"Cannot read configuration file {config_path}: {e}") from e
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in configuration file {config_path}: {e}") from e

    if not isinstance(user_config, dict):
        raise ValueError(f"Configuration file {config_path} must contain a mapping")

    logger.info(f"Loaded configuration from {config_path}")
    return merge_config(DEFAULT_CONFIG, user_config)
