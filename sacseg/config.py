"""
Configuration management for sacseg
"""

import copy
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

DEFAULT_CONFIG = {
    "segmentation": {
        "model_type": "plane",
        "method_type": "prosac",
        "distance_threshold": None,
        "max_iterations": 50,
        "probability": 0.99,
        "optimize_coefficients": True,
        "radius_min": float("-inf"),
        "radius_max": float("inf"),
        "axis": [0.0, 0.0, 0.0],
        "eps_angle": 0.0,
        "normal_distance_weight": 0.1,
        "random_state": None
    },
    "prosac": {
        "max_trials": 200000,
        "max_sample_checks": 1000
    },
    "logging": {
        "level": "INFO",
        "log_dir": None
    }
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base


def load_config(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """Load a YAML config file on top of DEFAULT_CONFIG."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    if path is None:
        return config

    with open(path, 'r') as f:
        user_config = yaml.safe_load(f) or {}

    if not isinstance(user_config, dict):
        raise ValueError(f"Config file {path} must contain a mapping")

    return _merge(config, user_config)
