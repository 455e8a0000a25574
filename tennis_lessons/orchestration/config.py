"""Config loading with validation."""

import yaml
from pathlib import Path

REQUIRED_KEYS = ("paths", "data_acquisition", "eda", "modelling")


def load_config(path: str = "configs/default.yaml") -> dict:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config not found: {path}")
    with open(p) as f:
        cfg = yaml.safe_load(f) or {}

    # Validate required keys
    for key in REQUIRED_KEYS:
        if key not in cfg:
            raise ValueError(f"Missing config key: {key}")

    train_fraction = cfg["modelling"].get("train_fraction", 0.75)
    if not 0.0 < train_fraction < 1.0:
        raise ValueError(f"modelling.train_fraction must be in (0, 1), got {train_fraction}")
    if not cfg["modelling"].get("models"):
        raise ValueError("modelling.models must name at least one model")
    return cfg
