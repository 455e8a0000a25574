"""Tests for config loading and validation."""

from pathlib import Path

import pytest
import yaml

from tennis_lessons.orchestration.config import load_config

DEFAULT_CONFIG = Path(__file__).resolve().parents[2] / "configs" / "default.yaml"


def _write(tmp_path, cfg):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(cfg))
    return str(path)


def _minimal():
    return {
        "paths": {"reports": "reports"},
        "data_acquisition": {"atp": {"clone_dir": "data"}},
        "eda": {"stats": ["serve_won"]},
        "modelling": {"features": ["rank_points"], "models": {"logistic": None}},
    }


def test_default_config_loads():
    cfg = load_config(str(DEFAULT_CONFIG))
    assert set(cfg["modelling"]["models"]) == {"logistic", "random_forest", "gbm", "svm"}
    assert cfg["modelling"]["cv"]["scoring"] == "neg_log_loss"


def test_minimal(tmp_path):
    assert load_config(_write(tmp_path, _minimal()))["eda"]["stats"] == ["serve_won"]


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "absent.yaml"))


@pytest.mark.parametrize("key", ["paths", "data_acquisition", "eda", "modelling"])
def test_missing_section(tmp_path, key):
    cfg = _minimal()
    del cfg[key]
    with pytest.raises(ValueError, match=key):
        load_config(_write(tmp_path, cfg))


def test_bad_train_fraction(tmp_path):
    cfg = _minimal()
    cfg["modelling"]["train_fraction"] = 1.2
    with pytest.raises(ValueError, match="train_fraction"):
        load_config(_write(tmp_path, cfg))


def test_no_models(tmp_path):
    cfg = _minimal()
    cfg["modelling"]["models"] = {}
    with pytest.raises(ValueError, match="models"):
        load_config(_write(tmp_path, cfg))
