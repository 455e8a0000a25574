"""Tests for JSON/text report writing."""

import json
import math
from pathlib import Path

import numpy as np
import pandas as pd

from tennis_lessons.evaluation.metrics import evaluate_holdout
from tennis_lessons.evaluation.report import (
    _make_serializable, generate_eda_report, generate_model_report,
)


def _model_result():
    y = np.array([1, 0, 1, 0, 1, 0, 1, 0])
    proba = np.array([0.9, 0.1, 0.8, 0.2, 0.7, 0.3, 0.4, 0.6])
    holdout = evaluate_holdout(y, proba)
    history = {
        "model": "logistic", "scoring": "neg_log_loss",
        "best_params": {"C": 1.0}, "best_score": -0.6,
        "cv_results": pd.DataFrame({"C": [1.0], "mean_score": [-0.6], "std_score": [0.01], "rank": [1]}),
        "resample_scores": np.array([-0.59, -0.61]),
    }
    importance = pd.DataFrame({
        "feature": ["diff_rank_points", "diff_age"], "raw": [1.2, 0.1],
        "importance": [100.0, 0.0], "method": "abs_coefficient",
    })
    return {
        "data": {"matches": 40, "train": 30, "test": 10, "features": ["diff_rank_points", "diff_age"]},
        "models": {"logistic": {"history": history, "holdout": holdout, "importance": importance}},
        "resamples": pd.DataFrame({"model": ["logistic"], "metric": ["log_loss"], "median": [0.6]}),
        "resample_table": pd.DataFrame({
            "model": ["logistic", "logistic"], "resample": [0, 1],
            "metric": ["log_loss", "log_loss"], "value": [0.59, 0.61],
        }),
        "holdout": pd.DataFrame({"model": ["logistic"], "logloss": [holdout["logloss"]]}),
        "best_model": "logistic",
    }


class TestMakeSerializable:
    def test_numpy_and_pandas(self):
        out = _make_serializable({
            "n": np.int64(3),
            "x": np.float32(0.5),
            "flag": np.bool_(True),
            "nan": float("nan"),
            "arr": np.array([1, 2]),
            "ci": (0.1, 0.9),
            "frame": pd.DataFrame({"a": [1, 2]}),
            "path": Path("reports"),
            1: "int key",
        })
        assert out == {
            "n": 3, "x": 0.5, "flag": True, "nan": None, "arr": [1, 2],
            "ci": [0.1, 0.9], "frame": [{"a": 1}, {"a": 2}],
            "path": "reports", "1": "int key",
        }
        json.dumps(out)


class TestEdaReport:
    def test_writes_json_and_text(self, tmp_path):
        result = {
            "matches": {"loaded": 10, "kept": 8},
            "summary": pd.DataFrame({"surface": ["clay"], "stat": ["serve_won"], "mean": [0.62]}),
            "favourite_by_surface": pd.DataFrame({"surface": ["clay"], "favourite_win_rate": [0.64]}),
            "game_seven": None,
            "first_server": {
                "matches": 20, "first_server_wins": 11, "share": 0.55,
                "p_value": 0.82, "ci_lower": 0.32, "ci_upper": 0.77,
            },
            "plots": [],
        }
        path = Path(generate_eda_report(result, str(tmp_path)))
        data = json.loads(path.read_text())
        assert data["matches"]["kept"] == 8
        assert "generated_at" in data

        text = path.with_suffix(".txt").read_text()
        assert "Matches kept after filtering: 8" in text
        assert "First server won: 11 (55.0%)" in text


class TestModelReport:
    def test_writes_report_and_plots(self, tmp_path):
        result = _model_result()
        path = Path(generate_model_report(result, str(tmp_path)))
        data = json.loads(path.read_text())
        assert data["best_model"] == "logistic"
        cm = data["models"]["logistic"]["holdout"]["confusion"]
        assert math.isclose(cm["accuracy"], 0.75)
        assert len(data["plots"]) == 3
        assert all(Path(p).exists() for p in data["plots"])

        text = path.with_suffix(".txt").read_text()
        assert "Tuned parameters: {'C': 1.0}" in text
        assert "No information rate" in text

    def test_without_plots(self, tmp_path):
        result = _model_result()
        generate_model_report(result, str(tmp_path), include_plots=False)
        assert not list(tmp_path.glob("*.png"))
