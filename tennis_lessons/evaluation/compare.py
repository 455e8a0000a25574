"""
Comparison of classifier families across resamples and on held-out data.

Every family is tuned with the same seeded RepeatedStratifiedKFold, so
resample i is the same split for every family and the per-resample
scores can be compared side by side.
"""

import numpy as np
import pandas as pd


def resample_losses(history: dict) -> np.ndarray:
    """Per-resample scores of the best candidate, as losses when negated."""
    scores = np.asarray(history["resample_scores"], dtype=float)
    return -scores if history["scoring"].startswith("neg_") else scores


def metric_name(scoring: str) -> str:
    return scoring[len("neg_"):] if scoring.startswith("neg_") else scoring


def resample_table(histories: dict[str, dict]) -> pd.DataFrame:
    """Long table: model, resample, metric, value."""
    rows = []
    for name, history in histories.items():
        metric = metric_name(history["scoring"])
        for i, value in enumerate(resample_losses(history)):
            rows.append({"model": name, "resample": i, "metric": metric, "value": value})
    return pd.DataFrame(rows, columns=["model", "resample", "metric", "value"])


def compare_resamples(histories: dict[str, dict]) -> pd.DataFrame:
    """Min, quartiles, mean and max of the resampled metric per model."""
    table = resample_table(histories)
    if table.empty:
        return pd.DataFrame(columns=["model", "metric", "min", "q25", "median", "mean", "q75", "max"])

    grouped = table.groupby(["model", "metric"], sort=False)["value"]
    summary = pd.DataFrame({
        "min": grouped.min(),
        "q25": grouped.quantile(0.25),
        "median": grouped.median(),
        "mean": grouped.mean(),
        "q75": grouped.quantile(0.75),
        "max": grouped.max(),
    })
    return summary.reset_index()


def holdout_table(evaluations: dict[str, dict]) -> pd.DataFrame:
    """One row per model with held-out accuracy, kappa, log-loss and AUC."""
    rows = []
    for name, ev in evaluations.items():
        cm = ev["confusion"]
        rows.append({
            "model": name,
            "accuracy": cm["accuracy"],
            "accuracy_ci_lower": cm["accuracy_ci"][0],
            "accuracy_ci_upper": cm["accuracy_ci"][1],
            "kappa": cm["kappa"],
            "logloss": ev["logloss"],
            "auc": ev["auc"],
            "brier": ev["brier"],
        })
    table = pd.DataFrame(rows)
    if not table.empty:
        table = table.sort_values("logloss", kind="stable").reset_index(drop=True)
    return table
