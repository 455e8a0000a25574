"""
Statistical significance tests for model comparison on held-out data.
"""

import numpy as np

from tennis_lessons.evaluation.metrics import compute_logloss


def paired_bootstrap_test(
    y_true: np.ndarray,
    y_pred_a: np.ndarray,
    y_pred_b: np.ndarray,
    metric_fn=compute_logloss,
    higher_is_better: bool = False,
    n_bootstrap: int = 2000,
    seed: int = 42,
) -> dict:
    """Test if model B significantly outperforms model A.

    Both models are scored on the same resampled rows, so the test uses
    the per-sample pairing. improvement is positive when B is better,
    whatever the direction of the metric.

    Returns dict with observed values, improvement, p_value, 95% CI.
    """
    rng = np.random.RandomState(seed)
    n = len(y_true)
    sign = 1.0 if higher_is_better else -1.0

    obs_a = metric_fn(y_true, y_pred_a)
    obs_b = metric_fn(y_true, y_pred_b)

    diffs = []
    for _ in range(n_bootstrap):
        idx = rng.randint(0, n, size=n)
        yt = y_true[idx]
        if len(np.unique(yt)) < 2:
            continue
        diffs.append(sign * (metric_fn(yt, y_pred_b[idx]) - metric_fn(yt, y_pred_a[idx])))

    diffs = np.array(diffs)
    has = len(diffs) > 0
    p_value = float((diffs <= 0).mean()) if has else 1.0

    return {
        "metric": getattr(metric_fn, "__name__", "metric"),
        "observed_a": float(obs_a),
        "observed_b": float(obs_b),
        "improvement": float(sign * (obs_b - obs_a)),
        "p_value": p_value,
        "ci_lower": float(np.percentile(diffs, 2.5)) if has else 0.0,
        "ci_upper": float(np.percentile(diffs, 97.5)) if has else 0.0,
        "significant_at_05": bool(has and p_value < 0.05),
        "n_bootstrap": len(diffs),
    }
