"""Variable importance for fitted classifier families, scaled to 0-100."""

import logging

import numpy as np
import pandas as pd
from sklearn.inspection import permutation_importance

from tennis_lessons.core.schema import ModelingFrame

log = logging.getLogger(__name__)


def variable_importance(
    model,
    data: ModelingFrame,
    n_repeats: int = 10,
    seed: int = 42,
) -> pd.DataFrame:
    """Rank features of a fitted TunedClassifier.

    Linear models use |coefficient| (inputs are standardized, so
    coefficients are comparable); tree ensembles use impurity importance;
    anything else falls back to permutation importance on data, scored by
    log-loss.

    Returns a DataFrame with feature, raw, importance (0-100) and method,
    sorted by importance descending.
    """
    estimator = model.estimator
    features = model.feature_names

    if hasattr(estimator, "coef_"):
        raw = np.abs(np.ravel(estimator.coef_))
        method = "abs_coefficient"
    elif hasattr(estimator, "feature_importances_"):
        raw = np.asarray(estimator.feature_importances_, dtype=float)
        method = "impurity"
    else:
        result = permutation_importance(
            model.best_estimator, data.X[features], data.y,
            scoring="neg_log_loss", n_repeats=n_repeats, random_state=seed,
        )
        raw = np.clip(result.importances_mean, 0.0, None)
        method = "permutation"

    out = pd.DataFrame({
        "feature": features,
        "raw": raw,
        "importance": scale_importance(raw),
        "method": method,
    })
    return out.sort_values("importance", ascending=False, kind="stable").reset_index(drop=True)


def scale_importance(raw: np.ndarray) -> np.ndarray:
    """Min-max scale to 0-100; a constant vector maps to 100."""
    raw = np.asarray(raw, dtype=float)
    lo, hi = raw.min(), raw.max()
    if hi - lo <= 0:
        return np.full_like(raw, 100.0)
    return (raw - lo) / (hi - lo) * 100.0
