"""
Held-out evaluation metrics for the modelling lesson.

Probability metrics (AUC, log-loss, Brier) plus a confusion-matrix
summary with the statistics students see alongside it: accuracy with an
exact confidence interval, the no-information rate and the one-sided
test of accuracy against it, Cohen's kappa, and the class-wise rates.
"""

import logging

import numpy as np
import pandas as pd
from scipy import stats
from sklearn.metrics import (
    accuracy_score, brier_score_loss, cohen_kappa_score, confusion_matrix,
    log_loss, roc_auc_score,
)

log = logging.getLogger(__name__)


def compute_auc(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """ROC AUC; 0.5 when only one class is present."""
    if len(np.unique(y_true)) < 2:
        return 0.5
    return float(roc_auc_score(y_true, y_pred))


def compute_logloss(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """Binary cross-entropy with predictions clipped away from 0 and 1."""
    y_pred_clipped = np.clip(y_pred, 1e-7, 1 - 1e-7)
    return float(log_loss(y_true, y_pred_clipped, labels=[0, 1]))


def compute_brier(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    return float(brier_score_loss(y_true, y_pred))


def compute_accuracy(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    return float(accuracy_score(y_true, y_pred))


def _div(num: float, den: float) -> float:
    return float(num / den) if den else float("nan")


def confusion_summary(
    y_true: np.ndarray,
    y_pred: np.ndarray,
    positive: int = 1,
    confidence: float = 0.95,
) -> dict:
    """Confusion matrix and derived statistics for hard 0/1 predictions.

    Returns:
        dict with table (DataFrame, Prediction × Reference), accuracy,
        accuracy_ci, no_information_rate, p_value_acc_gt_nir, kappa,
        sensitivity, specificity, pos_pred_value, neg_pred_value,
        prevalence, balanced_accuracy, n
    """
    y_true = np.asarray(y_true).astype(int)
    y_pred = np.asarray(y_pred).astype(int)
    n = len(y_true)
    if n == 0:
        raise ValueError("cannot summarize an empty prediction set")
    if len(y_pred) != n:
        raise ValueError(f"y_pred has {len(y_pred)} entries, expected {n}")

    negative = 1 - positive
    levels = [positive, negative]
    cm = confusion_matrix(y_true, y_pred, labels=levels)
    table = pd.DataFrame(
        cm.T,
        index=pd.Index(levels, name="Prediction"),
        columns=pd.Index(levels, name="Reference"),
    )

    tp, fn = int(cm[0, 0]), int(cm[0, 1])
    fp, tn = int(cm[1, 0]), int(cm[1, 1])
    correct = tp + tn

    accuracy_test = stats.binomtest(correct, n)
    ci = accuracy_test.proportion_ci(confidence_level=confidence, method="exact")

    prevalence = (tp + fn) / n
    nir = max(prevalence, 1 - prevalence)
    nir_test = stats.binomtest(correct, n, p=nir, alternative="greater")

    sensitivity = _div(tp, tp + fn)
    specificity = _div(tn, tn + fp)

    if len(np.unique(np.concatenate([y_true, y_pred]))) < 2:
        kappa = float("nan")
    else:
        kappa = float(cohen_kappa_score(y_true, y_pred))

    return {
        "table": table,
        "n": n,
        "accuracy": correct / n,
        "accuracy_ci": (float(ci.low), float(ci.high)),
        "no_information_rate": nir,
        "p_value_acc_gt_nir": float(nir_test.pvalue),
        "kappa": kappa,
        "sensitivity": sensitivity,
        "specificity": specificity,
        "pos_pred_value": _div(tp, tp + fp),
        "neg_pred_value": _div(tn, tn + fn),
        "prevalence": prevalence,
        "balanced_accuracy": (sensitivity + specificity) / 2,
        "positive": positive,
    }


def evaluate_holdout(
    y_true: np.ndarray, proba: np.ndarray, threshold: float = 0.5,
) -> dict:
    """Probability metrics plus the confusion summary at a threshold."""
    y_hat = (proba >= threshold).astype(int)
    result = {
        "auc": compute_auc(y_true, proba),
        "logloss": compute_logloss(y_true, proba),
        "brier": compute_brier(y_true, proba),
        "accuracy": compute_accuracy(y_true, y_hat),
        "confusion": confusion_summary(y_true, y_hat),
    }
    cm = result["confusion"]
    log.info(
        f"  accuracy={cm['accuracy']:.4f} "
        f"(95% CI {cm['accuracy_ci'][0]:.4f}-{cm['accuracy_ci'][1]:.4f}), "
        f"NIR={cm['no_information_rate']:.4f}, kappa={cm['kappa']:.4f}, "
        f"logloss={result['logloss']:.4f}, AUC={result['auc']:.4f}"
    )
    return result
