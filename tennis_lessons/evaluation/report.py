"""
Report generation for both lessons.

Each report is written twice: a JSON file with the full result (numpy
and pandas values converted to plain Python) and a readable text
summary. The modelling report also draws resample, importance and
confusion-matrix figures.
"""

import json
import logging
import math
from datetime import datetime
from pathlib import Path

import numpy as np
import pandas as pd

log = logging.getLogger(__name__)


def generate_eda_report(eda_result: dict, output_dir: str = "reports") -> str:
    """Write the EDA report. Returns path to the JSON file."""
    return _write_report(eda_result, output_dir, "eda_report", _format_eda_report)


def generate_model_report(
    model_result: dict,
    output_dir: str = "reports",
    include_plots: bool = True,
) -> str:
    """Write the modelling report. Returns path to the JSON file."""
    if include_plots:
        try:
            _generate_model_plots(model_result, Path(output_dir))
        except ImportError:
            log.warning("matplotlib not available, skipping plots")
    return _write_report(model_result, output_dir, "model_report", _format_model_report)


def _write_report(result: dict, output_dir: str, stem: str, formatter) -> str:
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    json_path = out / f"{stem}_{timestamp}.json"
    report_data = _make_serializable(result)
    report_data["generated_at"] = datetime.now().isoformat()
    with open(json_path, "w") as f:
        json.dump(report_data, f, indent=2)

    txt_path = out / f"{stem}_{timestamp}.txt"
    with open(txt_path, "w") as f:
        f.write(formatter(result))

    log.info(f"Report saved to {json_path}")
    return str(json_path)


# ── Text ───────────────────────────────────────────────────────────────

def _section(title: str) -> list[str]:
    return ["", "-" * 40, title, "-" * 40]


def _frame_text(df: pd.DataFrame | None, floatfmt: str = "{:.4f}") -> list[str]:
    if df is None or len(df) == 0:
        return ["  (none)"]
    text = df.to_string(index=False, float_format=lambda v: floatfmt.format(v))
    return ["  " + line for line in text.splitlines()]


def _format_eda_report(result: dict) -> str:
    counts = result.get("matches", {})
    lines = [
        "=" * 70,
        "TENNIS LESSONS — Exploratory Data Analysis",
        "=" * 70,
        "",
        f"Matches loaded: {counts.get('loaded', 0)}",
        f"Matches kept after filtering: {counts.get('kept', 0)}",
    ]

    lines += _section("Serve / return statistics by surface and role")
    lines += _frame_text(result.get("summary"))

    lines += _section("Favourite win rate by surface")
    lines += _frame_text(result.get("favourite_by_surface"))

    if result.get("game_seven") is not None:
        lines += _section("Game seven")
        lines += _frame_text(result["game_seven"])

    fs = result.get("first_server")
    if fs and fs.get("matches"):
        lines += _section("First server")
        lines += [
            f"  Matches: {fs['matches']}",
            f"  First server won: {fs['first_server_wins']} ({fs['share']:.1%})",
            f"  95% CI: [{fs['ci_lower']:.4f}, {fs['ci_upper']:.4f}]",
            f"  p-value (vs 0.5): {fs['p_value']:.4f}",
        ]

    if result.get("plots"):
        lines += _section("Figures")
        lines += [f"  {p}" for p in result["plots"]]

    lines += ["", "=" * 70]
    return "\n".join(lines)


def _format_model_report(result: dict) -> str:
    data = result.get("data", {})
    lines = [
        "=" * 70,
        "TENNIS LESSONS — Predicting the Match Winner",
        "=" * 70,
        "",
        f"Matches: {data.get('matches', 0)} "
        f"(train {data.get('train', 0)}, test {data.get('test', 0)})",
        f"Features: {', '.join(data.get('features', []))}",
        f"Best model (held-out log-loss): {result.get('best_model', '-')}",
    ]

    lines += _section("Resampled performance (cross-validation)")
    lines += _frame_text(result.get("resamples"))

    lines += _section("Held-out performance")
    lines += _frame_text(result.get("holdout"))

    for name, m in result.get("models", {}).items():
        cm = m["holdout"]["confusion"]
        lines += _section(f"{name}")
        lines.append(f"  Tuned parameters: {m['history']['best_params']}")
        lines.append("  Confusion matrix (rows = prediction, columns = reference):")
        lines += ["    " + line for line in cm["table"].to_string().splitlines()]
        lines += [
            f"  Accuracy: {cm['accuracy']:.4f} "
            f"(95% CI {cm['accuracy_ci'][0]:.4f}, {cm['accuracy_ci'][1]:.4f})",
            f"  No information rate: {cm['no_information_rate']:.4f} "
            f"(p [Acc > NIR] = {cm['p_value_acc_gt_nir']:.4g})",
            f"  Kappa: {cm['kappa']:.4f}",
            f"  Sensitivity: {cm['sensitivity']:.4f}  Specificity: {cm['specificity']:.4f}",
            f"  Balanced accuracy: {cm['balanced_accuracy']:.4f}",
        ]
        boot = m.get("vs_baseline")
        if boot:
            lines.append(
                f"  vs logistic: log-loss improvement {boot['improvement']:+.4f} "
                f"(p={boot['p_value']:.4f})"
            )
        lines.append("  Variable importance:")
        lines += ["  " + line for line in _frame_text(m["importance"][["feature", "importance"]], "{:.1f}")]

    lines += ["", "=" * 70]
    return "\n".join(lines)


# ── Figures ────────────────────────────────────────────────────────────

def _generate_model_plots(result: dict, output_dir: Path):
    """Resample boxplot, variable importance bars, confusion heatmaps."""
    from tennis_lessons.utils.plotting import plt, save_plot, sns

    paths = []
    table = result.get("resample_table")
    if table is not None and len(table):
        fig, ax = plt.subplots(figsize=(8, 5))
        sns.boxplot(data=table, x="value", y="model", ax=ax, color="#3498db")
        ax.set_xlabel(table["metric"].iloc[0])
        ax.set_ylabel("")
        ax.set_title("Resampled performance")
        fig.tight_layout()
        paths.append(save_plot(fig, output_dir, "resamples"))

    models = result.get("models", {})
    if models:
        fig, axes = plt.subplots(1, len(models), figsize=(5 * len(models), 4), squeeze=False)
        for ax, (name, m) in zip(axes[0], models.items()):
            imp = m["importance"]
            sns.barplot(data=imp, x="importance", y="feature", ax=ax, color="#27ae60")
            ax.set_title(name)
            ax.set_xlim(0, 100)
            ax.set_ylabel("")
        fig.suptitle("Variable importance")
        fig.tight_layout()
        paths.append(save_plot(fig, output_dir, "importance"))

        fig, axes = plt.subplots(1, len(models), figsize=(4 * len(models), 4), squeeze=False)
        for ax, (name, m) in zip(axes[0], models.items()):
            cm = m["holdout"]["confusion"]
            sns.heatmap(cm["table"], annot=True, fmt="d", cmap="Blues", cbar=False, ax=ax)
            ax.set_title(f"{name} (acc {cm['accuracy']:.3f})")
        fig.tight_layout()
        paths.append(save_plot(fig, output_dir, "confusion"))

    result["plots"] = [str(p) for p in paths]


def _make_serializable(obj):
    """Convert numpy/pandas types to Python native for JSON serialization."""
    if isinstance(obj, dict):
        return {str(k): _make_serializable(v) for k, v in obj.items()}
    elif isinstance(obj, pd.DataFrame):
        return _make_serializable(obj.to_dict(orient="records"))
    elif isinstance(obj, pd.Series):
        return _make_serializable(obj.to_dict())
    elif isinstance(obj, (list, tuple)):
        return [_make_serializable(v) for v in obj]
    elif isinstance(obj, np.ndarray):
        return _make_serializable(obj.tolist())
    elif isinstance(obj, (np.bool_,)):
        return bool(obj)
    elif isinstance(obj, (np.integer,)):
        return int(obj)
    elif isinstance(obj, (float, np.floating)):
        return None if math.isnan(obj) else float(obj)
    elif isinstance(obj, Path):
        return str(obj)
    return obj
