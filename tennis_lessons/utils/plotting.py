"""Shared figure setup and saving for both lessons."""

import logging
from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import seaborn as sns  # noqa: E402

log = logging.getLogger(__name__)

SURFACE_COLORS = {
    "hard": "#1f77b4",
    "clay": "#d35400",
    "grass": "#27ae60",
    "carpet": "#8e44ad",
    "unknown": "#95a5a6",
}


def set_theme():
    sns.set_theme(style="whitegrid", context="notebook")


def save_plot(fig: plt.Figure, output_dir: str | Path, name: str, dpi: int = 150) -> Path:
    """Save a figure as <output_dir>/<name>.png and close it."""
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    path = out / f"{name}.png"
    fig.savefig(path, dpi=dpi, bbox_inches="tight")
    plt.close(fig)
    log.info(f"Plot saved to {path}")
    return path
