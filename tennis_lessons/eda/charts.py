"""
Charts for the EDA lesson.

Every chart takes a long-form table produced by features/, draws with
seaborn on a matplotlib figure, saves a PNG and returns its path (None
when there is nothing to draw).
"""

import logging
from pathlib import Path

import pandas as pd

from tennis_lessons.utils.plotting import SURFACE_COLORS, plt, save_plot, sns

log = logging.getLogger(__name__)


def _stat_axes(n: int, width: float = 5.0, height: float = 4.0):
    fig, axes = plt.subplots(1, n, figsize=(width * n, height), squeeze=False)
    return fig, axes[0]


def plot_stat_distributions(long_df: pd.DataFrame, output_dir: str | Path) -> Path | None:
    """Density of each statistic by surface."""
    if long_df.empty:
        log.warning("No data for stat distributions")
        return None

    stats = list(dict.fromkeys(long_df["stat"]))
    fig, axes = _stat_axes(len(stats))
    for ax, stat in zip(axes, stats):
        sub = long_df[long_df["stat"] == stat]
        surfaces = [s for s in SURFACE_COLORS if s in set(sub["surface"])]
        sns.kdeplot(
            data=sub, x="value", hue="surface", hue_order=surfaces,
            palette=SURFACE_COLORS, common_norm=False, fill=True, alpha=0.3,
            ax=ax, warn_singular=False,
        )
        ax.set_title(stat)
        ax.set_xlabel("proportion")
    fig.suptitle("Serve and return statistics by surface")
    fig.tight_layout()
    return save_plot(fig, output_dir, "stat_distributions")


def plot_stat_boxplots(long_df: pd.DataFrame, output_dir: str | Path) -> Path | None:
    """Winner vs loser boxplots of each statistic, split by surface."""
    if long_df.empty:
        log.warning("No data for stat boxplots")
        return None

    stats = list(dict.fromkeys(long_df["stat"]))
    fig, axes = _stat_axes(len(stats))
    for ax, stat in zip(axes, stats):
        sub = long_df[long_df["stat"] == stat]
        sns.boxplot(
            data=sub, x="surface", y="value", hue="role",
            hue_order=["winner", "loser"], ax=ax, fliersize=1,
        )
        ax.set_title(stat)
        ax.set_xlabel("")
    fig.suptitle("Winners vs losers")
    fig.tight_layout()
    return save_plot(fig, output_dir, "stat_boxplots")


def plot_favourite_win_rate(rates: pd.DataFrame, output_dir: str | Path) -> Path | None:
    """Favourite win rate by year, one line per surface."""
    if rates.empty or not {"year", "surface"} <= set(rates.columns):
        log.warning("No data for favourite win rate")
        return None

    fig, ax = plt.subplots(figsize=(9, 5))
    surfaces = [s for s in SURFACE_COLORS if s in set(rates["surface"])]
    sns.lineplot(
        data=rates, x="year", y="favourite_win_rate", hue="surface",
        hue_order=surfaces, palette=SURFACE_COLORS, marker="o", ax=ax,
    )
    ax.axhline(0.5, color="grey", linestyle="--", linewidth=1)
    ax.set_ylabel("share of matches won by better-ranked player")
    ax.set_title("How often does the favourite win?")
    fig.tight_layout()
    return save_plot(fig, output_dir, "favourite_win_rate")


def plot_game_seven(summary: pd.DataFrame, output_dir: str | Path) -> Path | None:
    """Share of sets won by the game-7 winner, by pre-game score and hold/break."""
    if summary.empty:
        log.warning("No data for game seven")
        return None

    fig, axes = plt.subplots(1, 2, figsize=(12, 5), gridspec_kw={"width_ratios": [1, 2]})

    top = summary[summary["group"].isin(["overall", "game7"])]
    sns.barplot(data=top, x="value", y="share", color="#3498db", ax=axes[0])
    axes[0].set_xlabel("")
    axes[0].set_title("All sets / held / broken")

    by_score = summary[summary["group"] == "score_before"]
    sns.barplot(data=by_score, x="value", y="share", color="#e67e22", ax=axes[1])
    axes[1].set_xlabel("score before game 7 (server first)")
    axes[1].set_title("By score before game 7")

    for ax in axes:
        ax.axhline(0.5, color="grey", linestyle="--", linewidth=1)
        ax.set_ylim(0, 1)
        ax.set_ylabel("share of sets won by game-7 winner")
    fig.suptitle("Is the seventh game special?")
    fig.tight_layout()
    return save_plot(fig, output_dir, "game_seven")


def plot_first_server(summary: dict, by_event: pd.DataFrame, output_dir: str | Path) -> Path | None:
    """First-server win share per event with the overall exact CI."""
    if not summary.get("matches"):
        log.warning("No data for first server")
        return None

    fig, ax = plt.subplots(figsize=(9, 5))
    if not by_event.empty:
        sns.barplot(data=by_event, x="event", y="share", color="#16a085", ax=ax)
        ax.tick_params(axis="x", rotation=45)
    ax.axhline(summary["share"], color="black", linewidth=1.5, label="overall")
    ax.axhspan(summary["ci_lower"], summary["ci_upper"], color="black", alpha=0.1, label="95% CI")
    ax.axhline(0.5, color="grey", linestyle="--", linewidth=1)
    ax.set_ylim(0, 1)
    ax.set_xlabel("")
    ax.set_ylabel("share of matches won by first server")
    ax.set_title(f"Serving first (p = {summary['p_value']:.3f})")
    ax.legend(loc="lower right")
    fig.tight_layout()
    return save_plot(fig, output_dir, "first_server")
