"""
Wide → long reshaping and grouped summaries.

The match table stores each statistic twice per row (winner and loser).
Charts and grouped summaries want one row per player per match, or one
row per player per statistic.
"""

import logging

import pandas as pd

from tennis_lessons.core.schema import Role, stat_column

log = logging.getLogger(__name__)

ID_COLUMNS = ["match_id", "surface", "year"]


def stack_players(df: pd.DataFrame, stats: list[str]) -> pd.DataFrame:
    """One row per (match, role) with un-prefixed stat columns.

    Example: w_serve_won / l_serve_won become a single serve_won column
    and a role column holding "winner" or "loser".
    """
    ids = [c for c in ID_COLUMNS if c in df.columns]
    parts = []
    for role in Role:
        cols = {stat_column(s, role): s for s in stats}
        missing = [c for c in cols if c not in df.columns]
        if missing:
            raise KeyError(f"columns not in match table: {missing}")

        part = df[ids].copy()
        part["role"] = role.value
        name_col = stat_column("name", role)
        if name_col in df.columns:
            part["name"] = df[name_col]
        for src, dst in cols.items():
            part[dst] = df[src]
        parts.append(part)

    stacked = pd.concat(parts, ignore_index=True)
    if "match_id" in stacked.columns:
        stacked = stacked.sort_values(["match_id", "role"], ascending=[True, False], kind="stable")
    return stacked.reset_index(drop=True)


def melt_stats(df: pd.DataFrame, stats: list[str]) -> pd.DataFrame:
    """Fully tidy form: one row per (match, role, stat) with a value column."""
    stacked = stack_players(df, stats)
    id_vars = [c for c in stacked.columns if c not in stats]
    long = stacked.melt(
        id_vars=id_vars, value_vars=stats, var_name="stat", value_name="value",
    )
    return long.dropna(subset=["value"]).reset_index(drop=True)


def summarize_by(long_df: pd.DataFrame, by: list[str]) -> pd.DataFrame:
    """Count, mean, std, min, quartiles and max of value per group and stat."""
    keys = list(by) + ([] if "stat" in by else ["stat"])
    summary = long_df.groupby(keys, observed=True)["value"].describe()
    summary = summary.rename(columns={"25%": "q25", "50%": "median", "75%": "q75"})
    summary["count"] = summary["count"].astype(int)
    return summary.reset_index()


def favourite_win_rate(df: pd.DataFrame, by: list[str] | None = None) -> pd.DataFrame:
    """Share of matches won by the better-ranked player.

    Matches where either rank is missing or the ranks are equal are excluded.
    """
    ranked = df.dropna(subset=["winner_rank", "loser_rank"])
    ranked = ranked[ranked["winner_rank"] != ranked["loser_rank"]].copy()
    ranked["favourite_won"] = ranked["winner_rank"] < ranked["loser_rank"]

    if not by:
        return pd.DataFrame([{
            "matches": len(ranked),
            "favourite_wins": int(ranked["favourite_won"].sum()),
            "favourite_win_rate": float(ranked["favourite_won"].mean()) if len(ranked) else float("nan"),
        }])

    grouped = ranked.groupby(by, observed=True)["favourite_won"]
    out = pd.DataFrame({
        "matches": grouped.size(),
        "favourite_wins": grouped.sum().astype(int),
        "favourite_win_rate": grouped.mean(),
    })
    return out.reset_index()
