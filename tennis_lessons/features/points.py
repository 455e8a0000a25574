"""
Point-level derived entities: games, sets, game-seven and first-server
outcomes.

Input is the normalized point table from SlamPointsLoader, in playing
order within each match. Players are identified as 1 and 2 throughout.
"""

import logging

import numpy as np
import pandas as pd
from scipy import stats

log = logging.getLogger(__name__)

MATCH_KEYS = ["match_id"]
SET_KEYS = ["match_id", "set_no"]
GAME_KEYS = ["match_id", "set_no", "game_no"]


def game_outcomes(points: pd.DataFrame) -> pd.DataFrame:
    """One row per (match, set, game).

    The game winner is the winner of the game's last point; the server is
    the server of its first point. game_in_set counts games in playing
    order, so it does not matter whether the source numbers games per set
    or per match.
    """
    games = (
        points.groupby(GAME_KEYS, sort=False)
        .agg(
            server=("server", "first"),
            winner=("point_winner", "last"),
            n_points=("point_no", "size"),
        )
        .reset_index()
    )
    games["held"] = games["server"] == games["winner"]
    games["game_in_set"] = games.groupby(SET_KEYS, sort=False).cumcount() + 1

    for player in (1, 2):
        won = (games["winner"] == player).astype(int)
        games[f"p{player}_games_before"] = (
            won.groupby([games["match_id"], games["set_no"]]).cumsum() - won
        )
    return games


def set_outcomes(points: pd.DataFrame, games: pd.DataFrame | None = None) -> pd.DataFrame:
    """One row per set with games won by each player, winner and completeness.

    A set is complete when the leader has at least six games and leads by
    two, or the score is 7-6 or 13-12 (tiebreak).
    """
    if games is None:
        games = game_outcomes(points)

    sets = (
        games.assign(
            p1_won=(games["winner"] == 1).astype(int),
            p2_won=(games["winner"] == 2).astype(int),
        )
        .groupby(SET_KEYS, sort=False)
        .agg(p1_games=("p1_won", "sum"), p2_games=("p2_won", "sum"))
        .reset_index()
    )
    hi = sets[["p1_games", "p2_games"]].max(axis=1)
    lo = sets[["p1_games", "p2_games"]].min(axis=1)
    sets["complete"] = (
        ((hi >= 6) & (hi - lo >= 2))
        | ((hi == 7) & (lo == 6))
        | ((hi == 13) & (lo == 12))
    )
    sets["set_winner"] = np.where(sets["p1_games"] > sets["p2_games"], 1, 2)
    return sets


def game_seven_outcomes(points: pd.DataFrame) -> pd.DataFrame:
    """One row per complete set that reached a seventh game."""
    games = game_outcomes(points)
    sets = set_outcomes(points, games)
    sevens = games[games["game_in_set"] == 7]

    df = sevens.merge(sets[sets["complete"]], on=SET_KEYS, how="inner")
    server_before = np.where(df["server"] == 1, df["p1_games_before"], df["p2_games_before"])
    returner_before = np.where(df["server"] == 1, df["p2_games_before"], df["p1_games_before"])

    out = pd.DataFrame({
        "match_id": df["match_id"],
        "set_no": df["set_no"],
        "server": df["server"],
        "winner": df["winner"],
        "held": df["held"],
        "score_before": [f"{s}-{r}" for s, r in zip(server_before, returner_before)],
        "set_winner": df["set_winner"],
    })
    out["game7_winner_won_set"] = out["winner"] == out["set_winner"]
    log.info(f"Game seven: {len(out)} sets")
    return out.reset_index(drop=True)


def first_server_outcomes(points: pd.DataFrame) -> pd.DataFrame:
    """One row per match whose winner can be determined from complete sets."""
    sets = set_outcomes(points)
    complete = sets[sets["complete"]]
    sets_won = (
        complete.assign(
            p1_sets=(complete["set_winner"] == 1).astype(int),
            p2_sets=(complete["set_winner"] == 2).astype(int),
        )
        .groupby(MATCH_KEYS, sort=False)[["p1_sets", "p2_sets"]]
        .sum()
        .reset_index()
    )

    extra = [c for c in ("year", "slam", "player1", "player2") if c in points.columns]
    first = (
        points.groupby(MATCH_KEYS, sort=False)[["server", *extra]]
        .first()
        .reset_index()
        .rename(columns={"server": "first_server"})
    )

    df = first.merge(sets_won, on=MATCH_KEYS, how="inner")
    decided = df["p1_sets"] != df["p2_sets"]
    undecided = int((~decided).sum())
    if undecided:
        log.info(f"First server: {undecided} matches without a decided winner skipped")
    df = df[decided].copy()

    df["winner"] = np.where(df["p1_sets"] > df["p2_sets"], 1, 2)
    df["first_server_won"] = df["first_server"] == df["winner"]
    return df.reset_index(drop=True)


# ── Summaries ──────────────────────────────────────────────────────────

def summarize_game_seven(df: pd.DataFrame) -> pd.DataFrame:
    """Share of sets won by the game-7 winner: overall, by hold/break, by score."""
    rows = [_share_row("overall", "all", df)]
    for held, group in df.groupby("held"):
        rows.append(_share_row("game7", "held" if held else "broken", group))
    for score, group in df.groupby("score_before"):
        rows.append(_share_row("score_before", score, group))
    return pd.DataFrame(rows)


def _share_row(group: str, value: str, df: pd.DataFrame) -> dict:
    n = len(df)
    won = int(df["game7_winner_won_set"].sum())
    return {
        "group": group,
        "value": value,
        "sets": n,
        "game7_winner_won_set": won,
        "share": won / n if n else float("nan"),
    }


def summarize_first_server(df: pd.DataFrame, confidence: float = 0.95) -> dict:
    """Win share of the first server with an exact binomial test against 0.5."""
    n = len(df)
    k = int(df["first_server_won"].sum())
    if n == 0:
        return {
            "matches": 0, "first_server_wins": 0, "share": float("nan"),
            "p_value": float("nan"), "ci_lower": float("nan"), "ci_upper": float("nan"),
        }

    test = stats.binomtest(k, n, p=0.5)
    ci = test.proportion_ci(confidence_level=confidence, method="exact")
    result = {
        "matches": n,
        "first_server_wins": k,
        "share": k / n,
        "p_value": float(test.pvalue),
        "ci_lower": float(ci.low),
        "ci_upper": float(ci.high),
    }
    log.info(
        f"First server won {k}/{n} matches ({result['share']:.1%}), "
        f"p={result['p_value']:.4f}"
    )
    return result


def first_server_by_event(df: pd.DataFrame) -> pd.DataFrame:
    """First-server win share per (year, slam) event."""
    if df.empty or not {"year", "slam"} <= set(df.columns):
        return pd.DataFrame(columns=["event", "matches", "share"])
    grouped = df.groupby(["year", "slam"], sort=True)["first_server_won"]
    out = pd.DataFrame({"matches": grouped.size(), "share": grouped.mean()}).reset_index()
    out.insert(0, "event", out["year"].astype(str) + " " + out["slam"])
    return out
