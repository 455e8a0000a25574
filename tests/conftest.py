"""Shared pytest fixtures: synthetic match and point tables."""

import numpy as np
import pandas as pd
import pytest

from tennis_lessons.core.schema import MATCH_COLUMNS

SURFACES = ["hard", "clay", "grass"]


def make_match(match_num: int = 1, **overrides) -> dict:
    """One plausible match row; keyword arguments override any column."""
    row = {col: np.nan for col in MATCH_COLUMNS}
    row.update({
        "tourney_id": "2019-0339",
        "tourney_name": "Brisbane",
        "surface": "hard",
        "tourney_level": "A",
        "tourney_date": 20190101,
        "year": 2019,
        "match_num": match_num,
        "match_id": f"2019-0339-{match_num}",
        "winner_name": "Kei Nishikori",
        "loser_name": "Daniil Medvedev",
        "score": "6-4 3-6 6-2",
        "best_of": 3,
        "round": "F",
        "minutes": 124,
        "winner_rank": 9, "winner_rank_points": 3390, "winner_age": 29.0, "winner_ht": 178,
        "loser_rank": 16, "loser_rank_points": 2625, "loser_age": 22.9, "loser_ht": 198,
        "w_ace": 3, "w_df": 2, "w_svpt": 77, "w_1stIn": 44, "w_1stWon": 35,
        "w_2ndWon": 17, "w_SvGms": 13, "w_bpSaved": 3, "w_bpFaced": 4,
        "l_ace": 10, "l_df": 3, "l_svpt": 92, "l_1stIn": 56, "l_1stWon": 38,
        "l_2ndWon": 15, "l_SvGms": 13, "l_bpSaved": 4, "l_bpFaced": 8,
    })
    row.update(overrides)
    return row


def synthetic_matches(n: int = 200, seed: int = 0) -> pd.DataFrame:
    """n matches where the winner tends to serve better and rank higher."""
    rng = np.random.default_rng(seed)
    rows = []
    for i in range(n):
        w_svpt, l_svpt = int(rng.integers(60, 110)), int(rng.integers(60, 110))
        w_in = int(w_svpt * rng.uniform(0.55, 0.7))
        l_in = int(l_svpt * rng.uniform(0.55, 0.7))
        w_pts = int(rng.integers(500, 6000))
        l_pts = int(w_pts * rng.uniform(0.3, 1.2))
        rows.append(make_match(
            match_num=i + 1,
            match_id=f"2019-0339-{i + 1}",
            surface=SURFACES[i % len(SURFACES)],
            year=2018 + i % 2,
            winner_rank_points=w_pts,
            loser_rank_points=l_pts,
            winner_rank=int(10000 / w_pts * 10),
            loser_rank=int(10000 / max(l_pts, 1) * 10) + 1,
            winner_age=float(rng.uniform(19, 35)),
            loser_age=float(rng.uniform(19, 35)),
            winner_ht=int(rng.integers(170, 206)),
            loser_ht=int(rng.integers(170, 206)),
            w_svpt=w_svpt, w_1stIn=w_in,
            w_1stWon=int(w_in * rng.uniform(0.7, 0.85)),
            w_2ndWon=int((w_svpt - w_in) * rng.uniform(0.5, 0.6)),
            l_svpt=l_svpt, l_1stIn=l_in,
            l_1stWon=int(l_in * rng.uniform(0.6, 0.75)),
            l_2ndWon=int((l_svpt - l_in) * rng.uniform(0.4, 0.5)),
        ))
    return pd.DataFrame(rows, columns=MATCH_COLUMNS)


def make_points(match_id: str, sets: list[list[int]], first_server: int = 1,
                year: int = 2019, slam: str = "wimbledon") -> pd.DataFrame:
    """Point table for one match from per-set lists of game winners.

    Each game is four points won by the game winner; the serve alternates
    every game across the whole match.
    """
    rows = []
    server = first_server
    point_no = 0
    for set_no, games in enumerate(sets, start=1):
        for game_no, winner in enumerate(games, start=1):
            for _ in range(4):
                point_no += 1
                rows.append({
                    "match_id": match_id, "year": year, "slam": slam,
                    "player1": "Roger Federer", "player2": "Rafael Nadal",
                    "set_no": set_no, "game_no": game_no, "point_no": point_no,
                    "server": server, "point_winner": winner,
                })
            server = 3 - server
    return pd.DataFrame(rows)


@pytest.fixture
def match_row():
    return make_match


@pytest.fixture
def matches():
    return synthetic_matches()


@pytest.fixture
def points_factory():
    return make_points
