"""
Tennis Lessons domain objects and column vocabulary.

Both lessons work on pandas tables; this module names the columns those
tables carry and defines the one typed container that crosses the
features/ → models/ boundary. Every module in the project depends on
this file; this file depends on nothing else in the project.

Validation rules are enforced at construction time via __post_init__.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np
import pandas as pd


# ── Enums ──────────────────────────────────────────────────────────────

class Surface(Enum):
    HARD = "hard"
    CLAY = "clay"
    GRASS = "grass"
    CARPET = "carpet"
    UNKNOWN = "unknown"


class Role(Enum):
    WINNER = "winner"
    LOSER = "loser"


class Slam(Enum):
    AUSOPEN = "ausopen"
    FRENCHOPEN = "frenchopen"
    WIMBLEDON = "wimbledon"
    USOPEN = "usopen"


# ── Column vocabulary ──────────────────────────────────────────────────

# Serve counts, stored per player with a "w_" / "l_" prefix.
SERVE_COUNTS = [
    "ace", "df", "svpt", "1stIn", "1stWon", "2ndWon",
    "SvGms", "bpSaved", "bpFaced",
]

# Player attributes, stored with a "winner_" / "loser_" prefix.
PLAYER_ATTRIBUTES = ["rank", "rank_points", "age", "ht"]

# Derived per-player ratios, stored with a "w_" / "l_" prefix.
SERVE_RATIOS = [
    "first_in", "first_won", "second_won", "serve_won",
    "ace_rate", "df_rate", "bp_saved", "return_won",
]

MATCH_COLUMNS = [
    "match_id", "tourney_id", "tourney_name", "surface", "tourney_level",
    "tourney_date", "year", "match_num", "winner_name", "loser_name",
    "score", "best_of", "round", "minutes",
    *[f"winner_{a}" for a in PLAYER_ATTRIBUTES],
    *[f"loser_{a}" for a in PLAYER_ATTRIBUTES],
    *[f"w_{c}" for c in SERVE_COUNTS],
    *[f"l_{c}" for c in SERVE_COUNTS],
]

POINT_COLUMNS = [
    "match_id", "year", "slam", "player1", "player2",
    "set_no", "game_no", "point_no", "server", "point_winner",
]

ROLE_PREFIX = {Role.WINNER: "w_", Role.LOSER: "l_"}
ATTRIBUTE_PREFIX = {Role.WINNER: "winner_", Role.LOSER: "loser_"}


def stat_column(stat: str, role: Role) -> str:
    """Resolve an un-prefixed stat name to its wide-table column."""
    if stat in PLAYER_ATTRIBUTES or stat == "name":
        return f"{ATTRIBUTE_PREFIX[role]}{stat}"
    return f"{ROLE_PREFIX[role]}{stat}"


# ── Data Transfer Objects ──────────────────────────────────────────────

@dataclass
class ModelingFrame:
    """Standardized container for model-ready data.

    This is the contract between features/ and models/.
    All fields share the same first dimension (N samples).
    """
    X: pd.DataFrame          # (N, n_features)
    y: np.ndarray            # (N,) 1 = player A won
    match_ids: list[str]     # (N,)

    def __post_init__(self):
        n = len(self.y)
        if self.X.shape[0] != n:
            raise ValueError(f"X has {self.X.shape[0]} rows, expected {n}")
        if len(self.match_ids) != n:
            raise ValueError(
                f"match_ids has {len(self.match_ids)} entries, expected {n}"
            )
        labels = set(np.unique(self.y).tolist())
        if not labels <= {0, 1}:
            raise ValueError(f"y must be binary 0/1, got values {sorted(labels)}")

    @property
    def n_samples(self) -> int:
        return len(self.y)

    @property
    def feature_names(self) -> list[str]:
        return list(self.X.columns)

    @property
    def positive_rate(self) -> float:
        return float(self.y.mean()) if self.n_samples > 0 else 0.0

    def subset(self, mask: np.ndarray) -> "ModelingFrame":
        """Return a new ModelingFrame filtered by boolean mask."""
        mask = np.asarray(mask, dtype=bool)
        ids = [m for m, keep in zip(self.match_ids, mask) if keep]
        return ModelingFrame(
            X=self.X.loc[mask].reset_index(drop=True),
            y=self.y[mask],
            match_ids=ids,
        )
