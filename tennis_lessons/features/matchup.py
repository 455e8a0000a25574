"""
Labelled match-up table for the modelling lesson.

The match table is winner/loser oriented, so the outcome is implicit in
the column names. Each match is re-oriented at random into player A and
player B; the label says whether A won and the features are A − B
differences.
"""

import logging

import numpy as np
import pandas as pd
from sklearn.model_selection import train_test_split

from tennis_lessons.core.schema import ModelingFrame, Role, stat_column

log = logging.getLogger(__name__)


def build_matchup_frame(
    df: pd.DataFrame,
    features: list[str],
    seed: int = 42,
    include_surface: bool = False,
) -> ModelingFrame:
    """Build a ModelingFrame of diff_<stat> features and a player-A-won label.

    Args:
        df: match table (with serve ratios if any ratio is requested)
        features: un-prefixed stat names, e.g. ["rank_points", "serve_won"]
        seed: seed for the random A/B orientation
        include_surface: add one-hot surface indicator columns
    """
    if not features:
        raise ValueError("at least one feature is required")

    rng = np.random.default_rng(seed)
    a_is_winner = rng.random(len(df)) < 0.5

    X = pd.DataFrame(index=df.index)
    for stat in features:
        w_col, l_col = stat_column(stat, Role.WINNER), stat_column(stat, Role.LOSER)
        if w_col not in df.columns or l_col not in df.columns:
            raise KeyError(f"feature '{stat}' needs columns {w_col} and {l_col}")
        w = pd.to_numeric(df[w_col], errors="coerce").to_numpy(dtype=float)
        l = pd.to_numeric(df[l_col], errors="coerce").to_numpy(dtype=float)
        X[f"diff_{stat}"] = np.where(a_is_winner, w - l, l - w)

    if include_surface:
        dummies = pd.get_dummies(df["surface"], prefix="surface", dtype=float)
        X = pd.concat([X, dummies], axis=1)

    complete = X.notna().all(axis=1).to_numpy()
    dropped = int((~complete).sum())
    if dropped:
        log.info(f"Match-up table: dropped {dropped} matches with missing features")

    ids = df["match_id"].astype(str).to_numpy()[complete].tolist()
    frame = ModelingFrame(
        X=X.loc[complete].reset_index(drop=True),
        y=a_is_winner[complete].astype(int),
        match_ids=ids,
    )
    log.info(
        f"Match-up table: {frame.n_samples} matches, {len(frame.feature_names)} "
        f"features, player A win rate {frame.positive_rate:.3f}"
    )
    return frame


def stratified_split(
    frame: ModelingFrame, train_fraction: float = 0.75, seed: int = 42,
) -> tuple[ModelingFrame, ModelingFrame]:
    """Partition into train/test subsets stratified by label."""
    if not 0.0 < train_fraction < 1.0:
        raise ValueError(f"train_fraction must be in (0, 1), got {train_fraction}")

    idx = np.arange(frame.n_samples)
    train_idx, _ = train_test_split(
        idx, train_size=train_fraction, stratify=frame.y, random_state=seed,
    )
    train_mask = np.zeros(frame.n_samples, dtype=bool)
    train_mask[train_idx] = True

    train, test = frame.subset(train_mask), frame.subset(~train_mask)
    log.info(f"Split: train={train.n_samples}, test={test.n_samples}")
    return train, test
