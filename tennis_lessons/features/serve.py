"""Serve and return ratio columns for the match table."""

import logging

import pandas as pd

from tennis_lessons.core.schema import SERVE_COUNTS, SERVE_RATIOS
from tennis_lessons.ingestion.validator import inconsistent_counts, incomplete_matches

log = logging.getLogger(__name__)

OPPONENT = {"w": "l", "l": "w"}

# No break points faced, or every first serve in
NULLABLE_RATIOS = ("_bp_saved", "_second_won")


def _ratio(num: pd.Series, den: pd.Series) -> pd.Series:
    """num / den with NaN (never inf) where den is zero or missing."""
    return num / den.where(den > 0)


def add_serve_ratios(df: pd.DataFrame) -> pd.DataFrame:
    """Return a copy of the match table with per-player serve ratios.

    For each prefix p in {w, l}: first_in, first_won, second_won,
    serve_won, ace_rate, df_rate, bp_saved and return_won (the share of
    the opponent's service points won).
    """
    out = df.copy()
    for p in ("w", "l"):
        svpt = out[f"{p}_svpt"]
        first_in = out[f"{p}_1stIn"]
        out[f"{p}_first_in"] = _ratio(first_in, svpt)
        out[f"{p}_first_won"] = _ratio(out[f"{p}_1stWon"], first_in)
        out[f"{p}_second_won"] = _ratio(out[f"{p}_2ndWon"], svpt - first_in)
        out[f"{p}_serve_won"] = _ratio(out[f"{p}_1stWon"] + out[f"{p}_2ndWon"], svpt)
        out[f"{p}_ace_rate"] = _ratio(out[f"{p}_ace"], svpt)
        out[f"{p}_df_rate"] = _ratio(out[f"{p}_df"], svpt)
        out[f"{p}_bp_saved"] = _ratio(out[f"{p}_bpSaved"], out[f"{p}_bpFaced"])

    for p in ("w", "l"):
        out[f"{p}_return_won"] = 1.0 - out[f"{OPPONENT[p]}_serve_won"]
    return out


def filter_valid_matches(df: pd.DataFrame, min_service_points: int = 1) -> pd.DataFrame:
    """Drop matches whose statistics cannot support serve/return analysis.

    Rules, applied in order: missing serve counts, fewer than
    min_service_points for either player, inconsistent counts, incomplete
    matches (retirement, walkover, default), ratios outside [0, 1].
    Missing bp_saved and second_won ratios are allowed.
    """
    before = len(df)
    count_cols = [f"{p}_{c}" for p in ("w", "l") for c in SERVE_COUNTS]
    rules = []

    keep = df[count_cols].notna().all(axis=1)
    rules.append(("missing serve counts", keep))

    enough = (df["w_svpt"] >= min_service_points) & (df["l_svpt"] >= min_service_points)
    rules.append((f"fewer than {min_service_points} service points", enough))

    consistent = pd.Series(True, index=df.index)
    for mask in inconsistent_counts(df).values():
        consistent &= ~mask.fillna(False).astype(bool)
    rules.append(("inconsistent counts", consistent))

    rules.append(("incomplete match", ~incomplete_matches(df)))

    ratio_cols = [f"{p}_{r}" for p in ("w", "l") for r in SERVE_RATIOS if f"{p}_{r}" in df.columns]
    in_range = pd.Series(True, index=df.index)
    for col in ratio_cols:
        values = df[col]
        ok = values.between(0.0, 1.0)
        if col.endswith(NULLABLE_RATIOS):
            ok |= values.isna()
        in_range &= ok
    rules.append(("ratio outside [0, 1]", in_range))

    mask = pd.Series(True, index=df.index)
    for name, rule in rules:
        removed = int((mask & ~rule).sum())
        if removed:
            log.info(f"Filter: {removed} matches removed ({name})")
        mask &= rule

    out = df[mask].reset_index(drop=True)
    log.info(f"Filter: kept {len(out)} of {before} matches")
    return out
