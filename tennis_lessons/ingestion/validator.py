"""
Post-load data quality validation.

Runs integrity checks on the match table before it enters the
feature engineering steps of either lesson.
"""

import logging
from collections import Counter

import pandas as pd

from tennis_lessons.core.schema import SERVE_COUNTS

log = logging.getLogger(__name__)

INCOMPLETE_SCORE_PATTERN = r"RET|W/O|DEF|ABN|WALKOVER|UNFINISHED"


def inconsistent_counts(df: pd.DataFrame) -> dict[str, pd.Series]:
    """Boolean masks of rows whose serve counts cannot all be true at once."""
    checks = {}
    for p in ("w", "l"):
        svpt, first_in = df[f"{p}_svpt"], df[f"{p}_1stIn"]
        checks[f"{p}_1stIn>svpt"] = first_in > svpt
        checks[f"{p}_1stWon>1stIn"] = df[f"{p}_1stWon"] > first_in
        checks[f"{p}_2ndWon>2ndIn"] = df[f"{p}_2ndWon"] > (svpt - first_in)
        checks[f"{p}_bpSaved>bpFaced"] = df[f"{p}_bpSaved"] > df[f"{p}_bpFaced"]
    return checks


def incomplete_matches(df: pd.DataFrame) -> pd.Series:
    """Rows whose score marks a retirement, walkover, default or abandonment."""
    return df["score"].astype(str).str.contains(
        INCOMPLETE_SCORE_PATTERN, case=False, regex=True, na=False,
    )


class DataValidator:
    """Validates a match table for quality issues."""

    def validate(self, df: pd.DataFrame) -> dict:
        """Run all checks. Returns summary dict + logs warnings."""
        issues = []
        stats = Counter()
        stats["matches"] = len(df)

        if df.empty:
            issues.append(("error", "match table is empty"))
        else:
            serve_cols = [
                f"{p}_{c}" for p in ("w", "l") for c in SERVE_COUNTS
                if f"{p}_{c}" in df.columns
            ]
            missing = df[serve_cols].isna().any(axis=1)
            stats["missing_serve_stats"] = int(missing.sum())

            zero_svpt = (df["w_svpt"] <= 0) | (df["l_svpt"] <= 0)
            stats["zero_service_points"] = int(zero_svpt.sum())
            if stats["zero_service_points"]:
                issues.append((
                    "warn",
                    f"{stats['zero_service_points']} matches with no service points",
                ))

            for name, mask in inconsistent_counts(df).items():
                n = int(mask.sum())
                if n:
                    stats[f"inconsistent_{name}"] = n
                    issues.append(("warn", f"{n} matches with {name}"))

            stats["incomplete"] = int(incomplete_matches(df).sum())

            if "surface" in df.columns:
                for surface, n in df["surface"].value_counts().items():
                    stats[f"surface_{surface}"] = int(n)

            share_missing = stats["missing_serve_stats"] / len(df)
            if share_missing > 0.5:
                issues.append((
                    "warn",
                    f"{share_missing:.0%} of matches lack serve statistics",
                ))

        errors = [msg for level, msg in issues if level == "error"]
        warns = [msg for level, msg in issues if level == "warn"]

        if errors:
            log.error(f"Data validation: {len(errors)} errors")
            for e in errors[:10]:
                log.error(f"  {e}")
        if warns:
            log.warning(f"Data validation: {len(warns)} warnings")
            for w in warns[:10]:
                log.warning(f"  {w}")

        return {
            "stats": dict(stats),
            "errors": errors,
            "warnings": warns,
            "is_clean": len(errors) == 0,
        }
