"""
Shared utilities for all data loaders.

Column-name variants differ across seasons of the source CSVs; loaders
resolve them through candidate lists instead of hard-coding one spelling.
"""

import logging
import re
from pathlib import Path

import pandas as pd

log = logging.getLogger(__name__)

YEAR_PATTERN = re.compile(r"(19|20)\d{2}")


def find_column(df: pd.DataFrame, candidates: list[str]) -> str | None:
    """Find first matching column name from candidates."""
    for c in candidates:
        if c in df.columns:
            return c
    return None


def normalize_columns(
    df: pd.DataFrame, aliases: dict[str, list[str]],
) -> tuple[pd.DataFrame, list[str]]:
    """Rename columns to canonical names using candidate lists.

    Returns the renamed frame and the canonical names that could not be
    resolved.
    """
    renames = {}
    missing = []
    for canonical, candidates in aliases.items():
        col = find_column(df, candidates)
        if col is None:
            missing.append(canonical)
        elif col != canonical:
            renames[col] = canonical
    return df.rename(columns=renames), missing


def safe_int(val, default: int = 0) -> int:
    """Convert value to int, returning default on failure."""
    if val is None or (isinstance(val, float) and pd.isna(val)):
        return default
    try:
        return int(float(val))
    except (ValueError, TypeError):
        return default


def year_from_filename(path: Path) -> int | None:
    """Extract a four-digit season from a file name, e.g. atp_matches_2019.csv."""
    m = YEAR_PATTERN.search(path.stem)
    return safe_int(m.group(0)) if m else None


def clone_git_repo(repo_url: str, target_dir: str, depth: int = 1) -> Path:
    """Clone a git repo if not already present."""
    import subprocess

    target = Path(target_dir)
    if target.exists() and (target / ".git").exists():
        log.info(f"Repo already exists: {target}")
        return target

    target.parent.mkdir(parents=True, exist_ok=True)
    log.info(f"Cloning {repo_url} → {target}")
    subprocess.run(
        ["git", "clone", "--depth", str(depth), repo_url, str(target)],
        check=True,
    )
    return target
