"""
Match-level data loader (Jeff Sackmann tennis_atp / tennis_wta).

One CSV per season: atp_matches_YYYY.csv. Each row is a completed match
with aggregate serve statistics for the winner (w_*) and loser (l_*).
Qualifying, futures and doubles files share the prefix and are skipped.
"""

import logging
import re
from pathlib import Path

import pandas as pd

from tennis_lessons.core.interfaces import BaseLoader
from tennis_lessons.core.schema import (
    MATCH_COLUMNS, PLAYER_ATTRIBUTES, SERVE_COUNTS, Surface,
)
from tennis_lessons.ingestion.base import year_from_filename

log = logging.getLogger(__name__)

SURFACE_MAP = {s.value: s for s in Surface}

NUMERIC_COLUMNS = [
    "best_of", "minutes", "match_num",
    *[f"winner_{a}" for a in PLAYER_ATTRIBUTES],
    *[f"loser_{a}" for a in PLAYER_ATTRIBUTES],
    *[f"w_{c}" for c in SERVE_COUNTS],
    *[f"l_{c}" for c in SERVE_COUNTS],
]

REQUIRED_COLUMNS = [
    "tourney_id", "match_num", "surface", "tourney_date",
    "winner_name", "loser_name", "score",
    *[f"w_{c}" for c in SERVE_COUNTS],
    *[f"l_{c}" for c in SERVE_COUNTS],
]


def normalize_surface(value) -> str:
    """Map raw surface labels ("Hard", "clay", NaN) onto Surface values."""
    if not isinstance(value, str):
        return Surface.UNKNOWN.value
    return SURFACE_MAP.get(value.strip().lower(), Surface.UNKNOWN).value


class MatchesLoader(BaseLoader):
    """Loads season files of completed tour-level matches."""

    def __init__(self, data_dir: str, tour: str = "atp", years: list[int] | None = None):
        self.data_dir = Path(data_dir)
        self.tour = tour
        self.years = set(years) if years else None
        self._pattern = re.compile(rf"^{re.escape(tour)}_matches_\d{{4}}\.csv$")

    def season_files(self) -> list[Path]:
        """Season CSVs in the data directory, filtered by year, sorted."""
        files = []
        for f in sorted(self.data_dir.glob(f"{self.tour}_matches_*.csv")):
            if not self._pattern.match(f.name):
                continue
            if self.years is not None and year_from_filename(f) not in self.years:
                continue
            files.append(f)
        return files

    def load(self) -> pd.DataFrame:
        if not self.data_dir.exists():
            raise FileNotFoundError(f"Match data not found: {self.data_dir}")

        files = self.season_files()
        if not files:
            log.warning(f"No {self.tour} season files in {self.data_dir}")
            return pd.DataFrame(columns=MATCH_COLUMNS)

        frames = []
        for fpath in files:
            try:
                frames.append(self._load_file(fpath))
            except (OSError, ValueError, pd.errors.ParserError) as e:
                log.warning(f"Failed to load {fpath.name}: {e}")

        if not frames:
            return pd.DataFrame(columns=MATCH_COLUMNS)

        df = pd.concat(frames, ignore_index=True)
        log.info(f"{self.tour.upper()}: loaded {len(df)} matches from {len(frames)} seasons")
        return df

    def validate(self, df: pd.DataFrame) -> list[str]:
        warnings = []
        missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
        if missing:
            warnings.append(f"missing columns: {', '.join(missing)}")

        if "match_id" in df.columns:
            n_dup = int(df["match_id"].duplicated().sum())
            if n_dup:
                warnings.append(f"{n_dup} duplicate match_id values")

        stat_cols = [c for c in REQUIRED_COLUMNS if c.startswith(("w_", "l_")) and c in df.columns]
        if stat_cols:
            n_missing = int(df[stat_cols].isna().any(axis=1).sum())
            if n_missing:
                warnings.append(f"{n_missing} matches without serve statistics")
        return warnings

    def _load_file(self, fpath: Path) -> pd.DataFrame:
        df = pd.read_csv(fpath, low_memory=False)

        for col in MATCH_COLUMNS:
            if col not in df.columns:
                df[col] = pd.NA

        for col in NUMERIC_COLUMNS:
            df[col] = pd.to_numeric(df[col], errors="coerce")

        df["surface"] = df["surface"].map(normalize_surface)

        # tourney_date is YYYYMMDD; fall back to the season in the file name
        dates = pd.to_numeric(df["tourney_date"], errors="coerce")
        file_year = year_from_filename(fpath) or 0
        df["year"] = (dates // 10000).fillna(file_year).astype(int)

        df["match_id"] = (
            df["tourney_id"].astype(str) + "-"
            + df["match_num"].astype("Int64").astype(str)
        )
        return df[MATCH_COLUMNS]
