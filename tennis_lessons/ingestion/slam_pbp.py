"""
Grand Slam Point-by-Point data loader (Jeff Sackmann).

Files come in pairs per event, e.g. 2011-wimbledon-matches.csv and
2011-wimbledon-points.csv. Points carry set/game/point indices, the
serving player (1 or 2) and the point winner (1 or 2); player names are
joined from the matches file.
"""

import logging
from pathlib import Path

import pandas as pd

from tennis_lessons.core.interfaces import BaseLoader
from tennis_lessons.core.schema import POINT_COLUMNS, Slam
from tennis_lessons.ingestion.base import normalize_columns, year_from_filename

log = logging.getLogger(__name__)

POINT_ALIASES = {
    "match_id": ["match_id", "Match_Id", "matchId"],
    "set_no": ["SetNo", "set_no", "Set"],
    "game_no": ["GameNo", "game_no", "Game"],
    "point_no": ["PointNumber", "PointNo", "point_no", "Point"],
    "server": ["PointServer", "Svr", "server"],
    "point_winner": ["PointWinner", "PtWinner", "point_winner"],
}

MATCH_ALIASES = {
    "match_id": ["match_id", "Match_Id", "matchId"],
    "player1": ["player1", "Player1", "player_1"],
    "player2": ["player2", "Player2", "player_2"],
}

MAX_POINTS_PER_MATCH = 500
MIN_POINTS_PER_MATCH = 24


def slam_from_filename(path: Path) -> str:
    name = path.name.lower()
    for slam in Slam:
        if slam.value in name:
            return slam.value
    return "unknown"


class SlamPointsLoader(BaseLoader):
    """Loads Grand Slam point-by-point data."""

    def __init__(
        self,
        data_dir: str,
        years: list[int] | None = None,
        slams: list[str] | None = None,
    ):
        self.data_dir = Path(data_dir)
        self.years = set(years) if years else None
        self.slams = set(slams) if slams else None

    def point_files(self) -> list[Path]:
        files = []
        for f in sorted(self.data_dir.rglob("*-points.csv")):
            if self.years is not None and year_from_filename(f) not in self.years:
                continue
            if self.slams is not None and slam_from_filename(f) not in self.slams:
                continue
            files.append(f)
        return files

    def load(self) -> pd.DataFrame:
        if not self.data_dir.exists():
            raise FileNotFoundError(f"Point data not found: {self.data_dir}")

        point_files = self.point_files()
        if not point_files:
            log.warning(f"No PBP CSV files in {self.data_dir}")
            return pd.DataFrame(columns=POINT_COLUMNS)

        frames = []
        for fpath in point_files:
            try:
                df = self._load_file(fpath)
            except (OSError, ValueError, pd.errors.ParserError) as e:
                log.warning(f"Failed to load {fpath.name}: {e}")
                continue
            if not df.empty:
                frames.append(df)

        if not frames:
            return pd.DataFrame(columns=POINT_COLUMNS)

        points = pd.concat(frames, ignore_index=True)
        log.info(
            f"Slam PBP: loaded {points['match_id'].nunique()} matches, "
            f"{len(points)} points"
        )
        return points

    def validate(self, df: pd.DataFrame) -> list[str]:
        warnings = []
        if df.empty:
            return ["no points loaded"]

        counts = df.groupby("match_id").size()
        for match_id, n in counts[counts > MAX_POINTS_PER_MATCH].items():
            warnings.append(f"{match_id}: {n} points (unusually many)")
        for match_id, n in counts[counts < MIN_POINTS_PER_MATCH].items():
            warnings.append(f"{match_id}: {n} points (truncated?)")

        monotonic = df.groupby("match_id")["point_no"].apply(
            lambda s: s.is_monotonic_increasing
        )
        for match_id in monotonic[~monotonic].index:
            warnings.append(f"{match_id}: point numbers out of order")
        return warnings

    def _load_file(self, fpath: Path) -> pd.DataFrame:
        raw = pd.read_csv(fpath, low_memory=False)
        points, missing = normalize_columns(raw, POINT_ALIASES)
        if missing:
            raise ValueError(f"missing columns {missing}")

        points = points[list(POINT_ALIASES)].copy()
        points["match_id"] = points["match_id"].astype(str)
        for col in ("set_no", "game_no", "point_no", "server", "point_winner"):
            points[col] = pd.to_numeric(points[col], errors="coerce")

        # Placeholder rows (PointNumber "0X"/"0Y") carry no server or winner
        valid = points["server"].isin([1, 2]) & points["point_winner"].isin([1, 2])
        valid &= points["set_no"].notna() & points["game_no"].notna()
        dropped = int((~valid).sum())
        if dropped:
            log.debug(f"{fpath.name}: dropped {dropped} placeholder rows")
        points = points[valid].copy()

        points["_order"] = range(len(points))
        points["point_no"] = points["point_no"].fillna(-1)
        for col in ("set_no", "game_no", "point_no", "server", "point_winner"):
            points[col] = points[col].astype(int)

        points["year"] = year_from_filename(fpath)
        points["slam"] = slam_from_filename(fpath)
        points = points.merge(self._players(fpath), on="match_id", how="left")
        points["player1"] = points["player1"].fillna("Player1")
        points["player2"] = points["player2"].fillna("Player2")

        points = points.sort_values(["match_id", "_order"], kind="stable")
        return points[POINT_COLUMNS].reset_index(drop=True)

    def _players(self, points_path: Path) -> pd.DataFrame:
        """Player names from the sibling matches file, if any."""
        prefix = points_path.name[: -len("-points.csv")]
        matches_path = points_path.with_name(f"{prefix}-matches.csv")
        empty = pd.DataFrame(columns=list(MATCH_ALIASES))
        if not matches_path.exists():
            log.warning(f"No matches file for {points_path.name}")
            return empty

        raw = pd.read_csv(matches_path, low_memory=False)
        matches, missing = normalize_columns(raw, MATCH_ALIASES)
        if missing:
            log.warning(f"{matches_path.name}: missing columns {missing}")
            return empty
        matches = matches[list(MATCH_ALIASES)].drop_duplicates("match_id")
        matches["match_id"] = matches["match_id"].astype(str)
        return matches
