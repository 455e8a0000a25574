"""Tests for the randomly oriented match-up table and its split."""

import numpy as np
import pytest

from tennis_lessons.features.matchup import build_matchup_frame, stratified_split


class TestBuildMatchupFrame:
    def test_shape_and_label(self, matches):
        frame = build_matchup_frame(matches, ["rank_points", "age"])
        assert frame.n_samples == len(matches)
        assert frame.feature_names == ["diff_rank_points", "diff_age"]
        assert set(np.unique(frame.y)) == {0, 1}
        assert 0.35 < frame.positive_rate < 0.65

    def test_difference_follows_orientation(self, matches):
        frame = build_matchup_frame(matches, ["rank_points"])
        by_id = matches.set_index("match_id")
        for i in range(20):
            row = by_id.loc[frame.match_ids[i]]
            gap = row["winner_rank_points"] - row["loser_rank_points"]
            expected = gap if frame.y[i] == 1 else -gap
            assert frame.X["diff_rank_points"].iloc[i] == pytest.approx(expected)

    def test_seed_reproducible(self, matches):
        a = build_matchup_frame(matches, ["age"], seed=7)
        b = build_matchup_frame(matches, ["age"], seed=7)
        c = build_matchup_frame(matches, ["age"], seed=8)
        assert np.array_equal(a.y, b.y)
        assert not np.array_equal(a.y, c.y)

    def test_missing_features_dropped(self, matches):
        df = matches.copy()
        df.loc[:9, "winner_ht"] = np.nan
        frame = build_matchup_frame(df, ["ht"])
        assert frame.n_samples == len(df) - 10
        assert not frame.X.isna().any().any()

    def test_surface_indicators(self, matches):
        frame = build_matchup_frame(matches, ["age"], include_surface=True)
        assert {"surface_clay", "surface_grass", "surface_hard"} <= set(frame.feature_names)
        assert (frame.X[["surface_clay", "surface_grass", "surface_hard"]].sum(axis=1) == 1).all()

    def test_errors(self, matches):
        with pytest.raises(ValueError):
            build_matchup_frame(matches, [])
        with pytest.raises(KeyError):
            build_matchup_frame(matches, ["reach"])


class TestStratifiedSplit:
    def test_sizes_and_disjoint(self, matches):
        frame = build_matchup_frame(matches, ["rank_points"])
        train, test = stratified_split(frame, 0.75, seed=1)
        assert train.n_samples == 150
        assert test.n_samples == 50
        assert not set(train.match_ids) & set(test.match_ids)

    def test_stratified(self, matches):
        frame = build_matchup_frame(matches, ["rank_points"])
        train, test = stratified_split(frame, 0.75)
        assert abs(train.positive_rate - test.positive_rate) < 0.05

    @pytest.mark.parametrize("fraction", [0.0, 1.0, 1.5])
    def test_bad_fraction(self, matches, fraction):
        frame = build_matchup_frame(matches, ["rank_points"])
        with pytest.raises(ValueError):
            stratified_split(frame, fraction)
