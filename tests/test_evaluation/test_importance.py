"""Tests for variable importance across classifier families."""

import numpy as np
import pytest

from tennis_lessons.evaluation.importance import scale_importance, variable_importance
from tennis_lessons.features.matchup import build_matchup_frame, stratified_split
from tennis_lessons.models import LogisticModel, RandomForestModel, SVMModel

FAST = {"folds": 2, "repeats": 1, "n_jobs": 1}


@pytest.fixture
def split(matches):
    frame = build_matchup_frame(matches, ["rank_points", "age", "ht"])
    return stratified_split(frame, 0.75)


class TestScaleImportance:
    def test_min_max(self):
        np.testing.assert_allclose(scale_importance(np.array([1.0, 3.0, 2.0])), [0, 100, 50])

    def test_constant(self):
        np.testing.assert_allclose(scale_importance(np.array([0.4, 0.4])), [100, 100])


class TestVariableImportance:
    def test_linear_uses_coefficients(self, split):
        train, test = split
        model = LogisticModel(param_grid={"C": [1.0]}, **FAST)
        model.fit(train)
        imp = variable_importance(model, test)
        assert imp["method"].unique().tolist() == ["abs_coefficient"]
        assert imp["importance"].iloc[0] == 100.0
        assert imp["importance"].iloc[-1] == 0.0
        assert imp["feature"].iloc[0] == "diff_rank_points"

    def test_forest_uses_impurity(self, split):
        train, test = split
        model = RandomForestModel(
            n_estimators=25, param_grid={"max_features": [1.0], "min_samples_leaf": [5]}, **FAST,
        )
        model.fit(train)
        imp = variable_importance(model, test)
        assert set(imp["method"]) == {"impurity"}
        assert sorted(imp["feature"]) == ["diff_age", "diff_ht", "diff_rank_points"]

    def test_svm_uses_permutation(self, split):
        train, test = split
        model = SVMModel(param_grid={"C": [1.0], "gamma": ["scale"]}, **FAST)
        model.fit(train)
        imp = variable_importance(model, test, n_repeats=3)
        assert set(imp["method"]) == {"permutation"}
        assert imp["importance"].between(0, 100).all()
        assert imp["importance"].is_monotonic_decreasing
