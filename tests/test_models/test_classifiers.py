"""Tests for the tuned classifier families and the registry."""

from pathlib import Path

import numpy as np
import pytest

from tennis_lessons.features.matchup import build_matchup_frame, stratified_split
from tennis_lessons.models import (
    GradientBoostingModel, LogisticModel, RandomForestModel, SVMModel,
)
from tennis_lessons.models.classifiers import TunedClassifier
from tennis_lessons.models.registry import create_model, create_models, list_models
from tennis_lessons.orchestration.config import load_config

FAST = {"folds": 3, "repeats": 1, "n_jobs": 1}
DEFAULT_CONFIG = Path(__file__).resolve().parents[2] / "configs" / "default.yaml"


@pytest.fixture
def split(matches):
    frame = build_matchup_frame(matches, ["rank_points", "age"])
    return stratified_split(frame, 0.75)


class TestRegistry:
    def test_families_registered(self):
        assert list_models() == ["gbm", "logistic", "random_forest", "svm"]

    def test_create_model(self):
        model = create_model("random_forest", n_estimators=20, folds=3)
        assert isinstance(model, RandomForestModel)
        assert model.n_estimators == 20
        assert model.folds == 3

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown model"):
            create_model("naive_bayes")

    def test_create_models_shared_and_own_options(self):
        models = create_models(
            {"logistic": {"param_grid": {"C": [1.0]}}, "svm": None},
            folds=4, seed=3,
        )
        assert models["logistic"].param_grid == {"C": [1.0]}
        assert models["svm"].param_grid == SVMModel.default_grid
        assert all(m.folds == 4 and m.seed == 3 for m in models.values())


class TestTunedClassifier:
    def test_invalid_resampling(self):
        with pytest.raises(ValueError):
            LogisticModel(folds=1)
        with pytest.raises(ValueError):
            LogisticModel(repeats=0)

    def test_not_fitted(self, split):
        _, test = split
        with pytest.raises(RuntimeError, match="not fitted"):
            LogisticModel().predict_proba(test)

    def test_fit_history(self, split):
        train, _ = split
        model = LogisticModel(param_grid={"C": [0.1, 1.0]}, folds=3, repeats=2, n_jobs=1)
        history = model.fit(train)
        assert history["model"] == "logistic"
        assert history["best_params"]["C"] in (0.1, 1.0)
        assert history["best_score"] < 0
        assert len(history["cv_results"]) == 2
        assert {"C", "mean_score", "std_score", "rank"} <= set(history["cv_results"].columns)
        assert history["resample_scores"].shape == (6,)

    def test_predictions(self, split):
        train, test = split
        model = LogisticModel(param_grid={"C": [1.0]}, **FAST)
        model.fit(train)
        proba = model.predict_proba(test)
        assert proba.shape == (test.n_samples,)
        assert ((proba >= 0) & (proba <= 1)).all()
        assert set(np.unique(model.predict(test))) <= {0, 1}

    def test_informative_feature_beats_chance(self, split):
        train, test = split
        model = LogisticModel(param_grid={"C": [1.0]}, **FAST)
        model.fit(train)
        assert (model.predict(test) == test.y).mean() > 0.6

    @pytest.mark.parametrize("cls, grid", [
        (RandomForestModel, {"max_features": [1.0], "min_samples_leaf": [5]}),
        (GradientBoostingModel, {"n_estimators": [20], "max_depth": [1]}),
        (SVMModel, {"C": [1.0], "gamma": ["scale"]}),
    ])
    def test_other_families_fit(self, split, cls, grid):
        train, test = split
        kwargs = dict(param_grid=grid, **FAST)
        if cls is RandomForestModel:
            kwargs["n_estimators"] = 25
        model = cls(**kwargs)
        history = model.fit(train)
        assert history["model"] == cls.name
        assert model.predict_proba(test).shape == (test.n_samples,)

    def test_save_load(self, split, tmp_path):
        train, test = split
        model = LogisticModel(param_grid={"C": [1.0]}, **FAST)
        model.fit(train)
        path = tmp_path / "models" / "logistic.joblib"
        model.save(str(path))

        restored = LogisticModel()
        restored.load(str(path))
        assert restored.feature_names == model.feature_names
        np.testing.assert_allclose(restored.predict_proba(test), model.predict_proba(test))

    def test_load_wrong_family(self, split, tmp_path):
        train, _ = split
        model = LogisticModel(param_grid={"C": [1.0]}, **FAST)
        model.fit(train)
        path = tmp_path / "logistic.joblib"
        model.save(str(path))
        with pytest.raises(ValueError):
            SVMModel().load(str(path))


class TestFamilyDefaults:
    def test_base_class_is_abstract(self):
        with pytest.raises(TypeError):
            TunedClassifier()

    def test_forest_grid_matches_shipped_config(self):
        cfg = load_config(str(DEFAULT_CONFIG))
        shipped = cfg["modelling"]["models"]["random_forest"]["param_grid"]
        assert RandomForestModel.default_grid == shipped

    def test_svm_scores_probabilities(self):
        estimator = SVMModel().build_estimator()
        assert estimator.probability
        assert estimator.kernel == "rbf"
