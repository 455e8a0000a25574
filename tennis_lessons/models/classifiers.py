"""
Classifier families for the modelling lesson.

Every family is the same recipe with a different estimator:
  1. StandardScaler (center and scale numeric features)
  2. the estimator
  3. GridSearchCV over the family's hyperparameter grid, resampled with
     repeated stratified k-fold, optimizing log-loss
  4. refit of the best candidate on the full training set

The families register under short names so the pipeline can build them
from config.
"""

import logging
from abc import abstractmethod
from pathlib import Path

import numpy as np
import pandas as pd
from sklearn.ensemble import GradientBoostingClassifier, RandomForestClassifier
from sklearn.linear_model import LogisticRegression
from sklearn.model_selection import GridSearchCV, RepeatedStratifiedKFold
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import StandardScaler
from sklearn.svm import SVC

from tennis_lessons.core.interfaces import BaseModel
from tennis_lessons.core.schema import ModelingFrame
from tennis_lessons.models.registry import register

log = logging.getLogger(__name__)

STEP = "clf"


class TunedClassifier(BaseModel):
    """Scaler + estimator tuned by grid search under repeated CV."""

    name = "tuned"
    default_grid: dict = {}

    def __init__(
        self,
        param_grid: dict | None = None,
        folds: int = 10,
        repeats: int = 3,
        scoring: str = "neg_log_loss",
        n_jobs: int = 1,
        seed: int = 42,
    ):
        if folds < 2:
            raise ValueError(f"folds must be >= 2, got {folds}")
        if repeats < 1:
            raise ValueError(f"repeats must be >= 1, got {repeats}")
        self.param_grid = dict(self.default_grid if param_grid is None else param_grid)
        self.folds = folds
        self.repeats = repeats
        self.scoring = scoring
        self.n_jobs = n_jobs
        self.seed = seed
        self.search: GridSearchCV | None = None
        self.feature_names: list[str] = []

    @abstractmethod
    def build_estimator(self):
        """The unfitted sklearn estimator placed after the scaler."""
        ...

    @property
    def best_estimator(self) -> Pipeline:
        self._check_fitted()
        return self.search.best_estimator_

    @property
    def estimator(self):
        """The fitted estimator step of the best pipeline."""
        return self.best_estimator.named_steps[STEP]

    def fit(self, train: ModelingFrame) -> dict:
        pipeline = Pipeline([
            ("scale", StandardScaler()),
            (STEP, self.build_estimator()),
        ])
        grid = {f"{STEP}__{k}": list(v) for k, v in self.param_grid.items()}
        cv = RepeatedStratifiedKFold(
            n_splits=self.folds, n_repeats=self.repeats, random_state=self.seed,
        )
        self.search = GridSearchCV(
            pipeline, grid, scoring=self.scoring, cv=cv,
            n_jobs=self.n_jobs, refit=True,
        )
        self.feature_names = train.feature_names
        self.search.fit(train.X, train.y)

        history = self._history()
        log.info(
            f"{self.name}: best {self.scoring}={history['best_score']:.4f} "
            f"with {history['best_params']} "
            f"({len(history['cv_results'])} candidates, "
            f"{self.folds}x{self.repeats} resamples, {train.n_samples} samples)"
        )
        return history

    def predict_proba(self, data: ModelingFrame) -> np.ndarray:
        """Predict P(player A wins) for each match."""
        self._check_fitted()
        return self.search.predict_proba(data.X[self.feature_names])[:, 1]

    def predict(self, data: ModelingFrame, threshold: float = 0.5) -> np.ndarray:
        return (self.predict_proba(data) >= threshold).astype(int)

    def save(self, path: str):
        import joblib
        self._check_fitted()
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        joblib.dump({
            "name": self.name,
            "search": self.search,
            "feature_names": self.feature_names,
        }, path)
        log.info(f"{self.name} saved to {path}")

    def load(self, path: str):
        import joblib
        data = joblib.load(path)
        if data["name"] != self.name:
            raise ValueError(f"{path} holds a '{data['name']}' model, not '{self.name}'")
        self.search = data["search"]
        self.feature_names = data["feature_names"]

    def _check_fitted(self):
        if self.search is None:
            raise RuntimeError(f"{self.name} model is not fitted")

    def _history(self) -> dict:
        res = self.search.cv_results_
        best = self.search.best_index_
        n_splits = self.folds * self.repeats
        resamples = np.array([res[f"split{i}_test_score"][best] for i in range(n_splits)])

        table = pd.DataFrame(res["params"])
        table.columns = [c.replace(f"{STEP}__", "") for c in table.columns]
        table["mean_score"] = res["mean_test_score"]
        table["std_score"] = res["std_test_score"]
        table["rank"] = res["rank_test_score"]

        return {
            "model": self.name,
            "scoring": self.scoring,
            "best_params": {
                k.replace(f"{STEP}__", ""): v for k, v in self.search.best_params_.items()
            },
            "best_score": float(self.search.best_score_),
            "cv_results": table,
            "resample_scores": resamples,
        }


@register("logistic")
class LogisticModel(TunedClassifier):
    """Logistic regression; C is the inverse regularization strength."""

    name = "logistic"
    default_grid = {"C": [0.01, 0.1, 1.0, 10.0]}

    def build_estimator(self):
        return LogisticRegression(max_iter=1000, solver="lbfgs")


@register("random_forest")
class RandomForestModel(TunedClassifier):
    name = "random_forest"
    default_grid = {"max_features": [0.33, 0.66, 1.0], "min_samples_leaf": [1, 5, 20]}

    def __init__(self, n_estimators: int = 500, **kwargs):
        super().__init__(**kwargs)
        self.n_estimators = n_estimators

    def build_estimator(self):
        return RandomForestClassifier(
            n_estimators=self.n_estimators, random_state=self.seed,
        )


@register("gbm")
class GradientBoostingModel(TunedClassifier):
    """Boosted trees; the grid mirrors number of trees, interaction depth
    and shrinkage."""

    name = "gbm"
    default_grid = {
        "n_estimators": [50, 100, 150],
        "max_depth": [1, 2, 3],
        "learning_rate": [0.1],
        "min_samples_leaf": [10],
    }

    def build_estimator(self):
        return GradientBoostingClassifier(random_state=self.seed)


@register("svm")
class SVMModel(TunedClassifier):
    name = "svm"
    default_grid = {"C": [0.25, 0.5, 1.0], "gamma": ["scale", 0.1]}

    def build_estimator(self):
        # probability=True fits Platt scaling so log-loss can be scored
        return SVC(kernel="rbf", probability=True, random_state=self.seed)
