# Import all models so they register with the registry
from tennis_lessons.models.classifiers import (  # noqa: F401
    GradientBoostingModel,
    LogisticModel,
    RandomForestModel,
    SVMModel,
)
