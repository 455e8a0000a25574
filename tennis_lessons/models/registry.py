"""
Model registry — builds classifier families by name from config.
"""

from tennis_lessons.core.interfaces import BaseModel


_REGISTRY: dict[str, type] = {}


def register(name: str):
    """Decorator to register a classifier family."""
    def wrapper(cls):
        _REGISTRY[name] = cls
        return cls
    return wrapper


def create_model(name: str, **kwargs) -> BaseModel:
    """Create a model instance by name."""
    if name not in _REGISTRY:
        available = ", ".join(sorted(_REGISTRY.keys()))
        raise ValueError(f"Unknown model '{name}'. Available: {available}")
    return _REGISTRY[name](**kwargs)


def create_models(specs: dict[str, dict | None], **shared) -> dict[str, BaseModel]:
    """Create one model per config entry.

    specs maps a family name to its own options (e.g. {"param_grid": ...});
    shared options (folds, repeats, scoring, n_jobs, seed) apply to all.
    A None entry uses the family defaults.
    """
    models = {}
    for name, options in specs.items():
        models[name] = create_model(name, **{**shared, **(options or {})})
    return models


def list_models() -> list[str]:
    return sorted(_REGISTRY.keys())
