"""
Abstract base classes defining contracts between modules.

Every module implements one of these interfaces. Orchestration wires them.
"""

from abc import ABC, abstractmethod

import numpy as np
import pandas as pd

from tennis_lessons.core.schema import ModelingFrame


class BaseLoader(ABC):
    """Contract: raw files → normalized DataFrame."""

    @abstractmethod
    def load(self) -> pd.DataFrame:
        """Load and return a normalized table."""
        ...

    @abstractmethod
    def validate(self, df: pd.DataFrame) -> list[str]:
        """Return list of validation warnings (empty = clean)."""
        ...


class BaseModel(ABC):
    """Contract: ModelingFrame → probability predictions."""

    @abstractmethod
    def fit(self, train: ModelingFrame) -> dict:
        """Tune and train on data. Return training history dict."""
        ...

    @abstractmethod
    def predict_proba(self, data: ModelingFrame) -> np.ndarray:
        """Return P(player A wins) for each sample. Shape: (N,)."""
        ...

    @abstractmethod
    def predict(self, data: ModelingFrame) -> np.ndarray:
        """Return hard 0/1 predictions. Shape: (N,)."""
        ...

    @abstractmethod
    def save(self, path: str) -> None:
        ...

    @abstractmethod
    def load(self, path: str) -> None:
        ...
