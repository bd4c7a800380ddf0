"""Stage records for the feature importance pipeline.

Each pipeline step takes one of these snapshots and returns the next one,
so the boundary between raw readings, engineered features and the
train/test partitions is explicit.
"""

from dataclasses import dataclass
from typing import Any

import pandas as pd


@dataclass(frozen=True)
class RawObservations:
    """Parsed input observations in source order."""

    frame: pd.DataFrame
    timestamp_column: str
    target_column: str

    def __len__(self) -> int:
        return len(self.frame)


@dataclass(frozen=True)
class EngineeredFeatures:
    """Feature vectors with every incomplete row removed.

    Attributes:
        frame: Cleaned frame holding the timestamp, target and predictors
        feature_columns: Predictor column names, in frame order
        target_column: Name of the response column
        rows_dropped: Rows removed because they held a missing value
        missing_counts: Per-column missing counts measured before the drop
    """

    frame: pd.DataFrame
    feature_columns: tuple[str, ...]
    target_column: str
    rows_dropped: int
    missing_counts: pd.Series

    def __len__(self) -> int:
        return len(self.frame)

    @property
    def X(self) -> pd.DataFrame:
        return self.frame.loc[:, list(self.feature_columns)]

    @property
    def y(self) -> pd.Series:
        return self.frame[self.target_column]


@dataclass(frozen=True)
class TrainTestSplit:
    """Disjoint train and test partitions of the engineered features."""

    X_train: pd.DataFrame
    X_test: pd.DataFrame
    y_train: pd.Series
    y_test: pd.Series
    stratified: bool = True

    @property
    def train_size(self) -> int:
        return len(self.X_train)

    @property
    def test_size(self) -> int:
        return len(self.X_test)

    def to_dict(self) -> dict[str, Any]:
        return {
            "train_samples": self.train_size,
            "test_samples": self.test_size,
            "stratified": self.stratified,
        }
