"""Feature importance module for engineered energy features.

This module splits engineered features into stratified train/test
partitions and ranks them with a Random Forest regressor.

Example:
    >>> from energy_importance.importance import (
    ...     ImportanceConfig, ImportanceEstimator, split_features
    ... )
    >>> config = ImportanceConfig()
    >>> result = ImportanceEstimator(config).fit(split_features(features, config))
    >>> print(result.importances.head(10))
"""

from energy_importance.importance.config import ImportanceConfig
from energy_importance.importance.model import (
    ImportanceEstimator,
    ImportanceResult,
    ModelMetrics,
)
from energy_importance.importance.splitter import split_features

__all__ = [
    "ImportanceConfig",
    "ImportanceEstimator",
    "ImportanceResult",
    "ModelMetrics",
    "split_features",
]
