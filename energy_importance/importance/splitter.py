"""Stratified train/test split of engineered features.

The target is continuous, so it is stratified through quantile groups.
"""

import logging
import math
from typing import Optional

import pandas as pd
from sklearn.model_selection import train_test_split

from energy_importance.importance.config import ImportanceConfig
from energy_importance.models import EngineeredFeatures, TrainTestSplit

logger = logging.getLogger(__name__)


def stratification_groups(
    target: pd.Series, test_size: float, max_bins: int
) -> Optional[pd.Series]:
    """Bin a continuous target into quantile groups usable for stratification.

    Starts from max_bins groups and reduces the count until every group has
    at least two members and each partition can hold one row per group.

    Args:
        target: Target values
        test_size: Fraction of rows held out for testing
        max_bins: Maximum number of quantile groups

    Returns:
        Group label per row, or None when no grouping of 2+ groups works
    """
    n_samples = len(target)
    n_test = math.ceil(test_size * n_samples)
    n_train = n_samples - n_test

    if target.nunique() < 2:
        return None

    for n_bins in range(min(max_bins, n_test, n_train), 1, -1):
        try:
            groups = pd.qcut(target, q=n_bins, labels=False, duplicates="drop")
        except ValueError:
            continue

        counts = groups.value_counts()
        if len(counts) < 2:
            continue
        if counts.min() >= 2 and len(counts) <= min(n_test, n_train):
            return groups

    return None


def split_features(
    features: EngineeredFeatures, config: ImportanceConfig
) -> TrainTestSplit:
    """Split engineered features into train and test partitions.

    Args:
        features: Cleaned feature vectors
        config: Importance configuration

    Returns:
        TrainTestSplit with disjoint partitions covering every row

    Raises:
        ValueError: If there are too few rows for two non-empty partitions
    """
    if len(features) < 2:
        raise ValueError(
            f"Insufficient data for a train/test split: {len(features)} rows "
            "remain after removing missing values (need at least 2)"
        )

    X = features.X
    y = features.y

    groups = stratification_groups(y, config.test_size, config.stratify_bins)
    if groups is None:
        logger.warning(
            "Target cannot be stratified into quantile groups; using a plain random split"
        )
    else:
        logger.info("Stratifying on %d target quantile groups", groups.nunique())

    X_train, X_test, y_train, y_test = train_test_split(
        X,
        y,
        test_size=config.test_size,
        random_state=config.random_state,
        shuffle=True,
        stratify=groups,
    )

    logger.info(
        "Split data: %d train, %d test (%.1f%%)",
        len(X_train),
        len(X_test),
        config.test_size * 100,
    )

    return TrainTestSplit(
        X_train=X_train,
        X_test=X_test,
        y_train=y_train,
        y_test=y_test,
        stratified=groups is not None,
    )
