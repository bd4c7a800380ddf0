"""Random Forest importance estimator for engineered energy features.

This module fits a Random Forest regressor on the training partition and
ranks every predictor by its mean impurity decrease across the trees.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

import numpy as np
import pandas as pd
from pandas.api.types import is_numeric_dtype
from sklearn.ensemble import RandomForestRegressor
from sklearn.metrics import mean_absolute_error, mean_squared_error, r2_score

from energy_importance.importance.config import ImportanceConfig
from energy_importance.models import TrainTestSplit

logger = logging.getLogger(__name__)


@dataclass
class ModelMetrics:
    """Summary of the fitted model.

    Attributes:
        mae: Mean Absolute Error on the test partition
        mse: Mean Squared Error on the test partition
        rmse: Root Mean Squared Error on the test partition
        r2: R-squared on the test partition
        oob_mse: Mean of squared out-of-bag residuals
        oob_variance_explained: R-squared of the out-of-bag predictions
        train_samples: Rows used for fitting
        test_samples: Rows used for evaluation
    """

    mae: float
    mse: float
    rmse: float
    r2: float
    oob_mse: float
    oob_variance_explained: float
    train_samples: int
    test_samples: int

    def to_dict(self) -> dict[str, Any]:
        """Convert metrics to dictionary."""
        return {
            "mae": self.mae,
            "mse": self.mse,
            "rmse": self.rmse,
            "r2": self.r2,
            "oob_mse": self.oob_mse,
            "oob_variance_explained": self.oob_variance_explained,
            "train_samples": self.train_samples,
            "test_samples": self.test_samples,
        }


@dataclass
class ImportanceResult:
    """Fitted model summary and the ranked importance table."""

    metrics: ModelMetrics
    importances: pd.Series

    def to_dict(self) -> dict[str, Any]:
        return {
            "metrics": self.metrics.to_dict(),
            "feature_importance": {
                name: float(score) for name, score in self.importances.items()
            },
        }


def rank_importances(feature_names: list[str], scores: np.ndarray) -> pd.Series:
    """Build the importance table sorted by score descending.

    Ties keep the order of feature_names.

    Args:
        feature_names: Predictor names in model column order
        scores: Importance score per predictor

    Returns:
        Series of scores indexed by feature name
    """
    importances = pd.Series(scores, index=feature_names, name="importance", dtype=float)
    return importances.sort_values(ascending=False, kind="mergesort")


class ImportanceEstimator:
    """Random Forest feature importance estimator.

    This class handles:
    - Checking the training partition is usable
    - Fitting a fixed-size, seeded Random Forest
    - Evaluating the model on the test partition and out of bag
    - Ranking features by impurity-based importance

    Example:
        >>> estimator = ImportanceEstimator(ImportanceConfig())
        >>> result = estimator.fit(split)
        >>> print(result.importances.head(10))
    """

    def __init__(self, config: ImportanceConfig) -> None:
        """Initialize the importance estimator.

        Args:
            config: Importance configuration

        Raises:
            ValueError: If configuration is invalid
        """
        config.validate()
        self.config = config
        self._model: Optional[RandomForestRegressor] = None
        self._feature_names: list[str] = []

    @property
    def model(self) -> Optional[RandomForestRegressor]:
        return self._model

    def _create_model(self) -> RandomForestRegressor:
        """Create a new Random Forest with the fixed tree count.

        Returns:
            Configured RandomForestRegressor
        """
        return RandomForestRegressor(
            n_estimators=self.config.N_ESTIMATORS,
            random_state=self.config.random_state,
            oob_score=True,
            verbose=0,
        )

    def _check_training_data(self, split: TrainTestSplit) -> None:
        if split.train_size == 0:
            raise ValueError("Training partition is empty; cannot fit the model")

        non_numeric = [
            col for col in split.X_train.columns if not is_numeric_dtype(split.X_train[col])
        ]
        if non_numeric:
            raise ValueError(f"Non-numeric predictor columns: {non_numeric}")

    def _evaluate_model(
        self,
        model: RandomForestRegressor,
        split: TrainTestSplit,
    ) -> ModelMetrics:
        """Evaluate the fitted model on the test partition and out of bag.

        Args:
            model: Fitted model
            split: Partitions the model was fitted on

        Returns:
            ModelMetrics with evaluation results
        """
        y_pred = model.predict(split.X_test)

        mse = mean_squared_error(split.y_test, y_pred)
        oob_mse = mean_squared_error(split.y_train, model.oob_prediction_)

        return ModelMetrics(
            mae=float(mean_absolute_error(split.y_test, y_pred)),
            mse=float(mse),
            rmse=float(np.sqrt(mse)),
            r2=float(r2_score(split.y_test, y_pred)),
            oob_mse=float(oob_mse),
            oob_variance_explained=float(model.oob_score_),
            train_samples=split.train_size,
            test_samples=split.test_size,
        )

    def fit(self, split: TrainTestSplit) -> ImportanceResult:
        """Fit the forest and rank feature importances.

        Args:
            split: Train/test partitions of the engineered features

        Returns:
            ImportanceResult with the model summary and importance table

        Raises:
            ValueError: If the training partition is empty or non-numeric
        """
        self._check_training_data(split)

        self._feature_names = list(split.X_train.columns)
        logger.info(
            "Fitting Random Forest (%d trees) on %d rows, %d features",
            self.config.N_ESTIMATORS,
            split.train_size,
            len(self._feature_names),
        )

        self._model = self._create_model()
        self._model.fit(split.X_train, split.y_train)

        metrics = self._evaluate_model(self._model, split)
        logger.info(
            "Model fitted - MAE: %.4f, RMSE: %.4f, R2: %.4f, OOB variance explained: %.2f%%",
            metrics.mae,
            metrics.rmse,
            metrics.r2,
            metrics.oob_variance_explained * 100,
        )

        importances = rank_importances(
            self._feature_names, self._model.feature_importances_
        )
        return ImportanceResult(metrics=metrics, importances=importances)
