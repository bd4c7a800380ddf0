"""Configuration for the feature importance model.

This module provides configuration management for the train/test split,
the Random Forest and the importance report, following the same patterns
as the feature engineering module.
"""

import os
from dataclasses import dataclass
from typing import ClassVar


@dataclass
class ImportanceConfig:
    """Configuration for splitting, fitting and reporting.

    Supports environment variable overrides:
    - IMPORTANCE_TEST_SIZE: Fraction of rows held out for testing (0.0-1.0)
    - IMPORTANCE_RANDOM_STATE: Random seed for the split and the forest
    - IMPORTANCE_STRATIFY_BINS: Maximum quantile groups for stratification
    - IMPORTANCE_OUTPUT_PATH: Path of the importance bar chart
    - IMPORTANCE_TOP_N: Rows shown in the importance table

    Attributes:
        test_size: Fraction of rows held out for testing (default: 0.2)
        random_state: Random seed for reproducibility (default: 42)
        stratify_bins: Maximum quantile groups of the target (default: 5)
        output_path: Chart file path (default: feature_importance.png)
        top_n: Rows shown in the importance table (default: 10)
        figure_size: Chart size in inches (default: 18 x 20)
    """

    # Split settings
    test_size: float = 0.2
    random_state: int = 42
    stratify_bins: int = 5

    # Report settings
    output_path: str = "feature_importance.png"
    top_n: int = 10
    figure_size: tuple[float, float] = (18.0, 20.0)

    # Fixed tree count, never tuned
    N_ESTIMATORS: ClassVar[int] = 100

    def __post_init__(self) -> None:
        """Apply environment variable overrides only when values are at defaults.

        Precedence: explicit args > env vars > defaults
        """
        if self.test_size == 0.2:
            env_test_size = os.environ.get("IMPORTANCE_TEST_SIZE")
            if env_test_size:
                try:
                    self.test_size = float(env_test_size)
                except ValueError as e:
                    raise ValueError(
                        f"IMPORTANCE_TEST_SIZE must be a float, got: {env_test_size!r}"
                    ) from e
        if self.random_state == 42:
            env_random_state = os.environ.get("IMPORTANCE_RANDOM_STATE")
            if env_random_state:
                try:
                    self.random_state = int(env_random_state)
                except ValueError as e:
                    raise ValueError(
                        "IMPORTANCE_RANDOM_STATE must be an integer, "
                        f"got: {env_random_state!r}"
                    ) from e
        if self.stratify_bins == 5:
            env_bins = os.environ.get("IMPORTANCE_STRATIFY_BINS")
            if env_bins:
                try:
                    self.stratify_bins = int(env_bins)
                except ValueError as e:
                    raise ValueError(
                        f"IMPORTANCE_STRATIFY_BINS must be an integer, got: {env_bins!r}"
                    ) from e
        if self.output_path == "feature_importance.png":
            self.output_path = os.environ.get("IMPORTANCE_OUTPUT_PATH", self.output_path)
        if self.top_n == 10:
            env_top_n = os.environ.get("IMPORTANCE_TOP_N")
            if env_top_n:
                try:
                    self.top_n = int(env_top_n)
                except ValueError as e:
                    raise ValueError(
                        f"IMPORTANCE_TOP_N must be an integer, got: {env_top_n!r}"
                    ) from e

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ValueError: If a configuration value is invalid
        """
        if not 0.0 < self.test_size < 1.0:
            raise ValueError("test_size must be between 0.0 and 1.0 (exclusive)")
        if self.stratify_bins <= 0:
            raise ValueError("stratify_bins must be positive")
        if self.top_n <= 0:
            raise ValueError("top_n must be positive")
        if not self.output_path:
            raise ValueError("output_path is required")
        if any(size <= 0 for size in self.figure_size):
            raise ValueError("figure_size dimensions must be positive")
