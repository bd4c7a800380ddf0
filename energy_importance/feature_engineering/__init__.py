"""Feature engineering module for energy-usage observations.

This module provides functionality to:
1. Load raw observations from CSV or Supabase
2. Engineer calendar features (hour, day_of_week, month)
3. Add lag and rolling window features of the target
4. Add sensor interaction and polynomial features
5. Drop rows left incomplete by the lag/rolling windows

Example:
    >>> from energy_importance.feature_engineering import (
    ...     FeatureEngineeringConfig, FeatureEngineeringPipeline, load_csv
    ... )
    >>> config = FeatureEngineeringConfig()
    >>> features = FeatureEngineeringPipeline(config).run(load_csv("energy.csv", config))
    >>> print(f"Kept {len(features)} rows")
"""

from energy_importance.feature_engineering.config import FeatureEngineeringConfig
from energy_importance.feature_engineering.loader import (
    load_csv,
    load_from_supabase,
    parse_observations,
)
from energy_importance.feature_engineering.pipeline import FeatureEngineeringPipeline

__all__ = [
    "FeatureEngineeringConfig",
    "FeatureEngineeringPipeline",
    "load_csv",
    "load_from_supabase",
    "parse_observations",
]
