"""Configuration for the feature engineering pipeline.

This module provides configuration management for loading energy-usage
observations and deriving features from them, with environment variable
overrides.
"""

import os
from dataclasses import dataclass
from typing import ClassVar


@dataclass
class FeatureEngineeringConfig:
    """Configuration for loading observations and building features.

    Supports environment variable overrides:
    - FE_INPUT_PATH: CSV file with the raw observations
    - SUPABASE_URL: Supabase project URL (for --source supabase)
    - SUPABASE_KEY: Supabase API key
    - FE_SOURCE_TABLE: Supabase table holding the observations
    - FE_TIMESTAMP_FORMAT: strptime format of the timestamp column
    - FE_ROLLING_WINDOW: Rows in the trailing rolling window

    Attributes:
        input_path: CSV file with the raw observations
        supabase_url: Supabase project URL
        supabase_key: Supabase API key
        source_table: Supabase table name (default: energy_readings)
        timestamp_format: Format of the timestamp strings
        rolling_window: Trailing window size in rows (default: 3)
    """

    # Data source settings
    input_path: str = ""
    supabase_url: str = ""
    supabase_key: str = ""
    source_table: str = "energy_readings"

    # Processing settings
    timestamp_format: str = "%Y-%m-%d %H:%M:%S"
    rolling_window: int = 3

    TIMESTAMP_COLUMN: ClassVar[str] = "date"
    TARGET_COLUMN: ClassVar[str] = "TARGET_energy"

    # Paired sensor channels; T{i} and RH_{i} share a room
    TEMPERATURE_COLUMNS: ClassVar[list[str]] = [f"T{i}" for i in range(1, 10)]
    HUMIDITY_COLUMNS: ClassVar[list[str]] = [f"RH_{i}" for i in range(1, 10)]

    # Rows back in source order
    LAG_PERIODS: ClassVar[list[int]] = [1, 24]

    ROLLING_METRICS: ClassVar[list[str]] = ["TARGET_energy", "T1"]

    POLYNOMIAL_POWERS: ClassVar[dict[int, str]] = {2: "squared", 3: "cubed"}

    # is_day covers [DAY_START_HOUR, DAY_END_HOUR)
    DAY_START_HOUR: ClassVar[int] = 6
    DAY_END_HOUR: ClassVar[int] = 18

    def __post_init__(self) -> None:
        """Apply environment variable overrides only when values are at defaults.

        Precedence: explicit args > env vars > defaults
        """
        if self.input_path == "":
            self.input_path = os.environ.get("FE_INPUT_PATH", self.input_path)
        if self.supabase_url == "":
            self.supabase_url = os.environ.get("SUPABASE_URL", self.supabase_url)
        if self.supabase_key == "":
            self.supabase_key = os.environ.get("SUPABASE_KEY", self.supabase_key)
        if self.source_table == "energy_readings":
            self.source_table = os.environ.get("FE_SOURCE_TABLE", self.source_table)
        if self.timestamp_format == "%Y-%m-%d %H:%M:%S":
            self.timestamp_format = os.environ.get(
                "FE_TIMESTAMP_FORMAT", self.timestamp_format
            )
        if self.rolling_window == 3:
            env_window = os.environ.get("FE_ROLLING_WINDOW")
            if env_window:
                try:
                    self.rolling_window = int(env_window)
                except ValueError as e:
                    raise ValueError(
                        f"FE_ROLLING_WINDOW must be an integer, got: {env_window!r}"
                    ) from e

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ValueError: If a configuration value is invalid
        """
        if self.rolling_window <= 0:
            raise ValueError("rolling_window must be positive")
        if not self.timestamp_format:
            raise ValueError("timestamp_format is required")

    def validate_supabase(self) -> None:
        """Validate the settings needed to read from Supabase.

        Raises:
            ValueError: If the URL, key or table is missing
        """
        if not self.supabase_url:
            raise ValueError("Supabase URL is required to load observations")
        if not self.supabase_key:
            raise ValueError("Supabase key is required to load observations")
        if not self.source_table:
            raise ValueError("source_table is required to load observations")

    def get_required_columns(self) -> list[str]:
        """Get the columns every input dataset must provide.

        Returns:
            List of required column names
        """
        columns = [self.TIMESTAMP_COLUMN, self.TARGET_COLUMN]
        columns.extend(self.TEMPERATURE_COLUMNS)
        columns.extend(self.HUMIDITY_COLUMNS)
        return columns

    @property
    def max_undefined_rows(self) -> int:
        """Leading rows left undefined by the lag and rolling features."""
        return max(max(self.LAG_PERIODS), self.rolling_window - 1)
