"""Feature engineering pipeline for energy-usage observations.

This module derives temporal, lag, rolling, interaction, polynomial and
day/night features from raw observations and removes incomplete rows.
"""

import logging

import pandas as pd

from energy_importance.feature_engineering.config import FeatureEngineeringConfig
from energy_importance.models import EngineeredFeatures, RawObservations

logger = logging.getLogger(__name__)


class FeatureEngineeringPipeline:
    """Pipeline for engineering features from raw observations.

    This class handles:
    - Extracting calendar features (hour, day_of_week, month)
    - Adding lag features of the target
    - Calculating trailing rolling mean/std features
    - Multiplying paired temperature/humidity channels
    - Adding squared and cubed sensor channels
    - Flagging daytime rows
    - Dropping every row left with a missing value

    Row order is never changed; lag and rolling features assume the
    observations arrive in timestamp order.

    Example:
        >>> config = FeatureEngineeringConfig()
        >>> pipeline = FeatureEngineeringPipeline(config)
        >>> features = pipeline.run(load_csv("energy.csv", config))
        >>> print(f"{len(features)} rows, {len(features.feature_columns)} features")
    """

    def __init__(self, config: FeatureEngineeringConfig) -> None:
        """Initialize feature engineering pipeline.

        Args:
            config: Feature engineering configuration

        Raises:
            ValueError: If configuration is invalid
        """
        config.validate()
        self.config = config

    def extract_temporal_features(
        self, df: pd.DataFrame, timestamp_column: str
    ) -> pd.DataFrame:
        """Extract calendar features from the timestamp.

        Adds the following features:
        - hour: Hour (0-23)
        - day_of_week: ISO day of week (1=Monday, 7=Sunday)
        - month: Month (1-12)

        Args:
            df: DataFrame with a datetime timestamp column
            timestamp_column: Name of the timestamp column

        Returns:
            DataFrame with added temporal features
        """
        if df.empty:
            return df

        logger.info("Extracting temporal features")

        df = df.copy()
        timestamps = df[timestamp_column].dt
        df["hour"] = timestamps.hour
        df["day_of_week"] = timestamps.dayofweek + 1
        df["month"] = timestamps.month

        logger.info("Added 3 temporal features")
        return df

    def add_lag_features(self, df: pd.DataFrame) -> pd.DataFrame:
        """Add lag features of the target.

        Adds {target}_lag{n} for each configured lag period, holding the
        target value n rows earlier. The first n rows are missing.

        Args:
            df: DataFrame with the target column

        Returns:
            DataFrame with lag features
        """
        if df.empty:
            return df

        logger.info("Adding lag features")

        df = df.copy()
        target = self.config.TARGET_COLUMN
        for period in self.config.LAG_PERIODS:
            df[f"{target}_lag{period}"] = df[target].shift(period)

        logger.info("Added %d lag features", len(self.config.LAG_PERIODS))
        return df

    def calculate_rolling_features(self, df: pd.DataFrame) -> pd.DataFrame:
        """Calculate trailing rolling window features.

        For each metric in ROLLING_METRICS, calculates:
        - {metric}_rolling_mean_{window}: Mean over the last window rows
        - {metric}_rolling_std_{window}: Sample std over the last window rows

        The window includes the current row; the first window-1 rows are
        missing.

        Args:
            df: DataFrame with metric columns

        Returns:
            DataFrame with added rolling features
        """
        if df.empty:
            return df

        window = self.config.rolling_window
        logger.info("Calculating %d-row rolling features", window)

        df = df.copy()
        features_added = 0
        for metric in self.config.ROLLING_METRICS:
            rolling = df[metric].rolling(window=window, min_periods=window)
            df[f"{metric}_rolling_mean_{window}"] = rolling.mean()
            df[f"{metric}_rolling_std_{window}"] = rolling.std()
            features_added += 2

        logger.info("Added %d rolling features", features_added)
        return df

    def add_interaction_features(self, df: pd.DataFrame) -> pd.DataFrame:
        """Multiply each temperature channel with its humidity channel.

        Adds T{i}_RH_{i} = T{i} * RH_{i} for every sensor pair.

        Args:
            df: DataFrame with sensor columns

        Returns:
            DataFrame with interaction features
        """
        if df.empty:
            return df

        logger.info("Adding interaction features")

        df = df.copy()
        pairs = zip(self.config.TEMPERATURE_COLUMNS, self.config.HUMIDITY_COLUMNS)
        for temp_col, humidity_col in pairs:
            df[f"{temp_col}_{humidity_col}"] = df[temp_col] * df[humidity_col]

        logger.info(
            "Added %d interaction features", len(self.config.TEMPERATURE_COLUMNS)
        )
        return df

    def add_polynomial_features(self, df: pd.DataFrame) -> pd.DataFrame:
        """Add powers of every temperature and humidity channel.

        Args:
            df: DataFrame with sensor columns

        Returns:
            DataFrame with {channel}_squared and {channel}_cubed columns
        """
        if df.empty:
            return df

        logger.info("Adding polynomial features")

        df = df.copy()
        features_added = 0
        for channel in self._sensor_channels():
            for power, suffix in self.config.POLYNOMIAL_POWERS.items():
                df[f"{channel}_{suffix}"] = df[channel] ** power
                features_added += 1

        logger.info("Added %d polynomial features", features_added)
        return df

    def add_day_indicator(self, df: pd.DataFrame) -> pd.DataFrame:
        """Flag rows whose hour falls within the daytime range.

        Args:
            df: DataFrame with an hour column

        Returns:
            DataFrame with is_day (1 for 6 <= hour < 18, else 0)
        """
        if df.empty:
            return df

        df = df.copy()
        hour = df["hour"]
        df["is_day"] = (
            (hour >= self.config.DAY_START_HOUR) & (hour < self.config.DAY_END_HOUR)
        ).astype(int)
        return df

    def report_missing_values(self, df: pd.DataFrame) -> pd.Series:
        """Count and log missing values per column.

        Args:
            df: DataFrame to inspect

        Returns:
            Series of missing counts indexed by column name
        """
        counts = df.isna().sum()
        logger.info("Missing values per column before cleaning:")
        for column, count in counts.items():
            logger.info("  %-32s %d", column, count)
        return counts

    def drop_incomplete_rows(self, df: pd.DataFrame) -> pd.DataFrame:
        """Drop every row holding a missing value.

        Args:
            df: DataFrame with engineered features

        Returns:
            DataFrame without missing values, original index kept
        """
        rows_before = len(df)
        df = df.dropna()
        rows_dropped = rows_before - len(df)
        if rows_dropped > 0:
            logger.info("Dropped %d rows with missing values", rows_dropped)
        return df

    def run(self, observations: RawObservations) -> EngineeredFeatures:
        """Run the complete feature engineering pipeline.

        Steps:
        1. Extract temporal features
        2. Add lag features
        3. Calculate rolling features
        4. Add interaction features
        5. Add polynomial features
        6. Add day indicator
        7. Report missing values and drop incomplete rows

        Args:
            observations: Parsed raw observations

        Returns:
            EngineeredFeatures with no missing values
        """
        logger.info(
            "Starting feature engineering on %d observations", len(observations)
        )

        df = self.extract_temporal_features(
            observations.frame, observations.timestamp_column
        )
        df = self.add_lag_features(df)
        df = self.calculate_rolling_features(df)
        df = self.add_interaction_features(df)
        df = self.add_polynomial_features(df)
        df = self.add_day_indicator(df)

        missing_counts = self.report_missing_values(df)
        cleaned = self.drop_incomplete_rows(df)

        window_rows = min(self.config.max_undefined_rows, len(df))
        logger.info(
            "Lag/rolling windows leave %d leading rows undefined; %d rows dropped in total",
            window_rows,
            len(df) - len(cleaned),
        )

        excluded = {observations.timestamp_column, observations.target_column}
        feature_columns = tuple(col for col in cleaned.columns if col not in excluded)

        logger.info(
            "Feature engineering completed: %d rows, %d features",
            len(cleaned),
            len(feature_columns),
        )

        return EngineeredFeatures(
            frame=cleaned,
            feature_columns=feature_columns,
            target_column=observations.target_column,
            rows_dropped=len(df) - len(cleaned),
            missing_counts=missing_counts,
        )

    def get_feature_columns(self) -> list[str]:
        """Get list of the derived feature column names, in generation order.

        Returns:
            List of feature column names
        """
        features = ["hour", "day_of_week", "month"]

        target = self.config.TARGET_COLUMN
        features.extend(f"{target}_lag{period}" for period in self.config.LAG_PERIODS)

        window = self.config.rolling_window
        for metric in self.config.ROLLING_METRICS:
            features.append(f"{metric}_rolling_mean_{window}")
            features.append(f"{metric}_rolling_std_{window}")

        pairs = zip(self.config.TEMPERATURE_COLUMNS, self.config.HUMIDITY_COLUMNS)
        features.extend(f"{temp}_{humidity}" for temp, humidity in pairs)

        for channel in self._sensor_channels():
            for suffix in self.config.POLYNOMIAL_POWERS.values():
                features.append(f"{channel}_{suffix}")

        features.append("is_day")
        return features

    def _sensor_channels(self) -> list[str]:
        return self.config.TEMPERATURE_COLUMNS + self.config.HUMIDITY_COLUMNS
