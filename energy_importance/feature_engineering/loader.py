"""Loading of raw energy-usage observations.

Observations come from a CSV export or a Supabase table and are returned
as a RawObservations snapshot with a parsed timestamp column.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import pandas as pd

from energy_importance.feature_engineering.config import FeatureEngineeringConfig
from energy_importance.models import RawObservations

logger = logging.getLogger(__name__)

# Optional Supabase import
try:
    from supabase import create_client

    SUPABASE_AVAILABLE = True
except ImportError:
    SUPABASE_AVAILABLE = False
    create_client = None  # type: ignore

PAGE_SIZE = 1000


def parse_observations(
    frame: pd.DataFrame,
    config: FeatureEngineeringConfig,
    timestamp_format: Optional[str] = None,
) -> RawObservations:
    """Validate columns and parse the timestamp of a raw frame.

    The source row order is kept as is.

    Args:
        frame: Raw observations as read from the source
        config: Feature engineering configuration
        timestamp_format: Format overriding config.timestamp_format

    Returns:
        RawObservations with a datetime timestamp column

    Raises:
        ValueError: If required columns are missing or a timestamp is malformed
    """
    missing = [col for col in config.get_required_columns() if col not in frame.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")

    df = frame.copy()
    ts_col = config.TIMESTAMP_COLUMN
    fmt = timestamp_format or config.timestamp_format
    try:
        df[ts_col] = pd.to_datetime(df[ts_col], format=fmt)
    except (ValueError, TypeError) as e:
        raise ValueError(
            f"Could not parse '{ts_col}' with format {fmt!r}: {e}"
        ) from e

    logger.info("Parsed %d observations with %d columns", len(df), len(df.columns))
    return RawObservations(
        frame=df,
        timestamp_column=ts_col,
        target_column=config.TARGET_COLUMN,
    )


def load_csv(
    path: Union[str, Path], config: FeatureEngineeringConfig
) -> RawObservations:
    """Load observations from a CSV file.

    Args:
        path: CSV file path
        config: Feature engineering configuration

    Returns:
        Parsed RawObservations
    """
    path = Path(path)
    logger.info("Loading observations from %s", path)
    # Timestamps are parsed by parse_observations with the configured format
    frame = pd.read_csv(path, dtype={config.TIMESTAMP_COLUMN: str})
    return parse_observations(frame, config)


def load_from_supabase(config: FeatureEngineeringConfig) -> RawObservations:
    """Load observations from a Supabase table.

    Pages through the table ordered by the timestamp column since
    PostgREST caps each response at 1000 rows.

    Args:
        config: Feature engineering configuration with Supabase settings

    Returns:
        Parsed RawObservations

    Raises:
        ImportError: If supabase is not installed
        ValueError: If Supabase settings are missing or the table is empty
    """
    if not SUPABASE_AVAILABLE:
        raise ImportError(
            "supabase is not installed; install with `pip install supabase`"
        )
    config.validate_supabase()

    client = create_client(config.supabase_url, config.supabase_key)
    logger.info(
        "Querying %s at %s", config.source_table, config.supabase_url
    )

    all_data = []
    offset = 0
    while True:
        result = (
            client.table(config.source_table)
            .select("*")
            .order(config.TIMESTAMP_COLUMN)
            .range(offset, offset + PAGE_SIZE - 1)
            .execute()
        )
        if not result.data:
            break

        all_data.extend(result.data)
        logger.debug("Fetched %d records (total: %d)", len(result.data), len(all_data))

        if len(result.data) < PAGE_SIZE:
            break
        offset += PAGE_SIZE

    if not all_data:
        raise ValueError(f"No observations found in {config.source_table}")

    # PostgREST serializes timestamp columns as ISO 8601
    return parse_observations(pd.DataFrame(all_data), config, timestamp_format="ISO8601")
