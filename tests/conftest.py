"""Shared fixtures for the energy feature importance tests."""

import matplotlib
import numpy as np
import pandas as pd
import pytest

matplotlib.use("Agg")

TEMPERATURE_COLUMNS = [f"T{i}" for i in range(1, 10)]
HUMIDITY_COLUMNS = [f"RH_{i}" for i in range(1, 10)]


def build_observation_frame(
    n_rows: int,
    start: str = "2016-01-11 17:00:00",
    constant: bool = False,
    seed: int = 0,
) -> pd.DataFrame:
    """Build hourly raw observations with string timestamps."""
    timestamps = pd.date_range(start, periods=n_rows, freq="h")
    data = {"date": timestamps.strftime("%Y-%m-%d %H:%M:%S")}

    if constant:
        data["TARGET_energy"] = [60.0] * n_rows
        for col in TEMPERATURE_COLUMNS:
            data[col] = [20.5] * n_rows
        for col in HUMIDITY_COLUMNS:
            data[col] = [45.0] * n_rows
        return pd.DataFrame(data)

    rng = np.random.default_rng(seed)
    for i, col in enumerate(TEMPERATURE_COLUMNS):
        data[col] = 18.0 + i * 0.5 + rng.normal(0, 1.5, n_rows)
    for i, col in enumerate(HUMIDITY_COLUMNS):
        data[col] = 40.0 + i + rng.normal(0, 4.0, n_rows)

    hours = timestamps.hour.to_numpy()
    data["TARGET_energy"] = (
        50.0
        + 8.0 * data["T1"]
        + 30.0 * ((hours >= 6) & (hours < 18))
        + rng.normal(0, 5.0, n_rows)
    )
    return pd.DataFrame(data)


@pytest.fixture
def observation_frame():
    """Create 200 hourly observations with varying readings."""
    return build_observation_frame(200)


@pytest.fixture
def constant_frame():
    """Create 30 hourly observations with constant readings."""
    return build_observation_frame(30, constant=True)


@pytest.fixture
def frame_builder():
    """Expose the observation builder to tests that need custom sizes."""
    return build_observation_frame
