"""Tests for the importance reporting module."""

import matplotlib.image as mpimg
import pandas as pd
import pytest

from energy_importance.reporting import (
    format_importance_table,
    render_importance_chart,
    sort_importances,
)


@pytest.fixture
def importances():
    """Create an unsorted importance table."""
    return pd.Series(
        {
            "T1": 0.05,
            "TARGET_energy_lag1": 0.40,
            "hour": 0.15,
            "is_day": 0.15,
            "RH_3_squared": 0.25,
        },
        name="importance",
    )


class TestSortImportances:
    """Tests for sort_importances."""

    def test_sorted_descending(self, importances):
        """Test the highest score comes first."""
        result = sort_importances(importances)

        assert list(result.index) == [
            "TARGET_energy_lag1",
            "RH_3_squared",
            "hour",
            "is_day",
            "T1",
        ]

    def test_input_not_modified(self, importances):
        """Test the input order is left alone."""
        sort_importances(importances)

        assert importances.index[0] == "T1"


class TestFormatImportanceTable:
    """Tests for format_importance_table."""

    def test_top_n_rows(self, importances):
        """Test only the top entries are listed, ranked from 1."""
        table = format_importance_table(importances, top_n=3)
        lines = table.splitlines()

        # Header lines plus three ranked rows
        assert len(lines) == 5
        assert "TARGET_energy_lag1" in lines[2]
        assert "0.400000" in lines[2]
        assert lines[2].lstrip().startswith("1")
        assert "RH_3_squared" in lines[3]
        assert "T1" not in table

    def test_top_n_larger_than_table(self, importances):
        """Test a large top_n lists every entry."""
        table = format_importance_table(importances, top_n=10)

        for name in importances.index:
            assert name in table


class TestRenderImportanceChart:
    """Tests for render_importance_chart."""

    def test_writes_image(self, importances, tmp_path):
        """Test the chart is written to the requested path."""
        output = tmp_path / "charts" / "feature_importance.png"

        result = render_importance_chart(importances, output)

        assert result == output
        assert output.exists()
        assert output.stat().st_size > 0

    def test_figure_size(self, importances, tmp_path):
        """Test the image has the configured size at 100 dpi."""
        output = tmp_path / "feature_importance.png"

        render_importance_chart(importances, output, figsize=(18, 20))

        height, width = mpimg.imread(output).shape[:2]
        assert (width, height) == (1800, 2000)

    def test_custom_figure_size(self, importances, tmp_path):
        """Test a smaller figure size is honoured."""
        output = tmp_path / "small.png"

        render_importance_chart(importances, output, figsize=(4, 3))

        height, width = mpimg.imread(output).shape[:2]
        assert (width, height) == (400, 300)
