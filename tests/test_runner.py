"""Tests for the feature importance CLI runner."""

import json
import os
import subprocess
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import matplotlib
import pandas as pd
import pytest

from run_feature_importance import FeatureImportanceRunner, main

REPO_ROOT = Path(__file__).resolve().parent.parent

# Captured before clean_env empties os.environ for each test
BASE_ENV = {
    key: value
    for key, value in os.environ.items()
    if not key.startswith(("FE_", "IMPORTANCE_", "SUPABASE_"))
}


@pytest.fixture
def csv_path(observation_frame, tmp_path):
    """Write sample observations to a CSV file."""
    path = tmp_path / "energy.csv"
    observation_frame.to_csv(path, index=False)
    return path


@pytest.fixture(autouse=True)
def clean_env():
    """Keep environment overrides out of the runner configuration."""
    with patch.dict(os.environ, {}, clear=True):
        yield


class TestFeatureImportanceRunner:
    """Tests for FeatureImportanceRunner."""

    def test_run_end_to_end(self, csv_path, tmp_path):
        """Test a full run writes the chart and reports every stage."""
        output = tmp_path / "out" / "feature_importance.png"
        runner = FeatureImportanceRunner(input_path=str(csv_path), output_path=str(output))

        result = runner.run()

        assert result["status"] == "success"
        assert result["rows_loaded"] == 200
        assert result["rows_used"] == 176
        assert result["rows_dropped"] == 24
        assert result["split"]["train_samples"] + result["split"]["test_samples"] == 176
        assert len(result["feature_importance"]) == result["features_count"]
        assert len(result["top_features"]) == 10
        assert result["chart_path"] == str(output)
        assert output.exists()

    def test_run_is_reproducible(self, csv_path, tmp_path):
        """Test two runs on the same input give identical importance tables."""
        first = FeatureImportanceRunner(
            input_path=str(csv_path), output_path=str(tmp_path / "a.png")
        ).run()
        second = FeatureImportanceRunner(
            input_path=str(csv_path), output_path=str(tmp_path / "b.png")
        ).run()

        assert first["feature_importance"] == second["feature_importance"]
        assert list(first["feature_importance"]) == list(second["feature_importance"])

    def test_run_requires_input_path(self):
        """Test a CSV run without a path raises ValueError."""
        runner = FeatureImportanceRunner()

        with pytest.raises(ValueError, match="input CSV path is required"):
            runner.run()

    def test_unknown_source(self):
        """Test an unknown source is rejected."""
        with pytest.raises(ValueError, match="Unknown source"):
            FeatureImportanceRunner(source="parquet")

    @patch("run_feature_importance.load_from_supabase")
    def test_supabase_source(self, mock_load, observation_frame, tmp_path):
        """Test the Supabase source is used when selected."""
        from energy_importance.feature_engineering import (
            FeatureEngineeringConfig,
            parse_observations,
        )

        mock_load.return_value = parse_observations(
            observation_frame, FeatureEngineeringConfig()
        )
        runner = FeatureImportanceRunner(
            source="supabase",
            supabase_url="https://test.supabase.co",
            supabase_key="test-key",
            output_path=str(tmp_path / "fi.png"),
        )

        result = runner.run()

        mock_load.assert_called_once_with(runner.fe_config)
        assert result["rows_loaded"] == 200

    def test_get_status(self, tmp_path):
        """Test status reports the resolved configuration."""
        runner = FeatureImportanceRunner(
            input_path="energy.csv",
            output_path=str(tmp_path / "fi.png"),
            random_state=7,
        )

        status = runner.get_status()

        assert status["source"] == "csv"
        assert status["feature_engineering"]["input_path"] == "energy.csv"
        assert status["feature_engineering"]["lag_periods"] == [1, 24]
        assert status["feature_engineering"]["derived_features"] == 55
        assert status["importance"]["n_estimators"] == 100
        assert status["importance"]["random_state"] == 7
        assert status["chart"]["exists"] is False


class TestMain:
    """Tests for the CLI entry point."""

    def test_main_run(self, csv_path, tmp_path):
        """Test --run exits 0 and writes the chart."""
        output = tmp_path / "fi.png"

        exit_code = main(["--run", "--input", str(csv_path), "--output", str(output)])

        assert exit_code == 0
        assert output.exists()

    def test_main_status(self):
        """Test --status exits 0."""
        assert main(["--status"]) == 0

    def test_main_missing_columns(self, observation_frame, tmp_path):
        """Test a dataset without required columns exits 1."""
        path = tmp_path / "bad.csv"
        observation_frame.drop(columns=["RH_9"]).to_csv(path, index=False)

        exit_code = main(["--run", "--input", str(path), "--output", str(tmp_path / "x.png")])

        assert exit_code == 1
        assert not (tmp_path / "x.png").exists()

    def test_main_too_few_rows(self, frame_builder, tmp_path):
        """Test a dataset fully consumed by the lag window exits 1."""
        path = tmp_path / "short.csv"
        frame_builder(24).to_csv(path, index=False)

        assert main(["--run", "--input", str(path)]) == 1

    def test_main_missing_dependency(self):
        """Test a missing optional dependency exits 1."""
        with patch(
            "run_feature_importance.load_from_supabase",
            MagicMock(side_effect=ImportError("supabase is not installed")),
        ):
            exit_code = main(["--run", "--source", "supabase"])

        assert exit_code == 1

    def test_main_requires_mode(self):
        """Test a mode flag is required."""
        with pytest.raises(SystemExit):
            main([])

    def test_main_json_output(self, csv_path, tmp_path, capsys):
        """Test --json prints the run result."""
        output = tmp_path / "fi.png"

        exit_code = main(
            ["--run", "--input", str(csv_path), "--output", str(output), "--json"]
        )

        assert exit_code == 0
        assert json.loads(capsys.readouterr().out)["status"] == "success"

    def test_cli_json_stdout_is_parseable(self, csv_path, tmp_path):
        """Test the script prints only JSON on stdout and logs on stderr."""
        output = tmp_path / "fi.png"

        proc = subprocess.run(
            [
                sys.executable,
                "run_feature_importance.py",
                "--run",
                "--input",
                str(csv_path),
                "--output",
                str(output),
                "--json",
            ],
            capture_output=True,
            text=True,
            cwd=REPO_ROOT,
            env=BASE_ENV,
            timeout=300,
        )

        assert proc.returncode == 0, proc.stderr
        result = json.loads(proc.stdout)
        assert result["status"] == "success"
        assert result["rows_used"] == 176
        assert "Starting feature importance analysis" in proc.stderr
        assert output.exists()

    def test_runner_selects_headless_backend(self):
        """Test importing the runner leaves matplotlib on the Agg backend."""
        assert matplotlib.get_backend().lower() == "agg"


class TestReportingImport:
    """Tests for importing the reporting package."""

    def test_reporting_does_not_select_backend(self):
        """Test the library leaves backend selection to the application."""
        source = (REPO_ROOT / "energy_importance" / "reporting" / "report.py").read_text()

        assert "matplotlib.use(" not in source
