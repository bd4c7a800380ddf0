#!/usr/bin/env python3
"""CLI runner for the energy feature importance analysis.

This script runs the full analysis once:
1. Load observations from a CSV file or Supabase
2. Engineer features (temporal, lag, rolling, interaction, polynomial)
3. Split rows into stratified train/test partitions
4. Fit a Random Forest and rank feature importances
5. Save the importance bar chart and log the top features

Usage:
    # Analyse a CSV export
    python run_feature_importance.py --run --input energy.csv

    # Read observations from Supabase
    python run_feature_importance.py --run --source supabase --table energy_readings

    # Write the chart elsewhere and print JSON results
    python run_feature_importance.py --run --input energy.csv --output out/importance.png --json

    # Show resolved configuration
    python run_feature_importance.py --status

Environment variables:
    FE_INPUT_PATH: CSV file with the raw observations
    SUPABASE_URL: Supabase project URL
    SUPABASE_KEY: Supabase API key
    FE_SOURCE_TABLE: Supabase table with the observations
    FE_ROLLING_WINDOW: Rolling window in rows (default: 3)
    IMPORTANCE_TEST_SIZE: Fraction of data for testing (0.0-1.0)
    IMPORTANCE_RANDOM_STATE: Random seed (default: 42)
    IMPORTANCE_OUTPUT_PATH: Chart path (default: feature_importance.png)
"""

import argparse
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import matplotlib
from dotenv import load_dotenv

load_dotenv()

# Batch runs render charts without a display
matplotlib.use("Agg")

from energy_importance.feature_engineering import (  # noqa: E402
    FeatureEngineeringConfig,
    FeatureEngineeringPipeline,
    load_csv,
    load_from_supabase,
)
from energy_importance.importance import (  # noqa: E402
    ImportanceConfig,
    ImportanceEstimator,
    split_features,
)
from energy_importance.reporting import (  # noqa: E402
    format_importance_table,
    render_importance_chart,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


class FeatureImportanceRunner:
    """Runner for the feature importance analysis.

    Wires the loader, feature pipeline, splitter, estimator and reporter
    together and logs a summary of each run.
    """

    def __init__(
        self,
        source: str = "csv",
        input_path: Optional[str] = None,
        supabase_url: Optional[str] = None,
        supabase_key: Optional[str] = None,
        source_table: Optional[str] = None,
        rolling_window: int = 3,
        output_path: str = "feature_importance.png",
        test_size: float = 0.2,
        random_state: int = 42,
        top_n: int = 10,
    ) -> None:
        """Initialize the feature importance runner.

        Args:
            source: Where observations come from ('csv' or 'supabase')
            input_path: CSV file path (or from env)
            supabase_url: Supabase project URL (or from env)
            supabase_key: Supabase API key (or from env)
            source_table: Supabase table name (or from env)
            rolling_window: Rows in the trailing rolling window
            output_path: Chart file path
            test_size: Fraction of data for testing
            random_state: Seed for the split and the forest
            top_n: Number of features in the summary table
        """
        if source not in ("csv", "supabase"):
            raise ValueError(f"Unknown source: {source!r}")

        self.source = source
        self.fe_config = FeatureEngineeringConfig(
            input_path=input_path or "",
            supabase_url=supabase_url or "",
            supabase_key=supabase_key or "",
            source_table=source_table or "energy_readings",
            rolling_window=rolling_window,
        )
        self.importance_config = ImportanceConfig(
            output_path=output_path,
            test_size=test_size,
            random_state=random_state,
            top_n=top_n,
        )
        self.pipeline = FeatureEngineeringPipeline(self.fe_config)
        self.estimator = ImportanceEstimator(self.importance_config)

    def load(self):
        """Load raw observations from the configured source."""
        if self.source == "supabase":
            return load_from_supabase(self.fe_config)

        if not self.fe_config.input_path:
            raise ValueError("An input CSV path is required (--input or FE_INPUT_PATH)")
        return load_csv(self.fe_config.input_path, self.fe_config)

    def run(self) -> dict[str, Any]:
        """Run the analysis end to end.

        Returns:
            Dictionary with run results
        """
        logger.info("Starting feature importance analysis")
        start = datetime.now(timezone.utc)

        observations = self.load()
        features = self.pipeline.run(observations)
        split = split_features(features, self.importance_config)
        result = self.estimator.fit(split)
        chart_path = render_importance_chart(
            result.importances,
            self.importance_config.output_path,
            figsize=self.importance_config.figure_size,
        )

        elapsed = (datetime.now(timezone.utc) - start).total_seconds()
        self._log_summary(result.metrics.to_dict(), result.importances)

        top = result.importances.head(self.importance_config.top_n)
        return {
            "status": "success",
            "rows_loaded": len(observations),
            "rows_used": len(features),
            "rows_dropped": features.rows_dropped,
            "features_count": len(features.feature_columns),
            "split": split.to_dict(),
            "metrics": result.metrics.to_dict(),
            "top_features": {name: float(score) for name, score in top.items()},
            "feature_importance": result.to_dict()["feature_importance"],
            "chart_path": str(chart_path),
            "elapsed_seconds": elapsed,
        }

    def _log_summary(self, metrics: dict[str, Any], importances) -> None:
        logger.info("=" * 60)
        logger.info("FEATURE IMPORTANCE SUMMARY")
        logger.info("=" * 60)
        logger.info("Random Forest (%d trees):", ImportanceConfig.N_ESTIMATORS)
        logger.info("  - Train/test rows: %d / %d", metrics["train_samples"], metrics["test_samples"])
        logger.info("  - Mean of squared residuals (OOB): %.4f", metrics["oob_mse"])
        logger.info("  - Variance explained (OOB): %.2f%%", metrics["oob_variance_explained"] * 100)
        logger.info("  - Test MAE: %.4f", metrics["mae"])
        logger.info("  - Test RMSE: %.4f", metrics["rmse"])
        logger.info("  - Test R2: %.4f", metrics["r2"])
        logger.info("")
        logger.info("Top %d features:", self.importance_config.top_n)
        table = format_importance_table(importances, self.importance_config.top_n)
        for line in table.splitlines():
            logger.info("  %s", line)
        logger.info("")
        logger.info("Chart saved to: %s", self.importance_config.output_path)
        logger.info("=" * 60)

    def get_status(self) -> dict[str, Any]:
        """Get the resolved configuration.

        Returns:
            Dictionary with status information
        """
        output_path = Path(self.importance_config.output_path)
        return {
            "source": self.source,
            "feature_engineering": {
                "input_path": self.fe_config.input_path,
                "source_table": self.fe_config.source_table,
                "supabase_configured": bool(
                    self.fe_config.supabase_url and self.fe_config.supabase_key
                ),
                "rolling_window": self.fe_config.rolling_window,
                "lag_periods": list(self.fe_config.LAG_PERIODS),
                "derived_features": len(self.pipeline.get_feature_columns()),
            },
            "importance": {
                "n_estimators": ImportanceConfig.N_ESTIMATORS,
                "test_size": self.importance_config.test_size,
                "random_state": self.importance_config.random_state,
                "stratify_bins": self.importance_config.stratify_bins,
                "top_n": self.importance_config.top_n,
            },
            "chart": {
                "path": str(output_path),
                "exists": output_path.exists(),
            },
        }


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description="Engineer energy-usage features and rank their importance",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Analyse a CSV export
    python run_feature_importance.py --run --input energy.csv

    # Use another seed and a custom chart path
    python run_feature_importance.py --run --input energy.csv --random-state 7 --output charts/fi.png

    # Check status
    python run_feature_importance.py --status
        """,
    )

    # Mode selection
    mode_group = parser.add_mutually_exclusive_group(required=True)
    mode_group.add_argument(
        "--run",
        action="store_true",
        help="Run the feature importance analysis",
    )
    mode_group.add_argument(
        "--status",
        action="store_true",
        help="Show configuration status",
    )

    # Data source
    parser.add_argument(
        "--source",
        choices=["csv", "supabase"],
        default="csv",
        help="Where to load observations from (default: csv)",
    )
    parser.add_argument(
        "--input",
        help="CSV file with observations (or set FE_INPUT_PATH env var)",
    )
    parser.add_argument(
        "--supabase-url",
        help="Supabase project URL (or set SUPABASE_URL env var)",
    )
    parser.add_argument(
        "--supabase-key",
        help="Supabase API key (or set SUPABASE_KEY env var)",
    )
    parser.add_argument(
        "--table",
        help="Supabase table with observations (or set FE_SOURCE_TABLE env var)",
    )

    # Feature and model settings
    parser.add_argument(
        "--rolling-window",
        type=int,
        default=3,
        help="Rows in the trailing rolling window (default: 3)",
    )
    parser.add_argument(
        "--test-size",
        type=float,
        default=0.2,
        help="Fraction of data for testing (default: 0.2)",
    )
    parser.add_argument(
        "--random-state",
        type=int,
        default=42,
        help="Random seed for the split and the forest (default: 42)",
    )

    # Output settings
    parser.add_argument(
        "--output",
        default="feature_importance.png",
        help="Path of the importance chart (default: feature_importance.png)",
    )
    parser.add_argument(
        "--top-n",
        type=int,
        default=10,
        help="Number of features in the summary table (default: 10)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output results as JSON",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args(argv)

    # Set logging level
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        runner = FeatureImportanceRunner(
            source=args.source,
            input_path=args.input,
            supabase_url=args.supabase_url,
            supabase_key=args.supabase_key,
            source_table=args.table,
            rolling_window=args.rolling_window,
            output_path=args.output,
            test_size=args.test_size,
            random_state=args.random_state,
            top_n=args.top_n,
        )

        if args.run:
            result = runner.run()
        else:
            result = runner.get_status()

        if args.json:
            print(json.dumps(result, indent=2))

        return 0

    except ValueError as e:
        logger.error("Data error: %s", e)
        return 1
    except ImportError as e:
        logger.error("Missing dependency: %s", e)
        return 1
    except Exception as e:
        logger.exception("Unexpected error: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
