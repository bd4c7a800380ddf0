"""Rendering of ranked feature importances."""

import logging
from pathlib import Path
from typing import Union

import matplotlib.pyplot as plt
import pandas as pd

logger = logging.getLogger(__name__)


def sort_importances(importances: pd.Series) -> pd.Series:
    """Sort importances descending; ties keep their current order."""
    return importances.sort_values(ascending=False, kind="mergesort")


def format_importance_table(importances: pd.Series, top_n: int = 10) -> str:
    """Format the top entries as a ranked text table.

    Args:
        importances: Importance scores indexed by feature name
        top_n: Number of entries to include

    Returns:
        Table with rank, feature and importance columns
    """
    top = sort_importances(importances).head(top_n)
    table = pd.DataFrame(
        {"feature": top.index, "importance": top.to_numpy()},
        index=pd.RangeIndex(1, len(top) + 1, name="rank"),
    )
    return table.to_string(float_format=lambda value: f"{value:.6f}")


def render_importance_chart(
    importances: pd.Series,
    output_path: Union[str, Path] = "feature_importance.png",
    figsize: tuple[float, float] = (18.0, 20.0),
) -> Path:
    """Render importances as a horizontal bar chart and save it.

    The highest score is drawn at the top.

    Args:
        importances: Importance scores indexed by feature name
        output_path: Image file to write
        figsize: Figure size in inches

    Returns:
        Path of the written image
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    # barh draws the first entry at the bottom
    ordered = sort_importances(importances).iloc[::-1]

    fig, ax = plt.subplots(figsize=figsize)
    try:
        ax.barh(ordered.index.astype(str), ordered.to_numpy(), color="steelblue")
        ax.set_xlabel("Importance (mean decrease in impurity)")
        ax.set_ylabel("Feature")
        ax.set_title("Random Forest Feature Importance")
        ax.grid(axis="x", alpha=0.3)
        fig.tight_layout()
        fig.savefig(output_path)
    finally:
        plt.close(fig)

    logger.info("Saved feature importance chart to %s", output_path)
    return output_path
