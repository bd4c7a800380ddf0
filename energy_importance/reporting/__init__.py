"""Reporting of ranked feature importances as a table and a bar chart."""

from energy_importance.reporting.report import (
    format_importance_table,
    render_importance_chart,
    sort_importances,
)

__all__ = ["format_importance_table", "render_importance_chart", "sort_importances"]
