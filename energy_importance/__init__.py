"""Energy feature importance analysis.

This package provides a batch pipeline that:
- feature_engineering: loads energy-usage observations and derives features
- importance: splits the features and ranks them with a Random Forest
- reporting: renders the ranked importances as a table and a bar chart
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
