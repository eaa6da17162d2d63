"""Similar-property ranking, heatmap aggregation and investment comparison."""

__version__ = "0.1.0"
