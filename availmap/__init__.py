"""availmap - shared availability calendar with a participant heatmap."""

__version__ = "1.0.0"
