"""Route analytics helpers."""

from .distance import DistanceMetrics, calculate_averages

__all__ = ["DistanceMetrics", "calculate_averages"]
