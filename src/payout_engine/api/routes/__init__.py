"""Route group exports."""

from . import analytics, health, payouts

__all__ = ["analytics", "health", "payouts"]
