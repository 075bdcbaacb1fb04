"""Risk annotation: ATR-based stop-loss and take-profit levels."""

from .levels import RiskLevels, compute_risk_levels

__all__ = ["RiskLevels", "compute_risk_levels"]
