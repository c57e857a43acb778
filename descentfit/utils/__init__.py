"""Utility helpers for descentfit."""

from descentfit.utils.logging import get_logger, log_operation, log_performance, set_level

__all__ = ["get_logger", "log_operation", "log_performance", "set_level"]
