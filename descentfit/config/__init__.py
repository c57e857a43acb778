"""Configuration system for the descentfit package."""

from descentfit.config.manager import ConfigManager
from descentfit.optimization.config import OptimizerConfig

__all__ = [
    "ConfigManager",
    "OptimizerConfig",
]
