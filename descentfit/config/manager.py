"""Configuration Management for descentfit
=======================================

YAML/JSON loading with a merged default configuration. A configuration file
only needs the keys it changes; everything else comes from
:meth:`ConfigManager._get_default_config`.

Example ``descentfit.yaml``::

    optimization:
      method: conjugate_gradient
      tolerance: 1.0e-12
      bootstrap:
        rounds: 32
        seed: 7
    logging:
      level: DEBUG
"""

import copy
import json
from pathlib import Path
from typing import Any

import yaml

from descentfit.optimization.config import OptimizerConfig
from descentfit.utils.logging import get_logger

logger = get_logger(__name__)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


class ConfigManager:
    """Configuration manager for descentfit fits.

    Key Features:
    - YAML/JSON configuration file loading
    - Defaults merged under the loaded values
    - Graceful fallback to defaults on missing or unparseable files

    Usage:
        config_manager = ConfigManager('descentfit.yaml')
        optimizer_config = config_manager.get_optimizer_config()
    """

    def __init__(
        self,
        config_file: str | None = None,
        config_override: dict[str, Any] | None = None,
    ):
        """Initialize configuration manager.

        Parameters
        ----------
        config_file : str, optional
            Path to YAML/JSON configuration file. Defaults only when None.
        config_override : dict, optional
            Configuration data used instead of loading from file
        """
        self.config_file = config_file
        self.config: dict[str, Any] = self._get_default_config()

        if config_override is not None:
            self.config = _deep_merge(self.config, config_override)
            logger.debug("Configuration loaded from override data")
        elif config_file is not None:
            self.load_config()

    def load_config(self) -> None:
        """Load and parse the YAML/JSON configuration file.

        Falls back to the default configuration if loading fails.
        """
        try:
            config_path = Path(self.config_file)
            if not config_path.exists():
                raise FileNotFoundError(
                    f"Configuration file not found: {self.config_file}"
                )

            file_extension = config_path.suffix.lower()
            with open(config_path, encoding="utf-8") as f:
                if file_extension == ".json":
                    loaded = json.load(f)
                else:
                    loaded = yaml.safe_load(f)

            if loaded is None:
                loaded = {}
            if not isinstance(loaded, dict):
                raise ValueError(
                    f"Configuration root must be a mapping, got {type(loaded).__name__}"
                )

            self.config = _deep_merge(self._get_default_config(), loaded)
            logger.info(f"Configuration loaded from: {self.config_file}")

        except json.JSONDecodeError as e:
            logger.error(f"JSON parsing error: {e}")
            logger.info("Using default configuration...")
            self.config = self._get_default_config()
        except yaml.YAMLError as e:
            logger.error(f"YAML parsing error: {e}")
            logger.info("Using default configuration...")
            self.config = self._get_default_config()
        except (OSError, ValueError) as e:
            logger.error(f"Configuration loading error: {e}")
            logger.info("Using default configuration...")
            self.config = self._get_default_config()

    def _get_default_config(self) -> dict[str, Any]:
        """Get default configuration structure."""
        defaults = OptimizerConfig()
        return {
            "optimization": {
                "method": "conjugate_gradient",
                "tolerance": defaults.tolerance,
                "max_iterations": defaults.max_iterations,
                "differentiation_epsilon": defaults.differentiation_epsilon,
                "line_search": {
                    "max_iterations": defaults.line_search_iterations,
                },
                "bootstrap": {
                    "enabled": True,
                    "rounds": defaults.bootstrap_rounds,
                    "seed": defaults.seed,
                    "n_workers": defaults.n_workers,
                },
            },
            "logging": {
                "level": "INFO",
            },
        }

    def get_config(self) -> dict[str, Any]:
        """Get the current configuration dictionary."""
        return self.config

    def get(self, *keys: str, default: Any = None) -> Any:
        """Look up a nested value, e.g. ``get("optimization", "bootstrap", "rounds")``."""
        node: Any = self.config
        for key in keys:
            if not isinstance(node, dict) or key not in node:
                return default
            node = node[key]
        return node

    def update_config(self, key: str, value: Any) -> None:
        """Update a configuration value using dot notation.

        Parameters
        ----------
        key : str
            Configuration key (supports dot notation like 'optimization.method')
        value : Any
            New value to set
        """
        keys = key.split(".")
        config_ref = self.config

        for k in keys[:-1]:
            if k not in config_ref or not isinstance(config_ref[k], dict):
                config_ref[k] = {}
            config_ref = config_ref[k]

        config_ref[keys[-1]] = value

    def get_optimizer_config(self) -> OptimizerConfig:
        return OptimizerConfig.from_dict(self.get("optimization", default={}))

    def get_method(self) -> str:
        return str(self.get("optimization", "method", default="conjugate_gradient"))

    def is_bootstrap_enabled(self) -> bool:
        return bool(self.get("optimization", "bootstrap", "enabled", default=True))

    def get_logging_level(self) -> str:
        return str(self.get("logging", "level", default="INFO")).upper()
