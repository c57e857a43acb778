"""Optimizer configuration dataclass and validation.

This module provides the OptimizerConfig dataclass for parsing and validating
the ``optimization`` section of a descentfit YAML/JSON configuration file.

Example section::

    optimization:
      tolerance: 1.0e-15
      max_iterations: 16535
      differentiation_epsilon: 1.0e-15   # optional, overrides the model setting
      line_search:
        max_iterations: 128
      bootstrap:
        rounds: 16
        seed: 42
        n_workers: 1
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from descentfit.exceptions import ConfigurationError
from descentfit.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TOLERANCE = 1e-15
DEFAULT_MAX_ITERATIONS = 16535
DEFAULT_LINE_SEARCH_ITERATIONS = 128
DEFAULT_BOOTSTRAP_ROUNDS = 16


@dataclass
class OptimizerConfig:
    """Configuration for the descent optimizers and the bootstrap.

    Attributes
    ----------
    tolerance : float
        Outer loop stops once the relative WSSR improvement
        ``1 - next/previous`` falls to or below this value. Default: 1e-15.
    max_iterations : int
        Bound on outer iterations. Default: 16535.
    line_search_iterations : int
        Bound on bracketing and refinement iterations of one line search.
        Default: 128.
    differentiation_epsilon : float | None
        Epsilon of the numeric five-point-stencil gradient. When set, the
        high-level ``fit`` applies it to the model; None keeps the model's
        own setting. Default: None.
    bootstrap_rounds : int
        Number of resampled refits used to estimate parameter errors.
        Default: 16.
    seed : int | None
        Seed of the bootstrap resampling. None draws fresh entropy.
    n_workers : int
        Worker processes for bootstrap rounds. 1 runs sequentially,
        0 uses ``os.cpu_count()``. Default: 1.
    """

    tolerance: float = DEFAULT_TOLERANCE
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    line_search_iterations: int = DEFAULT_LINE_SEARCH_ITERATIONS
    differentiation_epsilon: float | None = None
    bootstrap_rounds: int = DEFAULT_BOOTSTRAP_ROUNDS
    seed: int | None = None
    n_workers: int = 1

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any] | None) -> OptimizerConfig:
        """Create OptimizerConfig from the ``optimization`` configuration mapping.

        Parameters
        ----------
        config_dict : dict
            Optimization section from ConfigManager. Missing keys use defaults.

        Returns
        -------
        OptimizerConfig
            Configuration object. Validation problems are logged as warnings.
        """
        config_dict = config_dict or {}
        line_search = config_dict.get("line_search", {}) or {}
        bootstrap = config_dict.get("bootstrap", {}) or {}
        seed = bootstrap.get("seed")
        epsilon = config_dict.get("differentiation_epsilon")

        config = cls(
            tolerance=float(config_dict.get("tolerance", DEFAULT_TOLERANCE)),
            max_iterations=int(config_dict.get("max_iterations", DEFAULT_MAX_ITERATIONS)),
            line_search_iterations=int(
                line_search.get("max_iterations", DEFAULT_LINE_SEARCH_ITERATIONS)
            ),
            differentiation_epsilon=None if epsilon is None else float(epsilon),
            bootstrap_rounds=int(bootstrap.get("rounds", DEFAULT_BOOTSTRAP_ROUNDS)),
            seed=None if seed is None else int(seed),
            n_workers=int(bootstrap.get("n_workers", 1)),
        )

        errors = config.validate()
        if errors:
            for error in errors:
                logger.warning(f"Optimizer config validation: {error}")

        return config

    def validate(self) -> list[str]:
        """Validate configuration values.

        Returns
        -------
        list[str]
            List of validation error messages (empty if valid).
        """
        errors: list[str] = []

        if not self.tolerance >= 0:
            errors.append(f"tolerance must be non-negative, got: {self.tolerance}")

        if self.max_iterations < 1:
            errors.append(
                f"max_iterations must be at least 1, got: {self.max_iterations}"
            )

        if self.line_search_iterations < 1:
            errors.append(
                "line_search_iterations must be at least 1, "
                f"got: {self.line_search_iterations}"
            )

        if self.differentiation_epsilon is not None and not (
            self.differentiation_epsilon > 0
        ):
            errors.append(
                "differentiation_epsilon must be positive, "
                f"got: {self.differentiation_epsilon}"
            )

        if self.bootstrap_rounds < 1:
            errors.append(
                f"bootstrap_rounds must be at least 1, got: {self.bootstrap_rounds}"
            )

        if self.n_workers < 0:
            errors.append(f"n_workers must be non-negative, got: {self.n_workers}")

        return errors

    def raise_if_invalid(self) -> None:
        """Raise ConfigurationError listing every validation problem."""
        errors = self.validate()
        if errors:
            raise ConfigurationError(errors)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
