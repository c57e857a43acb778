"""
Fit Result
==========

Immutable record of one minimization run, shared by all optimizers and the
bootstrap. Parameter errors are zero until :func:`bootstrap_errors` attaches
them with :meth:`FitResult.with_errors`.
"""

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

import numpy as np
from scipy import stats

from descentfit.exceptions import DegreesOfFreedomError
from descentfit.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, eq=False)
class FitResult:
    """
    Outcome of a fit.

    Fields:
    - initial_values: parameter vector at the start of the run
    - optimized_values: parameter vector at the end of the run
    - optimized_value_errors: bootstrap standard deviation per parameter
    - initial_wssr / wssr: objective before and after the run
    - iterations: completed outer iterations
    - converged: True when the run stopped before the iteration limit
    - n_measurements: number of fitted data points
    - parameter_names: one display name per parameter
    - method: name of the minimizer
    - computation_time: wall time in seconds
    """

    initial_values: np.ndarray
    optimized_values: np.ndarray
    initial_wssr: float
    wssr: float
    iterations: int
    converged: bool
    n_measurements: int
    optimized_value_errors: np.ndarray = None
    parameter_names: Tuple[str, ...] = ()
    method: str = ""
    computation_time: float = 0.0
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        initial = np.array(self.initial_values, dtype=float)
        optimized = np.array(self.optimized_values, dtype=float)
        if self.optimized_value_errors is None:
            errors = np.zeros_like(optimized)
        else:
            errors = np.array(self.optimized_value_errors, dtype=float)
        for values in (initial, optimized, errors):
            values.setflags(write=False)

        names = tuple(self.parameter_names) or tuple(
            f"p{i}" for i in range(optimized.size)
        )
        object.__setattr__(self, "initial_values", initial)
        object.__setattr__(self, "optimized_values", optimized)
        object.__setattr__(self, "optimized_value_errors", errors)
        object.__setattr__(self, "parameter_names", names)

    @property
    def n_params(self) -> int:
        return int(self.optimized_values.size)

    @property
    def degrees_of_freedom(self) -> int:
        """Number of measurements minus number of parameters (may be <= 0)."""
        return self.n_measurements - self.n_params

    def _require_degrees_of_freedom(self) -> int:
        dof = self.degrees_of_freedom
        if dof <= 0:
            raise DegreesOfFreedomError(self.n_measurements, self.n_params)
        return dof

    def normalized_wssr(self) -> float:
        """WSSR divided by the degrees of freedom.

        Raises:
            DegreesOfFreedomError: if there are not more measurements than
                parameters.
        """
        return self.wssr / self._require_degrees_of_freedom()

    def p_value(self) -> float:
        """Probability of a WSSR at least this large under a chi-square law.

        Meaningful for weighted fits whose errors are standard deviations.
        """
        return float(stats.chi2.sf(self.wssr, self._require_degrees_of_freedom()))

    def with_errors(self, errors) -> "FitResult":
        """Copy of this result carrying the given parameter errors."""
        errors = np.array(errors, dtype=float)
        if errors.shape != self.optimized_values.shape:
            raise ValueError(
                f"Expected {self.n_params} errors, got shape {errors.shape}"
            )
        return dataclasses.replace(self, optimized_value_errors=errors)

    def get_fitted_params_with_errors(self) -> Dict[str, Tuple[float, float]]:
        """Get parameters with their uncertainties as (value, error) tuples."""
        return {
            name: (float(value), float(error))
            for name, value, error in zip(
                self.parameter_names, self.optimized_values, self.optimized_value_errors
            )
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary for serialization."""
        result = {
            "method": self.method,
            "converged": self.converged,
            "iterations": self.iterations,
            "computation_time": self.computation_time,
            "n_measurements": self.n_measurements,
            "degrees_of_freedom": self.degrees_of_freedom,
            "parameter_names": list(self.parameter_names),
            "initial_values": self.initial_values.tolist(),
            "optimized_values": self.optimized_values.tolist(),
            "optimized_value_errors": self.optimized_value_errors.tolist(),
            "initial_wssr": self.initial_wssr,
            "wssr": self.wssr,
        }
        if self.degrees_of_freedom > 0:
            result["normalized_wssr"] = self.normalized_wssr()
        if self.metadata:
            result["metadata"] = dict(self.metadata)
        return result

    def format_for_display(self) -> str:
        """Format for CLI display."""
        from descentfit.results.formatters import format_fit_report

        return format_fit_report(self)

    def summary_lines(self) -> List[str]:
        """Short one-line-per-field summary used in log messages."""
        return [
            f"method={self.method}",
            f"converged={self.converged}",
            f"iterations={self.iterations}",
            f"wssr={self.wssr:.6e}",
        ]
