"""descentfit: Least-Squares Curve Fitting by Gradient Descent
==========================================================

Fits parametric models to measured ``(input, output[, error])`` samples by
minimizing the weighted sum of squared residuals (WSSR), with parameter
errors estimated by a residual bootstrap.

Key Features:
- Any model: implement ``compute(x, parameters)``, gradients default to a
  five-point-stencil numeric derivative
- Steepest descent and Polak–Ribière conjugate gradient minimizers sharing a
  bracketing plus parabolic line search
- Residual bootstrap error estimation, optionally across worker processes

Objective:
    WSSR(p) = Σᵢ ((f(xᵢ, p) - yᵢ) / σᵢ)²

Quick Start:
    >>> import numpy as np
    >>> from descentfit import MeasurementSet, Polynomial, fit
    >>>
    >>> x = 0.25 * np.arange(100)
    >>> data = MeasurementSet.from_arrays(x, 16.0 * x - 3.0)
    >>> result = fit(Polynomial(1, [42.0, 2.0]), data, seed=0)
    >>> print(result.format_for_display())
"""

__version__ = "0.1.0"

from descentfit.api import fit
from descentfit.config import ConfigManager
from descentfit.core import (
    Gaussian,
    Measurement,
    MeasurementSet,
    ParametricModel,
    Polynomial,
    compute_residuals,
    compute_wssr,
    compute_wssr_gradient,
)
from descentfit.exceptions import (
    ConfigurationError,
    DegreesOfFreedomError,
    DescentFitError,
    MeasurementValidationError,
    ParameterDimensionError,
)
from descentfit.optimization import (
    FitResult,
    OptimizerConfig,
    bootstrap_errors,
    conjugate_gradient_descent,
    find_minimum_on_line,
    get_minimizer,
    steepest_descent,
)

__all__ = [
    "__version__",
    "fit",
    # Models and data
    "ParametricModel",
    "Polynomial",
    "Gaussian",
    "Measurement",
    "MeasurementSet",
    # Objective
    "compute_residuals",
    "compute_wssr",
    "compute_wssr_gradient",
    # Optimization
    "OptimizerConfig",
    "FitResult",
    "steepest_descent",
    "conjugate_gradient_descent",
    "find_minimum_on_line",
    "get_minimizer",
    "bootstrap_errors",
    # Configuration
    "ConfigManager",
    # Exceptions
    "DescentFitError",
    "MeasurementValidationError",
    "ParameterDimensionError",
    "DegreesOfFreedomError",
    "ConfigurationError",
]
