"""
High-level fitting API
======================

Single entry point that validates the problem, runs a minimizer with or
without bootstrap error estimation, commits the optimized parameters to the
model and logs the outcome.

Example:
    >>> from descentfit import Polynomial, MeasurementSet, fit
    >>> data = MeasurementSet.from_arrays(x, y)
    >>> result = fit(Polynomial(1), data, seed=0)
    >>> print(result.format_for_display())
"""

from typing import Optional

from descentfit.core.measurements import MeasurementSet
from descentfit.core.models import ParametricModel
from descentfit.core.objective import validate_problem
from descentfit.optimization.bootstrap import bootstrap_errors
from descentfit.optimization.config import OptimizerConfig
from descentfit.optimization.descent import get_minimizer
from descentfit.optimization.results import FitResult
from descentfit.utils.logging import get_logger, log_operation

logger = get_logger(__name__)


def fit(
    model: ParametricModel,
    measurements: MeasurementSet,
    method: str = "conjugate_gradient",
    config: Optional[OptimizerConfig] = None,
    seed=None,
    bootstrap: bool = True,
) -> FitResult:
    """Fit ``model`` to ``measurements``.

    Args:
        model: Model whose stored parameters are the start point. Updated
            with the optimized parameters on return.
        measurements: Measured data
        method: ``"conjugate_gradient"`` or ``"steepest_descent"``
        config: Optimizer settings; defaults when None
        seed: Seed for the bootstrap resampling (overrides ``config.seed``)
        bootstrap: Estimate parameter errors by residual bootstrap

    Returns:
        FitResult of the fit on the measured data

    Raises:
        MeasurementValidationError: if the data does not match the model
        ConfigurationError: if ``config`` is invalid
        ValueError: for an unknown ``method``
    """
    config = config or OptimizerConfig()
    config.raise_if_invalid()
    validate_problem(model, measurements)
    minimizer = get_minimizer(method)
    if config.differentiation_epsilon is not None:
        model.differentiation_epsilon = config.differentiation_epsilon

    with log_operation(f"{method} fit", logger=logger):
        if bootstrap:
            result = bootstrap_errors(model, measurements, minimizer, config, seed=seed)
        else:
            result = minimizer(model, measurements, config)
            model.set_parameters(result.optimized_values)

    logger.info(f"Fit finished: {', '.join(result.summary_lines())}")
    if not result.converged:
        logger.warning(
            f"{method} did not converge within {config.max_iterations} iterations"
        )
    return result
