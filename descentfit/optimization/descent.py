"""
Gradient Descent Minimizers
===========================

Two minimizers of the weighted sum of squared residuals:

- ``steepest_descent``: every iteration line-searches along the WSSR gradient.
- ``conjugate_gradient_descent``: every iteration runs up to ``n_params``
  line searches along Polak–Ribière conjugate directions.

Both share the outer loop

    INIT → ITERATING → {CONVERGED, MAX_ITER_REACHED} → DONE

An iteration is accepted only if it strictly lowers the objective. The loop
ends when an iteration fails to improve, when the objective is exactly zero,
when the relative improvement ``1 - next/previous`` drops to the tolerance,
or when the iteration limit is reached. ``converged`` reports whether the
limit was *not* reached.

Minimizers have the signature ``minimizer(model, measurements, config=None,
start=None) -> FitResult`` and never modify the model.
"""

import time
from typing import Callable, Dict, Optional

import numpy as np

from descentfit.core.measurements import MeasurementSet
from descentfit.core.models import ParametricModel
from descentfit.core.objective import compute_wssr, compute_wssr_gradient
from descentfit.optimization.config import OptimizerConfig
from descentfit.optimization.line_search import find_minimum_on_line
from descentfit.optimization.results import FitResult
from descentfit.utils.logging import get_logger, log_performance

logger = get_logger(__name__)

Minimizer = Callable[..., FitResult]


def compute_gamma(g0: np.ndarray, g1: np.ndarray) -> Optional[float]:
    """Polak–Ribière coefficient ``g1·(g1 - g0) / g0·g0``.

    Returns None when ``g0·g0`` is zero, since no conjugate direction can be
    formed from a vanishing previous gradient.
    """
    denominator = float(np.dot(g0, g0))
    if denominator == 0.0:
        return None
    return float(np.dot(g1 - g0, g1)) / denominator


def steepest_descent_step(
    model: ParametricModel,
    measurements: MeasurementSet,
    minimum: np.ndarray,
    line_search_iterations: int,
) -> np.ndarray:
    """Candidate point of one steepest-descent iteration."""
    gradient = compute_wssr_gradient(model, measurements, minimum)
    return find_minimum_on_line(
        model, measurements, gradient, start=minimum, max_iterations=line_search_iterations
    )


def conjugate_gradient_step(
    model: ParametricModel,
    measurements: MeasurementSet,
    minimum: np.ndarray,
    line_search_iterations: int,
) -> tuple[np.ndarray, float]:
    """Run up to ``n_params`` line searches along conjugate directions.

    Args:
        model: Model to evaluate
        measurements: Measured data
        minimum: Starting point of the step
        line_search_iterations: Bound on each line search

    Returns:
        Tuple of (best point found, its WSSR). When no line search improves
        the objective the starting point and its WSSR are returned.
    """
    wssr = compute_wssr(model, measurements, minimum)
    g0 = compute_wssr_gradient(model, measurements, minimum)
    direction = g0

    for i in range(model.n_params):
        candidate = find_minimum_on_line(
            model, measurements, direction, start=minimum, max_iterations=line_search_iterations
        )
        candidate_wssr = compute_wssr(model, measurements, candidate)
        if candidate_wssr >= wssr:
            break

        wssr = candidate_wssr
        minimum = candidate
        g1 = compute_wssr_gradient(model, measurements, minimum)
        gamma = compute_gamma(g0, g1)
        if gamma is None:
            logger.debug(
                f"Conjugate gradient: previous gradient vanished after {i + 1} line searches"
            )
            break
        g0 = g1
        direction = gamma * direction + g1

    return minimum, wssr


def _descend(
    name: str,
    step: Callable[[np.ndarray], tuple[np.ndarray, float]],
    model: ParametricModel,
    measurements: MeasurementSet,
    config: Optional[OptimizerConfig],
    start,
) -> FitResult:
    config = config or OptimizerConfig()
    start_time = time.perf_counter()

    minimum = model.resolve_parameters(start).copy()
    initial_values = minimum.copy()
    wssr = compute_wssr(model, measurements, minimum)
    initial_wssr = wssr

    iterations = 0
    relative_change = 10.0 * config.tolerance
    while True:
        candidate, candidate_wssr = step(minimum)
        if candidate_wssr >= wssr or wssr == 0.0:
            break

        minimum = candidate
        relative_change = 1.0 - candidate_wssr / wssr
        wssr = candidate_wssr
        iterations += 1

        logger.debug(
            f"{name}: iteration {iterations}, wssr={wssr:.6e}, "
            f"relative change={relative_change:.3e}"
        )

        if not (iterations < config.max_iterations and config.tolerance < relative_change):
            break

    converged = iterations < config.max_iterations
    computation_time = time.perf_counter() - start_time

    if converged:
        logger.debug(f"{name} converged after {iterations} iterations (wssr={wssr:.6e})")
    else:
        logger.warning(
            f"{name} reached the iteration limit ({config.max_iterations}), wssr={wssr:.6e}"
        )

    return FitResult(
        initial_values=initial_values,
        optimized_values=minimum,
        initial_wssr=initial_wssr,
        wssr=wssr,
        iterations=iterations,
        converged=converged,
        n_measurements=len(measurements),
        parameter_names=tuple(model.parameter_names),
        method=name,
        computation_time=computation_time,
    )


@log_performance(threshold=0.5)
def steepest_descent(
    model: ParametricModel,
    measurements: MeasurementSet,
    config: Optional[OptimizerConfig] = None,
    start=None,
) -> FitResult:
    """Minimize the WSSR by line searches along the gradient.

    Args:
        model: Model to fit; its stored parameters are the default start
        measurements: Measured data
        config: Tolerance and iteration limits; defaults when None
        start: Start point overriding the stored parameters

    Returns:
        FitResult with zero parameter errors
    """
    config = config or OptimizerConfig()

    def step(minimum):
        candidate = steepest_descent_step(
            model, measurements, minimum, config.line_search_iterations
        )
        return candidate, compute_wssr(model, measurements, candidate)

    return _descend("steepest_descent", step, model, measurements, config, start)


@log_performance(threshold=0.5)
def conjugate_gradient_descent(
    model: ParametricModel,
    measurements: MeasurementSet,
    config: Optional[OptimizerConfig] = None,
    start=None,
) -> FitResult:
    """Minimize the WSSR with the nonlinear conjugate gradient method.

    Each outer iteration restarts from the plain gradient and performs up to
    ``model.n_params`` line searches along Polak–Ribière directions.
    """
    config = config or OptimizerConfig()

    def step(minimum):
        return conjugate_gradient_step(
            model, measurements, minimum, config.line_search_iterations
        )

    return _descend("conjugate_gradient", step, model, measurements, config, start)


MINIMIZERS: Dict[str, Minimizer] = {
    "steepest_descent": steepest_descent,
    "conjugate_gradient": conjugate_gradient_descent,
}


def get_minimizer(name: str) -> Minimizer:
    """Look up a minimizer by name.

    Raises:
        ValueError: for names not in ``MINIMIZERS``.
    """
    try:
        return MINIMIZERS[name]
    except KeyError:
        raise ValueError(
            f"Unknown minimizer '{name}'. Available: {', '.join(sorted(MINIMIZERS))}"
        ) from None
