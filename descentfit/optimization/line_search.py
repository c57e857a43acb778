"""Line Search Along a Descent Direction
=====================================

One-dimensional minimization of the WSSR along a fixed direction in
parameter space, in two phases:

1. **Bracketing** (:func:`search_interval_around_minimum`): step away from the
   start point against ``direction`` with geometrically growing step sizes
   until the objective stops decreasing.
2. **Refinement** (:func:`refine_minimum_in_interval`): repeatedly fit a
   parabola through the objective at the two interval ends and the midpoint
   and keep the half that contains its vertex.

Both phases assume a single minimum along the line. Every point produced is a
fresh array; the model is never modified.
"""

from typing import NamedTuple

import numpy as np

from descentfit.core.measurements import MeasurementSet
from descentfit.core.models import ParametricModel
from descentfit.core.objective import compute_wssr
from descentfit.utils.logging import get_logger

logger = get_logger(__name__)

INITIAL_STEP = 0.01
STEP_GROWTH = 1.618
DEFAULT_LINE_SEARCH_ITERATIONS = 128


class Interval(NamedTuple):
    """Pair of parameter points expected to enclose the minimum on a line."""

    before: np.ndarray
    past: np.ndarray


def lerp(alpha: float, x: np.ndarray, y: np.ndarray) -> np.ndarray:
    """Linear interpolation ``(1 - alpha) * x + alpha * y``."""
    return (1.0 - alpha) * x + alpha * y


def search_interval_around_minimum(
    model: ParametricModel,
    measurements: MeasurementSet,
    direction,
    max_iterations: int = DEFAULT_LINE_SEARCH_ITERATIONS,
    start=None,
) -> Interval:
    """Bracket the minimum of the WSSR along ``-direction``.

    Candidates are ``start - s * direction`` with ``s`` starting at 0.01 and
    growing by 1.618 each iteration. While the objective keeps decreasing the
    previous two accepted points are remembered; the search stops at the first
    candidate that is not better than its predecessor or after
    ``max_iterations`` candidates.

    The returned interval spans from the point two accepted steps back to the
    last candidate evaluated. A step can overshoot the minimum while still
    lowering the objective, so the interval reaches one step further back
    than the last improvement.

    Args:
        model: Model to evaluate
        measurements: Measured data
        direction: Direction to step against (usually the WSSR gradient)
        max_iterations: Bound on the number of candidates evaluated
        start: Start point; the model's stored parameters when None

    Returns:
        Interval(before, past)
    """
    start = model.resolve_parameters(start).copy()
    direction = np.asarray(direction, dtype=float)

    before = start
    mid = start
    past = start
    last_wssr = compute_wssr(model, measurements, start)
    step = INITIAL_STEP

    iterations = 0
    is_smaller = True
    while iterations < max_iterations and is_smaller:
        past = start - step * direction
        next_wssr = compute_wssr(model, measurements, past)
        is_smaller = next_wssr < last_wssr
        if is_smaller:
            before = mid
            mid = past
        last_wssr = next_wssr
        step *= STEP_GROWTH
        iterations += 1

    if iterations == 1 and not is_smaller:
        logger.debug("Bracketing: first step did not decrease the objective")
    else:
        logger.debug(f"Bracketing finished after {iterations} steps (step={step:.3e})")

    return Interval(before, past)


def refine_minimum_in_interval(
    model: ParametricModel,
    measurements: MeasurementSet,
    lower,
    upper,
    max_iterations: int = DEFAULT_LINE_SEARCH_ITERATIONS,
) -> np.ndarray:
    """Narrow ``[lower, upper]`` onto the minimum of the WSSR.

    Each iteration evaluates the midpoint and considers the parabola through
    ``(-1, lower_wssr)``, ``(0, mid_wssr)``, ``(1, upper_wssr)``:

    - midpoint objective exactly zero: the midpoint is returned
    - parabola opening downwards or flat: stop
    - vertex left of the midpoint: the midpoint becomes the upper end
    - vertex right of the midpoint: the midpoint becomes the lower end
    - vertex on the midpoint: shrink both ends asymmetrically to 1 % and 98 %
      of the interval

    Returns:
        The interval end with the lower objective (the upper end on ties),
        or the midpoint when it reproduces the data exactly.
    """
    lower = np.array(lower, dtype=float)
    upper = np.array(upper, dtype=float)
    lower_wssr = compute_wssr(model, measurements, lower)
    upper_wssr = compute_wssr(model, measurements, upper)

    iterations = 0
    while True:
        mid = lerp(0.5, lower, upper)
        mid_wssr = compute_wssr(model, measurements, mid)
        if mid_wssr == 0.0:
            return mid

        opening = (lower_wssr + upper_wssr) * 0.5 - mid_wssr
        if opening <= 0.0:
            logger.debug(
                f"Refinement stopped after {iterations} iterations: midpoint is not below the chord"
            )
            break

        vertex = 0.25 * ((lower_wssr - upper_wssr) / opening)
        if vertex < 0.0:
            upper = mid
            upper_wssr = mid_wssr
        elif vertex > 0.0:
            lower = mid
            lower_wssr = mid_wssr
        else:
            lower, upper = lerp(0.01, lower, upper), lerp(0.98, lower, upper)
            lower_wssr = compute_wssr(model, measurements, lower)
            upper_wssr = compute_wssr(model, measurements, upper)

        iterations += 1
        if iterations >= max_iterations:
            break

    if lower_wssr < upper_wssr:
        return lower
    return upper


def find_minimum_on_line(
    model: ParametricModel,
    measurements: MeasurementSet,
    direction,
    start=None,
    max_iterations: int = DEFAULT_LINE_SEARCH_ITERATIONS,
) -> np.ndarray:
    """Minimize the WSSR along ``-direction`` starting from ``start``.

    Brackets the minimum and refines it; ``max_iterations`` bounds each phase
    separately.
    """
    bracket = search_interval_around_minimum(
        model, measurements, direction, max_iterations, start=start
    )
    return refine_minimum_in_interval(
        model, measurements, bracket.before, bracket.past, max_iterations
    )
