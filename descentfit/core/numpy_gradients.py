"""Numerical Differentiation for descentfit
========================================

Five-point-stencil central differences used as the default parameter
gradient of every model.

For a parameter with value p the step is ``dp = p * h`` (or ``h`` when p is
zero) with ``h = eps ** (1/4)``. The derivative estimate is

    f'(p) ≈ (-f(p+2dp) + 8 f(p+dp) - 8 f(p-dp) + f(p-2dp)) / (3 · ((p+2dp) - (p-2dp)))

The denominator is computed from the perturbed values that were actually
evaluated, so rounding of ``p ± 2dp`` does not leak into the slope.
"""

import math
from collections.abc import Callable

import numpy as np

DEFAULT_DIFFERENTIATION_EPSILON = 1e-15


def stencil_step(epsilon: float = DEFAULT_DIFFERENTIATION_EPSILON) -> float:
    """Relative step ``h = sqrt(sqrt(epsilon))`` of the five-point stencil."""
    if not epsilon > 0.0:
        raise ValueError(f"Differentiation epsilon must be positive, got {epsilon}")
    return math.sqrt(math.sqrt(epsilon))


def perturbed_values(value: float, h: float) -> tuple[float, float, float, float]:
    """Return ``(p+2dp, p+dp, p-dp, p-2dp)`` for a single parameter value."""
    dp = value * h if value != 0.0 else h
    return value + 2.0 * dp, value + dp, value - dp, value - 2.0 * dp


def five_point_stencil(
    func: Callable[[np.ndarray], float | np.ndarray],
    parameters: np.ndarray,
    epsilon: float = DEFAULT_DIFFERENTIATION_EPSILON,
) -> np.ndarray:
    """Differentiate ``func`` with respect to every entry of ``parameters``.

    Args:
        func: Function of the parameter vector. May return a scalar or an
            array (for example the model evaluated at many inputs).
        parameters: Point at which the derivative is taken.
        epsilon: Differentiation epsilon; the relative step is ``epsilon**0.25``.

    Returns:
        Array of shape ``(n_params,)`` for scalar functions, or
        ``func_shape + (n_params,)`` for array-valued functions.
    """
    parameters = np.array(parameters, dtype=float)
    h = stencil_step(epsilon)

    columns = []
    for i in range(parameters.size):
        p_plus2, p_plus1, p_minus1, p_minus2 = perturbed_values(float(parameters[i]), h)
        dx = 3.0 * (p_plus2 - p_minus2)

        shifted = parameters.copy()
        shifted[i] = p_plus2
        f_plus2 = np.asarray(func(shifted), dtype=float)
        shifted[i] = p_plus1
        f_plus1 = np.asarray(func(shifted), dtype=float)
        shifted[i] = p_minus1
        f_minus1 = np.asarray(func(shifted), dtype=float)
        shifted[i] = p_minus2
        f_minus2 = np.asarray(func(shifted), dtype=float)

        columns.append((-f_plus2 + 8.0 * f_plus1 - 8.0 * f_minus1 + f_minus2) / dx)

    if not columns:
        return np.zeros(0)
    return np.stack(columns, axis=-1)
