"""Core Computation for descentfit
================================

Key Components:
- models: ParametricModel base class and the built-in Polynomial / Gaussian models
- numpy_gradients: five-point-stencil numerical differentiation
- measurements: Measurement and MeasurementSet containers
- objective: weighted sum of squared residuals and its gradient
"""

from descentfit.core.measurements import Measurement, MeasurementSet
from descentfit.core.models import Gaussian, ParametricModel, Polynomial
from descentfit.core.numpy_gradients import (
    DEFAULT_DIFFERENTIATION_EPSILON,
    five_point_stencil,
    stencil_step,
)
from descentfit.core.objective import (
    compute_residuals,
    compute_wssr,
    compute_wssr_gradient,
    validate_problem,
)

__all__ = [
    # Models
    "ParametricModel",
    "Polynomial",
    "Gaussian",
    # Differentiation
    "DEFAULT_DIFFERENTIATION_EPSILON",
    "five_point_stencil",
    "stencil_step",
    # Data
    "Measurement",
    "MeasurementSet",
    # Objective
    "compute_residuals",
    "compute_wssr",
    "compute_wssr_gradient",
    "validate_problem",
]
