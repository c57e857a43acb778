"""Weighted Sum of Squared Residuals
==================================

Objective minimized by every optimizer in descentfit:

    WSSR(p) = Σᵢ ((f(xᵢ, p) - yᵢ) / σᵢ)²

with σᵢ = 1 for unweighted measurement sets, and its parameter gradient

    ∇WSSR(p) = Σᵢ 2 · ((f(xᵢ, p) - yᵢ) / σᵢ) · ∇ₚ f(xᵢ, p)

All functions default ``parameters`` to the model's stored parameters and
never modify the model. Reductions run over the measurements in stored order.
"""

import numpy as np

from descentfit.core.measurements import MeasurementSet
from descentfit.core.models import ParametricModel
from descentfit.exceptions import MeasurementValidationError


def validate_problem(model: ParametricModel, measurements: MeasurementSet) -> None:
    """Check that ``measurements`` can be fitted with ``model``.

    Raises:
        MeasurementValidationError: if the input dimensionality of the set
            differs from the model's.
    """
    if measurements.input_dimensions != model.input_dimensions:
        raise MeasurementValidationError(
            "Measurement inputs do not match the model input dimensionality",
            {
                "model_dimensions": model.input_dimensions,
                "measurement_dimensions": measurements.input_dimensions,
            },
        )


def compute_residuals(
    model: ParametricModel, measurements: MeasurementSet, parameters=None
) -> np.ndarray:
    """Residuals ``f(x) - y`` for every measurement (not divided by the errors)."""
    return model.evaluate_batch(measurements.inputs, parameters) - measurements.outputs


def _scaled_residuals(model, measurements, parameters):
    residuals = compute_residuals(model, measurements, parameters)
    if measurements.errors is not None:
        residuals = residuals / measurements.errors
    return residuals


def compute_wssr(
    model: ParametricModel, measurements: MeasurementSet, parameters=None
) -> float:
    """Weighted sum of squared residuals.

    Args:
        model: Model to evaluate
        measurements: Measured data points
        parameters: Parameter vector; the model's stored parameters when None

    Returns:
        Non-negative objective value, zero for an exact reproduction of the data
    """
    scaled = _scaled_residuals(model, measurements, parameters)
    return float(np.sum(scaled * scaled))


def compute_wssr_gradient(
    model: ParametricModel, measurements: MeasurementSet, parameters=None
) -> np.ndarray:
    """Gradient of the WSSR with respect to the model parameters."""
    parameters = model.resolve_parameters(parameters)
    scaled = _scaled_residuals(model, measurements, parameters)
    jacobian = model.gradient_batch(measurements.inputs, parameters)
    return np.sum((2.0 * scaled)[:, np.newaxis] * jacobian, axis=0)
