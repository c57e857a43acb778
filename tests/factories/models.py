"""
Test Models
===========

Small models with known behaviour. None of them overrides
``compute_gradient``, so every gradient goes through the five-point stencil.
Defined at module level so they can be pickled into worker processes.
"""

import math

import numpy as np

from descentfit.core.models import ParametricModel

SADDLE_TRUE_PARAMETERS = (0.5, 1.0, 1.3, 5.0)


class LinearModel(ParametricModel):
    """``slope * x + intercept``."""

    def __init__(self, parameters=(2.0, 42.0), **kwargs):
        super().__init__(parameters, input_dimensions=1, **kwargs)

    def compute(self, x, parameters):
        return parameters[0] * x + parameters[1]

    def compute_batch(self, inputs, parameters):
        return parameters[0] * inputs + parameters[1]

    def parameter_name(self, i):
        return ("slope", "intercept")[i]


class SaddleModel(ParametricModel):
    """``p0·x0² + p1·x1² + p2·x0·x1 + p3`` of a two-component input."""

    def __init__(self, parameters=(0.25, 0.5, 0.65, 2.5), **kwargs):
        super().__init__(parameters, input_dimensions=2, **kwargs)

    def compute(self, x, parameters):
        return (
            parameters[0] * x[0] * x[0]
            + parameters[1] * x[1] * x[1]
            + parameters[2] * x[0] * x[1]
            + parameters[3]
        )

    def compute_batch(self, inputs, parameters):
        x0 = inputs[:, 0]
        x1 = inputs[:, 1]
        return (
            parameters[0] * x0 * x0
            + parameters[1] * x1 * x1
            + parameters[2] * x0 * x1
            + parameters[3]
        )


class TanModel(ParametricModel):
    """``p0·tan((x - p1)·p2) + p3``; batch evaluation uses the default loop."""

    def __init__(self, parameters=(2.0, 42.0, 0.1, 5.0), **kwargs):
        super().__init__(parameters, input_dimensions=1, **kwargs)

    def compute(self, x, parameters):
        return parameters[0] * math.tan((x - parameters[1]) * parameters[2]) + parameters[3]


class DomeModel(ParametricModel):
    """``1 - p0²``; against zero outputs the objective has a maximum at p0 = 0."""

    def __init__(self, parameters=(0.0,), **kwargs):
        super().__init__(parameters, input_dimensions=1, **kwargs)

    def compute(self, x, parameters):
        return 1.0 - parameters[0] * parameters[0]

    def compute_batch(self, inputs, parameters):
        return np.full(inputs.shape, 1.0 - parameters[0] * parameters[0])
