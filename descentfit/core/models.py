"""Parametric Models for descentfit
=================================

A model maps an input ``x`` and a parameter vector ``p`` to a scalar output.
Subclasses implement :meth:`ParametricModel.compute`; everything else
(stored parameters, batch evaluation, the numeric parameter gradient and
parameter naming) is provided by the base class and may be overridden.

Input conventions:
- input dimension 1: ``x`` is a float, a batch of inputs has shape ``(n,)``
- input dimension d > 1: ``x`` is an array of shape ``(d,)``, a batch has
  shape ``(n, d)``

Built-in models:
- Polynomial: ``p0 + p1·x + ... + pn·xⁿ`` with an analytic gradient
- Gaussian: normal density with parameters ``(mean, stddev)``
"""

import copy
import math
from abc import ABC, abstractmethod

import numpy as np

from descentfit.core.numpy_gradients import (
    DEFAULT_DIFFERENTIATION_EPSILON,
    five_point_stencil,
)
from descentfit.exceptions import ParameterDimensionError
from descentfit.utils.logging import get_logger

logger = get_logger(__name__)


class ParametricModel(ABC):
    """Abstract base class for all fit models.

    The length of the parameter vector is fixed at construction. Evaluation
    never changes the stored parameters; only :meth:`set_parameters` and
    :meth:`set_parameter` do.
    """

    def __init__(
        self,
        parameters,
        input_dimensions: int = 1,
        differentiation_epsilon: float = DEFAULT_DIFFERENTIATION_EPSILON,
    ):
        """Initialize base model.

        Args:
            parameters: Initial parameter vector; its length fixes n_params
            input_dimensions: Number of components of one input sample
            differentiation_epsilon: Epsilon of the numeric gradient
        """
        values = np.array(parameters, dtype=float)
        if values.ndim != 1 or values.size == 0:
            raise ParameterDimensionError(
                expected=max(values.size, 1),
                actual=values.shape,
                message=f"Parameters must be a non-empty 1-D vector, got shape {values.shape}",
            )
        if int(input_dimensions) < 1:
            raise ValueError(f"input_dimensions must be >= 1, got {input_dimensions}")

        self._n_params = values.size
        self._parameters = values
        self._input_dimensions = int(input_dimensions)
        self.differentiation_epsilon = differentiation_epsilon

    @property
    def n_params(self) -> int:
        return self._n_params

    @property
    def input_dimensions(self) -> int:
        return self._input_dimensions

    @property
    def parameters(self) -> np.ndarray:
        """Copy of the stored parameter vector."""
        return self._parameters.copy()

    @property
    def differentiation_epsilon(self) -> float:
        return self._epsilon

    @differentiation_epsilon.setter
    def differentiation_epsilon(self, value: float) -> None:
        value = float(value)
        if not value > 0.0:
            raise ValueError(f"Differentiation epsilon must be positive, got {value}")
        self._epsilon = value

    def parameter(self, i: int) -> float:
        return float(self._parameters[i])

    def set_parameters(self, parameters) -> None:
        self._parameters = self.check_parameters(parameters)

    def set_parameter(self, i: int, value: float) -> None:
        updated = self._parameters.copy()
        updated[i] = value
        self._parameters = updated

    def check_parameters(self, parameters) -> np.ndarray:
        """Return ``parameters`` as a fresh float vector of length n_params."""
        values = np.array(parameters, dtype=float)
        if values.shape != (self._n_params,):
            raise ParameterDimensionError(self._n_params, values.shape)
        return values

    def resolve_parameters(self, parameters=None) -> np.ndarray:
        """Stored parameters when ``parameters`` is None, else a validated copy."""
        if parameters is None:
            return self._parameters
        return self.check_parameters(parameters)

    def with_parameters(self, parameters) -> "ParametricModel":
        """Shallow copy of this model carrying a different parameter vector."""
        clone = copy.copy(self)
        clone._parameters = self.check_parameters(parameters)
        return clone

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    @abstractmethod
    def compute(self, x, parameters: np.ndarray) -> float:
        """Model output at ``x`` for ``parameters``. Must be pure."""

    def compute_batch(self, inputs: np.ndarray, parameters: np.ndarray) -> np.ndarray:
        """Model outputs for stacked inputs. Override to vectorize."""
        return np.array([self.compute(x, parameters) for x in inputs], dtype=float)

    def evaluate(self, x, parameters=None) -> float:
        """Evaluate the model at one input.

        Args:
            x: Input sample
            parameters: Parameter vector; the stored parameters when None
        """
        return float(self.compute(x, self.resolve_parameters(parameters)))

    def evaluate_batch(self, inputs, parameters=None) -> np.ndarray:
        """Evaluate the model at every row of ``inputs``."""
        return self.compute_batch(np.asarray(inputs, dtype=float), self.resolve_parameters(parameters))

    # ------------------------------------------------------------------
    # Gradients
    # ------------------------------------------------------------------

    def compute_gradient(self, x, parameters: np.ndarray) -> np.ndarray:
        """Gradient of the output at ``x`` w.r.t. the parameters.

        The default is the five-point stencil of
        :func:`descentfit.core.numpy_gradients.five_point_stencil`. Override
        with an analytic gradient for speed or precision; the override must
        return a vector of length n_params.
        """
        return five_point_stencil(
            lambda p: self.compute(x, p), parameters, self.differentiation_epsilon
        )

    def compute_gradient_batch(
        self, inputs: np.ndarray, parameters: np.ndarray
    ) -> np.ndarray:
        """Jacobian of shape ``(n, n_params)`` for stacked inputs."""
        if type(self).compute_gradient is ParametricModel.compute_gradient:
            return five_point_stencil(
                lambda p: self.compute_batch(inputs, p),
                parameters,
                self.differentiation_epsilon,
            ).reshape(len(inputs), self._n_params)
        return np.array(
            [self.compute_gradient(x, parameters) for x in inputs], dtype=float
        ).reshape(len(inputs), self._n_params)

    def parameter_gradient(self, x, parameters=None) -> np.ndarray:
        """Gradient of the model output at ``x`` w.r.t. the parameters."""
        gradient = np.asarray(
            self.compute_gradient(x, self.resolve_parameters(parameters)), dtype=float
        )
        if gradient.shape != (self._n_params,):
            raise ParameterDimensionError(
                self._n_params,
                gradient.shape,
                message=f"Gradient must have {self._n_params} entries, got shape {gradient.shape}",
            )
        return gradient

    def gradient_batch(self, inputs, parameters=None) -> np.ndarray:
        """Jacobian of the model outputs at every row of ``inputs``."""
        return self.compute_gradient_batch(
            np.asarray(inputs, dtype=float), self.resolve_parameters(parameters)
        )

    # ------------------------------------------------------------------
    # Naming
    # ------------------------------------------------------------------

    def parameter_name(self, i: int) -> str:
        """Human readable name of the i-th parameter, used in fit reports."""
        return f"p{i}"

    @property
    def parameter_names(self) -> list[str]:
        return [self.parameter_name(i) for i in range(self._n_params)]

    def get_parameter_dict(self, parameters=None) -> dict[str, float]:
        """Convert a parameter vector to a named dictionary."""
        values = self.resolve_parameters(parameters)
        return {name: float(v) for name, v in zip(self.parameter_names, values)}

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(n_params={self._n_params}, "
            f"input_dimensions={self._input_dimensions})"
        )


class Polynomial(ParametricModel):
    """Polynomial ``p0 + p1·x + ... + p_degree·x^degree`` of one input."""

    def __init__(self, degree: int, parameters=None, **kwargs):
        if degree < 0:
            raise ValueError(f"Polynomial degree must be >= 0, got {degree}")
        if parameters is None:
            parameters = np.zeros(degree + 1)
        super().__init__(parameters, input_dimensions=1, **kwargs)
        if self.n_params != degree + 1:
            raise ParameterDimensionError(degree + 1, self.n_params)
        self.degree = degree

    def compute(self, x, parameters):
        t = 1.0
        value = parameters[0]
        for i in range(1, self.degree + 1):
            t *= x
            value += t * parameters[i]
        return value

    def compute_batch(self, inputs, parameters):
        t = np.ones_like(inputs, dtype=float)
        values = np.full(inputs.shape, parameters[0], dtype=float)
        for i in range(1, self.degree + 1):
            t = t * inputs
            values = values + t * parameters[i]
        return values

    def compute_gradient(self, x, parameters):
        gradient = np.empty(self.degree + 1)
        t = 1.0
        gradient[0] = t
        for i in range(1, self.degree + 1):
            t *= x
            gradient[i] = t
        return gradient

    def compute_gradient_batch(self, inputs, parameters):
        return np.vander(inputs, self.degree + 1, increasing=True).astype(float)


class Gaussian(ParametricModel):
    """Normal probability density with parameters ``(mean, stddev)``."""

    _NORMALIZATION = math.sqrt(2.0 * math.pi)

    def __init__(self, parameters=(0.0, 1.0), **kwargs):
        super().__init__(parameters, input_dimensions=1, **kwargs)
        if self.n_params != 2:
            raise ParameterDimensionError(2, self.n_params)

    def compute(self, x, parameters):
        mean, stddev = parameters
        arg = (x - mean) / stddev
        return 1.0 / (stddev * self._NORMALIZATION) * math.exp(-0.5 * arg * arg)

    def compute_batch(self, inputs, parameters):
        mean, stddev = parameters
        arg = (inputs - mean) / stddev
        return 1.0 / (stddev * self._NORMALIZATION) * np.exp(-0.5 * arg * arg)

    def parameter_name(self, i):
        names = ("mean", "stddev")
        return names[i] if i < len(names) else super().parameter_name(i)
