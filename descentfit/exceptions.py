"""Custom exceptions for descentfit.

Numeric edge cases inside the optimizers (an exactly zero objective, a
parabola that opens downwards, a vanishing conjugate-gradient denominator)
are handled by value and never raise. The exceptions below cover invalid
input that would make the objective undefined.

Exception Hierarchy:
    DescentFitError (base)
    ├── MeasurementValidationError (unusable measurement data)
    ├── ParameterDimensionError (parameter vector of the wrong length)
    ├── DegreesOfFreedomError (statistic needs more measurements than parameters)
    └── ConfigurationError (invalid optimizer settings)

Examples
--------
>>> try:
...     result = fit(model, measurements)
... except MeasurementValidationError as e:
...     logger.error(f"Bad data: {e}")
"""

from __future__ import annotations


class DescentFitError(Exception):
    """Base exception for all descentfit errors.

    Attributes
    ----------
    error_context : dict
        Additional context about the error (indices, sizes, offending values).
    """

    def __init__(self, message: str, error_context: dict | None = None):
        super().__init__(message)
        self.error_context = error_context or {}

    def __str__(self) -> str:
        """Return formatted error message with context."""
        base_msg = super().__str__()
        if self.error_context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.error_context.items())
            return f"{base_msg} (context: {context_str})"
        return base_msg


class MeasurementValidationError(DescentFitError):
    """Raised when a measurement set cannot be used to compute the objective.

    Common Causes
    -------------
    - Empty measurement set
    - A zero or non-finite error value (the weighted residual is undefined)
    - Some measurements carry an error and others do not
    - Input dimensionality differs between measurements or from the model
    - Non-finite observed outputs
    """


class ParameterDimensionError(DescentFitError):
    """Raised when a parameter vector does not match the model's parameter count."""

    def __init__(self, expected: int, actual, message: str | None = None):
        self.expected = expected
        self.actual = actual
        super().__init__(
            message or f"Expected {expected} parameters, got {actual}",
            {"expected": expected, "actual": actual},
        )


class DegreesOfFreedomError(DescentFitError):
    """Raised when a statistic needs a positive number of degrees of freedom.

    The normalized objective divides by ``n_measurements - n_params``; with
    as many parameters as measurements the fit interpolates the data and the
    statistic is meaningless.
    """

    def __init__(self, n_measurements: int, n_params: int):
        self.n_measurements = n_measurements
        self.n_params = n_params
        super().__init__(
            "Degrees of freedom must be positive",
            {"n_measurements": n_measurements, "n_params": n_params},
        )


class ConfigurationError(DescentFitError):
    """Raised when optimizer settings are invalid."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("Invalid optimizer configuration: " + "; ".join(self.errors))
