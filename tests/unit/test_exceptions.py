"""Unit tests for the exception hierarchy."""

import pytest

from descentfit.exceptions import (
    ConfigurationError,
    DegreesOfFreedomError,
    DescentFitError,
    MeasurementValidationError,
    ParameterDimensionError,
)


class TestHierarchy:
    """All package errors share one base class."""

    @pytest.mark.parametrize(
        "error",
        [
            MeasurementValidationError("bad data"),
            ParameterDimensionError(2, 3),
            DegreesOfFreedomError(2, 2),
            ConfigurationError(["x must be positive"]),
        ],
    )
    def test_subclasses_base(self, error):
        assert isinstance(error, DescentFitError)


class TestMessages:
    """Test messages and context."""

    def test_context_appended(self):
        error = DescentFitError("failed", {"index": 3})

        assert str(error) == "failed (context: index=3)"

    def test_no_context(self):
        error = DescentFitError("failed")

        assert str(error) == "failed"
        assert error.error_context == {}

    def test_parameter_dimension(self):
        error = ParameterDimensionError(2, 3)

        assert error.expected == 2
        assert error.actual == 3
        assert str(error).startswith("Expected 2 parameters, got 3")

    def test_parameter_dimension_custom_message(self):
        error = ParameterDimensionError(2, (2, 2), "Parameters must be a vector")

        assert str(error).startswith("Parameters must be a vector")
        assert error.error_context["actual"] == (2, 2)

    def test_degrees_of_freedom(self):
        error = DegreesOfFreedomError(3, 4)

        assert "n_measurements=3" in str(error)
        assert "n_params=4" in str(error)

    def test_configuration_errors_joined(self):
        error = ConfigurationError(["a is bad", "b is bad"])

        assert error.errors == ["a is bad", "b is bad"]
        assert str(error) == "Invalid optimizer configuration: a is bad; b is bad"
