"""Unit tests for the plain-text fit report."""

import numpy as np

from descentfit.optimization.results import FitResult
from descentfit.results.formatters import (
    format_fit_report,
    format_parameter_table,
    format_relative_error,
    format_value,
)


def _result(n_measurements=10, errors=(0.5, 0.25)):
    return FitResult(
        initial_values=[2.0, 42.0],
        optimized_values=[16.0, -3.0],
        initial_wssr=1234.5,
        wssr=8.0,
        iterations=7,
        converged=True,
        n_measurements=n_measurements,
        optimized_value_errors=errors,
        parameter_names=("slope", "intercept"),
        method="conjugate_gradient",
        computation_time=0.25,
    )


class TestValueFormatting:
    """Test number formatting helpers."""

    def test_format_value(self):
        assert format_value(16.0) == "16"
        assert format_value(0.1) == "0.1"
        assert format_value(1.23456789012e-20) == "1.23456789e-20"

    def test_relative_error(self):
        assert format_relative_error(16.0, 0.5) == "3.1 %"
        assert format_relative_error(-3.0, 0.25) == "8.3 %"

    def test_relative_error_of_zero_value(self):
        assert format_relative_error(0.0, 0.1) == "n/a"


class TestReport:
    """Test the full report."""

    def test_header_fields(self):
        report = format_fit_report(_result())

        assert report.startswith("Fit Results\n")
        assert "Method             : conjugate_gradient" in report
        assert "Data points        : 10" in report
        assert "Parameters         : 2" in report
        assert "Degrees of freedom : 8" in report
        assert "Initial WSSR       : 1234.5" in report
        assert report.endswith("\n")

    def test_convergence_fields(self):
        report = format_fit_report(_result())

        assert "Iterations   : 7" in report
        assert "Converged    : true" in report
        assert "WSSR         : 8" in report
        assert "WSSR/NDF     : 1" in report
        assert "Time         : 0.250 s" in report

    def test_normalized_wssr_not_available(self):
        report = format_fit_report(_result(n_measurements=2))

        assert "WSSR/NDF     : n/a" in report

    def test_initial_parameters_listed(self):
        lines = format_fit_report(_result()).splitlines()
        start = lines.index("Initial set of parameters:")

        assert lines[start + 1].split() == ["slope", ":", "2"]
        assert lines[start + 2].split() == ["intercept", ":", "42"]

    def test_parameter_table(self):
        rows = format_parameter_table(_result())

        assert rows[0].split() == ["name", "|", "value", "+-", "error"]
        assert rows[1].split() == ["slope", "|", "16", "+-", "0.5", "(3.1", "%)"]
        assert rows[2].split() == ["intercept", "|", "-3", "+-", "0.25", "(8.3", "%)"]

    def test_non_finite_values_flagged(self):
        result = FitResult(
            initial_values=[0.0],
            optimized_values=[np.inf],
            initial_wssr=1.0,
            wssr=np.inf,
            iterations=0,
            converged=True,
            n_measurements=3,
        )

        assert "non-finite parameter values" in format_fit_report(result)

    def test_format_for_display_uses_report(self):
        result = _result()

        assert result.format_for_display() == format_fit_report(result)
