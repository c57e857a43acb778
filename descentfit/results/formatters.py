"""
Fit Report Formatting
=====================

Plain-text rendering of a :class:`~descentfit.optimization.results.FitResult`:
data summary, initial parameters, convergence summary and the final parameter
table with bootstrap errors.
"""

from typing import List

import numpy as np

from descentfit.exceptions import DegreesOfFreedomError
from descentfit.optimization.results import FitResult

NAME_WIDTH = 20
VALUE_WIDTH = 20


def format_value(value: float) -> str:
    """Shortest round-tripping representation of a float."""
    return f"{float(value):.10g}"


def format_relative_error(value: float, error: float) -> str:
    """Error relative to the value in percent, ``n/a`` for a zero value."""
    if value == 0.0:
        return "n/a"
    return f"{abs(100.0 * error / value):.2g} %"


def format_parameter_table(result: FitResult) -> List[str]:
    """Rows of the ``name | value +- error (x %)`` table."""
    lines = [f"{'name':>{NAME_WIDTH}} | {'value':>{VALUE_WIDTH}} +- error"]
    for name, value, error in zip(
        result.parameter_names, result.optimized_values, result.optimized_value_errors
    ):
        lines.append(
            f"{name:>{NAME_WIDTH}} | {format_value(value):>{VALUE_WIDTH}} +- "
            f"{format_value(error)} ({format_relative_error(value, error)})"
        )
    return lines


def format_fit_report(result: FitResult) -> str:
    """Render a human readable report of ``result``.

    WSSR/NDF is shown as ``n/a`` when there are not more measurements than
    parameters.
    """
    try:
        normalized = format_value(result.normalized_wssr())
    except DegreesOfFreedomError:
        normalized = "n/a"

    lines = [
        "Fit Results",
        f"Method             : {result.method or 'n/a'}",
        f"Data points        : {result.n_measurements}",
        f"Parameters         : {result.n_params}",
        f"Degrees of freedom : {result.degrees_of_freedom}",
        f"Initial WSSR       : {format_value(result.initial_wssr)}",
        "",
        "Initial set of parameters:",
    ]
    for name, value in zip(result.parameter_names, result.initial_values):
        lines.append(f"{name:>{NAME_WIDTH}} : {format_value(value)}")

    lines.extend(
        [
            "",
            f"Iterations   : {result.iterations}",
            f"Converged    : {str(result.converged).lower()}",
            f"WSSR         : {format_value(result.wssr)}",
            f"WSSR/NDF     : {normalized}",
            f"Time         : {result.computation_time:.3f} s",
            "",
            "Final set of parameters:",
        ]
    )
    lines.extend(format_parameter_table(result))

    if not np.all(np.isfinite(result.optimized_values)):
        lines.extend(["", "Warning: non-finite parameter values"])

    return "\n".join(lines) + "\n"
