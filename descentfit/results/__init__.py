"""Result reporting for descentfit."""

from descentfit.results.formatters import (
    format_fit_report,
    format_parameter_table,
    format_relative_error,
    format_value,
)

__all__ = [
    "format_fit_report",
    "format_parameter_table",
    "format_relative_error",
    "format_value",
]
