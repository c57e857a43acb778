"""
Optimization Methods for descentfit
===================================

Gradient-based minimization of the weighted sum of squared residuals:

- line_search: bracketing and parabolic refinement along a direction
- descent: steepest descent and conjugate gradient minimizers
- bootstrap: residual bootstrap estimate of the parameter errors
- results: FitResult record shared by all minimizers
- config: OptimizerConfig (tolerance, iteration limits, bootstrap settings)
"""

from descentfit.optimization.bootstrap import (
    bootstrap_errors,
    compute_mean,
    compute_stddev,
    create_sample_data,
    run_bootstrap_round,
)
from descentfit.optimization.config import OptimizerConfig
from descentfit.optimization.descent import (
    MINIMIZERS,
    compute_gamma,
    conjugate_gradient_descent,
    conjugate_gradient_step,
    get_minimizer,
    steepest_descent,
)
from descentfit.optimization.line_search import (
    Interval,
    find_minimum_on_line,
    lerp,
    refine_minimum_in_interval,
    search_interval_around_minimum,
)
from descentfit.optimization.results import FitResult

__all__ = [
    "OptimizerConfig",
    "FitResult",
    # Line search
    "Interval",
    "lerp",
    "search_interval_around_minimum",
    "refine_minimum_in_interval",
    "find_minimum_on_line",
    # Minimizers
    "MINIMIZERS",
    "get_minimizer",
    "compute_gamma",
    "conjugate_gradient_step",
    "steepest_descent",
    "conjugate_gradient_descent",
    # Bootstrap
    "bootstrap_errors",
    "create_sample_data",
    "compute_mean",
    "compute_stddev",
    "run_bootstrap_round",
]
