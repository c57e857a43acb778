"""Argument Parser for the descentfit CLI
=====================================

Arguments select the data file, the model, the minimizer and the bootstrap
settings. Values given on the command line take precedence over the
configuration file, which takes precedence over package defaults.
"""

import argparse
from pathlib import Path

from descentfit import __version__
from descentfit.optimization.descent import MINIMIZERS

MODELS = ("polynomial", "gaussian")


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser for the descentfit CLI.

    Returns:
        Configured ArgumentParser
    """
    epilog_text = f"""
Examples:
  %(prog)s data.txt                              # Straight line, conjugate gradient
  %(prog)s data.txt --degree 3                   # Cubic polynomial
  %(prog)s data.txt --model gaussian --initial 0 1
  %(prog)s data.txt --method steepest_descent    # Steepest descent minimizer
  %(prog)s data.txt --rounds 64 --workers 4      # Larger bootstrap in 4 processes
  %(prog)s data.txt --config fit.yaml --verbose  # Settings from file, debug logging

Data file:
  Whitespace or comma separated columns: x, y and an optional error of y.
  Lines starting with '#' are ignored.

descentfit v{__version__}
        """

    parser = argparse.ArgumentParser(
        prog="descentfit",
        description="Least-squares curve fitting by steepest descent and conjugate gradients",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=epilog_text,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"descentfit v{__version__}",
    )

    parser.add_argument(
        "data_file",
        type=Path,
        help="Text table with columns x, y[, error]",
    )

    # Model selection
    model_group = parser.add_argument_group("Model Options")
    model_choice = model_group.add_mutually_exclusive_group()
    model_choice.add_argument(
        "--degree",
        type=int,
        default=None,
        help="Fit a polynomial of this degree (default: 1)",
    )
    model_choice.add_argument(
        "--model",
        choices=MODELS,
        default=None,
        help="Fit a built-in model (default: polynomial)",
    )
    model_group.add_argument(
        "--initial",
        type=float,
        nargs="+",
        default=None,
        metavar="VALUE",
        help="Initial parameter values in model order (default: model defaults)",
    )

    # Optimization
    parser.add_argument(
        "--method",
        choices=sorted(MINIMIZERS),
        default=None,
        help="Minimizer (default: from config or conjugate_gradient)",
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (YAML or JSON)",
    )

    parser.add_argument(
        "--tolerance",
        type=float,
        default=None,
        help="Relative WSSR improvement at which iteration stops (default: from config)",
    )

    parser.add_argument(
        "--max-iterations",
        type=int,
        default=None,
        help="Maximum outer iterations (default: from config)",
    )

    # Bootstrap
    bootstrap_group = parser.add_argument_group("Bootstrap Options")
    bootstrap_group.add_argument(
        "--no-bootstrap",
        action="store_true",
        help="Skip the bootstrap; parameter errors are reported as zero",
    )
    bootstrap_group.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed of the bootstrap resampling (default: random)",
    )
    bootstrap_group.add_argument(
        "--rounds",
        type=int,
        default=None,
        help="Number of bootstrap rounds (default: from config or 16)",
    )
    bootstrap_group.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker processes for bootstrap rounds, 0 for all CPUs (default: 1)",
    )

    # Output
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the fit result as JSON to this file",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )

    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Only log warnings and errors",
    )

    return parser


def validate_args(args) -> bool:
    """Validate parsed command-line arguments.

    Parameters
    ----------
    args : argparse.Namespace
        Parsed command-line arguments

    Returns
    -------
    bool
        True if arguments are valid, False otherwise
    """
    if args.verbose and args.quiet:
        print("Error: Cannot specify both --verbose and --quiet")
        return False

    if args.degree is not None and args.degree < 0:
        print("Error: Polynomial degree must be non-negative")
        return False

    if args.max_iterations is not None and args.max_iterations <= 0:
        print("Error: Maximum iterations must be positive")
        return False

    if args.tolerance is not None and args.tolerance < 0:
        print("Error: Tolerance must be non-negative")
        return False

    if args.rounds is not None and args.rounds <= 0:
        print("Error: Bootstrap rounds must be positive")
        return False

    if args.workers is not None and args.workers < 0:
        print("Error: Worker count must be non-negative")
        return False

    if not args.data_file.exists():
        print(f"Error: Data file not found: {args.data_file}")
        return False

    return True
