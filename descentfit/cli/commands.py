"""Command Dispatcher for the descentfit CLI
========================================

Coordinates CLI arguments, configuration, data loading, the fit itself and
result output.
"""

import json
from pathlib import Path
from typing import Any

import numpy as np

from descentfit.api import fit
from descentfit.cli.args_parser import validate_args
from descentfit.config.manager import ConfigManager
from descentfit.core.measurements import MeasurementSet
from descentfit.core.models import Gaussian, ParametricModel, Polynomial
from descentfit.exceptions import MeasurementValidationError
from descentfit.utils.logging import get_logger, set_level

logger = get_logger(__name__)


def dispatch_command(args) -> dict[str, Any]:
    """Run a fit as described by parsed CLI arguments.

    Parameters
    ----------
    args : argparse.Namespace
        Parsed command-line arguments

    Returns
    -------
    dict
        Command execution result with success status and details
    """
    if not validate_args(args):
        return {"success": False, "error": "Invalid command-line arguments"}

    try:
        config = _load_configuration(args)
        _configure_logging(args, config)

        measurements = _load_data(args.data_file)
        model = _build_model(args)
        logger.info(
            f"Fitting {model.__class__.__name__} with {model.n_params} parameters "
            f"to {len(measurements)} measurements"
        )

        result = fit(
            model,
            measurements,
            method=config.get_method(),
            config=config.get_optimizer_config(),
            bootstrap=config.is_bootstrap_enabled(),
        )

        print(result.format_for_display())

        if args.output is not None:
            _save_results(args.output, result)

        return {"success": True, "result": result}

    except Exception as e:
        logger.error(f"Command execution failed: {e}")
        logger.debug("Full traceback:", exc_info=True)
        return {"success": False, "error": str(e)}


def _load_configuration(args) -> ConfigManager:
    """Load configuration from file or defaults and apply CLI overrides."""
    if args.config is not None:
        logger.info(f"Loading configuration from: {args.config}")
        config = ConfigManager(str(args.config))
    else:
        config = ConfigManager()

    _apply_cli_overrides(config, args)
    return config


def _apply_cli_overrides(config: ConfigManager, args) -> None:
    """Apply CLI argument overrides to configuration.

    Implements precedence: CLI args > Config file > Code defaults
    """
    overrides = {
        "optimization.method": args.method,
        "optimization.tolerance": args.tolerance,
        "optimization.max_iterations": args.max_iterations,
        "optimization.bootstrap.seed": args.seed,
        "optimization.bootstrap.rounds": args.rounds,
        "optimization.bootstrap.n_workers": args.workers,
    }
    for key, value in overrides.items():
        if value is not None:
            config.update_config(key, value)
            logger.debug(f"CLI override: {key}={value}")

    if args.no_bootstrap:
        config.update_config("optimization.bootstrap.enabled", False)


def _configure_logging(args, config: ConfigManager) -> None:
    if args.verbose:
        set_level("DEBUG")
    elif args.quiet:
        set_level("WARNING")
    else:
        set_level(config.get_logging_level())


def _load_data(data_file: Path) -> MeasurementSet:
    """Read a ``x y [error]`` text table into a measurement set."""
    with open(data_file, encoding="utf-8") as f:
        sample = f.read()
    delimiter = "," if "," in sample else None
    table = np.loadtxt(data_file, delimiter=delimiter, comments="#", ndmin=2)

    if table.shape[1] not in (2, 3):
        raise MeasurementValidationError(
            "Data file must have 2 or 3 columns (x, y[, error])",
            {"file": str(data_file), "columns": table.shape[1]},
        )

    errors = table[:, 2] if table.shape[1] == 3 else None
    measurements = MeasurementSet.from_arrays(table[:, 0], table[:, 1], errors)
    logger.info(f"Loaded {len(measurements)} measurements from {data_file}")
    return measurements


def _build_model(args) -> ParametricModel:
    """Create the model selected on the command line."""
    if args.model == "gaussian":
        if args.initial is not None:
            return Gaussian(args.initial)
        return Gaussian()

    degree = 1 if args.degree is None else args.degree
    return Polynomial(degree, args.initial)


def _save_results(output_path: Path, result) -> None:
    """Write the fit result as JSON."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(result.to_dict(), f, indent=2)
    logger.info(f"Results saved to: {output_path}")
