"""
Residual Bootstrap Error Estimation
===================================

Parameter errors are estimated by refitting the model to synthetic data sets.
Each synthetic set keeps the inputs (and errors) of the measured data and
uses the outputs ``f(x) + r`` where ``r`` is a residual of the original fit
drawn with replacement, independently for every point. The spread
(population standard deviation) of the refitted parameters is the error.

Rounds are independent: minimizers never modify the model, and each round
draws from its own generator spawned from one ``numpy.random.SeedSequence``,
so results do not depend on whether rounds run sequentially or in a process
pool.
"""

import dataclasses
import logging
import os
from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import List, Optional, Sequence

import numpy as np

from descentfit.core.measurements import MeasurementSet
from descentfit.core.models import ParametricModel
from descentfit.core.objective import compute_residuals
from descentfit.optimization.config import OptimizerConfig
from descentfit.optimization.descent import Minimizer
from descentfit.optimization.results import FitResult
from descentfit.utils.logging import get_logger, log_operation

logger = get_logger(__name__)


def create_sample_data(
    model: ParametricModel,
    measurements: MeasurementSet,
    residuals: np.ndarray,
    rng: np.random.Generator,
) -> MeasurementSet:
    """Synthetic measurement set ``f(x) + residuals[j]`` with random ``j`` per point."""
    indices = rng.integers(0, len(residuals), size=len(measurements))
    outputs = model.evaluate_batch(measurements.inputs) + residuals[indices]
    return measurements.with_outputs(outputs)


def compute_mean(values: Sequence[np.ndarray]) -> np.ndarray:
    """Element-wise mean of a list of parameter vectors."""
    return np.mean(np.asarray(values, dtype=float), axis=0)


def compute_stddev(values: Sequence[np.ndarray]) -> np.ndarray:
    """Element-wise population standard deviation (divides by the count)."""
    values = np.asarray(values, dtype=float)
    mean = compute_mean(values)
    variance = np.sum((values - mean) ** 2, axis=0) / values.shape[0]
    return np.sqrt(variance)


def run_bootstrap_round(
    round_idx: int,
    model: ParametricModel,
    measurements: MeasurementSet,
    residuals: np.ndarray,
    minimizer: Minimizer,
    config: OptimizerConfig,
    seed_sequence: np.random.SeedSequence,
) -> tuple[int, np.ndarray]:
    """Refit one synthetic data set.

    ``model`` must carry the optimized parameters; they are both the source
    of the synthetic outputs and the start point of the refit, which runs on
    a copy of the model.

    Returns:
        Tuple of (round index, optimized parameter vector)
    """
    rng = np.random.default_rng(seed_sequence)
    refit_model = model.with_parameters(model.parameters)
    sample = create_sample_data(refit_model, measurements, residuals, rng)
    result = minimizer(refit_model, sample, config)
    logger.debug(
        f"Bootstrap round {round_idx}: wssr={result.wssr:.6e}, "
        f"iterations={result.iterations}"
    )
    return round_idx, result.optimized_values.copy()


def get_n_workers(config: OptimizerConfig, n_rounds: int) -> int:
    """Determine number of parallel workers (``0`` means all CPUs)."""
    if config.n_workers > 0:
        n_workers = config.n_workers
    else:
        n_workers = os.cpu_count() or 4
    return max(1, min(n_workers, n_rounds))


def _is_pickle_error(error_msg: str) -> bool:
    """Check if an error message indicates a pickle/serialization issue."""
    pickle_indicators = [
        "pickle",
        "local object",
        "can't get local",
        "cannot serialize",
        "attributeerror",
    ]
    error_lower = error_msg.lower()
    return any(indicator in error_lower for indicator in pickle_indicators)


def _run_sequential(round_args: List[tuple]) -> List[np.ndarray]:
    return [run_bootstrap_round(*args)[1] for args in round_args]


def _run_parallel(round_args: List[tuple], n_workers: int) -> Optional[List[np.ndarray]]:
    """Run rounds in a process pool; None when the work cannot be pickled."""
    results = []
    try:
        with ProcessPoolExecutor(max_workers=n_workers) as executor:
            futures = [executor.submit(run_bootstrap_round, *args) for args in round_args]
            for future in as_completed(futures):
                results.append(future.result())
    except Exception as e:
        if _is_pickle_error(str(e)):
            logger.warning(
                f"ProcessPoolExecutor pickle error, falling back to sequential: {e}"
            )
            return None
        raise

    results.sort(key=lambda r: r[0])
    return [values for _, values in results]


def bootstrap_errors(
    model: ParametricModel,
    measurements: MeasurementSet,
    minimizer: Minimizer,
    config: Optional[OptimizerConfig] = None,
    seed=None,
) -> FitResult:
    """Fit ``model`` and estimate the parameter errors by residual bootstrap.

    The optimized parameters of the first fit are committed to ``model``.

    Args:
        model: Model to fit; updated with the optimized parameters
        measurements: Measured data
        minimizer: Function ``(model, measurements, config, start) -> FitResult``
        config: Optimizer settings; ``bootstrap_rounds`` sets the round count
        seed: Seed for the resampling; falls back to ``config.seed``

    Returns:
        Result of the first fit with ``optimized_value_errors`` filled in; its
        ``metadata`` records the round count, the root seed entropy and the
        worker count
    """
    config = config or OptimizerConfig()
    if seed is None:
        seed = config.seed

    result = minimizer(model, measurements, config)
    model.set_parameters(result.optimized_values)

    n_rounds = config.bootstrap_rounds
    residuals = compute_residuals(model, measurements)
    root_sequence = np.random.SeedSequence(seed)
    seed_sequences = root_sequence.spawn(n_rounds)
    round_args = [
        (i, model, measurements, residuals, minimizer, config, seed_sequences[i])
        for i in range(n_rounds)
    ]

    n_workers = get_n_workers(config, n_rounds)
    with log_operation(f"bootstrap ({n_rounds} rounds)", logger=logger, level=logging.DEBUG):
        samples = None
        if n_workers > 1:
            logger.debug(f"Using {n_workers} parallel workers for {n_rounds} rounds")
            samples = _run_parallel(round_args, n_workers)
        if samples is None:
            samples = _run_sequential(round_args)

    errors = compute_stddev(samples)
    metadata = {
        **result.metadata,
        "bootstrap_rounds": n_rounds,
        "bootstrap_seed": root_sequence.entropy,
        "n_workers": n_workers,
    }
    return dataclasses.replace(result.with_errors(errors), metadata=metadata)
