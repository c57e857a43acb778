"""Unit tests for residual bootstrap error estimation.

Test Categories:
- Statistics helpers (mean, population standard deviation)
- Synthetic sample generation
- Error estimation: reproducibility, committed parameters, round count
- Parallel rounds and the sequential fallback
"""

import numpy as np
import pytest

from descentfit.core.measurements import MeasurementSet
from descentfit.core.models import Polynomial
from descentfit.core.objective import compute_residuals
from descentfit.optimization.bootstrap import (
    _is_pickle_error,
    bootstrap_errors,
    compute_mean,
    compute_stddev,
    create_sample_data,
    get_n_workers,
    run_bootstrap_round,
)
from descentfit.optimization.config import OptimizerConfig
from descentfit.optimization.descent import conjugate_gradient_descent


@pytest.fixture
def jittered_line():
    """``y = 3x - 2`` on 21 points in [-1, 1] with alternating ±0.1 noise."""
    x = np.linspace(-1.0, 1.0, 21)
    noise = 0.1 * (-1.0) ** np.arange(21)
    return MeasurementSet.from_arrays(x, 3.0 * x - 2.0 + noise)


class TestStatistics:
    """Test mean and standard deviation of parameter vectors."""

    def test_mean(self):
        values = [np.array([1.0, 2.0]), np.array([3.0, 6.0])]

        np.testing.assert_array_equal(compute_mean(values), [2.0, 4.0])

    def test_population_stddev(self):
        """Deviations of ±1 and ±2 give exactly 1 and 2 (division by the count)."""
        values = [np.array([1.0, 2.0]), np.array([3.0, 6.0])]

        np.testing.assert_allclose(compute_stddev(values), [1.0, 2.0])

    def test_stddev_of_single_sample_is_zero(self):
        np.testing.assert_array_equal(compute_stddev([np.array([5.0, -1.0])]), [0.0, 0.0])

    def test_stddev_of_constant_samples_is_zero(self):
        values = [np.array([0.3, 7.0])] * 4

        np.testing.assert_allclose(compute_stddev(values), [0.0, 0.0], atol=1e-15)


class TestSampleData:
    """Test synthetic measurement sets."""

    def test_outputs_are_model_plus_drawn_residuals(self, jittered_line):
        model = Polynomial(1, [-2.0, 3.0])
        residuals = np.array([-0.5, 0.25, 1.0])

        sample = create_sample_data(model, jittered_line, residuals, np.random.default_rng(0))
        drawn = sample.outputs - model.evaluate_batch(jittered_line.inputs)

        assert len(sample) == len(jittered_line)
        for value in drawn:
            assert np.isclose(value, residuals).any()
        np.testing.assert_array_equal(sample.inputs, jittered_line.inputs)

    def test_errors_are_kept(self):
        data = MeasurementSet.from_arrays([0.0, 1.0, 2.0], [1.0, 2.0, 3.0], [0.1, 0.2, 0.3])

        sample = create_sample_data(
            Polynomial(0, [2.0]), data, np.zeros(3), np.random.default_rng(1)
        )

        np.testing.assert_array_equal(sample.errors, data.errors)
        np.testing.assert_array_equal(sample.outputs, [2.0, 2.0, 2.0])

    def test_same_generator_seed_gives_same_sample(self, jittered_line):
        model = Polynomial(1, [-2.0, 3.0])
        residuals = compute_residuals(model, jittered_line)

        first = create_sample_data(model, jittered_line, residuals, np.random.default_rng(7))
        second = create_sample_data(model, jittered_line, residuals, np.random.default_rng(7))

        np.testing.assert_array_equal(first.outputs, second.outputs)


class TestBootstrapErrors:
    """Test the full bootstrap."""

    def test_errors_are_positive_for_noisy_data(self, jittered_line, fast_config):
        result = bootstrap_errors(
            Polynomial(1), jittered_line, conjugate_gradient_descent, fast_config
        )

        assert result.optimized_value_errors.shape == (2,)
        assert np.all(result.optimized_value_errors > 0.0)
        assert np.all(result.optimized_value_errors < 0.1)

    def test_same_seed_gives_same_errors(self, jittered_line, fast_config):
        first = bootstrap_errors(
            Polynomial(1), jittered_line, conjugate_gradient_descent, fast_config
        )
        second = bootstrap_errors(
            Polynomial(1), jittered_line, conjugate_gradient_descent, fast_config
        )

        np.testing.assert_array_equal(
            first.optimized_value_errors, second.optimized_value_errors
        )

    def test_seed_argument_overrides_config(self, jittered_line, fast_config):
        from_config = bootstrap_errors(
            Polynomial(1), jittered_line, conjugate_gradient_descent, fast_config
        )
        from_argument = bootstrap_errors(
            Polynomial(1),
            jittered_line,
            conjugate_gradient_descent,
            OptimizerConfig(bootstrap_rounds=4),
            seed=1234,
        )

        np.testing.assert_array_equal(
            from_config.optimized_value_errors, from_argument.optimized_value_errors
        )

    def test_optimized_parameters_are_committed(self, jittered_line, fast_config):
        model = Polynomial(1)

        result = bootstrap_errors(model, jittered_line, conjugate_gradient_descent, fast_config)

        np.testing.assert_array_equal(model.parameters, result.optimized_values)
        np.testing.assert_allclose(result.optimized_values, [-2.0, 3.0], atol=0.05)

    def test_single_round_gives_zero_errors(self, jittered_line):
        config = OptimizerConfig(bootstrap_rounds=1, seed=3)

        result = bootstrap_errors(Polynomial(1), jittered_line, conjugate_gradient_descent, config)

        np.testing.assert_array_equal(result.optimized_value_errors, [0.0, 0.0])

    def test_exact_data_gives_near_zero_errors(self, fast_config):
        x = np.linspace(-1.0, 1.0, 11)
        data = MeasurementSet.from_arrays(x, 0.5 * x + 1.0)

        result = bootstrap_errors(Polynomial(1), data, conjugate_gradient_descent, fast_config)

        np.testing.assert_allclose(result.optimized_value_errors, [0.0, 0.0], atol=1e-6)

    @pytest.mark.parametrize("deviation", [0.1, 2.0])
    def test_stddev_matches_injected_deviation(self, deviation):
        """Residuals drawn from {-d, 0, +d} give a spread of sqrt(2d²/3) per point.

        The fitted constant is the sample mean, so its coupling to the
        per-point noise is 1/sqrt(n).
        """
        n_points = 30
        i = np.arange(n_points)
        data = MeasurementSet.from_arrays(
            np.arange(n_points, dtype=float), 5.0 + deviation * (i % 3 - 1)
        )
        config = OptimizerConfig(bootstrap_rounds=400, seed=2024)

        result = bootstrap_errors(Polynomial(0), data, conjugate_gradient_descent, config)

        expected = np.sqrt(2.0 * deviation**2 / 3.0) / np.sqrt(n_points)
        assert result.optimized_values[0] == pytest.approx(5.0, rel=1e-9)
        assert result.optimized_value_errors[0] == pytest.approx(expected, rel=0.15)

    def test_metadata_records_bootstrap_settings(self, jittered_line, fast_config):
        result = bootstrap_errors(
            Polynomial(1), jittered_line, conjugate_gradient_descent, fast_config
        )

        assert result.metadata == {
            "bootstrap_rounds": fast_config.bootstrap_rounds,
            "bootstrap_seed": fast_config.seed,
            "n_workers": 1,
        }

    def test_run_round_returns_index(self, jittered_line, fast_config):
        model = Polynomial(1, [-2.0, 3.0])
        residuals = compute_residuals(model, jittered_line)
        seed_sequence = np.random.SeedSequence(5)

        idx, values = run_bootstrap_round(
            3, model, jittered_line, residuals, conjugate_gradient_descent,
            fast_config, seed_sequence,
        )

        assert idx == 3
        assert values.shape == (2,)
        np.testing.assert_array_equal(model.parameters, [-2.0, 3.0])


class TestWorkers:
    """Test worker count resolution and parallel execution."""

    def test_n_workers_capped_by_rounds(self):
        assert get_n_workers(OptimizerConfig(n_workers=8), 4) == 4
        assert get_n_workers(OptimizerConfig(n_workers=1), 16) == 1

    def test_zero_workers_uses_cpu_count(self, monkeypatch):
        monkeypatch.setattr("os.cpu_count", lambda: 3)

        assert get_n_workers(OptimizerConfig(n_workers=0), 16) == 3

    def test_pickle_error_detection(self):
        assert _is_pickle_error("Can't pickle local object 'f.<locals>.g'")
        assert _is_pickle_error("cannot serialize '_io.TextIOWrapper' object")
        assert not _is_pickle_error("division by zero")

    @pytest.mark.slow
    def test_parallel_matches_sequential(self, jittered_line):
        sequential = bootstrap_errors(
            Polynomial(1),
            jittered_line,
            conjugate_gradient_descent,
            OptimizerConfig(bootstrap_rounds=4, seed=11, n_workers=1),
        )
        parallel = bootstrap_errors(
            Polynomial(1),
            jittered_line,
            conjugate_gradient_descent,
            OptimizerConfig(bootstrap_rounds=4, seed=11, n_workers=2),
        )

        np.testing.assert_array_equal(
            parallel.optimized_value_errors, sequential.optimized_value_errors
        )

    @pytest.mark.slow
    def test_unpicklable_minimizer_falls_back_to_sequential(self, jittered_line, caplog):
        def local_minimizer(model, measurements, config=None, start=None):
            return conjugate_gradient_descent(model, measurements, config, start)

        config = OptimizerConfig(bootstrap_rounds=2, seed=5, n_workers=2)

        result = bootstrap_errors(Polynomial(1), jittered_line, local_minimizer, config)

        assert result.optimized_value_errors.shape == (2,)
        assert "falling back to sequential" in caplog.text
