"""
Pytest Configuration and Fixtures for descentfit
================================================

Shared fixtures, configuration, and test utilities for the entire test suite.
"""

import logging
import tempfile
from pathlib import Path

import numpy as np
import pytest

from descentfit.core.measurements import MeasurementSet
from descentfit.optimization.config import OptimizerConfig
from tests.factories.measurement_factory import (
    create_gaussian_measurements,
    create_linear_measurements,
    create_noisy_linear_measurements,
    create_noisy_saddle_measurements,
    create_perfect_saddle_measurements,
)
from tests.factories.models import LinearModel, SaddleModel

# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests for workflows")
    config.addinivalue_line("markers", "property: Property-based tests")
    config.addinivalue_line("markers", "slow: Slow tests (> 5 seconds)")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        path = str(item.fspath)
        if "unit" in path:
            item.add_marker(pytest.mark.unit)
        elif "integration" in path:
            item.add_marker(pytest.mark.integration)
        elif "property" in path:
            item.add_marker(pytest.mark.property)


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture(autouse=True, scope="function")
def reset_logging_level():
    """Restore the package log level after tests that change it (e.g. --verbose)."""
    package_logger = logging.getLogger("descentfit")
    level = package_logger.level
    yield
    package_logger.setLevel(level)


@pytest.fixture
def temp_dir():
    """Temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def fast_config():
    """Optimizer configuration with a small bootstrap and a fixed seed."""
    return OptimizerConfig(bootstrap_rounds=4, seed=1234)


# ============================================================================
# Model Fixtures
# ============================================================================


@pytest.fixture
def linear_model():
    """``slope * x + intercept`` starting at (2, 42)."""
    return LinearModel()


@pytest.fixture
def saddle_model():
    """Saddle surface with two inputs starting at half the true parameters."""
    return SaddleModel()


# ============================================================================
# Test Data Fixtures
# ============================================================================


@pytest.fixture
def linear_measurements() -> MeasurementSet:
    """``y = 4 i - 3`` sampled at ``x = 0.25 i`` for 100 points (slope 16)."""
    return create_linear_measurements()


@pytest.fixture
def noisy_linear_measurements() -> MeasurementSet:
    """``y = 1.5 i + 27.9 + 0.1 (i % 3)`` at ``x = 0.25 i`` for 100 points."""
    return create_noisy_linear_measurements()


@pytest.fixture
def gaussian_measurements() -> MeasurementSet:
    """Normal density with mean 14 and stddev 2.5 at ``x = 0.25 i``."""
    return create_gaussian_measurements()


@pytest.fixture
def perfect_saddle_measurements() -> MeasurementSet:
    """Saddle outputs at the true parameters (0.5, 1.0, 1.3, 5.0)."""
    return create_perfect_saddle_measurements()


@pytest.fixture
def noisy_saddle_measurements() -> MeasurementSet:
    """Saddle outputs with up to 0.2 of noise."""
    return create_noisy_saddle_measurements()


@pytest.fixture
def offset_line():
    """Ten points on ``2 x + 42`` at x = 0..9 as (inputs, outputs)."""
    x = np.arange(10, dtype=float)
    return x, 2.0 * x + 42.0
