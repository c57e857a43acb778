"""Measurement containers for descentfit
======================================

A :class:`Measurement` is one observed sample ``(input, output[, error])``.
A :class:`MeasurementSet` stacks an ordered collection of measurements into
arrays so the objective can be computed with vectorized model evaluation.

Validation happens once, at construction:
- the set is non-empty
- all inputs share the same dimensionality
- outputs are finite
- either every measurement carries an error or none does
- errors are finite and non-zero (a zero error makes the weighted residual
  undefined)
"""

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import Optional, Union

import numpy as np

from descentfit.exceptions import MeasurementValidationError

InputType = Union[float, np.ndarray]


def _freeze_input(x) -> InputType:
    values = np.array(x, dtype=float)
    if values.ndim == 0:
        return float(values)
    if values.ndim != 1:
        raise MeasurementValidationError(
            f"Measurement input must be a scalar or 1-D vector, got shape {values.shape}"
        )
    if values.size == 1:
        return float(values[0])
    values.setflags(write=False)
    return values


@dataclass(frozen=True)
class Measurement:
    """Measured data point used to fit the model parameters.

    Attributes:
        input: Independent variable (float, or vector for multi-dimensional inputs)
        output: Observed value
        error: Optional measurement error; residuals are divided by it
    """

    input: InputType
    output: float
    error: Optional[float] = None

    def __post_init__(self):
        object.__setattr__(self, "input", _freeze_input(self.input))
        object.__setattr__(self, "output", float(self.output))
        if self.error is not None:
            object.__setattr__(self, "error", float(self.error))

    @property
    def input_dimensions(self) -> int:
        return 1 if isinstance(self.input, float) else int(self.input.size)


class MeasurementSet(Sequence):
    """Ordered, validated collection of measurements.

    Iteration order is the insertion order, so every reduction over the set is
    reproducible.
    """

    def __init__(self, measurements: Iterable[Measurement]):
        measurements = list(measurements)
        if not measurements:
            raise MeasurementValidationError("Measurement set is empty")

        dimensions = {m.input_dimensions for m in measurements}
        if len(dimensions) != 1:
            raise MeasurementValidationError(
                "All measurements must share the same input dimensionality",
                {"dimensions": sorted(dimensions)},
            )
        input_dimensions = dimensions.pop()

        has_error = [m.error is not None for m in measurements]
        if any(has_error) and not all(has_error):
            raise MeasurementValidationError(
                "Either every measurement carries an error or none does",
                {"with_error": sum(has_error), "total": len(measurements)},
            )

        if input_dimensions == 1:
            inputs = np.array([m.input for m in measurements], dtype=float)
        else:
            inputs = np.stack([m.input for m in measurements]).astype(float)
        outputs = np.array([m.output for m in measurements], dtype=float)
        errors = (
            np.array([m.error for m in measurements], dtype=float)
            if all(has_error)
            else None
        )

        self._init_arrays(inputs, outputs, errors, input_dimensions)

    @classmethod
    def from_arrays(cls, inputs, outputs, errors=None) -> "MeasurementSet":
        """Build a set from stacked arrays.

        Args:
            inputs: Shape ``(n,)`` for scalar inputs or ``(n, d)``
            outputs: Shape ``(n,)``
            errors: Optional, shape ``(n,)``
        """
        inputs = np.array(inputs, dtype=float)
        outputs = np.array(outputs, dtype=float)
        if inputs.ndim == 2 and inputs.shape[1] == 1:
            inputs = inputs[:, 0]
        if inputs.ndim not in (1, 2):
            raise MeasurementValidationError(
                f"Inputs must have shape (n,) or (n, d), got {inputs.shape}"
            )
        if outputs.shape != (inputs.shape[0],):
            raise MeasurementValidationError(
                "Outputs must have one entry per input",
                {"inputs": inputs.shape, "outputs": outputs.shape},
            )
        if inputs.shape[0] == 0:
            raise MeasurementValidationError("Measurement set is empty")
        if errors is not None:
            errors = np.array(errors, dtype=float)
            if errors.shape != outputs.shape:
                raise MeasurementValidationError(
                    "Errors must have one entry per output",
                    {"outputs": outputs.shape, "errors": errors.shape},
                )

        instance = cls.__new__(cls)
        input_dimensions = 1 if inputs.ndim == 1 else inputs.shape[1]
        instance._init_arrays(inputs, outputs, errors, input_dimensions)
        return instance

    def _init_arrays(self, inputs, outputs, errors, input_dimensions):
        if not np.all(np.isfinite(outputs)):
            bad = np.flatnonzero(~np.isfinite(outputs))
            raise MeasurementValidationError(
                "Observed outputs must be finite", {"indices": bad.tolist()}
            )
        if errors is not None:
            bad = np.flatnonzero((errors == 0.0) | ~np.isfinite(errors))
            if bad.size:
                raise MeasurementValidationError(
                    "Measurement errors must be finite and non-zero",
                    {"indices": bad.tolist()},
                )
            errors.setflags(write=False)

        inputs.setflags(write=False)
        outputs.setflags(write=False)
        self._inputs = inputs
        self._outputs = outputs
        self._errors = errors
        self._input_dimensions = int(input_dimensions)

    @property
    def inputs(self) -> np.ndarray:
        return self._inputs

    @property
    def outputs(self) -> np.ndarray:
        return self._outputs

    @property
    def errors(self) -> Optional[np.ndarray]:
        """Per-measurement errors, or None for an unweighted set."""
        return self._errors

    @property
    def is_weighted(self) -> bool:
        return self._errors is not None

    @property
    def input_dimensions(self) -> int:
        return self._input_dimensions

    def with_outputs(self, outputs) -> "MeasurementSet":
        """Same inputs and errors with new observed outputs."""
        return MeasurementSet.from_arrays(
            self._inputs,
            outputs,
            None if self._errors is None else self._errors.copy(),
        )

    def __len__(self) -> int:
        return self._outputs.shape[0]

    def __getitem__(self, index):
        if isinstance(index, slice):
            return MeasurementSet(
                self[i] for i in range(*index.indices(len(self)))
            )
        x = self._inputs[index]
        error = None if self._errors is None else float(self._errors[index])
        return Measurement(x, float(self._outputs[index]), error)

    def __iter__(self) -> Iterator[Measurement]:
        for i in range(len(self)):
            yield self[i]

    def __repr__(self) -> str:
        return (
            f"MeasurementSet(n={len(self)}, input_dimensions={self._input_dimensions}, "
            f"weighted={self.is_weighted})"
        )
