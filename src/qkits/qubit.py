"""Single-qubit container."""

from __future__ import annotations

from qkits.core.complex_number import Complex
from qkits.core.state import TOLERANCE, QuantumState
from qkits.exceptions import DimensionError
from qkits.measurement import MeasurementService


class Qubit:
    """
    A mutable holder of one 2-amplitude ``QuantumState``.

    Parameters
    ----------
    state : QuantumState
        Initial single-qubit state.
    measurement : MeasurementService
        Service used by ``measure``; shared, never constructed here.

    Example
    -------
    >>> q = Qubit.one(measurement)
    >>> q.measure()
    1
    """

    def __init__(self, state: QuantumState, measurement: MeasurementService) -> None:
        self._check_single(state)
        self._state = state
        self.measurement = measurement

    @classmethod
    def zero(cls, measurement: MeasurementService) -> Qubit:
        return cls(QuantumState.zero(), measurement)

    @classmethod
    def one(cls, measurement: MeasurementService) -> Qubit:
        return cls(QuantumState.one(), measurement)

    @classmethod
    def plus(cls, measurement: MeasurementService) -> Qubit:
        return cls(QuantumState.plus(), measurement)

    @classmethod
    def minus(cls, measurement: MeasurementService) -> Qubit:
        return cls(QuantumState.minus(), measurement)

    @classmethod
    def from_amplitudes(cls, alpha, beta, measurement: MeasurementService) -> Qubit:
        """α|0⟩ + β|1⟩; must satisfy |α|² + |β|² = 1."""
        return cls(QuantumState([complex(alpha), complex(beta)]), measurement)

    @staticmethod
    def _check_single(state: QuantumState) -> None:
        if state.n_qubits != 1:
            raise DimensionError(
                f"Single qubit can only have a 2-dimensional state, "
                f"got dimension {state.dimension}"
            )

    # -- State ----------------------------------------------------------------

    @property
    def state(self) -> QuantumState:
        return self._state

    def get_state(self) -> QuantumState:
        return self._state

    def set_state(self, state: QuantumState) -> None:
        self._check_single(state)
        self._state = state

    @property
    def alpha(self) -> Complex:
        """Amplitude of |0⟩."""
        return self._state.amplitude(0)

    @property
    def beta(self) -> Complex:
        """Amplitude of |1⟩."""
        return self._state.amplitude(1)

    @property
    def probability_zero(self) -> float:
        return self._state.probability(0)

    @property
    def probability_one(self) -> float:
        return self._state.probability(1)

    def get_measurement_probabilities(self) -> tuple[float, float]:
        """(P(0), P(1)) without collapsing."""
        return self.probability_zero, self.probability_one

    def is_pure_state(self) -> bool:
        """True if the qubit is |0⟩ or |1⟩ (up to phase)."""
        p0 = self.probability_zero
        return abs(p0 - 1) < TOLERANCE or abs(p0) < TOLERANCE

    def is_in_superposition(self) -> bool:
        return not self.is_pure_state()

    # -- Operations -----------------------------------------------------------

    def measure(self) -> int:
        """Measure, install the collapsed state and return 0 or 1."""
        outcome = self.measurement.measure_qubit(self._state, 0)
        self._state = outcome.collapsed_state
        return outcome.result

    def clone(self) -> Qubit:
        """Independent copy sharing the measurement service."""
        return Qubit(QuantumState(self._state.amplitudes), self.measurement)

    def equals(self, other: Qubit, tolerance: float = TOLERANCE) -> bool:
        return self._state.equals(other._state, tolerance)

    def __repr__(self) -> str:
        return f"Qubit({self._state})"

    def __str__(self) -> str:
        return str(self._state)
