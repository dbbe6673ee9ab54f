"""
Projective measurement in the computational basis.

``MeasurementService`` is the only implementation of the measurement and
collapse algorithms. It is stateless apart from its random source and never
touches a circuit or qubit: it returns the outcome together with a new
collapsed ``QuantumState`` that the caller installs.

Bit convention: qubit 0 is the most significant bit of a basis index, so
the bit of qubit ``i`` in index ``k`` is ``(k >> (n - 1 - i)) & 1``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol, Sequence

import numpy as np
from numpy import ndarray

from qkits.core.state import QuantumState
from qkits.exceptions import NormalizationError, RangeError, ValidationError

logger = logging.getLogger(__name__)


class RandomSource(Protocol):
    """Anything with ``random() -> float`` in [0, 1), e.g. ``random.Random``."""

    def random(self) -> float: ...


class NumpyRandomSource:
    """
    Uniform [0, 1) draws from ``numpy.random.default_rng``.

    Parameters
    ----------
    seed : int | None
        Seed for reproducible measurement sequences.
    """

    def __init__(self, seed: int | None = None) -> None:
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def random(self) -> float:
        return float(self._rng.random())

    def __repr__(self) -> str:
        return f"NumpyRandomSource(seed={self.seed})"


@dataclass(frozen=True)
class QubitMeasurement:
    """Outcome (0 or 1) of measuring one qubit, and the collapsed state."""

    result: int
    collapsed_state: QuantumState


@dataclass(frozen=True)
class MultiQubitMeasurement:
    """Outcomes ordered by ascending qubit index, and the collapsed state."""

    results: list[int]
    collapsed_state: QuantumState


@dataclass(frozen=True)
class RegisterMeasurement:
    """Bitstring of a full measurement (qubit 0 first), and the basis state."""

    result: str
    collapsed_state: QuantumState


class MeasurementService:
    """
    Probabilistic measurement with state collapse.

    Parameters
    ----------
    random_source : RandomSource
        Source of uniform [0, 1) draws. Inject a seeded or scripted source
        for deterministic runs.

    Example
    -------
    >>> service = MeasurementService(NumpyRandomSource(seed=42))
    >>> service.measure_qubit(QuantumState.one(), 0).result
    1
    """

    def __init__(self, random_source: RandomSource) -> None:
        self.random_source = random_source

    # -- Single qubit ---------------------------------------------------------

    def measure_qubit(self, state: QuantumState, qubit: int) -> QubitMeasurement:
        """
        Measure ``qubit`` and collapse.

        Outcome is 0 if the draw ``r < P(0)``, else 1, so a draw of exactly
        ``P(0)`` yields 1.
        """
        n = state.n_qubits
        self._check_qubit(qubit, n)

        prob0, prob1 = self.qubit_probabilities(state, qubit)
        r = self.random_source.random()
        result = 0 if r < prob0 else 1

        collapsed = self._collapse_qubit(state, qubit, result)
        logger.debug(
            "Measured qubit %d: r=%.6f p0=%.6f p1=%.6f -> %d",
            qubit, r, prob0, prob1, result,
        )
        return QubitMeasurement(result, collapsed)

    def qubit_probabilities(self, state: QuantumState, qubit: int) -> tuple[float, float]:
        """(P(0), P(1)) for a single qubit, without collapsing."""
        n = state.n_qubits
        self._check_qubit(qubit, n)
        probs = state.probabilities()
        bits = _qubit_bits(n, qubit)
        return float(probs[bits == 0].sum()), float(probs[bits == 1].sum())

    def _collapse_qubit(self, state: QuantumState, qubit: int, result: int) -> QuantumState:
        amplitudes = state.amplitudes
        keep = _qubit_bits(state.n_qubits, qubit) == result
        amplitudes[~keep] = 0
        norm = float(np.sum(np.abs(amplitudes) ** 2))
        if norm == 0:
            raise NormalizationError(
                f"Cannot collapse qubit {qubit} onto zero-probability outcome {result}"
            )
        return QuantumState(amplitudes / np.sqrt(norm))

    # -- Several qubits -------------------------------------------------------

    def measure_qubits(
        self, state: QuantumState, qubits: Sequence[int]
    ) -> MultiQubitMeasurement:
        """
        Measure several qubits one at a time.

        Qubits are measured from the highest index down; results are
        reported in ascending qubit-index order.
        """
        for q in qubits:
            self._check_qubit(q, state.n_qubits)
        if len(set(qubits)) != len(qubits):
            raise ValidationError(f"Duplicate qubits in {list(qubits)}")

        outcomes: dict[int, int] = {}
        current = state
        for q in sorted(qubits, reverse=True):
            measurement = self.measure_qubit(current, q)
            outcomes[q] = measurement.result
            current = measurement.collapsed_state

        results = [outcomes[q] for q in sorted(qubits)]
        return MultiQubitMeasurement(results, current)

    def measure_all(self, state: QuantumState) -> RegisterMeasurement:
        """
        Measure every qubit at once.

        Picks the smallest index with nonzero probability whose cumulative
        probability is >= the draw and collapses to that basis vector with
        amplitude exactly 1. Relative phases of the previous state are not
        retained.
        """
        probs = state.probabilities()
        r = self.random_source.random()
        candidates = np.flatnonzero(probs)
        cumulative = np.cumsum(probs[candidates])
        pos = int(np.searchsorted(cumulative, r, side="left"))
        if pos >= len(candidates):
            # Rounding left the total just below r
            pos = len(candidates) - 1
        index = int(candidates[pos])

        n = state.n_qubits
        bitstring = format(index, f"0{n}b")
        logger.debug("Measured all %d qubits: r=%.6f -> %s", n, r, bitstring)
        return RegisterMeasurement(bitstring, QuantumState.basis(n, index))

    # -- Statistics -----------------------------------------------------------

    def get_probabilities(self, state: QuantumState) -> ndarray:
        """Basis-state probabilities; the state is not collapsed."""
        return state.probabilities()

    def get_expected_value(self, state: QuantumState) -> float:
        """
        E[X] = Σ i·P(i), treating the basis index as a random variable.

        This is a statistic of the measured index, not the expectation of
        a physical observable.
        """
        probs = state.probabilities()
        return float(np.dot(np.arange(len(probs)), probs))

    def get_variance(self, state: QuantumState) -> float:
        """Var[X] = Σ (i - E[X])²·P(i) over basis indices."""
        probs = state.probabilities()
        mean = self.get_expected_value(state)
        return float(np.dot((np.arange(len(probs)) - mean) ** 2, probs))

    @staticmethod
    def _check_qubit(qubit: int, n_qubits: int) -> None:
        if qubit < 0 or qubit >= n_qubits:
            raise RangeError(f"Qubit index {qubit} out of range [0, {n_qubits - 1}]")

    def __repr__(self) -> str:
        return f"MeasurementService(random_source={self.random_source!r})"


def _qubit_bits(n_qubits: int, qubit: int) -> ndarray:
    """Value of ``qubit``'s bit for every basis index."""
    return (np.arange(2 ** n_qubits) >> (n_qubits - 1 - qubit)) & 1
