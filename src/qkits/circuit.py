"""
Quantum circuit - an n-qubit register evolved in place.

Supports a fluent/chained API:

>>> qc = ctx.create_circuit(2)
>>> qc.apply_gate(gates.H(), 0).apply_cnot(0, 1)
>>> qc.get_measurement_probabilities()
array([0.5, 0. , 0. , 0.5])

Qubit 0 is the most significant bit of a basis index (``|q0 q1 ... ⟩``).
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np
from numpy import ndarray

from qkits.config import QubitLimits
from qkits.core.linalg import MatrixOperations
from qkits.core.state import QuantumState
from qkits.exceptions import ArityError, DimensionError, RangeError, ValidationError
from qkits.gates import Gate
from qkits.measurement import MeasurementService

logger = logging.getLogger(__name__)


class QuantumCircuit:
    """
    Mutable container for one n-qubit state.

    Parameters
    ----------
    n_qubits : int
        Number of qubits (>= 1, subject to ``limits``).
    ops : MatrixOperations
        Matrix-algebra service used to build and apply operators.
    measurement : MeasurementService
        Measurement service; the circuit installs the states it returns.
    initial_state : QuantumState, optional
        Starting state with 2^n amplitudes. Defaults to |00...0⟩.
    limits : QubitLimits, optional
        Qubit-count guard (warn above 16, reject above 24 by default).

    Not thread-safe: clone the circuit for independent simulations.
    """

    def __init__(
        self,
        n_qubits: int,
        ops: MatrixOperations,
        measurement: MeasurementService,
        initial_state: QuantumState | None = None,
        limits: QubitLimits | None = None,
    ) -> None:
        if n_qubits < 1:
            raise RangeError(f"Quantum circuit must have at least 1 qubit, got {n_qubits}")
        (limits or QubitLimits()).check(n_qubits)

        self.n_qubits = n_qubits
        self.ops = ops
        self.measurement = measurement
        self.limits = limits

        if initial_state is not None:
            if initial_state.n_qubits != n_qubits:
                raise DimensionError(
                    f"Initial state must have {2 ** n_qubits} amplitudes "
                    f"({n_qubits} qubits), got {initial_state.dimension}"
                )
            self._state = initial_state
        else:
            self._state = QuantumState.zeros(n_qubits)

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def state(self) -> QuantumState:
        return self._state

    def get_state(self) -> QuantumState:
        return self._state

    @property
    def dimension(self) -> int:
        return 2 ** self.n_qubits

    def get_measurement_probabilities(self) -> ndarray:
        """Probability of every basis state; does not collapse."""
        return self._state.probabilities()

    def reset(self) -> QuantumCircuit:
        """Reinstall |00...0⟩."""
        self._state = QuantumState.zeros(self.n_qubits)
        logger.debug("Reset %d-qubit circuit", self.n_qubits)
        return self

    def clone(self) -> QuantumCircuit:
        """
        Copy with its own amplitudes, sharing the stateless services.

        The qubit-count guard already ran for this circuit and is not
        repeated.
        """
        twin = QuantumCircuit.__new__(QuantumCircuit)
        twin.n_qubits = self.n_qubits
        twin.ops = self.ops
        twin.measurement = self.measurement
        twin.limits = self.limits
        twin._state = QuantumState(self._state.amplitudes)
        return twin

    # =========================================================================
    # GATES
    # =========================================================================

    def apply_gate(self, gate: Gate, target: int) -> QuantumCircuit:
        """
        Apply a single-qubit gate to ``target``.

        The full operator I ⊗ ... ⊗ gate ⊗ ... ⊗ I is built by tensoring in
        qubit order and then multiplied into the state.
        """
        if gate.arity != 1:
            raise ArityError(
                f"Gate {gate.name} acts on {gate.arity} qubits; "
                f"use apply_multi_qubit_gate"
            )
        self._validate_qubit(target)

        full = self.ops.embed_single_qubit(gate.matrix, target, self.n_qubits)
        self._state = QuantumState(self.ops.multiply_vector(full, self._state.amplitudes))
        logger.debug("Applied %s to qubit %d", gate.name, target)
        return self

    def apply_multi_qubit_gate(self, gate: Gate, targets: Sequence[int]) -> QuantumCircuit:
        """
        Apply a k-qubit gate to ``targets`` (any order, not necessarily adjacent).

        The gate's first qubit acts on ``targets[0]``, its second on
        ``targets[1]``, and so on.
        """
        targets = list(targets)
        if len(targets) != gate.arity:
            raise ArityError(
                f"Gate {gate.name} requires {gate.arity} qubits, "
                f"but {len(targets)} provided"
            )
        for q in targets:
            self._validate_qubit(q)
        if len(set(targets)) != len(targets):
            raise ValidationError(f"Duplicate qubits in {targets}")

        full = self.ops.embed_operator(gate.matrix, targets, self.n_qubits)
        self._state = QuantumState(self.ops.multiply_vector(full, self._state.amplitudes))
        logger.debug("Applied %s to qubits %s", gate.name, targets)
        return self

    def apply_cnot(self, control: int, target: int) -> QuantumCircuit:
        """
        CNOT by direct amplitude swaps, O(2^n), no operator matrix.

        For every basis index with the control bit set, the amplitude is
        exchanged with the index whose target bit is flipped. Only the
        lower index of each pair (target bit 0) initiates the swap.
        """
        self._validate_qubit(control)
        self._validate_qubit(target)
        if control == target:
            raise ValidationError("Control and target qubits must be different")

        control_mask = 1 << (self.n_qubits - 1 - control)
        target_mask = 1 << (self.n_qubits - 1 - target)

        amplitudes = self._state.amplitudes
        idx = np.arange(self.dimension)
        lower = idx[((idx & control_mask) != 0) & ((idx & target_mask) == 0)]
        upper = lower ^ target_mask
        amplitudes[lower], amplitudes[upper] = amplitudes[upper], amplitudes[lower]

        self._state = QuantumState(amplitudes)
        logger.debug("Applied CNOT control=%d target=%d", control, target)
        return self

    # =========================================================================
    # MEASUREMENT
    # =========================================================================

    def measure_qubit(self, qubit: int) -> int:
        """Measure one qubit, collapse the register, return 0 or 1."""
        self._validate_qubit(qubit)
        outcome = self.measurement.measure_qubit(self._state, qubit)
        self._state = outcome.collapsed_state
        return outcome.result

    def measure_qubits(self, qubits: Sequence[int]) -> list[int]:
        """Measure several distinct qubits; results in ascending qubit order."""
        for q in qubits:
            self._validate_qubit(q)
        if len(set(qubits)) != len(qubits):
            raise ValidationError(f"Duplicate qubits in {list(qubits)}")
        outcome = self.measurement.measure_qubits(self._state, qubits)
        self._state = outcome.collapsed_state
        return outcome.results

    def measure_all(self) -> str:
        """Measure every qubit; returns the bitstring, qubit 0 first."""
        outcome = self.measurement.measure_all(self._state)
        self._state = outcome.collapsed_state
        return outcome.result

    # =========================================================================
    # INTERNAL
    # =========================================================================

    def _validate_qubit(self, qubit: int) -> None:
        if qubit < 0 or qubit >= self.n_qubits:
            raise RangeError(
                f"Qubit index {qubit} out of range [0, {self.n_qubits - 1}]"
            )

    def __repr__(self) -> str:
        return f"QuantumCircuit(qubits={self.n_qubits})"

    def __str__(self) -> str:
        return f"QuantumCircuit({self.n_qubits} qubits): {self._state}"
