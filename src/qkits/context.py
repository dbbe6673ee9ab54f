"""
Explicit composition root.

``QuantumContext`` is built once by the application and passed to whatever
needs to create qubits or circuits. It owns the shared stateless services;
nothing in the library constructs them behind the caller's back.

Example
-------
>>> from qkits import QuantumContext, SimulatorConfig, gates
>>> ctx = QuantumContext(SimulatorConfig(seed=7))
>>> qc = ctx.create_circuit(2)
>>> qc.apply_gate(gates.H(), 0).apply_cnot(0, 1)
>>> qc.measure_all() in ("00", "11")
True
"""

from __future__ import annotations

import logging
from typing import Callable

from qkits.circuit import QuantumCircuit
from qkits.config import SimulatorConfig
from qkits.core.linalg import MatrixOperations
from qkits.core.state import QuantumState
from qkits.measurement import MeasurementService, NumpyRandomSource, RandomSource
from qkits.qubit import Qubit

logger = logging.getLogger(__name__)

_QUBIT_KINDS: dict[str, Callable[[MeasurementService], Qubit]] = {
    "zero": Qubit.zero,
    "one": Qubit.one,
    "plus": Qubit.plus,
    "minus": Qubit.minus,
}


class QuantumContext:
    """
    Holds one ``MatrixOperations``, one random source and one
    ``MeasurementService`` and hands them to every qubit and circuit it
    creates.

    Parameters
    ----------
    config : SimulatorConfig, optional
        Limits, seed and log level. Defaults to ``SimulatorConfig()``.
    random_source : RandomSource, optional
        Overrides the seeded ``NumpyRandomSource`` built from ``config``.
    """

    def __init__(
        self,
        config: SimulatorConfig | None = None,
        random_source: RandomSource | None = None,
    ) -> None:
        self.config = config or SimulatorConfig()
        if self.config.log_level:
            logging.getLogger("qkits").setLevel(self.config.log_level.upper())
        self.ops = MatrixOperations()
        self.random_source = random_source or NumpyRandomSource(self.config.seed)
        self.measurement = MeasurementService(self.random_source)
        logger.debug("Created %r", self)

    def create_qubit(self, kind: str = "zero") -> Qubit:
        """New qubit in ``"zero"``, ``"one"``, ``"plus"`` or ``"minus"``."""
        try:
            factory = _QUBIT_KINDS[kind.lower()]
        except KeyError:
            raise KeyError(
                f"Unknown qubit state '{kind}'. Available: {sorted(_QUBIT_KINDS)}"
            ) from None
        return factory(self.measurement)

    def create_qubit_from_amplitudes(self, alpha, beta) -> Qubit:
        return Qubit.from_amplitudes(alpha, beta, self.measurement)

    def create_circuit(
        self, n_qubits: int, initial_state: QuantumState | None = None
    ) -> QuantumCircuit:
        return QuantumCircuit(
            n_qubits,
            self.ops,
            self.measurement,
            initial_state=initial_state,
            limits=self.config.limits,
        )

    def __repr__(self) -> str:
        return (
            f"QuantumContext(limits={self.config.limits}, "
            f"random_source={self.random_source!r})"
        )
