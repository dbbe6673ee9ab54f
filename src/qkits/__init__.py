"""
qkits: a small dense statevector quantum simulator.

Features:
- Immutable, always-normalized quantum states
- Standard gate set (Pauli, H, S, T, rotations, CNOT, CZ, SWAP) plus custom gates
- Multi-qubit circuits with a fast direct CNOT path
- Probabilistic measurement with collapse and injectable randomness

Quick Start:
    >>> from qkits import QuantumContext, gates
    >>> ctx = QuantumContext()
    >>> qc = ctx.create_circuit(2)
    >>> qc.apply_gate(gates.H(), 0).apply_cnot(0, 1)
    >>> print(qc.get_measurement_probabilities())  # [0.5 0.  0.  0.5]
"""
import logging

__version__ = "1.0.0"

# Core components
from .core import Complex, MatrixOperations, QuantumState
from .gates import Gate, GateKind
from .measurement import MeasurementService, NumpyRandomSource
from .qubit import Qubit
from .circuit import QuantumCircuit
from .config import QubitLimits, SimulatorConfig
from .context import QuantumContext
from .logging_config import setup_logging
from .exceptions import (
    QuantumError,
    DimensionError,
    NormalizationError,
    RangeError,
    ArityError,
    ValidationError,
    CapacityError,
)
from . import gates

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Core
    'Complex',
    'MatrixOperations',
    'QuantumState',
    'Gate',
    'GateKind',
    'gates',
    'MeasurementService',
    'NumpyRandomSource',
    'Qubit',
    'QuantumCircuit',
    # Composition
    'QubitLimits',
    'SimulatorConfig',
    'QuantumContext',
    'setup_logging',
    # Errors
    'QuantumError',
    'DimensionError',
    'NormalizationError',
    'RangeError',
    'ArityError',
    'ValidationError',
    'CapacityError',
]
