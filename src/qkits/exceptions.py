"""
Exception hierarchy for the simulator.

Every error is a synchronous programmer or configuration fault. All of
them derive from ``ValueError`` so callers that only care about bad input
can keep catching the builtin.
"""


class QuantumError(ValueError):
    """Base class for all simulator errors."""


class DimensionError(QuantumError):
    """Amplitude count is not a power of two, or shapes do not line up."""


class NormalizationError(QuantumError):
    """A state vector's norm deviates from 1 beyond tolerance."""


class RangeError(QuantumError):
    """Qubit or basis index out of range, or non-positive qubit count."""


class ArityError(QuantumError):
    """Gate arity does not match the targeted qubits or state."""


class ValidationError(QuantumError):
    """Invalid argument value (non-finite angle, duplicate qubits, ...)."""


class CapacityError(QuantumError):
    """Requested qubit count exceeds the configured hard limit."""
