"""
Immutable, normalized quantum state vectors.

Memory usage: 2^n * 16 bytes (complex128)
- 10 qubits: 16 KB
- 16 qubits: 1 MB
- 20 qubits: 16 MB
- 24 qubits: 256 MB
"""

from __future__ import annotations

import numpy as np
from numpy import ndarray

from qkits.core.complex_number import Complex
from qkits.core.linalg import as_vector
from qkits.exceptions import DimensionError, NormalizationError, RangeError

TOLERANCE = 1e-10

_SQRT2_INV = 1.0 / np.sqrt(2.0)


def _is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


class QuantumState:
    """
    Normalized amplitude vector of length 2^n.

    Both invariants (power-of-two length, unit norm within 1e-10) are
    checked on construction. Instances are never modified afterwards;
    every transformation returns a new state.

    Parameters
    ----------
    amplitudes : array_like
        Complex amplitudes. Accepts ndarrays and sequences of numbers or
        ``Complex`` values. The data is copied.

    Example
    -------
    >>> state = QuantumState([1, 0])
    >>> state.probabilities()
    array([1., 0.])
    """

    __slots__ = ("_data", "_n_qubits")

    def __init__(self, amplitudes) -> None:
        data = np.array(as_vector(amplitudes), dtype=np.complex128, copy=True)
        if not _is_power_of_two(len(data)):
            raise DimensionError(
                f"Quantum state must have a power of 2 number of amplitudes, "
                f"got {len(data)}"
            )
        norm = float(np.linalg.norm(data))
        if not np.isfinite(norm) or abs(norm - 1.0) > TOLERANCE:
            raise NormalizationError(f"Quantum state is not normalized. Norm: {norm}")

        data.setflags(write=False)
        self._data = data
        self._n_qubits = len(data).bit_length() - 1

    # -- Factories ------------------------------------------------------------

    @classmethod
    def zero(cls) -> QuantumState:
        """|0⟩"""
        return cls([1, 0])

    @classmethod
    def one(cls) -> QuantumState:
        """|1⟩"""
        return cls([0, 1])

    @classmethod
    def plus(cls) -> QuantumState:
        """|+⟩ = (|0⟩ + |1⟩)/√2"""
        return cls([_SQRT2_INV, _SQRT2_INV])

    @classmethod
    def minus(cls) -> QuantumState:
        """|−⟩ = (|0⟩ − |1⟩)/√2"""
        return cls([_SQRT2_INV, -_SQRT2_INV])

    @classmethod
    def basis(cls, n_qubits: int, index: int) -> QuantumState:
        """Computational basis state |index⟩ on ``n_qubits`` qubits."""
        if n_qubits < 1:
            raise RangeError(f"Need at least 1 qubit, got {n_qubits}")
        dim = 2 ** n_qubits
        if index < 0 or index >= dim:
            raise RangeError(f"Basis index {index} out of range [0, {dim - 1}]")
        data = np.zeros(dim, dtype=np.complex128)
        data[index] = 1.0
        return cls(data)

    @classmethod
    def zeros(cls, n_qubits: int) -> QuantumState:
        """|00...0⟩"""
        return cls.basis(n_qubits, 0)

    @classmethod
    def from_real(cls, values) -> QuantumState:
        return cls(np.asarray(values, dtype=np.float64))

    # -- Queries --------------------------------------------------------------

    @property
    def n_qubits(self) -> int:
        return self._n_qubits

    @property
    def dimension(self) -> int:
        return len(self._data)

    @property
    def amplitudes(self) -> ndarray:
        """Copy of the amplitude vector."""
        return self._data.copy()

    def amplitude(self, index: int) -> Complex:
        self._check_index(index)
        return Complex.from_complex(self._data[index])

    def probability(self, index: int) -> float:
        """P(i) = |amplitude_i|²"""
        self._check_index(index)
        return float(np.abs(self._data[index]) ** 2)

    def probabilities(self) -> ndarray:
        """All basis-state probabilities; sums to 1."""
        return np.abs(self._data) ** 2

    def norm(self) -> float:
        return float(np.linalg.norm(self._data))

    def normalize(self) -> QuantumState:
        """Rescale by 1/‖v‖."""
        norm = self.norm()
        if norm == 0:
            raise NormalizationError("Cannot normalize zero state")
        return QuantumState(self._data / norm)

    def equals(self, other: QuantumState, tolerance: float = TOLERANCE) -> bool:
        """Pairwise amplitude comparison within ``tolerance``."""
        if self.dimension != other.dimension:
            return False
        diff = self._data - other._data
        return bool(
            np.all(np.abs(diff.real) < tolerance)
            and np.all(np.abs(diff.imag) < tolerance)
        )

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= len(self._data):
            raise RangeError(
                f"Index {index} out of bounds for quantum state of "
                f"dimension {len(self._data)}"
            )

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"QuantumState(n_qubits={self._n_qubits}, dim={len(self._data)})"

    def __str__(self) -> str:
        """Dirac notation, e.g. ``0.7071|00⟩ + 0.7071|11⟩``."""
        terms = []
        for i, amp in enumerate(self._data):
            if np.abs(amp) > TOLERANCE:
                binary = format(i, f"0{self._n_qubits}b")
                terms.append(f"{Complex.from_complex(amp)}|{binary}⟩")
        return " + ".join(terms).replace("+ -", "- ") or "0"
