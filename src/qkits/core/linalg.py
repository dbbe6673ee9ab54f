"""
Dense matrix/vector algebra on complex128 arrays.

The functions here are pure; ``MatrixOperations`` bundles them into a
stateless service object so circuits can hold (and clones can share) a
reference to it.

Qubit ordering is big-endian throughout: qubit 0 is the most significant
bit of a basis index, so ``tensor_product(A, B)`` puts ``A`` on qubit 0.
"""

from __future__ import annotations

from functools import reduce
from typing import Sequence

import numpy as np
from numpy import ndarray

from qkits.core.complex_number import Complex
from qkits.exceptions import DimensionError, RangeError, ValidationError

# Type alias
Matrix = ndarray

DEFAULT_TOLERANCE = 1e-10


def as_matrix(data) -> Matrix:
    """
    Coerce ``data`` to a 2-D complex128 array.

    Accepts ndarrays and nested sequences of numbers or ``Complex`` values.
    """
    if isinstance(data, ndarray):
        m = data.astype(np.complex128, copy=False)
    else:
        m = np.array([[complex(x) for x in row] for row in data], dtype=np.complex128)
    if m.ndim != 2 or m.shape[0] == 0 or m.shape[1] == 0:
        raise DimensionError(f"Expected a non-empty 2-D matrix, got shape {m.shape}")
    return m


def as_vector(data) -> ndarray:
    """Coerce ``data`` to a 1-D complex128 array."""
    if isinstance(data, ndarray):
        v = data.astype(np.complex128, copy=False)
    else:
        v = np.array([complex(x) for x in data], dtype=np.complex128)
    if v.ndim != 1:
        raise DimensionError(f"Expected a 1-D vector, got shape {v.shape}")
    return v


def multiply(a, b) -> Matrix:
    """Matrix product ``A @ B``."""
    a, b = as_matrix(a), as_matrix(b)
    if a.shape[1] != b.shape[0]:
        raise DimensionError(
            f"Cannot multiply matrices: {a.shape[0]}x{a.shape[1]} and "
            f"{b.shape[0]}x{b.shape[1]}"
        )
    return a @ b


def multiply_vector(matrix, vector) -> ndarray:
    """Matrix-vector product ``M @ v``."""
    m, v = as_matrix(matrix), as_vector(vector)
    if m.shape[1] != v.shape[0]:
        raise DimensionError(
            f"Cannot multiply matrix and vector: matrix is "
            f"{m.shape[0]}x{m.shape[1]}, vector length is {v.shape[0]}"
        )
    return m @ v


def tensor_product(*matrices) -> Matrix:
    """
    Kronecker product ``A ⊗ B ⊗ ...``.

    For two operands the entry at ``(i*rowsB + k, j*colsB + l)`` is
    ``A[i, j] * B[k, l]``.
    """
    if not matrices:
        raise DimensionError("Need at least one matrix")
    return reduce(np.kron, (as_matrix(m) for m in matrices))


def conjugate_transpose(matrix) -> Matrix:
    """Adjoint ``M†``."""
    return as_matrix(matrix).conj().T


def identity(size: int) -> Matrix:
    if size < 1:
        raise DimensionError(f"Identity size must be positive, got {size}")
    return np.eye(size, dtype=np.complex128)


def is_unitary(matrix, tol: float = DEFAULT_TOLERANCE) -> bool:
    """Check ``M @ M† == I`` entrywise within ``tol``; False if not square."""
    m = as_matrix(matrix)
    if m.shape[0] != m.shape[1]:
        return False
    diff = m @ m.conj().T - np.eye(m.shape[0])
    return bool(np.all(np.abs(diff.real) < tol) and np.all(np.abs(diff.imag) < tol))


def determinant_2x2(matrix) -> complex:
    m = as_matrix(matrix)
    if m.shape != (2, 2):
        raise DimensionError(
            f"Determinant is only implemented for 2x2 matrices, got {m.shape}"
        )
    return complex(m[0, 0] * m[1, 1] - m[0, 1] * m[1, 0])


def from_numbers(numbers: Sequence[Sequence[float]]) -> Matrix:
    """Build a complex matrix from real entries."""
    return as_matrix(np.asarray(numbers, dtype=np.float64))


def to_numbers(matrix) -> list[list[float]]:
    """Real parts of ``matrix`` as nested lists."""
    return as_matrix(matrix).real.tolist()


def format_matrix(matrix, label: str | None = None) -> str:
    """Render rows as tab-separated entries, optionally under a label."""
    lines = [f"{label}:"] if label else []
    for row in as_matrix(matrix):
        lines.append("\t".join(str(Complex.from_complex(z)) for z in row))
    return "\n".join(lines)


def embed_single_qubit(gate, target: int, n_qubits: int) -> Matrix:
    """
    Full 2^n x 2^n operator for a 2x2 ``gate`` acting on ``target``.

    Result: I ⊗ ... ⊗ gate ⊗ ... ⊗ I, with ``gate`` at position ``target``.
    """
    gate = as_matrix(gate)
    if gate.shape != (2, 2):
        raise DimensionError(f"Single-qubit gate must be 2x2, got {gate.shape}")
    if target < 0 or target >= n_qubits:
        raise RangeError(f"Qubit index {target} out of range [0, {n_qubits - 1}]")

    eye = identity(2)
    factors = [gate if q == target else eye for q in range(n_qubits)]
    return tensor_product(*factors)


def embed_operator(gate, targets: Sequence[int], n_qubits: int) -> Matrix:
    """
    Full 2^n x 2^n operator for a k-qubit ``gate`` acting on ``targets``.

    Targets may be in any order and need not be adjacent; the gate's
    qubit ``j`` (its j-th most significant index bit) acts on circuit qubit
    ``targets[j]``. Built by index mapping rather than by tensoring and
    permuting:

        U[r, c] = gate[sub(r), sub(c)]  if rest(r) == rest(c) else 0

    where ``sub`` extracts the target bits and ``rest`` clears them.
    """
    gate = as_matrix(gate)
    k = len(targets)
    if gate.shape != (2 ** k, 2 ** k):
        raise DimensionError(
            f"Gate of shape {gate.shape} cannot act on {k} qubit(s)"
        )
    for t in targets:
        if t < 0 or t >= n_qubits:
            raise RangeError(f"Qubit index {t} out of range [0, {n_qubits - 1}]")
    if len(set(targets)) != k:
        raise ValidationError(f"Duplicate qubits in {list(targets)}")

    idx = np.arange(2 ** n_qubits)
    sub = np.zeros_like(idx)
    rest = idx.copy()
    for j, t in enumerate(targets):
        shift = n_qubits - 1 - t
        bit = (idx >> shift) & 1
        sub |= bit << (k - 1 - j)
        rest &= ~(1 << shift)

    same_rest = rest[:, None] == rest[None, :]
    return np.where(same_rest, gate[np.ix_(sub, sub)], 0).astype(np.complex128)


class MatrixOperations:
    """
    Stateless matrix-algebra service.

    Example
    -------
    >>> ops = MatrixOperations()
    >>> ops.tensor_product(ops.identity(2), ops.identity(2)).shape
    (4, 4)
    """

    multiply = staticmethod(multiply)
    multiply_vector = staticmethod(multiply_vector)
    tensor_product = staticmethod(tensor_product)
    conjugate_transpose = staticmethod(conjugate_transpose)
    identity = staticmethod(identity)
    is_unitary = staticmethod(is_unitary)
    determinant_2x2 = staticmethod(determinant_2x2)
    from_numbers = staticmethod(from_numbers)
    to_numbers = staticmethod(to_numbers)
    format_matrix = staticmethod(format_matrix)
    embed_single_qubit = staticmethod(embed_single_qubit)
    embed_operator = staticmethod(embed_operator)

    def __repr__(self) -> str:
        return "MatrixOperations()"
