"""
Quantum gate definitions.

A ``Gate`` is an immutable value: a kind tag, a name, a unitary matrix and
an arity. The kind is one of a closed set of standard variants, or
``GENERIC`` for adjoints and user-supplied operators.

Gate categories:
    - Single-qubit: I, X, Y, Z, H, S, T
    - Rotations: Rx, Ry, Rz (angle must be finite)
    - Two-qubit: CNOT, CZ, SWAP
    - Custom: any 2^k x 2^k matrix via ``custom``
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from enum import Enum

import numpy as np

from qkits.core import linalg
from qkits.core.linalg import Matrix
from qkits.core.state import QuantumState
from qkits.exceptions import ArityError, DimensionError, ValidationError

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
_SQRT2_INV = 1.0 / np.sqrt(2.0)


class GateKind(Enum):
    I = "I"
    X = "X"
    Y = "Y"
    Z = "Z"
    H = "H"
    S = "S"
    T = "T"
    RX = "Rx"
    RY = "Ry"
    RZ = "Rz"
    CNOT = "CNOT"
    CZ = "CZ"
    SWAP = "SWAP"
    GENERIC = "GENERIC"


ROTATION_KINDS = frozenset({GateKind.RX, GateKind.RY, GateKind.RZ})

# ---------------------------------------------------------------------------
# Fixed matrices
# ---------------------------------------------------------------------------

_FIXED_MATRICES: dict[GateKind, Matrix] = {
    GateKind.I: np.eye(2, dtype=np.complex128),
    GateKind.X: np.array([[0, 1], [1, 0]], dtype=np.complex128),
    GateKind.Y: np.array([[0, -1j], [1j, 0]], dtype=np.complex128),
    GateKind.Z: np.array([[1, 0], [0, -1]], dtype=np.complex128),
    GateKind.H: np.array([[1, 1], [1, -1]], dtype=np.complex128) * _SQRT2_INV,
    GateKind.S: np.array([[1, 0], [0, 1j]], dtype=np.complex128),
    GateKind.T: np.array([[1, 0], [0, np.exp(1j * np.pi / 4)]], dtype=np.complex128),
    GateKind.CNOT: np.array(
        [[1, 0, 0, 0], [0, 1, 0, 0], [0, 0, 0, 1], [0, 0, 1, 0]],
        dtype=np.complex128,
    ),
    GateKind.CZ: np.diag([1, 1, 1, -1]).astype(np.complex128),
    GateKind.SWAP: np.array(
        [[1, 0, 0, 0], [0, 0, 1, 0], [0, 1, 0, 0], [0, 0, 0, 1]],
        dtype=np.complex128,
    ),
}


def _rotation_matrix(kind: GateKind, theta: float) -> Matrix:
    c = np.cos(theta / 2)
    s = np.sin(theta / 2)
    if kind is GateKind.RX:
        return np.array([[c, -1j * s], [-1j * s, c]], dtype=np.complex128)
    if kind is GateKind.RY:
        return np.array([[c, -s], [s, c]], dtype=np.complex128)
    if kind is GateKind.RZ:
        return np.array(
            [[np.exp(-1j * theta / 2), 0], [0, np.exp(1j * theta / 2)]],
            dtype=np.complex128,
        )
    raise ValueError(f"{kind} is not a rotation")


def _validate_angle(theta) -> float:
    if isinstance(theta, bool) or not isinstance(theta, numbers.Real):
        raise ValidationError(f"Rotation angle must be a real number, got {theta!r}")
    theta = float(theta)
    if not math.isfinite(theta):
        raise ValidationError(f"Rotation angle must be finite, got {theta}")
    return theta


def standard_matrix(kind: GateKind, angle: float | None = None) -> Matrix:
    """Matrix of a standard gate variant (copy)."""
    if kind in ROTATION_KINDS:
        if angle is None:
            raise ValidationError(f"{kind.value} requires an angle")
        return _rotation_matrix(kind, _validate_angle(angle))
    if kind is GateKind.GENERIC:
        raise ValidationError("Generic gates carry their own matrix")
    return _FIXED_MATRICES[kind].copy()


# ---------------------------------------------------------------------------
# Gate value
# ---------------------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class Gate:
    """
    Immutable unitary operator on ``arity`` qubits.

    Attributes
    ----------
    kind : GateKind
        Variant tag.
    name : str
        Display name, e.g. ``"H"``, ``"Rx(0.5)"``, ``"X†"``.
    matrix : ndarray
        Read-only 2^arity x 2^arity complex128 matrix.
    arity : int
        Number of qubits acted on.
    angle : float | None
        Rotation angle for Rx/Ry/Rz, otherwise None.

    Example
    -------
    >>> from qkits import gates
    >>> gates.X().apply(QuantumState.zero()).probabilities()
    array([0., 1.])
    """

    kind: GateKind
    name: str
    matrix: Matrix
    arity: int
    angle: float | None = None

    def __post_init__(self) -> None:
        m = np.array(linalg.as_matrix(self.matrix), dtype=np.complex128, copy=True)
        dim = 2 ** self.arity if self.arity >= 1 else 0
        if m.shape != (dim, dim):
            raise DimensionError(
                f"Gate {self.name} of arity {self.arity} needs a {dim}x{dim} "
                f"matrix, got {m.shape}"
            )
        m.setflags(write=False)
        object.__setattr__(self, "matrix", m)

    @classmethod
    def standard(cls, kind: GateKind, angle: float | None = None) -> Gate:
        """Build one of the standard variants."""
        matrix = standard_matrix(kind, angle)
        if kind in ROTATION_KINDS:
            angle = float(angle)
            name = f"{kind.value}({angle:g})"
        else:
            angle = None
            name = kind.value
        arity = 2 if matrix.shape[0] == 4 else 1
        return cls(kind, name, matrix, arity, angle)

    @classmethod
    def generic(cls, name: str, matrix, arity: int | None = None) -> Gate:
        """Build a generic gate; arity defaults to log2 of the matrix size."""
        m = linalg.as_matrix(matrix)
        if arity is None:
            size = m.shape[0]
            if size < 2 or size & (size - 1):
                raise DimensionError(
                    f"Gate matrix size must be a power of 2, got {m.shape}"
                )
            arity = size.bit_length() - 1
        return cls(GateKind.GENERIC, name, m, arity)

    def apply(self, state: QuantumState) -> QuantumState:
        """Return ``U|ψ⟩``; the state must have exactly ``arity`` qubits."""
        if state.n_qubits != self.arity:
            raise ArityError(
                f"Gate {self.name} requires {self.arity} qubit(s), "
                f"but state has {state.n_qubits}"
            )
        return QuantumState(linalg.multiply_vector(self.matrix, state.amplitudes))

    def is_unitary(self, tol: float = linalg.DEFAULT_TOLERANCE) -> bool:
        return linalg.is_unitary(self.matrix, tol)

    def adjoint(self) -> Gate:
        """Conjugate transpose as a generic gate named ``<name>†``."""
        return Gate.generic(
            f"{self.name}†", linalg.conjugate_transpose(self.matrix), self.arity
        )

    def __repr__(self) -> str:
        return f"Gate(name='{self.name}', arity={self.arity})"


# ---------------------------------------------------------------------------
# Named constructors
# ---------------------------------------------------------------------------

def I() -> Gate:
    """Identity gate."""
    return Gate.standard(GateKind.I)


def X() -> Gate:
    """Pauli-X (NOT) gate."""
    return Gate.standard(GateKind.X)


def Y() -> Gate:
    """Pauli-Y gate."""
    return Gate.standard(GateKind.Y)


def Z() -> Gate:
    """Pauli-Z gate."""
    return Gate.standard(GateKind.Z)


def H() -> Gate:
    """Hadamard gate."""
    return Gate.standard(GateKind.H)


def S() -> Gate:
    """S (phase) gate: sqrt(Z)."""
    return Gate.standard(GateKind.S)


def T() -> Gate:
    """T gate: sqrt(S)."""
    return Gate.standard(GateKind.T)


def Rx(theta: float) -> Gate:
    """Rotation around X-axis by angle theta."""
    return Gate.standard(GateKind.RX, theta)


def Ry(theta: float) -> Gate:
    """Rotation around Y-axis by angle theta."""
    return Gate.standard(GateKind.RY, theta)


def Rz(theta: float) -> Gate:
    """Rotation around Z-axis by angle theta."""
    return Gate.standard(GateKind.RZ, theta)


def CNOT() -> Gate:
    """Controlled-NOT gate; control is the gate's first qubit."""
    return Gate.standard(GateKind.CNOT)


def CZ() -> Gate:
    """Controlled-Z gate."""
    return Gate.standard(GateKind.CZ)


def SWAP() -> Gate:
    """SWAP gate."""
    return Gate.standard(GateKind.SWAP)


def custom(name: str, matrix, arity: int | None = None) -> Gate:
    """Generic gate from an arbitrary square matrix."""
    return Gate.generic(name, matrix, arity)


# ---------------------------------------------------------------------------
# Gate registry
# ---------------------------------------------------------------------------

GATE_REGISTRY: dict[str, dict] = {
    "i": {"factory": I, "n_qubits": 1, "n_params": 0},
    "x": {"factory": X, "n_qubits": 1, "n_params": 0},
    "y": {"factory": Y, "n_qubits": 1, "n_params": 0},
    "z": {"factory": Z, "n_qubits": 1, "n_params": 0},
    "h": {"factory": H, "n_qubits": 1, "n_params": 0},
    "s": {"factory": S, "n_qubits": 1, "n_params": 0},
    "t": {"factory": T, "n_qubits": 1, "n_params": 0},
    "rx": {"factory": Rx, "n_qubits": 1, "n_params": 1},
    "ry": {"factory": Ry, "n_qubits": 1, "n_params": 1},
    "rz": {"factory": Rz, "n_qubits": 1, "n_params": 1},
    "cnot": {"factory": CNOT, "n_qubits": 2, "n_params": 0},
    "cx": {"factory": CNOT, "n_qubits": 2, "n_params": 0},
    "cz": {"factory": CZ, "n_qubits": 2, "n_params": 0},
    "swap": {"factory": SWAP, "n_qubits": 2, "n_params": 0},
}


def get_gate(name: str, *params: float) -> Gate:
    """
    Look up a standard gate by name, with optional parameters.

    Parameters
    ----------
    name : str
        Gate name (case-insensitive).
    params : float
        Angle for rotation gates.

    Returns
    -------
    Gate

    Raises
    ------
    KeyError
        If gate name is not found.
    ArityError
        If wrong number of parameters provided.
    """
    key = name.lower()
    if key not in GATE_REGISTRY:
        raise KeyError(f"Unknown gate: '{name}'. Available: {sorted(GATE_REGISTRY)}")

    info = GATE_REGISTRY[key]
    if len(params) != info["n_params"]:
        raise ArityError(
            f"Gate '{name}' requires {info['n_params']} parameter(s), got {len(params)}"
        )
    return info["factory"](*params)
