"""Tests for gate definitions."""

import numpy as np
import pytest

from qkits import ArityError, DimensionError, GateKind, QuantumState, ValidationError
from qkits import gates as g


# ---------------------------------------------------------------------------
# Unitarity - every gate must satisfy U U† = I
# ---------------------------------------------------------------------------

FIXED_GATES = [g.I, g.X, g.Y, g.Z, g.H, g.S, g.T, g.CNOT, g.CZ, g.SWAP]


@pytest.mark.parametrize("factory", FIXED_GATES)
def test_fixed_gate_unitary(factory):
    gate = factory()
    assert gate.is_unitary()
    dim = gate.matrix.shape[0]
    np.testing.assert_allclose(gate.matrix @ gate.matrix.conj().T, np.eye(dim), atol=1e-10)


@pytest.mark.parametrize("factory", [g.Rx, g.Ry, g.Rz])
@pytest.mark.parametrize("theta", [0, 0.5, np.pi, 2 * np.pi, -1.3, 123.456])
def test_rotation_unitary(factory, theta):
    assert factory(theta).is_unitary()


@pytest.mark.parametrize("factory,arity", [
    (g.X, 1), (g.H, 1), (g.T, 1), (g.CNOT, 2), (g.CZ, 2), (g.SWAP, 2),
])
def test_arity(factory, arity):
    gate = factory()
    assert gate.arity == arity
    assert gate.matrix.shape == (2 ** arity, 2 ** arity)


# ---------------------------------------------------------------------------
# Matrices
# ---------------------------------------------------------------------------

def test_standard_matrices():
    np.testing.assert_allclose(g.Y().matrix, [[0, -1j], [1j, 0]])
    np.testing.assert_allclose(g.S().matrix, [[1, 0], [0, 1j]])
    np.testing.assert_allclose(g.T().matrix, [[1, 0], [0, np.exp(1j * np.pi / 4)]])
    np.testing.assert_allclose(g.CZ().matrix, np.diag([1, 1, 1, -1]))


def test_rotation_matrices():
    theta = 0.7
    c, s = np.cos(theta / 2), np.sin(theta / 2)
    np.testing.assert_allclose(g.Rx(theta).matrix, [[c, -1j * s], [-1j * s, c]])
    np.testing.assert_allclose(g.Ry(theta).matrix, [[c, -s], [s, c]])
    np.testing.assert_allclose(
        g.Rz(theta).matrix, np.diag([np.exp(-1j * theta / 2), np.exp(1j * theta / 2)])
    )


def test_matrix_is_read_only():
    gate = g.X()
    with pytest.raises(ValueError):
        gate.matrix[0, 0] = 5


def test_kind_and_name():
    assert g.H().kind is GateKind.H
    assert g.H().name == "H"
    rx = g.Rx(0.5)
    assert rx.kind is GateKind.RX
    assert rx.angle == 0.5
    assert rx.name == "Rx(0.5)"


@pytest.mark.parametrize("factory", [g.Rx, g.Ry, g.Rz])
@pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf")])
def test_rotation_rejects_non_finite(factory, bad):
    with pytest.raises(ValidationError):
        factory(bad)


def test_rotation_rejects_non_number():
    with pytest.raises(ValidationError):
        g.Rx("pi")


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------

def test_hadamard_on_zero():
    state = g.H().apply(QuantumState.zero())
    np.testing.assert_allclose(state.probabilities(), [0.5, 0.5], atol=1e-12)


def test_x_on_zero():
    state = g.X().apply(QuantumState.zero())
    assert state.probability(1) == pytest.approx(1.0)


def test_cnot_on_basis():
    state = g.CNOT().apply(QuantumState.basis(2, 2))  # |10⟩
    assert state.probability(3) == pytest.approx(1.0)  # |11⟩


def test_swap_on_basis():
    state = g.SWAP().apply(QuantumState.basis(2, 1))  # |01⟩
    assert state.probability(2) == pytest.approx(1.0)  # |10⟩


def test_apply_arity_mismatch():
    with pytest.raises(ArityError):
        g.X().apply(QuantumState.zeros(2))
    with pytest.raises(ArityError):
        g.CNOT().apply(QuantumState.zero())


# ---------------------------------------------------------------------------
# Adjoint
# ---------------------------------------------------------------------------

def test_adjoint_is_generic_with_dagger_name():
    adj = g.S().adjoint()
    assert adj.kind is GateKind.GENERIC
    assert adj.name == "S†"
    np.testing.assert_allclose(adj.matrix, [[1, 0], [0, -1j]])


ROUND_TRIP_GATES = [
    g.X(), g.Y(), g.Z(), g.H(), g.S(), g.T(), g.I(),
    g.Rx(0.3), g.Ry(-2.1), g.Rz(4.0),
]


@pytest.mark.parametrize("gate", ROUND_TRIP_GATES, ids=lambda gate: gate.name)
def test_adjoint_round_trip(gate):
    rng = np.random.default_rng(7)
    v = rng.normal(size=2) + 1j * rng.normal(size=2)
    psi = QuantumState(v / np.linalg.norm(v))
    assert gate.adjoint().apply(gate.apply(psi)).equals(psi)


@pytest.mark.parametrize("factory", [g.CNOT, g.CZ, g.SWAP])
def test_two_qubit_adjoint_round_trip(factory):
    gate = factory()
    psi = QuantumState(np.full(4, 0.5))
    assert gate.adjoint().apply(gate.apply(psi)).equals(psi)


# ---------------------------------------------------------------------------
# Generic gates and registry
# ---------------------------------------------------------------------------

def test_custom_gate_infers_arity():
    gate = g.custom("iSWAP", [[1, 0, 0, 0], [0, 0, 1j, 0], [0, 1j, 0, 0], [0, 0, 0, 1]])
    assert gate.arity == 2
    assert gate.is_unitary()


def test_custom_gate_three_qubits():
    gate = g.custom("I3", np.eye(8))
    assert gate.arity == 3


def test_custom_gate_bad_shape():
    with pytest.raises(DimensionError):
        g.custom("bad", np.eye(3))
    with pytest.raises(DimensionError):
        g.custom("bad", np.eye(4), arity=1)


def test_non_unitary_custom_gate_reports_false():
    assert not g.custom("shear", [[1, 1], [0, 1]]).is_unitary()


@pytest.mark.parametrize("name,kind", [
    ("h", GateKind.H), ("X", GateKind.X), ("cx", GateKind.CNOT), ("SWAP", GateKind.SWAP),
])
def test_get_gate(name, kind):
    assert g.get_gate(name).kind is kind


def test_get_gate_with_param():
    assert g.get_gate("ry", 0.25).angle == 0.25


def test_get_gate_errors():
    with pytest.raises(KeyError):
        g.get_gate("toffoli")
    with pytest.raises(ArityError):
        g.get_gate("rx")
    with pytest.raises(ArityError):
        g.get_gate("h", 1.0)
