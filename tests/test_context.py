"""Tests for the composition root, configuration and logging setup."""

import logging

import numpy as np
import pytest

from qkits import (
    CapacityError,
    QuantumContext,
    QuantumState,
    QubitLimits,
    SimulatorConfig,
    ValidationError,
    gates,
    setup_logging,
)


# ---------------------------------------------------------------------------
# QubitLimits / SimulatorConfig
# ---------------------------------------------------------------------------

class TestConfig:

    def test_defaults(self):
        config = SimulatorConfig()
        assert config.limits == QubitLimits(16, 24)
        assert config.seed is None
        assert config.log_level is None

    @pytest.mark.parametrize("warn,cap", [(0, 24), (16, 0), (20, 10)])
    def test_invalid_limits(self, warn, cap):
        with pytest.raises(ValidationError):
            QubitLimits(warn_above=warn, max_qubits=cap)

    def test_check_silent_at_threshold(self, recwarn):
        QubitLimits(warn_above=3, max_qubits=5).check(3)
        assert len(recwarn) == 0

    def test_check_warns_and_logs(self, caplog):
        with caplog.at_level(logging.WARNING, logger="qkits"):
            with pytest.warns(ResourceWarning, match="MiB"):
                QubitLimits(warn_above=3, max_qubits=5).check(4)
        assert any("4-qubit circuit" in r.getMessage() for r in caplog.records)

    def test_check_rejects(self):
        with pytest.raises(CapacityError):
            QubitLimits(warn_above=3, max_qubits=5).check(6)

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("QKITS_WARN_QUBITS", "4")
        monkeypatch.setenv("QKITS_MAX_QUBITS", "6")
        monkeypatch.setenv("QKITS_SEED", "123")
        monkeypatch.setenv("QKITS_LOG_LEVEL", "DEBUG")
        config = SimulatorConfig.from_env()
        assert config.limits == QubitLimits(4, 6)
        assert config.seed == 123
        assert config.log_level == "DEBUG"

    def test_from_env_defaults(self, monkeypatch):
        for name in ("QKITS_WARN_QUBITS", "QKITS_MAX_QUBITS", "QKITS_SEED", "QKITS_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)
        assert SimulatorConfig.from_env() == SimulatorConfig()


# ---------------------------------------------------------------------------
# QuantumContext
# ---------------------------------------------------------------------------

class TestContext:

    @pytest.mark.parametrize("kind,p0", [
        ("zero", 1.0), ("one", 0.0), ("plus", 0.5), ("minus", 0.5), ("PLUS", 0.5),
    ])
    def test_create_qubit(self, kind, p0):
        q = QuantumContext().create_qubit(kind)
        assert q.probability_zero == pytest.approx(p0)

    def test_create_qubit_unknown(self):
        with pytest.raises(KeyError):
            QuantumContext().create_qubit("up")

    def test_create_qubit_from_amplitudes(self):
        q = QuantumContext().create_qubit_from_amplitudes(0.6, -0.8)
        assert q.probability_one == pytest.approx(0.64)

    def test_services_are_shared(self):
        ctx = QuantumContext()
        qc = ctx.create_circuit(2)
        q = ctx.create_qubit()
        assert qc.measurement is ctx.measurement
        assert q.measurement is ctx.measurement
        assert qc.ops is ctx.ops

    def test_create_circuit_with_initial_state(self):
        qc = QuantumContext().create_circuit(2, QuantumState.basis(2, 1))
        assert qc.measure_all() == "01"

    def test_circuit_uses_configured_limits(self):
        ctx = QuantumContext(SimulatorConfig(limits=QubitLimits(warn_above=2, max_qubits=3)))
        with pytest.warns(ResourceWarning):
            ctx.create_circuit(3)
        with pytest.raises(CapacityError):
            ctx.create_circuit(4)

    def test_seed_makes_runs_reproducible(self):
        def run(seed):
            ctx = QuantumContext(SimulatorConfig(seed=seed))
            qc = ctx.create_circuit(3)
            for q in range(3):
                qc.apply_gate(gates.H(), q)
            return [qc.clone().measure_all() for _ in range(30)]

        assert run(9) == run(9)

    def test_injected_random_source(self, scripted):
        source = scripted(0.99)
        ctx = QuantumContext(random_source=source)
        assert ctx.measurement.random_source is source
        assert ctx.create_qubit("plus").measure() == 1
        assert source.calls == 1

    def test_bell_pair(self):
        ctx = QuantumContext(SimulatorConfig(seed=1))
        qc = ctx.create_circuit(2)
        qc.apply_gate(gates.H(), 0).apply_cnot(0, 1)
        np.testing.assert_allclose(qc.get_measurement_probabilities(), [0.5, 0, 0, 0.5], atol=1e-12)
        assert qc.measure_all() in ("00", "11")


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

@pytest.fixture
def restore_logger():
    logger = logging.getLogger("qkits")
    handlers, level = list(logger.handlers), logger.level
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)


def test_setup_logging_level(restore_logger):
    logger = setup_logging("debug")
    assert logger is restore_logger
    assert logger.level == logging.DEBUG


def test_context_applies_configured_level(restore_logger):
    QuantumContext(SimulatorConfig(log_level="debug"))
    assert restore_logger.level == logging.DEBUG


def test_context_without_level_leaves_logger(restore_logger):
    restore_logger.setLevel(logging.INFO)
    QuantumContext()
    assert restore_logger.level == logging.INFO


def test_setup_logging_does_not_stack(restore_logger):
    setup_logging("INFO")
    setup_logging("INFO")
    ours = [h for h in restore_logger.handlers if getattr(h, "_qkits_handler", False)]
    assert len(ours) == 1


def test_debug_records_gate_application(caplog):
    ctx = QuantumContext()
    with caplog.at_level(logging.DEBUG, logger="qkits"):
        ctx.create_circuit(1).apply_gate(gates.X(), 0)
    assert any("Applied X to qubit 0" in r.getMessage() for r in caplog.records)
