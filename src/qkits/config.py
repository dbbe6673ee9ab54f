"""
Simulator configuration.

Values can be given explicitly or read from environment variables:

    QKITS_WARN_QUBITS   qubit count above which a ResourceWarning is issued
    QKITS_MAX_QUBITS    hard cap; larger circuits raise CapacityError
    QKITS_SEED          seed for the measurement random source
    QKITS_LOG_LEVEL     level applied to the ``qkits`` logger by ``QuantumContext``
"""

from __future__ import annotations

import logging
import os
import warnings
from dataclasses import dataclass, field

from qkits.exceptions import CapacityError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_WARN_QUBITS = 16
DEFAULT_MAX_QUBITS = 24

# complex128 amplitude
AMPLITUDE_BYTES = 16


@dataclass(frozen=True)
class QubitLimits:
    """
    Qubit-count guard for circuit construction.

    Memory grows as 2^n * 16 bytes for the state alone (and 4^n * 16 bytes
    for a dense operator), so:

    - n <= warn_above: silent
    - warn_above < n <= max_qubits: ``ResourceWarning``
    - n > max_qubits: ``CapacityError``
    """

    warn_above: int = DEFAULT_WARN_QUBITS
    max_qubits: int = DEFAULT_MAX_QUBITS

    def __post_init__(self) -> None:
        if self.warn_above < 1 or self.max_qubits < 1:
            raise ValidationError("Qubit limits must be positive")
        if self.warn_above > self.max_qubits:
            raise ValidationError(
                f"warn_above ({self.warn_above}) cannot exceed "
                f"max_qubits ({self.max_qubits})"
            )

    def check(self, n_qubits: int) -> None:
        """Enforce the limits for a circuit of ``n_qubits`` qubits."""
        if n_qubits > self.max_qubits:
            raise CapacityError(
                f"{n_qubits} qubits exceeds the limit of {self.max_qubits}"
            )
        if n_qubits > self.warn_above:
            state_bytes = (2 ** n_qubits) * AMPLITUDE_BYTES
            message = (
                f"{n_qubits}-qubit circuit needs {state_bytes / 2**20:.1f} MiB "
                f"per state vector; gate application builds dense operators"
            )
            logger.warning(message)
            warnings.warn(message, ResourceWarning, stacklevel=3)


@dataclass(frozen=True)
class SimulatorConfig:
    """
    Top-level configuration consumed by ``QuantumContext``.

    ``log_level`` (e.g. ``"DEBUG"``) is set on the ``qkits`` logger when a
    context is built; None leaves the logger untouched.
    """

    limits: QubitLimits = field(default_factory=QubitLimits)
    seed: int | None = None
    log_level: str | None = None

    @classmethod
    def from_env(cls) -> SimulatorConfig:
        """Build a configuration from ``QKITS_*`` environment variables."""
        seed = os.getenv("QKITS_SEED")
        limits = QubitLimits(
            warn_above=int(os.getenv("QKITS_WARN_QUBITS", str(DEFAULT_WARN_QUBITS))),
            max_qubits=int(os.getenv("QKITS_MAX_QUBITS", str(DEFAULT_MAX_QUBITS))),
        )
        return cls(
            limits=limits,
            seed=int(seed) if seed else None,
            log_level=os.getenv("QKITS_LOG_LEVEL") or None,
        )
