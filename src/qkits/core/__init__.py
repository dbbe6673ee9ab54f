"""Numerical core: complex values, matrix algebra and state vectors."""
from .complex_number import Complex
from .linalg import MatrixOperations
from .state import QuantumState

__all__ = [
    'Complex',
    'MatrixOperations',
    'QuantumState',
]
