"""
Immutable complex number value type.

Arithmetic inside the simulator runs on numpy ``complex128`` arrays; this
type is what the public API hands back for single amplitudes and accepts
wherever an amplitude or matrix entry is supplied.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

DEFAULT_TOLERANCE = 1e-10


@dataclass(frozen=True)
class Complex:
    """
    Complex number ``real + imag·i``.

    All operations are total; non-finite parts are not rejected here.

    Example
    -------
    >>> z = Complex(3, 4)
    >>> z.magnitude()
    5.0
    >>> str(z.conjugate())
    '3-4i'
    """

    real: float
    imag: float = 0.0

    @classmethod
    def from_real(cls, real: float) -> Complex:
        return cls(float(real), 0.0)

    @classmethod
    def from_imaginary(cls, imag: float) -> Complex:
        return cls(0.0, float(imag))

    @classmethod
    def from_complex(cls, value) -> Complex:
        """Convert a builtin/numpy complex (or anything ``complex()`` accepts)."""
        if isinstance(value, Complex):
            return value
        z = complex(value)
        return cls(z.real, z.imag)

    def add(self, other: Complex) -> Complex:
        return Complex(self.real + other.real, self.imag + other.imag)

    def subtract(self, other: Complex) -> Complex:
        return Complex(self.real - other.real, self.imag - other.imag)

    def multiply(self, other: Complex) -> Complex:
        """(a+bi)(c+di) = (ac-bd) + (ad+bc)i"""
        a, b = self.real, self.imag
        c, d = other.real, other.imag
        return Complex(a * c - b * d, a * d + b * c)

    def scale(self, scalar: float) -> Complex:
        return Complex(self.real * scalar, self.imag * scalar)

    def conjugate(self) -> Complex:
        return Complex(self.real, -self.imag)

    def magnitude(self) -> float:
        return math.sqrt(self.real * self.real + self.imag * self.imag)

    def magnitude_squared(self) -> float:
        return self.real * self.real + self.imag * self.imag

    def phase(self) -> float:
        """Argument in radians, ``atan2(imag, real)``."""
        return math.atan2(self.imag, self.real)

    def equals(self, other, tolerance: float = DEFAULT_TOLERANCE) -> bool:
        """Component-wise comparison within ``tolerance``."""
        other = Complex.from_complex(other)
        return (
            abs(self.real - other.real) < tolerance
            and abs(self.imag - other.imag) < tolerance
        )

    # -- Python protocol ------------------------------------------------------

    def __complex__(self) -> complex:
        return complex(self.real, self.imag)

    def __add__(self, other) -> Complex:
        return self.add(Complex.from_complex(other))

    __radd__ = __add__

    def __sub__(self, other) -> Complex:
        return self.subtract(Complex.from_complex(other))

    def __rsub__(self, other) -> Complex:
        return Complex.from_complex(other).subtract(self)

    def __mul__(self, other) -> Complex:
        return self.multiply(Complex.from_complex(other))

    __rmul__ = __mul__

    def __neg__(self) -> Complex:
        return Complex(-self.real, -self.imag)

    def __abs__(self) -> float:
        return self.magnitude()

    def __str__(self) -> str:
        if self.imag == 0:
            return _fmt(self.real)
        if self.real == 0:
            return f"{_fmt(self.imag)}i"
        sign = "+" if self.imag >= 0 else "-"
        return f"{_fmt(self.real)}{sign}{_fmt(abs(self.imag))}i"


def _fmt(x: float) -> str:
    return f"{x:.4g}"
