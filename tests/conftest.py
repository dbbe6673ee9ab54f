"""Shared fixtures."""

import pytest

from qkits import MatrixOperations, MeasurementService, NumpyRandomSource


class ScriptedRandom:
    """Random source replaying fixed draws in order."""

    def __init__(self, *values):
        self.values = list(values)
        self.calls = 0

    def random(self):
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value


@pytest.fixture
def scripted():
    return ScriptedRandom


@pytest.fixture
def ops():
    return MatrixOperations()


@pytest.fixture
def measurement():
    return MeasurementService(NumpyRandomSource(seed=42))
