"""
Shared fixtures for integration tests.
"""

import pytest


@pytest.fixture
def xor_inputs():
    return [[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]]


@pytest.fixture
def xor_outputs():
    return [0.0, 1.0, 1.0, 0.0]
