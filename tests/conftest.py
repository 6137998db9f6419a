"""Pytest configuration and shared fixtures."""

import random
import sys
from pathlib import Path

import numpy as np
import pytest

# Make the package importable without installing it
root_dir = Path(__file__).parent.parent
sys.path.insert(0, str(root_dir / 'src'))
sys.path.insert(0, str(root_dir))

from evodrive.genotype.topology import Topology
from evodrive.run.config        import Config


@pytest.fixture(autouse=True)
def set_random_seeds():
    """Set random seeds for reproducibility."""
    np.random.seed(42)
    random.seed(42)
    yield
    np.random.seed(None)
    random.seed(None)


@pytest.fixture
def default_config():
    """A Config with default values: population 10, 2 elites, 1 worst, 2 crossover slots."""
    return Config()


@pytest.fixture
def small_topology():
    """2 inputs, one hidden layer of 3 neurons, 1 tanh output."""
    return Topology.of(2, [3], 1)


@pytest.fixture
def vehicle_topology():
    """8 sensor inputs, two hidden layers, 3 outputs (steer, throttle in tanh range; brake in [0, 1])."""
    return Topology.of(8, [6, 4], 3, ['tanh', 'tanh', 'sigmoid'])
