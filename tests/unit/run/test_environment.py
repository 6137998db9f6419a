"""
Unit tests for the Environment interface, as seen by a Population.
"""

import pytest

from evodrive.pool.population import Population
from evodrive.run.config      import Config
from evodrive.run.environment import Environment


class SteeringEnvironment(Environment):
    """Drives each assigned network for a fixed number of steps and reports its output sum."""

    def __init__(self, population, steps=5):
        self.population = population
        self.steps      = steps
        self.network    = None
        self.deaths     = 0

    def assign_genome(self, network):
        self.network = network

    def simulate(self):
        score = 0.0
        for step in range(self.steps):
            score += sum(self.network.run([step / self.steps, 1.0]))
        self.deaths += 1
        self.population.death(abs(score))


class TestEnvironment:

    def test_cannot_instantiate_abstract_class(self):
        with pytest.raises(TypeError):
            Environment()

    def test_environment_always_drives_current_genome(self):
        population  = Population(Config())
        environment = SteeringEnvironment(population)
        population.start(environment)

        for _ in range(35):
            assert environment.network is population.current_genome
            environment.simulate()

        assert population.generation == 4
        assert population.current_genome_index == 5
        assert environment.deaths == 35
