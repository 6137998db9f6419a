"""
Unit tests for evodrive.pool.scoring module.

Covers both scoring strategies and the weight distance used by novelty search.
"""

import math

import pytest

from evodrive.exceptions        import DimensionMismatch
from evodrive.genotype.matrix   import Matrix
from evodrive.genotype.topology import Topology
from evodrive.phenotype         import Network
from evodrive.pool.scoring      import FitnessScoring, NoveltyScoring, weight_distance


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def line_topology():
    """1 input, 2 hidden neurons, 1 output: W[0] is 1x2, W[1] is 2x1."""
    return Topology.of(1, [2], 1)


def make_network(topology, w0, w1):
    return Network(topology, [Matrix.from_rows(w0), Matrix.from_rows(w1)], [0.0, 0.0])


# ============================================================================
# Test Weight Distance
# ============================================================================

class TestWeightDistance:

    def test_distance_to_self_is_zero(self, line_topology):
        network = Network.random(line_topology)
        assert weight_distance(network, network.clone()) == 0.0

    def test_cell_differences_are_summed_before_squaring(self, line_topology):
        """Opposite differences within one matrix cancel out."""
        a = make_network(line_topology, [[0.5, -0.5]], [[0.0], [0.0]])
        b = make_network(line_topology, [[0.0,  0.0]], [[0.25], [0.25]])
        # W[0]: (0.5 - 0.5)^2 = 0, W[1]: (-0.25 - 0.25)^2 = 0.25
        assert weight_distance(a, b) == pytest.approx(0.5)

    def test_distance_is_symmetric(self, vehicle_topology):
        a = Network.random(vehicle_topology)
        b = Network.random(vehicle_topology)
        assert weight_distance(a, b) == pytest.approx(weight_distance(b, a))

    def test_different_layer_counts_raise(self, line_topology):
        a = Network.random(line_topology)
        b = Network.random(Topology.of(1, [2, 2], 1))
        with pytest.raises(DimensionMismatch):
            weight_distance(a, b)

    def test_different_matrix_shapes_raise(self, line_topology):
        a = Network.random(line_topology)
        b = Network.random(Topology.of(1, [3], 1))
        with pytest.raises(DimensionMismatch):
            weight_distance(a, b)


# ============================================================================
# Test Fitness Scoring
# ============================================================================

class TestFitnessScoring:

    def test_on_death_records_fitness(self, small_topology):
        scoring = FitnessScoring()
        network = Network.random(small_topology)
        assert scoring.on_death(network, 7.5) == 7.5
        assert network.fitness == 7.5
        assert scoring.score(network) == 7.5

    def test_best_is_running_maximum(self, small_topology):
        scoring = FitnessScoring()
        for signal in [3.0, 8.0, 5.0]:
            scoring.on_death(Network.random(small_topology), signal)
        assert scoring.best == 8.0

    def test_name(self):
        assert FitnessScoring.name == "fitness"


# ============================================================================
# Test Novelty Scoring
# ============================================================================

class TestNoveltyScoring:

    def test_first_genome_seeds_archive(self, line_topology):
        scoring = NoveltyScoring(threshold=0.1)
        network = Network.random(line_topology)

        assert scoring.on_death(network, 4.0) == 0.0
        assert network.novelty == 0.0
        assert len(scoring.archive) == 1
        assert scoring.archive[0].same_parameters(network)
        assert scoring.archive[0] is not network

    def test_raw_signal_is_kept_as_fitness(self, line_topology):
        scoring = NoveltyScoring(threshold=0.1)
        network = Network.random(line_topology)
        scoring.on_death(network, 4.0)
        assert network.fitness == 4.0
        assert scoring.archive[0].fitness == 0.0

    def test_novelty_is_root_mean_square_distance(self, line_topology):
        scoring = NoveltyScoring(threshold=100.0)
        scoring.archive = [make_network(line_topology, [[0.0, 0.0]], [[0.0], [0.0]]),
                           make_network(line_topology, [[1.0, 0.0]], [[0.0], [0.0]])]
        genome = make_network(line_topology, [[0.5, 0.5]], [[0.0], [0.0]])

        # distances: 1.0 and 0.0
        expected = math.sqrt((1.0 ** 2 + 0.0 ** 2) / 2)
        assert scoring.novelty(genome) == pytest.approx(expected)
        assert scoring.on_death(genome, 0.0) == pytest.approx(expected)
        assert genome.novelty == pytest.approx(expected)

    def test_novel_genome_enters_archive(self, line_topology):
        scoring = NoveltyScoring(threshold=0.5)
        scoring.on_death(make_network(line_topology, [[0.0, 0.0]], [[0.0], [0.0]]), 0.0)

        far = make_network(line_topology, [[1.0, 1.0]], [[0.0], [0.0]])
        scoring.on_death(far, 0.0)
        assert far.novelty == pytest.approx(2.0)
        assert len(scoring.archive) == 2

    def test_familiar_genome_stays_out_of_archive(self, line_topology):
        scoring = NoveltyScoring(threshold=0.5)
        scoring.on_death(make_network(line_topology, [[0.0, 0.0]], [[0.0], [0.0]]), 0.0)

        near = make_network(line_topology, [[0.1, 0.1]], [[0.0], [0.0]])
        scoring.on_death(near, 0.0)
        assert near.novelty == pytest.approx(0.2)
        assert len(scoring.archive) == 1

    def test_best_tracks_novelty(self, line_topology):
        scoring = NoveltyScoring(threshold=10.0)
        scoring.on_death(make_network(line_topology, [[0.0, 0.0]], [[0.0], [0.0]]), 50.0)
        scoring.on_death(make_network(line_topology, [[0.3, 0.0]], [[0.0], [0.0]]), 60.0)
        assert scoring.best == pytest.approx(0.3)

    def test_score_is_novelty(self, line_topology):
        scoring = NoveltyScoring(threshold=0.5)
        network = Network.random(line_topology)
        network.fitness = 100.0
        network.novelty = 0.25
        assert scoring.score(network) == 0.25
