"""
Unit tests for evodrive.io.checkpoint module.

A checkpoint must restore a population exactly: the resumed run continues
with the same genomes, cursor, counters and novelty archive.
"""

import numpy as np
import pytest

from evodrive.exceptions      import ConfigurationError, MissingGenomeSource
from evodrive.io.checkpoint   import load_checkpoint, save_checkpoint
from evodrive.pool.population import Population
from evodrive.pool.scoring    import FitnessScoring, NoveltyScoring
from evodrive.run.config      import Config
from evodrive.run.environment import Environment


class NullEnvironment(Environment):

    def assign_genome(self, network):
        self.network = network


@pytest.fixture
def config():
    return Config()


def advance(population, scores):
    for score in scores:
        population.death(score)


class TestCheckpoint:

    def test_round_trip_restores_state(self, config, tmp_path):
        population = Population(config)
        population.start(NullEnvironment())
        advance(population, [float(i) for i in range(10)] + [3.0, 1.0, 2.0])

        path     = save_checkpoint(population, tmp_path / "checkpoint.json")
        restored = load_checkpoint(path, config)

        assert restored.generation == 2
        assert restored.current_genome_index == 3
        assert restored.best_fitness == 9.0
        assert restored.best_score == 9.0
        for original, copy in zip(population.genomes, restored.genomes):
            assert copy.same_parameters(original)
            assert copy.fitness == original.fitness
        assert [g.fitness for g in restored.genomes[:3]] == [3.0, 1.0, 2.0]

    def test_resumed_run_matches_uninterrupted_run(self, config, tmp_path):
        population = Population(config)
        population.start(NullEnvironment())
        advance(population, [float(i) for i in range(5)])
        save_checkpoint(population, tmp_path / "checkpoint.json")

        state = np.random.get_state()
        advance(population, [float(i) for i in range(5, 25)])

        np.random.set_state(state)
        restored = load_checkpoint(tmp_path / "checkpoint.json", config)
        restored.start(NullEnvironment())
        advance(restored, [float(i) for i in range(5, 25)])

        assert restored.generation == population.generation
        for a, b in zip(population.genomes, restored.genomes):
            assert a.same_parameters(b)

    def test_novelty_archive_is_restored(self, config, tmp_path):
        config.novelty_search    = True
        config.novelty_threshold = 0.0
        population = Population(config)
        population.start(NullEnvironment())
        advance(population, [1.0, 2.0, 3.0])

        save_checkpoint(population, tmp_path / "checkpoint.json")
        restored = load_checkpoint(tmp_path / "checkpoint.json", config)

        assert isinstance(restored.scoring, NoveltyScoring)
        assert len(restored.scoring.archive) == len(population.scoring.archive)
        for original, copy in zip(population.scoring.archive, restored.scoring.archive):
            assert copy.same_parameters(original)
        assert restored.genomes[1].novelty == population.genomes[1].novelty

    def test_missing_file_raises(self, config, tmp_path):
        with pytest.raises(MissingGenomeSource):
            load_checkpoint(tmp_path / "missing.json", config)

    def test_population_size_mismatch_raises(self, config, tmp_path):
        save_checkpoint(Population(config), tmp_path / "checkpoint.json")
        config.initial_population = 12
        with pytest.raises(ConfigurationError, match="genomes"):
            load_checkpoint(tmp_path / "checkpoint.json", config)


class TestCheckpointScoring:

    @pytest.fixture
    def novelty_checkpoint(self, tmp_path):
        config = Config()
        config.novelty_search    = True
        config.novelty_threshold = 0.1
        population = Population(config)
        population.start(NullEnvironment())
        advance(population, [1.0, 2.0, 3.0, 4.0, 5.0])

        path = save_checkpoint(population, tmp_path / "checkpoint.json")
        return path, population

    def test_novelty_run_resumes_with_fitness_config(self, novelty_checkpoint):
        path, population = novelty_checkpoint
        restored = load_checkpoint(path, Config())

        assert isinstance(restored.scoring, NoveltyScoring)
        assert restored.scoring.threshold == 0.1
        assert restored.best_score == population.best_score
        assert len(restored.scoring.archive) == len(population.scoring.archive)
        assert len(restored.scoring.archive) > 1

    def test_novelty_threshold_mismatch_raises(self, novelty_checkpoint):
        path, _ = novelty_checkpoint
        config = Config()
        config.novelty_search    = True
        config.novelty_threshold = 9.0
        with pytest.raises(ConfigurationError, match="threshold"):
            load_checkpoint(path, config)

    def test_fitness_checkpoint_with_novelty_config_raises(self, config, tmp_path):
        population = Population(config)
        population.start(NullEnvironment())
        advance(population, [4.0])
        path = save_checkpoint(population, tmp_path / "checkpoint.json")

        config.novelty_search = True
        with pytest.raises(ConfigurationError, match="novelty"):
            load_checkpoint(path, config)

    def test_fitness_checkpoint_restores_fitness_scoring(self, config, tmp_path):
        population = Population(config)
        population.start(NullEnvironment())
        advance(population, [4.0, 7.0])
        path = save_checkpoint(population, tmp_path / "checkpoint.json")

        restored = load_checkpoint(path, config)
        assert isinstance(restored.scoring, FitnessScoring)
        assert restored.best_score == 7.0

    def test_explicit_scoring_of_another_kind_starts_fresh(self, novelty_checkpoint):
        path, _ = novelty_checkpoint
        restored = load_checkpoint(path, Config(), scoring=FitnessScoring())
        assert isinstance(restored.scoring, FitnessScoring)
        assert restored.best_score == 0.0
