"""
Unit tests for evodrive.io.stats module.
"""

import csv

import pytest

from evodrive.io.stats  import StatsLog
from evodrive.phenotype import Network


@pytest.fixture
def genomes(small_topology):
    genomes = [Network.random(small_topology) for _ in range(3)]
    for genome, fitness in zip(genomes, [4.5, 0.0, 12.25]):
        genome.fitness = fitness
    return genomes


class TestStatsLog:

    def test_file_is_created_lazily(self, tmp_path):
        log = StatsLog(tmp_path / "logs")
        assert log.path is None
        assert not (tmp_path / "logs").exists()

    def test_default_filename(self, tmp_path, genomes):
        log = StatsLog(tmp_path)
        log.append(1, genomes)
        assert log.path.parent == tmp_path
        assert log.path.name.startswith("Stats_")
        assert log.path.suffix == ".csv"

    def test_header_and_rows(self, tmp_path, genomes):
        log = StatsLog(tmp_path, "stats.csv")
        log.append(1, genomes)

        with open(tmp_path / "stats.csv", newline='') as file:
            rows = list(csv.reader(file))
        assert rows == [["Generation", "Genome", "Fitness"],
                        ["1", "0", "4.5"],
                        ["1", "1", "0.0"],
                        ["1", "2", "12.25"]]

    def test_appends_go_to_same_file(self, tmp_path, genomes):
        log = StatsLog(tmp_path)
        log.append(1, genomes)
        first_path = log.path
        log.append(2, genomes)

        assert log.path == first_path
        assert len(list(tmp_path.iterdir())) == 1
        assert [r["Generation"] for r in log.read()] == [1, 1, 1, 2, 2, 2]

    def test_read_returns_typed_rows(self, tmp_path, genomes):
        log = StatsLog(tmp_path)
        log.append(7, genomes)
        assert log.read()[2] == {"Generation": 7, "Genome": 2, "Fitness": 12.25}

    def test_read_before_append(self, tmp_path):
        assert StatsLog(tmp_path).read() == []
