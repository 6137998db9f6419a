"""
Scoring Strategies Module

The population controller ranks genomes by a score. Which score is decided by a
ScoringStrategy, so the same generational cycle serves both plain fitness-driven
evolution and novelty search:

    FitnessScoring: the score is the fitness reported by the environment
    NoveltyScoring: the score is the distance of the genome to an archive of
                    historically novel genomes (behavioral diversity pressure)

Classes:
    ScoringStrategy: Abstract base class for scoring strategies
    FitnessScoring:  Rank genomes by raw fitness
    NoveltyScoring:  Rank genomes by novelty against a growing archive

Functions:
    weight_distance(a, b): Distance between the weights of two networks
"""

import math
from abc    import ABC, abstractmethod
from typing import TYPE_CHECKING

from evodrive.exceptions import DimensionMismatch

if TYPE_CHECKING:
    from evodrive.phenotype import Network

class ScoringStrategy(ABC):
    """
    Decides how a finished genome is scored and how genomes are ranked.

    Public Attributes:
        best: Highest score recorded so far

    Public Methods:
        score(genome):            The value genomes are sorted and selected by
        on_death(genome, signal): Record the environment's signal for a genome
                                  whose evaluation just ended; returns its score
    """

    name = "abstract"

    def __init__(self):
        self.best: float = 0.0

    @abstractmethod
    def score(self, genome: 'Network') -> float:
        pass

    @abstractmethod
    def on_death(self, genome: 'Network', signal: float) -> float:
        pass

    def _update_best(self, value: float):
        self.best = value if value > self.best else self.best

class FitnessScoring(ScoringStrategy):
    """
    Genomes are ranked by the fitness the environment reports for them.
    """

    name = "fitness"

    def score(self, genome: 'Network') -> float:
        return genome.fitness

    def on_death(self, genome: 'Network', signal: float) -> float:
        genome.fitness = signal
        self._update_best(signal)
        return signal

class NoveltyScoring(ScoringStrategy):
    """
    Genomes are ranked by how different their weights are from an archive of
    genomes that were found novel in the past.

    The novelty of a genome is the root mean square of its weight_distance() to
    every archive member. Genomes whose novelty exceeds 'threshold' are cloned into
    the archive, which only ever grows during a run. While the archive is empty the
    first genome to finish seeds it (with novelty 0), otherwise no distance could
    ever be computed.

    The environment's signal is still stored as the genome's fitness (so that it
    shows up in the statistics), but plays no role in selection.

    Public Attributes:
        threshold: Novelty above which a genome enters the archive
        archive:   Clones of the genomes that entered the archive
    """

    name = "novelty"

    def __init__(self, threshold: float):
        super().__init__()
        self.threshold: float           = threshold
        self.archive  : list['Network'] = []

    def score(self, genome: 'Network') -> float:
        return genome.novelty

    def novelty(self, genome: 'Network') -> float:
        """
        Root mean square distance between 'genome' and the archive members.
        """
        if not self.archive:
            return 0.0
        sum_squared_distances = sum(weight_distance(genome, member) ** 2 for member in self.archive)
        return math.sqrt(sum_squared_distances / len(self.archive))

    def on_death(self, genome: 'Network', signal: float) -> float:
        genome.fitness = signal

        if not self.archive:
            novelty = 0.0
            self.archive.append(genome.clone())
        else:
            novelty = self.novelty(genome)
            if novelty > self.threshold:
                self.archive.append(genome.clone())

        genome.novelty = novelty
        self._update_best(novelty)
        return novelty

def weight_distance(a: 'Network', b: 'Network') -> float:
    """
    Distance between the weights of two networks of the same topology.

    For every weight matrix the cellwise differences are summed first and the sum
    is squared; the result is the square root of the total over all matrices.
    Differences of opposite sign inside one matrix cancel out, so this is not the
    Euclidean norm of the weight difference.

    Raises:
        DimensionMismatch: if the two networks have different weight shapes
    """
    if len(a.weights) != len(b.weights):
        raise DimensionMismatch(f"Cannot compare networks with {len(a.weights)} and {len(b.weights)} layers")

    squared_sum = 0.0
    for weight_a, weight_b in zip(a.weights, b.weights):
        weight_difference = weight_a.difference(weight_b).sum()
        squared_sum += weight_difference * weight_difference
    return math.sqrt(squared_sum)
