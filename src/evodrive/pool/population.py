"""
Population Module

This module implements the Population class, the generational controller of the
genetic algorithm. The population owns a fixed number of genomes and walks through
them one at a time: the environment drives the current genome, reports its score
through death(), and receives the next genome. Once every genome has been scored
the population repopulates, producing the next generation.

Generational cycle (repopulate):
    1. Append the fitness of every genome to the stats log
    2. Clear the gene pool, increment the generation counter
    3. Sort genomes by score, best first
    4. Clone the best genomes into the new generation (elitism); best and
       worst genomes feed the gene pool in proportion to their score
    5. Crossover: pairs of parents drawn from the gene pool produce pairs of children
    6. Mutate the weight matrices of the elites and children
    7. Fill the remaining slots with random genomes

Classes:
    Population: Generational controller managing genomes and their evaluation order
"""

from typing import TYPE_CHECKING

import numpy as np

from evodrive.exceptions        import NoActiveGenome
from evodrive.genotype.topology import Topology
from evodrive.phenotype         import Network
from evodrive.pool.scoring      import FitnessScoring, NoveltyScoring, ScoringStrategy

if TYPE_CHECKING:
    from evodrive.io.stats        import StatsLog
    from evodrive.run.config      import Config
    from evodrive.run.environment import Environment

def scoring_from_config(config: 'Config') -> ScoringStrategy:
    """
    The scoring strategy selected by the [NOVELTY] section of the configuration.
    """
    if config.novelty_search:
        return NoveltyScoring(config.novelty_threshold)
    return FitnessScoring()

class Population:
    """
    A population of fixed-topology networks evolved generation by generation.

    Public Attributes:
        genomes:              The networks of the current generation
        generation:           Generation counter, starting from 1
        current_genome_index: Index of the genome being evaluated
        best_fitness:         Highest fitness reported by the environment so far
        gene_pool:            Population indices used to pick crossover parents
                              (rebuilt by every repopulation)

    Public Properties:
        current_genome: The genome being evaluated
        scoring:        The scoring strategy (fitness or novelty)
        best_score:     Highest score according to the scoring strategy

    Public Methods:
        start(environment): Hand the current genome to the environment
        death(score):       Record the score of the current genome and move on
        repopulate():       Produce the next generation
        get_fittest_genome(): Genome with the highest score
    """

    def __init__(self,
                 config   : 'Config',
                 topology : Topology | None = None,
                 scoring  : ScoringStrategy | None = None,
                 stats_log: 'StatsLog | None' = None,
                 genomes  : list[Network] | None = None):
        """
        Create a population of randomly initialized genomes.

        Parameters:
            config:    Stores configuration parameters
            topology:  Shape of every network; built from 'config' if omitted
            scoring:   Scoring strategy; chosen from 'config' if omitted
            stats_log: Where to write per-generation fitness rows (optional)
            genomes:   Existing genomes to start from instead of random ones
                       (used when resuming from a checkpoint)

        Raises:
            ConfigurationError: if the configuration values are inconsistent
        """
        config.validate()

        self._config    = config
        self._topology  = topology if topology is not None else config.topology()
        self._scoring   = scoring if scoring is not None else scoring_from_config(config)
        self._stats_log = stats_log
        self._environment: 'Environment | None' = None

        if genomes is None:
            genomes = [Network.random(self._topology) for _ in range(config.initial_population)]
        elif len(genomes) != config.initial_population:
            raise ValueError(f"Expected {config.initial_population} genomes, got {len(genomes)}")

        self.genomes             : list[Network] = genomes
        self.generation          : int           = 1
        self.current_genome_index: int           = 0
        self.best_fitness        : float         = 0.0
        self.gene_pool           : list[int]     = []

        # How many slots of the next generation are taken by elites and children
        self._filled: int = 0

    @property
    def topology(self) -> Topology:
        return self._topology

    @property
    def scoring(self) -> ScoringStrategy:
        return self._scoring

    @property
    def best_score(self) -> float:
        return self._scoring.best

    @property
    def size(self) -> int:
        return len(self.genomes)

    @property
    def current_genome(self) -> Network:
        return self.genomes[self.current_genome_index]

    def start(self, environment: 'Environment') -> None:
        """
        Attach the environment and hand it the genome to evaluate.
        From now on the environment reports back through death().
        """
        self._environment = environment
        self._environment.assign_genome(self.current_genome)

    def death(self, score: float) -> None:
        """
        The genome under evaluation has finished with 'score'.

        The score is recorded on the genome (as fitness, or used to derive its
        novelty), then the next genome is handed to the environment. After the
        last genome of the generation the population repopulates first.

        Raises:
            NoActiveGenome: if start() has not been called
        """
        if self._environment is None:
            raise NoActiveGenome("No genome is being evaluated; call start() first")

        self._scoring.on_death(self.current_genome, score)
        self.best_fitness = score if score > self.best_fitness else self.best_fitness

        if self.current_genome_index < len(self.genomes) - 1:
            self.current_genome_index += 1
        else:
            self.repopulate()

        self._environment.assign_genome(self.current_genome)

    def repopulate(self) -> None:
        """
        Replace the current generation by the next one and rewind to its first genome.
        """
        if self._stats_log is not None:
            self._stats_log.append(self.generation, self.genomes)

        self.gene_pool.clear()
        self.generation += 1
        self._filled = 0

        self._sort()
        new_genomes = self._select_best()
        self._crossover(new_genomes)
        self._mutate(new_genomes)
        self._randomize(new_genomes)

        self.genomes = new_genomes
        self.current_genome_index = 0

    def _sort(self):
        """
        Sort genomes by score, highest first. The sort is stable:
        genomes with equal scores keep their previous order.
        """
        self.genomes = sorted(self.genomes, key=self._scoring.score, reverse=True)

    def _add_to_gene_pool(self, index: int):
        copies = round(self._scoring.score(self.genomes[index]) * self._config.fitness_multiplier)
        self.gene_pool.extend([index] * max(0, copies))

    def _select_best(self) -> list[Network]:
        """
        Clone the best genomes into a new generation (with scores reset) and
        fill the gene pool from the best and the worst genomes.
        """
        new_genomes = []
        for i in range(self._config.best_agent_selection):
            new_genomes.append(self.genomes[i].clone())
            self._filled += 1
            self._add_to_gene_pool(i)

        last = len(self.genomes) - 1
        for i in range(self._config.worst_agent_selection):
            self._add_to_gene_pool(last - i)

        return new_genomes

    def _pick_parents(self, i: int) -> tuple[int, int]:
        """
        Two distinct parent indices drawn from the gene pool, or (i, i+1) when the
        gene pool does not hold two different genomes to choose from.
        """
        if len(set(self.gene_pool)) < 2:
            return i, i + 1

        first = self.gene_pool[np.random.randint(len(self.gene_pool))]
        while True:
            second = self.gene_pool[np.random.randint(len(self.gene_pool))]
            if second != first:
                return first, second

    def _crossover(self, new_genomes: list[Network]):
        """
        Create children in pairs. For every weight matrix position one coin flip
        picks the parent that both children inherit the matrix from; biases are
        inherited the same way with their own coin flips.
        """
        for i in range(0, self._config.number_to_crossover, 2):
            first, second = self._pick_parents(i)
            parents = (self.genomes[first], self.genomes[second])

            num_layers = self._topology.num_layers
            weight_from = [0 if np.random.random() < self._config.crossover_chance else 1
                           for _ in range(num_layers)]
            bias_from   = [0 if np.random.random() < self._config.crossover_chance else 1
                           for _ in range(num_layers)]

            for _ in range(2):
                weights = [parents[p].weights[w].copy() for w, p in enumerate(weight_from)]
                biases  = [parents[p].biases[b] for b, p in enumerate(bias_from)]
                new_genomes.append(Network(self._topology, weights, biases))
                self._filled += 1

    def _mutate(self, new_genomes: list[Network]):
        """
        Mutate the weight matrices of the elites and crossover children.
        """
        for genome in new_genomes[:self._filled]:
            for j in range(len(genome.weights)):
                if np.random.random() < self._config.mutation_chance:
                    genome.weights[j] = genome.weights[j].mutate(self._config.mutation_coefficient)

    def _randomize(self, new_genomes: list[Network]):
        """
        Fill the rest of the new generation with random genomes.
        """
        while len(new_genomes) < self._config.initial_population:
            new_genomes.append(Network.random(self._topology))

    def get_fittest_genome(self) -> Network | None:
        """
        Return the genome with the highest score in the current generation,
        or None if the population is empty.
        """
        if not self.genomes:
            return None
        return max(self.genomes, key=self._scoring.score)

    def __str__(self):
        return '\n'.join(str(genome) for genome in self.genomes)
