"""
evodrive - Fixed-topology neuroevolution for simulated agents.

This package evolves the weights of fixed-shape feed-forward networks with a
generational genetic algorithm: elitism, a fitness-proportional gene pool,
matrix-wise crossover, sparse weight mutation and random immigrants. Selection
can be driven either by the fitness reported by the environment or by novelty
search against an archive of past genomes.

Main components:
- genotype:     Matrix value type, network Topology, genome codec
- phenotype:    Network (forward pass, cloning)
- pool:         Population controller and scoring strategies
- run:          Configuration, Environment interface, Trial and Experiment framework
- io:           Statistics log, saved networks, population checkpoints
- activations:  Scalar output activations
- optimization: Bayesian optimization for hyperparameter tuning

Example:
    >>> from evodrive import Config, Trial
    >>> config = Config("config.ini")
    >>> class MyTrial(Trial):
    ...     def _evaluate_fitness(self, network):
    ...         # Drive an agent with 'network', return its score
    ...         pass
    >>> trial = MyTrial(config)
    >>> trial.run()
"""

__version__ = "0.1.0"

from evodrive.run.config        import Config
from evodrive.run.environment   import Environment
from evodrive.run.trial         import Trial
from evodrive.run.experiment    import Experiment
from evodrive.genotype.matrix   import Matrix
from evodrive.genotype.topology import Topology
from evodrive.phenotype.network import Network
from evodrive.pool.population   import Population

__all__ = [
    "Config",
    "Environment",
    "Trial",
    "Experiment",
    "Matrix",
    "Topology",
    "Network",
    "Population",
]
