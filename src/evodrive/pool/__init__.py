"""
Pool Package

The population of genomes and the strategies used to rank them.
"""

from evodrive.pool.population import Population, scoring_from_config
from evodrive.pool.scoring    import ScoringStrategy, FitnessScoring, NoveltyScoring, weight_distance

__all__ = [
    'Population',
    'scoring_from_config',
    'ScoringStrategy',
    'FitnessScoring',
    'NoveltyScoring',
    'weight_distance',
]
