"""
Bayesian hyperparameter tuning of the genetic algorithm using Optuna.
"""

from evodrive.optimization.search_space       import SearchSpace
from evodrive.optimization.bayesian_optimizer import BayesianOptimizer

__all__ = [
    'SearchSpace',
    'BayesianOptimizer',
]
