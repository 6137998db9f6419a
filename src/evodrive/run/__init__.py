"""
Run Package

Configuration, the environment interface and the trial/experiment framework
that drives a population through its generations.
"""

from evodrive.run.config      import Config
from evodrive.run.environment import Environment
from evodrive.run.trial       import Trial
from evodrive.run.experiment  import Experiment

__all__ = [
    'Config',
    'Environment',
    'Trial',
    'Experiment',
]
