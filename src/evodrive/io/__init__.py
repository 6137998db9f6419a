"""
IO Package

Persistence of run artifacts: per-generation statistics, saved networks and
population checkpoints.
"""

from evodrive.io.stats       import StatsLog
from evodrive.io.genome_file import save_network, load_network, network_path
from evodrive.io.checkpoint  import save_checkpoint, load_checkpoint

__all__ = [
    'StatsLog',
    'save_network',
    'load_network',
    'network_path',
    'save_checkpoint',
    'load_checkpoint',
]
