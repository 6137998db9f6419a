"""
Phenotype Package

The expressed form of a genome: a fixed-topology feed-forward network that the
environment runs to drive its agent.
"""

from evodrive.phenotype.network import Network

__all__ = [
    'Network',
]
