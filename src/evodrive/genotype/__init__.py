"""
Genotype Package

The genetic material of a network: dense weight matrices, the fixed topology
they are shaped by, and the textual codec used to persist them.
"""

from evodrive.genotype.matrix   import Matrix
from evodrive.genotype.topology import Topology
from evodrive.genotype          import codec

__all__ = [
    'Matrix',
    'Topology',
    'codec',
]
