"""
Environment Interface Module

The environment is the simulation that evaluates genomes: it drives an agent with
the network it has been handed, decides when the agent dies, and reports a score
back to the population through Population.death(). The population in turn hands
the environment the next network to drive.

Classes:
    Environment: Abstract base class for anything a Population can hand genomes to
"""

from abc    import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from evodrive.phenotype import Network

class Environment(ABC):
    """
    Receiver of the genomes a Population wants evaluated.

    Subclasses must implement:
    - assign_genome(network): rebind the live agent to 'network' and restart it
    """

    @abstractmethod
    def assign_genome(self, network: 'Network') -> None:
        pass
