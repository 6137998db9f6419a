"""
Genome File Module

A genome file is a JSON document holding a network's codec encoding together with
the shape metadata needed to rebuild a runnable network:

    {
        "topology": {"num_inputs": 8, "hidden_sizes": [6, 4], "num_outputs": 3,
                     "activations": ["tanh", "tanh", "sigmoid"]},
        "fitness":  153.25,
        "genome":   {"weights": [...], "biases": [...]}
    }

Functions:
    save_network(network, path):      Write a genome file
    load_network(path, topology):     Read a genome file back into a Network
    network_path(directory, fitness): Conventional location of a saved network
"""

import json
import math
from datetime import datetime
from pathlib  import Path

from evodrive.exceptions        import MissingGenomeSource
from evodrive.genotype          import codec
from evodrive.genotype.topology import Topology
from evodrive.phenotype         import Network

def network_path(directory: str | Path, fitness: float) -> Path:
    """
    Saved networks are grouped in sub-directories named after their
    integer fitness: '<directory>/<int(fitness)>/Network_<timestamp>.json'.
    Non-finite fitness values get their own 'nan', 'inf' and '-inf' directories.
    """
    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S_%f')
    bucket    = str(int(fitness)) if math.isfinite(fitness) else str(float(fitness))
    return Path(directory) / bucket / f"Network_{timestamp}.json"

def save_network(network: Network, path: str | Path) -> Path:
    """
    Write 'network' (weights, biases, topology and fitness) to 'path',
    creating parent directories as needed.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    document = {
        "topology": network.topology.to_dict(),
        "fitness" : network.fitness,
        "genome"  : codec.encode(network),
    }
    with open(path, 'w', encoding='utf-8') as file:
        json.dump(document, file, indent=2)
    return path

def load_network(path: str | Path | None, topology: Topology | None = None) -> Network:
    """
    Rebuild a network from a genome file.

    Parameters:
        path:     The genome file
        topology: Shape to rebuild the network with; overrides the stored shape
                  metadata (this is how output activations that are not in the
                  registry are supplied)

    Raises:
        MissingGenomeSource: if no path is given, the file does not exist or is empty
        InvalidTopology:     if the stored weights do not fit the topology
    """
    if path is None:
        raise MissingGenomeSource("File path cannot be None if you want to deserialize a network")
    path = Path(path)
    if not path.exists() or path.stat().st_size == 0:
        raise MissingGenomeSource(f"No genome file at '{path}'")

    with open(path, encoding='utf-8') as file:
        document = json.load(file)

    if topology is None:
        if "topology" not in document:
            raise MissingGenomeSource(f"Genome file '{path}' has no topology; supply one explicitly")
        topology = Topology.from_dict(document["topology"])

    network = codec.decode(document.get("genome"), topology)
    network.fitness = float(document.get("fitness", 0.0))
    return network
