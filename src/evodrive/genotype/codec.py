"""
Genome Codec Module

Lossless textual encoding of a network's parameters. Every weight cell and every
bias is written as a decimal string (Python's shortest round-trip representation),
so decoding gives back exactly the same floats, independent of how a JSON library
or a spreadsheet would format numbers.

Encoding format:
    {
        "weights": [                         # one entry per weight matrix
            [["0.25", "-0.5"], ["1.0", "0.125"]],   # rows of cells
            ...
        ],
        "biases": ["0.75", "-0.0625", ...]   # one entry per layer
    }

The encoding does not carry the topology: hidden layer sizes and output activations
come from the configuration of whoever decodes it (see evodrive.io for genome files,
which store both side by side).

Functions:
    encode(network):           Network -> encoding dictionary
    decode(encoding, topology): encoding dictionary -> Network
"""

from typing import TYPE_CHECKING

from evodrive.exceptions        import InvalidTopology, MissingGenomeSource
from evodrive.genotype.matrix   import Matrix
from evodrive.genotype.topology import Topology

if TYPE_CHECKING:
    from evodrive.phenotype import Network

def encode_value(value: float) -> str:
    return repr(float(value))

def decode_value(text: str) -> float:
    return float(text)

def encode(network: 'Network') -> dict:
    """
    Encode the weights and biases of 'network' as nested lists of decimal strings.
    """
    weights = [[[encode_value(cell) for cell in row] for row in weight.to_list()]
               for weight in network.weights]
    biases  = [encode_value(bias) for bias in network.biases]
    return {"weights": weights, "biases": biases}

def decode_weights(encoding: dict) -> tuple[list[Matrix], list[float]]:
    """
    Rebuild weight matrices and biases, inferring each matrix shape
    from the nesting of its rows.
    """
    if not encoding:
        raise MissingGenomeSource("There is no genome encoding to deserialize")
    try:
        weights = [Matrix.from_rows([[decode_value(cell) for cell in row] for row in weight])
                   for weight in encoding["weights"]]
        biases  = [decode_value(bias) for bias in encoding["biases"]]
    except KeyError as e:
        raise InvalidTopology(f"Genome encoding lacks the {e} entry") from e
    return weights, biases

def decode(encoding: dict, topology: Topology) -> 'Network':
    """
    Rebuild a network from its encoding and the topology of the consumer.

    Parameters:
        encoding: Dictionary produced by encode()
        topology: Shape of the network; weight matrices must agree with it

    Raises:
        MissingGenomeSource: if 'encoding' is None or empty
        InvalidTopology:     if the encoded shapes do not fit 'topology'
    """
    # Import here to avoid circular import
    from evodrive.phenotype import Network

    weights, biases = decode_weights(encoding)
    return Network(topology, weights, biases)
