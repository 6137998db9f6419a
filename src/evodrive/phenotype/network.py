"""
Network Module

This module implements the fixed-topology feed-forward network that each genome of
the population encodes. A Network is a chain of dense weight matrices with one bias
scalar per layer; evolution changes the values inside the matrices, never their shapes.

Forward pass:
    row    = tanh(inputs)                             1 x num_inputs
    row    = tanh(row * W[i] + b[i])                  for every layer i
    output = activation_k(row[k])                     for every output k

The final per-output activations let output channels have different ranges, for
example two steering-like channels in tanh range and a third squashed to [0, 1].

Classes:
    Network: Feed-forward neural network with fitness/novelty bookkeeping
"""

from typing import Callable, Sequence

import numpy as np

from evodrive.exceptions        import InputSizeMismatch, InvalidTopology
from evodrive.genotype.matrix   import Matrix
from evodrive.genotype.topology import Topology

class Network:
    """
    A genome: weight matrices, biases, and the scores assigned to it.

    Public Attributes:
        topology: The (fixed) shape of this network
        weights:  List of weight matrices W[0..L], W[0] is num_inputs x hidden_sizes[0]
        biases:   List of bias scalars b[0..L], one per layer
        fitness:  Score reported by the environment (0 until evaluated)
        novelty:  Novelty score assigned by novelty search (0 until evaluated)

    Public Methods:
        initialize(...): Create a randomly initialized network (class method)
        run(inputs):     Forward pass
        clone():         Deep copy with scores reset
    """

    def __init__(self, topology: Topology, weights: list[Matrix], biases: list[float]):
        """
        Assemble a network from existing parameters. Use Network.initialize() or
        Network.random() to create one with random parameters.

        Parameters:
            topology: Network shape
            weights:  One matrix per layer; shapes must match 'topology.weight_shapes()'
            biases:   One scalar per layer
        """
        topology.validate()

        shapes = topology.weight_shapes()
        if len(weights) != len(shapes) or len(biases) != len(shapes):
            raise InvalidTopology(
                f"Topology needs {len(shapes)} weight matrices and biases, "
                f"got {len(weights)} and {len(biases)}")
        for i, (weight, shape) in enumerate(zip(weights, shapes)):
            if weight.shape != shape:
                raise InvalidTopology(f"Weight matrix {i} is {weight.shape[0]}x{weight.shape[1]}, "
                                      f"topology expects {shape[0]}x{shape[1]}")

        self.topology: Topology     = topology
        self.weights : list[Matrix] = list(weights)
        self.biases  : list[float]  = [float(b) for b in biases]
        self.fitness : float        = 0.0
        self.novelty : float        = 0.0

        self._activations: list[Callable[[float], float]] = topology.activation_functions()
        self._reset_layers()

    def _reset_layers(self):
        """
        (Re)build the forward pass scratch rows. They only hold the values of
        the last run() and are never persisted.
        """
        self._input_layer   = Matrix(1, self.topology.num_inputs)
        self._hidden_layers = [Matrix(1, size) for size in self.topology.hidden_sizes]
        self._output_layer  = Matrix(1, self.topology.num_outputs)

    @classmethod
    def random(cls, topology: Topology) -> 'Network':
        """
        Create a network whose weights and biases are all drawn uniformly from [-1, 1].
        """
        topology.validate()
        weights = [Matrix.random(rows, cols) for rows, cols in topology.weight_shapes()]
        biases  = np.random.uniform(-1.0, 1.0, size=topology.num_layers).tolist()
        return cls(topology, weights, biases)

    @classmethod
    def initialize(cls,
                   num_inputs  : int,
                   hidden_sizes: Sequence[int],
                   num_outputs : int,
                   activations : Sequence[str | Callable[[float], float]]) -> 'Network':
        """
        Create a randomly initialized network from its shape parameters.

        Raises:
            InvalidTopology: if 'hidden_sizes' is empty or the number of
                             activations differs from 'num_outputs'
        """
        return cls.random(Topology.of(num_inputs, hidden_sizes, num_outputs, activations))

    @property
    def num_inputs(self) -> int:
        return self.topology.num_inputs

    @property
    def num_outputs(self) -> int:
        return self.topology.num_outputs

    @property
    def hidden_layers(self) -> list[Matrix]:
        """
        Activations of the hidden layers computed by the last run().
        """
        return self._hidden_layers

    def run(self, inputs: Sequence[float]) -> list[float]:
        """
        Propagate 'inputs' through the network.

        Parameters:
            inputs: One value per network input

        Returns:
            One value per network output

        Raises:
            InputSizeMismatch: if len(inputs) != num_inputs
        """
        if len(inputs) != self.topology.num_inputs:
            raise InputSizeMismatch(
                f"Wrong inputs size! Neural network has {self.topology.num_inputs} inputs, got {len(inputs)}")

        self._input_layer = Matrix(1, self.topology.num_inputs, [list(inputs)]).pointwise_tanh()

        # Hidden layers use W[0..L-1], the output layer uses W[L]
        num_hidden = len(self._hidden_layers)
        row = self._input_layer
        for i in range(num_hidden):
            row = (row @ self.weights[i] + self.biases[i]).pointwise_tanh()
            self._hidden_layers[i] = row
        self._output_layer = (row @ self.weights[num_hidden] + self.biases[num_hidden]).pointwise_tanh()

        # Scalar post-processing, one activation per output channel
        output = self._output_layer.to_list()[0]
        return [activation(value) for activation, value in zip(self._activations, output)]

    def clone(self) -> 'Network':
        """
        Deep copy of weights and biases; fitness and novelty start again from zero.
        """
        return Network(self.topology, [w.copy() for w in self.weights], list(self.biases))

    def same_parameters(self, other: 'Network') -> bool:
        """
        True if both networks have identical weights and biases.
        """
        return (self.topology.weight_shapes() == other.topology.weight_shapes()
                and all(a == b for a, b in zip(self.weights, other.weights))
                and self.biases == other.biases)

    def __str__(self):
        layers = []
        for i, (weight, bias) in enumerate(zip(self.weights, self.biases)):
            layers.append(f"  W[{i}] {weight.rows}x{weight.cols}, b[{i}]={bias:+.3f}")
        return (f"Network {self.topology.num_inputs}-"
                f"{'-'.join(str(s) for s in self.topology.hidden_sizes)}-{self.topology.num_outputs}"
                f" (fitness={self.fitness:.2f}, novelty={self.novelty:.2f})\n" + "\n".join(layers))

    def __repr__(self):
        return (f"Network(inputs={self.topology.num_inputs}, "
                f"hidden={list(self.topology.hidden_sizes)}, "
                f"outputs={self.topology.num_outputs})")
