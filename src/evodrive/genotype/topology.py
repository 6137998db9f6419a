"""
Network Topology Module

The Topology describes the fixed shape shared by every genome of a run: number of
inputs, sizes of the hidden layers, number of outputs and the activation applied
to each output. Weights and biases evolve; the topology never does.

Classes:
    Topology: Immutable description of a feed-forward network shape
"""

from dataclasses import dataclass
from typing      import Callable, Sequence

from evodrive.activations import activations as registered_activations, activation_name
from evodrive.exceptions  import InvalidTopology

@dataclass(frozen=True)
class Topology:
    """
    Shape of a fixed-topology feed-forward network.

    Attributes:
        num_inputs:   Number of network inputs
        hidden_sizes: Number of neurons in each hidden layer, in order (at least one layer)
        num_outputs:  Number of network outputs
        activations:  One activation per output; either a name registered in
                      'evodrive.activations.activations' or a callable float -> float
    """

    num_inputs  : int
    hidden_sizes: tuple[int, ...]
    num_outputs : int
    activations : tuple[str | Callable[[float], float], ...] | None = None

    def __post_init__(self):
        # Accept any sequence for convenience, store tuples so the value stays hashable
        object.__setattr__(self, 'hidden_sizes', tuple(self.hidden_sizes))
        if self.activations is None:
            object.__setattr__(self, 'activations', ('tanh',) * self.num_outputs)
        else:
            object.__setattr__(self, 'activations', tuple(self.activations))

    def validate(self) -> 'Topology':
        """
        Check that a network of this shape can be built.

        Returns:
            self, to allow chaining

        Raises:
            InvalidTopology: on an empty hidden layer list, non-positive sizes,
                             an activation count different from the output count
                             or an unknown activation name
        """
        if len(self.hidden_sizes) < 1:
            raise InvalidTopology("Neural network must have at least 1 hidden layer")
        if self.num_inputs < 1 or self.num_outputs < 1:
            raise InvalidTopology(
                f"Network needs at least one input and one output, got {self.num_inputs} and {self.num_outputs}")
        for size in self.hidden_sizes:
            if size < 1:
                raise InvalidTopology(f"Hidden layer sizes must be positive, got {list(self.hidden_sizes)}")
        if len(self.activations) != self.num_outputs:
            raise InvalidTopology(
                f"Number of activation functions ({len(self.activations)}) "
                f"must be equal to the number of outputs ({self.num_outputs})")
        for activation in self.activations:
            if isinstance(activation, str):
                if activation not in registered_activations:
                    raise InvalidTopology(f"Unknown activation function '{activation}'")
            elif not callable(activation):
                raise InvalidTopology(f"Activation {activation!r} is neither a name nor a callable")
        return self

    @property
    def num_layers(self) -> int:
        """
        Number of weight matrices (hidden layers + output layer).
        """
        return len(self.hidden_sizes) + 1

    def weight_shapes(self) -> list[tuple[int, int]]:
        """
        (rows, cols) of every weight matrix, from the input layer onwards.
        """
        sizes = [self.num_inputs, *self.hidden_sizes, self.num_outputs]
        return [(sizes[i], sizes[i + 1]) for i in range(len(sizes) - 1)]

    def activation_functions(self) -> list[Callable[[float], float]]:
        """
        Resolve activation names to functions.
        """
        return [registered_activations[a] if isinstance(a, str) else a for a in self.activations]

    def to_dict(self) -> dict:
        """
        Shape metadata stored next to a serialized genome.
        Callables that are not in the registry cannot be named and are stored as None.
        """
        names = []
        for activation in self.activations:
            names.append(activation if isinstance(activation, str) else activation_name(activation))
        return {
            "num_inputs"  : self.num_inputs,
            "hidden_sizes": list(self.hidden_sizes),
            "num_outputs" : self.num_outputs,
            "activations" : names,
        }

    @classmethod
    def from_dict(cls, topology_dict: dict) -> 'Topology':
        try:
            activations = topology_dict.get("activations") or ()
            if any(a is None for a in activations):
                raise InvalidTopology("Stored topology has unnamed activation functions; "
                                      "supply the topology explicitly")
            return cls(num_inputs   = int(topology_dict["num_inputs"]),
                       hidden_sizes = tuple(int(s) for s in topology_dict["hidden_sizes"]),
                       num_outputs  = int(topology_dict["num_outputs"]),
                       activations  = tuple(activations)).validate()
        except InvalidTopology:
            raise
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidTopology(f"Malformed topology description: {e}") from e

    @classmethod
    def of(cls,
           num_inputs  : int,
           hidden_sizes: Sequence[int],
           num_outputs : int,
           activations : Sequence[str | Callable[[float], float]] | None = None) -> 'Topology':
        """
        Build and validate a topology in one step.
        """
        if activations is not None:
            activations = tuple(activations)
        return cls(num_inputs, tuple(hidden_sizes), num_outputs, activations).validate()
