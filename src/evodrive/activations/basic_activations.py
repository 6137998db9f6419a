import numpy as np

# Output activations are applied to one scalar at a time, after the
# tanh-squashed output row has been computed.

def identity_activation(z):
    return float(z)

def clamped_activation(z):
    return float(np.clip(z, -1.0, 1.0))

def relu_activation(z):
    return float(np.maximum(0.0, z))

def sigmoid_activation(z):
    z = np.clip(z, -100, 100)   # to prevent under/overflow when calculating exp
    return float(1.0 / (1.0 + np.exp(-z)))

def tanh_activation(z):
    return float(np.tanh(z))

activations = {
    "identity": identity_activation,
    "clamped" : clamped_activation,
    "relu"    : relu_activation,
    "sigmoid" : sigmoid_activation,
    "tanh"    : tanh_activation,
    }

def activation_name(function) -> str | None:
    """
    Reverse lookup in the registry; returns None for functions
    that were not registered (e.g. user supplied lambdas).
    """
    for name, registered in activations.items():
        if registered is function:
            return name
    return None
