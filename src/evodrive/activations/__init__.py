"""
Activations Package

Scalar activation functions applied independently to each network output.

Exported:
    activations: Dictionary mapping activation function names to functions
    activation_name: Reverse lookup from function to registered name
    Individual activation functions: identity_activation, clamped_activation,
                                     relu_activation, sigmoid_activation, tanh_activation
"""

from evodrive.activations.basic_activations import (
    activations,
    activation_name,
    identity_activation,
    clamped_activation,
    relu_activation,
    sigmoid_activation,
    tanh_activation
)

__all__ = [
    'activations',
    'activation_name',
    'identity_activation',
    'clamped_activation',
    'relu_activation',
    'sigmoid_activation',
    'tanh_activation'
]
