"""
Paddle Regression Network
=========================

A small feed-forward network that maps a 6-number game snapshot to the
x position the bot paddle should move to.

    Input:  (ball_x, ball_y, ball_vx, ball_vy, paddle_x, opponent_x)
    Output: target paddle x (one unbounded scalar)

Architecture (default config):
    6 -> 64 (linear) -> 128 (relu) -> 64 (relu) -> 1

The first dense layer is a plain linear projection, the remaining hidden
layers use the configured activation, and the output layer is linear so the
network can regress raw pixel coordinates.
"""

import torch
import torch.nn as nn
import torch.nn.functional as F
from typing import List, Optional, Callable, Dict, Any, cast

from config import Config


class PaddleRegressor(nn.Module):
    """
    Fixed-topology MLP regressor.

    Attributes:
        layers (nn.ModuleList): All linear layers, output layer last

    Example:
        >>> net = PaddleRegressor(config=Config())
        >>> x = torch.randn(1, 6)
        >>> target = net(x)  # Shape: (1, 1)
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        hidden_layers: Optional[List[int]] = None
    ):
        """
        Initialize the network.

        Args:
            config: Configuration object
            hidden_layers: Override config's hidden layer sizes
        """
        super().__init__()

        self.config = config or Config()
        self.state_size = self.config.STATE_SIZE
        self.output_size = self.config.OUTPUT_SIZE
        self.hidden_sizes = hidden_layers or self.config.HIDDEN_LAYERS
        self.input_layer_linear = self.config.INPUT_LAYER_LINEAR

        self._activation_fn = self._get_activation_fn()

        self.layers = nn.ModuleList()
        self._build_network()
        self._init_weights()

    def _build_network(self) -> None:
        """Construct the neural network layers."""
        layer_sizes = [self.state_size] + list(self.hidden_sizes) + [self.output_size]

        for i in range(len(layer_sizes) - 1):
            self.layers.append(nn.Linear(layer_sizes[i], layer_sizes[i + 1]))

    def _init_weights(self) -> None:
        """Xavier/Glorot uniform weights, zero biases."""
        for layer in self.layers:
            if isinstance(layer, nn.Linear):
                nn.init.xavier_uniform_(layer.weight)
                nn.init.constant_(layer.bias, 0.0)

    def _get_activation_fn(self) -> Callable[..., Any]:
        """Get the activation function based on config."""
        activation_map: Dict[str, Callable[..., Any]] = {
            'relu': F.relu,
            'leaky_relu': F.leaky_relu,
            'tanh': torch.tanh,
            'elu': F.elu,
        }
        result = activation_map.get(self.config.ACTIVATION, F.relu)
        return cast(Callable[..., Any], result)

    def forward(self, state: torch.Tensor) -> torch.Tensor:
        """
        Forward pass through the network.

        Args:
            state: Input tensor of shape (batch_size, 6)

        Returns:
            Target x tensor of shape (batch_size, 1)
        """
        x = state

        for i, layer in enumerate(self.layers[:-1]):
            x = layer(x)
            if i == 0 and self.input_layer_linear:
                continue
            x = self._activation_fn(x)

        # Output layer (no activation - raw coordinate)
        return self.layers[-1](x)

    def count_parameters(self) -> int:
        """Return total number of trainable parameters."""
        return sum(p.numel() for p in self.parameters() if p.requires_grad)
