"""
Model Handle
============

Owns the regression network together with its optimizer and loss, and
tracks how many times the weights have been updated.

Reads and writes are split on purpose:
    - predict_one() only reads the weights (eval mode, no_grad)
    - train_on_arrays() is the single mutator, and bumps `version`
"""

import math
from typing import Optional, Tuple

import numpy as np
import torch
import torch.nn as nn
import torch.optim as optim

from config import Config
from .network import PaddleRegressor
from .samples import Snapshot


class ModelHandle:
    """
    Regression model with its training state.

    Attributes:
        network: The PaddleRegressor
        optimizer: Adam with the configured learning rate
        loss_fn: Mean squared error
        version: Number of completed weight updates (fits)

    Example:
        >>> model = ModelHandle(Config())
        >>> x = model.predict_one(snapshot)
        >>> loss, epochs = model.train_on_arrays(states, labels)
    """

    def __init__(self, config: Optional[Config] = None, device: Optional[torch.device] = None):
        """
        Args:
            config: Configuration object
            device: Override config.DEVICE
        """
        self.config = config or Config()
        self.device = device or self.config.DEVICE

        self.network = PaddleRegressor(self.config).to(self.device)
        self.network.eval()
        self.optimizer = optim.Adam(self.network.parameters(), lr=self.config.LEARNING_RATE)
        self.loss_fn = nn.MSELoss()

        self.version = 0

    def predict_one(self, snapshot: Snapshot) -> float:
        """Run one forward pass on a single snapshot."""
        state = torch.from_numpy(snapshot.as_array()).unsqueeze(0).to(self.device)
        with torch.no_grad():
            output = self.network(state)
        return float(output[0, 0].item())

    def train_on_arrays(
        self,
        states: np.ndarray,
        labels: np.ndarray,
        epochs: int = 1,
        batch_size: Optional[int] = None,
    ) -> Tuple[float, int]:
        """
        Fit the network on a batch of samples.

        Args:
            states: float32 array (N, 6)
            labels: float32 array (N, 1)
            epochs: Number of passes over the data
            batch_size: Mini-batch size (None = all N samples in one batch)

        Returns:
            (mean loss of the first epoch, epochs run)
        """
        n = len(states)
        if n == 0:
            return math.nan, 0

        states_t = torch.from_numpy(np.ascontiguousarray(states, dtype=np.float32)).to(self.device)
        labels_t = torch.from_numpy(np.ascontiguousarray(labels, dtype=np.float32)).to(self.device)
        step = batch_size or n

        self.network.train()
        epoch_losses = []
        try:
            for _ in range(epochs):
                order = torch.randperm(n, device=self.device) if step < n else torch.arange(n, device=self.device)
                total = 0.0
                for start in range(0, n, step):
                    idx = order[start:start + step]
                    output = self.network(states_t[idx])
                    loss = self.loss_fn(output, labels_t[idx])

                    self.optimizer.zero_grad()
                    loss.backward()
                    self.optimizer.step()

                    total += loss.item() * len(idx)
                epoch_losses.append(total / n)
        finally:
            self.network.eval()

        self.version += 1
        return epoch_losses[0], len(epoch_losses)
