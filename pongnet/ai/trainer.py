"""
Trainer
=======

Turns the samples collected during a point into one fit pass:
    1. Drain the sample buffer
    2. Fit the model on the whole drained set
    3. Report the loss and record it in the training history

fit() is the only suspending operation of the core. The tensor work runs in
a worker thread so the event loop can keep drawing the "training" screen;
the learning loop guarantees nothing else touches the model meanwhile.
"""

import asyncio
import math
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from config import Config
from .model import ModelHandle
from .samples import SampleBuffer, to_arrays
from ..utils.logger import get_logger, log_fit_result

logger = get_logger(__name__)


@dataclass(frozen=True)
class TrainingResult:
    """Outcome of a single fit pass."""
    loss: float
    epoch_count: int
    sample_count: int
    model_version: int

    @property
    def degenerate(self) -> bool:
        """True when no training happened (empty buffer)."""
        return self.epoch_count == 0


class TrainingHistory:
    """
    Running record of fit results, used by the loss chart and the HUD.

    Metrics tracked:
        - Loss per fit
        - Epochs per fit
        - Samples per fit
    """

    def __init__(self, history_length: int = 500):
        """
        Args:
            history_length: Maximum history to store
        """
        self.history_length = history_length
        self.generation = 0

        self.losses: List[float] = []
        self.epochs: List[int] = []
        self.samples: List[int] = []

    def add(self, result: TrainingResult) -> None:
        """Add a fit result."""
        self.generation += 1
        self.losses.append(result.loss)
        self.epochs.append(result.epoch_count)
        self.samples.append(result.sample_count)

        # Trim to history length
        if len(self.losses) > self.history_length:
            for attr in ['losses', 'epochs', 'samples']:
                setattr(self, attr, getattr(self, attr)[-self.history_length:])

    def get_recent_average(self, metric: str, n: int = 10) -> Optional[float]:
        """Average of the last n finite values of a metric, None if there are none."""
        values = [v for v in getattr(self, metric, [])[-n:] if math.isfinite(v)]
        if not values:
            return None
        return float(np.mean(values))

    def last_loss(self) -> Optional[float]:
        """Most recent loss, or None before the first fit."""
        return self.losses[-1] if self.losses else None


class Trainer:
    """
    Fits the model on everything collected since the last fit.

    Example:
        >>> trainer = Trainer(model, buffer, config)
        >>> result = await trainer.fit()
        >>> print(result.loss, result.epoch_count)
    """

    def __init__(
        self,
        model: ModelHandle,
        buffer: SampleBuffer,
        config: Optional[Config] = None
    ):
        """
        Args:
            model: Model to train (mutated in place)
            buffer: Buffer drained on each fit
            config: Configuration object
        """
        self.model = model
        self.buffer = buffer
        self.config = config or Config()
        self.history = TrainingHistory(self.config.LOSS_HISTORY_LENGTH)

    def fit_sync(self) -> TrainingResult:
        """Drain the buffer and run one fit pass, blocking until done."""
        samples = self.buffer.drain()

        if not samples:
            logger.warning("fit() called with an empty sample buffer, skipping")
            return TrainingResult(
                loss=math.nan,
                epoch_count=0,
                sample_count=0,
                model_version=self.model.version,
            )

        logger.info(f"Training model on {len(samples)} samples...")
        states, labels = to_arrays(samples)
        loss, epochs = self.model.train_on_arrays(
            states,
            labels,
            epochs=self.config.FIT_EPOCHS,
            batch_size=self.config.FIT_BATCH_SIZE,
        )

        result = TrainingResult(
            loss=loss,
            epoch_count=epochs,
            sample_count=len(samples),
            model_version=self.model.version,
        )
        self.history.add(result)
        log_fit_result(
            generation=self.history.generation,
            loss=result.loss,
            epochs=result.epoch_count,
            samples=result.sample_count,
            version=result.model_version,
        )
        return result

    async def fit(self) -> TrainingResult:
        """Run fit_sync() in a worker thread and wait for it."""
        return await asyncio.to_thread(self.fit_sync)
