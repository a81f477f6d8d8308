"""
Predictor
=========

Per-frame decision for the bot paddle.

Each call:
    1. Runs the model on the snapshot (read-only)
    2. Labels the same snapshot with the heuristic
    3. Appends (snapshot, label) to the sample buffer
    4. Returns the raw model output

The returned value is unclamped; LearningLoop.tick() clamps it to the court.
"""

import math
from typing import Optional

import numpy as np

from .labeler import heuristic_label
from .model import ModelHandle
from .samples import CourtGeometry, Sample, SampleBuffer, Snapshot
from ..utils.logger import get_logger

logger = get_logger(__name__)


class Predictor:
    """
    Wraps the model for live play and records training samples.

    Example:
        >>> predictor = Predictor(model, buffer)
        >>> target_x = predictor.predict(snapshot, geometry)
    """

    def __init__(
        self,
        model: ModelHandle,
        buffer: SampleBuffer,
        rng: Optional[np.random.Generator] = None
    ):
        """
        Args:
            model: Model to query (never mutated here)
            buffer: Where samples are appended
            rng: Random source for the heuristic labeler (module default if None)
        """
        self.model = model
        self.buffer = buffer
        self.rng = rng

    def predict(self, snapshot: Snapshot, geometry: CourtGeometry) -> float:
        """
        Predict the bot paddle target x and record a training sample.

        Args:
            snapshot: Current frame's game state
            geometry: Court dimensions for the labeler

        Returns:
            Raw model output (may be NaN if the model diverged)
        """
        output = self.model.predict_one(snapshot)

        label = heuristic_label(
            snapshot.ball_x,
            snapshot.ball_y,
            snapshot.opponent_x,
            geometry.paddle_width,
            geometry.court_height,
            geometry.court_width,
            rng=self.rng,
        )
        self.buffer.append(Sample(snapshot=snapshot, label=label))

        if not math.isfinite(output):
            logger.warning(f"Non-finite prediction {output} for snapshot {tuple(snapshot)}")
        else:
            logger.debug(f"Predicted: {round(output)} Label: {round(label)}")

        return output
