"""
Snapshots and the Sample Buffer
===============================

Per-frame training data collected while the bot plays.

Every Playing frame produces one Snapshot of the game (6 numbers). The
Predictor feeds it to the network and, at the same time, asks the heuristic
labeler where the paddle *should* be. The (snapshot, label) pair is appended
to the SampleBuffer. When a point ends the Trainer drains the buffer and
fits the network on everything collected since the previous fit.

Insertion order is temporal order, and drain() is the only way the buffer
shrinks.
"""

import math
from dataclasses import dataclass
from typing import List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from .errors import UninitializedStateError


class Snapshot(NamedTuple):
    """One frame of game state, in court pixels and px/s."""
    ball_x: float
    ball_y: float
    ball_vx: float
    ball_vy: float
    paddle_x: float
    opponent_x: float

    def as_array(self) -> np.ndarray:
        """Return the snapshot as a float32 vector of length 6."""
        return np.asarray(self, dtype=np.float32)


@dataclass(frozen=True)
class CourtGeometry:
    """Court dimensions passed alongside each snapshot."""
    paddle_width: float
    court_width: float
    court_height: float

    def __post_init__(self):
        for name in ('paddle_width', 'court_width', 'court_height'):
            value = getattr(self, name)
            if value is None or not math.isfinite(value) or value <= 0:
                raise UninitializedStateError(f"{name} must be a positive finite number, got {value!r}")

    @property
    def min_paddle_x(self) -> float:
        """Leftmost valid paddle center."""
        return self.paddle_width / 2

    @property
    def max_paddle_x(self) -> float:
        """Rightmost valid paddle center."""
        return self.court_width - self.paddle_width / 2


@dataclass(frozen=True)
class FrameState:
    """Everything the core needs for one tick."""
    snapshot: Snapshot
    geometry: CourtGeometry


@dataclass(frozen=True)
class Sample:
    """A snapshot and the heuristic label computed for it."""
    snapshot: Snapshot
    label: float


class SampleBuffer:
    """
    Ordered, append-only store of samples for the current episode.

    Example:
        >>> buffer = SampleBuffer()
        >>> buffer.append(Sample(snapshot, 200.0))
        >>> samples = buffer.drain()   # buffer is now empty
    """

    def __init__(self):
        self._samples: List[Sample] = []

    def __len__(self) -> int:
        return len(self._samples)

    def append(self, sample: Sample) -> None:
        """Add a sample at the end of the buffer."""
        self._samples.append(sample)

    def drain(self) -> List[Sample]:
        """Return all samples in insertion order and empty the buffer."""
        samples, self._samples = self._samples, []
        return samples

    def peek_last(self) -> Optional[Sample]:
        """Most recent sample, or None if empty."""
        return self._samples[-1] if self._samples else None


def to_arrays(samples: Sequence[Sample]) -> Tuple[np.ndarray, np.ndarray]:
    """
    Stack samples into training arrays.

    Returns:
        states: float32 array of shape (N, 6)
        labels: float32 array of shape (N, 1)
    """
    n = len(samples)
    states = np.empty((n, len(Snapshot._fields)), dtype=np.float32)
    labels = np.empty((n, 1), dtype=np.float32)
    for i, sample in enumerate(samples):
        states[i] = sample.snapshot
        labels[i, 0] = sample.label
    return states, labels
