"""
AI Module
=========

On-line supervised learning for the bot paddle.

Classes:
    PaddleRegressor - Feed-forward regression network
    ModelHandle     - Network + optimizer + version counter
    SampleBuffer    - Per-episode (snapshot, label) store
    Predictor       - Per-frame prediction and sample recording
    Trainer         - Fit pass over the drained buffer
"""

from .errors import PongNetError, UninitializedStateError, LoopStateError
from .samples import Snapshot, CourtGeometry, FrameState, Sample, SampleBuffer, to_arrays
from .labeler import heuristic_label
from .network import PaddleRegressor
from .model import ModelHandle
from .predictor import Predictor
from .trainer import Trainer, TrainingResult, TrainingHistory

__all__ = [
    'PongNetError', 'UninitializedStateError', 'LoopStateError',
    'Snapshot', 'CourtGeometry', 'FrameState', 'Sample', 'SampleBuffer', 'to_arrays',
    'heuristic_label',
    'PaddleRegressor',
    'ModelHandle',
    'Predictor',
    'Trainer', 'TrainingResult', 'TrainingHistory',
]
