"""
Game Module
===========

The Pong court and the loop that schedules learning around it.

Classes:
    Pong         - Portrait Pong court (pygame)
    LearningLoop - Predict-every-frame / fit-after-point state machine
    LoopState    - WAITING_TO_START, PLAYING, TRAINING
    Side         - Which paddle scored
"""

from .loop import (
    LearningLoop,
    LoopState,
    Side,
    TrainingPredicate,
    TRAINING_PREDICATES,
    get_training_predicate,
    train_when_opponent_scores,
    train_when_bot_scores,
    train_always,
    clamp_paddle_x,
)
from .pong import Pong, PongBall, PongPaddle

__all__ = [
    'LearningLoop',
    'LoopState',
    'Side',
    'TrainingPredicate',
    'TRAINING_PREDICATES',
    'get_training_predicate',
    'train_when_opponent_scores',
    'train_when_bot_scores',
    'train_always',
    'clamp_paddle_x',
    'Pong',
    'PongBall',
    'PongPaddle',
]
