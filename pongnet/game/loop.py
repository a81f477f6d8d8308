"""
Learning Loop
=============

State machine that schedules prediction and training around the game.

    WAITING_TO_START --start()--> PLAYING
    PLAYING --point_scored()--> TRAINING --(fit done)--> PLAYING
                                                     or WAITING_TO_START

While PLAYING every tick asks the Predictor for the bot paddle target.
When a point ends the loop freezes (TRAINING) before it awaits the Trainer,
so no prediction and no sample is recorded while the model is being fitted.
Whether a point triggers a fit at all is decided by a pluggable predicate
on the scoring side.
"""

import math
from enum import Enum, auto
from typing import Callable, Dict, Optional

from ..ai.errors import LoopStateError
from ..ai.predictor import Predictor
from ..ai.samples import FrameState
from ..ai.trainer import Trainer, TrainingResult
from ..utils.logger import get_logger

logger = get_logger(__name__)


class LoopState(Enum):
    """Learning loop states."""
    WAITING_TO_START = auto()
    PLAYING = auto()
    TRAINING = auto()


class Side(Enum):
    """Which paddle won the point."""
    BOT = auto()
    OPPONENT = auto()


TrainingPredicate = Callable[[Side], bool]


def train_when_opponent_scores(scorer: Side) -> bool:
    """Retrain after the bot concedes a point."""
    return scorer is Side.OPPONENT


def train_when_bot_scores(scorer: Side) -> bool:
    """Retrain after the bot wins a point."""
    return scorer is Side.BOT


def train_always(scorer: Side) -> bool:
    """Retrain after every point."""
    return True


TRAINING_PREDICATES: Dict[str, TrainingPredicate] = {
    'opponent': train_when_opponent_scores,
    'bot': train_when_bot_scores,
    'always': train_always,
}


def get_training_predicate(name: str) -> TrainingPredicate:
    """Look up a built-in training predicate by its config name."""
    try:
        return TRAINING_PREDICATES[name]
    except KeyError:
        raise ValueError(
            f"Unknown training predicate '{name}', expected one of {sorted(TRAINING_PREDICATES)}"
        ) from None


def clamp_paddle_x(x: float, paddle_width: float, court_width: float) -> float:
    """Clamp a paddle center so the paddle stays inside the court."""
    return max(paddle_width / 2, min(court_width - paddle_width / 2, x))


class LearningLoop:
    """
    Drives the predictor each frame and the trainer after each point.

    Example:
        >>> loop = LearningLoop(predictor, trainer)
        >>> loop.start()
        >>> x = loop.tick(game.frame_state())
        >>> result = await loop.point_scored(Side.OPPONENT)
    """

    def __init__(
        self,
        predictor: Predictor,
        trainer: Trainer,
        should_train: TrainingPredicate = train_when_opponent_scores,
        resume_after_training: bool = True,
        on_fit: Optional[Callable[[TrainingResult], None]] = None,
    ):
        """
        Args:
            predictor: Per-frame predictor (shares its buffer with the trainer)
            trainer: Fit pass runner
            should_train: Decides from the scoring side whether to fit
            resume_after_training: Go back to PLAYING after a fit (else WAITING_TO_START)
            on_fit: Called with every non-degenerate TrainingResult
        """
        self.predictor = predictor
        self.trainer = trainer
        self.should_train = should_train
        self.resume_after_training = resume_after_training
        self.on_fit = on_fit

        self.state = LoopState.WAITING_TO_START
        self.points_played = 0

    @property
    def is_playing(self) -> bool:
        return self.state is LoopState.PLAYING

    @property
    def is_training(self) -> bool:
        return self.state is LoopState.TRAINING

    def start(self) -> None:
        """Begin (or continue) play. Does not touch the model or the buffer."""
        if self.state is LoopState.TRAINING:
            raise LoopStateError("Cannot start while a fit is in progress")
        if self.state is LoopState.WAITING_TO_START:
            logger.info("Play started")
        self.state = LoopState.PLAYING

    def tick(self, frame: FrameState) -> Optional[float]:
        """
        Compute this frame's bot paddle position.

        Args:
            frame: Snapshot and court geometry for the current frame

        Returns:
            Clamped target x, or None when not PLAYING
        """
        if self.state is not LoopState.PLAYING:
            return None

        output = self.predictor.predict(frame.snapshot, frame.geometry)

        # A diverged model must not crash the game: hold the paddle where it is
        if not math.isfinite(output):
            return frame.snapshot.paddle_x

        geometry = frame.geometry
        return clamp_paddle_x(output, geometry.paddle_width, geometry.court_width)

    async def point_scored(self, scorer: Side) -> Optional[TrainingResult]:
        """
        Handle the end of a point.

        Freezes play, fits the model if the predicate asks for it, then
        resumes (or waits for start()).

        Args:
            scorer: Side that won the point

        Returns:
            The TrainingResult, or None if no fit ran
        """
        if self.state is not LoopState.PLAYING:
            raise LoopStateError(f"point_scored() while {self.state.name}")

        self.state = LoopState.TRAINING
        self.points_played += 1
        logger.info(f"Point {self.points_played} to {scorer.name.lower()}")

        if not self.should_train(scorer):
            self.state = LoopState.PLAYING
            return None

        if len(self.trainer.buffer) == 0:
            logger.warning("No samples collected this point, skipping fit")
            self._finish_training()
            return None

        try:
            result = await self.trainer.fit()
        except BaseException:
            self.state = LoopState.WAITING_TO_START
            raise

        if self.on_fit is not None and not result.degenerate:
            self.on_fit(result)

        self._finish_training()
        return result

    def _finish_training(self) -> None:
        if self.resume_after_training:
            self.state = LoopState.PLAYING
        else:
            self.state = LoopState.WAITING_TO_START
