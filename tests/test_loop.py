"""
Tests for the learning loop state machine.

These tests verify:
    - State transitions around start/tick/point_scored
    - Ticks are no-ops outside PLAYING
    - Clamping and NaN handling of the predicted paddle x
    - Training predicates and sample carry-over
"""

import asyncio
import math

import pytest
import torch
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pongnet.ai import (
    CourtGeometry, FrameState, LoopStateError, ModelHandle, Predictor,
    SampleBuffer, Snapshot, Trainer,
)
from pongnet.game import (
    LearningLoop, LoopState, Side, clamp_paddle_x, get_training_predicate,
    train_always, train_when_bot_scores, train_when_opponent_scores,
)


GEOMETRY = CourtGeometry(paddle_width=80, court_width=400, court_height=600)


def frame(ball_y: float = 50.0, paddle_x: float = 200.0) -> FrameState:
    return FrameState(Snapshot(120.0, ball_y, 40.0, -90.0, paddle_x, 150.0), GEOMETRY)


class FixedPredictor(Predictor):
    """Predictor whose model output is replaced by a constant."""

    def __init__(self, model, buffer, rng, value):
        super().__init__(model, buffer, rng=rng)
        self.value = value

    def predict(self, snapshot, geometry):
        super().predict(snapshot, geometry)
        return self.value


@pytest.fixture
def buffer():
    return SampleBuffer()


@pytest.fixture
def model(config):
    return ModelHandle(config)


@pytest.fixture
def make_loop(model, buffer, rng, config):
    def _make(**kwargs):
        predictor = Predictor(model, buffer, rng=rng)
        trainer = Trainer(model, buffer, config)
        return LearningLoop(predictor, trainer, **kwargs)
    return _make


class TestStates:
    """Test state transitions."""

    def test_initial_state(self, make_loop):
        loop = make_loop()
        assert loop.state is LoopState.WAITING_TO_START
        assert not loop.is_playing
        assert loop.points_played == 0

    def test_start(self, make_loop):
        loop = make_loop()
        loop.start()
        assert loop.is_playing

    def test_start_is_idempotent_while_playing(self, make_loop):
        loop = make_loop()
        loop.start()
        loop.start()
        assert loop.is_playing

    def test_point_scored_requires_playing(self, make_loop):
        loop = make_loop()
        with pytest.raises(LoopStateError):
            asyncio.run(loop.point_scored(Side.OPPONENT))

    def test_resume_after_training(self, make_loop):
        loop = make_loop()
        loop.start()
        loop.tick(frame())
        asyncio.run(loop.point_scored(Side.OPPONENT))
        assert loop.is_playing
        assert loop.points_played == 1

    def test_wait_after_training(self, make_loop):
        loop = make_loop(resume_after_training=False)
        loop.start()
        loop.tick(frame())
        asyncio.run(loop.point_scored(Side.OPPONENT))
        assert loop.state is LoopState.WAITING_TO_START
        loop.start()
        assert loop.is_playing

    def test_training_state_observed_during_fit(self, make_loop):
        loop = make_loop()
        loop.start()
        loop.tick(frame())
        seen = []

        async def scenario():
            task = asyncio.create_task(loop.point_scored(Side.OPPONENT))
            await asyncio.sleep(0)
            seen.append(loop.state)
            seen.append(loop.tick(frame()))
            with pytest.raises(LoopStateError):
                loop.start()
            await task

        asyncio.run(scenario())
        assert seen == [LoopState.TRAINING, None]
        assert loop.is_playing


class TestTick:
    """Test per-frame prediction."""

    def test_no_op_when_waiting(self, make_loop, buffer, model):
        loop = make_loop()
        assert loop.tick(frame()) is None
        assert len(buffer) == 0
        assert model.version == 0

    def test_records_one_sample_per_tick(self, make_loop, buffer):
        loop = make_loop()
        loop.start()
        for i in range(5):
            loop.tick(frame(ball_y=10.0 * i))
        assert len(buffer) == 5

    def test_output_within_court(self, make_loop):
        loop = make_loop()
        loop.start()
        x = loop.tick(frame())
        assert GEOMETRY.min_paddle_x <= x <= GEOMETRY.max_paddle_x

    @pytest.mark.parametrize("raw,expected", [(-500.0, 40.0), (1000.0, 360.0), (123.0, 123.0)])
    def test_clamping(self, model, buffer, rng, config, raw, expected):
        predictor = FixedPredictor(model, buffer, rng, raw)
        loop = LearningLoop(predictor, Trainer(model, buffer, config))
        loop.start()
        assert loop.tick(frame()) == expected

    def test_nan_holds_paddle(self, model, buffer, rng, config):
        predictor = FixedPredictor(model, buffer, rng, math.nan)
        loop = LearningLoop(predictor, Trainer(model, buffer, config))
        loop.start()
        assert loop.tick(frame(paddle_x=222.0)) == 222.0
        assert len(buffer) == 1

    def test_clamp_paddle_x(self):
        assert clamp_paddle_x(0, 80, 400) == 40
        assert clamp_paddle_x(400, 80, 400) == 360
        assert clamp_paddle_x(200, 80, 400) == 200


class TestTraining:
    """Test fits triggered by points."""

    def test_fit_drains_buffer_and_bumps_version(self, make_loop, buffer, model):
        loop = make_loop()
        loop.start()
        for _ in range(3):
            loop.tick(frame())
        result = asyncio.run(loop.point_scored(Side.OPPONENT))
        assert result is not None
        assert result.epoch_count >= 1
        assert len(buffer) == 0
        assert model.version == 1

    def test_no_fit_when_bot_scores_by_default(self, make_loop, buffer, model):
        loop = make_loop()
        loop.start()
        for _ in range(3):
            loop.tick(frame())
        result = asyncio.run(loop.point_scored(Side.BOT))
        assert result is None
        assert loop.is_playing
        assert model.version == 0
        assert len(buffer) == 3

    def test_samples_carry_over_to_next_fit(self, make_loop, buffer):
        loop = make_loop()
        loop.start()
        for _ in range(3):
            loop.tick(frame())
        asyncio.run(loop.point_scored(Side.BOT))
        for _ in range(2):
            loop.tick(frame())
        result = asyncio.run(loop.point_scored(Side.OPPONENT))
        assert result.sample_count == 5

    def test_empty_buffer_skips_fit(self, make_loop, model):
        loop = make_loop()
        loop.start()
        result = asyncio.run(loop.point_scored(Side.OPPONENT))
        assert result is None
        assert model.version == 0
        assert loop.is_playing

    def test_on_fit_callback(self, make_loop):
        results = []
        loop = make_loop(on_fit=results.append)
        loop.start()
        loop.tick(frame())
        result = asyncio.run(loop.point_scored(Side.OPPONENT))
        assert results == [result]

    def test_train_always(self, make_loop, model):
        loop = make_loop(should_train=train_always)
        loop.start()
        loop.tick(frame())
        asyncio.run(loop.point_scored(Side.BOT))
        assert model.version == 1

    def test_fit_error_leaves_loop_waiting(self, make_loop):
        loop = make_loop()

        async def broken_fit():
            raise RuntimeError("boom")

        loop.trainer.fit = broken_fit
        loop.start()
        loop.tick(frame())
        with pytest.raises(RuntimeError):
            asyncio.run(loop.point_scored(Side.OPPONENT))
        assert loop.state is LoopState.WAITING_TO_START

    def test_fit_changes_next_prediction(self, make_loop):
        """Weights change between points, so predictions do too."""
        torch.manual_seed(3)
        loop = make_loop()
        loop.start()
        f = frame()
        before = loop.predictor.model.predict_one(f.snapshot)
        for _ in range(4):
            loop.tick(f)
        asyncio.run(loop.point_scored(Side.OPPONENT))
        assert loop.predictor.model.predict_one(f.snapshot) != before


class TestPredicates:
    """Test the built-in training predicates."""

    def test_opponent(self):
        assert train_when_opponent_scores(Side.OPPONENT)
        assert not train_when_opponent_scores(Side.BOT)

    def test_bot(self):
        assert train_when_bot_scores(Side.BOT)
        assert not train_when_bot_scores(Side.OPPONENT)

    def test_always(self):
        assert train_always(Side.BOT) and train_always(Side.OPPONENT)

    def test_lookup(self):
        assert get_training_predicate('opponent') is train_when_opponent_scores
        with pytest.raises(ValueError):
            get_training_predicate('never')


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
