"""
Tests for the command line entry point and headless runs.
"""

import asyncio
import logging

import numpy as np
import pygame
import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import Config
from main import HeadlessRunner, PongApp, apply_args, build_learning_loop, parse_args
from pongnet.game import LoopState, Side, train_always, train_when_opponent_scores


async def failing_fit():
    raise RuntimeError("fit exploded")


@pytest.fixture
def app(config):
    """Windowed app on the dummy SDL video driver."""
    application = PongApp(config)
    yield application
    pygame.quit()


class TestArgs:
    """Test CLI parsing and config overrides."""

    def test_defaults_leave_config_unchanged(self):
        cfg = apply_args(Config(), parse_args([]))
        assert cfg.FIT_EPOCHS == 1
        assert cfg.FIT_BATCH_SIZE is None
        assert cfg.TRAIN_ON == 'opponent'
        assert cfg.RESUME_AFTER_TRAINING

    def test_overrides(self):
        args = parse_args([
            '--lr', '0.01', '--epochs', '3', '--batch-size', '16',
            '--train-on', 'always', '--pause-after-training', '--seed', '7',
            '--cpu', '--log-level', 'DEBUG', '--points', '5',
        ])
        cfg = apply_args(Config(), args)
        assert cfg.LEARNING_RATE == 0.01
        assert cfg.FIT_EPOCHS == 3
        assert cfg.FIT_BATCH_SIZE == 16
        assert cfg.TRAIN_ON == 'always'
        assert not cfg.RESUME_AFTER_TRAINING
        assert cfg.SEED == 7
        assert cfg.FORCE_CPU
        assert cfg.LOG_LEVEL == 'DEBUG'
        assert cfg.HEADLESS_POINTS == 5

    def test_invalid_train_on_rejected(self):
        with pytest.raises(SystemExit):
            parse_args(['--train-on', 'never'])

    @pytest.mark.parametrize("argv", [
        ['--epochs', '0'],
        ['--batch-size', '0'],
        ['--lr', '0'],
        ['--points', '0'],
    ])
    def test_zero_overrides_rejected(self, argv):
        """Explicit zeros reach validation instead of being ignored."""
        with pytest.raises(AssertionError):
            apply_args(Config(), parse_args(argv))


class TestBuildLearningLoop:
    """Test wiring of the learning core."""

    def test_shared_buffer(self, config):
        loop = build_learning_loop(config)
        assert loop.predictor.buffer is loop.trainer.buffer
        assert loop.predictor.model is loop.trainer.model
        assert loop.state is LoopState.WAITING_TO_START

    def test_predicate_from_config(self, config):
        assert build_learning_loop(config).should_train is train_when_opponent_scores
        config.TRAIN_ON = 'always'
        assert build_learning_loop(config).should_train is train_always

    def test_logs_model_size(self, config, caplog):
        with caplog.at_level(logging.INFO, logger='pongnet'):
            build_learning_loop(config)
        assert any("parameters on cpu" in r.getMessage() for r in caplog.records)


class TestPongAppTraining:
    """Fit tasks scheduled by the windowed app."""

    def test_successful_fit_resumes_play(self, app):
        app.loop.start()
        app.loop.tick(app.game.frame_state())

        async def scenario():
            app._training_task = asyncio.create_task(app._handle_point(Side.OPPONENT))
            await asyncio.wait([app._training_task])
            app._collect_training_task()

        asyncio.run(scenario())
        assert app._training_task is None
        assert app.loop.is_playing
        assert app.game.ball.visible
        assert list(app.chart.losses) == [app.loop.trainer.history.last_loss()]

    def test_failed_fit_is_logged_and_raised(self, app, caplog):
        app.loop.trainer.fit = failing_fit
        app.loop.start()
        app.loop.tick(app.game.frame_state())

        async def scenario():
            app._training_task = asyncio.create_task(app._handle_point(Side.OPPONENT))
            await asyncio.wait([app._training_task])
            with pytest.raises(RuntimeError, match="fit exploded"):
                app._collect_training_task()

        with caplog.at_level(logging.ERROR, logger='pongnet'):
            asyncio.run(scenario())

        assert not app.running
        assert app._training_task is None
        assert app.loop.state is LoopState.WAITING_TO_START
        assert any(r.levelno == logging.ERROR and r.exc_info for r in caplog.records)

    def test_run_propagates_failed_fit(self, app):
        """A failed fit ends the frame loop with the original error."""
        app.loop.trainer.fit = failing_fit
        app.loop.start()
        app.loop.tick(app.game.frame_state())
        app.game.ball.serve(200, 5, 0, -100)

        with pytest.raises(RuntimeError, match="fit exploded"):
            asyncio.run(app.run())


@pytest.mark.slow
class TestHeadlessRunner:
    """Short scripted games."""

    def test_plays_requested_points(self, config):
        config.TRAIN_ON = 'always'
        runner = HeadlessRunner(config, rng=np.random.default_rng(0))
        loop = asyncio.run(runner.run(3))
        assert loop.points_played == 3
        assert loop.trainer.history.generation == 3
        assert loop.trainer.model.version == 3
        assert runner.game.bot_score + runner.game.player_score == 3

    def test_pause_after_training_still_finishes(self, config):
        config.TRAIN_ON = 'always'
        config.RESUME_AFTER_TRAINING = False
        runner = HeadlessRunner(config, rng=np.random.default_rng(0))
        loop = asyncio.run(runner.run(2))
        assert loop.points_played == 2


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
