#!/usr/bin/env python3
"""
PongNet - Main Entry Point
==========================

Play Pong against a paddle that learns while you play.

Usage:
    # Play against the bot (mouse moves your paddle, click to start)
    python main.py

    # Let a scripted opponent play 50 points without a window
    python main.py --headless --points 50

    # Retrain after every point, with 5 epochs per fit
    python main.py --train-on always --epochs 5

    # Show the loss chart and wait for a click after each fit
    python main.py --pause-after-training

How it works:
    - Every frame the network predicts where the top paddle should go,
      and a ball-tracking heuristic labels the same frame
    - When the bot concedes a point the game freezes, the network is fitted
      on the samples of that point, and play resumes

Press:
    - ESC or Q: Quit
    - C: Toggle loss chart
"""

# Suppress pygame's pkg_resources deprecation warning (pygame issue #4557)
import warnings
warnings.filterwarnings("ignore", category=UserWarning, module="pygame.pkgdata")

import argparse
import asyncio
import os
import sys
from typing import Optional

import numpy as np
import pygame
import torch

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config import Config
from pongnet.ai import ModelHandle, Predictor, SampleBuffer, Trainer, TrainingResult
from pongnet.game import LearningLoop, LoopState, Pong, Side, get_training_predicate
from pongnet.utils.logger import LogLevel, get_log_path, get_logger, setup_logging
from pongnet.visualizer import LossChart, Overlay


def build_learning_loop(
    config: Config,
    rng: Optional[np.random.Generator] = None,
    on_fit=None,
) -> LearningLoop:
    """Wire model, buffer, predictor and trainer into a LearningLoop."""
    model = ModelHandle(config)
    get_logger('main').info(
        f"Model: {model.network.count_parameters():,} parameters on {model.device}"
    )
    buffer = SampleBuffer()
    predictor = Predictor(model, buffer, rng=rng)
    trainer = Trainer(model, buffer, config)
    return LearningLoop(
        predictor,
        trainer,
        should_train=get_training_predicate(config.TRAIN_ON),
        resume_after_training=config.RESUME_AFTER_TRAINING,
        on_fit=on_fit,
    )


class PongApp:
    """
    Windowed game: human (mouse) vs. learning bot.

    This class manages:
        - Pygame window and rendering
        - Mouse input for the player paddle
        - Scheduling fits without blocking the frame loop
    """

    def __init__(self, config: Config, rng: Optional[np.random.Generator] = None):
        self.config = config
        self.logger = get_logger('app')

        pygame.init()
        pygame.display.set_caption("PongNet - click to start")
        self.screen = pygame.display.set_mode((config.SCREEN_WIDTH, config.SCREEN_HEIGHT))
        self.clock = pygame.time.Clock()
        self.dt = 1.0 / config.FPS

        self.game = Pong(config)
        self.chart = LossChart(config)
        self.overlay = Overlay(config.SCREEN_WIDTH, config.SCREEN_HEIGHT)
        self.loop = build_learning_loop(config, rng=rng, on_fit=self._on_fit)

        self.running = True
        self._training_task: Optional[asyncio.Task] = None

    def _on_fit(self, result: TrainingResult) -> None:
        self.chart.update(result.loss)

    async def run(self) -> None:
        """Frame loop. Yields to the event loop every frame so fits can finish."""
        try:
            while self.running:
                self._collect_training_task()
                self._handle_events()

                if self.loop.is_playing and self._training_task is None:
                    self._step()

                self._render()
                pygame.display.flip()
                self.clock.tick(self.config.FPS)
                await asyncio.sleep(0)
        finally:
            try:
                # No cancellation for an in-flight fit: let it complete
                if self._training_task is not None:
                    task, self._training_task = self._training_task, None
                    await task
            finally:
                pygame.quit()

    def _collect_training_task(self) -> None:
        """Clear a finished fit task, re-raising its error if it failed."""
        task = self._training_task
        if task is not None and task.done():
            self._training_task = None
            task.result()

    def _handle_events(self) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                if event.key in (pygame.K_ESCAPE, pygame.K_q):
                    self.running = False
                elif event.key == pygame.K_c:
                    if self.chart.visible:
                        self.chart.hide()
                    else:
                        self.chart.show()
            elif event.type == pygame.MOUSEMOTION:
                self.game.set_player_paddle_x(event.pos[0])
            elif event.type == pygame.MOUSEBUTTONDOWN:
                if self.loop.state is LoopState.WAITING_TO_START and self._training_task is None:
                    self._start_point()

    def _start_point(self) -> None:
        self.loop.start()
        self.game.reset_ball()
        self.chart.hide()

    def _step(self) -> None:
        """One Playing frame: score check, bot decision, physics."""
        scorer = self.game.check_score()
        if scorer is not None:
            assert self.game.ball is not None
            self.game.ball.stop()
            self._training_task = asyncio.create_task(self._handle_point(scorer))
            return

        target_x = self.loop.tick(self.game.frame_state())
        if target_x is not None:
            self.game.set_bot_paddle_x(target_x)
        self.game.update(self.dt)

    async def _handle_point(self, scorer: Side) -> None:
        try:
            result = await self.loop.point_scored(scorer)
        except Exception:
            self.logger.exception("Fit failed, stopping the game")
            self.running = False
            raise

        if result is not None:
            self.logger.info(f"Generation {self.loop.trainer.history.generation}: loss={result.loss:.4f}")

        if self.loop.is_playing:
            self.game.reset_ball()
        else:
            self.chart.show()

    def _render(self) -> None:
        generation = self.loop.trainer.history.generation
        self.game.render(self.screen, generation=generation)

        if self.loop.is_training:
            self.overlay.render(self.screen, "Training AI...")
        elif self.loop.state is LoopState.WAITING_TO_START:
            if generation == 0 and self.loop.points_played == 0:
                self.overlay.render(self.screen, "Click to start")
            else:
                self.overlay.render(self.screen, "", "Click to continue")

        if self.chart.visible:
            w, h = self.config.SCREEN_WIDTH, self.config.SCREEN_HEIGHT
            self.chart.render(self.screen, pygame.Rect(20, int(h * 0.55), w - 40, int(h * 0.22)))


class HeadlessRunner:
    """
    Windowless runs against a scripted ball-tracking opponent.

    Useful for watching the loss curve in the logs without playing.
    """

    def __init__(self, config: Config, rng: Optional[np.random.Generator] = None):
        self.config = config
        self.logger = get_logger('headless')
        self.dt = 1.0 / config.FPS

        self.game = Pong(config, headless=True)
        self.loop = build_learning_loop(config, rng=rng)

        # Scripted opponent is a bit slower than the ball so points end
        self.opponent_speed = config.SCREEN_WIDTH * 0.6

    async def run(self, points: int) -> LearningLoop:
        """Play a number of points, fitting as configured."""
        self.logger.info(f"Headless run: {points} points, train on {self.config.TRAIN_ON} scores")

        self.loop.start()
        self.game.reset_ball()

        while self.loop.points_played < points:
            scorer = self._play_point()
            if scorer is None:
                self.logger.warning("Point hit the frame cap, re-serving")
                self.game.reset_ball()
                continue

            assert self.game.ball is not None
            self.game.ball.stop()
            await self.loop.point_scored(scorer)

            if not self.loop.is_playing:
                self.loop.start()
            self.game.reset_ball()

        history = self.loop.trainer.history
        avg = history.get_recent_average('losses', 10)
        self.logger.info(
            f"Done: {self.game.bot_score} - {self.game.player_score} (bot - opponent), "
            f"{history.generation} fits, recent loss {avg if avg is not None else float('nan'):.4f}"
        )
        return self.loop

    def _play_point(self) -> Optional[Side]:
        for _ in range(self.config.MAX_FRAMES_PER_POINT):
            scorer = self.game.check_score()
            if scorer is not None:
                return scorer

            target_x = self.loop.tick(self.game.frame_state())
            if target_x is not None:
                self.game.set_bot_paddle_x(target_x)
            self.game.track_ball_x(self.opponent_speed, self.dt)
            self.game.update(self.dt)
        return None


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="PongNet - Pong against a paddle that learns while you play",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        '--headless', action='store_true',
        help='No window: a scripted opponent plays against the bot'
    )
    parser.add_argument(
        '--points', type=int, default=None,
        help='Points to play in headless mode (default: from config)'
    )

    # Training parameters
    parser.add_argument(
        '--lr', type=float, default=None,
        help='Learning rate'
    )
    parser.add_argument(
        '--epochs', type=int, default=None,
        help='Epochs per fit pass (default: 1)'
    )
    parser.add_argument(
        '--batch-size', type=int, default=None,
        help='Mini-batch size inside a fit (default: whole buffer)'
    )
    parser.add_argument(
        '--train-on', type=str, default=None, choices=['opponent', 'bot', 'always'],
        help='Which scoring side triggers a fit (default: opponent)'
    )
    parser.add_argument(
        '--pause-after-training', action='store_true',
        help='Show the loss chart and wait for a click after each fit'
    )

    # System
    parser.add_argument(
        '--cpu', action='store_true',
        help='Force CPU'
    )
    parser.add_argument(
        '--seed', type=int, default=None,
        help='Random seed for reproducibility'
    )
    parser.add_argument(
        '--log-level', type=str, default=None, choices=[level.name for level in LogLevel],
        help='Logging verbosity (DEBUG shows every prediction)'
    )

    return parser.parse_args(argv)


def apply_args(config: Config, args: argparse.Namespace) -> Config:
    """Apply CLI overrides to a config and re-validate it."""
    if args.lr is not None:
        config.LEARNING_RATE = args.lr
    if args.epochs is not None:
        config.FIT_EPOCHS = args.epochs
    if args.batch_size is not None:
        config.FIT_BATCH_SIZE = args.batch_size
    if args.train_on is not None:
        config.TRAIN_ON = args.train_on
    if args.pause_after_training:
        config.RESUME_AFTER_TRAINING = False
    if args.cpu:
        config.FORCE_CPU = True
    if args.seed is not None:
        config.SEED = args.seed
    if args.log_level is not None:
        config.LOG_LEVEL = args.log_level
    if args.points is not None:
        config.HEADLESS_POINTS = args.points
    config.__post_init__()
    return config


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)
    config = apply_args(Config(), args)

    setup_logging(log_dir=config.LOG_DIR, level=LogLevel[config.LOG_LEVEL])
    logger = get_logger('main')

    rng = None
    if config.SEED is not None:
        np.random.seed(config.SEED)
        torch.manual_seed(config.SEED)
        rng = np.random.default_rng(config.SEED)

    logger.info(f"Device: {config.DEVICE} | lr={config.LEARNING_RATE} | epochs/fit={config.FIT_EPOCHS}")
    logger.info(f"Log file: {get_log_path()}")

    try:
        if args.headless:
            asyncio.run(HeadlessRunner(config, rng=rng).run(config.HEADLESS_POINTS))
        else:
            asyncio.run(PongApp(config, rng=rng).run())
    except KeyboardInterrupt:
        logger.info("Interrupted by user")


if __name__ == "__main__":
    main()
