"""
Pong Game Implementation
========================

Portrait Pong court that feeds the learning loop.

Layout:
- Bot paddle along the top edge, driven by the regression model
- Player paddle along the bottom edge, driven by the mouse (or a
  scripted tracker in headless runs)
- Ball bounces off the side walls and both paddles, and speeds up a
  little every frame

Scoring:
- Ball reaches the bot's goal line  -> opponent scores
- Ball reaches the player's goal line -> bot scores

All positions are centers, in pixels; velocities are in px/s.
"""

import numpy as np
import pygame
from typing import Optional

from config import Config
from ..ai.errors import UninitializedStateError
from ..ai.samples import CourtGeometry, FrameState, Snapshot
from .loop import Side


class PongBall:
    """The bouncing ball."""

    def __init__(self, x: float, y: float, size: float):
        self.x = x
        self.y = y
        self.size = size
        self.vx = 0.0
        self.vy = 0.0
        self.visible = False

    @property
    def radius(self) -> float:
        return self.size / 2

    @property
    def rect(self) -> pygame.Rect:
        """Get bounding rectangle for collision detection."""
        return pygame.Rect(
            int(self.x - self.radius),
            int(self.y - self.radius),
            int(self.size),
            int(self.size)
        )

    def serve(self, x: float, y: float, vx: float, vy: float) -> None:
        """Place the ball and give it a velocity."""
        self.x = x
        self.y = y
        self.vx = vx
        self.vy = vy
        self.visible = True

    def stop(self) -> None:
        """Hide the ball and freeze it in place."""
        self.vx = 0.0
        self.vy = 0.0
        self.visible = False

    def move(self, dt: float) -> None:
        """Update ball position."""
        self.x += self.vx * dt
        self.y += self.vy * dt


class PongPaddle:
    """A horizontal paddle (bot or player)."""

    def __init__(self, x: float, y: float, width: float, height: float):
        self.x = x
        self.y = y
        self.width = width
        self.height = height

    @property
    def rect(self) -> pygame.Rect:
        """Get paddle rectangle."""
        return pygame.Rect(
            int(self.x - self.width / 2),
            int(self.y - self.height / 2),
            int(self.width),
            int(self.height)
        )

    def set_x(self, x: float, court_width: float) -> None:
        """Move the paddle center, keeping it on the court."""
        half = self.width / 2
        self.x = max(half, min(court_width - half, x))


class Pong:
    """
    Pong court with one learning paddle.

    Example:
        >>> game = Pong(config, headless=True)
        >>> game.reset_ball()
        >>> frame = game.frame_state()
        >>> game.set_bot_paddle_x(target_x)
        >>> scorer = game.update(1 / 60)
    """

    def __init__(self, config: Optional[Config] = None, headless: bool = False):
        """
        Initialize the Pong court.

        Args:
            config: Configuration object (uses default if None)
            headless: If True, skip fonts and rendering
        """
        self.config = config or Config()
        self.headless = headless

        self.width = float(self.config.SCREEN_WIDTH)
        self.height = float(self.config.SCREEN_HEIGHT)

        self.bot_paddle: Optional[PongPaddle] = None
        self.player_paddle: Optional[PongPaddle] = None
        self.ball: Optional[PongBall] = None

        self.bot_score = 0
        self.player_score = 0

        if not headless:
            pygame.font.init()
            self._font = pygame.font.Font(None, 32)
        else:
            self._font = None

        self.reset()

    def reset(self) -> None:
        """Create paddles and a hidden ball, and zero the scores."""
        self.bot_score = 0
        self.player_score = 0

        paddle_width = self.config.PADDLE_WIDTH
        paddle_height = self.config.PADDLE_HEIGHT

        self.bot_paddle = PongPaddle(
            self.width / 2, self.height * self.config.BOT_PADDLE_Y_RATIO,
            paddle_width, paddle_height
        )
        self.player_paddle = PongPaddle(
            self.width / 2, self.height * self.config.PLAYER_PADDLE_Y_RATIO,
            paddle_width, paddle_height
        )
        self.ball = PongBall(
            self.width / 2, self.height / 2,
            self.width * self.config.BALL_SIZE_RATIO
        )

    @property
    def geometry(self) -> CourtGeometry:
        """Court dimensions for the learning core."""
        if self.bot_paddle is None:
            raise UninitializedStateError("Paddles not initialized")
        return CourtGeometry(
            paddle_width=self.bot_paddle.width,
            court_width=self.width,
            court_height=self.height,
        )

    def reset_ball(self) -> None:
        """Serve from the center in a random diagonal direction."""
        if self.ball is None:
            raise UninitializedStateError("Ball not initialized")
        speed_x = self.width * self.config.BALL_SPEED_RATIO
        speed_y = self.height * self.config.BALL_SPEED_RATIO
        vx = speed_x if np.random.random() < 0.5 else -speed_x
        vy = speed_y if np.random.random() < 0.5 else -speed_y
        self.ball.serve(self.width / 2, self.height / 2, vx, vy)

    def frame_state(self) -> FrameState:
        """Capture this frame's snapshot for the learning core."""
        if self.ball is None or self.bot_paddle is None or self.player_paddle is None:
            raise UninitializedStateError("Game objects not initialized")

        snapshot = Snapshot(
            ball_x=float(self.ball.x),
            ball_y=float(self.ball.y),
            ball_vx=float(self.ball.vx),
            ball_vy=float(self.ball.vy),
            paddle_x=float(self.bot_paddle.x),
            opponent_x=float(self.player_paddle.x),
        )
        return FrameState(snapshot=snapshot, geometry=self.geometry)

    def set_bot_paddle_x(self, x: float) -> None:
        assert self.bot_paddle is not None
        self.bot_paddle.set_x(x, self.width)

    def set_player_paddle_x(self, x: float) -> None:
        assert self.player_paddle is not None
        self.player_paddle.set_x(x, self.width)

    def track_ball_x(self, max_speed: float, dt: float) -> None:
        """Scripted opponent: move the player paddle toward the ball at limited speed."""
        assert self.ball is not None and self.player_paddle is not None
        step = max_speed * dt
        delta = self.ball.x - self.player_paddle.x
        delta = max(-step, min(step, delta))
        self.set_player_paddle_x(self.player_paddle.x + delta)

    def check_score(self) -> Optional[Side]:
        """
        Detect a goal and update the score.

        Returns:
            Side that scored, or None
        """
        assert self.ball is not None
        assert self.bot_paddle is not None and self.player_paddle is not None

        if self.ball.y < self.bot_paddle.height:
            self.player_score += 1
            return Side.OPPONENT
        if self.ball.y > self.height - self.player_paddle.height:
            self.bot_score += 1
            return Side.BOT
        return None

    def update(self, dt: float) -> None:
        """Advance the ball one frame: accelerate, move, and resolve collisions."""
        assert self.ball is not None
        if not self.ball.visible:
            return

        self._accelerate()
        self.ball.move(dt)
        self._handle_collisions()

    def _accelerate(self) -> None:
        """Speed the ball up a little on both axes."""
        assert self.ball is not None
        a = self.config.BALL_ACCELERATION
        self.ball.vy += a if self.ball.vy > 0 else -a
        self.ball.vx += 5 * a if self.ball.vx > 0 else -5 * a

    def _handle_collisions(self) -> None:
        """Handle side walls and paddle hits."""
        assert self.ball is not None
        assert self.bot_paddle is not None and self.player_paddle is not None
        ball = self.ball

        # Side walls
        if ball.x - ball.radius <= 0:
            ball.x = ball.radius
            ball.vx = abs(ball.vx)
        elif ball.x + ball.radius >= self.width:
            ball.x = self.width - ball.radius
            ball.vx = -abs(ball.vx)

        # Bot paddle (top): only when the ball is moving up
        if ball.vy < 0 and ball.rect.colliderect(self.bot_paddle.rect):
            self._paddle_bounce(self.bot_paddle, direction=1)

        # Player paddle (bottom): only when the ball is moving down
        elif ball.vy > 0 and ball.rect.colliderect(self.player_paddle.rect):
            self._paddle_bounce(self.player_paddle, direction=-1)

    def _paddle_bounce(self, paddle: PongPaddle, direction: int) -> None:
        """Reflect the ball and steer it by where it hit the paddle."""
        assert self.ball is not None
        ball = self.ball

        ball.vy = direction * abs(ball.vy)

        diff = ball.x - paddle.x
        if diff != 0:
            ball.vx = diff * self.config.PADDLE_DEFLECTION

        # Push ball out of paddle
        if direction == 1:
            ball.y = paddle.y + paddle.height / 2 + ball.radius + 1
        else:
            ball.y = paddle.y - paddle.height / 2 - ball.radius - 1

    def render(self, screen: pygame.Surface, generation: int = 0) -> None:
        """Draw the table, paddles, ball and scoreboard."""
        if self.headless:
            return

        assert self.ball is not None
        assert self.bot_paddle is not None and self.player_paddle is not None

        width, height = int(self.width), int(self.height)

        # Table and lines
        screen.fill(self.config.COLOR_TABLE)
        pygame.draw.rect(screen, self.config.COLOR_LINES, (0, 0, width, height), 4)
        pygame.draw.line(screen, self.config.COLOR_LINES, (0, height // 2), (width, height // 2), 4)

        pygame.draw.rect(screen, self.config.COLOR_BOT_PADDLE, self.bot_paddle.rect)
        pygame.draw.rect(screen, self.config.COLOR_PLAYER_PADDLE, self.player_paddle.rect)

        if self.ball.visible:
            pygame.draw.ellipse(screen, self.config.COLOR_BALL, self.ball.rect)

        if self._font:
            color = self.config.COLOR_TEXT
            bot_text = self._font.render(f"Score: {self.bot_score}", True, color)
            screen.blit(bot_text, (4, 4))

            player_text = self._font.render(f"Score: {self.player_score}", True, color)
            screen.blit(player_text, (4, height - player_text.get_height() - 4))

            gen_text = self._font.render(f"Generation: {generation}", True, color)
            screen.blit(gen_text, (width - gen_text.get_width() - 4, 4))
