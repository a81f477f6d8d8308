"""
Heuristic Labeler
=================

The ball-tracking policy used to produce supervised targets.

The network never sees rewards; it learns to imitate this rule:

    ball in the bot's half (ball_y < height / 2):
        follow the ball, offset by a random amount U ~ [0, paddle_width / 2)
        toward the side the opponent is standing on
    ball in the far half:
        return to the center of the court
"""

from typing import Optional

import numpy as np

_default_rng = np.random.default_rng()


def heuristic_label(
    ball_x: float,
    ball_y: float,
    opponent_paddle_x: float,
    paddle_width: float,
    court_height: float,
    court_width: float,
    rng: Optional[np.random.Generator] = None,
) -> float:
    """
    Compute the target x position for the bot paddle.

    Args:
        ball_x: Ball x position
        ball_y: Ball y position (0 = bot's goal line)
        opponent_paddle_x: Opponent paddle x position
        paddle_width: Paddle width
        court_height: Court height
        court_width: Court width
        rng: Random source for the offset (module default if None)

    Returns:
        Target paddle x (unclamped)
    """
    if ball_y < court_height / 2:
        rng = rng if rng is not None else _default_rng
        offset = float(rng.uniform(0.0, paddle_width / 2))
        if opponent_paddle_x < court_width / 2:
            return ball_x - offset
        return ball_x + offset
    return court_width / 2
