"""
PongNet - Source Package
========================

Pong with a bot paddle that learns on-line from a ball-tracking heuristic.

Modules:
    ai/         - Regression model, sample buffer, predictor and trainer
    game/       - Pong court and the learning loop state machine
    visualizer/ - Loss chart and overlays
    utils/      - Logging
"""

__version__ = "1.0.0"
