"""
Configuration file for PongNet
==============================

All hyperparameters, court settings, and visualization options are centralized here.
Modify these values to experiment with different training configurations.

Usage:
    from config import Config
    cfg = Config()
    print(cfg.LEARNING_RATE)
"""

from dataclasses import dataclass, field
from typing import List, Tuple, Optional
import torch


@dataclass
class Config:
    """
    Central configuration for the entire project.

    Sections:
    1. Court Settings - Pong court and physics parameters
    2. Neural Network - Architecture configuration
    3. Training - On-line learning schedule
    4. Visualization - Display options
    5. System - Hardware, logging and seeding
    """

    # =========================================================================
    # COURT SETTINGS
    # =========================================================================

    # Portrait court: bot paddle on top, human paddle at the bottom
    SCREEN_WIDTH: int = 400
    SCREEN_HEIGHT: int = 600

    # Sizes are relative to the court so the game scales with the window
    PADDLE_WIDTH_RATIO: float = 0.2    # of SCREEN_WIDTH
    PADDLE_HEIGHT_RATIO: float = 0.03  # of SCREEN_HEIGHT
    BOT_PADDLE_Y_RATIO: float = 0.05
    PLAYER_PADDLE_Y_RATIO: float = 0.95
    BALL_SIZE_RATIO: float = 0.05      # of SCREEN_WIDTH

    # Serve speed in px/s, relative to court size
    BALL_SPEED_RATIO: float = 0.3

    # Added to |vy| every frame (|vx| gets 5x this)
    BALL_ACCELERATION: float = 0.5

    # Horizontal velocity per pixel of offset from paddle center on a hit
    PADDLE_DEFLECTION: float = 5.0

    FPS: int = 60

    # =========================================================================
    # NEURAL NETWORK ARCHITECTURE
    # =========================================================================

    # Input: ball (x, y), ball velocity (vx, vy), bot paddle x, opponent paddle x
    STATE_SIZE: int = 6

    # Output: target x for the bot paddle
    OUTPUT_SIZE: int = 1

    # Hidden layer architecture
    HIDDEN_LAYERS: List[int] = field(default_factory=lambda: [64, 128, 64])

    # The first dense layer is a plain linear projection (no activation)
    INPUT_LAYER_LINEAR: bool = True

    # Activation function for the remaining hidden layers: 'relu', 'leaky_relu', 'tanh', 'elu'
    ACTIVATION: str = 'relu'

    # =========================================================================
    # TRAINING
    # =========================================================================

    # Adam learning rate
    LEARNING_RATE: float = 0.001

    # Epochs per fit pass (one fit runs after each qualifying point)
    FIT_EPOCHS: int = 1

    # Mini-batch size inside a fit pass (None = the whole drained buffer is one batch)
    FIT_BATCH_SIZE: Optional[int] = None

    # Which scoring side triggers a fit: 'opponent', 'bot', 'always'
    # 'opponent' = retrain when the bot concedes a point
    TRAIN_ON: str = 'opponent'

    # After a fit go straight back to play (False = wait for a click)
    RESUME_AFTER_TRAINING: bool = True

    # =========================================================================
    # VISUALIZATION SETTINGS
    # =========================================================================

    COLOR_TABLE: Tuple[int, int, int] = (0, 100, 0)
    COLOR_LINES: Tuple[int, int, int] = (255, 255, 255)
    COLOR_BALL: Tuple[int, int, int] = (255, 255, 255)
    COLOR_BOT_PADDLE: Tuple[int, int, int] = (200, 200, 255)
    COLOR_PLAYER_PADDLE: Tuple[int, int, int] = (255, 255, 255)
    COLOR_TEXT: Tuple[int, int, int] = (255, 255, 255)
    COLOR_LOSS: Tuple[int, int, int] = (255, 255, 255)

    # Number of fit results kept for the loss chart
    LOSS_HISTORY_LENGTH: int = 500

    # =========================================================================
    # HEADLESS RUNS
    # =========================================================================

    # Points to play in --headless mode
    HEADLESS_POINTS: int = 20

    # Safety cap on frames per point in --headless mode
    MAX_FRAMES_PER_POINT: int = 10000

    # =========================================================================
    # SYSTEM SETTINGS
    # =========================================================================

    # Force CPU device
    FORCE_CPU: bool = False

    @property
    def DEVICE(self) -> torch.device:
        """Auto-detect CUDA/MPS/CPU, or force CPU if configured."""
        if self.FORCE_CPU:
            return torch.device('cpu')
        if torch.cuda.is_available():
            return torch.device('cuda')
        elif hasattr(torch.backends, 'mps') and torch.backends.mps.is_available():
            return torch.device('mps')
        return torch.device('cpu')

    @property
    def PADDLE_WIDTH(self) -> float:
        """Paddle width in pixels."""
        return self.SCREEN_WIDTH * self.PADDLE_WIDTH_RATIO

    @property
    def PADDLE_HEIGHT(self) -> float:
        """Paddle height in pixels."""
        return self.SCREEN_HEIGHT * self.PADDLE_HEIGHT_RATIO

    # Logging
    LOG_DIR: str = 'logs'
    LOG_LEVEL: str = 'INFO'

    # Random seed for reproducibility (None for random)
    SEED: Optional[int] = None

    def __post_init__(self):
        """Validation and derived calculations."""
        assert self.SCREEN_WIDTH > 0 and self.SCREEN_HEIGHT > 0, "Screen size must be positive"
        assert 0 < self.PADDLE_WIDTH_RATIO < 1, "Paddle width ratio must be in (0, 1)"
        assert self.LEARNING_RATE > 0, "Learning rate must be positive"
        assert self.FIT_EPOCHS >= 1, "FIT_EPOCHS must be at least 1"
        assert self.FIT_BATCH_SIZE is None or self.FIT_BATCH_SIZE > 0, "FIT_BATCH_SIZE must be positive or None"
        assert self.STATE_SIZE == 6, "The snapshot has exactly 6 features"
        assert self.TRAIN_ON in ('opponent', 'bot', 'always'), \
            "TRAIN_ON must be 'opponent', 'bot' or 'always'"
        assert self.FPS > 0, "FPS must be positive"
        assert self.HEADLESS_POINTS >= 1, "HEADLESS_POINTS must be at least 1"


# Global config instance for easy importing
config = Config()


if __name__ == "__main__":
    # Print configuration summary
    cfg = Config()
    print("=" * 60)
    print("PongNet - Configuration Summary")
    print("=" * 60)
    print(f"\nCourt: {cfg.SCREEN_WIDTH}x{cfg.SCREEN_HEIGHT} @ {cfg.FPS} FPS")
    print(f"Paddle: {cfg.PADDLE_WIDTH:.0f}x{cfg.PADDLE_HEIGHT:.0f}")
    print(f"\nNeural Network:")
    print(f"   Input size: {cfg.STATE_SIZE}")
    print(f"   Hidden layers: {cfg.HIDDEN_LAYERS}")
    print(f"   Output size: {cfg.OUTPUT_SIZE}")
    print(f"\nTraining:")
    print(f"   Learning rate: {cfg.LEARNING_RATE}")
    print(f"   Epochs per fit: {cfg.FIT_EPOCHS}")
    print(f"   Batch size: {cfg.FIT_BATCH_SIZE or 'whole buffer'}")
    print(f"   Train on: {cfg.TRAIN_ON} scores")
    print(f"\nDevice: {cfg.DEVICE}")
    print("=" * 60)
