"""
Visualizer Module
=================

Pygame drawing for training feedback.

Classes:
    LossChart - Loss per generation line chart
    Overlay   - Faded background with prompt text
"""

from .loss_chart import LossChart
from .overlay import Overlay

__all__ = ['LossChart', 'Overlay']
