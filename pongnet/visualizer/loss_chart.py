"""
Loss Chart
==========

Line chart of the loss reported after each fit, one point per generation.
Lower is smarter.
"""

import math
from collections import deque
from typing import List, Optional, Tuple

import pygame

from config import Config


class LossChart:
    """
    Scrolling loss-per-generation chart.

    Example:
        >>> chart = LossChart(config)
        >>> chart.update(result.loss)
        >>> chart.render(screen, pygame.Rect(20, 380, 360, 180))
    """

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()
        self.losses: deque = deque(maxlen=self.config.LOSS_HISTORY_LENGTH)
        self.visible = False

        self.bg_color = (8, 10, 18)
        self.grid_color = (35, 40, 55)
        self.line_color = self.config.COLOR_LOSS

        self._font: Optional[pygame.font.Font] = None

    def update(self, loss: float) -> None:
        """Append the loss of the latest fit."""
        self.losses.append(loss)

    def show(self) -> None:
        self.visible = True

    def hide(self) -> None:
        self.visible = False

    def points(self, rect: pygame.Rect) -> List[Tuple[int, int]]:
        """Screen coordinates of the loss line inside rect (non-finite values drawn as 0)."""
        clean = [v if math.isfinite(v) else 0.0 for v in self.losses]
        if not clean:
            return []
        max_val = max(max(clean), 1e-6)

        plot_top = rect.top + 5
        plot_bottom = rect.bottom - 20
        plot_height = plot_bottom - plot_top

        result = []
        for i, val in enumerate(clean):
            x = rect.left + 5 + (i / max(len(clean) - 1, 1)) * (rect.width - 10)
            y = plot_bottom - (val / max_val) * plot_height
            y = max(plot_top, min(plot_bottom, y))
            result.append((int(x), int(y)))
        return result

    def render(self, screen: pygame.Surface, rect: pygame.Rect) -> None:
        """Draw the chart into rect."""
        if not self.visible:
            return

        if self._font is None:
            pygame.font.init()
            self._font = pygame.font.Font(None, 20)

        pygame.draw.rect(screen, self.bg_color, rect, border_radius=5)
        pygame.draw.rect(screen, (40, 45, 60), rect, 1, border_radius=5)

        for i in range(1, 5):
            y = rect.top + (i * rect.height // 5)
            pygame.draw.line(screen, self.grid_color, (rect.left + 5, y), (rect.right - 5, y), 1)

        pts = self.points(rect)
        if len(pts) >= 2:
            pygame.draw.lines(screen, self.line_color, False, pts, 2)
        elif len(pts) == 1:
            pygame.draw.circle(screen, self.line_color, pts[0], 3)

        label = self._font.render("Loss (lower is smarter)", True, (200, 205, 220))
        screen.blit(label, (rect.left + 8, rect.top + 6))

        axis = self._font.render(f"Generations: {len(self.losses)}", True, (120, 120, 140))
        screen.blit(axis, axis.get_rect(right=rect.right - 8, bottom=rect.bottom - 4))

        last = self.losses[-1] if self.losses else None
        if last is not None:
            text = f"{last:.2f}" if math.isfinite(last) else "NaN"
            value = self._font.render(text, True, self.line_color)
            screen.blit(value, value.get_rect(right=rect.right - 8, top=rect.top + 6))
