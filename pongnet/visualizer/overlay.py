"""
Overlay
=======

Faded full-screen background with centered prompt text, shown while the
game is waiting for a click or the model is training.
"""

from typing import Optional

import pygame


class Overlay:
    """Semi-transparent screen cover with a message."""

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height

        self.text_color = (255, 255, 255)
        self._background = pygame.Surface((width, height), pygame.SRCALPHA)
        self._background.fill((0, 0, 0, 128))

        pygame.font.init()
        self._font = pygame.font.Font(None, 40)
        self._small_font = pygame.font.Font(None, 30)

    def render(
        self,
        screen: pygame.Surface,
        message: str,
        sub_message: Optional[str] = None,
        sub_y_ratio: float = 1 / 1.2
    ) -> None:
        """
        Draw the overlay.

        Args:
            screen: Pygame surface to draw on
            message: Main text, centered on screen
            sub_message: Optional secondary prompt
            sub_y_ratio: Vertical position of the secondary prompt
        """
        screen.blit(self._background, (0, 0))

        text = self._font.render(message, True, self.text_color)
        screen.blit(text, text.get_rect(center=(self.width // 2, self.height // 2)))

        if sub_message:
            sub = self._small_font.render(sub_message, True, self.text_color)
            screen.blit(sub, sub.get_rect(center=(self.width // 2, int(self.height * sub_y_ratio))))
