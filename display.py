"""
display.py

Full-screen pygame card shown before each launch: black background with the
game's description and "year manufacturer" centred in green.  It also shows
the single error notification when the rotation cannot go on.
"""

from __future__ import annotations

import time
from typing import Optional

import pygame

import config
from events import EventManager

# ── colours ────────────────────────────────────────────────────────────────
BLACK = (0, 0, 0)
GREEN = (0, 255, 0)
GREY  = (120, 160, 120)
RED   = (255, 50, 50)
WHITE = (255, 255, 255)


def _fit_font(text: str, size: int, max_w: int) -> pygame.font.Font:
    """Largest monospace font ≤ *size* whose rendering of *text* fits *max_w*."""
    while True:
        font = pygame.font.SysFont("monospace", size)
        if size <= 12 or font.size(text)[0] <= max_w:
            return font
        size = int(size * 0.85)


class GameCard:
    """Background window the emulator launches on top of."""

    def __init__(self, fullscreen: Optional[bool] = None, windowed_size=None):
        self.fullscreen = config.FULLSCREEN if fullscreen is None else fullscreen
        self.windowed_size = windowed_size or config.WINDOWED_SIZE
        self.screen: Optional[pygame.Surface] = None
        self.description = ""
        self.detail = ""

    # ── surface control ---------------------------------------------------
    def set_metadata(self, description: str, detail: str) -> None:
        self.description = description
        self.detail = detail
        if self.screen is not None:
            self._draw()

    def show_full_screen(self) -> None:
        if self.screen is None:
            pygame.init()
            self.screen = pygame.display.set_mode(
                (0, 0) if self.fullscreen else self.windowed_size,
                pygame.FULLSCREEN if self.fullscreen else 0,
            )
            pygame.display.set_caption("arcade-saver")
            pygame.mouse.set_visible(False)
            pygame.event.clear()        # window creation emits focus/motion noise
        self._draw()

    def close(self) -> None:
        if self.screen is None:
            return
        self.screen = None
        pygame.mouse.set_visible(True)
        pygame.display.quit()
        pygame.quit()

    def pump(self) -> None:
        """Feed window input into EventManager; repaint when exposed."""
        if self.screen is None:
            return
        exposed = False
        for e in pygame.event.get():
            exposed |= e.type == pygame.VIDEOEXPOSE
            EventManager.handle(e)
        if exposed:
            self._draw()

    # ── error notification ------------------------------------------------
    def show_error(self, message: str, seconds: Optional[float] = None) -> None:
        """Red card until any input or *seconds* elapse."""
        seconds = config.ERROR_CARD_SECONDS if seconds is None else seconds
        self.show_full_screen()
        self._draw(lines=["Error", "", message], colour=RED)

        end = time.monotonic() + seconds
        clock = pygame.time.Clock()
        while time.monotonic() < end:
            if any(EventManager.translate(e) for e in pygame.event.get()):
                break
            clock.tick(config.FPS)
        self.close()

    # ── drawing -----------------------------------------------------------
    def _draw(self, lines: Optional[list[str]] = None, colour=GREEN) -> None:
        surface = self.screen
        if surface is None:
            return
        w, h = surface.get_size()
        surface.fill(BLACK)

        if lines is None:
            rows = [(self.description, h // 12, colour), (self.detail, h // 24, GREY)]
        else:
            rows = [(ln, h // 24, colour if i == 0 else WHITE) for i, ln in enumerate(lines)]

        rendered = []
        for text, size, col in rows:
            font = _fit_font(text or " ", max(12, size), int(w * 0.9))
            rendered.append((font.render(text or " ", True, col), font.get_linesize()))

        total = sum(ls for _, ls in rendered)
        y = (h - total) // 2
        for surf, line_h in rendered:
            surface.blit(surf, ((w - surf.get_width()) // 2, y))
            y += line_h

        pygame.display.flip()
