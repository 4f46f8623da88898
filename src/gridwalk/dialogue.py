"""Dialog box shown by "talk" events."""

from __future__ import annotations

import pygame

from gridwalk.settings import (
    DIALOGUE_HEIGHT,
    COLOR_DIALOGUE_BG,
    COLOR_DIALOGUE_TEXT,
    COLOR_NPC_NAME,
)


class Dialog:
    def __init__(self):
        self.visible = False
        self.portrait: str | None = None
        self.body = ""
        self.side = "left"
        self.history: list[tuple[str, str, str]] = []
        self.padding = 12
        self._name_font = None
        self._text_font = None

    def show(self, portrait: str, body: str, side: str) -> None:
        self.portrait = portrait
        self.body = body
        self.side = side
        self.visible = True
        self.history.append((portrait, body, side))

    def hide(self) -> None:
        self.visible = False

    def draw(self, screen):
        if not self.visible:
            return
        if self._name_font is None:
            self._name_font = pygame.font.SysFont(None, 26)
            self._text_font = pygame.font.SysFont(None, 22)

        width = screen.get_width()
        panel_y = screen.get_height() - DIALOGUE_HEIGHT
        panel = pygame.Surface((width, DIALOGUE_HEIGHT), pygame.SRCALPHA)
        panel.fill(COLOR_DIALOGUE_BG)
        screen.blit(panel, (0, panel_y))

        name_surf = self._name_font.render(self.portrait or "", True, COLOR_NPC_NAME)
        text_surf = self._text_font.render(self.body, True, COLOR_DIALOGUE_TEXT)
        if self.side == "right":
            name_x = width - name_surf.get_width() - self.padding
            text_x = width - text_surf.get_width() - self.padding
        else:
            name_x = text_x = self.padding
        screen.blit(name_surf, (name_x, panel_y + self.padding))
        screen.blit(text_surf, (text_x, panel_y + self.padding + 28))
