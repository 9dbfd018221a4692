from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import pygame  # type: ignore[import-not-found]


Color = tuple[int, int, int]

TEXT = (236, 236, 240)
DIM = (150, 150, 160)
PANEL = (38, 42, 58)
PANEL_OFF = (26, 28, 38)
ACCENT = (84, 150, 220)


def draw_text(
    screen: pygame.Surface,
    font: pygame.font.Font,
    text: str,
    pos: tuple[int, int],
    color: Color = TEXT,
) -> None:
    screen.blit(font.render(text, True, color), pos)


def draw_centered(screen: pygame.Surface, font: pygame.font.Font, text: str, center: tuple[int, int], color: Color = TEXT) -> None:
    img = font.render(text, True, color)
    screen.blit(img, img.get_rect(center=center).topleft)


def _clicked(event: pygame.event.Event, rect: pygame.Rect) -> bool:
    return event.type == pygame.MOUSEBUTTONDOWN and event.button == 1 and rect.collidepoint(event.pos)


@dataclass
class Button:
    rect: pygame.Rect
    text: str
    on_click: Callable[[], None]
    enabled: bool = True
    selected: bool = False

    def handle_event(self, event: pygame.event.Event) -> bool:
        if not self.enabled or not _clicked(event, self.rect):
            return False
        self.on_click()
        return True

    def draw(self, screen: pygame.Surface, font: pygame.font.Font) -> None:
        bg = PANEL if self.enabled else PANEL_OFF
        pygame.draw.rect(screen, bg, self.rect, border_radius=10)
        border = ACCENT if self.selected else (0, 0, 0)
        pygame.draw.rect(screen, border, self.rect, width=3 if self.selected else 2, border_radius=10)
        draw_centered(screen, font, self.text, self.rect.center, TEXT if self.enabled else DIM)


@dataclass
class Toggle:
    rect: pygame.Rect
    label: str
    value: bool
    on_change: Callable[[bool], None]

    def handle_event(self, event: pygame.event.Event) -> bool:
        if not _clicked(event, self.rect):
            return False
        self.value = not self.value
        self.on_change(self.value)
        return True

    def draw(self, screen: pygame.Surface, font: pygame.font.Font) -> None:
        pygame.draw.rect(screen, PANEL_OFF, self.rect, border_radius=10)
        pygame.draw.rect(screen, (0, 0, 0), self.rect, width=2, border_radius=10)
        box = pygame.Rect(self.rect.x + 12, self.rect.centery - 11, 22, 22)
        pygame.draw.rect(screen, TEXT, box, width=2, border_radius=4)
        if self.value:
            pygame.draw.rect(screen, ACCENT, box.inflate(-8, -8), border_radius=2)
        draw_text(screen, font, self.label, (box.right + 12, self.rect.centery - font.get_height() // 2))
