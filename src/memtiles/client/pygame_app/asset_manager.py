from __future__ import annotations

import colorsys
from dataclasses import dataclass

import pygame  # type: ignore[import-not-found]

SYMBOLS = "ABCDEFGHJKLMNPQRSTUVWXYZ"


@dataclass
class Fonts:
    ui: pygame.font.Font
    small: pygame.font.Font
    big: pygame.font.Font


def face_color(pair_id: int) -> tuple[int, int, int]:
    # golden-ratio hue walk keeps neighbouring ids visually apart
    hue = (pair_id * 0.618033988749895) % 1.0
    r, g, b = colorsys.hsv_to_rgb(hue, 0.55, 0.9)
    return int(r * 255), int(g * 255), int(b * 255)


def face_symbol(pair_id: int) -> str:
    letter = SYMBOLS[pair_id % len(SYMBOLS)]
    lap = pair_id // len(SYMBOLS)
    return letter if lap == 0 else f"{letter}{lap + 1}"


class AssetManager:
    """Fonts plus procedurally drawn card faces, cached per size."""

    def __init__(self) -> None:
        self._faces: dict[tuple[int, int], pygame.Surface] = {}
        self._backs: dict[int, pygame.Surface] = {}
        self._symbol_fonts: dict[int, pygame.font.Font] = {}

        pygame.font.init()
        self.fonts = Fonts(
            ui=pygame.font.SysFont(None, 26),
            small=pygame.font.SysFont(None, 20),
            big=pygame.font.SysFont(None, 44),
        )

    def _symbol_font(self, size: int) -> pygame.font.Font:
        px = max(12, size // 2)
        if px not in self._symbol_fonts:
            self._symbol_fonts[px] = pygame.font.SysFont(None, px)
        return self._symbol_fonts[px]

    def card_face(self, pair_id: int, size: int) -> pygame.Surface:
        key = (pair_id, size)
        if key in self._faces:
            return self._faces[key]
        surf = pygame.Surface((size, size), pygame.SRCALPHA)
        rect = surf.get_rect()
        pygame.draw.rect(surf, (245, 245, 245), rect, border_radius=size // 8)
        pygame.draw.rect(surf, face_color(pair_id), rect.inflate(-size // 6, -size // 6), border_radius=size // 10)
        img = self._symbol_font(size).render(face_symbol(pair_id), True, (20, 20, 28))
        surf.blit(img, img.get_rect(center=rect.center).topleft)
        self._faces[key] = surf
        return surf

    def card_back(self, size: int) -> pygame.Surface:
        if size in self._backs:
            return self._backs[size]
        surf = pygame.Surface((size, size), pygame.SRCALPHA)
        rect = surf.get_rect()
        pygame.draw.rect(surf, (52, 70, 120), rect, border_radius=size // 8)
        inner = rect.inflate(-size // 5, -size // 5)
        pygame.draw.rect(surf, (78, 100, 160), inner, width=max(2, size // 24), border_radius=size // 12)
        pygame.draw.circle(surf, (110, 134, 196), rect.center, size // 8)
        self._backs[size] = surf
        return surf
