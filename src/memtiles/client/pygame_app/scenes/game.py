from __future__ import annotations

import pygame  # type: ignore[import-not-found]

from memtiles.engine.events import GAME_WON, MATCH_FOUND, MISMATCH_FOUND, Event
from memtiles.engine.flow import AppEvent
from memtiles.engine.grid import Grid
from memtiles.engine.session import GameSession

from ..app import GameContext
from ..scene_base import SceneTransition
from ..ui import DIM, Button, draw_centered, draw_text

HUD_HEIGHT = 90
GRID_PADDING = 20
CARD_SPACING = 10
MIN_CARD = 60
MAX_CARD = 150


def card_layout(grid: Grid, area: pygame.Rect) -> list[pygame.Rect]:
    """Square card rects in row-major order, centred in ``area``."""
    avail_w = area.width - GRID_PADDING * 2
    avail_h = area.height - GRID_PADDING * 2
    size_w = (avail_w - CARD_SPACING * (grid.columns - 1)) // grid.columns
    size_h = (avail_h - CARD_SPACING * (grid.rows - 1)) // grid.rows
    size = max(MIN_CARD, min(MAX_CARD, size_w, size_h))
    total_w = grid.columns * size + (grid.columns - 1) * CARD_SPACING
    total_h = grid.rows * size + (grid.rows - 1) * CARD_SPACING
    x0 = area.centerx - total_w // 2
    y0 = area.centery - total_h // 2
    rects: list[pygame.Rect] = []
    for i in range(grid.total_cards):
        row, col = grid.position_of(i)
        rects.append(pygame.Rect(x0 + col * (size + CARD_SPACING), y0 + row * (size + CARD_SPACING), size, size))
    return rects


class GameScene:
    def __init__(self, ctx: GameContext) -> None:
        self.ctx = ctx
        self._next: SceneTransition | None = None
        self._message = ""
        self._session: GameSession | None = None
        self._token: int | None = None
        self._rects: list[pygame.Rect] = []
        self._layout_for: Grid | None = None

        w, h = ctx.screen.get_size()
        self.btn_restart = Button(rect=pygame.Rect(w - 300, 24, 130, 42), text="Restart", on_click=self._on_restart)
        self.btn_menu = Button(rect=pygame.Rect(w - 156, 24, 130, 42), text="Menu", on_click=self._on_menu)
        self.btn_again = Button(
            rect=pygame.Rect(w // 2 - 150, h // 2 + 20, 300, 56),
            text="Play Again",
            on_click=lambda: self._dispatch("play"),
        )
        self.btn_won_menu = Button(
            rect=pygame.Rect(w // 2 - 150, h // 2 + 90, 300, 56),
            text="Main Menu",
            on_click=self._on_menu,
        )
        self._bind_session()

    # -------- Session wiring --------
    def _bind_session(self) -> None:
        session = self.ctx.session
        if session is self._session:
            return
        self._unbind()
        self._session = session
        if session is not None:
            self._token = session.bus.subscribe(
                self._on_engine_event, types=[MATCH_FOUND, MISMATCH_FOUND, GAME_WON]
            )

    def _unbind(self) -> None:
        if self._session is not None and self._token is not None:
            self._session.bus.unsubscribe(self._token)
        self._token = None

    def _on_engine_event(self, event: Event) -> None:
        et = event["type"]
        if et == MATCH_FOUND:
            self._message = "Match!"
        elif et == MISMATCH_FOUND:
            self._message = "No match"
        elif et == GAME_WON:
            self._message = ""
            tr = self.ctx.flow.dispatch("game_won")
            if tr is not None:
                self.ctx.apply(tr)

    # -------- Buttons --------
    def _dispatch(self, event: AppEvent) -> None:
        tr = self.ctx.flow.dispatch(event)
        if tr is None:
            return
        self._message = ""
        self.ctx.apply(tr)
        if tr.next_state == "main_menu":
            from .main_menu import MainMenuScene

            self._next = SceneTransition(MainMenuScene(self.ctx))
        else:
            self._bind_session()

    def _on_restart(self) -> None:
        self._dispatch("restart")

    def _on_menu(self) -> None:
        self._dispatch("quit_to_menu")

    # -------- Scene protocol --------
    def handle_event(self, event: pygame.event.Event) -> None:
        if self.ctx.flow.state == "game_over":
            self.btn_again.handle_event(event)
            self.btn_won_menu.handle_event(event)
            return
        if self.btn_restart.handle_event(event) or self.btn_menu.handle_event(event):
            return
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            index = self._hit_test(event.pos)
            if index is not None and self._session is not None:
                self._session.handle_card_click(index)
        elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
            self._on_menu()

    def _hit_test(self, pos: tuple[int, int]) -> int | None:
        for i, r in enumerate(self._rects):
            if r.collidepoint(pos):
                return i
        return None

    def update(self, dt: float) -> SceneTransition | None:
        self._bind_session()
        if self._session is not None:
            self._session.advance(dt)
            grid = self._session.grid
            if grid is not None and grid is not self._layout_for:
                w, h = self.ctx.screen.get_size()
                self._rects = card_layout(grid, pygame.Rect(0, HUD_HEIGHT, w, h - HUD_HEIGHT))
                self._layout_for = grid
        return self._next

    def render(self, screen: pygame.Surface) -> None:
        screen.fill((18, 20, 30))
        fonts = self.ctx.assets.fonts
        session = self._session
        if session is None:
            return

        hud = f"Score {session.score}    Turns {session.turns}    Pairs {session.matched_pairs}/{session.get_total_pairs()}"
        draw_text(screen, fonts.ui, hud, (24, 24))
        if session.scoring is not None:
            combo = "  ".join(s for s in (session.scoring.combo_label(), session.scoring.multiplier_label()) if s)
            if combo:
                draw_text(screen, fonts.ui, combo, (24, 54), color=(250, 200, 90))
        if self._message:
            draw_text(screen, fonts.small, self._message, (360, 58), color=DIM)
        self.btn_restart.draw(screen, fonts.ui)
        self.btn_menu.draw(screen, fonts.ui)

        grid = session.grid
        if grid is not None and self._layout_for is grid:
            for card, rect in zip(grid.cards, self._rects):
                if card.state == "face_down":
                    screen.blit(self.ctx.assets.card_back(rect.width), rect.topleft)
                    continue
                face = self.ctx.assets.card_face(card.pair_id, rect.width)
                if card.state == "matched":
                    face = face.copy()
                    face.set_alpha(150)
                screen.blit(face, rect.topleft)

        if self.ctx.flow.state == "game_over":
            w, h = screen.get_size()
            shade = pygame.Surface((w, h), pygame.SRCALPHA)
            shade.fill((0, 0, 0, 170))
            screen.blit(shade, (0, 0))
            draw_centered(screen, fonts.big, "You matched them all!", (w // 2, h // 2 - 70))
            draw_centered(screen, fonts.ui, f"Score {session.score} in {session.turns} turns", (w // 2, h // 2 - 24))
            self.btn_again.draw(screen, fonts.ui)
            self.btn_won_menu.draw(screen, fonts.ui)

    def close(self) -> None:
        self._unbind()
