from __future__ import annotations

import pygame  # type: ignore[import-not-found]

from memtiles.engine.flow import AppEvent

from ..app import GameContext
from ..scene_base import SceneTransition
from ..ui import DIM, Button, draw_text


class MainMenuScene:
    def __init__(self, ctx: GameContext) -> None:
        self.ctx = ctx
        self._next: SceneTransition | None = None
        self._buttons: list[Button] = []
        self._build_ui()

    def _build_ui(self) -> None:
        x, y, w, h, gap = 60, 180, 320, 56, 14
        has_save = self.ctx.session is not None and self.ctx.session.has_saved_game()

        def rect(row: int) -> pygame.Rect:
            return pygame.Rect(x, y + (h + gap) * row, w, h)

        self._buttons = [
            Button(rect=rect(0), text="Play", on_click=lambda: self._dispatch("play")),
            Button(rect=rect(1), text="Continue", on_click=lambda: self._dispatch("continue"), enabled=has_save),
            Button(rect=rect(2), text="Settings", on_click=lambda: self._dispatch("open_settings")),
            Button(
                rect=rect(3),
                text="Quit",
                on_click=lambda: pygame.event.post(pygame.event.Event(pygame.QUIT)),
            ),
        ]

    def _dispatch(self, event: AppEvent) -> None:
        tr = self.ctx.flow.dispatch(event)
        if tr is None:
            return
        self.ctx.apply(tr)
        if tr.next_state == "settings":
            from .settings import SettingsScene

            self._next = SceneTransition(SettingsScene(self.ctx))
        elif tr.next_state == "gameplay":
            from .game import GameScene

            self._next = SceneTransition(GameScene(self.ctx))

    def handle_event(self, event: pygame.event.Event) -> None:
        for b in self._buttons:
            if b.handle_event(event):
                return

    def update(self, dt: float) -> SceneTransition | None:
        return self._next

    def render(self, screen: pygame.Surface) -> None:
        screen.fill((14, 16, 24))
        fonts = self.ctx.assets.fonts
        draw_text(screen, fonts.big, "memtiles", (60, 50))
        if self.ctx.game_content is not None and self.ctx.profile is not None:
            d = self.ctx.game_content.difficulty(self.ctx.profile.settings.difficulty)
            draw_text(screen, fonts.ui, f"Difficulty: {d.label} ({d.size_label})", (60, 110), color=DIM)
        for b in self._buttons:
            b.draw(screen, fonts.ui)

    def close(self) -> None:
        pass
