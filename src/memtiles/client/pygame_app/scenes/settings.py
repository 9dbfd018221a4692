from __future__ import annotations

import pygame  # type: ignore[import-not-found]

from ..app import GameContext
from ..scene_base import SceneTransition
from ..ui import Button, Toggle, draw_text


class SettingsScene:
    def __init__(self, ctx: GameContext) -> None:
        self.ctx = ctx
        self._next: SceneTransition | None = None
        self.btn_back = Button(rect=pygame.Rect(20, 20, 120, 40), text="Back", on_click=self._on_back)
        self._difficulty_buttons: list[tuple[str, Button]] = []
        self._toggles: list[Toggle] = []
        self._build_ui()

    def _build_ui(self) -> None:
        profile = self.ctx.profile
        content = self.ctx.game_content
        if profile is None or content is None:
            return
        settings = profile.settings
        for i, d in enumerate(content.ordered_difficulties()):
            btn = Button(
                rect=pygame.Rect(40 + i * 190, 150, 176, 52),
                text=f"{d.label} {d.size_label}",
                on_click=lambda did=d.id: self._on_difficulty(did),
                selected=d.id == settings.difficulty,
            )
            self._difficulty_buttons.append((d.id, btn))

        self._toggles = [
            Toggle(
                rect=pygame.Rect(40, 260, 560, 44),
                label="Continuous flipping (queue clicks while cards settle)",
                value=settings.continuous_flipping,
                on_change=lambda v: profile.update(continuous_flipping=v),
            ),
            Toggle(
                rect=pygame.Rect(40, 316, 560, 44),
                label="Auto-save progress after every match",
                value=settings.auto_save,
                on_change=lambda v: profile.update(auto_save=v),
            ),
        ]

    def _on_difficulty(self, difficulty_id: str) -> None:
        if self.ctx.profile is None:
            return
        self.ctx.profile.update(difficulty=difficulty_id)
        for did, btn in self._difficulty_buttons:
            btn.selected = did == difficulty_id

    def _on_back(self) -> None:
        tr = self.ctx.flow.dispatch("close_settings")
        if tr is None:
            return
        from .main_menu import MainMenuScene

        self._next = SceneTransition(MainMenuScene(self.ctx))

    def handle_event(self, event: pygame.event.Event) -> None:
        self.btn_back.handle_event(event)
        for _, btn in self._difficulty_buttons:
            btn.handle_event(event)
        for t in self._toggles:
            t.handle_event(event)

    def update(self, dt: float) -> SceneTransition | None:
        return self._next

    def render(self, screen: pygame.Surface) -> None:
        screen.fill((14, 16, 24))
        fonts = self.ctx.assets.fonts
        self.btn_back.draw(screen, fonts.ui)
        draw_text(screen, fonts.big, "Settings", (40, 76))
        draw_text(screen, fonts.small, "Grid size", (40, 128))
        for _, btn in self._difficulty_buttons:
            btn.draw(screen, fonts.small)
        for t in self._toggles:
            t.draw(screen, fonts.ui)
        draw_text(screen, fonts.small, "Changes apply to the next game.", (40, 380))

    def close(self) -> None:
        pass
