from __future__ import annotations

import traceback

import pygame  # type: ignore[import-not-found]

from memtiles.services.profile import ProfileService
from memtiles.services.saves import SaveStore

from ..app import GameContext
from ..scene_base import SceneTransition
from ..ui import Button, draw_text
from .main_menu import MainMenuScene


class BootScene:
    def __init__(self, ctx: GameContext) -> None:
        self.ctx = ctx
        self._did_boot = False
        self._error: str | None = None
        self._quit_button: Button | None = None

    def handle_event(self, event: pygame.event.Event) -> None:
        if self._quit_button is not None:
            self._quit_button.handle_event(event)

    def update(self, dt: float) -> SceneTransition | None:
        if self._did_boot:
            return None
        self._did_boot = True
        try:
            self.ctx.content.validate_all()
            self.ctx.game_content = self.ctx.content.load_config()

            paths = self.ctx.paths
            paths.userdata_dir.mkdir(parents=True, exist_ok=True)
            self.ctx.profile = ProfileService(paths.profile_path)
            self.ctx.saves = SaveStore(paths.save_path, schema=self.ctx.content.save_schema())
            self.ctx.new_session()

            self.ctx.telemetry.log("boot", {"ok": True})
            return SceneTransition(MainMenuScene(self.ctx))
        except Exception as e:
            tb = traceback.format_exc(limit=8)
            self._error = f"{e}\n\n{tb}"
            self.ctx.telemetry.log("boot", {"ok": False, "error": str(e)})
            self._quit_button = Button(
                rect=pygame.Rect(20, self.ctx.screen.get_height() - 64, 140, 44),
                text="Quit",
                on_click=lambda: pygame.event.post(pygame.event.Event(pygame.QUIT)),
            )
            return None

    def render(self, screen: pygame.Surface) -> None:
        screen.fill((10, 10, 14))
        fonts = self.ctx.assets.fonts
        draw_text(screen, fonts.big, "memtiles", (20, 20))
        if self._error is None:
            draw_text(screen, fonts.ui, "Loading settings and saved game...", (20, 80))
            return
        draw_text(screen, fonts.ui, "BOOT ERROR", (20, 80), color=(240, 80, 80))
        y = 120
        for line in self._error.splitlines()[:22]:
            draw_text(screen, fonts.small, line[:120], (20, y), color=(230, 230, 230))
            y += 18
        if self._quit_button is not None:
            self._quit_button.draw(screen, fonts.ui)

    def close(self) -> None:
        pass
