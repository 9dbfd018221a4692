from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Optional

import pygame  # type: ignore[import-not-found]

from memtiles.engine.flow import AppFlow, Transition
from memtiles.engine.session import GameSession
from memtiles.paths import Paths
from memtiles.services.content import ContentService, GameContent
from memtiles.services.profile import ProfileService
from memtiles.services.saves import SaveStore
from memtiles.services.telemetry import TelemetryService

from .asset_manager import AssetManager
from .scene_base import Scene

log = logging.getLogger(__name__)


@dataclass
class GameContext:
    screen: pygame.Surface
    clock: pygame.time.Clock
    paths: Paths
    assets: AssetManager
    content: ContentService
    telemetry: TelemetryService
    flow: AppFlow = field(default_factory=AppFlow)

    # Loaded at boot
    game_content: Optional[GameContent] = None
    profile: Optional[ProfileService] = None
    saves: Optional[SaveStore] = None
    session: Optional[GameSession] = None

    def new_session(self) -> GameSession:
        """Replace the session with one configured from the current settings."""
        assert self.game_content is not None and self.profile is not None
        if self.session is not None:
            self.session.processor.end_game()
        self.telemetry.detach()
        settings = self.profile.settings
        config = replace(
            self.game_content.game,
            intake_mode="continuous" if settings.continuous_flipping else "exclusive",
            auto_save=settings.auto_save,
        )
        self.session = GameSession(config, self.game_content.scoring, store=self.saves)
        self.telemetry.attach(self.session.bus)
        return self.session

    def apply(self, tr: Transition) -> None:
        for effect in tr.effects:
            if effect == "start_new_game":
                self._start_new_game()
            elif effect == "load_game":
                session = self.new_session()
                if not session.load_game():
                    log.warning("saved game could not be loaded, starting fresh")
                    self._start_new_game()
            elif effect == "restart_game" and self.session is not None:
                self.session.restart_game()
            elif effect == "abandon_game" and self.session is not None:
                self.session.abandon_game()

    def _start_new_game(self) -> None:
        assert self.game_content is not None and self.profile is not None
        difficulty = self.game_content.difficulty(self.profile.settings.difficulty)
        session = self.new_session()
        session.start_new_game(difficulty.rows, difficulty.columns)


class App:
    def __init__(self, ctx: GameContext, initial_scene: Scene) -> None:
        self.ctx = ctx
        self.scene: Scene = initial_scene
        self.running = True

    def run(self) -> int:
        while self.running:
            dt = self.ctx.clock.tick(60) / 1000.0
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.running = False
                    break
                self.scene.handle_event(event)

            tr = self.scene.update(dt)
            if tr is not None:
                self.scene.close()
                self.scene = tr.next_scene

            self.scene.render(self.ctx.screen)
            pygame.display.flip()

        self.scene.close()
        if self.ctx.session is not None:
            self.ctx.session.abandon_game()
        return 0
