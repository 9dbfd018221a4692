from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

import pygame  # type: ignore[import-not-found]


@dataclass
class SceneTransition:
    """Returned from ``Scene.update`` to hand the screen to ``next_scene``."""

    next_scene: "Scene"


class Scene(Protocol):
    """One screen of the app, driven by ``App.run`` once per frame.

    Per frame the loop calls ``handle_event`` for each pygame event, then
    ``update(dt)`` (which also advances the game session's clock for the
    game scene), then ``render``. ``close`` runs exactly once when the app
    leaves the scene or quits; scenes that subscribed to the session's
    EventBus unsubscribe there.
    """

    def handle_event(self, event: pygame.event.Event) -> None: ...

    def update(self, dt: float) -> SceneTransition | None: ...

    def render(self, screen: pygame.Surface) -> None: ...

    def close(self) -> None: ...
