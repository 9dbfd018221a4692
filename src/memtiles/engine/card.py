from __future__ import annotations

from dataclasses import dataclass, field

from .types import CardState


@dataclass
class Card:
    """One tile of the grid and its flip state machine.

    Animated transitions pass through ``flipping``; the ``*_immediate`` writes
    used by save restoration do not. ``matched`` is absorbing. Every mutator
    returns False and leaves the card untouched when the transition is not
    legal from the current state.
    """

    index: int
    pair_id: int
    state: CardState = "face_down"
    _flip_target: CardState | None = field(default=None, repr=False, compare=False)

    @property
    def accepts_click(self) -> bool:
        return self.state == "face_down"

    @property
    def is_revealed(self) -> bool:
        return self.state in ("face_up", "flipping")

    @property
    def settled_state(self) -> CardState:
        """State this card ends in once any in-flight flip completes."""
        if self.state == "flipping" and self._flip_target is not None:
            return self._flip_target
        return self.state

    def begin_flip_up(self) -> bool:
        if self.state != "face_down":
            return False
        self.state = "flipping"
        self._flip_target = "face_up"
        return True

    def begin_flip_back(self) -> bool:
        if self.state != "face_up":
            return False
        self.state = "flipping"
        self._flip_target = "face_down"
        return True

    def finish_flip(self) -> bool:
        if self.state != "flipping" or self._flip_target is None:
            return False
        self.state = self._flip_target
        self._flip_target = None
        return True

    def set_matched(self) -> bool:
        # Skips flipping: a confirmed match is already showing its face.
        if self.state != "face_up":
            return False
        self.state = "matched"
        return True

    def set_face_up_immediate(self) -> bool:
        if self.state == "matched":
            return False
        self.state = "face_up"
        self._flip_target = None
        return True

    def set_face_down_immediate(self) -> bool:
        if self.state == "matched":
            return False
        self.state = "face_down"
        self._flip_target = None
        return True
