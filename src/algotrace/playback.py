# -----------------------------------------------------------------------------
# Step playback cursor
# Purpose: Client-side navigation over an already materialized step list.
# Moving past either end is a no-op, never an error.
# -----------------------------------------------------------------------------

from __future__ import annotations
from typing import Generic, List, Optional, Sequence, TypeVar

T = TypeVar("T")

FORWARD = "forward"
BACKWARD = "backward"


class StepCursor(Generic[T]):
    def __init__(self, steps: Sequence[T]):
        self._steps: List[T] = list(steps)
        self.index = 0
        self.playing = False

    def __len__(self) -> int:
        return len(self._steps)

    @property
    def current(self) -> Optional[T]:
        return self._steps[self.index] if self._steps else None

    @property
    def at_end(self) -> bool:
        return self.index >= len(self._steps) - 1

    @property
    def progress(self) -> float:
        if len(self._steps) <= 1:
            return 1.0 if self._steps else 0.0
        return self.index / (len(self._steps) - 1)

    def step(self, direction: str) -> bool:
        """Move one step; returns False (and stays put) at a boundary."""
        if direction == FORWARD and self.index < len(self._steps) - 1:
            self.index += 1
            return True
        if direction == BACKWARD and self.index > 0:
            self.index -= 1
            return True
        if direction not in (FORWARD, BACKWARD):
            raise ValueError(f"Unknown direction: {direction}")
        return False

    def seek(self, index: int) -> None:
        if self._steps:
            self.index = min(max(index, 0), len(self._steps) - 1)

    def reset(self) -> None:
        self.playing = False
        self.index = 0

    def toggle_play(self) -> bool:
        # Nothing to play on an empty list
        self.playing = bool(self._steps) and not self.playing
        return self.playing

    def tick(self) -> bool:
        """Advance while playing; pauses automatically at the last step."""
        if not self.playing:
            return False
        moved = self.step(FORWARD)
        if self.at_end:
            self.playing = False
        return moved
