"""Immutable snapshot of the player state, as published to listeners."""

from __future__ import annotations

from dataclasses import dataclass

from mashumaro import DataClassDictMixin

from .enums import HoldReason, PlaybackState
from .song import Song


@dataclass(frozen=True)
class PlayerStateSnapshot(DataClassDictMixin):
    """Representation of the player state at a single point in time."""

    state: PlaybackState
    position: int = 0  # milliseconds
    duration: int = 0  # milliseconds
    now_playing: Song | None = None
    hold_reason: HoldReason | None = None

    @classmethod
    def stopped(cls) -> PlayerStateSnapshot:
        """Return the (zeroed) snapshot for a stopped player."""
        return cls(state=PlaybackState.STOPPED)
