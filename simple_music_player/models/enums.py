"""All enums used by the Simple Music Player models."""

from __future__ import annotations

from enum import StrEnum


class PlaybackState(StrEnum):
    """Enum for the (transport) state of the player."""

    STOPPED = "stopped"
    PLAYING = "playing"
    PAUSED = "paused"
    ON_HOLD = "on_hold"

    @property
    def audible(self) -> bool:
        """Return if an engine source is loaded in this state."""
        return self != PlaybackState.STOPPED


class HoldReason(StrEnum):
    """Enum with the external interrupts that can put playback on hold."""

    CALL = "call"
    HEADSET = "headset"


class EventType(StrEnum):
    """Enum with possible Player events."""

    STATE_CHANGED = "state_changed"
    PLAYLIST_CHANGED = "playlist_changed"
    AVAILABLE_SONGS_CHANGED = "available_songs_changed"
    PLAYBACK_ERROR = "playback_error"
    STORAGE_UNAVAILABLE = "storage_unavailable"
    SHUTDOWN = "shutdown"
