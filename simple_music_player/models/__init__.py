"""Models used by Simple Music Player."""

from .enums import EventType, HoldReason, PlaybackState
from .event import PlayerEvent
from .playlist import Playlist
from .snapshot import PlayerStateSnapshot
from .song import Song

__all__ = [
    "EventType",
    "HoldReason",
    "PlaybackState",
    "PlayerEvent",
    "PlayerStateSnapshot",
    "Playlist",
    "Song",
]
