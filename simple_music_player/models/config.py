"""Model for the (persistent) player configuration."""

from __future__ import annotations

from dataclasses import dataclass

from mashumaro import DataClassDictMixin

from simple_music_player.constants import DEFAULT_LIBRARY_PATH, DEFAULT_TICK_INTERVAL


@dataclass
class PlayerConfig(DataClassDictMixin):
    """Configuration values of the player."""

    library_path: str = DEFAULT_LIBRARY_PATH
    tick_interval: float = DEFAULT_TICK_INTERVAL
    ffplay_binary: str = "ffplay"
    ffprobe_binary: str = "ffprobe"
    log_level: str = "info"
