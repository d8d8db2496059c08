"""Simple Music Player: a playlist driven local music player core."""

from simple_music_player.app import SimpleMusicPlayer

__version__ = "0.1.0"

__all__ = ["SimpleMusicPlayer", "__version__"]
