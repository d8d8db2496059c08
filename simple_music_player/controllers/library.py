"""
Simple Music Player Media Library controller.

Enumerates the playable files on the (removable) library storage and offers
them as candidates to enqueue.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from aiofiles.os import wrap

from simple_music_player.constants import AUDIO_EXTENSIONS
from simple_music_player.helpers.api import api_command
from simple_music_player.models.core_controller import CoreController
from simple_music_player.models.enums import EventType
from simple_music_player.models.errors import StorageUnavailable
from simple_music_player.models.song import Song

if TYPE_CHECKING:
    from simple_music_player.app import SimpleMusicPlayer

isdir = wrap(os.path.isdir)


def _scan_audio_files(root: str) -> list[str]:
    """Return all audio files below root (blocking)."""
    result: list[str] = []
    for dirpath, dirnames, filenames in os.walk(root):
        # skip hidden folders
        dirnames[:] = [x for x in dirnames if not x.startswith(".")]
        for filename in filenames:
            if filename.startswith("."):
                continue
            if os.path.splitext(filename)[1].lower() in AUDIO_EXTENSIONS:
                result.append(os.path.join(dirpath, filename))
    return result


scan_audio_files = wrap(_scan_audio_files)


def matches_phrase(song: Song, phrase: str) -> bool:
    """Return if every word of the phrase is part of the (lowercase) path of the song."""
    name = song.path.lower()
    return all(word in name for word in phrase.lower().split())


class MediaLibraryController(CoreController):
    """Controller which lists the songs available on the library storage."""

    domain: str = "library"

    def __init__(self, app: SimpleMusicPlayer) -> None:
        """Initialize core controller."""
        super().__init__(app)
        self._songs: tuple[Song, ...] = ()

    @property
    def library_path(self) -> str:
        """Return the root folder of the library."""
        return str(self.app.config.values.library_path)

    @property
    def songs(self) -> tuple[Song, ...]:
        """Return the songs found by the last scan."""
        return self._songs

    async def is_storage_mounted(self) -> bool:
        """Return if the library storage is present."""
        return bool(await isdir(self.library_path))

    async def list_available_songs(self) -> tuple[Song, ...]:
        """
        Scan the library storage and return all songs, ordered by path.

        Raises StorageUnavailable if the storage is not present.
        """
        if not await self.is_storage_mounted():
            self._songs = ()
            self.app.signal_event(EventType.STORAGE_UNAVAILABLE)
            raise StorageUnavailable(f"Library storage {self.library_path} is not available")
        paths = await scan_audio_files(self.library_path)
        self._songs = tuple(Song.from_path(path) for path in sorted(paths))
        self.logger.debug("Found %s songs in %s", len(self._songs), self.library_path)
        self.app.signal_event(EventType.AVAILABLE_SONGS_CHANGED, self._songs)
        return self._songs

    @api_command("library/songs")
    async def get_available_songs(self) -> tuple[Song, ...]:
        """Return all available songs (empty when the storage is missing)."""
        try:
            return await self.list_available_songs()
        except StorageUnavailable as err:
            self.logger.warning("%s", err)
            return ()

    @api_command("library/search")
    async def search(self, phrase: str = "") -> tuple[Song, ...]:
        """Return the available songs matching all words of the given phrase."""
        if not self._songs:
            await self.get_available_songs()
        return tuple(song for song in self._songs if matches_phrase(song, phrase))
