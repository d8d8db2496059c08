"""Model for the ordered list of enqueued Songs."""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

    from .song import Song


class Playlist:
    """
    Ordered sequence of Songs, index 0 is the song that is (up next to be) playing.

    All lookups are done by instance identity (see Song), so the same file may be
    present multiple times as separate entries.
    """

    def __init__(self) -> None:
        """Initialize an empty playlist."""
        self._songs: list[Song] = []

    def __len__(self) -> int:
        """Return the number of entries."""
        return len(self._songs)

    def __iter__(self) -> Iterator[Song]:
        """Iterate over a copy of the entries."""
        return iter(tuple(self._songs))

    def __contains__(self, song: object) -> bool:
        """Return if the given entry is present."""
        return song in self._songs

    @property
    def head(self) -> Song | None:
        """Return the first song (if any)."""
        return self._songs[0] if self._songs else None

    @property
    def songs(self) -> tuple[Song, ...]:
        """Return an immutable copy of all entries, in playback order."""
        return tuple(self._songs)

    def index_of(self, song: Song) -> int | None:
        """Return the index of given entry or None if not present."""
        for index, item in enumerate(self._songs):
            if item == song:
                return index
        return None

    def insert(self, song: Song, index: int = -1) -> int:
        """
        Insert a song and return its final index.

        Negative or out of range indexes append the song at the end.
        """
        if 0 <= index <= len(self._songs):
            self._songs.insert(index, song)
            return index
        self._songs.append(song)
        return len(self._songs) - 1

    def move(self, song: Song, offset: int) -> bool:
        """
        Move an entry up (negative offset) or down (positive offset).

        The new position is clamped to the bounds of the list.
        Returns False if the song is not present.
        """
        if (index := self.index_of(song)) is None:
            return False
        new_index = min(max(index + offset, 0), len(self._songs) - 1)
        self._songs.insert(new_index, self._songs.pop(index))
        return True

    def remove(self, song: Song) -> bool:
        """Remove an entry, returns False if it was not present."""
        if (index := self.index_of(song)) is None:
            return False
        self._songs.pop(index)
        return True

    def pop_head(self) -> Song | None:
        """Remove and return the first entry (if any)."""
        if not self._songs:
            return None
        return self._songs.pop(0)

    def clear(self) -> None:
        """Remove all entries."""
        self._songs.clear()

    def shuffle(self) -> None:
        """Randomly reorder all entries."""
        random.shuffle(self._songs)
