"""Model for a (playable) Song."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace

import shortuuid
from mashumaro import DataClassDictMixin


@dataclass(frozen=True)
class Song(DataClassDictMixin):
    """
    Representation of a playable file.

    Two Song objects compare equal (and hash the same) only when they share the
    same instance_id, which is unique per playlist entry. Use content_equals to
    check if two entries point at the same file.
    """

    path: str = field(compare=False)
    display_name: str = field(compare=False)
    instance_id: str = field(default_factory=shortuuid.random)

    @classmethod
    def from_path(cls, path: str) -> Song:
        """Create a Song for a file, named after its filename."""
        return cls(path=path, display_name=os.path.basename(path))

    def spawn(self) -> Song:
        """Return a copy of this song with a fresh instance_id."""
        return replace(self, instance_id=shortuuid.random())

    def content_equals(self, other: Song) -> bool:
        """Return if both songs point at the same file."""
        return self.path == other.path

    def __str__(self) -> str:
        """Return the display name."""
        return self.display_name
