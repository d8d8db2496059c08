"""
Base class/model for a Playback Engine.

The engine does the actual decoding and audio output of a single source.
It is exclusively owned and driven by the PlaybackController, which is the only
caller of the commands below.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable

CompletionCallback = Callable[[], None]


class PlaybackEngine(ABC):
    """Abstract audio output device."""

    _completion_callback: CompletionCallback | None = None

    def on_completion(self, callback: CompletionCallback) -> None:
        """
        Register the callback for a source that finished playing.

        Implementations must call it exactly once per finished source and never from
        within one of the engine commands (so off the caller's stack).
        """
        self._completion_callback = callback

    def _signal_completion(self) -> None:
        """Invoke the registered completion callback."""
        if self._completion_callback is not None:
            self._completion_callback()

    @abstractmethod
    async def open(self, path: str) -> None:
        """
        Load the given file as the current source, without starting output.

        Raises SourceError if the file can not be opened.
        """

    @abstractmethod
    async def start(self) -> None:
        """Start (or resume) output of the current source."""

    @abstractmethod
    async def pause(self) -> None:
        """Pause output, keeping the position."""

    @abstractmethod
    async def stop(self) -> None:
        """Stop output of the current source."""

    @abstractmethod
    async def reset(self) -> None:
        """Stop output and unload the current source."""

    @abstractmethod
    async def seek(self, position: int) -> None:
        """Seek to the given position (in milliseconds) within the current source."""

    @abstractmethod
    def get_position(self) -> int:
        """Return the current position in milliseconds."""

    @abstractmethod
    def get_duration(self) -> int:
        """Return the duration of the current source in milliseconds."""

    async def close(self) -> None:
        """Release all resources, called on shutdown."""
        await self.reset()
