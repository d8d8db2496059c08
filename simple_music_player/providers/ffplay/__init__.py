"""
FFplay Playback Engine for Simple Music Player.

Plays local audio files with the ffplay command line tool (part of ffmpeg).
Pausing suspends the ffplay process, seeking restarts it at the new offset.
The duration of a source is determined with ffprobe when it is opened.
"""

from __future__ import annotations

import asyncio
import logging
import os
import time
from typing import TYPE_CHECKING

from aiofiles.os import wrap

from simple_music_player.constants import LOGGER_NAME
from simple_music_player.helpers.process import AsyncProcess, check_output
from simple_music_player.models.engine import PlaybackEngine
from simple_music_player.models.errors import SourceError

if TYPE_CHECKING:
    from simple_music_player.models.config import PlayerConfig

isfile = wrap(os.path.isfile)

FFPROBE_DURATION_ARGS = (
    "-v",
    "error",
    "-show_entries",
    "format=duration",
    "-of",
    "default=noprint_wrappers=1:nokey=1",
)


def create_engine(config: PlayerConfig) -> FFPlayEngine:
    """Create the engine from the player configuration."""
    return FFPlayEngine(ffplay_binary=config.ffplay_binary, ffprobe_binary=config.ffprobe_binary)


class FFPlayEngine(PlaybackEngine):
    """Playback Engine which spawns an ffplay process per (started) source."""

    def __init__(self, ffplay_binary: str = "ffplay", ffprobe_binary: str = "ffprobe") -> None:
        """Initialize the engine."""
        self.ffplay_binary = ffplay_binary
        self.ffprobe_binary = ffprobe_binary
        self.logger = logging.getLogger(f"{LOGGER_NAME}.providers.ffplay")
        self._path: str | None = None
        self._duration = 0
        # position (ms) at which the process was started or paused
        self._offset = 0
        self._started_at: float | None = None
        self._proc: AsyncProcess | None = None
        self._watcher: asyncio.Task[None] | None = None

    @property
    def path(self) -> str | None:
        """Return the path of the opened source."""
        return self._path

    @property
    def playing(self) -> bool:
        """Return if audio is being output right now."""
        return self._proc is not None and not self._proc.suspended

    async def open(self, path: str) -> None:
        """Load the given file as the current source, without starting output."""
        await self.reset()
        if not await isfile(path):
            raise SourceError(f"File not found: {path}")
        self._duration = await self._probe_duration(path)
        self._path = path
        self.logger.debug("Opened %s (duration: %s ms)", path, self._duration)

    async def start(self) -> None:
        """Start (or resume) output of the current source."""
        if self._path is None:
            raise SourceError("No source opened")
        if self._proc is not None:
            if self._proc.suspended:
                self._proc.resume()
                self._started_at = time.monotonic()
            return
        await self._spawn()

    async def pause(self) -> None:
        """Pause output, keeping the position."""
        if self._proc is None or self._proc.suspended:
            return
        self._offset = self.get_position()
        self._started_at = None
        self._proc.suspend()

    async def stop(self) -> None:
        """Stop output, the source stays opened (and restarts from the beginning)."""
        await self._terminate()
        self._offset = 0

    async def reset(self) -> None:
        """Stop output and unload the current source."""
        await self._terminate()
        self._path = None
        self._duration = 0
        self._offset = 0

    async def seek(self, position: int) -> None:
        """Seek to the given position (in milliseconds) within the current source."""
        if self._path is None:
            return
        if self._duration:
            position = min(position, self._duration)
        position = max(0, position)
        restart = self.playing
        await self._terminate()
        self._offset = position
        if restart:
            await self._spawn()

    def get_position(self) -> int:
        """Return the current position in milliseconds."""
        if self._started_at is None:
            return self._offset
        position = self._offset + int((time.monotonic() - self._started_at) * 1000)
        return min(position, self._duration) if self._duration else position

    def get_duration(self) -> int:
        """Return the duration of the current source in milliseconds."""
        return self._duration

    async def _probe_duration(self, path: str) -> int:
        """Return the duration (in ms) of the given file, raises SourceError if unknown."""
        try:
            returncode, output = await check_output(
                self.ffprobe_binary, *FFPROBE_DURATION_ARGS, path
            )
        except OSError as err:
            raise SourceError(f"Unable to run {self.ffprobe_binary}: {err}") from err
        text = output.decode(errors="ignore").strip()
        if returncode != 0:
            raise SourceError(f"Unable to open {path}: {text}")
        try:
            return int(float(text) * 1000)
        except ValueError as err:
            raise SourceError(f"No duration found for {path}") from err

    async def _spawn(self) -> None:
        assert self._path is not None  # for type checking
        args = [
            self.ffplay_binary,
            "-nodisp",
            "-autoexit",
            "-loglevel",
            "error",
            "-ss",
            f"{self._offset / 1000:.3f}",
            self._path,
        ]
        proc = AsyncProcess(args, name="ffplay")
        try:
            await proc.start()
        except OSError as err:
            raise SourceError(f"Unable to run {self.ffplay_binary}: {err}") from err
        self._proc = proc
        self._started_at = time.monotonic()
        self._watcher = asyncio.create_task(self._watch(proc))

    async def _terminate(self) -> None:
        if (proc := self._proc) is None:
            return
        self._offset = self.get_position()
        self._started_at = None
        self._proc = None
        await proc.close()

    async def _watch(self, proc: AsyncProcess) -> None:
        """Wait for the process to exit and report a natural end of the source."""
        returncode = await proc.wait()
        if proc.close_called or proc is not self._proc:
            # terminated by the engine itself
            return
        self._proc = None
        self._started_at = None
        if returncode != 0:
            self.logger.warning("ffplay exited unexpectedly with returncode %s", returncode)
            self._offset = 0
            return
        self._offset = self._duration
        self.logger.debug("Finished playing %s", self._path)
        asyncio.get_running_loop().call_soon(self._signal_completion)
