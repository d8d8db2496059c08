"""Fixtures for testing Simple Music Player."""

import asyncio
import logging
import pathlib
from collections.abc import AsyncGenerator, Awaitable, Callable

import pytest

from simple_music_player.app import SimpleMusicPlayer
from simple_music_player.models.config import PlayerConfig
from simple_music_player.models.engine import PlaybackEngine
from simple_music_player.models.errors import SourceError
from simple_music_player.models.event import PlayerEvent

FAKE_DURATION = 180000

LIBRARY_FILES = (
    "Artist A/01 - Intro.mp3",
    "Artist A/02 - Second Song.ogg",
    "Artist B/Live Song.flac",
    "loose track.wav",
    "cover.jpg",
    "notes.txt",
    ".hidden/secret.mp3",
    "Artist B/.partial.mp3",
)


class FakeEngine(PlaybackEngine):
    """Playback Engine which only records the commands it receives."""

    def __init__(self) -> None:
        """Initialize."""
        self.calls: list[tuple[object, ...]] = []
        self.failing_paths: set[str] = set()
        self.path: str | None = None
        self.position = 0
        self.duration = 0
        self.playing = False

    @property
    def call_names(self) -> list[object]:
        """Return the names of the received commands, in order."""
        return [call[0] for call in self.calls]

    async def open(self, path: str) -> None:
        """Open a source, fails for the paths in failing_paths."""
        self.calls.append(("open", path))
        if path in self.failing_paths:
            raise SourceError(f"Unable to open {path}")
        self.path = path
        self.position = 0
        self.duration = FAKE_DURATION

    async def start(self) -> None:
        """Start output."""
        self.calls.append(("start",))
        self.playing = True

    async def pause(self) -> None:
        """Pause output."""
        self.calls.append(("pause",))
        self.playing = False

    async def stop(self) -> None:
        """Stop output."""
        self.calls.append(("stop",))
        self.playing = False
        self.position = 0

    async def reset(self) -> None:
        """Unload the source."""
        self.calls.append(("reset",))
        self.playing = False
        self.path = None
        self.position = 0
        self.duration = 0

    async def seek(self, position: int) -> None:
        """Seek."""
        self.calls.append(("seek", position))
        self.position = position

    def get_position(self) -> int:
        """Return the position."""
        return self.position

    def get_duration(self) -> int:
        """Return the duration."""
        return self.duration

    def finish(self) -> None:
        """Simulate the source playing until the end."""
        self.playing = False
        self.position = self.duration
        asyncio.get_running_loop().call_soon(self._signal_completion)


@pytest.fixture(name="caplog")
def caplog_fixture(caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    """Set log level to debug for tests using the caplog fixture."""
    caplog.set_level(logging.DEBUG)
    return caplog


@pytest.fixture
def library_path(tmp_path: pathlib.Path) -> pathlib.Path:
    """Create a music library with some (empty) files."""
    root = tmp_path / "music"
    for name in LIBRARY_FILES:
        file = root / name
        file.parent.mkdir(parents=True, exist_ok=True)
        file.write_bytes(b"")
    return root


@pytest.fixture
def engine() -> FakeEngine:
    """Return a fake Playback Engine."""
    return FakeEngine()


@pytest.fixture
async def player(
    tmp_path: pathlib.Path, library_path: pathlib.Path, engine: FakeEngine
) -> AsyncGenerator[SimpleMusicPlayer, None]:
    """Start a Simple Music Player with a fake engine on a temporary storage.

    The ticker interval is long enough that only the immediate first tick fires.
    """
    storage_path = tmp_path / "data"

    def engine_factory(config: PlayerConfig) -> FakeEngine:
        return engine

    player_instance = SimpleMusicPlayer(
        str(storage_path),
        engine_factory,
        config_overrides={"library_path": str(library_path), "tick_interval": 3600.0},
    )
    await player_instance.start()

    try:
        yield player_instance
    finally:
        await player_instance.stop()


@pytest.fixture
def settle(player: SimpleMusicPlayer) -> Callable[[], Awaitable[None]]:
    """Return a function which waits until all pending callbacks and tasks are done."""

    async def _settle() -> None:
        for _ in range(20):
            await asyncio.sleep(0)
            pending = [task for task in player._tracked_tasks.values() if not task.done()]
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

    return _settle


@pytest.fixture
def events(player: SimpleMusicPlayer) -> list[PlayerEvent]:
    """Collect all events signalled by the player."""
    collected: list[PlayerEvent] = []
    player.subscribe(collected.append)
    return collected
