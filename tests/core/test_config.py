"""Tests for the ConfigController."""

import json
import pathlib
from collections.abc import Awaitable, Callable

import aiofiles
import pytest

from simple_music_player.app import SimpleMusicPlayer
from tests.conftest import FakeEngine


async def test_load_and_overrides(tmp_path: pathlib.Path) -> None:
    """Test that stored settings are loaded and command line overrides win."""
    storage_path = tmp_path / "data"
    storage_path.mkdir()
    async with aiofiles.open(storage_path / "settings.json", "w") as f:
        await f.write(
            json.dumps(
                {"library_path": "/stored/music", "tick_interval": 0.5, "log_level": "debug"}
            )
        )
    player = SimpleMusicPlayer(
        str(storage_path),
        lambda config: FakeEngine(),
        config_overrides={"library_path": str(tmp_path), "log_level": None},
    )
    await player.start()
    try:
        assert player.config.values.library_path == str(tmp_path)
        assert player.config.values.tick_interval == 0.5
        assert player.config.get("log_level") == "debug"
        assert player.config.get("ffplay_binary") == "ffplay"
        assert player.playback.ticker.interval == 0.5
    finally:
        await player.stop()


async def test_invalid_settings_fall_back_to_defaults(tmp_path: pathlib.Path) -> None:
    """Test that a corrupt settings file does not prevent startup."""
    storage_path = tmp_path / "data"
    storage_path.mkdir()
    (storage_path / "settings.json").write_text("{not json")
    player = SimpleMusicPlayer(str(storage_path), lambda config: FakeEngine())
    await player.start()
    try:
        assert player.config.values.tick_interval == 1.0
        assert player.config.values.library_path.endswith("Music")
    finally:
        await player.stop()


async def test_save(
    player: SimpleMusicPlayer, tmp_path: pathlib.Path, settle: Callable[[], Awaitable[None]]
) -> None:
    """Test that changed values are written to disk, keeping a backup."""
    player.config.set("ffplay_binary", "/usr/local/bin/ffplay")
    await settle()
    player.config.set("tick_interval", 2.0)
    await settle()
    stored = json.loads((tmp_path / "data" / "settings.json").read_text())
    assert stored["ffplay_binary"] == "/usr/local/bin/ffplay"
    assert stored["tick_interval"] == 2.0
    backup = json.loads((tmp_path / "data" / "settings.json.backup").read_text())
    assert backup["tick_interval"] == 3600.0


async def test_set_unknown_key(player: SimpleMusicPlayer) -> None:
    """Test that unknown keys are refused."""
    with pytest.raises(KeyError, match="volume"):
        player.config.set("volume", 50)
