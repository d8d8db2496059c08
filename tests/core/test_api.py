"""Tests for the command API."""

import pytest

from simple_music_player.app import SimpleMusicPlayer
from simple_music_player.helpers.api import APICommandHandler, convert_value, parse_arguments
from simple_music_player.models.enums import PlaybackState
from simple_music_player.models.errors import InvalidCommand
from simple_music_player.models.song import Song

EXPECTED_COMMANDS = [
    "info",
    "interrupts/becoming_noisy",
    "interrupts/call_state",
    "interrupts/headset",
    "interrupts/storage_removed",
    "library/search",
    "library/songs",
    "player/clear",
    "player/enqueue",
    "player/enqueue_all",
    "player/move",
    "player/pause",
    "player/play",
    "player/play_after_current",
    "player/play_next",
    "player/play_now",
    "player/playlist",
    "player/remove",
    "player/seek",
    "player/shuffle",
    "player/state",
]


def test_convert_value() -> None:
    """Test the conversion of raw values to the annotated types."""
    song = Song.from_path("/music/a.mp3")
    assert convert_value("song", song.to_dict(), Song) == song
    assert convert_value("song", song, Song) is song
    assert convert_value("songs", [song.to_dict()], list[Song]) == [song]
    assert convert_value("offset", "-2", int) == -2
    assert convert_value("offset", 3, int) == 3
    assert convert_value("plugged", "ON", bool) is True
    assert convert_value("plugged", "no", bool) is False
    assert convert_value("phrase", "intro", str) == "intro"
    with pytest.raises(ValueError):
        convert_value("offset", "abc", int)
    with pytest.raises(TypeError):
        convert_value("offset", True, int)
    with pytest.raises(TypeError):
        convert_value("plugged", "maybe", bool)
    with pytest.raises(TypeError):
        convert_value("songs", song.to_dict(), list[Song])


def test_parse_arguments() -> None:
    """Test parsing the arguments of a command handler."""

    async def func(position: int, phrase: str = "") -> None:
        """Do nothing."""

    handler = APICommandHandler.parse("test/func", func)
    assert parse_arguments(handler, {"position": "1000", "other": 1}) == {
        "position": 1000,
        "phrase": "",
    }
    assert parse_arguments(handler, {"position": 5, "phrase": None}) == {
        "position": 5,
        "phrase": "",
    }
    with pytest.raises(KeyError):
        parse_arguments(handler, None)

async def test_registered_commands(player: SimpleMusicPlayer) -> None:
    """Test that all decorated methods are registered as commands."""
    info = await player.execute_command("info")
    assert info["commands"] == EXPECTED_COMMANDS
    assert sorted(player.command_handlers) == EXPECTED_COMMANDS
    with pytest.raises(RuntimeError):
        player.register_api_command("info", player.get_info)


async def test_execute_commands(player: SimpleMusicPlayer) -> None:
    """Test driving the player with raw (json) arguments."""
    songs = await player.execute_command("library/songs")
    first = await player.execute_command("player/enqueue", {"song": songs[0].to_dict()})
    assert first.content_equals(songs[0])
    entries = await player.execute_command(
        "player/enqueue_all", {"songs": [x.to_dict() for x in songs[1:3]], "index": "0"}
    )
    assert len(entries) == 2
    await player.execute_command("player/move", {"song": first.to_dict(), "offset": "-5"})
    playlist = await player.execute_command("player/playlist")
    assert playlist[0] == first

    await player.execute_command("interrupts/call_state", {"state": "ringing"})
    state = await player.execute_command("player/state")
    assert state.state == PlaybackState.ON_HOLD
    assert state.to_dict()["hold_reason"] == "call"
    await player.execute_command("interrupts/call_state", {"state": "idle"})
    await player.execute_command("interrupts/becoming_noisy")
    await player.execute_command("interrupts/headset", {"plugged": "true"})
    state = await player.execute_command("player/state")
    assert state.state == PlaybackState.PLAYING
    assert state.now_playing == first


async def test_invalid_commands(player: SimpleMusicPlayer) -> None:
    """Test the errors raised for invalid commands and arguments."""
    with pytest.raises(InvalidCommand):
        await player.execute_command("player/rewind")
    with pytest.raises(InvalidCommand):
        await player.execute_command("player/seek")
    with pytest.raises(InvalidCommand):
        await player.execute_command("player/enqueue", {"song": {"path": "/music/a.mp3"}})
    with pytest.raises(InvalidCommand):
        await player.execute_command("player/seek", {"position": "soon"})
