"""Tests for the InterruptGate."""

from simple_music_player.app import SimpleMusicPlayer
from simple_music_player.models.enums import HoldReason, PlaybackState
from simple_music_player.models.song import Song


async def test_call_interrupt(player: SimpleMusicPlayer) -> None:
    """Test that an incoming call holds playback until the call ends."""
    await player.playback.enqueue(Song.from_path("/music/a.mp3"))
    await player.interrupts.on_call_state_changed("ringing")
    assert player.playback.state == PlaybackState.ON_HOLD
    assert player.playback.hold_reason == HoldReason.CALL
    await player.interrupts.on_call_state_changed("offhook")
    assert player.playback.state == PlaybackState.ON_HOLD
    await player.interrupts.on_call_state_changed("IDLE")
    assert player.playback.state == PlaybackState.PLAYING


async def test_headset_interrupt(player: SimpleMusicPlayer) -> None:
    """Test that unplugging the headset holds playback until it is plugged back in."""
    await player.playback.enqueue(Song.from_path("/music/a.mp3"))
    await player.interrupts.on_becoming_noisy()
    assert player.playback.hold_reason == HoldReason.HEADSET
    # call ending does not resume a headset hold
    await player.interrupts.on_call_state_changed("idle")
    assert player.playback.state == PlaybackState.ON_HOLD
    await player.interrupts.on_headset_plug(True)
    assert player.playback.state == PlaybackState.PLAYING
    await player.interrupts.on_headset_plug(False)
    assert player.playback.state == PlaybackState.ON_HOLD


async def test_plug_without_hold(player: SimpleMusicPlayer) -> None:
    """Test that plugging in a headset does not start playback."""
    await player.playback.enqueue(Song.from_path("/music/a.mp3"))
    await player.playback.pause()
    await player.interrupts.on_headset_plug(True)
    assert player.playback.state == PlaybackState.PAUSED


async def test_storage_removed(player: SimpleMusicPlayer) -> None:
    """Test the storage removed interrupt clears the playlist."""
    await player.playback.enqueue(Song.from_path("/music/a.mp3"))
    await player.interrupts.on_storage_removed()
    assert player.playback.state == PlaybackState.STOPPED
    assert len(player.playback.playlist) == 0
