"""
Simple Music Player Playback controller.

Owns the playlist and drives the Playback Engine through a small state machine.

Every public operation is serialized by a single lock, whether it is called by a
user command, the position ticker, an interrupt or the engine completion callback.
After every playlist mutation the head of the playlist is validated against the
song the engine is sourced from, which keeps the two consistent and is also what
makes "play now" and auto advance work.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from simple_music_player.constants import TASK_ID_TICKER
from simple_music_player.helpers.api import api_command
from simple_music_player.helpers.ticker import PositionTicker
from simple_music_player.models.core_controller import CoreController
from simple_music_player.models.enums import EventType, HoldReason, PlaybackState
from simple_music_player.models.errors import SourceError
from simple_music_player.models.playlist import Playlist
from simple_music_player.models.snapshot import PlayerStateSnapshot
from simple_music_player.models.song import Song

if TYPE_CHECKING:
    from simple_music_player.app import SimpleMusicPlayer
    from simple_music_player.models.engine import PlaybackEngine


class PlaybackController(CoreController):
    """Controller holding the playlist and the playback state."""

    domain: str = "playback"

    def __init__(self, app: SimpleMusicPlayer, engine: PlaybackEngine) -> None:
        """Initialize core controller."""
        super().__init__(app)
        self.engine = engine
        self.playlist = Playlist()
        self._state = PlaybackState.STOPPED
        self._hold_reason: HoldReason | None = None
        self._now_playing: Song | None = None
        # head entry that failed to open, not retried until played explicitly
        self._failed_head: Song | None = None
        self._lock = asyncio.Lock()
        self._ticker = PositionTicker(
            app, self._on_tick, interval=app.config.values.tick_interval, task_id=TASK_ID_TICKER
        )

    async def setup(self) -> None:
        """Async initialize of module."""
        self.engine.on_completion(self._on_engine_completion)

    async def close(self) -> None:
        """Cleanup on exit, this forces a reset."""
        async with self._lock:
            await self._reset()
        self._ticker.stop()
        await self.engine.close()

    @property
    def state(self) -> PlaybackState:
        """Return the current playback state."""
        return self._state

    @property
    def hold_reason(self) -> HoldReason | None:
        """Return the reason playback is on hold (if any)."""
        return self._hold_reason

    @property
    def now_playing(self) -> Song | None:
        """Return the song the engine is sourced from (None when stopped)."""
        return self._now_playing

    @property
    def ticker(self) -> PositionTicker:
        """Return the position ticker."""
        return self._ticker

    # Queries

    @api_command("player/state")
    async def get_state(self) -> PlayerStateSnapshot:
        """Return (and publish) a snapshot of the current state."""
        async with self._lock:
            snapshot = self._snapshot()
            self.app.signal_event(EventType.STATE_CHANGED, snapshot)
            return snapshot

    @api_command("player/playlist")
    async def get_playlist(self) -> tuple[Song, ...]:
        """Return (and publish) the enqueued songs, in playback order."""
        async with self._lock:
            self._signal_playlist()
            return self.playlist.songs

    # Playlist commands

    @api_command("player/enqueue")
    async def enqueue(self, song: Song, index: int = -1) -> Song:
        """
        Enqueue a copy of the song at the given index and return that copy.

        - song: the song to enqueue, a new playlist entry is spawned from it.
        - index: position to insert at, a negative or out of range value appends.
        """
        async with self._lock:
            entry = song.spawn()
            self.playlist.insert(entry, index)
            self._signal_playlist()
            # this makes playback start when the first song is enqueued
            await self._validate()
            return entry

    @api_command("player/enqueue_all")
    async def enqueue_all(self, songs: list[Song], index: int = -1) -> list[Song]:
        """Enqueue copies of all given songs (in order) at the given index."""
        async with self._lock:
            entries = [song.spawn() for song in songs]
            if not 0 <= index <= len(self.playlist):
                index = -1
            for offset, entry in enumerate(entries):
                self.playlist.insert(entry, index + offset if index >= 0 else -1)
            self._signal_playlist()
            await self._validate()
            return entries

    @api_command("player/move")
    async def move_song(self, song: Song, offset: int) -> None:
        """
        Move a song up or down the playlist.

        - song: the playlist entry to move.
        - offset: move x positions down if positive, up if negative (clamped to the list).
        """
        async with self._lock:
            self.playlist.move(song, offset)
            self._signal_playlist()
            await self._validate()

    @api_command("player/remove")
    async def remove_song(self, song: Song) -> None:
        """Remove a song from the playlist, removing the head song restarts playback."""
        async with self._lock:
            self.playlist.remove(song)
            self._signal_playlist()
            await self._validate()

    @api_command("player/play_now")
    async def play_now(self, song: Song) -> None:
        """Move an enqueued song to the head of the playlist, which starts playing it."""
        async with self._lock:
            index = self.playlist.index_of(song)
            if not index:
                # absent or already at the head
                return
            self.playlist.move(song, -index)
            self._signal_playlist()
            await self._validate()

    @api_command("player/play_after_current")
    async def play_after_current(self, song: Song) -> None:
        """Move an enqueued song right after the head of the playlist."""
        async with self._lock:
            index = self.playlist.index_of(song)
            if index is None or index == 1 or len(self.playlist) < 2:
                return
            self.playlist.move(song, 1 - index)
            self._signal_playlist()
            await self._validate()

    @api_command("player/clear")
    async def clear(self) -> None:
        """Stop playback and remove all songs from the playlist."""
        async with self._lock:
            await self._pause()
            self.playlist.clear()
            self._signal_playlist()
            await self._validate()

    @api_command("player/shuffle")
    async def shuffle(self) -> None:
        """Randomly reorder the playlist, restarts playback if the head changed."""
        async with self._lock:
            self.playlist.shuffle()
            self._signal_playlist()
            await self._validate()

    # Transport commands

    @api_command("player/play")
    async def play(self) -> None:
        """Make sure playback is on, valid in any state."""
        async with self._lock:
            await self._play()

    @api_command("player/pause")
    async def pause(self) -> None:
        """Pause playback, only effective while playing."""
        async with self._lock:
            await self._pause()

    @api_command("player/play_next")
    async def play_next(self) -> None:
        """Drop the head song and play the next one, valid in any state."""
        async with self._lock:
            await self._play_next()

    @api_command("player/seek")
    async def seek(self, position: int) -> None:
        """
        Seek within the current song, ignored when stopped.

        - position: position in milliseconds.
        """
        async with self._lock:
            if self._state == PlaybackState.STOPPED:
                return
            await self.engine.seek(max(0, position))

    async def reset(self) -> None:
        """Stop playback and unload the engine source."""
        async with self._lock:
            await self._reset()

    # Interrupts

    async def hold(self, reason: HoldReason) -> None:
        """Put playback on hold for the given reason, only effective while playing."""
        async with self._lock:
            await self._pause(hold_reason=reason)

    async def unhold(self, reason: HoldReason) -> None:
        """Resume playback if it was put on hold for the given reason."""
        async with self._lock:
            if self._state == PlaybackState.ON_HOLD and self._hold_reason == reason:
                await self._play()

    async def on_storage_removed(self) -> None:
        """Handle removal of the library storage: stop and clear everything."""
        async with self._lock:
            self.logger.warning("Library storage removed, clearing the playlist")
            await self._pause()
            await self._reset()
            self.playlist.clear()
            self._signal_playlist()
            self.app.signal_event(EventType.STORAGE_UNAVAILABLE)

    # Internal helpers, these expect the lock to be held

    async def _play(self) -> None:
        if self._state == PlaybackState.PLAYING:
            return
        if self._state != PlaybackState.STOPPED:
            # paused or on hold: resume the loaded source
            await self.engine.start()
            self._set_state(PlaybackState.PLAYING)
            self._ticker.start()
            return
        if (head := self.playlist.head) is None:
            return
        try:
            await self.engine.open(head.path)
            await self.engine.start()
        except SourceError as err:
            self.logger.warning("Unable to play %s: %s", head.path, err)
            self._failed_head = head
            await self.engine.reset()
            self.app.signal_event(EventType.PLAYBACK_ERROR, str(err) or head.path)
            return
        self._failed_head = None
        self._now_playing = head
        self._set_state(PlaybackState.PLAYING)
        self.logger.info("Now playing %s", head.display_name)
        self._ticker.start()

    async def _pause(self, hold_reason: HoldReason | None = None) -> None:
        if self._state != PlaybackState.PLAYING:
            return
        await self.engine.pause()
        if hold_reason is None:
            self._set_state(PlaybackState.PAUSED)
        else:
            self._set_state(PlaybackState.ON_HOLD, hold_reason)
        self._stop_ticker()

    async def _reset(self) -> None:
        if self._state == PlaybackState.STOPPED:
            return
        await self.engine.stop()
        await self.engine.reset()
        self._now_playing = None
        self._set_state(PlaybackState.STOPPED)
        self._stop_ticker()

    async def _play_next(self) -> None:
        if self.playlist.pop_head() is None:
            return
        self._signal_playlist()
        await self._reset()
        await self._play()

    async def _validate(self) -> None:
        """Make sure the head of the playlist is the song that is sourced by the engine."""
        if (head := self.playlist.head) is None:
            await self._reset()
        elif head != self._now_playing and head != self._failed_head:
            await self._reset()
            await self._play()

    def _set_state(self, state: PlaybackState, hold_reason: HoldReason | None = None) -> None:
        if state != self._state or hold_reason != self._hold_reason:
            self.logger.debug(
                "State changed from %s to %s%s",
                self._state,
                state,
                f" ({hold_reason})" if hold_reason else "",
            )
        self._state = state
        self._hold_reason = hold_reason

    def _stop_ticker(self) -> None:
        self._ticker.stop()
        # publish the final state, the ticker won't do that anymore
        self._signal_state()

    def _snapshot(self) -> PlayerStateSnapshot:
        if not self._state.audible:
            return PlayerStateSnapshot.stopped()
        return PlayerStateSnapshot(
            state=self._state,
            position=self.engine.get_position(),
            duration=self.engine.get_duration(),
            now_playing=self._now_playing,
            hold_reason=self._hold_reason,
        )

    def _signal_state(self) -> None:
        self.app.signal_event(EventType.STATE_CHANGED, self._snapshot())

    def _signal_playlist(self) -> None:
        self.app.signal_event(EventType.PLAYLIST_CHANGED, self.playlist.songs)

    async def _on_tick(self) -> None:
        async with self._lock:
            self._signal_state()

    def _on_engine_completion(self) -> None:
        """Handle the engine reporting the end of the current source."""
        # bind the finished song, completions of an older song are ignored
        self.app.create_task(self._handle_completion(self._now_playing))

    async def _handle_completion(self, finished: Song | None) -> None:
        async with self._lock:
            if finished is None or finished != self._now_playing:
                self.logger.debug("Ignoring completion of %s (no longer playing)", finished)
                return
            self.logger.debug("Finished playing %s", finished.display_name)
            await self._play_next()
