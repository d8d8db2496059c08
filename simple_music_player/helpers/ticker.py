"""Periodic timer which requests a state snapshot while playback is running."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine
from typing import TYPE_CHECKING, Any

from simple_music_player.constants import LOGGER_NAME, VERBOSE_LOG_LEVEL

if TYPE_CHECKING:
    from simple_music_player.app import SimpleMusicPlayer

LOGGER = logging.getLogger(f"{LOGGER_NAME}.helpers.ticker")

TickCallback = Callable[[], Coroutine[Any, Any, None]]


class PositionTicker:
    """
    Single repeating timer on the event loop.

    start() and stop() are idempotent. Stopping only prevents future ticks,
    a tick that is already running is allowed to complete.
    """

    def __init__(
        self,
        app: SimpleMusicPlayer,
        on_tick: TickCallback,
        interval: float = 1.0,
        task_id: str = "position_ticker",
    ) -> None:
        """Initialize the ticker."""
        self.app = app
        self.interval = interval
        self._on_tick = on_tick
        self._task_id = task_id
        self._handle: asyncio.TimerHandle | None = None

    @property
    def running(self) -> bool:
        """Return if the ticker is scheduled."""
        return self._handle is not None

    def start(self) -> None:
        """Make sure the ticker is running, the first tick fires right away."""
        if self._handle is not None:
            return
        LOGGER.log(VERBOSE_LOG_LEVEL, "Starting ticker (interval %s)", self.interval)
        self._schedule(0)

    def stop(self) -> None:
        """Make sure the ticker is stopped."""
        if self._handle is None:
            return
        LOGGER.log(VERBOSE_LOG_LEVEL, "Stopping ticker")
        self.app.cancel_timer(self._task_id)
        self._handle = None

    def _schedule(self, delay: float) -> None:
        self._handle = self.app.call_later(delay, self._tick, task_id=self._task_id)

    def _tick(self) -> None:
        # reschedule first so a slow tick does not delay the next one
        self._schedule(self.interval)
        # a tick still waiting for the controller is not duplicated
        self.app.create_task(self._on_tick, task_id=self._task_id)
