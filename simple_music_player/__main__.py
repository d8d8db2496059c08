"""Run the Simple Music Player from the command line."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import signal

from simple_music_player.app import SimpleMusicPlayer
from simple_music_player.constants import (
    CONF_LIBRARY_PATH,
    CONF_LOG_LEVEL,
    LOGGER_NAME,
    VERBOSE_LOG_LEVEL,
)
from simple_music_player.models.enums import EventType
from simple_music_player.models.event import PlayerEvent
from simple_music_player.providers.ffplay import create_engine

DEFAULT_STORAGE_PATH = os.path.join(os.path.expanduser("~"), ".simple_music_player")
LOG_FORMAT = "%(asctime)s %(levelname)s (%(name)s) %(message)s"

LOGGER = logging.getLogger(LOGGER_NAME)


def get_arguments() -> argparse.Namespace:
    """Arguments handling."""
    parser = argparse.ArgumentParser(description="Simple Music Player")
    parser.add_argument(
        "--storage-path",
        default=DEFAULT_STORAGE_PATH,
        help="Directory to store the settings file",
    )
    parser.add_argument(
        "--library-path",
        default=None,
        help="Root directory of the music library (overrides the settings file)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=("verbose", "debug", "info", "warning", "error"),
        help="Log level (overrides the settings file)",
    )
    parser.add_argument(
        "--play-all",
        action="store_true",
        help="Enqueue all songs of the library on start",
    )
    return parser.parse_args()


def setup_logger(level: str) -> None:
    """Configure the (root) logger for the given level name."""
    log_level = VERBOSE_LOG_LEVEL if level == "verbose" else logging.getLevelName(level.upper())
    logging.addLevelName(VERBOSE_LOG_LEVEL, "VERBOSE")
    logging.basicConfig(format=LOG_FORMAT, level=logging.WARNING)
    LOGGER.setLevel(log_level)


def _log_event(event: PlayerEvent) -> None:
    if event.event == EventType.PLAYBACK_ERROR:
        LOGGER.error("Playback error: %s", event.data)
    elif event.event == EventType.STORAGE_UNAVAILABLE:
        LOGGER.error("Music library is not available")


async def run(args: argparse.Namespace) -> None:
    """Start the player and run until a stop signal is received."""
    player = SimpleMusicPlayer(
        args.storage_path,
        create_engine,
        config_overrides={
            CONF_LIBRARY_PATH: args.library_path,
            CONF_LOG_LEVEL: args.log_level,
        },
    )
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_event.set)

    await player.start()
    # the persisted log level applies when not given on the command line
    setup_logger(player.config.values.log_level)
    player.subscribe(_log_event, (EventType.PLAYBACK_ERROR, EventType.STORAGE_UNAVAILABLE))
    if args.play_all:
        songs = await player.library.get_available_songs()
        LOGGER.info("Enqueueing %s songs", len(songs))
        await player.playback.enqueue_all(list(songs))
    try:
        await stop_event.wait()
    finally:
        await player.stop()


def main() -> None:
    """Start Simple Music Player."""
    args = get_arguments()
    setup_logger(args.log_level or "info")
    asyncio.run(run(args))


if __name__ == "__main__":
    main()
