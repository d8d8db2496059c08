"""All constants for Simple Music Player."""

from typing import Final

LOGGER_NAME: Final[str] = "simple_music_player"
VERBOSE_LOG_LEVEL: Final[int] = 5

SETTINGS_FILENAME: Final[str] = "settings.json"

# config keys
CONF_LIBRARY_PATH: Final[str] = "library_path"
CONF_LOG_LEVEL: Final[str] = "log_level"

DEFAULT_LIBRARY_PATH: Final[str] = "~/Music"
DEFAULT_TICK_INTERVAL: Final[float] = 1.0

# tracked task/timer ids
TASK_ID_TICKER: Final[str] = "position_ticker"

AUDIO_EXTENSIONS: Final[tuple[str, ...]] = (
    ".aac",
    ".flac",
    ".m4a",
    ".mp3",
    ".oga",
    ".ogg",
    ".opus",
    ".wav",
    ".wma",
)
