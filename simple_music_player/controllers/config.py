"""Logic to handle storage of persistent (configuration) settings."""

from __future__ import annotations

import contextlib
import json
import os
from typing import TYPE_CHECKING, Any

import aiofiles
from aiofiles.os import wrap
from mashumaro.exceptions import InvalidFieldValue, MissingField

from simple_music_player.constants import SETTINGS_FILENAME
from simple_music_player.models.config import PlayerConfig
from simple_music_player.models.core_controller import CoreController

if TYPE_CHECKING:
    from simple_music_player.app import SimpleMusicPlayer

isfile = wrap(os.path.isfile)
makedirs = wrap(os.makedirs)
remove = wrap(os.remove)
rename = wrap(os.rename)

JSON_DECODE_EXCEPTIONS = (json.JSONDecodeError, UnicodeDecodeError)


class ConfigController(CoreController):
    """Controller that loads and stores the player configuration."""

    domain: str = "config"

    def __init__(self, app: SimpleMusicPlayer) -> None:
        """Initialize core controller."""
        super().__init__(app)
        self.filename = os.path.join(app.storage_path, SETTINGS_FILENAME)
        self._data: dict[str, Any] = {}
        self.values = PlayerConfig()

    async def setup(self) -> None:
        """Async initialize of module."""
        await makedirs(self.app.storage_path, exist_ok=True)
        await self._load()
        # command line overrides win over persisted values
        merged = {**self._data, **{k: v for k, v in self.app.config_overrides.items() if v}}
        try:
            self.values = PlayerConfig.from_dict(merged)
        except (InvalidFieldValue, MissingField):
            self.logger.exception("Invalid settings in %s, using defaults", self.filename)
            self.values = PlayerConfig()
        self.values.library_path = os.path.expanduser(self.values.library_path)

    def get(self, key: str, default: Any = None) -> Any:
        """Get value for given key."""
        return getattr(self.values, key, default)

    def set(self, key: str, value: Any) -> None:
        """Set value for given key and schedule a save."""
        if not hasattr(self.values, key):
            msg = f"Invalid config key: {key}"
            raise KeyError(msg)
        setattr(self.values, key, value)
        self._data[key] = value
        self.save()

    def save(self) -> None:
        """Schedule save of data to disk."""
        self.app.create_task(self._async_save, task_id="save_config", abort_existing=True)

    async def _load(self) -> None:
        """Load data from persistent storage."""
        for filename in (self.filename, f"{self.filename}.backup"):
            try:
                async with aiofiles.open(filename, encoding="utf-8") as _file:
                    self._data = json.loads(await _file.read())
                    self.logger.debug("Loaded persistent settings from %s", filename)
                    return
            except FileNotFoundError:
                pass
            except JSON_DECODE_EXCEPTIONS:
                self.logger.exception("Error while reading persistent storage file %s", filename)
        self.logger.debug("Started with default settings: No persistent storage file found.")

    async def _async_save(self) -> None:
        """Save persistent data to disk."""
        filename_backup = f"{self.filename}.backup"
        # make backup before we write a new file
        if await isfile(self.filename):
            with contextlib.suppress(FileNotFoundError):
                await remove(filename_backup)
            await rename(self.filename, filename_backup)

        async with aiofiles.open(self.filename, "w", encoding="utf-8") as _file:
            await _file.write(json.dumps(self.values.to_dict(), indent=2))
        self.logger.debug("Saved data to persistent storage")
