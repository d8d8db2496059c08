"""Model/base for a Core controller within Simple Music Player."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from simple_music_player.constants import LOGGER_NAME

if TYPE_CHECKING:
    from simple_music_player.app import SimpleMusicPlayer


class CoreController:
    """Base representation of a Core controller within Simple Music Player."""

    domain: str  # used as identifier (=name of the module)

    def __init__(self, app: SimpleMusicPlayer) -> None:
        """Initialize core controller."""
        self.app = app
        self.logger = logging.getLogger(f"{LOGGER_NAME}.{self.domain}")

    async def setup(self) -> None:
        """Async initialize of module."""

    async def close(self) -> None:
        """Handle logic on server stop."""
