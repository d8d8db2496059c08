"""Model for an event signalled to subscribers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .enums import EventType


@dataclass(frozen=True)
class PlayerEvent:
    """Representation of an event, as delivered to subscribers."""

    event: EventType
    data: Any = None
