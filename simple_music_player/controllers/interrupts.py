"""
Simple Music Player Interrupt gate.

Translates external interrupts (telephony, audio route changes, media removal)
into hold/unhold requests on the playback controller. Interrupts have no priority
of their own, they simply queue on the same lock as every other caller.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from simple_music_player.helpers.api import api_command
from simple_music_player.models.core_controller import CoreController
from simple_music_player.models.enums import HoldReason

if TYPE_CHECKING:
    from simple_music_player.controllers.playback import PlaybackController

CALL_STATE_IDLE = "idle"


class InterruptGate(CoreController):
    """Controller which maps interrupt sources to hold reasons."""

    domain: str = "interrupts"

    @property
    def playback(self) -> PlaybackController:
        """Return the playback controller."""
        return self.app.playback

    @api_command("interrupts/call_state")
    async def on_call_state_changed(self, state: str) -> None:
        """
        Handle a telephony state transition.

        - state: 'idle' when no call is active, anything else (ringing, offhook) holds playback.
        """
        self.logger.debug("Call state changed to %s", state)
        if state.lower() == CALL_STATE_IDLE:
            await self.playback.unhold(HoldReason.CALL)
        else:
            await self.playback.hold(HoldReason.CALL)

    @api_command("interrupts/headset")
    async def on_headset_plug(self, plugged: bool) -> None:
        """Handle a headset being plugged in or out."""
        self.logger.debug("Headset %s", "plugged in" if plugged else "unplugged")
        if plugged:
            await self.playback.unhold(HoldReason.HEADSET)
        else:
            await self.playback.hold(HoldReason.HEADSET)

    @api_command("interrupts/becoming_noisy")
    async def on_becoming_noisy(self) -> None:
        """Handle the audio output about to switch to the speaker."""
        self.logger.debug("Audio becoming noisy")
        await self.playback.hold(HoldReason.HEADSET)

    @api_command("interrupts/storage_removed")
    async def on_storage_removed(self) -> None:
        """Handle removal of the media storage."""
        await self.playback.on_storage_removed()
