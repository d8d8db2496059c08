"""Tests for the Playback Engine providers."""
