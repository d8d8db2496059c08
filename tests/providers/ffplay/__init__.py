"""Tests for the ffplay Playback Engine."""
