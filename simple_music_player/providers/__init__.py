"""Package with the Playback Engine implementations."""
