"""Package with the core controllers."""
