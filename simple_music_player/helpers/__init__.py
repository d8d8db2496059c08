"""Various helpers and utils."""
