"""Tests for Simple Music Player."""
