"""Tests for the core controllers and models."""
