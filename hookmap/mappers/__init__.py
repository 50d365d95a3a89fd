"""Bundled mapper sets."""
