"""Silica Social: an anonymous key-based message board."""

__version__ = "0.1.0"
