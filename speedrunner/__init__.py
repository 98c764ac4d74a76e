"""Speedrunner — a multi-track activity timer."""

__version__ = "0.1.0"
