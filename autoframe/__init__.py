"""Automatic pan/zoom camera schedules for screen recordings."""

__version__ = "0.1.0"
