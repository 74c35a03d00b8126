"""Seat reservation and inventory engine."""

__version__ = "1.0.0"
