"""Playwise - content intelligence and scheduling core for a music catalog."""

__version__ = "0.1.0"
