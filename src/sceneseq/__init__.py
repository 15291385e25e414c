"""Timed scene source sequencing for stream composition tools."""

__version__ = "0.1.0"
