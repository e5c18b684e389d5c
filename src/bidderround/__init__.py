"""Bidder round resolution for cooperative contribution rounds."""

__version__ = "0.1.0"
