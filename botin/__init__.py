"""Botin - single-turn attachments bot."""
__version__ = "0.1.0"
