"""Estimate the carbon footprint of AI coding sessions from token usage."""

__version__ = "0.1.0"
