"""Airwave - interactive terminal internet radio client."""

__version__ = "0.1.0"
