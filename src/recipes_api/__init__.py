"""Recipes API: REST backend for sharing recipes."""

__version__ = "0.1.0"
