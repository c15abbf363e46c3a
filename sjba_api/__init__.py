"""SJBA website API."""

__version__ = "0.5.0"
