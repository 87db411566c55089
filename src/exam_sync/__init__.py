"""Offline-first exam submission sync engine."""

__version__ = "0.1.0"
