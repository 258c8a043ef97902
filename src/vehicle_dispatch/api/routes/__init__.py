"""Route group exports."""

from . import dispatch, health, network

__all__ = ["dispatch", "health", "network"]
