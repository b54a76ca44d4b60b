"""Concrete loader transports."""

from pyvlog.loaders.memory import MemoryLoader

__all__ = ["MemoryLoader"]
