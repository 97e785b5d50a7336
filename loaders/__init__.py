"""Loaders that fetch decision graph definitions by key."""

from loaders.base import BaseLoader, DecisionNotFoundError, LoaderError, NoopLoader
from loaders.filesystem import FilesystemLoader
from loaders.memory import ClosureLoader, MemoryLoader

__all__ = [
    "BaseLoader",
    "ClosureLoader",
    "DecisionNotFoundError",
    "FilesystemLoader",
    "LoaderError",
    "MemoryLoader",
    "NoopLoader",
]
