"""In-process loaders: a registered map and a user callback."""

from __future__ import annotations

import inspect
from typing import Any, Awaitable, Callable, Union

from loaders.base import BaseLoader, DecisionNotFoundError, LoaderError
from models.schemas import GraphDefinition


GraphSource = Union[GraphDefinition, dict[str, Any]]
LoaderCallback = Callable[[str], Union[GraphSource, Awaitable[GraphSource]]]


class MemoryLoader(BaseLoader):
    """Serve decisions registered in memory with ``add``."""

    def __init__(self) -> None:
        self._decisions: dict[str, GraphDefinition] = {}

    def add(self, key: str, decision: GraphSource) -> None:
        self._decisions[key] = self._parse(key, decision)

    def remove(self, key: str) -> bool:
        return self._decisions.pop(key, None) is not None

    def keys(self) -> list[str]:
        return list(self._decisions)

    async def load(self, key: str) -> GraphDefinition:
        try:
            return self._decisions[key]
        except KeyError:
            raise DecisionNotFoundError(f"Decision not found: {key}", key) from None


class ClosureLoader(BaseLoader):
    """Delegate loading to a callback, which may be sync or async."""

    def __init__(self, callback: LoaderCallback) -> None:
        if not callable(callback):
            raise TypeError("ClosureLoader requires a callable")
        self._callback = callback

    async def load(self, key: str) -> GraphDefinition:
        try:
            source = self._callback(key)
            if inspect.isawaitable(source):
                source = await source
        except LoaderError:
            raise
        except Exception as e:
            raise LoaderError(f"Loader callback failed for '{key}': {e}", key) from e

        if source is None:
            raise DecisionNotFoundError(f"Decision not found: {key}", key)
        return self._parse(key, source)
