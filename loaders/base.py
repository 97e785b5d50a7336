"""Base loader class and the loader error types."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import ValidationError

from models.schemas import GraphDefinition


class LoaderError(Exception):
    """Base exception for decision loading errors."""

    def __init__(self, message: str, key: str) -> None:
        super().__init__(message)
        self.key = key


class DecisionNotFoundError(LoaderError):
    """No decision is known under the requested key."""


class BaseLoader(ABC):
    """Abstract base class for graph definition loaders."""

    @property
    def name(self) -> str:
        """Loader name for logging and error messages."""
        return type(self).__name__

    @abstractmethod
    async def load(self, key: str) -> GraphDefinition:
        """Return the graph definition stored under ``key``."""
        ...

    def _parse(self, key: str, data: Any) -> GraphDefinition:
        """Coerce a mapping or JSON text into a graph definition."""
        if isinstance(data, GraphDefinition):
            return data
        try:
            if isinstance(data, (str, bytes)):
                return GraphDefinition.model_validate_json(data)
            return GraphDefinition.model_validate(data)
        except ValidationError as e:
            raise LoaderError(
                f"Failed to deserialize decision '{key}': {e.error_count()} validation error(s)\n{e}",
                key,
            ) from e


class NoopLoader(BaseLoader):
    """Loader that knows no decisions. Used when the engine is given none."""

    async def load(self, key: str) -> GraphDefinition:
        raise LoaderError(
            f"Cannot load decision '{key}' with {self.name}. Use create_decision instead.",
            key,
        )
