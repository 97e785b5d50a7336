"""Exceptions raised while building and evaluating decision graphs."""

from __future__ import annotations

from loaders.base import DecisionNotFoundError, LoaderError


class DecisionGraphError(Exception):
    """Base exception for decision graph evaluation errors."""


class GraphStructureError(DecisionGraphError):
    """The graph can not be executed as defined (e.g. no input node)."""


class UnknownNodeTypeError(DecisionGraphError):
    """No handler is registered for a node's type."""

    def __init__(self, node_id: str, node_type: str) -> None:
        super().__init__(f"No handler found for node type: {node_type} (node '{node_id}')")
        self.node_id = node_id
        self.node_type = node_type


class NodeExecutionError(DecisionGraphError):
    """A node handler failed."""

    def __init__(self, node_id: str, node_type: str, message: str) -> None:
        super().__init__(
            f"Error executing node '{node_id}' of type '{node_type}': {message}"
        )
        self.node_id = node_id
        self.node_type = node_type
        self.reason = message


class EvaluationTimeoutError(DecisionGraphError, TimeoutError):
    """The evaluation deadline passed before the walk finished."""

    def __init__(self, max_execution_time_ms: int) -> None:
        super().__init__(
            f"Decision evaluation timed out after {max_execution_time_ms}ms"
        )
        self.max_execution_time_ms = max_execution_time_ms


class ExpressionError(DecisionGraphError):
    """An expression could not be evaluated."""

    def __init__(self, expression: str, message: str) -> None:
        super().__init__(f"Error evaluating expression '{expression}': {message}")
        self.expression = expression


__all__ = [
    "DecisionGraphError",
    "DecisionNotFoundError",
    "EvaluationTimeoutError",
    "ExpressionError",
    "GraphStructureError",
    "LoaderError",
    "NodeExecutionError",
    "UnknownNodeTypeError",
]
