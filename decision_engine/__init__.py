"""Decision engine module for evaluating decision graphs."""

from decision_engine.engine import DecisionCache, DecisionEngine
from decision_engine.errors import (
    DecisionGraphError,
    DecisionNotFoundError,
    EvaluationTimeoutError,
    ExpressionError,
    GraphStructureError,
    LoaderError,
    NodeExecutionError,
    UnknownNodeTypeError,
)
from decision_engine.expressions import ExpressionEvaluator
from decision_engine.graph import Decision
from decision_engine.nodes import BaseNodeHandler, create_default_handlers

__all__ = [
    "BaseNodeHandler",
    "Decision",
    "DecisionCache",
    "DecisionEngine",
    "DecisionGraphError",
    "DecisionNotFoundError",
    "EvaluationTimeoutError",
    "ExpressionError",
    "ExpressionEvaluator",
    "GraphStructureError",
    "LoaderError",
    "NodeExecutionError",
    "UnknownNodeTypeError",
    "create_default_handlers",
]
