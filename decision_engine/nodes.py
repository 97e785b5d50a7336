"""Node handlers: one per node type, each mapping (node, context) to a value."""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Iterable, Mapping, TypeVar

from decision_engine.errors import NodeExecutionError
from decision_engine.expressions import ExpressionEvaluator
from decision_engine.values import Value, cell_text, is_blank_cell, set_path, to_value
from models.schemas import (
    DECISION_TABLE_NODE,
    EXPRESSION_NODE,
    INPUT_NODE,
    NODE_TYPE_ALIASES,
    OUTPUT_NODE,
    SWITCH_NODE,
    DecisionTableContent,
    ExpressionContent,
    GraphNode,
    SwitchContent,
    canonical_node_type,
)

if TYPE_CHECKING:
    from decision_engine.engine import DecisionEngine


T = TypeVar("T")


def _aliases_for(node_type: str) -> tuple[str, ...]:
    return tuple(alias for alias, name in NODE_TYPE_ALIASES.items() if name == node_type)


class BaseNodeHandler(ABC):
    """Abstract base class for all node handlers."""

    # The executor stops the walk after a terminal handler runs
    terminal: bool = False

    @property
    @abstractmethod
    def node_type(self) -> str:
        """Node type tag this handler executes."""
        ...

    @property
    def aliases(self) -> tuple[str, ...]:
        """Additional type tags routed to this handler."""
        return _aliases_for(canonical_node_type(self.node_type))

    @abstractmethod
    async def execute(
        self, node: GraphNode, context: Value, engine: DecisionEngine
    ) -> Value:
        """Execute the node against the current context."""
        ...

    def get_content(self, node: GraphNode, model: type[T]) -> T | None:
        """Return the node content as ``model``, or None when absent."""
        content = node.content
        if content is None or isinstance(content, model):
            return content
        return model.model_validate(content)  # type: ignore[attr-defined]


class InputNodeHandler(BaseNodeHandler):
    """Entry node. Passes the caller's context through."""

    @property
    def node_type(self) -> str:
        return INPUT_NODE

    async def execute(self, node: GraphNode, context: Value, engine: DecisionEngine) -> Value:
        return context


class OutputNodeHandler(BaseNodeHandler):
    """Exit node. Its input becomes the evaluation result."""

    terminal = True

    @property
    def node_type(self) -> str:
        return OUTPUT_NODE

    async def execute(self, node: GraphNode, context: Value, engine: DecisionEngine) -> Value:
        return context


class ExpressionNodeHandler(BaseNodeHandler):
    """Build a new object from ``field path -> expression`` pairs."""

    def __init__(self, evaluator: ExpressionEvaluator) -> None:
        self.evaluator = evaluator

    @property
    def node_type(self) -> str:
        return EXPRESSION_NODE

    async def execute(self, node: GraphNode, context: Value, engine: DecisionEngine) -> Value:
        content = self.get_content(node, ExpressionContent)
        if content is None:
            return context

        result: dict[str, Value] = {}
        for field, expression in content.expressions.items():
            try:
                value = self.evaluator.evaluate(expression, context)
                set_path(result, field, copy.deepcopy(value))
            except Exception as e:
                raise NodeExecutionError(
                    node.id,
                    node.type,
                    f"Expression '{expression}' for field '{field}' failed: {e}",
                ) from e

        return result


class DecisionTableHandler(BaseNodeHandler):
    """
    Match decision table rows against the context.

    Hit policies:
    - first: return the first matching row's output, skipping later rows
    - collect: return the outputs of all matching rows (possibly empty)
    - anything else: the first matching row's output, or None
    """

    def __init__(self, evaluator: ExpressionEvaluator) -> None:
        self.evaluator = evaluator

    @property
    def node_type(self) -> str:
        return DECISION_TABLE_NODE

    async def execute(self, node: GraphNode, context: Value, engine: DecisionEngine) -> Value:
        table = self.get_content(node, DecisionTableContent)
        if table is None:
            return None

        hit_policy = table.hit_policy.lower()
        matches: list[Value] = []

        for rule in table.rules:
            if not self._rule_matches(rule, table, context):
                continue

            output = self._rule_output(rule, table)
            if hit_policy == "first":
                return output
            matches.append(output)

        if hit_policy == "collect":
            return matches
        return matches[0] if matches else None

    def _rule_matches(self, rule: list[Any], table: DecisionTableContent, context: Value) -> bool:
        """A row matches when every non-blank input cell holds."""
        for cell in rule[: len(table.inputs)]:
            if is_blank_cell(cell):
                continue
            if not self.evaluator.evaluate_condition(cell_text(cell), context):
                return False
        return True

    def _rule_output(self, rule: list[Any], table: DecisionTableContent) -> dict[str, Value]:
        """Map the row's output cells onto the output column field paths."""
        result: dict[str, Value] = {}
        offset = len(table.inputs)

        for index, column in enumerate(table.outputs):
            if offset + index >= len(rule):
                break
            set_path(result, column.field, to_value(rule[offset + index]))

        return result


class SwitchNodeHandler(BaseNodeHandler):
    """
    Pass the context through when a statement holds.

    Traversal is not redirected here: the executor always follows the
    first outgoing edge.
    """

    def __init__(self, evaluator: ExpressionEvaluator) -> None:
        self.evaluator = evaluator

    @property
    def node_type(self) -> str:
        return SWITCH_NODE

    async def execute(self, node: GraphNode, context: Value, engine: DecisionEngine) -> Value:
        content = self.get_content(node, SwitchContent)
        if content is None:
            return context

        for statement in content.statements:
            if statement.is_default:
                continue
            if self.evaluator.evaluate_condition(statement.condition, context):
                return context

        if any(statement.is_default for statement in content.statements):
            return context
        return None


def create_default_handlers(
    evaluator: ExpressionEvaluator,
    extra: Iterable[BaseNodeHandler] | None = None,
) -> Mapping[str, BaseNodeHandler]:
    """
    Build the read-only node type -> handler registry.

    Handlers in ``extra`` are registered after the defaults and replace a
    default handler of the same type.
    """
    handlers: list[BaseNodeHandler] = [
        InputNodeHandler(),
        OutputNodeHandler(),
        DecisionTableHandler(evaluator),
        ExpressionNodeHandler(evaluator),
        SwitchNodeHandler(evaluator),
    ]
    handlers.extend(extra or ())

    registry: dict[str, BaseNodeHandler] = {}
    for handler in handlers:
        registry[canonical_node_type(handler.node_type)] = handler
        for alias in handler.aliases:
            registry[alias] = handler

    return MappingProxyType(registry)
