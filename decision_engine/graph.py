"""Decision graph executor: walks nodes from the input node to a terminal node."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any, Mapping

from decision_engine.errors import (
    DecisionGraphError,
    EvaluationTimeoutError,
    ExpressionError,
    GraphStructureError,
    NodeExecutionError,
    UnknownNodeTypeError,
)
from decision_engine.nodes import BaseNodeHandler
from decision_engine.values import Value, to_value
from models.schemas import EvaluationOptions, EvaluationResult, GraphDefinition, GraphNode, TraceEntry

if TYPE_CHECKING:
    from decision_engine.engine import DecisionEngine


logger = logging.getLogger(__name__)


class Decision:
    """
    An executable decision built from an immutable graph definition.

    Exactly one node is active at a time. After a node runs, the walk
    ends if the node is an output node or has no outgoing edge whose
    target exists. Otherwise the first outgoing edge in declaration order
    is followed and the node's result (or, when it produced None, the
    previous context) becomes the next node's context.
    """

    def __init__(
        self,
        graph: GraphDefinition,
        handlers: Mapping[str, BaseNodeHandler],
        engine: DecisionEngine,
    ) -> None:
        self.graph = graph
        self._handlers = handlers
        self._engine = engine

    async def evaluate(
        self,
        context: Any,
        options: EvaluationOptions | None = None,
    ) -> EvaluationResult:
        """
        Evaluate the decision against a context.

        Args:
            context: Input data; normalized into the value model.
            options: Trace, performance and deadline options.

        Returns:
            The evaluation result.

        Raises:
            GraphStructureError: The graph has no input node.
            UnknownNodeTypeError: A visited node has no handler.
            NodeExecutionError: A handler failed.
            EvaluationTimeoutError: The deadline passed during the walk.
        """
        options = options or EvaluationOptions()
        trace: list[TraceEntry] | None = [] if options.include_trace else None

        started = time.perf_counter()
        deadline = started + options.max_execution_time_ms / 1000.0

        node = self.graph.input_node()
        if node is None:
            raise GraphStructureError(
                f"No input node found in decision graph '{self.graph.id or self.graph.name}'"
            )

        current: Value = to_value(context)
        visited = 0

        while True:
            if time.perf_counter() > deadline:
                logger.warning(
                    "Decision '%s' exceeded %sms before node '%s'",
                    self.graph.id, options.max_execution_time_ms, node.id,
                )
                raise EvaluationTimeoutError(options.max_execution_time_ms)

            handler = self._handlers.get(node.type)
            if handler is None:
                raise UnknownNodeTypeError(node.id, node.type)

            node_started = time.perf_counter()
            output = await self._execute_node(handler, node, current)
            elapsed_ms = (time.perf_counter() - node_started) * 1000.0
            visited += 1
            logger.debug("Visited node '%s' (%s) in %.3fms", node.id, node.type, elapsed_ms)

            if trace is not None:
                trace.append(
                    TraceEntry(
                        node_id=node.id,
                        name=node.name,
                        type=node.type,
                        input=current,
                        output=output,
                        execution_time_ms=elapsed_ms,
                    )
                )

            next_node = None if handler.terminal else self._next_node(node)
            if next_node is None:
                result = output
                break

            if output is not None:
                current = output
            node = next_node

        performance = None
        if options.include_performance:
            performance = {
                "executionTimeMs": (time.perf_counter() - started) * 1000.0,
                "nodesVisited": visited,
            }

        return EvaluationResult(result=result, trace=trace, performance=performance)

    async def _execute_node(
        self, handler: BaseNodeHandler, node: GraphNode, context: Value
    ) -> Value:
        """Run a handler, wrapping non-domain failures with the node's identity."""
        try:
            return to_value(await handler.execute(node, context, self._engine))
        except ExpressionError as e:
            raise NodeExecutionError(node.id, node.type, str(e)) from e
        except DecisionGraphError:
            raise
        except Exception as e:
            raise NodeExecutionError(node.id, node.type, str(e)) from e

    def _next_node(self, node: GraphNode) -> GraphNode | None:
        edges = self.graph.outgoing_edges(node.id)
        if not edges:
            return None
        return self.graph.nodes.get(edges[0].target_id)
