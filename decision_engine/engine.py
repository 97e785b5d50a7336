"""Decision engine facade: handler registry, decision cache and loader."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from decision_engine.expressions import ExpressionEvaluator
from decision_engine.graph import Decision
from decision_engine.nodes import BaseNodeHandler, create_default_handlers
from loaders.base import BaseLoader, NoopLoader
from models.schemas import EvaluationOptions, EvaluationResult, GraphDefinition


logger = logging.getLogger(__name__)


class DecisionCache:
    """
    Process-lifetime map of lookup key to decision. Never evicted.

    Population uses insert-if-absent: when two first-time lookups of the
    same key race, both may fetch and build a decision, but the first one
    stored is kept and handed to every caller.
    """

    def __init__(self) -> None:
        self._entries: dict[str, Decision] = {}

    def get(self, key: str) -> Decision | None:
        return self._entries.get(key)

    def insert_if_absent(self, key: str, decision: Decision) -> Decision:
        """Store ``decision`` unless ``key`` is present; return the stored one."""
        return self._entries.setdefault(key, decision)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class DecisionEngine:
    """Build, cache and evaluate decisions."""

    def __init__(
        self,
        loader: BaseLoader | None = None,
        handlers: Iterable[BaseNodeHandler] | None = None,
        evaluator: ExpressionEvaluator | None = None,
    ) -> None:
        """
        Initialize the engine.

        Args:
            loader: Source of graph definitions for ``get_decision``.
            handlers: Extra node handlers, registered once here.
            evaluator: Expression evaluator shared by the default handlers.
        """
        self.loader = loader or NoopLoader()
        self.evaluator = evaluator or ExpressionEvaluator()
        self._handlers = create_default_handlers(self.evaluator, handlers)
        self._cache = DecisionCache()

    @property
    def handlers(self) -> Mapping[str, BaseNodeHandler]:
        """Read-only node type -> handler registry."""
        return self._handlers

    @property
    def cache(self) -> DecisionCache:
        return self._cache

    def create_decision(self, graph: GraphDefinition | dict[str, Any]) -> Decision:
        """Build a decision from a definition, bypassing the cache and loader."""
        if not isinstance(graph, GraphDefinition):
            graph = GraphDefinition.model_validate(graph)
        return Decision(graph, self._handlers, self)

    async def get_decision(self, key: str) -> Decision:
        """Return the cached decision for ``key``, loading it on first use."""
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Decision cache hit: %s", key)
            return cached

        logger.debug("Decision cache miss: %s", key)
        graph = await self.loader.load(key)
        decision = self._cache.insert_if_absent(key, self.create_decision(graph))
        logger.info("Loaded decision '%s' via %s", key, self.loader.name)
        return decision

    async def evaluate(
        self,
        key: str,
        context: Any,
        options: EvaluationOptions | None = None,
    ) -> EvaluationResult:
        """Load (or reuse) the decision for ``key`` and evaluate it."""
        decision = await self.get_decision(key)
        return await decision.evaluate(context, options)
