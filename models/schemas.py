"""Pydantic schemas for decision graph definitions and evaluation results."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


# =============================================================================
# Node Types
# =============================================================================

INPUT_NODE = "inputNode"
OUTPUT_NODE = "outputNode"
EXPRESSION_NODE = "expressionNode"
DECISION_TABLE_NODE = "decisionTableNode"
SWITCH_NODE = "switchNode"

NODE_TYPE_ALIASES: dict[str, str] = {
    "input": INPUT_NODE,
    "output": OUTPUT_NODE,
    "expression": EXPRESSION_NODE,
    "decisionTable": DECISION_TABLE_NODE,
    "switch": SWITCH_NODE,
}


def canonical_node_type(node_type: str) -> str:
    """Map a short node type alias to its wire name."""
    return NODE_TYPE_ALIASES.get(node_type, node_type)


class WireModel(BaseModel):
    """Base for models that read and write the camelCase wire format."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


# =============================================================================
# Node Content Schemas
# =============================================================================


class ExpressionContent(WireModel):
    """Content of an expression node: output field path -> expression."""

    expressions: dict[str, str] = Field(
        default_factory=dict, description="Output field path to expression text"
    )


class DecisionTableInput(WireModel):
    """Input column of a decision table."""

    id: str = Field(default="", description="Column ID")
    name: str = Field(default="", description="Column display name")
    type: str = Field(default="expression", description="Column type")
    field: str = Field(default="", description="Context field the column reads")


class DecisionTableOutput(WireModel):
    """Output column of a decision table."""

    id: str = Field(default="", description="Column ID")
    name: str = Field(default="", description="Column display name")
    type: str = Field(default="expression", description="Column type")
    field: str = Field(default="", description="Dotted output field path")


class DecisionTableContent(WireModel):
    """Content of a decision table node."""

    hit_policy: str = Field(default="first", alias="hitPolicy")
    inputs: list[DecisionTableInput] = Field(default_factory=list)
    outputs: list[DecisionTableOutput] = Field(default_factory=list)
    rules: list[list[Any]] = Field(
        default_factory=list,
        description="Rows: input condition cells followed by output value cells",
    )


class SwitchStatement(WireModel):
    """A single branch of a switch node."""

    id: str = Field(default="", description="Statement ID")
    condition: str = Field(default="", description="Condition expression")
    is_default: bool = Field(default=False, alias="isDefault")


class SwitchContent(WireModel):
    """Content of a switch node."""

    hit_policy: str = Field(default="first", alias="hitPolicy")
    statements: list[SwitchStatement] = Field(default_factory=list)


CONTENT_MODELS: dict[str, type[WireModel]] = {
    EXPRESSION_NODE: ExpressionContent,
    DECISION_TABLE_NODE: DecisionTableContent,
    SWITCH_NODE: SwitchContent,
}


# =============================================================================
# Graph Schemas
# =============================================================================


class NodePosition(WireModel):
    """Editor position of a node. Not used during execution."""

    x: float = 0.0
    y: float = 0.0


class GraphNode(WireModel):
    """A node of the decision graph."""

    id: str = Field(description="Node ID")
    name: str = Field(default="", description="Node display name")
    type: str = Field(description="Node type tag, e.g. 'expressionNode'")
    content: (
        dict[str, Any] | ExpressionContent | DecisionTableContent | SwitchContent | None
    ) = Field(default=None, union_mode="left_to_right")
    position: NodePosition | None = Field(default=None)

    @model_validator(mode="before")
    @classmethod
    def _decode_content(cls, data: Any) -> Any:
        """Decode raw content into the variant selected by the node type."""
        if not isinstance(data, dict):
            return data
        content = data.get("content")
        model = CONTENT_MODELS.get(canonical_node_type(str(data.get("type", ""))))
        if model is not None and isinstance(content, dict):
            return {**data, "content": model.model_validate(content)}
        return data

    @property
    def canonical_type(self) -> str:
        return canonical_node_type(self.type)


class GraphEdge(WireModel):
    """A directed edge between two nodes."""

    id: str = Field(default="", description="Edge ID")
    source_id: str = Field(alias="sourceId", description="Source node ID")
    target_id: str = Field(alias="targetId", description="Target node ID")
    type: str = Field(default="edge", description="Edge type")


class GraphDefinition(WireModel):
    """A complete decision graph as loaded from its JSON definition."""

    id: str = Field(default="", description="Graph ID")
    name: str = Field(default="", description="Graph name")
    description: str | None = Field(default=None, description="Graph description")
    nodes: dict[str, GraphNode] = Field(default_factory=dict)
    edges: list[GraphEdge] = Field(default_factory=list)

    def input_node(self) -> GraphNode | None:
        """Return the first node of type input, if any."""
        for node in self.nodes.values():
            if node.canonical_type == INPUT_NODE:
                return node
        return None

    def outgoing_edges(self, node_id: str) -> list[GraphEdge]:
        """Edges leaving ``node_id`` in declaration order."""
        return [edge for edge in self.edges if edge.source_id == node_id]


# =============================================================================
# Evaluation Schemas
# =============================================================================


class EvaluationOptions(WireModel):
    """Per-call evaluation options."""

    include_trace: bool = Field(default=False, alias="includeTrace")
    include_performance: bool = Field(default=False, alias="includePerformance")
    max_execution_time_ms: int = Field(default=30000, gt=0, alias="maxExecutionTimeMs")

    @classmethod
    def from_settings(cls, settings: Any) -> EvaluationOptions:
        """Build default options from application settings."""
        return cls(
            include_trace=settings.include_trace,
            include_performance=settings.include_performance,
            max_execution_time_ms=settings.max_execution_time_ms,
        )


class TraceEntry(WireModel):
    """Record of a single node visit."""

    node_id: str = Field(alias="id", description="Visited node ID")
    name: str = Field(default="", description="Visited node name")
    type: str = Field(description="Visited node type")
    input: Any = Field(default=None, description="Context the node received")
    output: Any = Field(default=None, description="Value the node produced")
    execution_time_ms: float = Field(
        default=0.0, alias="executionTime", description="Wall-clock time of the step"
    )


class EvaluationResult(BaseModel):
    """Outcome of evaluating a decision."""

    result: Any = Field(default=None, description="Final value of the walk")
    trace: list[TraceEntry] | None = Field(default=None, description="Per-node trace")
    performance: dict[str, Any] | None = Field(
        default=None, description="Timing data, e.g. executionTimeMs"
    )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the result JSON shape, omitting unrequested parts."""
        data: dict[str, Any] = {"result": self.result}
        if self.trace is not None:
            data["trace"] = [entry.model_dump(by_alias=True) for entry in self.trace]
        if self.performance is not None:
            data["performance"] = dict(self.performance)
        return data
