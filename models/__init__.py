"""Models module containing Pydantic schemas for graphs and evaluation results."""

from models.schemas import (
    DECISION_TABLE_NODE,
    EXPRESSION_NODE,
    INPUT_NODE,
    OUTPUT_NODE,
    SWITCH_NODE,
    DecisionTableContent,
    DecisionTableInput,
    DecisionTableOutput,
    EvaluationOptions,
    EvaluationResult,
    ExpressionContent,
    GraphDefinition,
    GraphEdge,
    GraphNode,
    NodePosition,
    SwitchContent,
    SwitchStatement,
    TraceEntry,
    canonical_node_type,
)

__all__ = [
    "DECISION_TABLE_NODE",
    "EXPRESSION_NODE",
    "INPUT_NODE",
    "OUTPUT_NODE",
    "SWITCH_NODE",
    "DecisionTableContent",
    "DecisionTableInput",
    "DecisionTableOutput",
    "EvaluationOptions",
    "EvaluationResult",
    "ExpressionContent",
    "GraphDefinition",
    "GraphEdge",
    "GraphNode",
    "NodePosition",
    "SwitchContent",
    "SwitchStatement",
    "TraceEntry",
    "canonical_node_type",
]
