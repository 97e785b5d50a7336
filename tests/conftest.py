"""Pytest configuration and fixtures."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any

import pytest

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

os.environ.setdefault("LOG_LEVEL", "WARNING")

from decision_engine import DecisionEngine  # noqa: E402
from models.schemas import GraphDefinition  # noqa: E402


DECISIONS_DIR = project_root / "decisions"


def make_node(
    node_id: str,
    node_type: str,
    content: dict[str, Any] | None = None,
    name: str | None = None,
) -> dict[str, Any]:
    """Factory for creating node definitions in wire format."""
    node: dict[str, Any] = {"id": node_id, "name": name or node_id, "type": node_type}
    if content is not None:
        node["content"] = content
    return node


def make_edge(source_id: str, target_id: str, edge_id: str | None = None) -> dict[str, Any]:
    """Factory for creating edge definitions in wire format."""
    return {
        "id": edge_id or f"{source_id}->{target_id}",
        "sourceId": source_id,
        "targetId": target_id,
        "type": "edge",
    }


def make_graph(
    nodes: list[dict[str, Any]],
    edges: list[dict[str, Any]],
    graph_id: str = "test-graph",
) -> GraphDefinition:
    """Factory for creating a validated graph definition."""
    return GraphDefinition.model_validate(
        {
            "id": graph_id,
            "name": graph_id,
            "nodes": {node["id"]: node for node in nodes},
            "edges": edges,
        }
    )


def make_linear_graph(*middle: dict[str, Any], graph_id: str = "test-graph") -> GraphDefinition:
    """Factory for input -> middle nodes... -> output graphs."""
    nodes = [make_node("input1", "inputNode"), *middle, make_node("output1", "outputNode")]
    edges = [make_edge(a["id"], b["id"]) for a, b in zip(nodes, nodes[1:])]
    return make_graph(nodes, edges, graph_id=graph_id)


def expression_node(node_id: str, expressions: dict[str, str]) -> dict[str, Any]:
    """Factory for expression nodes."""
    return make_node(node_id, "expressionNode", {"expressions": expressions})


def decision_table_node(
    node_id: str,
    hit_policy: str,
    inputs: list[str],
    outputs: list[str],
    rules: list[list[Any]],
) -> dict[str, Any]:
    """Factory for decision table nodes; inputs/outputs are field paths."""
    return make_node(
        node_id,
        "decisionTableNode",
        {
            "hitPolicy": hit_policy,
            "inputs": [{"field": field} for field in inputs],
            "outputs": [{"field": field} for field in outputs],
            "rules": rules,
        },
    )


def switch_node(node_id: str, statements: list[dict[str, Any]]) -> dict[str, Any]:
    """Factory for switch nodes."""
    return make_node(node_id, "switchNode", {"hitPolicy": "first", "statements": statements})


@pytest.fixture
def engine() -> DecisionEngine:
    """Engine without a loader."""
    return DecisionEngine()


@pytest.fixture
def decisions_dir() -> Path:
    """Directory of the sample decision files."""
    return DECISIONS_DIR


@pytest.fixture
def passthrough_graph() -> GraphDefinition:
    """input -> output."""
    return make_linear_graph()
